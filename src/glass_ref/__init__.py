"""Glass: tokenizer, parser and tree-walking evaluator for the Glass expression language."""

__version__ = "0.1.0"
