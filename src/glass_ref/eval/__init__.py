"""Evaluator helper modules for the Glass runtime."""

__all__ = [
    "blocks",
    "common",
    "expr",
    "literals",
]
