from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from . import __version__
from .evaluator import eval_expr
from .lexer_rd import tokenize
from .parser_rd import parse
from .types import (
    DEFAULT_FILENAME,
    FileNotFound,
    GlassError,
    GlsValue,
    GlsVoid,
    UnknownError,
    Unsupported,
)

logger = logging.getLogger(__name__)

def run(src: str, filename: str=DEFAULT_FILENAME, variables: Optional[Mapping[str, GlsValue]]=None) -> GlsValue:
    """Tokenize, parse and evaluate one program."""
    if logger.isEnabledFor(logging.DEBUG):
        for tok in tokenize(src):
            logger.debug("%r at %r", tok, tok.span)

    try:
        ast = parse(tokenize(src), src, filename)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("AST > %s", ast.pretty().rstrip())

        result = eval_expr(ast, source=src, filename=filename, variables=variables)
    except RecursionError:
        raise UnknownError("maximum nesting depth exceeded") from None

    logger.debug("Result > %r", result)
    return result

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Otherwise a path to a script file.
    """

    if arg == "-":
        return sys.stdin.read()

    try:
        data = Path(arg).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        raise FileNotFound(arg) from None

    logger.debug("Read %d characters from '%s'", len(data), arg)
    return data

def setup_logging(debug: bool=False, verbose: bool=False) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="glass", description="Run a Glass script")
    ap.add_argument("file", nargs="?", help="The script file to run ('-' reads stdin)")
    ap.add_argument("-d", "--debug", action="store_true", help="Enable debug mode")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose mode")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap

def main(argv: Optional[List[str]]=None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(debug=args.debug, verbose=args.verbose)

    try:
        if args.file is None:
            raise Unsupported("REPL not implemented yet")

        filename = "<stdin>" if args.file == "-" else args.file
        source = _load_source(args.file)
        logger.info("Running '%s'", filename)
        result = run(source, filename=filename)
    except GlassError as err:
        sys.stderr.write(f"Fatal exception during execution -> {err.render()}\n")
        return 1
    except Exception as exc:
        logger.debug("Unhandled exception", exc_info=True)
        err = UnknownError(f"{type(exc).__name__}: {exc}")
        sys.stderr.write(f"Fatal exception during execution -> {err.render()}\n")
        return 1

    if not isinstance(result, GlsVoid):
        print(repr(result))
    return 0

if __name__ == "__main__":
    sys.exit(main())
