from __future__ import annotations

from typing import Any, NoReturn, Optional

from lark import Token

from ..types import Frame, Unsupported
from ..tree import is_token, tree_label

def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None
    tok: Token = node
    return str(tok.type)

def eval_unsupported(n: Any, frame: Frame) -> NoReturn:
    """Statement forms that parse but have no evaluation semantics."""
    del frame
    label = (tree_label(n) or type(n).__name__).replace('_', ' ')
    raise Unsupported(f"Evaluating {label} is not supported")
