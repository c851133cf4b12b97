from __future__ import annotations

from typing import Any, Callable, List

from ..types import Frame, GlsValue, GlsVoid

EvalFunc = Callable[[Any, Frame], GlsValue]

def eval_block(children: List[Any], frame: Frame, eval_func: EvalFunc) -> GlsValue:
    """Run statements in order; a block's own value is always void."""
    for child in children:
        eval_func(child, frame)

    return GlsVoid()
