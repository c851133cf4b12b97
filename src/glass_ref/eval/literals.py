from __future__ import annotations

from lark import Tree

from ..types import Frame, GlsBool, GlsNumber, GlsString, GlsValue, GlsVoid

def eval_number(n: Tree, frame: Frame) -> GlsValue:
    return GlsNumber(float(n.children[0]))

def eval_string(n: Tree, frame: Frame) -> GlsValue:
    return GlsString(n.children[0])

def eval_boolean(n: Tree, frame: Frame) -> GlsValue:
    return GlsBool(bool(n.children[0]))

def eval_void(n: Tree, frame: Frame) -> GlsValue:
    return GlsVoid()

def eval_identifier(n: Tree, frame: Frame) -> GlsValue:
    name = n.children[0]
    return frame.get(str(name.value))
