"""JSON serialization for the aoclang AST.

`ast_to_obj` converts AST dataclasses into plain dict/list structures
suitable for `json.dumps`. Every node becomes a dict with its class name
under "type", its source line under "line" and one entry per field.
Tokens themselves are not emitted; operator nodes gain an "op" entry.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Dict, Optional

from .ast import BinaryOp, MatchCase, Node, Program, UnaryOp
from .lexer import line_and_col


def ast_to_obj(node: Any, source: Optional[str] = None) -> Any:
    if node is None or isinstance(node, (int, str)):
        return node
    if isinstance(node, (list, tuple)):
        return [ast_to_obj(item, source) for item in node]

    if isinstance(node, Program):
        return {
            "type": "Program",
            "body": [ast_to_obj(n, node.source) for n in node.body],
        }
    if isinstance(node, MatchCase):
        return {
            "type": "MatchCase",
            "pattern": ast_to_obj(node.pattern, source),
            "body": ast_to_obj(node.body, source),
        }
    if isinstance(node, Node) and is_dataclass(node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        if source is not None:
            obj["line"] = line_and_col(source, node.token.pos)[0]
        if isinstance(node, (BinaryOp, UnaryOp)):
            obj["op"] = str(node.token.kind)
        for f in fields(node):
            if f.name == 'token':
                continue
            obj[f.name] = ast_to_obj(getattr(node, f.name), source)
        return obj

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
