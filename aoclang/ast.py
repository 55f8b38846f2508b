"""Abstract Syntax Tree (AST) definitions for aoclang.

Every node carries the token that introduced it. The token is only used to
attribute errors to a source line; it has no effect on evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .lexer import Token, TokenKind


@dataclass
class Node:
    """Base class for all AST nodes."""
    token: Token


# Expressions

@dataclass
class StringLit(Node):
    value: str


@dataclass
class NumberLit(Node):
    value: int


@dataclass
class NilLit(Node):
    pass


@dataclass
class Ident(Node):
    name: str


@dataclass
class ArrayLit(Node):
    items: List[Node]


@dataclass
class MapLit(Node):
    entries: List[Tuple[str, Node]]


@dataclass
class BinaryOp(Node):
    """Arithmetic, comparison, logical, assignment or subscript.

    The operator is the kind of the node's token; a subscript `a[i]` is a
    BinaryOp whose token is the `[`.
    """
    left: Node
    right: Node

    @property
    def op(self) -> TokenKind:
        return self.token.kind


@dataclass
class UnaryOp(Node):
    operand: Node


@dataclass
class Call(Node):
    callee: Node
    args: List[Node]


@dataclass
class FuncLit(Node):
    name: str
    params: List[str]
    body: 'Block'


# Statements

@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class VarDecl(Node):
    name: str
    value: Node


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class ForStmt(Node):
    name: Optional[str]
    index_name: Optional[str]
    iterable: Optional[Node]  # None loops until break
    body: Block


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_branch: Optional[Node]  # Block or IfStmt


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class MatchCase:
    pattern: Node
    body: Block


@dataclass
class MatchStmt(Node):
    subject: Node
    cases: List[MatchCase]


@dataclass
class Section(Node):
    name: str
    body: Node  # Block or a bare expression


@dataclass
class Program:
    body: List[Node]
    source: str = ''

    @property
    def sections(self) -> List[Section]:
        return [node for node in self.body if isinstance(node, Section)]
