"""Parser for aoclang.

A recursive-descent parser with one token of lookahead. Statements are
parsed by dispatching on the current token; expressions use precedence
climbing over the binary operator table below, with prefix negation and
postfix call/subscript binding tighter than every binary operator.

The `parse_program` function is the public entry point and returns a
`Program` AST node representing the entire source file.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Tuple

from .ast import (
    Program, Section, Block, ExprStmt, VarDecl, ForStmt, IfStmt,
    ReturnStmt, ContinueStmt, BreakStmt, MatchStmt, MatchCase,
    StringLit, NumberLit, NilLit, Ident, ArrayLit, MapLit,
    BinaryOp, UnaryOp, Call, FuncLit, Node,
)
from .errors import AocError, ErrorVal, ErrorKind
from .lexer import Lexer, Token, TokenKind


class Precedence(IntEnum):
    NONE = 0
    ASSIGN = 1
    LOGICAL = 2
    COMPARE = 3
    SUM = 4
    PRODUCT = 5


BINARY_PRECEDENCE = {
    TokenKind.EQUAL: Precedence.ASSIGN,
    TokenKind.AMP_AMP: Precedence.LOGICAL,
    TokenKind.PIPE_PIPE: Precedence.LOGICAL,
    TokenKind.EQUAL_EQUAL: Precedence.COMPARE,
    TokenKind.BANG_EQUAL: Precedence.COMPARE,
    TokenKind.GREATER: Precedence.COMPARE,
    TokenKind.GREATER_EQUAL: Precedence.COMPARE,
    TokenKind.LESS: Precedence.COMPARE,
    TokenKind.LESS_EQUAL: Precedence.COMPARE,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.STAR: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.PERCENT: Precedence.PRODUCT,
}

ANONYMOUS = '<anonymous>'


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        eof = Token(TokenKind.EOF, 0)
        self.token = eof
        self.prev_token = eof

    def error(self, message: str, token: Optional[Token] = None) -> AocError:
        line, _ = self.lexer.get_line_and_col(token or self.token)
        return AocError(ErrorVal(ErrorKind.PARSE, message, line))

    def advance(self):
        self.prev_token = self.token
        self.token = self.lexer.next_token()

    def match(self, *kinds: TokenKind) -> bool:
        return self.token.kind in kinds

    def consume(self, *expected: TokenKind) -> Token:
        if self.token.kind in expected:
            self.advance()
            return self.prev_token
        if len(expected) > 1:
            names = ', '.join(str(kind) for kind in expected)
            raise self.error(f"expected one of {names} but saw {self.token.kind}")
        raise self.error(f"expected {expected[0]} but saw {self.token.kind}")

    def text(self, token: Token) -> str:
        return self.lexer.get_string(token)

    def parse(self) -> Program:
        self.advance()
        body: List[Node] = []
        while not self.match(TokenKind.EOF):
            if self.match(TokenKind.IDENTIFIER):
                body.append(self.parse_section())
            elif self.match(TokenKind.FN):
                fn = self.parse_fn()
                body.append(ExprStmt(fn.token, fn))
            else:
                self.consume(TokenKind.IDENTIFIER, TokenKind.FN)
        return Program(body, self.lexer.source)

    def parse_section(self) -> Section:
        label = self.consume(TokenKind.IDENTIFIER)
        self.consume(TokenKind.COLON)
        if self.match(TokenKind.LCURLY):
            body: Node = self.parse_block()
        else:
            body = self.parse_expression()
        return Section(label, self.text(label), body)

    def parse_block(self) -> Block:
        opening = self.consume(TokenKind.LCURLY)
        statements: List[Node] = []
        while not self.match(TokenKind.RCURLY):
            if self.match(TokenKind.EOF):
                raise self.error(f"expected {TokenKind.RCURLY} but saw {TokenKind.EOF}")
            statements.append(self.parse_statement())
        self.consume(TokenKind.RCURLY)
        return Block(opening, statements)

    def parse_statement(self) -> Node:
        kind = self.token.kind
        if kind == TokenKind.VAR:
            return self.parse_var_decl()
        if kind == TokenKind.FOR:
            return self.parse_for_stmt()
        if kind == TokenKind.IF:
            return self.parse_if_stmt()
        if kind == TokenKind.RETURN:
            return self.parse_return_stmt()
        if kind == TokenKind.CONTINUE:
            return ContinueStmt(self.consume(TokenKind.CONTINUE))
        if kind == TokenKind.BREAK:
            return BreakStmt(self.consume(TokenKind.BREAK))
        if kind == TokenKind.MATCH:
            return self.parse_match_stmt()
        if kind == TokenKind.LCURLY:
            return self.parse_block()
        start = self.token
        return ExprStmt(start, self.parse_expression())

    def parse_var_decl(self) -> VarDecl:
        self.consume(TokenKind.VAR)
        name = self.consume(TokenKind.IDENTIFIER)
        self.consume(TokenKind.EQUAL)
        value = self.parse_expression()
        return VarDecl(name, self.text(name), value)

    def parse_for_stmt(self) -> ForStmt:
        opening = self.consume(TokenKind.FOR)
        if self.match(TokenKind.LCURLY):
            return ForStmt(opening, None, None, None, self.parse_block())
        name = self.text(self.consume(TokenKind.IDENTIFIER))
        index_name = None
        if self.match(TokenKind.COMMA):
            self.consume(TokenKind.COMMA)
            index_name = self.text(self.consume(TokenKind.IDENTIFIER))
        self.consume(TokenKind.IN)
        iterable = self.parse_expression()
        body = self.parse_block()
        return ForStmt(opening, name, index_name, iterable, body)

    def parse_if_stmt(self) -> IfStmt:
        opening = self.consume(TokenKind.IF)
        condition = self.parse_expression()
        then_block = self.parse_block()
        else_branch: Optional[Node] = None
        if self.match(TokenKind.ELSE):
            self.consume(TokenKind.ELSE)
            if self.match(TokenKind.IF):
                else_branch = self.parse_if_stmt()
            else:
                else_branch = self.parse_block()
        return IfStmt(opening, condition, then_block, else_branch)

    def parse_return_stmt(self) -> ReturnStmt:
        opening = self.consume(TokenKind.RETURN)
        if self.match(TokenKind.RCURLY):
            return ReturnStmt(opening, None)
        return ReturnStmt(opening, self.parse_expression())

    def parse_match_stmt(self) -> MatchStmt:
        opening = self.consume(TokenKind.MATCH)
        subject = self.parse_expression()
        self.consume(TokenKind.LCURLY)
        cases: List[MatchCase] = []
        while not self.match(TokenKind.RCURLY):
            pattern = self.parse_expression()
            self.consume(TokenKind.COLON)
            cases.append(MatchCase(pattern, self.parse_block()))
        self.consume(TokenKind.RCURLY)
        return MatchStmt(opening, subject, cases)

    # Expression parsing (precedence climbing)
    def parse_expression(self, min_prec: int = Precedence.ASSIGN) -> Node:
        left = self.parse_unary()
        while True:
            op = self.token
            prec = BINARY_PRECEDENCE.get(op.kind)
            if prec is None or prec < min_prec:
                return left
            self.advance()
            if prec == Precedence.ASSIGN:
                if not is_assignable(left):
                    raise self.error("invalid assignment target", op)
                right = self.parse_expression(Precedence.ASSIGN)
            else:
                right = self.parse_expression(prec + 1)
            left = BinaryOp(op, left, right)

    def parse_unary(self) -> Node:
        if self.match(TokenKind.MINUS):
            op = self.consume(TokenKind.MINUS)
            return UnaryOp(op, self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        start = self.token
        node = self.parse_primary()
        while True:
            if self.match(TokenKind.LPAREN):
                self.consume(TokenKind.LPAREN)
                args = self.parse_list(TokenKind.RPAREN, self.parse_expression)
                node = Call(start, node, args)
            elif self.match(TokenKind.LSQUARE):
                op = self.consume(TokenKind.LSQUARE)
                index = self.parse_expression()
                self.consume(TokenKind.RSQUARE)
                node = BinaryOp(op, node, index)
            else:
                return node

    def parse_list(self, closing: TokenKind, parse_item) -> list:
        """Parse comma-separated items up to and including `closing`.

        A trailing comma before the closing token is accepted.
        """
        items = []
        while not self.match(closing):
            items.append(parse_item())
            if self.match(TokenKind.COMMA):
                self.consume(TokenKind.COMMA)
            else:
                break
        self.consume(closing)
        return items

    def parse_primary(self) -> Node:
        token = self.token
        kind = token.kind
        if kind == TokenKind.STRING:
            self.advance()
            return StringLit(token, self.text(token))
        if kind == TokenKind.NUMBER:
            self.advance()
            return NumberLit(token, int(self.text(token)))
        if kind == TokenKind.NIL:
            self.advance()
            return NilLit(token)
        if kind == TokenKind.IDENTIFIER:
            self.advance()
            return Ident(token, self.text(token))
        if kind == TokenKind.LSQUARE:
            self.advance()
            return ArrayLit(token, self.parse_list(TokenKind.RSQUARE, self.parse_expression))
        if kind == TokenKind.LCURLY:
            self.advance()
            return MapLit(token, self.parse_list(TokenKind.RCURLY, self.parse_map_entry))
        if kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.consume(TokenKind.RPAREN)
            return expr
        if kind == TokenKind.FN:
            return self.parse_fn()
        raise self.error(f"expected a value but found {kind}")

    def parse_map_entry(self) -> Tuple[str, Node]:
        key = self.consume(TokenKind.IDENTIFIER, TokenKind.NUMBER)
        self.consume(TokenKind.COLON)
        return (self.text(key), self.parse_expression())

    def parse_fn(self) -> FuncLit:
        opening = self.consume(TokenKind.FN)
        name = ANONYMOUS
        if self.match(TokenKind.IDENTIFIER):
            name = self.text(self.consume(TokenKind.IDENTIFIER))
        self.consume(TokenKind.LPAREN)
        params = self.parse_list(TokenKind.RPAREN, self.parse_param)
        body = self.parse_block()
        return FuncLit(opening, name, params, body)

    def parse_param(self) -> str:
        return self.text(self.consume(TokenKind.IDENTIFIER))


def is_assignable(node: Node) -> bool:
    if isinstance(node, Ident):
        return True
    return isinstance(node, BinaryOp) and node.op == TokenKind.LSQUARE


def parse_program(source: str) -> Program:
    """Parse aoclang source code into a Program AST."""
    return Parser(Lexer(source)).parse()
