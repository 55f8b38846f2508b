"""Lexer for the aoclang scripting language.

The lexer turns source text into a stream of tokens on demand. Tokens do
not copy any text: they record the kind, the offset of their first
character and their length, and `Lexer.get_string` slices the source when
the text is needed. Line numbers are only computed when an error or a
debug dump asks for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .errors import AocError, ErrorVal, ErrorKind


class TokenKind(Enum):
    EOF = 'EOF'
    IDENTIFIER = 'identifier'
    STRING = 'string'
    NUMBER = 'number'
    COLON = ':'
    LCURLY = '{'
    RCURLY = '}'
    LPAREN = '('
    RPAREN = ')'
    LSQUARE = '['
    RSQUARE = ']'
    COMMA = ','
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    PERCENT = '%'
    EQUAL = '='
    EQUAL_EQUAL = '=='
    BANG_EQUAL = '!='
    LESS = '<'
    LESS_EQUAL = '<='
    GREATER = '>'
    GREATER_EQUAL = '>='
    AMP_AMP = '&&'
    PIPE_PIPE = '||'
    VAR = 'var'
    FOR = 'for'
    IN = 'in'
    IF = 'if'
    ELSE = 'else'
    RETURN = 'return'
    CONTINUE = 'continue'
    BREAK = 'break'
    MATCH = 'match'
    FN = 'fn'
    NIL = 'nil'

    def __str__(self) -> str:
        return self.value


DIGITS = '0123456789'

KEYWORDS = {
    'var': TokenKind.VAR,
    'for': TokenKind.FOR,
    'in': TokenKind.IN,
    'if': TokenKind.IF,
    'else': TokenKind.ELSE,
    'return': TokenKind.RETURN,
    'continue': TokenKind.CONTINUE,
    'break': TokenKind.BREAK,
    'match': TokenKind.MATCH,
    'fn': TokenKind.FN,
    'nil': TokenKind.NIL,
}

SINGLE_CHAR_TOKENS = {
    ':': TokenKind.COLON,
    '{': TokenKind.LCURLY,
    '}': TokenKind.RCURLY,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '[': TokenKind.LSQUARE,
    ']': TokenKind.RSQUARE,
    ',': TokenKind.COMMA,
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.STAR,
    '/': TokenKind.SLASH,
    '%': TokenKind.PERCENT,
}

# first char -> (second char, two-char kind, single-char kind or None)
TWO_CHAR_TOKENS = {
    '=': ('=', TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
    '<': ('=', TokenKind.LESS_EQUAL, TokenKind.LESS),
    '>': ('=', TokenKind.GREATER_EQUAL, TokenKind.GREATER),
    '!': ('=', TokenKind.BANG_EQUAL, None),
    '&': ('&', TokenKind.AMP_AMP, None),
    '|': ('|', TokenKind.PIPE_PIPE, None),
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    pos: int
    length: int = 0


def line_and_col(source: str, pos: int) -> Tuple[int, int]:
    """Return the 1-based line and column of offset `pos` in `source`."""
    line = 1
    line_start = 0
    for i, c in enumerate(source):
        if i >= pos:
            break
        if c == '\n':
            line += 1
            line_start = i + 1
    return line, pos - line_start + 1


def is_ident_start(c: str) -> bool:
    return c.isalpha() or c == '_'


def is_ident_char(c: str) -> bool:
    return c.isalnum() or c == '_'


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.token_start = 0

    def error(self, message: str, pos: int) -> AocError:
        line, _ = line_and_col(self.source, pos)
        return AocError(ErrorVal(ErrorKind.LEX, message, line))

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        if self.at_end():
            return ''
        return self.source[self.pos]

    def skip_whitespace(self):
        while not self.at_end():
            c = self.source[self.pos]
            if c in ' \t\r\n':
                self.pos += 1
            elif c == '#':
                while not self.at_end() and self.source[self.pos] != '\n':
                    self.pos += 1
            else:
                return

    def next_token(self) -> Token:
        self.skip_whitespace()
        self.token_start = self.pos
        if self.at_end():
            return Token(TokenKind.EOF, len(self.source))

        c = self.source[self.pos]
        if is_ident_start(c):
            return self.identifier()
        if c in DIGITS:
            return self.number()
        if c == '\'':
            return self.string()

        self.pos += 1
        if c in SINGLE_CHAR_TOKENS:
            return Token(SINGLE_CHAR_TOKENS[c], self.token_start, 1)
        if c in TWO_CHAR_TOKENS:
            second, double_kind, single_kind = TWO_CHAR_TOKENS[c]
            if self.peek() == second:
                self.pos += 1
                return Token(double_kind, self.token_start, 2)
            if single_kind is not None:
                return Token(single_kind, self.token_start, 1)
        raise self.error(f"unexpected character {c!r}", self.token_start)

    def identifier(self) -> Token:
        start = self.pos
        while not self.at_end() and is_ident_char(self.source[self.pos]):
            self.pos += 1
        text = self.source[start:self.pos]
        kind = KEYWORDS.get(text, TokenKind.IDENTIFIER)
        return Token(kind, start, self.pos - start)

    def number(self) -> Token:
        start = self.pos
        while not self.at_end() and self.source[self.pos] in DIGITS:
            self.pos += 1
        return Token(TokenKind.NUMBER, start, self.pos - start)

    def string(self) -> Token:
        opening = self.pos
        self.pos += 1
        start = self.pos
        end = self.source.find('\'', start)
        if end == -1:
            self.pos = len(self.source)
            raise self.error("unterminated string", opening)
        self.pos = end + 1
        return Token(TokenKind.STRING, start, end - start)

    def get_string(self, token: Token) -> str:
        return self.source[token.pos:token.pos + token.length]

    def get_line_and_col(self, token: Token) -> Tuple[int, int]:
        return line_and_col(self.source, token.pos)


def tokenize(source: str) -> List[Token]:
    """Lex `source` completely, returning every token including the EOF."""
    lexer = Lexer(source)
    tokens: List[Token] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.kind == TokenKind.EOF:
            return tokens
