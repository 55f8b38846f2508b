import pytest

from aoclang.errors import AocError, ErrorKind
from aoclang.lexer import Lexer, TokenKind, line_and_col, tokenize


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_keywords_and_identifiers():
    assert kinds('var x_1 for in if else return continue break match fn nil') == [
        TokenKind.VAR, TokenKind.IDENTIFIER, TokenKind.FOR, TokenKind.IN,
        TokenKind.IF, TokenKind.ELSE, TokenKind.RETURN, TokenKind.CONTINUE,
        TokenKind.BREAK, TokenKind.MATCH, TokenKind.FN, TokenKind.NIL,
        TokenKind.EOF,
    ]


def test_operators_prefer_two_characters():
    assert kinds('== != <= >= && || = < > + - * / %') == [
        TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL, TokenKind.LESS_EQUAL,
        TokenKind.GREATER_EQUAL, TokenKind.AMP_AMP, TokenKind.PIPE_PIPE,
        TokenKind.EQUAL, TokenKind.LESS, TokenKind.GREATER, TokenKind.PLUS,
        TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT,
        TokenKind.EOF,
    ]


def test_comments_are_skipped():
    assert kinds('# a comment\n1 # trailing\n# last') == [TokenKind.NUMBER, TokenKind.EOF]


def test_token_text_is_sliced_from_source():
    lexer = Lexer("name 123 'hello world'")
    texts = []
    while True:
        token = lexer.next_token()
        if token.kind == TokenKind.EOF:
            break
        texts.append(lexer.get_string(token))
    assert texts == ['name', '123', 'hello world']


def test_strings_span_lines_without_escapes():
    lexer = Lexer("'a\\n\nb'")
    token = lexer.next_token()
    assert token.kind == TokenKind.STRING
    assert lexer.get_string(token) == 'a\\n\nb'


def test_number_followed_by_identifier():
    assert kinds('12abc') == [TokenKind.NUMBER, TokenKind.IDENTIFIER, TokenKind.EOF]


def test_eof_is_repeatable():
    lexer = Lexer('x')
    lexer.next_token()
    assert lexer.next_token().kind == TokenKind.EOF
    assert lexer.next_token().kind == TokenKind.EOF


def test_line_and_col():
    source = 'a\nbc\n  d'
    assert line_and_col(source, 0) == (1, 1)
    assert line_and_col(source, 3) == (2, 2)
    assert line_and_col(source, 7) == (3, 3)


def test_token_lines():
    lexer = Lexer('one\n\ntwo')
    assert lexer.get_line_and_col(lexer.next_token()) == (1, 1)
    assert lexer.get_line_and_col(lexer.next_token()) == (3, 1)


def test_unterminated_string_reports_opening_line():
    with pytest.raises(AocError) as exc:
        tokenize("x\n'abc\ndef")
    assert exc.value.kind == ErrorKind.LEX
    assert exc.value.line == 2
    assert exc.value.message == 'unterminated string'


@pytest.mark.parametrize('source', ['@', '!', 'a & b', 'a | b', '"x"'])
def test_unexpected_character(source):
    with pytest.raises(AocError) as exc:
        tokenize(source)
    assert exc.value.kind == ErrorKind.LEX
    assert exc.value.message.startswith('unexpected character')


def test_error_renders_kind_and_line():
    with pytest.raises(AocError) as exc:
        tokenize('\n\n$')
    assert str(exc.value) == "syntax error on line 3\nunexpected character '$'"
