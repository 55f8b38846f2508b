import pytest

from aoclang.errors import AocError, ErrorKind
from aoclang.interpreter import Evaluator
from aoclang.parser import parse_program
from aoclang.types import NIL, repr_value


def run(expr):
    program = parse_program('part1: ' + expr)
    return Evaluator(program).eval_section('part1')


def run_repr(expr):
    return repr_value(run(expr))


def test_print_and_println(capsys):
    run("print('a', 1, nil, [1, 'b'])")
    run("println('c')")
    run("println()")
    assert capsys.readouterr().out == "a 1 nil [1, 'b']c\n\n"


def test_print_returns_nil(capsys):
    assert run("println('x')") is NIL


@pytest.mark.parametrize('text, expected', [
    ("'42'", 42),
    ("' -7 '", -7),
    ("'+3'", 3),
    ("'abc'", NIL),
    ("'1.5'", NIL),
    ("''", NIL),
])
def test_num(text, expected):
    assert run(f'num({text})') == expected


def test_split():
    assert run_repr("split('a,b,,c', ',')") == "['a', 'b', '', 'c']"
    assert run_repr("split('abc', '')") == "['a', 'b', 'c']"


def test_len():
    assert run("len([1, 2, 3])") == 3
    assert run("len('hello')") == 5


def test_push_does_not_mutate():
    program = parse_program('''
part1: {
  var a = [1, 2]
  var b = push(a, 3)
  return [a, b]
}
''')
    assert repr_value(Evaluator(program).eval_section('part1')) == '[[1, 2], [1, 2, 3]]'


def test_slice():
    assert run_repr('slice([1, 2, 3, 4], 1, 3)') == '[2, 3]'
    assert run_repr('slice([1, 2], 2, 2)') == '[]'
    with pytest.raises(AocError):
        run('slice([1, 2], 1, 3)')
    with pytest.raises(AocError):
        run('slice([1, 2], 2, 1)')


def test_delete():
    assert run_repr('delete([1, 2, 3], 1)') == '[1, 3]'
    assert run_repr('delete([1, 2, 3], 5)') == '[1, 2, 3]'


def test_ranges():
    assert run_repr('range(0, 3)') == '<range 0..3>'
    program = parse_program('''
part1: {
  var out = []
  for i in range(0, 3) { out = push(out, i) }
  for i in rangei(1, 3) { out = push(out, i) }
  for i in range(3, 0) { out = push(out, i) }
  for i in rangei(2, 0) { out = push(out, i) }
  for i in range(4, 4) { out = push(out, i) }
  return out
}
''')
    result = Evaluator(program).eval_section('part1')
    assert repr_value(result) == '[0, 1, 2, 1, 2, 3, 3, 2, 1, 2, 1, 0]'


def test_sort():
    assert run_repr('sort([3, -1, 2])') == '[-1, 2, 3]'
    assert run_repr("sort(['b', 'a', 'c'])") == "['a', 'b', 'c']"
    assert run_repr('sort([])') == '[]'
    with pytest.raises(AocError) as exc:
        run("sort([1, 'a'])")
    assert exc.value.message == 'cannot sort an array of number and string values'


def test_upper():
    assert run("upper('abc')") == 'ABC'


def test_read(tmp_path):
    path = tmp_path / 'input.txt'
    path.write_text('1\n2\n', encoding='utf-8')
    assert run(f"read('{path}')") == '1\n2\n'


def test_read_missing_file(tmp_path):
    with pytest.raises(AocError) as exc:
        run(f"read('{tmp_path / 'nope.txt'}')")
    assert exc.value.kind == ErrorKind.RUNTIME
    assert 'file not found' in exc.value.message


@pytest.mark.parametrize('expr, message', [
    ('len(1)', 'type mismatch: len expects an array or a string but got a number'),
    ('len()', 'arity mismatch: len expects 1 arguments but got 0'),
    ("upper(1)", 'type mismatch: upper expects a string for argument 1 but got a number'),
    ("split('a')", 'arity mismatch: split expects 2 arguments but got 1'),
    ("push(1, 2)", 'type mismatch: push expects a array for argument 1 but got a number'),
])
def test_native_argument_errors(expr, message):
    with pytest.raises(AocError) as exc:
        run(expr)
    assert exc.value.message == message


def test_native_errors_carry_the_call_line():
    program = parse_program("part1: {\n  var x = 1\n  return upper(\n    x)\n}")
    with pytest.raises(AocError) as exc:
        Evaluator(program).eval_section('part1')
    assert exc.value.line == 3
