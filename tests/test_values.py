import pytest

from aoclang.builtin_function import BuiltinFunction
from aoclang.errors import AocError
from aoclang.interpreter import Evaluator
from aoclang.parser import parse_program
from aoclang.types import (
    NIL, ArrayVal, MapVal, RangeVal,
    compare_values, expect_args, get_key, is_truthy, repr_value, set_key,
    to_string, type_name,
)


def test_type_names():
    assert type_name(NIL) == 'nil'
    assert type_name(3) == 'number'
    assert type_name('s') == 'string'
    assert type_name(ArrayVal([])) == 'array'
    assert type_name(MapVal({})) == 'map'
    assert type_name(RangeVal(0, 3, 1)) == 'range'
    assert type_name(BuiltinFunction('f', lambda args: NIL)) == 'native function'


def test_repr_and_to_string():
    value = ArrayVal([1, 'a', NIL, MapVal({'k': 'v', 'n': ArrayVal([])})])
    assert repr_value(value) == "[1, 'a', nil, {k: 'v', n: []}]"
    assert to_string(value) == repr_value(value)
    assert to_string('abc') == 'abc'
    assert repr_value('abc') == "'abc'"
    assert repr_value(MapVal({})) == '{}'
    assert repr_value(RangeVal(2, 5, 1)) == '<range 2..5>'
    assert repr_value(BuiltinFunction('len', lambda args: NIL)) == '<native function len>'


def test_repr_parses_back_to_an_equal_value():
    value = ArrayVal([1, 'x y', NIL, ArrayVal([2, 3])])
    program = parse_program('part1: ' + repr_value(value))
    result = Evaluator(program).eval_section('part1')
    assert repr_value(result) == repr_value(value)


def test_map_repr_parses_back_to_an_equal_map():
    value = MapVal({'a': 1, '2': 'two', 'n': ArrayVal([3])})
    program = parse_program('part1: {\n  return ' + repr_value(value) + '\n}')
    result = Evaluator(program).eval_section('part1')
    assert isinstance(result, MapVal)
    assert set(result.entries) == {'a', '2', 'n'}
    assert {k: repr_value(v) for k, v in result.entries.items()} == {
        'a': '1',
        '2': "'two'",
        'n': '[3]',
    }


def test_only_non_zero_numbers_are_truthy():
    assert is_truthy(1)
    assert is_truthy(-4)
    assert not is_truthy(0)
    assert not is_truthy(NIL)
    assert not is_truthy('x')
    assert not is_truthy(ArrayVal([1]))


def test_compare_values():
    assert compare_values(1, 1)
    assert not compare_values(1, 2)
    assert compare_values('a', 'a')
    assert compare_values(NIL, NIL)
    assert not compare_values(NIL, 0)
    assert not compare_values('a', NIL)


@pytest.mark.parametrize('a, b', [
    (1, '1'),
    (ArrayVal([]), ArrayVal([])),
    (MapVal({}), 1),
])
def test_compare_mismatched_tags(a, b):
    with pytest.raises(AocError) as exc:
        compare_values(a, b)
    assert exc.value.message == f"cannot compare {type_name(a)} and {type_name(b)}"


def test_get_key():
    array = ArrayVal([10, 20])
    assert get_key(array, 1) == 20
    mapping = MapVal({'a': 1, '7': 2})
    assert get_key(mapping, 'a') == 1
    assert get_key(mapping, 7) == 2
    assert get_key(mapping, 'missing') is NIL
    assert get_key('hey', 1) == 'e'


@pytest.mark.parametrize('value, key, message', [
    (ArrayVal([1]), 1, 'index 1 out of range'),
    (ArrayVal([1]), -1, 'index -1 out of range'),
    ('ab', 5, 'index 5 out of range'),
    (ArrayVal([1]), 'a', 'cannot subscript a array with a string'),
    (MapVal({}), NIL, 'cannot subscript a map with a nil'),
    (3, 0, 'cannot subscript a number with a number'),
])
def test_get_key_errors(value, key, message):
    with pytest.raises(AocError) as exc:
        get_key(value, key)
    assert exc.value.message == message
    assert exc.value.line is None


def test_set_key():
    array = ArrayVal([1, 2])
    set_key(array, 0, 'x')
    assert array.items == ['x', 2]
    mapping = MapVal({})
    set_key(mapping, 3, 'three')
    assert mapping.entries == {'3': 'three'}
    with pytest.raises(AocError):
        set_key(array, 2, 0)
    with pytest.raises(AocError):
        set_key('abc', 0, 'x')


def test_range_values_are_not_consumed():
    r = RangeVal(3, 0, -1)
    assert list(r.values()) == [3, 2, 1]
    assert list(r.values()) == [3, 2, 1]


def test_expect_args():
    expect_args('f', [1, 'a', NIL], 'number', 'string', 'any')
    with pytest.raises(AocError) as exc:
        expect_args('f', [1], 'number', 'number')
    assert exc.value.message == 'arity mismatch: f expects 2 arguments but got 1'
    with pytest.raises(AocError) as exc:
        expect_args('f', [1, 2], 'number', 'string')
    assert exc.value.message == 'type mismatch: f expects a string for argument 2 but got a number'
