"""Native function library.

Every native receives the list of evaluated arguments and checks its own
arity and argument types, through `expect_args` where the signature is
fixed. Natives never mutate their arguments: `push`, `delete`, `slice` and
`sort` all build new arrays.
"""

import re
from typing import Any, List

from aoclang.builtin_function import BuiltinFunction
from aoclang.environment import Environment
from aoclang.errors import runtime_error
from aoclang.types import (
    NIL, ArrayVal, RangeVal, expect_args, is_number, to_string, type_name,
)
from .io import populate_io_environment

INTEGER_RE = re.compile(r'[+-]?[0-9]+')


def std_print(args: List[Any]) -> Any:
    print(' '.join(to_string(a) for a in args), end='')
    return NIL


def std_println(args: List[Any]) -> Any:
    print(' '.join(to_string(a) for a in args))
    return NIL


def std_num(args: List[Any]) -> Any:
    expect_args('num', args, 'string')
    text = args[0].strip()
    if not INTEGER_RE.fullmatch(text):
        return NIL
    return int(text)


def std_split(args: List[Any]) -> Any:
    expect_args('split', args, 'string', 'string')
    s, sep = args
    if sep == '':
        return ArrayVal(list(s))
    return ArrayVal(s.split(sep))


def std_len(args: List[Any]) -> Any:
    if len(args) != 1:
        raise runtime_error(f"arity mismatch: len expects 1 arguments but got {len(args)}")
    value = args[0]
    if isinstance(value, ArrayVal):
        return len(value.items)
    if isinstance(value, str):
        return len(value)
    raise runtime_error(f"type mismatch: len expects an array or a string but got a {type_name(value)}")


def std_push(args: List[Any]) -> Any:
    expect_args('push', args, 'array', 'any')
    return ArrayVal(args[0].items + [args[1]])


def std_slice(args: List[Any]) -> Any:
    expect_args('slice', args, 'array', 'number', 'number')
    array, start, end = args
    if start < 0 or end < start or end > len(array.items):
        raise runtime_error(f"slice [{start}, {end}) out of range for array of length {len(array.items)}")
    return ArrayVal(array.items[start:end])


def std_delete(args: List[Any]) -> Any:
    expect_args('delete', args, 'array', 'number')
    array, index = args
    return ArrayVal([v for i, v in enumerate(array.items) if i != index])


def step_between(start: int, end: int) -> int:
    return -1 if end < start else 1


def std_range(args: List[Any]) -> Any:
    expect_args('range', args, 'number', 'number')
    start, end = args
    return RangeVal(start, end, step_between(start, end))


def std_rangei(args: List[Any]) -> Any:
    expect_args('rangei', args, 'number', 'number')
    start, end = args
    step = step_between(start, end)
    return RangeVal(start, end + step, step)


def std_sort(args: List[Any]) -> Any:
    expect_args('sort', args, 'array')
    items = args[0].items
    if all(is_number(v) for v in items) or all(isinstance(v, str) for v in items):
        return ArrayVal(sorted(items))
    kinds = sorted({type_name(v) for v in items})
    raise runtime_error(f"cannot sort an array of {' and '.join(kinds)} values")


def std_upper(args: List[Any]) -> Any:
    expect_args('upper', args, 'string')
    return args[0].upper()


NATIVES = {
    'print': std_print,
    'println': std_println,
    'num': std_num,
    'split': std_split,
    'len': std_len,
    'push': std_push,
    'slice': std_slice,
    'delete': std_delete,
    'range': std_range,
    'rangei': std_rangei,
    'sort': std_sort,
    'upper': std_upper,
}


def populate_std_environment() -> Environment:
    std_env = Environment()
    for name, fn in NATIVES.items():
        std_env.define(name, BuiltinFunction(name, fn))
    std_env.values.update(populate_io_environment().values)
    return std_env
