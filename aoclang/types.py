"""Runtime values for aoclang.

Numbers and strings are plain Python `int` and `str` objects. The other
value kinds are small classes defined here (`NilVal`, `ArrayVal`, `MapVal`,
`RangeVal`) or in `builtin_function` and `interpreter` (native functions
and closures). Arrays and maps wrap a Python list/dict that is shared by
every alias of the value, so mutating through one name is visible through
all of them.

The helpers in this module raise runtime errors without a line number; the
evaluator stamps the line of the expression being evaluated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .builtin_function import BuiltinFunction
from .errors import runtime_error


class NilVal:
    """Marker object for the aoclang `nil` value."""
    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


@dataclass(eq=False)
class ArrayVal:
    items: List[Any]

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass(eq=False)
class MapVal:
    entries: Dict[str, Any]

    def __repr__(self) -> str:
        return f"Map({self.entries!r})"


@dataclass(frozen=True)
class RangeVal:
    """A range of numbers from `current` up to (excluding) `end`.

    `step` is +1 or -1. Iterating a range never mutates the value, so the
    same range can be looped over more than once.
    """
    current: int
    end: int
    step: int

    def values(self):
        current = self.current
        while current != self.end:
            yield current
            current += self.step


def is_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the aoclang type name of a runtime value."""
    if isinstance(value, NilVal):
        return 'nil'
    if is_number(value):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, ArrayVal):
        return 'array'
    if isinstance(value, MapVal):
        return 'map'
    if isinstance(value, RangeVal):
        return 'range'
    if isinstance(value, BuiltinFunction):
        return 'native function'
    return 'function'


def repr_value(value: Any) -> str:
    """Quoted rendering that parses back to an equal value."""
    if isinstance(value, NilVal):
        return 'nil'
    if is_number(value):
        return str(value)
    if isinstance(value, str):
        return "'" + value + "'"
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(repr_value(item) for item in value.items) + ']'
    if isinstance(value, MapVal):
        entries = ', '.join(f"{k}: {repr_value(v)}" for k, v in value.entries.items())
        return '{' + entries + '}'
    if isinstance(value, RangeVal):
        return f"<range {value.current}..{value.end}>"
    if isinstance(value, BuiltinFunction):
        return f"<native function {value.name}>"
    return f"<fn {value.name}>"


def to_string(value: Any) -> str:
    """Unquoted rendering used by print and string concatenation."""
    if isinstance(value, str):
        return value
    return repr_value(value)


def is_truthy(value: Any) -> bool:
    # only numbers can be truthy; nil, strings and containers never are
    return is_number(value) and value != 0


def compare_values(a: Any, b: Any) -> bool:
    """Equality between numbers, strings and nil.

    nil compared with any other value is simply unequal. Every other
    pairing (including two arrays) is a runtime error.
    """
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    a_nil = isinstance(a, NilVal)
    b_nil = isinstance(b, NilVal)
    if a_nil or b_nil:
        return a_nil and b_nil
    raise runtime_error(f"cannot compare {type_name(a)} and {type_name(b)}")


def map_key(key: Any):
    if isinstance(key, str):
        return key
    if is_number(key):
        return str(key)
    return None


def get_key(value: Any, key: Any) -> Any:
    if isinstance(value, ArrayVal) and is_number(key):
        if key < 0 or key >= len(value.items):
            raise runtime_error(f"index {key} out of range")
        return value.items[key]
    if isinstance(value, MapVal):
        k = map_key(key)
        if k is not None:
            return value.entries.get(k, NIL)
    if isinstance(value, str) and is_number(key):
        if key < 0 or key >= len(value):
            raise runtime_error(f"index {key} out of range")
        return value[key]
    raise runtime_error(f"cannot subscript a {type_name(value)} with a {type_name(key)}")


def set_key(value: Any, key: Any, new_value: Any) -> None:
    if isinstance(value, ArrayVal) and is_number(key):
        if key < 0 or key >= len(value.items):
            raise runtime_error(f"index {key} out of range")
        value.items[key] = new_value
        return
    if isinstance(value, MapVal):
        k = map_key(key)
        if k is not None:
            value.entries[k] = new_value
            return
    raise runtime_error(f"cannot assign to a subscript of a {type_name(value)} with a {type_name(key)}")


def expect_args(name: str, args: List[Any], *tags: str) -> None:
    """Check that `args` holds exactly one value per tag, of that tag.

    A tag is a `type_name` result, or 'any' to accept every value.
    """
    if len(args) != len(tags):
        raise runtime_error(f"arity mismatch: {name} expects {len(tags)} arguments but got {len(args)}")
    for index, (arg, tag) in enumerate(zip(args, tags)):
        if tag != 'any' and type_name(arg) != tag:
            raise runtime_error(
                f"type mismatch: {name} expects a {tag} for argument {index + 1} but got a {type_name(arg)}"
            )
