from dataclasses import dataclass
from typing import Any, Callable, List


@dataclass(eq=False)
class BuiltinFunction:
    """A native function; `fn` receives the evaluated argument list."""
    name: str
    fn: Callable[[List[Any]], Any]

    def __call__(self, args: List[Any]) -> Any:
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
