from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    LEX = 'syntax error'
    PARSE = 'parse error'
    RUNTIME = 'runtime error'


@dataclass
class ErrorVal:
    """Kind, message and source line of a failure."""
    kind: ErrorKind
    message: str
    line: Optional[int] = None


class AocError(Exception):
    """Exception type used to propagate lex, parse and runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(err.message)
        self.err = err

    @property
    def kind(self) -> ErrorKind:
        return self.err.kind

    @property
    def message(self) -> str:
        return self.err.message

    @property
    def line(self) -> Optional[int]:
        return self.err.line

    def __str__(self) -> str:
        line = self.err.line if self.err.line is not None else 0
        return f"{self.err.kind.value} on line {line}\n{self.err.message}"


def runtime_error(message: str, line: Optional[int] = None) -> AocError:
    return AocError(ErrorVal(ErrorKind.RUNTIME, message, line))


class ReturnSignal:
    """Returned by statement execution when a return statement runs."""
    def __init__(self, value: Any, token: Any = None):
        self.value = value
        self.token = token


class BreakSignal:
    def __init__(self, token: Any = None):
        self.token = token


class ContinueSignal:
    def __init__(self, token: Any = None):
        self.token = token
