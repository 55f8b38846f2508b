from .basic_io import BasicIO
from aoclang.builtin_function import BuiltinFunction
from aoclang.environment import Environment
from aoclang.types import expect_args
from typing import List, Any


def populate_io_environment() -> Environment:
    basic_io = BasicIO()
    io_env = Environment()

    def std_read(args: List[Any]) -> Any:
        expect_args('read', args, 'string')
        return basic_io.read_file(args[0])

    io_env.define('read', BuiltinFunction('read', std_read))
    return io_env
