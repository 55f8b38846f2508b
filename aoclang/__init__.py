# aoclang package
# This package provides a lexer, parser and tree-walking evaluator for
# aoclang, a small scripting language for Advent of Code style puzzles.
from .errors import AocError, ErrorKind
from .interpreter import Evaluator, load_file, load_program, parse_program

__all__ = [
    'AocError',
    'ErrorKind',
    'Evaluator',
    'load_file',
    'load_program',
    'parse_program',
]
