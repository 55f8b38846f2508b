"""CLI entry point for the aoclang interpreter.

Usage:
    python -m aoclang [-v|-vv|-vvv] <program_file>
    python -m aoclang -t [-b] <program_file>
    python -m aoclang --debug-lex <program_file>
    python -m aoclang --debug-ast <program_file>

Options:
  -t            Run the `test` section as input and check the parts against
                `test_part1` / `test_part2`
  -b            Print how long each part took
  -v            Increase debug verbosity (can be repeated)
  --debug-lex   Print the token stream grouped by source line
  --debug-ast   Print the parsed program as JSON

In the default mode the `file` section must evaluate to the puzzle input
text; `part1` (and `part2` if present) are then evaluated and printed.
Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, List, Optional

from colorama import Fore, Style, just_fix_windows_console

from .ast_json import ast_to_obj
from .errors import AocError, runtime_error
from .interpreter import Evaluator, parse_program
from .lexer import Lexer, TokenKind
from .types import compare_values, repr_value


def debug_lex(source: str):
    lexer = Lexer(source)
    lines = source.split('\n')
    current = 0
    while True:
        token = lexer.next_token()
        line, _ = lexer.get_line_and_col(token)
        if line != current:
            if current > 0:
                print()
            current = line
            text = lines[line - 1] if line <= len(lines) else ''
            print(f"line {line:2d}: \"{text}\"")
            print(f"     {line:2d}: ", end='')
        if token.length == 0:
            print(f"{token.kind} ", end='')
        else:
            print(f"{token.kind}({lexer.get_string(token)!r}) ", end='')
        if token.kind == TokenKind.EOF:
            break
    print()


def eval_part(evaluator: Evaluator, name: str, bench: bool) -> Any:
    start = time.perf_counter()
    value = evaluator.eval_section(name)
    if bench:
        elapsed = time.perf_counter() - start
        print(f"{Fore.YELLOW}bench:{Style.RESET_ALL} {name} took {elapsed:.3f}s")
    return value


def read_string_section(evaluator: Evaluator, name: str) -> str:
    value = evaluator.eval_section(name)
    if not isinstance(value, str):
        raise runtime_error(f"{name} section must evaluate to a string")
    return value


def run(evaluator: Evaluator, bench: bool) -> bool:
    evaluator.read_input(read_string_section(evaluator, 'file'))
    print(f"part1: {repr_value(eval_part(evaluator, 'part1', bench))}")
    if evaluator.has_section('part2'):
        print(f"part2: {repr_value(eval_part(evaluator, 'part2', bench))}")
    return True


def check_part(evaluator: Evaluator, expected_name: str, actual_name: str, bench: bool) -> bool:
    expected = evaluator.eval_section(expected_name)
    actual = eval_part(evaluator, actual_name, bench)
    if compare_values(expected, actual):
        print(f"{Fore.GREEN}✓{Style.RESET_ALL} {actual_name}")
        return True
    print(f"{Fore.RED}✗{Style.RESET_ALL} {actual_name}")
    print(f"  expected {repr_value(expected)}")
    print(f"       got {repr_value(actual)}")
    return False


def run_tests(evaluator: Evaluator, bench: bool) -> bool:
    evaluator.read_input(read_string_section(evaluator, 'test'))
    ok = check_part(evaluator, 'test_part1', 'part1', bench)
    if evaluator.has_section('part2'):
        ok = check_part(evaluator, 'test_part2', 'part2', bench) and ok
    return ok


def report_error(err: AocError):
    line = err.line if err.line is not None else 0
    print(f"{Fore.RED}{err.kind.value} on line {line}{Style.RESET_ALL}", file=sys.stderr)
    print(err.message, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="aoclang interpreter")
    parser.add_argument('-t', dest='test', action='store_true', help='run the test section and check the parts')
    parser.add_argument('-b', dest='bench', action='store_true', help='print how long each part took')
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--debug-lex', action='store_true', help='print the token stream')
    group.add_argument('--debug-ast', action='store_true', help='print the parsed program as JSON')
    parser.add_argument('program', help='aoclang program file (.aoc) to run')
    args = parser.parse_args(argv)

    just_fix_windows_console()

    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()

    evaluator = None
    try:
        if args.debug_lex:
            debug_lex(source)
            return
        program = parse_program(source)
        if args.debug_ast:
            print(json.dumps(ast_to_obj(program), indent=2))
            return
        evaluator = Evaluator(program, debug_level=args.v)
        if args.test:
            ok = run_tests(evaluator, args.bench)
        else:
            ok = run(evaluator, args.bench)
    except AocError as e:
        report_error(e)
        sys.exit(1)
    finally:
        if evaluator is not None:
            evaluator.close()
    if not ok:
        sys.exit(1)


if __name__ == '__main__':
    main()
