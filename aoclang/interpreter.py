"""Tree-walking evaluator for aoclang programs.

An `Evaluator` is built from a parsed `Program`. Construction registers
every labelled section and runs the top-level function definitions in the
root scope, which also holds the native library. Sections are then
evaluated on demand by name, typically by the command-line driver after it
has called `read_input` with the puzzle text.

Statements are run by `execute`, which returns None on normal completion
or one of the control signals from `errors` (return, break, continue).
Expressions are run by `evaluate`, which returns a runtime value. Errors
are `AocError` exceptions; `evaluate` stamps the line of the innermost
expression onto errors raised without one.
"""

from __future__ import annotations

import itertools
import sys
import threading
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .ast import (
    Program, Section, Block, ExprStmt, VarDecl, ForStmt, IfStmt,
    ReturnStmt, ContinueStmt, BreakStmt, MatchStmt,
    StringLit, NumberLit, NilLit, Ident, ArrayLit, MapLit,
    BinaryOp, UnaryOp, Call, FuncLit, Node,
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import AocError, ReturnSignal, BreakSignal, ContinueSignal, runtime_error
from .lexer import Token, TokenKind, line_and_col
from .parser import ANONYMOUS, parse_program
from .std import populate_std_environment
from .types import (
    NIL, NilVal, ArrayVal, MapVal, RangeVal,
    is_number, is_truthy, compare_values, get_key, set_key,
    to_string, repr_value, type_name,
)


# Each aoclang call nests about ten Python frames; sections run on a thread
# whose stack is large enough for this limit.
RECURSION_LIMIT = 50_000
STACK_SIZE = 512 * 1024 * 1024


def run_with_deep_stack(fn, *args) -> Any:
    """Call `fn(*args)` on a worker thread with a raised recursion limit."""
    outcome: Dict[str, Any] = {}

    def target():
        try:
            outcome["value"] = fn(*args)
        except BaseException as ex:
            outcome["error"] = ex

    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)
    old_size = threading.stack_size(STACK_SIZE)
    try:
        thread = threading.Thread(target=target)
        thread.start()
        thread.join()
    finally:
        threading.stack_size(old_size)
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


class FunctionValue:
    """A closure: a function literal plus the scope it was evaluated in."""
    def __init__(self, name: str, params: List[str], body: Block, env: Environment):
        self.name = name
        self.params = params
        self.body = body
        self.env = env

    def __repr__(self) -> str:
        return f"<function {self.name}>"


def truncate_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def nil_to_zero(value: Any) -> Any:
    return 0 if isinstance(value, NilVal) else value


class Evaluator:
    def __init__(self, program: Program, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.program = program
        self.source = program.source
        self.root = populate_std_environment()
        self.sections: Dict[str, Section] = {}
        self.active_section: Optional[str] = None
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        try:
            self.load()
        except AocError:
            self.close()
            raise

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def line_of(self, token: Token) -> int:
        line, _ = line_and_col(self.source, token.pos)
        return line

    def load(self):
        for node in self.program.body:
            if isinstance(node, Section):
                if node.name in self.sections:
                    raise runtime_error(f"duplicate section {node.name}", self.line_of(node.token))
                self.sections[node.name] = node
            else:
                self.execute(node, self.root)

    # Public API
    def has_section(self, name: str) -> bool:
        return name in self.sections

    def read_input(self, text: str):
        """Bind `input` and `lines` in the root scope."""
        self.root.define('input', text)
        self.root.define('lines', ArrayVal([line.strip() for line in text.strip().split('\n')]))

    def eval_section(self, name: str) -> Any:
        section = self.sections.get(name)
        if section is None:
            raise runtime_error(f"no section named {name}")
        if self.active_section is not None:
            raise runtime_error(
                f"cannot evaluate section {name} while section {self.active_section} is running"
            )
        self.active_section = name
        if self.debug_level >= 1:
            self.debug(f"enter section {name}")
        try:
            value = run_with_deep_stack(self.run_section, section)
        finally:
            self.active_section = None
        if self.debug_level >= 1:
            self.debug(f"exit section {name} -> {repr_value(value)}")
        return value

    def run_section(self, section: Section) -> Any:
        if isinstance(section.body, Block):
            result = self.execute_block(section.body.statements, Environment(self.root))
            return self.unwrap_result(result)
        return self.evaluate(section.body, self.root)

    def unwrap_result(self, result: Any) -> Any:
        """Turn the outcome of a function or section body into its value."""
        if isinstance(result, ReturnSignal):
            return result.value
        if isinstance(result, BreakSignal):
            raise runtime_error("break outside of a loop", self.line_of(result.token))
        if isinstance(result, ContinueSignal):
            raise runtime_error("continue outside of a loop", self.line_of(result.token))
        return NIL

    # Statements
    def execute_block(self, statements: List[Node], env: Environment) -> Any:
        for stmt in statements:
            result = self.execute(stmt, env)
            if result is not None:
                return result
        return None

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr, env)
            return None
        if isinstance(node, VarDecl):
            value = self.evaluate(node.value, env)
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"define {node.name} = {repr_value(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(env))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {repr_value(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_block, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, ForStmt):
            return self.execute_for(node, env)
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NIL
            return ReturnSignal(value, node.token)
        if isinstance(node, BreakStmt):
            return BreakSignal(node.token)
        if isinstance(node, ContinueStmt):
            return ContinueSignal(node.token)
        if isinstance(node, MatchStmt):
            return self.execute_match(node, env)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_for(self, node: ForStmt, env: Environment) -> Any:
        if node.iterable is None:
            pairs: Iterator[Tuple[Any, Any]] = itertools.repeat((NIL, NIL))
        else:
            pairs = self.iterate(self.evaluate(node.iterable, env), node.iterable)
        # loop variables share one scope; every body run gets a fresh child
        loop_env = Environment(env)
        for item, key in pairs:
            if node.name is not None:
                loop_env.define(node.name, item)
            if node.index_name is not None:
                loop_env.define(node.index_name, key)
            result = self.execute(node.body, loop_env)
            if isinstance(result, BreakSignal):
                break
            if isinstance(result, ContinueSignal):
                continue
            if result is not None:
                return result
        return None

    def iterate(self, value: Any, node: Node) -> Iterator[Tuple[Any, Any]]:
        if isinstance(value, ArrayVal):
            return ((item, index) for index, item in enumerate(list(value.items)))
        if isinstance(value, RangeVal):
            return ((n, n) for n in value.values())
        if isinstance(value, MapVal):
            return ((item, key) for key, item in list(value.entries.items()))
        raise runtime_error(f"cannot iterate over a {type_name(value)}", self.line_of(node.token))

    def execute_match(self, node: MatchStmt, env: Environment) -> Any:
        subject = self.evaluate(node.subject, env)
        for case in node.cases:
            bindings = self.match_pattern(case.pattern, subject, env)
            if bindings is None:
                continue
            if self.debug_level >= 3:
                self.debug(f"match {repr_value(subject)} on line {self.line_of(case.pattern.token)}")
            case_env = Environment(env)
            for name, value in bindings.items():
                case_env.define(name, value)
            return self.execute_block(case.body.statements, case_env)
        return None

    def match_pattern(self, pattern: Node, subject: Any, env: Environment) -> Optional[Dict[str, Any]]:
        """Return the bindings made by a matching pattern, or None."""
        if isinstance(pattern, StringLit):
            if isinstance(subject, str) and subject == pattern.value:
                return {}
            return None
        if isinstance(pattern, ArrayLit):
            if not isinstance(subject, ArrayVal) or len(subject.items) < len(pattern.items):
                return None
            bindings: Dict[str, Any] = {}
            for item, value in zip(pattern.items, subject.items):
                if isinstance(item, Ident):
                    bindings[item.name] = value
                elif not self.pattern_equals(self.evaluate(item, env), value):
                    return None
            return bindings
        if self.pattern_equals(self.evaluate(pattern, env), subject):
            return {}
        return None

    def pattern_equals(self, expected: Any, value: Any) -> bool:
        try:
            return compare_values(expected, value)
        except AocError:
            # values that cannot be compared simply do not match
            return False

    # Expressions
    def evaluate(self, node: Node, env: Environment) -> Any:
        try:
            return self.evaluate_node(node, env)
        except AocError as ex:
            if ex.err.line is None:
                ex.err.line = self.line_of(node.token)
            raise

    def evaluate_node(self, node: Node, env: Environment) -> Any:
        if isinstance(node, (StringLit, NumberLit)):
            return node.value
        if isinstance(node, NilLit):
            return NIL
        if isinstance(node, Ident):
            found, value = env.lookup(node.name)
            if not found:
                raise runtime_error(f"unknown variable {node.name}")
            return value
        if isinstance(node, ArrayLit):
            return ArrayVal([self.evaluate(item, env) for item in node.items])
        if isinstance(node, MapLit):
            entries: Dict[str, Any] = {}
            for key, value_node in node.entries:
                entries[key] = self.evaluate(value_node, env)
            return MapVal(entries)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if not is_number(operand):
                raise runtime_error(f"cannot apply - to a {type_name(operand)}")
            return -operand
        if isinstance(node, BinaryOp):
            if node.op == TokenKind.EQUAL:
                return self.assign(node, env)
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            if node.op == TokenKind.LSQUARE:
                return get_key(left, right)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            args = [self.evaluate(arg, env) for arg in node.args]
            return self.call_function(callee, args, node)
        if isinstance(node, FuncLit):
            fn = FunctionValue(node.name, node.params, node.body, env)
            if node.name != ANONYMOUS:
                env.define(node.name, fn)
                if self.debug_level >= 2:
                    self.debug(f"define function {node.name}({', '.join(node.params)})")
            return fn
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def assign(self, node: BinaryOp, env: Environment) -> Any:
        value = self.evaluate(node.right, env)
        target = node.left
        if isinstance(target, Ident):
            env.assign(target.name, value)
            return value
        if not (isinstance(target, BinaryOp) and target.op == TokenKind.LSQUARE):
            raise NotImplementedError(f"assign: unexpected target type {type(target)}")
        container = self.evaluate(target.left, env)
        key = self.evaluate(target.right, env)
        set_key(container, key, value)
        return value

    def call_function(self, func: Any, args: List[Any], node: Call) -> Any:
        if self.debug_level >= 3:
            name = getattr(func, 'name', type_name(func))
            self.debug(f"call {name}({', '.join(repr_value(a) for a in args)})")
        if isinstance(func, BuiltinFunction):
            try:
                return func(args)
            except AocError as ex:
                ex.err.line = self.line_of(node.token)
                raise
        if isinstance(func, FunctionValue):
            if len(args) != len(func.params):
                raise runtime_error(
                    f"function {func.name} expects {len(func.params)} arguments but got {len(args)}"
                )
            call_env = Environment(func.env)
            for param, arg in zip(func.params, args):
                call_env.define(param, arg)
            try:
                result = self.execute_block(func.body.statements, call_env)
            except RecursionError:
                raise runtime_error("maximum recursion depth exceeded")
            return self.unwrap_result(result)
        raise runtime_error(f"cannot call a {type_name(func)}")

    def apply_binary_op(self, op: TokenKind, a: Any, b: Any) -> Any:
        if op == TokenKind.PLUS and (isinstance(a, str) or isinstance(b, str)):
            return to_string(a) + to_string(b)
        if op in (TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL):
            equal = compare_values(a, b)
            return 1 if (equal if op == TokenKind.EQUAL_EQUAL else not equal) else 0
        x, y = nil_to_zero(a), nil_to_zero(b)
        if not (is_number(x) and is_number(y)):
            raise runtime_error(f"cannot apply {op} to {type_name(a)} and {type_name(b)}")
        if op == TokenKind.PLUS:
            return x + y
        if op == TokenKind.MINUS:
            return x - y
        if op == TokenKind.STAR:
            return x * y
        if op == TokenKind.SLASH:
            if y == 0:
                raise runtime_error("division by zero")
            return truncate_div(x, y)
        if op == TokenKind.PERCENT:
            if y == 0:
                raise runtime_error("modulo by zero")
            return x - y * truncate_div(x, y)
        if op == TokenKind.LESS:
            return 1 if x < y else 0
        if op == TokenKind.LESS_EQUAL:
            return 1 if x <= y else 0
        if op == TokenKind.GREATER:
            return 1 if x > y else 0
        if op == TokenKind.GREATER_EQUAL:
            return 1 if x >= y else 0
        if op == TokenKind.AMP_AMP:
            return 1 if is_truthy(x) and is_truthy(y) else 0
        if op == TokenKind.PIPE_PIPE:
            return 1 if is_truthy(x) or is_truthy(y) else 0
        raise runtime_error(f"unknown operator {op}")


def load_program(source: str, debug_level: int = 0) -> Evaluator:
    """Parse `source` and build an evaluator for it."""
    return Evaluator(parse_program(source), debug_level=debug_level)


def load_file(file_path: str, debug_level: int = 0) -> Evaluator:
    """Parse an aoclang file and build an evaluator for it."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return load_program(source, debug_level=debug_level)
