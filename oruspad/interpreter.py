"""Tree-walking evaluator for the Orus playground simulator.

The interpreter runs a parsed `Program` starting from its zero-argument
``main`` function and collects everything the program prints as a list of
output lines. It never touches the real console, the clock or the network,
so the same program always yields the same lines.

Every run owns a fresh `ExecutionState` and a fresh chain of
`Environment` scopes; the `Program` itself is read-only and may be shared
between runs and threads. Each statement costs one step and each loop
iteration costs one iteration; going over either budget in `Limits` stops
the run with `ResourceExhausted`. A host can stop a run early by setting
the `threading.Event` passed as ``cancel_event``.
"""

from __future__ import annotations

import json
import math
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .ast import (
    Program, FnDecl, Block, LetDecl, Assignment, PrintStmt, IfStmt,
    ForInStmt, WhileStmt, BreakStmt, ContinueStmt, ReturnStmt, ExprStmt,
    ArrayLiteral, RangeExpr, BinaryExpr, UnaryExpr, Identifier,
    NumberLiteral, StringLiteral, NilLiteral, Call, IndexExpr, FieldAccess,
    Node,
)
from .builtin_function import BuiltinFunction
from .config import DEFAULT_LIMITS, MODES, Limits
from .environment import Environment
from .errors import (
    OrusError, OrusNameError, MissingMainError, TypeMismatch, DivisionByZero,
    IndexOutOfRange, ResourceExhausted, Cancelled, ReturnSignal, BreakSignal,
    ContinueSignal,
)
from .lexer import Position
from .parser import parse_cached
from .std import populate_core_environment
from .types import (
    UNDEFINED, ArrayVal, as_integer, equal_values, is_truthy, to_plain,
    to_string, type_name,
)

PLACEHOLDER = '[undefined]'


class FunctionValue:
    """Represents a user-defined Orus helper function."""
    def __init__(self, decl: FnDecl, env: Environment):
        self.decl = decl
        self.env = env  # closure environment for globals

    @property
    def name(self) -> str:
        return self.decl.name

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


@dataclass
class ExecutionState:
    """Mutable bookkeeping for exactly one `Interpreter.run` call."""
    limits: Limits
    cancel_event: Optional[threading.Event] = None
    steps: int = 0
    iterations: int = 0
    call_depth: int = 0
    output: List[str] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    position: Optional[Position] = None


@dataclass(frozen=True)
class RunResult:
    """Outcome of one run.

    `output` holds the program's lines only when the run succeeded. Lines
    printed before a failure are kept apart in `partial_output` so a
    failed run can never be mistaken for a complete one.
    """
    output: Tuple[str, ...] = ()
    error: Optional[OrusError] = None
    diagnostics: Tuple[str, ...] = ()
    partial_output: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


class Interpreter:
    """Core interpreter that executes an Orus AST."""
    def __init__(self, limits: Optional[Limits] = None, debug_level: int = 0,
                 debug_file: Optional[str] = 'debug.txt', timestamp: float = 0.0):
        self.limits = limits or DEFAULT_LIMITS
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.timestamp = timestamp

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    # Public API
    def run(self, program: Program, mode: str = 'normal',
            cancel_event: Optional[threading.Event] = None) -> RunResult:
        if mode not in MODES:
            raise ValueError(f"unknown mode {mode!r}; expected one of {MODES}")
        state = ExecutionState(self.limits, cancel_event)
        globals_env = populate_core_environment(self.timestamp).child_scope()
        main_env: Optional[Environment] = None
        error: Optional[OrusError] = None
        if self.debug_level > 0 and self.debug_file:
            self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
        try:
            # Functions are hoisted so global initializers may call them.
            for fn in program.functions:
                globals_env.declare(fn.name, FunctionValue(fn, globals_env), fn.position)
            for decl in program.globals:
                self.execute(decl, globals_env, state)
            main = program.find_function('main')
            if main is None or main.params:
                raise MissingMainError("no zero-argument 'main' function found")
            main_env = globals_env.child_scope()
            try:
                self.execute_block(main.body.statements, main_env, state)
            except ReturnSignal:
                pass
        except OrusError as e:
            error = e
        except RecursionError:
            error = ResourceExhausted('program nests calls or expressions too deeply')
        finally:
            if error is not None:
                self.debug(f"run failed with {error.kind}: {error.message}")
            self.debug(f"run finished: {state.steps} steps, {state.iterations} iterations, "
                       f"{len(state.output)} lines")
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

        if error is not None:
            if error.position is None and not isinstance(
                    error, (MissingMainError, ResourceExhausted, Cancelled)):
                error.position = state.position

        lines = list(state.output)
        graceful_stop = isinstance(error, (ResourceExhausted, Cancelled))
        if mode == 'debug' and (error is None or graceful_stop):
            lines.extend(self.debug_dump(program, globals_env, main_env))
        if error is not None:
            return RunResult((), error, tuple(state.diagnostics), tuple(lines))
        return RunResult(tuple(lines), None, tuple(state.diagnostics))

    def debug_dump(self, program: Program, globals_env: Environment,
                   main_env: Optional[Environment]) -> List[str]:
        """Render the bindings visible at the top of ``main``.

        Globals come first, then main's own bindings, each in declaration
        order. A main binding that shadows a global shows main's value in
        the global's slot.
        """
        variables: Dict[str, Any] = {}
        for env in (globals_env, main_env):
            if env is None:
                continue
            for name, value in env.bindings().items():
                if isinstance(value, (FunctionValue, BuiltinFunction)):
                    continue
                variables[name] = to_plain(value)
        rendered = json.dumps(variables, indent=2, ensure_ascii=False)
        return [
            '',
            '--- Debug Information ---',
            *f"Variables: {rendered}".split('\n'),
            f"Code size: {program.source_length} characters",
        ]

    # Budget accounting
    def tick(self, node: Node, state: ExecutionState):
        if state.cancel_event is not None and state.cancel_event.is_set():
            raise Cancelled('evaluation was cancelled')
        state.steps += 1
        state.position = getattr(node, 'position', None) or state.position
        if state.steps > state.limits.max_steps:
            self.debug(f"step budget of {state.limits.max_steps} exhausted")
            raise ResourceExhausted('program exceeded its execution step budget')

    def loop_tick(self, state: ExecutionState):
        if state.cancel_event is not None and state.cancel_event.is_set():
            raise Cancelled('evaluation was cancelled')
        state.iterations += 1
        if state.iterations > state.limits.max_iterations:
            self.debug(f"iteration budget of {state.limits.max_iterations} exhausted")
            raise ResourceExhausted('program exceeded its loop iteration budget')

    def emit(self, text: str, state: ExecutionState):
        if len(state.output) >= state.limits.max_output_lines:
            raise ResourceExhausted('program produced too much output')
        state.output.append(text)

    # Statements
    def execute_block(self, statements: Iterable[Node], env: Environment, state: ExecutionState):
        for stmt in statements:
            self.execute(stmt, env, state)

    def execute(self, node: Node, env: Environment, state: ExecutionState):
        self.tick(node, state)
        if isinstance(node, LetDecl):
            value = self.evaluate(node.init, env, state)
            env.declare(node.name, value, node.position)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {type_name(value)} = {to_string(value)}")
            return
        if isinstance(node, Assignment):
            self.evaluate(node, env, state)
            return
        if isinstance(node, PrintStmt):
            text = '' if node.expr is None else to_string(self.evaluate(node.expr, env, state))
            self.emit(text, state)
            return
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.cond, env, state)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                self.execute_block(node.then_block.statements, env.child_scope(), state)
            elif isinstance(node.else_block, IfStmt):
                self.execute(node.else_block, env, state)
            elif node.else_block is not None:
                self.execute_block(node.else_block.statements, env.child_scope(), state)
            return
        if isinstance(node, ForInStmt):
            for item in self.iterate(node.iterable, env, state):
                self.loop_tick(state)
                loop_env = env.child_scope()
                loop_env.declare(node.var_name, item, node.position)
                if self.debug_level >= 3:
                    self.debug(f"for {node.var_name} = {to_string(item)}")
                try:
                    self.execute_block(node.body.statements, loop_env, state)
                except BreakSignal:
                    break
                except ContinueSignal:
                    continue
            return
        if isinstance(node, WhileStmt):
            while is_truthy(self.evaluate(node.cond, env, state)):
                self.loop_tick(state)
                try:
                    self.execute_block(node.body.statements, env.child_scope(), state)
                except BreakSignal:
                    break
                except ContinueSignal:
                    continue
            return
        if isinstance(node, Block):
            self.execute_block(node.statements, env.child_scope(), state)
            return
        if isinstance(node, BreakStmt):
            raise BreakSignal()
        if isinstance(node, ContinueStmt):
            raise ContinueSignal()
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env, state) if node.value is not None else UNDEFINED
            raise ReturnSignal(value)
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr, env, state)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def iterate(self, iterable: Node, env: Environment, state: ExecutionState) -> Iterable[Any]:
        """Values a for-in loop walks over; ranges are produced lazily."""
        if isinstance(iterable, RangeExpr):
            start, end = self.range_bounds(iterable, env, state)
            return (float(n) for n in range(start, end + 1))
        value = self.evaluate(iterable, env, state)
        if isinstance(value, ArrayVal):
            return value.items
        raise TypeMismatch(f"cannot iterate over {type_name(value)}", iterable.position)

    def range_bounds(self, node: RangeExpr, env: Environment, state: ExecutionState) -> Tuple[int, int]:
        bounds = []
        for part in (node.start, node.end):
            value = self.evaluate(part, env, state)
            try:
                bounds.append(as_integer(value))
            except TypeError as e:
                raise TypeMismatch(f"range bounds must be integers: {e}", node.position)
        return bounds[0], bounds[1]

    # Expressions
    def evaluate(self, node: Node, env: Environment, state: ExecutionState) -> Any:
        if isinstance(node, NumberLiteral):
            return node.value
        if isinstance(node, NilLiteral):
            return UNDEFINED
        if isinstance(node, StringLiteral):
            return ''.join(
                seg if isinstance(seg, str) else self.interpolate(seg, env, state)
                for seg in node.segments
            )
        if isinstance(node, Identifier):
            return env.get(node.name, node.position)
        if isinstance(node, ArrayLiteral):
            return ArrayVal(tuple(self.evaluate(el, env, state) for el in node.elements))
        if isinstance(node, RangeExpr):
            # Outside a for-in a range becomes an Array; every element counts
            # against the iteration budget so huge ranges still stop.
            start, end = self.range_bounds(node, env, state)
            items = []
            for n in range(start, end + 1):
                self.loop_tick(state)
                items.append(float(n))
            return ArrayVal(tuple(items))
        if isinstance(node, UnaryExpr):
            operand = self.evaluate(node.operand, env, state)
            if node.op == '!':
                return 0.0 if is_truthy(operand) else 1.0
            if isinstance(operand, float):
                return -operand
            raise TypeMismatch(f"unary - expects a Number, got {type_name(operand)}", node.position)
        if isinstance(node, BinaryExpr):
            return self.evaluate_binary(node, env, state)
        if isinstance(node, Assignment):
            value = self.evaluate(node.expr, env, state)
            env.set(node.name, value, node.position)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {to_string(value)}")
            return value
        if isinstance(node, Call):
            return self.call_function(node, env, state)
        if isinstance(node, IndexExpr):
            return self.index(node, env, state)
        if isinstance(node, FieldAccess):
            target = self.evaluate(node.target, env, state)
            return self.field(target, node)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_binary(self, node: BinaryExpr, env: Environment, state: ExecutionState) -> Any:
        # Walk the left spine with a loop so long chains such as 1 + 1 + ...
        # need no Python recursion.
        spine = []
        while isinstance(node, BinaryExpr):
            spine.append(node)
            node = node.left
        value = self.evaluate(node, env, state)
        for expr in reversed(spine):
            # Short-circuit for && and ||
            if expr.op == '&&':
                value = 1.0 if is_truthy(value) and is_truthy(self.evaluate(expr.right, env, state)) else 0.0
            elif expr.op == '||':
                value = 1.0 if is_truthy(value) or is_truthy(self.evaluate(expr.right, env, state)) else 0.0
            else:
                right = self.evaluate(expr.right, env, state)
                value = self.apply_binary_op(expr.op, value, right, expr.position)
        return value

    def interpolate(self, node: Node, env: Environment, state: ExecutionState) -> str:
        """Render one `{name}` segment; unknown names become a placeholder."""
        value = self.resolve_segment(node, env, state)
        if isinstance(value, (FunctionValue, BuiltinFunction)):
            self.warn(f"'{value.name}' is a function, not a value, in string interpolation",
                      node.position, state)
            return PLACEHOLDER
        return PLACEHOLDER if value is None else to_string(value)

    def resolve_segment(self, node: Node, env: Environment, state: ExecutionState) -> Optional[Any]:
        if isinstance(node, Identifier):
            value = env.lookup(node.name)
            if value is None:
                self.warn(f"undefined variable '{node.name}' in string interpolation", node.position, state)
            return value
        if isinstance(node, FieldAccess):
            target = self.resolve_segment(node.target, env, state)
            if target is None:
                return None
            try:
                return self.field(target, node)
            except TypeMismatch as e:
                self.warn(f"{e.message} in string interpolation", node.position, state)
                return None
        return self.evaluate(node, env, state)

    def warn(self, message: str, position: Optional[Position], state: ExecutionState):
        if position is not None:
            message = f"{message} (line {position.line}, column {position.column})"
        state.diagnostics.append(message)

    def field(self, target: Any, node: FieldAccess) -> Any:
        if isinstance(target, (str, ArrayVal)) and node.name in ('len', 'length'):
            return float(len(target))
        raise TypeMismatch(f"{type_name(target)} has no field '{node.name}'", node.position)

    def index(self, node: IndexExpr, env: Environment, state: ExecutionState) -> Any:
        target = self.evaluate(node.target, env, state)
        index_value = self.evaluate(node.index, env, state)
        if not isinstance(target, (str, ArrayVal)):
            raise TypeMismatch(f"cannot index {type_name(target)}", node.position)
        try:
            idx = as_integer(index_value)
        except TypeError as e:
            raise TypeMismatch(f"index must be an integer: {e}", node.position)
        size = len(target)
        # handle negative indexing
        if idx < 0:
            idx += size
        if idx < 0 or idx >= size:
            raise IndexOutOfRange(f"index {to_string(index_value)} out of range for length {size}",
                                  node.position)
        return target[idx] if isinstance(target, str) else target.items[idx]

    def call_function(self, node: Call, env: Environment, state: ExecutionState) -> Any:
        func = env.lookup(node.name)
        if func is None:
            raise OrusNameError(f"undefined function '{node.name}'", node.position)
        args = [self.evaluate(arg, env, state) for arg in node.args]
        if isinstance(func, BuiltinFunction):
            # Check arity; None means variadic
            if func.arity is not None and len(args) != func.arity:
                raise TypeMismatch(f"{func.name} expects {func.arity} argument(s), got {len(args)}",
                                   node.position)
            try:
                return func.fn(args)
            except OrusError as ex:
                if ex.position is None:
                    ex.position = node.position
                raise
        if isinstance(func, FunctionValue):
            params = func.decl.params
            if len(args) != len(params):
                raise TypeMismatch(f"{func.name} expects {len(params)} argument(s), got {len(args)}",
                                   node.position)
            state.call_depth += 1
            try:
                if state.call_depth > state.limits.max_call_depth:
                    self.debug(f"call depth limit of {state.limits.max_call_depth} exhausted")
                    raise ResourceExhausted('program exceeded its call depth limit')
                # Create new environment for call; closure's env is parent
                call_env = func.env.child_scope()
                for param, arg in zip(params, args):
                    call_env.declare(param, arg, func.decl.position)
                try:
                    self.execute_block(func.decl.body.statements, call_env, state)
                except ReturnSignal as r:
                    return r.value
                return UNDEFINED
            finally:
                state.call_depth -= 1
        raise TypeMismatch(f"'{node.name}' is not callable", node.position)

    def apply_binary_op(self, op: str, a: Any, b: Any, position: Optional[Position] = None) -> Any:
        if op == '+':
            if isinstance(a, float) and isinstance(b, float):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            # Text and Number concatenate using the Number's display text
            if isinstance(a, (str, float)) and isinstance(b, (str, float)):
                return to_string(a) + to_string(b)
            raise TypeMismatch(f"unsupported + for {type_name(a)} and {type_name(b)}", position)
        if op in ('-', '*', '/', '%'):
            if not (isinstance(a, float) and isinstance(b, float)):
                raise TypeMismatch(f"unsupported {op} for {type_name(a)} and {type_name(b)}", position)
            if op == '-':
                return a - b
            if op == '*':
                return a * b
            if b == 0.0:
                raise DivisionByZero('division by zero' if op == '/' else 'modulo by zero', position)
            if op == '/':
                return a / b
            return math.fmod(a, b)
        if op in ('==', '!='):
            eq = equal_values(a, b)
            return 1.0 if (eq if op == '==' else not eq) else 0.0
        if op in ('<', '>', '<=', '>='):
            comparable = (isinstance(a, float) and isinstance(b, float)) or \
                         (isinstance(a, str) and isinstance(b, str))
            if not comparable:
                raise TypeMismatch(f"cannot compare {type_name(a)} and {type_name(b)}", position)
            if op == '<':
                return 1.0 if a < b else 0.0
            if op == '>':
                return 1.0 if a > b else 0.0
            if op == '<=':
                return 1.0 if a <= b else 0.0
            return 1.0 if a >= b else 0.0
        raise TypeMismatch(f"unknown operator {op}", position)


def simulate(source: str, mode: str = 'normal', limits: Optional[Limits] = None,
             cancel_event: Optional[threading.Event] = None, timestamp: float = 0.0,
             debug_level: int = 0) -> RunResult:
    """Parse and run `source`, returning the run's result.

    Syntax errors and a missing `main` come back as a failed `RunResult`
    exactly like runtime errors do; nothing is raised to the caller.
    """
    try:
        program = parse_cached(source)
    except OrusError as e:
        return RunResult(error=e)
    interpreter = Interpreter(limits=limits, debug_level=debug_level, timestamp=timestamp)
    return interpreter.run(program, mode=mode, cancel_event=cancel_event)
