"""Statement execution with control-flow signalling and side-effect callbacks."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final

from forgepy.ast import (
    AnimateStatement,
    BreakStatement,
    ContinueStatement,
    EmitStatement,
    ForStatement,
    IfStatement,
    MatchBlock,
    OnBlock,
    PlayStatement,
    RenderStatement,
    ReturnStatement,
    SetStatement,
    SetStateStatement,
    Statement,
    StopAnimationStatement,
    WhenBlock,
    WhileStatement,
)
from forgepy.diagnostics import EXEC_FOR_LIMIT, EXEC_WHILE_LIMIT, ExecutionError
from forgepy.eval import EvalContext, Value, as_number, evaluate, evaluate_condition, evaluate_match, is_range

MAX_LOOP_ITERATIONS: Final[int] = 10_000


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of running a statement; any set flag stops the enclosing block."""

    returned: bool = False
    return_value: Value = None
    broke: bool = False
    continued: bool = False

    @property
    def halts(self) -> bool:
        return self.returned or self.broke or self.continued


NORMAL: Final[ExecutionResult] = ExecutionResult()
BREAK: Final[ExecutionResult] = ExecutionResult(broke=True)
CONTINUE: Final[ExecutionResult] = ExecutionResult(continued=True)


@dataclass(slots=True)
class ExecutionCallbacks:
    """Hooks for the side effects statements request; a missing hook is a no-op."""

    on_set_state: Callable[[str], None] | None = None
    on_play_animation: Callable[[str], None] | None = None
    on_stop_animation: Callable[[str], None] | None = None
    on_emit: Callable[[str], None] | None = None
    on_set: Callable[[str, Value], None] | None = None
    on_animate: Callable[[str, str | None, int | float | None], None] | None = None


def execute_statement(
    stmt: Statement | RenderStatement,
    ctx: EvalContext,
    callbacks: ExecutionCallbacks | None = None,
    *,
    max_iterations: int = MAX_LOOP_ITERATIONS,
) -> ExecutionResult:
    callbacks = callbacks or ExecutionCallbacks()

    match stmt:
        case IfStatement():
            return _execute_if(stmt, ctx, callbacks, max_iterations)
        case ForStatement():
            return _execute_for(stmt, ctx, callbacks, max_iterations)
        case WhileStatement():
            return _execute_while(stmt, ctx, callbacks, max_iterations)
        case BreakStatement():
            return BREAK
        case ContinueStatement():
            return CONTINUE
        case ReturnStatement(value=value):
            return ExecutionResult(returned=True, return_value=None if value is None else evaluate(value, ctx))
        case WhenBlock(condition=condition, body=body, else_body=else_body):
            if evaluate_condition(condition, ctx):
                return execute_statements(body, ctx, callbacks, max_iterations=max_iterations)
            if else_body is not None:
                return execute_statements(else_body, ctx, callbacks, max_iterations=max_iterations)
            return NORMAL
        case MatchBlock(expression=expression, cases=cases):
            index = evaluate_match(expression, cases, ctx)
            if index < 0:
                return NORMAL
            return execute_statements(cases[index].body, ctx, callbacks, max_iterations=max_iterations)
        case SetStateStatement(state=state):
            if callbacks.on_set_state is not None:
                callbacks.on_set_state(state)
        case PlayStatement(animation=animation):
            if callbacks.on_play_animation is not None:
                callbacks.on_play_animation(animation)
        case StopAnimationStatement(animation=animation):
            if callbacks.on_stop_animation is not None:
                callbacks.on_stop_animation(animation)
        case EmitStatement(event=event):
            if callbacks.on_emit is not None:
                callbacks.on_emit(event)
        case SetStatement(property=prop, value=value):
            if callbacks.on_set is not None:
                callbacks.on_set(prop, evaluate(value, ctx))
        case AnimateStatement(animation=animation, axis=axis, speed=speed):
            if callbacks.on_animate is not None:
                callbacks.on_animate(animation, axis, None if speed is None else as_number(evaluate(speed, ctx)))
        case OnBlock():
            # Handlers are dispatched by the VM, never run inline.
            pass
    return NORMAL


def execute_statements(
    statements: Sequence[Statement | RenderStatement],
    ctx: EvalContext,
    callbacks: ExecutionCallbacks | None = None,
    *,
    max_iterations: int = MAX_LOOP_ITERATIONS,
) -> ExecutionResult:
    """Run `statements` in order, stopping at the first break, continue or return."""
    for stmt in statements:
        result = execute_statement(stmt, ctx, callbacks, max_iterations=max_iterations)
        if result.halts:
            return result
    return NORMAL


def _execute_if(
    stmt: IfStatement,
    ctx: EvalContext,
    callbacks: ExecutionCallbacks,
    max_iterations: int,
) -> ExecutionResult:
    if evaluate_condition(stmt.condition, ctx):
        return execute_statements(stmt.body, ctx, callbacks, max_iterations=max_iterations)

    for clause in stmt.elif_clauses:
        if evaluate_condition(clause.condition, ctx):
            return execute_statements(clause.body, ctx, callbacks, max_iterations=max_iterations)

    if stmt.else_body is not None:
        return execute_statements(stmt.else_body, ctx, callbacks, max_iterations=max_iterations)

    return NORMAL


def _loop_items(iterable: Value, max_iterations: int) -> list[Value]:
    """Lists iterate as-is, ranges inclusively by one (capped), other dicts by value."""
    if isinstance(iterable, list):
        return iterable
    if isinstance(iterable, dict):
        if is_range(iterable):
            items: list[Value] = []
            current = as_number(iterable["start"])
            end = as_number(iterable["end"])
            while current <= end and len(items) < max_iterations:
                items.append(current)
                current += 1
            return items
        return list(iterable.values())
    return []


def _execute_for(
    stmt: ForStatement,
    ctx: EvalContext,
    callbacks: ExecutionCallbacks,
    max_iterations: int,
) -> ExecutionResult:
    items = _loop_items(evaluate(stmt.iterable, ctx), max_iterations)

    for iteration, item in enumerate(items):
        if iteration >= max_iterations:
            raise ExecutionError.from_spec(EXEC_FOR_LIMIT, stmt.loc, limit=max_iterations)

        result = execute_statements(
            stmt.body, ctx.child({stmt.variable: item}), callbacks, max_iterations=max_iterations
        )
        if result.broke:
            break
        if result.returned:
            return result

    return NORMAL


def _execute_while(
    stmt: WhileStatement,
    ctx: EvalContext,
    callbacks: ExecutionCallbacks,
    max_iterations: int,
) -> ExecutionResult:
    iterations = 0
    while evaluate_condition(stmt.condition, ctx):
        if iterations >= max_iterations:
            raise ExecutionError.from_spec(EXEC_WHILE_LIMIT, stmt.loc, limit=max_iterations)
        iterations += 1

        result = execute_statements(stmt.body, ctx, callbacks, max_iterations=max_iterations)
        if result.broke:
            break
        if result.returned:
            return result

    return NORMAL
