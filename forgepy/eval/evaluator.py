"""Expression evaluation and static expression queries."""

import math
from collections.abc import Iterator, Sequence

from forgepy.ast import (
    BinaryOp,
    BooleanLiteral,
    ColorLiteral,
    DurationLiteral,
    Expression,
    FunctionCall,
    Identifier,
    ListLiteral,
    MatchCase,
    MemberAccess,
    NumberLiteral,
    Range,
    ReactiveRef,
    StringLiteral,
    UnaryOp,
    Vec2,
    Vec3,
)
from forgepy.diagnostics import (
    EVAL_UNKNOWN_BINARY_OPERATOR,
    EVAL_UNKNOWN_FUNCTION,
    EVAL_UNKNOWN_UNARY_OPERATOR,
    EvalError,
)
from forgepy.eval.builtins import power
from forgepy.eval.callables import resolve_callable
from forgepy.eval.context import EvalContext
from forgepy.eval.values import (
    Value,
    as_number,
    get_nested_value,
    is_color,
    is_truthy,
    make_color,
    strict_equals,
    to_display_string,
)


def evaluate(expr: Expression, ctx: EvalContext) -> Value:
    """Evaluate `expr` against `ctx`.

    Pure apart from whatever a called user function does. Raises `EvalError`
    only for unknown functions and operators.
    """
    match expr:
        case NumberLiteral(value=value) | StringLiteral(value=value) | BooleanLiteral(value=value):
            return value
        case DurationLiteral(value=value):
            return value
        case ColorLiteral(value=value):
            return make_color(value)
        case Identifier(name=name):
            return ctx.lookup(name)
        case Vec2(x=x, y=y):
            return {"x": as_number(evaluate(x, ctx)), "y": as_number(evaluate(y, ctx))}
        case Vec3(x=x, y=y, z=z):
            return {
                "x": as_number(evaluate(x, ctx)),
                "y": as_number(evaluate(y, ctx)),
                "z": as_number(evaluate(z, ctx)),
            }
        case Range(start=start, end=end):
            return {"start": as_number(evaluate(start, ctx)), "end": as_number(evaluate(end, ctx))}
        case ReactiveRef(path=path):
            return _evaluate_reactive(path, ctx)
        case MemberAccess(object=obj, property=prop):
            value = evaluate(obj, ctx)
            if isinstance(value, dict):
                return value.get(prop)
            return None
        case BinaryOp(operator=operator, left=left, right=right):
            return _evaluate_binary(operator, left, right, ctx)
        case UnaryOp(operator=operator, operand=operand):
            return _evaluate_unary(operator, operand, ctx)
        case FunctionCall():
            return _evaluate_call(expr, ctx)
        case ListLiteral(elements=elements):
            return [evaluate(element, ctx) for element in elements]
        case _:
            raise EvalError(f"Unknown expression kind: {expr.kind}", expr.loc)


def _evaluate_reactive(path: tuple[str, ...], ctx: EvalContext) -> Value:
    if not path:
        return None
    if path[0] == "config":
        return get_nested_value(ctx.config, path[1:])
    return get_nested_value(ctx.state, path)


def _evaluate_call(expr: FunctionCall, ctx: EvalContext) -> Value:
    callable_ = resolve_callable(expr.name, ctx)
    if callable_ is None:
        raise EvalError.from_spec(EVAL_UNKNOWN_FUNCTION, expr.loc, name=expr.name)
    args = [evaluate(arg, ctx) for arg in expr.args]
    return callable_.invoke(args, ctx)


def _evaluate_binary(operator: str, left: Expression, right: Expression, ctx: EvalContext) -> Value:
    # Logical operators short-circuit and always produce booleans.
    if operator in ("and", "&&"):
        return is_truthy(evaluate(left, ctx)) and is_truthy(evaluate(right, ctx))
    if operator in ("or", "||"):
        return is_truthy(evaluate(left, ctx)) or is_truthy(evaluate(right, ctx))

    lhs = evaluate(left, ctx)
    rhs = evaluate(right, ctx)

    match operator:
        case "+":
            if isinstance(lhs, str) or isinstance(rhs, str):
                return to_display_string(lhs) + to_display_string(rhs)
            return as_number(lhs) + as_number(rhs)
        case "-":
            return as_number(lhs) - as_number(rhs)
        case "*":
            return as_number(lhs) * as_number(rhs)
        case "/":
            divisor = as_number(rhs)
            if divisor == 0:
                return 0
            return as_number(lhs) / divisor
        case "%":
            divisor = as_number(rhs)
            if divisor == 0:
                return math.nan
            dividend = as_number(lhs)
            if isinstance(dividend, int) and isinstance(divisor, int):
                remainder = abs(dividend) % abs(divisor)
                return -remainder if dividend < 0 else remainder
            if math.isinf(dividend):
                return math.nan
            return math.fmod(dividend, divisor)
        case "**":
            return power(lhs, rhs)
        case "==" | "===":
            return strict_equals(lhs, rhs)
        case "!=" | "!==":
            return not strict_equals(lhs, rhs)
        case "<":
            return as_number(lhs) < as_number(rhs)
        case ">":
            return as_number(lhs) > as_number(rhs)
        case "<=":
            return as_number(lhs) <= as_number(rhs)
        case ">=":
            return as_number(lhs) >= as_number(rhs)
        case "@":
            if isinstance(lhs, dict) and is_color(lhs):
                return {**lhs, "intensity": as_number(rhs)}
            if isinstance(lhs, str) and lhs.startswith("#"):
                return make_color(lhs, as_number(rhs))
            return lhs
        case _:
            raise EvalError.from_spec(EVAL_UNKNOWN_BINARY_OPERATOR, left.loc, operator=operator)


def _evaluate_unary(operator: str, operand: Expression, ctx: EvalContext) -> Value:
    value = evaluate(operand, ctx)
    match operator:
        case "-":
            return -as_number(value)
        case "+":
            return as_number(value)
        case "not" | "!":
            return not is_truthy(value)
        case _:
            raise EvalError.from_spec(EVAL_UNKNOWN_UNARY_OPERATOR, operand.loc, operator=operator)


# ============================================================================
# Conditions and matches
# ============================================================================


def evaluate_condition(expr: Expression, ctx: EvalContext) -> bool:
    return is_truthy(evaluate(expr, ctx))


def evaluate_match(expr: Expression, cases: Sequence[MatchCase], ctx: EvalContext) -> int:
    """Index of the first case whose pattern equals the subject, or -1."""
    value = evaluate(expr, ctx)
    for index, case in enumerate(cases):
        if strict_equals(value, evaluate(case.pattern, ctx)):
            return index
    return -1


# ============================================================================
# Static queries
# ============================================================================


def _children(expr: Expression) -> Iterator[Expression]:
    match expr:
        case Vec2(x=x, y=y):
            yield from (x, y)
        case Vec3(x=x, y=y, z=z):
            yield from (x, y, z)
        case Range(start=start, end=end):
            yield from (start, end)
        case MemberAccess(object=obj):
            yield obj
        case BinaryOp(left=left, right=right):
            yield from (left, right)
        case UnaryOp(operand=operand):
            yield operand
        case FunctionCall(args=args):
            yield from args
        case ListLiteral(elements=elements):
            yield from elements


def _walk(expr: Expression) -> Iterator[Expression]:
    yield expr
    for child in _children(expr):
        yield from _walk(child)


def is_constant(expr: Expression) -> bool:
    """True when `expr` reads no identifiers and no reactive state."""
    return not any(isinstance(node, Identifier | ReactiveRef) for node in _walk(expr))


def get_reactive_refs(expr: Expression) -> list[tuple[str, ...]]:
    return [node.path for node in _walk(expr) if isinstance(node, ReactiveRef)]


def get_identifiers(expr: Expression) -> list[str]:
    return [node.name for node in _walk(expr) if isinstance(node, Identifier)]
