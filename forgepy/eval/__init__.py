"""Expression evaluation over plain Python values."""

from forgepy.eval.builtins import (
    DEFAULT_BUILTINS,
    EASINGS,
    BuiltinFn,
    BuiltinRegistry,
    EasingFn,
    default_builtins,
    get_easing,
    power,
)
from forgepy.eval.callables import (
    BuiltinCallable,
    CallableKind,
    ForgeCallable,
    FunctionTable,
    UserFunctionCallable,
    resolve_callable,
)
from forgepy.eval.context import EvalContext, create_child_context, create_context
from forgepy.eval.evaluator import (
    evaluate,
    evaluate_condition,
    evaluate_match,
    get_identifiers,
    get_reactive_refs,
    is_constant,
)
from forgepy.eval.values import (
    ColorValue,
    RangeValue,
    Value,
    Vec2Value,
    Vec3Value,
    as_number,
    format_number,
    get_nested_value,
    is_color,
    is_range,
    is_truthy,
    make_color,
    set_nested_value,
    strict_equals,
    to_display_string,
)

__all__ = [
    "DEFAULT_BUILTINS",
    "EASINGS",
    "BuiltinCallable",
    "BuiltinFn",
    "BuiltinRegistry",
    "CallableKind",
    "ColorValue",
    "EasingFn",
    "EvalContext",
    "ForgeCallable",
    "FunctionTable",
    "RangeValue",
    "UserFunctionCallable",
    "Value",
    "Vec2Value",
    "Vec3Value",
    "as_number",
    "create_child_context",
    "create_context",
    "default_builtins",
    "evaluate",
    "evaluate_condition",
    "evaluate_match",
    "format_number",
    "get_easing",
    "get_identifiers",
    "get_nested_value",
    "get_reactive_refs",
    "is_color",
    "is_constant",
    "is_range",
    "is_truthy",
    "make_color",
    "power",
    "resolve_callable",
    "set_nested_value",
    "strict_equals",
    "to_display_string",
]
