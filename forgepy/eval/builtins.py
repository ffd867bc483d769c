"""Builtin function table and the easing curves used by animation interpolation."""

import math
import random
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Final

from forgepy.eval.values import (
    ColorValue,
    Value,
    Vec2Value,
    Vec3Value,
    as_number,
    is_truthy,
    make_color,
    to_display_string,
)

type BuiltinFn = Callable[..., Value]
type EasingFn = Callable[[float], float]


class BuiltinRegistry:
    """Name-to-function table consulted before user-defined functions."""

    def __init__(self, functions: Mapping[str, BuiltinFn] | None = None) -> None:
        self._functions: dict[str, BuiltinFn] = dict(functions or {})

    def register(self, name: str, fn: BuiltinFn) -> None:
        self._functions[name] = fn

    def get(self, name: str) -> BuiltinFn | None:
        return self._functions.get(name)

    def has(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> list[str]:
        return list(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)


# ============================================================================
# Easing
# ============================================================================


def ease_in_quad(t: float) -> float:
    return t * t


def ease_out_quad(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    u = -2 * t + 2
    return 1 - u * u / 2


def ease_in_cubic(t: float) -> float:
    return t * t * t


def ease_out_cubic(t: float) -> float:
    u = 1 - t
    return 1 - u * u * u


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    u = -2 * t + 2
    return 1 - u * u * u / 2


EASINGS: Final[dict[str, EasingFn]] = {
    "easeInQuad": ease_in_quad,
    "easeOutQuad": ease_out_quad,
    "easeInOutQuad": ease_in_out_quad,
    "easeInCubic": ease_in_cubic,
    "easeOutCubic": ease_out_cubic,
    "easeInOutCubic": ease_in_out_cubic,
}


def get_easing(name: str | None) -> EasingFn:
    """Look up an easing curve; unknown or missing names are linear."""
    if name is None:
        return _linear
    return EASINGS.get(name, _linear)


def _linear(t: float) -> float:
    return t


# ============================================================================
# Builtins
# ============================================================================


def _finite_only(fn: Callable[[float], int | float]) -> Callable[[Value], int | float]:
    """Apply `fn` to finite numbers; NaN and infinities pass through unchanged."""

    def wrapper(x: Value) -> int | float:
        value = as_number(x)
        if isinstance(value, float) and not math.isfinite(value):
            return value
        return fn(value)

    return wrapper


def _trig(fn: Callable[[float], float]) -> Callable[[Value], float]:
    def wrapper(x: Value) -> float:
        value = as_number(x)
        if isinstance(value, float) and not math.isfinite(value):
            return math.nan
        return fn(value)

    return wrapper


@_finite_only
def _js_round(value: float) -> int:
    # Halves round towards positive infinity.
    return math.floor(value + 0.5)


def _sqrt(x: Value) -> float:
    value = as_number(x)
    return math.sqrt(value) if value >= 0 else math.nan


def power(base: Value, exponent: Value) -> float:
    b = as_number(base)
    e = as_number(exponent)
    if b < 0 and not float(e).is_integer():
        return math.nan
    if b == 0 and e < 0:
        return math.inf
    try:
        return math.pow(b, e)
    except OverflowError:
        if b < 0 and float(e) % 2 == 1:
            return -math.inf
        return math.inf


def _min(*args: Value) -> int | float:
    return min((as_number(arg) for arg in args), default=math.inf)


def _max(*args: Value) -> int | float:
    return max((as_number(arg) for arg in args), default=-math.inf)


def _clamp(value: Value, low: Value, high: Value) -> int | float:
    return max(as_number(low), min(as_number(high), as_number(value)))


def _lerp(a: Value, b: Value, t: Value) -> int | float:
    start = as_number(a)
    return start + (as_number(b) - start) * as_number(t)


def _len(x: Value) -> int:
    if isinstance(x, str | list):
        return len(x)
    return 0


def _substr(text: Value, start: Value, length: Value = None) -> str:
    s = to_display_string(text)
    begin = _clamp_index(as_number(start), len(s))
    if length is None:
        return s[begin:]
    end = _clamp_index(as_number(start) + as_number(length), len(s))
    return s[min(begin, end) : max(begin, end)]


def _clamp_index(index: int | float, size: int) -> int:
    if math.isnan(index):
        return 0
    return int(max(0, min(size, index)))


def _hex_channel(value: Value) -> str:
    channel = as_number(value)
    if not math.isfinite(channel):
        channel = 0
    return format(math.floor(channel), "x").rjust(2, "0")


def _rgb(r: Value, g: Value, b: Value) -> ColorValue:
    return make_color(f"#{_hex_channel(r)}{_hex_channel(g)}{_hex_channel(b)}")


def _rgba(r: Value, g: Value, b: Value, a: Value) -> ColorValue:
    return make_color(f"#{_hex_channel(r)}{_hex_channel(g)}{_hex_channel(b)}", as_number(a))


def _vec2(x: Value, y: Value) -> Vec2Value:
    return {"x": as_number(x), "y": as_number(y)}


def _vec3(x: Value, y: Value, z: Value) -> Vec3Value:
    return {"x": as_number(x), "y": as_number(y), "z": as_number(z)}


def _easing_builtin(easing: EasingFn) -> BuiltinFn:
    return lambda t: easing(as_number(t))


_DEFAULT_FUNCTIONS: Final[dict[str, BuiltinFn]] = {
    # math
    "abs": lambda x: abs(as_number(x)),
    "floor": _finite_only(math.floor),
    "ceil": _finite_only(math.ceil),
    "round": _js_round,
    "sqrt": _sqrt,
    "pow": power,
    "sin": _trig(math.sin),
    "cos": _trig(math.cos),
    "tan": _trig(math.tan),
    "random": lambda: random.random(),
    "min": _min,
    "max": _max,
    "clamp": _clamp,
    "lerp": _lerp,
    # strings
    "len": _len,
    "upper": lambda x: to_display_string(x).upper(),
    "lower": lambda x: to_display_string(x).lower(),
    "trim": lambda x: to_display_string(x).strip(),
    "concat": lambda *args: "".join(to_display_string(arg) for arg in args),
    "substr": _substr,
    # conversion
    "int": _finite_only(math.floor),
    "float": lambda x: as_number(x),
    "str": lambda x: to_display_string(x),
    "bool": lambda x: is_truthy(x),
    # colors and vectors
    "rgb": _rgb,
    "rgba": _rgba,
    "vec2": _vec2,
    "vec3": _vec3,
    # easing
    **{name: _easing_builtin(easing) for name, easing in EASINGS.items()},
}

DEFAULT_BUILTINS: Final[Mapping[str, BuiltinFn]] = MappingProxyType(_DEFAULT_FUNCTIONS)
"""Read-only view of the standard builtins; register extras on a registry from `default_builtins`."""


def default_builtins() -> BuiltinRegistry:
    """Return a fresh registry holding only the standard builtins."""
    return BuiltinRegistry(_DEFAULT_FUNCTIONS)
