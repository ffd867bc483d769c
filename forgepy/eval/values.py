"""Runtime values and the coercions the evaluator applies to them.

Values are plain Python data: `None`, `bool`, `int`/`float`, `str`, lists and
dicts. Colors, vectors and ranges are dicts with fixed keys so they can be
stored in VM state and compared structurally.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, TypedDict

type Value = None | bool | int | float | str | list[Value] | dict[str, Any]


class ColorValue(TypedDict, total=False):
    hex: str
    intensity: int | float


class Vec2Value(TypedDict):
    x: int | float
    y: int | float


class Vec3Value(TypedDict):
    x: int | float
    y: int | float
    z: int | float


class RangeValue(TypedDict):
    start: int | float
    end: int | float


_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def as_number(value: object) -> int | float:
    """Coerce to a number: booleans are 0/1, strings parse their leading number, anything else is 0."""
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match is None:
            return 0
        number = float(match.group(0))
        return int(number) if number.is_integer() and "." not in match.group(0) else number
    return 0


def is_truthy(value: object) -> bool:
    """False for `None`, `False`, zero, NaN and the empty string; true for everything else."""
    match value:
        case None:
            return False
        case bool():
            return value
        case int() | float():
            return value != 0 and not math.isnan(value)
        case str():
            return len(value) > 0
        case _:
            return True


def strict_equals(left: object, right: object) -> bool:
    """Equality without cross-type coercion: `True` never equals `1`."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, int | float) and isinstance(right, int | float):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def format_number(value: int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_display_string(value: object) -> str:
    """Render a value the way string concatenation shows it."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case int() | float():
            return format_number(value)
        case str():
            return value
        case list():
            return ",".join("" if item is None else to_display_string(item) for item in value)
        case _:
            return "[object Object]"


def get_nested_value(root: object, path: Iterable[str]) -> Any:
    """Walk `path` through nested dicts; a missing key or a non-dict step yields `None`."""
    current = root
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def set_nested_value(root: dict[str, Any], path: list[str], value: object) -> None:
    """Write `value` at `path`, replacing any non-dict intermediate with a dict."""
    current = root
    for key in path[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[path[-1]] = value


def make_color(hex_value: str, intensity: int | float | None = None) -> ColorValue:
    color: ColorValue = {"hex": hex_value}
    if intensity is not None:
        color["intensity"] = intensity
    return color


def is_color(value: object) -> bool:
    return isinstance(value, Mapping) and "hex" in value


def is_range(value: object) -> bool:
    return isinstance(value, Mapping) and "start" in value and "end" in value
