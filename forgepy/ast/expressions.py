"""Expression nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal

from forgepy.ast.kinds import NodeKind
from forgepy.text.location import START, SourceLocation

DurationUnit = Literal["ms", "s", "m", "h"]


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    kind: ClassVar[NodeKind] = NodeKind.NUMBER

    value: int | float
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class StringLiteral:
    kind: ClassVar[NodeKind] = NodeKind.STRING

    value: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class BooleanLiteral:
    kind: ClassVar[NodeKind] = NodeKind.BOOLEAN

    value: bool
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ColorLiteral:
    """Color literal, `value` keeps the `#` prefix (`#rgb`, `#rrggbb`, ...)."""

    kind: ClassVar[NodeKind] = NodeKind.COLOR

    value: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class DurationLiteral:
    """Duration normalised to milliseconds; `unit` is the unit as written."""

    kind: ClassVar[NodeKind] = NodeKind.DURATION

    value: int | float
    unit: DurationUnit
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class Identifier:
    kind: ClassVar[NodeKind] = NodeKind.IDENTIFIER

    name: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class Vec2:
    kind: ClassVar[NodeKind] = NodeKind.VEC2

    x: Expression
    y: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class Vec3:
    kind: ClassVar[NodeKind] = NodeKind.VEC3

    x: Expression
    y: Expression
    z: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive numeric range, written `lo..hi` inside type constraints."""

    kind: ClassVar[NodeKind] = NodeKind.RANGE

    start: Expression
    end: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ReactiveRef:
    """`$a.b.c`, resolved against live state (or config) rather than variables."""

    kind: ClassVar[NodeKind] = NodeKind.REACTIVE

    path: tuple[str, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class MemberAccess:
    kind: ClassVar[NodeKind] = NodeKind.MEMBER

    object: Expression
    property: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class BinaryOp:
    kind: ClassVar[NodeKind] = NodeKind.BINARY

    operator: str
    left: Expression
    right: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class UnaryOp:
    kind: ClassVar[NodeKind] = NodeKind.UNARY

    operator: str
    operand: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class FunctionCall:
    kind: ClassVar[NodeKind] = NodeKind.CALL

    name: str
    args: tuple[Expression, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ListLiteral:
    kind: ClassVar[NodeKind] = NodeKind.LIST

    elements: tuple[Expression, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


type LiteralExpression = NumberLiteral | StringLiteral | BooleanLiteral | ColorLiteral | DurationLiteral
type Expression = (
    NumberLiteral
    | StringLiteral
    | BooleanLiteral
    | ColorLiteral
    | DurationLiteral
    | Identifier
    | Vec2
    | Vec3
    | Range
    | ReactiveRef
    | MemberAccess
    | BinaryOp
    | UnaryOp
    | FunctionCall
    | ListLiteral
)


__all__ = [
    "BinaryOp",
    "BooleanLiteral",
    "ColorLiteral",
    "DurationLiteral",
    "DurationUnit",
    "Expression",
    "FunctionCall",
    "Identifier",
    "ListLiteral",
    "LiteralExpression",
    "MemberAccess",
    "NumberLiteral",
    "Range",
    "ReactiveRef",
    "StringLiteral",
    "UnaryOp",
    "Vec2",
    "Vec3",
]
