"""Statement nodes, including the render statements used by entity screens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from forgepy.ast.expressions import Expression
from forgepy.ast.kinds import NodeKind
from forgepy.text.location import START, SourceLocation


@dataclass(frozen=True, slots=True)
class AnimateStatement:
    """`animate spin on z at $speed`."""

    kind: ClassVar[NodeKind] = NodeKind.ANIMATE

    animation: str
    axis: str | None = None
    speed: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class SetStateStatement:
    kind: ClassVar[NodeKind] = NodeKind.SET_STATE

    state: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class PlayStatement:
    kind: ClassVar[NodeKind] = NodeKind.PLAY

    animation: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class StopAnimationStatement:
    kind: ClassVar[NodeKind] = NodeKind.STOP_ANIMATION

    animation: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class EmitStatement:
    kind: ClassVar[NodeKind] = NodeKind.EMIT

    event: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class SetStatement:
    """`set property: value`; `property` may be a dotted state path."""

    kind: ClassVar[NodeKind] = NodeKind.SET

    property: str
    value: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class WhenBlock:
    kind: ClassVar[NodeKind] = NodeKind.WHEN

    condition: Expression
    body: tuple[Statement, ...]
    else_body: tuple[Statement, ...] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class MatchCase:
    kind: ClassVar[NodeKind] = NodeKind.MATCH_CASE

    pattern: Expression
    body: tuple[Statement | RenderStatement, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class MatchBlock:
    kind: ClassVar[NodeKind] = NodeKind.MATCH

    expression: Expression
    cases: tuple[MatchCase, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class OnBlock:
    """Event handler; `condition` is the optional `when` guard."""

    kind: ClassVar[NodeKind] = NodeKind.ON

    event: str
    body: tuple[Statement, ...]
    condition: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ElifClause:
    kind: ClassVar[NodeKind] = NodeKind.ELIF

    condition: Expression
    body: tuple[Statement, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class IfStatement:
    kind: ClassVar[NodeKind] = NodeKind.IF

    condition: Expression
    body: tuple[Statement, ...]
    elif_clauses: tuple[ElifClause, ...] = ()
    else_body: tuple[Statement, ...] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ForStatement:
    kind: ClassVar[NodeKind] = NodeKind.FOR

    variable: str
    iterable: Expression
    body: tuple[Statement, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class WhileStatement:
    kind: ClassVar[NodeKind] = NodeKind.WHILE

    condition: Expression
    body: tuple[Statement, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class BreakStatement:
    kind: ClassVar[NodeKind] = NodeKind.BREAK

    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ContinueStatement:
    kind: ClassVar[NodeKind] = NodeKind.CONTINUE

    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    kind: ClassVar[NodeKind] = NodeKind.RETURN

    value: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class TextRender:
    kind: ClassVar[NodeKind] = NodeKind.TEXT

    content: Expression
    centered: bool = False
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class RowRender:
    kind: ClassVar[NodeKind] = NodeKind.ROW

    label: Expression
    value: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class CodeRender:
    kind: ClassVar[NodeKind] = NodeKind.CODE

    content: Expression
    line_numbers: bool = False
    loc: SourceLocation = field(default=START, compare=False)


type Statement = (
    AnimateStatement
    | SetStateStatement
    | PlayStatement
    | StopAnimationStatement
    | EmitStatement
    | SetStatement
    | WhenBlock
    | MatchBlock
    | OnBlock
    | IfStatement
    | ForStatement
    | WhileStatement
    | BreakStatement
    | ContinueStatement
    | ReturnStatement
)
type RenderStatement = TextRender | RowRender | CodeRender | MatchBlock


__all__ = [
    "AnimateStatement",
    "BreakStatement",
    "CodeRender",
    "ContinueStatement",
    "ElifClause",
    "EmitStatement",
    "ForStatement",
    "IfStatement",
    "MatchBlock",
    "MatchCase",
    "OnBlock",
    "PlayStatement",
    "RenderStatement",
    "ReturnStatement",
    "RowRender",
    "SetStateStatement",
    "SetStatement",
    "Statement",
    "StopAnimationStatement",
    "TextRender",
    "WhenBlock",
    "WhileStatement",
]
