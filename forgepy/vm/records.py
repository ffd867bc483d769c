"""Runtime records the VM builds once per loaded definition."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from forgepy.ast import (
    CameraType,
    CollisionType,
    ConditionType,
    DisplayColorCondition,
    Expression,
    OnBlock,
    Statement,
)
from forgepy.eval import Value, Vec3Value


@dataclass(frozen=True, slots=True)
class VMEvent:
    name: str
    data: dict[str, Any] | None = None


type VMEventListener = Callable[[VMEvent], None]


@dataclass(frozen=True, slots=True)
class VMRule:
    name: str
    trigger: str
    effects: tuple[Statement, ...]
    condition: Expression | None = None


@dataclass(frozen=True, slots=True)
class VMScenario:
    name: str
    initial: dict[str, Expression]
    handlers: tuple[OnBlock, ...]


@dataclass(frozen=True, slots=True)
class VMBehavior:
    name: str
    handlers: tuple[OnBlock, ...]


@dataclass(slots=True)
class VMCondition:
    """Checked every tick; `fired` latches until `reset_conditions`."""

    name: str
    condition_type: ConditionType
    trigger: Expression
    effects: tuple[Statement, ...]
    message: Expression | None = None
    fired: bool = False


# ============================================================================
# Games
# ============================================================================


@dataclass(frozen=True, slots=True)
class VMCollision:
    type: CollisionType
    params: dict[str, int | float]


@dataclass(frozen=True, slots=True)
class VMPlayer:
    controller: str | None = None
    spawn_room: str | None = None
    spawn_position: Vec3Value | None = None
    collision: VMCollision | None = None


@dataclass(frozen=True, slots=True)
class VMCamera:
    type: CameraType
    position: Vec3Value | None = None
    look_at: Vec3Value | None = None
    fov: int | float | None = None
    view_size: int | float | None = None


@dataclass(frozen=True, slots=True)
class VMGame:
    name: str
    ship: str | None = None
    layout: str | None = None
    scenario: str | None = None
    player: VMPlayer | None = None
    camera: VMCamera | None = None
    sync: dict[str, str] | None = None
    on_start: tuple[Statement, ...] = ()
    on_victory: tuple[Statement, ...] = ()
    on_gameover: tuple[Statement, ...] = ()
    properties: dict[str, Value] = field(default_factory=dict)


# ============================================================================
# Interactions
# ============================================================================


@dataclass(frozen=True, slots=True)
class VMInteractionTarget:
    entity_type: str | None = None
    condition: Expression | None = None


@dataclass(frozen=True, slots=True)
class VMInteraction:
    name: str
    target: VMInteractionTarget | None = None
    range: int | float | None = None
    prompt: str | None = None
    prompt_broken: str | None = None
    on_interact: tuple[Statement, ...] = ()
    properties: dict[str, Value] = field(default_factory=dict)


# ============================================================================
# Display templates
# ============================================================================


@dataclass(frozen=True, slots=True)
class VMDisplayRow:
    """`label` and `value` keep their `{key}` placeholders until rendering."""

    label: str
    value: str
    color_conditions: tuple[DisplayColorCondition, ...] = ()


@dataclass(frozen=True, slots=True)
class VMDisplayTemplate:
    name: str
    width: int | float | None = None
    height: int | float | None = None
    header: str | None = None
    footer: str | None = None
    rows: tuple[VMDisplayRow, ...] = ()
    properties: dict[str, Value] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RenderedRow:
    label: str
    value: str
    color: str = "nominal"


@dataclass(frozen=True, slots=True)
class RenderedDisplay:
    header: str | None = None
    footer: str | None = None
    rows: tuple[RenderedRow, ...] = ()
