"""Top-level definitions and the blocks they are built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal

from forgepy.ast.expressions import ColorLiteral, DurationLiteral, Expression, Range, Vec2, Vec3
from forgepy.ast.kinds import NodeKind
from forgepy.ast.statements import OnBlock, RenderStatement, Statement
from forgepy.text.location import START, SourceLocation

CoordinateSystem = Literal["voxel", "world"]
ConditionType = Literal["victory", "defeat", "checkpoint"]
CollisionType = Literal["cylinder", "box", "none"]
CameraType = Literal["perspective", "orthographic"]


# ============================================================================
# Asset blocks
# ============================================================================


@dataclass(frozen=True, slots=True)
class TypeAnnotation:
    """Param type: `float[0..10]`, `enum(A, B)`, `ref(room)`, `list<int>`."""

    kind: ClassVar[NodeKind] = NodeKind.TYPE

    name: str
    constraint: Range | None = None
    enum_values: tuple[str, ...] | None = None
    element_type: TypeAnnotation | None = None
    ref_target: str | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ParamDef:
    kind: ClassVar[NodeKind] = NodeKind.PARAM

    name: str
    type: TypeAnnotation
    default: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ParamsBlock:
    kind: ClassVar[NodeKind] = NodeKind.PARAMS

    params: tuple[ParamDef, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class VoxelPrimitive:
    """`voxel (x, y, z) as TYPE` or the `(x, y, z) as TYPE` shorthand."""

    kind: ClassVar[NodeKind] = NodeKind.VOXEL

    position: Vec3
    type: str
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class BoxPrimitive:
    """`box START to END as TYPE` or `box START size SIZE as TYPE`."""

    kind: ClassVar[NodeKind] = NodeKind.BOX

    start: Vec3
    type: str
    end: Vec3 | None = None
    size: Vec3 | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class RepeatVariable:
    name: str
    start: Expression
    end: Expression
    step: Expression | None = None


@dataclass(frozen=True, slots=True)
class RepeatPattern:
    kind: ClassVar[NodeKind] = NodeKind.REPEAT

    variables: tuple[RepeatVariable, ...]
    body: tuple[GeometryPrimitive, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ChildRef:
    kind: ClassVar[NodeKind] = NodeKind.CHILD

    asset: str
    position: Vec3
    condition: Expression | None = None
    body: tuple[Statement, ...] | None = None
    loc: SourceLocation = field(default=START, compare=False)


type GeometryPrimitive = VoxelPrimitive | BoxPrimitive | RepeatPattern | ChildRef


@dataclass(frozen=True, slots=True)
class GeometryBlock:
    kind: ClassVar[NodeKind] = NodeKind.GEOMETRY

    primitives: tuple[GeometryPrimitive, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class Part:
    kind: ClassVar[NodeKind] = NodeKind.PART

    name: str
    geometry: tuple[GeometryPrimitive, ...]
    position: Vec3 | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class PartsBlock:
    kind: ClassVar[NodeKind] = NodeKind.PARTS

    parts: tuple[Part, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class PropertyBinding:
    """`part.property: value` inside a named state."""

    kind: ClassVar[NodeKind] = NodeKind.PROPERTY

    target: str
    value: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class StateDefinition:
    kind: ClassVar[NodeKind] = NodeKind.STATE

    name: str
    bindings: tuple[PropertyBinding, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class StatesBlock:
    kind: ClassVar[NodeKind] = NodeKind.STATES

    states: tuple[StateDefinition, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class Keyframe:
    """`50% -> open using easeInOutQuad`."""

    kind: ClassVar[NodeKind] = NodeKind.KEYFRAME

    percent: int | float
    state: str
    easing: str | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class AnimationDefinition:
    kind: ClassVar[NodeKind] = NodeKind.ANIMATION

    name: str
    duration: DurationLiteral
    keyframes: tuple[Keyframe, ...]
    loop: bool = False
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class AnimationsBlock:
    kind: ClassVar[NodeKind] = NodeKind.ANIMATIONS

    animations: tuple[AnimationDefinition, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class AssetDef:
    kind: ClassVar[NodeKind] = NodeKind.ASSET

    name: str
    display_name: str | None = None
    description: str | None = None
    anchor: Vec3 | None = None
    params: ParamsBlock | None = None
    geometry: GeometryBlock | None = None
    parts: PartsBlock | None = None
    children: tuple[ChildRef, ...] = ()
    states: StatesBlock | None = None
    animations: AnimationsBlock | None = None
    body: tuple[Statement, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


# ============================================================================
# Layout
# ============================================================================


@dataclass(frozen=True, slots=True)
class RoomDef:
    kind: ClassVar[NodeKind] = NodeKind.ROOM

    name: str
    position: Vec3
    size: Vec3
    properties: dict[str, Expression] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class DoorDef:
    kind: ClassVar[NodeKind] = NodeKind.DOOR

    name: str
    position: Vec3
    facing: str
    connects: tuple[str, str]
    control: str | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class TerminalDef:
    kind: ClassVar[NodeKind] = NodeKind.TERMINAL

    name: str
    position: Vec3
    rotation: int | float = 0
    type: str | None = None
    properties: dict[str, Expression] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class SwitchDef:
    kind: ClassVar[NodeKind] = NodeKind.SWITCH

    name: str
    position: Vec3
    rotation: int | float = 0
    status: str | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class WallLightDef:
    kind: ClassVar[NodeKind] = NodeKind.WALL_LIGHT

    name: str
    position: Vec3
    rotation: int | float = 0
    color: ColorLiteral | None = None
    intensity: int | float | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class AssetInstanceDef:
    kind: ClassVar[NodeKind] = NodeKind.ASSET_INSTANCE

    name: str
    asset: str
    position: Vec3
    rotation: int | float | None = None
    facing: str | None = None
    properties: dict[str, Expression] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class LayoutDef:
    kind: ClassVar[NodeKind] = NodeKind.LAYOUT

    name: str
    coordinate: CoordinateSystem = "voxel"
    rooms: tuple[RoomDef, ...] = ()
    doors: tuple[DoorDef, ...] = ()
    terminals: tuple[TerminalDef, ...] = ()
    switches: tuple[SwitchDef, ...] = ()
    wall_lights: tuple[WallLightDef, ...] = ()
    assets: tuple[AssetInstanceDef, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


# ============================================================================
# Entity
# ============================================================================


@dataclass(frozen=True, slots=True)
class ScreenBlock:
    kind: ClassVar[NodeKind] = NodeKind.SCREEN

    size: Vec2
    font: str | None = None
    font_size: int | float | None = None
    background: ColorLiteral | None = None
    line_height: int | float | None = None
    padding: int | float | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class RenderBlock:
    kind: ClassVar[NodeKind] = NodeKind.RENDER

    body: tuple[RenderStatement, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class StyleDef:
    kind: ClassVar[NodeKind] = NodeKind.STYLE

    name: str
    properties: dict[str, Expression]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class StylesBlock:
    kind: ClassVar[NodeKind] = NodeKind.STYLES

    styles: tuple[StyleDef, ...]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class EntityDef:
    kind: ClassVar[NodeKind] = NodeKind.ENTITY

    name: str
    params: ParamsBlock | None = None
    screen: ScreenBlock | None = None
    render: RenderBlock | None = None
    styles: StylesBlock | None = None
    body: tuple[Statement, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


# ============================================================================
# Machine
# ============================================================================


@dataclass(frozen=True, slots=True)
class MachineTransition:
    """`on EVENT -> TARGET [when GUARD] [: actions]`."""

    kind: ClassVar[NodeKind] = NodeKind.TRANSITION

    event: str
    target: str
    guard: Expression | None = None
    actions: tuple[Statement, ...] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class MachineState:
    kind: ClassVar[NodeKind] = NodeKind.MACHINE_STATE

    name: str
    transitions: tuple[MachineTransition, ...] = ()
    enter: tuple[Statement, ...] | None = None
    exit: tuple[Statement, ...] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class MachineDef:
    kind: ClassVar[NodeKind] = NodeKind.MACHINE

    name: str
    initial: str
    states: tuple[MachineState, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


# ============================================================================
# Config and functions
# ============================================================================


@dataclass(frozen=True, slots=True)
class ConfigObject:
    kind: ClassVar[NodeKind] = NodeKind.CONFIG_OBJECT

    properties: dict[str, ConfigValue]
    loc: SourceLocation = field(default=START, compare=False)


type ConfigValue = Expression | ConfigObject


@dataclass(frozen=True, slots=True)
class ConfigDef:
    """Named tree of tunable values, read back through `config.<name>.<path>`."""

    kind: ClassVar[NodeKind] = NodeKind.CONFIG

    name: str
    properties: dict[str, ConfigValue]
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class FunctionParam:
    kind: ClassVar[NodeKind] = NodeKind.FUNCTION_PARAM

    name: str
    default: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class FunctionDef:
    kind: ClassVar[NodeKind] = NodeKind.FUNCTION

    name: str
    params: tuple[FunctionParam, ...]
    body: tuple[Statement, ...]
    loc: SourceLocation = field(default=START, compare=False)


# ============================================================================
# Runtime logic
# ============================================================================


@dataclass(frozen=True, slots=True)
class RuleDef:
    """Effects run on every tick (`trigger: tick`) or when the named event fires."""

    kind: ClassVar[NodeKind] = NodeKind.RULE

    name: str
    effects: tuple[Statement, ...] = ()
    trigger: str = "tick"
    condition: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ScenarioDef:
    kind: ClassVar[NodeKind] = NodeKind.SCENARIO

    name: str
    initial: dict[str, Expression] = field(default_factory=dict)
    handlers: tuple[OnBlock, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class BehaviorDef:
    kind: ClassVar[NodeKind] = NodeKind.BEHAVIOR

    name: str
    handlers: tuple[OnBlock, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class ConditionDef:
    kind: ClassVar[NodeKind] = NodeKind.CONDITION

    name: str
    trigger: Expression
    condition_type: ConditionType = "victory"
    message: Expression | None = None
    effects: tuple[Statement, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


# ============================================================================
# Game
# ============================================================================


@dataclass(frozen=True, slots=True)
class CollisionConfig:
    type: CollisionType
    params: dict[str, Expression] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PlayerConfig:
    kind: ClassVar[NodeKind] = NodeKind.PLAYER_CONFIG

    controller: str | None = None
    spawn_room: str | None = None
    spawn_position: Vec3 | None = None
    collision: CollisionConfig | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class CameraConfig:
    kind: ClassVar[NodeKind] = NodeKind.CAMERA_CONFIG

    type: CameraType = "perspective"
    position: Vec3 | None = None
    look_at: Vec3 | None = None
    fov: int | float | None = None
    view_size: int | float | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Entity name -> dotted state path whose value drives its position."""

    kind: ClassVar[NodeKind] = NodeKind.SYNC_CONFIG

    entries: dict[str, str] = field(default_factory=dict)
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class GameDef:
    kind: ClassVar[NodeKind] = NodeKind.GAME

    name: str
    ship: str | None = None
    layout: str | None = None
    scenario: str | None = None
    player: PlayerConfig | None = None
    camera: CameraConfig | None = None
    sync: SyncConfig | None = None
    on_start: tuple[Statement, ...] | None = None
    on_victory: tuple[Statement, ...] | None = None
    on_gameover: tuple[Statement, ...] | None = None
    properties: dict[str, Expression] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class InteractionTarget:
    """`entity [where COND]` or a bare entity type name."""

    kind: ClassVar[NodeKind] = NodeKind.INTERACTION_TARGET

    entity_type: str | None = None
    condition: Expression | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class InteractionDef:
    kind: ClassVar[NodeKind] = NodeKind.INTERACTION

    name: str
    target: InteractionTarget | None = None
    range: Expression | None = None
    prompt: Expression | None = None
    prompt_broken: Expression | None = None
    on_interact: tuple[Statement, ...] | None = None
    properties: dict[str, Expression] | None = None
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class DisplayColorCondition:
    """`warning when o2_level < 50`."""

    kind: ClassVar[NodeKind] = NodeKind.DISPLAY_COLOR_CONDITION

    color_name: str
    condition: Expression
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class DisplayRow:
    kind: ClassVar[NodeKind] = NodeKind.DISPLAY_ROW

    label: Expression
    value: Expression
    color_conditions: tuple[DisplayColorCondition, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)


@dataclass(frozen=True, slots=True)
class DisplayTemplateDef:
    kind: ClassVar[NodeKind] = NodeKind.DISPLAY_TEMPLATE

    name: str
    width: Expression | None = None
    height: Expression | None = None
    header: Expression | None = None
    footer: Expression | None = None
    rows: tuple[DisplayRow, ...] = ()
    properties: dict[str, Expression] | None = None
    loc: SourceLocation = field(default=START, compare=False)


type Definition = (
    AssetDef
    | LayoutDef
    | EntityDef
    | MachineDef
    | ConfigDef
    | FunctionDef
    | RuleDef
    | ScenarioDef
    | BehaviorDef
    | ConditionDef
    | GameDef
    | InteractionDef
    | DisplayTemplateDef
)


@dataclass(frozen=True, slots=True)
class Module:
    """One parsed source file: definitions in source order."""

    kind: ClassVar[NodeKind] = NodeKind.MODULE

    definitions: tuple[Definition, ...] = ()
    loc: SourceLocation = field(default=START, compare=False)

    def of_type[T](self, cls: type[T]) -> list[T]:
        """Definitions that are instances of `cls`, in source order."""
        return [definition for definition in self.definitions if isinstance(definition, cls)]


__all__ = [
    "AnimationDefinition",
    "AnimationsBlock",
    "AssetDef",
    "AssetInstanceDef",
    "BehaviorDef",
    "BoxPrimitive",
    "CameraConfig",
    "CameraType",
    "ChildRef",
    "CollisionConfig",
    "CollisionType",
    "ConditionDef",
    "ConditionType",
    "ConfigDef",
    "ConfigObject",
    "ConfigValue",
    "CoordinateSystem",
    "Definition",
    "DisplayColorCondition",
    "DisplayRow",
    "DisplayTemplateDef",
    "DoorDef",
    "EntityDef",
    "FunctionDef",
    "FunctionParam",
    "GameDef",
    "GeometryBlock",
    "GeometryPrimitive",
    "InteractionDef",
    "InteractionTarget",
    "Keyframe",
    "LayoutDef",
    "MachineDef",
    "MachineState",
    "MachineTransition",
    "Module",
    "ParamDef",
    "ParamsBlock",
    "Part",
    "PartsBlock",
    "PlayerConfig",
    "PropertyBinding",
    "RenderBlock",
    "RepeatPattern",
    "RepeatVariable",
    "RoomDef",
    "RuleDef",
    "ScenarioDef",
    "ScreenBlock",
    "StateDefinition",
    "StatesBlock",
    "StyleDef",
    "StylesBlock",
    "SwitchDef",
    "SyncConfig",
    "TerminalDef",
    "TypeAnnotation",
    "VoxelPrimitive",
    "WallLightDef",
]
