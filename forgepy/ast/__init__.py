"""Kind-tagged AST for Forge source."""

from forgepy.ast.definitions import (
    AnimationDefinition,
    AnimationsBlock,
    AssetDef,
    AssetInstanceDef,
    BehaviorDef,
    BoxPrimitive,
    CameraConfig,
    CameraType,
    ChildRef,
    CollisionConfig,
    CollisionType,
    ConditionDef,
    ConditionType,
    ConfigDef,
    ConfigObject,
    ConfigValue,
    CoordinateSystem,
    Definition,
    DisplayColorCondition,
    DisplayRow,
    DisplayTemplateDef,
    DoorDef,
    EntityDef,
    FunctionDef,
    FunctionParam,
    GameDef,
    GeometryBlock,
    GeometryPrimitive,
    InteractionDef,
    InteractionTarget,
    Keyframe,
    LayoutDef,
    MachineDef,
    MachineState,
    MachineTransition,
    Module,
    ParamDef,
    ParamsBlock,
    Part,
    PartsBlock,
    PlayerConfig,
    PropertyBinding,
    RenderBlock,
    RepeatPattern,
    RepeatVariable,
    RoomDef,
    RuleDef,
    ScenarioDef,
    ScreenBlock,
    StateDefinition,
    StatesBlock,
    StyleDef,
    StylesBlock,
    SwitchDef,
    SyncConfig,
    TerminalDef,
    TypeAnnotation,
    VoxelPrimitive,
    WallLightDef,
)
from forgepy.ast.expressions import (
    BinaryOp,
    BooleanLiteral,
    ColorLiteral,
    DurationLiteral,
    DurationUnit,
    Expression,
    FunctionCall,
    Identifier,
    ListLiteral,
    LiteralExpression,
    MemberAccess,
    NumberLiteral,
    Range,
    ReactiveRef,
    StringLiteral,
    UnaryOp,
    Vec2,
    Vec3,
)
from forgepy.ast.kinds import NodeKind
from forgepy.ast.statements import (
    AnimateStatement,
    BreakStatement,
    CodeRender,
    ContinueStatement,
    ElifClause,
    EmitStatement,
    ForStatement,
    IfStatement,
    MatchBlock,
    MatchCase,
    OnBlock,
    PlayStatement,
    RenderStatement,
    ReturnStatement,
    RowRender,
    SetStateStatement,
    SetStatement,
    Statement,
    StopAnimationStatement,
    TextRender,
    WhenBlock,
    WhileStatement,
)

__all__ = [
    "AnimateStatement",
    "AnimationDefinition",
    "AnimationsBlock",
    "AssetDef",
    "AssetInstanceDef",
    "BehaviorDef",
    "BinaryOp",
    "BooleanLiteral",
    "BoxPrimitive",
    "BreakStatement",
    "CameraConfig",
    "CameraType",
    "ChildRef",
    "CodeRender",
    "CollisionConfig",
    "CollisionType",
    "ColorLiteral",
    "ConditionDef",
    "ConditionType",
    "ConfigDef",
    "ConfigObject",
    "ConfigValue",
    "ContinueStatement",
    "CoordinateSystem",
    "Definition",
    "DisplayColorCondition",
    "DisplayRow",
    "DisplayTemplateDef",
    "DoorDef",
    "DurationLiteral",
    "DurationUnit",
    "ElifClause",
    "EmitStatement",
    "EntityDef",
    "Expression",
    "ForStatement",
    "FunctionCall",
    "FunctionDef",
    "FunctionParam",
    "GameDef",
    "GeometryBlock",
    "GeometryPrimitive",
    "Identifier",
    "IfStatement",
    "InteractionDef",
    "InteractionTarget",
    "Keyframe",
    "LayoutDef",
    "ListLiteral",
    "LiteralExpression",
    "MachineDef",
    "MachineState",
    "MachineTransition",
    "MatchBlock",
    "MatchCase",
    "MemberAccess",
    "Module",
    "NodeKind",
    "NumberLiteral",
    "OnBlock",
    "ParamDef",
    "ParamsBlock",
    "Part",
    "PartsBlock",
    "PlayStatement",
    "PlayerConfig",
    "PropertyBinding",
    "Range",
    "ReactiveRef",
    "RenderBlock",
    "RenderStatement",
    "RepeatPattern",
    "RepeatVariable",
    "ReturnStatement",
    "RoomDef",
    "RowRender",
    "RuleDef",
    "ScenarioDef",
    "ScreenBlock",
    "SetStateStatement",
    "SetStatement",
    "StateDefinition",
    "Statement",
    "StatesBlock",
    "StopAnimationStatement",
    "StringLiteral",
    "StyleDef",
    "StylesBlock",
    "SwitchDef",
    "SyncConfig",
    "TerminalDef",
    "TextRender",
    "TypeAnnotation",
    "UnaryOp",
    "Vec2",
    "Vec3",
    "VoxelPrimitive",
    "WallLightDef",
    "WhenBlock",
    "WhileStatement",
]
