"""Node kind tags shared by every AST family."""

from enum import StrEnum


class NodeKind(StrEnum):
    # -------------------------
    # Expressions
    # -------------------------
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    COLOR = "color"
    DURATION = "duration"
    IDENTIFIER = "identifier"
    VEC2 = "vec2"
    VEC3 = "vec3"
    RANGE = "range"
    REACTIVE = "reactive"
    MEMBER = "member"
    BINARY = "binary"
    UNARY = "unary"
    CALL = "call"
    LIST = "list"

    # -------------------------
    # Statements
    # -------------------------
    ANIMATE = "animate"
    SET_STATE = "setState"
    PLAY = "play"
    STOP_ANIMATION = "stopAnimation"
    EMIT = "emit"
    SET = "set"
    WHEN = "when"
    MATCH = "match"
    MATCH_CASE = "matchCase"
    ON = "on"
    IF = "if"
    ELIF = "elif"
    FOR = "for"
    WHILE = "while"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "return"

    # -------------------------
    # Render statements
    # -------------------------
    TEXT = "text"
    ROW = "row"
    CODE = "code"

    # -------------------------
    # Asset blocks
    # -------------------------
    TYPE = "type"
    PARAM = "param"
    PARAMS = "params"
    VOXEL = "voxel"
    BOX = "box"
    REPEAT = "repeat"
    CHILD = "child"
    GEOMETRY = "geometry"
    PART = "part"
    PARTS = "parts"
    PROPERTY = "property"
    STATE = "state"
    STATES = "states"
    KEYFRAME = "keyframe"
    ANIMATION = "animation"
    ANIMATIONS = "animations"

    # -------------------------
    # Layout elements
    # -------------------------
    ROOM = "room"
    DOOR = "door"
    TERMINAL = "terminal"
    SWITCH = "switch"
    WALL_LIGHT = "wallLight"
    ASSET_INSTANCE = "assetInstance"

    # -------------------------
    # Entity blocks
    # -------------------------
    SCREEN = "screen"
    RENDER = "render"
    STYLE = "style"
    STYLES = "styles"

    # -------------------------
    # Machines, config and functions
    # -------------------------
    MACHINE_STATE = "machineState"
    TRANSITION = "transition"
    CONFIG_OBJECT = "configObject"
    FUNCTION_PARAM = "functionParam"

    # -------------------------
    # Game blocks
    # -------------------------
    PLAYER_CONFIG = "playerConfig"
    CAMERA_CONFIG = "cameraConfig"
    SYNC_CONFIG = "syncConfig"
    INTERACTION_TARGET = "interactionTarget"
    DISPLAY_ROW = "displayRow"
    DISPLAY_COLOR_CONDITION = "displayColorCondition"

    # -------------------------
    # Top-level definitions
    # -------------------------
    ASSET = "asset"
    LAYOUT = "layout"
    ENTITY = "entity"
    MACHINE = "machine"
    CONFIG = "config"
    FUNCTION = "function"
    RULE = "rule"
    SCENARIO = "scenario"
    BEHAVIOR = "behavior"
    CONDITION = "condition"
    GAME = "game"
    INTERACTION = "interaction"
    DISPLAY_TEMPLATE = "displayTemplate"
    MODULE = "module"
