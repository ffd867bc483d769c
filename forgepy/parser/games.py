"""Game-level definitions: games, interactions and display templates."""

from typing import cast

from forgepy.ast import (
    CameraConfig,
    CameraType,
    CollisionConfig,
    CollisionType,
    DisplayColorCondition,
    DisplayRow,
    DisplayTemplateDef,
    Expression,
    GameDef,
    InteractionDef,
    InteractionTarget,
    NumberLiteral,
    PlayerConfig,
    Statement,
    SyncConfig,
    Vec3,
)
from forgepy.lexer import TokenKind
from forgepy.parser.expressions import parse_expression, parse_vec3
from forgepy.parser.parser import Parser
from forgepy.parser.statements import parse_body

_CAMERA_TYPES: frozenset[str] = frozenset({"perspective", "orthographic"})


def _parse_property(parser: Parser, properties: dict[str, Expression] | None) -> dict[str, Expression]:
    """Parse a free-form `name: expression` line into `properties`."""
    name = parser.bump().value
    parser.expect(TokenKind.COLON)
    properties = properties or {}
    properties[name] = parse_expression(parser)
    parser.expect_newline_or_dedent()
    return properties


def _parse_string_property(parser: Parser) -> str:
    parser.bump()
    parser.expect(TokenKind.COLON)
    value = parser.expect(TokenKind.STRING).value
    parser.expect_newline_or_dedent()
    return value


def _parse_expression_property(parser: Parser) -> Expression:
    parser.bump()
    parser.expect(TokenKind.COLON)
    value = parse_expression(parser)
    parser.expect_newline_or_dedent()
    return value


# ============================================================================
# Games
# ============================================================================


def parse_game(parser: Parser) -> GameDef:
    """Parse a game definition.

    ```
    game galley_escape
      ship: "galley"
      scenario: "galley_escape"
      player:
        controller: first_person
        spawn_position: (0, 0.1, 0)
      on start:
        emit "intro"
    ```
    """
    loc = parser.location
    parser.expect_keyword("game")
    name = parser.expect_name()
    parser.open_block()

    ship: str | None = None
    layout: str | None = None
    scenario: str | None = None
    player: PlayerConfig | None = None
    camera: CameraConfig | None = None
    sync: SyncConfig | None = None
    handlers: dict[str, tuple[Statement, ...]] = {}
    properties: dict[str, Expression] | None = None

    for token in parser.block_items():
        match token.kind, token.value:
            case TokenKind.KEYWORD, "ship":
                ship = _parse_string_property(parser)
            case TokenKind.KEYWORD, "layout":
                layout = _parse_string_property(parser)
            case TokenKind.KEYWORD, "scenario":
                scenario = _parse_string_property(parser)
            case TokenKind.KEYWORD, "player":
                player = _parse_player(parser)
            case TokenKind.KEYWORD, "camera":
                camera = _parse_camera(parser)
            case TokenKind.KEYWORD, "sync":
                sync = _parse_sync(parser)
            case TokenKind.KEYWORD, "on":
                parser.bump()
                event = parser.expect_name()
                parser.expect(TokenKind.COLON)
                handlers[event] = parse_body(parser)
            case _ if parser.at_property_name():
                properties = _parse_property(parser, properties)
            case TokenKind.KEYWORD, _:
                raise parser.error(f"Unexpected keyword '{token.value}' in game")
            case _:
                raise parser.error(f"Unexpected token in game: {token.value}")

    return GameDef(
        name,
        ship=ship,
        layout=layout,
        scenario=scenario,
        player=player,
        camera=camera,
        sync=sync,
        on_start=handlers.get("start"),
        on_victory=handlers.get("victory"),
        on_gameover=handlers.get("gameover"),
        properties=properties,
        loc=loc,
    )


def _parse_player(parser: Parser) -> PlayerConfig:
    loc = parser.location
    parser.expect_keyword("player")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    controller: str | None = None
    spawn_room: str | None = None
    spawn_position: Vec3 | None = None
    collision: CollisionConfig | None = None

    for token in parser.block_items():
        if not token.kind.is_name:
            raise parser.error(f"Unexpected token in player config: {token.value}")
        parser.bump()
        parser.expect(TokenKind.COLON)

        match token.value:
            case "controller":
                controller = parser.expect_name()
            case "spawn_room":
                spawn_room = parser.expect(TokenKind.STRING).value
            case "spawn_position":
                spawn_position = parse_vec3(parser)
            case "collision":
                collision = _parse_collision(parser)
            case _:
                parse_expression(parser)
        parser.expect_newline_or_dedent()

    return PlayerConfig(controller, spawn_room, spawn_position, collision, loc)


def _parse_collision(parser: Parser) -> CollisionConfig:
    """`cylinder { height: 1.6, radius: 0.35 }`, `box { ... }` or `none`."""
    token = parser.current
    if not token.kind.is_name:
        raise parser.error(f"Expected collision type, got {token.kind.name}")
    parser.bump()

    if token.value == "none":
        return CollisionConfig("none")
    if token.value not in ("cylinder", "box"):
        raise parser.error(f"Unknown collision type '{token.value}', expected cylinder, box, or none")

    params: dict[str, Expression] = {}
    if parser.at(TokenKind.LBRACE):
        parser.bump()
        while not parser.at(TokenKind.RBRACE) and not parser.at_eof:
            name = parser.expect_name()
            parser.expect(TokenKind.COLON)
            params[name] = parse_expression(parser)
            if parser.at(TokenKind.COMMA):
                parser.bump()
        parser.expect(TokenKind.RBRACE)

    return CollisionConfig(cast(CollisionType, token.value), params)


def _parse_camera(parser: Parser) -> CameraConfig:
    loc = parser.location
    parser.expect_keyword("camera")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    camera_type: CameraType = "perspective"
    position: Vec3 | None = None
    look_at: Vec3 | None = None
    fov: int | float | None = None
    view_size: int | float | None = None

    for token in parser.block_items():
        if not token.kind.is_name:
            raise parser.error(f"Unexpected token in camera config: {token.value}")
        parser.bump()
        parser.expect(TokenKind.COLON)

        match token.value:
            case "type":
                value = parser.expect_name()
                if value not in _CAMERA_TYPES:
                    raise parser.error(f"Invalid camera type '{value}', expected perspective or orthographic")
                camera_type = cast(CameraType, value)
            case "position":
                position = parse_vec3(parser)
            case "lookAt":
                look_at = parse_vec3(parser)
            case "fov":
                if isinstance(expr := parse_expression(parser), NumberLiteral):
                    fov = expr.value
            case "viewSize":
                if isinstance(expr := parse_expression(parser), NumberLiteral):
                    view_size = expr.value
            case _:
                parse_expression(parser)
        parser.expect_newline_or_dedent()

    return CameraConfig(camera_type, position, look_at, fov, view_size, loc)


def _parse_sync(parser: Parser) -> SyncConfig:
    loc = parser.location
    parser.expect_keyword("sync")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    entries: dict[str, str] = {}
    for token in parser.block_items():
        if not parser.at_property_name():
            raise parser.error(f"Unexpected token in sync config: {token.value}")
        parser.bump()
        parser.expect(TokenKind.COLON)
        entries[token.value] = parser.expect(TokenKind.STRING).value
        parser.expect_newline_or_dedent()

    return SyncConfig(entries, loc)


# ============================================================================
# Interactions
# ============================================================================


def parse_interaction(parser: Parser) -> InteractionDef:
    """Parse an interaction definition.

    ```
    interaction switch_use
      target: entity where voxel_type == "switch"
      range: 2.0
      prompt: "Press [E] to use {name}"
      on_interact:
        emit "toggle"
    ```
    """
    loc = parser.location
    parser.expect_keyword("interaction")
    name = parser.expect_name()
    parser.open_block()

    target: InteractionTarget | None = None
    range_: Expression | None = None
    prompt: Expression | None = None
    prompt_broken: Expression | None = None
    on_interact: tuple[Statement, ...] | None = None
    properties: dict[str, Expression] | None = None

    for token in parser.block_items():
        match token.kind, token.value:
            case TokenKind.KEYWORD, "target":
                parser.bump()
                parser.expect(TokenKind.COLON)
                target = _parse_interaction_target(parser)
                parser.expect_newline_or_dedent()
            case TokenKind.KEYWORD, "range":
                range_ = _parse_expression_property(parser)
            case TokenKind.KEYWORD, "prompt":
                prompt = _parse_expression_property(parser)
            case TokenKind.KEYWORD, "prompt_broken":
                prompt_broken = _parse_expression_property(parser)
            case TokenKind.KEYWORD, "on_interact":
                parser.bump()
                parser.expect(TokenKind.COLON)
                on_interact = parse_body(parser)
            case _ if parser.at_property_name():
                properties = _parse_property(parser, properties)
            case TokenKind.KEYWORD, _:
                raise parser.error(f"Unexpected keyword '{token.value}' in interaction")
            case _:
                raise parser.error(f"Unexpected token in interaction: {token.value}")

    return InteractionDef(name, target, range_, prompt, prompt_broken, on_interact, properties, loc)


def _parse_interaction_target(parser: Parser) -> InteractionTarget:
    loc = parser.location
    token = parser.current

    if token.is_keyword("entity"):
        parser.bump()
        condition: Expression | None = None
        if parser.at_keyword("where"):
            parser.bump()
            condition = parse_expression(parser)
        return InteractionTarget(None, condition, loc)

    if token.kind == TokenKind.IDENTIFIER:
        parser.bump()
        return InteractionTarget(token.value, None, loc)

    raise parser.error(f"Expected entity type or 'entity where', got {token.kind.name}")


# ============================================================================
# Display templates
# ============================================================================


def parse_display_template(parser: Parser) -> DisplayTemplateDef:
    """Parse a display template.

    ```
    display-template status_terminal
      width: 40
      header: "=== {location} STATUS ==="
      rows:
        - label: "O2 LEVEL"
          value: "{o2_level}%"
          color:
            nominal when o2_level >= 50
            error when o2_level < 20
    ```
    """
    loc = parser.location
    parser.expect_keyword("display-template")
    name = parser.expect_name()
    parser.open_block()

    fields: dict[str, Expression] = {}
    rows: tuple[DisplayRow, ...] = ()
    properties: dict[str, Expression] | None = None

    for token in parser.block_items():
        match token.kind, token.value:
            case TokenKind.KEYWORD, "width" | "height" | "header" | "footer":
                fields[token.value] = _parse_expression_property(parser)
            case TokenKind.KEYWORD, "rows":
                parser.bump()
                parser.expect(TokenKind.COLON)
                parser.open_block()
                rows = tuple(_parse_display_row(parser) for _ in parser.block_items())
            case _ if parser.at_property_name():
                properties = _parse_property(parser, properties)
            case TokenKind.KEYWORD, _:
                raise parser.error(f"Unexpected keyword '{token.value}' in display-template")
            case _:
                raise parser.error(f"Unexpected token in display-template: {token.value}")

    return DisplayTemplateDef(
        name,
        width=fields.get("width"),
        height=fields.get("height"),
        header=fields.get("header"),
        footer=fields.get("footer"),
        rows=rows,
        properties=properties,
        loc=loc,
    )


def _parse_display_row(parser: Parser) -> DisplayRow:
    if not parser.at(TokenKind.MINUS):
        raise parser.error(f"Expected '-' for row item, got {parser.current.kind.name}")
    parser.bump()

    loc = parser.location
    parser.expect_keyword("label")
    parser.expect(TokenKind.COLON)
    label = parse_expression(parser)
    parser.expect_newline()
    parser.expect_indent()

    parser.expect_keyword("value")
    parser.expect(TokenKind.COLON)
    value = parse_expression(parser)
    parser.expect_newline_or_dedent()

    conditions: tuple[DisplayColorCondition, ...] = ()
    if parser.at_keyword("color"):
        parser.bump()
        parser.expect(TokenKind.COLON)
        parser.open_block()
        conditions = tuple(_parse_color_condition(parser) for _ in parser.block_items())

    parser.consume_dedent()
    return DisplayRow(label, value, conditions, loc)


def _parse_color_condition(parser: Parser) -> DisplayColorCondition:
    loc = parser.location
    token = parser.current
    if not token.kind.is_name:
        raise parser.error(f"Expected color name, got {token.kind.name}")
    parser.bump()
    parser.expect_keyword("when")
    condition = parse_expression(parser)
    parser.expect_newline_or_dedent()
    return DisplayColorCondition(token.value, condition, loc)
