"""Layout definitions: rooms, doors, terminals, switches, lights and placed assets."""

from collections.abc import Callable, Iterator
from typing import cast

from forgepy.ast import (
    AssetInstanceDef,
    ColorLiteral,
    CoordinateSystem,
    DoorDef,
    Expression,
    LayoutDef,
    RoomDef,
    SwitchDef,
    TerminalDef,
    WallLightDef,
)
from forgepy.lexer import TokenKind
from forgepy.parser.expressions import parse_expression, parse_number_token, parse_vec3
from forgepy.parser.parser import Parser

_COORDINATE_SYSTEMS: frozenset[str] = frozenset({"voxel", "world"})


def parse_layout(parser: Parser) -> LayoutDef:
    loc = parser.location
    parser.expect_keyword("layout")
    name = parser.expect_name()
    parser.open_block()

    coordinate: CoordinateSystem = "voxel"
    rooms: tuple[RoomDef, ...] = ()
    doors: tuple[DoorDef, ...] = ()
    terminals: tuple[TerminalDef, ...] = ()
    switches: tuple[SwitchDef, ...] = ()
    wall_lights: tuple[WallLightDef, ...] = ()
    assets: tuple[AssetInstanceDef, ...] = ()

    for token in parser.block_items():
        if token.kind != TokenKind.KEYWORD:
            raise parser.error(f"Unexpected token in layout: {token.value}")

        match token.value:
            case "coordinate":
                parser.bump()
                parser.expect(TokenKind.COLON)
                value = parser.expect_name()
                if value not in _COORDINATE_SYSTEMS:
                    raise parser.error(f"Invalid coordinate system: {value}")
                coordinate = cast(CoordinateSystem, value)
                parser.expect_newline_or_dedent()
            case "rooms":
                rooms = _parse_section(parser, "rooms", _parse_room)
            case "doors":
                doors = _parse_section(parser, "doors", _parse_door)
            case "terminals":
                terminals = _parse_section(parser, "terminals", _parse_terminal)
            case "switches":
                switches = _parse_section(parser, "switches", _parse_switch)
            case "wallLights":
                wall_lights = _parse_section(parser, "wallLights", _parse_wall_light)
            case "assets":
                assets = _parse_section(parser, "assets", _parse_asset_instance)
            case _:
                raise parser.error(f"Unexpected keyword '{token.value}' in layout")

    return LayoutDef(name, coordinate, rooms, doors, terminals, switches, wall_lights, assets, loc)


def _parse_section[T](parser: Parser, keyword: str, parse_item: Callable[[Parser], T]) -> tuple[T, ...]:
    parser.expect_keyword(keyword)
    parser.expect(TokenKind.COLON)
    parser.open_block()
    return tuple(parse_item(parser) for _ in parser.block_items())


def _item_properties(parser: Parser) -> Iterator[str]:
    """Yield each `name:` of an optional item block, with the colon consumed.

    The caller parses the value; the line end is consumed on resume.
    """
    if not parser.at(TokenKind.COLON):
        parser.expect_newline_or_dedent()
        return

    parser.bump()
    parser.open_block()
    for _ in parser.block_items():
        name = parser.expect_name()
        parser.expect(TokenKind.COLON)
        yield name
        parser.expect_newline_or_dedent()


def _parse_room(parser: Parser) -> RoomDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)
    parser.expect_keyword("size")
    size = parse_vec3(parser)

    properties: dict[str, Expression] | None = None
    for prop in _item_properties(parser):
        properties = properties or {}
        properties[prop] = parse_expression(parser)

    return RoomDef(name, position, size, properties, loc)


def _parse_door(parser: Parser) -> DoorDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)
    parser.expect_keyword("facing")
    facing = parser.expect_name()

    connects: tuple[str, str] | None = None
    control: str | None = None
    for prop in _item_properties(parser):
        match prop:
            case "connects":
                first = parser.expect_name()
                parser.expect(TokenKind.BIARROW)
                connects = (first, parser.expect_name())
            case "control":
                control = parser.expect_name()
            case _:
                parse_expression(parser)

    if connects is None:
        raise parser.missing_field("Door must specify connects")

    return DoorDef(name, position, facing, connects, control, loc)


def _parse_terminal(parser: Parser) -> TerminalDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)

    rotation: int | float = 0
    terminal_type: str | None = None
    properties: dict[str, Expression] | None = None
    for prop in _item_properties(parser):
        match prop:
            case "rotation":
                rotation = parse_number_token(parser)
            case "type":
                terminal_type = parser.expect_name()
            case _:
                properties = properties or {}
                properties[prop] = parse_expression(parser)

    return TerminalDef(name, position, rotation, terminal_type, properties, loc)


def _parse_switch(parser: Parser) -> SwitchDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)

    rotation: int | float = 0
    status: str | None = None
    for prop in _item_properties(parser):
        match prop:
            case "rotation":
                rotation = parse_number_token(parser)
            case "status":
                status = parser.expect_name()
            case _:
                parse_expression(parser)

    return SwitchDef(name, position, rotation, status, loc)


def _parse_wall_light(parser: Parser) -> WallLightDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)

    rotation: int | float = 0
    color: ColorLiteral | None = None
    intensity: int | float | None = None
    for prop in _item_properties(parser):
        match prop:
            case "rotation":
                rotation = parse_number_token(parser)
            case "color":
                color_loc = parser.location
                color = ColorLiteral(parser.expect(TokenKind.COLOR).value, color_loc)
            case "intensity":
                intensity = parse_number_token(parser)
            case _:
                parse_expression(parser)

    return WallLightDef(name, position, rotation, color, intensity, loc)


def _parse_asset_instance(parser: Parser) -> AssetInstanceDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)

    facing: str | None = None
    if parser.at_keyword("facing"):
        parser.bump()
        facing = parser.expect_name()

    asset: str | None = None
    rotation: int | float | None = None
    properties: dict[str, Expression] | None = None
    for prop in _item_properties(parser):
        match prop:
            case "asset":
                asset = parser.expect_name()
            case "rotation":
                rotation = parse_number_token(parser)
            case _:
                properties = properties or {}
                properties[prop] = parse_expression(parser)

    if asset is None:
        raise parser.missing_field("Asset instance must specify asset type")

    return AssetInstanceDef(name, asset, position, rotation, facing, properties, loc)
