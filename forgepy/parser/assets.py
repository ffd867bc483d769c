"""Asset definitions: params, geometry, parts, states and animations."""

from forgepy.ast import (
    AnimationDefinition,
    AnimationsBlock,
    AssetDef,
    BoxPrimitive,
    ChildRef,
    Expression,
    GeometryBlock,
    GeometryPrimitive,
    Keyframe,
    ParamDef,
    ParamsBlock,
    Part,
    PartsBlock,
    PropertyBinding,
    Range,
    RepeatPattern,
    RepeatVariable,
    StateDefinition,
    StatesBlock,
    Statement,
    TypeAnnotation,
    Vec2,
    Vec3,
    VoxelPrimitive,
)
from forgepy.lexer import TokenKind
from forgepy.parser.expressions import (
    expect_string,
    expect_vec3,
    parse_duration,
    parse_expression,
    parse_number_token,
    parse_vec3,
)
from forgepy.parser.parser import Parser
from forgepy.parser.statements import parse_body, parse_statement
from forgepy.text import SourceLocation


def parse_asset(parser: Parser) -> AssetDef:
    loc = parser.location
    parser.expect_keyword("asset")
    name = parser.expect_name()
    parser.open_block()

    display_name: str | None = None
    description: str | None = None
    anchor: Vec3 | None = None
    params: ParamsBlock | None = None
    geometry: GeometryBlock | None = None
    parts: PartsBlock | None = None
    states: StatesBlock | None = None
    animations: AnimationsBlock | None = None
    children: list[ChildRef] = []
    body: list[Statement] = []

    for token in parser.block_items():
        if token.kind == TokenKind.KEYWORD:
            match token.value:
                case "params":
                    params = parse_params_block(parser)
                case "geometry":
                    geometry = _parse_geometry_block(parser)
                case "parts":
                    parts = _parse_parts_block(parser)
                case "child":
                    children.append(_parse_child(parser))
                case "states":
                    states = _parse_states_block(parser)
                case "animations":
                    animations = _parse_animations_block(parser)
                case "when" | "on":
                    body.append(parse_statement(parser))
                case _:
                    raise parser.error(f"Unexpected keyword '{token.value}' in asset")
        elif token.kind == TokenKind.IDENTIFIER:
            parser.bump()
            parser.expect(TokenKind.COLON)
            value = parse_expression(parser)
            match token.value:
                case "name":
                    display_name = expect_string(parser, value)
                case "description":
                    description = expect_string(parser, value)
                case "anchor":
                    anchor = expect_vec3(parser, value)
            parser.expect_newline_or_dedent()
        else:
            raise parser.error(f"Unexpected token '{token.value}' in asset body")

    return AssetDef(
        name,
        display_name=display_name,
        description=description,
        anchor=anchor,
        params=params,
        geometry=geometry,
        parts=parts,
        children=tuple(children),
        states=states,
        animations=animations,
        body=tuple(body),
        loc=loc,
    )


# ============================================================================
# Params
# ============================================================================


def parse_params_block(parser: Parser) -> ParamsBlock:
    loc = parser.location
    parser.expect_keyword("params")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    params: list[ParamDef] = []
    for _ in parser.block_items():
        params.append(_parse_param_def(parser))
        parser.expect_newline_or_dedent()
    return ParamsBlock(tuple(params), loc)


def _parse_param_def(parser: Parser) -> ParamDef:
    loc = parser.location
    name = parser.expect_name()
    parser.expect(TokenKind.COLON)
    type_annotation = _parse_type_annotation(parser)

    default: Expression | None = None
    if parser.at(TokenKind.EQUALS):
        parser.bump()
        default = parse_expression(parser)

    return ParamDef(name, type_annotation, default, loc)


def _parse_type_annotation(parser: Parser) -> TypeAnnotation:
    loc = parser.location
    name = parser.expect_name()

    constraint: Range | None = None
    enum_values: tuple[str, ...] | None = None
    element_type: TypeAnnotation | None = None
    ref_target: str | None = None

    if parser.at(TokenKind.LBRACKET):
        parser.bump()
        start = parse_expression(parser)
        parser.expect(TokenKind.RANGE)
        end = parse_expression(parser)
        parser.expect(TokenKind.RBRACKET)
        constraint = Range(start, end, loc)

    if name == "enum" and parser.at(TokenKind.LPAREN):
        parser.bump()
        values = [parser.expect_name()]
        while parser.at(TokenKind.COMMA):
            parser.bump()
            values.append(parser.expect_name())
        parser.expect(TokenKind.RPAREN)
        enum_values = tuple(values)

    if name == "ref" and parser.at(TokenKind.LPAREN):
        parser.bump()
        ref_target = parser.expect_name()
        parser.expect(TokenKind.RPAREN)

    if name == "list" and parser.at(TokenKind.LT):
        parser.bump()
        element_type = _parse_type_annotation(parser)
        parser.expect(TokenKind.GT)

    return TypeAnnotation(name, constraint, enum_values, element_type, ref_target, loc)


# ============================================================================
# Geometry
# ============================================================================


def _parse_geometry_block(parser: Parser) -> GeometryBlock:
    loc = parser.location
    parser.expect_keyword("geometry")
    parser.expect(TokenKind.COLON)
    parser.open_block()
    return GeometryBlock(_parse_primitive_list(parser), loc)


def _parse_primitive_list(parser: Parser) -> tuple[GeometryPrimitive, ...]:
    primitives: list[GeometryPrimitive] = []
    for _ in parser.block_items():
        primitives.append(_parse_geometry_primitive(parser))
        parser.expect_newline_or_dedent()
    return tuple(primitives)


def _parse_geometry_primitive(parser: Parser) -> GeometryPrimitive:
    token = parser.current

    if token.kind == TokenKind.KEYWORD:
        match token.value:
            case "box":
                return _parse_box(parser)
            case "voxel":
                loc = parser.location
                parser.bump()
                return _parse_voxel_tail(parser, loc)
            case "repeat":
                return _parse_repeat(parser)
            case "child":
                return _parse_child(parser)

    if token.kind == TokenKind.LPAREN:
        return _parse_voxel_tail(parser, parser.location)

    raise parser.error(f"Expected geometry primitive, got '{token.value}'")


def _parse_voxel_tail(parser: Parser, loc: SourceLocation) -> VoxelPrimitive:
    position = parse_vec3(parser)
    parser.expect_keyword("as")
    return VoxelPrimitive(position, parser.expect_name(), loc)


def _parse_box(parser: Parser) -> BoxPrimitive:
    loc = parser.location
    parser.expect_keyword("box")
    start = parse_vec3(parser)

    end: Vec3 | None = None
    size: Vec3 | None = None
    if parser.at_keyword("to"):
        parser.bump()
        end = parse_vec3(parser)
    elif parser.at_keyword("size"):
        parser.bump()
        size = parse_vec3(parser)

    parser.expect_keyword("as")
    return BoxPrimitive(start, parser.expect_name(), end, size, loc)


def _parse_repeat(parser: Parser) -> RepeatPattern:
    loc = parser.location
    parser.expect_keyword("repeat")

    names = [parser.expect_name()]
    while parser.at(TokenKind.COMMA):
        parser.bump()
        names.append(parser.expect_name())

    parser.expect_keyword("from")
    start = parse_expression(parser)
    parser.expect_keyword("to")
    end = parse_expression(parser)
    step: Expression | None = None
    if parser.at_keyword("step"):
        parser.bump()
        step = parse_expression(parser)

    if len(names) == 1:
        variables = (RepeatVariable(names[0], start, end, step),)
    else:
        # `repeat x, y from (0, 0) to (4, 4)` splits the vectors per variable.
        variables = tuple(
            RepeatVariable(
                name,
                _component(start, index),
                _component(end, index),
                None if step is None else _component(step, index),
            )
            for index, name in enumerate(names)
        )

    parser.expect(TokenKind.COLON)
    parser.open_block()
    return RepeatPattern(variables, _parse_primitive_list(parser), loc)


def _component(expr: Expression, index: int) -> Expression:
    match expr:
        case Vec2(x=x, y=y):
            return x if index == 0 else y
        case Vec3(x=x, y=y, z=z):
            return (x, y, z)[min(index, 2)]
        case _:
            return expr


def _parse_child(parser: Parser) -> ChildRef:
    loc = parser.location
    parser.expect_keyword("child")
    asset = parser.expect_name()
    parser.expect_keyword("at")
    position = parse_vec3(parser)

    condition: Expression | None = None
    if parser.at_keyword("when"):
        parser.bump()
        condition = parse_expression(parser)

    body: tuple[Statement, ...] | None = None
    if parser.at(TokenKind.COLON):
        parser.bump()
        body = parse_body(parser)

    return ChildRef(asset, position, condition, body, loc)


# ============================================================================
# Parts
# ============================================================================


def _parse_parts_block(parser: Parser) -> PartsBlock:
    loc = parser.location
    parser.expect_keyword("parts")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    parts: list[Part] = []
    for _ in parser.block_items():
        parts.append(_parse_part(parser))
    return PartsBlock(tuple(parts), loc)


def _parse_part(parser: Parser) -> Part:
    loc = parser.location
    name = parser.expect_name()
    parser.expect(TokenKind.COLON)
    parser.open_block()

    geometry: list[GeometryPrimitive] = []
    position: Vec3 | None = None
    for _ in parser.block_items():
        # `at: (x, y, z)` sets the part origin; `at` followed by anything else is geometry.
        if parser.at_name("at") and parser.nth(1).kind == TokenKind.COLON:
            parser.bump()
            parser.bump()
            position = parse_vec3(parser)
        else:
            geometry.append(_parse_geometry_primitive(parser))
        parser.expect_newline_or_dedent()

    return Part(name, tuple(geometry), position, loc)


# ============================================================================
# States
# ============================================================================


def _parse_states_block(parser: Parser) -> StatesBlock:
    loc = parser.location
    parser.expect_keyword("states")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    states: list[StateDefinition] = []
    for _ in parser.block_items():
        states.append(_parse_state_definition(parser))
    return StatesBlock(tuple(states), loc)


def _parse_state_definition(parser: Parser) -> StateDefinition:
    loc = parser.location
    name = parser.expect_name()
    parser.expect(TokenKind.COLON)
    parser.open_block()

    bindings: list[PropertyBinding] = []
    for _ in parser.block_items():
        binding_loc = parser.location
        target = [parser.expect_name()]
        while parser.at(TokenKind.DOT):
            parser.bump()
            target.append(parser.expect_name())
        parser.expect(TokenKind.COLON)
        bindings.append(PropertyBinding(".".join(target), parse_expression(parser), binding_loc))
        parser.expect_newline_or_dedent()

    return StateDefinition(name, tuple(bindings), loc)


# ============================================================================
# Animations
# ============================================================================


def _parse_animations_block(parser: Parser) -> AnimationsBlock:
    loc = parser.location
    parser.expect_keyword("animations")
    parser.expect(TokenKind.COLON)
    parser.open_block()

    animations: list[AnimationDefinition] = []
    for _ in parser.block_items():
        animations.append(_parse_animation_definition(parser))
    return AnimationsBlock(tuple(animations), loc)


def _parse_animation_definition(parser: Parser) -> AnimationDefinition:
    loc = parser.location
    name = parser.expect_name()
    parser.expect(TokenKind.COLON)
    duration = parse_duration(parser)

    loop = False
    if parser.at_keyword("loop"):
        parser.bump()
        loop = True

    parser.open_block()
    keyframes: list[Keyframe] = []
    for _ in parser.block_items():
        keyframes.append(_parse_keyframe(parser))
        parser.expect_newline_or_dedent()

    return AnimationDefinition(name, duration, tuple(keyframes), loop, loc)


def _parse_keyframe(parser: Parser) -> Keyframe:
    loc = parser.location
    percent = parse_number_token(parser)
    parser.expect(TokenKind.PERCENT)
    parser.expect(TokenKind.ARROW)
    state = parser.expect_name()

    easing: str | None = None
    if parser.at_keyword("using"):
        parser.bump()
        easing = parser.expect_name()

    return Keyframe(percent, state, easing, loc)
