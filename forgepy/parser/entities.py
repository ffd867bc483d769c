"""Entity definitions: screen settings, render bodies and styles."""

from forgepy.ast import (
    CodeRender,
    ColorLiteral,
    EntityDef,
    Expression,
    ParamsBlock,
    RenderBlock,
    RenderStatement,
    RowRender,
    ScreenBlock,
    Statement,
    StyleDef,
    StylesBlock,
    TextRender,
    Vec2,
)
from forgepy.lexer import TokenKind
from forgepy.parser.assets import parse_params_block
from forgepy.parser.expressions import parse_expression, parse_number_token, parse_vec2
from forgepy.parser.parser import Parser
from forgepy.parser.statements import parse_match, parse_statement


def parse_entity(parser: Parser) -> EntityDef:
    loc = parser.location
    parser.expect_keyword("entity")
    name = parser.expect_name()
    parser.open_block()

    params: ParamsBlock | None = None
    screen: ScreenBlock | None = None
    render: RenderBlock | None = None
    styles: StylesBlock | None = None
    body: list[Statement] = []

    for token in parser.block_items():
        match token.kind, token.value:
            case TokenKind.KEYWORD, "params":
                params = parse_params_block(parser)
            case TokenKind.KEYWORD, "when" | "on":
                body.append(parse_statement(parser))
            case TokenKind.KEYWORD, _:
                raise parser.error(f"Unexpected keyword '{token.value}' in entity")
            case TokenKind.IDENTIFIER, "screen":
                screen = _parse_screen(parser)
            case TokenKind.IDENTIFIER, "render":
                render = _parse_render(parser)
            case TokenKind.IDENTIFIER, "styles":
                styles = _parse_styles(parser)
            case TokenKind.IDENTIFIER, _:
                raise parser.error(f"Unexpected identifier '{token.value}' in entity")
            case _:
                raise parser.error(f"Unexpected token in entity: {token.value}")

    return EntityDef(name, params, screen, render, styles, tuple(body), loc)


def _parse_screen(parser: Parser) -> ScreenBlock:
    loc = parser.location
    parser.bump()
    parser.expect(TokenKind.COLON)
    parser.open_block()

    size: Vec2 | None = None
    font: str | None = None
    font_size: int | float | None = None
    background: ColorLiteral | None = None
    line_height: int | float | None = None
    padding: int | float | None = None

    for _ in parser.block_items():
        prop = parser.expect_name()
        parser.expect(TokenKind.COLON)
        match prop:
            case "size":
                size = parse_vec2(parser)
            case "font":
                font = parser.expect(TokenKind.STRING).value
            case "fontSize":
                font_size = parse_number_token(parser)
            case "background":
                color_loc = parser.location
                background = ColorLiteral(parser.expect(TokenKind.COLOR).value, color_loc)
            case "lineHeight":
                line_height = parse_number_token(parser)
            case "padding":
                padding = parse_number_token(parser)
            case _:
                parse_expression(parser)
        parser.expect_newline_or_dedent()

    if size is None:
        raise parser.missing_field("Screen must specify size")

    return ScreenBlock(size, font, font_size, background, line_height, padding, loc)


def _parse_render(parser: Parser) -> RenderBlock:
    loc = parser.location
    parser.bump()
    parser.expect(TokenKind.COLON)
    parser.open_block()

    body: list[RenderStatement] = []
    for _ in parser.block_items():
        body.append(parse_render_statement(parser))
        parser.expect_newline_or_dedent()
    return RenderBlock(tuple(body), loc)


def parse_render_statement(parser: Parser) -> RenderStatement:
    token = parser.current

    if token.is_keyword("match"):
        return parse_match(parser, parse_render_statement)

    if token.kind == TokenKind.IDENTIFIER:
        match token.value:
            case "text":
                return _parse_text(parser)
            case "row":
                loc = parser.location
                parser.bump()
                label = parse_expression(parser)
                return RowRender(label, parse_expression(parser), loc)
            case "code":
                return _parse_code(parser)

    raise parser.error(f"Expected render statement, got '{token.value}'")


def _parse_text(parser: Parser) -> TextRender:
    loc = parser.location
    parser.bump()
    content = parse_expression(parser)

    centered = False
    if parser.at(TokenKind.IDENTIFIER) and parser.current.value == "centered":
        parser.bump()
        centered = True

    return TextRender(content, centered, loc)


def _parse_code(parser: Parser) -> CodeRender:
    loc = parser.location
    parser.bump()
    content = parse_expression(parser)

    line_numbers = False
    if parser.at(TokenKind.IDENTIFIER) and parser.current.value == "lineNumbers":
        parser.bump()
        parser.expect(TokenKind.COLON)
        line_numbers = parser.expect(TokenKind.BOOLEAN).value == "true"

    return CodeRender(content, line_numbers, loc)


def _parse_styles(parser: Parser) -> StylesBlock:
    loc = parser.location
    parser.bump()
    parser.expect(TokenKind.COLON)
    parser.open_block()

    styles: list[StyleDef] = []
    for _ in parser.block_items():
        style_loc = parser.location
        name = parser.expect_name()
        parser.expect(TokenKind.COLON)
        parser.open_block()

        properties: dict[str, Expression] = {}
        for _ in parser.block_items():
            prop = parser.expect_name()
            parser.expect(TokenKind.COLON)
            properties[prop] = parse_expression(parser)
            parser.expect_newline_or_dedent()

        styles.append(StyleDef(name, properties, style_loc))

    return StylesBlock(tuple(styles), loc)
