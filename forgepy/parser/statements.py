"""Statement grammar shared by every definition with a body."""

from collections.abc import Callable

from forgepy.ast import (
    AnimateStatement,
    BreakStatement,
    ContinueStatement,
    ElifClause,
    EmitStatement,
    Expression,
    ForStatement,
    IfStatement,
    MatchBlock,
    MatchCase,
    OnBlock,
    PlayStatement,
    RenderStatement,
    ReturnStatement,
    SetStatement,
    SetStateStatement,
    Statement,
    StopAnimationStatement,
    WhenBlock,
    WhileStatement,
)
from forgepy.lexer import TokenKind
from forgepy.parser.expressions import parse_expression
from forgepy.parser.parser import Parser

type CaseItemParser = Callable[[Parser], Statement | RenderStatement]


def parse_statement(parser: Parser) -> Statement:
    token = parser.current

    if token.kind == TokenKind.KEYWORD:
        match token.value:
            case "when":
                return parse_when(parser)
            case "on":
                return parse_on(parser)
            case "match":
                return parse_match(parser, parse_statement)
            case "animate":
                return _parse_animate(parser)
            case "setState":
                loc = parser.location
                return SetStateStatement(_parse_call_argument(parser, "setState"), loc)
            case "play":
                loc = parser.location
                return PlayStatement(_parse_call_argument(parser, "play"), loc)
            case "stopAnimation":
                loc = parser.location
                return StopAnimationStatement(_parse_call_argument(parser, "stopAnimation"), loc)
            case "emit":
                loc = parser.location
                parser.bump()
                return EmitStatement(parser.expect(TokenKind.STRING).value, loc)
            case "if":
                return _parse_if(parser)
            case "for":
                return _parse_for(parser)
            case "while":
                return _parse_while(parser)
            case "break":
                loc = parser.location
                parser.bump()
                return BreakStatement(loc)
            case "continue":
                loc = parser.location
                parser.bump()
                return ContinueStatement(loc)
            case "return":
                return _parse_return(parser)

    if token.kind == TokenKind.IDENTIFIER and token.value == "set":
        return _parse_set(parser)

    raise parser.error(f"Expected statement, got '{token.value}'")


def parse_body(parser: Parser) -> tuple[Statement, ...]:
    """Parse `NEWLINE INDENT statement* DEDENT` after a block header's colon."""
    parser.open_block()
    return parse_block_statements(parser)


def parse_block_statements(parser: Parser) -> tuple[Statement, ...]:
    body: list[Statement] = []
    for _ in parser.block_items():
        body.append(parse_statement(parser))
        parser.expect_newline_or_dedent()
    return tuple(body)


def parse_when(parser: Parser) -> WhenBlock:
    loc = parser.location
    parser.expect_keyword("when")
    condition = parse_expression(parser)
    parser.expect(TokenKind.COLON)
    body = parse_body(parser)

    else_body: tuple[Statement, ...] | None = None
    if parser.at_keyword("else"):
        parser.bump()
        parser.expect(TokenKind.COLON)
        else_body = parse_body(parser)

    return WhenBlock(condition, body, else_body, loc)


def parse_on(parser: Parser) -> OnBlock:
    loc = parser.location
    parser.expect_keyword("on")
    event = parser.expect_name()

    condition: Expression | None = None
    if parser.at_keyword("when"):
        parser.bump()
        condition = parse_expression(parser)

    parser.expect(TokenKind.COLON)
    return OnBlock(event, parse_body(parser), condition, loc)


def parse_match(parser: Parser, parse_item: CaseItemParser) -> MatchBlock:
    """Parse a match block whose case bodies are built by `parse_item`.

    Cases take `PATTERN -> item, item`, `PATTERN ->` followed by a block, or
    `PATTERN:` followed by a block.
    """
    loc = parser.location
    parser.expect_keyword("match")
    expression = parse_expression(parser)
    parser.expect(TokenKind.COLON)
    parser.open_block()

    cases: list[MatchCase] = []
    for _ in parser.block_items():
        case_loc = parser.location
        pattern = parse_expression(parser)
        body: list[Statement | RenderStatement] = []

        if parser.at(TokenKind.ARROW):
            parser.bump()
            if parser.at(TokenKind.NEWLINE):
                parser.open_block()
                body.extend(_parse_case_block(parser, parse_item))
            else:
                body.append(parse_item(parser))
                while parser.at(TokenKind.COMMA):
                    parser.bump()
                    body.append(parse_item(parser))
                parser.expect_newline_or_dedent()
        elif parser.at(TokenKind.COLON):
            parser.bump()
            parser.open_block()
            body.extend(_parse_case_block(parser, parse_item))
        else:
            raise parser.error(
                f"Expected '->' or ':' after match pattern, got {parser.current.kind.name}"
            )

        cases.append(MatchCase(pattern, tuple(body), case_loc))

    return MatchBlock(expression, tuple(cases), loc)


def _parse_case_block(parser: Parser, parse_item: CaseItemParser) -> list[Statement | RenderStatement]:
    items: list[Statement | RenderStatement] = []
    for _ in parser.block_items():
        items.append(parse_item(parser))
        parser.expect_newline_or_dedent()
    return items


def _parse_animate(parser: Parser) -> AnimateStatement:
    loc = parser.location
    parser.expect_keyword("animate")
    animation = parser.expect_name()

    axis: str | None = None
    speed: Expression | None = None
    while True:
        if parser.at_keyword("on"):
            parser.bump()
            axis = parser.expect_name()
        elif parser.at_keyword("at"):
            parser.bump()
            speed = parse_expression(parser)
        else:
            break

    return AnimateStatement(animation, axis, speed, loc)


def _parse_call_argument(parser: Parser, keyword: str) -> str:
    """`keyword(name)` as used by setState, play and stopAnimation."""
    parser.expect_keyword(keyword)
    parser.expect(TokenKind.LPAREN)
    name = parser.expect_name()
    parser.expect(TokenKind.RPAREN)
    return name


def _parse_set(parser: Parser) -> SetStatement:
    loc = parser.location
    parser.bump()
    path = [parser.expect_name()]
    while parser.at(TokenKind.DOT):
        parser.bump()
        path.append(parser.expect_name())
    parser.expect(TokenKind.COLON)
    return SetStatement(".".join(path), parse_expression(parser), loc)


def _parse_if(parser: Parser) -> IfStatement:
    loc = parser.location
    parser.expect_keyword("if")
    condition = parse_expression(parser)
    parser.expect(TokenKind.COLON)
    body = parse_body(parser)

    elif_clauses: list[ElifClause] = []
    while parser.at_keyword("elif"):
        elif_loc = parser.location
        parser.bump()
        elif_condition = parse_expression(parser)
        parser.expect(TokenKind.COLON)
        elif_clauses.append(ElifClause(elif_condition, parse_body(parser), elif_loc))

    else_body: tuple[Statement, ...] | None = None
    if parser.at_keyword("else"):
        parser.bump()
        parser.expect(TokenKind.COLON)
        else_body = parse_body(parser)

    return IfStatement(condition, body, tuple(elif_clauses), else_body, loc)


def _parse_for(parser: Parser) -> ForStatement:
    loc = parser.location
    parser.expect_keyword("for")
    variable = parser.expect_name()
    parser.expect_keyword("in")
    iterable = parse_expression(parser)
    parser.expect(TokenKind.COLON)
    return ForStatement(variable, iterable, parse_body(parser), loc)


def _parse_while(parser: Parser) -> WhileStatement:
    loc = parser.location
    parser.expect_keyword("while")
    condition = parse_expression(parser)
    parser.expect(TokenKind.COLON)
    return WhileStatement(condition, parse_body(parser), loc)


def _parse_return(parser: Parser) -> ReturnStatement:
    loc = parser.location
    parser.expect_keyword("return")
    if parser.at(TokenKind.NEWLINE) or parser.at(TokenKind.COMMA) or parser.at_block_end:
        return ReturnStatement(None, loc)
    return ReturnStatement(parse_expression(parser), loc)
