"""Expression grammar: precedence climbing from `or` down to primaries."""

import re
from typing import cast

from forgepy.ast import (
    BinaryOp,
    BooleanLiteral,
    ColorLiteral,
    DurationLiteral,
    DurationUnit,
    Expression,
    FunctionCall,
    Identifier,
    ListLiteral,
    MemberAccess,
    NumberLiteral,
    ReactiveRef,
    StringLiteral,
    UnaryOp,
    Vec2,
    Vec3,
)
from forgepy.lexer import TokenKind
from forgepy.parser.parser import Parser

_DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m|h)$")
_DURATION_SCALE: dict[str, int] = {"ms": 1, "s": 1000, "m": 60_000, "h": 3_600_000}

_ADDITIVE: frozenset[TokenKind] = frozenset({TokenKind.PLUS, TokenKind.MINUS, TokenKind.AT})
_MULTIPLICATIVE: frozenset[TokenKind] = frozenset({TokenKind.STAR, TokenKind.SLASH})
_COMPARISON: frozenset[TokenKind] = frozenset({TokenKind.LT, TokenKind.GT})


def parse_expression(parser: Parser) -> Expression:
    return _parse_or(parser)


def _parse_or(parser: Parser) -> Expression:
    left = _parse_and(parser)
    while parser.at_keyword("or"):
        loc = parser.location
        parser.bump()
        right = _parse_and(parser)
        left = BinaryOp("or", left, right, loc)
    return left


def _parse_and(parser: Parser) -> Expression:
    left = _parse_equality(parser)
    while parser.at_keyword("and"):
        loc = parser.location
        parser.bump()
        right = _parse_equality(parser)
        left = BinaryOp("and", left, right, loc)
    return left


def _parse_equality(parser: Parser) -> Expression:
    # `==` is lexed as two EQUALS tokens.
    left = _parse_comparison(parser)
    while parser.at(TokenKind.EQUALS) and parser.nth(1).kind == TokenKind.EQUALS:
        loc = parser.location
        parser.bump()
        parser.bump()
        right = _parse_comparison(parser)
        left = BinaryOp("==", left, right, loc)
    return left


def _parse_comparison(parser: Parser) -> Expression:
    left = _parse_additive(parser)
    while parser.current.kind in _COMPARISON:
        loc = parser.location
        operator = parser.bump().value
        if parser.at(TokenKind.EQUALS):
            parser.bump()
            operator += "="
        right = _parse_additive(parser)
        left = BinaryOp(operator, left, right, loc)
    return left


def _parse_additive(parser: Parser) -> Expression:
    left = _parse_multiplicative(parser)
    while parser.current.kind in _ADDITIVE:
        loc = parser.location
        operator = parser.bump().value
        right = _parse_multiplicative(parser)
        left = BinaryOp(operator, left, right, loc)
    return left


def _parse_multiplicative(parser: Parser) -> Expression:
    left = _parse_unary(parser)
    while parser.current.kind in _MULTIPLICATIVE:
        loc = parser.location
        operator = parser.bump().value
        right = _parse_unary(parser)
        left = BinaryOp(operator, left, right, loc)
    return left


def _parse_unary(parser: Parser) -> Expression:
    if parser.at_keyword("not"):
        loc = parser.location
        parser.bump()
        return UnaryOp("not", _parse_unary(parser), loc)

    if parser.at(TokenKind.MINUS):
        loc = parser.location
        parser.bump()
        return UnaryOp("-", _parse_unary(parser), loc)

    return _parse_postfix(parser)


def _parse_postfix(parser: Parser) -> Expression:
    expr = _parse_primary(parser)

    while True:
        if parser.at(TokenKind.DOT):
            loc = parser.location
            parser.bump()
            expr = MemberAccess(expr, parser.expect_name(), loc)
        elif parser.at(TokenKind.LPAREN) and isinstance(expr, Identifier):
            parser.bump()
            args = _parse_comma_separated(parser, TokenKind.RPAREN)
            parser.expect(TokenKind.RPAREN)
            expr = FunctionCall(expr.name, args, expr.loc)
        else:
            return expr


def _parse_primary(parser: Parser) -> Expression:
    token = parser.current
    loc = parser.location

    match token.kind:
        case TokenKind.DOLLAR:
            parser.bump()
            path = [parser.expect_name()]
            while parser.at(TokenKind.DOT):
                parser.bump()
                path.append(parser.expect_name())
            return ReactiveRef(tuple(path), loc)
        case TokenKind.NUMBER:
            parser.bump()
            return NumberLiteral(parse_number(token.value), loc)
        case TokenKind.STRING:
            parser.bump()
            return StringLiteral(token.value, loc)
        case TokenKind.BOOLEAN:
            parser.bump()
            return BooleanLiteral(token.value == "true", loc)
        case TokenKind.COLOR:
            parser.bump()
            return ColorLiteral(token.value, loc)
        case TokenKind.DURATION:
            return parse_duration(parser)
        case TokenKind.LPAREN:
            return parse_vector_or_group(parser)
        case TokenKind.LBRACKET:
            return _parse_list(parser)
        case TokenKind.IDENTIFIER | TokenKind.KEYWORD:
            parser.bump()
            return Identifier(token.value, loc)
        case _:
            raise parser.error(f"Unexpected token in expression: '{token.value}'")


def parse_vector_or_group(parser: Parser) -> Expression:
    """`(a)` is a group, `(a, b)` a Vec2 and `(a, b, c)` a Vec3."""
    loc = parser.location
    parser.expect(TokenKind.LPAREN)
    first = parse_expression(parser)

    if parser.at(TokenKind.COMMA):
        parser.bump()
        second = parse_expression(parser)
        if parser.at(TokenKind.COMMA):
            parser.bump()
            third = parse_expression(parser)
            parser.expect(TokenKind.RPAREN)
            return Vec3(first, second, third, loc)
        parser.expect(TokenKind.RPAREN)
        return Vec2(first, second, loc)

    parser.expect(TokenKind.RPAREN)
    return first


def parse_vec2(parser: Parser) -> Vec2:
    result = parse_vector_or_group(parser)
    if not isinstance(result, Vec2):
        raise parser.error("Expected vec2")
    return result


def parse_vec3(parser: Parser) -> Vec3:
    result = parse_vector_or_group(parser)
    if not isinstance(result, Vec3):
        raise parser.error("Expected vec3")
    return result


def parse_duration(parser: Parser) -> DurationLiteral:
    loc = parser.location
    token = parser.expect(TokenKind.DURATION)
    match = _DURATION_PATTERN.match(token.value)
    if match is None:
        raise parser.error(f"Invalid duration: {token.value}")

    amount = parse_number(match.group(1))
    unit = match.group(2)
    return DurationLiteral(amount * _DURATION_SCALE[unit], cast(DurationUnit, unit), loc)


def parse_number_token(parser: Parser) -> int | float:
    return parse_number(parser.expect(TokenKind.NUMBER).value)


def parse_number(text: str) -> int | float:
    """Integral literals become `int`, everything else `float`."""
    value = float(text)
    if value.is_integer():
        return int(value)
    return value


def expect_string(parser: Parser, expr: Expression) -> str:
    if not isinstance(expr, StringLiteral):
        raise parser.error("Expected string")
    return expr.value


def expect_vec3(parser: Parser, expr: Expression) -> Vec3:
    if not isinstance(expr, Vec3):
        raise parser.error("Expected vec3")
    return expr


def _parse_list(parser: Parser) -> ListLiteral:
    loc = parser.location
    parser.expect(TokenKind.LBRACKET)
    elements = _parse_comma_separated(parser, TokenKind.RBRACKET)
    parser.expect(TokenKind.RBRACKET)
    return ListLiteral(elements, loc)


def _parse_comma_separated(parser: Parser, closer: TokenKind) -> tuple[Expression, ...]:
    if parser.at(closer):
        return ()
    items = [parse_expression(parser)]
    while parser.at(TokenKind.COMMA):
        parser.bump()
        items.append(parse_expression(parser))
    return tuple(items)
