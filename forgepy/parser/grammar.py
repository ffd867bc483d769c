"""Top-level grammar: a module is a sequence of keyword-led definitions."""

from collections.abc import Callable
from typing import Final

from forgepy.ast import Definition, Module
from forgepy.diagnostics import PARSER_UNEXPECTED_KEYWORD, PARSER_UNEXPECTED_TOKEN
from forgepy.lexer import TokenKind
from forgepy.parser.assets import parse_asset
from forgepy.parser.entities import parse_entity
from forgepy.parser.games import parse_display_template, parse_game, parse_interaction
from forgepy.parser.layouts import parse_layout
from forgepy.parser.logic import (
    parse_behavior,
    parse_condition,
    parse_config,
    parse_function,
    parse_machine,
    parse_rule,
    parse_scenario,
)
from forgepy.parser.parser import Parser, ParserProgress
from forgepy.text import SourceLocation

DEFINITION_PARSERS: Final[dict[str, Callable[[Parser], Definition]]] = {
    "asset": parse_asset,
    "layout": parse_layout,
    "entity": parse_entity,
    "machine": parse_machine,
    "config": parse_config,
    "def": parse_function,
    "rule": parse_rule,
    "scenario": parse_scenario,
    "behavior": parse_behavior,
    "condition": parse_condition,
    "game": parse_game,
    "interaction": parse_interaction,
    "display-template": parse_display_template,
}


def parse_module(parser: Parser) -> Module:
    definitions: list[Definition] = []
    progress = ParserProgress()

    parser.skip_newlines()
    while not parser.at_eof:
        progress.assert_progressing(parser)
        token = parser.current

        if token.kind == TokenKind.KEYWORD:
            parse_definition = DEFINITION_PARSERS.get(token.value)
            if parse_definition is None:
                raise parser.error_from(PARSER_UNEXPECTED_KEYWORD, value=token.value)
            definitions.append(parse_definition(parser))
        elif parser.options.skip_stray_tokens:
            parser.bump()
        else:
            raise parser.error_from(PARSER_UNEXPECTED_TOKEN, value=token.value)

        parser.skip_newlines()

    return Module(tuple(definitions), SourceLocation(1, 1))
