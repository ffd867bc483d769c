"""Parser infrastructure (token source + recursive-descent grammar)."""

from forgepy.parser.entities import parse_render_statement
from forgepy.parser.forge import parse, parse_expression, parse_result
from forgepy.parser.grammar import DEFINITION_PARSERS, parse_module
from forgepy.parser.options import ParseMode, ParserOptions
from forgepy.parser.parser import Parser, ParserProgress
from forgepy.parser.statements import parse_statement
from forgepy.parser.token_source import TokenSource

__all__ = [
    "DEFINITION_PARSERS",
    "ParseMode",
    "Parser",
    "ParserOptions",
    "ParserProgress",
    "TokenSource",
    "parse",
    "parse_expression",
    "parse_module",
    "parse_render_statement",
    "parse_result",
    "parse_statement",
]
