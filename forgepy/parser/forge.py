"""High-level parse entrypoints for Forge source text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from forgepy.ast import Expression, Module
from forgepy.lexer import tokenize
from forgepy.parser.expressions import parse_expression as parse_expression_tokens
from forgepy.parser.grammar import parse_module
from forgepy.parser.options import ParseMode, ParserOptions
from forgepy.parser.parser import Parser
from forgepy.parser.token_source import TokenSource

if TYPE_CHECKING:
    from forgepy.pipeline import ForgeParseResult


def _resolve_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def parse(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> Module:
    """Parse `text` into a `Module`; the first lexer or grammar error is raised."""
    resolved_options = _resolve_options(options=options, mode=mode)
    parser = Parser(TokenSource(tokenize(text)), options=resolved_options)
    return parse_module(parser)


def parse_expression(text: str) -> Expression:
    """Parse a single standalone expression such as `$health * 2 + 1`."""
    parser = Parser(TokenSource(tokenize(text)))
    parser.skip_newlines()
    expression = parse_expression_tokens(parser)
    parser.skip_newlines()
    if not parser.at_eof:
        raise parser.error(f"Unexpected token after expression: '{parser.current.value}'")
    return expression


def parse_result(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ForgeParseResult:
    from forgepy.pipeline import ForgeParseResult

    resolved_options = _resolve_options(options=options, mode=mode)
    return ForgeParseResult(source_text=text, options=resolved_options)
