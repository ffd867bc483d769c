"""Recursive-descent parser core."""

from collections.abc import Iterator
from dataclasses import dataclass

from forgepy.diagnostics import (
    PARSER_EXPECTED_KEYWORD,
    PARSER_EXPECTED_LAYOUT,
    PARSER_EXPECTED_NAME,
    PARSER_EXPECTED_TOKEN,
    PARSER_MISSING_FIELD,
    PARSER_SYNTAX,
    DiagnosticSpec,
    ParseError,
)
from forgepy.lexer import CONTEXTUAL_KEYWORDS, Token, TokenKind
from forgepy.parser.options import ParserOptions
from forgepy.parser.token_source import TokenSource
from forgepy.text import SourceLocation


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside block loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            token = parser.current
            raise RuntimeError(f"Parser stopped making progress at {token.kind.name} {token.location}")


class Parser:
    """Fail-fast parser: the first grammar violation raises `ParseError`."""

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def current(self) -> Token:
        return self._source.current

    @property
    def location(self) -> SourceLocation:
        return self._source.current.location

    @property
    def position(self) -> int:
        return self._source.position

    @property
    def at_eof(self) -> bool:
        return self.current.kind == TokenKind.EOF

    @property
    def at_block_end(self) -> bool:
        return self.current.kind in (TokenKind.DEDENT, TokenKind.EOF)

    def at(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def at_keyword(self, value: str) -> bool:
        return self.current.is_keyword(value)

    def at_name(self, value: str | None = None) -> bool:
        """True on an IDENTIFIER or KEYWORD token, optionally with the given text."""
        token = self.current
        if not token.kind.is_name:
            return False
        return value is None or token.value == value

    def at_property_name(self) -> bool:
        """True on a word usable as a free-form property key."""
        token = self.current
        return token.kind == TokenKind.IDENTIFIER or (
            token.kind == TokenKind.KEYWORD and token.value in CONTEXTUAL_KEYWORDS
        )

    def nth(self, n: int) -> Token:
        return self._source.nth(n)

    def bump(self) -> Token:
        return self._source.bump()

    def expect(self, kind: TokenKind) -> Token:
        token = self.current
        if token.kind != kind:
            raise self.error_from(
                PARSER_EXPECTED_TOKEN,
                expected=kind.name,
                actual=token.kind.name,
                value=token.value,
            )
        return self.bump()

    def expect_keyword(self, value: str) -> None:
        if not self.at_keyword(value):
            raise self.error_from(PARSER_EXPECTED_KEYWORD, expected=value, value=self.current.value)
        self.bump()

    def expect_name(self) -> str:
        """Accept an identifier; keywords are valid names wherever a name is expected."""
        token = self.current
        if not token.kind.is_name:
            raise self.error_from(PARSER_EXPECTED_NAME, actual=token.kind.name, value=token.value)
        self.bump()
        return token.value

    def expect_newline(self) -> None:
        if not self.at(TokenKind.NEWLINE):
            raise self.error_from(PARSER_EXPECTED_LAYOUT, expected="newline", actual=self.current.kind.name)
        self.bump()
        self.skip_newlines()

    def expect_newline_or_dedent(self) -> None:
        # A DEDENT is left for the enclosing block to consume.
        if self.at(TokenKind.NEWLINE):
            self.bump()
            self.skip_newlines()

    def expect_indent(self) -> None:
        if not self.at(TokenKind.INDENT):
            raise self.error_from(PARSER_EXPECTED_LAYOUT, expected="indent", actual=self.current.kind.name)
        self.bump()

    def consume_dedent(self) -> None:
        if self.at(TokenKind.DEDENT):
            self.bump()

    def skip_newlines(self) -> None:
        while self.at(TokenKind.NEWLINE):
            self.bump()

    def open_block(self) -> None:
        """Consume the NEWLINE and INDENT that start a block body."""
        self.expect_newline()
        self.expect_indent()

    def block_items(self) -> Iterator[Token]:
        """Yield the leading token of each item in the current block.

        Blank lines are skipped, iteration stops at the closing DEDENT (or EOF)
        and the DEDENT is consumed once the caller has exhausted the iterator.
        Every item must consume at least one token.
        """
        progress = ParserProgress()
        while not self.at_block_end:
            self.skip_newlines()
            if self.at_block_end:
                break
            progress.assert_progressing(self)
            yield self.current
        self.consume_dedent()

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.location, code=PARSER_SYNTAX.code)

    def error_from(self, spec: DiagnosticSpec, **values: object) -> ParseError:
        return ParseError.from_spec(spec, self.location, **values)

    def missing_field(self, detail: str) -> ParseError:
        return self.error_from(PARSER_MISSING_FIELD, detail=detail)
