"""Parse carrier for parse-once/consume-many workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from forgepy.diagnostics import ForgeError, has_errors
from forgepy.lexer import tokenize
from forgepy.parser.options import ParserOptions

if TYPE_CHECKING:
    from forgepy.ast import Module
    from forgepy.diagnostics import Diagnostic
    from forgepy.lexer import Token


@dataclass(slots=True)
class ForgeParseResult:
    """Source text plus lazily computed tokens, module and diagnostics.

    Lexing and parsing run at most once. A failure is kept as `error` and
    reported through `diagnostics` instead of being raised.
    """

    source_text: str
    options: ParserOptions = field(default_factory=ParserOptions)
    _tokens: list[Token] | None = field(default=None, init=False, repr=False)
    _module: Module | None = field(default=None, init=False, repr=False)
    _error: ForgeError | None = field(default=None, init=False, repr=False)
    _done: bool = field(default=False, init=False, repr=False)

    def tokens(self) -> list[Token]:
        """Token stream, or an empty list when lexing failed."""
        self._run()
        return self._tokens or []

    def module(self) -> Module | None:
        """Parsed module, or `None` when lexing or parsing failed."""
        self._run()
        return self._module

    @property
    def error(self) -> ForgeError | None:
        self._run()
        return self._error

    @property
    def diagnostics(self) -> list[Diagnostic]:
        error = self.error
        return [] if error is None else [error.to_diagnostic()]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def _run(self) -> None:
        if self._done:
            return
        self._done = True

        from forgepy.parser.grammar import parse_module
        from forgepy.parser.parser import Parser
        from forgepy.parser.token_source import TokenSource

        try:
            self._tokens = tokenize(self.source_text)
            self._module = parse_module(Parser(TokenSource(self._tokens), options=self.options))
        except ForgeError as error:
            self._error = error.with_source(self.source_text)
