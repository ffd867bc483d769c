"""Error taxonomy raised by every stage of the pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from typing import ClassVar, Self

from forgepy.diagnostics.codes import DiagnosticSpec
from forgepy.diagnostics.diagnostic import Diagnostic
from forgepy.diagnostics.format import format_forge_error
from forgepy.text import SourceLocation


class ForgeError(Exception):
    """Base error carrying a source location and optional rendering context.

    `str(error)` gives the short `"<message> at line L, column C"` form;
    `error.format()` gives the multi-line report with source context.
    """

    category: ClassVar[str | None] = None

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
        *,
        code: str | None = None,
        hint: str | None = None,
        source: str | None = None,
        file_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
        self.code = code
        self.hint = hint
        self.source = source
        self.file_path = file_path

    @classmethod
    def from_spec(
        cls,
        spec: DiagnosticSpec,
        location: SourceLocation | None = None,
        **values: object,
    ) -> Self:
        return cls(spec.render(**values), location, code=spec.code, hint=spec.hint)

    @property
    def line(self) -> int | None:
        return None if self.location is None else self.location.line

    @property
    def column(self) -> int | None:
        return None if self.location is None else self.location.column

    def with_source(self, source: str, file_path: str | None = None) -> Self:
        """Attach source text (and a file path) used by `format()`."""
        self.source = source
        if file_path is not None:
            self.file_path = file_path
        return self

    def format(self) -> str:
        return format_forge_error(
            self.message,
            self.location or SourceLocation(1, 1),
            source=self.source,
            file_path=self.file_path,
            hint=self.hint,
        )

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            code=self.code or f"{(self.category or 'forge').upper()}_ERROR",
            message=self.message,
            location=self.location,
            severity="error",
            hint=self.hint,
            category=self.category,
        )

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.message} at line {self.location.line}, column {self.location.column}"


class LexerError(ForgeError):
    category = "lexer"


class ParseError(ForgeError):
    category = "parser"


class EvalError(ForgeError):
    category = "eval"


class ExecutionError(ForgeError):
    category = "exec"


class CompileError(ForgeError):
    """Raised by AST consumers that translate definitions into target data."""

    category = "compile"


def attach_source_context(
    error: ForgeError,
    source: str,
    file_path: str | None = None,
) -> ForgeError:
    """Copy `error` into a `ForgeError` that renders against `source`.

    Errors raised without a location point at line 1, column 1.
    """
    return ForgeError(
        error.message,
        error.location or SourceLocation(1, 1),
        code=error.code,
        hint=error.hint,
        source=source,
        file_path=file_path,
    )


def format_error(error: ForgeError, source: str, file_path: str | None = None) -> str:
    return attach_source_context(error, source, file_path).format()


def format_errors(
    errors: Iterable[ForgeError],
    source: str,
    file_path: str | None = None,
) -> str:
    return "\n\n".join(format_error(error, source, file_path) for error in errors)
