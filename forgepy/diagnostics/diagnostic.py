"""Diagnostics core types."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from forgepy.text import SourceLocation

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Non-raising record of a failure, produced from a `ForgeError`."""

    code: str
    message: str
    location: SourceLocation | None
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None

    @property
    def line(self) -> int | None:
        return None if self.location is None else self.location.line

    @property
    def column(self) -> int | None:
        return None if self.location is None else self.location.column


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)
