from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True, order=True)
class SourceLocation:
    """
    1-based position of a token or node in source text.

    Invariant:
    - line >= 1 and column >= 1
    - end_line/end_column are either both set or both unset
    """

    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None

    def __post_init__(self):
        if self.line < 1 or self.column < 1:
            raise ValueError("SourceLocation positions are 1-based")
        if (self.end_line is None) != (self.end_column is None):
            raise ValueError("SourceLocation end must set both line and column")

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


START: Final[SourceLocation] = SourceLocation(1, 1)
"""Constant for the first character of a file."""


def source_line(source: str, line: int) -> str | None:
    """Return the text of a 1-based line, or None when out of range."""
    lines = source.split("\n")
    if line < 1 or line > len(lines):
        return None
    return lines[line - 1]
