"""Text."""

from forgepy.text.location import START, SourceLocation, source_line

__all__ = [
    "START",
    "SourceLocation",
    "source_line",
]
