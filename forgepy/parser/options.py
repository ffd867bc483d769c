"""Parser modes and configuration options."""

from dataclasses import dataclass
from enum import StrEnum


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    STRICT = "strict"
    PERMISSIVE = "permissive"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Flags controlling how tolerant the top-level definition loop is."""

    mode: ParseMode = ParseMode.PERMISSIVE
    skip_stray_tokens: bool = True

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        if mode == ParseMode.STRICT:
            return ParserOptions(mode=mode, skip_stray_tokens=False)

        return ParserOptions(mode=mode, skip_stray_tokens=True)
