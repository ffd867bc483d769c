"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from forgepy.text import SourceLocation


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Layout markers (synthesised from indentation)
    # -------------------------
    NEWLINE = 10
    INDENT = 11
    DEDENT = 12

    # -------------------------
    # Names
    # -------------------------
    KEYWORD = 20
    IDENTIFIER = 21

    # -------------------------
    # Literals
    # -------------------------
    STRING = 30  # "quoted", escapes already decoded
    NUMBER = 31  # 123, 45.67, -2
    BOOLEAN = 32  # true / false
    COLOR = 33  # #rgb, #rgba, #rrggbb, #rrggbbaa
    DURATION = 34  # 300ms, 2s, 5m, 1h

    # -------------------------
    # Brackets
    # -------------------------
    LPAREN = 40  # (
    RPAREN = 41  # )
    LBRACKET = 42  # [
    RBRACKET = 43  # ]
    LBRACE = 44  # {
    RBRACE = 45  # }

    # -------------------------
    # Punctuation / operators
    # -------------------------
    COLON = 50  # :
    COMMA = 51  # ,
    DOT = 52  # .
    ARROW = 53  # ->
    BIARROW = 54  # <->
    AT = 55  # @
    DOLLAR = 56  # $
    PERCENT = 57  # %
    EQUALS = 58  # =
    LT = 59  # <
    GT = 60  # >
    PLUS = 61  # +
    MINUS = 62  # -
    STAR = 63  # *
    SLASH = 64  # /
    RANGE = 65  # ..

    @property
    def is_layout(self) -> bool:
        return self in (TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT)

    @property
    def is_literal(self) -> bool:
        return TokenKind.STRING <= self <= TokenKind.DURATION

    @property
    def is_name(self) -> bool:
        return self in (TokenKind.KEYWORD, TokenKind.IDENTIFIER)


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token; `value` is the decoded text (empty for layout markers)."""

    kind: TokenKind
    value: str
    line: int
    column: int

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column)

    def is_keyword(self, value: str) -> bool:
        return self.kind == TokenKind.KEYWORD and self.value == value


STRUCTURE_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "asset", "entity", "layout", "machine", "config", "rule", "scenario", "behavior",
        "params", "geometry", "parts", "states", "animations",
        "when", "on", "match", "extends", "base",
        "def", "return", "trigger", "effect", "initial",
    }
)

GEOMETRY_KEYWORDS: Final[frozenset[str]] = frozenset(
    {"voxel", "voxels", "box", "repeat", "child", "from", "to", "step", "size", "at", "as"}
)

ANIMATION_KEYWORDS: Final[frozenset[str]] = frozenset(
    {"animate", "spin", "bob", "pulse", "fade", "using", "loop", "play", "setState", "emit", "stopAnimation"}
)

LAYOUT_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "rooms", "doors", "terminals", "switches", "assets", "wallLights",
        "connects", "facing", "monitors", "control", "coordinate",
    }
)

CONTROL_KEYWORDS: Final[frozenset[str]] = frozenset(
    {"if", "elif", "else", "and", "or", "not", "in", "for", "while", "break", "continue"}
)

TYPE_KEYWORDS: Final[frozenset[str]] = frozenset({"enum", "ref", "list", "float", "int", "bool", "string"})

CONTEXTUAL_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "type", "message", "ship", "player", "camera", "sync",
        "target", "range", "prompt", "prompt_broken", "on_interact",
        "width", "height", "header", "footer", "rows", "label", "value", "color", "where",
    }
)
"""Words that are keywords only where a definition block expects them; elsewhere they name properties."""

GAME_KEYWORDS: Final[frozenset[str]] = (
    frozenset({"condition", "game", "interaction", "display-template", "entity"}) | CONTEXTUAL_KEYWORDS
)

BOOLEAN_WORDS: Final[frozenset[str]] = frozenset({"true", "false"})

KEYWORDS: Final[frozenset[str]] = (
    STRUCTURE_KEYWORDS
    | GEOMETRY_KEYWORDS
    | ANIMATION_KEYWORDS
    | LAYOUT_KEYWORDS
    | CONTROL_KEYWORDS
    | TYPE_KEYWORDS
    | GAME_KEYWORDS
)

DURATION_UNITS: Final[tuple[str, ...]] = ("ms", "s", "m", "h")
