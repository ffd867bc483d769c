"""Lexer."""

from forgepy.lexer.lexer import Lexer, dump_tokens, tokenize
from forgepy.lexer.tokens import (
    BOOLEAN_WORDS,
    CONTEXTUAL_KEYWORDS,
    KEYWORDS,
    Token,
    TokenKind,
)

__all__ = [
    "BOOLEAN_WORDS",
    "CONTEXTUAL_KEYWORDS",
    "KEYWORDS",
    "Lexer",
    "Token",
    "TokenKind",
    "dump_tokens",
    "tokenize",
]
