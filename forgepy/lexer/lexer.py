"""Lexer."""

from forgepy.diagnostics import (
    LEXER_INCONSISTENT_INDENT,
    LEXER_INVALID_COLOR,
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
    LexerError,
)
from forgepy.lexer.tokens import BOOLEAN_WORDS, DURATION_UNITS, KEYWORDS, Token, TokenKind
from forgepy.text import SourceLocation

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "=": TokenKind.EQUALS,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
}

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    '"': '"',
    "\\": "\\",
    "{": "{",
    "}": "}",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_COLOR_LENGTHS = (3, 4, 6, 8)


class Lexer:
    """Indentation-aware lexer.

    Leading whitespace is measured at the start of every logical line (space = 1,
    tab = 2) and turned into INDENT/DEDENT tokens against an indent stack that
    starts at `[0]`. Blank and comment-only lines never touch the stack.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._line = 1
        self._column = 1
        self._indent_stack: list[int] = [0]
        self._at_line_start = True
        self._tokens: list[Token] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    @property
    def indent_depth(self) -> int:
        """Number of currently open indentation levels."""
        return len(self._indent_stack) - 1

    def lex(self) -> list[Token]:
        while not self.is_eof:
            if self._at_line_start:
                self._handle_indentation()
            self._scan_token()

        while len(self._indent_stack) > 1:
            self._indent_stack.pop()
            self._push(TokenKind.DEDENT, "", self._column)

        self._push(TokenKind.EOF, "", self._column)
        return self._tokens

    def _handle_indentation(self) -> None:
        indent = 0
        while not self.is_eof:
            ch = self._current_char()
            if ch == " ":
                indent += 1
            elif ch == "\t":
                indent += 2
            else:
                break
            self._advance(1)

        self._at_line_start = False

        # Blank and comment-only lines keep the current block open.
        ch = self._current_char()
        if self.is_eof or ch == "\n" or ch == "\r" or ch == "#":
            return

        current = self._indent_stack[-1]
        if indent > current:
            self._indent_stack.append(indent)
            self._push(TokenKind.INDENT, "", 1)
        elif indent < current:
            while len(self._indent_stack) > 1 and self._indent_stack[-1] > indent:
                self._indent_stack.pop()
                self._push(TokenKind.DEDENT, "", 1)
            if self._indent_stack[-1] != indent:
                raise LexerError.from_spec(LEXER_INCONSISTENT_INDENT, self._location())

    def _scan_token(self) -> None:
        ch = self._current_char()

        if ch == " " or ch == "\t" or ch == "\r":
            self._advance(1)
            return

        if ch == "\n":
            self._push(TokenKind.NEWLINE, "\n", self._column)
            self._position += 1
            self._line += 1
            self._column = 1
            self._at_line_start = True
            return

        if ch == "#":
            if self._peek_char() in _HEX_DIGITS:
                self._lex_color()
            else:
                self._skip_comment()
            return

        if ch == '"':
            self._lex_string()
            return

        if _is_digit(ch) or (ch == "-" and _is_digit(self._peek_char())):
            self._lex_number_or_duration()
            return

        # Multi-character operators
        if ch == "-" and self._peek_char() == ">":
            self._emit_operator(TokenKind.ARROW, "->")
            return
        if ch == "<" and self._peek_char() == "-" and self._peek_char(2) == ">":
            self._emit_operator(TokenKind.BIARROW, "<->")
            return
        if ch == "." and self._peek_char() == ".":
            self._emit_operator(TokenKind.RANGE, "..")
            return

        if ch == "$":
            self._emit_operator(TokenKind.DOLLAR, "$")
            return
        if ch == "%":
            self._emit_operator(TokenKind.PERCENT, "%")
            return
        if ch == "@":
            self._emit_operator(TokenKind.AT, "@")
            return

        if _is_alpha(ch):
            self._lex_identifier()
            return

        kind = _SINGLE_CHAR_TOKENS.get(ch)
        if kind is not None:
            self._emit_operator(kind, ch)
            return

        raise LexerError.from_spec(LEXER_UNEXPECTED_CHARACTER, self._location(), char=ch)

    def _skip_comment(self) -> None:
        # Consume until end of line, do not consume the newline itself.
        while not self.is_eof and self._current_char() != "\n":
            self._advance(1)

    def _lex_color(self) -> None:
        start_column = self._column
        self._advance(1)
        digits: list[str] = []
        while not self.is_eof and self._current_char() in _HEX_DIGITS:
            digits.append(self._current_char())
            self._advance(1)

        value = "#" + "".join(digits)
        if len(digits) not in _COLOR_LENGTHS:
            raise LexerError.from_spec(
                LEXER_INVALID_COLOR,
                SourceLocation(self._line, start_column),
                literal=value,
            )
        self._push(TokenKind.COLOR, value, start_column)

    def _lex_string(self) -> None:
        start = self._location()
        # Consume opening quote
        self._advance(1)
        chars: list[str] = []

        while not self.is_eof and self._current_char() != '"':
            ch = self._current_char()
            if ch == "\n":
                raise LexerError.from_spec(LEXER_UNTERMINATED_STRING, start)
            if ch == "\\" and self._position + 1 < len(self._source):
                self._advance(1)
                escaped = self._current_char()
                chars.append(_ESCAPES.get(escaped, escaped))
            else:
                chars.append(ch)
            self._advance(1)

        if self.is_eof:
            raise LexerError.from_spec(LEXER_UNTERMINATED_STRING, start)

        self._advance(1)
        self._tokens.append(Token(TokenKind.STRING, "".join(chars), start.line, start.column))

    def _lex_number_or_duration(self) -> None:
        start_column = self._column
        start = self._position
        if self._current_char() == "-":
            self._advance(1)
        self._consume_digits()

        if self._current_char() == ".":
            # `1..5` is a range; leave `..` for the next token.
            if self._peek_char() == ".":
                self._push(TokenKind.NUMBER, self._source[start : self._position], start_column)
                return
            self._advance(1)
            self._consume_digits()

        number = self._source[start : self._position]

        suffix_start = self._position
        while not self.is_eof and _is_alpha(self._current_char()):
            self._advance(1)
        suffix = self._source[suffix_start : self._position]

        if suffix in DURATION_UNITS:
            self._push(TokenKind.DURATION, number + suffix, start_column)
            return

        if suffix:
            # Not a duration unit, so the letters belong to the next token.
            self._column -= self._position - suffix_start
            self._position = suffix_start
        self._push(TokenKind.NUMBER, number, start_column)

    def _lex_identifier(self) -> None:
        start_column = self._column
        start = self._position
        while not self.is_eof:
            ch = self._current_char()
            if _is_alpha(ch) or _is_digit(ch) or ch == "-":
                self._advance(1)
                continue
            break

        value = self._source[start : self._position]
        if value in BOOLEAN_WORDS:
            kind = TokenKind.BOOLEAN
        elif value in KEYWORDS:
            kind = TokenKind.KEYWORD
        else:
            kind = TokenKind.IDENTIFIER
        self._push(kind, value, start_column)

    def _consume_digits(self) -> None:
        while not self.is_eof and _is_digit(self._current_char()):
            self._advance(1)

    def _emit_operator(self, kind: TokenKind, text: str) -> None:
        self._push(kind, text, self._column)
        self._advance(len(text))

    def _push(self, kind: TokenKind, value: str, column: int) -> None:
        self._tokens.append(Token(kind, value, self._line, column))

    def _location(self) -> SourceLocation:
        return SourceLocation(self._line, self._column)

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps
        self._column += steps


def _is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def tokenize(source: str) -> list[Token]:
    """Tokenize `source`, raising `LexerError` on the first malformed token."""
    return Lexer(source).lex()


def dump_tokens(tokens: list[Token]) -> None:
    """Print token list with kind, position, and value for debugging."""
    for i, tok in enumerate(tokens):
        print(f"{i:03d} {tok.kind.name:<11} {tok.line:>4}:{tok.column:<3} value={tok.value!r}")
