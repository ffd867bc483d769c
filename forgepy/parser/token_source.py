"""Token source: a forward cursor over the lexed token list."""

from forgepy.lexer import Token, TokenKind


class TokenSource:
    """Cursor over a token list that always ends in EOF.

    Reads past the end keep returning the final EOF token, so lookahead never
    needs bounds checks.
    """

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("Token stream must end with EOF")
        self._tokens = tokens
        self._position = 0

    @property
    def tokens(self) -> list[Token]:
        return self._tokens

    @property
    def position(self) -> int:
        return self._position

    @property
    def current(self) -> Token:
        return self.nth(0)

    def nth(self, n: int) -> Token:
        index = self._position + n
        if index >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[index]

    def bump(self) -> Token:
        token = self.current
        if token.kind != TokenKind.EOF:
            self._position += 1
        return token
