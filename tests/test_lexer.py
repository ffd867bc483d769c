import textwrap

import pytest

from forgepy.diagnostics import LexerError
from forgepy.lexer import Lexer, Token, TokenKind, dump_tokens, tokenize
from tests._shared_cases import ALL_FORGE_CASES, ForgeCase, case_id, case_source


def kinds(tokens: list[Token]) -> list[TokenKind]:
    return [token.kind for token in tokens]


def test_asset_header_is_keyword_then_hyphenated_identifier():
    tokens = tokenize("asset wall-fan")

    assert kinds(tokens) == [TokenKind.KEYWORD, TokenKind.IDENTIFIER, TokenKind.EOF]
    assert tokens[0].value == "asset"
    assert tokens[1].value == "wall-fan"


def test_indented_block_produces_indent_and_dedent():
    tokens = tokenize('asset foo\n  name: "Test"')

    assert kinds(tokens) == [
        TokenKind.KEYWORD,
        TokenKind.IDENTIFIER,
        TokenKind.NEWLINE,
        TokenKind.INDENT,
        TokenKind.IDENTIFIER,
        TokenKind.COLON,
        TokenKind.STRING,
        TokenKind.DEDENT,
        TokenKind.EOF,
    ]


def test_dedent_closes_every_open_level():
    src = textwrap.dedent(
        """\
        a
          b
            c
        d
        """
    )
    tokens = tokenize(src)

    dedents = [i for i, token in enumerate(tokens) if token.kind == TokenKind.DEDENT]
    assert len(dedents) == 2
    assert tokens[dedents[-1] + 1].value == "d"


def test_blank_and_comment_lines_do_not_change_indentation():
    src = "a\n  b\n\n# comment at column one\n  c\n"
    tokens = tokenize(src)

    assert kinds(tokens).count(TokenKind.INDENT) == 1
    assert kinds(tokens).count(TokenKind.DEDENT) == 1


def test_tabs_count_as_two_columns():
    tokens = tokenize("a\n\tb\n  c\n")

    assert kinds(tokens).count(TokenKind.INDENT) == 1
    assert kinds(tokens).count(TokenKind.DEDENT) == 1


def test_inconsistent_dedent_raises():
    with pytest.raises(LexerError, match="Inconsistent indentation") as exc_info:
        tokenize("a\n    b\n  c\n")

    assert exc_info.value.line == 3


def test_color_literals():
    for literal in ("#fff", "#ffff", "#ff0000", "#ff000080"):
        token = tokenize(literal)[0]
        assert token.kind == TokenKind.COLOR
        assert token.value == literal


def test_invalid_color_length_raises():
    with pytest.raises(LexerError, match="Invalid color literal '#ff00f'") as exc_info:
        tokenize("x: #ff00f")

    assert exc_info.value.code == "LEXER_INVALID_COLOR"


def test_hash_followed_by_non_hex_is_a_comment():
    tokens = tokenize("a # trailing comment\nb")

    assert kinds(tokens) == [TokenKind.IDENTIFIER, TokenKind.NEWLINE, TokenKind.IDENTIFIER, TokenKind.EOF]


def test_duration_literals():
    tokens = tokenize("300ms 2s 5m 1h")

    assert [token.kind for token in tokens[:4]] == [TokenKind.DURATION] * 4
    assert [token.value for token in tokens[:4]] == ["300ms", "2s", "5m", "1h"]


def test_number_followed_by_unknown_suffix_splits_into_two_tokens():
    tokens = tokenize("10px")

    assert kinds(tokens) == [TokenKind.NUMBER, TokenKind.IDENTIFIER, TokenKind.EOF]
    assert tokens[0].value == "10"
    assert tokens[1].value == "px"
    assert tokens[1].column == 3


def test_negative_number_and_minus_operator():
    tokens = tokenize("-2 - 3")

    assert kinds(tokens) == [TokenKind.NUMBER, TokenKind.MINUS, TokenKind.NUMBER, TokenKind.EOF]
    assert tokens[0].value == "-2"


def test_range_after_integer_is_not_a_decimal_point():
    tokens = tokenize("0..10")

    assert kinds(tokens) == [TokenKind.NUMBER, TokenKind.RANGE, TokenKind.NUMBER, TokenKind.EOF]
    assert [tokens[0].value, tokens[2].value] == ["0", "10"]


def test_reactive_reference():
    tokens = tokenize("$powered $speed")

    assert tokens[0].kind == TokenKind.DOLLAR
    assert tokens[1].kind == TokenKind.IDENTIFIER
    assert tokens[1].value == "powered"


def test_arrows():
    tokens = tokenize("-> <->")

    assert tokens[0].kind == TokenKind.ARROW
    assert tokens[1].kind == TokenKind.BIARROW


def test_vector_punctuation():
    tokens = tokenize("(1, 2, 3)")

    assert kinds(tokens) == [
        TokenKind.LPAREN,
        TokenKind.NUMBER,
        TokenKind.COMMA,
        TokenKind.NUMBER,
        TokenKind.COMMA,
        TokenKind.NUMBER,
        TokenKind.RPAREN,
        TokenKind.EOF,
    ]


def test_booleans_keywords_and_contextual_keywords():
    tokens = tokenize("true false when target speed")

    assert kinds(tokens)[:5] == [
        TokenKind.BOOLEAN,
        TokenKind.BOOLEAN,
        TokenKind.KEYWORD,
        TokenKind.KEYWORD,
        TokenKind.IDENTIFIER,
    ]


def test_token_kind_groups():
    layout = [kind for kind in TokenKind if kind.is_layout]
    literals = [kind for kind in TokenKind if kind.is_literal]

    assert layout == [TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT]
    assert TokenKind.COLOR in literals
    assert TokenKind.DURATION in literals
    assert TokenKind.IDENTIFIER not in literals
    assert TokenKind.KEYWORD.is_name and not TokenKind.STRING.is_name


def test_display_template_is_a_single_keyword():
    token = tokenize("display-template")[0]

    assert token.kind == TokenKind.KEYWORD
    assert token.value == "display-template"


def test_string_escapes_are_decoded():
    token = tokenize(r'"line\nnext \"quoted\" \{name\}"')[0]

    assert token.kind == TokenKind.STRING
    assert token.value == 'line\nnext "quoted" {name}'


def test_unterminated_string_reports_opening_quote():
    with pytest.raises(LexerError) as exc_info:
        tokenize('name: "open\n')

    error = exc_info.value
    assert error.code == "LEXER_UNTERMINATED_STRING"
    assert (error.line, error.column) == (1, 7)


def test_unexpected_character_raises():
    with pytest.raises(LexerError, match="Unexpected character '!'"):
        tokenize("a ! b")


def test_token_positions_are_one_based():
    tokens = tokenize("a\n  bc")

    assert (tokens[0].line, tokens[0].column) == (1, 1)
    bc = next(token for token in tokens if token.value == "bc")
    assert (bc.line, bc.column) == (2, 3)


def test_lexer_closes_every_indent_level_at_eof():
    lexer = Lexer("a\n  b\n")

    assert lexer.source == "a\n  b\n"
    lexer.lex()
    assert lexer.indent_depth == 0
    assert lexer.is_eof


@pytest.mark.parametrize("case", ALL_FORGE_CASES, ids=case_id)
def test_every_case_lexes_with_balanced_indentation(case: ForgeCase):
    tokens = tokenize(case.source)

    assert tokens[-1].kind == TokenKind.EOF
    assert kinds(tokens).count(TokenKind.INDENT) == kinds(tokens).count(TokenKind.DEDENT)


def test_dump_tokens_smoke(capsys: pytest.CaptureFixture[str]):
    dump_tokens(tokenize(case_source("rule_low_oxygen")))

    output = capsys.readouterr().out
    assert "KEYWORD" in output
    assert "value='low_oxygen'" in output
