import pytest

from forgepy.diagnostics import (
    COMPILE_FAILED,
    EVAL_UNKNOWN_FUNCTION,
    CompileError,
    EvalError,
    ExecutionError,
    ForgeError,
    LexerError,
    ParseError,
    attach_source_context,
    format_error,
    format_errors,
    has_errors,
)
from forgepy.lexer import tokenize
from forgepy.parser import parse
from forgepy.text import SourceLocation

SOURCE = "first\nsecond line\nthird"


def test_str_includes_position_when_known() -> None:
    located = ForgeError("Boom", SourceLocation(2, 3))
    unlocated = ForgeError("Boom")

    assert str(located) == "Boom at line 2, column 3"
    assert (located.line, located.column) == (2, 3)
    assert str(unlocated) == "Boom"
    assert unlocated.line is None


def test_format_renders_context_caret_and_hint() -> None:
    error = ForgeError(
        "Boom",
        SourceLocation(2, 3),
        hint="Try again",
        source=SOURCE,
        file_path="ship.forge",
    )

    assert error.format().split("\n") == [
        "error: Boom",
        "  --> ship.forge:2:3",
        "    1 | first",
        ">   2 | second line",
        "      |   ^",
        "    3 | third",
        "",
        "hint: Try again",
    ]


def test_format_caret_spans_the_location_range() -> None:
    error = ForgeError("Bad word", SourceLocation(2, 8, 2, 12), source=SOURCE)

    assert "      |        ^^^^" in error.format().split("\n")


def test_format_without_source_is_just_the_header() -> None:
    assert ForgeError("Boom").format() == "error: Boom\n  --> 1:1"


@pytest.mark.parametrize(
    ("error_type", "default_code"),
    [
        (LexerError, "LEXER_ERROR"),
        (ParseError, "PARSER_ERROR"),
        (EvalError, "EVAL_ERROR"),
        (ExecutionError, "EXEC_ERROR"),
        (CompileError, "COMPILE_ERROR"),
        (ForgeError, "FORGE_ERROR"),
    ],
)
def test_to_diagnostic_defaults_code_from_category(error_type: type[ForgeError], default_code: str) -> None:
    diagnostic = error_type("Broken", SourceLocation(4, 2)).to_diagnostic()

    assert diagnostic.code == default_code
    assert diagnostic.message == "Broken"
    assert (diagnostic.line, diagnostic.column) == (4, 2)
    assert diagnostic.severity == "error"
    assert has_errors([diagnostic])


def test_errors_built_from_codes_carry_code_and_hint() -> None:
    error = EvalError.from_spec(EVAL_UNKNOWN_FUNCTION, SourceLocation(1, 5), name="warp")
    compile_error = CompileError.from_spec(COMPILE_FAILED, detail="No voxels to emit")

    assert error.message == "Unknown function: warp"
    assert error.to_diagnostic().code == "EVAL_UNKNOWN_FUNCTION"
    assert error.hint is not None
    assert str(compile_error) == "No voxels to emit"
    assert compile_error.category == "compile"


def test_every_stage_error_is_a_forge_error() -> None:
    with pytest.raises(ForgeError):
        tokenize('"open')
    with pytest.raises(ForgeError):
        parse("rule r\n  trigger tick\n")


def test_attach_source_context_defaults_missing_location() -> None:
    original = ExecutionError("Loop ran away", code="EXEC_WHILE_LIMIT", hint="Stop it")

    attached = attach_source_context(original, SOURCE, "ship.forge")

    assert attached.location == SourceLocation(1, 1)
    assert attached.code == "EXEC_WHILE_LIMIT"
    assert attached.format().startswith("error: Loop ran away\n  --> ship.forge:1:1\n>   1 | first")
    assert original.source is None


def test_format_errors_joins_reports_with_blank_lines() -> None:
    report = format_errors(
        [ForgeError("One", SourceLocation(1, 1)), ForgeError("Two", SourceLocation(3, 2))],
        SOURCE,
    )

    first, second = report.split("\n\nerror: ")
    assert first.startswith("error: One\n  --> 1:1")
    assert second.startswith("Two\n  --> 3:2")


def test_with_source_is_used_by_parse_errors() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse("rule r\n  trigger tick\n")

    rendered = exc_info.value.with_source("rule r\n  trigger tick\n", "r.forge").format()

    assert "  --> r.forge:2:11" in rendered
    assert ">   2 |   trigger tick" in rendered


def test_format_error_leaves_the_original_untouched() -> None:
    error = LexerError("Unexpected character '!'", SourceLocation(3, 1))

    rendered = format_error(error, SOURCE, "ship.forge")

    assert rendered.startswith("error: Unexpected character '!'\n  --> ship.forge:3:1")
    assert ">   3 | third" in rendered
    assert error.source is None
