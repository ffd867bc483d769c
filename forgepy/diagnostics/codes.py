"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None

    def render(self, **values: object) -> str:
        """Fill the `{name}` placeholders of the message template."""
        if not values:
            return self.message
        return self.message.format(**values)


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string",
    hint="Close the string with a double quote on the same line.",
    category="lexer",
)

LEXER_INVALID_COLOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_COLOR",
    message="Invalid color literal '{literal}'",
    hint="Colors take 3, 4, 6 or 8 hex digits, e.g. `#ff8800`.",
    category="lexer",
)

LEXER_INCONSISTENT_INDENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INCONSISTENT_INDENT",
    message="Inconsistent indentation",
    hint="Dedent back to the column of an enclosing block.",
    category="lexer",
)

LEXER_UNEXPECTED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNEXPECTED_CHARACTER",
    message="Unexpected character '{char}'",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected {expected}, got {actual} ('{value}')",
    category="parser",
)

PARSER_EXPECTED_KEYWORD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_KEYWORD",
    message="Expected keyword '{expected}', got '{value}'",
    category="parser",
)

PARSER_EXPECTED_NAME: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_NAME",
    message="Expected identifier, got {actual} ('{value}')",
    category="parser",
)

PARSER_EXPECTED_LAYOUT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_LAYOUT",
    message="Expected {expected}, got {actual}",
    hint="Block headers end with a colon and their body goes on the following, deeper-indented lines.",
    category="parser",
)

PARSER_UNEXPECTED_KEYWORD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_KEYWORD",
    message="Unexpected keyword '{value}'",
    hint=(
        "Top-level definitions start with asset, layout, entity, machine, config, def, rule, "
        "scenario, behavior, condition, game, interaction or display-template."
    ),
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token at top level: '{value}'",
    category="parser",
)

PARSER_SYNTAX: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_SYNTAX",
    message="{detail}",
    category="parser",
)

PARSER_MISSING_FIELD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_FIELD",
    message="{detail}",
    hint="Add the required property to the definition block.",
    category="parser",
)

EVAL_UNKNOWN_FUNCTION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_UNKNOWN_FUNCTION",
    message="Unknown function: {name}",
    hint="Define it with `def` or register a builtin before evaluating.",
    category="eval",
)

EVAL_UNKNOWN_BINARY_OPERATOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_UNKNOWN_BINARY_OPERATOR",
    message="Unknown binary operator: {operator}",
    category="eval",
)

EVAL_UNKNOWN_UNARY_OPERATOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_UNKNOWN_UNARY_OPERATOR",
    message="Unknown unary operator: {operator}",
    category="eval",
)

EXEC_UNKNOWN_FUNCTION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EXEC_UNKNOWN_FUNCTION",
    message="Unknown function: {name}",
    category="exec",
)

EXEC_WHILE_LIMIT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EXEC_WHILE_LIMIT",
    message="While loop exceeded maximum iterations ({limit})",
    hint="Make sure the loop condition eventually becomes false.",
    category="exec",
)

EXEC_FOR_LIMIT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EXEC_FOR_LIMIT",
    message="For loop exceeded maximum iterations ({limit})",
    hint="Iterate over a smaller range.",
    category="exec",
)

COMPILE_FAILED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="COMPILE_FAILED",
    message="{detail}",
    category="compile",
)
