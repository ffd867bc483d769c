"""Diagnostics."""

from forgepy.diagnostics.codes import (
    COMPILE_FAILED,
    EVAL_UNKNOWN_BINARY_OPERATOR,
    EVAL_UNKNOWN_FUNCTION,
    EVAL_UNKNOWN_UNARY_OPERATOR,
    EXEC_FOR_LIMIT,
    EXEC_UNKNOWN_FUNCTION,
    EXEC_WHILE_LIMIT,
    LEXER_INCONSISTENT_INDENT,
    LEXER_INVALID_COLOR,
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_KEYWORD,
    PARSER_EXPECTED_LAYOUT,
    PARSER_EXPECTED_NAME,
    PARSER_EXPECTED_TOKEN,
    PARSER_MISSING_FIELD,
    PARSER_SYNTAX,
    PARSER_UNEXPECTED_KEYWORD,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
)
from forgepy.diagnostics.diagnostic import Diagnostic, Severity, has_errors
from forgepy.diagnostics.errors import (
    CompileError,
    EvalError,
    ExecutionError,
    ForgeError,
    LexerError,
    ParseError,
    attach_source_context,
    format_error,
    format_errors,
)
from forgepy.diagnostics.format import format_forge_error

__all__ = [
    "COMPILE_FAILED",
    "EVAL_UNKNOWN_BINARY_OPERATOR",
    "EVAL_UNKNOWN_FUNCTION",
    "EVAL_UNKNOWN_UNARY_OPERATOR",
    "EXEC_FOR_LIMIT",
    "EXEC_UNKNOWN_FUNCTION",
    "EXEC_WHILE_LIMIT",
    "LEXER_INCONSISTENT_INDENT",
    "LEXER_INVALID_COLOR",
    "LEXER_UNEXPECTED_CHARACTER",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_KEYWORD",
    "PARSER_EXPECTED_LAYOUT",
    "PARSER_EXPECTED_NAME",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_MISSING_FIELD",
    "PARSER_SYNTAX",
    "PARSER_UNEXPECTED_KEYWORD",
    "PARSER_UNEXPECTED_TOKEN",
    "CompileError",
    "Diagnostic",
    "DiagnosticSpec",
    "EvalError",
    "ExecutionError",
    "ForgeError",
    "LexerError",
    "ParseError",
    "Severity",
    "attach_source_context",
    "format_error",
    "format_errors",
    "format_forge_error",
    "has_errors",
]
