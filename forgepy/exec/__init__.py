"""Statement execution and user-defined functions."""

from forgepy.exec.executor import (
    BREAK,
    CONTINUE,
    MAX_LOOP_ITERATIONS,
    NORMAL,
    ExecutionCallbacks,
    ExecutionResult,
    execute_statement,
    execute_statements,
)
from forgepy.exec.functions import FunctionRegistry

__all__ = [
    "BREAK",
    "CONTINUE",
    "MAX_LOOP_ITERATIONS",
    "NORMAL",
    "ExecutionCallbacks",
    "ExecutionResult",
    "FunctionRegistry",
    "execute_statement",
    "execute_statements",
]
