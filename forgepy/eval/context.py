"""Layered evaluation context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from forgepy.eval.builtins import BuiltinRegistry, default_builtins

if TYPE_CHECKING:
    from forgepy.eval.callables import FunctionTable


@dataclass(slots=True)
class EvalContext:
    """Variables, reactive state and config visible to an expression.

    `vars` holds locals (parameters, loop variables); lookups that miss walk
    `parent`. `state` and `config` are shared by reference with every child so
    writes made through the VM are seen immediately.
    """

    vars: dict[str, Any] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)
    parent: EvalContext | None = None
    builtins: BuiltinRegistry = field(default_factory=default_builtins)
    functions: FunctionTable | None = None

    def lookup(self, name: str) -> Any:
        scope: EvalContext | None = self
        while scope is not None:
            if name in scope.vars:
                return scope.vars[name]
            scope = scope.parent
        return None

    def has_var(self, name: str) -> bool:
        scope: EvalContext | None = self
        while scope is not None:
            if name in scope.vars:
                return True
            scope = scope.parent
        return False

    def child(self, vars: dict[str, Any] | None = None) -> EvalContext:
        return EvalContext(
            vars=vars if vars is not None else {},
            state=self.state,
            config=self.config,
            parent=self,
            builtins=self.builtins,
            functions=self.functions,
        )


def create_context(
    vars: dict[str, Any] | None = None,
    state: dict[str, Any] | None = None,
    config: dict[str, Any] | None = None,
    *,
    builtins: BuiltinRegistry | None = None,
    functions: FunctionTable | None = None,
) -> EvalContext:
    return EvalContext(
        vars=vars if vars is not None else {},
        state=state if state is not None else {},
        config=config if config is not None else {},
        builtins=builtins if builtins is not None else default_builtins(),
        functions=functions,
    )


def create_child_context(parent: EvalContext, vars: dict[str, Any] | None = None) -> EvalContext:
    return parent.child(vars)
