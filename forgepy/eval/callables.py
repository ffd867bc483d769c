"""Callables an expression can invoke: builtins by name or user functions by definition."""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Protocol

from forgepy.ast import FunctionDef
from forgepy.eval.builtins import BuiltinFn
from forgepy.eval.values import Value

if TYPE_CHECKING:
    from forgepy.eval.context import EvalContext


class CallableKind(StrEnum):
    BUILTIN = "builtin"
    USER_FUNCTION = "userFunction"


class FunctionTable(Protocol):
    """User-defined functions visible to an evaluation context."""

    def get(self, name: str) -> FunctionDef | None: ...

    def call(self, name: str, args: list[Value], ctx: EvalContext) -> Value: ...


@dataclass(frozen=True, slots=True)
class BuiltinCallable:
    kind: ClassVar[CallableKind] = CallableKind.BUILTIN

    name: str
    fn: BuiltinFn

    def invoke(self, args: list[Value], ctx: EvalContext) -> Value:
        return self.fn(*_fit_arguments(self.fn, args))


@dataclass(frozen=True, slots=True)
class UserFunctionCallable:
    kind: ClassVar[CallableKind] = CallableKind.USER_FUNCTION

    definition: FunctionDef
    table: FunctionTable

    @property
    def name(self) -> str:
        return self.definition.name

    def invoke(self, args: list[Value], ctx: EvalContext) -> Value:
        return self.table.call(self.definition.name, args, ctx)


type ForgeCallable = BuiltinCallable | UserFunctionCallable


@functools.cache
def _positional_arity(fn: BuiltinFn) -> int | None:
    """Number of positional parameters, or None when `fn` takes `*args`."""
    count = 0
    for parameter in inspect.signature(fn).parameters.values():
        match parameter.kind:
            case inspect.Parameter.VAR_POSITIONAL:
                return None
            case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                count += 1
    return count


def _fit_arguments(fn: BuiltinFn, args: list[Value]) -> list[Value]:
    """Missing arguments are passed as None and extra ones are dropped."""
    arity = _positional_arity(fn)
    if arity is None:
        return args
    return [*args[:arity], *([None] * (arity - len(args)))]


def resolve_callable(name: str, ctx: EvalContext) -> ForgeCallable | None:
    """Builtins win over user functions; user functions are searched up the context chain."""
    fn = ctx.builtins.get(name)
    if fn is not None:
        return BuiltinCallable(name, fn)

    scope: EvalContext | None = ctx
    while scope is not None:
        if scope.functions is not None:
            definition = scope.functions.get(name)
            if definition is not None:
                return UserFunctionCallable(definition, scope.functions)
        scope = scope.parent
    return None
