"""User-defined function table backing calls that are not builtins."""

import logging

from forgepy.ast import FunctionDef, Module
from forgepy.diagnostics import EXEC_UNKNOWN_FUNCTION, ExecutionError
from forgepy.eval import EvalContext, Value, evaluate
from forgepy.exec.executor import MAX_LOOP_ITERATIONS, ExecutionCallbacks, execute_statements

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """Functions defined with `def`, callable from expressions and the VM.

    Calls run the body with the registry's callbacks, so side effects inside a
    function reach the same hooks as the caller's statements.
    """

    def __init__(
        self,
        callbacks: ExecutionCallbacks | None = None,
        *,
        max_iterations: int = MAX_LOOP_ITERATIONS,
    ) -> None:
        self._functions: dict[str, FunctionDef] = {}
        self.callbacks = callbacks
        self.max_iterations = max_iterations

    def register(self, definition: FunctionDef) -> None:
        self._functions[definition.name] = definition

    def get(self, name: str) -> FunctionDef | None:
        return self._functions.get(name)

    def has(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> list[str]:
        return list(self._functions)

    def clear(self) -> None:
        self._functions.clear()

    def load_from_module(self, module: Module) -> int:
        """Register every function definition in `module`; returns how many were added."""
        definitions = module.of_type(FunctionDef)
        for definition in definitions:
            self.register(definition)
        count = len(definitions)
        logger.debug("Registered %d function(s): %s", count, ", ".join(self._functions))
        return count

    def call(self, name: str, args: list[Value], ctx: EvalContext) -> Value:
        definition = self._functions.get(name)
        if definition is None:
            raise ExecutionError.from_spec(EXEC_UNKNOWN_FUNCTION, name=name)

        local_vars: dict[str, Value] = {}
        for index, param in enumerate(definition.params):
            if index < len(args):
                local_vars[param.name] = args[index]
            elif param.default is not None:
                local_vars[param.name] = evaluate(param.default, ctx)
            else:
                local_vars[param.name] = None

        call_ctx = ctx.child(local_vars)
        call_ctx.functions = self

        result = execute_statements(
            definition.body,
            call_ctx,
            self.callbacks,
            max_iterations=self.max_iterations,
        )
        return result.return_value

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)
