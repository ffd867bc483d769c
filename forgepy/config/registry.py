"""Configuration values loaded from `config` definitions."""

import logging
from collections.abc import Mapping
from typing import Any

from forgepy.ast import ConfigDef, ConfigObject, ConfigValue, Module
from forgepy.eval import (
    BuiltinRegistry,
    EvalContext,
    create_context,
    evaluate,
    get_nested_value,
    set_nested_value,
)
from forgepy.parser import ParseMode, ParserOptions, parse

logger = logging.getLogger(__name__)

type ConfigScalar = int | float | str | bool
type ConfigRecord = dict[str, Any]


class ConfigRegistry:
    """Evaluated config namespaces addressed by dotted paths like `audio.volumes.master`.

    Values are evaluated once at load time. Colors are stored as their hex
    string, vectors and other records as plain dicts, and missing values as 0.
    """

    def __init__(self, *, builtins: BuiltinRegistry | None = None) -> None:
        self._values: ConfigRecord = {}
        self._builtins = builtins

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_definition(self, definition: ConfigDef) -> None:
        ctx = create_context(config=self._values, builtins=self._builtins)
        self._values[definition.name] = _evaluate_properties(definition.properties, ctx)
        logger.debug("Loaded config %r", definition.name)

    def load_module(self, module: Module) -> int:
        definitions = module.of_type(ConfigDef)
        for definition in definitions:
            self.load_definition(definition)
        return len(definitions)

    def load_source(
        self,
        text: str,
        options: ParserOptions | None = None,
        *,
        mode: ParseMode | None = None,
    ) -> int:
        return self.load_module(parse(text, options, mode=mode))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, path: str) -> Any:
        """Value at `path`, or `None` when any segment is missing."""
        return get_nested_value(self._values, path.split("."))

    def get_number(self, path: str, default: int | float = 0) -> int | float:
        value = self.get(path)
        if isinstance(value, int | float) and not isinstance(value, bool):
            return value
        return default

    def get_string(self, path: str, default: str = "") -> str:
        value = self.get(path)
        return value if isinstance(value, str) else default

    def get_boolean(self, path: str, default: bool = False) -> bool:
        value = self.get(path)
        return value if isinstance(value, bool) else default

    def get_required(self, path: str) -> Any:
        value = self.get(path)
        if value is None:
            raise KeyError(f"Required config value not found: {path}")
        return value

    def get_or_default(self, path: str, default: Any = None) -> Any:
        value = self.get(path)
        return default if value is None else value

    def has(self, path: str) -> bool:
        return self.get(path) is not None

    def names(self) -> list[str]:
        return list(self._values)

    def namespace(self, name: str) -> ConfigRecord | None:
        value = self._values.get(name)
        return value if isinstance(value, dict) else None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, path: str, value: object) -> None:
        set_nested_value(self._values, path.split("."), value)

    def clear(self) -> None:
        self._values.clear()

    def as_dict(self) -> ConfigRecord:
        """Live view of every namespace, shared with evaluation contexts."""
        return self._values

    def __contains__(self, name: object) -> bool:
        return name in self._values


def _evaluate_properties(properties: Mapping[str, ConfigValue], ctx: EvalContext) -> ConfigRecord:
    result: ConfigRecord = {}
    for key, value in properties.items():
        if isinstance(value, ConfigObject):
            result[key] = _evaluate_properties(value.properties, ctx)
        else:
            result[key] = to_config_value(evaluate(value, ctx))
    return result


def to_config_value(value: object) -> Any:
    match value:
        case None:
            return 0
        case bool() | int() | float() | str():
            return value
        case {"hex": str() as hex_value}:
            return hex_value
        case Mapping():
            return {str(key): to_config_value(item) for key, item in value.items()}
        case list() | tuple():
            return [to_config_value(item) for item in value]
        case _:
            return str(value)
