import textwrap

import pytest

from forgepy.config import ConfigRegistry
from forgepy.config.registry import to_config_value
from forgepy.parser import parse
from tests._shared_cases import case_source


@pytest.fixture
def registry() -> ConfigRegistry:
    registry = ConfigRegistry()
    registry.load_source(case_source("config_game"))
    return registry


def test_load_source_counts_config_definitions() -> None:
    registry = ConfigRegistry()
    source = case_source("config_game") + "\n" + case_source("rule_low_oxygen")

    assert registry.load_source(source) == 1
    assert registry.names() == ["game"]
    assert "game" in registry


def test_scalar_lookups(registry: ConfigRegistry) -> None:
    assert registry.get("game.max_health") == 100
    assert registry.get("game.player.speed") == 4.5
    assert registry.get("game.player.name") == "Ada"
    assert registry.get("game.enabled") is True
    assert registry.get("game.missing") is None
    assert registry.get("nowhere.at.all") is None


def test_colors_become_hex_strings_and_vectors_become_records(registry: ConfigRegistry) -> None:
    assert registry.get("game.colors.warning") == "#ffaa00"
    assert registry.get("game.spawn") == {"x": 1, "y": 2, "z": 3}
    assert registry.get("game.spawn.z") == 3


def test_key_without_value_becomes_zero(registry: ConfigRegistry) -> None:
    assert registry.get("game.placeholder") == 0


def test_typed_getters_fall_back_on_type_mismatch(registry: ConfigRegistry) -> None:
    assert registry.get_number("game.max_health") == 100
    assert registry.get_number("game.player.name", default=-1) == -1
    assert registry.get_number("game.enabled") == 0
    assert registry.get_string("game.player.name") == "Ada"
    assert registry.get_string("game.max_health", default="n/a") == "n/a"
    assert registry.get_boolean("game.enabled") is True
    assert registry.get_boolean("game.max_health") is False


def test_get_required(registry: ConfigRegistry) -> None:
    assert registry.get_required("game.player.speed") == 4.5

    with pytest.raises(KeyError, match="Required config value not found: game.player.mana"):
        registry.get_required("game.player.mana")


def test_get_or_default_and_has(registry: ConfigRegistry) -> None:
    assert registry.get_or_default("game.player.mana", 50) == 50
    assert registry.get_or_default("game.max_health", 50) == 100
    assert registry.has("game.colors")
    assert not registry.has("game.colors.primary")


def test_namespace_returns_the_evaluated_tree(registry: ConfigRegistry) -> None:
    namespace = registry.namespace("game")

    assert namespace is not None
    assert namespace["player"] == {"speed": 4.5, "name": "Ada"}
    assert registry.namespace("audio") is None


def test_set_creates_intermediate_records_and_clear_empties(registry: ConfigRegistry) -> None:
    registry.set("audio.volumes.master", 0.8)
    registry.set("game.max_health", 150)

    assert registry.get("audio.volumes.master") == 0.8
    assert registry.get("game.max_health") == 150

    registry.clear()
    assert registry.names() == []
    assert registry.as_dict() == {}


def test_later_definitions_read_earlier_namespaces() -> None:
    registry = ConfigRegistry()
    registry.load_source(
        textwrap.dedent(
            """
            config base
              speed: 2
              tint: #336699

            config derived
              double: $config.base.speed * 2
              label: "speed " + $config.base.speed
              own: $config.derived.double
            """
        )
    )

    assert registry.get("derived.double") == 4
    assert registry.get("derived.label") == "speed 2"
    assert registry.get("derived.own") == 0


def test_expressions_are_evaluated_once_at_load() -> None:
    registry = ConfigRegistry()
    module = parse("config limits\n  max: clamp(150, 0, 100)\n  ratio: 1 / 4\n")

    assert registry.load_module(module) == 1
    assert registry.get("limits.max") == 100
    assert registry.get("limits.ratio") == 0.25


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0),
        (True, True),
        ("text", "text"),
        ({"hex": "#fff", "intensity": 2}, "#fff"),
        ({"x": 1, "y": None}, {"x": 1, "y": 0}),
        ([None, {"hex": "#000"}], [0, "#000"]),
    ],
)
def test_to_config_value(value: object, expected: object) -> None:
    assert to_config_value(value) == expected
