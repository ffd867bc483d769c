import textwrap

import pytest

from forgepy.diagnostics import EvalError, ExecutionError
from forgepy.exec import ExecutionCallbacks
from forgepy.parser import parse
from forgepy.vm import (
    ENTITY_KEY,
    ForgeVM,
    RenderedRow,
    VMCollision,
    VMEvent,
    VMOptions,
    substitute_template,
)
from tests._shared_cases import case_source


def vm_with(*sources: str, options: VMOptions | None = None) -> ForgeVM:
    vm = ForgeVM(options)
    for source in sources:
        vm.load_source(textwrap.dedent(source))
    return vm


def record_events(vm: ForgeVM, name: str = "*") -> list[VMEvent]:
    events: list[VMEvent] = []
    vm.on(name, events.append)
    return events


def event_names(events: list[VMEvent]) -> list[str]:
    return [event.name for event in events]


# ----------------------------------------------------------------------------
# State
# ----------------------------------------------------------------------------


def test_state_paths_create_nested_records() -> None:
    vm = ForgeVM()

    vm.set_state_value("player.health", 80)
    vm.merge_state({"power": 1, "player.name": "Ada"})

    assert vm.get_state() == {"player": {"health": 80, "name": "Ada"}, "power": 1}
    assert vm.get_state_value("player.health") == 80
    assert vm.get_state_value("player.mana") is None


def test_reset_state_clears_values_and_tick_count() -> None:
    vm = ForgeVM()
    vm.set_state_value("o2", 50)
    vm.tick()

    vm.reset_state()

    assert vm.get_state() == {}
    assert vm.tick_count == 0


# ----------------------------------------------------------------------------
# Loading
# ----------------------------------------------------------------------------


def test_load_module_registers_every_runtime_definition() -> None:
    vm = ForgeVM()
    vm.load_module(
        parse(
            "\n".join(
                case_source(name)
                for name in (
                    "config_game",
                    "function_damage",
                    "rule_low_oxygen",
                    "scenario_galley_escape",
                    "behavior_blinker",
                    "condition_escape",
                    "game_galley_escape",
                    "interaction_switch_use",
                    "display_template_status",
                )
            )
        )
    )

    assert vm.rule_names() == ["low_oxygen"]
    assert vm.has_rule("low_oxygen")
    assert not vm.has_rule("missing")
    assert vm.scenario_names() == ["galley_escape"]
    assert vm.behavior_names() == ["blinker"]
    assert vm.has_behavior("blinker")
    assert vm.condition_names() == ["escape"]
    assert vm.game_names() == ["galley_escape"]
    assert vm.interaction_names() == ["switch_use"]
    assert vm.display_template_names() == ["status_terminal"]
    assert vm.config.get("game.max_health") == 100
    assert vm.functions.has("damage")


def test_definitions_without_runtime_meaning_are_ignored() -> None:
    vm = vm_with(case_source("asset_minimal"), case_source("layout_galley"))

    assert vm.rule_names() == []
    assert vm.scenario_names() == []


def test_load_source_uses_permissive_parsing_by_default() -> None:
    vm = vm_with(case_source("stray_top_level_string_fails_in_strict_mode"))

    assert vm.rule_names() == ["greet"]


def test_clear_drops_definitions_listeners_and_state() -> None:
    vm = vm_with(case_source("rule_low_oxygen"), case_source("config_game"))
    events = record_events(vm)
    vm.set_state_value("o2", 10)

    vm.clear()
    vm.emit("anything")

    assert vm.rule_names() == []
    assert vm.config.names() == []
    assert vm.get_state() == {}
    assert events == []


def test_user_functions_are_callable_from_logic() -> None:
    vm = vm_with(
        case_source("function_damage"),
        """
        rule hit
          trigger: hit
          effect:
            set hp: $hp - damage(5)
        """,
    )
    vm.set_state_value("hp", 100)

    vm.emit("hit")

    assert vm.get_state_value("hp") == 90


def test_logic_reads_config_values() -> None:
    vm = vm_with(
        case_source("config_game"),
        """
        rule heal
          trigger: heal
          effect:
            set hp: $config.game.max_health
        """,
    )

    vm.emit("heal")

    assert vm.get_state_value("hp") == 100


# ----------------------------------------------------------------------------
# Scenarios and ticks
# ----------------------------------------------------------------------------


def test_start_scenario_applies_initial_state_and_announces_itself() -> None:
    vm = vm_with(case_source("scenario_galley_escape"))
    events = record_events(vm, "scenario:start")

    assert vm.start_scenario("galley_escape")
    assert vm.current_scenario() == "galley_escape"
    assert vm.get_state_value("o2") == 100
    assert vm.get_state_value("power") == 1
    assert events == [VMEvent("scenario:start", {"name": "galley_escape"})]


def test_start_unknown_scenario_is_refused() -> None:
    vm = ForgeVM()

    assert not vm.start_scenario("nowhere")
    assert vm.current_scenario() is None


def test_tick_sets_delta_and_tick_count() -> None:
    vm = ForgeVM()

    vm.tick()
    assert vm.get_state_value("delta") == pytest.approx(1 / 60)
    assert vm.get_state_value("tickCount") == 1

    vm.tick(0.5)
    assert vm.get_state_value("delta") == 0.5
    assert vm.tick_count == 2


def test_default_delta_comes_from_options() -> None:
    vm = ForgeVM(VMOptions(default_delta=0.1))

    vm.tick()

    assert vm.get_state_value("delta") == 0.1


def test_tick_runs_scenario_handlers_with_guards() -> None:
    vm = vm_with(case_source("scenario_galley_escape"))
    vm.start_scenario("galley_escape")

    for _ in range(3):
        vm.tick()
    assert vm.get_state_value("o2") == 97

    vm.set_state_value("o2", 0)
    vm.tick()
    assert vm.get_state_value("o2") == 0


def test_scenario_handlers_do_not_run_before_start() -> None:
    vm = vm_with(case_source("scenario_galley_escape"))
    vm.set_state_value("o2", 10)

    vm.tick()

    assert vm.get_state_value("o2") == 10


def test_tick_rules_respect_their_condition() -> None:
    vm = vm_with(case_source("rule_low_oxygen"))
    alarms = record_events(vm, "alarm:on")

    vm.set_state_value("o2", 50)
    vm.tick()
    assert vm.get_state_value("alarm") is None

    vm.set_state_value("o2", 10)
    vm.tick()
    assert vm.get_state_value("alarm") is True
    assert len(alarms) == 1


def test_paused_vm_ignores_ticks() -> None:
    vm = ForgeVM()

    vm.pause()
    vm.tick()
    assert vm.is_paused()
    assert vm.tick_count == 0

    vm.resume()
    vm.tick()
    assert not vm.is_paused()
    assert vm.tick_count == 1


# ----------------------------------------------------------------------------
# Events
# ----------------------------------------------------------------------------


def test_listeners_receive_name_and_data_and_wildcards_see_everything() -> None:
    vm = ForgeVM()
    specific = record_events(vm, "door:open")
    everything = record_events(vm)

    vm.emit("door:open", {"door": "galley"})
    vm.emit("other")

    assert specific == [VMEvent("door:open", {"door": "galley"})]
    assert event_names(everything) == ["door:open", "other"]


def test_unsubscribe_and_off() -> None:
    vm = ForgeVM()
    first: list[VMEvent] = []
    second: list[VMEvent] = []
    unsubscribe = vm.on("ping", first.append)
    vm.on("ping", second.append)

    unsubscribe()
    vm.off("ping", second.append)
    vm.emit("ping")

    assert first == []
    assert second == []


def test_rules_run_before_listeners() -> None:
    vm = vm_with(
        """
        rule greet
          trigger: hello
          effect:
            set greeted: true
        """
    )
    seen: list[object] = []
    vm.on("hello", lambda _event: seen.append(vm.get_state_value("greeted")))

    vm.emit("hello")

    assert seen == [True]


def test_rule_effects_can_emit_further_events() -> None:
    vm = vm_with(case_source("stray_top_level_string_fails_in_strict_mode"))
    events = record_events(vm)

    vm.emit("hello")

    assert event_names(events) == ["greeted", "hello"]


def test_behavior_handlers_respond_to_events() -> None:
    vm = vm_with(case_source("behavior_blinker"))

    vm.emit("toggle")
    assert vm.get_state_value("lit") is True

    vm.emit("toggle")
    assert vm.get_state_value("lit") is False


def test_event_entity_sets_context_only_while_dispatching() -> None:
    vm = vm_with(
        """
        behavior tagger
          on tag:
            emit "tagging"
        """
    )
    seen: list[object] = []
    vm.on("tagging", lambda _event: seen.append(vm.get_entity_context()))

    vm.emit("tag", {ENTITY_KEY: "lamp-3"})

    assert seen == ["lamp-3"]
    assert vm.get_entity_context() is None


def test_nested_emit_with_its_own_entity_restores_the_outer_one() -> None:
    vm = vm_with(
        """
        behavior relay
          on outer:
            emit "relay"
            emit "after"
          on inner:
            emit "inside"
        """
    )
    seen: list[tuple[str, object]] = []

    def on_emit(event: str) -> None:
        seen.append((event, vm.get_entity_context()))
        if event == "relay":
            vm.emit("inner", {ENTITY_KEY: "b"})

    vm.set_callbacks(ExecutionCallbacks(on_emit=on_emit))

    vm.emit("outer", {ENTITY_KEY: "a"})

    assert seen == [("relay", "a"), ("inside", "b"), ("after", "a")]
    assert vm.get_entity_context() is None


def test_entity_context_is_restored_when_a_handler_raises() -> None:
    vm = vm_with(
        """
        behavior fragile
          on poke:
            emit "boom"
        """
    )

    def on_emit(event: str) -> None:
        raise RuntimeError(f"handler failed on {event}")

    vm.set_callbacks(ExecutionCallbacks(on_emit=on_emit))
    vm.set_entity_context("base")

    with pytest.raises(RuntimeError, match="handler failed on boom"):
        vm.emit("poke", {ENTITY_KEY: "a"})

    assert vm.get_entity_context() == "base"


def test_builtins_registered_on_one_vm_stay_on_that_vm() -> None:
    source = """
        rule twice
          trigger: go
          effect:
            set out: twice(4)
        """
    first = vm_with(source)
    second = vm_with(source)
    first.builtins.register("twice", lambda x: x * 2)

    first.emit("go")

    assert first.get_state_value("out") == 8
    assert "twice" not in second.builtins
    with pytest.raises(EvalError, match="Unknown function: twice"):
        second.emit("go")


# ----------------------------------------------------------------------------
# Conditions
# ----------------------------------------------------------------------------


def test_condition_fires_once_with_message_and_effects() -> None:
    vm = vm_with(case_source("condition_escape"))
    events = record_events(vm)

    vm.tick()
    assert events == []

    vm.set_state_value("room", "corridor")
    vm.tick()
    vm.tick()

    assert event_names(events) == ["condition:victory", "game:victory", "escaped"]
    assert events[0].data == {"condition": "escape", "type": "victory", "message": "You escaped!"}
    assert events[1].data == {"condition": "escape", "message": "You escaped!"}


def test_reset_conditions_rearms_them() -> None:
    vm = vm_with(case_source("condition_escape"))
    fired = record_events(vm, "condition:victory")
    vm.set_state_value("room", "corridor")

    vm.tick()
    vm.reset_conditions()
    vm.tick()

    assert len(fired) == 2


def test_defeat_conditions_announce_game_over() -> None:
    vm = vm_with(
        """
        condition suffocated
          type: defeat
          trigger: $o2 <= 0
          message: "Out of air at tick " + $tickCount
        """
    )
    events = record_events(vm, "game:over")
    vm.set_state_value("o2", 0)

    vm.tick()

    assert events == [VMEvent("game:over", {"condition": "suffocated", "message": "Out of air at tick 1"})]


# ----------------------------------------------------------------------------
# Games
# ----------------------------------------------------------------------------


def test_game_definition_is_evaluated_into_a_record() -> None:
    vm = vm_with(case_source("game_galley_escape"))

    game = vm.get_game("galley_escape")

    assert game is not None
    assert (game.ship, game.layout, game.scenario) == ("galley", "galley", "galley_escape")
    assert game.player is not None
    assert game.player.controller == "first_person"
    assert game.player.spawn_position == {"x": 0, "y": 0.5, "z": 0}
    assert game.player.collision == VMCollision("cylinder", {"height": 1.6, "radius": 0.35})
    assert game.camera is not None
    assert game.camera.position == {"x": 0, "y": 5, "z": 10}
    assert game.camera.fov == 60
    assert game.sync == {"o2": "ship.o2"}
    assert game.properties == {"difficulty": "hard"}
    assert vm.get_game("missing") is None


def test_start_game_runs_on_start_then_announces() -> None:
    vm = vm_with(case_source("game_galley_escape"))
    events = record_events(vm)

    assert vm.start_game("galley_escape")
    assert vm.active_game() is vm.get_game("galley_escape")
    assert event_names(events) == ["intro", "game:start"]
    assert not vm.start_game("missing")


def test_trigger_victory_and_gameover() -> None:
    vm = vm_with(case_source("game_galley_escape"))
    events = record_events(vm)

    vm.trigger_victory()
    assert events == []

    vm.start_game("galley_escape")
    vm.trigger_victory()
    vm.trigger_gameover()

    assert vm.get_state_value("won") is True
    assert event_names(events)[-2:] == ["game:victory", "game:gameover"]


# ----------------------------------------------------------------------------
# Interactions
# ----------------------------------------------------------------------------


def test_find_matching_interactions_filters_by_condition() -> None:
    vm = vm_with(
        case_source("interaction_switch_use"),
        """
        interaction read_terminal
          target: terminal
          prompt: "Read"
        """,
    )

    assert [i.name for i in vm.find_matching_interactions({"type": "switch"})] == ["switch_use"]
    assert [i.name for i in vm.find_matching_interactions({"type": "terminal"})] == ["read_terminal"]
    assert [i.name for i in vm.find_matching_interactions({"entityType": "terminal"})] == ["read_terminal"]
    assert vm.find_matching_interactions({"type": "door"}) == []


def test_interaction_record_fields() -> None:
    vm = vm_with(case_source("interaction_switch_use"))

    interaction = vm.get_interaction("switch_use")

    assert interaction is not None
    assert interaction.range == 2.0
    assert interaction.properties == {"cooldown": 500}


def test_execute_interaction_runs_handler_and_announces() -> None:
    vm = vm_with(case_source("interaction_switch_use"), case_source("behavior_blinker"))
    events = record_events(vm)

    assert vm.execute_interaction("switch_use", {"type": "switch", "name": "Main"})
    assert vm.get_state_value("lit") is True
    assert vm.get_state_value("target.name") == "Main"
    assert event_names(events) == ["toggle", "interaction:execute"]
    assert not vm.execute_interaction("missing")


def test_interaction_prompts_substitute_target_fields() -> None:
    vm = vm_with(case_source("interaction_switch_use"))
    target = {"name": "Breaker"}

    assert vm.interaction_prompt("switch_use", target) == "Press [E] to use Breaker"
    assert vm.interaction_prompt("switch_use", target, broken=True) == "Breaker is broken"
    assert vm.interaction_prompt("missing") is None


# ----------------------------------------------------------------------------
# Display templates
# ----------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("o2_level", "color"),
    [(80, "nominal"), (35, "warning"), (5, "error")],
)
def test_render_display_template(o2_level: int, color: str) -> None:
    vm = vm_with(case_source("display_template_status"))

    rendered = vm.render_display_template(
        "status_terminal",
        {"location": "GALLEY", "o2_level": o2_level, "power": "ON"},
    )

    assert rendered is not None
    assert rendered.header == "=== GALLEY STATUS ==="
    assert rendered.footer == "END"
    assert rendered.rows == (
        RenderedRow("O2 LEVEL", f"{o2_level}%", color),
        RenderedRow("POWER", "ON", "nominal"),
    )


def test_display_template_record_and_unknown_template() -> None:
    vm = vm_with(case_source("display_template_status"))

    template = vm.get_display_template("status_terminal")

    assert template is not None
    assert (template.width, template.height) == (40, 12)
    assert template.rows[0].value == "{o2_level}%"
    assert vm.render_display_template("missing", {}) is None


def test_substitute_template() -> None:
    assert substitute_template("{a} and {b} and {a}", {"a": 1, "b": None}) == "1 and null and 1"
    assert substitute_template("{missing}", {}) == "{missing}"


# ----------------------------------------------------------------------------
# Entity context and callbacks
# ----------------------------------------------------------------------------


def test_execute_entity_behavior_scopes_entity_context() -> None:
    vm = vm_with(
        """
        behavior lamp
          on switch:
            emit "lamp:switched"
        """
    )
    seen: list[object] = []
    vm.on("lamp:switched", lambda _event: seen.append(vm.get_entity_context()))
    vm.set_entity_context("outer")

    vm.execute_entity_behavior("lamp", "switch", "lamp-1")
    vm.execute_entity_behavior("missing", "switch", "lamp-2")

    assert seen == ["lamp-1"]
    assert vm.get_entity_context() == "outer"
    assert vm.get_state_value(ENTITY_KEY) == "outer"


def test_set_callbacks_reach_user_hooks_after_the_vm() -> None:
    vm = vm_with(
        """
        rule open_door
          trigger: open
          effect:
            set door: "open"
            play(slide)
            emit "door:opened"
        """
    )
    log: list[tuple[str, object]] = []
    vm.set_callbacks(
        ExecutionCallbacks(
            on_set=lambda prop, value: log.append(("set", (prop, vm.get_state_value(prop)))),
            on_play_animation=lambda anim: log.append(("play", anim)),
            on_emit=lambda event: log.append(("emit", event)),
        )
    )

    vm.emit("open")

    assert log == [("set", ("door", "open")), ("play", "slide"), ("emit", "door:opened")]


def test_runaway_loops_surface_as_execution_errors() -> None:
    vm = vm_with(
        """
        rule spin
          trigger: spin
          effect:
            while true:
              set spinning: true
        """,
        options=VMOptions(max_loop_iterations=3),
    )

    with pytest.raises(ExecutionError, match="While loop exceeded maximum iterations"):
        vm.emit("spin")


def test_rules_run_before_behavior_handlers_for_the_same_event() -> None:
    vm = vm_with(
        """
        rule take_damage
          trigger: damage
          effect:
            set hp: $hp - 10
        behavior flinch
          on damage:
            set seen_hp: $hp
        """
    )
    vm.set_state_value("hp", 100)

    vm.emit("damage")

    assert vm.get_state_value("seen_hp") == 90
