"""Runtime that owns game state and drives loaded logic from ticks and events."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any, Final

from forgepy.ast import (
    BehaviorDef,
    ConditionDef,
    DisplayTemplateDef,
    Expression,
    GameDef,
    InteractionDef,
    Module,
    OnBlock,
    RuleDef,
    ScenarioDef,
    Statement,
    Vec3,
)
from forgepy.config import ConfigRegistry
from forgepy.eval import (
    BuiltinRegistry,
    EvalContext,
    Value,
    Vec3Value,
    as_number,
    create_context,
    default_builtins,
    evaluate,
    evaluate_condition,
    get_nested_value,
    set_nested_value,
    to_display_string,
)
from forgepy.exec import ExecutionCallbacks, FunctionRegistry, execute_statements
from forgepy.parser import parse
from forgepy.vm.options import VMOptions
from forgepy.vm.records import (
    RenderedDisplay,
    RenderedRow,
    VMBehavior,
    VMCamera,
    VMCollision,
    VMCondition,
    VMDisplayRow,
    VMDisplayTemplate,
    VMEvent,
    VMEventListener,
    VMGame,
    VMInteraction,
    VMInteractionTarget,
    VMPlayer,
    VMRule,
    VMScenario,
)

logger = logging.getLogger(__name__)

ENTITY_KEY: Final[str] = "$entity"
WILDCARD: Final[str] = "*"
TICK_TRIGGER: Final[str] = "tick"


class ForgeVM:
    """Mutable game state plus the rules, scenarios, behaviors and conditions that act on it.

    Everything is synchronous. `tick()` runs tick rules, the active scenario's
    handlers and the condition checks; `emit()` runs matching rules and
    behavior handlers, then notifies listeners. Registries are owned per
    instance, so independent VMs share nothing.
    """

    def __init__(
        self,
        options: VMOptions | None = None,
        *,
        callbacks: ExecutionCallbacks | None = None,
    ) -> None:
        self.options = options or VMOptions()
        self._state: dict[str, Any] = {}
        self._builtins = default_builtins()
        self._config = ConfigRegistry(builtins=self._builtins)
        self._functions = FunctionRegistry(max_iterations=self.options.max_loop_iterations)

        self._rules: list[VMRule] = []
        self._scenarios: list[VMScenario] = []
        self._behaviors: list[VMBehavior] = []
        self._conditions: list[VMCondition] = []
        self._games: list[VMGame] = []
        self._interactions: list[VMInteraction] = []
        self._display_templates: list[VMDisplayTemplate] = []
        self._listeners: dict[str, list[VMEventListener]] = {}

        self._active_scenario: VMScenario | None = None
        self._active_game: VMGame | None = None
        self._tick_count = 0
        self._paused = False

        self._callbacks = ExecutionCallbacks()
        self._execution_callbacks = ExecutionCallbacks()
        self.set_callbacks(callbacks or ExecutionCallbacks())

    @property
    def config(self) -> ConfigRegistry:
        return self._config

    @property
    def builtins(self) -> BuiltinRegistry:
        return self._builtins

    @property
    def functions(self) -> FunctionRegistry:
        return self._functions

    @property
    def tick_count(self) -> int:
        return self._tick_count

    # ============================================================================
    # State
    # ============================================================================

    def get_state(self) -> dict[str, Any]:
        return self._state

    def get_state_value(self, path: str) -> Any:
        return get_nested_value(self._state, path.split("."))

    def set_state_value(self, path: str, value: object) -> None:
        set_nested_value(self._state, path.split("."), value)

    def merge_state(self, values: Mapping[str, object]) -> None:
        for key, value in values.items():
            self.set_state_value(key, value)

    def reset_state(self) -> None:
        self._state = {}
        self._tick_count = 0
        self.reset_conditions()

    def reset_conditions(self) -> None:
        for condition in self._conditions:
            condition.fired = False

    # ============================================================================
    # Loading
    # ============================================================================

    def load_module(self, module: Module) -> None:
        # Configs and functions first so definition properties can reference them.
        self._config.load_module(module)
        self._functions.load_from_module(module)

        for definition in module.definitions:
            match definition:
                case RuleDef(name=name, trigger=trigger, effects=effects, condition=condition):
                    self._rules.append(VMRule(name, trigger, effects, condition))
                case ScenarioDef(name=name, initial=initial, handlers=handlers):
                    self._scenarios.append(VMScenario(name, initial, handlers))
                case BehaviorDef(name=name, handlers=handlers):
                    self._behaviors.append(VMBehavior(name, handlers))
                case ConditionDef():
                    self._conditions.append(
                        VMCondition(
                            definition.name,
                            definition.condition_type,
                            definition.trigger,
                            definition.effects,
                            definition.message,
                        )
                    )
                case GameDef():
                    self._games.append(self._build_game(definition))
                case InteractionDef():
                    self._interactions.append(self._build_interaction(definition))
                case DisplayTemplateDef():
                    self._display_templates.append(self._build_display_template(definition))

        logger.debug(
            "Loaded module: %d rule(s), %d scenario(s), %d behavior(s), %d condition(s)",
            len(self._rules),
            len(self._scenarios),
            len(self._behaviors),
            len(self._conditions),
        )

    def load_source(self, text: str) -> None:
        self.load_module(parse(text, mode=self.options.parse_mode))

    def clear(self) -> None:
        self._rules.clear()
        self._scenarios.clear()
        self._behaviors.clear()
        self._conditions.clear()
        self._games.clear()
        self._interactions.clear()
        self._display_templates.clear()
        self._listeners.clear()
        self._active_scenario = None
        self._active_game = None
        self._functions.clear()
        self._config.clear()
        self.reset_state()

    def _build_game(self, definition: GameDef) -> VMGame:
        ctx = self._create_context()

        player: VMPlayer | None = None
        if definition.player is not None:
            player_def = definition.player
            collision: VMCollision | None = None
            if player_def.collision is not None:
                params = {key: as_number(evaluate(expr, ctx)) for key, expr in player_def.collision.params.items()}
                collision = VMCollision(player_def.collision.type, params)
            player = VMPlayer(
                controller=player_def.controller,
                spawn_room=player_def.spawn_room,
                spawn_position=_evaluate_vec3(player_def.spawn_position, ctx),
                collision=collision,
            )

        camera: VMCamera | None = None
        if definition.camera is not None:
            camera = VMCamera(
                type=definition.camera.type,
                position=_evaluate_vec3(definition.camera.position, ctx),
                look_at=_evaluate_vec3(definition.camera.look_at, ctx),
                fov=definition.camera.fov,
                view_size=definition.camera.view_size,
            )

        return VMGame(
            name=definition.name,
            ship=definition.ship,
            layout=definition.layout,
            scenario=definition.scenario,
            player=player,
            camera=camera,
            sync=dict(definition.sync.entries) if definition.sync is not None else None,
            on_start=definition.on_start or (),
            on_victory=definition.on_victory or (),
            on_gameover=definition.on_gameover or (),
            properties=_evaluate_properties(definition.properties, ctx),
        )

    def _build_interaction(self, definition: InteractionDef) -> VMInteraction:
        ctx = self._create_context()

        target: VMInteractionTarget | None = None
        if definition.target is not None:
            target = VMInteractionTarget(definition.target.entity_type, definition.target.condition)

        return VMInteraction(
            name=definition.name,
            target=target,
            range=None if definition.range is None else as_number(evaluate(definition.range, ctx)),
            prompt=_evaluate_text(definition.prompt, ctx),
            prompt_broken=_evaluate_text(definition.prompt_broken, ctx),
            on_interact=definition.on_interact or (),
            properties=_evaluate_properties(definition.properties, ctx),
        )

    def _build_display_template(self, definition: DisplayTemplateDef) -> VMDisplayTemplate:
        ctx = self._create_context()
        rows = tuple(
            VMDisplayRow(
                label=to_display_string(evaluate(row.label, ctx)),
                value=to_display_string(evaluate(row.value, ctx)),
                color_conditions=row.color_conditions,
            )
            for row in definition.rows
        )
        return VMDisplayTemplate(
            name=definition.name,
            width=None if definition.width is None else as_number(evaluate(definition.width, ctx)),
            height=None if definition.height is None else as_number(evaluate(definition.height, ctx)),
            header=_evaluate_text(definition.header, ctx),
            footer=_evaluate_text(definition.footer, ctx),
            rows=rows,
            properties=_evaluate_properties(definition.properties, ctx),
        )

    # ============================================================================
    # Scenarios
    # ============================================================================

    def start_scenario(self, name: str) -> bool:
        scenario = next((s for s in self._scenarios if s.name == name), None)
        if scenario is None:
            return False

        self._active_scenario = scenario
        ctx = self._create_context()
        for key, expr in scenario.initial.items():
            self.set_state_value(key, evaluate(expr, ctx))

        logger.debug("Started scenario %r", name)
        self.emit("scenario:start", {"name": name})
        return True

    def current_scenario(self) -> str | None:
        return None if self._active_scenario is None else self._active_scenario.name

    def scenario_names(self) -> list[str]:
        return [scenario.name for scenario in self._scenarios]

    # ============================================================================
    # Games
    # ============================================================================

    def get_game(self, name: str) -> VMGame | None:
        return next((game for game in self._games if game.name == name), None)

    def game_names(self) -> list[str]:
        return [game.name for game in self._games]

    def active_game(self) -> VMGame | None:
        return self._active_game

    def start_game(self, name: str) -> bool:
        game = self.get_game(name)
        if game is None:
            return False

        self._active_game = game
        self._execute(game.on_start)
        logger.debug("Started game %r", name)
        self.emit("game:start", {"name": name, "game": game})
        return True

    def trigger_victory(self) -> None:
        game = self._active_game
        if game is None:
            return
        self._execute(game.on_victory)
        self.emit("game:victory", {"name": game.name})

    def trigger_gameover(self) -> None:
        game = self._active_game
        if game is None:
            return
        self._execute(game.on_gameover)
        self.emit("game:gameover", {"name": game.name})

    # ============================================================================
    # Interactions
    # ============================================================================

    def get_interaction(self, name: str) -> VMInteraction | None:
        return next((i for i in self._interactions if i.name == name), None)

    def interaction_names(self) -> list[str]:
        return [interaction.name for interaction in self._interactions]

    def find_matching_interactions(self, target: Mapping[str, Any]) -> list[VMInteraction]:
        """Interactions whose target filter accepts `target`.

        Target properties are visible both as `target.<key>` and as bare
        identifiers, so `where type == "switch"` works.
        """
        ctx = self._create_context()
        ctx.vars = {"target": dict(target), **target}

        entity_type = target.get("type")
        if entity_type is None:
            entity_type = target.get("entityType")

        matches: list[VMInteraction] = []
        for interaction in self._interactions:
            target_filter = interaction.target
            if target_filter is not None:
                if target_filter.entity_type is not None and entity_type != target_filter.entity_type:
                    continue
                if target_filter.condition is not None and not evaluate_condition(target_filter.condition, ctx):
                    continue
            matches.append(interaction)
        return matches

    def execute_interaction(self, name: str, target: Mapping[str, Any] | None = None) -> bool:
        interaction = self.get_interaction(name)
        if interaction is None or not interaction.on_interact:
            return False

        ctx = self._create_context()
        if target is not None:
            ctx.vars = {"target": dict(target)}
            self.set_state_value("target", dict(target))

        self._execute(interaction.on_interact, ctx)
        self.emit("interaction:execute", {"interaction": name, "target": target})
        return True

    def interaction_prompt(
        self,
        name: str,
        target: Mapping[str, Any] | None = None,
        *,
        broken: bool = False,
    ) -> str | None:
        interaction = self.get_interaction(name)
        if interaction is None:
            return None

        template = interaction.prompt_broken if broken and interaction.prompt_broken else interaction.prompt
        if not template:
            return None
        return substitute_template(template, target or {})

    # ============================================================================
    # Display templates
    # ============================================================================

    def get_display_template(self, name: str) -> VMDisplayTemplate | None:
        return next((t for t in self._display_templates if t.name == name), None)

    def display_template_names(self) -> list[str]:
        return [template.name for template in self._display_templates]

    def render_display_template(self, name: str, data: Mapping[str, Any]) -> RenderedDisplay | None:
        template = self.get_display_template(name)
        if template is None:
            return None

        ctx = self._create_context()
        ctx.vars = dict(data)

        rows: list[RenderedRow] = []
        for row in template.rows:
            color = next(
                (cc.color_name for cc in row.color_conditions if evaluate_condition(cc.condition, ctx)),
                "nominal",
            )
            rows.append(
                RenderedRow(
                    label=substitute_template(row.label, data),
                    value=substitute_template(row.value, data),
                    color=color,
                )
            )

        return RenderedDisplay(
            header=None if template.header is None else substitute_template(template.header, data),
            footer=None if template.footer is None else substitute_template(template.footer, data),
            rows=tuple(rows),
        )

    # ============================================================================
    # Execution
    # ============================================================================

    def set_callbacks(self, callbacks: ExecutionCallbacks) -> None:
        """Install side-effect hooks; `set` and `emit` reach the VM before the hook."""
        self._callbacks = callbacks
        self._execution_callbacks = replace(callbacks, on_set=self._handle_set, on_emit=self._handle_emit)
        self._functions.callbacks = self._execution_callbacks

    def _handle_set(self, prop: str, value: Value) -> None:
        self.set_state_value(prop, value)
        if self._callbacks.on_set is not None:
            self._callbacks.on_set(prop, value)

    def _handle_emit(self, event: str) -> None:
        self.emit(event)
        if self._callbacks.on_emit is not None:
            self._callbacks.on_emit(event)

    def tick(self, delta: float | None = None) -> None:
        if self._paused:
            return

        self._tick_count += 1
        self.set_state_value("delta", self.options.default_delta if delta is None else delta)
        self.set_state_value("tickCount", self._tick_count)

        for rule in self._rules:
            if rule.trigger == TICK_TRIGGER:
                self._execute_rule(rule)

        if self._active_scenario is not None:
            for handler in self._active_scenario.handlers:
                self._execute_handler(handler)

        self._check_conditions()

    def _check_conditions(self) -> None:
        ctx = self._create_context()
        for condition in self._conditions:
            if condition.fired or not evaluate_condition(condition.trigger, ctx):
                continue

            condition.fired = True
            message = None if condition.message is None else to_display_string(evaluate(condition.message, ctx))
            logger.debug("Condition %r fired (%s)", condition.name, condition.condition_type)

            self.emit(
                f"condition:{condition.condition_type}",
                {"condition": condition.name, "type": condition.condition_type, "message": message},
            )
            if condition.condition_type == "victory":
                self.emit("game:victory", {"condition": condition.name, "message": message})
            elif condition.condition_type == "defeat":
                self.emit("game:over", {"condition": condition.name, "message": message})

            self._execute(condition.effects, ctx)

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def is_paused(self) -> bool:
        return self._paused

    def _execute_rule(self, rule: VMRule) -> None:
        ctx = self._create_context()
        if rule.condition is not None and not evaluate_condition(rule.condition, ctx):
            return
        self._execute(rule.effects, ctx)

    def _execute_handler(self, handler: OnBlock) -> None:
        ctx = self._create_context()
        if handler.condition is not None and not evaluate_condition(handler.condition, ctx):
            return
        self._execute(handler.body, ctx)

    def _execute(self, statements: Sequence[Statement], ctx: EvalContext | None = None) -> None:
        if statements:
            execute_statements(
                statements,
                ctx if ctx is not None else self._create_context(),
                self._execution_callbacks,
                max_iterations=self.options.max_loop_iterations,
            )

    # ============================================================================
    # Events
    # ============================================================================

    def emit(self, name: str, data: dict[str, Any] | None = None) -> None:
        """Dispatch `name`: rules, then behavior handlers, then listeners, then `*` listeners.

        A `"$entity"` entry in `data` becomes the entity context while rules
        and behaviors run; the previous context is restored afterwards.
        """
        event = VMEvent(name, data)

        entity_id = None if data is None else data.get(ENTITY_KEY)
        previous_entity = self.get_entity_context()
        if entity_id:
            self.set_entity_context(entity_id)

        try:
            for rule in self._rules:
                if rule.trigger == name:
                    self._execute_rule(rule)

            for behavior in self._behaviors:
                for handler in behavior.handlers:
                    if handler.event == name:
                        self._execute_handler(handler)
        finally:
            self.set_entity_context(previous_entity)

        for listener in list(self._listeners.get(name, ())):
            listener(event)
        for listener in list(self._listeners.get(WILDCARD, ())):
            listener(event)

    def on(self, name: str, listener: VMEventListener) -> Callable[[], None]:
        """Subscribe `listener`; the returned callable unsubscribes it."""
        listeners = self._listeners.setdefault(name, [])
        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def off(self, name: str, listener: VMEventListener) -> None:
        listeners = self._listeners.get(name)
        if listeners is not None and listener in listeners:
            listeners.remove(listener)

    # ============================================================================
    # Entity context
    # ============================================================================

    def set_entity_context(self, entity_id: str | None) -> None:
        if entity_id:
            self._state[ENTITY_KEY] = entity_id
        else:
            self._state.pop(ENTITY_KEY, None)

    def get_entity_context(self) -> str | None:
        return self._state.get(ENTITY_KEY)

    def execute_entity_behavior(self, behavior_name: str, event: str, entity_id: str) -> None:
        behavior = next((b for b in self._behaviors if b.name == behavior_name), None)
        if behavior is None:
            return

        previous_entity = self.get_entity_context()
        self.set_entity_context(entity_id)
        try:
            for handler in behavior.handlers:
                if handler.event == event:
                    self._execute_handler(handler)
        finally:
            self.set_entity_context(previous_entity)

    # ============================================================================
    # Queries
    # ============================================================================

    def rule_names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def has_rule(self, name: str) -> bool:
        return any(rule.name == name for rule in self._rules)

    def behavior_names(self) -> list[str]:
        return [behavior.name for behavior in self._behaviors]

    def has_behavior(self, name: str) -> bool:
        return any(behavior.name == name for behavior in self._behaviors)

    def condition_names(self) -> list[str]:
        return [condition.name for condition in self._conditions]

    def _create_context(self) -> EvalContext:
        return create_context(
            state=self._state,
            config=self._config.as_dict(),
            builtins=self._builtins,
            functions=self._functions,
        )


def substitute_template(template: str, data: Mapping[str, Any]) -> str:
    """Replace every `{key}` with the display string of `data[key]`."""
    result = template
    for key, value in data.items():
        result = result.replace("{" + str(key) + "}", to_display_string(value))
    return result


def _evaluate_vec3(vector: Vec3 | None, ctx: EvalContext) -> Vec3Value | None:
    if vector is None:
        return None
    return {
        "x": as_number(evaluate(vector.x, ctx)),
        "y": as_number(evaluate(vector.y, ctx)),
        "z": as_number(evaluate(vector.z, ctx)),
    }


def _evaluate_text(expr: Expression | None, ctx: EvalContext) -> str | None:
    return None if expr is None else to_display_string(evaluate(expr, ctx))


def _evaluate_properties(properties: Mapping[str, Expression] | None, ctx: EvalContext) -> dict[str, Value]:
    if not properties:
        return {}
    return {key: evaluate(expr, ctx) for key, expr in properties.items()}
