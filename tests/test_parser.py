import textwrap

import pytest

from forgepy.ast import (
    AnimateStatement,
    AssetDef,
    BehaviorDef,
    BinaryOp,
    BooleanLiteral,
    BoxPrimitive,
    CodeRender,
    ConditionDef,
    ConfigDef,
    ConfigObject,
    DisplayTemplateDef,
    DurationLiteral,
    EmitStatement,
    EntityDef,
    ForStatement,
    FunctionCall,
    FunctionDef,
    GameDef,
    Identifier,
    IfStatement,
    InteractionDef,
    LayoutDef,
    ListLiteral,
    MachineDef,
    MatchBlock,
    MemberAccess,
    Module,
    NodeKind,
    NumberLiteral,
    OnBlock,
    PlayStatement,
    ReactiveRef,
    RepeatPattern,
    ReturnStatement,
    RowRender,
    RuleDef,
    ScenarioDef,
    SetStatement,
    StringLiteral,
    TextRender,
    UnaryOp,
    Vec2,
    Vec3,
    VoxelPrimitive,
    WhenBlock,
    WhileStatement,
)
from forgepy.diagnostics import ParseError
from forgepy.parser import ParseMode, ParserOptions, parse, parse_expression
from tests._shared_cases import ALL_FORGE_CASES, ForgeCase, case_id, case_source


def only[T](module: Module, cls: type[T]) -> T:
    definitions = module.of_type(cls)
    assert len(definitions) == 1
    return definitions[0]


def vec3(x: int | float, y: int | float, z: int | float) -> Vec3:
    return Vec3(NumberLiteral(x), NumberLiteral(y), NumberLiteral(z))


@pytest.mark.parametrize("case", ALL_FORGE_CASES, ids=case_id)
def test_permissive_mode_parses_every_case(case: ForgeCase) -> None:
    module = parse(case.source, mode=ParseMode.PERMISSIVE)

    assert isinstance(module, Module)


@pytest.mark.parametrize("case", ALL_FORGE_CASES, ids=case_id)
def test_strict_mode_matches_case_expectation(case: ForgeCase) -> None:
    if case.strict_should_parse_cleanly:
        parse(case.source, mode=ParseMode.STRICT)
        return

    with pytest.raises(ParseError) as exc_info:
        parse(case.source, mode=ParseMode.STRICT)
    assert exc_info.value.code == "PARSER_UNEXPECTED_TOKEN"


def test_parse_rejects_options_and_mode_together() -> None:
    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        parse("", ParserOptions(), mode=ParseMode.STRICT)


def test_empty_source_is_an_empty_module() -> None:
    assert parse(case_source("empty_source")).definitions == ()
    assert parse(case_source("comments_and_blank_lines_only")).definitions == ()


def test_permissive_mode_skips_stray_tokens_between_definitions() -> None:
    module = parse(case_source("stray_top_level_string_fails_in_strict_mode"))

    rule = only(module, RuleDef)
    assert rule.name == "greet"
    assert rule.trigger == "hello"


def test_unknown_top_level_keyword_fails_in_both_modes() -> None:
    for mode in ParseMode:
        with pytest.raises(ParseError, match="Unexpected keyword 'when'"):
            parse("when x:\n  emit \"a\"\n", mode=mode)


# ----------------------------------------------------------------------------
# Assets
# ----------------------------------------------------------------------------


def test_minimal_asset() -> None:
    asset = only(parse(case_source("asset_minimal")), AssetDef)

    assert asset.kind == NodeKind.ASSET
    assert asset.name == "test"
    assert asset.display_name == "Test Asset"
    assert asset.anchor == vec3(0, 0, 0)
    assert asset.loc.line == 1


def test_full_asset_blocks() -> None:
    asset = only(parse(case_source("asset_full")), AssetDef)

    assert asset.name == "door-sliding"
    assert asset.description == "Two panels that part in the middle"

    assert asset.params is not None
    speed, mode, enabled = asset.params.params
    assert speed.name == "speed"
    assert speed.type.name == "float"
    assert speed.type.constraint is not None
    assert speed.type.constraint.end == NumberLiteral(10)
    assert speed.default == NumberLiteral(4)
    assert mode.type.enum_values == ("ON", "OFF")
    assert mode.default == Identifier("ON")
    assert enabled.type.name == "bool"

    assert asset.geometry is not None
    box, voxel, repeat = asset.geometry.primitives
    assert isinstance(box, BoxPrimitive)
    assert box.end == vec3(10, 10, 2)
    assert box.type == "METAL"
    assert isinstance(voxel, VoxelPrimitive)
    assert voxel.type == "GLASS"
    assert isinstance(repeat, RepeatPattern)
    assert repeat.variables[0].name == "x"
    assert len(repeat.body) == 1

    assert asset.parts is not None
    left, right = asset.parts.parts
    assert left.position == vec3(0, 0, 0)
    assert isinstance(left.geometry[0], BoxPrimitive)
    assert left.geometry[0].size == vec3(2, 4, 1)
    assert right.position is None

    assert asset.states is not None
    assert [state.name for state in asset.states.states] == ["closed", "open"]
    assert asset.states.states[1].bindings[0].target == "left.position"

    assert asset.animations is not None
    animation = asset.animations.animations[0]
    assert animation.name == "open"
    assert animation.duration == DurationLiteral(300, "ms")
    assert [(k.percent, k.state, k.easing) for k in animation.keyframes] == [
        (0, "closed", None),
        (100, "open", "easeOutQuad"),
    ]

    child = asset.children[0]
    assert child.asset == "fan-blades"
    assert child.body == (AnimateStatement("spin", "z"),)


def test_duration_units_scale_to_milliseconds() -> None:
    assert parse_expression("2s") == DurationLiteral(2000, "s")
    assert parse_expression("1.5m") == DurationLiteral(90_000, "m")


def test_multi_variable_repeat_splits_vectors() -> None:
    source = textwrap.dedent(
        """\
        asset grid
          geometry:
            repeat x, y from (0, 0) to (4, 2):
              (x, y, 0) as METAL
        """
    )
    asset = only(parse(source), AssetDef)
    assert asset.geometry is not None
    repeat = asset.geometry.primitives[0]

    assert isinstance(repeat, RepeatPattern)
    assert [(v.name, v.start, v.end) for v in repeat.variables] == [
        ("x", NumberLiteral(0), NumberLiteral(4)),
        ("y", NumberLiteral(0), NumberLiteral(2)),
    ]


# ----------------------------------------------------------------------------
# Layouts and entities
# ----------------------------------------------------------------------------


def test_layout_sections() -> None:
    layout = only(parse(case_source("layout_galley")), LayoutDef)

    assert layout.coordinate == "voxel"
    assert [room.name for room in layout.rooms] == ["galley", "corridor"]
    assert layout.rooms[0].properties is None
    assert layout.rooms[1].properties == {"lit": BooleanLiteral(True)}

    door = layout.doors[0]
    assert door.facing == "east"
    assert door.connects == ("galley", "corridor")
    assert door.control == "door_switch"

    terminal = layout.terminals[0]
    assert (terminal.rotation, terminal.type) == (90, "status")
    assert layout.switches[0].status == "ok"

    light = layout.wall_lights[0]
    assert light.color is not None
    assert light.color.value == "#ffcc88"
    assert light.intensity == 2

    fan = layout.assets[0]
    assert (fan.asset, fan.facing) == ("wall-fan", "north")
    assert fan.properties == {"speed": NumberLiteral(3)}


def test_door_without_connects_is_rejected() -> None:
    source = textwrap.dedent(
        """\
        layout broken
          doors:
            d at (0, 0, 0) facing east:
              control: sw
        """
    )
    with pytest.raises(ParseError, match="Door must specify connects") as exc_info:
        parse(source)
    assert exc_info.value.code == "PARSER_MISSING_FIELD"


def test_entity_screen_render_and_styles() -> None:
    entity = only(parse(case_source("entity_status_panel")), EntityDef)

    assert entity.params is not None
    assert entity.params.params[0].default == StringLiteral("STATUS")

    assert entity.screen is not None
    assert entity.screen.size == Vec2(NumberLiteral(40), NumberLiteral(12))
    assert entity.screen.font == "mono"
    assert entity.screen.font_size == 14
    assert entity.screen.background is not None
    assert entity.screen.background.value == "#000000"

    assert entity.render is not None
    text, row, code, match = entity.render.body
    assert text == TextRender(StringLiteral("=== STATUS ==="), centered=True)
    assert row == RowRender(StringLiteral("O2"), ReactiveRef(("o2",)))
    assert code == CodeRender(ReactiveRef(("log",)), line_numbers=True)
    assert isinstance(match, MatchBlock)
    assert match.cases[0].body == (TextRender(StringLiteral("ALERT")),)
    assert match.cases[1].body == (TextRender(StringLiteral("All good")),)

    assert entity.styles is not None
    style = entity.styles.styles[0]
    assert style.name == "header"
    assert set(style.properties) == {"color", "bold"}

    handler = entity.body[0]
    assert isinstance(handler, OnBlock)
    assert handler.event == "activate"
    assert handler.body == (EmitStatement("panel:activated"),)


def test_entity_screen_requires_size() -> None:
    source = 'entity e\n  screen:\n    font: "mono"\n'

    with pytest.raises(ParseError, match="Screen must specify size"):
        parse(source)


# ----------------------------------------------------------------------------
# Logic definitions
# ----------------------------------------------------------------------------


def test_machine_states_and_transitions() -> None:
    machine = only(parse(case_source("machine_door")), MachineDef)

    assert machine.initial == "closed"
    closed, opening, open_state, locked = machine.states

    guarded, plain = closed.transitions
    assert (guarded.event, guarded.target) == ("open", "opening")
    assert guarded.guard == BinaryOp(">", ReactiveRef(("power",)), NumberLiteral(0))
    assert guarded.actions is None
    assert plain.guard is None

    assert opening.enter == (PlayStatement("open"),)
    assert opening.transitions[0].actions == (EmitStatement("door:opened"),)
    assert open_state.exit is not None
    assert locked.transitions[0].target == "closed"


def test_machine_requires_initial_state() -> None:
    with pytest.raises(ParseError, match="Machine must specify initial state"):
        parse("machine m\n  states:\n    idle:\n      on go -> idle\n")


def test_config_values_and_nested_objects() -> None:
    config = only(parse(case_source("config_game")), ConfigDef)

    assert config.name == "game"
    assert config.properties["max_health"] == NumberLiteral(100)
    player = config.properties["player"]
    assert isinstance(player, ConfigObject)
    assert player.properties["name"] == StringLiteral("Ada")
    assert config.properties["placeholder"] == NumberLiteral(0)
    assert config.properties["spawn"] == vec3(1, 2, 3)


def test_function_params_and_defaults() -> None:
    function = only(parse(case_source("function_damage")), FunctionDef)

    assert function.name == "damage"
    assert [(p.name, p.default) for p in function.params] == [
        ("amount", None),
        ("multiplier", NumberLiteral(2)),
    ]
    assert function.body == (
        ReturnStatement(BinaryOp("*", Identifier("amount"), Identifier("multiplier"))),
    )


def test_rule_trigger_condition_and_effects() -> None:
    rule = only(parse(case_source("rule_low_oxygen")), RuleDef)

    assert rule.trigger == "tick"
    assert rule.condition == BinaryOp("<", ReactiveRef(("o2",)), NumberLiteral(20))
    assert rule.effects == (
        SetStatement("alarm", BooleanLiteral(True)),
        EmitStatement("alarm:on"),
    )


def test_rule_trigger_defaults_to_tick() -> None:
    rule = only(parse('rule r\n  effect:\n    emit "x"\n'), RuleDef)

    assert rule.trigger == "tick"
    assert rule.condition is None


def test_scenario_initial_values_and_guarded_handler() -> None:
    scenario = only(parse(case_source("scenario_galley_escape")), ScenarioDef)

    assert scenario.initial == {"o2": NumberLiteral(100), "power": NumberLiteral(1)}
    handler = scenario.handlers[0]
    assert handler.event == "tick"
    assert handler.condition == BinaryOp(">", ReactiveRef(("o2",)), NumberLiteral(0))
    assert handler.body == (SetStatement("o2", BinaryOp("-", ReactiveRef(("o2",)), NumberLiteral(1))),)


def test_behavior_handler_with_if_else() -> None:
    behavior = only(parse(case_source("behavior_blinker")), BehaviorDef)

    statement = behavior.handlers[0].body[0]
    assert isinstance(statement, IfStatement)
    assert statement.elif_clauses == ()
    assert statement.else_body is not None


def test_condition_definition() -> None:
    condition = only(parse(case_source("condition_escape")), ConditionDef)

    assert condition.condition_type == "victory"
    assert condition.trigger == BinaryOp("==", ReactiveRef(("room",)), StringLiteral("corridor"))
    assert condition.message == StringLiteral("You escaped!")
    assert condition.effects == (EmitStatement("escaped"),)


def test_condition_requires_trigger() -> None:
    with pytest.raises(ParseError, match="Condition 'c' must have a trigger"):
        parse("condition c\n  type: defeat\n")


def test_condition_rejects_unknown_type() -> None:
    with pytest.raises(ParseError, match="Invalid condition type 'draw'"):
        parse("condition c\n  type: draw\n  trigger: true\n")


# ----------------------------------------------------------------------------
# Game-level definitions
# ----------------------------------------------------------------------------


def test_game_definition() -> None:
    game = only(parse(case_source("game_galley_escape")), GameDef)

    assert (game.ship, game.layout, game.scenario) == ("galley", "galley", "galley_escape")

    assert game.player is not None
    assert game.player.controller == "first_person"
    assert game.player.spawn_room == "galley"
    assert game.player.spawn_position == vec3(0, 0.5, 0)
    assert game.player.collision is not None
    assert game.player.collision.type == "cylinder"
    assert game.player.collision.params == {"height": NumberLiteral(1.6), "radius": NumberLiteral(0.35)}

    assert game.camera is not None
    assert game.camera.type == "perspective"
    assert game.camera.look_at == vec3(0, 0, 0)
    assert game.camera.fov == 60
    assert game.camera.view_size is None

    assert game.sync is not None
    assert game.sync.entries == {"o2": "ship.o2"}
    assert game.properties == {"difficulty": StringLiteral("hard")}
    assert game.on_start == (EmitStatement("intro"),)
    assert game.on_victory is not None
    assert game.on_gameover is None


def test_game_rejects_unknown_collision_type() -> None:
    source = "game g\n  player:\n    collision: sphere { radius: 1 }\n"

    with pytest.raises(ParseError, match="Unknown collision type 'sphere'"):
        parse(source)


def test_interaction_definition() -> None:
    interaction = only(parse(case_source("interaction_switch_use")), InteractionDef)

    assert interaction.target is not None
    assert interaction.target.entity_type is None
    assert interaction.target.condition == BinaryOp("==", Identifier("type"), StringLiteral("switch"))
    assert interaction.range == NumberLiteral(2)
    assert interaction.prompt == StringLiteral("Press [E] to use {name}")
    assert interaction.on_interact == (EmitStatement("toggle"),)
    assert interaction.properties == {"cooldown": DurationLiteral(500, "ms")}


def test_interaction_target_by_entity_type() -> None:
    interaction = only(parse("interaction use_door\n  target: door\n"), InteractionDef)

    assert interaction.target is not None
    assert interaction.target.entity_type == "door"


def test_display_template_rows_and_colors() -> None:
    template = only(parse(case_source("display_template_status")), DisplayTemplateDef)

    assert template.width == NumberLiteral(40)
    assert template.header == StringLiteral("=== {location} STATUS ===")
    o2_row, power_row = template.rows
    assert o2_row.label == StringLiteral("O2 LEVEL")
    assert [c.color_name for c in o2_row.color_conditions] == ["nominal", "warning", "error"]
    assert o2_row.color_conditions[0].condition == BinaryOp(">=", Identifier("o2_level"), NumberLiteral(50))
    assert power_row.value == StringLiteral("{power}")
    assert power_row.color_conditions == ()


# ----------------------------------------------------------------------------
# Statements and expressions
# ----------------------------------------------------------------------------


def test_control_flow_statements_in_function_body() -> None:
    source = textwrap.dedent(
        """\
        def count(limit):
          for i in [1, 2, 3, 4, 5, 6]:
            if i == 3:
              continue
            elif i > 5:
              break
          while $running:
            return
          when $ready:
            emit "ready"
          else:
            emit "waiting"
          match $mode:
            "a" -> emit "was_a", emit "again"
            "b":
              setState(b)
          return limit
        """
    )
    function = only(parse(source), FunctionDef)
    for_loop, while_loop, when, match, ret = function.body

    assert isinstance(for_loop, ForStatement)
    assert for_loop.variable == "i"
    if_statement = for_loop.body[0]
    assert isinstance(if_statement, IfStatement)
    assert len(if_statement.elif_clauses) == 1

    assert isinstance(while_loop, WhileStatement)
    assert while_loop.body == (ReturnStatement(),)

    assert isinstance(when, WhenBlock)
    assert when.else_body == (EmitStatement("waiting"),)

    assert isinstance(match, MatchBlock)
    assert match.cases[0].body == (EmitStatement("was_a"), EmitStatement("again"))
    assert len(match.cases[1].body) == 1

    assert ret == ReturnStatement(Identifier("limit"))


def test_animate_with_axis_and_speed() -> None:
    source = "behavior fan\n  on start:\n    animate spin on y at $speed * 2\n"
    behavior = only(parse(source), BehaviorDef)

    assert behavior.handlers[0].body == (
        AnimateStatement("spin", "y", BinaryOp("*", ReactiveRef(("speed",)), NumberLiteral(2))),
    )


def test_unknown_statement_is_rejected() -> None:
    with pytest.raises(ParseError, match="Expected statement, got 'jump'"):
        parse("behavior b\n  on go:\n    jump\n")


def test_expression_precedence() -> None:
    assert parse_expression("2 + 3 * 4") == BinaryOp(
        "+", NumberLiteral(2), BinaryOp("*", NumberLiteral(3), NumberLiteral(4))
    )
    assert parse_expression("a or b and c") == BinaryOp(
        "or", Identifier("a"), BinaryOp("and", Identifier("b"), Identifier("c"))
    )
    assert parse_expression("not $a == 1") == BinaryOp(
        "==", UnaryOp("not", ReactiveRef(("a",))), NumberLiteral(1)
    )


def test_postfix_member_access_and_calls() -> None:
    assert parse_expression("target.position.x") == MemberAccess(
        MemberAccess(Identifier("target"), "position"), "x"
    )
    assert parse_expression("clamp($hp, 0, 100)") == FunctionCall(
        "clamp", (ReactiveRef(("hp",)), NumberLiteral(0), NumberLiteral(100))
    )
    assert parse_expression("$config.audio.volume") == ReactiveRef(("config", "audio", "volume"))


def test_vectors_groups_and_lists() -> None:
    assert parse_expression("(1 + 2)") == BinaryOp("+", NumberLiteral(1), NumberLiteral(2))
    assert parse_expression("(1, 2)") == Vec2(NumberLiteral(1), NumberLiteral(2))
    assert parse_expression("[1, \"a\", []]") == ListLiteral(
        (NumberLiteral(1), StringLiteral("a"), ListLiteral(()))
    )


def test_color_intensity_operator() -> None:
    expr = parse_expression("#ff8800 @ 0.5")

    assert isinstance(expr, BinaryOp)
    assert expr.operator == "@"


def test_parse_expression_rejects_trailing_tokens() -> None:
    with pytest.raises(ParseError, match="Unexpected token after expression"):
        parse_expression("1 2")


def test_parse_error_location_points_at_offending_token() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse("rule r\n  trigger tick\n")

    error = exc_info.value
    assert error.code == "PARSER_EXPECTED_TOKEN"
    assert (error.line, error.column) == (2, 11)
    assert "Expected COLON" in error.message
