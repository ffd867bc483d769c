"""Runtime logic definitions: machines, configs, functions, rules, scenarios, behaviors and conditions."""

from typing import cast

from forgepy.ast import (
    BehaviorDef,
    ConditionDef,
    ConditionType,
    ConfigDef,
    ConfigObject,
    ConfigValue,
    Expression,
    FunctionDef,
    FunctionParam,
    MachineDef,
    MachineState,
    MachineTransition,
    NumberLiteral,
    OnBlock,
    RuleDef,
    ScenarioDef,
    Statement,
)
from forgepy.lexer import TokenKind
from forgepy.parser.expressions import parse_expression
from forgepy.parser.parser import Parser
from forgepy.parser.statements import parse_body, parse_on

_CONDITION_TYPES: frozenset[str] = frozenset({"victory", "defeat", "checkpoint"})


# ============================================================================
# Machines
# ============================================================================


def parse_machine(parser: Parser) -> MachineDef:
    loc = parser.location
    parser.expect_keyword("machine")
    name = parser.expect_name()
    parser.open_block()

    initial: str | None = None
    states: list[MachineState] = []

    for token in parser.block_items():
        if parser.at_name("initial"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            initial = parser.expect_name()
            parser.expect_newline_or_dedent()
        elif parser.at_name("states"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            parser.open_block()
            states.extend(_parse_machine_state(parser) for _ in parser.block_items())
        else:
            raise parser.error(f"Unexpected token in machine: {token.value}")

    if initial is None:
        raise parser.missing_field("Machine must specify initial state")

    return MachineDef(name, initial, tuple(states), loc)


def _parse_machine_state(parser: Parser) -> MachineState:
    loc = parser.location
    name = parser.expect_name()
    parser.expect(TokenKind.COLON)
    parser.open_block()

    transitions: list[MachineTransition] = []
    enter: tuple[Statement, ...] | None = None
    exit: tuple[Statement, ...] | None = None

    for token in parser.block_items():
        if token.is_keyword("on"):
            transitions.append(_parse_transition(parser))
        elif parser.at_name("enter"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            enter = parse_body(parser)
        elif parser.at_name("exit"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            exit = parse_body(parser)
        else:
            raise parser.error(f"Unexpected token in machine state: {token.value}")

    return MachineState(name, tuple(transitions), enter, exit, loc)


def _parse_transition(parser: Parser) -> MachineTransition:
    loc = parser.location
    parser.expect_keyword("on")
    event = parser.expect_name()
    parser.expect(TokenKind.ARROW)
    target = parser.expect_name()

    guard: Expression | None = None
    if parser.at_keyword("when"):
        parser.bump()
        guard = parse_expression(parser)

    actions: tuple[Statement, ...] | None = None
    if parser.at(TokenKind.COLON):
        parser.bump()
        actions = parse_body(parser)
    else:
        parser.expect_newline_or_dedent()

    return MachineTransition(event, target, guard, actions, loc)


# ============================================================================
# Configs
# ============================================================================


def parse_config(parser: Parser) -> ConfigDef:
    loc = parser.location
    parser.expect_keyword("config")
    name = parser.expect_name()
    parser.open_block()
    return ConfigDef(name, _parse_config_properties(parser), loc)


def _parse_config_properties(parser: Parser) -> dict[str, ConfigValue]:
    properties: dict[str, ConfigValue] = {}
    for _ in parser.block_items():
        prop = parser.expect_name()
        parser.expect(TokenKind.COLON)
        properties[prop] = _parse_config_value(parser)
    return properties


def _parse_config_value(parser: Parser) -> ConfigValue:
    loc = parser.location
    if not parser.at(TokenKind.NEWLINE):
        value = parse_expression(parser)
        parser.expect_newline_or_dedent()
        return value

    parser.expect_newline()
    if parser.at(TokenKind.INDENT):
        parser.bump()
        return ConfigObject(_parse_config_properties(parser), loc)

    # `key:` with nothing nested under it.
    return NumberLiteral(0, loc)


# ============================================================================
# Functions
# ============================================================================


def parse_function(parser: Parser) -> FunctionDef:
    loc = parser.location
    parser.expect_keyword("def")
    name = parser.expect_name()
    parser.expect(TokenKind.LPAREN)

    params: list[FunctionParam] = []
    if not parser.at(TokenKind.RPAREN):
        params.append(_parse_function_param(parser))
        while parser.at(TokenKind.COMMA):
            parser.bump()
            params.append(_parse_function_param(parser))

    parser.expect(TokenKind.RPAREN)
    parser.expect(TokenKind.COLON)
    return FunctionDef(name, tuple(params), parse_body(parser), loc)


def _parse_function_param(parser: Parser) -> FunctionParam:
    loc = parser.location
    name = parser.expect_name()
    default: Expression | None = None
    if parser.at(TokenKind.EQUALS):
        parser.bump()
        default = parse_expression(parser)
    return FunctionParam(name, default, loc)


# ============================================================================
# Rules, scenarios and behaviors
# ============================================================================


def parse_rule(parser: Parser) -> RuleDef:
    loc = parser.location
    parser.expect_keyword("rule")
    name = parser.expect_name()
    parser.open_block()

    trigger = "tick"
    condition: Expression | None = None
    effects: list[Statement] = []

    for token in parser.block_items():
        if token.is_keyword("trigger"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            trigger = parser.expect_name()
            parser.expect_newline_or_dedent()
        elif token.is_keyword("when"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            condition = parse_expression(parser)
            parser.expect_newline_or_dedent()
        elif token.is_keyword("effect"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            effects.extend(parse_body(parser))
        else:
            raise parser.error(f"Unexpected token in rule: {token.value}")

    return RuleDef(name, tuple(effects), trigger, condition, loc)


def parse_scenario(parser: Parser) -> ScenarioDef:
    loc = parser.location
    parser.expect_keyword("scenario")
    name = parser.expect_name()
    parser.open_block()

    initial: dict[str, Expression] = {}
    handlers: list[OnBlock] = []

    for token in parser.block_items():
        if token.is_keyword("initial"):
            parser.bump()
            parser.expect(TokenKind.COLON)
            parser.open_block()
            for _ in parser.block_items():
                prop = parser.expect_name()
                parser.expect(TokenKind.COLON)
                initial[prop] = parse_expression(parser)
                parser.expect_newline_or_dedent()
        elif token.is_keyword("on"):
            handlers.append(parse_on(parser))
        else:
            raise parser.error(f"Unexpected token in scenario: {token.value}")

    return ScenarioDef(name, initial, tuple(handlers), loc)


def parse_behavior(parser: Parser) -> BehaviorDef:
    loc = parser.location
    parser.expect_keyword("behavior")
    name = parser.expect_name()
    parser.open_block()

    handlers: list[OnBlock] = []
    for token in parser.block_items():
        if not token.is_keyword("on"):
            raise parser.error(f"Unexpected token in behavior: {token.value}")
        handlers.append(parse_on(parser))

    return BehaviorDef(name, tuple(handlers), loc)


# ============================================================================
# Conditions
# ============================================================================


def parse_condition(parser: Parser) -> ConditionDef:
    """Parse a win/lose/checkpoint condition.

    ```
    condition escape_galley
      type: victory
      trigger: $player_room == "corridor"
      message: "You escaped!"
      effect:
        emit "game:victory"
    ```
    """
    loc = parser.location
    parser.expect_keyword("condition")
    name = parser.expect_name()
    parser.open_block()

    condition_type: ConditionType = "victory"
    trigger: Expression | None = None
    message: Expression | None = None
    effects: list[Statement] = []

    for token in parser.block_items():
        if not token.kind.is_name:
            raise parser.error(f"Unexpected token in condition: {token.value}")

        match token.value:
            case "type":
                parser.bump()
                parser.expect(TokenKind.COLON)
                value = parser.expect_name()
                if value not in _CONDITION_TYPES:
                    raise parser.error(
                        f"Invalid condition type '{value}', expected victory, defeat, or checkpoint"
                    )
                condition_type = cast(ConditionType, value)
                parser.expect_newline_or_dedent()
            case "trigger":
                parser.bump()
                parser.expect(TokenKind.COLON)
                trigger = parse_expression(parser)
                parser.expect_newline_or_dedent()
            case "message":
                parser.bump()
                parser.expect(TokenKind.COLON)
                message = parse_expression(parser)
                parser.expect_newline_or_dedent()
            case "effect":
                parser.bump()
                parser.expect(TokenKind.COLON)
                effects.extend(parse_body(parser))
            case _:
                raise parser.error(f"Unexpected token in condition: {token.value}")

    if trigger is None:
        raise parser.missing_field(f"Condition '{name}' must have a trigger")

    return ConditionDef(name, trigger, condition_type, message, tuple(effects), loc)
