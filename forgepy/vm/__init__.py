"""Tick- and event-driven runtime for loaded Forge modules."""

from forgepy.vm.options import DEFAULT_DELTA, VMOptions
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
from forgepy.vm.vm import ENTITY_KEY, ForgeVM, substitute_template

__all__ = [
    "DEFAULT_DELTA",
    "ENTITY_KEY",
    "ForgeVM",
    "RenderedDisplay",
    "RenderedRow",
    "VMBehavior",
    "VMCamera",
    "VMCollision",
    "VMCondition",
    "VMDisplayRow",
    "VMDisplayTemplate",
    "VMEvent",
    "VMEventListener",
    "VMGame",
    "VMInteraction",
    "VMInteractionTarget",
    "VMOptions",
    "VMPlayer",
    "VMRule",
    "VMScenario",
    "substitute_template",
]
