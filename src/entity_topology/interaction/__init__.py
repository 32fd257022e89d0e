"""Pointer interaction: drag, pan/zoom and hover."""

from entity_topology.interaction.controller import (
    TRANSITIONS,
    InteractionController,
    InteractionMode,
)
from entity_topology.interaction.tooltip import (
    TooltipState,
    build_tooltip,
    format_attribute_value,
)
from entity_topology.interaction.zoom import IDENTITY, ZoomBehavior, ZoomTransform, wheel_delta

__all__ = [
    "InteractionController",
    "InteractionMode",
    "TRANSITIONS",
    "TooltipState",
    "build_tooltip",
    "format_attribute_value",
    "ZoomTransform",
    "ZoomBehavior",
    "IDENTITY",
    "wheel_delta",
]
