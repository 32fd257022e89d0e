"""Hover tooltip state."""

import json
from dataclasses import dataclass
from typing import Any

from entity_topology.config import settings
from entity_topology.entity_types import type_caption
from entity_topology.models import EntityReference

POINTER_OFFSET_X = 14
POINTER_OFFSET_Y = -14


@dataclass(frozen=True)
class TooltipState:
    """Entity under the pointer and where to show its details (screen space)."""

    entity: EntityReference
    screen_x: float
    screen_y: float
    attributes: tuple[tuple[str, str], ...] = ()

    @property
    def title(self) -> str:
        return self.entity.name

    @property
    def subtitle(self) -> str:
        return type_caption(self.entity.type)

    def lines(self) -> list[str]:
        """Text lines shown in the tooltip body."""
        return [self.title, self.subtitle] + [f"{key}: {value}" for key, value in self.attributes]


def format_attribute_value(value: Any) -> str:
    """Render a scalar as text and anything else as compact JSON."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), default=str)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def build_tooltip(
    entity: EntityReference,
    pointer_x: float,
    pointer_y: float,
    viewport_width: float,
    viewport_height: float,
    margin: float | None = None,
    max_attributes: int | None = None,
) -> TooltipState:
    """
    Create the tooltip for a hovered entity.

    The position is offset from the pointer and clamped to stay at least
    ``margin`` pixels inside every viewport edge. Attributes keep their
    insertion order; only the first ``max_attributes`` are shown.
    """
    margin = margin if margin is not None else settings.tooltip_margin
    limit = max_attributes if max_attributes is not None else settings.tooltip_max_attributes

    screen_x = clamp(pointer_x + POINTER_OFFSET_X, margin, viewport_width - margin)
    screen_y = clamp(pointer_y + POINTER_OFFSET_Y, margin, viewport_height - margin)

    attributes = tuple(
        (key, format_attribute_value(value))
        for key, value in list(entity.attributes.items())[:limit]
    )
    return TooltipState(
        entity=entity,
        screen_x=screen_x,
        screen_y=screen_y,
        attributes=attributes,
    )
