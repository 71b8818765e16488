from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, TypedDict, Union

from selenium.webdriver.remote.webelement import WebElement


class LocationDict(TypedDict):
    x: float
    y: float


@dataclass(frozen=True)
class Point:
    """Absolute page position in CSS pixels."""
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def rounded(self) -> "Point":
        # halves round up, as Math.round does in the page
        return Point(math.floor(self.x + 0.5), math.floor(self.y + 0.5))

    def as_dict(self) -> LocationDict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Point":
        return cls(data["x"], data["y"])


@dataclass(frozen=True)
class ElementTarget:
    element: WebElement


@dataclass(frozen=True)
class OffsetTarget:
    offset: Point  # delta from the source element's top-left


DragTarget = Union[ElementTarget, OffsetTarget]


def _is_number(v: Any) -> bool:
    return isinstance(v, Real) and not isinstance(v, bool)


def as_drag_target(value: Any) -> DragTarget:
    """
    Classify a caller-supplied drag target by its shape.

    - WebElement -> ElementTarget
    - {"x": .., "y": ..}, Point-like objects, (x, y) tuples -> OffsetTarget
    """
    if isinstance(value, (ElementTarget, OffsetTarget)):
        return value
    if isinstance(value, WebElement):
        return ElementTarget(value)
    if isinstance(value, Mapping):
        x, y = value.get("x"), value.get("y")
        if _is_number(x) and _is_number(y):
            return OffsetTarget(Point(x, y))
    elif isinstance(value, tuple) and len(value) == 2:
        if _is_number(value[0]) and _is_number(value[1]):
            return OffsetTarget(Point(value[0], value[1]))
    elif _is_number(getattr(value, "x", None)) and _is_number(getattr(value, "y", None)):
        return OffsetTarget(Point(value.x, value.y))
    raise TypeError(
        f"drag target must be a WebElement or an x/y offset, got {type(value).__name__}"
    )


class DragState(str, Enum):
    MOVE_TO_SOURCE = "move_to_source"
    MOUSE_DOWN = "mouse_down"
    DRAG_START = "drag_start"
    DRAG = "drag"
    MOVE_TO_TARGET = "move_to_target"
    RESOLVE_TARGET_ELEMENT = "resolve_target_element"
    DRAG_OVER = "drag_over"
    DROP = "drop"
    DRAG_END = "drag_end"
    MOUSE_UP = "mouse_up"


# Execution order of the state machine
DRAG_SEQUENCE: tuple[DragState, ...] = tuple(DragState)


@dataclass(frozen=True)
class DragSession:
    """
    Value threaded through one drag-and-drop call.

    Every step returns a new DragSession; nothing here is mutated after creation.
    target_location / resolved_target_element stay None until the pointer has
    actually reached the target.
    """
    source_element: WebElement
    drag_target: DragTarget
    source_location: Point | None = None
    target_location: Point | None = None
    resolved_target_element: WebElement | None = None
    completed: tuple[DragState, ...] = ()

    @property
    def last_state(self) -> DragState | None:
        return self.completed[-1] if self.completed else None
