from __future__ import annotations

from typing import Any


class DragDropError(RuntimeError):
    """Base class for failures raised by the synthetic drag-and-drop sequence."""
    pass


class NonDraggableElementError(DragDropError):
    """Raised when the source element's `draggable` flag is false."""

    def __init__(self, element: Any, message: str = "trying to drag non-draggable element"):
        super().__init__(message)
        self.element = element


class InvalidDropTargetError(DragDropError):
    """Raised when the element under the pointer did not accept the drop on dragover."""

    def __init__(self, element: Any, location: Any, message: str = "trying to drop on invalid drop target"):
        super().__init__(f"{message} at {location}")
        self.element = element
        self.location = location


class ElementNotFoundError(DragDropError):
    """Raised when no element occupies a resolved page location."""

    def __init__(self, location: Any, message: str):
        super().__init__(message)
        self.location = location
