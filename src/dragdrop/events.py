from __future__ import annotations

from typing import TYPE_CHECKING, Any

from selenium.webdriver.remote.webelement import WebElement

from . import snippets
from .instrumentation import Cat
from .types import Point

if TYPE_CHECKING:
    from .bridge import HostBridge
    from .session import BrowserSession


class EventSynthesizer:
    """Dispatches one synthetic, bubbling drag event per call inside the page."""

    def __init__(self, bridge: HostBridge, *, session: BrowserSession | None = None) -> None:
        self.bridge = bridge
        self._session = session

    def _dispatch(self, event: str, script: str, element: WebElement, location: Point) -> Any:
        if self._session:
            self._session.counters.inc(f"event.{event}")
            self._session.emit_trace(Cat.EVENT, f"dispatch {event}", x=location.x, y=location.y)
        return self.bridge.run_in_page(script, element, location.as_dict())

    def dragstart(self, element: WebElement, location: Point) -> bool:
        """Fire dragstart only if the element is draggable; returns the draggable flag."""
        return bool(self._dispatch("dragstart", snippets.DRAGSTART_IF_DRAGGABLE, element, location))

    def drag(self, element: WebElement, location: Point) -> None:
        self._dispatch("drag", snippets.DRAG, element, location)

    def dragover(self, element: WebElement, location: Point) -> bool:
        """Returns True when a dragover handler called preventDefault (drop accepted)."""
        return bool(self._dispatch("dragover", snippets.DRAGOVER_ACCEPTS_DROP, element, location))

    def drop(self, element: WebElement, location: Point) -> None:
        self._dispatch("drop", snippets.DROP, element, location)

    def dragend(self, element: WebElement, location: Point) -> None:
        self._dispatch("dragend", snippets.DRAGEND, element, location)
