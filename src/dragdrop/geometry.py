from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from selenium.webdriver.remote.webelement import WebElement

from . import snippets
from .errors import ElementNotFoundError
from .instrumentation import Cat
from .types import DragTarget, ElementTarget, OffsetTarget, Point

if TYPE_CHECKING:
    from .bridge import HostBridge
    from .session import BrowserSession


class GeometryResolver:
    """
    Read-only coordinate queries against the page.

    Offsets are measured from the source's top-left corner, the same corner
    Selenium reports as `element.location`.
    """

    def __init__(self, bridge: HostBridge, *, session: BrowserSession | None = None) -> None:
        self.bridge = bridge
        self._session = session

    def _emit_diag(self, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx: Any) -> None:
        if self._session:
            self._session.emit_diag(Cat.GEOM, msg, key=key, every_s=every_s, **ctx)

    def _inc_counter(self, key: str, n: int = 1) -> None:
        if self._session:
            self._session.counters.inc(key, n)

    def resolve_source_location(self, source: WebElement) -> Point:
        return self.bridge.get_element_location(source).rounded()

    def resolve_target_location(self, source: WebElement, target: DragTarget) -> Point:
        if isinstance(target, OffsetTarget):
            location = self.resolve_source_location(source) + target.offset
        elif isinstance(target, ElementTarget):
            location = self.bridge.get_element_location(target.element)
        else:
            raise TypeError(f"unsupported drag target: {target!r}")
        location = location.rounded()
        self._emit_diag(
            "Resolved target location",
            x=location.x,
            y=location.y,
            kind=type(target).__name__,
        )
        return location

    def resolve_element_at_point(self, point: Point) -> WebElement:
        self._inc_counter("geom.element_at_point")
        element = self.bridge.run_in_page(snippets.ELEMENT_AT_POINT, point.as_dict())
        if element is None:
            self._inc_counter("geom.element_not_found")
            raise ElementNotFoundError(
                point,
                f"cannot find element at location {json.dumps(point.as_dict())}",
            )
        self._emit_diag(
            "Element found at point",
            key="GEOM.element_at_point",
            every_s=self._rate_limit("GEOM.element_at_point"),
            x=point.x,
            y=point.y,
        )
        return element

    def _rate_limit(self, key: str) -> float | None:
        if not self._session:
            return None
        return self._session.instr_policy.rate_limits_s.get(key)
