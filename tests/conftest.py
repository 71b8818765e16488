"""Pytest fixtures: an in-memory page standing in for the browser."""

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.remote.webelement import WebElement

from src.dragdrop import snippets
from src.dragdrop.orchestrator import DragDropOrchestrator
from src.dragdrop.session import BrowserSession
from src.dragdrop.types import Point

SNIPPET_NAMES = {
    getattr(snippets, name): name
    for name in dir(snippets)
    if name.isupper()
}


class FakeElement(WebElement):
    """WebElement whose state lives in Python instead of a remote browser."""

    def __init__(self, name: str, x: float, y: float, *, draggable: bool = False,
                 accepts_drop: bool = False, on_drop=None):
        super().__init__(parent=None, id_=name)
        self.name = name
        self.loc = (x, y)
        self.draggable = draggable
        self.accepts_drop = accepts_drop
        self.on_drop = on_drop
        self.removed = False

    @property
    def location(self) -> dict:
        if self.removed:
            raise StaleElementReferenceException(f"{self.name} is detached")
        return {"x": self.loc[0], "y": self.loc[1]}

    def __repr__(self) -> str:
        return f"<FakeElement {self.name}>"


class FakePage:
    """
    Implements the HostBridge surface and interprets the page snippets.

    `events` collects (type, element name, pageX, pageY) for every dispatched
    drag event; `calls` collects every bridge call in order.
    """

    def __init__(self):
        self.elements: list[FakeElement] = []
        self.events: list[tuple[str, str, Any, Any]] = []
        self.calls: list[tuple] = []
        self.sleeps: list[float] = []
        self.errors: dict[str, BaseException] = {}

    def add(self, element: FakeElement) -> FakeElement:
        self.elements.append(element)
        return element

    def element_at(self, point: Point):
        for el in reversed(self.elements):
            if not el.removed and (el.loc[0], el.loc[1]) == (point.x, point.y):
                return el
        return None

    def event_names(self) -> list[str]:
        return [e[0] for e in self.events]

    # --- HostBridge surface ---

    def move_to(self, target) -> None:
        self.calls.append(("move_to", target))

    def press_button(self, element) -> None:
        self.calls.append(("press_button", element.name))

    def release_button(self, element=None) -> None:
        if element is None:
            self.calls.append(("release_button", None))
            return
        self.calls.append(("release_button", element.name))
        if "release_button" in self.errors:
            raise self.errors["release_button"]
        if element.removed:
            raise StaleElementReferenceException(f"{element.name} is detached")

    def get_element_location(self, element) -> Point:
        return Point.from_dict(element.location)

    def sleep(self, duration_ms: float) -> None:
        self.sleeps.append(duration_ms)

    def run_in_page(self, script: str, *args):
        name = SNIPPET_NAMES[script]
        self.calls.append(("run_in_page", name))
        if name in self.errors:
            raise self.errors[name]

        if name == "ELEMENT_AT_POINT":
            return self.element_at(Point.from_dict(args[0]))
        if name == "SCROLL_OFFSET":
            return {"x": 0, "y": 0}

        element, location = args
        if element.removed:
            raise StaleElementReferenceException(f"{element.name} is detached")
        record = lambda kind: self.events.append((kind, element.name, location["x"], location["y"]))

        if name == "DRAGSTART_IF_DRAGGABLE":
            if element.draggable:
                record("dragstart")
            return element.draggable
        if name == "DRAG":
            record("drag")
            return None
        if name == "DRAGOVER_ACCEPTS_DROP":
            record("dragover")
            return element.accepts_drop
        if name == "DROP":
            record("drop")
            if element.on_drop:
                element.on_drop()
            return None
        if name == "DRAGEND":
            record("dragend")
            return None
        raise AssertionError(f"unexpected snippet {name}")


class RecordingChain:
    """Stand-in for ActionChains that logs native calls into the fake page."""

    def __init__(self, page: FakePage, driver, duration: int = 250):
        self.page = page
        self.driver = driver
        self.duration = duration
        self.names: list[str] = []

    def __getattr__(self, name):
        def _call(*args, **kwargs):
            self.names.append(name)
            return self
        return _call

    def perform(self):
        self.page.calls.append(("native", tuple(self.names)))


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def driver() -> MagicMock:
    return MagicMock(name="driver")


@pytest.fixture
def session(driver) -> BrowserSession:
    return BrowserSession(logging.getLogger("dragdrop.test"), driver=driver, log_mode="trace")


@pytest.fixture
def orchestrator(session, page) -> DragDropOrchestrator:
    return DragDropOrchestrator(session, bridge=page, wait_time_ms=0, min_settle_ms=5)


@pytest.fixture
def chain_factory(page):
    def _factory(driver, duration=250):
        return RecordingChain(page, driver, duration)
    return _factory


@pytest.fixture
def board(page):
    """Draggable card at (100, 100), accepting column at (300, 400)."""
    card = page.add(FakeElement("card", 100, 100, draggable=True))
    column = page.add(FakeElement("column", 300, 400, accepts_drop=True))
    return card, column
