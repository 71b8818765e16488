# src/dragdrop/bridge.py
from __future__ import annotations

import time
from typing import Any, Optional, Union

from selenium.webdriver import ActionChains
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from . import snippets
from .types import Point

MoveTarget = Union[Point, WebElement]


class HostBridge:
    """
    The narrow slice of Selenium the drag sequence talks to.

    Every method blocks until the remote end answers, so callers get strict
    step-by-step ordering for free.
    """

    def __init__(self, driver: WebDriver, *, duration: int = 250):
        self.driver = driver
        self.duration = duration

    def _chain(self) -> ActionChains:
        return ActionChains(self.driver, duration=self.duration)

    def move_to(self, target: MoveTarget) -> None:
        actions = self._chain()
        if isinstance(target, Point):
            # move_to_location works in viewport coordinates
            scroll = self.run_in_page(snippets.SCROLL_OFFSET) or {}
            x = int(target.x - (scroll.get("x") or 0))
            y = int(target.y - (scroll.get("y") or 0))
            actions.w3c_actions.pointer_action.move_to_location(x, y)
        else:
            actions.move_to_element(target)
        actions.perform()

    def press_button(self, element: WebElement) -> None:
        self._chain().click_and_hold(element).perform()

    def release_button(self, element: Optional[WebElement] = None) -> None:
        """Release over `element`, or wherever the pointer is when None."""
        chain = self._chain()
        if element is None:
            chain.release()
        else:
            chain.release(element)
        chain.perform()

    def run_in_page(self, script: str, *args: Any) -> Any:
        return self.driver.execute_script(script, *args)

    def get_element_location(self, element: WebElement) -> Point:
        return Point.from_dict(element.location)

    def sleep(self, duration_ms: float) -> None:
        time.sleep(duration_ms / 1000.0)
