"""Tests for the Selenium-facing bridge."""

from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import StaleElementReferenceException

from src.dragdrop import snippets
from src.dragdrop.bridge import HostBridge
from src.dragdrop.orchestrator import DragDropOrchestrator
from src.dragdrop.types import DragSession, ElementTarget, Point


@pytest.fixture
def chains():
    with patch("src.dragdrop.bridge.ActionChains") as cls:
        yield cls


@pytest.fixture
def bridge(driver):
    return HostBridge(driver, duration=100)


def test_move_to_point_converts_to_viewport(bridge, driver, chains):
    driver.execute_script.return_value = {"x": 0, "y": 250}

    bridge.move_to(Point(150, 420))

    driver.execute_script.assert_called_once_with(snippets.SCROLL_OFFSET)
    chain = chains.return_value
    chains.assert_called_once_with(driver, duration=100)
    chain.w3c_actions.pointer_action.move_to_location.assert_called_once_with(150, 170)
    chain.perform.assert_called_once_with()


def test_move_to_element(bridge, driver, chains):
    el = MagicMock(name="element")

    bridge.move_to(el)

    chains.return_value.move_to_element.assert_called_once_with(el)
    driver.execute_script.assert_not_called()


def test_press_and_release(bridge, chains):
    el = MagicMock(name="element")
    chain = chains.return_value
    chain.click_and_hold.return_value = chain
    chain.release.return_value = chain

    bridge.press_button(el)
    bridge.release_button(el)

    chain.click_and_hold.assert_called_once_with(el)
    chain.release.assert_called_once_with(el)
    assert chain.perform.call_count == 2


def test_release_without_element(bridge, chains):
    chain = chains.return_value

    bridge.release_button(None)

    chain.release.assert_called_once_with()
    chain.perform.assert_called_once_with()


def test_stale_release_falls_back_to_plain_release(driver, session, chains):
    target = MagicMock(name="target")
    chain = chains.return_value

    def release(*args):
        if args:
            raise StaleElementReferenceException("target detached")
        return chain

    chain.release.side_effect = release
    orch = DragDropOrchestrator(session, bridge=HostBridge(driver))
    s = DragSession(source_element=MagicMock(), drag_target=ElementTarget(target),
                    resolved_target_element=target)

    assert orch._mouse_up(s) is s

    assert [c.args for c in chain.release.call_args_list] == [(target,), ()]
    chain.perform.assert_called_once_with()
    assert session.counters.get("drag.stale_absorbed") == 1


def test_run_in_page_passes_arguments(bridge, driver):
    driver.execute_script.return_value = True
    el = MagicMock(name="element")

    assert bridge.run_in_page("return 1;", el, {"x": 1}) is True
    driver.execute_script.assert_called_once_with("return 1;", el, {"x": 1})


def test_get_element_location(bridge):
    el = MagicMock(name="element")
    el.location = {"x": 12, "y": 34}

    assert bridge.get_element_location(el) == Point(12, 34)


def test_sleep_uses_milliseconds(bridge):
    with patch("src.dragdrop.bridge.time.sleep") as sleep:
        bridge.sleep(250)
    sleep.assert_called_once_with(0.25)
