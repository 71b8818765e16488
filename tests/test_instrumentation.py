"""Tests for logging helpers, session emitters and phase timing."""

import logging
from unittest.mock import patch

import pytest

from src.dragdrop.instrumentation import (
    Cat,
    Counters,
    LogMode,
    RateLimiter,
    format_ctx,
    parse_log_mode,
)
from src.dragdrop.session import BrowserSession
from src.dragdrop.timing import phase_timer


def test_format_ctx_order():
    assert format_ctx(zeta=1, a="x", step="drop", x=3, y=None, src="#a") == "step=drop src=#a x=3 a=x zeta=1"


def test_counters():
    c = Counters()
    c.inc("drag.started")
    c.inc("drag.started", 2)
    assert c.get("drag.started") == 3
    assert c.get("missing") == 0
    assert c.snapshot() == {"drag.started": 3}


def test_rate_limiter():
    r = RateLimiter()
    with patch("src.dragdrop.instrumentation.perf_counter", side_effect=[0.0, 0.1, 2.0]):
        assert r.allow("k", 1.0)
        assert not r.allow("k", 1.0)
        assert r.allow("k", 1.0)


@pytest.mark.parametrize("value, mode", [
    ("debug", LogMode.DEBUG),
    ("TRACE", LogMode.TRACE),
    ("nonsense", LogMode.LIVE),
    (None, LogMode.LIVE),
])
def test_parse_log_mode(value, mode):
    assert parse_log_mode(value) is mode


class TestSessionEmitters:
    def _session(self, driver, mode):
        return BrowserSession(logging.getLogger("dragdrop.test"), driver=driver, log_mode=mode)

    def test_signal_always_logged(self, driver, caplog):
        s = self._session(driver, "live")
        with caplog.at_level(logging.DEBUG, logger="dragdrop.test"):
            s.emit_signal(Cat.DRAG, "hello", level="warning", step="drop")
        assert "[DRAG] hello :: step=drop" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING

    def test_diag_silent_in_live_mode(self, driver, caplog):
        s = self._session(driver, "live")
        with caplog.at_level(logging.DEBUG, logger="dragdrop.test"):
            s.emit_diag(Cat.GEOM, "diag message")
        assert "diag message" not in caplog.text

    def test_diag_and_trace_by_mode(self, driver, caplog):
        debug = self._session(driver, "debug")
        with caplog.at_level(logging.DEBUG, logger="dragdrop.test"):
            debug.emit_diag(Cat.GEOM, "diag message")
            debug.emit_trace(Cat.EVENT, "trace message")
        assert "[GEOM] diag message" in caplog.text
        assert "trace message" not in caplog.text

    def test_close_quits_driver(self, driver):
        s = self._session(driver, "live")
        s.close()
        driver.quit.assert_called_once_with()

    def test_constructor_settings_reach_orchestrator(self, driver):
        s = BrowserSession(logging.getLogger("dragdrop.test"), driver=driver,
                           wait_time_ms=75, emit_drag_event=False)
        assert s.orchestrator.wait_time_ms == 75
        assert s.orchestrator.emit_drag_event is False
        assert s.orchestrator.bridge is s.bridge


class TestPhaseTimer:
    def test_requires_session(self):
        with pytest.raises(RuntimeError):
            with phase_timer(None, "x"):
                pass

    def test_logs_start_and_end(self, session, caplog):
        with caplog.at_level(logging.DEBUG, logger="dragdrop.test"):
            with phase_timer(session, "unit"):
                pass
        assert "START phase: unit" in caplog.text
        assert "END phase: unit (ok," in caplog.text

    def test_failure_logged_and_reraised(self, session, caplog):
        with caplog.at_level(logging.DEBUG, logger="dragdrop.test"):
            with pytest.raises(KeyError):
                with phase_timer(session, "unit"):
                    raise KeyError("k")
        assert "END phase: unit (failed," in caplog.text
        assert "error=KeyError" in caplog.text
