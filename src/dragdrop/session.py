# src/dragdrop/session.py
import logging
from typing import Any, Optional

from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.common.by import By

from .driver import create_driver
from .bridge import HostBridge
from .orchestrator import DragDropOrchestrator
from .actions import DragDropActionChains
from .instrumentation import Cat, Counters, InstrumentPolicy, LogMode, RateLimiter, format_ctx, parse_log_mode
from .. import config  # src/config.py


class BrowserSession:
    """
    One Selenium driver plus everything scoped to it.

    The drag-and-drop orchestrator is built once here; every builder returned by
    `actions()` shares it, and nothing leaks to other driver sessions.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        *,
        driver: Optional[WebDriver] = None,
        wait_time_ms: Optional[int] = None,
        emit_drag_event: Optional[bool] = None,
        log_mode: Optional[str] = None,
    ):
        self.driver = driver if driver is not None else create_driver()
        self.logger = logger or logging.getLogger("dragdrop")

        mode = parse_log_mode(log_mode if log_mode is not None else config.LOG_MODE)
        self.instr_policy = InstrumentPolicy(
            mode=mode,
            include_ctx=True,
            rate_limits_s=getattr(config, "LOG_RATE_LIMITS_S", {}) or {},
        )
        self.counters = Counters()
        self._rate = RateLimiter()

        self.bridge = HostBridge(self.driver, duration=config.ACTION_DURATION_MS)
        self.orchestrator = DragDropOrchestrator(
            self,
            bridge=self.bridge,
            wait_time_ms=config.WAIT_TIME_MS if wait_time_ms is None else wait_time_ms,
            emit_drag_event=config.EMIT_DRAG_EVENT if emit_drag_event is None else emit_drag_event,
        )
        self.emit_signal(
            Cat.STARTUP,
            "Session initialized",
            kind="startup",
            log_mode=mode.value,
            wait_time_ms=self.orchestrator.wait_time_ms,
        )

    def get_wait(self, timeout: int | None = None) -> WebDriverWait:
        return WebDriverWait(self.driver, config.PAGE_LOAD_WAIT if timeout is None else timeout)

    def actions(self) -> DragDropActionChains:
        """Fresh action builder with `drag_and_drop` routed through the synthetic sequence."""
        self.counters.inc("queue.builders")
        return DragDropActionChains(
            self.driver,
            self.orchestrator,
            session=self,
            duration=config.ACTION_DURATION_MS,
        )

    def open(self, url: str, *, ready_selector: str | None = None, timeout: int | None = None) -> None:
        self.emit_signal(Cat.NAV, f"Opening {url}")
        self.driver.get(url)
        wait = self.get_wait(timeout)
        wait.until(lambda d: d.execute_script("return document.readyState") == "complete")
        if ready_selector:
            wait.until(EC.presence_of_element_located((By.CSS_SELECTOR, ready_selector)))

    def find(self, css_selector: str, *, timeout: int | None = None) -> WebElement:
        return self.get_wait(timeout).until(
            EC.presence_of_element_located((By.CSS_SELECTOR, css_selector))
        )

    def close(self):
        self.emit_diag(Cat.STARTUP, "Closing session", **self.counters.snapshot())
        self.driver.quit()

    def emit_signal(self, cat: Cat, msg: str, *, level: str | int = "info", **ctx: Any):
        # always allowed
        prefix = f"[{cat.value}]"
        if self.instr_policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        if isinstance(level, int):
            self.logger.log(level, f"{prefix} {msg}")
            return
        lvl = (level or "info").lower()
        if lvl in ("warn", "warning"):
            self.logger.warning(f"{prefix} {msg}")
        elif lvl in ("error", "err", "critical", "fatal"):
            self.logger.error(f"{prefix} {msg}")
        elif lvl in ("debug", "trace"):
            self.logger.debug(f"{prefix} {msg}")
        else:
            self.logger.info(f"{prefix} {msg}")

    def emit_diag(self, cat: Cat, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx: Any):
        # gated by mode; DEBUG+ only
        if self.instr_policy.mode == LogMode.LIVE:
            return
        if key and every_s:
            if not self._rate.allow(key, every_s):
                return

        prefix = f"[{cat.value}]"
        if self.instr_policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        self.logger.debug(f"{prefix} {msg}")

    def emit_trace(self, cat: Cat, msg: str, *, key: str | None = None, every_s: float | None = None, **ctx: Any):
        if self.instr_policy.mode != LogMode.TRACE:
            return
        if key and every_s:
            if not self._rate.allow(key, every_s):
                return

        prefix = f"[{cat.value}]"
        if self.instr_policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        self.logger.debug(f"{prefix} {msg}")
