# src/dragdrop/orchestrator.py
from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, Optional

from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.remote.webelement import WebElement

from .errors import InvalidDropTargetError, NonDraggableElementError
from .events import EventSynthesizer
from .geometry import GeometryResolver
from .instrumentation import Cat
from .recovery import absorb_stale_element
from .timing import phase_timer
from .types import DRAG_SEQUENCE, DragSession, DragState, as_drag_target
from .. import config  # src/config.py

if TYPE_CHECKING:
    from .bridge import HostBridge
    from .session import BrowserSession

Step = Callable[[DragSession], DragSession]


def effective_settle_ms(wait_time_ms: Optional[float], minimum_ms: Optional[float] = None) -> float:
    """Configured settle delay, or the built-in minimum when unset/zero/negative."""
    floor = config.MIN_SETTLE_MS if minimum_ms is None else minimum_ms
    floor = max(floor, 1)
    if not wait_time_ms or wait_time_ms <= 0:
        return floor
    return wait_time_ms


class DragDropOrchestrator:
    """
    Drives one synthetic HTML5 drag-and-drop gesture.

    Sequence (each step followed by a settle delay):
      move_to_source -> mouse_down -> drag_start -> [drag] -> move_to_target
      -> resolve_target_element -> drag_over -> drop -> drag_end -> mouse_up

    drag_start, resolve_target_element and drag_over can abort the gesture.
    drag_end and mouse_up tolerate a stale element, since drop handlers may
    have removed the nodes involved.
    """

    def __init__(
        self,
        session: BrowserSession,
        *,
        bridge: Optional[HostBridge] = None,
        wait_time_ms: Optional[float] = None,
        emit_drag_event: bool = True,
        min_settle_ms: Optional[float] = None,
    ):
        self.session = session
        self.bridge = bridge if bridge is not None else session.bridge
        self.geometry = GeometryResolver(self.bridge, session=session)
        self.events = EventSynthesizer(self.bridge, session=session)
        self.wait_time_ms = effective_settle_ms(wait_time_ms, min_settle_ms)
        self.emit_drag_event = emit_drag_event

        self._steps: dict[DragState, Step] = {
            DragState.MOVE_TO_SOURCE: self._move_to_source,
            DragState.MOUSE_DOWN: self._mouse_down,
            DragState.DRAG_START: self._drag_start,
            DragState.DRAG: self._drag,
            DragState.MOVE_TO_TARGET: self._move_to_target,
            DragState.RESOLVE_TARGET_ELEMENT: self._resolve_target_element,
            DragState.DRAG_OVER: self._drag_over,
            DragState.DROP: self._drop,
            DragState.DRAG_END: self._drag_end,
            DragState.MOUSE_UP: self._mouse_up,
        }

    @property
    def sequence(self) -> tuple[DragState, ...]:
        if self.emit_drag_event:
            return DRAG_SEQUENCE
        return tuple(s for s in DRAG_SEQUENCE if s is not DragState.DRAG)

    def perform_drag_and_drop(self, source: WebElement, target: Any) -> DragSession:
        """
        Run the whole gesture for `source` onto `target`.

        `target` is a WebElement or an {x, y} offset from the source's top-left.
        Returns the final DragSession; raises on the first fatal step.
        """
        drag_session = DragSession(source_element=source, drag_target=as_drag_target(target))
        self.session.counters.inc("drag.started")

        with phase_timer(self.session, "drag_and_drop", cat=Cat.DRAG,
                         ctx={"tgt": type(drag_session.drag_target).__name__}):
            for state in self.sequence:
                drag_session = self._run_step(state, drag_session)
                self._settle()

        self.session.counters.inc("drag.completed")
        self.session.emit_diag(
            Cat.DRAG,
            "Drag and drop completed",
            x=drag_session.target_location.x if drag_session.target_location else None,
            y=drag_session.target_location.y if drag_session.target_location else None,
        )
        return drag_session

    def _run_step(self, state: DragState, drag_session: DragSession) -> DragSession:
        self.session.emit_trace(Cat.DRAG, "step", step=state.value)
        try:
            drag_session = self._steps[state](drag_session)
        except Exception as e:
            self.session.counters.inc("drag.failed")
            self.session.emit_signal(
                Cat.DRAG,
                f"Drag and drop aborted: {e}",
                level="error",
                step=state.value,
                exception=type(e).__name__,
            )
            raise
        return replace(drag_session, completed=drag_session.completed + (state,))

    def _settle(self) -> None:
        self.bridge.sleep(self.wait_time_ms)

    # ---------- steps ----------

    def _move_to_source(self, s: DragSession) -> DragSession:
        source_location = self.geometry.resolve_source_location(s.source_element)
        self.bridge.move_to(source_location)
        return replace(s, source_location=source_location)

    def _mouse_down(self, s: DragSession) -> DragSession:
        self.bridge.press_button(s.source_element)
        return s

    def _drag_start(self, s: DragSession) -> DragSession:
        if not self.events.dragstart(s.source_element, s.source_location):
            raise NonDraggableElementError(s.source_element)
        return s

    def _drag(self, s: DragSession) -> DragSession:
        self.events.drag(s.source_element, s.source_location)
        return s

    def _move_to_target(self, s: DragSession) -> DragSession:
        # Re-read the source here; the page may have shifted since step one.
        target_location = self.geometry.resolve_target_location(s.source_element, s.drag_target)
        self.bridge.move_to(target_location)
        return replace(s, target_location=target_location)

    def _resolve_target_element(self, s: DragSession) -> DragSession:
        element = self.geometry.resolve_element_at_point(s.target_location)
        return replace(s, resolved_target_element=element)

    def _drag_over(self, s: DragSession) -> DragSession:
        if not self.events.dragover(s.resolved_target_element, s.target_location):
            raise InvalidDropTargetError(s.resolved_target_element, s.target_location)
        return s

    def _drop(self, s: DragSession) -> DragSession:
        self.events.drop(s.resolved_target_element, s.target_location)
        return s

    def _drag_end(self, s: DragSession) -> DragSession:
        with absorb_stale_element(DragState.DRAG_END.value, session=self.session):
            self.events.dragend(s.source_element, s.source_location)
        return s

    def _mouse_up(self, s: DragSession) -> DragSession:
        with absorb_stale_element(DragState.MOUSE_UP.value, session=self.session):
            try:
                self.bridge.release_button(s.resolved_target_element)
            except StaleElementReferenceException:
                # the move onto the element failed, so the button is still down
                self.bridge.release_button(None)
                raise
        return s
