# src/dragdrop/actions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional

from selenium.webdriver import ActionChains
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from .instrumentation import Cat
from .timing import phase_timer
from .types import Point, as_drag_target

if TYPE_CHECKING:
    from .orchestrator import DragDropOrchestrator
    from .session import BrowserSession

ChainFactory = Callable[..., ActionChains]

# ActionChains methods that queue an action and return the chain
NATIVE_METHODS: frozenset[str] = frozenset({
    "click",
    "click_and_hold",
    "context_click",
    "double_click",
    "key_down",
    "key_up",
    "move_by_offset",
    "move_to_element",
    "move_to_element_with_offset",
    "pause",
    "release",
    "send_keys",
    "send_keys_to_element",
    "scroll_to_element",
    "scroll_by_amount",
    "scroll_from_origin",
})


@dataclass(frozen=True)
class QueuedAction:
    is_drag_and_drop: ClassVar[bool] = False
    description: str


@dataclass(frozen=True)
class NativeAction(QueuedAction):
    name: str = ""
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def apply(self, chain: ActionChains) -> None:
        getattr(chain, self.name)(*self.args, **self.kwargs)


@dataclass(frozen=True)
class DragAndDropAction(QueuedAction):
    is_drag_and_drop: ClassVar[bool] = True
    source: Optional[WebElement] = None
    target: Any = None

    def perform(self, orchestrator: DragDropOrchestrator) -> None:
        orchestrator.perform_drag_and_drop(self.source, self.target)


class DragDropActionChains:
    """
    ActionChains-compatible builder whose drag-and-drop fires real HTML5 drag events.

    Native calls (click, move_to_element, ...) are recorded and replayed on a
    fresh ActionChains at perform() time; consecutive native calls go out as one
    W3C actions request. drag_and_drop entries run through the orchestrator in
    between, so queue order is execution order.

        DragDropActionChains(driver, orchestrator) \\
            .click(handle) \\
            .drag_and_drop(card, column) \\
            .perform()
    """

    def __init__(
        self,
        driver: WebDriver,
        orchestrator: DragDropOrchestrator,
        *,
        session: Optional[BrowserSession] = None,
        chain_factory: ChainFactory = ActionChains,
        duration: int = 250,
    ):
        self.driver = driver
        self.orchestrator = orchestrator
        self.session = session if session is not None else orchestrator.session
        self._chain_factory = chain_factory
        self._duration = duration
        self._actions: list[QueuedAction] = []

    def __getattr__(self, name: str):
        if name not in NATIVE_METHODS:
            raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

        def _queue(*args: Any, **kwargs: Any) -> "DragDropActionChains":
            self._actions.append(NativeAction(description=name, name=name, args=args, kwargs=kwargs))
            return self

        return _queue

    @property
    def queued(self) -> tuple[QueuedAction, ...]:
        return tuple(self._actions)

    def drag_and_drop(self, source: WebElement, target: Any) -> "DragDropActionChains":
        """
        Queue a drag of `source` onto `target`.

        `target` is another WebElement or an offset in pixels ({x, y} mapping,
        (x, y) tuple or Point) measured from the source's top-left corner.
        """
        drag_target = as_drag_target(target)
        self._actions.append(DragAndDropAction(
            description="drag_and_drop",
            source=source,
            target=drag_target,
        ))
        return self

    def drag_and_drop_by_offset(self, source: WebElement, xoffset: int, yoffset: int) -> "DragDropActionChains":
        return self.drag_and_drop(source, Point(xoffset, yoffset))

    def reset_actions(self) -> None:
        """Forget queued entries. Does not touch input state on the remote end."""
        self._actions.clear()

    def perform(self) -> None:
        actions, self._actions = self._actions, []
        drags = sum(1 for a in actions if a.is_drag_and_drop)
        self.session.counters.inc("queue.performs")

        with phase_timer(self.session, "ActionSequence.perform", cat=Cat.QUEUE,
                         ctx={"queued": len(actions), "drags": drags}):
            pending: list[NativeAction] = []
            for action in actions:
                if action.is_drag_and_drop:
                    self._flush(pending)
                    pending = []
                    action.perform(self.orchestrator)
                else:
                    pending.append(action)
            self._flush(pending)

    def _flush(self, pending: list[NativeAction]) -> None:
        if not pending:
            return
        chain = self._chain_factory(self.driver, duration=self._duration)
        for action in pending:
            action.apply(chain)
        self.session.emit_diag(
            Cat.QUEUE,
            "Performing native actions",
            key="QUEUE.flush",
            every_s=self.session.instr_policy.rate_limits_s.get("QUEUE.flush"),
            n=len(pending),
            names=",".join(a.name for a in pending),
        )
        self.session.counters.inc("queue.native_batches")
        chain.perform()


def augment_actions(
    driver: WebDriver,
    orchestrator: DragDropOrchestrator,
    **kwargs: Any,
) -> DragDropActionChains:
    """Factory form of DragDropActionChains(driver, orchestrator, ...)."""
    return DragDropActionChains(driver, orchestrator, **kwargs)
