from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from selenium.common.exceptions import StaleElementReferenceException

from .instrumentation import Cat

if TYPE_CHECKING:
    from .session import BrowserSession


def recover_from_stale_element(err: BaseException) -> None:
    """Swallow a stale-element error; re-raise anything else unchanged."""
    if not isinstance(err, StaleElementReferenceException):
        raise err


@contextmanager
def absorb_stale_element(step: str, *, session: BrowserSession | None = None):
    """
    Ignore StaleElementReferenceException raised inside the block.

    Only meant for the steps after `drop`: drop handlers are free to remove or
    replace the dragged element, so a stale reference there is expected.
    """
    try:
        yield
    except Exception as e:
        recover_from_stale_element(e)
        if session:
            session.counters.inc("drag.stale_absorbed")
            session.emit_diag(
                Cat.RECOVER,
                "Element went stale after drop; ignoring",
                step=step,
                exception=type(e).__name__,
            )
