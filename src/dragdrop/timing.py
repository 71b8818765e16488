from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any
import time

from .instrumentation import Cat

if TYPE_CHECKING:
    from .session import BrowserSession


def _emit_phase(
    session: BrowserSession,
    *,
    level: str,
    msg: str,
    cat: Cat,
    ctx: dict[str, Any],
) -> None:
    session.emit_signal(cat, msg, level=level, **ctx)


@contextmanager
def phase_timer(
    session: BrowserSession | None,
    label: str,
    *,
    cat: Cat = Cat.QUEUE,
    ctx: dict[str, Any] | None = None,
):
    if session is None:
        raise RuntimeError("phase_timer requires an active BrowserSession")
    start = time.perf_counter()
    merged_ctx: dict[str, Any] = {"a": label}
    if ctx:
        merged_ctx.update(ctx)
    _emit_phase(session, level="debug", msg=f"START phase: {label}", cat=cat, ctx=merged_ctx)
    failed = False
    try:
        yield
    except Exception as e:
        failed = True
        merged_ctx["error"] = type(e).__name__
        raise
    finally:
        elapsed = time.perf_counter() - start
        merged_ctx["elapsed_s"] = f"{elapsed:.3f}"
        _emit_phase(
            session,
            level="warning" if failed else "debug",
            msg=f"END phase: {label} ({'failed' if failed else 'ok'}, {elapsed:.2f} seconds)",
            cat=cat,
            ctx=merged_ctx,
        )
