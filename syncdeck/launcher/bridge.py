"""Adapters between the pairing controller and the Tk event loop."""

from __future__ import annotations

import logging
import queue
from typing import Any, Callable

log = logging.getLogger(__name__)


class UiQueue:
    """Callables posted from worker threads and run on the UI thread."""

    def __init__(self) -> None:
        """Initialize the underlying thread-safe queue."""
        self._queue: "queue.Queue[Callable[[], Any]]" = queue.Queue()

    def __call__(self, fn: Callable[[], Any]) -> None:
        """Queue a callable that must run on the UI thread."""
        self._queue.put(fn)

    def drain(self) -> int:
        """Execute pending callbacks; returns how many ran."""
        ran = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return ran
            ran += 1
            try:
                fn()
            except Exception:
                log.exception("ui callback error")


class _AfterHandle:
    def __init__(self, widget: Any, job: Any) -> None:
        self._widget = widget
        self._job = job

    def cancel(self) -> None:
        """Cancel the pending `after` job if it has not fired."""
        if self._job is None:
            return
        job, self._job = self._job, None
        try:
            self._widget.after_cancel(job)
        except Exception as e:
            log.debug("after_cancel failed: %s", e)


class TkScheduler:
    """`call_later` on top of Tk `after`; must be used from the UI thread."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def call_later(self, delay_s: float, fn: Callable[[], Any]) -> _AfterHandle:
        job = self._widget.after(max(0, int(round(float(delay_s) * 1000))), fn)
        return _AfterHandle(self._widget, job)


class TkClipboard:
    """Clipboard sink backed by the Tk clipboard."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def set_text(self, value: str) -> None:
        self._widget.clipboard_clear()
        self._widget.clipboard_append(str(value))
        self._widget.update_idletasks()
