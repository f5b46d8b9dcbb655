"""Pairing screen behaviour, independent of the widget toolkit."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from . import config
from .payload import PairingPayloadBuilder
from .renderer import CodeRenderer, RenderedCode
from .status import StatusInfo, describe

log = logging.getLogger(__name__)

COPY_MESSAGE = "Copied! Keep it safe"
NO_ADDRESS_MESSAGE = "Waiting for network..."


class CopyConfirmation:
    """Transient "copied" message that clears itself after a delay.

    Each `show()` cancels the pending clear and bumps a sequence number; the
    clear step only runs for the sequence it was scheduled with, so an
    earlier timer can never hide a newer message.
    """

    def __init__(self, scheduler, delay_s: Optional[float] = None, on_change: Optional[Callable] = None) -> None:
        """Initialize CopyConfirmation with a `call_later`-style scheduler."""
        self._scheduler = scheduler
        self._delay_s = float(config.COPY_CONFIRM_S if delay_s is None else delay_s)
        self._on_change = on_change
        self._lock = threading.Lock()
        self._seq = 0
        self._handle: Any = None
        self.message: Optional[str] = None

    def show(self, message: str) -> None:
        with self._lock:
            self._seq += 1
            seq = self._seq
            previous, self._handle = self._handle, None
            self.message = message
        if previous is not None:
            previous.cancel()
        self._notify(message)
        handle = self._scheduler.call_later(self._delay_s, lambda: self._expire(seq))
        with self._lock:
            if self._seq == seq:
                self._handle = handle
                return
        # A newer show() ran while scheduling.
        handle.cancel()

    def _expire(self, seq: int) -> None:
        with self._lock:
            if seq != self._seq:
                return
            self._handle = None
            self.message = None
        self._notify(None)

    def _notify(self, message: Optional[str]) -> None:
        if self._on_change is not None:
            self._on_change(message)


class PairingScreenController:
    """Drives the pairing screen: code refresh, key copy and key reset."""

    def __init__(
        self,
        state,
        secret_store,
        builder: PairingPayloadBuilder,
        renderer: CodeRenderer,
        clipboard,
        scheduler,
        on_code: Optional[Callable[[RenderedCode], None]] = None,
        on_placeholder: Optional[Callable[[Optional[str]], None]] = None,
        on_copy_status: Optional[Callable[[Optional[str]], None]] = None,
    ) -> None:
        """Initialize controller and wire renderer output to the view."""
        self._state = state
        self._secret_store = secret_store
        self._builder = builder
        self._renderer = renderer
        self._clipboard = clipboard
        self._on_code = on_code
        self._on_placeholder = on_placeholder
        self.placeholder: Optional[str] = None
        self.copy_confirmation = CopyConfirmation(scheduler, on_change=on_copy_status)
        self._renderer.on_rendered = self._code_ready

    @property
    def copy_status(self) -> Optional[str]:
        return self.copy_confirmation.message

    @property
    def code(self) -> Optional[RenderedCode]:
        return self._renderer.current

    def _code_ready(self, code: RenderedCode) -> None:
        self._set_placeholder(None)
        if self._on_code is not None:
            self._on_code(code)

    def _set_placeholder(self, text: Optional[str]) -> None:
        if text == self.placeholder:
            return
        self.placeholder = text
        if self._on_placeholder is not None:
            self._on_placeholder(text)

    def refresh(self) -> bool:
        """Rebuild the payload and request a render; False if it cannot be built."""
        payload = self._builder.build()
        if payload is None:
            # Renders still in flight carry an endpoint or key that is no longer valid.
            self._renderer.invalidate()
            self._set_placeholder(NO_ADDRESS_MESSAGE)
            return False
        self._renderer.request_render(payload)
        return True

    def mount(self) -> bool:
        """Prepare the secret and render the first code."""
        self._secret_store.get()
        return self.refresh()

    def tap(self) -> bool:
        """Manual refresh from a click anywhere on the screen."""
        return self.refresh()

    def poll_refresh_signal(self) -> bool:
        """Refresh once if a collaborator raised the refresh flag."""
        if not self._state.consume_refresh():
            return False
        log.debug("refresh flag set, regenerating qr")
        self.refresh()
        return True

    def copy_secret(self) -> bool:
        """Copy the key to the clipboard and show a short confirmation."""
        key = self._secret_store.get()
        try:
            self._clipboard.set_text(key)
        except Exception:
            log.exception("clipboard write failed")
            return False
        self.copy_confirmation.show(COPY_MESSAGE)
        return True

    def reset_secret(self) -> bool:
        """Rotate the key and immediately re-render with the new one."""
        self._secret_store.reset()
        return self.refresh()

    def status_info(self) -> StatusInfo:
        return describe(self._state.status_monitor.status)
