"""Mutable runtime state read by the pairing screen."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from . import config
from .status import StatusMonitor


@dataclass(frozen=True)
class StateSnapshot:
    port: Optional[int]
    device_name: Optional[str]
    adapter_name: str
    is_plus: bool
    scheme: str


class AppState:
    """Runtime state owned by the app and passed to the screen components.

    Setters may be called from any thread. `should_refresh_qr` is a one-shot
    flag: collaborators raise it (e.g. after a network change) and the
    pairing screen clears it once it has rebuilt the code.
    """

    def __init__(
        self,
        port: Optional[int] = None,
        device_name: Optional[str] = None,
        adapter_name: Optional[str] = None,
        is_plus: Optional[bool] = None,
        scheme: Optional[str] = None,
        status_monitor: Optional[StatusMonitor] = None,
    ) -> None:
        """Initialize AppState, falling back to configuration defaults."""
        self._lock = threading.Lock()
        self._port = config.SERVER_PORT if port is None else port
        self._device_name = config.DEVICE_NAME if device_name is None else device_name
        self._adapter_name = str(config.NETWORK_ADAPTER if adapter_name is None else adapter_name).strip()
        self._is_plus = config.IS_PLUS if is_plus is None else bool(is_plus)
        self._scheme = str(scheme or config.PAIRING_SCHEME)
        self._refresh_requested = False
        self.status_monitor = status_monitor or StatusMonitor()

    def snapshot(self) -> StateSnapshot:
        """Return a consistent copy of the payload-relevant fields."""
        with self._lock:
            return StateSnapshot(
                port=self._port,
                device_name=self._device_name,
                adapter_name=self._adapter_name,
                is_plus=self._is_plus,
                scheme=self._scheme,
            )

    def update(self, **fields) -> None:
        """Set payload-relevant fields and raise the refresh flag."""
        allowed = {"port", "device_name", "adapter_name", "is_plus"}
        unknown = set(fields) - allowed
        if unknown:
            raise TypeError(f"unknown state fields: {sorted(unknown)}")
        with self._lock:
            for key, value in fields.items():
                if key == "adapter_name":
                    value = str(value or "").strip()
                elif key == "is_plus":
                    value = bool(value)
                setattr(self, f"_{key}", value)
            self._refresh_requested = True

    @property
    def should_refresh_qr(self) -> bool:
        with self._lock:
            return self._refresh_requested

    def request_refresh(self) -> None:
        """Raise the one-shot refresh flag."""
        with self._lock:
            self._refresh_requested = True

    def consume_refresh(self) -> bool:
        """Clear the refresh flag; return whether it was set."""
        with self._lock:
            requested = self._refresh_requested
            self._refresh_requested = False
            return requested
