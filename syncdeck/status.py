"""Connection-server lifecycle states and their display descriptors."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Union

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stopped:
    pass


@dataclass(frozen=True)
class Starting:
    pass


@dataclass(frozen=True)
class Started:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str

    def __post_init__(self) -> None:
        """Reject failures without a reason."""
        if not str(self.reason or "").strip():
            raise ValueError("Failed status requires a non-empty reason")


ConnectionStatus = Union[Stopped, Starting, Started, Failed]


class Severity(str, enum.Enum):
    NEUTRAL = "neutral"
    INFORMATIONAL = "informational"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusInfo:
    text: str
    icon: str
    severity: Severity


def describe(status: ConnectionStatus) -> StatusInfo:
    """Map a server lifecycle state to text, icon token and severity."""
    # No fallback branch: an unknown state must fail loudly.
    if isinstance(status, Stopped):
        return StatusInfo("Stopped", "xmark.circle", Severity.NEUTRAL)
    if isinstance(status, Starting):
        return StatusInfo("Starting...", "clock", Severity.INFORMATIONAL)
    if isinstance(status, Started):
        return StatusInfo("Ready", "checkmark.circle", Severity.SUCCESS)
    if isinstance(status, Failed):
        return StatusInfo(f"Failed: {status.reason}", "exclamationmark.triangle", Severity.ERROR)
    raise TypeError(f"unsupported connection status: {status!r}")


StatusListener = Callable[[ConnectionStatus], None]


class StatusMonitor:
    """Thread-safe holder of the connection server's current status."""

    def __init__(self, initial: ConnectionStatus = Stopped()) -> None:
        """Initialize StatusMonitor with the state reported at startup."""
        self._lock = threading.Lock()
        self._status: ConnectionStatus = initial
        self._listeners: List[StatusListener] = []

    @property
    def status(self) -> ConnectionStatus:
        with self._lock:
            return self._status

    def set_status(self, status: ConnectionStatus) -> None:
        """Record a new status and notify listeners when it changed."""
        with self._lock:
            if status == self._status:
                return
            self._status = status
            listeners = list(self._listeners)
        log.debug("connection status -> %r", status)
        for listener in listeners:
            try:
                listener(status)
            except Exception:
                log.exception("status listener failed")

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe
