"""Pairing payload: the string a scanning device parses to find and trust us.

Format (field order fixed, every separator literal)::

    {scheme}://{address}:{port}?name={name}?plus={true|false}?key={secret}

Each field after the endpoint is introduced by `?`, including the second
and third. Existing scanners split on that pattern, so it is kept as is.
Only the device name is percent-encoded.
"""

from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Callable, Optional

from . import config

log = logging.getLogger(__name__)

AddressResolver = Callable[[Optional[str]], Optional[str]]


class MissingEndpointError(ValueError):
    """Raised when a payload lacks a reachable address or port."""


def _normalize_port(port) -> Optional[int]:
    """Return port as int in 1..65535, or None."""
    if port is None or isinstance(port, bool):
        return None
    try:
        value = int(port)
    except (TypeError, ValueError):
        return None
    if value < 1 or value > 0xFFFF:
        return None
    return value


@dataclass(frozen=True)
class PairingPayload:
    address: str
    port: int
    device_name: Optional[str] = None
    plus: bool = False
    secret: str = ""
    scheme: str = "airsync"

    def __post_init__(self) -> None:
        """Validate endpoint fields."""
        if not str(self.address or "").strip():
            raise MissingEndpointError("pairing payload requires an address")
        port = _normalize_port(self.port)
        if port is None:
            raise MissingEndpointError(f"pairing payload requires a valid port, got {self.port!r}")
        object.__setattr__(self, "port", port)

    @property
    def display_name(self) -> str:
        name = str(self.device_name or "")
        if not name.strip():
            return config.DEVICE_NAME_PLACEHOLDER
        return name

    def to_uri(self) -> str:
        """Return the canonical payload string."""
        name = urllib.parse.quote(self.display_name, safe="")
        plus = "true" if self.plus else "false"
        return f"{self.scheme}://{self.address}:{self.port}?name={name}?plus={plus}?key={self.secret or ''}"


def build_payload(
    address: Optional[str],
    port: Optional[int],
    device_name: Optional[str],
    plus: bool,
    secret: str,
    scheme: Optional[str] = None,
) -> Optional[str]:
    """Build the payload string, or return None when the endpoint is unknown."""
    try:
        payload = PairingPayload(
            address=str(address or "").strip(),
            port=port,
            device_name=device_name,
            plus=bool(plus),
            secret=str(secret or ""),
            scheme=scheme or config.PAIRING_SCHEME,
        )
    except MissingEndpointError as e:
        log.debug("payload unavailable: %s", e)
        return None
    return payload.to_uri()


def _take_field(segment: str, key: str) -> str:
    """Return value of a `key=value` segment or raise ValueError."""
    prefix = f"{key}="
    if not segment.startswith(prefix):
        raise ValueError(f"expected '{prefix}' field, got {segment!r}")
    return segment[len(prefix):]


def parse_payload(text: str) -> PairingPayload:
    """Parse a payload string the way a scanning device does."""
    raw = str(text or "")
    scheme, sep, rest = raw.partition("://")
    if not sep or not scheme:
        raise ValueError("payload has no scheme")
    # The key is base64 and may contain '=' but never '?'.
    parts = rest.split("?")
    if len(parts) != 4:
        raise ValueError(f"payload must have 4 '?'-separated parts, got {len(parts)}")
    endpoint, name_part, plus_part, key_part = parts
    address, colon, port_text = endpoint.rpartition(":")
    if not colon:
        raise ValueError("payload endpoint has no port")
    plus_text = _take_field(plus_part, "plus")
    if plus_text not in ("true", "false"):
        raise ValueError(f"invalid plus flag {plus_text!r}")
    return PairingPayload(
        address=address,
        port=_normalize_port(port_text),
        device_name=urllib.parse.unquote(_take_field(name_part, "name")),
        plus=plus_text == "true",
        secret=_take_field(key_part, "key"),
        scheme=scheme,
    )


class PairingPayloadBuilder:
    """Builds the current payload from runtime state and the shared secret."""

    def __init__(self, secret_store, state, resolve_address: AddressResolver) -> None:
        """Initialize builder with its secret, state and address collaborators."""
        self._secret_store = secret_store
        self._state = state
        self._resolve_address = resolve_address

    def build(self) -> Optional[str]:
        """Return the payload for the current state, or None without an endpoint."""
        snap = self._state.snapshot()
        try:
            address = self._resolve_address(snap.adapter_name or None)
        except OSError as e:
            log.warning("address lookup failed: %s", e)
            address = None
        if not address:
            log.info("no local address for adapter %r", snap.adapter_name or "auto")
            return None
        return build_payload(
            address=address,
            port=snap.port,
            device_name=snap.device_name,
            plus=snap.is_plus,
            secret=self._secret_store.get(),
            scheme=snap.scheme,
        )
