"""Shared pairing secret: lazy generation, stable encoding, rotation."""

import base64
import json
import logging
import os
import threading
from typing import Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

log = logging.getLogger(__name__)

KEY_BITS = 256


def _generate_key() -> bytes:
    """Return fresh symmetric key bytes from the OS entropy source."""
    return AESGCM.generate_key(bit_length=KEY_BITS)


def _decode_key(value: str) -> Optional[bytes]:
    """Decode a stored base64 key, returning None for malformed input."""
    try:
        raw = base64.b64decode(str(value or "").strip(), validate=True)
    except (ValueError, TypeError):
        return None
    if len(raw) != KEY_BITS // 8:
        return None
    return raw


class SecretStore:
    """Thread-safe owner of the shared pairing secret.

    `get()` and `reset()` run under one lock, so readers never observe a
    half-replaced key. With `path` set the key survives restarts.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        """Initialize SecretStore state; the key is loaded or generated lazily."""
        self._lock = threading.Lock()
        self._path = path
        self._key: Optional[bytes] = None
        self._loaded = False

    def _load_locked(self) -> None:
        """Read persisted key once; ignore missing or malformed files."""
        if self._loaded:
            return
        self._loaded = True
        if not self._path or not os.path.exists(self._path):
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable key file %s: %s", self._path, e)
            return
        if isinstance(data, dict):
            self._key = _decode_key(data.get("key", ""))
        if self._key is None:
            log.warning("ignoring malformed key file %s", self._path)

    def _save_locked(self) -> None:
        """Persist current key; failures are logged and the in-memory key is kept."""
        if not self._path or self._key is None:
            return
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._path)), exist_ok=True)
            tmp = f"{self._path}.tmp"
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump({"key": base64.b64encode(self._key).decode("ascii")}, f)
            os.replace(tmp, self._path)
        except OSError as e:
            log.warning("failed to persist key file %s: %s", self._path, e)

    def get(self) -> str:
        """Return base64 of the current key, generating one on first use."""
        with self._lock:
            self._load_locked()
            if self._key is None:
                self._key = _generate_key()
                log.info("generated new pairing key")
                self._save_locked()
            return base64.b64encode(self._key).decode("ascii")

    def peek(self) -> Optional[str]:
        """Return the current encoding without generating a key."""
        with self._lock:
            self._load_locked()
            if self._key is None:
                return None
            return base64.b64encode(self._key).decode("ascii")

    def reset(self) -> None:
        """Discard the current key; every payload built from it becomes invalid."""
        with self._lock:
            self._loaded = True
            self._key = None
            if self._path:
                try:
                    os.remove(self._path)
                except FileNotFoundError:
                    pass
                except OSError as e:
                    log.warning("failed to remove key file %s: %s", self._path, e)
        log.info("pairing key reset, paired devices must re-authenticate")
