"""Background QR rendering with latest-request-wins delivery."""

from __future__ import annotations

import io
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

import qrcode
from PIL import Image, ImageDraw

from . import config

log = logging.getLogger(__name__)

UiCall = Callable[[Callable[[], None]], Any]


@dataclass(frozen=True)
class RenderedCode:
    payload: str
    token: int
    image: Image.Image


class QrEncoder:
    """Turns payload text into a square QR bitmap."""

    def __init__(
        self,
        size: Optional[int] = None,
        quiet_zone: int = 2,
        fill_rgb: tuple = (255, 255, 255),
        back_rgb: tuple = (0, 0, 0),
        corner_radius: int = 4,
    ) -> None:
        """Initialize encoder geometry and colors."""
        self.size = int(size or config.QR_IMAGE_SIZE)
        self.quiet_zone = int(quiet_zone)
        self.fill_rgb = fill_rgb
        self.back_rgb = back_rgb
        self.corner_radius = int(corner_radius)

    def encode(self, text: str) -> Image.Image:
        """Encode text; raises on data the QR format cannot hold."""
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=self.quiet_zone,
        )
        qr.add_data(text)
        qr.make(fit=True)
        qr_img = qr.make_image(fill_color=self.fill_rgb, back_color=self.back_rgb).convert("RGBA")
        qr_img = qr_img.resize((self.size, self.size), Image.NEAREST)

        mask = Image.new("L", (self.size, self.size), 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            [0, 0, self.size - 1, self.size - 1],
            radius=self.corner_radius,
            fill=255,
        )
        out = Image.new("RGBA", (self.size, self.size), (0, 0, 0, 0))
        out.paste(qr_img, (0, 0), mask)
        return out

    def encode_ascii(self, text: str) -> str:
        """Return a terminal rendering of the code."""
        qr = qrcode.QRCode(border=self.quiet_zone)
        qr.add_data(text)
        qr.make(fit=True)
        out = io.StringIO()
        qr.print_ascii(out=out, invert=True)
        return out.getvalue()


class CodeRenderer:
    """Renders payloads off the UI thread; only the newest request is shown.

    Every request gets a token from a counter. A finished render is handed to
    `ui_call` and applied there only if its token is still the latest one,
    so overlapping requests can finish in any order without showing a stale
    code. Failed renders are logged and leave the current code in place.
    """

    def __init__(
        self,
        encoder: Optional[QrEncoder] = None,
        ui_call: Optional[UiCall] = None,
        on_rendered: Optional[Callable[[RenderedCode], None]] = None,
        executor: Optional[Executor] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        """Initialize CodeRenderer state and collaborator references."""
        self._lock = threading.Lock()
        self._latest_token = 0
        self._current: Optional[RenderedCode] = None
        self._encoder = encoder or QrEncoder()
        self._ui_call = ui_call or (lambda fn: fn())
        self.on_rendered = on_rendered
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers or config.RENDER_WORKERS,
            thread_name_prefix="syncdeck-qr",
        )

    @property
    def latest_token(self) -> int:
        with self._lock:
            return self._latest_token

    @property
    def current(self) -> Optional[RenderedCode]:
        with self._lock:
            return self._current

    def request_render(self, payload: str):
        """Queue a render of `payload`; returns the worker future."""
        with self._lock:
            self._latest_token += 1
            token = self._latest_token
        return self._executor.submit(self._render, token, payload)

    def invalidate(self) -> int:
        """Retire every pending render and the code on screen; returns the new token."""
        with self._lock:
            self._latest_token += 1
            self._current = None
            return self._latest_token

    def _render(self, token: int, payload: str) -> Optional[RenderedCode]:
        """Encode payload on a worker thread and hand the result to the UI."""
        try:
            image = self._encoder.encode(payload)
        except Exception:
            log.exception("qr render failed (token=%s)", token)
            return None
        code = RenderedCode(payload=payload, token=token, image=image)
        self._ui_call(lambda: self._apply(code))
        return code

    def _apply(self, code: RenderedCode) -> bool:
        """Show `code` unless a newer request was issued meanwhile."""
        with self._lock:
            if code.token != self._latest_token:
                log.debug("dropping stale qr render %s (latest %s)", code.token, self._latest_token)
                return False
            self._current = code
        callback = self.on_rendered
        if callback is not None:
            callback(code)
        return True

    def shutdown(self, wait: bool = False) -> None:
        """Stop the worker pool if this renderer created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
