"""customtkinter pairing window."""

from __future__ import annotations

import logging
import tkinter as tk
from typing import Any, Optional

import customtkinter as ctk
from PIL import ImageTk

from .. import config, net
from ..controller import PairingScreenController
from ..payload import PairingPayloadBuilder
from ..renderer import CodeRenderer, QrEncoder, RenderedCode
from ..secret_store import SecretStore
from ..state import AppState
from .bridge import TkClipboard, TkScheduler, UiQueue
from .theme import (
    COLOR_BG,
    COLOR_PANEL,
    COLOR_TEXT,
    COLOR_TEXT_DIM,
    COLOR_ACCENT,
    FONT_HEADER,
    FONT_SMALL,
    FONT_UI_BOLD,
    button_style,
    icon_glyph,
    severity_color,
    translucency_supported,
)

log = logging.getLogger(__name__)

UI_QUEUE_INTERVAL_MS = 50
POLL_INTERVAL_MS = 500

RESET_MENU_LABEL = "Reset key - Devices will need to reAuth"

ctk.set_appearance_mode("Dark")
ctk.set_default_color_theme("dark-blue")


class SyncBtn(ctk.CTkButton):
    def __init__(self, master: Any, primary: bool = False, **kwargs: Any) -> None:
        """Create a themed button."""
        defaults = button_style(primary=primary, translucent=translucency_supported())
        defaults.update(kwargs)
        super().__init__(master, **defaults)


class PairingWindow(ctk.CTk):
    """Window showing the pairing QR code, the key actions and server status."""

    def __init__(
        self,
        state: Optional[AppState] = None,
        secret_store: Optional[SecretStore] = None,
    ) -> None:
        """Build widgets and wire the controller to Tk."""
        super().__init__()
        self.title("SyncDeck")
        self.configure(fg_color=COLOR_BG)
        self.geometry("320x420")
        self.resizable(False, False)

        self.state_model = state or AppState()
        self.secret_store = secret_store or SecretStore(path=config.KEY_FILE)
        self.ui_queue = UiQueue()
        self.renderer = CodeRenderer(encoder=QrEncoder(), ui_call=self.ui_queue)
        self.controller = PairingScreenController(
            state=self.state_model,
            secret_store=self.secret_store,
            builder=PairingPayloadBuilder(self.secret_store, self.state_model, net.resolve_local_address),
            renderer=self.renderer,
            clipboard=TkClipboard(self),
            scheduler=TkScheduler(self),
            on_code=self._show_code,
            on_placeholder=self._show_placeholder,
            on_copy_status=self._show_copy_status,
        )
        self._qr_tk_img = None
        self._unsubscribe_status = self.state_model.status_monitor.subscribe(
            lambda _status: self.ui_queue(self._update_status)
        )

        self._build_ui()
        self._update_status()
        self.protocol("WM_DELETE_WINDOW", self.on_close)
        self.after(UI_QUEUE_INTERVAL_MS, self._process_ui_queue)
        self.after(POLL_INTERVAL_MS, self._poll)
        self.controller.mount()

    def _build_ui(self) -> None:
        root = ctk.CTkFrame(self, fg_color=COLOR_PANEL, corner_radius=6)
        root.pack(fill="both", expand=True, padx=12, pady=12)

        title = ctk.CTkLabel(root, text="Scan to connect", font=FONT_HEADER, text_color=COLOR_TEXT)
        title.pack(pady=(14, 8))

        self.lbl_qr = tk.Label(
            root,
            text="Generating QR...",
            font=FONT_SMALL,
            fg=COLOR_TEXT_DIM,
            bg=COLOR_PANEL,
            bd=0,
            highlightthickness=0,
        )
        self.lbl_qr.pack(pady=8)

        self.btn_copy = SyncBtn(root, text="Copy Key", command=self.controller.copy_secret)
        self.btn_copy.pack(pady=(8, 0))

        self.key_menu = tk.Menu(self, tearoff=0)
        self.key_menu.add_command(label=RESET_MENU_LABEL, command=self.controller.reset_secret)
        for seq in ("<Button-3>", "<Button-2>"):
            self.btn_copy.bind(seq, self._open_key_menu)

        self.lbl_copy_status = ctk.CTkLabel(root, text="", font=FONT_SMALL, text_color=COLOR_ACCENT)
        self.lbl_copy_status.pack(pady=(2, 0))

        self.lbl_status = ctk.CTkLabel(root, text="", font=FONT_UI_BOLD, text_color=COLOR_TEXT_DIM)
        self.lbl_status.pack(side="bottom", pady=14)

        # Toplevel bindings see clicks on every child widget.
        self.bind("<Button-1>", self._on_tap, add="+")

    def _open_key_menu(self, event: Any) -> None:
        try:
            self.key_menu.tk_popup(event.x_root, event.y_root)
        finally:
            self.key_menu.grab_release()

    def _on_tap(self, event: Any) -> None:
        if str(event.widget).startswith(str(self.btn_copy)):
            return
        self.controller.tap()

    def _show_code(self, code: RenderedCode) -> None:
        self._qr_tk_img = ImageTk.PhotoImage(code.image)
        self.lbl_qr.configure(image=self._qr_tk_img, text="")

    def _show_placeholder(self, text: Optional[str]) -> None:
        if text is None:
            return
        self._qr_tk_img = None
        self.lbl_qr.configure(image="", text=text)

    def _show_copy_status(self, message: Optional[str]) -> None:
        self.lbl_copy_status.configure(text=message or "")

    def _update_status(self) -> None:
        info = self.controller.status_info()
        self.lbl_status.configure(
            text=f"{icon_glyph(info.icon)}  {info.text}",
            text_color=severity_color(info.severity),
        )

    def _process_ui_queue(self) -> None:
        """Execute pending UI-thread callbacks from the queue."""
        self.ui_queue.drain()
        self.after(UI_QUEUE_INTERVAL_MS, self._process_ui_queue)

    def _poll(self) -> None:
        self.controller.poll_refresh_signal()
        self.after(POLL_INTERVAL_MS, self._poll)

    def on_close(self) -> None:
        self._unsubscribe_status()
        self.renderer.shutdown()
        self.destroy()


def run(state: Optional[AppState] = None, secret_store: Optional[SecretStore] = None) -> None:
    """Open the pairing window and block in the Tk main loop."""
    app = PairingWindow(state=state, secret_store=secret_store)
    log.info("pairing window opened")
    app.mainloop()
