"""Colors, fonts and button styles for the pairing window."""

import os
import sys

from .. import config
from ..status import Severity

COLOR_BG = "#050805"
COLOR_PANEL = "#0A120D"
COLOR_PANEL_ALT = "#0D1711"
COLOR_BORDER = "#1D3A29"
COLOR_ACCENT = "#3CFF91"
COLOR_ACCENT_HOVER = "#69FFAD"
COLOR_WARN = "#FFC24B"
COLOR_FAIL = "#FF6B6B"
COLOR_TEXT = "#D9FFE8"
COLOR_TEXT_DIM = "#77A889"

FONT_UI = ("Consolas", 12)
FONT_UI_BOLD = ("Consolas", 12, "bold")
FONT_HEADER = ("Consolas", 18, "bold")
FONT_SMALL = ("Consolas", 10)

SEVERITY_COLORS = {
    Severity.NEUTRAL: COLOR_TEXT_DIM,
    Severity.INFORMATIONAL: COLOR_WARN,
    Severity.SUCCESS: COLOR_ACCENT,
    Severity.ERROR: COLOR_FAIL,
}

# Icon tokens from the status model rendered as text glyphs.
ICON_GLYPHS = {
    "xmark.circle": "✕",
    "clock": "⏲",
    "checkmark.circle": "✓",
    "exclamationmark.triangle": "⚠",
}

# Keyed by (primary, translucent). Translucent styles need a compositor.
BUTTON_STYLES = {
    (False, False): dict(
        fg_color=COLOR_PANEL_ALT,
        hover_color="#163020",
        text_color=COLOR_TEXT,
        border_color=COLOR_BORDER,
    ),
    (True, False): dict(
        fg_color=COLOR_ACCENT,
        hover_color=COLOR_ACCENT_HOVER,
        text_color="#04110A",
        border_color=COLOR_ACCENT,
    ),
    (False, True): dict(
        fg_color="transparent",
        hover_color="#163020",
        text_color=COLOR_TEXT,
        border_color=COLOR_BORDER,
    ),
    (True, True): dict(
        fg_color="transparent",
        hover_color=COLOR_ACCENT_HOVER,
        text_color=COLOR_ACCENT,
        border_color=COLOR_ACCENT,
    ),
}


def translucency_supported() -> bool:
    """Return True when the desktop can composite translucent widgets."""
    if config.PLAIN_STYLE:
        return False
    if os.name == "nt" or sys.platform == "darwin":
        return True
    return bool(os.environ.get("WAYLAND_DISPLAY"))


def button_style(primary: bool = False, translucent: bool = False) -> dict:
    """Return widget options for a button, without any version checks."""
    style = dict(
        corner_radius=8,
        border_width=1,
        font=FONT_UI_BOLD,
        height=34,
    )
    style.update(BUTTON_STYLES[(bool(primary), bool(translucent))])
    return style


def severity_color(severity: Severity) -> str:
    return SEVERITY_COLORS[severity]


def icon_glyph(icon: str) -> str:
    return ICON_GLYPHS.get(icon, "•")
