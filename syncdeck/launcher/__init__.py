"""Launcher subsystem package.

Only the Tk adapters are imported here; the window module pulls in
customtkinter and is loaded on demand.
"""

from .bridge import TkClipboard, TkScheduler, UiQueue

__all__ = ["TkClipboard", "TkScheduler", "UiQueue"]
