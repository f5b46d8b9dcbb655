"""SyncDeck: pairing screen for the desktop companion."""

from .config import VERSION

__version__ = VERSION
