"""Runtime settings read from SYNCDECK_* environment variables."""

import os
import socket
import sys


VERSION = "v1.0.0"

DEVICE_NAME_PLACEHOLDER = "My Mac"


def _env_flag(name: str, default: str = "0") -> bool:
    """Return True when env var equals `1`."""
    return str(os.environ.get(name, default) or default).strip() == "1"


def _env_float(name: str, default: float) -> float:
    """Parse float env var with fallback on malformed values."""
    try:
        return float(os.environ.get(name, str(default)))
    except (TypeError, ValueError):
        return float(default)


def _default_device_name() -> str:
    """Return the machine name shown to paired devices."""
    if os.name == "nt":
        return os.environ.get("COMPUTERNAME") or DEVICE_NAME_PLACEHOLDER
    return os.environ.get("HOSTNAME") or socket.gethostname() or DEVICE_NAME_PLACEHOLDER


def _default_data_dir() -> str:
    """Resolve per-user data directory for key and log files."""
    if os.name == "nt":
        base = os.environ.get("APPDATA") or os.path.expanduser("~")
    elif sys.platform == "darwin":
        base = os.path.join(os.path.expanduser("~"), "Library", "Application Support")
    else:
        base = os.environ.get("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(base, "syncdeck")


SERVER_PORT = int(os.environ.get("SYNCDECK_PORT", "6996"))
DEVICE_NAME = str(os.environ.get("SYNCDECK_DEVICE_NAME", "") or "").strip() or _default_device_name()
NETWORK_ADAPTER = str(os.environ.get("SYNCDECK_ADAPTER", "") or "").strip()
IS_PLUS = _env_flag("SYNCDECK_PLUS")
PAIRING_SCHEME = str(os.environ.get("SYNCDECK_PAIRING_SCHEME", "airsync") or "airsync").strip()

COPY_CONFIRM_S = _env_float("SYNCDECK_COPY_CONFIRM_S", 2.5)
QR_IMAGE_SIZE = int(os.environ.get("SYNCDECK_QR_SIZE", "200"))
PLAIN_STYLE = _env_flag("SYNCDECK_PLAIN_STYLE")
RENDER_WORKERS = max(1, int(os.environ.get("SYNCDECK_RENDER_WORKERS", "2")))

DEBUG = _env_flag("SYNCDECK_DEBUG")
CONSOLE_LOG = _env_flag("SYNCDECK_CONSOLE")
LOG_ENABLED = _env_flag("SYNCDECK_LOG") or CONSOLE_LOG

DATA_DIR = os.path.abspath(str(os.environ.get("SYNCDECK_DATA_DIR", "") or "").strip() or _default_data_dir())
LOG_FILE = os.path.join(DATA_DIR, "syncdeck.log")
KEY_FILE = str(os.environ.get("SYNCDECK_KEY_FILE", "") or "").strip() or os.path.join(DATA_DIR, "syncdeck_key.json")


def reload_from_env() -> None:
    """Reload runtime configuration from environment variables."""
    global SERVER_PORT, DEVICE_NAME, NETWORK_ADAPTER, IS_PLUS, PAIRING_SCHEME
    global COPY_CONFIRM_S, QR_IMAGE_SIZE, RENDER_WORKERS, PLAIN_STYLE
    global DEBUG, CONSOLE_LOG, LOG_ENABLED
    global DATA_DIR, LOG_FILE, KEY_FILE

    SERVER_PORT = int(os.environ.get("SYNCDECK_PORT", str(SERVER_PORT)))
    DEVICE_NAME = str(os.environ.get("SYNCDECK_DEVICE_NAME", DEVICE_NAME) or "").strip() or _default_device_name()
    NETWORK_ADAPTER = str(os.environ.get("SYNCDECK_ADAPTER", NETWORK_ADAPTER) or "").strip()
    IS_PLUS = _env_flag("SYNCDECK_PLUS")
    PAIRING_SCHEME = str(os.environ.get("SYNCDECK_PAIRING_SCHEME", PAIRING_SCHEME) or "airsync").strip()

    COPY_CONFIRM_S = _env_float("SYNCDECK_COPY_CONFIRM_S", COPY_CONFIRM_S)
    QR_IMAGE_SIZE = int(os.environ.get("SYNCDECK_QR_SIZE", str(QR_IMAGE_SIZE)))
    PLAIN_STYLE = _env_flag("SYNCDECK_PLAIN_STYLE")
    RENDER_WORKERS = max(1, int(os.environ.get("SYNCDECK_RENDER_WORKERS", str(RENDER_WORKERS))))

    DEBUG = _env_flag("SYNCDECK_DEBUG")
    CONSOLE_LOG = _env_flag("SYNCDECK_CONSOLE")
    LOG_ENABLED = _env_flag("SYNCDECK_LOG") or CONSOLE_LOG

    data_dir = str(os.environ.get("SYNCDECK_DATA_DIR", "") or "").strip()
    if data_dir:
        DATA_DIR = os.path.abspath(data_dir)
    LOG_FILE = os.path.join(DATA_DIR, "syncdeck.log")
    KEY_FILE = str(os.environ.get("SYNCDECK_KEY_FILE", "") or "").strip() or os.path.join(DATA_DIR, "syncdeck_key.json")
