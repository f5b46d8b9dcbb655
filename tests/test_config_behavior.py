import logging
import os
import tempfile
import unittest
from unittest.mock import patch

import syncdeck.config as config
import syncdeck.logging_config as logging_config


_FIELDS = (
    "SERVER_PORT",
    "DEVICE_NAME",
    "NETWORK_ADAPTER",
    "IS_PLUS",
    "PAIRING_SCHEME",
    "COPY_CONFIRM_S",
    "QR_IMAGE_SIZE",
    "PLAIN_STYLE",
    "RENDER_WORKERS",
    "DEBUG",
    "CONSOLE_LOG",
    "LOG_ENABLED",
    "DATA_DIR",
    "LOG_FILE",
    "KEY_FILE",
)


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self):
        """Prepare test preconditions for each test case."""
        self._state = {key: getattr(config, key) for key in _FIELDS}

    def tearDown(self):
        """Restore config values touched by tests."""
        for key, value in self._state.items():
            setattr(config, key, value)

    def test_reload_from_env_updates_runtime_values(self):
        """Validate scenario: env overrides are picked up by reload."""
        with tempfile.TemporaryDirectory() as td:
            env = {
                "SYNCDECK_PORT": "7010",
                "SYNCDECK_DEVICE_NAME": "  Studio  ",
                "SYNCDECK_ADAPTER": "en0",
                "SYNCDECK_PLUS": "1",
                "SYNCDECK_PAIRING_SCHEME": "scheme",
                "SYNCDECK_COPY_CONFIRM_S": "4",
                "SYNCDECK_QR_SIZE": "256",
                "SYNCDECK_PLAIN_STYLE": "1",
                "SYNCDECK_RENDER_WORKERS": "0",
                "SYNCDECK_DEBUG": "1",
                "SYNCDECK_CONSOLE": "1",
                "SYNCDECK_DATA_DIR": td,
            }
            with patch.dict(os.environ, env, clear=False):
                os.environ.pop("SYNCDECK_KEY_FILE", None)
                config.reload_from_env()
            self.assertEqual(config.SERVER_PORT, 7010)
            self.assertEqual(config.DEVICE_NAME, "Studio")
            self.assertEqual(config.NETWORK_ADAPTER, "en0")
            self.assertTrue(config.IS_PLUS)
            self.assertEqual(config.PAIRING_SCHEME, "scheme")
            self.assertEqual(config.COPY_CONFIRM_S, 4.0)
            self.assertEqual(config.QR_IMAGE_SIZE, 256)
            self.assertTrue(config.PLAIN_STYLE)
            self.assertEqual(config.RENDER_WORKERS, 1)
            self.assertTrue(config.DEBUG)
            self.assertTrue(config.LOG_ENABLED)
            self.assertEqual(config.LOG_FILE, os.path.join(os.path.abspath(td), "syncdeck.log"))
            self.assertEqual(config.KEY_FILE, os.path.join(os.path.abspath(td), "syncdeck_key.json"))

    def test_malformed_float_keeps_previous_value(self):
        """Validate scenario: unparsable confirm delay falls back."""
        config.COPY_CONFIRM_S = 2.5
        with patch.dict(os.environ, {"SYNCDECK_COPY_CONFIRM_S": "soon"}, clear=False):
            config.reload_from_env()
        self.assertEqual(config.COPY_CONFIRM_S, 2.5)

    def test_blank_device_name_falls_back_to_machine_name(self):
        """Validate scenario: empty device name resolves to a non-empty default."""
        with patch.dict(os.environ, {"SYNCDECK_DEVICE_NAME": "   "}, clear=False):
            config.reload_from_env()
        self.assertTrue(config.DEVICE_NAME.strip())


class LoggingBehaviorTests(unittest.TestCase):
    def tearDown(self):
        """Leave the package logger in its disabled state."""
        with patch.object(logging_config.config, "LOG_ENABLED", False):
            logging_config.reload_logging()

    def test_setup_logging_when_disabled_uses_null_handler(self):
        """Validate scenario: disabled logging installs only a NullHandler."""
        with patch.object(logging_config.config, "LOG_ENABLED", False):
            logger = logging_config.reload_logging()
        self.assertTrue(all(isinstance(h, logging.NullHandler) for h in logger.handlers))
        self.assertFalse(logger.propagate)

    def test_reload_logging_rebuilds_file_and_console_handlers(self):
        """Validate scenario: enabled logging writes to a rotating file and stdout."""
        with tempfile.TemporaryDirectory() as td, patch.object(logging_config.config, "DATA_DIR", td), patch.object(
            logging_config.config, "LOG_FILE", os.path.join(td, "syncdeck.log")
        ), patch.object(logging_config.config, "LOG_ENABLED", True), patch.object(
            logging_config.config, "CONSOLE_LOG", True
        ), patch.object(logging_config.config, "DEBUG", True):
            logger = logging_config.reload_logging()
            names = sorted(h.__class__.__name__ for h in logger.handlers)
            self.assertEqual(names, ["RotatingFileHandler", "StreamHandler"])
            self.assertEqual(logger.level, logging.DEBUG)
            logger.info("hello")
            for h in list(logger.handlers):
                h.flush()
            with open(os.path.join(td, "syncdeck.log"), "r", encoding="utf-8") as f:
                self.assertIn("hello", f.read())
            for h in list(logger.handlers):
                logger.removeHandler(h)
                h.close()


if __name__ == "__main__":
    unittest.main()
