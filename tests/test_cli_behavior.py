import contextlib
import io
import os
import tempfile
import unittest
from unittest.mock import patch

from syncdeck import __main__ as cli
from syncdeck.payload import parse_payload


class CliBehaviorTests(unittest.TestCase):
    def setUp(self):
        """Prepare an isolated key file."""
        self._tmp = tempfile.TemporaryDirectory()
        self.key_file = os.path.join(self._tmp.name, "key.json")

    def tearDown(self):
        """Remove temporary files."""
        self._tmp.cleanup()

    def test_print_mode_outputs_payload_and_ascii_qr(self):
        """Validate scenario: --print writes the payload line then the code."""
        out = io.StringIO()
        with patch("syncdeck.net.resolve_local_address", return_value="192.168.1.10") as resolve, patch(
            "syncdeck.net.list_adapters", return_value=["en0"]
        ), contextlib.redirect_stdout(out):
            code = cli.main(
                [
                    "--print",
                    "--port",
                    "7010",
                    "--name",
                    "My Mac",
                    "--plus",
                    "--adapter",
                    "en0",
                    "--key-file",
                    self.key_file,
                ]
            )
        self.assertEqual(code, 0)
        resolve.assert_called_once_with("en0")
        first_line = out.getvalue().splitlines()[0]
        parsed = parse_payload(first_line)
        self.assertEqual((parsed.address, parsed.port, parsed.device_name, parsed.plus), ("192.168.1.10", 7010, "My Mac", True))
        self.assertTrue(os.path.exists(self.key_file))
        self.assertGreater(len(out.getvalue().splitlines()), 5)

    def test_print_mode_reuses_persisted_key(self):
        """Validate scenario: two runs with the same key file print the same key."""
        keys = []
        for _ in range(2):
            out = io.StringIO()
            with patch("syncdeck.net.resolve_local_address", return_value="10.0.0.2"), contextlib.redirect_stdout(out):
                cli.main(["--print", "--port", "7010", "--key-file", self.key_file])
            keys.append(parse_payload(out.getvalue().splitlines()[0]).secret)
        self.assertEqual(keys[0], keys[1])

    def test_print_mode_without_address_fails(self):
        """Validate scenario: no resolvable address exits with status 1."""
        out = io.StringIO()
        with patch("syncdeck.net.resolve_local_address", return_value=None), contextlib.redirect_stdout(out):
            code = cli.main(["--print", "--port", "7010", "--key-file", self.key_file])
        self.assertEqual(code, 1)
        self.assertIn("no local network address", out.getvalue())

    def test_list_adapters_prints_one_interface_per_line(self):
        """Validate scenario: --list-adapters shows the choices for --adapter and exits."""
        out = io.StringIO()
        with patch("syncdeck.net.list_adapters", return_value=["en0", "wlan0"]), patch(
            "syncdeck.net.resolve_local_address"
        ) as resolve, contextlib.redirect_stdout(out):
            code = cli.main(["--list-adapters"])
        self.assertEqual(code, 0)
        self.assertEqual(out.getvalue().splitlines(), ["en0", "wlan0"])
        resolve.assert_not_called()

    def test_unknown_adapter_is_reported(self):
        """Validate scenario: an adapter without IPv4 is logged and yields no payload."""
        out = io.StringIO()
        with patch("syncdeck.net.list_adapters", return_value=["en0"]), patch(
            "syncdeck.net.resolve_local_address", return_value=None
        ), contextlib.redirect_stdout(out), self.assertLogs("syncdeck", level="WARNING") as logs:
            code = cli.main(["--print", "--adapter", "tun9", "--port", "7010", "--key-file", self.key_file])
        self.assertEqual(code, 1)
        self.assertIn("tun9", "\n".join(logs.output))


if __name__ == "__main__":
    unittest.main()
