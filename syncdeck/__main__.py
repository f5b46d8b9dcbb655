"""Command-line entry point: open the pairing window or print the code."""

import argparse
import sys
from typing import Optional

from . import config, net
from .logging_config import log
from .payload import PairingPayloadBuilder
from .renderer import QrEncoder
from .secret_store import SecretStore
from .state import AppState


def main(argv: Optional[list] = None) -> int:
    """Run the module entrypoint: print the pairing code or open the window."""
    ap = argparse.ArgumentParser(prog="syncdeck", description="Show the pairing QR code.")
    ap.add_argument("--port", type=int, default=None)
    ap.add_argument("--name", type=str, default=None)
    ap.add_argument("--adapter", type=str, default=None, help="network interface to advertise (see --list-adapters)")
    ap.add_argument("--list-adapters", action="store_true", help="print interfaces that carry an IPv4 address, then exit")
    ap.add_argument("--plus", action="store_true")
    ap.add_argument("--key-file", type=str, default="")
    ap.add_argument("--print", dest="print_only", action="store_true", help="print payload and ASCII QR, then exit")
    args = ap.parse_args(sys.argv[1:] if argv is None else argv)

    if args.list_adapters:
        for name in net.list_adapters():
            print(name)
        return 0

    adapter = str(args.adapter or "").strip()
    if adapter and adapter not in net.list_adapters():
        log.warning("adapter %r has no IPv4 address right now", adapter)

    state = AppState(
        port=args.port,
        device_name=args.name,
        adapter_name=args.adapter,
        is_plus=True if args.plus else None,
    )
    secret_store = SecretStore(path=str(args.key_file or "").strip() or config.KEY_FILE)

    if args.print_only:
        payload = PairingPayloadBuilder(secret_store, state, net.resolve_local_address).build()
        if payload is None:
            print("SyncDeck Error: no local network address available")
            return 1
        print(payload)
        print(QrEncoder().encode_ascii(payload))
        return 0

    from .launcher.window import run

    log.info("starting SyncDeck %s", config.VERSION)
    run(state=state, secret_store=secret_store)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
