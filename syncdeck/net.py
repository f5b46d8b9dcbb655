"""Local address lookup for the pairing payload."""

import ipaddress
import socket
from typing import Iterator, Optional

import psutil


_VPN_IFACE_HINTS = (
    "vpn",
    "tun",
    "tap",
    "wireguard",
    "wg",
    "tailscale",
    "zerotier",
    "utun",
    "ipsec",
    "ppp",
)

_NET_IFACE_HINTS = ("ethernet", "wifi", "wi-fi", "wlan", "eth", "en")


def _probe_route_ip() -> Optional[str]:
    """Return IPv4 of the default route, or None when offline."""
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("10.255.255.255", 1))
        ip = str(s.getsockname()[0] or "")
    except OSError:
        return None
    finally:
        s.close()
    if not ip or ip.startswith("127.") or ip == "0.0.0.0":
        return None
    return ip


def _iface_has_hint(name: str, hints: tuple) -> bool:
    """Return True if an interface name contains any hint token."""
    val = str(name or "").strip().lower()
    if not val:
        return False
    return any(h in val for h in hints)


def _score_ipv4_candidate(ip: str, iface_name: str) -> int:
    """Return quality score for IPv4 candidate; negative means unusable."""
    try:
        addr = ipaddress.ip_address(str(ip or "").strip())
    except ValueError:
        return -1
    if not isinstance(addr, ipaddress.IPv4Address):
        return -1
    if addr.is_loopback or addr.is_link_local:
        return -1
    if _iface_has_hint(iface_name, _VPN_IFACE_HINTS):
        return -1

    score = 50
    if addr.is_private:
        score += 60
    if _iface_has_hint(iface_name, _NET_IFACE_HINTS):
        score += 12
    return score


def _iface_ipv4(entries) -> Iterator[str]:
    """Yield IPv4 addresses from psutil address entries."""
    for entry in entries or []:
        if getattr(entry, "family", None) != socket.AF_INET:
            continue
        ip = str(getattr(entry, "address", "") or "").strip()
        if ip:
            yield ip


def _iter_ranked_ipv4() -> Iterator[str]:
    """Yield IPv4 addresses from active non-VPN interfaces ordered by score."""
    by_iface = psutil.net_if_addrs() or {}
    stats = psutil.net_if_stats() or {}

    ranked = []
    for iface_name, entries in by_iface.items():
        st = stats.get(iface_name)
        if st is not None and not bool(getattr(st, "isup", False)):
            continue
        for ip in _iface_ipv4(entries):
            score = _score_ipv4_candidate(ip, str(iface_name or ""))
            if score >= 0:
                ranked.append((score, ip))

    ranked.sort(key=lambda item: item[0], reverse=True)
    seen = set()
    for _score, ip in ranked:
        if ip in seen:
            continue
        seen.add(ip)
        yield ip


def list_adapters() -> list:
    """Return names of interfaces that currently carry an IPv4 address."""
    out = []
    for iface_name, entries in (psutil.net_if_addrs() or {}).items():
        if any(True for _ in _iface_ipv4(entries)):
            out.append(str(iface_name))
    return sorted(out)


def resolve_local_address(adapter_hint: Optional[str] = None) -> Optional[str]:
    """Return the LAN IPv4 the paired device should connect to.

    With `adapter_hint` only that interface is considered and None is
    returned when it has no IPv4 address.
    """
    hint = str(adapter_hint or "").strip()
    if hint:
        entries = (psutil.net_if_addrs() or {}).get(hint)
        for ip in _iface_ipv4(entries):
            try:
                if ipaddress.ip_address(ip).is_loopback:
                    continue
            except ValueError:
                continue
            return ip
        return None

    for ip in _iter_ranked_ipv4():
        return ip
    return _probe_route_ip()
