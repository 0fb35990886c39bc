"""Host identity — hostname and interface addresses.

The text block served by the whoami route is computed once per process;
interfaces are not expected to change under a running test double.
"""

import functools
import socket

import psutil

_IP_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def hostname() -> str:
    """Return the machine hostname."""
    return socket.gethostname()


def interface_addresses() -> list[str]:
    """Return every IPv4/IPv6 address bound to a local interface.

    IPv6 zone suffixes (``fe80::1%eth0``) are stripped.
    """
    addresses: list[str] = []
    for addrs in psutil.net_if_addrs().values():
        for addr in addrs:
            if addr.family not in _IP_FAMILIES:
                continue
            addresses.append(addr.address.split("%", 1)[0])
    return addresses


def format_host_info(name: str, addresses: list[str]) -> str:
    """Render the ``Hostname:`` / ``IP:`` text block."""
    lines = [f"Hostname: {name}"]
    lines.extend(f"IP: {address}" for address in addresses)
    return "\n".join(lines) + "\n"


@functools.cache
def host_info_text() -> str:
    """Host info block for this process, computed on first use."""
    return format_host_info(hostname(), interface_addresses())
