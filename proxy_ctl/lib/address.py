"""Socket address parsing for listener, frontend and backend addresses."""

import ipaddress
from dataclasses import dataclass

from .exceptions import AddressParseError


@dataclass(frozen=True)
class SocketAddress:
    """IP address and port, printed as ``ip:port`` or ``[ip]:port`` for IPv6."""

    ip: ipaddress.IPv4Address | ipaddress.IPv6Address
    port: int

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


def parse_socket_address(text: str) -> SocketAddress:
    """Parse ``1.2.3.4:80`` or ``[::1]:80`` into a SocketAddress.

    Hostnames are not resolved; the host part must be an IP literal.

    Raises:
        AddressParseError: If the string is not a valid socket address
    """
    host, sep, port_text = text.rpartition(":")
    if not sep or not host:
        raise AddressParseError(f"invalid socket address {text!r}: missing port")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
        expect_v6 = True
    else:
        expect_v6 = False

    try:
        ip = ipaddress.ip_address(host)
    except ValueError as e:
        raise AddressParseError(f"invalid socket address {text!r}: {e}") from e

    # bare IPv6 must be bracketed, and brackets are only for IPv6
    if (ip.version == 6) != expect_v6:
        raise AddressParseError(f"invalid socket address {text!r}")

    # the proxy only takes numeric scope ids
    scope_id = getattr(ip, "scope_id", None)
    if scope_id is not None and not (scope_id.isascii() and scope_id.isdigit()):
        raise AddressParseError(f"invalid socket address {text!r}: bad scope id {scope_id!r}")

    if not (port_text.isascii() and port_text.isdigit()) or int(port_text) > 65535:
        raise AddressParseError(f"invalid socket address {text!r}: bad port {port_text!r}")

    return SocketAddress(ip=ip, port=int(port_text))


def as_socket_address(value: str | SocketAddress) -> SocketAddress:
    """Return value unchanged if already parsed, otherwise parse it."""
    if isinstance(value, SocketAddress):
        return value
    return parse_socket_address(value)
