"""Tests for address module."""

import ipaddress

import pytest

from proxy_ctl.lib.address import SocketAddress, as_socket_address, parse_socket_address
from proxy_ctl.lib.exceptions import AddressParseError


class TestParseSocketAddress:
    """Tests for parse_socket_address."""

    def test_parses_ipv4(self) -> None:
        """IPv4 address with port is parsed."""
        address = parse_socket_address("127.0.0.1:8080")
        assert address.ip == ipaddress.ip_address("127.0.0.1")
        assert address.port == 8080
        assert str(address) == "127.0.0.1:8080"

    def test_parses_bracketed_ipv6(self) -> None:
        """Bracketed IPv6 address with port is parsed and printed back."""
        address = parse_socket_address("[::1]:443")
        assert address.ip.version == 6
        assert address.port == 443
        assert str(address) == "[::1]:443"

    def test_accepts_numeric_scope_id(self) -> None:
        """IPv6 link-local address with a numeric zone is accepted."""
        address = parse_socket_address("[fe80::1%2]:80")
        assert address.ip.scope_id == "2"
        assert address.port == 80

    def test_rejects_named_scope_id(self) -> None:
        """Interface names as IPv6 zones are rejected."""
        with pytest.raises(AddressParseError, match="bad scope id"):
            parse_socket_address("[fe80::1%eth0]:80")

    @pytest.mark.parametrize(
        "text",
        [
            "not-an-address",
            "localhost:80",
            "127.0.0.1",
            "127.0.0.1:",
            "127.0.0.1:port",
            "127.0.0.1:70000",
            "::1:80",
            "[127.0.0.1]:80",
            ":80",
            "[fe80::1%eth0]:80",
        ],
    )
    def test_rejects_malformed(self, text: str) -> None:
        """Malformed socket addresses raise AddressParseError."""
        with pytest.raises(AddressParseError):
            parse_socket_address(text)

    def test_error_is_value_error(self) -> None:
        """AddressParseError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_socket_address("nope")


class TestAsSocketAddress:
    """Tests for as_socket_address."""

    def test_passes_parsed_address_through(self) -> None:
        """Already parsed addresses are returned unchanged."""
        address = SocketAddress(ipaddress.ip_address("10.0.0.1"), 80)
        assert as_socket_address(address) is address

    def test_parses_string(self) -> None:
        """Strings are parsed."""
        assert as_socket_address("10.0.0.1:80") == parse_socket_address("10.0.0.1:80")
