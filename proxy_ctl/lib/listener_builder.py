"""Fluent builder for HTTP, HTTPS and TCP listener configurations."""

from pathlib import Path

from .address import SocketAddress, as_socket_address
from .config import ListenerDefaults
from .exceptions import ListenerBuildError, error_context
from .models import (
    HttpListenerConfig,
    HttpsListenerConfig,
    ListenerType,
    TcpListenerConfig,
    TlsVersion,
)


class ListenerBuilder:
    """Accumulates optional listener settings for one protocol kind.

    Every ``with_*`` setter ignores None, so CLI options can be passed
    through unchecked; unset fields take their value from ListenerDefaults
    when the builder is finalized.

    Example:
        listener = (
            ListenerBuilder.new_https("0.0.0.0:443")
            .with_tls_versions([TlsVersion.TLS_V1_3])
            .with_front_timeout(120)
            .to_tls()
        )
    """

    def __init__(
        self,
        address: str | SocketAddress | None,
        protocol: ListenerType,
        defaults: ListenerDefaults | None = None,
    ) -> None:
        self.address = address
        self.protocol = protocol
        self.defaults = defaults or ListenerDefaults()
        self.public_address: str | SocketAddress | None = None
        self.answer_404_path: str | Path | None = None
        self.answer_503_path: str | Path | None = None
        self.tls_versions: list[TlsVersion] | None = None
        self.cipher_list: list[str] | None = None
        self.expect_proxy: bool | None = None
        self.sticky_name: str | None = None
        self.front_timeout: int | None = None
        self.back_timeout: int | None = None
        self.request_timeout: int | None = None
        self.connect_timeout: int | None = None

    @classmethod
    def new_http(
        cls, address: str | SocketAddress | None, defaults: ListenerDefaults | None = None
    ) -> "ListenerBuilder":
        return cls(address, ListenerType.HTTP, defaults)

    @classmethod
    def new_https(
        cls, address: str | SocketAddress | None, defaults: ListenerDefaults | None = None
    ) -> "ListenerBuilder":
        return cls(address, ListenerType.HTTPS, defaults)

    @classmethod
    def new_tcp(
        cls, address: str | SocketAddress | None, defaults: ListenerDefaults | None = None
    ) -> "ListenerBuilder":
        return cls(address, ListenerType.TCP, defaults)

    def with_public_address(self, public_address: str | SocketAddress | None) -> "ListenerBuilder":
        if public_address is not None:
            self.public_address = public_address
        return self

    def with_answer_404_path(self, path: str | Path | None) -> "ListenerBuilder":
        if path is not None:
            self.answer_404_path = path
        return self

    def with_answer_503_path(self, path: str | Path | None) -> "ListenerBuilder":
        if path is not None:
            self.answer_503_path = path
        return self

    def with_tls_versions(self, versions: list[TlsVersion] | None) -> "ListenerBuilder":
        # an empty list means the operator gave no --tls-versions
        if versions:
            self.tls_versions = list(versions)
        return self

    def with_cipher_list(self, cipher_list: list[str] | None) -> "ListenerBuilder":
        if cipher_list is not None:
            self.cipher_list = list(cipher_list)
        return self

    def with_expect_proxy(self, expect_proxy: bool | None) -> "ListenerBuilder":
        if expect_proxy is not None:
            self.expect_proxy = expect_proxy
        return self

    def with_sticky_name(self, sticky_name: str | None) -> "ListenerBuilder":
        if sticky_name is not None:
            self.sticky_name = sticky_name
        return self

    def with_front_timeout(self, timeout: int | None) -> "ListenerBuilder":
        if timeout is not None:
            self.front_timeout = timeout
        return self

    def with_back_timeout(self, timeout: int | None) -> "ListenerBuilder":
        if timeout is not None:
            self.back_timeout = timeout
        return self

    def with_request_timeout(self, timeout: int | None) -> "ListenerBuilder":
        if timeout is not None:
            self.request_timeout = timeout
        return self

    def with_connect_timeout(self, timeout: int | None) -> "ListenerBuilder":
        if timeout is not None:
            self.connect_timeout = timeout
        return self

    def to_http(self) -> HttpListenerConfig:
        """Finalize into an HTTP listener configuration.

        Raises:
            ListenerBuildError: If the builder is not for HTTP, has no bind address,
                or an answer file is unreadable
            AddressParseError: If the address or public address is malformed
        """
        self._check_protocol(ListenerType.HTTP)
        address, public_address = self._parse_addresses()
        answer_404, answer_503 = self._load_answers()

        return HttpListenerConfig(
            address=address,
            public_address=public_address,
            answer_404=answer_404,
            answer_503=answer_503,
            expect_proxy=bool(self.expect_proxy),
            sticky_name=self._value(self.sticky_name, self.defaults.sticky_name),
            front_timeout=self._value(self.front_timeout, self.defaults.front_timeout),
            back_timeout=self._value(self.back_timeout, self.defaults.back_timeout),
            connect_timeout=self._value(self.connect_timeout, self.defaults.connect_timeout),
            request_timeout=self._value(self.request_timeout, self.defaults.request_timeout),
        )

    def to_tls(self) -> HttpsListenerConfig:
        """Finalize into an HTTPS listener configuration.

        Without explicit TLS versions or cipher list the defaults are used
        rather than failing.

        Raises:
            ListenerBuildError: If the builder is not for HTTPS, has no bind address,
                or an answer file is unreadable
            AddressParseError: If the address or public address is malformed
        """
        self._check_protocol(ListenerType.HTTPS)
        address, public_address = self._parse_addresses()
        answer_404, answer_503 = self._load_answers()

        return HttpsListenerConfig(
            address=address,
            public_address=public_address,
            answer_404=answer_404,
            answer_503=answer_503,
            expect_proxy=bool(self.expect_proxy),
            sticky_name=self._value(self.sticky_name, self.defaults.sticky_name),
            front_timeout=self._value(self.front_timeout, self.defaults.front_timeout),
            back_timeout=self._value(self.back_timeout, self.defaults.back_timeout),
            connect_timeout=self._value(self.connect_timeout, self.defaults.connect_timeout),
            request_timeout=self._value(self.request_timeout, self.defaults.request_timeout),
            versions=self._value(self.tls_versions, list(self.defaults.tls_versions)),
            cipher_list=self._value(self.cipher_list, list(self.defaults.cipher_list)),
            cipher_suites=list(self.defaults.cipher_suites),
            signature_algorithms=list(self.defaults.signature_algorithms),
            groups_list=list(self.defaults.groups_list),
        )

    def to_tcp(self) -> TcpListenerConfig:
        """Finalize into a TCP listener configuration.

        Raises:
            ListenerBuildError: If the builder is not for TCP or has no bind address
            AddressParseError: If the address or public address is malformed
        """
        self._check_protocol(ListenerType.TCP)
        address, public_address = self._parse_addresses()

        return TcpListenerConfig(
            address=address,
            public_address=public_address,
            expect_proxy=bool(self.expect_proxy),
            front_timeout=self._value(self.front_timeout, self.defaults.front_timeout),
            back_timeout=self._value(self.back_timeout, self.defaults.back_timeout),
            connect_timeout=self._value(self.connect_timeout, self.defaults.connect_timeout),
        )

    def finalize(
        self, kind: ListenerType
    ) -> HttpListenerConfig | HttpsListenerConfig | TcpListenerConfig:
        """Finalize into the configuration for the given listener kind."""
        if kind is ListenerType.HTTP:
            return self.to_http()
        if kind is ListenerType.HTTPS:
            return self.to_tls()
        return self.to_tcp()

    def _check_protocol(self, expected: ListenerType) -> None:
        if self.protocol is not expected:
            raise ListenerBuildError(
                f"cannot build a {expected.value} listener from a {self.protocol.value} builder"
            )

    def _parse_addresses(self) -> tuple[SocketAddress, SocketAddress | None]:
        if self.address is None:
            raise ListenerBuildError(f"{self.protocol.value} listener requires a bind address")
        with error_context("wrong socket address"):
            address = as_socket_address(self.address)
        public_address = None
        if self.public_address is not None:
            with error_context("wrong public socket address"):
                public_address = as_socket_address(self.public_address)
        return address, public_address

    def _load_answers(self) -> tuple[str | None, str | None]:
        return _load_answer(self.answer_404_path), _load_answer(self.answer_503_path)

    @staticmethod
    def _value(value, default):
        return default if value is None else value


def _load_answer(path: str | Path | None) -> str | None:
    """Read a custom error page; None keeps the proxy's built-in page.

    Read as bytes so the CRLF line endings of the HTTP answer survive.
    """
    if path is None:
        return None
    try:
        return Path(path).read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ListenerBuildError(f"could not load answer file on path {path}: {e}") from e
