"""Protocol-level descriptors carried by control requests."""

import re
from dataclasses import dataclass, field
from enum import Enum

from .address import SocketAddress
from .fingerprint import Fingerprint


class TlsVersion(Enum):
    SSL_V2 = "SSL_V2"
    SSL_V3 = "SSL_V3"
    TLS_V1_0 = "TLS_V1_0"
    TLS_V1_1 = "TLS_V1_1"
    TLS_V1_2 = "TLS_V1_2"
    TLS_V1_3 = "TLS_V1_3"


class ListenerType(Enum):
    HTTP = "HTTP"
    HTTPS = "HTTPS"
    TCP = "TCP"


class ProxyProtocolConfig(Enum):
    """How a cluster handles the proxy protocol header."""

    EXPECT_HEADER = "EXPECT_HEADER"
    SEND_HEADER = "SEND_HEADER"
    RELAY_HEADER = "RELAY_HEADER"


class LoadBalancingAlgorithm(Enum):
    ROUND_ROBIN = "ROUND_ROBIN"
    RANDOM = "RANDOM"
    LEAST_LOADED = "LEAST_LOADED"
    POWER_OF_TWO = "POWER_OF_TWO"


class LoadMetric(Enum):
    CONNECTIONS = "CONNECTIONS"
    REQUESTS = "REQUESTS"
    CONNECTION_TIME = "CONNECTION_TIME"


class RulePosition(Enum):
    PRE = "PRE"
    POST = "POST"
    TREE = "TREE"


class PathRuleKind(Enum):
    PREFIX = "PREFIX"
    REGEX = "REGEX"
    EQUALS = "EQUALS"


class MetricsConfiguration(Enum):
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"
    CLEAR = "CLEAR"


@dataclass
class PathRule:
    """Path matching rule of an HTTP(S) frontend."""

    kind: PathRuleKind
    value: str

    @classmethod
    def from_cli_options(
        cls,
        path_prefix: str | None,
        path_regex: str | None,
        path_equals: str | None,
    ) -> "PathRule":
        """Build a rule from whichever path option was supplied.

        Prefix takes precedence over regex, regex over equals. With no option
        the rule is an empty prefix, matching every path.
        """
        if path_prefix is not None:
            return cls(PathRuleKind.PREFIX, path_prefix)
        if path_regex is not None:
            return cls(PathRuleKind.REGEX, path_regex)
        if path_equals is not None:
            return cls(PathRuleKind.EQUALS, path_equals)
        return cls(PathRuleKind.PREFIX, "")

    def matches(self, path: str) -> bool:
        """Return True if a request path is selected by this rule."""
        if self.kind is PathRuleKind.PREFIX:
            return path.startswith(self.value)
        if self.kind is PathRuleKind.REGEX:
            return re.search(self.value, path) is not None
        return path == self.value


@dataclass
class LoadBalancingParams:
    weight: int = 0


@dataclass
class Cluster:
    """Backend pool policy.

    proxy_protocol is derived from the send/expect flags of the add command,
    see request_builder.proxy_protocol_from_flags.
    """

    cluster_id: str
    sticky_session: bool
    https_redirect: bool
    proxy_protocol: ProxyProtocolConfig | None
    load_balancing: LoadBalancingAlgorithm
    load_metric: LoadMetric | None = None
    answer_503: str | None = None


@dataclass
class AddBackend:
    cluster_id: str
    backend_id: str
    address: SocketAddress
    load_balancing_parameters: LoadBalancingParams | None = None
    sticky_id: str | None = None
    backup: bool | None = None


@dataclass
class RemoveBackend:
    cluster_id: str
    backend_id: str
    address: SocketAddress


@dataclass
class RequestTcpFrontend:
    cluster_id: str
    address: SocketAddress
    tags: dict[str, str] | None = None


@dataclass
class RequestHttpFrontend:
    """Routing rule for HTTP or HTTPS traffic.

    A None hostname or method matches any value. A None cluster_id answers
    matching requests with a 401 instead of routing them.
    """

    cluster_id: str | None
    address: SocketAddress
    hostname: str
    path: PathRule
    method: str | None = None
    position: RulePosition = RulePosition.TREE
    tags: dict[str, str] = field(default_factory=dict)


@dataclass
class FrontendFilters:
    """Selection of frontends to list."""

    http: bool
    https: bool
    tcp: bool
    domain: str | None = None


@dataclass
class HttpListenerConfig:
    address: SocketAddress
    public_address: SocketAddress | None
    answer_404: str | None
    answer_503: str | None
    expect_proxy: bool
    sticky_name: str
    front_timeout: int
    back_timeout: int
    connect_timeout: int
    request_timeout: int


@dataclass
class HttpsListenerConfig:
    address: SocketAddress
    public_address: SocketAddress | None
    answer_404: str | None
    answer_503: str | None
    expect_proxy: bool
    sticky_name: str
    front_timeout: int
    back_timeout: int
    connect_timeout: int
    request_timeout: int
    versions: list[TlsVersion]
    cipher_list: list[str]
    cipher_suites: list[str]
    signature_algorithms: list[str]
    groups_list: list[str]


@dataclass
class TcpListenerConfig:
    address: SocketAddress
    public_address: SocketAddress | None
    expect_proxy: bool
    front_timeout: int
    back_timeout: int
    connect_timeout: int


@dataclass
class RemoveListener:
    address: SocketAddress
    proxy: ListenerType


@dataclass
class ActivateListener:
    address: SocketAddress
    proxy: ListenerType
    from_scm: bool = False


@dataclass
class DeactivateListener:
    address: SocketAddress
    proxy: ListenerType
    to_scm: bool = False


@dataclass
class CertificateAndKey:
    """Certificate ready to install on an HTTPS listener.

    All fields hold PEM text; certificate_chain keeps the order of the chain file.
    """

    certificate: str
    certificate_chain: list[str]
    key: str
    versions: list[TlsVersion]


@dataclass
class AddCertificate:
    address: SocketAddress
    certificate: CertificateAndKey
    names: list[str] = field(default_factory=list)
    expired_at: int | None = None


@dataclass
class ReplaceCertificate:
    address: SocketAddress
    new_certificate: CertificateAndKey
    old_fingerprint: Fingerprint
    new_names: list[str] = field(default_factory=list)
    new_expired_at: int | None = None


@dataclass
class RemoveCertificate:
    address: SocketAddress
    fingerprint: Fingerprint
