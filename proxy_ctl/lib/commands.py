"""Operator commands, as produced by the CLI parser, one dataclass per variant."""

from dataclasses import dataclass, field
from enum import Enum

from .models import LoadBalancingAlgorithm, TlsVersion


class MetricsCmd(Enum):
    ENABLE = "enable"
    DISABLE = "disable"
    CLEAR = "clear"
    # answered by a separate query path, never by configure_metrics
    GET = "get"


class LoggingLevel(Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


@dataclass
class BackendAdd:
    cluster_id: str
    backend_id: str
    address: str
    sticky_id: str | None = None
    backup: bool | None = None
    weight: int | None = None


@dataclass
class BackendRemove:
    cluster_id: str
    backend_id: str
    address: str


@dataclass
class ClusterAdd:
    cluster_id: str
    sticky_session: bool = False
    https_redirect: bool = False
    send_proxy: bool = False
    expect_proxy: bool = False
    load_balancing_policy: LoadBalancingAlgorithm = LoadBalancingAlgorithm.ROUND_ROBIN


@dataclass
class ClusterRemove:
    cluster_id: str


@dataclass
class TcpFrontendAdd:
    cluster_id: str
    address: str
    tags: dict[str, str] | None = None


@dataclass
class TcpFrontendRemove:
    cluster_id: str
    address: str


@dataclass
class HttpFrontendAdd:
    """Add an HTTP or HTTPS routing rule; cluster_id None denies the route."""

    hostname: str
    address: str
    cluster_id: str | None = None
    path_prefix: str | None = None
    path_regex: str | None = None
    path_equals: str | None = None
    method: str | None = None
    tags: dict[str, str] | None = None


@dataclass
class HttpFrontendRemove:
    hostname: str
    address: str
    cluster_id: str | None = None
    path_prefix: str | None = None
    path_regex: str | None = None
    path_equals: str | None = None
    method: str | None = None


@dataclass
class HttpListenerAdd:
    address: str
    public_address: str | None = None
    answer_404: str | None = None
    answer_503: str | None = None
    expect_proxy: bool = False
    sticky_name: str | None = None
    front_timeout: int | None = None
    back_timeout: int | None = None
    request_timeout: int | None = None
    connect_timeout: int | None = None


@dataclass
class HttpsListenerAdd:
    address: str
    public_address: str | None = None
    answer_404: str | None = None
    answer_503: str | None = None
    tls_versions: list[TlsVersion] = field(default_factory=list)
    cipher_list: list[str] | None = None
    expect_proxy: bool = False
    sticky_name: str | None = None
    front_timeout: int | None = None
    back_timeout: int | None = None
    request_timeout: int | None = None
    connect_timeout: int | None = None


@dataclass
class TcpListenerAdd:
    address: str
    public_address: str | None = None
    expect_proxy: bool = False


@dataclass
class ListenerRemove:
    address: str


@dataclass
class ListenerActivate:
    address: str


@dataclass
class ListenerDeactivate:
    address: str


BackendCmd = BackendAdd | BackendRemove
ClusterCmd = ClusterAdd | ClusterRemove
TcpFrontendCmd = TcpFrontendAdd | TcpFrontendRemove
HttpFrontendCmd = HttpFrontendAdd | HttpFrontendRemove
HttpListenerCmd = HttpListenerAdd | ListenerRemove | ListenerActivate | ListenerDeactivate
HttpsListenerCmd = HttpsListenerAdd | ListenerRemove | ListenerActivate | ListenerDeactivate
TcpListenerCmd = TcpListenerAdd | ListenerRemove | ListenerActivate | ListenerDeactivate
