"""Translate operator commands into control requests and hand them to the transport."""

from pathlib import Path
from typing import Any, Protocol

from .address import SocketAddress, as_socket_address
from .certificate_loader import load_full_certificate, resolve_identity
from .commands import (
    BackendAdd,
    BackendCmd,
    BackendRemove,
    ClusterAdd,
    ClusterCmd,
    ClusterRemove,
    HttpFrontendAdd,
    HttpFrontendCmd,
    HttpFrontendRemove,
    HttpListenerAdd,
    HttpListenerCmd,
    HttpsListenerAdd,
    HttpsListenerCmd,
    ListenerActivate,
    ListenerDeactivate,
    ListenerRemove,
    LoggingLevel,
    MetricsCmd,
    TcpFrontendAdd,
    TcpFrontendCmd,
    TcpFrontendRemove,
    TcpListenerAdd,
    TcpListenerCmd,
)
from .config import ListenerDefaults
from .exceptions import InvalidCombinationError, error_context
from .listener_builder import ListenerBuilder
from .logging_config import LOGGER
from .models import (
    ActivateListener,
    AddBackend,
    AddCertificate,
    Cluster,
    DeactivateListener,
    FrontendFilters,
    ListenerType,
    LoadBalancingParams,
    MetricsConfiguration,
    PathRule,
    ProxyProtocolConfig,
    RemoveBackend,
    RemoveCertificate,
    RemoveListener,
    ReplaceCertificate,
    RequestHttpFrontend,
    RequestTcpFrontend,
    RulePosition,
    TlsVersion,
)
from .request import Request, RequestType

_METRICS_CONFIGURATIONS = {
    MetricsCmd.ENABLE: MetricsConfiguration.ENABLED,
    MetricsCmd.DISABLE: MetricsConfiguration.DISABLED,
    MetricsCmd.CLEAR: MetricsConfiguration.CLEAR,
}


class RequestTransport(Protocol):
    """Delivers requests to the proxy and reports the responses."""

    def order_request(self, request: Request) -> Any: ...

    def order_request_to_all_workers(self, request: Request, json: bool) -> Any: ...


def proxy_protocol_from_flags(send_proxy: bool, expect_proxy: bool) -> ProxyProtocolConfig | None:
    """Map the cluster's send/expect flags to a proxy protocol mode.

    Both flags together relay the header: it is expected from the client and
    sent on to the backend.
    """
    if send_proxy and expect_proxy:
        return ProxyProtocolConfig.RELAY_HEADER
    if send_proxy:
        return ProxyProtocolConfig.SEND_HEADER
    if expect_proxy:
        return ProxyProtocolConfig.EXPECT_HEADER
    return None


def _address(value: str | SocketAddress, operation: str) -> SocketAddress:
    with error_context(f"Error {operation}"), error_context("wrong socket address"):
        return as_socket_address(value)


def _wrong_command(handler: str, cmd: object) -> InvalidCombinationError:
    return InvalidCombinationError(f"the command passed to {handler} is wrong: {cmd!r}")


class CommandManager:
    """Builds one request per operator command and orders it through the transport.

    Every failure is raised before the transport is called, so a command
    either sends exactly one request or none.
    """

    def __init__(
        self, transport: RequestTransport, defaults: ListenerDefaults | None = None
    ) -> None:
        """Initialize command manager.

        Args:
            transport: Delivers the built requests to the proxy
            defaults: Values for listener fields left unset by the operator
        """
        self.transport = transport
        self.defaults = defaults or ListenerDefaults()

    def order_request(self, request: Request) -> Any:
        return self.transport.order_request(request)

    def order_request_to_all_workers(self, request: Request, json: bool) -> Any:
        return self.transport.order_request_to_all_workers(request, json)

    def save_state(self, path: str) -> Any:
        LOGGER.info("Saving the state to file %s", path)
        return self.order_request(Request(RequestType.SAVE_STATE, path))

    def load_state(self, path: str) -> Any:
        LOGGER.info("Loading the state on path %s", path)
        return self.order_request(Request(RequestType.LOAD_STATE, path))

    def dump_state(self, json: bool) -> Any:
        LOGGER.info("Dumping the state, json=%s", json)
        return self.order_request_to_all_workers(Request(RequestType.DUMP_STATE), json)

    def soft_stop(self) -> Any:
        LOGGER.info("Shutting down proxy softly")
        return self.order_request_to_all_workers(Request(RequestType.SOFT_STOP), False)

    def hard_stop(self) -> Any:
        LOGGER.info("Shutting down proxy the hard way")
        return self.order_request_to_all_workers(Request(RequestType.HARD_STOP), False)

    def status(self, json: bool) -> Any:
        LOGGER.info("Requesting status")
        return self.order_request_to_all_workers(Request(RequestType.STATUS), json)

    def configure_metrics(self, cmd: MetricsCmd) -> Any:
        """Enable, disable or clear metrics on the proxy.

        Raises:
            InvalidCombinationError: For MetricsCmd.GET or any non-configuring command
        """
        LOGGER.info("Configuring metrics: %s", cmd)
        if not isinstance(cmd, MetricsCmd) or cmd not in _METRICS_CONFIGURATIONS:
            raise _wrong_command("configure_metrics", cmd)
        configuration = _METRICS_CONFIGURATIONS[cmd]
        return self.order_request(Request(RequestType.CONFIGURE_METRICS, configuration))

    def reload_configuration(self, path: str | None, json: bool) -> Any:
        LOGGER.info("Reloading configuration from %s", path or "the default path")
        return self.order_request_to_all_workers(
            Request(RequestType.RELOAD_CONFIGURATION, path), json
        )

    def list_frontends(self, http: bool, https: bool, tcp: bool, domain: str | None) -> Any:
        LOGGER.info("Listing frontends")
        filters = FrontendFilters(http=http, https=https, tcp=tcp, domain=domain)
        return self.order_request(Request(RequestType.LIST_FRONTENDS, filters))

    def events(self) -> Any:
        return self.order_request(Request(RequestType.SUBSCRIBE_EVENTS))

    def list_listeners(self) -> Any:
        return self.order_request(Request(RequestType.LIST_LISTENERS))

    def backend_command(self, cmd: BackendCmd) -> Any:
        if isinstance(cmd, BackendAdd):
            weight_params = (
                LoadBalancingParams() if cmd.weight is None else LoadBalancingParams(cmd.weight)
            )
            backend = AddBackend(
                cluster_id=cmd.cluster_id,
                backend_id=cmd.backend_id,
                address=_address(cmd.address, "adding backend"),
                load_balancing_parameters=weight_params,
                sticky_id=cmd.sticky_id,
                backup=cmd.backup,
            )
            return self.order_request(Request(RequestType.ADD_BACKEND, backend))

        if isinstance(cmd, BackendRemove):
            backend = RemoveBackend(
                cluster_id=cmd.cluster_id,
                backend_id=cmd.backend_id,
                address=_address(cmd.address, "removing backend"),
            )
            return self.order_request(Request(RequestType.REMOVE_BACKEND, backend))

        raise _wrong_command("backend_command", cmd)

    def cluster_command(self, cmd: ClusterCmd) -> Any:
        if isinstance(cmd, ClusterAdd):
            cluster = Cluster(
                cluster_id=cmd.cluster_id,
                sticky_session=cmd.sticky_session,
                https_redirect=cmd.https_redirect,
                proxy_protocol=proxy_protocol_from_flags(cmd.send_proxy, cmd.expect_proxy),
                load_balancing=cmd.load_balancing_policy,
                load_metric=None,
                answer_503=None,
            )
            return self.order_request(Request(RequestType.ADD_CLUSTER, cluster))

        if isinstance(cmd, ClusterRemove):
            return self.order_request(Request(RequestType.REMOVE_CLUSTER, cmd.cluster_id))

        raise _wrong_command("cluster_command", cmd)

    def tcp_frontend_command(self, cmd: TcpFrontendCmd) -> Any:
        if isinstance(cmd, TcpFrontendAdd):
            frontend = RequestTcpFrontend(
                cluster_id=cmd.cluster_id,
                address=_address(cmd.address, "adding TCP frontend"),
                tags=cmd.tags,
            )
            return self.order_request(Request(RequestType.ADD_TCP_FRONTEND, frontend))

        if isinstance(cmd, TcpFrontendRemove):
            frontend = RequestTcpFrontend(
                cluster_id=cmd.cluster_id,
                address=_address(cmd.address, "removing TCP frontend"),
                tags=None,
            )
            return self.order_request(Request(RequestType.REMOVE_TCP_FRONTEND, frontend))

        raise _wrong_command("tcp_frontend_command", cmd)

    def http_frontend_command(self, cmd: HttpFrontendCmd) -> Any:
        return self._http_frontend(
            "http_frontend_command",
            "HTTP",
            cmd,
            RequestType.ADD_HTTP_FRONTEND,
            RequestType.REMOVE_HTTP_FRONTEND,
        )

    def https_frontend_command(self, cmd: HttpFrontendCmd) -> Any:
        return self._http_frontend(
            "https_frontend_command",
            "HTTPS",
            cmd,
            RequestType.ADD_HTTPS_FRONTEND,
            RequestType.REMOVE_HTTPS_FRONTEND,
        )

    def _http_frontend(
        self,
        handler: str,
        kind: str,
        cmd: HttpFrontendCmd,
        add_type: RequestType,
        remove_type: RequestType,
    ) -> Any:
        if isinstance(cmd, HttpFrontendAdd):
            request_type = add_type
            operation = f"adding {kind} frontend"
            tags = cmd.tags if cmd.tags is not None else {}
        elif isinstance(cmd, HttpFrontendRemove):
            request_type = remove_type
            operation = f"removing {kind} frontend"
            tags = {}
        else:
            raise _wrong_command(handler, cmd)

        frontend = RequestHttpFrontend(
            cluster_id=cmd.cluster_id,
            address=_address(cmd.address, operation),
            hostname=cmd.hostname,
            path=PathRule.from_cli_options(cmd.path_prefix, cmd.path_regex, cmd.path_equals),
            method=cmd.method,
            position=RulePosition.TREE,
            tags=tags,
        )
        return self.order_request(Request(request_type, frontend))

    def https_listener_command(self, cmd: HttpsListenerCmd) -> Any:
        if isinstance(cmd, HttpsListenerAdd):
            with error_context("Error creating HTTPS listener"):
                listener = (
                    ListenerBuilder.new_https(cmd.address, self.defaults)
                    .with_public_address(cmd.public_address)
                    .with_answer_404_path(cmd.answer_404)
                    .with_answer_503_path(cmd.answer_503)
                    .with_tls_versions(cmd.tls_versions)
                    .with_cipher_list(cmd.cipher_list)
                    .with_expect_proxy(cmd.expect_proxy)
                    .with_sticky_name(cmd.sticky_name)
                    .with_front_timeout(cmd.front_timeout)
                    .with_back_timeout(cmd.back_timeout)
                    .with_request_timeout(cmd.request_timeout)
                    .with_connect_timeout(cmd.connect_timeout)
                    .to_tls()
                )
            return self.order_request(Request(RequestType.ADD_HTTPS_LISTENER, listener))

        return self._listener_lifecycle("https_listener_command", cmd, ListenerType.HTTPS)

    def http_listener_command(self, cmd: HttpListenerCmd) -> Any:
        if isinstance(cmd, HttpListenerAdd):
            with error_context("Error creating HTTP listener"):
                listener = (
                    ListenerBuilder.new_http(cmd.address, self.defaults)
                    .with_public_address(cmd.public_address)
                    .with_answer_404_path(cmd.answer_404)
                    .with_answer_503_path(cmd.answer_503)
                    .with_expect_proxy(cmd.expect_proxy)
                    .with_sticky_name(cmd.sticky_name)
                    .with_front_timeout(cmd.front_timeout)
                    .with_request_timeout(cmd.request_timeout)
                    .with_back_timeout(cmd.back_timeout)
                    .with_connect_timeout(cmd.connect_timeout)
                    .to_http()
                )
            return self.order_request(Request(RequestType.ADD_HTTP_LISTENER, listener))

        return self._listener_lifecycle("http_listener_command", cmd, ListenerType.HTTP)

    def tcp_listener_command(self, cmd: TcpListenerCmd) -> Any:
        if isinstance(cmd, TcpListenerAdd):
            with error_context("Could not create TCP listener"):
                listener = (
                    ListenerBuilder.new_tcp(cmd.address, self.defaults)
                    .with_public_address(cmd.public_address)
                    .with_expect_proxy(cmd.expect_proxy)
                    .to_tcp()
                )
            return self.order_request(Request(RequestType.ADD_TCP_LISTENER, listener))

        return self._listener_lifecycle("tcp_listener_command", cmd, ListenerType.TCP)

    def _listener_lifecycle(self, handler: str, cmd: object, proxy: ListenerType) -> Any:
        if isinstance(cmd, ListenerRemove):
            return self.remove_listener(cmd.address, proxy)
        if isinstance(cmd, ListenerActivate):
            return self.activate_listener(cmd.address, proxy)
        if isinstance(cmd, ListenerDeactivate):
            return self.deactivate_listener(cmd.address, proxy)
        raise _wrong_command(handler, cmd)

    def remove_listener(self, address: str | SocketAddress, proxy: ListenerType) -> Any:
        content = RemoveListener(address=_address(address, "removing listener"), proxy=proxy)
        return self.order_request(Request(RequestType.REMOVE_LISTENER, content))

    def activate_listener(self, address: str | SocketAddress, proxy: ListenerType) -> Any:
        content = ActivateListener(
            address=_address(address, "activating listener"), proxy=proxy, from_scm=False
        )
        return self.order_request(Request(RequestType.ACTIVATE_LISTENER, content))

    def deactivate_listener(self, address: str | SocketAddress, proxy: ListenerType) -> Any:
        content = DeactivateListener(
            address=_address(address, "deactivating listener"), proxy=proxy, to_scm=False
        )
        return self.order_request(Request(RequestType.DEACTIVATE_LISTENER, content))

    def logging_filter(self, level: LoggingLevel) -> Any:
        return self.order_request(Request(RequestType.LOGGING, str(level).lower()))

    def add_certificate(
        self,
        address: str | SocketAddress,
        certificate_path: str | Path,
        certificate_chain_path: str | Path,
        key_path: str | Path,
        versions: list[TlsVersion],
    ) -> Any:
        """Load a certificate bundle from disk and add it to an HTTPS listener.

        Raises:
            AddressParseError: If address is malformed
            CertificateLoadError: If a certificate, chain or key file is unreadable
        """
        listener_address = _address(address, "adding certificate")
        with error_context("Could not load the full certificate"):
            certificate = load_full_certificate(
                certificate_path, certificate_chain_path, key_path, versions
            )

        content = AddCertificate(
            address=listener_address,
            certificate=certificate,
            names=[],
            expired_at=None,
        )
        return self.order_request(Request(RequestType.ADD_CERTIFICATE, content))

    def replace_certificate(
        self,
        address: str | SocketAddress,
        new_certificate_path: str | Path,
        new_certificate_chain_path: str | Path,
        new_key_path: str | Path,
        old_certificate_path: str | Path | None,
        old_fingerprint: str | None,
        versions: list[TlsVersion],
    ) -> Any:
        """Swap the certificate identified by path or fingerprint for a new bundle.

        Raises:
            InvalidCombinationError: If both or neither of old path and fingerprint are given
            AddressParseError: If address is malformed
            FingerprintDecodeError: If old_fingerprint is not hexadecimal
            CertificateLoadError: If any certificate file is unreadable
        """
        listener_address = _address(address, "replacing certificate")
        with error_context("Could not identify the certificate to replace"):
            fingerprint = resolve_identity(old_certificate_path, old_fingerprint)

        with error_context("Could not load the full certificate"):
            new_certificate = load_full_certificate(
                new_certificate_path, new_certificate_chain_path, new_key_path, versions
            )

        content = ReplaceCertificate(
            address=listener_address,
            new_certificate=new_certificate,
            old_fingerprint=fingerprint,
            new_names=[],
            new_expired_at=None,
        )
        return self.order_request(Request(RequestType.REPLACE_CERTIFICATE, content))

    def remove_certificate(
        self,
        address: str | SocketAddress,
        certificate_path: str | Path | None,
        fingerprint: str | None,
    ) -> Any:
        """Remove the certificate identified by path or fingerprint.

        Raises:
            InvalidCombinationError: If both or neither of path and fingerprint are given
            AddressParseError: If address is malformed
            FingerprintDecodeError: If fingerprint is not hexadecimal
            CertificateLoadError: If the certificate path is unreadable
        """
        listener_address = _address(address, "removing certificate")
        with error_context("Could not identify the certificate to remove"):
            old_fingerprint = resolve_identity(certificate_path, fingerprint)

        content = RemoveCertificate(address=listener_address, fingerprint=old_fingerprint)
        return self.order_request(Request(RequestType.REMOVE_CERTIFICATE, content))
