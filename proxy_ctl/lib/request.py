"""Control requests sent to the proxy and their JSON-ready wire form."""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .address import SocketAddress
from .fingerprint import Fingerprint
from .models import (
    ActivateListener,
    AddBackend,
    AddCertificate,
    Cluster,
    DeactivateListener,
    FrontendFilters,
    HttpListenerConfig,
    HttpsListenerConfig,
    MetricsConfiguration,
    RemoveBackend,
    RemoveCertificate,
    RemoveListener,
    ReplaceCertificate,
    RequestHttpFrontend,
    RequestTcpFrontend,
    TcpListenerConfig,
)


class RequestType(Enum):
    SAVE_STATE = "SAVE_STATE"
    LOAD_STATE = "LOAD_STATE"
    DUMP_STATE = "DUMP_STATE"
    SOFT_STOP = "SOFT_STOP"
    HARD_STOP = "HARD_STOP"
    STATUS = "STATUS"
    CONFIGURE_METRICS = "CONFIGURE_METRICS"
    RELOAD_CONFIGURATION = "RELOAD_CONFIGURATION"
    LIST_FRONTENDS = "LIST_FRONTENDS"
    LIST_LISTENERS = "LIST_LISTENERS"
    SUBSCRIBE_EVENTS = "SUBSCRIBE_EVENTS"
    ADD_BACKEND = "ADD_BACKEND"
    REMOVE_BACKEND = "REMOVE_BACKEND"
    ADD_CLUSTER = "ADD_CLUSTER"
    REMOVE_CLUSTER = "REMOVE_CLUSTER"
    ADD_TCP_FRONTEND = "ADD_TCP_FRONTEND"
    REMOVE_TCP_FRONTEND = "REMOVE_TCP_FRONTEND"
    ADD_HTTP_FRONTEND = "ADD_HTTP_FRONTEND"
    REMOVE_HTTP_FRONTEND = "REMOVE_HTTP_FRONTEND"
    ADD_HTTPS_FRONTEND = "ADD_HTTPS_FRONTEND"
    REMOVE_HTTPS_FRONTEND = "REMOVE_HTTPS_FRONTEND"
    ADD_HTTP_LISTENER = "ADD_HTTP_LISTENER"
    ADD_HTTPS_LISTENER = "ADD_HTTPS_LISTENER"
    ADD_TCP_LISTENER = "ADD_TCP_LISTENER"
    REMOVE_LISTENER = "REMOVE_LISTENER"
    ACTIVATE_LISTENER = "ACTIVATE_LISTENER"
    DEACTIVATE_LISTENER = "DEACTIVATE_LISTENER"
    LOGGING = "LOGGING"
    ADD_CERTIFICATE = "ADD_CERTIFICATE"
    REPLACE_CERTIFICATE = "REPLACE_CERTIFICATE"
    REMOVE_CERTIFICATE = "REMOVE_CERTIFICATE"


# string payloads: state or reload path, removed cluster id, logging filter
RequestContent = (
    str
    | MetricsConfiguration
    | FrontendFilters
    | AddBackend
    | RemoveBackend
    | Cluster
    | RequestTcpFrontend
    | RequestHttpFrontend
    | HttpListenerConfig
    | HttpsListenerConfig
    | TcpListenerConfig
    | RemoveListener
    | ActivateListener
    | DeactivateListener
    | AddCertificate
    | ReplaceCertificate
    | RemoveCertificate
    | None
)


@dataclass(frozen=True)
class Request:
    """One control request: its type tag and the matching payload."""

    type: RequestType
    content: RequestContent = None


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (SocketAddress, Fingerprint)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _encode(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def to_wire(request: Request) -> dict[str, Any]:
    """Convert a request into JSON-serializable data.

    Returns:
        Dict with ``type`` and, for requests carrying a payload, ``content``
    """
    wire: dict[str, Any] = {"type": request.type.value}
    if request.content is not None:
        wire["content"] = _encode(request.content)
    return wire
