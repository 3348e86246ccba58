"""Listener configuration defaults."""

from dataclasses import dataclass, field

from .models import TlsVersion

DEFAULT_CIPHER_LIST = [
    "TLS13_CHACHA20_POLY1305_SHA256",
    "TLS13_AES_256_GCM_SHA384",
    "TLS13_AES_128_GCM_SHA256",
    "TLS_ECDHE_ECDSA_WITH_AES_256_GCM_SHA384",
    "TLS_ECDHE_ECDSA_WITH_AES_128_GCM_SHA256",
    "TLS_ECDHE_ECDSA_WITH_CHACHA20_POLY1305_SHA256",
    "TLS_ECDHE_RSA_WITH_AES_256_GCM_SHA384",
    "TLS_ECDHE_RSA_WITH_AES_128_GCM_SHA256",
    "TLS_ECDHE_RSA_WITH_CHACHA20_POLY1305_SHA256",
]

DEFAULT_CIPHER_SUITES = [
    "TLS_AES_256_GCM_SHA384",
    "TLS_AES_128_GCM_SHA256",
    "TLS_CHACHA20_POLY1305_SHA256",
]

DEFAULT_SIGNATURE_ALGORITHMS = [
    "ECDSA+SHA256",
    "ECDSA+SHA384",
    "ECDSA+SHA512",
    "RSA+SHA256",
    "RSA+SHA384",
    "RSA+SHA512",
    "RSA-PSS+SHA256",
    "RSA-PSS+SHA384",
    "RSA-PSS+SHA512",
]

DEFAULT_GROUPS_LIST = ["P-521", "P-384", "P-256", "x25519"]


@dataclass
class ListenerDefaults:
    """Values applied to listener fields the operator left unset.

    Timeouts are in seconds.
    """

    front_timeout: int = 60
    back_timeout: int = 30
    connect_timeout: int = 3
    request_timeout: int = 10
    sticky_name: str = "SOZUBALANCEID"
    tls_versions: list[TlsVersion] = field(
        default_factory=lambda: [TlsVersion.TLS_V1_2, TlsVersion.TLS_V1_3]
    )
    cipher_list: list[str] = field(default_factory=lambda: list(DEFAULT_CIPHER_LIST))
    cipher_suites: list[str] = field(default_factory=lambda: list(DEFAULT_CIPHER_SUITES))
    signature_algorithms: list[str] = field(
        default_factory=lambda: list(DEFAULT_SIGNATURE_ALGORITHMS)
    )
    groups_list: list[str] = field(default_factory=lambda: list(DEFAULT_GROUPS_LIST))
