"""Tests for request module."""

import json

from proxy_ctl.lib.address import parse_socket_address
from proxy_ctl.lib.fingerprint import Fingerprint
from proxy_ctl.lib.models import (
    CertificateAndKey,
    Cluster,
    LoadBalancingAlgorithm,
    PathRule,
    ProxyProtocolConfig,
    RemoveCertificate,
    ReplaceCertificate,
    RequestHttpFrontend,
    TlsVersion,
)
from proxy_ctl.lib.request import Request, RequestType, to_wire


class TestToWire:
    """Tests for to_wire."""

    def test_payload_free_request_has_no_content(self) -> None:
        """Requests without payload serialize to their type only."""
        assert to_wire(Request(RequestType.SOFT_STOP)) == {"type": "SOFT_STOP"}

    def test_string_content(self) -> None:
        """String payloads are passed through."""
        wire = to_wire(Request(RequestType.SAVE_STATE, "/var/lib/proxy/state.json"))
        assert wire == {"type": "SAVE_STATE", "content": "/var/lib/proxy/state.json"}

    def test_cluster_enums_become_values(self) -> None:
        """Enum fields become their string values."""
        cluster = Cluster(
            cluster_id="c1",
            sticky_session=True,
            https_redirect=False,
            proxy_protocol=ProxyProtocolConfig.SEND_HEADER,
            load_balancing=LoadBalancingAlgorithm.RANDOM,
        )

        wire = to_wire(Request(RequestType.ADD_CLUSTER, cluster))

        assert wire == {
            "type": "ADD_CLUSTER",
            "content": {
                "cluster_id": "c1",
                "sticky_session": True,
                "https_redirect": False,
                "proxy_protocol": "SEND_HEADER",
                "load_balancing": "RANDOM",
                "load_metric": None,
                "answer_503": None,
            },
        }

    def test_nested_frontend_is_flattened(self) -> None:
        """Addresses become strings and the path rule a nested dict."""
        frontend = RequestHttpFrontend(
            cluster_id="app",
            address=parse_socket_address("[::]:80"),
            hostname="example.com",
            path=PathRule.from_cli_options("/api", None, None),
            tags={"owner": "team-a"},
        )

        content = to_wire(Request(RequestType.ADD_HTTP_FRONTEND, frontend))["content"]

        assert content["address"] == "[::]:80"
        assert content["path"] == {"kind": "PREFIX", "value": "/api"}
        assert content["position"] == "TREE"
        assert content["tags"] == {"owner": "team-a"}

    def test_certificate_request_is_json_serializable(self) -> None:
        """Fingerprints become hex and the whole payload dumps to JSON."""
        replace = ReplaceCertificate(
            address=parse_socket_address("0.0.0.0:443"),
            new_certificate=CertificateAndKey(
                certificate="CERT",
                certificate_chain=["CHAIN1", "CHAIN2"],
                key="KEY",
                versions=[TlsVersion.TLS_V1_3],
            ),
            old_fingerprint=Fingerprint(b"\x01\x02"),
        )

        wire = to_wire(Request(RequestType.REPLACE_CERTIFICATE, replace))

        assert wire["content"]["old_fingerprint"] == "0102"
        assert wire["content"]["new_certificate"]["versions"] == ["TLS_V1_3"]
        assert json.loads(json.dumps(wire)) == wire

    def test_remove_certificate(self) -> None:
        """RemoveCertificate carries address and hex fingerprint."""
        remove = RemoveCertificate(
            address=parse_socket_address("0.0.0.0:443"), fingerprint=Fingerprint(b"\xff")
        )

        wire = to_wire(Request(RequestType.REMOVE_CERTIFICATE, remove))

        assert wire == {
            "type": "REMOVE_CERTIFICATE",
            "content": {"address": "0.0.0.0:443", "fingerprint": "ff"},
        }
