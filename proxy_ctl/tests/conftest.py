"""Test fixtures for proxy_ctl tests."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey

from proxy_ctl.lib.config import ListenerDefaults
from proxy_ctl.lib.request_builder import CommandManager


@dataclass
class CertificateFiles:
    """Paths of a certificate bundle written to disk, with the PEM text written."""

    certificate_path: Path
    chain_path: Path
    key_path: Path
    certificate_pem: str
    chain_pems: list[str]
    key_pem: str


@pytest.fixture
def private_key() -> EllipticCurvePrivateKey:
    """Generate EC private key used to sign test certificates."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def make_certificate_pem(private_key: EllipticCurvePrivateKey) -> Callable[[str], str]:
    """Return factory building a self-signed PEM certificate for a common name."""

    def _make(common_name: str) -> str:
        name = x509.Name([x509.NameAttribute(x509.NameOID.COMMON_NAME, common_name)])
        not_before = datetime.now(UTC)
        certificate = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_before + timedelta(days=30))
            .sign(private_key, hashes.SHA256())
        )
        return certificate.public_bytes(serialization.Encoding.PEM).decode()

    return _make


@pytest.fixture
def certificate_pem(make_certificate_pem: Callable[[str], str]) -> str:
    """Return leaf certificate PEM for example.com."""
    return make_certificate_pem("example.com")


@pytest.fixture
def certificate_files(
    tmp_path: Path,
    private_key: EllipticCurvePrivateKey,
    certificate_pem: str,
    make_certificate_pem: Callable[[str], str],
) -> CertificateFiles:
    """Write leaf certificate, two-certificate chain and key to disk.

    Creates:
        {tmp_path}/certificate.pem
        {tmp_path}/chain.pem
        {tmp_path}/key.pem
    """
    chain_pems = [
        make_certificate_pem("Test Intermediate CA").strip(),
        make_certificate_pem("Test Root CA").strip(),
    ]
    key_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()

    certificate_path = tmp_path / "certificate.pem"
    chain_path = tmp_path / "chain.pem"
    key_path = tmp_path / "key.pem"
    certificate_path.write_text(certificate_pem)
    chain_path.write_text("\n".join(chain_pems) + "\n")
    key_path.write_text(key_pem)

    return CertificateFiles(
        certificate_path=certificate_path,
        chain_path=chain_path,
        key_path=key_path,
        certificate_pem=certificate_pem,
        chain_pems=chain_pems,
        key_pem=key_pem,
    )


@pytest.fixture
def mock_transport() -> MagicMock:
    """Return mocked request transport."""
    return MagicMock()


@pytest.fixture
def listener_defaults() -> ListenerDefaults:
    """Return listener defaults with distinctive timeouts."""
    return ListenerDefaults(
        front_timeout=61,
        back_timeout=31,
        connect_timeout=4,
        request_timeout=11,
        sticky_name="TESTSTICKY",
    )


@pytest.fixture
def command_manager(mock_transport: MagicMock) -> CommandManager:
    """Return CommandManager ordering requests through the mocked transport."""
    return CommandManager(mock_transport)
