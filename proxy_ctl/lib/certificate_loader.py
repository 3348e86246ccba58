"""Load certificates, chains and keys from disk and resolve certificate identities."""

from pathlib import Path

from .exceptions import CertificateLoadError, InvalidCombinationError, error_context
from .fingerprint import Fingerprint, decode_fingerprint, fingerprint_of
from .models import CertificateAndKey, TlsVersion

END_CERTIFICATE = "-----END CERTIFICATE-----"


def _read_file_bytes(path: str | Path, description: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise CertificateLoadError(f"could not load {description} on path {path}: {e}") from e


def _read_pem_file(path: str | Path, description: str, allow_empty: bool = False) -> str:
    """Read a PEM file as text, rejecting empty files unless allowed."""
    data = _read_file_bytes(path, description)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CertificateLoadError(
            f"could not load {description} on path {path}: not PEM text"
        ) from e

    if not allow_empty and not text.strip():
        raise CertificateLoadError(f"could not load {description} on path {path}: file is empty")
    return text


def split_certificate_chain(chain: str) -> list[str]:
    """Split concatenated PEM certificates, keeping their order.

    Each piece ends at an END CERTIFICATE marker and is stripped of
    surrounding whitespace. Text after the last marker is dropped.
    """
    certificates = []
    start = 0
    while True:
        end = chain.find(END_CERTIFICATE, start)
        if end == -1:
            break
        end += len(END_CERTIFICATE)
        certificates.append(chain[start:end].strip())
        start = end
    return certificates


def load_full_certificate(
    certificate_path: str | Path,
    certificate_chain_path: str | Path,
    key_path: str | Path,
    versions: list[TlsVersion],
) -> CertificateAndKey:
    """Load a certificate bundle from its three files.

    Args:
        certificate_path: PEM file holding the leaf certificate
        certificate_chain_path: PEM file holding the concatenated intermediates
        key_path: PEM file holding the private key
        versions: TLS versions the certificate is served for

    Returns:
        CertificateAndKey with the chain split into individual certificates

    Raises:
        CertificateLoadError: If any file cannot be read, naming its path
    """
    certificate = _read_pem_file(certificate_path, "certificate file")
    chain = _read_pem_file(certificate_chain_path, "certificate chain", allow_empty=True)
    key = _read_pem_file(key_path, "key file")

    return CertificateAndKey(
        certificate=certificate,
        certificate_chain=split_certificate_chain(chain),
        key=key,
        versions=list(versions),
    )


def get_fingerprint_from_certificate_path(certificate_path: str | Path) -> Fingerprint:
    """Read a certificate file and compute its fingerprint.

    Raises:
        CertificateLoadError: If the file cannot be read
        FingerprintError: If the file does not hold a PEM certificate
    """
    data = _read_file_bytes(certificate_path, "certificate file")
    context = f"could not calculate fingerprint for the certificate at {certificate_path}"
    with error_context(context):
        return fingerprint_of(data)


def resolve_identity(
    certificate_path: str | Path | None,
    fingerprint: str | None,
) -> Fingerprint:
    """Identify a certificate by its path or by its hex fingerprint, never both.

    Used by both replace and remove certificate commands.

    Raises:
        InvalidCombinationError: If both or neither of the options are given
        CertificateLoadError: If the certificate path cannot be read
        FingerprintError: If the fingerprint cannot be computed from the file
        FingerprintDecodeError: If the fingerprint string is not hexadecimal
    """
    if (certificate_path is None) == (fingerprint is None):
        raise InvalidCombinationError(
            "provide either the certificate path or its fingerprint, not both"
        )

    if certificate_path is not None:
        return get_fingerprint_from_certificate_path(certificate_path)

    with error_context("error decoding the given fingerprint"):
        return decode_fingerprint(fingerprint)
