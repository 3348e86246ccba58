"""Certificate fingerprints: computed from PEM bytes or decoded from hex."""

import base64
import binascii
import re
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes

from .exceptions import FingerprintDecodeError, FingerprintError

_PEM_CERTIFICATE = re.compile(
    rb"-----BEGIN CERTIFICATE-----(.*?)-----END CERTIFICATE-----", re.DOTALL
)


@dataclass(frozen=True)
class Fingerprint:
    """Raw fingerprint bytes identifying a certificate on the proxy."""

    raw: bytes

    def hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.raw.hex()


def fingerprint_of(data: bytes) -> Fingerprint:
    """Compute the SHA-256 fingerprint of a PEM certificate.

    Only the first CERTIFICATE block is used. Its base64 body is decoded and
    hashed as is; the DER inside is not parsed, so two PEM files differing
    only in line wrapping or surrounding whitespace share a fingerprint.

    Args:
        data: PEM encoded certificate bytes

    Returns:
        Fingerprint of the certificate

    Raises:
        FingerprintError: If data does not hold a decodable PEM certificate block
    """
    match = _PEM_CERTIFICATE.search(data)
    if match is None:
        raise FingerprintError("could not parse PEM certificate: no CERTIFICATE block found")

    body = b"".join(match.group(1).split())
    try:
        der = base64.b64decode(body, validate=True)
    except binascii.Error as e:
        raise FingerprintError(f"could not parse PEM certificate: {e}") from e

    digest = hashes.Hash(hashes.SHA256())
    digest.update(der)
    return Fingerprint(digest.finalize())


def decode_fingerprint(text: str) -> Fingerprint:
    """Decode a hexadecimal fingerprint string, in either case.

    Raises:
        FingerprintDecodeError: If text has odd length or non-hex characters
    """
    try:
        return Fingerprint(binascii.unhexlify(text))
    except (binascii.Error, ValueError) as e:
        raise FingerprintDecodeError(
            f"failed at decoding {text!r} (expected hexadecimal data)"
        ) from e
