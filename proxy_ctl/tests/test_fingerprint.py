"""Tests for fingerprint module."""

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes

from proxy_ctl.lib.exceptions import FingerprintDecodeError, FingerprintError, RequestBuildError
from proxy_ctl.lib.fingerprint import Fingerprint, decode_fingerprint, fingerprint_of


class TestFingerprintOf:
    """Tests for computing fingerprints from certificate bytes."""

    def test_is_deterministic(self, certificate_pem: str) -> None:
        """Same bytes always give the same fingerprint."""
        data = certificate_pem.encode()
        assert fingerprint_of(data) == fingerprint_of(data)

    def test_is_sha256_of_der(self, certificate_pem: str) -> None:
        """Fingerprint matches the SHA-256 digest of the DER encoding."""
        certificate = x509.load_pem_x509_certificate(certificate_pem.encode())

        fingerprint = fingerprint_of(certificate_pem.encode())

        assert fingerprint.raw == certificate.fingerprint(hashes.SHA256())
        assert len(fingerprint.raw) == 32

    def test_ignores_surrounding_whitespace(self, certificate_pem: str) -> None:
        """Blank lines around the PEM block do not change the fingerprint."""
        padded = f"\n\n{certificate_pem}\n\n".encode()
        assert fingerprint_of(padded) == fingerprint_of(certificate_pem.encode())

    def test_differs_between_certificates(self, make_certificate_pem) -> None:
        """Different certificates have different fingerprints."""
        first = fingerprint_of(make_certificate_pem("a.example.com").encode())
        second = fingerprint_of(make_certificate_pem("b.example.com").encode())
        assert first != second

    def test_rejects_non_pem_bytes(self) -> None:
        """Bytes without a PEM certificate raise FingerprintError."""
        with pytest.raises(FingerprintError, match="could not parse PEM certificate"):
            fingerprint_of(b"not a certificate")

    def test_hashes_block_without_parsing_der(self) -> None:
        """A CERTIFICATE block whose body is not a valid certificate is still hashed."""
        der = bytes.fromhex("3003020101")
        pem = b"-----BEGIN CERTIFICATE-----\nMAMCAQE=\n-----END CERTIFICATE-----\n"
        expected = hashes.Hash(hashes.SHA256())
        expected.update(der)

        assert fingerprint_of(pem).raw == expected.finalize()

    def test_uses_first_certificate_block(self, make_certificate_pem) -> None:
        """Only the first CERTIFICATE block of a bundle is fingerprinted."""
        leaf = make_certificate_pem("leaf.example.com")
        bundle = leaf + make_certificate_pem("ca.example.com")

        assert fingerprint_of(bundle.encode()) == fingerprint_of(leaf.encode())

    def test_rejects_undecodable_body(self) -> None:
        """A block body that is not base64 raises FingerprintError."""
        pem = b"-----BEGIN CERTIFICATE-----\n@@not base64@@\n-----END CERTIFICATE-----\n"
        with pytest.raises(FingerprintError, match="could not parse PEM certificate"):
            fingerprint_of(pem)


class TestDecodeFingerprint:
    """Tests for decoding hex fingerprint strings."""

    def test_decodes_lowercase_hex(self) -> None:
        """Lowercase hex decodes to raw bytes."""
        assert decode_fingerprint("00ff10ab") == Fingerprint(b"\x00\xff\x10\xab")

    def test_hex_roundtrip_is_case_insensitive(self) -> None:
        """Re-encoding the decoded bytes gives the input, ignoring case."""
        text = "A1B2C3D4e5f60718"
        assert decode_fingerprint(text).hex() == text.lower()

    def test_str_is_lowercase_hex(self) -> None:
        """str() of a fingerprint is its hex encoding."""
        assert str(Fingerprint(b"\xab\xcd")) == "abcd"

    def test_empty_string_decodes_to_empty(self) -> None:
        """Empty hex string is valid and yields no bytes."""
        assert decode_fingerprint("").raw == b""

    @pytest.mark.parametrize("text", ["abc", "zz", "12 34", "0x1234", "été!"])
    def test_rejects_invalid_hex(self, text: str) -> None:
        """Odd-length or non-hex strings raise FingerprintDecodeError."""
        with pytest.raises(FingerprintDecodeError, match="expected hexadecimal data"):
            decode_fingerprint(text)

    def test_decode_error_is_request_build_error(self) -> None:
        """Decode errors belong to the RequestBuildError hierarchy."""
        with pytest.raises(RequestBuildError):
            decode_fingerprint("xyz")
