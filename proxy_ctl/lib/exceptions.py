"""Errors raised while translating operator commands into proxy requests."""

from collections.abc import Iterator
from contextlib import contextmanager


class RequestBuildError(Exception):
    """Base class for every failure that prevents a request from being built."""


class InvalidCombinationError(RequestBuildError):
    """Mutually exclusive options were both given, or neither was."""


class AddressParseError(RequestBuildError, ValueError):
    """A socket address string could not be parsed."""


class FingerprintDecodeError(RequestBuildError, ValueError):
    """A fingerprint string is not valid hexadecimal."""


class FingerprintError(RequestBuildError):
    """A fingerprint could not be computed from certificate bytes."""


class CertificateLoadError(RequestBuildError):
    """A certificate, chain or key file could not be loaded."""


class ListenerBuildError(RequestBuildError):
    """A listener builder could not be finalized."""


@contextmanager
def error_context(message: str) -> Iterator[None]:
    """Prefix any RequestBuildError raised in the block with message.

    The error keeps its class so callers can still tell parse errors from
    I/O errors; the caught error is chained as the cause.
    """
    try:
        yield
    except RequestBuildError as e:
        raise type(e)(f"{message}: {e}") from e
