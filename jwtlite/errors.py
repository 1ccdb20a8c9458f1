"""JWT errors."""
import typing
from typing import Any

# Imported only during type check to avoid circular dependencies.
if typing.TYPE_CHECKING:
    from jwtlite import verification  # pragma: no cover


class Error(Exception):
    """Generic JWT error."""


class BadToken(Error):
    """Compact token could not be parsed.

    Wrong number of segments, invalid base64url, invalid JSON and
    malformed header or payload all end up here. The original
    exception, if any, is available as ``__cause__``.

    """


class BadPayload(Error):
    """Payload is not a JSON object, or ``exp``/``iat`` is not an integer."""


class BadHeader(Error):
    """Header is not a JSON object or is missing a usable ``alg``."""


class UnknownAlgorithm(Error):
    """Algorithm name is not one of the supported signature algorithms."""
    def __init__(self, name: str, *args: Any) -> None:
        super().__init__(*args)
        self.name = name

    def __str__(self) -> str:
        return 'Unknown algorithm: {0!r}'.format(self.name)


class KeyMismatch(Error):
    """Key material does not fit the algorithm it is used with."""


class VerificationFailed(Error):
    """Token was parsed but rejected by verification.

    :ivar reason: The `.verification.Reason` the token was rejected for.

    """
    def __init__(self, reason: 'verification.Reason') -> None:
        self.reason = reason
        super().__init__()

    def __str__(self) -> str:
        return 'Token verification failed: {0}'.format(self.reason.value)
