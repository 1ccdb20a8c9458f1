"""JWT verification.

`verify` runs the following checks, in order, and stops at the first
one that fails:

1. the header ``typ`` is exactly ``"JWT"``,
2. the token has not expired; a token without ``exp`` never expires,
   and one with an ``exp`` that is not an integer always has,
3. the header ``alg`` is the algorithm of the public key, which defeats
   algorithm substitution,
4. the signature is valid for the unsigned token.

"""
import dataclasses
import enum
import logging
import time
from typing import Callable
from typing import ClassVar
from typing import Optional
from typing import Union

from jwtlite import claims
from jwtlite import errors
from jwtlite import jwa
from jwtlite.header import DEFAULT_TYP
from jwtlite.jwt import JWT

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
"""Zero-argument callable returning seconds since the epoch."""


class Reason(enum.Enum):
    """Why a token was rejected."""
    TYPE_MISMATCH = 'type-mismatch'
    EXPIRED = 'expired'
    ALGORITHM_MISMATCH = 'algorithm-mismatch'
    SIGNATURE_INVALID = 'signature-invalid'

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True)
class Verification:
    """Outcome of `verify`, true only if the token was accepted.

    :ivar Reason reason: Why the token was rejected, ``None`` if it was
        accepted.

    """
    OK: ClassVar['Verification']

    reason: Optional[Reason] = None

    @property
    def ok(self) -> bool:
        """Was the token accepted?"""
        return self.reason is None

    def __bool__(self) -> bool:
        return self.ok


Verification.OK = Verification()


def _expired(token: JWT, now: int) -> bool:
    exp = token.payload.get(claims.EXP)
    if exp is None:
        return False
    try:
        return claims.parse_integer(exp) <= now
    except ValueError:
        logger.debug('Treating non-integer exp %r as expired', exp)
        return True


def _check(public_key: jwa.PublicKey, token: JWT, clock: Clock) -> Optional[Reason]:
    if token.header.typ != DEFAULT_TYP:
        return Reason.TYPE_MISMATCH
    if _expired(token, int(clock())):
        return Reason.EXPIRED
    if public_key.alg != token.header.alg:
        return Reason.ALGORITHM_MISMATCH
    if not jwa.verifier(public_key)(token.signature,
                                    token.unsigned_token.encode('utf-8')):
        return Reason.SIGNATURE_INVALID
    return None


def verify(public_key: jwa.PublicKey, token: JWT,
           clock: Clock = time.time) -> Verification:
    """Verify ``token`` using ``public_key``.

    :param jwa.PublicKey public_key: Key the token should be signed with.
    :param JWT token: Parsed token.
    :param clock: Current time source, for the expiry check.

    :returns: `Verification.OK`, or a failed `Verification` holding the
        `Reason` of the first check that failed.
    :rtype: Verification

    """
    reason = _check(public_key, token, clock)
    if reason is None:
        return Verification.OK
    logger.debug('Token rejected: %s', reason)
    return Verification(reason)


def decode(public_key: jwa.PublicKey, compact: Union[str, bytes],
           clock: Clock = time.time) -> JWT:
    """Parse and verify a compact token.

    :raises .BadToken: if ``compact`` cannot be parsed.
    :raises .VerificationFailed: if the token is rejected.

    """
    token = JWT.from_compact(compact)
    result = verify(public_key, token, clock=clock)
    if not result:
        raise errors.VerificationFailed(result.reason)
    return token
