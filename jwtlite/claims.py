"""JWT claims and payload.

A payload is an ordered sequence of ``(claim, value)`` pairs, where
every value is kept as a string. The same claim may appear more than
once; lookups return the most recently added value.

When serialized, only ``exp`` and ``iat`` are emitted as JSON numbers.
Every other value is emitted as a JSON string, even if it was parsed
from a number, a boolean or a nested structure::

    >>> Payload.json_loads('{"admin":true,"exp":1}').json_dumps()
    '{"admin":"true","exp":1}'

"""
import dataclasses
import re
from typing import Any
from typing import Callable
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from jwtlite import errors
from jwtlite.header import dumps
from jwtlite.header import loads

Claim = str
Pair = Tuple[Claim, str]

# Registered claims (RFC 7519, section 4.1)
ISS = 'iss'
"""Issuer: principal that issued the token."""
SUB = 'sub'
"""Subject of the token."""
AUD = 'aud'
"""Audience: recipients the token is intended for."""
EXP = 'exp'
"""Expiration time, on or after which the token must not be accepted."""
NBF = 'nbf'
"""Not before: time before which the token must not be accepted."""
IAT = 'iat'
"""Issued at: time at which the token was issued."""
JTI = 'jti'
"""Unique identifier of the token."""
TYP = 'typ'
CTYP = 'ctyp'
ALG = 'alg'

# OpenID Connect Core 1.0, section 2
AUTH_TIME = 'auth_time'
"""Time when the End-User authentication occurred."""
NONCE = 'nonce'
"""Value associating a client session with an ID Token."""
ACR = 'acr'
AMR = 'amr'
AZP = 'azp'

INTEGER_CLAIMS = frozenset([EXP, IAT])
"""Claims serialized as JSON numbers."""

_INTEGER = re.compile('[+-]?[0-9]+')


def parse_integer(value: str) -> int:
    """Parse an integer claim value.

    Only an optional sign followed by ASCII digits is accepted, without
    surrounding whitespace or ``_`` separators.

    :raises ValueError: if ``value`` is not such an integer.

    """
    if not _INTEGER.fullmatch(value):
        raise ValueError('Not an integer: {0!r}'.format(value))
    return int(value)


class _Members(list):
    """Members of a JSON object, in document order, duplicates kept."""


def _canonical(value: Any) -> str:
    if isinstance(value, _Members):
        return '{' + ','.join(dumps(name) + ':' + _canonical(member)
                              for name, member in value) + '}'
    if isinstance(value, list):
        return '[' + ','.join(_canonical(item) for item in value) + ']'
    return dumps(value)


def _coerce(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _canonical(value)


@dataclasses.dataclass(frozen=True)
class Payload:
    """JWT payload.

    Payloads are immutable, `add_claim` and `map` return new ones.

    :ivar tuple claims: ``(claim, value)`` pairs in insertion order.

    """
    claims: Tuple[Pair, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Pair]) -> 'Payload':
        """Payload holding ``pairs`` in the given order."""
        payload = cls()
        for claim, value in pairs:
            payload = payload.add_claim(claim, value)
        return payload

    def add_claim(self, claim: Claim, value: str) -> 'Payload':
        """Payload with ``(claim, value)`` appended."""
        if not isinstance(value, str):
            raise TypeError('Claim values must be str, got {0}'.format(
                type(value).__name__))
        return Payload(self.claims + ((claim, value),))

    def find_claim(self, claim: Claim) -> str:
        """Value of the most recently added ``claim``.

        :raises KeyError: if there is no such claim.

        """
        for name, value in reversed(self.claims):
            if name == claim:
                return value
        raise KeyError(claim)

    def get(self, claim: Claim, default: Optional[str] = None) -> Optional[str]:
        """Like `find_claim`, but returns ``default`` if absent."""
        try:
            return self.find_claim(claim)
        except KeyError:
            return default

    def map(self, func: Callable[[Pair], Pair]) -> 'Payload':
        """Payload with ``func`` applied to every pair."""
        return Payload.from_pairs(func(pair) for pair in self.claims)

    def to_list(self) -> List[Pair]:
        """Pairs in insertion order."""
        return list(self.claims)

    def __contains__(self, claim: object) -> bool:
        return any(name == claim for name, _ in self.claims)

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.claims)

    def __len__(self) -> int:
        return len(self.claims)

    def json_dumps(self) -> str:
        """Dump to compact JSON text.

        :raises .BadPayload: if ``exp`` or ``iat`` is not an integer.

        """
        members = []
        for claim, value in self.claims:
            if claim in INTEGER_CLAIMS:
                try:
                    encoded = dumps(parse_integer(value))
                except ValueError as error:
                    raise errors.BadPayload(
                        '{0!r} claim is not an integer: {1!r}'.format(
                            claim, value)) from error
            else:
                encoded = dumps(value)
            members.append(dumps(claim) + ':' + encoded)
        return '{' + ','.join(members) + '}'

    @classmethod
    def from_json(cls, jobj: Any) -> 'Payload':
        """Build payload from a decoded JSON object.

        Strings are kept verbatim, integers become their decimal text and
        anything else becomes its compact JSON text.

        :raises .BadPayload: if ``jobj`` is not a JSON object.

        """
        if isinstance(jobj, _Members):
            members = list(jobj)
        elif isinstance(jobj, dict):
            members = list(jobj.items())
        else:
            raise errors.BadPayload('Payload must be a JSON object')
        return cls(tuple((name, _coerce(value)) for name, value in members))

    @classmethod
    def json_loads(cls, text: Union[str, bytes]) -> 'Payload':
        """Load payload from JSON text, keeping duplicate members.

        Members are kept in document order, so when a claim appears more
        than once the last member in the document wins lookups.

        :raises .BadPayload: on invalid UTF-8, invalid JSON or if it is
            not an object.

        """
        try:
            jobj = loads(text, object_pairs_hook=_Members)
        except ValueError as error:
            raise errors.BadPayload(str(error)) from error
        return cls.from_json(jobj)


EMPTY = Payload()
