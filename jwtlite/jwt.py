"""JSON Web Token assembly and compact serialization.

A compact token is ``b64(header).b64(payload).b64(signature)``. The
signature covers ``b64(header).b64(payload)``, the *unsigned token*.
A `JWT` built by `sign` computes the unsigned token from its header and
payload, while one built by `JWT.from_compact` keeps the two segments
exactly as received, so that verification never depends on JSON
re-serialization producing the same bytes.

"""
import dataclasses
import logging
from typing import Optional
from typing import Union

from jwtlite import errors
from jwtlite import jwa
from jwtlite.b64 import b64_url_decode
from jwtlite.b64 import b64_url_encode
from jwtlite.claims import Payload
from jwtlite.header import Header

logger = logging.getLogger(__name__)

SEPARATOR = '.'


def unsigned_token(header: Header, payload: Payload) -> str:
    """Signing input for ``header`` and ``payload``.

    :raises .BadPayload: if ``payload`` cannot be serialized.

    """
    return (b64_url_encode(header.json_dumps().encode('utf-8')) + SEPARATOR +
            b64_url_encode(payload.json_dumps().encode('utf-8')))


@dataclasses.dataclass(frozen=True)
class JWT:
    """Signed JSON Web Token.

    :ivar Header header: Token header.
    :ivar Payload payload: Token payload.
    :ivar bytes signature: Raw signature.
    :ivar str unsigned_token: The exact string the signature covers.

    """
    header: Header
    payload: Payload
    signature: bytes
    unsigned_token: str

    def to_compact(self) -> str:
        """Compact serialization.

        Header and payload are encoded afresh.

        :rtype: str

        """
        return (unsigned_token(self.header, self.payload) + SEPARATOR +
                b64_url_encode(self.signature))

    @classmethod
    def from_compact(cls, compact: Union[str, bytes]) -> 'JWT':
        """Compact deserialization.

        The signature is not checked, see `jwtlite.verification.verify`.

        :param str compact: Compact token.

        :raises .BadToken: if ``compact`` cannot be parsed, whatever the
            reason.

        """
        try:
            return cls._from_compact(compact)
        except errors.BadToken:
            raise
        except (errors.Error, ValueError, TypeError) as error:
            logger.debug('Rejecting malformed token: %s', error)
            raise errors.BadToken(str(error)) from error

    @classmethod
    def _from_compact(cls, compact: Union[str, bytes]) -> 'JWT':
        if isinstance(compact, bytes):
            compact = compact.decode('ascii')
        segments = compact.split(SEPARATOR)
        if len(segments) != 3:
            logger.debug('Rejecting token with %d segments', len(segments))
            raise errors.BadToken(
                'Compact JWT should comprise of exactly 3 dot-separated segments')
        header_encoded, payload_encoded, signature_encoded = segments
        return cls(
            header=Header.json_loads(b64_url_decode(header_encoded)),
            payload=Payload.json_loads(b64_url_decode(payload_encoded)),
            signature=b64_url_decode(signature_encoded),
            unsigned_token=header_encoded + SEPARATOR + payload_encoded)


def sign(private_key: jwa.PrivateKey, payload: Payload,
         header: Optional[Header] = None) -> JWT:
    """Sign ``payload``.

    :param jwa.PrivateKey private_key: Signing key.
    :param Payload payload: Claims to sign.
    :param Header header: Header to sign. Defaults to ``typ`` ``"JWT"``
        and the algorithm of ``private_key``. An explicit header is used
        as given, even if its ``alg`` does not match the key.

    :raises .BadPayload: if ``payload`` cannot be serialized.

    """
    if header is None:
        header = Header(alg=private_key.alg)
    unsigned = unsigned_token(header, payload)
    signature = jwa.signer(private_key)(unsigned.encode('utf-8'))
    return JWT(header=header, payload=payload, signature=signature,
               unsigned_token=unsigned)
