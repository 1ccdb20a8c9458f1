"""Compact JSON Web Tokens.

This package signs and verifies JSON Web Tokens (`RFC 7519`_) in the
compact serialization, using ``RS256``, ``ES256``, ``HS256`` or
``HS512``. Keys are `cryptography`_ key objects (or secret bytes),
wrapped in `PrivateKey` or `PublicKey`.

.. code-block:: python

    key = PrivateKey.rs256(rsa_private_key)
    payload = Payload().add_claim(claims.SUB, 'user1')
    compact = sign(key, payload).to_compact()

    token = JWT.from_compact(compact)
    if not verify(key.public_key(), token):
        ...

.. _`RFC 7519`: https://tools.ietf.org/html/rfc7519
.. _`cryptography`: https://cryptography.io

"""
from jwtlite import claims
from jwtlite.claims import Payload
from jwtlite.errors import BadHeader
from jwtlite.errors import BadPayload
from jwtlite.errors import BadToken
from jwtlite.errors import Error
from jwtlite.errors import KeyMismatch
from jwtlite.errors import UnknownAlgorithm
from jwtlite.errors import VerificationFailed
from jwtlite.header import Header
from jwtlite.jwa import Algorithm
from jwtlite.jwa import PrivateKey
from jwtlite.jwa import PublicKey
from jwtlite.jwt import JWT
from jwtlite.jwt import sign
from jwtlite.verification import decode
from jwtlite.verification import Reason
from jwtlite.verification import Verification
from jwtlite.verification import verify
