"""JSON Web Algorithms used to sign and verify tokens.

Only ``RS256``, ``ES256``, ``HS256`` and ``HS512`` are supported. Keys
are wrapped in `PrivateKey` and `PublicKey`, which carry the algorithm
they are meant for, so that the algorithm of a token is always derived
from the key and never guessed from the key material.

Symmetric algorithms can sign, but there is no `PublicKey` for them and
therefore no way to verify a ``HS256``/``HS512`` token.

"""
import dataclasses
import enum
import logging
from typing import Any
from typing import Callable
from typing import Dict
from typing import Optional
from typing import Union

import cryptography.exceptions
from cryptography.hazmat.primitives import constant_time
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa
import josepy as jose

from jwtlite import errors

logger = logging.getLogger(__name__)

# ASN.1 DigestInfo prefix for SHA-256 (RFC 8017, section 9.2, note 1).
SHA256_DIGEST_INFO = (b'\x30\x31\x30\x0d\x06\x09\x60\x86\x48\x01'
                      b'\x65\x03\x04\x02\x01\x05\x00\x04\x20')


class Algorithm(enum.Enum):
    """Signature algorithm, valued by its ``alg`` header name."""
    RS256 = 'RS256'
    ES256 = 'ES256'
    HS256 = 'HS256'
    HS512 = 'HS512'

    @classmethod
    def from_name(cls, name: str) -> 'Algorithm':
        """Look up an algorithm by its ``alg`` name.

        :raises .UnknownAlgorithm: if ``name`` is not supported.

        """
        try:
            return cls(name)
        except ValueError:
            raise errors.UnknownAlgorithm(name)

    def __str__(self) -> str:
        return self.value


def _sha256(msg: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(msg)
    return digest.finalize()


class Scheme:
    """Signature scheme for a single `Algorithm`.

    Signing and verifying are delegated to the matching josepy
    `~josepy.jwa.JWASignature`. A scheme adds the key shape checks that
    back `PrivateKey` and `PublicKey`.

    :ivar alg: The algorithm implemented.
    :ivar jwa: josepy signature algorithm doing the work.
    :ivar private_type: Type of the key material used for signing.
    :ivar public_type: Type of the key material used for verification,
        or ``None`` if the algorithm cannot verify.

    """
    SCHEMES: Dict[Algorithm, 'Scheme'] = {}

    private_type: Any = NotImplemented
    public_type: Optional[Any] = None

    def __init__(self, alg: Algorithm, jwa: jose.JWASignature) -> None:
        self.alg = alg
        self.jwa = jwa

    @classmethod
    def register(cls, scheme: 'Scheme') -> 'Scheme':
        """Register scheme for its algorithm."""
        cls.SCHEMES[scheme.alg] = scheme
        return scheme

    @classmethod
    def for_algorithm(cls, alg: Algorithm) -> 'Scheme':
        """Get the registered scheme for ``alg``."""
        try:
            return cls.SCHEMES[alg]
        except KeyError:
            raise errors.UnknownAlgorithm(str(alg))

    def check_private(self, key: Any) -> None:
        """Make sure ``key`` can be used to sign.

        :raises .KeyMismatch: if it cannot.

        """
        if not isinstance(key, self.private_type):
            raise errors.KeyMismatch(
                '{0} signing requires {1}, got {2}'.format(
                    self.alg, self.private_type.__name__, type(key).__name__))

    def check_public(self, key: Any) -> None:
        """Make sure ``key`` can be used to verify.

        :raises .KeyMismatch: if it cannot.

        """
        if self.public_type is None:
            raise errors.KeyMismatch(
                '{0} has no public key form'.format(self.alg))
        if not isinstance(key, self.public_type):
            raise errors.KeyMismatch(
                '{0} verification requires {1}, got {2}'.format(
                    self.alg, self.public_type.__name__, type(key).__name__))

    def sign(self, key: Any, msg: bytes) -> bytes:
        """Sign the ``msg`` using ``key``.

        :raises .Error: if the key cannot produce a signature.

        """
        try:
            return self.jwa.sign(key, msg)
        except jose.Error as error:
            raise errors.Error(str(error)) from error

    def verify(self, key: Any, msg: bytes, sig: bytes) -> bool:
        """Verify the ``msg`` and ``sig`` using ``key``."""
        return self.jwa.verify(key, msg, sig)

    def __repr__(self) -> str:
        return self.alg.value


class _HMACScheme(Scheme):

    private_type = bytes


class _RSAScheme(Scheme):

    private_type = rsa.RSAPrivateKey
    public_type = rsa.RSAPublicKey

    def verify(self, key: rsa.RSAPublicKey, msg: bytes, sig: bytes) -> bool:
        # The recovered block must be exactly DigestInfo(SHA-256, digest).
        try:
            digest_info = key.recover_data_from_signature(
                sig, padding.PKCS1v15(), None)
        except (cryptography.exceptions.InvalidSignature, ValueError) as error:
            logger.debug(error, exc_info=True)
            return False
        if not digest_info.startswith(SHA256_DIGEST_INFO):
            logger.debug('Signature does not carry a SHA-256 DigestInfo')
            return False
        return constant_time.bytes_eq(
            digest_info[len(SHA256_DIGEST_INFO):], _sha256(msg))


class _ECScheme(Scheme):

    private_type = ec.EllipticCurvePrivateKey
    public_type = ec.EllipticCurvePublicKey

    def check_private(self, key: Any) -> None:
        super().check_private(key)
        self._check_curve(key)

    def check_public(self, key: Any) -> None:
        super().check_public(key)
        self._check_curve(key)

    def _check_curve(self, key: Union[ec.EllipticCurvePrivateKey,
                                      ec.EllipticCurvePublicKey]) -> None:
        if not isinstance(key.curve, ec.SECP256R1):
            raise errors.KeyMismatch(
                '{0} requires a P-256 key, got {1}'.format(self.alg, key.curve.name))


RS256 = Scheme.register(_RSAScheme(Algorithm.RS256, jose.RS256))
ES256 = Scheme.register(_ECScheme(Algorithm.ES256, jose.ES256))
HS256 = Scheme.register(_HMACScheme(Algorithm.HS256, jose.HS256))
HS512 = Scheme.register(_HMACScheme(Algorithm.HS512, jose.HS512))


@dataclasses.dataclass(frozen=True)
class PrivateKey:
    """Signing key tagged with the algorithm it signs for.

    Use the ``rs256``/``es256``/``hs256``/``hs512`` constructors.

    :ivar Algorithm alg: Algorithm of the key.
    :ivar key: RSA or P-256 private key, or the secret `bytes` for HMAC.

    """
    alg: Algorithm
    key: Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey, bytes] = \
        dataclasses.field(repr=False)

    def __post_init__(self) -> None:
        Scheme.for_algorithm(self.alg).check_private(self.key)

    @classmethod
    def rs256(cls, key: rsa.RSAPrivateKey) -> 'PrivateKey':
        """RSA private key for ``RS256``."""
        return cls(Algorithm.RS256, key)

    @classmethod
    def es256(cls, key: ec.EllipticCurvePrivateKey) -> 'PrivateKey':
        """P-256 private key for ``ES256``."""
        return cls(Algorithm.ES256, key)

    @classmethod
    def hs256(cls, secret: bytes) -> 'PrivateKey':
        """Shared secret for ``HS256``."""
        return cls(Algorithm.HS256, secret)

    @classmethod
    def hs512(cls, secret: bytes) -> 'PrivateKey':
        """Shared secret for ``HS512``."""
        return cls(Algorithm.HS512, secret)

    def public_key(self) -> 'PublicKey':
        """Public counterpart of the key.

        :raises .KeyMismatch: for ``HS256``/``HS512`` keys.

        """
        if Scheme.for_algorithm(self.alg).public_type is None:
            raise errors.KeyMismatch(
                '{0} has no public key form'.format(self.alg))
        return PublicKey(self.alg, self.key.public_key())


@dataclasses.dataclass(frozen=True)
class PublicKey:
    """Verification key tagged with the algorithm it verifies.

    Only ``RS256`` and ``ES256`` have public keys.

    """
    alg: Algorithm
    key: Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey] = \
        dataclasses.field(repr=False)

    def __post_init__(self) -> None:
        Scheme.for_algorithm(self.alg).check_public(self.key)

    @classmethod
    def rs256(cls, key: rsa.RSAPublicKey) -> 'PublicKey':
        """RSA public key for ``RS256``."""
        return cls(Algorithm.RS256, key)

    @classmethod
    def es256(cls, key: ec.EllipticCurvePublicKey) -> 'PublicKey':
        """P-256 public key for ``ES256``."""
        return cls(Algorithm.ES256, key)


def signer(private_key: PrivateKey) -> Callable[[bytes], bytes]:
    """Signing function for ``private_key``.

    :returns: Function taking the message and returning its signature.

    """
    scheme = Scheme.for_algorithm(private_key.alg)

    def _sign(msg: bytes) -> bytes:
        return scheme.sign(private_key.key, msg)
    return _sign


def verifier(public_key: PublicKey) -> Callable[[bytes, bytes], bool]:
    """Verifying predicate for ``public_key``.

    :returns: Function taking ``(signature, message)`` and returning
        whether the signature is valid.

    """
    scheme = Scheme.for_algorithm(public_key.alg)

    def _verify(sig: bytes, msg: bytes) -> bool:
        return scheme.verify(public_key.key, msg, sig)
    return _verify
