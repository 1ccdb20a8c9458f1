"""JWT header."""
import json
from typing import Any
from typing import Optional
from typing import Union

import josepy as jose

from jwtlite import errors
from jwtlite import jwa

DEFAULT_TYP = 'JWT'


def dumps(jobj: Any) -> str:
    """Compact JSON text, as signed and sent on the wire.

    Non-ASCII text is kept as is, unless it has no UTF-8 form (lone
    surrogates), in which case it is ``\\u`` escaped.

    """
    text = json.dumps(jobj, separators=(',', ':'), ensure_ascii=False)
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        text = json.dumps(jobj, separators=(',', ':'))
    return text


def loads(text: Union[str, bytes], **kwargs: Any) -> Any:
    """Load JSON text, bytes must be UTF-8.

    :raises ValueError: on invalid UTF-8 or invalid JSON.

    """
    if isinstance(text, bytes):
        text = text.decode('utf-8')
    return json.loads(text, **kwargs)


class _OptionalField(jose.Field):
    """Field omitted only when ``None``, empty strings are kept."""

    @classmethod
    def _empty(cls, value: Any) -> bool:
        return value is None


def _decode_string(value: Any) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise jose.DeserializationError('must be a string')
    return value


class Header(jose.JSONObjectWithFields):
    """JWT header.

    Only ``alg``, ``typ`` and ``kid`` are modelled, other members of a
    parsed header are dropped. Members are emitted in that order.

    :ivar jwa.Algorithm alg: Signature algorithm.
    :ivar str typ: Token type, ``"JWT"`` unless told otherwise.
    :ivar str kid: Key ID.

    """
    alg: jwa.Algorithm = jose.field('alg', encoder=lambda alg: alg.value)
    typ: Optional[str] = _OptionalField('typ', omitempty=True, decoder=_decode_string)
    kid: Optional[str] = _OptionalField('kid', omitempty=True, decoder=_decode_string)

    @alg.decoder  # type: ignore[no-redef,attr-defined,union-attr]
    def alg(value: Any) -> jwa.Algorithm:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        if not isinstance(value, str):
            raise jose.DeserializationError('must be a string')
        try:
            return jwa.Algorithm.from_name(value)
        except errors.UnknownAlgorithm as error:
            raise jose.DeserializationError(str(error))

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault('typ', DEFAULT_TYP)
        super().__init__(**kwargs)

    @classmethod
    def of_algorithm(cls, alg: jwa.Algorithm, typ: Optional[str]) -> 'Header':
        """Header with the given ``alg`` and ``typ`` and no ``kid``."""
        return cls(alg=alg, typ=typ, kid=None)

    def json_dumps(self) -> str:  # type: ignore[override]
        """Dump to compact JSON text."""
        return dumps(self.to_json())

    @classmethod
    def from_json(cls, jobj: Any) -> 'Header':
        """Build header from a decoded JSON value.

        A missing or ``null`` ``typ``/``kid`` becomes ``None``.

        :raises .BadHeader: if ``jobj`` is not an object, ``alg`` is
            missing or unknown, or ``typ``/``kid`` is not a string.

        """
        if not isinstance(jobj, dict):
            raise errors.BadHeader('Header must be a JSON object')
        try:
            return super().from_json(jobj)
        except jose.DeserializationError as error:
            raise errors.BadHeader(str(error)) from error

    @classmethod
    def json_loads(cls, json_string: Union[str, bytes]) -> 'Header':
        """Load header from JSON text.

        :raises .BadHeader: on invalid UTF-8, invalid JSON or invalid
            header.

        """
        try:
            jobj = loads(json_string)
        except ValueError as error:
            raise errors.BadHeader(str(error)) from error
        return cls.from_json(jobj)

