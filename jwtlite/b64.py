"""JOSE Base64 for compact tokens.

`JOSE Base64`_ is URL-safe Base64 with the padding stripped. Encoding
and decoding are delegated to :mod:`josepy`; decoding additionally
refuses anything outside the URL-safe alphabet, including ``=``, which
the standard library would otherwise silently skip or accept.

.. _`JOSE Base64`:
    https://tools.ietf.org/html/rfc7515#appendix-C

.. Do NOT try to call this module "base64", as it will "shadow" the
   standard library.

"""
import re

import josepy as jose

_B64_URL_ALPHABET = re.compile('[A-Za-z0-9_-]*')


def b64_url_encode(data: bytes) -> str:
    """JOSE Base64 encode.

    :param bytes data: Data to be encoded.

    :returns: JOSE Base64 string.
    :rtype: str

    :raises TypeError: if `data` is of incorrect type

    """
    return jose.b64encode(data).decode('ascii')


def b64_url_decode(data: str) -> bytes:
    """JOSE Base64 decode.

    :param str data: Unpadded URL-safe Base64 string.

    :returns: Decoded data.
    :rtype: bytes

    :raises ValueError: if `data` is not unpadded URL-safe Base64

    """
    if not _B64_URL_ALPHABET.fullmatch(data):
        raise ValueError('Not URL-safe Base64 without padding: {0!r}'.format(data))
    return jose.b64decode(data)
