"""Tests for jwtlite.jwt."""
import json
import sys
import unittest

import pytest

from jwtlite import errors
from jwtlite._internal.tests import test_util
from jwtlite.b64 import b64_url_decode
from jwtlite.b64 import b64_url_encode
from jwtlite.claims import Payload
from jwtlite.header import Header
from jwtlite.jwa import Algorithm
from jwtlite.jwa import PrivateKey

RSA_KEY = PrivateKey.rs256(test_util.load_rsa_private_key())
EC_KEY = PrivateKey.es256(test_util.load_ecdsa_private_key())
HS256_KEY = PrivateKey.hs256(test_util.HS_SECRET)
HS512_KEY = PrivateKey.hs512(test_util.HS_SECRET)

PAYLOAD = Payload().add_claim('sub', 'user1').add_claim(
    'exp', str(test_util.NOW + 60))


class SignTest(unittest.TestCase):
    """Tests for jwtlite.jwt.sign."""

    def test_default_header(self):
        from jwtlite.jwt import sign
        for key in (RSA_KEY, EC_KEY, HS256_KEY, HS512_KEY):
            token = sign(key, PAYLOAD)
            assert token.header == Header(alg=key.alg, typ='JWT')

    def test_unsigned_token(self):
        from jwtlite.jwt import sign
        token = sign(HS256_KEY, PAYLOAD)
        header_encoded, payload_encoded = token.unsigned_token.split('.')
        assert b64_url_decode(header_encoded) == b'{"alg":"HS256","typ":"JWT"}'
        assert b64_url_decode(payload_encoded) == (
            b'{"sub":"user1","exp":1700000060}')

    def test_signature_covers_unsigned_token(self):
        from jwtlite.jwa import signer
        from jwtlite.jwt import sign
        token = sign(HS512_KEY, PAYLOAD)
        assert token.signature == signer(HS512_KEY)(
            token.unsigned_token.encode('utf-8'))

    def test_explicit_header(self):
        from jwtlite.jwt import sign
        header = Header(alg=Algorithm.ES256, kid='key-1')
        token = sign(EC_KEY, PAYLOAD, header=header)
        assert token.header is header
        assert token.unsigned_token.startswith(
            b64_url_encode(b'{"alg":"ES256","typ":"JWT","kid":"key-1"}') + '.')

    def test_bad_payload(self):
        from jwtlite.jwt import sign
        with pytest.raises(errors.BadPayload):
            sign(HS256_KEY, Payload().add_claim('exp', 'tomorrow'))

    def test_lone_surrogate_claim(self):
        from jwtlite.jwt import JWT
        from jwtlite.jwt import sign
        token = sign(EC_KEY, Payload().add_claim('sub', '\ud800'))
        assert b64_url_decode(token.unsigned_token.split('.')[1]) == b'{"sub":"\\ud800"}'
        assert JWT.from_compact(token.to_compact()).payload.find_claim('sub') == '\ud800'


class ToCompactTest(unittest.TestCase):
    """Tests for jwtlite.jwt.JWT.to_compact."""

    def test_three_segments(self):
        from jwtlite.jwt import sign
        for key in (RSA_KEY, EC_KEY, HS256_KEY, HS512_KEY):
            compact = sign(key, PAYLOAD).to_compact()
            assert compact.count('.') == 2
            assert not set('=+/') & set(compact)

    def test_segments(self):
        from jwtlite.jwt import sign
        token = sign(RSA_KEY, PAYLOAD)
        header, payload, signature = token.to_compact().split('.')
        assert header + '.' + payload == token.unsigned_token
        assert b64_url_decode(signature) == token.signature
        assert len(token.signature) == 256

    def test_parsed_lone_surrogate(self):
        from jwtlite.jwt import JWT
        header = b64_url_encode(b'{"alg":"ES256","typ":"JWT"}')
        payload = b64_url_encode(b'{"sub":"\\ud800"}')
        compact = JWT.from_compact(header + '.' + payload + '.').to_compact()
        assert compact == header + '.' + payload + '.'


class FromCompactTest(unittest.TestCase):
    """Tests for jwtlite.jwt.JWT.from_compact."""

    @classmethod
    def _call(cls, compact):
        from jwtlite.jwt import JWT
        return JWT.from_compact(compact)

    def test_round_trip(self):
        from jwtlite.jwt import sign
        for key in (RSA_KEY, EC_KEY, HS256_KEY, HS512_KEY):
            token = sign(key, PAYLOAD)
            assert self._call(token.to_compact()) == token

    def test_bytes(self):
        from jwtlite.jwt import sign
        token = sign(HS256_KEY, PAYLOAD)
        assert self._call(token.to_compact().encode('ascii')) == token

    def test_unsigned_token_kept_verbatim(self):
        header = b64_url_encode(b'{ "typ": "JWT",\r\n "alg": "HS256", "x": 1 }')
        payload = b64_url_encode(b'{"sub": "user1", "admin": true}')
        token = self._call(header + '.' + payload + '.' + b64_url_encode(b'sig'))
        assert token.unsigned_token == header + '.' + payload
        assert token.header == Header(alg=Algorithm.HS256)
        assert token.payload.to_list() == [('sub', 'user1'), ('admin', 'true')]
        assert token.signature == b'sig'
        assert token.to_compact() != header + '.' + payload + '.' + b64_url_encode(b'sig')

    def test_empty_signature(self):
        header = b64_url_encode(b'{"alg":"RS256"}')
        payload = b64_url_encode(b'{}')
        assert self._call(header + '.' + payload + '.').signature == b''

    def test_wrong_segment_count(self):
        for compact in ('abc.def', 'abc', '', 'a.b.c.d', '....'):
            with pytest.raises(errors.BadToken):
                self._call(compact)

    def test_bad_base64(self):
        good = b64_url_encode(b'{"alg":"RS256"}')
        for compact in (good + '.' + good + '.abc=',
                        good + '.e30+.abc',
                        'e30.' + good + '.a'):
            with pytest.raises(errors.BadToken):
                self._call(compact)

    def test_bad_json(self):
        payload = b64_url_encode(b'{}')
        for header in (b'{"alg":', b'\xff\xfe', b'[]', b'{"alg":"none"}', b'{}'):
            with pytest.raises(errors.BadToken):
                self._call(b64_url_encode(header) + '.' + payload + '.')

    def test_bad_payload(self):
        header = b64_url_encode(b'{"alg":"RS256"}')
        for payload in (b'["sub"]', b'{"sub"', b'null'):
            with pytest.raises(errors.BadToken):
                self._call(header + '.' + b64_url_encode(payload) + '.')

    def test_segments_must_be_utf8(self):
        header = '{"alg":"ES256","typ":"JWT"}'
        payload = b64_url_encode(b'{"sub":"x"}')
        with pytest.raises(errors.BadToken):
            self._call(b64_url_encode(header.encode('utf-16')) + '.' + payload + '.')
        header = b64_url_encode(header.encode('utf-8'))
        with pytest.raises(errors.BadToken):
            self._call(header + '.' + b64_url_encode('{"sub":"x"}'.encode('utf-32')) + '.')

    def test_cause_is_chained(self):
        header = b64_url_encode(json.dumps({'alg': 'PS256'}).encode())
        with pytest.raises(errors.BadToken) as exc_info:
            self._call(header + '.e30.')
        assert isinstance(exc_info.value.__cause__, errors.BadHeader)


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
