"""
Signing, Canonical Encoding and Nonce Unit Tests
"""

import re
import threading

import pytest

from open_kkt.crypto import NonceGenerator, Signer, canonical_bytes, canonical_json
from open_kkt.exceptions import ValidationError


class TestCanonicalJson:
    """Tests for the shared parameter encoder"""

    def test_keys_sorted_and_compact(self):
        assert canonical_json({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_nested_keys_sorted(self):
        encoded = canonical_json({"command": {"z": 1, "author": "x"}, "app_id": "1"})
        assert encoded == '{"app_id":"1","command":{"author":"x","z":1}}'

    def test_non_ascii_left_unescaped(self):
        assert canonical_json({"author": "Иванова"}) == '{"author":"Иванова"}'

    def test_slashes_escaped(self):
        assert canonical_json({"url": "https://x"}) == '{"url":"https:\\/\\/x"}'

    def test_bytes_are_utf8(self):
        assert canonical_bytes({"author": "Иванова"}) == '{"author":"Иванова"}'.encode("utf-8")

    def test_unsupported_value(self):
        with pytest.raises(TypeError):
            canonical_json({"value": object()})


class TestSigner:
    """Tests for request signatures"""

    def test_known_digest(self):
        """Should be MD5 over canonical JSON followed by the secret"""
        assert Signer("secret").sign({"a": 1, "b": 2}) == "0c24cc1c3306b8ebd99f0f0a8be00c12"

    def test_known_digest_with_unicode_and_slash(self):
        signature = Signer("s").sign({"url": "https://x", "author": "Иванова"})
        assert signature == "66e3dc30ff13ad072ac9bc82a49ebd63"

    def test_order_independent(self):
        signer = Signer("secret")
        assert signer.sign({"a": 1, "b": 2}) == signer.sign({"b": 2, "a": 1})

    def test_deterministic(self):
        params = {"app_id": "42", "nonce": "nonce_1", "command": {"author": "A"}}
        assert Signer("k").sign(params) == Signer("k").sign(dict(params))

    def test_secret_sensitive(self):
        params = {"a": 1, "b": 2}
        assert Signer("secret").sign(params) != Signer("other").sign(params)
        assert Signer("other").sign(params) == "8bb4225fbf570d0fe0f6e1f5edf49417"

    def test_hex_digest_shape(self):
        assert re.fullmatch(r"[0-9a-f]{32}", Signer("k").sign({}))

    def test_verify(self):
        signer = Signer("secret")
        signature = signer.sign({"a": 1})
        assert signer.verify({"a": 1}, signature)
        assert signer.verify({"a": 1}, signature.upper())
        assert not signer.verify({"a": 2}, signature)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValidationError):
            Signer("")


class TestNonceGenerator:
    """Tests for nonce generation"""

    def test_format(self):
        assert re.fullmatch(r"nonce_\d{16,}", NonceGenerator().next())

    def test_strictly_increasing(self):
        generator = NonceGenerator()
        values = [int(generator.next()[len("nonce_"):]) for _ in range(1000)]
        assert values == sorted(set(values))

    def test_unique_across_threads(self):
        generator = NonceGenerator()
        seen = []
        lock = threading.Lock()

        def worker():
            local = [generator.next() for _ in range(200)]
            with lock:
                seen.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == len(set(seen)) == 800
