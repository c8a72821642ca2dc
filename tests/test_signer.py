"""
Unit tests for nonce generation and request signatures.
"""

import hashlib
import hmac

import pytest

from tineye_client import DEFAULT_API_URL, InvalidArgumentError
from tineye_client.constants import NONCE_ALLOWABLE_CHARS
from tineye_client.signer import (
    generate_nonce,
    get_signature,
    get_string_to_sign,
    post_signature,
    post_string_to_sign,
    sign
)

NONCE = "A" * 24


def hmac_sha1(key: str, message: str) -> str:
    return hmac.new(key.encode('utf-8'), message.encode('utf-8'), hashlib.sha1).hexdigest()


class TestGenerateNonce:
    """Test nonce generation."""

    def test_default_length(self):
        assert len(generate_nonce()) == 24

    @pytest.mark.parametrize("length", [24, 100, 255])
    def test_length_and_alphabet(self, length):
        """Test nonces have the requested length and allowed characters."""
        nonce = generate_nonce(length)
        assert len(nonce) == length
        assert set(nonce) <= set(NONCE_ALLOWABLE_CHARS)

    @pytest.mark.parametrize("length", [0, 10, 23, 256, -1])
    def test_length_out_of_range(self, length):
        """Test out of range lengths are rejected, not clamped."""
        with pytest.raises(InvalidArgumentError):
            generate_nonce(length)

    def test_non_int_length(self):
        with pytest.raises(InvalidArgumentError):
            generate_nonce("24")

    def test_unique(self):
        """Test consecutive nonces differ."""
        assert generate_nonce() != generate_nonce()

    def test_alphabet_is_preserved(self):
        """Test the alphabet matches what the server accepts."""
        assert NONCE_ALLOWABLE_CHARS == (
            "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRTSUVWXYZ0123456789-_=.,*^"
        )
        assert len(NONCE_ALLOWABLE_CHARS) == 69
        assert len(set(NONCE_ALLOWABLE_CHARS)) == 69


class TestSign:
    """Test the HMAC-SHA1 primitive."""

    def test_sign(self):
        signature = sign("message", "key")

        assert signature == hmac_sha1("key", "message")
        assert len(signature) == 40
        assert signature == signature.lower()

    def test_unencodable_message(self):
        """Test parameters that are not valid UTF-8 are a caller error."""
        with pytest.raises(InvalidArgumentError):
            get_signature("X", DEFAULT_API_URL, "search", NONCE, 1000, {"domain": "a\udcff"})

    def test_deterministic(self):
        assert sign("message", "key") == sign("message", "key")


class TestGetSignature:
    """Test GET request signatures."""

    def test_string_to_sign_without_params(self):
        """Test field order of the GET signature input."""
        to_sign = get_string_to_sign("X", DEFAULT_API_URL, "search", NONCE, 1000)
        assert to_sign == "XGET1000" + NONCE + "https://api.tineye.com/rest/search/"

    def test_signature_without_params(self):
        signature = get_signature("X", DEFAULT_API_URL, "search", NONCE, 1000, {})
        expected = hmac_sha1("X", "XGET1000" + NONCE + "https://api.tineye.com/rest/search/")
        assert signature == expected

    def test_string_to_sign_with_params(self):
        """Test the canonical parameters use the lower-cased image_url."""
        params = {"offset": 0, "limit": 10, "image_url": "http://X.com/Y.jpg"}
        to_sign = get_string_to_sign("X", DEFAULT_API_URL, "search", NONCE, 1000, params)
        assert to_sign.endswith(
            "search/image_url=http%3a%2f%2fx.com%2fy.jpg&limit=10&offset=0"
        )

    def test_deterministic(self):
        params = {"offset": 0, "limit": 10}
        first = get_signature("X", DEFAULT_API_URL, "search", NONCE, 1000, params)
        second = get_signature("X", DEFAULT_API_URL, "search", NONCE, 1000, params)
        assert first == second


class TestPostSignature:
    """Test POST request signatures."""

    def test_string_to_sign(self):
        """Test field order of the POST signature input."""
        to_sign = post_string_to_sign(
            "X", DEFAULT_API_URL, "search", NONCE, 1000, "My Image.JPG", "BOUND", {"limit": 5}
        )
        assert to_sign == (
            "XPOSTmultipart/form-data; boundary=BOUNDmy+image.jpg1000"
            + NONCE
            + "https://api.tineye.com/rest/search/limit=5"
        )

    def test_signature(self):
        signature = post_signature(
            "X", DEFAULT_API_URL, "search", NONCE, 1000, "image.jpg", "BOUND"
        )
        expected = hmac_sha1(
            "X",
            "XPOSTmultipart/form-data; boundary=BOUNDimage.jpg1000"
            + NONCE
            + "https://api.tineye.com/rest/search/"
        )
        assert signature == expected

    def test_boundary_changes_signature(self):
        first = post_signature("X", DEFAULT_API_URL, "search", NONCE, 1000, "a.jpg", "B1")
        second = post_signature("X", DEFAULT_API_URL, "search", NONCE, 1000, "a.jpg", "B2")
        assert first != second
