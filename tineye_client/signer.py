"""
TinEye request signing.

Signatures are HMAC-SHA1 over a string built from the private key, the HTTP
verb, the request date and nonce, the request URL and the canonical
parameters. The field order is fixed by the server.
"""

import hashlib
import hmac
import secrets
from typing import Any, Mapping, Optional, Union

from .constants import (
    MAX_NONCE_LENGTH,
    MIN_NONCE_LENGTH,
    MULTIPART_CONTENT_TYPE,
    NONCE_ALLOWABLE_CHARS
)
from .encoding import canonicalize, encode_filename
from .exceptions import InvalidArgumentError

Params = Optional[Mapping[Any, Any]]


def generate_nonce(length: int = MIN_NONCE_LENGTH) -> str:
    """
    Generate a random nonce used to make a request unique.

    Args:
        length: Number of characters, between 24 and 255

    Returns:
        Nonce drawn from the allowed nonce alphabet

    Raises:
        InvalidArgumentError: If length is out of range
    """
    if (not isinstance(length, int) or isinstance(length, bool)
            or not MIN_NONCE_LENGTH <= length <= MAX_NONCE_LENGTH):
        raise InvalidArgumentError(
            f"Nonce length must be an int between {MIN_NONCE_LENGTH} "
            f"and {MAX_NONCE_LENGTH} characters, got {length!r}"
        )

    return ''.join(secrets.choice(NONCE_ALLOWABLE_CHARS) for _ in range(length))


def sign(to_sign: str, private_key: str) -> str:
    """Return the hex HMAC-SHA1 of ``to_sign`` keyed with ``private_key``."""
    try:
        key, message = private_key.encode('utf-8'), to_sign.encode('utf-8')
    except UnicodeEncodeError as e:
        raise InvalidArgumentError("Request cannot be encoded as UTF-8 for signing") from e

    mac = hmac.new(key, message, hashlib.sha1)
    return mac.hexdigest()


def get_string_to_sign(private_key: str, api_url: str, method: str, nonce: str,
                       date: Union[int, str], params: Params = None) -> str:
    """Build the signature input for a GET request."""
    request_url = f"{api_url}{method}/"
    return f"{private_key}GET{date}{nonce}{request_url}{canonicalize(params)}"


def post_string_to_sign(private_key: str, api_url: str, method: str, nonce: str,
                        date: Union[int, str], filename: str, boundary: str,
                        params: Params = None) -> str:
    """Build the signature input for a multipart POST request."""
    content_type = MULTIPART_CONTENT_TYPE + boundary
    request_url = f"{api_url}{method}/"
    return (
        f"{private_key}POST{content_type}{encode_filename(filename)}"
        f"{date}{nonce}{request_url}{canonicalize(params)}"
    )


def get_signature(private_key: str, api_url: str, method: str, nonce: str,
                  date: Union[int, str], params: Params = None) -> str:
    """
    Generate the HMAC signature for a GET request.

    Args:
        private_key: API private key
        api_url: Base API URL ending in a slash
        method: API method being called, e.g. ``search``
        nonce: Request nonce
        date: Unix timestamp of the request
        params: Extra request parameters

    Returns:
        Hex-encoded signature
    """
    to_sign = get_string_to_sign(private_key, api_url, method, nonce, date, params)
    return sign(to_sign, private_key)


def post_signature(private_key: str, api_url: str, method: str, nonce: str,
                   date: Union[int, str], filename: str, boundary: str,
                   params: Params = None) -> str:
    """
    Generate the HMAC signature for an image upload POST request.

    The multipart content type (with its boundary) and the encoded upload
    filename are part of the signed string, so the body must be sent with
    the same boundary and filename.
    """
    to_sign = post_string_to_sign(
        private_key, api_url, method, nonce, date, filename, boundary, params
    )
    return sign(to_sign, private_key)
