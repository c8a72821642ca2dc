"""
TinEye API Client Library

A Python client for the TinEye reverse image search REST API. Requests are
authenticated with HMAC-SHA1 signatures over canonicalized parameters, a
nonce and a timestamp.

Example usage:
    from tineye_client import TinEyeClient

    client = TinEyeClient("your-public-key", "your-private-key")
    response = client.search_url("https://example.com/image.jpg", limit=5)
"""

from .client import TinEyeClient, search_options
from .encoding import canonicalize, encode_filename, encode_uri_component
from .exceptions import (
    TinEyeClientError,
    InvalidArgumentError,
    ConfigurationError,
    HTTPError,
    UpstreamError
)
from .request import (
    Credentials,
    RequestBuilder,
    RequestContext,
    RequestDescriptor,
    build_multipart_body
)
from .signer import generate_nonce, get_signature, post_signature, sign
from .constants import (
    DEFAULT_API_URL,
    DEFAULT_CONFIG,
    MIN_NONCE_LENGTH,
    MAX_NONCE_LENGTH,
    NONCE_ALLOWABLE_CHARS
)

__version__ = "1.0.0"
__all__ = [
    "TinEyeClient",
    "search_options",
    "canonicalize",
    "encode_filename",
    "encode_uri_component",
    "TinEyeClientError",
    "InvalidArgumentError",
    "ConfigurationError",
    "HTTPError",
    "UpstreamError",
    "Credentials",
    "RequestBuilder",
    "RequestContext",
    "RequestDescriptor",
    "build_multipart_body",
    "generate_nonce",
    "get_signature",
    "post_signature",
    "sign",
    "DEFAULT_API_URL",
    "DEFAULT_CONFIG",
    "MIN_NONCE_LENGTH",
    "MAX_NONCE_LENGTH",
    "NONCE_ALLOWABLE_CHARS"
]
