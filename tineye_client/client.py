"""
TinEye API client.

This module provides the high-level operations of the TinEye REST API
(image count, remaining searches, search by image data or URL) on top of
the signed request builder.
"""

import logging
from typing import Any, Dict, Optional

import requests

from .constants import (
    DEFAULT_API_URL,
    DEFAULT_CONFIG,
    DEFAULT_FILENAME,
    DEFAULT_SEARCH_OPTIONS,
    MAX_NONCE_LENGTH,
    MIN_NONCE_LENGTH,
    ORDER_CHOICES,
    SORT_CHOICES,
    SUCCESS_CODE
)
from .exceptions import (
    ConfigurationError,
    HTTPError,
    InvalidArgumentError,
    UpstreamError
)
from .request import Credentials, RequestBuilder, RequestDescriptor, build_multipart_body

logger = logging.getLogger(__name__)


def search_options(**options) -> Dict[str, Any]:
    """
    Fill in default search options and validate sort and order.

    Args:
        **options: offset, limit, sort, order and any extra API parameters

    Returns:
        Search options with defaults applied

    Raises:
        InvalidArgumentError: If sort or order is not a supported value
    """
    merged = {**DEFAULT_SEARCH_OPTIONS}
    merged.update({key: value for key, value in options.items() if value is not None})

    if merged['sort'] not in SORT_CHOICES:
        raise InvalidArgumentError(
            f"sort must be one of {', '.join(SORT_CHOICES)}, got {merged['sort']!r}"
        )
    if merged['order'] not in ORDER_CHOICES:
        raise InvalidArgumentError(
            f"order must be one of {', '.join(ORDER_CHOICES)}, got {merged['order']!r}"
        )
    return merged


class TinEyeClient:
    """
    Client for the TinEye reverse image search API.

    Every call is signed with a fresh nonce and timestamp; the client keeps
    only its credentials, configuration and HTTP session between calls.
    """

    def __init__(self, public_key: str, private_key: str,
                 api_url: str = DEFAULT_API_URL, **config):
        """
        Initialize TinEye client.

        Args:
            public_key: API public key, sent with every request
            private_key: API private key, used only to sign requests
            api_url: Base URL of the REST API
            **config: Configuration options (timeout, nonce_length)
        """
        self.credentials = Credentials(public_key, private_key)
        self.api_url = api_url or DEFAULT_API_URL

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

        self.builder = RequestBuilder(
            self.api_url,
            self.credentials,
            nonce_length=self.config['nonce_length']
        )
        self.session = requests.Session()

    def _validate_config(self):
        """Validate client configuration."""
        if not self.credentials.public_key:
            raise ConfigurationError("public_key cannot be empty")

        if not self.credentials.private_key:
            raise ConfigurationError("private_key cannot be empty")

        if self.config['timeout'] <= 0:
            raise ConfigurationError("timeout must be positive")

        nonce_length = self.config['nonce_length']
        if not MIN_NONCE_LENGTH <= nonce_length <= MAX_NONCE_LENGTH:
            raise ConfigurationError(
                f"nonce_length must be between {MIN_NONCE_LENGTH} and {MAX_NONCE_LENGTH}"
            )

    def image_count(self) -> Dict[str, Any]:
        """Return the number of images in the TinEye index."""
        return self._get('image_count')

    def remaining_searches(self) -> Dict[str, Any]:
        """Return the searches left in the current bundle with its start and expiry."""
        return self._get('remaining_searches')

    def search_data(self, data: bytes, filename: str = DEFAULT_FILENAME,
                    offset: Optional[int] = None, limit: Optional[int] = None,
                    sort: Optional[str] = None, order: Optional[str] = None,
                    **params) -> Dict[str, Any]:
        """
        Search the TinEye index using image data.

        Args:
            data: Raw contents of the image file
            filename: Name sent for the uploaded image
            offset: Offset of results from the start, defaults to 0
            limit: Number of results to return, defaults to 10
            sort: score, size or crawl_date, defaults to score
            order: asc or desc, defaults to desc
            **params: Extra API parameters

        Returns:
            Decoded JSON response

        Raises:
            InvalidArgumentError: If filename is empty or an option is invalid
            UpstreamError: If the API rejects the search
            HTTPError: If the request fails
        """
        options = search_options(offset=offset, limit=limit, sort=sort, order=order, **params)
        return self._post('search', filename, data, options)

    def search_url(self, url: str, offset: Optional[int] = None, limit: Optional[int] = None,
                   sort: Optional[str] = None, order: Optional[str] = None,
                   **params) -> Dict[str, Any]:
        """
        Search the TinEye index using an image URL.

        Takes the same options as search_data; the URL is sent as image_url.
        """
        options = search_options(offset=offset, limit=limit, sort=sort, order=order, **params)
        options['image_url'] = url or ''
        return self._get('search', options)

    def _get(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Sign and send a GET request, returning the decoded response."""
        descriptor = self.builder.build_get_request(method, params)
        response = self._send('GET', descriptor.request_url)
        return self._decode(response)

    def _post(self, method: str, filename: str, data: bytes,
              params: Dict[str, Any]) -> Dict[str, Any]:
        """Sign and send a multipart POST request, returning the decoded response."""
        descriptor = self.builder.build_post_request(method, filename, params)
        body, content_type = build_multipart_body(
            descriptor, data, self.credentials.public_key
        )
        headers = {
            'Content-Type': content_type,
            'Expect': '100-continue',
        }
        response = self._send('POST', descriptor.endpoint_url, data=body, headers=headers)
        result = self._decode(response)
        self._check_code(descriptor, result)
        return result

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Issue an HTTP request.

        Raises:
            HTTPError: If request fails
        """
        try:
            return self.session.request(method, url, timeout=self.config['timeout'], **kwargs)
        except requests.RequestException as e:
            raise HTTPError(f"HTTP request failed: {e}") from e

    @staticmethod
    def _decode(response: requests.Response) -> Dict[str, Any]:
        """Decode a JSON response body."""
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Response is not valid JSON (HTTP {response.status_code})",
                code=response.status_code,
                body=response.text
            ) from e

    @staticmethod
    def _check_code(descriptor: RequestDescriptor, result: Any):
        """Reject POST responses whose code is not 200."""
        code = result.get('code') if isinstance(result, dict) else None
        if str(code) != str(SUCCESS_CODE):
            logger.warning("TinEye rejected %s with code %s", descriptor.endpoint_url, code)
            raise UpstreamError(f"TinEye API returned code {code}", code=code, body=result)

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
