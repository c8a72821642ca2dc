"""
Signed request assembly for the TinEye API.

The builder turns an API method and its parameters into a request
descriptor: the signed URL plus the nonce, date and signature that a POST
body has to repeat as form fields.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from urllib3.filepost import encode_multipart_formdata

from .constants import (
    BOUNDARY_PREFIX,
    IMAGE_UPLOAD_KEY,
    MIN_NONCE_LENGTH,
    SPECIAL_KEYS
)
from .encoding import canonicalize, stringify
from .exceptions import InvalidArgumentError
from .signer import generate_nonce, get_signature, post_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """API key pair. The private key is only used as HMAC key."""
    public_key: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class RequestContext:
    """Per-request values: nonce, Unix date and multipart boundary."""
    nonce: str
    date: int
    boundary: Optional[str] = None

    @classmethod
    def create(cls, nonce_length: int = MIN_NONCE_LENGTH, boundary: Optional[str] = None):
        """Create a fresh context with a new nonce and the current time."""
        return cls(nonce=generate_nonce(nonce_length), date=int(time.time()), boundary=boundary)


@dataclass(frozen=True)
class RequestDescriptor:
    """
    A signed request ready for the transport.

    Attributes:
        request_url: Signed URL including auth and extra parameters
        endpoint_url: URL of the API method without a query string
        nonce: Nonce used in the signature
        date: Unix timestamp used in the signature, as a string
        api_sig: Hex HMAC signature
        params: The caller's parameters, unmodified
        boundary: Multipart boundary (POST only)
        filename: Upload filename (POST only)
    """
    request_url: str
    endpoint_url: str
    nonce: str
    date: str
    api_sig: str
    params: Dict[str, Any]
    boundary: Optional[str] = None
    filename: Optional[str] = None


def generate_boundary() -> str:
    """Generate a random multipart boundary."""
    return BOUNDARY_PREFIX + uuid.uuid4().hex


def normalize_api_url(api_url: str) -> str:
    """Ensure the API URL ends with exactly one slash."""
    return api_url.rstrip('/') + '/'


class RequestBuilder:
    """
    Builds signed GET and POST requests for the TinEye API.

    Holds only the API URL and immutable credentials, so one builder can be
    shared between threads.
    """

    def __init__(self, api_url: str, credentials: Credentials,
                 nonce_length: int = MIN_NONCE_LENGTH):
        self.api_url = normalize_api_url(api_url)
        self.credentials = credentials
        self.nonce_length = nonce_length

    def endpoint_url(self, method: str) -> str:
        return f"{self.api_url}{method}/"

    def build_get_request(self, method: str, params: Optional[Mapping[str, Any]] = None,
                          context: Optional[RequestContext] = None) -> RequestDescriptor:
        """
        Build a signed GET request.

        Args:
            method: API method being called
            params: Extra request parameters
            context: Nonce and date to use; a fresh one is created if omitted

        Returns:
            RequestDescriptor for the request
        """
        params = dict(params or {})
        context = context or RequestContext.create(self.nonce_length)

        signature = get_signature(
            self.credentials.private_key,
            self.api_url,
            method,
            context.nonce,
            context.date,
            params
        )
        logger.debug("Built GET request for %s", method)
        return self._request_descriptor(method, context, signature, params)

    def build_post_request(self, method: str, filename: str,
                           params: Optional[Mapping[str, Any]] = None,
                           boundary: Optional[str] = None,
                           context: Optional[RequestContext] = None) -> RequestDescriptor:
        """
        Build a signed POST request for an image upload search.

        Args:
            method: API method being called
            filename: Name of the uploaded image file
            params: Extra request parameters
            boundary: Multipart boundary; overrides the context's boundary
            context: Nonce and date to use; a fresh one is created if omitted

        Returns:
            RequestDescriptor carrying the boundary and filename

        Raises:
            InvalidArgumentError: If filename is empty or whitespace
        """
        if filename is None or not str(filename).strip():
            raise InvalidArgumentError("Must specify an image to search for.")

        params = dict(params or {})
        context = context or RequestContext.create(self.nonce_length)
        boundary = boundary or context.boundary or generate_boundary()

        signature = post_signature(
            self.credentials.private_key,
            self.api_url,
            method,
            context.nonce,
            context.date,
            filename,
            boundary,
            params
        )
        logger.debug("Built POST request for %s (filename=%s)", method, filename)
        return self._request_descriptor(
            method, context, signature, params, boundary=boundary, filename=filename
        )

    def _request_descriptor(self, method: str, context: RequestContext, signature: str,
                            params: Dict[str, Any], **extra) -> RequestDescriptor:
        """Assemble the signed URL and wrap it with the signed fields."""
        endpoint_url = self.endpoint_url(method)
        request_url = (
            f"{endpoint_url}?api_key={self.credentials.public_key}"
            f"&date={context.date}&nonce={context.nonce}&api_sig={signature}"
        )

        extra_params = canonicalize(params, lowercase_image_url=False)
        if extra_params:
            request_url += '&' + extra_params

        return RequestDescriptor(
            request_url=request_url,
            endpoint_url=endpoint_url,
            nonce=context.nonce,
            date=str(context.date),
            api_sig=signature,
            params=params,
            **extra
        )


def build_multipart_body(descriptor: RequestDescriptor, image_data: bytes,
                         public_key: str) -> Tuple[bytes, str]:
    """
    Build the multipart body for a signed POST request.

    Field order: image_upload, api_key, date, nonce, api_sig, then each
    extra parameter. The boundary must be the one that was signed.

    Returns:
        Tuple of (body, content_type)
    """
    if descriptor.boundary is None or descriptor.filename is None:
        raise InvalidArgumentError("Descriptor was not built for a POST request")

    fields = [
        (IMAGE_UPLOAD_KEY, (descriptor.filename, image_data, 'application/octet-stream')),
        ('api_key', public_key),
        ('date', descriptor.date),
        ('nonce', descriptor.nonce),
        ('api_sig', descriptor.api_sig),
    ]
    for key, value in descriptor.params.items():
        if str(key).lower() in SPECIAL_KEYS:
            continue
        fields.append((str(key), stringify(value)))

    return encode_multipart_formdata(fields, boundary=descriptor.boundary)
