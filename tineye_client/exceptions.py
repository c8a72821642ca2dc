"""
Custom exceptions for the TinEye API client library.
"""


class TinEyeClientError(Exception):
    """Base exception for TinEye client errors."""
    pass


class InvalidArgumentError(TinEyeClientError):
    """Raised when a caller passes an argument the API cannot accept."""
    pass


class ConfigurationError(TinEyeClientError):
    """Raised when client configuration is invalid."""
    pass


class HTTPError(TinEyeClientError):
    """Raised when HTTP request fails."""
    pass


class UpstreamError(TinEyeClientError):
    """Raised when the API answers but rejects the request."""

    def __init__(self, message, code=None, body=None):
        super().__init__(message)
        self.code = code
        self.body = body
