"""
Constants for the TinEye API client library.
Values follow the TinEye REST API authentication scheme.
"""

DEFAULT_API_URL = "https://api.tineye.com/rest/"

# Nonce constraints (server rejects nonces outside this range/alphabet)
MIN_NONCE_LENGTH = 24
MAX_NONCE_LENGTH = 255
NONCE_ALLOWABLE_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRTSUVWXYZ0123456789-_=.,*^"

# Parameters injected by the signer itself, never part of the canonical string
SPECIAL_KEYS = frozenset(['api_key', 'api_sig', 'date', 'nonce', 'image_upload'])

IMAGE_URL_KEY = "image_url"
IMAGE_UPLOAD_KEY = "image_upload"

# Characters encodeURIComponent leaves alone besides A-Za-z0-9
URI_COMPONENT_SAFE = "-_.!~*'()"

MULTIPART_CONTENT_TYPE = "multipart/form-data; boundary="
BOUNDARY_PREFIX = "-" * 21

# Default configuration values
DEFAULT_CONFIG = {
    'timeout': 30,                       # HTTP timeout in seconds
    'nonce_length': MIN_NONCE_LENGTH,
}

# Search options
DEFAULT_SEARCH_OPTIONS = {
    'offset': 0,
    'limit': 10,
    'sort': 'score',
    'order': 'desc',
}
SORT_CHOICES = ('score', 'size', 'crawl_date')
ORDER_CHOICES = ('asc', 'desc')
DEFAULT_FILENAME = "image.jpg"

SUCCESS_CODE = 200
