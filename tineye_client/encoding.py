"""
Parameter encoding and canonicalization for TinEye request signatures.

The canonical parameter string is the signature input the server recomputes
on its side, so every transform here must match it byte for byte.
"""

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from .constants import IMAGE_URL_KEY, SPECIAL_KEYS, URI_COMPONENT_SAFE
from .exceptions import InvalidArgumentError


def encode_uri_component(value: str) -> str:
    """
    Percent-encode a string the way JavaScript's encodeURIComponent does.

    Leaves ``A-Za-z0-9 - _ . ! ~ * ' ( )`` untouched and encodes everything
    else as UTF-8 with uppercase hex digits.

    Raises:
        InvalidArgumentError: If the string cannot be encoded as UTF-8
    """
    try:
        return quote(value, safe=URI_COMPONENT_SAFE)
    except UnicodeEncodeError as e:
        raise InvalidArgumentError(f"Cannot encode {value!r} as UTF-8") from e


def stringify(value: Any) -> str:
    """Stringify a parameter value; booleans become "1" and ""."""
    if isinstance(value, bool):
        return '1' if value else ''
    return str(value)


def encode_image_url(value: Any, lowercase: bool = True) -> str:
    """
    Encode an ``image_url`` parameter value.

    Values that already contain a ``%`` are treated as encoded and left
    alone; only the lower-casing still applies to them.

    Args:
        value: The image URL
        lowercase: Lower-case the result (signature form)

    Returns:
        The encoded value
    """
    value = stringify(value)
    if '%' not in value:
        value = encode_uri_component(value).replace('!', '%21').replace('%20', '+')
    if lowercase:
        value = value.lower()
    return value


def encode_filename(filename: str) -> str:
    """Encode an upload filename for the POST signature."""
    return encode_uri_component(filename).replace('%20', '+').lower()


def _lowercase_lookup(params: Mapping[Any, Any], lowercase_image_url: bool) -> Dict[str, str]:
    """Map lower-cased keys to processed values, special keys dropped."""
    lookup = {}
    seen = {}
    for key, value in params.items():
        key = str(key)
        lowercase_key = key.lower()
        if lowercase_key in SPECIAL_KEYS:
            continue

        if lowercase_key in seen:
            raise InvalidArgumentError(
                f"Parameters {seen[lowercase_key]!r} and {key!r} differ only by case"
            )
        seen[lowercase_key] = key

        if lowercase_key == IMAGE_URL_KEY:
            lookup[lowercase_key] = encode_image_url(value, lowercase_image_url)
        else:
            lookup[lowercase_key] = stringify(value)
    return lookup


def canonicalize(params: Optional[Mapping[Any, Any]], lowercase_image_url: bool = True) -> str:
    """
    Serialize request parameters into the canonical query-string form.

    Keys are sorted in their original case, special keys (api_key, api_sig,
    date, nonce, image_upload) are dropped in any case, and ``image_url`` is
    percent-encoded.

    Args:
        params: Extra request parameters
        lowercase_image_url: Lower-case the encoded image_url. True for the
            signature input, False for the literal request URL.

    Returns:
        ``key=value`` pairs joined with ``&`` (empty when nothing remains)

    Raises:
        InvalidArgumentError: If two keys differ only by letter case
    """
    if not params:
        return ''

    lookup = _lowercase_lookup(params, lowercase_image_url)
    sorted_keys = sorted(str(key) for key in params)

    pairs = []
    for key in sorted_keys:
        lowercase_key = key.lower()
        if lowercase_key not in lookup:
            continue
        pairs.append(f"{key}={lookup[lowercase_key]}")

    return '&'.join(pairs)
