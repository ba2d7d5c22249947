"""Share links: source code packed into a URL query parameter.

A token is the URL-safe base64 form of the UTF-8 source with padding
stripped, so it survives a query string without further quoting.
"""

import base64
import binascii
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

SHARE_PARAM = 'code'


class ShareDecodeError(ValueError):
    pass


def encode_source(source: str) -> str:
    return base64.urlsafe_b64encode(source.encode('utf-8')).decode('ascii').rstrip('=')


def decode_source(token: str) -> str:
    token = token.strip()
    padded = token + '=' * (-len(token) % 4)
    try:
        data = base64.b64decode(padded, altchars=b'-_', validate=True)
        return data.decode('utf-8')
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ShareDecodeError(f"malformed share token: {e}") from e


def share_url(base: str, source: str) -> str:
    """Return `base` with the encoded source as its ``code`` parameter.

    Existing query parameters other than ``code`` are kept.
    """
    parts = urlsplit(base)
    query = [(k, v) for k, vs in parse_qs(parts.query).items() if k != SHARE_PARAM for v in vs]
    query.append((SHARE_PARAM, encode_source(source)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path or '/', urlencode(query), parts.fragment))


def source_from_url(url: str):
    """Return the shared source in `url`, or None when it carries none."""
    values = parse_qs(urlsplit(url).query).get(SHARE_PARAM)
    if not values:
        return None
    return decode_source(values[0])
