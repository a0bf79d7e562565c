"""URL query-parameter boundary: decoding start-up input and encoding shareable URLs.

Report text travels in ``rdjson`` / ``rdjsonl`` and the link prefix in
``base_path_url``.  The viewer encodes values with ``encodeURIComponent``
semantics before putting them into the query string, so they arrive here
percent-encoded once more after the web framework has unquoted the query.
Values produced by the URL builder CLI are instead zlib-compressed and
base64-encoded; :func:`decode_param` accepts both.
"""

from __future__ import annotations

import base64
import binascii
import re
import zlib
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from rdjson_viewer.models.errors import DecodeError
from rdjson_viewer.parser.loader import InputFormat

RDJSON_PARAM = "rdjson"
RDJSONL_PARAM = "rdjsonl"
BASE_PATH_PARAM = "base_path_url"

# Characters left alone by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_param(value: str, name: str) -> str:
    """Percent-decode one query value, inflating compressed payloads.

    Raises :class:`DecodeError` naming *name* on a malformed ``%`` escape or
    on bytes that are not UTF-8.
    """
    if _BAD_ESCAPE_RE.search(value):
        raise DecodeError(name)
    try:
        text = unquote(value, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        raise DecodeError(name) from None
    inflated = inflate_payload(text)
    return inflated if inflated is not None else text


def encode_param(text: str) -> str:
    """Encode like ``encodeURIComponent``."""
    return quote(text, safe=_URI_COMPONENT_SAFE)


def compress_payload(data: bytes) -> str:
    """zlib-compress (default level) and base64-encode report bytes."""
    return base64.b64encode(zlib.compress(data, zlib.Z_DEFAULT_COMPRESSION)).decode("ascii")


def inflate_payload(text: str) -> str | None:
    """Reverse :func:`compress_payload`, or ``None`` if *text* is not such a payload."""
    try:
        raw = base64.b64decode(text, validate=True)
        return zlib.decompress(raw).decode("utf-8")
    except (binascii.Error, zlib.error, UnicodeDecodeError, ValueError):
        return None


def encode_query(raw_text: str, fmt: InputFormat | str, base_path: str = "") -> str:
    """Query string persisted on submit: ``<format>=...[&base_path_url=...]``.

    Values are ``encodeURIComponent``-encoded and then form-encoded, matching
    what :func:`decode_param` expects after the framework's own unquoting.
    """
    params = {InputFormat(fmt).value: encode_param(raw_text)}
    if base_path:
        params[BASE_PATH_PARAM] = encode_param(base_path)
    return urlencode(params)


def build_viewer_url(
    data: bytes,
    fmt: InputFormat | str,
    viewer_base_url: str,
    base_path: str = "",
) -> str:
    """Shareable viewer URL carrying a compressed report.

    Parameters are sorted by name and spaces are encoded as ``%20``.
    """
    parts = urlsplit(viewer_base_url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query[InputFormat(fmt).value] = compress_payload(data)
    if base_path:
        query[BASE_PATH_PARAM] = base_path
    encoded = urlencode(sorted(query.items()), quote_via=quote)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))
