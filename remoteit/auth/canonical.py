"""
Request canonicalization

Canonical form, one component per line:

    METHOD
    /percent-encoded/path
    sorted=query&string
    SHA256(body) as lowercase hex
    timestamp

Paths and query components are percent-encoded with the RFC 3986 unreserved
set. The transports send the same encoded path and query that were signed.
"""

import hashlib
import re
from collections.abc import Mapping
from typing import Iterable, List, Optional, Tuple, Union
from urllib.parse import quote

from ..errors import EncodingError
from ..types import QueryParams, RequestDescriptor
from .clock import get_timestamp

# SHA-256 of the empty string. Always present for bodiless requests.
EMPTY_BODY_DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

_METHOD_RE = re.compile(r"[A-Za-z]+")
_ESCAPE_RE = re.compile(r"(%[0-9A-Fa-f]{2})")
_ENCODED_RE = re.compile(r"(?:[A-Za-z0-9\-._~]|%[0-9A-Fa-f]{2})*")


def _has_control_chars(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in value)


def percent_encode(value: str, field: str = "query", safe: str = "") -> str:
    """Percent-encode UTF-8 bytes outside the unreserved set"""
    if not isinstance(value, str):
        raise EncodingError(field, f"expected str, got {type(value).__name__}")
    try:
        return quote(value, safe=safe)
    except UnicodeEncodeError as e:
        raise EncodingError(field, f"not encodable as UTF-8: {e.reason}")


def encode_path(path: str) -> str:
    """
    Percent-encode a request path

    Slashes and well-formed ``%XX`` escapes are kept as they are. Anything
    else outside the unreserved set is encoded.
    """
    if not isinstance(path, str) or not path:
        raise EncodingError("path", "path is required")
    if not path.startswith("/"):
        raise EncodingError("path", f"path must start with '/': {path!r}")
    if _has_control_chars(path):
        raise EncodingError("path", "path contains control characters")

    parts = _ESCAPE_RE.split(path)
    return "".join(
        part if _ESCAPE_RE.fullmatch(part) else percent_encode(part, "path", safe="/")
        for part in parts
    )


def _iter_query(query: Optional[QueryParams]) -> Iterable[Tuple[str, str]]:
    if query is None:
        return []
    if isinstance(query, Mapping):
        return list(query.items())
    pairs = []
    for item in query:
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise EncodingError("query", f"query items must be (key, value) pairs, got {item!r}")
        pairs.append((item[0], item[1]))
    return pairs


def sort_query(query: Optional[QueryParams]) -> Tuple[Tuple[str, str], ...]:
    """
    Percent-encode and sort query parameters

    Sorted by encoded key, ties broken by encoded value, so duplicate keys
    still have one deterministic order.
    """
    encoded: List[Tuple[str, str]] = []
    for key, value in _iter_query(query):
        if not isinstance(key, str) or not isinstance(value, str):
            raise EncodingError(
                "query",
                f"query keys and values must be str, got {type(key).__name__}={type(value).__name__}",
            )
        encoded.append((percent_encode(key, "query"), percent_encode(value, "query")))
    return tuple(sorted(encoded))


def canonical_query(query: Optional[QueryParams]) -> str:
    """Sorted, encoded query string without the leading '?'"""
    return "&".join(f"{k}={v}" for k, v in sort_query(query))


def hash_body(body: bytes) -> str:
    """Lowercase hex SHA-256 of the body"""
    return hashlib.sha256(body).hexdigest()


def _body_bytes(body: Union[bytes, bytearray, memoryview, str, None]) -> bytes:
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        try:
            return body.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError("body", f"not encodable as UTF-8: {e.reason}")
    raise EncodingError("body", f"body must be bytes or str, got {type(body).__name__}")


def validate_timestamp(timestamp: str) -> str:
    if not isinstance(timestamp, str) or not timestamp:
        raise EncodingError("timestamp", "timestamp is required")
    if not all(0x20 <= ord(c) <= 0x7E for c in timestamp):
        raise EncodingError("timestamp", f"timestamp must be printable ASCII: {timestamp!r}")
    return timestamp


def validate_method(method: str) -> str:
    if not isinstance(method, str) or not _METHOD_RE.fullmatch(method):
        raise EncodingError("method", f"invalid HTTP method: {method!r}")
    return method.upper()


def build_request_descriptor(
    method: str,
    path: str,
    query: Optional[QueryParams] = None,
    body: Union[bytes, str, None] = b"",
    timestamp: Optional[str] = None,
) -> RequestDescriptor:
    """
    Validate and normalize a request into a RequestDescriptor

    Args:
        method: HTTP method, any case
        path: Request path without host, e.g. /graphql/v1
        query: Mapping or (key, value) pairs. Keys may repeat.
        body: Request body. str is encoded as UTF-8.
        timestamp: Signing timestamp. Generated now when omitted.

    Raises:
        EncodingError: a component cannot be canonicalized
        ClockError: no timestamp was given and the clock is unavailable
    """
    return RequestDescriptor(
        method=validate_method(method),
        path=encode_path(path),
        query=sort_query(query),
        body=_body_bytes(body),
        timestamp=validate_timestamp(timestamp if timestamp is not None else get_timestamp()),
    )


def _join_encoded_query(pairs: Tuple[Tuple[str, str], ...]) -> str:
    if not isinstance(pairs, (tuple, list)):
        raise EncodingError(
            "query", f"descriptor query must be a tuple of pairs, got {type(pairs).__name__}"
        )
    for pair in pairs:
        if (
            not isinstance(pair, (tuple, list))
            or len(pair) != 2
            or not all(isinstance(part, str) for part in pair)
        ):
            raise EncodingError("query", f"descriptor query must hold encoded (str, str) pairs, got {pair!r}")
        for part in pair:
            if not _ENCODED_RE.fullmatch(part):
                raise EncodingError("query", f"descriptor query component is not percent-encoded: {part!r}")
    return "&".join(f"{k}={v}" for k, v in sorted(tuple(pair) for pair in pairs))


def canonicalize_request(descriptor: RequestDescriptor) -> str:
    """
    Canonical string for a RequestDescriptor

    The descriptor query must already be encoded, as build_request_descriptor()
    leaves it; it is only re-sorted here. Raw or malformed pairs raise
    EncodingError.
    """
    method = validate_method(descriptor.method)
    path = encode_path(descriptor.path)
    query = _join_encoded_query(descriptor.query)
    body_hash = hash_body(_body_bytes(descriptor.body))
    timestamp = validate_timestamp(descriptor.timestamp)

    return f"{method}\n{path}\n{query}\n{body_hash}\n{timestamp}"
