"""
Request signing

HMAC-SHA256 over the canonical request, keyed with the secret access key.
Signing is a pure function of the key pair and the request descriptor: it
performs no I/O, keeps no state and never retries.
"""

import base64
import hashlib
import hmac
import re
from typing import Dict, Optional, Union

from ..errors import InvalidCredentialsError
from ..types import AccessKeyPair, QueryParams, RequestDescriptor, SignatureEncoding, SignedHeaders
from .canonical import build_request_descriptor, canonicalize_request

# Whitespace, control characters and quotes would break the header value
_KEY_ID_INVALID_RE = re.compile(r'[\s"\x00-\x1f\x7f]')


def validate_key_pair(key_pair: AccessKeyPair) -> None:
    """
    Structural validation of an access key pair

    Raises:
        InvalidCredentialsError: names the offending field
    """
    key_id = key_pair.access_key_id
    if not isinstance(key_id, str) or not key_id:
        raise InvalidCredentialsError("access_key_id", "access key id is required")
    if _KEY_ID_INVALID_RE.search(key_id):
        raise InvalidCredentialsError(
            "access_key_id", "access key id contains whitespace, quotes or control characters"
        )

    secret = key_pair.secret_access_key
    if not isinstance(secret, (bytes, bytearray)):
        raise InvalidCredentialsError(
            "secret_access_key", f"secret must be bytes, got {type(secret).__name__}"
        )
    if not secret:
        raise InvalidCredentialsError("secret_access_key", "secret access key is empty")


def create_signature(key: bytes, message: str, encoding: SignatureEncoding = "hex") -> str:
    """
    HMAC-SHA256 of message under key

    Args:
        key: Raw secret key bytes
        message: Canonical request or signing string
        encoding: "hex" (64 lowercase chars) or "base64"

    Returns:
        Encoded signature
    """
    digest = hmac.new(bytes(key), message.encode("utf-8"), hashlib.sha256).digest()

    if encoding == "hex":
        return digest.hex()
    elif encoding == "base64":
        return base64.b64encode(digest).decode("ascii")
    else:
        raise ValueError(f"Unsupported signature encoding: {encoding}")


def sign_request(key_pair: AccessKeyPair, descriptor: RequestDescriptor) -> SignedHeaders:
    """
    Sign a request descriptor

    Raises:
        InvalidCredentialsError: key pair failed validation
        EncodingError: descriptor cannot be canonicalized
    """
    validate_key_pair(key_pair)

    canonical = canonicalize_request(descriptor)
    signature = create_signature(key_pair.secret_access_key, canonical, "hex")

    return SignedHeaders(
        timestamp=descriptor.timestamp,
        access_key_id=key_pair.access_key_id,
        signature=signature,
    )


def generate_auth_headers(
    key_pair: AccessKeyPair,
    method: str,
    path: str,
    query: Optional[QueryParams] = None,
    body: Union[bytes, str, None] = b"",
    timestamp: Optional[str] = None,
) -> Dict[str, str]:
    """
    Build, sign and render authentication headers in one step

    A fresh timestamp is taken when none is given, so every call (and every
    transport retry) is signed anew.

    Returns:
        X-Access-Key-Id, X-Timestamp and X-Signature headers
    """
    validate_key_pair(key_pair)
    descriptor = build_request_descriptor(method, path, query, body, timestamp)
    return sign_request(key_pair, descriptor).as_headers()
