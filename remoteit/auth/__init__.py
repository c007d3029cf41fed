"""Request signing for the remote.it API"""

from .canonical import (
    EMPTY_BODY_DIGEST,
    build_request_descriptor,
    canonical_query,
    canonicalize_request,
    encode_path,
    hash_body,
    percent_encode,
    sort_query,
)
from .clock import get_date, get_timestamp
from .http_signature import (
    build_auth_header,
    build_signing_string,
    generate_http_signature_headers,
)
from .signing import (
    create_signature,
    generate_auth_headers,
    sign_request,
    validate_key_pair,
)

__all__ = [
    "EMPTY_BODY_DIGEST",
    "build_request_descriptor",
    "canonical_query",
    "canonicalize_request",
    "encode_path",
    "hash_body",
    "percent_encode",
    "sort_query",
    "get_date",
    "get_timestamp",
    "build_auth_header",
    "build_signing_string",
    "generate_http_signature_headers",
    "create_signature",
    "generate_auth_headers",
    "sign_request",
    "validate_key_pair",
]
