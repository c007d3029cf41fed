"""
remote.it HTTP-Signature Authorization header

The live service verifies an HMAC-SHA256 over this signing string:

    (request-target): post /graphql/v1
    host: api.remote.it
    date: Mon, 01 Jan 2024 00:00:00 GMT
    content-type: application/json

The base64 signature is carried as

    Signature keyId="...",algorithm="hmac-sha256",headers="(request-target) host date content-type",signature="..."

You probably don't need these functions directly unless you are writing
your own transport for the remote.it API.
"""

from typing import Dict, Optional

from ..constants import API_HOST, HTTP_SIGNATURE_ALGORITHM, HTTP_SIGNATURE_HEADERS
from ..errors import EncodingError
from ..types import AccessKeyPair, QueryParams
from .canonical import validate_method, validate_timestamp, canonical_query, encode_path
from .clock import get_date
from .signing import create_signature, validate_key_pair


def build_signing_string(
    method: str,
    path: str,
    date: str,
    content_type: str,
    host: str = API_HOST,
    query: Optional[QueryParams] = None,
) -> str:
    """Signing string over (request-target), host, date and content-type"""
    target = f"{validate_method(method).lower()} {encode_path(path)}"
    query_string = canonical_query(query)
    if query_string:
        target += f"?{query_string}"

    for name, value in (("host", host), ("content_type", content_type)):
        if not value or "\n" in value or "\r" in value:
            raise EncodingError(name, f"{name} must be a non-empty single line")

    return (
        f"(request-target): {target}\n"
        f"host: {host}\n"
        f"date: {validate_timestamp(date)}\n"
        f"content-type: {content_type}"
    )


def build_auth_header(
    key_id: str,
    key: bytes,
    content_type: str,
    method: str,
    path: str,
    date: str,
    host: str = API_HOST,
    query: Optional[QueryParams] = None,
) -> str:
    """
    Value of the Authorization header for a remote.it request

    Example:
        ```python
        date = get_date()
        auth_header = build_auth_header(
            key_id=credentials.r3_access_key_id,
            key=credentials.key,
            content_type="application/json",
            method="POST",
            path=GRAPHQL_PATH,
            date=date,
        )
        ```
    """
    signing_string = build_signing_string(method, path, date, content_type, host, query)
    signature = create_signature(key, signing_string, "base64")

    return (
        f'Signature keyId="{key_id}",'
        f'algorithm="{HTTP_SIGNATURE_ALGORITHM}",'
        f'headers="{HTTP_SIGNATURE_HEADERS}",'
        f'signature="{signature}"'
    )


def generate_http_signature_headers(
    key_pair: AccessKeyPair,
    method: str,
    path: str,
    content_type: str,
    date: Optional[str] = None,
    host: str = API_HOST,
    query: Optional[QueryParams] = None,
) -> Dict[str, str]:
    """
    Date, Content-Type and Authorization headers for one request

    The date is taken now unless given.
    """
    validate_key_pair(key_pair)
    date = date if date is not None else get_date()

    return {
        "Date": date,
        "Content-Type": content_type,
        "Authorization": build_auth_header(
            key_pair.access_key_id,
            key_pair.secret_access_key,
            content_type,
            method,
            path,
            date,
            host,
            query,
        ),
    }
