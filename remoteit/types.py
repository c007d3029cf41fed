"""
Type definitions for the remote.it SDK
Signing records, GraphQL envelopes and upload payloads
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional, Tuple, Union

from .constants import (
    BASE_URL,
    HEADER_ACCESS_KEY_ID,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
)

if TYPE_CHECKING:
    from .utils.retry import RetryPolicy


# Type aliases
AuthScheme = Literal["http-signature", "canonical"]
SignatureEncoding = Literal["hex", "base64"]
JobStatus = Literal["WAITING", "RUNNING", "SUCCESS", "FAILED", "CANCELLED", "READY"]
JOB_STATUSES: Tuple[str, ...] = ("WAITING", "RUNNING", "SUCCESS", "FAILED", "CANCELLED", "READY")
QueryParams = Union[Dict[str, str], List[Tuple[str, str]], Tuple[Tuple[str, str], ...]]


# ============================================================
# Signing
# ============================================================

@dataclass(frozen=True)
class AccessKeyPair:
    """
    Access key id and secret used to sign requests

    The secret is raw key bytes. It is excluded from repr() so a key pair can
    appear in tracebacks and debug output without leaking.
    """
    access_key_id: str
    secret_access_key: bytes = field(repr=False)


@dataclass(frozen=True)
class RequestDescriptor:
    """Canonicalizable description of one outgoing request"""
    method: str
    path: str
    query: Tuple[Tuple[str, str], ...]
    body: bytes
    timestamp: str


@dataclass(frozen=True)
class SignedHeaders:
    """Result of signing a RequestDescriptor"""
    timestamp: str
    access_key_id: str
    signature: str

    def as_headers(self) -> Dict[str, str]:
        """Render as HTTP headers for the canonical signing scheme"""
        return {
            HEADER_ACCESS_KEY_ID: self.access_key_id,
            HEADER_TIMESTAMP: self.timestamp,
            HEADER_SIGNATURE: self.signature,
        }


# ============================================================
# GraphQL
# ============================================================

@dataclass
class Operation:
    """A GraphQL document with its variables"""
    operation_name: Optional[str]
    query: str
    variables: Dict[str, Any] = field(default_factory=dict)

    def as_body(self) -> Dict[str, Any]:
        """JSON request body as sent to the GraphQL endpoint"""
        return {
            "operationName": self.operation_name,
            "query": self.query,
            "variables": self.variables,
        }


@dataclass
class GraphQLErrorEntry:
    """One entry of a GraphQL `errors` array"""
    message: str
    locations: Optional[List[Dict[str, int]]] = None
    path: Optional[List[Union[str, int]]] = None
    extensions: Optional[Dict[str, Any]] = None


@dataclass
class GraphQLResponse:
    """
    GraphQL response envelope

    Errors reported by the GraphQL layer are returned here, not raised.
    Only transport and HTTP-level failures raise.
    """
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLErrorEntry]] = None
    extensions: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.data is not None and not self.errors


@dataclass
class ArgumentInput:
    """Argument passed to a scripting job"""
    name: str
    value: str

    def as_variables(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value}


# ============================================================
# File upload
# ============================================================

@dataclass
class FileUpload:
    """Details of a file to be uploaded to remote.it"""
    file_name: str  # name of the file within remote.it
    file_path: Path
    executable: bool
    short_desc: Optional[str] = None
    long_desc: Optional[str] = None


@dataclass
class UploadFileResponse:
    """Positive response to a file upload"""
    file_id: str
    file_version_id: str
    version: int
    name: str
    executable: bool
    owner_id: str
    file_arguments: List[Any] = field(default_factory=list)


# ============================================================
# Client configuration
# ============================================================

@dataclass
class R3ClientConfig:
    """Client configuration. retry_config defaults to RetryPolicy()."""
    credentials: Any  # Credentials or AccessKeyPair
    base_url: str = BASE_URL
    timeout: int = 30
    debug: bool = False
    auth_scheme: AuthScheme = "http-signature"
    retry_config: Optional["RetryPolicy"] = None
