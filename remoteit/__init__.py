"""
remote.it Python SDK
Client library for the remote.it GraphQL API with its request signing

Example:
    ```python
    from remoteit import Credentials, R3Client

    credentials = Credentials.load_from_disk().take_profile("default")

    with R3Client(credentials) as client:
        response = client.scripting.list_files()
        print(response.data)
    ```
"""

__version__ = "0.12.2"

# Clients
from .client import AsyncR3Client, R3Client

# Credentials
from .credentials import CredentialProfiles, Credentials, load_from_disk

# Constants
from .constants import BASE_URL, FILE_UPLOAD_PATH, GRAPHQL_PATH

# Types
from .types import (
    AccessKeyPair,
    ArgumentInput,
    AuthScheme,
    FileUpload,
    GraphQLErrorEntry,
    GraphQLResponse,
    JobStatus,
    Operation,
    R3ClientConfig,
    RequestDescriptor,
    SignedHeaders,
    UploadFileResponse,
)

# Errors
from .errors import (
    SigningError,
    InvalidCredentialsError,
    EncodingError,
    ClockError,
    CredentialsError,
    CredentialsNotFoundError,
    MalformedCredentialsError,
    RemoteItError,
    InvalidInputError,
    UnauthenticatedError,
    NotFoundError,
    RateLimitedError,
    InternalError,
    RetryLaterError,
    FileUploadError,
    NetworkError,
    InvalidResponseError,
)

# Signing
from .auth import (
    build_auth_header,
    build_request_descriptor,
    canonicalize_request,
    create_signature,
    generate_auth_headers,
    generate_http_signature_headers,
    get_date,
    get_timestamp,
    sign_request,
)

# Services (for type hints)
from .services import DeviceService, OrganizationService, ScriptingService

# Utilities
from .utils.retry import RetryPolicy, with_retry

__all__ = [
    "__version__",
    # Clients
    "R3Client",
    "AsyncR3Client",
    # Credentials
    "Credentials",
    "CredentialProfiles",
    "load_from_disk",
    # Constants
    "BASE_URL",
    "GRAPHQL_PATH",
    "FILE_UPLOAD_PATH",
    # Types
    "AccessKeyPair",
    "ArgumentInput",
    "AuthScheme",
    "FileUpload",
    "GraphQLErrorEntry",
    "GraphQLResponse",
    "JobStatus",
    "Operation",
    "R3ClientConfig",
    "RequestDescriptor",
    "SignedHeaders",
    "UploadFileResponse",
    # Errors
    "SigningError",
    "InvalidCredentialsError",
    "EncodingError",
    "ClockError",
    "CredentialsError",
    "CredentialsNotFoundError",
    "MalformedCredentialsError",
    "RemoteItError",
    "InvalidInputError",
    "UnauthenticatedError",
    "NotFoundError",
    "RateLimitedError",
    "InternalError",
    "RetryLaterError",
    "FileUploadError",
    "NetworkError",
    "InvalidResponseError",
    # Signing
    "build_auth_header",
    "build_request_descriptor",
    "canonicalize_request",
    "create_signature",
    "generate_auth_headers",
    "generate_http_signature_headers",
    "get_date",
    "get_timestamp",
    "sign_request",
    # Services
    "ScriptingService",
    "OrganizationService",
    "DeviceService",
    # Utilities
    "RetryPolicy",
    "with_retry",
]
