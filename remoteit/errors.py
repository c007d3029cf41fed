"""
Custom exception classes for the remote.it SDK
Signing errors, credential errors and API errors
"""

from typing import Optional, Dict, Any


# ============================================================
# Signing errors
# ============================================================

class SigningError(Exception):
    """Base class for request signing failures"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} (field: {self.field})"


class InvalidCredentialsError(SigningError):
    """Access key id or secret failed structural validation"""


class EncodingError(SigningError):
    """Request descriptor cannot be canonicalized"""


class ClockError(SigningError):
    """System clock could not be read"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__("timestamp", message)
        self.original_error = original_error


# ============================================================
# Credential source errors
# ============================================================

class CredentialsError(Exception):
    """Base class for credential loading failures"""


class CredentialsNotFoundError(CredentialsError):
    """Credentials file, profile source or home directory is missing"""


class MalformedCredentialsError(CredentialsError):
    """Credentials were found but could not be parsed or validated"""


# ============================================================
# API errors
# ============================================================

class RemoteItError(Exception):
    """Base remote.it API error class"""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.request_id = request_id

    def __str__(self) -> str:
        msg = f"[{self.code}] {self.message}"
        if self.request_id:
            msg += f" (request_id: {self.request_id})"
        return msg


class InvalidInputError(RemoteItError):
    """Invalid input error (400)"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__("INVALID_INPUT", message, 400, details, request_id)


class UnauthenticatedError(RemoteItError):
    """
    Authentication error (401/403)

    Raised when the service rejects the signature. A frequent cause is clock
    skew between this machine and the service.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 401,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__("UNAUTHENTICATED", message, status_code, details, request_id)


class NotFoundError(RemoteItError):
    """Not found error (404)"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__("NOT_FOUND", message, 404, details, request_id)


class RateLimitedError(RemoteItError):
    """Rate limited error (429)"""

    def __init__(
        self,
        message: str,
        retry_after: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        error_details = details or {}
        if retry_after:
            error_details["retry_after"] = retry_after
        super().__init__("RATE_LIMITED", message, 429, error_details, request_id)
        self.retry_after = retry_after


class InternalError(RemoteItError):
    """Internal server error (500)"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__("INTERNAL", message, 500, details, request_id)


class RetryLaterError(RemoteItError):
    """Gateway or availability error (502/503/504)"""

    def __init__(
        self,
        message: str,
        status_code: int = 503,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__("RETRY_LATER", message, status_code, details, request_id)


class FileUploadError(RemoteItError):
    """The API rejected a file upload"""

    def __init__(
        self,
        message: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__("UPLOAD_FAILED", message, status_code, details, request_id)


class NetworkError(Exception):
    """Network error (not from API)"""

    code = "NETWORK_ERROR"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class InvalidResponseError(NetworkError):
    """
    The server answered, but the body could not be parsed

    Not retried: the request may already have taken effect.
    """

    code = "INVALID_RESPONSE"


def create_error_from_response(
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    retry_after: Optional[str] = None,
) -> RemoteItError:
    """Create appropriate error from an HTTP error status"""
    if status_code in (401, 403):
        return UnauthenticatedError(message, status_code, details, request_id)
    if status_code == 404:
        return NotFoundError(message, details, request_id)
    if status_code == 429:
        return RateLimitedError(message, retry_after, details, request_id)
    if status_code in (502, 503, 504):
        return RetryLaterError(message, status_code, details, request_id)
    if status_code >= 500:
        return InternalError(message, details, request_id)
    if status_code in (400, 422):
        return InvalidInputError(message, details, request_id)

    return RemoteItError("HTTP_ERROR", message, status_code, details, request_id)
