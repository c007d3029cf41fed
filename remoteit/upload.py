"""
File upload helpers

Uploads are a multipart form POST to FILE_UPLOAD_PATH, not GraphQL. The form
is encoded to bytes up front so the exact body can be signed and re-sent on
retries. See https://docs.remote.it/developer-tools/device-scripting#uploading-a-script
"""

from pathlib import Path
from typing import Any, List, Optional, Tuple

from urllib3 import encode_multipart_formdata

from .errors import (
    FileUploadError,
    InvalidInputError,
    InvalidResponseError,
    NotFoundError,
    RemoteItError,
)
from .types import FileUpload, UploadFileResponse


def encode_upload_form(file_upload: FileUpload, boundary: Optional[str] = None) -> Tuple[bytes, str]:
    """
    Encode a FileUpload as multipart/form-data

    Returns:
        (body, content type including the boundary)

    Raises:
        ValueError: file_name is empty
        OSError: the file cannot be read
    """
    if not file_upload.file_name:
        raise ValueError("file_name is required")

    path = Path(file_upload.file_path)
    content = path.read_bytes()

    fields: List[Tuple[str, Any]] = [
        (file_upload.file_name, (path.name, content, "application/octet-stream")),
        ("executable", "true" if file_upload.executable else "false"),
    ]
    if file_upload.short_desc:
        fields.append(("shortDesc", file_upload.short_desc))
    if file_upload.long_desc:
        fields.append(("longDesc", file_upload.long_desc))

    return encode_multipart_formdata(fields, boundary=boundary)


def parse_upload_response(payload: Any) -> UploadFileResponse:
    """Build an UploadFileResponse from the camelCase JSON body"""
    try:
        return UploadFileResponse(
            file_id=payload["fileId"],
            file_version_id=payload["fileVersionId"],
            version=int(payload["version"]),
            name=payload["name"],
            executable=bool(payload["executable"]),
            owner_id=payload["ownerId"],
            file_arguments=list(payload.get("fileArguments") or []),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidResponseError(f"Failed to parse upload response: {e}", e)


def as_upload_error(error: RemoteItError) -> RemoteItError:
    """
    Client errors on the upload endpoint become FileUploadError

    Authentication, rate limiting and server errors keep their own types.
    """
    if isinstance(error, (InvalidInputError, NotFoundError)) or error.code == "HTTP_ERROR":
        return FileUploadError(error.message, error.status_code, error.details, error.request_id)
    return error
