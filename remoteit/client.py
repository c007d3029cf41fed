"""
remote.it Python SDK
Client classes: R3Client (blocking) and AsyncR3Client (async)
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

from .auth.canonical import encode_path
from .auth.http_signature import generate_http_signature_headers
from .auth.signing import generate_auth_headers, validate_key_pair
from .constants import BASE_URL, FILE_UPLOAD_PATH, GRAPHQL_PATH, JSON_CONTENT_TYPE
from .credentials import Credentials
from .errors import RemoteItError
from .types import (
    AccessKeyPair,
    AuthScheme,
    GraphQLResponse,
    FileUpload,
    Operation,
    R3ClientConfig,
    UploadFileResponse,
)
from .upload import as_upload_error, encode_upload_form, parse_upload_response
from .utils.http import BlockingHttpClient, HttpClient, RequestBuilder, parse_graphql_response
from .utils.retry import RetryPolicy

if TYPE_CHECKING:
    from types import TracebackType

    from .services.devices import DeviceService
    from .services.organizations import OrganizationService
    from .services.scripting import ScriptingService

AUTH_SCHEMES = ("http-signature", "canonical")


class _BaseClient:
    """Configuration, signing and services shared by both clients"""

    def __init__(
        self,
        credentials: Union[Credentials, AccessKeyPair],
        base_url: str = BASE_URL,
        timeout: int = 30,
        debug: bool = False,
        auth_scheme: AuthScheme = "http-signature",
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._validate_config(credentials, base_url, auth_scheme)

        self.base_url = base_url.rstrip("/")
        parts = urlsplit(self.base_url)
        self.host = parts.netloc
        self._origin = f"{parts.scheme}://{parts.netloc}"
        # A path prefix in base_url (e.g. behind a proxy) is part of what gets signed
        self._base_path = parts.path
        self.timeout = timeout
        self.debug = debug
        self.auth_scheme = auth_scheme
        self.retry_policy = retry_policy or RetryPolicy()

        # Snapshot: rotating the Credentials object later does not affect
        # requests signed by this client
        self._key_pair = (
            credentials.to_key_pair() if isinstance(credentials, Credentials) else credentials
        )
        validate_key_pair(self._key_pair)

        self._scripting_service: Optional[ScriptingService] = None
        self._organization_service: Optional[OrganizationService] = None
        self._device_service: Optional[DeviceService] = None

        if self.debug:
            print(
                f"remote.it client initialized: base_url={self.base_url}, "
                f"key_id={self._key_pair.access_key_id}, auth_scheme={auth_scheme}"
            )

    @classmethod
    def from_config(cls, config: R3ClientConfig):
        """Create a client from an R3ClientConfig"""
        return cls(
            config.credentials,
            base_url=config.base_url,
            timeout=config.timeout,
            debug=config.debug,
            auth_scheme=config.auth_scheme,
            retry_policy=config.retry_config,
        )

    def _validate_config(self, credentials: Any, base_url: str, auth_scheme: str) -> None:
        """Validate client configuration"""
        if credentials is None:
            raise ValueError("credentials are required")

        if not isinstance(credentials, (Credentials, AccessKeyPair)):
            raise TypeError(
                f"credentials must be Credentials or AccessKeyPair, got {type(credentials).__name__}"
            )

        if not base_url:
            raise ValueError("base_url is required")

        if not base_url.startswith(("https://", "http://")):
            raise ValueError(f"base_url must be an http(s) URL: {base_url}")

        parts = urlsplit(base_url)
        if not parts.netloc or parts.query or parts.fragment:
            raise ValueError(f"base_url must have a host and no query or fragment: {base_url}")

        if auth_scheme not in AUTH_SCHEMES:
            raise ValueError(f"auth_scheme must be one of {AUTH_SCHEMES}, got {auth_scheme!r}")

    @property
    def access_key_id(self) -> str:
        return self._key_pair.access_key_id

    def _request_path(self, path: str) -> str:
        """Encoded path as sent and signed, including any base_url prefix"""
        return encode_path(f"{self._base_path}{path}")

    def _url(self, path: str) -> str:
        return f"{self._origin}{self._request_path(path)}"

    def sign(self, method: str, path: str, content_type: str, body: bytes) -> Dict[str, str]:
        """
        Authentication headers for one request, signed now

        Uses the HTTP-Signature Authorization header or the canonical
        X-Signature headers, depending on auth_scheme.
        """
        if self.auth_scheme == "http-signature":
            return generate_http_signature_headers(
                self._key_pair, method, path, content_type, host=self.host
            )

        headers = generate_auth_headers(self._key_pair, method, path, body=body)
        headers["Content-Type"] = content_type
        return headers

    def _graphql_builder(self, body: Dict[str, Any]) -> RequestBuilder:
        payload = json.dumps(body, separators=(",", ":")).encode("utf-8")

        def build() -> Tuple[Dict[str, str], bytes]:
            return self.sign("POST", self._request_path(GRAPHQL_PATH), JSON_CONTENT_TYPE, payload), payload

        return build

    def _upload_builder(self, payload: bytes, content_type: str) -> RequestBuilder:
        def build() -> Tuple[Dict[str, str], bytes]:
            return self.sign("POST", self._request_path(FILE_UPLOAD_PATH), content_type, payload), payload

        return build

    @property
    def scripting(self) -> "ScriptingService":
        """Get scripting service (files and jobs)"""
        if self._scripting_service is None:
            from .services.scripting import ScriptingService

            self._scripting_service = ScriptingService(self)
        return self._scripting_service

    @property
    def organizations(self) -> "OrganizationService":
        """Get organization service"""
        if self._organization_service is None:
            from .services.organizations import OrganizationService

            self._organization_service = OrganizationService(self)
        return self._organization_service

    @property
    def devices(self) -> "DeviceService":
        """Get device service"""
        if self._device_service is None:
            from .services.devices import DeviceService

            self._device_service = DeviceService(self)
        return self._device_service


class R3Client(_BaseClient):
    """
    Blocking remote.it client

    Example:
        ```python
        profiles = Credentials.load_from_disk()
        with R3Client(profiles.take_profile("default")) as client:
            devices = client.devices.list(limit=10)
            print(devices.data)
        ```
    """

    def __init__(
        self,
        credentials: Union[Credentials, AccessKeyPair],
        base_url: str = BASE_URL,
        timeout: int = 30,
        debug: bool = False,
        auth_scheme: AuthScheme = "http-signature",
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        super().__init__(credentials, base_url, timeout, debug, auth_scheme, retry_policy)
        self._http_client = BlockingHttpClient(
            timeout=timeout, retry_policy=self.retry_policy, debug=debug
        )

    def __enter__(self) -> "R3Client":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def send_graphql_request(self, body: Dict[str, Any]) -> GraphQLResponse:
        """
        Send a signed GraphQL request

        You probably want execute() or one of the services instead.

        Raises:
            RemoteItError: HTTP-level API error
            NetworkError: connection failure, or InvalidResponseError for an
                unparsable response
        """
        payload = self._http_client.request("POST", self._url(GRAPHQL_PATH), self._graphql_builder(body))
        return parse_graphql_response(payload)

    def execute(self, operation: Operation) -> GraphQLResponse:
        """Run a pre-written or custom operation"""
        return self.send_graphql_request(operation.as_body())

    def upload_file(self, file_upload: FileUpload) -> UploadFileResponse:
        """
        Upload a file to remote.it

        Raises:
            OSError: the file cannot be read
            FileUploadError: the API rejected the upload
            RemoteItError: authentication, rate limit or server error
            NetworkError: connection failure, or InvalidResponseError for an
                unparsable response
        """
        form, content_type = encode_upload_form(file_upload)
        try:
            payload = self._http_client.request(
                "POST", self._url(FILE_UPLOAD_PATH), self._upload_builder(form, content_type)
            )
        except RemoteItError as e:
            error = as_upload_error(e)
            if error is e:
                raise
            raise error from e
        return parse_upload_response(payload)

    def close(self) -> None:
        """Close HTTP session"""
        self._http_client.close()


class AsyncR3Client(_BaseClient):
    """
    Async remote.it client

    Example:
        ```python
        import asyncio
        from remoteit import AsyncR3Client, Credentials

        async def main():
            async with AsyncR3Client(Credentials.from_env()) as client:
                files = await client.scripting.list_files()
                print(files.data)

        asyncio.run(main())
        ```
    """

    def __init__(
        self,
        credentials: Union[Credentials, AccessKeyPair],
        base_url: str = BASE_URL,
        timeout: int = 30,
        debug: bool = False,
        auth_scheme: AuthScheme = "http-signature",
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        super().__init__(credentials, base_url, timeout, debug, auth_scheme, retry_policy)
        self._http_client = HttpClient(timeout=timeout, retry_policy=self.retry_policy, debug=debug)

    async def __aenter__(self) -> "AsyncR3Client":
        """Async context manager entry"""
        await self._http_client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Async context manager exit"""
        await self._http_client.__aexit__(exc_type, exc_val, exc_tb)

    async def send_graphql_request(self, body: Dict[str, Any]) -> GraphQLResponse:
        """Async counterpart of R3Client.send_graphql_request()"""
        payload = await self._http_client.request(
            "POST", self._url(GRAPHQL_PATH), self._graphql_builder(body)
        )
        return parse_graphql_response(payload)

    async def execute(self, operation: Operation) -> GraphQLResponse:
        """Run a pre-written or custom operation"""
        return await self.send_graphql_request(operation.as_body())

    async def upload_file(self, file_upload: FileUpload) -> UploadFileResponse:
        """Async counterpart of R3Client.upload_file()"""
        form, content_type = await asyncio.to_thread(encode_upload_form, file_upload)
        try:
            payload = await self._http_client.request(
                "POST", self._url(FILE_UPLOAD_PATH), self._upload_builder(form, content_type)
            )
        except RemoteItError as e:
            error = as_upload_error(e)
            if error is e:
                raise
            raise error from e
        return parse_upload_response(payload)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.close()
