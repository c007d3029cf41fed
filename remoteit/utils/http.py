"""
HTTP transports with retry logic

HttpClient is the async transport (aiohttp). BlockingHttpClient is the
blocking transport (requests). Both take a request builder that returns
freshly signed headers and the body on every attempt.
"""

import asyncio
import json
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import aiohttp
import requests
from yarl import URL

from ..constants import SENSITIVE_HEADERS
from ..errors import InvalidResponseError, NetworkError, create_error_from_response
from ..types import GraphQLErrorEntry, GraphQLResponse
from .retry import RetryPolicy, with_retry, with_retry_async

# Returns (headers, body) for one attempt
RequestBuilder = Callable[[], Tuple[Dict[str, str], bytes]]


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of headers safe for debug output"""
    return {
        name: "[REDACTED]" if name in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def parse_json(text: str) -> Any:
    try:
        return json.loads(text) if text else None
    except json.JSONDecodeError as e:
        raise InvalidResponseError("Failed to parse response JSON", e)


def handle_response(status: int, text: str, headers: Mapping[str, str]) -> Any:
    """
    Parse a response body, raising the matching error for HTTP failures

    Returns:
        Decoded JSON payload of a 2xx response

    Raises:
        RemoteItError: non-2xx status
        InvalidResponseError: 2xx body is not JSON, never retried
    """
    if 200 <= status < 300:
        return parse_json(text)

    try:
        payload = json.loads(text) if text else None
    except json.JSONDecodeError:
        payload = None

    message = f"HTTP {status}"
    details: Dict[str, Any] = {}
    if isinstance(payload, dict):
        details = payload
        if payload.get("message"):
            message = str(payload["message"])
        elif isinstance(payload.get("errors"), list) and payload["errors"]:
            message = str(payload["errors"][0].get("message", message))
    elif text:
        message = f"HTTP {status}: {text[:200]}"

    raise create_error_from_response(
        status,
        message,
        details,
        request_id=headers.get("X-Request-Id"),
        retry_after=headers.get("Retry-After"),
    )


def parse_graphql_response(payload: Any) -> GraphQLResponse:
    """Build a GraphQLResponse from a decoded response body"""
    if not isinstance(payload, dict):
        raise InvalidResponseError(f"Unexpected GraphQL response: {payload!r}")

    errors = None
    if payload.get("errors"):
        errors = [
            GraphQLErrorEntry(
                message=e.get("message", ""),
                locations=e.get("locations"),
                path=e.get("path"),
                extensions=e.get("extensions"),
            )
            for e in payload["errors"]
        ]

    return GraphQLResponse(
        data=payload.get("data"),
        errors=errors,
        extensions=payload.get("extensions"),
    )


class HttpClient:
    """Async HTTP client with retry logic"""

    def __init__(
        self,
        timeout: int = 30,
        retry_policy: Optional[RetryPolicy] = None,
        debug: bool = False,
    ):
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.debug = debug
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HttpClient":
        """Async context manager entry"""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit"""
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure aiohttp session exists"""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP session"""
        if self._session and not self._session.closed:
            await self._session.close()

    async def request(self, method: str, url: str, build: RequestBuilder) -> Any:
        """
        Make HTTP request with retry logic

        Args:
            method: HTTP method
            url: Full URL, already percent-encoded
            build: Called once per attempt for signed headers and body

        Returns:
            Decoded JSON response

        Raises:
            RemoteItError: API error
            NetworkError: Network error
        """
        await self._ensure_session()

        async def attempt() -> Any:
            headers, body = build()
            return await self._make_request(method, url, headers, body)

        return await with_retry_async(attempt, self.retry_policy, self.debug)

    async def _make_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
    ) -> Any:
        """Make single HTTP request"""
        assert self._session is not None, "Session not initialized. Use async with or call _ensure_session()"

        if self.debug:
            print(f"{method} {url}", {"headers": redact_headers(headers)})

        try:
            # encoded=True: send the path and query exactly as signed
            async with self._session.request(
                method,
                URL(url, encoded=True),
                headers=headers,
                data=body,
            ) as response:
                status = response.status
                text = await response.text()
                response_headers = response.headers
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"{method} {url} failed: {e}", e)

        if self.debug:
            print(f"{method} {url} response: HTTP {status}")

        return handle_response(status, text, response_headers)


class BlockingHttpClient:
    """Blocking HTTP client with retry logic"""

    def __init__(
        self,
        timeout: int = 30,
        retry_policy: Optional[RetryPolicy] = None,
        debug: bool = False,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.debug = debug
        self._session = session or requests.Session()

    def __enter__(self) -> "BlockingHttpClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def request(self, method: str, url: str, build: RequestBuilder) -> Any:
        """Blocking counterpart of HttpClient.request()"""

        def attempt() -> Any:
            headers, body = build()
            return self._make_request(method, url, headers, body)

        return with_retry(attempt, self.retry_policy, self.debug)

    def _make_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
    ) -> Any:
        if self.debug:
            print(f"{method} {url}", {"headers": redact_headers(headers)})

        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}", e)

        if self.debug:
            print(f"{method} {url} response: HTTP {response.status_code}")

        return handle_response(response.status_code, response.text, response.headers)
