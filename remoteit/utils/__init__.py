"""Transport and retry utilities"""

from .http import BlockingHttpClient, HttpClient, handle_response, parse_graphql_response, redact_headers
from .retry import RetryPolicy, is_retryable_error, with_retry, with_retry_async

__all__ = [
    "BlockingHttpClient",
    "HttpClient",
    "handle_response",
    "parse_graphql_response",
    "redact_headers",
    "RetryPolicy",
    "is_retryable_error",
    "with_retry",
    "with_retry_async",
]
