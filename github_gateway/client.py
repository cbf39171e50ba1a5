# =============================================================================
# GitHub Gateway - API Transport
# =============================================================================
"""
Async HTTP transport for the GitHub REST and GraphQL APIs.

This module owns the outbound HTTP client: default headers, the bearer
token, and the translation of error responses into typed exceptions.
It performs no caching and no retries; both are the caller's concern.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

JsonPayload = dict[str, Any] | list[Any] | None


# =============================================================================
# Custom Exceptions
# =============================================================================


class GitHubApiError(Exception):
    """
    Base exception for GitHub API errors.

    Attributes:
        message: Error description.
        status_code: HTTP status code (0 when no response was received).
        response_data: Raw response data from GitHub.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response_data: Optional[dict] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error description.
            status_code: HTTP status code.
            response_data: Raw response data.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}


class GitHubAuthenticationError(GitHubApiError):
    """Raised when authentication fails (401)."""

    pass


class GitHubForbiddenError(GitHubApiError):
    """Raised when access is forbidden (403)."""

    pass


class GitHubNotFoundError(GitHubApiError):
    """Raised when a resource is not found (404)."""

    pass


class GitHubValidationError(GitHubApiError):
    """Raised when request validation fails (422)."""

    pass


class GitHubRateLimitError(GitHubApiError):
    """
    Raised when the rate limit is exhausted.

    The transport never waits and retries; the reset information is kept
    so callers can decide when to try again.

    Attributes:
        reset_at: Unix timestamp when rate limit resets.
        retry_after: Seconds to wait before retrying.
    """

    def __init__(
        self,
        message: str,
        reset_at: int = 0,
        retry_after: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.reset_at = reset_at
        self.retry_after = retry_after


# =============================================================================
# GitHub Transport
# =============================================================================


class GitHubTransport:
    """
    Async transport for GitHub's REST API and its GraphQL endpoint.

    The Authorization header is set once through ``set_auth_token`` and
    shared by REST and GraphQL requests.

    Attributes:
        base_url: GitHub REST API base URL.
        graphql_url: Absolute URL of the GraphQL endpoint.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com/",
        graphql_url: str = "https://api.github.com/graphql",
        timeout: float = 30.0,
        user_agent: str = "github-gateway/0.1.0",
        accept: str = "application/vnd.github.v3+json",
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            base_url: GitHub REST API base URL.
            graphql_url: Absolute GraphQL endpoint URL.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header value.
            accept: Accept header value for REST requests.
            token: Optional bearer token to set immediately.
            client: Pre-built httpx client (mainly for tests). Its base
                URL and default headers are overwritten.
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.graphql_url = graphql_url
        self.timeout = timeout

        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._client.base_url = self.base_url
        self._client.headers.update(
            {
                "Accept": accept,
                "User-Agent": user_agent,
            }
        )

        if token:
            self.set_auth_token(token)

    def set_auth_token(self, token: str) -> None:
        """
        Set the bearer token used by every subsequent request.

        Args:
            token: GitHub access token.
        """
        self._client.headers["Authorization"] = f"Bearer {token}"

    @property
    def has_auth_token(self) -> bool:
        """Whether an Authorization header has been configured."""
        return "Authorization" in self._client.headers

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # HTTP Request Helpers
    # -------------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> JsonPayload:
        """
        Make an HTTP request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, PATCH).
            path: API path relative to the base URL, or an absolute URL.
            params: Query parameters.
            json: JSON body for POST/PATCH.
            headers: Extra headers for this request only.

        Returns:
            Parsed JSON response or None for 204 responses.

        Raises:
            GitHubAuthenticationError: For 401 responses.
            GitHubRateLimitError: When the rate limit is exhausted.
            GitHubForbiddenError: For other 403 responses.
            GitHubNotFoundError: For 404 responses.
            GitHubValidationError: For 422 responses.
            GitHubApiError: For other error responses and network failures.
            ValueError: If a success response body is not valid JSON.
        """
        try:
            response = await self._client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise GitHubApiError(
                message=f"Request timed out: {method} {path}: {e}",
                status_code=0,
            )
        except httpx.RequestError as e:
            raise GitHubApiError(
                message=f"Request failed: {method} {path}: {e}",
                status_code=0,
            )

        if response.status_code == 204:
            return None
        if response.is_success:
            return response.json()

        self._raise_for_error(response)
        return None

    def _raise_for_error(self, response: httpx.Response) -> None:
        """
        Translate an error response into the matching exception.

        Args:
            response: Non-success HTTP response.
        """
        error_data: dict = {}
        try:
            parsed = response.json()
            if isinstance(parsed, dict):
                error_data = parsed
        except ValueError:
            pass

        error_message = error_data.get("message") or response.text or response.reason_phrase
        status = response.status_code

        if status in (403, 429):
            remaining = response.headers.get("X-RateLimit-Remaining", "1")
            if status == 429 or remaining == "0" or "rate limit" in error_message.lower():
                raise GitHubRateLimitError(
                    message=f"Rate limit exceeded: {error_message}",
                    status_code=status,
                    response_data=error_data,
                    reset_at=int(response.headers.get("X-RateLimit-Reset", "0")),
                    retry_after=int(response.headers.get("Retry-After", "0")),
                )
            raise GitHubForbiddenError(
                message=error_message,
                status_code=status,
                response_data=error_data,
            )

        if status == 401:
            raise GitHubAuthenticationError(
                message=f"Authentication failed: {error_message}",
                status_code=401,
                response_data=error_data,
            )

        if status == 404:
            raise GitHubNotFoundError(
                message=f"Resource not found: {error_message}",
                status_code=404,
                response_data=error_data,
            )

        if status == 422:
            raise GitHubValidationError(
                message=f"Validation failed: {error_message}",
                status_code=422,
                response_data=error_data,
            )

        raise GitHubApiError(
            message=f"GitHub API error: {error_message}",
            status_code=status,
            response_data=error_data,
        )

    async def get(self, path: str, params: Optional[dict] = None) -> JsonPayload:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[dict] = None) -> JsonPayload:
        """Make a POST request."""
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Optional[dict] = None) -> JsonPayload:
        """Make a PATCH request."""
        return await self.request("PATCH", path, json=json)

    async def graphql(self, payload: dict[str, Any]) -> JsonPayload:
        """
        POST a query/variables payload to the GraphQL endpoint.

        Args:
            payload: Dictionary with ``query`` and ``variables``.

        Returns:
            The parsed GraphQL response document.
        """
        return await self.request(
            "POST",
            self.graphql_url,
            json=payload,
            headers={"Accept": "application/json"},
        )
