# =============================================================================
# GitHub Gateway - Test Fixtures
# =============================================================================
"""
Shared fixtures: a scripted fake GitHub behind ``httpx.MockTransport``,
a controllable clock, and a gateway wired to both.
"""

from datetime import timedelta
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio

from github_gateway.cache import MemoryCacheStore
from github_gateway.client import GitHubTransport
from github_gateway.gateway import GitHubGateway
from github_gateway.results import Failure

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta.total_seconds()


class FakeGitHub:
    """
    Scripted GitHub API.

    Routes are keyed by (method, path). Unknown routes answer 404. A route
    may also be a callable taking the request, which can be async.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        handler: Optional[Handler] = None,
    ) -> None:
        """Register a canned response or a handler for a route."""
        self.routes[(method, path)] = handler or (status, json)

    def count(self, method: str, path: str) -> int:
        """Number of requests received for a route."""
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            response = route(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response
        status, body = route
        return httpx.Response(status, json=body)


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Create an empty scripted GitHub API."""
    return FakeGitHub()


@pytest.fixture
def clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheStore:
    """Create an in-memory cache store driven by the fake clock."""
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def failures() -> list[Failure]:
    """Collects failures reported by the gateway."""
    return []


@pytest_asyncio.fixture
async def transport(fake_github: FakeGitHub) -> AsyncIterator[GitHubTransport]:
    """
    Create a transport whose HTTP client talks to the fake GitHub.

    Yields:
        GitHubTransport with a test token set.
    """
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_github.handle))
    transport = GitHubTransport(client=client, token="test-token")
    yield transport
    await transport.close()


@pytest.fixture
def gateway(
    transport: GitHubTransport,
    cache: MemoryCacheStore,
    failures: list[Failure],
) -> GitHubGateway:
    """Create a gateway over the fake GitHub and the in-memory cache."""
    return GitHubGateway(transport, cache, on_failure=failures.append)
