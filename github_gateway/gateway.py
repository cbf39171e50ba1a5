# =============================================================================
# GitHub Gateway - Caching Gateway
# =============================================================================
"""
Read-through caching gateway over the GitHub API.

Every read consults the cache first and, on a miss, fetches from GitHub,
decodes the payload into typed records and caches them with the
resource's fixed TTL. Every successful write invalidates the cached reads
it made stale. Failures never escape an operation: reads return ``[]`` or
``None``, writes return ``None``, and the failure is logged and counted.

Usage:
    cache = await create_cache_store(settings)
    async with GitHubGateway.from_settings(cache, settings) as gateway:
        issues = await gateway.list_issues("acme", "widgets")
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic import BaseModel

from .cache import (
    CacheKind,
    CacheStore,
    get_ttl,
    invalidation_keys,
    issue_key,
    issues_key,
    labels_key,
    milestones_key,
    project_key,
    pulls_key,
    repositories_key,
)
from .client import GitHubApiError, GitHubTransport
from .config import Settings, get_settings
from .graphql import ProjectShapeError, build_project_request, parse_project_response
from .models import (
    GitHubRecord,
    Issue,
    Label,
    Milestone,
    NewIssueRequest,
    NewLabelRequest,
    NewMilestoneRequest,
    Project,
    PullRequest,
    Repository,
    UpdateIssueRequest,
    User,
)
from .results import Failure, FailureKind, FetchResult

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=GitHubRecord)
T = TypeVar("T")

# Largest page GitHub serves; list reads never request further pages
MAX_PAGE_SIZE = 100


class GraphQLProtocolError(Exception):
    """Raised when a GraphQL response does not match the fixed query."""

    def __init__(self, error: ProjectShapeError) -> None:
        super().__init__(str(error))
        self.path = error.path
        self.reason = error.reason


def decode_record(model: type[R], data: Any) -> R:
    """
    Decode a single JSON object into a record.

    Raises:
        ValueError: If the payload does not match the record.
    """
    return model.model_validate(data)


def decode_records(model: type[R], data: Any) -> list[R]:
    """
    Decode a JSON array into a list of records.

    Raises:
        ValueError: If the payload is not an array or an element does not
            match the record.
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of {model.__name__}, got {type(data).__name__}")
    return [model.model_validate(item) for item in data]


def encode_request(request: BaseModel) -> dict[str, Any]:
    """Serialize a mutation request body, omitting unset fields."""
    return request.model_dump(mode="json", exclude_none=True)


class GitHubGateway:
    """
    Caching gateway for GitHub repositories, issues, pull requests,
    milestones, labels and projects.

    The cache store is injected and owned by the caller; the gateway only
    reads, writes and removes keys. The gateway holds no locks: concurrent
    misses on the same key each fetch, and the last write wins.

    Attributes:
        transport: HTTP transport used for REST and GraphQL calls.
        cache: Cache store shared with the hosting application.
    """

    def __init__(
        self,
        transport: GitHubTransport,
        cache: CacheStore,
        on_failure: Optional[Callable[[Failure], None]] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            transport: HTTP transport for GitHub.
            cache: Cache store; its lifetime is managed by the caller.
            on_failure: Optional callback invoked with every recorded failure.
        """
        self.transport = transport
        self.cache = cache
        self._on_failure = on_failure
        self._stats: dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "invalidations": 0,
            **{f"failures_{kind.value}": 0 for kind in FailureKind},
        }

    @classmethod
    def from_settings(
        cls,
        cache: CacheStore,
        settings: Optional[Settings] = None,
        on_failure: Optional[Callable[[Failure], None]] = None,
    ) -> "GitHubGateway":
        """
        Build a gateway with a transport configured from settings.

        Args:
            cache: Cache store owned by the caller.
            settings: Gateway settings; defaults to the cached settings.
            on_failure: Optional failure callback.

        Returns:
            A ready gateway. The token is set if one is configured.
        """
        settings = settings or get_settings()
        transport = GitHubTransport(
            base_url=settings.github_api_base_url,
            graphql_url=settings.github_graphql_url,
            timeout=settings.github_request_timeout,
            user_agent=settings.github_user_agent,
            accept=settings.github_accept,
            token=settings.github_token or None,
        )
        return cls(transport, cache, on_failure=on_failure)

    def set_auth_token(self, token: str) -> None:
        """
        Set the bearer token for all subsequent GitHub calls.

        Args:
            token: GitHub access token.
        """
        self.transport.set_auth_token(token)

    async def close(self) -> None:
        """Close the transport. The cache store is left to its owner."""
        await self.transport.close()

    async def __aenter__(self) -> "GitHubGateway":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def get_stats(self) -> dict[str, int]:
        """
        Get gateway statistics.

        Returns:
            Counters for cache hits, misses, invalidations and failures
            per failure kind.
        """
        return dict(self._stats)

    # -------------------------------------------------------------------------
    # Orchestration Helpers
    # -------------------------------------------------------------------------

    def _record_failure(self, failure: Failure, exc: Optional[BaseException] = None) -> None:
        self._stats[f"failures_{failure.kind.value}"] += 1

        if failure.kind is FailureKind.PROTOCOL:
            logger.error(f"GraphQL protocol anomaly in {failure}")
        elif failure.kind is FailureKind.TRANSPORT:
            logger.warning(str(failure))
        elif failure.kind is FailureKind.UNEXPECTED:
            logger.error(str(failure), exc_info=exc)
        else:
            logger.error(str(failure))

        if self._on_failure is not None:
            self._on_failure(failure)

    async def _fetch(
        self,
        operation: str,
        context: str,
        fetch: Callable[[], Awaitable[T]],
    ) -> FetchResult[T]:
        """
        Run one transport call plus decode, converting errors to a Failure.

        Cancellation is not a failure and propagates unchanged.
        """
        try:
            return FetchResult.success(await fetch())
        except GitHubApiError as e:
            failure = Failure(
                kind=FailureKind.TRANSPORT,
                operation=operation,
                context=context,
                message=e.message,
                status_code=e.status_code,
            )
        except GraphQLProtocolError as e:
            failure = Failure(
                kind=FailureKind.PROTOCOL,
                operation=operation,
                context=context,
                message=str(e),
            )
        except ValueError as e:
            failure = Failure(
                kind=FailureKind.DECODE,
                operation=operation,
                context=context,
                message=str(e),
            )
        except Exception as e:
            failure = Failure(
                kind=FailureKind.UNEXPECTED,
                operation=operation,
                context=context,
                message=f"{type(e).__name__}: {e}",
            )
            self._record_failure(failure, e)
            return FetchResult.failed(failure)

        self._record_failure(failure)
        return FetchResult.failed(failure)

    async def _read_through(
        self,
        operation: str,
        context: str,
        key: str,
        kind: CacheKind,
        fetch: Callable[[], Awaitable[T]],
    ) -> FetchResult[T]:
        """
        Serve from cache, or fetch, cache with the kind's TTL, and return.

        Failed fetches leave the cache untouched.
        """
        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug(f"CACHE HIT: {key}")
            self._stats["hits"] += 1
            return FetchResult.success(cached, from_cache=True)

        logger.info(f"CACHE MISS: {key}")
        self._stats["misses"] += 1

        result = await self._fetch(operation, context, fetch)
        if result.ok:
            await self.cache.set(key, result.value, get_ttl(kind))
        return result

    async def _invalidate(self, keys: list[str]) -> None:
        for key in keys:
            await self.cache.remove(key)
            self._stats["invalidations"] += 1
        logger.info(f"Invalidated cache: {', '.join(keys)}")

    async def _mutate(
        self,
        operation: str,
        context: str,
        keys: list[str],
        fetch: Callable[[], Awaitable[R]],
    ) -> FetchResult[R]:
        """
        Perform a write and, only if it succeeded, invalidate stale reads.

        The invalidation sequence is shielded so a cancellation arriving
        after the write cannot leave it half done.
        """
        result = await self._fetch(operation, context, fetch)
        if result.ok:
            await asyncio.shield(self._invalidate(keys))
        return result

    # -------------------------------------------------------------------------
    # User and Repositories
    # -------------------------------------------------------------------------

    async def get_user(self) -> Optional[User]:
        """
        Get the authenticated user. Never cached.

        Returns:
            The user, or None on failure.
        """

        async def fetch() -> User:
            return decode_record(User, await self.transport.get("user"))

        return (await self._fetch("get_user", "authenticated user", fetch)).value

    async def list_repositories(self) -> list[Repository]:
        """
        List the authenticated user's repositories, most recently updated first.

        Returns:
            Repositories, or an empty list on failure.
        """

        async def fetch() -> list[Repository]:
            data = await self.transport.get(
                "user/repos",
                params={"sort": "updated", "per_page": MAX_PAGE_SIZE},
            )
            return decode_records(Repository, data)

        result = await self._read_through(
            "list_repositories",
            "authenticated user",
            repositories_key(),
            CacheKind.REPOSITORIES,
            fetch,
        )
        return result.value or []

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    async def list_issues(self, owner: str, repo: str) -> list[Issue]:
        """
        List open issues in a repository, most recently updated first.

        Pull requests returned by the issues endpoint are kept and report
        ``is_pull_request``.

        Args:
            owner: Repository owner.
            repo: Repository name.

        Returns:
            Issues, or an empty list on failure.
        """

        async def fetch() -> list[Issue]:
            data = await self.transport.get(
                f"repos/{owner}/{repo}/issues",
                params={"state": "open", "sort": "updated", "per_page": MAX_PAGE_SIZE},
            )
            return decode_records(Issue, data)

        result = await self._read_through(
            "list_issues",
            f"{owner}/{repo}",
            issues_key(owner, repo),
            CacheKind.ISSUES,
            fetch,
        )
        return result.value or []

    async def get_issue(self, owner: str, repo: str, number: int) -> Optional[Issue]:
        """
        Get a single issue.

        Args:
            owner: Repository owner.
            repo: Repository name.
            number: Issue number.

        Returns:
            The issue, or None on failure (including 404).
        """

        async def fetch() -> Issue:
            data = await self.transport.get(f"repos/{owner}/{repo}/issues/{number}")
            return decode_record(Issue, data)

        result = await self._read_through(
            "get_issue",
            f"{owner}/{repo}#{number}",
            issue_key(owner, repo, number),
            CacheKind.ISSUE,
            fetch,
        )
        return result.value

    async def create_issue(
        self, owner: str, repo: str, request: NewIssueRequest
    ) -> Optional[Issue]:
        """
        Create an issue and invalidate the repository's issue list.

        Args:
            owner: Repository owner.
            repo: Repository name.
            request: Issue creation data.

        Returns:
            The created issue, or None on failure.
        """

        async def fetch() -> Issue:
            data = await self.transport.post(
                f"repos/{owner}/{repo}/issues", json=encode_request(request)
            )
            return decode_record(Issue, data)

        result = await self._mutate(
            "create_issue",
            f"{owner}/{repo}",
            invalidation_keys("create_issue", owner, repo),
            fetch,
        )
        return result.value

    async def update_issue(
        self,
        owner: str,
        repo: str,
        number: int,
        request: UpdateIssueRequest,
    ) -> Optional[Issue]:
        """
        Update an issue and invalidate both the issue and the issue list.

        Args:
            owner: Repository owner.
            repo: Repository name.
            number: Issue number.
            request: Fields to change.

        Returns:
            The updated issue, or None on failure.
        """

        async def fetch() -> Issue:
            data = await self.transport.patch(
                f"repos/{owner}/{repo}/issues/{number}", json=encode_request(request)
            )
            return decode_record(Issue, data)

        result = await self._mutate(
            "update_issue",
            f"{owner}/{repo}#{number}",
            invalidation_keys("update_issue", owner, repo, number),
            fetch,
        )
        return result.value

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    async def get_project(self, owner: str, project_number: int | str) -> Optional[Project]:
        """
        Get a user's project (v2) through the GraphQL API.

        Args:
            owner: Login of the project's owner.
            project_number: Project number; numeric strings are accepted.

        Returns:
            The project with its issue and pull request items, or None on
            failure.
        """
        context = f"{owner} project {project_number}"
        try:
            payload = build_project_request(owner, project_number)
        except ValueError as e:
            self._record_failure(
                Failure(
                    kind=FailureKind.INVALID_REQUEST,
                    operation="get_project",
                    context=context,
                    message=str(e),
                )
            )
            return None

        async def fetch() -> Project:
            decoded = parse_project_response(await self.transport.graphql(payload))
            if isinstance(decoded, ProjectShapeError):
                raise GraphQLProtocolError(decoded)
            return decoded.project

        result = await self._read_through(
            "get_project",
            context,
            project_key(owner, payload["variables"]["number"]),
            CacheKind.PROJECT,
            fetch,
        )
        return result.value

    # -------------------------------------------------------------------------
    # Milestones
    # -------------------------------------------------------------------------

    async def list_milestones(self, owner: str, repo: str) -> list[Milestone]:
        """
        List open milestones, earliest due date first.

        Args:
            owner: Repository owner.
            repo: Repository name.

        Returns:
            Milestones, or an empty list on failure.
        """

        async def fetch() -> list[Milestone]:
            data = await self.transport.get(
                f"repos/{owner}/{repo}/milestones",
                params={"state": "open", "sort": "due_on", "direction": "asc"},
            )
            return decode_records(Milestone, data)

        result = await self._read_through(
            "list_milestones",
            f"{owner}/{repo}",
            milestones_key(owner, repo),
            CacheKind.MILESTONES,
            fetch,
        )
        return result.value or []

    async def create_milestone(
        self, owner: str, repo: str, request: NewMilestoneRequest
    ) -> Optional[Milestone]:
        """
        Create a milestone and invalidate the milestone list.

        Returns:
            The created milestone, or None on failure.
        """

        async def fetch() -> Milestone:
            data = await self.transport.post(
                f"repos/{owner}/{repo}/milestones", json=encode_request(request)
            )
            return decode_record(Milestone, data)

        result = await self._mutate(
            "create_milestone",
            f"{owner}/{repo}",
            invalidation_keys("create_milestone", owner, repo),
            fetch,
        )
        return result.value

    # -------------------------------------------------------------------------
    # Labels
    # -------------------------------------------------------------------------

    async def list_labels(self, owner: str, repo: str) -> list[Label]:
        """
        List a repository's labels.

        Returns:
            Labels, or an empty list on failure.
        """

        async def fetch() -> list[Label]:
            data = await self.transport.get(
                f"repos/{owner}/{repo}/labels",
                params={"per_page": MAX_PAGE_SIZE},
            )
            return decode_records(Label, data)

        result = await self._read_through(
            "list_labels",
            f"{owner}/{repo}",
            labels_key(owner, repo),
            CacheKind.LABELS,
            fetch,
        )
        return result.value or []

    async def create_label(
        self, owner: str, repo: str, request: NewLabelRequest
    ) -> Optional[Label]:
        """
        Create a label and invalidate the label list.

        Returns:
            The created label, or None on failure.
        """

        async def fetch() -> Label:
            data = await self.transport.post(
                f"repos/{owner}/{repo}/labels", json=encode_request(request)
            )
            return decode_record(Label, data)

        result = await self._mutate(
            "create_label",
            f"{owner}/{repo}",
            invalidation_keys("create_label", owner, repo),
            fetch,
        )
        return result.value

    # -------------------------------------------------------------------------
    # Pull Requests
    # -------------------------------------------------------------------------

    async def list_pull_requests(self, owner: str, repo: str) -> list[PullRequest]:
        """
        List open pull requests, most recently updated first.

        Returns:
            Pull requests, or an empty list on failure.
        """

        async def fetch() -> list[PullRequest]:
            data = await self.transport.get(
                f"repos/{owner}/{repo}/pulls",
                params={"state": "open", "sort": "updated", "per_page": MAX_PAGE_SIZE},
            )
            return decode_records(PullRequest, data)

        result = await self._read_through(
            "list_pull_requests",
            f"{owner}/{repo}",
            pulls_key(owner, repo),
            CacheKind.PULLS,
            fetch,
        )
        return result.value or []
