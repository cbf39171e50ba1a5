# =============================================================================
# GitHub Gateway - Cache Policies
# =============================================================================
"""
TTL configuration and cache-key derivation per resource kind.

Keys follow ``{kind}_{owner}_{repo}[_{identifier}]``. The separator is
an underscore, which GitHub allows inside repository names, so keys for
e.g. repo ``a_b`` and repo ``a`` with identifier ``b`` can collide. This
is a known boundary case and is not escaped.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional

KEY_SEPARATOR = "_"


class CacheKind(str, Enum):
    """Cached resource kinds; the value is the key prefix."""

    REPOSITORIES = "user_repositories"
    ISSUES = "issues"
    ISSUE = "issue"
    PROJECT = "project"
    MILESTONES = "milestones"
    LABELS = "labels"
    PULLS = "pulls"


# Fixed TTL per resource kind. The authenticated user is never cached.
TTL_CONFIG: dict[CacheKind, timedelta] = {
    CacheKind.REPOSITORIES: timedelta(minutes=10),
    CacheKind.ISSUES: timedelta(minutes=5),
    CacheKind.ISSUE: timedelta(minutes=5),
    CacheKind.PROJECT: timedelta(minutes=10),
    CacheKind.MILESTONES: timedelta(minutes=15),
    CacheKind.LABELS: timedelta(hours=1),
    CacheKind.PULLS: timedelta(minutes=5),
}


def get_ttl(kind: CacheKind) -> timedelta:
    """
    Get the TTL for a resource kind.

    Args:
        kind: The cached resource kind.

    Returns:
        Time-to-live for entries of that kind.
    """
    return TTL_CONFIG[kind]


def cache_key(kind: CacheKind, *parts: object) -> str:
    """
    Derive the cache key for a resource.

    Args:
        kind: The cached resource kind.
        *parts: Identifying parameters in order (owner, repo, identifier).

    Returns:
        The cache key string.
    """
    return KEY_SEPARATOR.join([kind.value, *(str(part) for part in parts)])


def repositories_key() -> str:
    """Key for the authenticated user's repository list."""
    return cache_key(CacheKind.REPOSITORIES)


def issues_key(owner: str, repo: str) -> str:
    """Key for a repository's open issue list."""
    return cache_key(CacheKind.ISSUES, owner, repo)


def issue_key(owner: str, repo: str, number: int) -> str:
    """Key for a single issue."""
    return cache_key(CacheKind.ISSUE, owner, repo, number)


def project_key(owner: str, number: int | str) -> str:
    """Key for a user's project."""
    return cache_key(CacheKind.PROJECT, owner, number)


def milestones_key(owner: str, repo: str) -> str:
    """Key for a repository's open milestone list."""
    return cache_key(CacheKind.MILESTONES, owner, repo)


def labels_key(owner: str, repo: str) -> str:
    """Key for a repository's label list."""
    return cache_key(CacheKind.LABELS, owner, repo)


def pulls_key(owner: str, repo: str) -> str:
    """Key for a repository's open pull request list."""
    return cache_key(CacheKind.PULLS, owner, repo)


def invalidation_keys(
    mutation: str,
    owner: str,
    repo: str,
    number: Optional[int] = None,
) -> list[str]:
    """
    Read-cache keys a successful mutation makes stale.

    Args:
        mutation: Gateway mutation name.
        owner: Repository owner.
        repo: Repository name.
        number: Issue number for issue updates.

    Returns:
        Keys to remove from the cache.

    Raises:
        ValueError: For an unknown mutation.
    """
    if mutation == "create_issue":
        return [issues_key(owner, repo)]
    if mutation == "update_issue":
        if number is None:
            raise ValueError("update_issue invalidation requires an issue number")
        return [issue_key(owner, repo, number), issues_key(owner, repo)]
    if mutation == "create_milestone":
        return [milestones_key(owner, repo)]
    if mutation == "create_label":
        return [labels_key(owner, repo)]
    raise ValueError(f"Unknown mutation: {mutation}")
