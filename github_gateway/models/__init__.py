# =============================================================================
# GitHub Gateway - Models Package
# =============================================================================
"""
Pydantic models for GitHub API data structures.

This package exports the records decoded from GitHub responses and the
request bodies sent by mutation operations.
"""

from .base import GitHubRecord
from .common import (
    Label,
    Milestone,
    NewLabelRequest,
    NewMilestoneRequest,
    Repository,
    User,
)
from .issues import Issue, NewIssueRequest, PullRequestRef, UpdateIssueRequest
from .projects import Project, ProjectItem
from .pull_requests import PullRequest, PullRequestBranch

# Record classes that may be stored in a serializing cache backend
RECORD_TYPES: dict[str, type[GitHubRecord]] = {
    cls.__name__: cls
    for cls in (
        User,
        Repository,
        Issue,
        PullRequest,
        Milestone,
        Label,
        Project,
        ProjectItem,
    )
}

__all__ = [
    "GitHubRecord",
    "RECORD_TYPES",
    # Common
    "User",
    "Label",
    "Milestone",
    "Repository",
    "NewMilestoneRequest",
    "NewLabelRequest",
    # Issues
    "Issue",
    "PullRequestRef",
    "NewIssueRequest",
    "UpdateIssueRequest",
    # Pull Requests
    "PullRequest",
    "PullRequestBranch",
    # Projects
    "Project",
    "ProjectItem",
]
