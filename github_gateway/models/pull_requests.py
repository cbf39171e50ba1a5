# =============================================================================
# GitHub Gateway - Pull Request Models
# =============================================================================
"""
Pydantic models for GitHub Pull Requests API.

Pull requests are decoded from the pulls endpoint and kept distinct from
issues, even though GitHub also lists them as issues.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import GitHubRecord
from .common import Label, Milestone, Repository, User


class PullRequestBranch(GitHubRecord):
    """
    Pull request head or base branch information.

    Attributes:
        ref: Branch name.
        sha: Commit SHA at the tip.
        label: Full label (user:branch).
        repo: Repository the branch lives in (absent for deleted forks).
    """

    ref: str = Field(default="", description="Branch name")
    sha: str = Field(default="", description="Commit SHA")
    label: str = Field(default="", description="Full label (user:branch)")
    repo: Optional[Repository] = Field(default=None, description="Branch repository")


class PullRequest(GitHubRecord):
    """
    GitHub pull request model.

    Attributes:
        id: Unique identifier for the pull request.
        number: PR number within the repository.
        title: Pull request title.
        state: Current state (open, closed).
        user: User who created the pull request.
        head: Source branch information.
        base: Target branch information.
        merged: Whether the PR has been merged.
        mergeable: Whether the PR can be merged (None if unknown).
        rebaseable: Whether the PR can be rebased (None if unknown).
        mergeable_state: Mergeable state details.
        additions: Lines added.
        deletions: Lines deleted.
        changed_files: Number of files changed.
    """

    id: int = Field(default=0, description="Pull request ID")
    number: int = Field(default=0, description="PR number")
    title: str = Field(default="", description="PR title")
    state: str = Field(default="", description="State (open/closed)")
    locked: bool = Field(default=False, description="Conversation locked")
    user: User = Field(default_factory=User, description="PR creator")
    html_url: str = Field(default="", description="PR URL")
    body: Optional[str] = Field(default=None, description="PR body (Markdown)")
    created_at: Optional[datetime] = Field(default=None, description="Created at")
    updated_at: Optional[datetime] = Field(default=None, description="Updated at")
    closed_at: Optional[datetime] = Field(default=None, description="Closed at")
    merged_at: Optional[datetime] = Field(default=None, description="Merged at")
    merge_commit_sha: Optional[str] = Field(default=None, description="Merge commit SHA")
    assignees: list[User] = Field(default_factory=list, description="Assigned users")
    labels: list[Label] = Field(default_factory=list, description="Attached labels")
    milestone: Optional[Milestone] = Field(default=None, description="Milestone")
    draft: bool = Field(default=False, description="Is draft")
    head: PullRequestBranch = Field(
        default_factory=PullRequestBranch, description="Source branch"
    )
    base: PullRequestBranch = Field(
        default_factory=PullRequestBranch, description="Target branch"
    )
    merged: bool = Field(default=False, description="Is merged")
    mergeable: Optional[bool] = Field(default=None, description="Can be merged")
    rebaseable: Optional[bool] = Field(default=None, description="Can be rebased")
    mergeable_state: str = Field(default="", description="Mergeable state")
    comments: int = Field(default=0, description="Comment count")
    review_comments: int = Field(default=0, description="Review comment count")
    commits: int = Field(default=0, description="Commit count")
    additions: int = Field(default=0, description="Lines added")
    deletions: int = Field(default=0, description="Lines deleted")
    changed_files: int = Field(default=0, description="Files changed")
