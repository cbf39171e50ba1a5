# =============================================================================
# GitHub Gateway - Issue Models
# =============================================================================
"""
Pydantic models for GitHub Issues API.

These models handle issue responses from the GitHub REST API and the
request bodies for creating and updating issues.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from .base import GitHubRecord
from .common import Label, Milestone, User


class PullRequestRef(GitHubRecord):
    """
    Pull request stub attached to an issue that is really a pull request.

    Attributes:
        url: API URL of the pull request.
        html_url: URL to view the pull request on GitHub.
    """

    url: str = Field(default="", description="Pull request API URL")
    html_url: str = Field(default="", description="Pull request URL")


class Issue(GitHubRecord):
    """
    GitHub issue model.

    The issues endpoint also returns pull requests; those carry a
    ``pull_request`` reference and report ``is_pull_request`` as True.

    Attributes:
        id: Unique identifier for the issue.
        number: Issue number within the repository.
        title: Issue title.
        state: Current state (open, closed).
        locked: Whether the conversation is locked.
        user: User who created the issue.
        assignees: List of users assigned to the issue.
        milestone: Optional milestone the issue belongs to.
        labels: List of labels attached to the issue.
        comments: Number of comments on the issue.
        body: Issue body/description (Markdown).
        closed_by: User who closed the issue (if applicable).
        pull_request: Pull request reference, present only for PRs.
        html_url: URL to view the issue on GitHub.
    """

    id: int = Field(default=0, description="Issue ID")
    number: int = Field(default=0, description="Issue number")
    title: str = Field(default="", description="Issue title")
    state: str = Field(default="", description="State (open/closed)")
    locked: bool = Field(default=False, description="Conversation locked")
    user: Optional[User] = Field(default=None, description="Issue creator")
    assignees: list[User] = Field(default_factory=list, description="Assigned users")
    milestone: Optional[Milestone] = Field(default=None, description="Milestone")
    labels: list[Label] = Field(default_factory=list, description="Attached labels")
    comments: int = Field(default=0, description="Comment count")
    created_at: Optional[datetime] = Field(default=None, description="Created at")
    updated_at: Optional[datetime] = Field(default=None, description="Updated at")
    closed_at: Optional[datetime] = Field(default=None, description="Closed at")
    body: Optional[str] = Field(default=None, description="Issue body (Markdown)")
    closed_by: Optional[User] = Field(default=None, description="Closed by user")
    pull_request: Optional[PullRequestRef] = Field(
        default=None, description="Pull request reference"
    )
    html_url: str = Field(default="", description="Issue URL")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_pull_request(self) -> bool:
        """True if and only if the payload carried a pull request reference."""
        return self.pull_request is not None


class NewIssueRequest(BaseModel):
    """
    Model for creating a new GitHub issue.

    Attributes:
        title: Issue title (required).
        body: Issue body/description in Markdown.
        assignees: List of usernames to assign.
        milestone: Milestone number to associate.
        labels: List of label names to attach.
    """

    title: str = Field(..., description="Issue title", min_length=1)
    body: Optional[str] = Field(default=None, description="Issue body (Markdown)")
    assignees: Optional[list[str]] = Field(default=None, description="Assignee logins")
    milestone: Optional[int] = Field(default=None, description="Milestone number")
    labels: Optional[list[str]] = Field(default=None, description="Label names")


class UpdateIssueRequest(BaseModel):
    """
    Model for updating an existing GitHub issue.

    All fields are optional - only provided fields will be updated.
    A milestone cannot be cleared through this model since unset fields
    are omitted from the request body.
    """

    title: Optional[str] = Field(default=None, description="New title")
    body: Optional[str] = Field(default=None, description="New body")
    state: Optional[str] = Field(default=None, description="New state (open/closed)")
    milestone: Optional[int] = Field(default=None, description="New milestone number")
    labels: Optional[list[str]] = Field(default=None, description="New label names")
    assignees: Optional[list[str]] = Field(
        default=None, description="New assignee logins"
    )
