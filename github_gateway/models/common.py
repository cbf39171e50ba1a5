# =============================================================================
# GitHub Gateway - Common Models
# =============================================================================
"""
Common Pydantic models shared across GitHub API resources.

These models represent fundamental GitHub entities like users, labels,
milestones, and repositories that are referenced by other resources,
plus the request bodies for creating milestones and labels.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .base import GitHubRecord


class User(GitHubRecord):
    """
    GitHub user model.

    Represents a GitHub user account, which can be the author of issues,
    pull requests, milestones, or an assignee.

    Attributes:
        id: Unique identifier for the user.
        login: The user's GitHub username.
        name: Display name (empty when the user has not set one).
        email: Public email address, if any.
        bio: Profile biography, if any.
        avatar_url: URL to the user's avatar image.
        html_url: URL to the user's GitHub profile page.
        public_repos: Number of public repositories.
        followers: Follower count.
        following: Following count.
        created_at: Account creation timestamp.
        updated_at: Last profile update timestamp.
    """

    id: int = Field(default=0, description="User ID")
    login: str = Field(default="", description="GitHub username")
    name: str = Field(default="", description="Display name")
    email: Optional[str] = Field(default=None, description="Public email")
    bio: Optional[str] = Field(default=None, description="Profile bio")
    avatar_url: str = Field(default="", description="Avatar URL")
    html_url: str = Field(default="", description="Profile URL")
    public_repos: int = Field(default=0, description="Public repository count")
    followers: int = Field(default=0, description="Follower count")
    following: int = Field(default=0, description="Following count")
    created_at: Optional[datetime] = Field(default=None, description="Created at")
    updated_at: Optional[datetime] = Field(default=None, description="Updated at")


class Label(GitHubRecord):
    """
    GitHub label model.

    Labels are used to categorize issues and pull requests.

    Attributes:
        id: Unique identifier for the label.
        name: Display name of the label.
        color: Hex color code (without #).
        description: Optional description of the label's purpose.
        is_default: Whether GitHub created the label by default
            (``default`` on the wire).
        url: API URL of the label.
    """

    id: int = Field(default=0, description="Label ID")
    name: str = Field(default="", description="Label name")
    color: str = Field(default="", description="Hex color code")
    description: Optional[str] = Field(default=None, description="Label description")
    is_default: bool = Field(default=False, alias="default", description="Default label")
    url: str = Field(default="", description="API URL")


class Milestone(GitHubRecord):
    """
    GitHub milestone model.

    Milestones group issues and pull requests into larger goals.

    Attributes:
        id: Unique identifier for the milestone.
        number: Milestone number within the repository.
        title: Display title of the milestone.
        description: Description of the milestone.
        creator: User who created the milestone.
        open_issues: Count of open issues in the milestone.
        closed_issues: Count of closed issues in the milestone.
        state: Current state (open, closed).
        html_url: URL to the milestone page.
        due_on: Optional due date for the milestone.
    """

    id: int = Field(default=0, description="Milestone ID")
    number: int = Field(default=0, description="Milestone number")
    title: str = Field(default="", description="Milestone title")
    description: str = Field(default="", description="Description")
    creator: User = Field(default_factory=User, description="Creator")
    open_issues: int = Field(default=0, description="Open issue count")
    closed_issues: int = Field(default=0, description="Closed issue count")
    state: str = Field(default="", description="State (open/closed)")
    html_url: str = Field(default="", description="Milestone URL")
    created_at: Optional[datetime] = Field(default=None, description="Created at")
    updated_at: Optional[datetime] = Field(default=None, description="Updated at")
    due_on: Optional[datetime] = Field(default=None, description="Due date")
    closed_at: Optional[datetime] = Field(default=None, description="Closed at")


class Repository(GitHubRecord):
    """
    GitHub repository model.

    The owner is embedded by value, as returned by the API.

    Attributes:
        id: Unique identifier for the repository.
        name: Repository name (without owner).
        full_name: Full repository name (owner/repo).
        owner: Repository owner.
        html_url: URL to the repository page.
        description: Optional repository description.
        private: Whether the repository is private.
        fork: Whether this is a fork of another repository.
        archived: Whether the repository is archived.
        default_branch: Name of the default branch.
        language: Primary programming language.
    """

    id: int = Field(default=0, description="Repository ID")
    name: str = Field(default="", description="Repository name")
    full_name: str = Field(default="", description="Full name (owner/repo)")
    owner: User = Field(default_factory=User, description="Repository owner")
    html_url: str = Field(default="", description="Repository URL")
    description: Optional[str] = Field(default=None, description="Description")
    private: bool = Field(default=False, description="Is private")
    fork: bool = Field(default=False, description="Is a fork")
    archived: bool = Field(default=False, description="Is archived")
    disabled: bool = Field(default=False, description="Is disabled")
    has_issues: bool = Field(default=False, description="Issues enabled")
    has_projects: bool = Field(default=False, description="Projects enabled")
    has_wiki: bool = Field(default=False, description="Wiki enabled")
    has_pages: bool = Field(default=False, description="Pages enabled")
    has_downloads: bool = Field(default=False, description="Downloads enabled")
    open_issues_count: int = Field(default=0, description="Open issues count")
    forks_count: int = Field(default=0, description="Fork count")
    stargazers_count: int = Field(default=0, description="Star count")
    watchers_count: int = Field(default=0, description="Watcher count")
    language: Optional[str] = Field(default=None, description="Primary language")
    default_branch: str = Field(default="main", description="Default branch name")
    created_at: Optional[datetime] = Field(default=None, description="Created at")
    updated_at: Optional[datetime] = Field(default=None, description="Updated at")
    pushed_at: Optional[datetime] = Field(default=None, description="Last push at")


class NewMilestoneRequest(BaseModel):
    """
    Model for creating a new milestone.

    Attributes:
        title: Milestone title (required).
        state: Initial state (open, closed).
        description: Milestone description.
        due_on: Due date.
    """

    title: str = Field(..., description="Milestone title", min_length=1)
    state: Optional[str] = Field(default=None, description="State (open/closed)")
    description: Optional[str] = Field(default=None, description="Description")
    due_on: Optional[datetime] = Field(default=None, description="Due date")

    @field_validator("due_on")
    @classmethod
    def normalize_due_on(cls, v: Optional[datetime]) -> Optional[datetime]:
        """GitHub expects a UTC timestamp; naive datetimes are taken as UTC."""
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class NewLabelRequest(BaseModel):
    """
    Model for creating a new label.

    Attributes:
        name: Label name (required).
        color: Hex color code; a leading # is stripped.
        description: Label description.
    """

    name: str = Field(..., description="Label name", min_length=1)
    color: str = Field(..., description="Hex color code")
    description: Optional[str] = Field(default=None, description="Label description")

    @field_validator("color")
    @classmethod
    def strip_hash(cls, v: str) -> str:
        """GitHub expects the color without the leading #."""
        return v.lstrip("#")
