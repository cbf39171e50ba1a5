# =============================================================================
# GitHub Gateway - Project Models
# =============================================================================
"""
Models for GitHub Projects (v2), which are only available through GraphQL.
"""

from pydantic import Field

from .base import GitHubRecord


class ProjectItem(GitHubRecord):
    """
    An issue or pull request placed on a project board.

    Attributes:
        id: Opaque node ID of the project item.
        content_id: Opaque node ID of the underlying issue or pull request.
        number: Issue or pull request number.
        title: Issue or pull request title.
    """

    id: str = Field(default="", description="Project item node ID")
    content_id: str = Field(default="", description="Content node ID")
    number: int = Field(default=0, description="Issue/PR number")
    title: str = Field(default="", description="Issue/PR title")


class Project(GitHubRecord):
    """
    GitHub project (v2) model.

    Attributes:
        id: Opaque node ID of the project.
        title: Project title.
        number: Project number for its owner.
        description: Short description.
        url: URL to view the project.
        closed: Whether the project is closed.
        items: Issue and pull request items on the project.
    """

    id: str = Field(default="", description="Project node ID")
    title: str = Field(default="", description="Project title")
    number: int = Field(default=0, description="Project number")
    description: str = Field(default="", description="Short description")
    url: str = Field(default="", description="Project URL")
    closed: bool = Field(default=False, description="Is closed")
    items: list[ProjectItem] = Field(default_factory=list, description="Project items")
