"""
Unit tests for the resource codec (pydantic records and request bodies).
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from github_gateway.models import (
    Issue,
    Label,
    Milestone,
    NewIssueRequest,
    NewLabelRequest,
    NewMilestoneRequest,
    PullRequest,
    Repository,
    UpdateIssueRequest,
    User,
)

from .payloads import (
    issue_payload,
    label_payload,
    milestone_payload,
    pull_request_payload,
    repository_payload,
)


class TestRecordDecoding:
    """Tests for decoding GitHub payloads into records."""

    def test_field_names_match_case_insensitively(self) -> None:
        """Test that differently-cased keys still populate fields."""
        user = User.model_validate({"Login": "octocat", "ID": 1, "Public_Repos": 3})

        assert user.login == "octocat"
        assert user.id == 1
        assert user.public_repos == 3

    def test_missing_fields_take_defaults(self) -> None:
        """Test that an empty payload decodes to declared defaults."""
        issue = Issue.model_validate({})

        assert issue.id == 0
        assert issue.title == ""
        assert issue.labels == []
        assert issue.assignees == []
        assert issue.milestone is None
        assert issue.user is None

    def test_null_fields_take_defaults(self) -> None:
        """Test that JSON null falls back to the declared default."""
        milestone = Milestone.model_validate(milestone_payload(due_on=None))

        assert milestone.description == ""
        assert milestone.due_on is None
        assert milestone.creator.login == "octocat"

    def test_type_mismatch_is_a_validation_error(self) -> None:
        """Test that wrongly typed values are rejected."""
        with pytest.raises(ValidationError):
            Issue.model_validate({"number": "forty-two", "labels": "bug"})

    def test_repository_embeds_owner(self) -> None:
        """Test that the owner is decoded into a User record."""
        repo = Repository.model_validate(repository_payload())

        assert repo.full_name == "acme/widgets"
        assert isinstance(repo.owner, User)
        assert repo.owner.login == "acme"
        assert repo.pushed_at is None
        assert repo.has_issues is True

    def test_label_default_flag(self) -> None:
        """Test that the wire field ``default`` maps to ``is_default``."""
        label = Label.model_validate(label_payload())

        assert label.is_default is True
        assert label.color == "d73a4a"

    def test_pull_request_branches(self) -> None:
        """Test that head/base refs and their repositories are decoded."""
        pr = PullRequest.model_validate(pull_request_payload())

        assert pr.head.ref == "fix-widgets"
        assert pr.head.repo is not None
        assert pr.head.repo.full_name == "hubot/widgets"
        assert pr.base.ref == "main"
        assert pr.mergeable is None
        assert pr.additions == 10

    def test_records_are_frozen(self) -> None:
        """Test that decoded records cannot be mutated in place."""
        user = User.model_validate({"login": "octocat"})

        with pytest.raises(ValidationError):
            user.login = "hubot"  # type: ignore[misc]


class TestIsPullRequest:
    """Tests for the derived ``is_pull_request`` flag."""

    def test_true_with_pull_request_reference(self) -> None:
        """Test that a pull_request reference marks the issue as a PR."""
        issue = Issue.model_validate(issue_payload(pull_request=True))

        assert issue.is_pull_request is True
        assert issue.pull_request is not None
        assert issue.pull_request.html_url.endswith("/pull/42")

    def test_false_without_pull_request_reference(self) -> None:
        """Test that a plain issue is not a PR."""
        issue = Issue.model_validate(issue_payload())

        assert issue.is_pull_request is False

    def test_false_with_null_pull_request(self) -> None:
        """Test that an explicit null reference is not a PR."""
        payload = issue_payload()
        payload["pull_request"] = None

        issue = Issue.model_validate(payload)

        assert issue.is_pull_request is False


class TestRequestBodies:
    """Tests for serializing mutation request bodies."""

    def test_new_issue_omits_unset_fields(self) -> None:
        """Test that only provided fields are sent."""
        request = NewIssueRequest(title="Broken widget", labels=["bug"])

        assert request.model_dump(mode="json", exclude_none=True) == {
            "title": "Broken widget",
            "labels": ["bug"],
        }

    def test_new_issue_requires_title(self) -> None:
        """Test that an empty title is rejected."""
        with pytest.raises(ValidationError):
            NewIssueRequest(title="")

    def test_update_issue_partial(self) -> None:
        """Test that an update carries any subset of fields."""
        request = UpdateIssueRequest(state="closed")

        assert request.model_dump(mode="json", exclude_none=True) == {"state": "closed"}

    def test_milestone_due_date_is_iso(self) -> None:
        """Test that the due date is serialized as ISO 8601."""
        request = NewMilestoneRequest(title="v2.0", due_on="2025-06-30T00:00:00Z")

        body = request.model_dump(mode="json", exclude_none=True)

        assert body["title"] == "v2.0"
        assert body["due_on"].startswith("2025-06-30T00:00:00")

    def test_naive_due_date_is_sent_as_utc(self) -> None:
        """Test that a naive due date is serialized with a Z suffix."""
        request = NewMilestoneRequest(title="v1", due_on=datetime(2025, 1, 1))

        assert request.model_dump(mode="json", exclude_none=True)["due_on"] == (
            "2025-01-01T00:00:00Z"
        )

    def test_offset_due_date_is_converted_to_utc(self) -> None:
        """Test that an aware due date in another zone is converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        request = NewMilestoneRequest(title="v1", due_on=datetime(2025, 1, 1, 2, tzinfo=plus_two))

        assert request.model_dump(mode="json")["due_on"] == "2025-01-01T00:00:00Z"

    def test_label_color_strips_hash(self) -> None:
        """Test that a leading # is removed from the color."""
        request = NewLabelRequest(name="triage", color="#ededed")

        assert request.color == "ededed"
