"""
Tests for the command line runner.
"""

import pytest

from github_gateway.__main__ import build_parser, run_command, to_jsonable
from github_gateway.gateway import GitHubGateway
from github_gateway.models import Label

from .conftest import FakeGitHub
from .payloads import issue_payload, label_payload


class TestCommandLine:
    """Tests for argument parsing and dispatch."""

    def test_issue_number_is_an_integer(self) -> None:
        """Test that the issue subcommand parses its number."""
        args = build_parser().parse_args(["issue", "acme", "widgets", "42"])

        assert args.command == "issue"
        assert args.number == 42

    def test_command_is_required(self) -> None:
        """Test that running without a subcommand exits."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    @pytest.mark.asyncio
    async def test_dispatches_to_gateway(
        self, gateway: GitHubGateway, fake_github: FakeGitHub
    ) -> None:
        """Test that a parsed command runs the matching operation."""
        fake_github.add("GET", "/repos/acme/widgets/issues/42", json=issue_payload(42))
        args = build_parser().parse_args(["issue", "acme", "widgets", "42"])

        issue = await run_command(gateway, args)

        assert issue.number == 42
        assert to_jsonable(issue)["is_pull_request"] is False

    def test_to_jsonable_lists(self) -> None:
        """Test converting a list of records."""
        labels = [Label.model_validate(label_payload())]

        assert to_jsonable(labels)[0]["name"] == "bug"
        assert to_jsonable(None) is None
