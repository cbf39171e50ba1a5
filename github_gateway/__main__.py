#!/usr/bin/env python
# =============================================================================
# GitHub Gateway Runner
# =============================================================================
"""
Command line runner for the GitHub gateway.

Prints the requested resource as JSON. The token and cache backend come
from settings (environment or .env).

Usage:
    python -m github_gateway user
    python -m github_gateway issues acme widgets
    python -m github_gateway issue acme widgets 42
    python -m github_gateway project octocat 3
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from pydantic import BaseModel

from .cache import RedisCacheStore, create_cache_store
from .config import get_settings
from .gateway import GitHubGateway


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per read operation."""
    parser = argparse.ArgumentParser(
        prog="github-gateway",
        description="Fetch GitHub resources through the caching gateway",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("user", help="Authenticated user")
    commands.add_parser("repos", help="Authenticated user's repositories")

    for name, help_text in (
        ("issues", "Open issues"),
        ("milestones", "Open milestones"),
        ("labels", "Labels"),
        ("pulls", "Open pull requests"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("owner")
        sub.add_argument("repo")

    issue = commands.add_parser("issue", help="Single issue")
    issue.add_argument("owner")
    issue.add_argument("repo")
    issue.add_argument("number", type=int)

    project = commands.add_parser("project", help="User project (v2)")
    project.add_argument("owner")
    project.add_argument("number")

    return parser


async def run_command(gateway: GitHubGateway, args: argparse.Namespace) -> Any:
    """
    Dispatch a parsed command to the matching gateway operation.

    Args:
        gateway: Configured gateway.
        args: Parsed command line arguments.

    Returns:
        The operation's result.
    """
    if args.command == "user":
        return await gateway.get_user()
    if args.command == "repos":
        return await gateway.list_repositories()
    if args.command == "issues":
        return await gateway.list_issues(args.owner, args.repo)
    if args.command == "issue":
        return await gateway.get_issue(args.owner, args.repo, args.number)
    if args.command == "project":
        return await gateway.get_project(args.owner, args.number)
    if args.command == "milestones":
        return await gateway.list_milestones(args.owner, args.repo)
    if args.command == "labels":
        return await gateway.list_labels(args.owner, args.repo)
    if args.command == "pulls":
        return await gateway.list_pull_requests(args.owner, args.repo)
    raise ValueError(f"Unknown command: {args.command}")


def to_jsonable(result: Any) -> Any:
    """Convert records (or lists of records) to JSON-compatible data."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


async def main_async(args: argparse.Namespace) -> int:
    """Run one command and print its JSON output."""
    settings = get_settings()
    cache = await create_cache_store(settings)
    try:
        async with GitHubGateway.from_settings(cache, settings) as gateway:
            result = await run_command(gateway, args)
    finally:
        if isinstance(cache, RedisCacheStore):
            await cache.close()

    print(json.dumps(to_jsonable(result), indent=2))
    return 0 if result not in (None, []) else 1


def main() -> None:
    """
    Main entry point that configures logging and runs the command.
    """
    args = build_parser().parse_args()
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    if not settings.github_is_configured:
        logging.getLogger(__name__).warning("GITHUB_TOKEN not configured")

    sys.exit(asyncio.run(main_async(args)))


if __name__ == "__main__":
    main()
