"""CLI commands that moderate a repository."""

import asyncio
import os
from pathlib import Path

import typer
from github.GithubException import GithubException
from rich.console import Console
from rich.markup import escape

from ..events import ThreadEvent, load_thread_event
from ..github_client.client import GitHubClient
from ..moderation.engine import PolicyEngine, SweepError
from ..policy.config import CONFIG_FILE_PATH, Policy, load_policy, load_policy_file
from ..utils.log_setup import setup_logging
from .options import (
    CONFIG_OPTION,
    EVENT_PATH_OPTION,
    ORG_OPTION,
    REPO_OPTION,
    TOKEN_OPTION,
    VERBOSE_OPTION,
)

console = Console()


def _resolve_repository(org: str | None, repo: str | None) -> tuple[str, str]:
    """Use --org/--repo, or fall back to GITHUB_REPOSITORY (``owner/name``)."""
    if org and repo:
        return org, repo
    if org or repo:
        raise ValueError("--org and --repo must be given together")

    full_name = os.getenv("GITHUB_REPOSITORY")
    if not full_name:
        raise ValueError("--org and --repo or GITHUB_REPOSITORY are required")

    owner, _, name = full_name.partition("/")
    if not owner or not name or "/" in name:
        raise ValueError(f"GITHUB_REPOSITORY must be 'owner/name', got '{full_name}'")
    return owner, name


async def _load_policy(
    client: GitHubClient, org: str, repo: str, config: Path | None
) -> Policy | None:
    """Load the policy from a local file, or from the repository itself."""
    if config is not None:
        return load_policy_file(config)

    text = await client.get_config_file(org, repo, CONFIG_FILE_PATH)
    if text is None:
        return None
    return load_policy(text)


async def _sweep(client: GitHubClient, org: str, repo: str, config: Path | None) -> None:
    policy = await _load_policy(client, org, repo, config)
    if policy is None:
        console.print(
            f"⚠️  [yellow]No {CONFIG_FILE_PATH} in {org}/{repo}, nothing to do[/yellow]"
        )
        return

    await PolicyEngine(client, org, repo, policy).process_backlog()
    console.print(f"✅ [green]Sweep of {org}/{repo} complete[/green]")


async def _handle(client: GitHubClient, event: ThreadEvent, config: Path | None) -> None:
    org, repo = event.item.org, event.item.repo
    policy = await _load_policy(client, org, repo, config)
    if policy is None:
        console.print(
            f"⚠️  [yellow]No {CONFIG_FILE_PATH} in {org}/{repo}, nothing to do[/yellow]"
        )
        return

    await PolicyEngine(client, org, repo, policy).process_new_thread(event)
    console.print(f"✅ [green]Processed {event.item.ref}[/green]")


def sweep(
    org: str | None = ORG_OPTION,
    repo: str | None = REPO_OPTION,
    config: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Close and lock existing issues and pull requests matching the policy.

    Only the 30 most recently updated matches per type are handled in one
    run; schedule the command (e.g. hourly) to work through a backlog.

    Examples:
        repo-lockdown sweep --org myorg --repo myrepo
        repo-lockdown sweep --org myorg --repo myrepo --config lockdown.yml

        # In a scheduled GitHub Actions workflow
        repo-lockdown sweep
    """
    setup_logging(verbose)
    try:
        org, repo = _resolve_repository(org, repo)
        client = GitHubClient(token=token)
        asyncio.run(_sweep(client, org, repo, config))
    except (ValueError, SweepError, GithubException) as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def handle_event(
    event_path: Path | None = EVENT_PATH_OPTION,
    config: Path | None = CONFIG_OPTION,
    token: str | None = TOKEN_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Moderate a newly opened issue or pull request from a webhook payload.

    Examples:
        # In a GitHub Actions workflow triggered by issues/pull_request_target
        repo-lockdown handle-event

        repo-lockdown handle-event --event-path payload.json --config lockdown.yml
    """
    setup_logging(verbose)
    if event_path is None:
        console.print(
            "❌ [red]Error: --event-path or GITHUB_EVENT_PATH is required[/red]"
        )
        raise typer.Exit(1)

    try:
        event = load_thread_event(event_path)
        if not event.is_new_thread:
            console.print(
                f"[blue]Ignoring '{event.action}' event for {event.item.ref}[/blue]"
            )
            return

        client = GitHubClient(token=token)
        asyncio.run(_handle(client, event, config))
    except (ValueError, GithubException) as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
