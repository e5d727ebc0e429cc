"""Standardized CLI option definitions for consistent shorthand mappings."""

import typer

ORG_OPTION = typer.Option(
    None,
    "--org",
    "-o",
    help="GitHub organization name (defaults to owner in GITHUB_REPOSITORY)",
)

REPO_OPTION = typer.Option(
    None,
    "--repo",
    "-r",
    help="GitHub repository name (defaults to name in GITHUB_REPOSITORY)",
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Local policy file (defaults to .github/lockdown.yml in the repository)",
)

REQUIRED_CONFIG_OPTION = typer.Option(..., "--config", "-c", help="Policy file")

EVENT_PATH_OPTION = typer.Option(
    None,
    "--event-path",
    "-e",
    envvar="GITHUB_EVENT_PATH",
    help="Webhook payload file (defaults to GITHUB_EVENT_PATH)",
)

TOKEN_OPTION = typer.Option(
    None, "--token", "-t", help="GitHub API token (defaults to GITHUB_TOKEN env var)"
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
