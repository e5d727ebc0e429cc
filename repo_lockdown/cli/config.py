"""CLI command for validating a policy file."""

from datetime import datetime
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..github_client.models import ItemType
from ..github_client.search import format_github_timestamp
from ..policy.config import ConfigResolver, PolicyError, load_policy_file
from .options import REQUIRED_CONFIG_OPTION

console = Console()

OPTION_NAMES = {
    "skip_created_before": "skipCreatedBefore",
    "exempt_labels": "exemptLabels",
    "comment": "comment",
    "label": "label",
    "close": "close",
    "lock": "lock",
}


def _format_value(value: Any) -> str:
    if value is None:
        return "[dim]disabled[/dim]"
    if isinstance(value, tuple):
        return escape(", ".join(value)) if value else "[dim]none[/dim]"
    if isinstance(value, datetime):
        return format_github_timestamp(value)
    return escape(str(value))


def check_config(config: Path = REQUIRED_CONFIG_OPTION) -> None:
    """Validate a policy file and show the effective settings per type."""
    try:
        policy = load_policy_file(config)
    except PolicyError as e:
        console.print(f"❌ [red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    resolver = ConfigResolver(policy)
    item_types = [policy.only] if policy.only else list(ItemType)

    table = Table(title=f"Effective policy: {config}")
    table.add_column("Option", style="cyan")
    for item_type in item_types:
        table.add_column(item_type.value, style="green")

    for key, name in OPTION_NAMES.items():
        table.add_row(
            name,
            *(_format_value(resolver.resolve(t, key)) for t in item_types),
        )

    console.print(table)
    console.print("✅ [green]Policy is valid[/green]")
