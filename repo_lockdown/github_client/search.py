"""GitHub search functionality and query building."""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .models import Item, ItemType

if TYPE_CHECKING:
    from ..policy.config import ConfigResolver
    from .client import GitHubClient

logger = logging.getLogger(__name__)

OPEN_QUALIFIER = "is:open"
UNLOCKED_QUALIFIER = "is:unlocked"


def format_github_timestamp(value: datetime) -> str:
    """Encode a timestamp for a search qualifier, dropping fractional seconds.

    Example:
        >>> format_github_timestamp(datetime(2024, 1, 2, 3, 4, 5, 678000))
        '2024-01-02T03:04:05Z'
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def build_lockdown_query(
    org: str,
    repo: str,
    item_type: ItemType,
    skip_created_before: datetime | None = None,
    exempt_labels: Iterable[str] = (),
) -> str:
    """Build the search query shared by both sweep passes.

    The state or lock qualifier is appended by the caller.

    Args:
        org: Organization name
        repo: Repository name
        item_type: Restrict results to issues or pull requests
        skip_created_before: Only match items created strictly after this
        exempt_labels: Exclude items carrying any of these labels

    Returns:
        GitHub search query string

    Example:
        >>> build_lockdown_query("octo", "repo", ItemType.PULLS, None, ["keep"])
        'repo:octo/repo is:pr -label:"keep"'
    """
    query_parts = [f"repo:{org}/{repo}", item_type.search_qualifier]

    if skip_created_before:
        query_parts.append(f"created:>{format_github_timestamp(skip_created_before)}")

    for label in exempt_labels:
        query_parts.append(f'-label:"{label}"')

    return " ".join(query_parts)


def merge_candidates(primary: Sequence[Item], secondary: Sequence[Item]) -> list[Item]:
    """Concatenate two result lists, keeping the first item seen per number."""
    seen: set[int] = set()
    merged: list[Item] = []
    for item in [*primary, *secondary]:
        if item.number not in seen:
            seen.add(item.number)
            merged.append(item)
    return merged


class SearchPlanner:
    """Finds the existing items a sweep should moderate."""

    def __init__(
        self, client: "GitHubClient", org: str, repo: str, resolver: "ConfigResolver"
    ):
        """Initialize planner.

        Args:
            client: Authenticated GitHubClient instance
            org: Organization name
            repo: Repository name
            resolver: Per-type view of the policy
        """
        self.client = client
        self.org = org
        self.repo = repo
        self.resolver = resolver

    def build_query(self, item_type: ItemType) -> str:
        return build_lockdown_query(
            self.org,
            self.repo,
            item_type,
            skip_created_before=self.resolver.resolve(item_type, "skip_created_before"),
            exempt_labels=self.resolver.resolve(item_type, "exempt_labels") or (),
        )

    async def search(self, item_type: ItemType) -> list[Item]:
        """Return the deduplicated candidate set for one item type.

        Open items come first. When locking is enabled a second pass picks up
        unlocked items the first one missed; ``is:unlocked`` is undocumented,
        so hits that still report a lock are dropped.
        """
        query = self.build_query(item_type)
        logger.info(
            "Searching %s in %s/%s",
            item_type.value,
            self.org,
            self.repo,
            extra={"repository": f"{self.org}/{self.repo}", "action": "search"},
        )

        results = await self.client.search_items(
            self.org, self.repo, f"{query} {OPEN_QUALIFIER}", item_type
        )

        unlocked: list[Item] = []
        if self.resolver.resolve(item_type, "lock"):
            unlocked = [
                item
                for item in await self.client.search_items(
                    self.org, self.repo, f"{query} {UNLOCKED_QUALIFIER}", item_type
                )
                if not item.locked
            ]

        return merge_candidates(results, unlocked)
