"""GitHub client package for API interaction."""

from .client import GitHubClient
from .models import Item, ItemType, LockState
from .search import SearchPlanner, build_lockdown_query, merge_candidates

__all__ = [
    "GitHubClient",
    "Item",
    "ItemType",
    "LockState",
    "SearchPlanner",
    "build_lockdown_query",
    "merge_candidates",
]
