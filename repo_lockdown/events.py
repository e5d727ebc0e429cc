"""Webhook payload ingestion for newly opened threads."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from .github_client.models import Item, ItemType

NEW_THREAD_ACTIONS = frozenset({"opened"})


class ThreadEvent(BaseModel):
    """An issue or pull request event, with its type decided at ingestion."""

    model_config = ConfigDict(frozen=True)

    item_type: ItemType
    action: str | None = None
    item: Item

    @property
    def is_new_thread(self) -> bool:
        return self.action in NEW_THREAD_ACTIONS


def parse_thread_event(payload: dict[str, Any]) -> ThreadEvent:
    """Build a ThreadEvent from an ``issues`` or ``pull_request`` payload.

    Raises:
        ValueError: If the payload carries neither an issue nor a pull request
    """
    if "issue" in payload:
        item_type, data = ItemType.ISSUES, payload["issue"]
    elif "pull_request" in payload:
        item_type, data = ItemType.PULLS, payload["pull_request"]
    else:
        raise ValueError("Event payload has no issue or pull request")

    try:
        repository = payload["repository"]
        org = repository["owner"]["login"]
        repo = repository["name"]
    except (KeyError, TypeError) as e:
        raise ValueError("Event payload has no repository") from e

    return ThreadEvent(
        item_type=item_type,
        action=payload.get("action"),
        item=Item.from_payload(org, repo, data),
    )


def load_thread_event(path: Path) -> ThreadEvent:
    """Read a webhook payload file, e.g. the one at GITHUB_EVENT_PATH."""
    if not path.exists():
        raise ValueError(f"Event file {path} does not exist")
    with open(path) as f:
        return parse_thread_event(json.load(f))
