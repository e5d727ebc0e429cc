"""Pydantic models for the issues and pull requests being moderated.

These models carry the subset of GitHub's REST API issue object that the
moderation engine needs.
API Reference: https://docs.github.com/en/rest/issues/issues
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemType(str, Enum):
    """Kind of thread an item belongs to."""

    ISSUES = "issues"
    PULLS = "pulls"

    @property
    def search_qualifier(self) -> str:
        """Search qualifier restricting results to this kind."""
        return "is:issue" if self is ItemType.ISSUES else "is:pr"


class Item(BaseModel):
    """An issue or pull request in a repository.

    Identity is (org, repo, number). The lock reason is only trustworthy when
    ``lock_reason_known`` is set, search hits leave it unknown.
    """

    model_config = ConfigDict(frozen=True)

    org: str = Field(..., description="Repository owner (string)")
    repo: str = Field(..., description="Repository name (string)")
    number: int = Field(..., description="Issue number within the repository")
    created_at: datetime = Field(
        ..., description="Timestamp of item creation (ISO 8601)"
    )
    state: str = Field("open", description="Current state: 'open', 'closed'")
    labels: tuple[str, ...] = Field(
        default_factory=tuple, description="Names of labels attached to the item"
    )
    locked: bool = Field(False, description="Whether the conversation is locked")
    lock_reason: str | None = Field(
        None, description="Active lock reason, e.g. 'off-topic' or 'spam'"
    )
    lock_reason_known: bool = Field(
        False, description="Whether lock_reason was read from the item detail"
    )

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def ref(self) -> str:
        """Human readable reference, e.g. ``octo/repo#12``."""
        return f"{self.org}/{self.repo}#{self.number}"

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @classmethod
    def from_payload(cls, org: str, repo: str, data: dict[str, Any]) -> "Item":
        """Build an item from a webhook or REST issue/pull request object.

        Raises:
            ValueError: If the object lacks its number or creation time, or
                a label has no name
        """
        try:
            number = data["number"]
            created_at = data["created_at"]
            labels = tuple(label["name"] for label in data.get("labels") or [])
        except KeyError as e:
            raise ValueError(f"Item payload is missing {e}") from e
        except TypeError as e:
            raise ValueError(f"Item payload is malformed: {e}") from e

        return cls(
            org=org,
            repo=repo,
            number=number,
            created_at=created_at,
            state=data.get("state", "open"),
            labels=labels,
            locked=data.get("locked", False),
            lock_reason=data.get("active_lock_reason"),
            lock_reason_known="active_lock_reason" in data,
        )


class LockState(BaseModel):
    """Lock status of an item captured before an unlock/relock cycle.

    ``reason`` is only meaningful once ``reason_known`` is true; resolving it
    yields a new value instead of mutating this one.
    """

    model_config = ConfigDict(frozen=True)

    active: bool
    reason: str | None = None
    reason_known: bool = False

    @classmethod
    def unlocked(cls) -> "LockState":
        return cls(active=False, reason_known=True)

    @classmethod
    def of(cls, item: Item) -> "LockState":
        """Capture the lock state an item was found in."""
        return cls(
            active=item.locked,
            reason=item.lock_reason,
            reason_known=item.lock_reason_known,
        )

    def with_reason(self, reason: str | None) -> "LockState":
        return self.model_copy(update={"reason": reason, "reason_known": True})
