"""Moderation policy loaded from ``.github/lockdown.yml``."""

from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..github_client.models import ItemType

CONFIG_FILE_PATH = ".github/lockdown.yml"


class PolicyError(ValueError):
    """Raised when a policy file cannot be parsed or validated."""


def _disabled_to_none(value: Any) -> Any:
    return None if value is False else value


class PolicyOverrides(BaseModel):
    """Options that may be set per item type.

    Only keys present in the file count; ``model_fields_set`` tells an
    explicit ``false`` apart from an absent key.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    skip_created_before: datetime | None = Field(
        None,
        alias="skipCreatedBefore",
        description="Skip items created before this timestamp",
    )
    exempt_labels: tuple[str, ...] = Field(
        (), alias="exemptLabels", description="Items with these labels are ignored"
    )
    comment: str | None = Field(None, description="Comment to post before acting")
    label: str | None = Field(None, description="Label to add before acting")
    close: bool = Field(False, description="Close matching items")
    lock: bool = Field(False, description="Lock matching items")

    @field_validator("comment", "label", mode="before")
    @classmethod
    def _text_or_disabled(cls, value: Any) -> Any:
        return _disabled_to_none(value)

    @field_validator("exempt_labels", mode="before")
    @classmethod
    def _labels_or_disabled(cls, value: Any) -> Any:
        if value is False or value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("skip_created_before", mode="before")
    @classmethod
    def _timestamp_or_disabled(cls, value: Any) -> Any:
        value = _disabled_to_none(value)
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time(), tzinfo=timezone.utc)
        return value

    @field_validator("skip_created_before")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Policy(PolicyOverrides):
    """Complete policy: defaults plus optional ``issues``/``pulls`` overlays."""

    close: bool = Field(True, description="Close matching items")
    lock: bool = Field(True, description="Lock matching items")
    only: ItemType | None = Field(
        None, description="Limit processing to 'issues' or 'pulls'"
    )
    issues: PolicyOverrides | None = Field(None, description="Issue-only settings")
    pulls: PolicyOverrides | None = Field(
        None, description="Pull request-only settings"
    )

    @field_validator("only", mode="before")
    @classmethod
    def _only_or_disabled(cls, value: Any) -> Any:
        return _disabled_to_none(value)

    def overrides_for(self, item_type: ItemType) -> PolicyOverrides | None:
        return self.issues if item_type is ItemType.ISSUES else self.pulls


def load_policy(text: str) -> Policy:
    """Parse and validate a YAML policy document.

    Raises:
        PolicyError: If the document is not valid YAML or not a valid policy
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PolicyError(f"Invalid YAML in policy: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PolicyError("Policy must be a mapping of option names to values")

    try:
        return Policy.model_validate(data)
    except ValidationError as e:
        raise PolicyError(f"Invalid policy: {e}") from e


def load_policy_file(path: Path) -> Policy:
    """Load a policy from a local YAML file."""
    if not path.exists():
        raise PolicyError(f"Policy file {path} does not exist")
    return load_policy(path.read_text(encoding="utf-8"))


class ConfigResolver:
    """Resolves the effective value of an option for one item type."""

    def __init__(self, policy: Policy):
        self.policy = policy

    def resolve(self, item_type: ItemType, key: str) -> Any:
        """Return the type-specific value when set, else the default.

        Unknown keys resolve to None, which callers treat as disabled.
        """
        overrides = self.policy.overrides_for(item_type)
        if overrides is not None and key in overrides.model_fields_set:
            return getattr(overrides, key)
        return getattr(self.policy, key, None)
