"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from repo_lockdown.github_client.client import GitHubClient
from repo_lockdown.github_client.models import Item


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Factory for items in octo/repo with sensible defaults."""

    def _make(number: int = 1, **overrides: Any) -> Item:
        values: dict[str, Any] = {
            "org": "octo",
            "repo": "repo",
            "number": number,
            "created_at": datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
            "state": "open",
            "labels": (),
            "locked": False,
        }
        values.update(overrides)
        return Item(**values)

    return _make


@pytest.fixture
def mock_client() -> AsyncMock:
    """GitHub client whose calls are recorded in order on ``mock_calls``."""
    return AsyncMock(spec=GitHubClient)


@pytest.fixture
def call_names() -> Callable[[AsyncMock], list[str]]:
    """Names of the client methods called, in order."""

    def _names(client: AsyncMock) -> list[str]:
        return [name for name, _args, _kwargs in client.mock_calls]

    return _names
