"""Temporary unlocking of locked conversations."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, TypeVar

from ..github_client.models import Item, LockState

if TYPE_CHECKING:
    from ..github_client.client import GitHubClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LockTransitionManager:
    """Unlocks an item around writes that a lock would reject.

    The item always ends in the lock state it started in, with the original
    lock reason, including when the wrapped action fails.
    """

    def __init__(self, client: "GitHubClient"):
        self.client = client

    async def resolve_reason(self, item: Item, lock_state: LockState) -> LockState:
        """Fetch the lock reason unless it is already known."""
        if lock_state.reason_known:
            return lock_state
        detail = await self.client.get_item(item.org, item.repo, item.number)
        return lock_state.with_reason(detail.lock_reason)

    @asynccontextmanager
    async def unlocked(
        self, item: Item, lock_state: LockState
    ) -> AsyncIterator[LockState]:
        """Keep ``item`` unlocked for the duration of the block.

        Yields the lock state with its reason resolved (when locked).
        """
        if not lock_state.active:
            yield lock_state
            return

        lock_state = await self.resolve_reason(item, lock_state)

        logger.info(
            "Unlocking %s",
            item.ref,
            extra={"issue": item.ref, "action": "unlock"},
        )
        await self.client.unlock_item(item.org, item.repo, item.number)
        try:
            yield lock_state
        finally:
            logger.info(
                "Relocking %s",
                item.ref,
                extra={
                    "issue": item.ref,
                    "action": "relock",
                    "lock_reason": lock_state.reason,
                },
            )
            await self.client.lock_item(
                item.org, item.repo, item.number, reason=lock_state.reason
            )

    async def with_unlock(
        self, item: Item, lock_state: LockState, action: Callable[[], Awaitable[T]]
    ) -> T:
        """Run ``action`` while the item is unlocked and return its result."""
        async with self.unlocked(item, lock_state):
            return await action()
