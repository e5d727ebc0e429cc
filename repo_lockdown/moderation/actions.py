"""Comment, label, close and lock actions applied to a single item."""

import logging
from typing import TYPE_CHECKING

from ..github_client.models import Item, ItemType, LockState
from ..policy.config import ConfigResolver
from .locking import LockTransitionManager

if TYPE_CHECKING:
    from ..github_client.client import GitHubClient

logger = logging.getLogger(__name__)


class ActionApplier:
    """Applies the policy's actions to an item in a fixed order.

    Order is comment, label, close, lock: writes happen while the item is
    still open and unlocked.
    """

    def __init__(
        self,
        client: "GitHubClient",
        resolver: ConfigResolver,
        locks: LockTransitionManager,
    ):
        self.client = client
        self.resolver = resolver
        self.locks = locks

    def is_enabled(self, item_type: ItemType) -> bool:
        """Comments and labels alone never trigger moderation."""
        return bool(
            self.resolver.resolve(item_type, "close")
            or self.resolver.resolve(item_type, "lock")
        )

    def should_moderate_new(self, item: Item, item_type: ItemType) -> bool:
        """Guards for a freshly opened item."""
        only = self.resolver.policy.only
        if only and only is not item_type:
            return False

        if not self.is_enabled(item_type):
            return False

        skip_created_before = self.resolver.resolve(item_type, "skip_created_before")
        if skip_created_before and item.created_at < skip_created_before:
            return False

        exempt_labels = self.resolver.resolve(item_type, "exempt_labels") or ()
        return not any(label in item.labels for label in exempt_labels)

    async def apply(self, item: Item, item_type: ItemType, new: bool = False) -> None:
        """Moderate one item.

        Args:
            item: Item to moderate
            item_type: Whether the item is an issue or a pull request
            new: True for a just-opened item from a webhook, False for sweep
                candidates
        """
        if new:
            if self.should_moderate_new(item, item_type):
                await self._apply_new(item, item_type)
        elif self.is_enabled(item_type):
            await self._apply_existing(item, item_type)

    async def _apply_new(self, item: Item, item_type: ItemType) -> None:
        comment = self.resolver.resolve(item_type, "comment")
        label = self.resolver.resolve(item_type, "label")

        if comment:
            await self._comment(item, comment)
        if label:
            await self._label(item, label)
        if self.resolver.resolve(item_type, "close"):
            await self._close(item)
        if self.resolver.resolve(item_type, "lock"):
            await self._lock(item)

    async def _apply_existing(self, item: Item, item_type: ItemType) -> None:
        comment = self.resolver.resolve(item_type, "comment")
        label = self.resolver.resolve(item_type, "label")
        close = self.resolver.resolve(item_type, "close")

        # Locked items reject comments and labels
        if item.locked and (comment or label):
            lock_state = LockState.of(item)
        else:
            lock_state = LockState.unlocked()

        async with self.locks.unlocked(item, lock_state):
            if comment:
                await self._comment(item, comment)
            if label:
                await self._label(item, label)
            if close and item.is_open:
                await self._close(item)

        if self.resolver.resolve(item_type, "lock") and not item.locked:
            await self._lock(item)

    async def _comment(self, item: Item, body: str) -> None:
        logger.info(
            "Commenting on %s", item.ref, extra={"issue": item.ref, "action": "comment"}
        )
        await self.client.create_comment(item.org, item.repo, item.number, body)

    async def _label(self, item: Item, label: str) -> None:
        logger.info(
            "Labeling %s", item.ref, extra={"issue": item.ref, "action": "label"}
        )
        await self.client.add_labels(item.org, item.repo, item.number, [label])

    async def _close(self, item: Item) -> None:
        logger.info("Closing %s", item.ref, extra={"issue": item.ref, "action": "close"})
        await self.client.close_item(item.org, item.repo, item.number)

    async def _lock(self, item: Item) -> None:
        logger.info("Locking %s", item.ref, extra={"issue": item.ref, "action": "lock"})
        await self.client.lock_item(item.org, item.repo, item.number)
