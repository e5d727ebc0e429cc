"""Entry points for reactive and sweep moderation."""

import logging
from typing import TYPE_CHECKING

from ..events import ThreadEvent
from ..github_client.models import ItemType
from ..github_client.search import SearchPlanner
from ..policy.config import ConfigResolver, Policy
from .actions import ActionApplier
from .locking import LockTransitionManager

if TYPE_CHECKING:
    from ..github_client.client import GitHubClient

logger = logging.getLogger(__name__)


class SweepError(RuntimeError):
    """Raised after a sweep in which at least one item type failed."""

    def __init__(self, failed: dict[ItemType, Exception]):
        self.failed = failed
        details = ", ".join(f"{t.value}: {e}" for t, e in failed.items())
        super().__init__(f"Sweep failed for {details}")


class PolicyEngine:
    """Moderates one repository according to a policy."""

    def __init__(self, client: "GitHubClient", org: str, repo: str, policy: Policy):
        """Initialize engine.

        Args:
            client: Authenticated GitHubClient instance
            org: Organization name
            repo: Repository name
            policy: Validated policy for this run
        """
        self.org = org
        self.repo = repo
        self.policy = policy
        self.resolver = ConfigResolver(policy)
        self.locks = LockTransitionManager(client)
        self.searcher = SearchPlanner(client, org, repo, self.resolver)
        self.actions = ActionApplier(client, self.resolver, self.locks)

    async def process_new_thread(self, event: ThreadEvent) -> None:
        """Moderate an issue or pull request that was just opened."""
        await self.actions.apply(event.item, event.item_type, new=True)

    async def process_backlog(self) -> None:
        """Sweep existing items, issues before pull requests.

        Raises:
            SweepError: If any item type could not be swept; the other types
                are still processed first
        """
        only = self.policy.only
        item_types = [only] if only else [ItemType.ISSUES, ItemType.PULLS]

        failed: dict[ItemType, Exception] = {}
        for item_type in item_types:
            try:
                await self.backlog(item_type)
            except Exception as e:
                logger.exception(
                    "Sweep of %s in %s/%s failed", item_type.value, self.org, self.repo
                )
                failed[item_type] = e

        if failed:
            raise SweepError(failed)

    async def backlog(self, item_type: ItemType) -> None:
        """Sweep one item type; failures propagate."""
        if not self.actions.is_enabled(item_type):
            return

        for item in await self.searcher.search(item_type):
            await self.actions.apply(item, item_type)
