"""GitHub API client using PyGitHub."""

import asyncio
import logging
import os
import time
from collections.abc import Callable
from typing import TypeVar

from github import Auth, Github
from github.GithubException import RateLimitExceededException, UnknownObjectException
from github.Issue import Issue
from github.Repository import Repository

from .models import Item, ItemType

logger = logging.getLogger(__name__)

# The sweep only ever looks at the first page of search results.
SEARCH_PAGE_SIZE = 30

T = TypeVar("T")


class GitHubClient:
    """Async facade over PyGitHub with rate limiting and authentication.

    PyGitHub is blocking, so each operation runs in a worker thread and is
    awaited by the caller.
    """

    def __init__(self, token: str | None = None):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(auth=Auth.Token(self.token), per_page=SEARCH_PAGE_SIZE)

    def _check_rate_limit(self) -> None:
        """Check rate limit and sleep if necessary."""
        try:
            rate_limit = self.github.get_rate_limit()
            remaining = rate_limit.rate.remaining
            logger.debug("GitHub API rate limit: %s requests remaining", remaining)

            if remaining < 10:
                reset_time = rate_limit.rate.reset.timestamp()
                sleep_time = reset_time - time.time() + 1
                logger.warning(
                    "Rate limit low, sleeping for %.1f seconds...", sleep_time
                )
                time.sleep(sleep_time)

        except Exception as e:
            # The check is advisory; the call itself still handles rate limits
            logger.debug("Could not check rate limit: %s", e)

    def _call(self, what: str, operation: Callable[[], T]) -> T:
        """Run a blocking API operation, waiting once if rate limited."""
        self._check_rate_limit()
        try:
            return operation()
        except RateLimitExceededException:
            logger.warning("Rate limit exceeded during %s, waiting...", what)
            time.sleep(60)
            return operation()

    def _convert_issue(
        self, org: str, repo: str, github_issue: Issue, detailed: bool
    ) -> Item:
        """Convert PyGitHub issue to our model.

        Search hits are converted without touching ``active_lock_reason``,
        which PyGitHub would otherwise complete with an extra request.
        """
        return Item(
            org=org,
            repo=repo,
            number=github_issue.number,
            created_at=github_issue.created_at,
            state=github_issue.state,
            labels=tuple(label.name for label in github_issue.labels),
            locked=bool(github_issue.locked),
            lock_reason=github_issue.active_lock_reason if detailed else None,
            lock_reason_known=detailed,
        )

    def get_repository(self, org: str, repo: str) -> Repository:
        """Get repository object."""
        try:
            return self.github.get_repo(f"{org}/{repo}")
        except UnknownObjectException:
            raise ValueError(f"Repository {org}/{repo} not found")

    def _get_issue(self, org: str, repo: str, issue_number: int) -> Issue:
        repository = self.get_repository(org, repo)
        try:
            return repository.get_issue(issue_number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {org}/{repo}")

    def _search(self, org: str, repo: str, query: str) -> list[Item]:
        results = self.github.search_issues(query, sort="updated", order="desc")
        return [
            self._convert_issue(org, repo, github_issue, detailed=False)
            for github_issue in results.get_page(0)[:SEARCH_PAGE_SIZE]
        ]

    async def search_items(
        self, org: str, repo: str, query: str, item_type: ItemType
    ) -> list[Item]:
        """Fetch the first page of a search, most recently updated first.

        Args:
            org: Organization name
            repo: Repository name
            query: Complete search query string
            item_type: Kind of item the query is restricted to

        Returns:
            List of Item objects, at most SEARCH_PAGE_SIZE long
        """
        logger.debug("Searching %s with query: %s", item_type.value, query)
        return await asyncio.to_thread(
            self._call, "search", lambda: self._search(org, repo, query)
        )

    async def get_item(self, org: str, repo: str, issue_number: int) -> Item:
        """Get a specific issue or pull request, including its lock reason."""

        def fetch() -> Item:
            github_issue = self._get_issue(org, repo, issue_number)
            return self._convert_issue(org, repo, github_issue, detailed=True)

        return await asyncio.to_thread(self._call, "item fetch", fetch)

    async def create_comment(
        self, org: str, repo: str, issue_number: int, body: str
    ) -> None:
        """Add a comment to an issue or pull request."""
        await asyncio.to_thread(
            self._call,
            "comment creation",
            lambda: self._get_issue(org, repo, issue_number).create_comment(body),
        )

    async def add_labels(
        self, org: str, repo: str, issue_number: int, labels: list[str]
    ) -> None:
        """Add labels, keeping the ones already attached."""
        await asyncio.to_thread(
            self._call,
            "label update",
            lambda: self._get_issue(org, repo, issue_number).add_to_labels(*labels),
        )

    async def close_item(self, org: str, repo: str, issue_number: int) -> None:
        await asyncio.to_thread(
            self._call,
            "state update",
            lambda: self._get_issue(org, repo, issue_number).edit(state="closed"),
        )

    async def lock_item(
        self, org: str, repo: str, issue_number: int, reason: str | None = None
    ) -> None:
        """Lock the conversation, optionally recording a lock reason."""

        def lock() -> None:
            github_issue = self._get_issue(org, repo, issue_number)
            if reason:
                github_issue.lock(reason)
            else:
                # Issue.lock() insists on a reason; the endpoint does not
                self.github.requester.requestJsonAndCheck(
                    "PUT", f"{github_issue.url}/lock"
                )

        await asyncio.to_thread(self._call, "lock", lock)

    async def unlock_item(self, org: str, repo: str, issue_number: int) -> None:
        await asyncio.to_thread(
            self._call,
            "unlock",
            lambda: self._get_issue(org, repo, issue_number).unlock(),
        )

    async def get_config_file(self, org: str, repo: str, path: str) -> str | None:
        """Read a text file from the default branch.

        Returns:
            Decoded file content, or None when the file does not exist
        """

        def read() -> str | None:
            repository = self.get_repository(org, repo)
            try:
                contents = repository.get_contents(path)
            except UnknownObjectException:
                return None
            if isinstance(contents, list):
                raise ValueError(f"{path} in {org}/{repo} is a directory")
            return contents.decoded_content.decode("utf-8")

        return await asyncio.to_thread(self._call, "config fetch", read)
