"""Creates pull requests and merges them once their checks pass."""

import asyncio
from enum import Enum
from typing import Any

import structlog

from release_ops_manager.github.abc import GitHubClientBase
from release_ops_manager.release.exceptions import PullRequestMergeError

logger = structlog.get_logger(__name__)


class PullRequestStatus(str, Enum):
    """Outcome of waiting for the checks of a pull request."""

    SUCCESS = "success"
    NO_CHECK_DEFINED = "no_check_defined"
    TIMEOUT = "timeout"


class StatusCheck:
    """Polls the combined commit status of a ref until the checks complete."""

    def __init__(self, client: GitHubClientBase, max_retries: int = 20, delay: float = 10.0) -> None:
        """Initialize the check.

        Args:
            client: GitHub client bound to the repository.
            max_retries: How many times a pending status is polled again.
            delay: Seconds between two polls.
        """
        self.client = client
        self.max_retries = max_retries
        self.delay = delay

    async def wait_for_checks(self, ref: str) -> PullRequestStatus:
        """Wait until every check of the ref succeeded.

        Raises:
            PullRequestMergeError: If a check failed.
        """
        for attempt in range(self.max_retries + 1):
            status = await self.client.get_combined_status(ref)
            if not status.statuses:
                return PullRequestStatus.NO_CHECK_DEFINED
            if status.state == "success":
                return PullRequestStatus.SUCCESS
            if status.state in ("failure", "error"):
                failed = [s.context for s in status.statuses if s.state in ("failure", "error")]
                raise PullRequestMergeError(f"Checks of {ref} failed: {', '.join(failed)}")
            logger.info("Checks still pending", ref=ref, attempt=attempt + 1, max_retries=self.max_retries)
            if attempt < self.max_retries:
                await asyncio.sleep(self.delay)
        return PullRequestStatus.TIMEOUT


async def create_pull_request(
    client: GitHubClientBase,
    title: str,
    head: str,
    base: str,
    body: str | None = None,
    dry_run: bool = False,
) -> Any:
    """Create a pull request, or only log it in dry run mode."""
    if dry_run:
        logger.info("Skipping pull request creation due to dry run", title=title, head=head, base=base)
        return None
    logger.info("Creating pull request", title=title, head=head, base=base)
    pull_request = await client.create_pull_request(title=title, head=head, base=base, body=body, maintainer_can_modify=True)
    logger.info("Created pull request", number=pull_request.number, url=pull_request.html_url)
    return pull_request


async def merge_pull_request(
    client: GitHubClientBase,
    pull_number: int,
    status_check: StatusCheck | None = None,
    dry_run: bool = False,
) -> bool:
    """Merge the pull request once all its checks passed.

    Returns:
        Whether the pull request was merged. Pull requests without any check are never merged.

    Raises:
        PullRequestMergeError: If a check failed or the checks did not complete in time.
    """
    if dry_run:
        logger.info("Skipping pull request merging due to dry run", pull_number=pull_number)
        return False
    status_check = status_check or StatusCheck(client)
    pull_request = await client.get_pull_request(pull_number)
    logger.info("Waiting for checks of pull request", pull_number=pull_number, base=pull_request.base.ref, head=pull_request.head.ref)

    status = await status_check.wait_for_checks(pull_request.head.sha)
    if status is PullRequestStatus.TIMEOUT:
        raise PullRequestMergeError(f"Too many retries while waiting for the checks of pull request #{pull_number}. Merge aborted.")
    if status is PullRequestStatus.NO_CHECK_DEFINED:
        logger.error("No checks defined in pull request, merge aborted", pull_number=pull_number)
        return False

    logger.info("All checks passed, merging pull request", pull_number=pull_number)
    await client.merge_pull_request(pull_number, merge_method="merge")
    return True
