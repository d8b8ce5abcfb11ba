"""Unit tests for creating and merging pull requests."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from release_ops_manager.release.exceptions import PullRequestMergeError
from release_ops_manager.release.pull_requests import PullRequestStatus, StatusCheck, create_pull_request, merge_pull_request


def combined_status(state: str, *statuses: tuple[str, str]) -> SimpleNamespace:
    """A combined commit status with (context, state) entries."""
    return SimpleNamespace(state=state, statuses=[SimpleNamespace(context=c, state=s) for c, s in statuses])


def pull_request() -> SimpleNamespace:
    """A pull request as returned by the GitHub API."""
    return SimpleNamespace(number=7, base=SimpleNamespace(ref="master"), head=SimpleNamespace(ref="bump", sha="abc123"))


@pytest.mark.asyncio
async def test_wait_for_checks_success_after_pending() -> None:
    """Test that pending checks are polled again until they succeed."""
    client = MagicMock()
    client.get_combined_status = AsyncMock(side_effect=[combined_status("pending", ("ci", "pending")), combined_status("success", ("ci", "success"))])

    with patch("release_ops_manager.release.pull_requests.asyncio.sleep", new=AsyncMock()) as sleep:
        status = await StatusCheck(client, max_retries=3, delay=5).wait_for_checks("abc123")

    assert status is PullRequestStatus.SUCCESS
    sleep.assert_awaited_once_with(5)


@pytest.mark.asyncio
async def test_wait_for_checks_without_checks() -> None:
    """Test that a ref without any status reports that no check is defined."""
    client = MagicMock()
    client.get_combined_status = AsyncMock(return_value=combined_status("pending"))

    assert await StatusCheck(client).wait_for_checks("abc123") is PullRequestStatus.NO_CHECK_DEFINED


@pytest.mark.asyncio
async def test_wait_for_checks_failure_names_failed_checks() -> None:
    """Test that a failed check aborts waiting."""
    client = MagicMock()
    client.get_combined_status = AsyncMock(return_value=combined_status("failure", ("travis", "failure"), ("codecov", "success")))

    with pytest.raises(PullRequestMergeError, match="travis"):
        await StatusCheck(client).wait_for_checks("abc123")


@pytest.mark.asyncio
async def test_wait_for_checks_timeout() -> None:
    """Test that checks pending for too long time out."""
    client = MagicMock()
    client.get_combined_status = AsyncMock(return_value=combined_status("pending", ("ci", "pending")))

    with patch("release_ops_manager.release.pull_requests.asyncio.sleep", new=AsyncMock()) as sleep:
        status = await StatusCheck(client, max_retries=2, delay=1).wait_for_checks("abc123")

    assert status is PullRequestStatus.TIMEOUT
    assert client.get_combined_status.await_count == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_create_pull_request() -> None:
    """Test that maintainers may modify the created pull request."""
    client = MagicMock()
    client.create_pull_request = AsyncMock(return_value=SimpleNamespace(number=7, html_url="https://github.com/mockito/mockito/pull/7"))

    created = await create_pull_request(client, "Bump version", "bump", "master", body="Automated")

    assert created.number == 7
    client.create_pull_request.assert_awaited_once_with(
        title="Bump version", head="bump", base="master", body="Automated", maintainer_can_modify=True
    )


@pytest.mark.asyncio
async def test_create_pull_request_dry_run() -> None:
    """Test that dry run mode creates nothing."""
    client = MagicMock()
    client.create_pull_request = AsyncMock()

    assert await create_pull_request(client, "Bump version", "bump", "master", dry_run=True) is None
    client.create_pull_request.assert_not_awaited()


@pytest.mark.asyncio
async def test_merge_pull_request_when_checks_pass() -> None:
    """Test that the pull request is merged once its checks passed."""
    client = MagicMock()
    client.get_pull_request = AsyncMock(return_value=pull_request())
    client.merge_pull_request = AsyncMock()
    status_check = MagicMock()
    status_check.wait_for_checks = AsyncMock(return_value=PullRequestStatus.SUCCESS)

    assert await merge_pull_request(client, 7, status_check) is True
    status_check.wait_for_checks.assert_awaited_once_with("abc123")
    client.merge_pull_request.assert_awaited_once_with(7, merge_method="merge")


@pytest.mark.asyncio
async def test_merge_pull_request_without_checks_is_not_merged() -> None:
    """Test that a pull request without checks is left open."""
    client = MagicMock()
    client.get_pull_request = AsyncMock(return_value=pull_request())
    client.merge_pull_request = AsyncMock()
    status_check = MagicMock()
    status_check.wait_for_checks = AsyncMock(return_value=PullRequestStatus.NO_CHECK_DEFINED)

    assert await merge_pull_request(client, 7, status_check) is False
    client.merge_pull_request.assert_not_awaited()


@pytest.mark.asyncio
async def test_merge_pull_request_timeout() -> None:
    """Test that timed out checks abort the merge."""
    client = MagicMock()
    client.get_pull_request = AsyncMock(return_value=pull_request())
    client.merge_pull_request = AsyncMock()
    status_check = MagicMock()
    status_check.wait_for_checks = AsyncMock(return_value=PullRequestStatus.TIMEOUT)

    with pytest.raises(PullRequestMergeError, match="#7"):
        await merge_pull_request(client, 7, status_check)
    client.merge_pull_request.assert_not_awaited()


@pytest.mark.asyncio
async def test_merge_pull_request_dry_run() -> None:
    """Test that dry run mode does not even look at the pull request."""
    client = MagicMock()
    client.get_pull_request = AsyncMock()

    assert await merge_pull_request(client, 7, dry_run=True) is False
    client.get_pull_request.assert_not_awaited()
