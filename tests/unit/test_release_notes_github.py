"""Unit tests for the GitHub backed release notes sources."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from release_ops_manager.release_notes.github import GitHubContributorSource, GitHubIssueSource, label_names, to_improvement


def issue(number: int, *labels: object, pull_request: object = None, html_url: str | None = None) -> SimpleNamespace:
    """Build an issue as returned by the GitHub API."""
    return SimpleNamespace(number=number, title=f"Issue {number}", labels=list(labels), pull_request=pull_request, html_url=html_url)


def test_label_names_accepts_strings_and_objects() -> None:
    """Test that labels given as strings or as label objects are both understood."""
    assert label_names(issue(1, "bug", SimpleNamespace(name="noteworthy"), SimpleNamespace(name=None))) == ("bug", "noteworthy")
    assert label_names(SimpleNamespace()) == ()


def test_to_improvement_for_pull_request_without_html_url() -> None:
    """Test that the web URL is derived when GitHub did not return one."""
    improvement = to_improvement(issue(7, "bug", pull_request=SimpleNamespace(url="...")), "mockito/mockito")

    assert improvement.is_pull_request is True
    assert improvement.url == "https://github.com/mockito/mockito/pull/7"
    assert improvement.labels == ("bug",)


def test_to_improvement_prefers_html_url() -> None:
    """Test that the URL returned by GitHub is kept."""
    improvement = to_improvement(issue(3, html_url="https://github.com/mockito/mockito/issues/3"), "mockito/mockito")

    assert improvement.is_pull_request is False
    assert improvement.url == "https://github.com/mockito/mockito/issues/3"


@pytest.mark.asyncio
async def test_closed_issues_with_labels_filters_by_any_label() -> None:
    """Test that issues carrying any of the labels are kept."""
    client = MagicMock()
    client.list_issues = AsyncMock(return_value=[issue(1, "bug"), issue(2, "noteworthy"), issue(3, "question")])
    since = datetime(2017, 1, 4, tzinfo=timezone.utc)

    improvements = await GitHubIssueSource(client, "mockito/mockito").closed_issues_with_labels(["bug", "noteworthy"], since)

    assert [i.id for i in improvements] == [1, 2]
    client.list_issues.assert_awaited_once_with(state="closed", since=since)


@pytest.mark.asyncio
async def test_closed_issues_without_labels_keeps_all() -> None:
    """Test that no labels means no filtering."""
    client = MagicMock()
    client.list_issues = AsyncMock(return_value=[issue(1), issue(2, "question")])

    improvements = await GitHubIssueSource(client, "mockito/mockito").closed_issues_with_labels([], None)

    assert [i.id for i in improvements] == [1, 2]


@pytest.mark.asyncio
async def test_all_contributors_resolves_names_and_skips_anonymous() -> None:
    """Test that contributors get their public name and anonymous contributors are skipped."""
    client = MagicMock()
    client.list_contributors = AsyncMock(
        return_value=[
            SimpleNamespace(login="szczepiq", html_url="https://github.com/szczepiq", contributions=10),
            SimpleNamespace(login=None, html_url=None, contributions=3),
            SimpleNamespace(login="ghost", html_url="https://github.com/ghost", contributions=20),
        ]
    )
    client.get_user_by_username = AsyncMock(side_effect=[SimpleNamespace(name="Szczepan Faber"), SimpleNamespace(name=None)])

    contributors = await GitHubContributorSource(client).all_contributors("mockito/mockito")

    assert [(c.login, c.name, c.number_of_contributions) for c in contributors] == [("ghost", None, 20), ("szczepiq", "Szczepan Faber", 10)]


@pytest.mark.asyncio
async def test_contributions_since_counts_commit_authors() -> None:
    """Test that recent commits are counted per author login."""
    client = MagicMock()
    client.compare_commits = AsyncMock(
        return_value=SimpleNamespace(
            commits=[
                SimpleNamespace(author=SimpleNamespace(login="szczepiq")),
                SimpleNamespace(author=None),
                SimpleNamespace(author=SimpleNamespace(login="szczepiq")),
                SimpleNamespace(author=SimpleNamespace(login="timvdlippe")),
            ]
        )
    )

    counts = await GitHubContributorSource(client).contributions_since("v2.0.0")

    assert counts == {"szczepiq": 2, "timvdlippe": 1}
    client.compare_commits.assert_awaited_once_with("v2.0.0", "HEAD")
