"""Release notes data sources backed by the GitHub REST API."""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import structlog

from release_ops_manager.github.abc import GitHubClientBase
from release_ops_manager.release_notes.contributors import ContributorSet
from release_ops_manager.release_notes.models import Contributor, Improvement
from release_ops_manager.utils.github import issue_url

logger = structlog.get_logger(__name__)


def label_names(issue: Any) -> tuple[str, ...]:
    """Extract the label names of an issue. GitHub returns labels either as plain strings or as objects."""
    names: list[str] = []
    for label in getattr(issue, "labels", None) or []:
        name = label if isinstance(label, str) else getattr(label, "name", None)
        if name:
            names.append(name)
    return tuple(names)


def to_improvement(issue: Any, repository: str) -> Improvement:
    """Convert a GitHub issue or pull request to an improvement."""
    is_pull_request = bool(getattr(issue, "pull_request", None))
    url = getattr(issue, "html_url", None) or issue_url(repository, issue.number, is_pull_request)
    return Improvement(id=issue.number, title=issue.title, url=url, labels=label_names(issue), is_pull_request=is_pull_request)


class GitHubIssueSource:
    """Provides closed issues and pull requests of a GitHub repository."""

    def __init__(self, client: GitHubClientBase, repository: str) -> None:
        """Initialize with a GitHub client bound to the repository."""
        self.client = client
        self.repository = repository

    async def closed_issues_with_labels(self, labels: Sequence[str], since: datetime | None) -> list[Improvement]:
        """Return the issues closed after `since` that carry one of the labels.

        GitHub's label filter requires all given labels at once, so label
        intersection is checked here instead.
        """
        wanted = frozenset(labels)
        issues = await self.client.list_issues(state="closed", since=since)
        improvements = [to_improvement(issue, self.repository) for issue in issues]
        if wanted:
            improvements = [i for i in improvements if not wanted.isdisjoint(i.labels)]
        logger.info(
            "Fetched closed issues",
            repository=self.repository,
            labels=sorted(wanted),
            since=since.isoformat() if since else None,
            count=len(improvements),
        )
        return improvements


class GitHubContributorSource:
    """Provides contributors of a GitHub repository."""

    def __init__(self, client: GitHubClientBase) -> None:
        """Initialize with a GitHub client bound to the repository."""
        self.client = client

    async def all_contributors(self, repository: str) -> ContributorSet:
        """Return every contributor with a GitHub account, including their public name."""
        contributors = ContributorSet()
        for entry in await self.client.list_contributors():
            login = getattr(entry, "login", None)
            if not login:
                # Anonymous contributors have no account to link to
                continue
            user = await self.client.get_user_by_username(login)
            contributors.add(
                Contributor(
                    name=getattr(user, "name", None),
                    login=login,
                    profile_url=entry.html_url,
                    number_of_contributions=entry.contributions,
                )
            )
        logger.info("Fetched all contributors", repository=repository, count=contributors.size())
        return contributors

    async def contributions_since(self, ref: str) -> dict[str, int]:
        """Count the commits made by every author login after `ref`."""
        comparison = await self.client.compare_commits(ref, "HEAD")
        counts: Counter[str] = Counter()
        for commit in comparison.commits:
            author = getattr(commit, "author", None)
            login = getattr(author, "login", None)
            if login:
                counts[login] += 1
        logger.info("Counted recent contributions", ref=ref, authors=len(counts))
        return dict(counts)
