"""Capability interfaces of the data sources feeding the release notes.

Concrete implementations (local git, GitHub API) are injected into the stages
that need them; the aggregation logic only sees the data they return.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from release_ops_manager.release_notes.contributors import ContributorSet
from release_ops_manager.release_notes.models import Commit, Improvement


class CommitSource(Protocol):
    """Provides commits from version control."""

    def commits_since(self, ref: str, until: str = "HEAD") -> list[Commit]:
        """Return the commits reachable from `until` but not from `ref`, newest first."""
        ...


class ReleaseDateSource(Protocol):
    """Provides the dates versions were released at."""

    def release_dates(self, tags: Sequence[str]) -> dict[str, datetime]:
        """Return the release date per tag. Unknown tags are absent from the result."""
        ...


class IssueSource(Protocol):
    """Provides closed issues and pull requests."""

    async def closed_issues_with_labels(self, labels: Sequence[str], since: datetime | None) -> list[Improvement]:
        """Return issues closed after `since` whose labels intersect `labels` (all issues when empty)."""
        ...


class ContributorSource(Protocol):
    """Provides project contributors."""

    async def all_contributors(self, repository: str) -> ContributorSet:
        """Return every contributor of the repository."""
        ...

    async def contributions_since(self, ref: str) -> dict[str, int]:
        """Return the number of commits per author login made after `ref`."""
        ...
