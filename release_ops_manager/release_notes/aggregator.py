"""Aggregates commits, improvements and release dates into per-version release notes data."""

from collections.abc import Mapping, Sequence
from datetime import datetime

import structlog

from release_ops_manager.configuration.exceptions import RequiredConfigurationElementError
from release_ops_manager.release_notes.filters import CommitFilter
from release_ops_manager.release_notes.models import (
    Commit,
    Contribution,
    Contributor,
    Improvement,
    ReleasedVersion,
    ReleaseNotesData,
)

logger = structlog.get_logger(__name__)


class _IncludeAll:
    def is_excluded(self, commit: Commit) -> bool:
        return False


def released_versions(
    head_version: str | None,
    previous_versions: Sequence[str],
    tag_prefix: str = "v",
    dates: Mapping[str, datetime] | None = None,
    head_date: datetime | None = None,
    head_rev: str = "HEAD",
) -> list[ReleasedVersion]:
    """Build the queried version range, newest version first.

    The head version is the one being released and is identified by `head_rev`;
    previous versions are identified by their tags. Every version except the
    oldest one knows the revision of its predecessor.

    Args:
        head_version: Version being released.
        previous_versions: Already released versions, newest first.
        tag_prefix: Prefix of version tags, e.g. "v".
        dates: Release date per tag, as far as known.
        head_date: Release date of the head version, if known.
        head_rev: Revision the head version is built from.

    Raises:
        RequiredConfigurationElementError: If the head version or the previous versions are missing.
    """
    if not head_version:
        raise RequiredConfigurationElementError("version", "the version being released")
    if not previous_versions or not all(previous_versions):
        raise RequiredConfigurationElementError("previous version", f"the boundary of the release notes range for {head_version}")

    dates = dates or {}
    versions = [head_version, *previous_versions]
    revs = [head_rev, *(f"{tag_prefix}{v}" for v in previous_versions)]
    result: list[ReleasedVersion] = []
    for index, version in enumerate(versions):
        tag = f"{tag_prefix}{version}"
        previous_rev = revs[index + 1] if index + 1 < len(revs) else None
        date = head_date if index == 0 else dates.get(tag)
        result.append(ReleasedVersion(version=version, tag=tag, date=date, rev=revs[index], previous_rev=previous_rev))
    return result


class NotesAggregator:
    """Combines already-fetched data into release notes data, one record per version.

    The aggregator performs no I/O. It never reorders its input beyond grouping
    commits per author, so identical input always yields identical output.
    """

    def __init__(self, commit_filter: CommitFilter | None = None, labels: Sequence[str] = (), only_pull_requests: bool = False) -> None:
        """Initialize the aggregator.

        Args:
            commit_filter: Commits it excludes are left out of the notes.
            labels: Only improvements carrying one of these labels are kept. Empty keeps all.
            only_pull_requests: Keep pull requests only, dropping plain issues.
        """
        self.commit_filter: CommitFilter = commit_filter or _IncludeAll()
        self.labels = frozenset(labels)
        self.only_pull_requests = only_pull_requests

    def aggregate(
        self,
        versions: Sequence[ReleasedVersion],
        commits_by_version: Mapping[str, Sequence[Commit]],
        improvements: Sequence[Improvement],
    ) -> list[ReleaseNotesData]:
        """Produce release notes data for every version that has a predecessor.

        Args:
            versions: Version range, newest first.
            commits_by_version: Commits of each version, in source order.
            improvements: Closed issues and pull requests that may be referenced by the commits.

        Returns:
            Release notes data, newest version first.
        """
        improvements_by_id: dict[str, Improvement] = {}
        for improvement in improvements:
            improvements_by_id.setdefault(str(improvement.id), improvement)

        notes: list[ReleaseNotesData] = []
        for version in versions:
            if version.previous_rev is None:
                continue
            commits = [c for c in commits_by_version.get(version.version, ()) if not self.commit_filter.is_excluded(c)]
            version_improvements = [
                improvements_by_id[ticket]
                for ticket in self._tickets(commits)
                if ticket in improvements_by_id and self._accepts(improvements_by_id[ticket])
            ]
            if version.date is None:
                logger.debug("Release date unknown", version=version.version)
            notes.append(
                ReleaseNotesData(
                    version=version.version,
                    date=version.date,
                    vcs_tag=version.tag,
                    previous_vcs_tag=version.previous_rev,
                    contributions=tuple(self._contributions(commits)),
                    improvements=tuple(version_improvements),
                )
            )
            logger.info(
                "Aggregated release notes data",
                version=version.version,
                commits=len(commits),
                improvements=len(version_improvements),
            )
        return notes

    def _accepts(self, improvement: Improvement) -> bool:
        if self.only_pull_requests and not improvement.is_pull_request:
            return False
        return not self.labels or not self.labels.isdisjoint(improvement.labels)

    @staticmethod
    def _tickets(commits: Sequence[Commit]) -> list[str]:
        seen: dict[str, None] = {}
        for commit in commits:
            for ticket in commit.tickets:
                seen.setdefault(ticket, None)
        return list(seen)

    @staticmethod
    def _contributions(commits: Sequence[Commit]) -> list[Contribution]:
        grouped: dict[str, list[Commit]] = {}
        emails: dict[str, str] = {}
        for commit in commits:
            grouped.setdefault(commit.author_name, []).append(commit)
            emails.setdefault(commit.author_name, commit.author_email)
        return [Contribution(author_name=name, author_email=emails[name], commits=tuple(group)) for name, group in grouped.items()]


def attribute_contributions(
    releases: Sequence[ReleaseNotesData],
    contributors_map: Mapping[str | None, Contributor],
) -> list[ReleaseNotesData]:
    """Attach contributor records to contributions by matching the commit author name.

    Authors without a matching contributor keep whatever attribution they had,
    which is none for freshly aggregated data.
    """
    attributed: list[ReleaseNotesData] = []
    for release in releases:
        contributions = tuple(
            c.model_copy(update={"contributor": contributors_map.get(c.author_name, c.contributor)}) for c in release.contributions
        )
        attributed.append(release.model_copy(update={"contributions": contributions}))
    return attributed
