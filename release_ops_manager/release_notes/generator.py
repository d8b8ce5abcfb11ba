"""Release notes stages: fetching data from git and GitHub, then formatting it.

The fetch stages talk to the outside world and persist what they found. The
format stages only read the persisted data back, so they can be re-run (or
previewed) without any network access.
"""

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import structlog

from release_ops_manager.configuration.exceptions import RequiredConfigurationElementError
from release_ops_manager.configuration.models import ReleaseConfiguration
from release_ops_manager.configuration.reconcile import require
from release_ops_manager.release_notes.aggregator import NotesAggregator, released_versions
from release_ops_manager.release_notes.contributors import ContributorSet, build_contributors_map, load_github_contributors
from release_ops_manager.release_notes.formatter import DetailedFormatter, NotableFormatter
from release_ops_manager.release_notes.markdown import MarkdownWriter
from release_ops_manager.release_notes.models import Commit, ReleaseNotesData, ReleaseNotesResult, ReleaseNotesStatus
from release_ops_manager.release_notes.serializer import ContributorsSerializer, ReleaseNotesSerializer
from release_ops_manager.release_notes.sources import CommitSource, ContributorSource, IssueSource, ReleaseDateSource
from release_ops_manager.utils.github import compare_url_template

logger = structlog.get_logger(__name__)

NOTABLE_INTRODUCTION_TEXT = "Notable release notes:"


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class ReleaseNotesFetcher:
    """Fetches commits, release dates and improvements, and persists the aggregated release notes data."""

    def __init__(
        self,
        commit_source: CommitSource,
        date_source: ReleaseDateSource,
        issue_source: IssueSource,
        aggregator: NotesAggregator,
        tag_prefix: str = "v",
        serializer: ReleaseNotesSerializer | None = None,
    ) -> None:
        """Initialize the stage with its data sources."""
        self.commit_source = commit_source
        self.date_source = date_source
        self.issue_source = issue_source
        self.aggregator = aggregator
        self.tag_prefix = tag_prefix
        self.serializer = serializer or ReleaseNotesSerializer()

    async def fetch(
        self,
        repository: str | None,
        version: str | None,
        previous_versions: Sequence[str],
        output_file: Path,
        head_date: datetime | None = None,
    ) -> ReleaseNotesResult:
        """Fetch and aggregate the release notes data of the version range, newest first.

        Args:
            repository: GitHub repository in 'owner/repo' format.
            version: Version being released.
            previous_versions: Already released versions, newest first.
            output_file: Where the serialized release notes data is written.
            head_date: Release date of the version being released.

        Raises:
            RequiredConfigurationElementError: If the repository, version or previous version is missing.
                Nothing is fetched in that case.
        """
        require(repository, "github.repository", "the repository the improvements are fetched from")
        versions = released_versions(version, previous_versions, tag_prefix=self.tag_prefix, head_date=head_date)

        dates = self.date_source.release_dates([v.tag for v in versions[1:]])
        versions = released_versions(version, previous_versions, tag_prefix=self.tag_prefix, dates=dates, head_date=head_date)

        commits_by_version: dict[str, list[Commit]] = {}
        for released in versions:
            if released.previous_rev is not None:
                commits_by_version[released.version] = self.commit_source.commits_since(released.previous_rev, released.rev)

        since = versions[-1].date
        improvements = await self.issue_source.closed_issues_with_labels(sorted(self.aggregator.labels), since)
        releases = self.aggregator.aggregate(versions, commits_by_version, improvements)

        _write(output_file, self.serializer.serialize(releases))
        logger.info("Wrote release notes data", path=str(output_file), releases=len(releases))
        return ReleaseNotesResult(status=ReleaseNotesStatus.SUCCESS, version=version, output_file=str(output_file), releases=releases)


class ContributorsFetcher:
    """Fetches the project contributors from GitHub and persists them."""

    def __init__(self, contributor_source: ContributorSource, serializer: ContributorsSerializer | None = None) -> None:
        """Initialize the stage with its contributor source."""
        self.contributor_source = contributor_source
        self.serializer = serializer or ContributorsSerializer()

    async def fetch(self, repository: str, output_file: Path, since_ref: str | None = None) -> ContributorSet:
        """Fetch the contributors and write them to the output file.

        When `since_ref` is given only the authors of commits made after that
        ref are kept, with their number of recent commits as contribution count.
        """
        contributors = await self.contributor_source.all_contributors(repository)
        if since_ref is not None:
            recent = await self.contributor_source.contributions_since(since_ref)
            contributors = ContributorSet(
                c.model_copy(update={"number_of_contributions": recent[c.login]}) for c in contributors.all_sorted() if c.login in recent
            )
            logger.info("Kept recent contributors", since=since_ref, count=contributors.size())
        _write(output_file, self.serializer.serialize(contributors))
        logger.info("Wrote contributors data", path=str(output_file), contributors=contributors.size())
        return contributors


class IncrementalReleaseNotes:
    """Formats the persisted release notes data as new content of the detailed release notes file."""

    def __init__(
        self,
        configuration: ReleaseConfiguration,
        release_notes_data_file: Path,
        contributors_data_file: Path | None = None,
        serializer: ReleaseNotesSerializer | None = None,
        contributors_serializer: ContributorsSerializer | None = None,
    ) -> None:
        """Initialize the stage.

        Args:
            configuration: Release configuration providing the repository, label mapping and team.
            release_notes_data_file: Data written by the ReleaseNotesFetcher.
            contributors_data_file: Data written by the ContributorsFetcher.
            serializer: Reads the release notes data.
            contributors_serializer: Reads the contributors data.
        """
        self.configuration = configuration
        self.release_notes_data_file = release_notes_data_file
        self.contributors_data_file = contributors_data_file
        self.serializer = serializer or ReleaseNotesSerializer()
        self.contributors_serializer = contributors_serializer or ContributorsSerializer()

    def _releases(self) -> list[ReleaseNotesData]:
        return self.serializer.deserialize(self.release_notes_data_file.read_text(encoding="utf-8"))

    def new_content(self) -> tuple[list[ReleaseNotesData], str]:
        """Build the new incremental content of the release notes."""
        repository = require(self.configuration.github.repository, "github.repository", "used for the links in the release notes")
        releases = self._releases()
        team = self.configuration.team
        github_contributors = load_github_contributors(team.contributors, self.contributors_data_file, self.contributors_serializer)
        formatter = DetailedFormatter(
            label_mapping=self.configuration.release_notes.label_mapping,
            vcs_commits_link_template=compare_url_template(repository),
            publication_repository=self.configuration.release_notes.publication_repository,
            contributors_map=build_contributors_map(team.contributors, github_contributors, team.developers),
        )
        return releases, formatter.format_release_notes(releases) + "\n\n"

    def preview(self) -> ReleaseNotesResult:
        """Render the new content without touching the release notes file."""
        releases, content = self.new_content()
        logger.info("Previewing release notes", releases=len(releases))
        return ReleaseNotesResult(status=ReleaseNotesStatus.PREVIEW, content=content, releases=releases)

    def update(self) -> ReleaseNotesResult:
        """Prepend the new content to the release notes file.

        Raises:
            RequiredConfigurationElementError: If the release notes file does not exist.
        """
        release_notes_file = self.configuration.release_notes.file
        if not release_notes_file.is_file():
            raise RequiredConfigurationElementError("release_notes.file", f"the file {release_notes_file} must be present")
        releases, content = self.new_content()
        if not releases:
            logger.info("No release notes data, release notes file left untouched", path=str(release_notes_file))
            return ReleaseNotesResult(status=ReleaseNotesStatus.NO_CONTENT, output_file=str(release_notes_file))
        MarkdownWriter().update_file(release_notes_file, content)
        return ReleaseNotesResult(
            status=ReleaseNotesStatus.SUCCESS,
            version=releases[0].version,
            content=content,
            output_file=str(release_notes_file),
            releases=releases,
        )


class NotableReleaseNotes:
    """Formats the persisted notable release notes data and writes the notable release notes file."""

    def __init__(
        self,
        configuration: ReleaseConfiguration,
        notable_data_file: Path,
        serializer: ReleaseNotesSerializer | None = None,
    ) -> None:
        """Initialize the stage with the data written by the notable ReleaseNotesFetcher."""
        self.configuration = configuration
        self.notable_data_file = notable_data_file
        self.serializer = serializer or ReleaseNotesSerializer()

    def detailed_release_notes_link(self, repository: str) -> str:
        """Link to the detailed release notes file on the configured branch."""
        release_notes_file = self.configuration.release_notes.file.as_posix()
        return f"https://github.com/{repository}/blob/{self.configuration.git.branch}/{release_notes_file}"

    def update(self) -> ReleaseNotesResult:
        """Render the notable release notes and replace the notable release notes file with them."""
        repository = require(self.configuration.github.repository, "github.repository", "used for the links in the notable release notes")
        releases = self.serializer.deserialize(self.notable_data_file.read_text(encoding="utf-8"))
        formatter = NotableFormatter(
            introduction_text=NOTABLE_INTRODUCTION_TEXT,
            detailed_release_notes_link=self.detailed_release_notes_link(repository),
            vcs_commits_link_template=compare_url_template(repository),
        )
        content = formatter.format_release_notes(releases) + "\n"
        output_file = self.configuration.release_notes.notable_file
        _write(output_file, content)
        logger.info("Wrote notable release notes", path=str(output_file), releases=len(releases))
        return ReleaseNotesResult(status=ReleaseNotesStatus.SUCCESS, content=content, output_file=str(output_file), releases=releases)
