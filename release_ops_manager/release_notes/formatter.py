"""Renders release notes data as markdown text.

Two variants exist: the detailed notes, with every referenced improvement
grouped by label, and the notable notes, a condensed digest across versions.
Both are pure functions of their configuration and input data.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import jinja2
import structlog

from release_ops_manager.release_notes.aggregator import attribute_contributions
from release_ops_manager.release_notes.models import Contribution, Contributor, Improvement, ReleaseNotesData
from release_ops_manager.utils.constants import OTHER_IMPROVEMENTS_TITLE
from release_ops_manager.utils.templates import construct_packaged_template, render_template

logger = structlog.get_logger(__name__)

NO_COMMITS_MESSAGE = "No code changes. No commits found."
NO_IMPROVEMENTS_MESSAGE = "No pull requests referenced in commit messages."


def format_date(date: datetime | None) -> str | None:
    """Format a release date as YYYY-MM-DD in UTC."""
    if date is None:
        return None
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return date.strftime("%Y-%m-%d")


def format_improvement(improvement: Improvement) -> str:
    """Format an improvement as a markdown list item text."""
    return f"{improvement.title} [(#{improvement.id})]({improvement.url})"


def format_author(contribution: Contribution) -> str:
    """Format the author of a contribution, linking the GitHub profile when known."""
    contributor = contribution.contributor
    if contributor is None:
        return contribution.author_name
    return f"[{contributor.display_name}]({contributor.profile_url})"


def format_authors(contributions: Sequence[Contribution]) -> str:
    """Format the authors, most commits first, with commit counts when there are several."""
    ordered = sorted(contributions, key=lambda c: -c.commit_count)
    if len(ordered) == 1:
        return format_author(ordered[0])
    return ", ".join(f"{format_author(c)} ({c.commit_count})" for c in ordered)


def format_commits_link(release: ReleaseNotesData, vcs_commits_link_template: str | None) -> str:
    """Format the commit count, linked to the VCS comparison of the version's tags when possible."""
    count = release.commit_count
    text = f"{count} commit" if count == 1 else f"{count} commits"
    if not vcs_commits_link_template:
        return text
    link = vcs_commits_link_template.format(previous_tag=release.previous_vcs_tag, tag=release.vcs_tag)
    return f"[{text}]({link})"


def group_improvements(improvements: Sequence[Improvement], label_mapping: Mapping[str, str]) -> list[tuple[str, list[Improvement]]]:
    """Group improvements by label, in the order of the label mapping.

    An improvement is placed in the group of the first mapped label it carries.
    Improvements carrying no mapped label are collected in a trailing "Other" group.
    """
    groups: dict[str, list[Improvement]] = {label: [] for label in label_mapping}
    other: list[Improvement] = []
    for improvement in improvements:
        label = next((label for label in label_mapping if label in improvement.labels), None)
        if label is None:
            other.append(improvement)
        else:
            groups[label].append(improvement)
    result = [(label_mapping[label], items) for label, items in groups.items() if items]
    if other:
        result.append((OTHER_IMPROVEMENTS_TITLE, other))
    return result


class DetailedFormatter:
    """Formats the detailed, per-version release notes."""

    def __init__(
        self,
        label_mapping: Mapping[str, str] | None = None,
        vcs_commits_link_template: str | None = None,
        publication_repository: str | None = None,
        contributors_map: Mapping[str | None, Contributor] | None = None,
        introduction_text: str = "",
        template: jinja2.Template | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            label_mapping: GitHub label to human readable group title. Its order is the order of the groups.
            vcs_commits_link_template: Link to the changes of a version, with {previous_tag} and {tag} placeholders.
            publication_repository: Where the version is published; "{version}" is replaced by the version.
            contributors_map: Contributors by name, used to link authors to their profiles.
            introduction_text: Text placed before the notes.
            template: Template overriding the packaged one.
        """
        self.label_mapping = dict(label_mapping or {})
        self.vcs_commits_link_template = vcs_commits_link_template
        self.publication_repository = publication_repository
        self.contributors_map = dict(contributors_map or {})
        self.introduction_text = introduction_text
        self.template = template or construct_packaged_template("detailed_release_notes.j2")

    def format_release_notes(self, releases: Sequence[ReleaseNotesData]) -> str:
        """Render the notes of all releases, in the given order."""
        attributed = attribute_contributions(releases, self.contributors_map)
        context = {
            "introduction_text": self.introduction_text,
            "releases": [self._release_context(release) for release in attributed],
        }
        logger.debug("Formatting detailed release notes", releases=len(releases))
        return render_template(self.template, context).rstrip()

    def _release_context(self, release: ReleaseNotesData) -> dict[str, Any]:
        date = format_date(release.date)
        header = f"**{release.version} ({date})**" if date else f"**{release.version}**"
        if release.commit_count == 0:
            return {"header": header, "summary": NO_COMMITS_MESSAGE, "groups": [], "no_improvements_message": None}

        summary = f"{format_commits_link(release, self.vcs_commits_link_template)} by {format_authors(release.contributions)}"
        if self.publication_repository:
            summary += f" - published to {self.publication_repository.replace('{version}', release.version)}"
        groups = [
            {"title": title, "entries": [format_improvement(i) for i in items]}
            for title, items in group_improvements(release.improvements, self.label_mapping)
        ]
        return {
            "header": header,
            "summary": summary,
            "groups": groups,
            "no_improvements_message": None if groups else NO_IMPROVEMENTS_MESSAGE,
        }


class NotableFormatter:
    """Formats the notable release notes: a digest of noteworthy improvements across versions."""

    def __init__(
        self,
        introduction_text: str = "",
        detailed_release_notes_link: str | None = None,
        vcs_commits_link_template: str | None = None,
        template: jinja2.Template | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            introduction_text: Text placed before the notes.
            detailed_release_notes_link: Link to the detailed release notes, appended at the end.
            vcs_commits_link_template: Link to the changes of a version, with {previous_tag} and {tag} placeholders.
            template: Template overriding the packaged one.
        """
        self.introduction_text = introduction_text
        self.detailed_release_notes_link = detailed_release_notes_link
        self.vcs_commits_link_template = vcs_commits_link_template
        self.template = template or construct_packaged_template("notable_release_notes.j2")

    def format_release_notes(self, releases: Sequence[ReleaseNotesData]) -> str:
        """Render the digest of all releases, in the given order."""
        context = {
            "introduction_text": self.introduction_text,
            "detailed_release_notes_link": self.detailed_release_notes_link,
            "releases": [self._release_context(release) for release in releases],
        }
        logger.debug("Formatting notable release notes", releases=len(releases))
        return render_template(self.template, context).rstrip()

    def _release_context(self, release: ReleaseNotesData) -> dict[str, Any]:
        date = format_date(release.date)
        header = f"### {release.version} - {date}" if date else f"### {release.version}"
        summary = f"Authors: {len(release.contributions)}, commits: {release.commit_count}, improvements: {len(release.improvements)}."
        if self.vcs_commits_link_template:
            link = self.vcs_commits_link_template.format(previous_tag=release.previous_vcs_tag, tag=release.vcs_tag)
            summary += f" [Changes]({link})"
        return {"header": header, "summary": summary, "entries": [format_improvement(i) for i in release.improvements]}
