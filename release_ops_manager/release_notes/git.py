"""Release notes data sources backed by the local git repository."""

from collections.abc import Sequence
from datetime import datetime

import git
import structlog
from packaging.version import InvalidVersion, Version

from release_ops_manager.release_notes.models import Commit

logger = structlog.get_logger(__name__)


def to_commit(commit: git.Commit) -> Commit:
    """Convert a GitPython commit into a release notes commit."""
    message = commit.message if isinstance(commit.message, str) else commit.message.decode("utf-8", errors="replace")
    return Commit(
        commit_id=commit.hexsha,
        message=message.strip(),
        author_name=commit.author.name or "",
        author_email=commit.author.email or "",
    )


class GitCommitSource:
    """Reads commits from the repository history."""

    def __init__(self, repo: git.Repo) -> None:
        """Initialize with the repository to read from."""
        self.repo = repo

    def commits_since(self, ref: str, until: str = "HEAD") -> list[Commit]:
        """Return the commits in ref..until, newest first."""
        commits = [to_commit(commit) for commit in self.repo.iter_commits(f"{ref}..{until}")]
        logger.info("Loaded commits", ref=ref, until=until, count=len(commits))
        return commits


class GitReleaseDateSource:
    """Reads the dates of version tags from the repository."""

    def __init__(self, repo: git.Repo) -> None:
        """Initialize with the repository to read from."""
        self.repo = repo

    def release_dates(self, tags: Sequence[str]) -> dict[str, datetime]:
        """Return the commit date of every tag that exists in the repository."""
        known: dict[str, git.TagReference] = {tag.name: tag for tag in self.repo.tags}
        dates: dict[str, datetime] = {}
        for name in tags:
            tag = known.get(name)
            if tag is None:
                logger.warning("Release date of tag not available", tag=name)
                continue
            dates[name] = tag.commit.committed_datetime
        return dates


def latest_versions(tags: Sequence[str], tag_prefix: str, count: int) -> list[str]:
    """Return up to `count` released versions found in the tags, newest first.

    Tags that do not start with the prefix or are not valid versions are ignored.
    """
    versions: list[tuple[Version, str]] = []
    for tag in tags:
        if not tag.startswith(tag_prefix):
            continue
        raw = tag[len(tag_prefix) :]
        try:
            versions.append((Version(raw), raw))
        except InvalidVersion:
            logger.debug("Ignoring tag that is not a version", tag=tag)
    versions.sort(key=lambda item: item[0], reverse=True)
    return [raw for _, raw in versions[:count]]


def list_tags(repo: git.Repo, tag_prefix: str) -> list[str]:
    """List the tags of the repository that start with the prefix."""
    return [tag.name for tag in repo.tags if tag.name.startswith(tag_prefix)]
