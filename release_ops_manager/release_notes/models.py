"""Data models for release notes generation."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from release_ops_manager.utils.constants import TICKET_REFERENCE_PATTERN


class ReleaseNotesStatus(str, Enum):
    """Status of a release notes stage."""

    SUCCESS = "success"
    PREVIEW = "preview"
    NO_CONTENT = "no_content"


class Commit(BaseModel):
    """A single commit from version control history."""

    model_config = ConfigDict(frozen=True)

    commit_id: str
    message: str
    author_name: str
    author_email: str = ""

    @property
    def tickets(self) -> list[str]:
        """Issue/pull request numbers referenced in the message, in order of first appearance."""
        seen: dict[str, None] = {}
        for ticket in TICKET_REFERENCE_PATTERN.findall(self.message):
            seen.setdefault(ticket, None)
        return list(seen)


class Contributor(BaseModel):
    """A project contributor.

    Equality and hashing are structural, over all fields. GitHub allows users
    without a public display name, hence the optional name.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    login: str
    profile_url: str
    number_of_contributions: int = 0

    @property
    def display_name(self) -> str:
        """The name to show for this contributor, falling back to the login."""
        return self.name or self.login


class Improvement(BaseModel):
    """A closed issue or pull request that is part of a release."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    url: str
    labels: tuple[str, ...] = ()
    is_pull_request: bool = False


class Contribution(BaseModel):
    """The commits of one author within one version."""

    model_config = ConfigDict(frozen=True)

    author_name: str
    author_email: str = ""
    commits: tuple[Commit, ...] = ()
    contributor: Contributor | None = None

    @property
    def commit_count(self) -> int:
        """Number of commits made by the author."""
        return len(self.commits)


class ReleasedVersion(BaseModel):
    """A version in the queried release range together with its VCS revisions."""

    model_config = ConfigDict(frozen=True)

    version: str
    tag: str
    date: datetime | None = None
    rev: str
    previous_rev: str | None = None


class ReleaseNotesData(BaseModel):
    """Everything needed to render the release notes of a single version."""

    model_config = ConfigDict(frozen=True)

    version: str
    date: datetime | None = None
    vcs_tag: str
    previous_vcs_tag: str
    contributions: tuple[Contribution, ...] = ()
    improvements: tuple[Improvement, ...] = ()

    @property
    def commit_count(self) -> int:
        """Total number of commits in the version."""
        return sum(c.commit_count for c in self.contributions)


class ReleaseNotesResult(BaseModel):
    """Result of a release notes stage."""

    status: ReleaseNotesStatus
    version: str | None = None
    content: str | None = None
    output_file: str | None = None
    releases: list[ReleaseNotesData] = Field(default_factory=list)
