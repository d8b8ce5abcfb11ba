"""Models for the release configuration."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from release_ops_manager.utils.constants import (
    DEFAULT_COMMIT_MESSAGE_POSTFIX,
    DEFAULT_NOTABLE_RELEASE_NOTES_PATH,
    DEFAULT_RELEASABLE_BRANCH_REGEX,
    DEFAULT_RELEASE_NOTES_PATH,
    DEFAULT_TAG_PREFIX,
)
from release_ops_manager.utils.yaml import load_yaml_file


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


class GitHubSettings(BaseModel):
    """GitHub repository settings. Tokens are never part of the file, see Settings."""

    repository: str | None = None
    api_url: str = "https://api.github.com"
    write_auth_user: str | None = None


class GitSettings(BaseModel):
    """Git settings used when committing, tagging and pushing."""

    user: str = "release-ops-manager"
    email: str = "release-ops-manager@users.noreply.github.com"
    tag_prefix: str = DEFAULT_TAG_PREFIX
    releasable_branch_regex: str = DEFAULT_RELEASABLE_BRANCH_REGEX
    commit_message_postfix: str = DEFAULT_COMMIT_MESSAGE_POSTFIX
    branch: str = "master"


class ReleaseNotesSettings(BaseModel):
    """Release notes settings.

    The order of `label_mapping` is the order of the label groups in the notes.
    """

    file: Path = Path(DEFAULT_RELEASE_NOTES_PATH)
    notable_file: Path = Path(DEFAULT_NOTABLE_RELEASE_NOTES_PATH)
    label_mapping: dict[str, str] = Field(default_factory=dict)
    publication_repository: str | None = None


class TeamSettings(BaseModel):
    """Team members in 'login:Full Name' notation."""

    developers: list[str] = Field(default_factory=list)
    contributors: list[str] = Field(default_factory=list)

    @field_validator("developers", "contributors")
    @classmethod
    def validate_notation(cls, members: list[str]) -> list[str]:
        """Ensure every member is in the compact 'login:Full Name' notation."""
        from release_ops_manager.release_notes.contributors import TeamMember

        for member in members:
            TeamMember.parse(member)
        return members


class ReleaseConfiguration(BaseModel):
    """Configuration of the release automation, validated once when loaded."""

    dry_run: bool = False
    previous_release_version: str | None = None
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    release_notes: ReleaseNotesSettings = Field(default_factory=ReleaseNotesSettings)
    team: TeamSettings = Field(default_factory=TeamSettings)


def load_release_configuration(path: Path | None) -> ReleaseConfiguration:
    """Load the release configuration from a YAML file, or the defaults when no file is given."""
    if path is None:
        return ReleaseConfiguration()
    return ReleaseConfiguration.model_validate(load_yaml_file(path))
