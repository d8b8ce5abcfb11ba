"""Data models for publication comparison."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from release_ops_manager.utils.constants import DEFAULT_MAVEN_REPOSITORY_URL


class ComparisonState(str, Enum):
    """Lifecycle of a single publication comparison."""

    UNCOMPARED = "uncompared"
    COMPARING = "comparing"
    COMPARED = "compared"


class VersionArtifactDescriptor(BaseModel):
    """A published artifact of a version: where the current build put it and where the previous version can be fetched from."""

    model_config = ConfigDict(frozen=True)

    group: str
    artifact_name: str
    version: str
    local_path: Path
    remote_url: str | None = None

    def remote_url_for(self, version: str, extension: str, repository_url: str = DEFAULT_MAVEN_REPOSITORY_URL) -> str:
        """URL of the artifact of the given version.

        The explicitly configured remote URL wins. Otherwise the URL is derived
        from the Maven repository layout, e.g.
        https://repo1.maven.org/maven2/org/mockito/mockito-core/2.7.1/mockito-core-2.7.1.pom
        """
        if self.remote_url:
            return self.remote_url
        group_path = self.group.replace(".", "/")
        file_name = f"{self.artifact_name}-{version}{extension}"
        return f"{repository_url.rstrip('/')}/{group_path}/{self.artifact_name}/{version}/{file_name}"


class PublicationComparisonResult(BaseModel):
    """Persisted verdict of a publication comparison, read back by the release decision."""

    model_config = ConfigDict(frozen=True)

    artifact_name: str
    current_version: str
    previous_version: str | None = None
    equal: bool

    def is_equal(self) -> bool:
        """Whether the publication equals the previous one."""
        return self.equal
