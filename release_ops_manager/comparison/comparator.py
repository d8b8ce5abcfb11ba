"""Decides whether the publications of the current build equal the ones of the previous version."""

import tempfile
from pathlib import Path

import structlog

from release_ops_manager.comparison.archive import ZipComparator
from release_ops_manager.comparison.exceptions import ComparisonNotPerformedError, LocalArtifactMissingError
from release_ops_manager.comparison.fetcher import ArtifactFetcher, HttpArtifactFetcher
from release_ops_manager.comparison.models import ComparisonState, PublicationComparisonResult, VersionArtifactDescriptor
from release_ops_manager.comparison.pom import PomComparator
from release_ops_manager.utils.constants import DEFAULT_MAVEN_REPOSITORY_URL

logger = structlog.get_logger(__name__)

POM_EXTENSION = ".pom"
SOURCES_JAR_EXTENSION = "-sources.jar"


class PublicationComparator:
    """Compares the POM and sources jar of the current build with those published for the previous version.

    The previous artifacts are downloaded into a temporary directory that is
    private to a single `compare()` call and removed when it returns.
    """

    def __init__(
        self,
        pom: VersionArtifactDescriptor,
        sources_jar: VersionArtifactDescriptor,
        previous_version: str | None,
        fetcher: ArtifactFetcher | None = None,
        repository_url: str = DEFAULT_MAVEN_REPOSITORY_URL,
    ) -> None:
        """Initialize the comparator.

        Args:
            pom: POM of the current build.
            sources_jar: Sources jar of the current build.
            previous_version: Version to compare with. Without it the publications are never equal.
            fetcher: Downloads the artifacts of the previous version.
            repository_url: Maven repository the previous artifacts are derived from when they have no explicit URL.
        """
        self.pom = pom
        self.sources_jar = sources_jar
        self.previous_version = previous_version
        self.fetcher: ArtifactFetcher = fetcher or HttpArtifactFetcher()
        self.repository_url = repository_url
        self.state = ComparisonState.UNCOMPARED
        self._equal: bool | None = None

    def compare(self) -> bool:
        """Compare the publications and remember the verdict.

        Raises:
            LocalArtifactMissingError: If an artifact of the current build does not exist. Nothing is downloaded then.
            ArtifactFetchError: If an artifact of the previous version cannot be downloaded.
        """
        previous_version = self.previous_version
        if not previous_version:
            logger.info("Previous version not set, nothing to compare", current_version=self.pom.version)
            return self._finish(False)

        for descriptor in (self.pom, self.sources_jar):
            if not descriptor.local_path.is_file():
                raise LocalArtifactMissingError(str(descriptor.local_path))

        logger.info("Comparing publications", previous_version=self.previous_version, current_version=self.pom.version)
        self.state = ComparisonState.COMPARING
        try:
            with tempfile.TemporaryDirectory(prefix="publications-") as temp_dir:
                storage = Path(temp_dir)
                poms_equal = PomComparator(previous_version, self.pom.version, project_group=self.pom.group).are_equal(
                    self._fetch_previous(self.pom, previous_version, POM_EXTENSION, storage), self.pom.local_path
                )
                logger.info("Compared pom files", equal=poms_equal)
                jars_equal = ZipComparator().are_equal(
                    self._fetch_previous(self.sources_jar, previous_version, SOURCES_JAR_EXTENSION, storage), self.sources_jar.local_path
                )
                logger.info("Compared sources jars", equal=jars_equal)
        except Exception:
            self.state = ComparisonState.UNCOMPARED
            raise
        return self._finish(poms_equal and jars_equal)

    def is_equal(self) -> bool:
        """The verdict of the comparison.

        Raises:
            ComparisonNotPerformedError: If `compare()` has not completed yet.
        """
        if self.state is not ComparisonState.COMPARED or self._equal is None:
            raise ComparisonNotPerformedError()
        return self._equal

    def result(self) -> PublicationComparisonResult:
        """The verdict of the comparison in its persistable form."""
        return PublicationComparisonResult(
            artifact_name=self.pom.artifact_name,
            current_version=self.pom.version,
            previous_version=self.previous_version,
            equal=self.is_equal(),
        )

    def _fetch_previous(self, descriptor: VersionArtifactDescriptor, version: str, extension: str, storage: Path) -> Path:
        target_dir = storage / extension.strip(".-")
        target_dir.mkdir()
        return self.fetcher.fetch(descriptor.remote_url_for(version, extension, self.repository_url), target_dir)

    def _finish(self, equal: bool) -> bool:
        self._equal = equal
        self.state = ComparisonState.COMPARED
        return equal
