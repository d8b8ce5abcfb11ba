"""Publication comparison module."""

from .archive import ZipComparator
from .comparator import PublicationComparator
from .exceptions import ArtifactFetchError, ComparisonNotPerformedError, LocalArtifactMissingError
from .fetcher import ArtifactFetcher, HttpArtifactFetcher
from .models import ComparisonState, PublicationComparisonResult, VersionArtifactDescriptor
from .pom import PomComparator

__all__ = [
    "ComparisonState",
    "VersionArtifactDescriptor",
    "PublicationComparisonResult",
    "PomComparator",
    "ZipComparator",
    "ArtifactFetcher",
    "HttpArtifactFetcher",
    "PublicationComparator",
    "ComparisonNotPerformedError",
    "LocalArtifactMissingError",
    "ArtifactFetchError",
]
