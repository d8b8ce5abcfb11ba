"""Persists release notes data and contributors between the fetch and format stages.

Both documents are JSON with an explicit schema version, so that a stage never
silently reads data written by an incompatible version of the tool.
"""

from collections.abc import Sequence
from typing import Generic, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from release_ops_manager.release_notes.contributors import ContributorSet
from release_ops_manager.release_notes.exceptions import SerializationError
from release_ops_manager.release_notes.models import Contributor, ReleaseNotesData
from release_ops_manager.utils.constants import SERIALIZATION_SCHEMA_VERSION

logger = structlog.get_logger(__name__)


class ReleaseNotesDocument(BaseModel):
    """Persisted form of a release notes data sequence."""

    schema_version: int = SERIALIZATION_SCHEMA_VERSION
    releases: list[ReleaseNotesData]


class ContributorsDocument(BaseModel):
    """Persisted form of a contributor set, in sorted order."""

    schema_version: int = SERIALIZATION_SCHEMA_VERSION
    contributors: list[Contributor]


DocumentT = TypeVar("DocumentT", ReleaseNotesDocument, ContributorsDocument)


class _DocumentSerializer(Generic[DocumentT]):
    document_type: type[DocumentT]

    def _dump(self, document: DocumentT) -> str:
        return document.model_dump_json(indent=2)

    def _load(self, content: str) -> DocumentT:
        try:
            document = self.document_type.model_validate_json(content)
        except ValidationError as exc:
            raise SerializationError(f"Cannot read {self.document_type.__name__}: {exc}") from exc
        if document.schema_version != SERIALIZATION_SCHEMA_VERSION:
            raise SerializationError(
                f"Unsupported {self.document_type.__name__} schema version {document.schema_version}, expected {SERIALIZATION_SCHEMA_VERSION}"
            )
        return document


class ReleaseNotesSerializer(_DocumentSerializer[ReleaseNotesDocument]):
    """Serializes a sequence of release notes data."""

    document_type = ReleaseNotesDocument

    def serialize(self, releases: Sequence[ReleaseNotesData]) -> str:
        """Serialize the releases, keeping their order."""
        logger.debug("Serializing release notes data", releases=len(releases))
        return self._dump(ReleaseNotesDocument(releases=list(releases)))

    def deserialize(self, content: str) -> list[ReleaseNotesData]:
        """Reconstruct the releases written by `serialize`."""
        return self._load(content).releases


class ContributorsSerializer(_DocumentSerializer[ContributorsDocument]):
    """Serializes a contributor set."""

    document_type = ContributorsDocument

    def serialize(self, contributors: ContributorSet) -> str:
        """Serialize the contributors in sorted order."""
        logger.debug("Serializing contributors", contributors=contributors.size())
        return self._dump(ContributorsDocument(contributors=contributors.all_sorted()))

    def deserialize(self, content: str) -> ContributorSet:
        """Reconstruct the contributor set written by `serialize`."""
        return ContributorSet(self._load(content).contributors)
