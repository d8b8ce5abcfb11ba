"""Release notes generation module."""

from .aggregator import NotesAggregator, attribute_contributions, released_versions
from .contributors import ContributorSet, TeamMember, build_contributors_map
from .filters import AnyCommitFilter, CommitFilter, IgnoreCommitByMessagePostfix
from .formatter import DetailedFormatter, NotableFormatter
from .generator import ContributorsFetcher, IncrementalReleaseNotes, NotableReleaseNotes, ReleaseNotesFetcher
from .markdown import MarkdownWriter
from .models import (
    Commit,
    Contribution,
    Contributor,
    Improvement,
    ReleasedVersion,
    ReleaseNotesData,
    ReleaseNotesResult,
    ReleaseNotesStatus,
)
from .serializer import ContributorsSerializer, ReleaseNotesSerializer

__all__ = [
    "ReleaseNotesStatus",
    "ReleaseNotesResult",
    "Commit",
    "Contributor",
    "Contribution",
    "Improvement",
    "ReleasedVersion",
    "ReleaseNotesData",
    "ContributorSet",
    "TeamMember",
    "build_contributors_map",
    "CommitFilter",
    "IgnoreCommitByMessagePostfix",
    "AnyCommitFilter",
    "NotesAggregator",
    "released_versions",
    "attribute_contributions",
    "DetailedFormatter",
    "NotableFormatter",
    "ReleaseNotesSerializer",
    "ContributorsSerializer",
    "MarkdownWriter",
    "ReleaseNotesFetcher",
    "ContributorsFetcher",
    "IncrementalReleaseNotes",
    "NotableReleaseNotes",
]
