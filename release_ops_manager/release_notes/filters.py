"""Predicates that exclude commits from release notes."""

from typing import Protocol

from release_ops_manager.release_notes.models import Commit


class CommitFilter(Protocol):
    """Decides whether a commit is left out of the release notes."""

    def is_excluded(self, commit: Commit) -> bool:
        """Return True if the commit should not appear in the release notes."""
        ...


class IgnoreCommitByMessagePostfix:
    """Excludes commits whose full message ends with the configured postfix.

    Used to hide commits made by the release automation itself, which carry a
    postfix such as '[ci skip]'. The match is an exact suffix match: a message
    that merely contains the postfix somewhere else is kept.
    """

    def __init__(self, postfix: str) -> None:
        """Initialize with the postfix. An empty postfix excludes nothing."""
        self.postfix = postfix

    def is_excluded(self, commit: Commit) -> bool:
        """Return True if the commit message ends with the postfix."""
        if not self.postfix:
            return False
        return commit.message.endswith(self.postfix)


class AnyCommitFilter:
    """Excludes a commit when any of the wrapped filters excludes it."""

    def __init__(self, *filters: CommitFilter) -> None:
        """Initialize with the filters to combine."""
        self.filters = filters

    def is_excluded(self, commit: Commit) -> bool:
        """Return True if any wrapped filter excludes the commit."""
        return any(f.is_excluded(commit) for f in self.filters)
