"""Decides whether a release is needed for the current build."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog

from release_ops_manager.release.exceptions import ReleaseNotNeededError
from release_ops_manager.utils.constants import DEFAULT_RELEASABLE_BRANCH_REGEX, SKIP_RELEASE_KEYWORD

logger = structlog.get_logger(__name__)


class ComparedPublication(Protocol):
    """Anything that knows whether a publication equals its previous version."""

    def is_equal(self) -> bool:
        """Whether the publication equals the previous one."""
        ...


def is_release_needed(
    skip_by_env_flag: bool,
    skip_by_commit_message_keyword: bool,
    is_pull_request: bool,
    is_releasable_branch: bool,
    publications_equal: bool,
) -> bool:
    """Whether a release is needed: nothing asks to skip it, the branch is releasable and the publications changed."""
    return (
        not skip_by_env_flag
        and not skip_by_commit_message_keyword
        and not is_pull_request
        and is_releasable_branch
        and not publications_equal
    )


def is_releasable_branch(branch: str | None, pattern: str = DEFAULT_RELEASABLE_BRANCH_REGEX) -> bool:
    """Whether the whole branch name matches the pattern."""
    return branch is not None and re.fullmatch(pattern, branch) is not None


def is_skipped_by_commit_message(commit_message: str | None, keyword: str = SKIP_RELEASE_KEYWORD) -> bool:
    """Whether the commit message contains the skip-release keyword."""
    return commit_message is not None and keyword in commit_message


def all_publications_equal(publications: Sequence[ComparedPublication]) -> bool:
    """Whether every compared publication is equal. Without any comparison nothing counts as equal."""
    return bool(publications) and all(p.is_equal() for p in publications)


@dataclass(frozen=True)
class ReleaseNeededReport:
    """Every signal taking part in the release decision, and the decision itself."""

    skip_by_env_flag: bool
    skip_by_commit_message_keyword: bool
    is_pull_request: bool
    is_releasable_branch: bool
    publications_equal: bool
    branch: str | None = None
    releasable_branch_regex: str = DEFAULT_RELEASABLE_BRANCH_REGEX

    @property
    def needed(self) -> bool:
        """The decision."""
        return is_release_needed(
            self.skip_by_env_flag,
            self.skip_by_commit_message_keyword,
            self.is_pull_request,
            self.is_releasable_branch,
            self.publications_equal,
        )

    def message(self) -> str:
        """Human readable report."""
        return (
            f"Release is needed: {self.needed}\n"
            f"  - skip by env variable: {self.skip_by_env_flag}\n"
            f"  - skip by commit message: {self.skip_by_commit_message_keyword}\n"
            f"  - is pull request build: {self.is_pull_request}\n"
            f"  - is releasable branch: {self.is_releasable_branch} (branch: {self.branch}, regex: {self.releasable_branch_regex})\n"
            f"  - publications equal to the previous release: {self.publications_equal}"
        )


class ReleaseNeededDecision:
    """Combines the build signals into the release decision.

    In explosive mode a release that is not needed is an error, so that an
    unexpected skip is visible in the build instead of passing silently.
    """

    def __init__(
        self,
        releasable_branch_regex: str = DEFAULT_RELEASABLE_BRANCH_REGEX,
        skip_release_keyword: str = SKIP_RELEASE_KEYWORD,
        explosive: bool = False,
    ) -> None:
        """Initialize the decision."""
        self.releasable_branch_regex = releasable_branch_regex
        self.skip_release_keyword = skip_release_keyword
        self.explosive = explosive

    def evaluate(
        self,
        branch: str | None,
        commit_message: str | None,
        is_pull_request: bool,
        skip_by_env_flag: bool,
        publications: Sequence[ComparedPublication] = (),
    ) -> ReleaseNeededReport:
        """Decide whether the release is needed.

        Raises:
            ReleaseNotNeededError: In explosive mode, if the release is not needed.
            ComparisonNotPerformedError: If a publication was not compared yet.
        """
        report = ReleaseNeededReport(
            skip_by_env_flag=skip_by_env_flag,
            skip_by_commit_message_keyword=is_skipped_by_commit_message(commit_message, self.skip_release_keyword),
            is_pull_request=is_pull_request,
            is_releasable_branch=is_releasable_branch(branch, self.releasable_branch_regex),
            publications_equal=all_publications_equal(publications),
            branch=branch,
            releasable_branch_regex=self.releasable_branch_regex,
        )
        if not report.needed and self.explosive:
            raise ReleaseNotNeededError(report.message())
        logger.info(
            "Release decision",
            needed=report.needed,
            skip_by_env_flag=report.skip_by_env_flag,
            skip_by_commit_message=report.skip_by_commit_message_keyword,
            is_pull_request=report.is_pull_request,
            is_releasable_branch=report.is_releasable_branch,
            branch=branch,
            publications_equal=report.publications_equal,
        )
        return report
