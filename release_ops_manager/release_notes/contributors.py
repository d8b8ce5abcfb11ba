"""Project contributors: deduplicated sets, team notation and the merge policy."""

import bisect
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from release_ops_manager.release_notes.exceptions import InvalidTeamMemberError
from release_ops_manager.release_notes.models import Contributor
from release_ops_manager.utils.constants import GITHUB_PROFILE_URL_TEMPLATE

if TYPE_CHECKING:
    from release_ops_manager.release_notes.serializer import ContributorsSerializer

logger = structlog.get_logger(__name__)


def _sort_key(contributor: Contributor) -> int:
    return -contributor.number_of_contributions


class ContributorSet:
    """Deduplicated collection of contributors.

    Keeps three views in sync: a set for structural uniqueness, a list sorted by
    number of contributions (descending, ties in insertion order) and a lookup
    by name. Adding a contributor that is already present changes nothing.
    """

    def __init__(self, contributors: Iterable[Contributor] = ()) -> None:
        """Initialize the set, optionally with initial contributors."""
        self._unique: set[Contributor] = set()
        self._sorted: list[Contributor] = []
        self._by_name: dict[str | None, Contributor] = {}
        self.add_all(contributors)

    def add(self, contributor: Contributor) -> None:
        """Add a contributor unless a structurally equal one is already present."""
        if contributor in self._unique:
            return
        self._unique.add(contributor)
        index = bisect.bisect_right(self._sorted, _sort_key(contributor), key=_sort_key)
        self._sorted.insert(index, contributor)
        self._by_name[contributor.name] = contributor

    def add_all(self, contributors: Iterable[Contributor]) -> None:
        """Add every contributor of the iterable."""
        for contributor in contributors:
            self.add(contributor)

    def size(self) -> int:
        """Number of unique contributors."""
        return len(self._unique)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Contributor]:
        return iter(self._sorted)

    def all_sorted(self) -> list[Contributor]:
        """All contributors, most contributions first."""
        return list(self._sorted)

    def find_by_name(self, name: str | None) -> Contributor | None:
        """Find a contributor by display name."""
        return self._by_name.get(name)

    def to_compact_notation(self) -> list[str]:
        """Render the contributors as 'login:Full Name' strings, in sorted order.

        Contributors without a public name on GitHub get their login as name.
        """
        return [f"{c.login}:{c.display_name}" for c in self._sorted]

    def __repr__(self) -> str:
        return f"ContributorSet({self._sorted!r})"


@dataclass(frozen=True)
class TeamMember:
    """A developer or contributor configured in 'login:Full Name' notation."""

    login: str
    name: str

    @classmethod
    def parse(cls, notation: str) -> "TeamMember":
        """Parse the compact notation, splitting on the first colon."""
        login, separator, name = notation.partition(":")
        login, name = login.strip(), name.strip()
        if not separator or not login or not name:
            raise InvalidTeamMemberError(notation)
        return cls(login=login, name=name)

    def to_contributor(self) -> Contributor:
        """Synthesize a contributor record pointing at the member's GitHub profile."""
        return Contributor(name=self.name, login=self.login, profile_url=GITHUB_PROFILE_URL_TEMPLATE.format(login=self.login))


def build_contributors_map(
    configured_contributors: Iterable[str],
    github_contributors: ContributorSet,
    developers: Iterable[str],
) -> dict[str | None, Contributor]:
    """Merge the contributor sources into a single mapping keyed by name.

    Layers are applied in this order, each overwriting same-named entries of the
    previous ones: configured contributors, contributors fetched from GitHub,
    configured developers. Developers are the most authoritative source.
    """
    merged: dict[str | None, Contributor] = {}
    for notation in configured_contributors:
        member = TeamMember.parse(notation)
        merged[member.name] = member.to_contributor()
    for contributor in github_contributors.all_sorted():
        merged[contributor.name] = contributor
    for notation in developers:
        member = TeamMember.parse(notation)
        merged[member.name] = member.to_contributor()
    return merged


def load_github_contributors(
    configured_contributors: list[str],
    contributors_file: Path | None,
    serializer: "ContributorsSerializer",
) -> ContributorSet:
    """Read the contributors fetched from GitHub, unless contributors are configured explicitly.

    Explicitly configured contributors replace the GitHub data, so the cached
    contributors file is not read at all in that case.
    """
    if configured_contributors:
        logger.info("Contributors configured explicitly, not reading GitHub contributors", count=len(configured_contributors))
        return ContributorSet()
    if contributors_file is None:
        logger.info("No contributors data file configured")
        return ContributorSet()
    if not contributors_file.is_file():
        logger.warning("Contributors data file not found, run fetch-contributors to link authors", path=str(contributors_file))
        return ContributorSet()
    logger.info("Reading project contributors from file", path=str(contributors_file))
    return serializer.deserialize(contributors_file.read_text(encoding="utf-8"))
