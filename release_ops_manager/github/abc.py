"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Literal


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    # Repository
    @abstractmethod
    async def list_contributors(self, per_page: int = 100) -> list[Any]:
        """List the contributors of a repository."""
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Any:
        """Get a GitHub user by username."""
        pass

    @abstractmethod
    async def compare_commits(self, base: str, head: str) -> Any:
        """Compare two commits, branches or tags."""
        pass

    # Issues
    @abstractmethod
    async def list_issues(
        self,
        state: Literal["open", "closed", "all"] = "all",
        since: datetime | None = None,
        per_page: int = 100,
        **kwargs: Any,
    ) -> list[Any]:
        """List issues (including pull requests) for a repository."""
        pass

    # Pull Requests
    @abstractmethod
    async def get_pull_request(self, pull_request_number: int) -> Any:
        """Get a pull request for a repository."""
        pass

    @abstractmethod
    async def create_pull_request(
        self,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
        maintainer_can_modify: bool | None = None,
        **kwargs: Any,
    ) -> Any:
        """Create a pull request for a repository."""
        pass

    @abstractmethod
    async def merge_pull_request(self, pull_number: int, **kwargs: Any) -> Any:
        """Merge a pull request for a repository."""
        pass

    # Statuses
    @abstractmethod
    async def get_combined_status(self, ref: str) -> Any:
        """Get the combined commit status of a ref."""
        pass
