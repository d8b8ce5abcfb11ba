"""GitHub client adapter for the githubkit library."""

from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Literal, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import (
    CombinedCommitStatus,
    CommitComparison,
    Contributor,
    Issue,
    PullRequest,
    PullRequestMergeResult,
)

from release_ops_manager.configuration.models import GitHubAuthenticationType
from release_ops_manager.utils.github import split_repository_in_configuration
from release_ops_manager.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code == 422:
                try:
                    error_data = exc.response.json()
                except ValueError:
                    error_data = {}
                message = error_data.get("message", "Unprocessable Entity")
                errors = error_data.get("errors", [])
                logger.error(
                    "GitHub 422 Unprocessable Entity",
                    function=func.__name__,
                    message=message,
                    errors=errors,
                    status_code=422,
                )
                raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors}") from exc
            raise

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @property
    def repository(self) -> str:
        """The repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo_name}"

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            repo=repo,
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    # Repository
    @retry_on_rate_limit()
    async def list_contributors(self, per_page: int = 100) -> list[Contributor]:
        """List all contributors of the repository, handling pagination."""
        all_contributors: list[Contributor] = []
        page: int = 1
        while True:
            response: Response[list[Contributor]] = await self.client.rest.repos.async_list_contributors(
                owner=self.owner,
                repo=self.repo_name,
                per_page=per_page,
                page=page,
            )
            contributors: list[Contributor] = response.parsed_data or []
            if not contributors:
                break
            all_contributors.extend(contributors)
            if len(contributors) < per_page:
                break
            page += 1
        logger.info("Fetched contributors", repository=self.repository, count=len(all_contributors))
        return all_contributors

    @retry_on_rate_limit()
    async def get_user_by_username(self, username: str) -> Any:
        """Get a GitHub user by username."""
        response = await self.client.rest.users.async_get_by_username(username=username)
        return response.parsed_data

    @retry_on_rate_limit()
    async def compare_commits(self, base: str, head: str) -> CommitComparison:
        """Compare two commits, branches or tags."""
        response: Response[CommitComparison] = await self.client.rest.repos.async_compare_commits(
            owner=self.owner,
            repo=self.repo_name,
            basehead=f"{base}...{head}",
        )
        return response.parsed_data

    # Issues
    @retry_on_rate_limit()
    async def list_issues(
        self,
        state: Literal["open", "closed", "all"] = "all",
        since: datetime | None = None,
        per_page: int = 100,
        **kwargs: Any,
    ) -> list[Issue]:
        """List all issues (including pull requests) for a repository, handling pagination."""
        all_issues: list[Issue] = []
        page: int = 1
        while True:
            params = self._omit_null_parameters(state=state, since=since, per_page=per_page, page=page, **kwargs)
            response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
                owner=self.owner,
                repo=self.repo_name,
                **params,
            )
            issues: list[Issue] = response.parsed_data
            if not issues:
                break
            all_issues.extend(issues)
            if len(issues) < per_page:
                break
            page += 1
        logger.info("Fetched issues", repository=self.repository, state=state, since=since.isoformat() if since else None, count=len(all_issues))
        return all_issues

    # Pull Requests
    @retry_on_rate_limit()
    async def get_pull_request(self, pull_request_number: int) -> PullRequest:
        """Get a pull request from the repository."""
        response: Response[PullRequest] = await self.client.rest.pulls.async_get(
            owner=self.owner, repo=self.repo_name, pull_number=pull_request_number
        )
        return response.parsed_data

    @handle_github_422
    @retry_on_rate_limit()
    async def create_pull_request(
        self,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
        maintainer_can_modify: bool | None = None,
        **kwargs: Any,
    ) -> PullRequest:
        """Create a pull request for a repository."""
        params = self._omit_null_parameters(
            title=title,
            head=head,
            base=base,
            body=body,
            maintainer_can_modify=maintainer_can_modify,
            **kwargs,
        )
        response: Response[PullRequest] = await self.client.rest.pulls.async_create(
            owner=self.owner,
            repo=self.repo_name,
            **params,
        )
        return response.parsed_data

    @handle_github_422
    async def merge_pull_request(self, pull_number: int, **kwargs: Any) -> PullRequestMergeResult:
        """Merge a pull request for a repository."""
        response: Response[PullRequestMergeResult] = await self.client.rest.pulls.async_merge(
            owner=self.owner, repo=self.repo_name, pull_number=pull_number, **kwargs
        )
        return response.parsed_data

    # Statuses
    @retry_on_rate_limit()
    async def get_combined_status(self, ref: str) -> CombinedCommitStatus:
        """Get the combined commit status of a ref (branch, tag or SHA)."""
        response: Response[CombinedCommitStatus] = await self.client.rest.repos.async_get_combined_status_for_ref(
            owner=self.owner, repo=self.repo_name, ref=ref
        )
        return response.parsed_data
