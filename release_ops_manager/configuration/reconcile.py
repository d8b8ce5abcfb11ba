"""Reconcile GitHub authentication and required release configuration."""

from pathlib import Path
from typing import TypeVar

from release_ops_manager.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError
from release_ops_manager.configuration.models import GitHubAuthenticationType

T = TypeVar("T")


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If neither or both of PAT and App configurations are defined,
            or if the App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_pat_token and (github_app_id or github_app_private_key_path):
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path:
        return GitHubAuthenticationType.APP
    if github_app_id or github_app_private_key_path:
        missing = "GitHub App private key path (GITHUB_APP_PRIVATE_KEY_PATH)" if github_app_id else "GitHub App ID (GITHUB_APP_ID)"
        raise GitHubAuthenticationConfigurationUndefinedError(f"Incomplete GitHub App configuration - missing {missing}")
    raise GitHubAuthenticationConfigurationUndefinedError(
        "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
    )


def require(value: T | None, name: str, context: str | None = None) -> T:
    """Return the value, or raise if a required configuration element is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RequiredConfigurationElementError(name, context)
    return value
