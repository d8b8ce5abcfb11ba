"""Contains unit tests for the utils.github module."""

import pytest

from release_ops_manager.utils.github import compare_url_template, issue_url, split_repository_in_configuration


@pytest.mark.asyncio
async def test_split_repository_valid() -> None:
    """Test splitting a valid owner/repo string."""
    owner, repo = await split_repository_in_configuration("mockito/mockito")
    assert owner == "mockito"
    assert repo == "mockito"


@pytest.mark.asyncio
async def test_split_repository_missing() -> None:
    """Test that ValueError is raised if repo is None."""
    with pytest.raises(ValueError, match="GitHub repository \\(owner/repo\\) must be configured."):
        await split_repository_in_configuration(None)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "malformed_repo",
    [
        pytest.param("", id="empty string"),
        pytest.param("/", id="only a slash"),
        pytest.param("mockito-mockito", id="no slash"),
        pytest.param("owner/repo/extra", id="too many parts"),
    ],
)
async def test_split_repository_various_malformed(malformed_repo: str) -> None:
    """Test that ValueError is raised if repo is malformed (various cases)."""
    with pytest.raises(ValueError):
        await split_repository_in_configuration(malformed_repo)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "repo_input",
    [
        pytest.param("/mockito/mockito", id="leading slash"),
        pytest.param("mockito/mockito/", id="trailing slash"),
    ],
)
async def test_split_repository_strips_slashes(repo_input: str) -> None:
    """Test that leading/trailing slashes are stripped."""
    assert await split_repository_in_configuration(repo_input) == ("mockito", "mockito")


def test_issue_url_distinguishes_pull_requests() -> None:
    """Test that issues and pull requests link to their own pages."""
    assert issue_url("mockito/mockito", 12) == "https://github.com/mockito/mockito/issues/12"
    assert issue_url("mockito/mockito", 14, is_pull_request=True) == "https://github.com/mockito/mockito/pull/14"


def test_compare_url_template_is_formattable_with_tags() -> None:
    """Test the compare link template between two version tags."""
    template = compare_url_template("mockito/mockito")
    assert template.format(previous_tag="v1.0.0", tag="v1.1.0") == "https://github.com/mockito/mockito/compare/v1.0.0...v1.1.0"
