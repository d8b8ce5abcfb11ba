"""Contains utility functions for GitHub interactions."""


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("GitHub repository (owner/repo) must be configured.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def issue_url(repository: str, number: int, is_pull_request: bool = False) -> str:
    """Build the web URL of an issue or pull request in a GitHub repository."""
    kind = "pull" if is_pull_request else "issues"
    return f"https://github.com/{repository}/{kind}/{number}"


def compare_url_template(repository: str) -> str:
    """Build the template of the GitHub compare link between two version tags."""
    return f"https://github.com/{repository}/compare/{{previous_tag}}...{{tag}}"
