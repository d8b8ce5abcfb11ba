"""Contains exceptions raised while releasing."""


class ReleaseNotNeededError(Exception):
    """Raised in explosive mode when the release is not needed.

    Carries the report listing every signal that took part in the decision.
    """

    def __init__(self, report: str) -> None:
        """Initializes the exception with the decision report."""
        super().__init__(report)
        self.report = report


class CannotPushToGitHubError(Exception):
    """Raised when pushing to GitHub fails because of missing or invalid credentials."""

    pass


class PullRequestMergeError(Exception):
    """Raised when a pull request cannot be merged."""

    pass
