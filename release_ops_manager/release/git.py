"""Git operations performed when releasing: commit, tag, push and their clean-up."""

from collections.abc import Sequence

import structlog

from release_ops_manager.configuration.models import ReleaseConfiguration
from release_ops_manager.configuration.reconcile import require
from release_ops_manager.release.exceptions import CannotPushToGitHubError
from release_ops_manager.utils.constants import SECRET_MASK
from release_ops_manager.utils.process import ProcessExecutionError, ProcessRunner

logger = structlog.get_logger(__name__)

WRITE_TOKEN_NOT_SET_MESSAGE = (
    "Cannot push to remote repository. GH_WRITE_TOKEN env variable not set or you don't have write access to remote. "
    "Please recheck your configuration."
)
WRITE_TOKEN_INVALID_MESSAGE = "Cannot push to remote repository. GH_WRITE_TOKEN env variable is set but possibly invalid. Please recheck your configuration."
PUSH_AUTHENTICATION_FAILURES = ("Authentication failed", "unable to access")


class GitPushErrorHandler:
    """Turns authentication failures of 'git push' into an actionable error."""

    def __init__(self, write_token: str | None) -> None:
        """Initialize with the token used for pushing, if any."""
        self.write_token = write_token

    def matches(self, error: ProcessExecutionError) -> bool:
        """Whether the failure is caused by missing or invalid credentials."""
        text = f"{error}\n{error.output}"
        return any(failure in text for failure in PUSH_AUTHENTICATION_FAILURES)

    def handle(self, error: ProcessExecutionError) -> None:
        """Re-raise the failure, as CannotPushToGitHubError when it is about credentials."""
        if not self.matches(error):
            raise error
        message = WRITE_TOKEN_INVALID_MESSAGE if self.write_token else WRITE_TOKEN_NOT_SET_MESSAGE
        raise CannotPushToGitHubError(message) from error


class GitOperations:
    """Runs the git commands of a release in the working copy."""

    def __init__(
        self,
        runner: ProcessRunner,
        configuration: ReleaseConfiguration,
        write_token: str | None = None,
        commit_message_postfix: str | None = None,
    ) -> None:
        """Initialize the operations.

        Args:
            runner: Runs git in the working copy.
            configuration: Release configuration providing git and GitHub settings.
            write_token: Token with write access to the GitHub repository. It is masked in all output.
            commit_message_postfix: Overrides the configured postfix, e.g. with one naming the CI build.
        """
        self.runner = runner.with_secret(write_token)
        self.configuration = configuration
        self.write_token = write_token
        self.commit_message_postfix = (
            configuration.git.commit_message_postfix if commit_message_postfix is None else commit_message_postfix
        )

    @property
    def generic_user(self) -> str:
        """The author of release commits, e.g. 'release-ops-manager <release-ops-manager@users.noreply.github.com>'."""
        return f"{self.configuration.git.user} <{self.configuration.git.email}>"

    def tag_name(self, version: str) -> str:
        """The tag of the version."""
        return f"{self.configuration.git.tag_prefix}{version}"

    def commit_message(self, message: str) -> str:
        """The message with the commit message postfix appended."""
        if not self.commit_message_postfix:
            return message
        return f"{message} {self.commit_message_postfix}"

    def push_url(self) -> str:
        """URL to push to, carrying the write credentials."""
        user = require(self.configuration.github.write_auth_user, "github.write_auth_user", "the user pushing to the repository")
        repository = require(self.configuration.github.repository, "github.repository", "the repository to push to")
        return f"https://{user}:{self.write_token or SECRET_MASK}@github.com/{repository}.git"

    def commit(self, files: Sequence[str], message: str) -> None:
        """Commit the files as the generic user."""
        self.runner.run("git", "add", *files)
        self.runner.run("git", "commit", "--author", self.generic_user, "-m", self.commit_message(message))

    def tag(self, version: str) -> str:
        """Create the annotated tag of the version and return its name."""
        tag = self.tag_name(version)
        self.runner.run("git", "tag", "-a", tag, "-m", self.commit_message(f"Created new tag {tag}"))
        return tag

    def push(self, branch: str, version: str | None = None) -> None:
        """Push the branch, and the tag of the version when given.

        In dry run mode git is asked to only pretend pushing.

        Raises:
            CannotPushToGitHubError: If the credentials are missing or invalid.
        """
        args = ["git", "push", self.push_url(), branch]
        if version is not None:
            args.append(self.tag_name(version))
        if self.configuration.dry_run:
            args.append("--dry-run")
        try:
            self.runner.run(*args)
        except ProcessExecutionError as exc:
            GitPushErrorHandler(self.write_token).handle(exc)

    def unshallow(self) -> None:
        """Fetch the full history, which release notes need. Fails quietly when the clone is not shallow."""
        try:
            self.runner.run("git", "fetch", "--unshallow")
        except ProcessExecutionError as exc:
            logger.info("Could not unshallow the repository, it is probably complete already", exit_code=exc.exit_code)

    def remove_tag(self, version: str) -> None:
        """Delete the local tag of the version."""
        self.runner.run("git", "tag", "-d", self.tag_name(version))

    def undo_last_commit(self) -> None:
        """Remove the last commit, keeping its changes in the working copy."""
        self.runner.run("git", "reset", "--soft", "HEAD~")
