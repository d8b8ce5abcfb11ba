"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path

import git
import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from release_ops_manager.comparison.comparator import PublicationComparator
from release_ops_manager.comparison.exceptions import ArtifactFetchError, LocalArtifactMissingError
from release_ops_manager.comparison.models import PublicationComparisonResult, VersionArtifactDescriptor
from release_ops_manager.configuration.env import Settings
from release_ops_manager.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError
from release_ops_manager.configuration.models import ReleaseConfiguration, load_release_configuration
from release_ops_manager.configuration.reconcile import require, validate_github_authentication_configuration
from release_ops_manager.github.adapter import GitHubKitAdapter
from release_ops_manager.release.ci import CiBuildInfo, decorate_commit_message_postfix
from release_ops_manager.release.decision import ReleaseNeededDecision
from release_ops_manager.release.exceptions import CannotPushToGitHubError, PullRequestMergeError, ReleaseNotNeededError
from release_ops_manager.release.git import GitOperations
from release_ops_manager.release.pull_requests import StatusCheck, create_pull_request, merge_pull_request
from release_ops_manager.release_notes.aggregator import NotesAggregator, released_versions
from release_ops_manager.release_notes.exceptions import InvalidTeamMemberError, SerializationError
from release_ops_manager.release_notes.filters import IgnoreCommitByMessagePostfix
from release_ops_manager.release_notes.generator import ContributorsFetcher, IncrementalReleaseNotes, NotableReleaseNotes, ReleaseNotesFetcher
from release_ops_manager.release_notes.git import GitCommitSource, GitReleaseDateSource, latest_versions, list_tags
from release_ops_manager.release_notes.github import GitHubContributorSource, GitHubIssueSource
from release_ops_manager.utils.constants import (
    DEFAULT_CONTRIBUTORS_DATA_PATH,
    DEFAULT_NOTABLE_LABEL,
    DEFAULT_NOTABLE_RELEASE_NOTES_DATA_PATH,
    DEFAULT_RELEASE_NOTES_DATA_PATH,
)
from release_ops_manager.utils.process import ProcessExecutionError, ProcessRunner

load_dotenv()

logger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False)

HANDLED_ERRORS = (
    RequiredConfigurationElementError,
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidTeamMemberError,
    SerializationError,
    LocalArtifactMissingError,
    ArtifactFetchError,
    ProcessExecutionError,
    ReleaseNotNeededError,
    CannotPushToGitHubError,
    PullRequestMergeError,
    git.exc.GitError,
    FileNotFoundError,
    ValueError,
)

ConfigOption = Annotated[Path | None, Option("--config", envvar="RELEASE_CONFIG", help="Path to the release configuration YAML file.")]


def fail(error: Exception) -> typer.Exit:
    """Report the error on stderr and return the exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def load_configuration(config_path: Path | None) -> ReleaseConfiguration:
    """Load the release configuration, reporting problems the way every command does."""
    try:
        return load_release_configuration(config_path)
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc


# --- Typer group for commands talking to the GitHub repository ---
repo_app = typer.Typer(help="Repository-related commands")


def repo_callback(
    ctx: typer.Context,
    repo: Annotated[str, Argument(help="Repository name (owner/repo).")],
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = "https://api.github.com",
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
) -> None:
    """Set the repository for the current context."""
    ctx.ensure_object(dict)
    ctx.obj["repo"] = repo
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["github_app_id"] = github_app_id
    ctx.obj["github_app_private_key_path"] = github_app_private_key_path
    # Validate GitHub authentication configuration
    try:
        github_auth_type = asyncio.run(
            validate_github_authentication_configuration(
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
            )
        )
    except GitHubAuthenticationConfigurationUndefinedError as exc:
        raise fail(exc) from exc
    ctx.obj["github_auth_type"] = github_auth_type


repo_app.callback()(repo_callback)


async def create_adapter(ctx: typer.Context) -> GitHubKitAdapter:
    """Create the GitHub client adapter from the repository context."""
    return await GitHubKitAdapter.create(
        repo=ctx.obj["repo"],
        github_auth_type=ctx.obj["github_auth_type"],
        github_pat_token=ctx.obj["github_pat_token"],
        github_app_id=ctx.obj["github_app_id"],
        github_app_private_key_path=ctx.obj["github_app_private_key_path"],
        github_api_url=ctx.obj["github_api_url"],
    )


@repo_app.command(name="fetch-contributors")
def fetch_contributors_cli(
    ctx: typer.Context,
    output: Annotated[Path, Option(help="Where the contributors data is written.")] = Path(DEFAULT_CONTRIBUTORS_DATA_PATH),
    since_ref: Annotated[str | None, Option(help="Only keep authors of commits made after this ref (tag, branch or SHA).")] = None,
) -> None:
    """Fetch the contributors of the repository from GitHub."""
    repo: str = ctx.obj["repo"]

    async def fetch() -> int:
        adapter = await create_adapter(ctx)
        contributors = await ContributorsFetcher(GitHubContributorSource(adapter)).fetch(repo, output, since_ref=since_ref)
        return contributors.size()

    try:
        count = asyncio.run(fetch())
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(f"Fetched {count} contributor(s) of {repo} into {output}")


@repo_app.command(name="fetch-release-notes")
def fetch_release_notes_cli(
    ctx: typer.Context,
    version: Annotated[str, Argument(envvar="VERSION", help="Version being released.")],
    previous_versions: Annotated[
        list[str] | None,
        Option("--previous-version", help="Previously released version, newest first. Defaults to the configured previous release version."),
    ] = None,
    notable: Annotated[bool, Option(help="Fetch the data of the notable release notes instead of the detailed ones.")] = False,
    notable_versions: Annotated[int, Option(help="Number of previous versions covered by the notable release notes.")] = 20,
    work_dir: Annotated[Path, Option(help="Working copy of the git repository.")] = Path("."),
    output: Annotated[Path | None, Option(help="Where the release notes data is written.")] = None,
    unshallow: Annotated[bool, Option(help="Fetch the full git history first, for shallow CI clones.")] = False,
    config_path: ConfigOption = None,
) -> None:
    """Fetch commits and improvements of the version and write the release notes data."""
    repo: str = ctx.obj["repo"]
    configuration = load_configuration(config_path)
    tag_prefix = configuration.git.tag_prefix
    versions = list(previous_versions or [])
    if not notable and not versions and configuration.previous_release_version:
        versions = [configuration.previous_release_version]
    try:
        # Report missing identifiers before anything is fetched
        require(version, "version", "the version being released")
        if not notable:
            released_versions(version, versions, tag_prefix=tag_prefix)
        git_repo = git.Repo(work_dir)
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    if unshallow:
        GitOperations(ProcessRunner(work_dir), configuration).unshallow()

    if notable:
        versions = [v for v in latest_versions(list_tags(git_repo, tag_prefix), tag_prefix, notable_versions + 1) if v != version]
        versions = versions[:notable_versions]
        aggregator = NotesAggregator(labels=[DEFAULT_NOTABLE_LABEL], only_pull_requests=True)
        output = output or Path(DEFAULT_NOTABLE_RELEASE_NOTES_DATA_PATH)
    else:
        aggregator = NotesAggregator(commit_filter=IgnoreCommitByMessagePostfix(configuration.git.commit_message_postfix))
        output = output or Path(DEFAULT_RELEASE_NOTES_DATA_PATH)

    async def fetch() -> int:
        adapter = await create_adapter(ctx)
        fetcher = ReleaseNotesFetcher(
            commit_source=GitCommitSource(git_repo),
            date_source=GitReleaseDateSource(git_repo),
            issue_source=GitHubIssueSource(adapter, repo),
            aggregator=aggregator,
            tag_prefix=tag_prefix,
        )
        result = await fetcher.fetch(repo, version, versions, output, head_date=datetime.now(timezone.utc))
        return len(result.releases)

    try:
        count = asyncio.run(fetch())
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(f"Wrote release notes data of {count} version(s) to {output}")


@repo_app.command(name="create-pull-request")
def create_pull_request_cli(
    ctx: typer.Context,
    title: Annotated[str, Argument(help="Title of the pull request.")],
    head: Annotated[str, Argument(help="Branch with the changes, 'user:branch' for forks.")],
    base: Annotated[str, Argument(help="Branch the changes are merged into.")],
    body: Annotated[str | None, Option(help="Description of the pull request.")] = None,
    config_path: ConfigOption = None,
) -> None:
    """Create a pull request. Nothing is created in dry run mode."""
    configuration = load_configuration(config_path)

    async def create() -> None:
        adapter = await create_adapter(ctx)
        pull_request = await create_pull_request(adapter, title, head, base, body=body, dry_run=configuration.dry_run)
        if pull_request is not None:
            typer.echo(f"Created pull request #{pull_request.number}: {pull_request.html_url}")

    try:
        asyncio.run(create())
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc


@repo_app.command(name="merge-pull-request")
def merge_pull_request_cli(
    ctx: typer.Context,
    pull_number: Annotated[int, Argument(help="Number of the pull request.")],
    max_retries: Annotated[int, Option(help="How many times pending checks are polled again.")] = 20,
    delay: Annotated[float, Option(help="Seconds between two polls of the checks.")] = 10.0,
    config_path: ConfigOption = None,
) -> None:
    """Merge a pull request once all its checks passed."""
    configuration = load_configuration(config_path)

    async def merge() -> bool:
        adapter = await create_adapter(ctx)
        status_check = StatusCheck(adapter, max_retries=max_retries, delay=delay)
        return await merge_pull_request(adapter, pull_number, status_check=status_check, dry_run=configuration.dry_run)

    try:
        merged = asyncio.run(merge())
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(f"Pull request #{pull_number} merged: {merged}")


# --- Register the repo_app as a sub-app of the main Typer app ---
typer_app.add_typer(repo_app, name="repo")


@typer_app.command(name="preview-release-notes")
def preview_release_notes_cli(
    data: Annotated[Path, Option(help="Release notes data written by fetch-release-notes.")] = Path(DEFAULT_RELEASE_NOTES_DATA_PATH),
    contributors_data: Annotated[Path, Option(help="Contributors data written by fetch-contributors.")] = Path(DEFAULT_CONTRIBUTORS_DATA_PATH),
    config_path: ConfigOption = None,
) -> None:
    """Print the new content of the release notes without changing the release notes file."""
    configuration = load_configuration(config_path)
    try:
        result = IncrementalReleaseNotes(configuration, data, contributors_data).preview()
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(result.content, nl=False)


@typer_app.command(name="update-release-notes")
def update_release_notes_cli(
    data: Annotated[Path, Option(help="Release notes data written by fetch-release-notes.")] = Path(DEFAULT_RELEASE_NOTES_DATA_PATH),
    contributors_data: Annotated[Path, Option(help="Contributors data written by fetch-contributors.")] = Path(DEFAULT_CONTRIBUTORS_DATA_PATH),
    config_path: ConfigOption = None,
) -> None:
    """Prepend the new content to the release notes file."""
    configuration = load_configuration(config_path)
    try:
        result = IncrementalReleaseNotes(configuration, data, contributors_data).update()
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(f"Release notes {result.status.value}: {result.output_file}")


@typer_app.command(name="update-notable-release-notes")
def update_notable_release_notes_cli(
    data: Annotated[Path, Option(help="Notable release notes data written by fetch-release-notes --notable.")] = Path(
        DEFAULT_NOTABLE_RELEASE_NOTES_DATA_PATH
    ),
    config_path: ConfigOption = None,
) -> None:
    """Write the notable release notes file."""
    configuration = load_configuration(config_path)
    try:
        result = NotableReleaseNotes(configuration, data).update()
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(f"Notable release notes written to {result.output_file}")


@typer_app.command(name="compare-publications")
def compare_publications_cli(
    group: Annotated[str, Option(help="Group of the artifact, e.g. org.mockito.")],
    artifact: Annotated[str, Option(help="Name of the artifact, e.g. mockito-core.")],
    version: Annotated[str, Option(help="Version of the current build.")],
    pom: Annotated[Path, Option(help="POM of the current build.")],
    sources_jar: Annotated[Path, Option(help="Sources jar of the current build.")],
    previous_version: Annotated[str | None, Option(help="Previously released version. Defaults to the configured one.")] = None,
    previous_pom_url: Annotated[str | None, Option(help="URL of the previous POM. Derived from the Maven repository by default.")] = None,
    previous_sources_jar_url: Annotated[str | None, Option(help="URL of the previous sources jar.")] = None,
    repository_url: Annotated[str | None, Option(help="Maven repository the previous artifacts are published to.")] = None,
    result_file: Annotated[Path | None, Option(help="Where the verdict is written for release-needed.")] = None,
    config_path: ConfigOption = None,
) -> None:
    """Compare the publications of the current build with the ones of the previous version."""
    configuration = load_configuration(config_path)
    previous_version = previous_version or configuration.previous_release_version
    comparator_args = {"repository_url": repository_url} if repository_url else {}
    comparator = PublicationComparator(
        pom=VersionArtifactDescriptor(group=group, artifact_name=artifact, version=version, local_path=pom, remote_url=previous_pom_url),
        sources_jar=VersionArtifactDescriptor(
            group=group, artifact_name=artifact, version=version, local_path=sources_jar, remote_url=previous_sources_jar_url
        ),
        previous_version=previous_version,
        **comparator_args,
    )
    try:
        equal = comparator.compare()
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    if result_file is not None:
        result_file.parent.mkdir(parents=True, exist_ok=True)
        result_file.write_text(comparator.result().model_dump_json(indent=2), encoding="utf-8")
    typer.echo(f"Publications equal: {equal}")


@typer_app.command(name="release-needed")
def release_needed_cli(
    comparison_results: Annotated[
        list[Path] | None, Option("--comparison-result", help="Verdict written by compare-publications. Can be given several times.")
    ] = None,
    explosive: Annotated[bool, Option(help="Fail when the release is not needed.")] = False,
    config_path: ConfigOption = None,
) -> None:
    """Decide whether the current build needs to be released."""
    configuration = load_configuration(config_path)
    build = CiBuildInfo.from_settings(Settings())
    decision = ReleaseNeededDecision(releasable_branch_regex=configuration.git.releasable_branch_regex, explosive=explosive)
    try:
        publications = [PublicationComparisonResult.model_validate_json(path.read_text(encoding="utf-8")) for path in comparison_results or []]
        report = decision.evaluate(
            branch=build.branch,
            commit_message=build.commit_message,
            is_pull_request=build.is_pull_request,
            skip_by_env_flag=build.skip_release,
            publications=publications,
        )
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    typer.echo(report.message())


@typer_app.command(name="commit-release")
def commit_release_cli(
    version: Annotated[str, Argument(envvar="VERSION", help="Version being released.")],
    files: Annotated[list[str], Argument(help="Files changed by the release, e.g. the release notes.")],
    branch: Annotated[str | None, Option(help="Branch to push. Defaults to the CI branch, then the configured branch.")] = None,
    work_dir: Annotated[Path, Option(help="Working copy of the git repository.")] = Path("."),
    config_path: ConfigOption = None,
) -> None:
    """Commit the release files, tag the version and push both to GitHub."""
    configuration = load_configuration(config_path)
    settings = Settings()
    build = CiBuildInfo.from_settings(settings)
    postfix = decorate_commit_message_postfix(configuration.git.commit_message_postfix, configuration.github.repository, build.build_number)
    git_operations = GitOperations(ProcessRunner(work_dir), configuration, write_token=settings.GH_WRITE_TOKEN, commit_message_postfix=postfix)
    try:
        git_operations.commit(files, f"{version} release")
        tag = git_operations.tag(version)
    except HANDLED_ERRORS as exc:
        raise fail(exc) from exc
    try:
        git_operations.push(branch or build.branch or configuration.git.branch, version)
    except HANDLED_ERRORS as exc:
        # Leave the working copy as it was before the release
        clean_up_steps = (
            ("remove tag", lambda: git_operations.remove_tag(version)),
            ("undo release commit", git_operations.undo_last_commit),
        )
        for step, clean_up in clean_up_steps:
            try:
                clean_up()
            except ProcessExecutionError as clean_up_error:
                logger.error("Release clean-up step failed", step=step, error=str(clean_up_error))
        raise fail(exc) from exc
    typer.echo(f"Released {tag}")


if __name__ == "__main__":
    typer_app()
