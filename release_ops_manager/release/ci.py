"""Build information provided by the CI server (Travis CI)."""

from dataclasses import dataclass

import structlog

from release_ops_manager.configuration.env import Settings

logger = structlog.get_logger(__name__)

TRAVIS_BUILD_URL_TEMPLATE = "https://travis-ci.org/{repository}/builds/{build_number}"


def is_pull_request_value(value: str | None) -> bool:
    """Interpret TRAVIS_PULL_REQUEST, which is the pull request number or "false"."""
    return value is not None and bool(value.strip()) and value.strip() != "false"


def decorate_commit_message_postfix(postfix: str, repository: str | None, build_number: str | None) -> str:
    """Prefix the commit message postfix with the URL of the CI build, when the build is known."""
    if not build_number or not repository:
        return postfix
    build_url = TRAVIS_BUILD_URL_TEMPLATE.format(repository=repository, build_number=build_number)
    return f"CI job: {build_url} {postfix}".rstrip()


@dataclass(frozen=True)
class CiBuildInfo:
    """What the CI server tells about the current build."""

    branch: str | None = None
    commit_message: str | None = None
    is_pull_request: bool = False
    build_number: str | None = None
    skip_release: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "CiBuildInfo":
        """Read the build information from the environment settings."""
        info = cls(
            branch=settings.TRAVIS_BRANCH,
            commit_message=settings.TRAVIS_COMMIT_MESSAGE,
            is_pull_request=is_pull_request_value(settings.TRAVIS_PULL_REQUEST),
            build_number=settings.TRAVIS_BUILD_NUMBER,
            skip_release=settings.SKIP_RELEASE is not None,
        )
        logger.info(
            "CI build information",
            branch=info.branch,
            is_pull_request=info.is_pull_request,
            build_number=info.build_number,
            skip_release=info.skip_release,
        )
        if info.branch is None:
            logger.warning("Branch unknown, TRAVIS_BRANCH is not set")
        return info
