"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Token used to push to the repository and to create/merge pull requests
    GH_WRITE_TOKEN: str | None = None

    # Release decision
    SKIP_RELEASE: str | None = None

    # Travis CI build information
    TRAVIS_BRANCH: str | None = None
    TRAVIS_PULL_REQUEST: str | None = None
    TRAVIS_COMMIT_MESSAGE: str | None = None
    TRAVIS_BUILD_NUMBER: str | None = None
