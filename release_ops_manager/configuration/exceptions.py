"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, context: str | None = None) -> None:
        """Initializes the exception with the name of the missing element."""
        message = f"Missing required configuration element: {name}"
        if context:
            message += f" ({context})"
        super().__init__(message)
        self.name = name
        self.context = context
