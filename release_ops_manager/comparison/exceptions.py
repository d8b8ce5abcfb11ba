"""Contains exceptions raised while comparing publications."""


class ComparisonNotPerformedError(RuntimeError):
    """Raised when the comparison result is requested before the comparison ran."""

    def __init__(self) -> None:
        """Initializes the exception."""
        super().__init__("Publications were not compared yet, call compare() before asking for the result.")


class LocalArtifactMissingError(Exception):
    """Raised when an artifact of the current build does not exist."""

    def __init__(self, path: str) -> None:
        """Initializes the exception with the path of the missing artifact."""
        super().__init__(f"Artifact of the current build not found: {path}. Build the artifacts before comparing publications.")
        self.path = path


class ArtifactFetchError(Exception):
    """Raised when an artifact of the previous version cannot be downloaded."""

    pass
