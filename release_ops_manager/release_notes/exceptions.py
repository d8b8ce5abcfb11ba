"""Contains exceptions raised while building release notes."""


class InvalidTeamMemberError(ValueError):
    """Raised when a team member is not in the 'login:Full Name' notation."""

    def __init__(self, notation: str) -> None:
        """Initializes the exception with the offending notation."""
        super().__init__(
            f"Invalid format of team member '{notation}'. "
            "Expected the compact notation 'GITHUB_LOGIN:FULL_NAME', for example 'octocat:Mona Lisa'."
        )
        self.notation = notation


class SerializationError(Exception):
    """Raised when persisted release notes or contributors data cannot be read back."""

    pass
