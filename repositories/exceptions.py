"""Errors raised by the Directory Store repositories.

Routers translate these into HTTP responses; the messages are safe to show
to API clients.
"""


class DirectoryError(Exception):
    """Base class for Directory Store rule violations."""

    message = "Directory operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class TeamNotFoundError(DirectoryError):
    message = "Team not found"


class ManagerNotFoundError(DirectoryError):
    message = "Manager not found"


class DuplicateEmailError(DirectoryError):
    message = "Email already exists"


class TeamHasActiveMembersError(DirectoryError):
    message = "Cannot delete team with active members"
