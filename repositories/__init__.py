"""Repositories package."""

from repositories.exceptions import (
    DirectoryError,
    DuplicateEmailError,
    ManagerNotFoundError,
    TeamHasActiveMembersError,
    TeamNotFoundError,
)
from repositories.team_repository import TeamRepository

__all__ = [
    "DirectoryError",
    "DuplicateEmailError",
    "ManagerNotFoundError",
    "TeamHasActiveMembersError",
    "TeamNotFoundError",
    "TeamRepository",
]
