"""Models package."""

from models.base import Base, TimestampMixin
from models.team import EmployeeRole, EmploymentStatus, Team, TeamMember, TeamType

__all__ = [
    "Base",
    "TimestampMixin",
    "EmployeeRole",
    "EmploymentStatus",
    "Team",
    "TeamMember",
    "TeamType",
]
