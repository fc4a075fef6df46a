"""Directory Store models: teams and their members.

The reports-to link between members is not a foreign key. It is
maintained by the application and may reference members that were removed,
so readers such as the organization chart must tolerate dangling or cyclic
references.
"""

import enum
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from models.base import Base, TimestampMixin


class TeamType(str, enum.Enum):
    """Whether a team is staffed in-house or by an outside partner."""

    INTERNAL = "internal"
    EXTERNAL = "external"


class EmployeeRole(str, enum.Enum):
    """Job roles a team member can hold."""

    CEO = "ceo"
    MANAGER = "manager"
    TEAM_LEAD = "team_lead"
    SENIOR_DEVELOPER = "senior_developer"
    DEVELOPER = "developer"
    JUNIOR_DEVELOPER = "junior_developer"
    DESIGNER = "designer"
    QA_ENGINEER = "qa_engineer"
    PROJECT_MANAGER = "project_manager"
    BUSINESS_ANALYST = "business_analyst"
    CONSULTANT = "consultant"
    CONTRACTOR = "contractor"


class EmploymentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Team(TimestampMixin, Base):
    """A group of team members, either internal staff or an external partner."""

    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    team_type = Column(
        Enum(TeamType, name="team_type", values_callable=_enum_values),
        nullable=False,
    )
    manager_id = Column(Uuid)
    is_active = Column(Boolean, default=True, nullable=False)

    members = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
    )


class TeamMember(TimestampMixin, Base):
    """A person in the directory, belonging to exactly one team."""

    __tablename__ = "team_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    team_id = Column(
        Uuid,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20))
    role = Column(
        Enum(EmployeeRole, name="employee_role", values_callable=_enum_values),
        nullable=False,
    )
    title = Column(String(255))
    department = Column(String(100))
    reports_to_id = Column(Uuid, index=True)
    employment_status = Column(
        Enum(EmploymentStatus, name="employment_status", values_callable=_enum_values),
        default=EmploymentStatus.ACTIVE,
        nullable=False,
    )
    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True))
    hourly_rate = Column(Integer)  # cents, external contractors
    salary = Column(Integer)  # annual, cents, internal employees
    skills = Column(Text)  # JSON-encoded list of strings
    bio = Column(Text)
    profile_image_url = Column(String(500))
    linkedin_url = Column(String(500))
    github_url = Column(String(500))
    is_active = Column(Boolean, default=True, nullable=False)

    team = relationship("Team", back_populates="members")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
