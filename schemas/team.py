"""Pydantic schemas for team and team member requests and responses."""

import json
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

from models.team import EmployeeRole, EmploymentStatus, TeamMember, TeamType


class TeamCreate(BaseModel):
    """Request body for creating a team."""

    name: str = Field(
        min_length=1,
        max_length=255,
        description="Team name",
    )
    description: str | None = None
    team_type: TeamType = Field(
        description="Internal staff or external partner team",
    )
    manager_id: UUID | None = Field(
        default=None,
        description="Team member who manages this team",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names made only of whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Team name is required")
        return v


class TeamUpdate(BaseModel):
    """Request body for updating a team. Only supplied fields are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    team_type: TeamType | None = None
    manager_id: UUID | None = None
    is_active: bool | None = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    team_type: TeamType
    manager_id: UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TeamListItem(TeamResponse):
    member_count: int = Field(
        default=0,
        description="Number of active members in the team",
    )


class TeamList(BaseModel):
    teams: list[TeamListItem]
    total: int


class TeamMemberSummary(BaseModel):
    """Member row embedded in a team detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str
    role: EmployeeRole
    title: str | None = None
    department: str | None = None
    employment_status: EmploymentStatus
    is_active: bool
    profile_image_url: str | None = None


class TeamDetail(TeamResponse):
    members: list[TeamMemberSummary] = Field(default_factory=list)


class TeamMemberCreate(BaseModel):
    """Request body for adding a member to a team."""

    team_id: UUID
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr = Field(max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    role: EmployeeRole
    title: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=100)
    reports_to_id: UUID | None = None
    start_date: datetime | None = None
    hourly_rate: int | None = Field(default=None, ge=0, description="In cents")
    salary: int | None = Field(default=None, ge=0, description="Annual, in cents")
    skills: list[str] | None = None
    bio: str | None = None
    profile_image_url: HttpUrl | None = None
    linkedin_url: HttpUrl | None = None
    github_url: HttpUrl | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Store addresses lower-cased so lookups are case-insensitive."""
        return v.lower()


class TeamMemberResponse(BaseModel):
    """A member as returned by the member listing and creation endpoints."""

    id: UUID
    team_id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str | None = None
    role: EmployeeRole
    title: str | None = None
    department: str | None = None
    reports_to_id: UUID | None = None
    employment_status: EmploymentStatus
    start_date: datetime | None = None
    end_date: datetime | None = None
    hourly_rate: int | None = None
    salary: int | None = None
    skills: list[str] = Field(default_factory=list)
    bio: str | None = None
    profile_image_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    team_name: str | None = None
    team_type: TeamType | None = None

    @classmethod
    def from_member(
        cls,
        member: TeamMember,
        team_name: str | None = None,
        team_type: TeamType | None = None,
    ) -> "TeamMemberResponse":
        """Build the response from an ORM row, decoding the stored skills list."""
        return cls(
            id=member.id,
            team_id=member.team_id,
            first_name=member.first_name,
            last_name=member.last_name,
            full_name=member.full_name,
            email=member.email,
            phone=member.phone,
            role=member.role,
            title=member.title,
            department=member.department,
            reports_to_id=member.reports_to_id,
            employment_status=member.employment_status,
            start_date=member.start_date,
            end_date=member.end_date,
            hourly_rate=member.hourly_rate,
            salary=member.salary,
            skills=json.loads(member.skills) if member.skills else [],
            bio=member.bio,
            profile_image_url=member.profile_image_url,
            linkedin_url=member.linkedin_url,
            github_url=member.github_url,
            is_active=member.is_active,
            created_at=member.created_at,
            updated_at=member.updated_at,
            team_name=team_name,
            team_type=team_type,
        )


class TeamMemberList(BaseModel):
    members: list[TeamMemberResponse]
    total: int
