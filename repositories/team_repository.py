"""Repository for team and team member database operations."""

import json
import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models.team import EmployeeRole, EmploymentStatus, Team, TeamMember, TeamType
from repositories.exceptions import (
    DuplicateEmailError,
    ManagerNotFoundError,
    TeamHasActiveMembersError,
    TeamNotFoundError,
)
from schemas.org_chart import OrgEmployee
from schemas.team import TeamCreate, TeamMemberCreate, TeamUpdate

logger = logging.getLogger(__name__)

# Columns that may not be cleared through a partial update
_REQUIRED_TEAM_FIELDS = ("name", "team_type", "is_active")


class TeamRepository:
    """Data access layer for the Directory Store (teams and team members)."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session.
        """
        self.db = db

    def list_teams(
        self,
        team_type: TeamType | None = None,
        search: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[tuple[Team, int]]:
        """List teams, newest first, with their active member counts.

        Args:
            team_type: Only return teams of this type.
            search: Case-insensitive substring matched against name and description.
            limit: Page size.
            offset: Number of teams to skip.

        Returns:
            List of (team, active member count) tuples.
        """
        member_counts = (
            self.db.query(
                TeamMember.team_id.label("team_id"),
                func.count(TeamMember.id).label("member_count"),
            )
            .filter(TeamMember.is_active.is_(True))
            .group_by(TeamMember.team_id)
            .subquery()
        )

        query = self.db.query(
            Team,
            func.coalesce(member_counts.c.member_count, 0),
        ).outerjoin(member_counts, member_counts.c.team_id == Team.id)

        if team_type is not None:
            query = query.filter(Team.team_type == team_type)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Team.name.ilike(pattern), Team.description.ilike(pattern))
            )

        rows = (
            query.order_by(Team.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [(team, count) for team, count in rows]

    def get_team(self, team_id: UUID) -> Team | None:
        """Get a team by its ID.

        Args:
            team_id: The team's UUID.

        Returns:
            Team record if exists, None otherwise.
        """
        return self.db.query(Team).filter(Team.id == team_id).first()

    def get_team_or_raise(self, team_id: UUID) -> Team:
        """Get a team by its ID.

        Raises:
            TeamNotFoundError: If no team has this ID.
        """
        team = self.get_team(team_id)
        if team is None:
            raise TeamNotFoundError()
        return team

    def get_team_members(self, team_id: UUID) -> list[TeamMember]:
        """Get every member of a team, active or not."""
        return (
            self.db.query(TeamMember)
            .filter(TeamMember.team_id == team_id)
            .order_by(TeamMember.last_name.asc(), TeamMember.first_name.asc())
            .all()
        )

    def create_team(self, payload: TeamCreate) -> Team:
        """Create a new team.

        Args:
            payload: Validated team fields.

        Returns:
            The created Team record.
        """
        team = Team(
            name=payload.name,
            description=payload.description,
            team_type=payload.team_type,
            manager_id=payload.manager_id,
        )
        self.db.add(team)
        self.db.flush()
        logger.info("Created team: id=%s name=%s", team.id, team.name)
        return team

    def update_team(self, team_id: UUID, payload: TeamUpdate) -> Team:
        """Apply the fields set on ``payload`` to a team.

        Raises:
            TeamNotFoundError: If no team has this ID.
        """
        team = self.get_team_or_raise(team_id)

        data = payload.model_dump(exclude_unset=True)
        for field in _REQUIRED_TEAM_FIELDS:
            if field in data and data[field] is None:
                data.pop(field)

        for key, value in data.items():
            setattr(team, key, value)
        self.db.flush()
        logger.info("Updated team: id=%s fields=%s", team.id, sorted(data))
        return team

    def delete_team(self, team_id: UUID) -> None:
        """Delete a team that has no active members.

        Inactive members are removed together with the team.

        Raises:
            TeamNotFoundError: If no team has this ID.
            TeamHasActiveMembersError: If the team still has active members.
        """
        team = self.get_team_or_raise(team_id)

        active_members = (
            self.db.query(func.count(TeamMember.id))
            .filter(TeamMember.team_id == team_id)
            .filter(TeamMember.is_active.is_(True))
            .scalar()
        )
        if active_members:
            raise TeamHasActiveMembersError()

        self.db.delete(team)
        self.db.flush()
        logger.info("Deleted team: id=%s", team_id)

    def list_members(
        self,
        team_id: UUID | None = None,
        role: EmployeeRole | None = None,
        employment_status: EmploymentStatus | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[tuple[TeamMember, str | None, TeamType | None]]:
        """List team members, newest first, with their team's name and type.

        Args:
            team_id: Only members of this team.
            role: Only members holding this role.
            employment_status: Only members with this employment status.
            search: Case-insensitive substring matched against first name,
                last name, e-mail and title.
            limit: Page size.
            offset: Number of members to skip.

        Returns:
            List of (member, team name, team type) tuples.
        """
        query = self.db.query(TeamMember, Team.name, Team.team_type).outerjoin(
            Team, TeamMember.team_id == Team.id
        )

        if team_id is not None:
            query = query.filter(TeamMember.team_id == team_id)
        if role is not None:
            query = query.filter(TeamMember.role == role)
        if employment_status is not None:
            query = query.filter(TeamMember.employment_status == employment_status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    TeamMember.first_name.ilike(pattern),
                    TeamMember.last_name.ilike(pattern),
                    TeamMember.email.ilike(pattern),
                    TeamMember.title.ilike(pattern),
                )
            )

        rows = (
            query.order_by(TeamMember.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [(member, team_name, team_type) for member, team_name, team_type in rows]

    def get_member(self, member_id: UUID) -> TeamMember | None:
        return self.db.query(TeamMember).filter(TeamMember.id == member_id).first()

    def get_member_by_email(self, email: str) -> TeamMember | None:
        """Look up a member by e-mail address, ignoring case."""
        return (
            self.db.query(TeamMember)
            .filter(func.lower(TeamMember.email) == email.lower())
            .first()
        )

    def create_member(self, payload: TeamMemberCreate) -> TeamMember:
        """Add a member to a team.

        Args:
            payload: Validated member fields.

        Returns:
            The created TeamMember record.

        Raises:
            DuplicateEmailError: If another member already uses the e-mail.
            TeamNotFoundError: If the team does not exist.
            ManagerNotFoundError: If ``reports_to_id`` names an unknown member.
        """
        if self.get_member_by_email(payload.email) is not None:
            raise DuplicateEmailError()

        self.get_team_or_raise(payload.team_id)

        if payload.reports_to_id is not None and self.get_member(payload.reports_to_id) is None:
            raise ManagerNotFoundError()

        member = TeamMember(
            team_id=payload.team_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            phone=payload.phone,
            role=payload.role,
            title=payload.title,
            department=payload.department,
            reports_to_id=payload.reports_to_id,
            start_date=payload.start_date,
            hourly_rate=payload.hourly_rate,
            salary=payload.salary,
            skills=json.dumps(payload.skills) if payload.skills is not None else None,
            bio=payload.bio,
            profile_image_url=_url(payload.profile_image_url),
            linkedin_url=_url(payload.linkedin_url),
            github_url=_url(payload.github_url),
        )
        self.db.add(member)
        self.db.flush()
        logger.info(
            "Created team member: id=%s team_id=%s role=%s",
            member.id,
            member.team_id,
            member.role.value,
        )
        return member

    def list_org_chart_employees(self) -> list[OrgEmployee]:
        """Fetch the builder input for the organization chart.

        Only active members of active teams are returned. Rows are ordered by
        creation time so sibling order in the chart is stable between requests.
        """
        rows = (
            self.db.query(TeamMember, Team.name, Team.team_type)
            .outerjoin(Team, TeamMember.team_id == Team.id)
            .filter(TeamMember.is_active.is_(True))
            .filter(Team.is_active.is_(True))
            .order_by(
                TeamMember.created_at.asc(),
                TeamMember.last_name.asc(),
                TeamMember.first_name.asc(),
            )
            .all()
        )
        return [
            OrgEmployee(
                id=str(member.id),
                first_name=member.first_name,
                last_name=member.last_name,
                email=member.email,
                role=member.role.value,
                title=member.title,
                reports_to_id=str(member.reports_to_id) if member.reports_to_id else None,
                team_name=team_name,
                team_type=team_type,
                profile_image_url=member.profile_image_url,
            )
            for member, team_name, team_type in rows
        ]


def _url(value: object | None) -> str | None:
    return str(value) if value is not None else None
