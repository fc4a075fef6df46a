"""Team directory and organization chart API endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.auth import token_required
from config.database import get_db
from config.settings import settings
from models.team import EmployeeRole, EmploymentStatus, TeamType
from repositories.exceptions import (
    DirectoryError,
    DuplicateEmailError,
    TeamHasActiveMembersError,
)
from repositories.team_repository import TeamRepository
from schemas.common import ApiResponse, ErrorResponse, MessageResponse
from schemas.org_chart import OrganizationChartNode
from schemas.team import (
    TeamCreate,
    TeamDetail,
    TeamList,
    TeamListItem,
    TeamMemberCreate,
    TeamMemberList,
    TeamMemberResponse,
    TeamMemberSummary,
    TeamResponse,
    TeamUpdate,
)
from services.org_chart_service import OrgChartBuilder

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(token_required)])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input data"},
    401: {"model": ErrorResponse, "description": "Authentication failed"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def directory_error_status(error: DirectoryError) -> int:
    """Map a Directory Store rule violation to its HTTP status code."""
    if isinstance(error, (DuplicateEmailError, TeamHasActiveMembersError)):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_404_NOT_FOUND


def _server_error(db: Session, action: str, error: Exception) -> HTTPException:
    db.rollback()
    logger.exception("Unexpected error while trying to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


@router.get(
    "",
    response_model=ApiResponse[TeamList],
    summary="List teams",
    responses=ERROR_RESPONSES,
)
async def list_teams(
    db: Annotated[Session, Depends(get_db)],
    team_type: Annotated[TeamType | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=255)] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.teams_page_size,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ApiResponse[TeamList]:
    """List teams, newest first, with the number of active members in each."""
    try:
        rows = TeamRepository(db).list_teams(
            team_type=team_type,
            search=search,
            limit=limit,
            offset=offset,
        )
    except SQLAlchemyError as e:
        raise _server_error(db, "fetch teams", e) from e

    teams = [
        TeamListItem.model_validate(team).model_copy(update={"member_count": count})
        for team, count in rows
    ]
    return ApiResponse(data=TeamList(teams=teams, total=len(teams)))


@router.post(
    "",
    response_model=ApiResponse[TeamResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a team",
    responses=ERROR_RESPONSES,
)
async def create_team(
    payload: TeamCreate,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[TeamResponse]:
    repo = TeamRepository(db)
    try:
        team = repo.create_team(payload)
        db.commit()
    except SQLAlchemyError as e:
        raise _server_error(db, "create team", e) from e

    db.refresh(team)
    return ApiResponse(data=TeamResponse.model_validate(team))


@router.get(
    "/members",
    response_model=ApiResponse[TeamMemberList],
    summary="List team members",
    responses=ERROR_RESPONSES,
)
async def list_team_members(
    db: Annotated[Session, Depends(get_db)],
    team_id: Annotated[UUID | None, Query()] = None,
    role: Annotated[EmployeeRole | None, Query()] = None,
    employment_status: Annotated[EmploymentStatus | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=255)] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = settings.members_page_size,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ApiResponse[TeamMemberList]:
    """List members across teams, newest first, with their team's name and type."""
    try:
        rows = TeamRepository(db).list_members(
            team_id=team_id,
            role=role,
            employment_status=employment_status,
            search=search,
            limit=limit,
            offset=offset,
        )
    except SQLAlchemyError as e:
        raise _server_error(db, "fetch team members", e) from e

    members = [
        TeamMemberResponse.from_member(member, team_name, team_type)
        for member, team_name, team_type in rows
    ]
    return ApiResponse(data=TeamMemberList(members=members, total=len(members)))


@router.post(
    "/members",
    response_model=ApiResponse[TeamMemberResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a team member",
    responses={
        **ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "Team or manager not found"},
    },
)
async def create_team_member(
    payload: TeamMemberCreate,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[TeamMemberResponse]:
    """Add a member to a team.

    The e-mail must be unused, the team must exist, and ``reports_to_id``,
    when given, must name an existing member.
    """
    repo = TeamRepository(db)
    try:
        member = repo.create_member(payload)
        db.commit()
    except DirectoryError as e:
        db.rollback()
        raise HTTPException(status_code=directory_error_status(e), detail=e.message) from e
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same e-mail
        db.rollback()
        raise HTTPException(status_code=400, detail=DuplicateEmailError.message) from e
    except SQLAlchemyError as e:
        raise _server_error(db, "create team member", e) from e

    db.refresh(member)
    team = member.team
    return ApiResponse(
        data=TeamMemberResponse.from_member(member, team.name, team.team_type),
    )


@router.get(
    "/organization-chart",
    response_model=ApiResponse[OrganizationChartNode],
    summary="Organization chart",
    description="""
    Build the reporting hierarchy of all active members of active teams.

    The root is the CEO. When no CEO is on record a configured default root is
    returned instead and every member without a manager becomes its child.
    """,
    responses=ERROR_RESPONSES,
)
async def get_organization_chart(
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[OrganizationChartNode]:
    try:
        employees = TeamRepository(db).list_org_chart_employees()
    except SQLAlchemyError as e:
        raise _server_error(db, "fetch organization chart", e) from e

    builder = OrgChartBuilder.from_settings(settings)
    tree = builder.build_organization_chart(employees)
    logger.info(
        "Built organization chart: root=%s employees=%d",
        tree.id,
        len(employees),
    )
    return ApiResponse(data=tree)


@router.get(
    "/{team_id}",
    response_model=ApiResponse[TeamDetail],
    summary="Get a team with its members",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "Team not found"}},
)
async def get_team(
    team_id: UUID,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[TeamDetail]:
    repo = TeamRepository(db)
    try:
        team = repo.get_team_or_raise(team_id)
        members = repo.get_team_members(team_id)
    except DirectoryError as e:
        raise HTTPException(status_code=directory_error_status(e), detail=e.message) from e
    except SQLAlchemyError as e:
        raise _server_error(db, "fetch team", e) from e

    detail = TeamDetail(
        **TeamResponse.model_validate(team).model_dump(),
        members=[TeamMemberSummary.model_validate(m) for m in members],
    )
    return ApiResponse(data=detail)


@router.put(
    "/{team_id}",
    response_model=ApiResponse[TeamResponse],
    summary="Update a team",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "Team not found"}},
)
async def update_team(
    team_id: UUID,
    payload: TeamUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[TeamResponse]:
    repo = TeamRepository(db)
    try:
        team = repo.update_team(team_id, payload)
        db.commit()
    except DirectoryError as e:
        db.rollback()
        raise HTTPException(status_code=directory_error_status(e), detail=e.message) from e
    except SQLAlchemyError as e:
        raise _server_error(db, "update team", e) from e

    db.refresh(team)
    return ApiResponse(data=TeamResponse.model_validate(team))


@router.delete(
    "/{team_id}",
    response_model=MessageResponse,
    summary="Delete a team",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "Team not found"}},
)
async def delete_team(
    team_id: UUID,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a team. Teams that still have active members are refused."""
    repo = TeamRepository(db)
    try:
        repo.delete_team(team_id)
        db.commit()
    except DirectoryError as e:
        db.rollback()
        raise HTTPException(status_code=directory_error_status(e), detail=e.message) from e
    except SQLAlchemyError as e:
        raise _server_error(db, "delete team", e) from e

    return MessageResponse(message="Team deleted successfully")
