"""Schemas package."""

from schemas.common import ApiResponse, ErrorResponse, MessageResponse
from schemas.org_chart import DefaultRoot, OrganizationChartNode, OrgEmployee
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

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "MessageResponse",
    "DefaultRoot",
    "OrganizationChartNode",
    "OrgEmployee",
    "TeamCreate",
    "TeamDetail",
    "TeamList",
    "TeamListItem",
    "TeamMemberCreate",
    "TeamMemberList",
    "TeamMemberResponse",
    "TeamMemberSummary",
    "TeamResponse",
    "TeamUpdate",
]
