"""Schemas for the organization chart: builder input, output and fallback root."""

from pydantic import BaseModel, ConfigDict, Field

from models.team import TeamType


class OrgEmployee(BaseModel):
    """Read-only projection of an active team member, as consumed by the chart builder.

    ``role`` is kept as a plain string so records carrying roles this service
    does not know yet still render.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str
    last_name: str
    email: str | None = None
    role: str
    title: str | None = None
    reports_to_id: str | None = None
    team_name: str | None = None
    team_type: TeamType | None = None
    profile_image_url: str | None = None


class DefaultRoot(BaseModel):
    """Identity of the synthesized root used when the directory has no CEO."""

    model_config = ConfigDict(frozen=True)

    id: str = "default-ceo"
    first_name: str = "Jason"
    last_name: str = "McKee"
    title: str = "Chief Executive Officer"
    email: str | None = "jason.mckee@company.com"
    team_name: str = "Executive"
    team_type: TeamType = TeamType.INTERNAL


class OrganizationChartNode(BaseModel):
    """One person in the rendered organization tree."""

    id: str
    first_name: str
    last_name: str
    full_name: str
    title: str | None = None
    role: str
    email: str | None = None
    team_name: str
    team_type: TeamType
    profile_image_url: str | None = None
    children: list["OrganizationChartNode"] = Field(default_factory=list)
    level: int = Field(
        default=0,
        description="Depth in the tree; the root is 0",
    )
    cycle: bool = Field(
        default=False,
        description="True when the reports-to chain loops back to this person; "
        "the node is shown as a leaf",
    )
