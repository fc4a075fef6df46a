"""Initial team directory schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

This migration:
1. Creates the team_type, employee_role and employment_status enums
2. Creates the teams table
3. Creates the team_members table
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

team_type = sa.Enum("internal", "external", name="team_type")
employee_role = sa.Enum(
    "ceo",
    "manager",
    "team_lead",
    "senior_developer",
    "developer",
    "junior_developer",
    "designer",
    "qa_engineer",
    "project_manager",
    "business_analyst",
    "consultant",
    "contractor",
    name="employee_role",
)
employment_status = sa.Enum(
    "active",
    "inactive",
    "on_leave",
    "terminated",
    name="employment_status",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("team_type", team_type, nullable=False),
        sa.Column("manager_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "team_members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("team_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("role", employee_role, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("reports_to_id", sa.Uuid(), nullable=True),
        sa.Column(
            "employment_status",
            employment_status,
            nullable=False,
            server_default="active",
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("hourly_rate", sa.Integer(), nullable=True),
        sa.Column("salary", sa.Integer(), nullable=True),
        sa.Column("skills", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_image_url", sa.String(length=500), nullable=True),
        sa.Column("linkedin_url", sa.String(length=500), nullable=True),
        sa.Column("github_url", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["team_id"],
            ["teams.id"],
            name="fk_team_members_team_id",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("email", name="uq_team_members_email"),
    )

    # Create indexes for common queries
    op.create_index("ix_team_members_team_id", "team_members", ["team_id"])
    op.create_index("ix_team_members_reports_to_id", "team_members", ["reports_to_id"])


def downgrade() -> None:
    # Drop indexes
    op.drop_index("ix_team_members_reports_to_id", table_name="team_members")
    op.drop_index("ix_team_members_team_id", table_name="team_members")

    # Drop tables
    op.drop_table("team_members")
    op.drop_table("teams")

    # Drop enums (PostgreSQL keeps them after the tables are gone)
    bind = op.get_bind()
    employment_status.drop(bind, checkfirst=True)
    employee_role.drop(bind, checkfirst=True)
    team_type.drop(bind, checkfirst=True)
