"""Initial schema — accounts, reps, build configuration and proposals.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Accounts
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("build_id", sa.String(36), nullable=False),
        sa.Column("sfdc_account_id", sa.String(50), nullable=False),
        sa.Column("account_name", sa.String(300), nullable=False),
        sa.Column("arr", sa.Float, nullable=True),
        sa.Column("calculated_arr", sa.Float, nullable=True),
        sa.Column("calculated_atr", sa.Float, nullable=True),
        sa.Column("hierarchy_bookings_arr_converted", sa.Float, nullable=True),
        sa.Column("cre_count", sa.Integer, nullable=True),
        sa.Column("cre_risk", sa.Boolean, nullable=True),
        sa.Column("sales_territory", sa.String(100), nullable=True),
        sa.Column("geo", sa.String(100), nullable=True),
        sa.Column("owner_id", sa.String(50), nullable=True),
        sa.Column("owner_name", sa.String(200), nullable=True),
        sa.Column("exclude_from_reassignment", sa.Boolean, nullable=True),
        sa.Column("pe_firm", sa.String(200), nullable=True),
        sa.Column("is_customer", sa.Boolean, nullable=True),
        sa.Column("is_strategic", sa.Boolean, nullable=True),
        sa.Column("hq_country", sa.String(100), nullable=True),
        sa.Column("renewal_quarter", sa.String(10), nullable=True),
        sa.Column("renewal_date", sa.Date, nullable=True),
        sa.Column("owner_change_date", sa.Date, nullable=True),
        sa.UniqueConstraint("build_id", "sfdc_account_id", name="uq_accounts_build_account"),
    )
    op.create_index("idx_accounts_build", "accounts", ["build_id"])
    op.create_index("idx_accounts_owner", "accounts", ["owner_id"])

    # Sales reps
    op.create_table(
        "sales_reps",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("build_id", sa.String(36), nullable=False),
        sa.Column("rep_id", sa.String(50), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("region", sa.String(100), nullable=True),
        sa.Column("sub_region", sa.String(100), nullable=True),
        sa.Column("is_strategic_rep", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean, nullable=True, server_default=sa.true()),
        sa.Column("include_in_assignments", sa.Boolean, nullable=True, server_default=sa.true()),
        sa.Column("flm", sa.String(200), nullable=True),
        sa.Column("slm", sa.String(200), nullable=True),
        sa.UniqueConstraint("build_id", "rep_id", name="uq_sales_reps_build_rep"),
    )
    op.create_index("idx_sales_reps_build", "sales_reps", ["build_id"])

    # Per-build assignment configuration (NULL columns fall back to code defaults)
    op.create_table(
        "assignment_configuration",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("build_id", sa.String(36), unique=True, nullable=False),
        sa.Column("customer_target_arr", sa.Float, nullable=True),
        sa.Column("customer_max_arr", sa.Float, nullable=True),
        sa.Column("capacity_variance_percent", sa.Float, nullable=True),
        sa.Column("max_cre_per_rep", sa.Integer, nullable=True),
        sa.Column("territory_mappings", JSONB, nullable=True),
        sa.Column("assignment_mode", sa.String(20), nullable=True),
        sa.Column("priority_config", JSONB, nullable=True),
        sa.Column("p4_only_overflow", sa.Boolean, nullable=True),
        sa.Column("rs_arr_threshold", sa.Float, nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # Assignment proposals
    op.create_table(
        "assignment_proposals",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("build_id", sa.String(36), nullable=False),
        sa.Column("sfdc_account_id", sa.String(50), nullable=False),
        sa.Column("account_name", sa.String(300), nullable=False),
        sa.Column("assigned_rep_id", sa.String(50), nullable=False),
        sa.Column("assigned_rep_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("account_arr", sa.Float, nullable=False, server_default="0"),
        sa.Column("geo_match", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("continuity_maintained", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("rationale", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "proposed_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("build_id", "sfdc_account_id", name="uq_proposals_build_account"),
    )
    op.create_index("idx_proposals_rep", "assignment_proposals", ["assigned_rep_id"])


def downgrade() -> None:
    op.drop_table("assignment_proposals")
    op.drop_table("assignment_configuration")
    op.drop_table("sales_reps")
    op.drop_table("accounts")
