"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from bookops.adapters.persistence.database import Base


class AccountModel(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    build_id: Mapped[str] = mapped_column(String(36), nullable=False)
    sfdc_account_id: Mapped[str] = mapped_column(String(50), nullable=False)
    account_name: Mapped[str] = mapped_column(String(300), nullable=False)
    arr: Mapped[float | None] = mapped_column(Float, nullable=True)
    calculated_arr: Mapped[float | None] = mapped_column(Float, nullable=True)
    calculated_atr: Mapped[float | None] = mapped_column(Float, nullable=True)
    hierarchy_bookings_arr_converted: Mapped[float | None] = mapped_column(Float, nullable=True)
    cre_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cre_risk: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    sales_territory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    geo: Mapped[str | None] = mapped_column(String(100), nullable=True)
    owner_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    owner_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    exclude_from_reassignment: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    pe_firm: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_customer: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_strategic: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    hq_country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    renewal_quarter: Mapped[str | None] = mapped_column(String(10), nullable=True)
    renewal_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    owner_change_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint("build_id", "sfdc_account_id", name="uq_accounts_build_account"),
        Index("idx_accounts_build", "build_id"),
        Index("idx_accounts_owner", "owner_id"),
    )


class SalesRepModel(Base):
    __tablename__ = "sales_reps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    build_id: Mapped[str] = mapped_column(String(36), nullable=False)
    rep_id: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    region: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sub_region: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_strategic_rep: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    include_in_assignments: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    flm: Mapped[str | None] = mapped_column(String(200), nullable=True)
    slm: Mapped[str | None] = mapped_column(String(200), nullable=True)

    __table_args__ = (
        UniqueConstraint("build_id", "rep_id", name="uq_sales_reps_build_rep"),
        Index("idx_sales_reps_build", "build_id"),
    )


class AssignmentConfigurationModel(Base):
    __tablename__ = "assignment_configuration"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    build_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    customer_target_arr: Mapped[float | None] = mapped_column(Float, nullable=True)
    customer_max_arr: Mapped[float | None] = mapped_column(Float, nullable=True)
    capacity_variance_percent: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_cre_per_rep: Mapped[int | None] = mapped_column(Integer, nullable=True)
    territory_mappings: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    assignment_mode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    priority_config: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    p4_only_overflow: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    rs_arr_threshold: Mapped[float | None] = mapped_column(Float, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )


class AssignmentProposalModel(Base):
    __tablename__ = "assignment_proposals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    build_id: Mapped[str] = mapped_column(String(36), nullable=False)
    sfdc_account_id: Mapped[str] = mapped_column(String(50), nullable=False)
    account_name: Mapped[str] = mapped_column(String(300), nullable=False)
    assigned_rep_id: Mapped[str] = mapped_column(String(50), nullable=False)
    assigned_rep_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    account_arr: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    geo_match: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    continuity_maintained: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rationale: Mapped[str] = mapped_column(Text, nullable=False, default="")
    proposed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("build_id", "sfdc_account_id", name="uq_proposals_build_account"),
        Index("idx_proposals_rep", "assigned_rep_id"),
    )
