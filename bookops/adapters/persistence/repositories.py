"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from bookops.adapters.persistence.models import (
    AccountModel,
    AssignmentConfigurationModel,
    AssignmentProposalModel,
    SalesRepModel,
)
from bookops.application.ports.account_repo import AccountRepository
from bookops.application.ports.assignment_repo import AssignmentRepository
from bookops.application.ports.config_repo import AssignmentConfigRepository
from bookops.application.ports.sales_rep_repo import SalesRepRepository
from bookops.domain.entities.account import Account
from bookops.domain.entities.assignment import OptimizedAssignment
from bookops.domain.entities.assignment_config import (
    DEFAULT_ASSIGNMENT_MODE,
    DEFAULT_MAX_ARR,
    DEFAULT_MAX_CRE_PER_REP,
    DEFAULT_RS_ARR_THRESHOLD,
    DEFAULT_TARGET_ARR,
    DEFAULT_VARIANCE_PERCENT,
    AssignmentConfig,
)
from bookops.domain.entities.priority import PriorityConfig
from bookops.domain.entities.sales_rep import SalesRep

logger = logging.getLogger(__name__)

UPSERT_CHUNK_SIZE = 1000

_PROPOSAL_UPDATE_COLUMNS = (
    "account_name",
    "assigned_rep_id",
    "assigned_rep_name",
    "account_arr",
    "geo_match",
    "continuity_maintained",
    "rationale",
)

# ─── Mappers ─────────────────────────────────────────────────────────


def _account_to_domain(m: AccountModel) -> Account:
    return Account(
        sfdc_account_id=m.sfdc_account_id,
        account_name=m.account_name,
        arr=m.arr,
        calculated_arr=m.calculated_arr,
        calculated_atr=m.calculated_atr,
        hierarchy_bookings_arr_converted=m.hierarchy_bookings_arr_converted,
        cre_count=m.cre_count,
        cre_risk=m.cre_risk,
        sales_territory=m.sales_territory,
        geo=m.geo,
        owner_id=m.owner_id,
        owner_name=m.owner_name,
        exclude_from_reassignment=m.exclude_from_reassignment,
        pe_firm=m.pe_firm,
        is_customer=m.is_customer,
        is_strategic=m.is_strategic,
        hq_country=m.hq_country,
        renewal_quarter=m.renewal_quarter,
        renewal_date=m.renewal_date,
        owner_change_date=m.owner_change_date,
    )


def _rep_to_domain(m: SalesRepModel) -> SalesRep:
    return SalesRep(
        rep_id=m.rep_id,
        name=m.name,
        region=m.region,
        sub_region=m.sub_region,
        is_strategic_rep=bool(m.is_strategic_rep),
        is_active=m.is_active,
        include_in_assignments=m.include_in_assignments,
        flm=m.flm,
        slm=m.slm,
    )


def _config_to_domain(m: AssignmentConfigurationModel) -> AssignmentConfig:
    """Map a configuration row, replacing NULL/zero columns with defaults."""
    priorities = []
    for raw in m.priority_config or []:
        try:
            priorities.append(PriorityConfig.from_dict(raw))
        except (KeyError, TypeError, ValueError):
            logger.warning("Build %s: skipping malformed priority entry %r", m.build_id, raw)

    return AssignmentConfig(
        build_id=m.build_id,
        customer_target_arr=m.customer_target_arr or DEFAULT_TARGET_ARR,
        customer_max_arr=m.customer_max_arr or DEFAULT_MAX_ARR,
        capacity_variance_percent=m.capacity_variance_percent or DEFAULT_VARIANCE_PERCENT,
        max_cre_per_rep=m.max_cre_per_rep or DEFAULT_MAX_CRE_PER_REP,
        territory_mappings=dict(m.territory_mappings or {}),
        assignment_mode=m.assignment_mode or DEFAULT_ASSIGNMENT_MODE,
        priority_config=priorities,
        p4_only_overflow=True if m.p4_only_overflow is None else m.p4_only_overflow,
        rs_arr_threshold=m.rs_arr_threshold or DEFAULT_RS_ARR_THRESHOLD,
    )


def _proposal_to_domain(m: AssignmentProposalModel) -> OptimizedAssignment:
    return OptimizedAssignment(
        sfdc_account_id=m.sfdc_account_id,
        account_name=m.account_name,
        assigned_rep_id=m.assigned_rep_id,
        assigned_rep_name=m.assigned_rep_name,
        account_arr=m.account_arr,
        geo_match=m.geo_match,
        continuity_maintained=m.continuity_maintained,
        rationale=m.rationale,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlAccountRepository(AccountRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_build(self, build_id: str) -> list[Account]:
        result = await self._s.execute(
            select(AccountModel)
            .where(AccountModel.build_id == build_id)
            .order_by(AccountModel.id)
        )
        return [_account_to_domain(m) for m in result.scalars()]


class SqlSalesRepRepository(SalesRepRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_build(self, build_id: str) -> list[SalesRep]:
        result = await self._s.execute(
            select(SalesRepModel)
            .where(SalesRepModel.build_id == build_id)
            .order_by(SalesRepModel.id)
        )
        return [_rep_to_domain(m) for m in result.scalars()]


class SqlAssignmentConfigRepository(AssignmentConfigRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_build(self, build_id: str) -> AssignmentConfig | None:
        result = await self._s.execute(
            select(AssignmentConfigurationModel).where(
                AssignmentConfigurationModel.build_id == build_id
            )
        )
        m = result.scalar_one_or_none()
        return _config_to_domain(m) if m else None


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def upsert_many(self, build_id: str, assignments: list[OptimizedAssignment]) -> int:
        rows = [
            {
                "build_id": build_id,
                "sfdc_account_id": a.sfdc_account_id,
                "account_name": a.account_name,
                "assigned_rep_id": a.assigned_rep_id,
                "assigned_rep_name": a.assigned_rep_name,
                "account_arr": a.account_arr,
                "geo_match": a.geo_match,
                "continuity_maintained": a.continuity_maintained,
                "rationale": a.rationale,
            }
            for a in assignments
        ]
        written = 0
        # asyncpg caps a statement at 32767 bind parameters
        for start in range(0, len(rows), UPSERT_CHUNK_SIZE):
            chunk = rows[start:start + UPSERT_CHUNK_SIZE]
            stmt = insert(AssignmentProposalModel).values(chunk)
            stmt = stmt.on_conflict_do_update(
                constraint="uq_proposals_build_account",
                set_={col: stmt.excluded[col] for col in _PROPOSAL_UPDATE_COLUMNS},
            )
            await self._s.execute(stmt)
            written += len(chunk)
        if written:
            await self._s.flush()
            logger.debug("Build %s: upserted %d proposals", build_id, written)
        return written

    async def get_by_build(self, build_id: str) -> list[OptimizedAssignment]:
        result = await self._s.execute(
            select(AssignmentProposalModel)
            .where(AssignmentProposalModel.build_id == build_id)
            .order_by(AssignmentProposalModel.id)
        )
        return [_proposal_to_domain(m) for m in result.scalars()]
