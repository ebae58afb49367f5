"""Tests for GenerateAssignmentsUseCase with in-memory fakes."""

from __future__ import annotations

import pytest

from bookops.application.ports.account_repo import AccountRepository
from bookops.application.ports.assignment_repo import AssignmentRepository
from bookops.application.ports.config_repo import AssignmentConfigRepository
from bookops.application.ports.optimizer_port import OptimizerPort
from bookops.application.ports.sales_rep_repo import SalesRepRepository
from bookops.application.use_cases.execute_priorities import PriorityExecutor
from bookops.application.use_cases.generate_assignments import (
    ConfigNotFoundError,
    GenerateAssignmentsUseCase,
)
from bookops.domain.entities.account import Account
from bookops.domain.entities.assignment import OptimizationResult, OptimizedAssignment
from bookops.domain.entities.assignment_config import AssignmentConfig
from bookops.domain.entities.priority import PriorityConfig
from bookops.domain.entities.sales_rep import SalesRep
from bookops.domain.value_objects.enums import SolverStatus

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeConfigRepo(AssignmentConfigRepository):
    def __init__(self, configs: list[AssignmentConfig] | None = None):
        self.configs = {c.build_id: c for c in configs or []}

    async def get_by_build(self, build_id):
        return self.configs.get(build_id)


class FakeAccountRepo(AccountRepository):
    def __init__(self, accounts: list[Account]):
        self._accounts = accounts

    async def get_by_build(self, build_id):
        return list(self._accounts)


class FakeRepRepo(SalesRepRepository):
    def __init__(self, reps: list[SalesRep]):
        self._reps = reps

    async def get_by_build(self, build_id):
        return list(self._reps)


class FakeAssignmentRepo(AssignmentRepository):
    def __init__(self):
        self.rows: dict[tuple[str, str], OptimizedAssignment] = {}

    async def upsert_many(self, build_id, assignments):
        for a in assignments:
            self.rows[build_id, a.sfdc_account_id] = a
        return len(assignments)

    async def get_by_build(self, build_id):
        return [a for (b, _), a in self.rows.items() if b == build_id]


class RoutingOptimizer(OptimizerPort):
    """Sends each account to the rep whose region equals its territory."""

    async def optimize(self, accounts, reps, config):
        by_region = {r.region: r for r in reps}
        assignments = []
        for a in accounts:
            rep = by_region.get(a.sales_territory, reps[0])
            assignments.append(
                OptimizedAssignment(
                    sfdc_account_id=a.sfdc_account_id,
                    account_name=a.account_name,
                    assigned_rep_id=rep.rep_id,
                    assigned_rep_name=rep.name,
                    account_arr=a.calculated_arr,
                    geo_match=rep.region == a.sales_territory,
                    continuity_maintained=a.owner_id == rep.rep_id,
                    rationale="Optimized: Geographic match",
                )
            )
        return OptimizationResult(status=SolverStatus.OPTIMAL, assignments=assignments)


# ─── Helpers ─────────────────────────────────────────────────────────


def _make_use_case(configs=None):
    accounts = [
        Account("A1", "Locked", calculated_arr=300, exclude_from_reassignment=True, owner_id="R1"),
        Account("A2", "Orphan PE", calculated_arr=200, pe_firm="Vista"),
        Account("A3", "West Co", calculated_arr=400, owner_id="R1", sales_territory="WEST"),
    ]
    reps = [SalesRep("R1", "Rep East", region="EAST"), SalesRep("R2", "Rep West", region="WEST")]
    assignment_repo = FakeAssignmentRepo()
    if configs is None:
        configs = [
            AssignmentConfig(
                build_id="b1",
                customer_target_arr=500,
                customer_max_arr=1000,
                priority_config=[
                    PriorityConfig("manual_holdover", position=0),
                    PriorityConfig("pe_firm", position=1),
                    PriorityConfig("geography", position=2, weight=75),
                ],
            )
        ]
    uc = GenerateAssignmentsUseCase(
        executor=PriorityExecutor(RoutingOptimizer()),
        config_repo=FakeConfigRepo(configs),
        account_repo=FakeAccountRepo(accounts),
        rep_repo=FakeRepRepo(reps),
        assignment_repo=assignment_repo,
    )
    return uc, assignment_repo


# ─── Tests ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_missing_config_raises():
    uc, _ = _make_use_case(configs=[])
    with pytest.raises(ConfigNotFoundError) as exc:
        await uc.execute("b1")
    assert exc.value.build_id == "b1"


@pytest.mark.asyncio
async def test_combines_protected_and_optimized():
    uc, _ = _make_use_case()
    summary = await uc.execute("b1")

    # A2 is protected but has no owner, so it is not part of the final set
    assert [a.sfdc_account_id for a in summary.assignments] == ["A1", "A3"]
    assert summary.assignments[0].rationale == "Protected: Excluded from reassignment"
    assert summary.assignments[1].assigned_rep_id == "R2"
    assert summary.execution.execution_stats.protected_count == 2


@pytest.mark.asyncio
async def test_metrics_compare_current_book_with_proposal():
    uc, _ = _make_use_case()
    summary = await uc.execute("b1")

    assert summary.baseline_metrics.assigned_accounts == 2
    assert summary.optimized_metrics.assigned_accounts == 2
    assert summary.optimized_metrics.geo_match_count == 2
    assert len(summary.metrics_delta) == 11


@pytest.mark.asyncio
async def test_not_persisted_by_default():
    uc, repo = _make_use_case()
    summary = await uc.execute("b1")
    assert summary.persisted_count == 0
    assert repo.rows == {}


@pytest.mark.asyncio
async def test_persist_upserts_assignments():
    uc, repo = _make_use_case()
    summary = await uc.execute("b1", persist=True)
    assert summary.persisted_count == 2
    assert {a.sfdc_account_id for a in await repo.get_by_build("b1")} == {"A1", "A3"}

    # Re-running replaces rather than duplicates
    await uc.execute("b1", persist=True)
    assert len(await repo.get_by_build("b1")) == 2
