"""Assignment endpoints — run the priority waterfall for a build, list proposals."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from bookops.adapters.persistence.database import get_session
from bookops.adapters.persistence.repositories import SqlAssignmentRepository
from bookops.application.ports.optimizer_port import SolverError
from bookops.application.use_cases.generate_assignments import (
    AssignmentRunSummary,
    ConfigNotFoundError,
    GenerateAssignmentsUseCase,
)
from bookops.domain.entities.assignment import (
    ExecutionStats,
    OptimizedAssignment,
    ProtectedAccount,
)
from bookops.infrastructure.api.dependencies import (
    get_assignment_repo,
    get_generate_assignments_uc,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/builds/{build_id}/assignments", tags=["assignments"])


@router.post("/generate")
async def generate_assignments(
    build_id: str,
    persist: bool = False,
    uc: GenerateAssignmentsUseCase = Depends(get_generate_assignments_uc),
    session: AsyncSession = Depends(get_session),
):
    """Run holdovers + optimization for a build; optionally store the proposals."""
    try:
        summary = await uc.execute(build_id, persist=persist)
    except ConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SolverError as e:
        logger.warning("Build %s: solver failed: %s", build_id, e)
        raise HTTPException(status_code=422, detail=str(e))

    if persist:
        await session.commit()

    return _serialize_summary(summary)


@router.get("")
async def list_assignments(
    build_id: str,
    repo: SqlAssignmentRepository = Depends(get_assignment_repo),
):
    """Persisted assignment proposals of a build."""
    assignments = await repo.get_by_build(build_id)
    return {
        "build_id": build_id,
        "total": len(assignments),
        "assignments": [_serialize_assignment(a) for a in assignments],
    }


def _serialize_assignment(a: OptimizedAssignment) -> dict:
    return asdict(a)


def _serialize_protected(p: ProtectedAccount) -> dict:
    return {
        "sfdc_account_id": p.account.sfdc_account_id,
        "account_name": p.account.account_name,
        "reason": p.reason,
        "priority_id": p.priority_id,
        "sub_condition_id": p.sub_condition_id,
        "assigned_rep_id": p.assigned_rep_id,
        "assigned_rep_name": p.assigned_rep_name,
    }


def _serialize_stats(s: ExecutionStats) -> dict:
    return {
        "total_accounts": s.total_accounts,
        "total_customers": s.total_customers,
        "total_prospects": s.total_prospects,
        "protected_count": s.protected_count,
        "optimized_count": s.optimized_count,
        "holdover_breakdown": dict(s.holdover_breakdown),
        "solver_status": s.solver_status.value,
        "solve_time_ms": s.solve_time_ms,
        "execution_time_ms": s.execution_time_ms,
    }


def _serialize_summary(summary: AssignmentRunSummary) -> dict:
    result = summary.execution.optimization_result
    return {
        "build_id": summary.build_id,
        "status": result.status.value,
        "error_message": result.error_message,
        "stats": _serialize_stats(summary.execution.execution_stats),
        "protected_accounts": [
            _serialize_protected(p) for p in summary.execution.protected_accounts
        ],
        "assignments": [_serialize_assignment(a) for a in summary.assignments],
        "metrics": {
            "baseline": asdict(summary.baseline_metrics),
            "optimized": asdict(summary.optimized_metrics),
            "delta": [asdict(d) for d in summary.metrics_delta],
        },
        "persisted_count": summary.persisted_count,
    }
