"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookops.adapters.persistence.database import get_session
from bookops.adapters.persistence.repositories import (
    SqlAccountRepository,
    SqlAssignmentConfigRepository,
    SqlAssignmentRepository,
    SqlSalesRepRepository,
)
from bookops.adapters.solver.pulp_optimizer import PulpOptimizer
from bookops.application.ports.optimizer_port import OptimizerPort
from bookops.application.use_cases.execute_priorities import PriorityExecutor
from bookops.application.use_cases.generate_assignments import GenerateAssignmentsUseCase

# Singleton adapter (stateless; reads solver limits from settings)
_optimizer = PulpOptimizer()


def get_optimizer() -> OptimizerPort:
    return _optimizer


def get_assignment_repo(session: AsyncSession = Depends(get_session)) -> SqlAssignmentRepository:
    return SqlAssignmentRepository(session)


def get_generate_assignments_uc(
    session: AsyncSession = Depends(get_session),
    optimizer: OptimizerPort = Depends(get_optimizer),
) -> GenerateAssignmentsUseCase:
    return GenerateAssignmentsUseCase(
        executor=PriorityExecutor(optimizer),
        config_repo=SqlAssignmentConfigRepository(session),
        account_repo=SqlAccountRepository(session),
        rep_repo=SqlSalesRepRepository(session),
        assignment_repo=SqlAssignmentRepository(session),
    )
