"""PriorityExecutor — two-phase waterfall: holdovers, then weighted optimization."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from bookops.application.ports.optimizer_port import OptimizerPort
from bookops.domain.entities.account import Account
from bookops.domain.entities.assignment import (
    ExecutionStats,
    OptimizationResult,
    ProtectedAccount,
)
from bookops.domain.entities.assignment_config import AssignmentConfig
from bookops.domain.entities.sales_rep import SalesRep
from bookops.domain.policies.holdover_filter import apply_holdovers
from bookops.domain.policies.priority_registry import (
    get_holdover_priorities,
    get_optimization_priorities,
)
from bookops.domain.policies.sandbox_converters import to_sandbox_accounts, to_sandbox_reps
from bookops.domain.policies.weight_normalizer import build_sandbox_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriorityExecutionResult:
    protected_accounts: tuple[ProtectedAccount, ...]
    optimization_result: OptimizationResult
    execution_stats: ExecutionStats


class PriorityExecutor:
    """Runs one build through the priority waterfall.

    The executor holds no state between runs and persists nothing. Errors
    raised by the optimizer propagate to the caller unchanged.
    """

    def __init__(self, optimizer: OptimizerPort):
        self._optimizer = optimizer

    async def execute(
        self,
        build_id: str,
        accounts: list[Account],
        reps: list[SalesRep],
        config: AssignmentConfig,
    ) -> PriorityExecutionResult:
        """Execute the waterfall.

        Pipeline:
        1. Holdover filter over all accounts
        2. Project assignable accounts and eligible reps onto solver shapes
        3. Normalize optimization weights into the solver config
        4. Solve
        5. Collect stats
        """
        started = time.perf_counter()
        logger.info(
            "Build %s: executing priorities for %d accounts, %d reps (mode=%s)",
            build_id, len(accounts), len(reps), config.assignment_mode,
        )

        # Phase 1: holdovers
        holdover_priorities = get_holdover_priorities(config.priority_config)
        holdovers = apply_holdovers(accounts, reps, holdover_priorities, config)
        logger.info(
            "Build %s: %d protected, %d assignable",
            build_id, len(holdovers.protected_accounts), len(holdovers.assignable_accounts),
        )

        # Phase 2: optimization
        sandbox_accounts = to_sandbox_accounts(holdovers.assignable_accounts)
        sandbox_reps = to_sandbox_reps(reps)
        sandbox_config = build_sandbox_config(
            config, get_optimization_priorities(config.priority_config)
        )

        result = await self._optimizer.optimize(sandbox_accounts, sandbox_reps, sandbox_config)
        logger.info(
            "Build %s: solver status=%s, %d assignments in %d ms",
            build_id, result.status.value, len(result.assignments), result.solve_time_ms,
        )
        if result.error_message:
            logger.warning("Build %s: solver reported: %s", build_id, result.error_message)

        customers = sum(1 for a in accounts if a.is_customer)
        stats = ExecutionStats(
            total_accounts=len(accounts),
            total_customers=customers,
            total_prospects=len(accounts) - customers,
            protected_count=len(holdovers.protected_accounts),
            optimized_count=len(result.assignments),
            holdover_breakdown=dict(holdovers.holdover_breakdown),
            solver_status=result.status,
            solve_time_ms=result.solve_time_ms,
            execution_time_ms=round((time.perf_counter() - started) * 1000),
        )
        logger.info("Build %s: completed in %d ms", build_id, stats.execution_time_ms)

        return PriorityExecutionResult(
            protected_accounts=holdovers.protected_accounts,
            optimization_result=result,
            execution_stats=stats,
        )
