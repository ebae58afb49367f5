"""GenerateAssignmentsUseCase — load a build, run the waterfall, optionally persist."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bookops.application.ports.account_repo import AccountRepository
from bookops.application.ports.assignment_repo import AssignmentRepository
from bookops.application.ports.config_repo import AssignmentConfigRepository
from bookops.application.ports.sales_rep_repo import SalesRepRepository
from bookops.application.use_cases.execute_priorities import (
    PriorityExecutionResult,
    PriorityExecutor,
)
from bookops.domain.entities.assignment import OptimizedAssignment
from bookops.domain.policies.priority_registry import get_optimization_priorities
from bookops.domain.policies.result_combiner import combine_results
from bookops.domain.policies.sandbox_converters import to_sandbox_accounts, to_sandbox_reps
from bookops.domain.policies.sandbox_metrics import (
    MetricsDelta,
    SandboxMetrics,
    calculate_baseline_metrics,
    calculate_metrics,
    calculate_metrics_delta,
)
from bookops.domain.policies.weight_normalizer import build_sandbox_config

logger = logging.getLogger(__name__)


class ConfigNotFoundError(Exception):
    """No assignment configuration has been saved for the build."""

    def __init__(self, build_id: str):
        super().__init__(f"No assignment configuration for build {build_id}")
        self.build_id = build_id


@dataclass
class AssignmentRunSummary:
    build_id: str
    execution: PriorityExecutionResult
    assignments: list[OptimizedAssignment]
    baseline_metrics: SandboxMetrics
    optimized_metrics: SandboxMetrics
    metrics_delta: list[MetricsDelta]
    persisted_count: int = 0


class GenerateAssignmentsUseCase:
    """Loads a build's inputs, executes the priority waterfall and merges the results."""

    def __init__(
        self,
        executor: PriorityExecutor,
        config_repo: AssignmentConfigRepository,
        account_repo: AccountRepository,
        rep_repo: SalesRepRepository,
        assignment_repo: AssignmentRepository,
    ):
        self._executor = executor
        self._configs = config_repo
        self._accounts = account_repo
        self._reps = rep_repo
        self._assignments = assignment_repo

    async def execute(self, build_id: str, persist: bool = False) -> AssignmentRunSummary:
        config = await self._configs.get_by_build(build_id)
        if config is None:
            raise ConfigNotFoundError(build_id)

        accounts = await self._accounts.get_by_build(build_id)
        reps = await self._reps.get_by_build(build_id)

        execution = await self._executor.execute(build_id, accounts, reps, config)
        assignments = combine_results(
            execution.protected_accounts, execution.optimization_result.assignments
        )

        # Metrics cover the whole book, protected accounts included
        sandbox_accounts = to_sandbox_accounts(accounts)
        sandbox_reps = to_sandbox_reps(reps)
        sandbox_config = build_sandbox_config(
            config, get_optimization_priorities(config.priority_config)
        )
        baseline = calculate_baseline_metrics(sandbox_accounts, sandbox_reps, sandbox_config)
        optimized = calculate_metrics(sandbox_accounts, sandbox_reps, assignments, sandbox_config)

        summary = AssignmentRunSummary(
            build_id=build_id,
            execution=execution,
            assignments=assignments,
            baseline_metrics=baseline,
            optimized_metrics=optimized,
            metrics_delta=calculate_metrics_delta(baseline, optimized),
        )

        if persist:
            summary.persisted_count = await self._assignments.upsert_many(build_id, assignments)
            logger.info("Build %s: persisted %d assignment proposals", build_id, summary.persisted_count)

        return summary
