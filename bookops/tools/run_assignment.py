"""Run the priority waterfall for one build from the command line.

Usage:
    python -m bookops.tools.run_assignment --build-id <id>
    python -m bookops.tools.run_assignment --build-id <id> --persist
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from bookops.adapters.persistence.database import async_session_factory, engine
from bookops.adapters.persistence.repositories import (
    SqlAccountRepository,
    SqlAssignmentConfigRepository,
    SqlAssignmentRepository,
    SqlSalesRepRepository,
)
from bookops.adapters.solver.pulp_optimizer import PulpOptimizer
from bookops.application.ports.optimizer_port import SolverError
from bookops.application.use_cases.execute_priorities import PriorityExecutor
from bookops.application.use_cases.generate_assignments import (
    AssignmentRunSummary,
    ConfigNotFoundError,
    GenerateAssignmentsUseCase,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def run(build_id: str, persist: bool) -> AssignmentRunSummary:
    async with async_session_factory() as session:
        uc = GenerateAssignmentsUseCase(
            executor=PriorityExecutor(PulpOptimizer()),
            config_repo=SqlAssignmentConfigRepository(session),
            account_repo=SqlAccountRepository(session),
            rep_repo=SqlSalesRepRepository(session),
            assignment_repo=SqlAssignmentRepository(session),
        )
        summary = await uc.execute(build_id, persist=persist)
        if persist:
            await session.commit()
    await engine.dispose()
    return summary


def _report(summary: AssignmentRunSummary) -> None:
    stats = summary.execution.execution_stats
    logger.info("=" * 50)
    logger.info("Build:        %s", summary.build_id)
    logger.info("Accounts:     %d (%d customers, %d prospects)",
                stats.total_accounts, stats.total_customers, stats.total_prospects)
    logger.info("Protected:    %d", stats.protected_count)
    for priority_id, count in stats.holdover_breakdown.items():
        logger.info("  %-22s %d", priority_id, count)
    logger.info("Optimized:    %d (solver: %s, %d ms)",
                stats.optimized_count, stats.solver_status.value, stats.solve_time_ms)
    logger.info("Total:        %d assignments", len(summary.assignments))
    for d in summary.metrics_delta:
        logger.info("  %-22s %10.1f -> %10.1f %s", d.metric, d.baseline, d.optimized, d.unit)
    if summary.persisted_count:
        logger.info("Persisted:    %d proposals", summary.persisted_count)
    logger.info("=" * 50)


def main():
    parser = argparse.ArgumentParser(description="Generate account assignments for a build")
    parser.add_argument("--build-id", required=True, help="Build to run")
    parser.add_argument(
        "--persist", action="store_true",
        help="Store the resulting proposals in assignment_proposals",
    )
    args = parser.parse_args()

    try:
        summary = asyncio.run(run(args.build_id, args.persist))
    except ConfigNotFoundError as e:
        logger.error("%s", e)
        sys.exit(1)
    except SolverError as e:
        logger.error("Solver failed: %s", e)
        sys.exit(2)

    _report(summary)


if __name__ == "__main__":
    main()
