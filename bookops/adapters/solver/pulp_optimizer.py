"""PuLP/CBC adapter — account-to-rep assignment as a binary MILP.

Variables: x[a, r] = 1 if account a goes to rep r.
Objective (maximize): geographic match bonus + continuity bonus + base value,
scaled by the normalized solver weights.
Constraints: each account assigned exactly once, per-rep ARR floor and hard
cap, per-rep CRE cap. Strategic accounts only pair with strategic reps and
vice versa.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time

import pulp

from bookops.application.ports.optimizer_port import OptimizerPort, SolverError
from bookops.config import settings
from bookops.domain.entities.assignment import OptimizationResult, OptimizedAssignment
from bookops.domain.entities.sandbox import SandboxAccount, SandboxConfig, SandboxRep
from bookops.domain.policies.geography import is_geo_match
from bookops.domain.value_objects.enums import SolverStatus

logger = logging.getLogger(__name__)

GEO_BONUS = 100
CONTINUITY_BONUS = 80
BASE_VALUE = 10
BALANCE_BONUS = 20
# Fraction of the band's lower edge enforced as a hard per-rep floor
MIN_ARR_FLOOR_RATIO = 0.5

INFEASIBLE_MESSAGE = (
    "No feasible solution exists with current constraints. "
    "Try increasing variance % or max ARR."
)

_VAR_NAME_RE = re.compile(r"[^a-zA-Z0-9]")


def _sanitize(name: str) -> str:
    return _VAR_NAME_RE.sub("_", name)[:30]


def _compatible(account: SandboxAccount, rep: SandboxRep) -> bool:
    return account.is_strategic == rep.is_strategic_rep


def _weight_fractions(config: SandboxConfig) -> tuple[float, float, float]:
    total = config.geo_weight + config.continuity_weight + config.balance_weight
    if total <= 0:
        return 0.33, 0.33, 0.34
    return (
        config.geo_weight / total,
        config.continuity_weight / total,
        config.balance_weight / total,
    )


class PulpOptimizer(OptimizerPort):
    """Solves the sandbox assignment problem with CBC through PuLP."""

    def __init__(
        self,
        time_limit_seconds: float | None = None,
        mip_gap: float | None = None,
        msg: bool | None = None,
    ):
        self._time_limit = time_limit_seconds if time_limit_seconds is not None else settings.solver_time_limit_seconds
        self._mip_gap = mip_gap if mip_gap is not None else settings.solver_mip_gap
        self._msg = msg if msg is not None else settings.solver_msg

    async def optimize(
        self,
        accounts: list[SandboxAccount],
        reps: list[SandboxRep],
        config: SandboxConfig,
    ) -> OptimizationResult:
        active_reps = [r for r in reps if r.is_active and r.include_in_assignments]
        if not active_reps:
            raise SolverError("No active reps available for assignment")
        if not accounts:
            return OptimizationResult(status=SolverStatus.OPTIMAL)

        logger.info(
            "Starting PuLP optimization for %d accounts, %d reps",
            len(accounts), len(active_reps),
        )
        return await asyncio.to_thread(self._solve, accounts, active_reps, config)

    def build_problem(
        self,
        accounts: list[SandboxAccount],
        reps: list[SandboxRep],
        config: SandboxConfig,
    ) -> tuple[pulp.LpProblem, dict[tuple[int, int], pulp.LpVariable]]:
        prob = pulp.LpProblem("Book_Assignment", pulp.LpMaximize)
        geo_w, cont_w, bal_w = _weight_fractions(config)

        x: dict[tuple[int, int], pulp.LpVariable] = {}
        objective = []
        for ai, account in enumerate(accounts):
            for ri, rep in enumerate(reps):
                if not _compatible(account, rep):
                    continue
                var = pulp.LpVariable(
                    f"x_{ai}_{ri}_{_sanitize(account.sfdc_account_id)}", cat="Binary"
                )
                x[ai, ri] = var

                coefficient = BASE_VALUE + bal_w * BALANCE_BONUS
                if is_geo_match(rep.region, account.sales_territory, account.geo, config.territory_mappings):
                    coefficient += GEO_BONUS * geo_w
                if account.owner_id and account.owner_id == rep.rep_id:
                    coefficient += CONTINUITY_BONUS * cont_w
                objective.append(coefficient * var)

        prob += pulp.lpSum(objective)

        # Constraint: each account assigned exactly once
        for ai, account in enumerate(accounts):
            options = [x[ai, ri] for ri in range(len(reps)) if (ai, ri) in x]
            if options:
                prob += pulp.lpSum(options) == 1, f"assign_{ai}"
            else:
                logger.warning("Account %s has no compatible rep", account.sfdc_account_id)

        min_arr = config.target_arr * (1 - config.variance_pct)
        arr_floor = max(0.0, min_arr * MIN_ARR_FLOOR_RATIO)

        for ri, rep in enumerate(reps):
            arr_terms = [
                accounts[ai].calculated_arr * x[ai, ri]
                for ai in range(len(accounts))
                if (ai, ri) in x and accounts[ai].calculated_arr > 0
            ]
            if arr_terms:
                prob += pulp.lpSum(arr_terms) >= arr_floor, f"arr_min_{ri}"
                prob += pulp.lpSum(arr_terms) <= config.max_arr, f"arr_max_{ri}"

            cre_terms = [
                accounts[ai].cre_count * x[ai, ri]
                for ai in range(len(accounts))
                if (ai, ri) in x and accounts[ai].cre_count > 0
            ]
            if cre_terms:
                prob += pulp.lpSum(cre_terms) <= config.max_cre_per_rep, f"cre_max_{ri}"

        return prob, x

    def _solve(
        self,
        accounts: list[SandboxAccount],
        reps: list[SandboxRep],
        config: SandboxConfig,
    ) -> OptimizationResult:
        started = time.perf_counter()
        prob, x = self.build_problem(accounts, reps, config)

        prob.solve(
            pulp.PULP_CBC_CMD(msg=self._msg, timeLimit=self._time_limit, gapRel=self._mip_gap)
        )
        solve_time_ms = round((time.perf_counter() - started) * 1000)
        status = pulp.LpStatus[prob.status]
        logger.info("PuLP solve finished in %d ms, status: %s", solve_time_ms, status)

        if status == "Optimal":
            return OptimizationResult(
                status=SolverStatus.OPTIMAL,
                assignments=self._extract(accounts, reps, config, x),
                solve_time_ms=solve_time_ms,
                objective_value=pulp.value(prob.objective) or 0.0,
            )
        if status == "Infeasible":
            return OptimizationResult(
                status=SolverStatus.INFEASIBLE,
                solve_time_ms=solve_time_ms,
                error_message=INFEASIBLE_MESSAGE,
            )
        logger.error("PuLP optimization failed with status: %s", status)
        return OptimizationResult(
            status=SolverStatus.ERROR,
            solve_time_ms=solve_time_ms,
            error_message=f"Solver returned status: {status}",
        )

    @staticmethod
    def _extract(
        accounts: list[SandboxAccount],
        reps: list[SandboxRep],
        config: SandboxConfig,
        x: dict[tuple[int, int], pulp.LpVariable],
    ) -> list[OptimizedAssignment]:
        assignments = []
        for (ai, ri), var in x.items():
            if (var.varValue or 0) < 0.5:
                continue
            account, rep = accounts[ai], reps[ri]
            geo_match = is_geo_match(
                rep.region, account.sales_territory, account.geo, config.territory_mappings
            )
            continuity = bool(account.owner_id) and account.owner_id == rep.rep_id

            reasons = []
            if geo_match:
                reasons.append("Geographic match")
            if continuity:
                reasons.append("Continuity maintained")
            if not reasons:
                reasons.append("Balanced assignment")

            assignments.append(
                OptimizedAssignment(
                    sfdc_account_id=account.sfdc_account_id,
                    account_name=account.account_name,
                    assigned_rep_id=rep.rep_id,
                    assigned_rep_name=rep.name,
                    account_arr=account.calculated_arr,
                    geo_match=geo_match,
                    continuity_maintained=continuity,
                    rationale="Optimized: " + ", ".join(reasons),
                )
            )
        return assignments
