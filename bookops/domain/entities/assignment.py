"""Assignment results — protected holdovers, optimized placements and run stats."""

from dataclasses import dataclass, field

from bookops.domain.entities.account import Account
from bookops.domain.value_objects.enums import SolverStatus


@dataclass(frozen=True)
class ProtectedAccount:
    """An account a holdover rule keeps with its current owner."""

    account: Account
    reason: str
    priority_id: str
    assigned_rep_id: str | None
    assigned_rep_name: str | None
    sub_condition_id: str | None = None


@dataclass(frozen=True)
class OptimizedAssignment:
    sfdc_account_id: str
    account_name: str
    assigned_rep_id: str
    assigned_rep_name: str
    account_arr: float
    geo_match: bool
    continuity_maintained: bool
    rationale: str


@dataclass
class OptimizationResult:
    status: SolverStatus
    assignments: list[OptimizedAssignment] = field(default_factory=list)
    solve_time_ms: int = 0
    objective_value: float = 0.0
    error_message: str | None = None


@dataclass(frozen=True)
class ExecutionStats:
    total_accounts: int
    total_customers: int
    total_prospects: int
    protected_count: int
    optimized_count: int
    holdover_breakdown: dict[str, int]
    solver_status: SolverStatus
    solve_time_ms: int
    execution_time_ms: int
