"""Success metrics for comparing current ownership against a proposed assignment."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from bookops.domain.entities.assignment import OptimizedAssignment
from bookops.domain.entities.sandbox import SandboxAccount, SandboxConfig, SandboxRep
from bookops.domain.policies.geography import is_geo_match

HARD_CAP_RATIO = 0.95


@dataclass
class RepMetrics:
    rep_id: str
    rep_name: str
    region: str
    total_arr: float = 0.0
    account_count: int = 0
    cre_count: int = 0
    geo_match_count: int = 0
    continuity_count: int = 0
    utilization_pct: float = 0.0
    within_band: bool = False


@dataclass
class SandboxMetrics:
    total_accounts: int
    assigned_accounts: int
    unassigned_accounts: int
    geo_alignment_pct: float
    geo_match_count: int
    geo_mismatch_count: int
    continuity_pct: float
    continuity_maintained_count: int
    reassignment_count: int
    arr_total: float
    arr_mean: float
    arr_std_dev: float
    arr_variance_cv: float  # coefficient of variation, %
    arr_min: float
    arr_max: float
    arr_range: float
    reps_within_band: int
    reps_below_min: int
    reps_above_preferred_max: int
    reps_at_hard_cap: int
    capacity_utilization_mean: float
    cre_total: int
    cre_max_per_rep: int
    cre_over_limit_count: int
    greedy_overflow_count: int
    rep_metrics: list[RepMetrics] = field(default_factory=list)


@dataclass(frozen=True)
class MetricsDelta:
    metric: str
    baseline: float
    optimized: float
    delta: float
    delta_pct: float
    improved: bool
    unit: str


def calculate_metrics(
    accounts: list[SandboxAccount],
    reps: list[SandboxRep],
    assignments: list[OptimizedAssignment],
    config: SandboxConfig,
) -> SandboxMetrics:
    """Measure an assignment set against the config's ARR band and CRE cap.

    Only active reps included in assignments are measured; assignments to
    other reps or for unknown accounts are ignored.
    """
    active_reps = [r for r in reps if r.is_active and r.include_in_assignments]
    stats = {r.rep_id: RepMetrics(rep_id=r.rep_id, rep_name=r.name, region=r.region) for r in active_reps}
    accounts_by_id = {a.sfdc_account_id: a for a in accounts}

    assigned = geo_matches = continuity = cre_total = 0
    for assignment in assignments:
        rep_stat = stats.get(assignment.assigned_rep_id)
        account = accounts_by_id.get(assignment.sfdc_account_id)
        if rep_stat is None or account is None:
            continue

        assigned += 1
        rep_stat.account_count += 1
        rep_stat.total_arr += assignment.account_arr
        rep_stat.cre_count += account.cre_count
        cre_total += account.cre_count
        if assignment.geo_match:
            geo_matches += 1
            rep_stat.geo_match_count += 1
        if assignment.continuity_maintained:
            continuity += 1
            rep_stat.continuity_count += 1

    arr_values = [s.total_arr for s in stats.values()]
    arr_total = sum(arr_values)
    arr_mean = arr_total / len(arr_values) if arr_values else 0.0
    arr_std_dev = (
        math.sqrt(sum((v - arr_mean) ** 2 for v in arr_values) / len(arr_values))
        if arr_values else 0.0
    )
    arr_min = min(arr_values) if arr_values else 0.0
    arr_max = max(arr_values) if arr_values else 0.0

    min_arr = config.target_arr * (1 - config.variance_pct)
    max_preferred_arr = config.target_arr * (1 + config.variance_pct)

    within_band = below_min = above_preferred = at_hard_cap = 0
    cre_max = cre_over_limit = greedy_overflow = 0
    for rep in active_reps:
        s = stats[rep.rep_id]
        s.utilization_pct = (s.total_arr / config.target_arr * 100) if config.target_arr > 0 else 0.0
        s.within_band = min_arr <= s.total_arr <= max_preferred_arr

        within_band += s.within_band
        below_min += s.total_arr < min_arr
        above_preferred += s.total_arr > max_preferred_arr
        at_hard_cap += s.total_arr >= config.max_arr * HARD_CAP_RATIO
        cre_max = max(cre_max, s.cre_count)
        cre_over_limit += s.cre_count > config.max_cre_per_rep

        # Over the band while a same-region peer still had room
        if s.total_arr > max_preferred_arr and s.account_count > 0:
            if any(
                other.region == rep.region
                and other.rep_id != rep.rep_id
                and stats[other.rep_id].total_arr < max_preferred_arr
                for other in active_reps
            ):
                greedy_overflow += 1

    rep_metrics = sorted(stats.values(), key=lambda s: s.total_arr, reverse=True)
    utilization_mean = (
        sum(s.utilization_pct for s in rep_metrics) / len(rep_metrics) if rep_metrics else 0.0
    )
    with_owner = sum(1 for a in accounts if a.owner_id)

    return SandboxMetrics(
        total_accounts=len(accounts),
        assigned_accounts=assigned,
        unassigned_accounts=len(accounts) - assigned,
        geo_alignment_pct=(geo_matches / assigned * 100) if assigned else 0.0,
        geo_match_count=geo_matches,
        geo_mismatch_count=assigned - geo_matches,
        continuity_pct=(continuity / with_owner * 100) if with_owner else 0.0,
        continuity_maintained_count=continuity,
        reassignment_count=with_owner - continuity,
        arr_total=arr_total,
        arr_mean=arr_mean,
        arr_std_dev=arr_std_dev,
        arr_variance_cv=(arr_std_dev / arr_mean * 100) if arr_mean > 0 else 0.0,
        arr_min=arr_min,
        arr_max=arr_max,
        arr_range=arr_max - arr_min,
        reps_within_band=within_band,
        reps_below_min=below_min,
        reps_above_preferred_max=above_preferred,
        reps_at_hard_cap=at_hard_cap,
        capacity_utilization_mean=utilization_mean,
        cre_total=cre_total,
        cre_max_per_rep=cre_max,
        cre_over_limit_count=cre_over_limit,
        greedy_overflow_count=greedy_overflow,
        rep_metrics=rep_metrics,
    )


def calculate_baseline_metrics(
    accounts: list[SandboxAccount],
    reps: list[SandboxRep],
    config: SandboxConfig,
) -> SandboxMetrics:
    """Metrics of the book as it stands today (every account with its current owner)."""
    reps_by_id = {r.rep_id: r for r in reps}
    current: list[OptimizedAssignment] = []
    for account in accounts:
        rep = reps_by_id.get(account.owner_id) if account.owner_id else None
        if rep is None:
            continue
        current.append(
            OptimizedAssignment(
                sfdc_account_id=account.sfdc_account_id,
                account_name=account.account_name,
                assigned_rep_id=rep.rep_id,
                assigned_rep_name=account.owner_name or rep.name,
                account_arr=account.calculated_arr,
                geo_match=is_geo_match(
                    rep.region, account.sales_territory, account.geo, config.territory_mappings
                ),
                continuity_maintained=True,
                rationale="Current assignment",
            )
        )
    return calculate_metrics(accounts, reps, current, config)


# (metric label, attribute, unit, higher is better)
_DELTA_METRICS = (
    ("Geographic Alignment", "geo_alignment_pct", "%", True),
    ("Continuity Rate", "continuity_pct", "%", True),
    ("ARR Variance (CV)", "arr_variance_cv", "%", False),
    ("ARR Range", "arr_range", "$", False),
    ("Reps Within Band", "reps_within_band", "reps", True),
    ("Reps Below Min", "reps_below_min", "reps", False),
    ("Reps Above Max", "reps_above_preferred_max", "reps", False),
    ("Max CRE Per Rep", "cre_max_per_rep", "CRE", False),
    ("CRE Over Limit", "cre_over_limit_count", "reps", False),
    ("Greedy Overflow", "greedy_overflow_count", "reps", False),
    ("Assigned Accounts", "assigned_accounts", "accounts", True),
)


def calculate_metrics_delta(baseline: SandboxMetrics, optimized: SandboxMetrics) -> list[MetricsDelta]:
    deltas = []
    for label, attr, unit, higher_is_better in _DELTA_METRICS:
        before = getattr(baseline, attr)
        after = getattr(optimized, attr)
        delta = after - before
        deltas.append(
            MetricsDelta(
                metric=label,
                baseline=before,
                optimized=after,
                delta=delta,
                delta_pct=(delta / before * 100) if before else 0.0,
                improved=delta > 0 if higher_is_better else delta < 0,
                unit=unit,
            )
        )
    return deltas
