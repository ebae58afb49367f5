"""Tests for sandbox metrics."""

import pytest

from bookops.domain.entities.assignment import OptimizedAssignment
from bookops.domain.entities.sandbox import SandboxAccount, SandboxConfig, SandboxRep
from bookops.domain.policies.sandbox_metrics import (
    calculate_baseline_metrics,
    calculate_metrics,
    calculate_metrics_delta,
)

# ─── Fixtures ────────────────────────────────────────────────────────


def _config(**kwargs) -> SandboxConfig:
    defaults = dict(
        target_arr=1000, variance_pct=0.1, max_arr=1500, max_cre_per_rep=1,
        geo_weight=40, continuity_weight=30, balance_weight=30,
    )
    defaults.update(kwargs)
    return SandboxConfig(**defaults)


def _rep(rep_id: str, region: str = "EAST", active: bool = True) -> SandboxRep:
    return SandboxRep(
        rep_id=rep_id, name=f"Rep {rep_id}", region=region,
        is_strategic_rep=False, is_active=active, include_in_assignments=True,
    )


def _account(account_id: str, arr: float, owner: str | None = None, territory: str = "EAST", cre: int = 0):
    return SandboxAccount(
        sfdc_account_id=account_id, account_name=f"Account {account_id}",
        calculated_arr=arr, cre_count=cre, sales_territory=territory, geo="",
        owner_id=owner, owner_name=None,
    )


def _assign(account: SandboxAccount, rep_id: str, geo: bool = False, cont: bool = False):
    return OptimizedAssignment(
        sfdc_account_id=account.sfdc_account_id, account_name=account.account_name,
        assigned_rep_id=rep_id, assigned_rep_name="", account_arr=account.calculated_arr,
        geo_match=geo, continuity_maintained=cont, rationale="",
    )


# ─── calculate_metrics ──────────────────────────────────────────────


def test_band_counting():
    reps = [_rep("R1"), _rep("R2"), _rep("R3")]
    accounts = [_account("A1", 1000), _account("A2", 500), _account("A3", 1460)]
    assignments = [_assign(accounts[0], "R1"), _assign(accounts[1], "R2"), _assign(accounts[2], "R3")]

    m = calculate_metrics(accounts, reps, assignments, _config())

    assert m.reps_within_band == 1  # R1 at 1000 inside [900, 1100]
    assert m.reps_below_min == 1  # R2
    assert m.reps_above_preferred_max == 1  # R3
    assert m.reps_at_hard_cap == 1  # 1460 >= 1425
    assert m.arr_total == 2960
    assert m.arr_range == 960
    assert m.rep_metrics[0].rep_id == "R3"


def test_geo_and_continuity_percentages():
    reps = [_rep("R1")]
    accounts = [_account("A1", 100, owner="R1"), _account("A2", 100, owner="R2"), _account("A3", 100)]
    assignments = [
        _assign(accounts[0], "R1", geo=True, cont=True),
        _assign(accounts[1], "R1", geo=True),
        _assign(accounts[2], "R1"),
    ]
    m = calculate_metrics(accounts, reps, assignments, _config())

    assert m.assigned_accounts == 3
    assert m.geo_match_count == 2
    assert m.geo_alignment_pct == pytest.approx(200 / 3)
    assert m.continuity_pct == pytest.approx(50.0)
    assert m.reassignment_count == 1


def test_assignments_to_inactive_reps_ignored():
    reps = [_rep("R1"), _rep("R2", active=False)]
    accounts = [_account("A1", 100)]
    m = calculate_metrics(accounts, reps, [_assign(accounts[0], "R2")], _config())
    assert m.assigned_accounts == 0
    assert m.unassigned_accounts == 1
    assert len(m.rep_metrics) == 1


def test_cre_over_limit():
    reps = [_rep("R1"), _rep("R2")]
    accounts = [_account("A1", 100, cre=2), _account("A2", 100, cre=1)]
    assignments = [_assign(accounts[0], "R1"), _assign(accounts[1], "R2")]
    m = calculate_metrics(accounts, reps, assignments, _config())
    assert m.cre_total == 3
    assert m.cre_max_per_rep == 2
    assert m.cre_over_limit_count == 1


def test_greedy_overflow_needs_same_region_peer_with_room():
    reps = [_rep("R1", "EAST"), _rep("R2", "EAST"), _rep("R3", "WEST")]
    accounts = [_account("A1", 1200), _account("A2", 1200, territory="WEST")]
    assignments = [_assign(accounts[0], "R1"), _assign(accounts[1], "R3")]
    m = calculate_metrics(accounts, reps, assignments, _config())
    # R1 over band with R2 empty in EAST; R3 alone in WEST
    assert m.greedy_overflow_count == 1


def test_empty_inputs():
    m = calculate_metrics([], [], [], _config())
    assert m.total_accounts == 0
    assert m.arr_mean == 0
    assert m.arr_variance_cv == 0
    assert m.rep_metrics == []


# ─── Baseline and delta ─────────────────────────────────────────────


def test_baseline_uses_current_owner():
    reps = [_rep("R1", "EAST"), _rep("R2", "WEST")]
    accounts = [
        _account("A1", 400, owner="R1", territory="EAST"),
        _account("A2", 600, owner="R1", territory="WEST"),
        _account("A3", 300),
    ]
    m = calculate_baseline_metrics(accounts, reps, _config())

    assert m.assigned_accounts == 2
    assert m.geo_match_count == 1
    assert m.continuity_pct == 100.0
    assert m.rep_metrics[0].total_arr == 1000


def test_delta_direction():
    reps = [_rep("R1"), _rep("R2")]
    accounts = [_account("A1", 1000, owner="R1"), _account("A2", 1000, owner="R1")]
    baseline = calculate_baseline_metrics(accounts, reps, _config())
    optimized = calculate_metrics(
        accounts, reps, [_assign(accounts[0], "R1", cont=True), _assign(accounts[1], "R2")], _config(),
    )
    deltas = {d.metric: d for d in calculate_metrics_delta(baseline, optimized)}

    assert len(deltas) == 11
    assert deltas["ARR Range"].improved is True
    assert deltas["ARR Range"].delta == -2000
    assert deltas["Reps Within Band"].optimized == 2
    assert deltas["Continuity Rate"].improved is False
