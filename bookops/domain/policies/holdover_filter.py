"""HoldoverFilter — protect accounts from reassignment before optimization.

Rules are evaluated in ascending ``position`` order and the first matching rule
wins: an account protected by an earlier rule is never attributed to a later
one. The output is an immutable partition of the input accounts.
"""

from __future__ import annotations

import calendar
import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from types import MappingProxyType

from bookops.domain.entities.account import Account
from bookops.domain.entities.assignment import ProtectedAccount
from bookops.domain.entities.assignment_config import AssignmentConfig
from bookops.domain.entities.priority import PriorityConfig
from bookops.domain.entities.sales_rep import SalesRep
from bookops.domain.policies.geography import resolve_target_region
from bookops.domain.policies.priority_registry import get_priority_by_id
from bookops.domain.value_objects.enums import PriorityId, PriorityType, StabilityCondition

logger = logging.getLogger(__name__)

RENEWAL_SOON_DAYS = 90
RECENT_OWNER_CHANGE_MONTHS = 3


@dataclass(frozen=True)
class HoldoverResult:
    protected_accounts: tuple[ProtectedAccount, ...]
    assignable_accounts: tuple[Account, ...]
    holdover_breakdown: Mapping[str, int]


@dataclass(frozen=True)
class _RuleContext:
    reps_by_id: Mapping[str, SalesRep]
    territory_mappings: Mapping[str, str]
    top_10_threshold: float
    today: date


# A match is (reason, sub_condition_id); None means the rule does not apply.
_Match = tuple[str, str | None] | None
_Predicate = Callable[[Account, PriorityConfig, _RuleContext], _Match]


def calculate_top_10_percent_threshold(accounts: list[Account]) -> float:
    """ARR at or above which an account is in the top 10% of positive-ARR accounts.

    Returns 0 when no account has positive ARR.
    """
    values = sorted((a.account_arr for a in accounts if a.account_arr > 0), reverse=True)
    if not values:
        return 0
    index = math.ceil(len(values) * 0.1) - 1
    return values[max(0, index)]


def _months_before(day: date, months: int) -> date:
    month_index = day.month - 1 - months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


# ─── Rule predicates ─────────────────────────────────────────────────


def _manual_holdover(account: Account, _: PriorityConfig, __: _RuleContext) -> _Match:
    if account.exclude_from_reassignment:
        return "Excluded from reassignment", None
    return None


def _geo_and_continuity(account: Account, _: PriorityConfig, ctx: _RuleContext) -> _Match:
    if not account.has_owner():
        return None
    owner = ctx.reps_by_id.get(account.owner_id)
    if owner is None or not owner.region:
        return None
    target = resolve_target_region(account.sales_territory, account.geo, ctx.territory_mappings)
    if owner.region == target:
        return f"Geography + continuity match ({target})", None
    return None


def _pe_firm(account: Account, _: PriorityConfig, __: _RuleContext) -> _Match:
    if account.pe_firm and account.pe_firm.strip():
        return f"PE-owned ({account.pe_firm.strip()})", None
    return None


def _top_10_percent(account: Account, _: PriorityConfig, ctx: _RuleContext) -> _Match:
    # A non-positive threshold means there is no meaningful top decile
    if ctx.top_10_threshold <= 0:
        return None
    if account.account_arr >= ctx.top_10_threshold:
        return f"Top 10% ARR (>= {ctx.top_10_threshold:,.0f})", None
    return None


def _cre_risk(account: Account, _: PriorityConfig, __: _RuleContext) -> _Match:
    if account.cre_risk:
        return "CRE risk - at-risk account", None
    return None


def _stability_accounts(account: Account, priority: PriorityConfig, ctx: _RuleContext) -> _Match:
    if priority.is_sub_condition_enabled(StabilityCondition.CRE_RISK.value) and account.cre_risk:
        return "Stability - CRE at-risk", StabilityCondition.CRE_RISK.value

    if (
        priority.is_sub_condition_enabled(StabilityCondition.RENEWAL_SOON.value)
        and account.renewal_date is not None
        and account.renewal_date <= ctx.today + timedelta(days=RENEWAL_SOON_DAYS)
    ):
        days = (account.renewal_date - ctx.today).days
        return f"Stability - renewal in {days} days", StabilityCondition.RENEWAL_SOON.value

    if (
        priority.is_sub_condition_enabled(StabilityCondition.PE_FIRM.value)
        and account.pe_firm
        and account.pe_firm.strip()
    ):
        return f"Stability - PE firm ({account.pe_firm.strip()})", StabilityCondition.PE_FIRM.value

    if (
        priority.is_sub_condition_enabled(StabilityCondition.RECENT_OWNER_CHANGE.value)
        and account.owner_change_date is not None
        and account.owner_change_date >= _months_before(ctx.today, RECENT_OWNER_CHANGE_MONTHS)
    ):
        return "Stability - recent owner change", StabilityCondition.RECENT_OWNER_CHANGE.value

    return None


HOLDOVER_RULES: Mapping[PriorityId, _Predicate] = MappingProxyType({
    PriorityId.MANUAL_HOLDOVER: _manual_holdover,
    PriorityId.GEO_AND_CONTINUITY: _geo_and_continuity,
    PriorityId.PE_FIRM: _pe_firm,
    PriorityId.TOP_10_PERCENT: _top_10_percent,
    PriorityId.CRE_RISK: _cre_risk,
    PriorityId.STABILITY_ACCOUNTS: _stability_accounts,
})


def _ordered_rules(holdover_priorities: list[PriorityConfig]) -> list[tuple[PriorityConfig, _Predicate]]:
    rules = []
    for priority in sorted(holdover_priorities, key=lambda p: p.position):
        if not priority.enabled:
            continue
        definition = get_priority_by_id(priority.id)
        if definition is None or definition.type != PriorityType.HOLDOVER:
            logger.warning("Priority '%s' is not a known holdover rule, skipping", priority.id)
            continue
        rules.append((priority, HOLDOVER_RULES[definition.id]))
    return rules


def apply_holdovers(
    accounts: list[Account],
    reps: list[SalesRep],
    holdover_priorities: list[PriorityConfig],
    config: AssignmentConfig,
    today: date | None = None,
) -> HoldoverResult:
    """Partition accounts into protected (keep current owner) and assignable.

    Args:
        accounts: every account of the build.
        reps: every rep of the build (used to resolve the current owner).
        holdover_priorities: holdover entries of the waterfall; disabled ones are ignored.
        config: run configuration (territory mappings).
        today: reference date for date-based stability checks.

    Returns:
        HoldoverResult with protected accounts, assignable accounts (input order)
        and a per-rule match count for every enabled rule.
    """
    rules = _ordered_rules(holdover_priorities)

    threshold = 0.0
    if any(p.id == PriorityId.TOP_10_PERCENT.value for p, _ in rules):
        threshold = calculate_top_10_percent_threshold(accounts)
        logger.info("Top 10%% ARR threshold: %s", f"{threshold:,.0f}")

    ctx = _RuleContext(
        reps_by_id=MappingProxyType({r.rep_id: r for r in reps}),
        territory_mappings=MappingProxyType(dict(config.territory_mappings)),
        top_10_threshold=threshold,
        today=today or date.today(),
    )

    breakdown: dict[str, int] = {p.id: 0 for p, _ in rules}
    protected: list[ProtectedAccount] = []
    assignable: list[Account] = []

    for account in accounts:
        for priority, predicate in rules:
            match = predicate(account, priority, ctx)
            if match is None:
                continue
            reason, sub_condition_id = match
            owner = ctx.reps_by_id.get(account.owner_id) if account.owner_id else None
            protected.append(
                ProtectedAccount(
                    account=account,
                    reason=reason,
                    priority_id=priority.id,
                    sub_condition_id=sub_condition_id,
                    assigned_rep_id=account.owner_id or None,
                    assigned_rep_name=owner.name if owner else account.owner_name,
                )
            )
            breakdown[priority.id] += 1
            break
        else:
            assignable.append(account)

    for priority_id, count in breakdown.items():
        logger.info("Holdover '%s': %d accounts protected", priority_id, count)

    return HoldoverResult(
        protected_accounts=tuple(protected),
        assignable_accounts=tuple(assignable),
        holdover_breakdown=MappingProxyType(breakdown),
    )
