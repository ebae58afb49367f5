"""Priority registry — the catalog of waterfall rules and helpers over it.

Holdover priorities filter accounts BEFORE optimization runs.
Optimization priorities become weighted terms of the solver objective.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from bookops.domain.entities.priority import (
    DISABLED_POSITION,
    PriorityConfig,
    PriorityDefinition,
    RequiredField,
    SubConditionDefinition,
)
from bookops.domain.value_objects.enums import (
    AssignmentMode,
    PriorityId,
    PriorityType,
    StabilityCondition,
)

logger = logging.getLogger(__name__)

ENT = AssignmentMode.ENT
COMMERCIAL = AssignmentMode.COMMERCIAL
EMEA = AssignmentMode.EMEA

PRIORITY_REGISTRY: tuple[PriorityDefinition, ...] = (
    # ─── Holdovers ───────────────────────────────────────────────────
    PriorityDefinition(
        id=PriorityId.MANUAL_HOLDOVER,
        name="Manual Holdover",
        description="Accounts excluded from reassignment stay with their current owner",
        type=PriorityType.HOLDOVER,
        default_weight=100,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        default_position={ENT: 0, COMMERCIAL: 0, EMEA: 0},
        is_locked=True,
    ),
    PriorityDefinition(
        id=PriorityId.CRE_RISK,
        name="CRE Risk Protection",
        description="At-risk accounts (CRE flagged) stay with their experienced owner",
        type=PriorityType.HOLDOVER,
        default_weight=95,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        required_fields=(RequiredField("accounts", "cre_risk"),),
        default_position={ENT: 1, COMMERCIAL: 1, EMEA: 1},
    ),
    PriorityDefinition(
        id=PriorityId.GEO_AND_CONTINUITY,
        name="Geography + Continuity",
        description="Account stays with its current owner when the owner's region matches",
        type=PriorityType.HOLDOVER,
        default_weight=90,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        default_position={ENT: 2, COMMERCIAL: 2, EMEA: 2},
        is_locked=True,
    ),
    PriorityDefinition(
        id=PriorityId.PE_FIRM,
        name="PE Firm Protection",
        description="PE-owned accounts stay with their designated AE",
        type=PriorityType.HOLDOVER,
        default_weight=95,
        modes=frozenset({COMMERCIAL}),
        required_fields=(RequiredField("accounts", "pe_firm"),),
        default_position={COMMERCIAL: 3},
    ),
    PriorityDefinition(
        id=PriorityId.TOP_10_PERCENT,
        name="Top 10% ARR Carve-out",
        description="Top 10% accounts by ARR stay with their AE",
        type=PriorityType.HOLDOVER,
        default_weight=90,
        modes=frozenset({COMMERCIAL}),
        required_fields=(RequiredField("accounts", "hierarchy_bookings_arr_converted"),),
        default_position={COMMERCIAL: 4},
    ),
    PriorityDefinition(
        id=PriorityId.STABILITY_ACCOUNTS,
        name="Stability Accounts",
        description="Accounts in a fragile state keep their owner",
        type=PriorityType.HOLDOVER,
        default_weight=85,
        sub_conditions=(
            SubConditionDefinition(
                StabilityCondition.CRE_RISK.value, "CRE At-Risk", "Account is CRE flagged"
            ),
            SubConditionDefinition(
                StabilityCondition.RENEWAL_SOON.value,
                "Renewal Soon",
                "Renewal date falls within the next 90 days",
            ),
            SubConditionDefinition(
                StabilityCondition.PE_FIRM.value, "PE Firm", "Account is PE-owned"
            ),
            SubConditionDefinition(
                StabilityCondition.RECENT_OWNER_CHANGE.value,
                "Recent Owner Change",
                "Owner changed within the last 3 months",
            ),
        ),
    ),
    # ─── Optimization terms ──────────────────────────────────────────
    PriorityDefinition(
        id=PriorityId.RS_ROUTING,
        name="Renewal Specialist Routing",
        description="Route accounts with ARR at or below the threshold to Renewal Specialists",
        type=PriorityType.OPTIMIZATION,
        default_weight=80,
        modes=frozenset({COMMERCIAL}),
        required_fields=(
            RequiredField("accounts", "hierarchy_bookings_arr_converted"),
            RequiredField("sales_reps", "is_renewal_specialist"),
        ),
        default_position={COMMERCIAL: 5},
    ),
    PriorityDefinition(
        id=PriorityId.GEOGRAPHY,
        name="Geographic Match",
        description="Match account territory to rep region",
        type=PriorityType.OPTIMIZATION,
        default_weight=75,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        default_position={ENT: 3, COMMERCIAL: 6, EMEA: 3},
        cannot_go_above=PriorityId.GEO_AND_CONTINUITY,
    ),
    PriorityDefinition(
        id=PriorityId.SUB_REGION,
        name="EMEA Sub-Region Routing",
        description="Route accounts to DACH, UKI, Nordics, France, Benelux or Middle East teams",
        type=PriorityType.OPTIMIZATION,
        default_weight=70,
        modes=frozenset({EMEA}),
        required_fields=(
            RequiredField("accounts", "hq_country"),
            RequiredField("sales_reps", "sub_region"),
        ),
        default_position={EMEA: 4},
    ),
    PriorityDefinition(
        id=PriorityId.CONTINUITY,
        name="Account Continuity",
        description="Prefer keeping accounts with their current owner when balanced",
        type=PriorityType.OPTIMIZATION,
        default_weight=65,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        default_position={ENT: 4, COMMERCIAL: 7, EMEA: 5},
        cannot_go_above=PriorityId.GEO_AND_CONTINUITY,
    ),
    PriorityDefinition(
        id=PriorityId.RENEWAL_BALANCE,
        name="Renewal Quarter Balance",
        description="Distribute renewals evenly across quarters per rep",
        type=PriorityType.OPTIMIZATION,
        default_weight=50,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        required_fields=(RequiredField("accounts", "renewal_quarter"),),
        default_position={ENT: 5, COMMERCIAL: 8, EMEA: 6},
    ),
    PriorityDefinition(
        id=PriorityId.ARR_BALANCE,
        name="ARR Workload Balance",
        description="Even distribution of ARR across all reps",
        type=PriorityType.OPTIMIZATION,
        default_weight=60,
        modes=frozenset({ENT, COMMERCIAL, EMEA}),
        default_position={ENT: 6, COMMERCIAL: 9, EMEA: 7},
    ),
)

_BY_ID: dict[str, PriorityDefinition] = {p.id.value: p for p in PRIORITY_REGISTRY}


def get_priority_by_id(priority_id: str) -> PriorityDefinition | None:
    return _BY_ID.get(priority_id)


def get_default_priority_config(mode: AssignmentMode) -> list[PriorityConfig]:
    """Every priority the preset includes, enabled, at its default weight and position."""
    if mode == AssignmentMode.CUSTOM:
        raise ValueError("CUSTOM mode has no default priority configuration")

    config = [
        PriorityConfig(
            id=p.id.value,
            enabled=True,
            position=p.default_position.get(mode, DISABLED_POSITION),
            weight=p.default_weight,
        )
        for p in PRIORITY_REGISTRY
        if mode in p.modes
    ]
    return sorted(config, key=lambda c: c.position)


def get_available_priorities(
    mode: AssignmentMode,
    mapped_fields: Mapping[str, Iterable[str]],
) -> tuple[list[PriorityDefinition], list[PriorityDefinition]]:
    """Split the mode's priorities by whether their required fields are mapped."""
    fields = {table: set(names) for table, names in mapped_fields.items()}

    available: list[PriorityDefinition] = []
    unavailable: list[PriorityDefinition] = []
    for priority in PRIORITY_REGISTRY:
        if mode not in priority.modes:
            continue
        has_all = all(rf.field in fields.get(rf.table, ()) for rf in priority.required_fields)
        (available if has_all else unavailable).append(priority)

    return available, unavailable


def _enabled_of_type(config: Iterable[PriorityConfig], kind: PriorityType) -> list[PriorityConfig]:
    result = []
    for entry in config:
        definition = get_priority_by_id(entry.id)
        if definition is None:
            logger.warning("Ignoring unknown priority id '%s'", entry.id)
            continue
        if definition.type == kind and entry.enabled:
            result.append(entry)
    return result


def get_holdover_priorities(config: Iterable[PriorityConfig]) -> list[PriorityConfig]:
    return _enabled_of_type(config, PriorityType.HOLDOVER)


def get_optimization_priorities(config: Iterable[PriorityConfig]) -> list[PriorityConfig]:
    return _enabled_of_type(config, PriorityType.OPTIMIZATION)


def validate_priority_config(config: list[PriorityConfig]) -> list[str]:
    """Return human-readable problems with a waterfall ordering (empty = valid)."""
    issues: list[str] = []

    manual = next((c for c in config if c.id == PriorityId.MANUAL_HOLDOVER.value), None)
    if manual is None or not manual.enabled:
        issues.append("Manual Holdover priority must be enabled")

    for entry in config:
        if get_priority_by_id(entry.id) is None:
            issues.append(f"Unknown priority '{entry.id}'")

    enabled = [c for c in config if c.enabled]
    positions = [c.position for c in enabled]
    if len(positions) != len(set(positions)):
        issues.append("Priority positions must be unique")

    position_of = {c.id: c.position for c in enabled}
    for entry in enabled:
        definition = get_priority_by_id(entry.id)
        if definition is None or definition.cannot_go_above is None:
            continue
        anchor = definition.cannot_go_above.value
        if anchor in position_of and entry.position < position_of[anchor]:
            anchor_name = _BY_ID[anchor].name
            issues.append(f"{definition.name} cannot be positioned above {anchor_name}")

    return issues
