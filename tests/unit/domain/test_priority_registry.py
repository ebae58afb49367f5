"""Tests for the priority registry."""

import pytest

from bookops.domain.entities.priority import PriorityConfig
from bookops.domain.policies.priority_registry import (
    PRIORITY_REGISTRY,
    get_available_priorities,
    get_default_priority_config,
    get_holdover_priorities,
    get_optimization_priorities,
    get_priority_by_id,
    validate_priority_config,
)
from bookops.domain.value_objects.enums import AssignmentMode, PriorityId, PriorityType


# ─── Catalog ─────────────────────────────────────────────────────────


def test_registry_ids_are_unique():
    ids = [p.id for p in PRIORITY_REGISTRY]
    assert len(ids) == len(set(ids)) == len(PriorityId)


def test_locked_priorities():
    locked = {p.id for p in PRIORITY_REGISTRY if p.is_locked}
    assert locked == {PriorityId.MANUAL_HOLDOVER, PriorityId.GEO_AND_CONTINUITY}


def test_get_priority_by_id():
    p = get_priority_by_id("pe_firm")
    assert p is not None
    assert p.type == PriorityType.HOLDOVER
    assert p.default_weight == 95


def test_get_priority_by_unknown_id():
    assert get_priority_by_id("nope") is None


def test_stability_accounts_has_four_sub_conditions():
    p = get_priority_by_id("stability_accounts")
    assert [sc.id for sc in p.sub_conditions] == [
        "cre_risk", "renewal_soon", "pe_firm", "recent_owner_change",
    ]


# ─── Default configs ─────────────────────────────────────────────────


def test_default_config_ent_order():
    ids = [c.id for c in get_default_priority_config(AssignmentMode.ENT)]
    assert ids == [
        "manual_holdover", "cre_risk", "geo_and_continuity",
        "geography", "continuity", "renewal_balance", "arr_balance",
    ]


def test_default_config_commercial_includes_pe_and_top_10():
    ids = [c.id for c in get_default_priority_config(AssignmentMode.COMMERCIAL)]
    assert ids[:6] == [
        "manual_holdover", "cre_risk", "geo_and_continuity",
        "pe_firm", "top_10_percent", "rs_routing",
    ]


def test_default_config_emea_includes_sub_region():
    config = get_default_priority_config(AssignmentMode.EMEA)
    sub_region = next(c for c in config if c.id == "sub_region")
    assert sub_region.position == 4


@pytest.mark.parametrize("mode", [AssignmentMode.ENT, AssignmentMode.COMMERCIAL, AssignmentMode.EMEA])
def test_default_config_is_valid(mode):
    config = get_default_priority_config(mode)
    assert all(c.enabled for c in config)
    assert validate_priority_config(config) == []


def test_default_config_custom_raises():
    with pytest.raises(ValueError):
        get_default_priority_config(AssignmentMode.CUSTOM)


def test_stability_accounts_not_in_any_preset():
    for mode in (AssignmentMode.ENT, AssignmentMode.COMMERCIAL, AssignmentMode.EMEA):
        assert "stability_accounts" not in {c.id for c in get_default_priority_config(mode)}


# ─── Availability ────────────────────────────────────────────────────


def test_available_priorities_split_by_mapped_fields():
    available, unavailable = get_available_priorities(
        AssignmentMode.COMMERCIAL,
        {"accounts": ["pe_firm", "cre_risk"]},
    )
    available_ids = {p.id for p in available}
    unavailable_ids = {p.id for p in unavailable}
    assert PriorityId.PE_FIRM in available_ids
    assert PriorityId.CRE_RISK in available_ids
    assert PriorityId.MANUAL_HOLDOVER in available_ids  # no required fields
    assert PriorityId.TOP_10_PERCENT in unavailable_ids
    assert PriorityId.RS_ROUTING in unavailable_ids
    assert PriorityId.SUB_REGION not in available_ids | unavailable_ids  # EMEA only


# ─── Type filters ────────────────────────────────────────────────────


def test_holdover_and_optimization_filters():
    config = [
        PriorityConfig("manual_holdover", position=0),
        PriorityConfig("cre_risk", enabled=False, position=1),
        PriorityConfig("geography", position=2, weight=75),
        PriorityConfig("arr_balance", enabled=False, position=3, weight=60),
        PriorityConfig("legacy_rule", position=4),
    ]
    assert [c.id for c in get_holdover_priorities(config)] == ["manual_holdover"]
    assert [c.id for c in get_optimization_priorities(config)] == ["geography"]


def test_filters_warn_on_unknown_id(caplog):
    get_holdover_priorities([PriorityConfig("legacy_rule", position=0)])
    assert "legacy_rule" in caplog.text


# ─── Validation ──────────────────────────────────────────────────────


def test_validate_requires_manual_holdover():
    config = [PriorityConfig("geo_and_continuity", position=0)]
    assert "Manual Holdover priority must be enabled" in validate_priority_config(config)


def test_validate_disabled_manual_holdover():
    config = [PriorityConfig("manual_holdover", enabled=False, position=0)]
    assert "Manual Holdover priority must be enabled" in validate_priority_config(config)


def test_validate_unknown_id():
    config = [PriorityConfig("manual_holdover", position=0), PriorityConfig("legacy_rule", position=1)]
    assert "Unknown priority 'legacy_rule'" in validate_priority_config(config)


def test_validate_duplicate_positions():
    config = [
        PriorityConfig("manual_holdover", position=0),
        PriorityConfig("cre_risk", position=1),
        PriorityConfig("pe_firm", position=1),
    ]
    assert "Priority positions must be unique" in validate_priority_config(config)


def test_validate_duplicate_positions_ignores_disabled():
    config = [
        PriorityConfig("manual_holdover", position=0),
        PriorityConfig("cre_risk", position=1),
        PriorityConfig("pe_firm", enabled=False, position=1),
    ]
    assert validate_priority_config(config) == []


def test_validate_cannot_go_above():
    config = [
        PriorityConfig("manual_holdover", position=0),
        PriorityConfig("geography", position=1, weight=75),
        PriorityConfig("geo_and_continuity", position=2),
    ]
    issues = validate_priority_config(config)
    assert "Geographic Match cannot be positioned above Geography + Continuity" in issues
