"""Tests for domain entities."""

from bookops.domain.entities.account import Account
from bookops.domain.entities.assignment_config import AssignmentConfig
from bookops.domain.entities.priority import DISABLED_POSITION, PriorityConfig
from bookops.domain.entities.sales_rep import SalesRep


# ─── Account ─────────────────────────────────────────────────────────


def test_account_arr_prefers_hierarchy_bookings():
    a = Account("A1", "Acme", calculated_arr=500, hierarchy_bookings_arr_converted=900, arr=100)
    assert a.account_arr == 900


def test_account_arr_falls_back_to_calculated():
    a = Account("A1", "Acme", calculated_arr=500, arr=100)
    assert a.account_arr == 500


def test_account_arr_zero_falls_through():
    a = Account("A1", "Acme", hierarchy_bookings_arr_converted=0, calculated_arr=0, arr=100)
    assert a.account_arr == 100


def test_account_arr_missing_is_zero():
    assert Account("A1", "Acme").account_arr == 0


def test_account_has_owner():
    assert Account("A1", "Acme", owner_id="R1").has_owner()
    assert not Account("A1", "Acme", owner_id="").has_owner()
    assert not Account("A1", "Acme").has_owner()


# ─── SalesRep ────────────────────────────────────────────────────────


def test_rep_assignable_by_default():
    assert SalesRep("R1", "Ann").is_assignable()


def test_rep_inactive_not_assignable():
    assert not SalesRep("R1", "Ann", is_active=False).is_assignable()


def test_rep_excluded_not_assignable():
    assert not SalesRep("R1", "Ann", include_in_assignments=False).is_assignable()


def test_rep_null_flags_not_assignable():
    assert not SalesRep("R1", "Ann", is_active=None).is_assignable()


# ─── PriorityConfig ──────────────────────────────────────────────────


def test_priority_config_from_dict_snake_case():
    cfg = PriorityConfig.from_dict({
        "id": "stability_accounts",
        "enabled": True,
        "position": 3,
        "weight": 85,
        "sub_conditions": [{"id": "pe_firm", "enabled": True}],
    })
    assert cfg.id == "stability_accounts"
    assert cfg.position == 3
    assert cfg.weight == 85
    assert cfg.is_sub_condition_enabled("pe_firm")
    assert not cfg.is_sub_condition_enabled("cre_risk")


def test_priority_config_from_dict_camel_case_sub_conditions():
    cfg = PriorityConfig.from_dict({
        "id": "stability_accounts",
        "position": 1,
        "subConditions": [{"id": "renewal_soon", "enabled": True}],
    })
    assert cfg.is_sub_condition_enabled("renewal_soon")


def test_priority_config_from_dict_defaults():
    cfg = PriorityConfig.from_dict({"id": "geography"})
    assert cfg.enabled is True
    assert cfg.position == DISABLED_POSITION
    assert cfg.weight == 0
    assert cfg.sub_conditions == []


def test_priority_config_to_dict_round_trip():
    cfg = PriorityConfig.from_dict({
        "id": "stability_accounts",
        "position": 2,
        "weight": 10,
        "sub_conditions": [{"id": "cre_risk", "enabled": False}],
    })
    assert PriorityConfig.from_dict(cfg.to_dict()) == cfg


# ─── AssignmentConfig ────────────────────────────────────────────────


def test_assignment_config_defaults():
    cfg = AssignmentConfig(build_id="b1")
    assert cfg.customer_target_arr == 2_000_000
    assert cfg.customer_max_arr == 3_000_000
    assert cfg.capacity_variance_percent == 10
    assert cfg.max_cre_per_rep == 3
    assert cfg.territory_mappings == {}
    assert cfg.assignment_mode == "ENT"
    assert cfg.priority_config == []
    assert cfg.p4_only_overflow is True
    assert cfg.rs_arr_threshold == 25_000
