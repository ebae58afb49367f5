"""Tests for domain enums."""

from bookops.domain.value_objects.enums import (
    AssignmentMode,
    PriorityId,
    PriorityType,
    SolverStatus,
    StabilityCondition,
    WeightBucket,
)


def test_priority_ids_count():
    assert len(PriorityId) == 12


def test_priority_type_values():
    assert PriorityType.HOLDOVER.value == "holdover"
    assert PriorityType.OPTIMIZATION.value == "optimization"


def test_assignment_mode_values():
    assert [m.value for m in AssignmentMode] == ["ENT", "COMMERCIAL", "EMEA", "CUSTOM"]


def test_priority_id_parse_known():
    assert PriorityId.parse("geo_and_continuity") is PriorityId.GEO_AND_CONTINUITY


def test_priority_id_parse_unknown_returns_none():
    assert PriorityId.parse("legacy_rule") is None


def test_enums_compare_equal_to_strings():
    assert PriorityId.MANUAL_HOLDOVER == "manual_holdover"
    assert StabilityCondition.RENEWAL_SOON == "renewal_soon"
    assert WeightBucket.BALANCE == "balance"
    assert SolverStatus.INFEASIBLE == "infeasible"
