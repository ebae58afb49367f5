"""Pytest configuration and shared fixtures."""

import pytest

from bookops.domain.entities.assignment_config import AssignmentConfig
from bookops.domain.policies.priority_registry import get_default_priority_config
from bookops.domain.value_objects.enums import AssignmentMode


@pytest.fixture
def ent_config() -> AssignmentConfig:
    """A build configured with the ENT preset waterfall."""
    return AssignmentConfig(
        build_id="build-ent",
        priority_config=get_default_priority_config(AssignmentMode.ENT),
    )
