"""Priority catalog endpoints — list the waterfall rules, validate an ordering."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from bookops.domain.entities.priority import (
    DISABLED_POSITION,
    PriorityConfig,
    PriorityDefinition,
    SubConditionConfig,
)
from bookops.domain.policies.priority_registry import (
    PRIORITY_REGISTRY,
    get_default_priority_config,
    validate_priority_config,
)
from bookops.domain.value_objects.enums import AssignmentMode

router = APIRouter(prefix="/priorities", tags=["priorities"])


# ── Request schemas ─────────────────────────────────────────────────

class SubConditionIn(BaseModel):
    id: str
    enabled: bool = False


class PriorityConfigIn(BaseModel):
    id: str
    enabled: bool = True
    position: int = DISABLED_POSITION
    weight: float = 0
    sub_conditions: list[SubConditionIn] = Field(default_factory=list)

    def to_domain(self) -> PriorityConfig:
        return PriorityConfig(
            id=self.id,
            enabled=self.enabled,
            position=self.position,
            weight=self.weight,
            sub_conditions=[SubConditionConfig(id=s.id, enabled=s.enabled) for s in self.sub_conditions],
        )


# ── Routes ──────────────────────────────────────────────────────────

@router.get("")
async def list_priorities(mode: AssignmentMode = AssignmentMode.ENT):
    """Catalog entries available in the mode and the mode's default ordering."""
    priorities = [
        p for p in PRIORITY_REGISTRY
        if mode == AssignmentMode.CUSTOM or mode in p.modes
    ]
    defaults = (
        [] if mode == AssignmentMode.CUSTOM else get_default_priority_config(mode)
    )
    return {
        "mode": mode.value,
        "priorities": [_serialize_definition(p) for p in priorities],
        "default_config": [c.to_dict() for c in defaults],
    }


@router.post("/validate")
async def validate_priorities(entries: list[PriorityConfigIn]):
    """Check a waterfall ordering; an empty ``errors`` list means it is valid."""
    errors = validate_priority_config([e.to_domain() for e in entries])
    return {"valid": not errors, "errors": errors}


def _serialize_definition(p: PriorityDefinition) -> dict:
    return {
        "id": p.id.value,
        "name": p.name,
        "description": p.description,
        "type": p.type.value,
        "default_weight": p.default_weight,
        "modes": sorted(m.value for m in p.modes),
        "required_fields": [{"table": rf.table, "field": rf.field} for rf in p.required_fields],
        "default_position": {m.value: pos for m, pos in p.default_position.items()},
        "is_locked": p.is_locked,
        "cannot_go_above": p.cannot_go_above.value if p.cannot_go_above else None,
        "sub_conditions": [
            {"id": sc.id, "name": sc.name, "description": sc.description}
            for sc in p.sub_conditions
        ],
    }
