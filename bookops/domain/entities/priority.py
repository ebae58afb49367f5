"""Priority catalog entries and the per-build ordering that references them."""

from dataclasses import dataclass, field

from bookops.domain.value_objects.enums import AssignmentMode, PriorityId, PriorityType

# Position carried by entries that are not placed in the waterfall
DISABLED_POSITION = 999


@dataclass(frozen=True)
class RequiredField:
    table: str  # "accounts" | "sales_reps" | "opportunities"
    field: str


@dataclass(frozen=True)
class SubConditionDefinition:
    id: str
    name: str
    description: str


@dataclass(frozen=True)
class PriorityDefinition:
    id: PriorityId
    name: str
    description: str
    type: PriorityType
    default_weight: int
    modes: frozenset[AssignmentMode] = frozenset()
    required_fields: tuple[RequiredField, ...] = ()
    default_position: dict[AssignmentMode, int] = field(default_factory=dict)
    is_locked: bool = False
    cannot_go_above: PriorityId | None = None
    sub_conditions: tuple[SubConditionDefinition, ...] = ()


@dataclass
class SubConditionConfig:
    id: str
    enabled: bool = False


@dataclass
class PriorityConfig:
    """One entry of a build's waterfall.

    ``id`` stays a plain string: persisted configs may reference ids that the
    current catalog no longer knows about.
    """

    id: str
    enabled: bool = True
    position: int = DISABLED_POSITION
    weight: float = 0
    sub_conditions: list[SubConditionConfig] = field(default_factory=list)

    def is_sub_condition_enabled(self, sub_condition_id: str) -> bool:
        return any(sc.id == sub_condition_id and sc.enabled for sc in self.sub_conditions)

    @classmethod
    def from_dict(cls, raw: dict) -> "PriorityConfig":
        subs = raw.get("sub_conditions") or raw.get("subConditions") or []
        return cls(
            id=str(raw["id"]),
            enabled=bool(raw.get("enabled", True)),
            position=int(raw.get("position", DISABLED_POSITION)),
            weight=float(raw.get("weight") or 0),
            sub_conditions=[
                SubConditionConfig(id=str(s["id"]), enabled=bool(s.get("enabled", False)))
                for s in subs
            ],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "enabled": self.enabled,
            "position": self.position,
            "weight": self.weight,
            "sub_conditions": [{"id": s.id, "enabled": s.enabled} for s in self.sub_conditions],
        }
