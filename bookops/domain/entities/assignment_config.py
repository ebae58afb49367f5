"""AssignmentConfig — the persisted run-level configuration of one build."""

from dataclasses import dataclass, field

from bookops.domain.entities.priority import PriorityConfig

DEFAULT_TARGET_ARR = 2_000_000
DEFAULT_MAX_ARR = 3_000_000
DEFAULT_VARIANCE_PERCENT = 10
DEFAULT_MAX_CRE_PER_REP = 3
DEFAULT_ASSIGNMENT_MODE = "ENT"
DEFAULT_RS_ARR_THRESHOLD = 25_000


@dataclass
class AssignmentConfig:
    build_id: str
    customer_target_arr: float = DEFAULT_TARGET_ARR
    customer_max_arr: float = DEFAULT_MAX_ARR
    capacity_variance_percent: float = DEFAULT_VARIANCE_PERCENT
    max_cre_per_rep: int = DEFAULT_MAX_CRE_PER_REP
    territory_mappings: dict[str, str] = field(default_factory=dict)
    assignment_mode: str = DEFAULT_ASSIGNMENT_MODE
    priority_config: list[PriorityConfig] = field(default_factory=list)
    p4_only_overflow: bool = True
    rs_arr_threshold: float = DEFAULT_RS_ARR_THRESHOLD
