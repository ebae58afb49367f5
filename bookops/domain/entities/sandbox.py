"""Reduced account/rep/config shapes handed to the optimizer."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SandboxAccount:
    sfdc_account_id: str
    account_name: str
    calculated_arr: float
    cre_count: int
    sales_territory: str
    geo: str
    owner_id: str | None
    owner_name: str | None
    is_strategic: bool = False


@dataclass(frozen=True)
class SandboxRep:
    rep_id: str
    name: str
    region: str
    is_strategic_rep: bool
    is_active: bool
    include_in_assignments: bool


@dataclass(frozen=True)
class SandboxConfig:
    target_arr: float
    variance_pct: float  # fraction, e.g. 0.10
    max_arr: float
    max_cre_per_rep: int
    geo_weight: int  # 0-100
    continuity_weight: int  # 0-100
    balance_weight: int  # 0-100
    p4_only_overflow: bool = True
    territory_mappings: dict[str, str] = field(default_factory=dict)
