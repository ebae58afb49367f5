"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class PriorityType(str, Enum):
    HOLDOVER = "holdover"
    OPTIMIZATION = "optimization"


class AssignmentMode(str, Enum):
    ENT = "ENT"
    COMMERCIAL = "COMMERCIAL"
    EMEA = "EMEA"
    CUSTOM = "CUSTOM"


class PriorityId(str, Enum):
    # Holdovers
    MANUAL_HOLDOVER = "manual_holdover"
    CRE_RISK = "cre_risk"
    GEO_AND_CONTINUITY = "geo_and_continuity"
    PE_FIRM = "pe_firm"
    TOP_10_PERCENT = "top_10_percent"
    STABILITY_ACCOUNTS = "stability_accounts"
    # Optimization terms
    RS_ROUTING = "rs_routing"
    GEOGRAPHY = "geography"
    SUB_REGION = "sub_region"
    CONTINUITY = "continuity"
    RENEWAL_BALANCE = "renewal_balance"
    ARR_BALANCE = "arr_balance"

    @classmethod
    def parse(cls, raw: str) -> "PriorityId | None":
        try:
            return cls(raw)
        except ValueError:
            return None


class StabilityCondition(str, Enum):
    CRE_RISK = "cre_risk"
    RENEWAL_SOON = "renewal_soon"
    PE_FIRM = "pe_firm"
    RECENT_OWNER_CHANGE = "recent_owner_change"


class WeightBucket(str, Enum):
    GEOGRAPHY = "geography"
    CONTINUITY = "continuity"
    BALANCE = "balance"


class SolverStatus(str, Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    ERROR = "error"
