"""SalesRep entity — a rep who can own accounts."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SalesRep:
    rep_id: str
    name: str
    region: str | None = None
    sub_region: str | None = None
    is_strategic_rep: bool = False
    is_active: bool | None = True
    include_in_assignments: bool | None = True
    flm: str | None = None
    slm: str | None = None

    def is_assignable(self) -> bool:
        return bool(self.is_active) and bool(self.include_in_assignments)
