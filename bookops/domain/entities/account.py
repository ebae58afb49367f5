"""Account entity — a customer or prospect in a build's book of business."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Account:
    sfdc_account_id: str
    account_name: str
    calculated_arr: float | None = None
    calculated_atr: float | None = None
    hierarchy_bookings_arr_converted: float | None = None
    arr: float | None = None
    cre_count: int | None = None
    cre_risk: bool | None = None
    sales_territory: str | None = None
    geo: str | None = None
    owner_id: str | None = None
    owner_name: str | None = None
    exclude_from_reassignment: bool | None = None
    pe_firm: str | None = None
    is_customer: bool | None = None
    is_strategic: bool | None = None
    hq_country: str | None = None
    renewal_quarter: str | None = None
    renewal_date: date | None = None
    owner_change_date: date | None = None

    @property
    def account_arr(self) -> float:
        """ARR used for balancing.

        Hierarchy bookings (already rolled up) win over calculated ARR, which
        wins over the raw imported value. Missing or zero falls through.
        """
        return (
            self.hierarchy_bookings_arr_converted
            or self.calculated_arr
            or self.arr
            or 0
        )

    def has_owner(self) -> bool:
        return bool(self.owner_id)
