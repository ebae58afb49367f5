"""Territory → region resolution shared by holdovers, the solver and metrics."""

from __future__ import annotations

from collections.abc import Mapping


def resolve_target_region(
    sales_territory: str | None,
    geo: str | None,
    territory_mappings: Mapping[str, str],
) -> str | None:
    """Region an account should be served from.

    Lookup order: the build's territory mapping, then the raw geo code, then
    the territory code itself. Returns None when the account carries neither.
    """
    if sales_territory and territory_mappings.get(sales_territory):
        return territory_mappings[sales_territory]
    return geo or sales_territory or None


def is_geo_match(
    rep_region: str | None,
    sales_territory: str | None,
    geo: str | None,
    territory_mappings: Mapping[str, str],
) -> bool:
    target = resolve_target_region(sales_territory, geo, territory_mappings)
    return bool(rep_region) and rep_region == target
