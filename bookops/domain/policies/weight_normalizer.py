"""WeightNormalizer — collapse optimization priorities into three solver weights."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType

from bookops.domain.entities.assignment_config import AssignmentConfig
from bookops.domain.entities.priority import PriorityConfig
from bookops.domain.entities.sandbox import SandboxConfig
from bookops.domain.value_objects.enums import PriorityId, WeightBucket

logger = logging.getLogger(__name__)

PRIORITY_WEIGHT_BUCKETS: Mapping[PriorityId, WeightBucket] = MappingProxyType({
    PriorityId.GEOGRAPHY: WeightBucket.GEOGRAPHY,
    PriorityId.SUB_REGION: WeightBucket.GEOGRAPHY,
    PriorityId.CONTINUITY: WeightBucket.CONTINUITY,
    PriorityId.ARR_BALANCE: WeightBucket.BALANCE,
    PriorityId.RENEWAL_BALANCE: WeightBucket.BALANCE,
})


@dataclass(frozen=True)
class NormalizedWeights:
    geo: int
    continuity: int
    balance: int


DEFAULT_WEIGHTS = NormalizedWeights(geo=40, continuity=30, balance=30)


def normalize_weights(optimization_priorities: list[PriorityConfig]) -> NormalizedWeights:
    """Turn raw relative weights into integer percentages summing to exactly 100.

    Geography and continuity are truncated; balance takes the remainder.
    Falls back to 40/30/30 when nothing weighted is enabled.
    """
    enabled = [p for p in optimization_priorities if p.enabled]
    total_weight = sum(p.weight for p in enabled)
    if total_weight <= 0:
        return DEFAULT_WEIGHTS

    # Exact arithmetic: a whole-number share must not truncate to one less
    buckets = {bucket: Fraction(0) for bucket in WeightBucket}
    for priority in enabled:
        priority_id = PriorityId.parse(priority.id)
        bucket = PRIORITY_WEIGHT_BUCKETS.get(priority_id) if priority_id else None
        if bucket is None:
            logger.warning(
                "Priority '%s' has no solver weight bucket; its weight is not applied",
                priority.id,
            )
            continue
        buckets[bucket] += Fraction(priority.weight)

    bucket_total = sum(buckets.values())
    if bucket_total <= 0:
        return DEFAULT_WEIGHTS

    geo = int(buckets[WeightBucket.GEOGRAPHY] * 100 / bucket_total)
    continuity = int(buckets[WeightBucket.CONTINUITY] * 100 / bucket_total)
    return NormalizedWeights(geo=geo, continuity=continuity, balance=100 - geo - continuity)


def build_sandbox_config(
    config: AssignmentConfig,
    optimization_priorities: list[PriorityConfig],
) -> SandboxConfig:
    weights = normalize_weights(optimization_priorities)
    logger.info(
        "Solver weights: geo=%d continuity=%d balance=%d",
        weights.geo, weights.continuity, weights.balance,
    )
    return SandboxConfig(
        target_arr=config.customer_target_arr,
        variance_pct=config.capacity_variance_percent / 100,
        max_arr=config.customer_max_arr,
        max_cre_per_rep=config.max_cre_per_rep,
        geo_weight=weights.geo,
        continuity_weight=weights.continuity,
        balance_weight=weights.balance,
        p4_only_overflow=config.p4_only_overflow,
        territory_mappings=dict(config.territory_mappings),
    )
