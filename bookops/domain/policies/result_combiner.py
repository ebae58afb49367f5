"""ResultCombiner — merge protected holdovers with optimizer placements."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bookops.domain.entities.assignment import OptimizedAssignment, ProtectedAccount

logger = logging.getLogger(__name__)

PROTECTED_RATIONALE_PREFIX = "Protected: "


def protected_to_assignment(protected: ProtectedAccount) -> OptimizedAssignment:
    account = protected.account
    return OptimizedAssignment(
        sfdc_account_id=account.sfdc_account_id,
        account_name=account.account_name,
        assigned_rep_id=protected.assigned_rep_id,
        assigned_rep_name=protected.assigned_rep_name or "",
        account_arr=account.account_arr,
        # Assumed by convention: the account stays where it is
        geo_match=True,
        continuity_maintained=True,
        rationale=PROTECTED_RATIONALE_PREFIX + protected.reason,
    )


def combine_results(
    protected_accounts: Iterable[ProtectedAccount],
    assignments: Iterable[OptimizedAssignment],
) -> list[OptimizedAssignment]:
    """Protected accounts with an owner first, then the optimizer's assignments.

    Protected accounts without an owner are dropped. No de-duplication by
    account id is done; the two inputs are disjoint by construction.
    """
    kept: list[OptimizedAssignment] = []
    dropped = 0
    for protected in protected_accounts:
        if protected.assigned_rep_id:
            kept.append(protected_to_assignment(protected))
        else:
            dropped += 1

    if dropped:
        logger.warning("%d protected accounts have no current owner and were dropped", dropped)

    return kept + list(assignments)
