"""Project domain accounts/reps onto the reduced shapes the optimizer consumes."""

from __future__ import annotations

from collections.abc import Iterable

from bookops.domain.entities.account import Account
from bookops.domain.entities.sales_rep import SalesRep
from bookops.domain.entities.sandbox import SandboxAccount, SandboxRep


def to_sandbox_account(account: Account) -> SandboxAccount:
    return SandboxAccount(
        sfdc_account_id=account.sfdc_account_id,
        account_name=account.account_name,
        calculated_arr=account.account_arr,
        cre_count=account.cre_count or 0,
        sales_territory=account.sales_territory or "",
        geo=account.geo or "",
        owner_id=account.owner_id or None,
        owner_name=account.owner_name,
        is_strategic=bool(account.is_strategic),
    )


def to_sandbox_accounts(accounts: Iterable[Account]) -> list[SandboxAccount]:
    return [to_sandbox_account(a) for a in accounts]


def to_sandbox_reps(reps: Iterable[SalesRep]) -> list[SandboxRep]:
    """Only active reps that are included in assignments reach the optimizer."""
    return [
        SandboxRep(
            rep_id=r.rep_id,
            name=r.name,
            region=r.region or "",
            is_strategic_rep=r.is_strategic_rep,
            is_active=True,
            include_in_assignments=True,
        )
        for r in reps
        if r.is_assignable()
    ]
