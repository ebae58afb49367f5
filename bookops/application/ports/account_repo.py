"""Port interface for account reads."""

from abc import ABC, abstractmethod

from bookops.domain.entities.account import Account


class AccountRepository(ABC):
    @abstractmethod
    async def get_by_build(self, build_id: str) -> list[Account]:
        ...
