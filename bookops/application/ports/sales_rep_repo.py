"""Port interface for sales rep reads."""

from abc import ABC, abstractmethod

from bookops.domain.entities.sales_rep import SalesRep


class SalesRepRepository(ABC):
    @abstractmethod
    async def get_by_build(self, build_id: str) -> list[SalesRep]:
        ...
