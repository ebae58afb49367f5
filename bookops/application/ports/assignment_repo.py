"""Port interface for assignment proposal persistence."""

from abc import ABC, abstractmethod

from bookops.domain.entities.assignment import OptimizedAssignment


class AssignmentRepository(ABC):
    @abstractmethod
    async def upsert_many(self, build_id: str, assignments: list[OptimizedAssignment]) -> int:
        """Insert or replace proposals keyed by (build_id, account id). Returns rows written."""
        ...

    @abstractmethod
    async def get_by_build(self, build_id: str) -> list[OptimizedAssignment]:
        ...
