"""Port interface for per-build assignment configuration."""

from abc import ABC, abstractmethod

from bookops.domain.entities.assignment_config import AssignmentConfig


class AssignmentConfigRepository(ABC):
    @abstractmethod
    async def get_by_build(self, build_id: str) -> AssignmentConfig | None:
        """Return the build's configuration, or None if it has not been saved yet."""
        ...
