"""Port interface for the account-to-rep optimization solver."""

from abc import ABC, abstractmethod

from bookops.domain.entities.assignment import OptimizationResult
from bookops.domain.entities.sandbox import SandboxAccount, SandboxConfig, SandboxRep


class SolverError(Exception):
    """The optimizer could not be run for the given input."""


class OptimizerPort(ABC):
    @abstractmethod
    async def optimize(
        self,
        accounts: list[SandboxAccount],
        reps: list[SandboxRep],
        config: SandboxConfig,
    ) -> OptimizationResult:
        """Assign every account to one of the reps under the config's constraints.

        Infeasible or failed solves are reported through ``OptimizationResult.status``.
        Raises SolverError when the problem cannot be built at all.
        """
        ...
