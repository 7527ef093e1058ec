# src/cdsga/params.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple

from .instance import NoJobsSelected
from .mechanisms import get_crossover, get_mutation

DEFAULT_JOB_QUANTITIES: Tuple[int, ...] = (1, 1, 1, 1, 1)
DEFAULT_CROSSOVER = "pmx"
DEFAULT_MUTATION = "inversion"
DEFAULT_MUTATION_RATE = 0.5
DEFAULT_MAX_GENERATIONS = 5
DEFAULT_TARGET_MAKESPAN = 20


@dataclass(frozen=True)
class OptimizationParams:
    job_quantities: Sequence[int] = field(default_factory=lambda: DEFAULT_JOB_QUANTITIES)
    crossover_method: str = DEFAULT_CROSSOVER
    mutation_method: str = DEFAULT_MUTATION
    mutation_rate: float = DEFAULT_MUTATION_RATE
    max_generations: int = DEFAULT_MAX_GENERATIONS
    target_makespan: int = DEFAULT_TARGET_MAKESPAN

    def with_quantities(self, quantities: Sequence[int]) -> "OptimizationParams":
        return replace(self, job_quantities=tuple(int(q) for q in quantities))

    def to_dict(self) -> dict:
        return {
            "jobQuantities": [int(q) for q in self.job_quantities],
            "crossoverMethod": self.crossover_method,
            "mutationMethod": self.mutation_method,
            "mutationRate": float(self.mutation_rate),
            "maxGenerations": int(self.max_generations),
            "targetMakespan": int(self.target_makespan),
        }


def validate_params(params: OptimizationParams, n_job_types: Optional[int] = None) -> None:
    """Checks a caller must pass before handing ``params`` to the optimizer.

    Raises
    ------
    NoJobsSelected
        Every quantity is zero.
    ValueError
        Negative quantities, a quantity vector that does not match the matrix,
        ``max_generations < 1`` or a non-positive target makespan.
    KeyError
        Unknown crossover or mutation name.
    """
    quantities = [int(q) for q in params.job_quantities]
    if n_job_types is not None and len(quantities) != n_job_types:
        raise ValueError(f"Expected {n_job_types} job quantities, got {len(quantities)}")
    if any(q < 0 for q in quantities):
        raise ValueError(f"Job quantities must be non-negative. Got: {quantities}")
    if all(q == 0 for q in quantities):
        raise NoJobsSelected()
    if params.target_makespan <= 0:
        raise ValueError("Target makespan must be greater than 0")
    if params.max_generations < 1:
        raise ValueError("max_generations must be at least 1")
    get_crossover(params.crossover_method)
    get_mutation(params.mutation_method)
