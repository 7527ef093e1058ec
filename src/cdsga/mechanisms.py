# src/cdsga/mechanisms.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple
import numpy as np
from .design import get_design, OperatorDesign
from .operators import inversion_mutation, ox_crossover, pmx_crossover, swap_mutation

Crossover = Callable[[Sequence[int], Sequence[int]], Tuple[np.ndarray, np.ndarray]]
Mutation = Callable[[Sequence[int], float, np.random.Generator], np.ndarray]

@dataclass(frozen=True)
class CrossoverSpec:
    key: str
    design: OperatorDesign
    apply: Crossover

@dataclass(frozen=True)
class MutationSpec:
    key: str
    design: OperatorDesign
    apply: Mutation

CROSSOVERS: Dict[str, CrossoverSpec] = {
    "pmx": CrossoverSpec(key="pmx", design=get_design("pmx"), apply=pmx_crossover),
    "ox": CrossoverSpec(key="ox", design=get_design("ox"), apply=ox_crossover),
}

MUTATIONS: Dict[str, MutationSpec] = {
    "inversion": MutationSpec(key="inversion", design=get_design("inversion"), apply=inversion_mutation),
    "swap": MutationSpec(key="swap", design=get_design("swap"), apply=swap_mutation),
}

def get_crossover(key: str) -> CrossoverSpec:
    k = key.lower()
    if k not in CROSSOVERS:
        raise KeyError(f"Unknown crossover '{key}'. Use one of: {', '.join(sorted(CROSSOVERS))}")
    return CROSSOVERS[k]

def get_mutation(key: str) -> MutationSpec:
    k = key.lower()
    if k not in MUTATIONS:
        raise KeyError(f"Unknown mutation '{key}'. Use one of: {', '.join(sorted(MUTATIONS))}")
    return MUTATIONS[k]

def available_operators() -> Dict[str, str]:
    """Return mapping of operator key to its display name."""
    specs = list(CROSSOVERS.values()) + list(MUTATIONS.values())
    return {s.key: s.design.identifier for s in specs}


class GeneticOperators:
    """Crossover + mutation pair sharing one random generator."""

    def __init__(
        self,
        crossover: str = "pmx",
        mutation: str = "inversion",
        mutation_rate: float = 0.5,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.crossover_spec = get_crossover(crossover)
        self.mutation_spec = get_mutation(mutation)
        self.mutation_rate = float(mutation_rate)
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def label(self) -> str:
        return f"{self.crossover_spec.key}+{self.mutation_spec.key}"

    def crossover(self, parent1: Sequence[int], parent2: Sequence[int]) -> Tuple[np.ndarray, np.ndarray]:
        return self.crossover_spec.apply(parent1, parent2)

    def mutate(self, sequence: Sequence[int]) -> np.ndarray:
        return self.mutation_spec.apply(sequence, self.mutation_rate, self.rng)


def build_operators(
    crossover: str,
    mutation: str,
    mutation_rate: float,
    rng: Optional[np.random.Generator] = None,
) -> GeneticOperators:
    return GeneticOperators(crossover=crossover, mutation=mutation, mutation_rate=mutation_rate, rng=rng)
