# src/cdsga/algo_cds_ga.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence
import numpy as np
from .cds import CDSResult, best_candidates, run_cds
from .instance import as_matrix, expand_jobs
from .mechanisms import build_operators
from .operators import occurrence_makespan, to_display
from .params import OptimizationParams

POPULATION_SIZE = 5


class InsufficientJobsForGA(ValueError):
    """Fewer than two job occurrences: there is nothing to recombine."""

    def __init__(self, n_occurrences: int) -> None:
        super().__init__(f"Not enough jobs for the genetic algorithm (need at least 2, got {n_occurrences})")
        self.n_occurrences = n_occurrences


@dataclass(frozen=True)
class PopulationMember:
    indices: List[int]     # occurrence indices
    sequence: List[int]    # 1-based job-type values
    makespan: int

    def to_dict(self) -> dict:
        return {"sequence": list(self.sequence), "makespan": int(self.makespan)}


@dataclass(frozen=True)
class GenerationRecord:
    generation: int
    sequence: List[int]
    makespan: int
    population: List[PopulationMember]

    def to_dict(self) -> dict:
        return {
            "generation": int(self.generation),
            "sequence": list(self.sequence),
            "makespan": int(self.makespan),
            "population": [m.to_dict() for m in self.population],
        }


@dataclass(frozen=True)
class GAResult:
    best_sequence: List[int]
    best_makespan: int
    best_generation: int
    history: List[GenerationRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "bestSequence": list(self.best_sequence),
            "bestMakespan": int(self.best_makespan),
            "bestGeneration": int(self.best_generation),
            "history": [h.to_dict() for h in self.history],
        }


@dataclass(frozen=True)
class OptimizationResult:
    cds: Dict[int, CDSResult]
    ga: GAResult
    processing_matrix: List[List[int]]

    @property
    def best_cds(self) -> CDSResult:
        return best_candidates(self.cds, count=1)[0]

    def to_dict(self) -> dict:
        return {
            "cds": {k: r.to_dict() for k, r in self.cds.items()},
            "ga": self.ga.to_dict(),
            "processingMatrix": [list(row) for row in self.processing_matrix],
        }


def seed_indices(sequence: Sequence[int], expanded: np.ndarray) -> np.ndarray:
    """Turn a 1-based job-type sequence back into occurrence indices.

    Each value takes the first unused occurrence of its type; unused
    occurrences left at the end are appended in ascending order.
    """
    used = np.zeros(expanded.shape[0], dtype=bool)
    out: List[int] = []
    for job in sequence:
        free = np.flatnonzero((expanded == int(job) - 1) & ~used)
        if free.size:
            used[free[0]] = True
            out.append(int(free[0]))
    out.extend(int(i) for i in np.flatnonzero(~used))
    return np.asarray(out, dtype=np.int64)


class CDSGeneticAlgorithm:
    def __init__(
        self,
        p_times,
        crossover: str = "pmx",
        mutation: str = "inversion",
        mutation_rate: float = 0.5,
        # tracing
        logger: Optional[Callable[[Dict[str, Any]], None]] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.p_times = np.ascontiguousarray(as_matrix(p_times))
        if self.p_times.shape[1] < 2:
            raise ValueError(f"CDS needs at least 2 machines. Got {self.p_times.shape[1]}")
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.ops = build_operators(crossover, mutation, mutation_rate, rng=self.rng)
        self.logger = logger

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            payload = {"event": event, **fields}
            try: self.logger(payload)
            except Exception: pass

    def _member(self, indices: Sequence[int], expanded: np.ndarray) -> PopulationMember:
        idx = [int(i) for i in indices]
        return PopulationMember(
            indices=idx,
            sequence=to_display(idx, expanded),
            makespan=occurrence_makespan(idx, expanded, self.p_times),
        )

    def _next_generation(self, parent1: np.ndarray, parent2: np.ndarray, expanded: np.ndarray) -> List[PopulationMember]:
        offspring1, offspring2 = self.ops.crossover(parent1, parent2)
        mutated1 = self.ops.mutate(offspring1)
        mutated2 = self.ops.mutate(offspring2)
        first = self._member(parent1, expanded)
        second = self._member(parent2, expanded)
        better = first if first.makespan <= second.makespan else second
        return [
            better,
            self._member(offspring1, expanded),
            self._member(offspring2, expanded),
            self._member(mutated1, expanded),
            self._member(mutated2, expanded),
        ]

    def run_ga(
        self,
        expanded: np.ndarray,
        cds: Dict[int, CDSResult],
        max_generations: int = 5,
        target_makespan: int = 20,
        progress_cb: Optional[Callable[[int, int], None]] = None,
    ) -> GAResult:
        n = int(expanded.shape[0])
        if n < 2:
            raise InsufficientJobsForGA(n)
        if max_generations < 1:
            raise ValueError("max_generations must be at least 1")

        seeds = best_candidates(cds, count=2)
        # with two machines there is a single CDS candidate; it seeds both parents
        parent1 = seed_indices(seeds[0].sequence, expanded)
        parent2 = seed_indices(seeds[-1].sequence, expanded)
        self._log("seeded", k=[s.k for s in seeds], makespans=[int(s.makespan) for s in seeds])

        best_makespan: Optional[int] = None
        best_sequence: List[int] = []
        best_generation = 0
        history: List[GenerationRecord] = []
        generation = 1

        while (best_makespan is None or best_makespan > target_makespan) and generation <= max_generations:
            population = self._next_generation(parent1, parent2, expanded)
            # min() keeps the first of equal members
            current_best = min(population, key=lambda m: m.makespan)

            if best_makespan is None or current_best.makespan < best_makespan:
                best_makespan = current_best.makespan
                best_sequence = list(current_best.sequence)
                best_generation = generation
                self._log("improve", generation=int(generation), best=int(best_makespan))

            # TODO: once a best exists the fallback to this generation's own best is unreachable; confirm intent
            history.append(GenerationRecord(
                generation=generation,
                sequence=list(best_sequence) if best_sequence else list(current_best.sequence),
                makespan=best_makespan if best_sequence else current_best.makespan,
                population=population,
            ))
            self._log("generation", generation=int(generation), best=int(best_makespan),
                      population=[int(m.makespan) for m in population])
            if progress_cb: progress_cb(generation, int(best_makespan))

            ranked = sorted(population, key=lambda m: m.makespan)
            parent1 = np.asarray(ranked[0].indices, dtype=np.int64)
            parent2 = np.asarray(ranked[1].indices, dtype=np.int64)
            generation += 1

        if best_makespan is not None and best_makespan <= target_makespan:
            self._log("target_reached", generation=int(best_generation), best=int(best_makespan))

        return GAResult(
            best_sequence=best_sequence,
            best_makespan=int(best_makespan),
            best_generation=best_generation,
            history=history,
        )

    def run(
        self,
        job_quantities: Sequence[int],
        max_generations: int = 5,
        target_makespan: int = 20,
        progress_cb: Optional[Callable[[int, int], None]] = None,
    ) -> OptimizationResult:
        expanded = expand_jobs(job_quantities)
        self._log("start", operators=self.ops.label, n=int(expanded.size),
                  max_generations=int(max_generations), target=int(target_makespan))

        cds = run_cds(expanded, self.p_times)
        for k, res in cds.items():
            self._log("cds_candidate", k=int(k), makespan=int(res.makespan))

        ga = self.run_ga(expanded, cds, max_generations=max_generations,
                         target_makespan=target_makespan, progress_cb=progress_cb)
        self._log("end", best=int(ga.best_makespan), best_generation=int(ga.best_generation),
                  generations=len(ga.history))
        return OptimizationResult(cds=cds, ga=ga, processing_matrix=self.p_times.tolist())


def optimize(
    p_times,
    params: OptimizationParams,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    logger: Optional[Callable[[Dict[str, Any]], None]] = None,
    progress_cb: Optional[Callable[[int, int], None]] = None,
) -> OptimizationResult:
    """Run CDS and the genetic refinement for one parameter set."""
    solver = CDSGeneticAlgorithm(
        p_times,
        crossover=params.crossover_method,
        mutation=params.mutation_method,
        mutation_rate=params.mutation_rate,
        logger=logger,
        seed=seed,
        rng=rng,
    )
    return solver.run(
        params.job_quantities,
        max_generations=params.max_generations,
        target_makespan=params.target_makespan,
        progress_cb=progress_cb,
    )
