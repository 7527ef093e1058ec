# src/cdsga/operators.py
from __future__ import annotations
from typing import Dict, Optional, Sequence, Tuple
import numpy as np

# Fixed cut points. These are part of the output contract, not tunables.
PMX_SMALL_N = 4          # up to this size PMX degrades to a one-point splice
PMX_CUT_1, PMX_CUT_2 = 1, 3
OX_CUT_1 = 1
INVERSION_CUT_1, INVERSION_CUT_2 = 1, 3
SWAP_INDEX_1, SWAP_INDEX_2 = 1, 3
UNSET = -1


# ---------- Core PFSP makespan ----------
def makespan(order: Sequence[int], p_times: np.ndarray) -> int:
    """Completion time of the last job on the last machine.

    ``order`` holds 0-based job-type values, ``p_times`` is (job types, machines).
    """
    order = np.asarray(order, dtype=np.int64)
    n = order.shape[0]
    if n == 0:
        return 0
    m = p_times.shape[1]
    C = np.zeros((n, m), dtype=np.int64)
    # first job
    C[0, 0] = p_times[order[0], 0]
    for j in range(1, m):
        C[0, j] = C[0, j-1] + p_times[order[0], j]
    # jobs 1..n-1
    for i in range(1, n):
        C[i, 0] = C[i-1, 0] + p_times[order[i], 0]
        for j in range(1, m):
            a = C[i-1, j]
            b = C[i, j-1]
            if a > b:
                C[i, j] = a + p_times[order[i], j]
            else:
                C[i, j] = b + p_times[order[i], j]
    return int(C[n-1, m-1])


def occurrence_makespan(indices: Sequence[int], expanded: np.ndarray, p_times: np.ndarray) -> int:
    return makespan(expanded[np.asarray(indices, dtype=np.int64)], p_times)


def to_display(indices: Sequence[int], expanded: np.ndarray) -> list:
    """Occurrence indices -> 1-based job-type values."""
    return [int(expanded[i]) + 1 for i in indices]


# ---------- Crossover ----------
def _repair_splice(child: np.ndarray, cut: int, donor: np.ndarray) -> np.ndarray:
    """Replace repeated values after ``cut`` with the missing ones, in donor order."""
    present = set(int(v) for v in child)
    missing = [int(v) for v in donor if int(v) not in present]
    if not missing:
        return child
    seen = set(int(v) for v in child[:cut])
    k = 0
    for i in range(cut, child.shape[0]):
        v = int(child[i])
        if v in seen:
            child[i] = missing[k]; k += 1
            v = int(child[i])
        seen.add(v)
    return child


def _resolve_mapping(child: np.ndarray, mapping: Dict[int, int]) -> None:
    for i in range(child.shape[0]):
        if PMX_CUT_1 <= i < PMX_CUT_2:
            continue
        current = int(child[i])
        while current in mapping and mapping[current] != current:
            current = mapping[current]
        child[i] = current


def pmx_crossover(parent1: Sequence[int], parent2: Sequence[int]) -> Tuple[np.ndarray, np.ndarray]:
    p1 = np.array(parent1, dtype=np.int64)
    p2 = np.array(parent2, dtype=np.int64)
    size = p1.shape[0]
    if size <= 1:
        return p1, p2
    if size <= PMX_SMALL_N:
        cut = size // 2
        c1 = np.concatenate([p1[:cut], p2[cut:]])
        c2 = np.concatenate([p2[:cut], p1[cut:]])
        return _repair_splice(c1, cut, p2), _repair_splice(c2, cut, p1)

    c1 = p1.copy()
    c2 = p2.copy()
    map1: Dict[int, int] = {}
    map2: Dict[int, int] = {}
    # swap the middle section and remember the exchanged pairs
    for i in range(PMX_CUT_1, PMX_CUT_2):
        a, b = int(p1[i]), int(p2[i])
        c1[i] = b
        c2[i] = a
        map1[b] = a
        map2[a] = b
    _resolve_mapping(c1, map1)
    _resolve_mapping(c2, map2)
    return c1, c2


def ox_fill(child: np.ndarray, source: np.ndarray, start: int, scan_limit: Optional[int] = None) -> np.ndarray:
    """Fill ``UNSET`` slots of ``child`` from ``source`` scanning circularly from ``start``.

    The scan reads at most ``scan_limit`` source values (default ``2 * len(source)``);
    slots left over are filled from the first unused source values in order.
    """
    size = child.shape[0]
    limit = 2 * source.shape[0] if scan_limit is None else int(scan_limit)
    used = set(int(v) for v in child if v != UNSET)
    fill_pos = start % size
    source_pos = start % size
    reads = 0
    while (child == UNSET).any() and reads < limit:
        element = int(source[source_pos])
        if element not in used:
            while child[fill_pos] != UNSET:
                fill_pos = (fill_pos + 1) % size
            child[fill_pos] = element
            used.add(element)
            fill_pos = (fill_pos + 1) % size
        source_pos = (source_pos + 1) % size
        reads += 1
    # backstop
    for i in range(size):
        if child[i] == UNSET:
            for element in source:
                if int(element) not in used:
                    child[i] = element
                    used.add(int(element))
                    break
    return child


def ox_crossover(parent1: Sequence[int], parent2: Sequence[int]) -> Tuple[np.ndarray, np.ndarray]:
    p1 = np.array(parent1, dtype=np.int64)
    p2 = np.array(parent2, dtype=np.int64)
    size = p1.shape[0]
    if size <= 2:
        return p1, p2
    cut1 = OX_CUT_1
    cut2 = max(1, size // 2)
    c1 = np.full(size, UNSET, dtype=np.int64)
    c2 = np.full(size, UNSET, dtype=np.int64)
    c1[cut1:cut2] = p1[cut1:cut2]
    c2[cut1:cut2] = p2[cut1:cut2]
    ox_fill(c1, p2, cut2)
    ox_fill(c2, p1, cut2)
    return c1, c2


# ---------- Mutation ----------
def inversion_mutation(sequence: Sequence[int], rate: float, rng: np.random.Generator) -> np.ndarray:
    mutated = np.array(sequence, dtype=np.int64)
    size = mutated.shape[0]
    if size < 2:
        return mutated
    if rng.random() < rate and INVERSION_CUT_2 <= size:
        mutated[INVERSION_CUT_1:INVERSION_CUT_2] = mutated[INVERSION_CUT_1:INVERSION_CUT_2][::-1].copy()
    return mutated


def swap_mutation(sequence: Sequence[int], rate: float, rng: np.random.Generator) -> np.ndarray:
    mutated = np.array(sequence, dtype=np.int64)
    size = mutated.shape[0]
    if size < 2:
        return mutated
    if rng.random() < rate:
        i, j = SWAP_INDEX_1, min(SWAP_INDEX_2, size - 1)
        mutated[i], mutated[j] = mutated[j], mutated[i]
    return mutated
