# src/cdsga/cds.py
"""Campbell-Dudek-Smith construction for the permutation flow shop.

Each partition ``k`` collapses the ``M`` machines into two virtual machines
(the first ``k`` and the last ``k`` machines) and orders the occurrences with
Johnson's two-machine rule.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple
import numpy as np

from .operators import makespan


@dataclass(frozen=True)
class CDSResult:
    k: int
    sequence: List[int]        # 1-based job-type values
    makespan: int
    virtual_time_1: List[int]
    virtual_time_2: List[int]

    def to_dict(self) -> dict:
        return {
            "sequence": list(self.sequence),
            "makespan": int(self.makespan),
            "virtualTime1": list(self.virtual_time_1),
            "virtualTime2": list(self.virtual_time_2),
        }


def virtual_times(expanded: np.ndarray, p_times: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
    rows = p_times[expanded]
    return rows[:, :k].sum(axis=1), rows[:, -k:].sum(axis=1)


def johnson_order(vt1: Sequence[int], vt2: Sequence[int]) -> List[int]:
    """Generalized Johnson ordering over occurrence indices.

    Ties go to virtual machine 1 before 2, then to the lower occurrence index.
    """
    n = len(vt1)
    placed = [False] * n
    zero: List[int] = []
    for i in range(n):
        if vt1[i] == 0 and vt2[i] == 0:
            zero.append(i)
            placed[i] = True
    left: List[int] = []
    right: List[int] = []
    remaining = n - len(zero)
    while remaining > 0:
        min_time = None
        min_job = -1
        min_machine = 0
        for i in range(n):
            if placed[i]:
                continue
            if min_time is None or vt1[i] < min_time:
                min_time, min_job, min_machine = vt1[i], i, 1
            if vt2[i] < min_time:
                min_time, min_job, min_machine = vt2[i], i, 2
        if min_machine == 1:
            left.append(min_job)
        else:
            right.append(min_job)
        placed[min_job] = True
        remaining -= 1
    return zero + left + right[::-1]


def run_cds(expanded: np.ndarray, p_times: np.ndarray) -> Dict[int, CDSResult]:
    """One candidate per partition ``k = 1 .. M-1``, keyed by ``k``."""
    results: Dict[int, CDSResult] = {}
    for k in range(1, p_times.shape[1]):
        vt1, vt2 = virtual_times(expanded, p_times, k)
        order = johnson_order(vt1.tolist(), vt2.tolist())
        job_types = expanded[np.asarray(order, dtype=np.int64)]
        results[k] = CDSResult(
            k=k,
            sequence=[int(j) + 1 for j in job_types],
            makespan=makespan(job_types, p_times),
            virtual_time_1=[int(v) for v in vt1],
            virtual_time_2=[int(v) for v in vt2],
        )
    return results


def best_candidates(results: Dict[int, CDSResult], count: int = 2) -> List[CDSResult]:
    # sorted() is stable, so equal makespans keep ascending k
    return sorted(results.values(), key=lambda r: r.makespan)[:count]
