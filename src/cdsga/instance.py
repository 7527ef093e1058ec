# src/cdsga/instance.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence
import os
import numpy as np
import pandas as pd

# Job types x machines, as shipped with the planning form.
DEFAULT_PROCESSING_TIMES = (
    (1, 1, 1, 1, 1, 1, 2, 1, 1, 1),
    (1, 1, 2, 1, 1, 1, 1, 1, 1, 1),
    (1, 1, 1, 1, 2, 3, 1, 1, 1, 1),
    (1, 1, 1, 2, 3, 3, 3, 2, 1, 1),
    (1, 1, 1, 1, 2, 2, 1, 1, 1, 2),
)


class NoJobsSelected(ValueError):
    """Every order quantity is zero, so there is nothing to schedule."""

    def __init__(self, message: str = "No jobs selected: every order quantity is zero") -> None:
        super().__init__(message)


@dataclass
class Instance:
    name: str
    p_times: np.ndarray  # shape: (job types, machines)
    quantities: Optional[List[int]] = None
    @property
    def n_jobs(self) -> int: return self.p_times.shape[0]
    @property
    def n_machines(self) -> int: return self.p_times.shape[1]


def as_matrix(p_times) -> np.ndarray:
    mat = np.asarray(p_times, dtype=np.int64)
    if mat.ndim != 2 or mat.shape[0] < 1 or mat.shape[1] < 1:
        raise ValueError(f"Processing times must be a non-empty 2-D grid. Got shape {mat.shape}")
    if (mat < 0).any():
        raise ValueError("Processing times must be non-negative")
    return mat


def default_instance() -> Instance:
    return Instance(name="default", p_times=as_matrix(DEFAULT_PROCESSING_TIMES))


def expand_jobs(quantities: Sequence[int]) -> np.ndarray:
    """Repeat each job-type index ``quantities[i]`` times, grouped by type.

    Position in the result is the occurrence index; the value is the job type.
    """
    counts = np.asarray([int(q) for q in quantities], dtype=np.int64)
    expanded = np.repeat(np.arange(counts.size, dtype=np.int64), counts)
    if expanded.size == 0:
        raise NoJobsSelected()
    return expanded


def _looks_like_ints(values: list) -> bool:
    try:
        _ = [int(x) for x in values]
        return True
    except (TypeError, ValueError):
        return False


def _matrix_from_rows(rows: List[List[int]], n: int, m: int, where: str) -> np.ndarray:
    p_times = np.zeros((n, m), dtype=np.int64)
    # Plain JxM matrix
    if all(len(r) == m for r in rows):
        for i in range(n): p_times[i, :] = rows[i]
        return as_matrix(p_times)
    # (machine, time) pairs per job row
    if not all(len(r) == 2*m for r in rows):
        raise ValueError(f"{where} has invalid row lengths. Expected {m} or {2*m} integers per job row.")
    ids = [rows[0][2*j] for j in range(m)]
    one_based = (min(ids) == 1) and (max(ids) == m)
    for i in range(n):
        r = rows[i]
        for j in range(m):
            machine = r[2*j] - 1 if one_based else r[2*j]
            if machine < 0 or machine >= m:
                raise ValueError(f"Invalid machine id {machine} in {where}, job {i}")
            p_times[i, machine] = r[2*j + 1]
    return as_matrix(p_times)


def read_raw_instance(path: str) -> Instance:
    with open(path, "r") as f:
        lines = [line.strip() for line in f if line.strip()]
    if not lines or not _looks_like_ints(lines[0].split()[:2]) or len(lines[0].split()) < 2:
        raise ValueError(f"{path} must start with an integer header 'J M'")
    n, m = map(int, lines[0].split()[:2])
    rows = [list(map(int, ln.split())) for ln in lines[1:1+n]]
    if len(rows) != n:
        raise ValueError(f"{path} declares {n} job rows but has {len(rows)}")
    name = os.path.splitext(os.path.basename(path))[0]
    return Instance(name=name, p_times=_matrix_from_rows(rows, n, m, where=f"file '{path}'"))


def read_instances(xlsx_path: str, verbose: bool = False) -> Dict[str, Instance]:
    # Force engine to openpyxl to avoid ambiguous detection
    xl = pd.ExcelFile(xlsx_path, engine="openpyxl")
    out: Dict[str, Instance] = {}
    total = len(xl.sheet_names)
    for idx, sheet in enumerate(xl.sheet_names, start=1):
        if verbose:
            print(f"[read] {idx}/{total} {sheet}")
        df = xl.parse(sheet, header=None)
        header = [x for x in df.iloc[0].tolist() if pd.notna(x)]
        if len(header) < 2 or not _looks_like_ints(header[:2]):
            raise ValueError(f"Sheet '{sheet}' must start with integer header [J, M]. Got: {header}")
        n = int(header[0]); m = int(header[1])
        body = df.iloc[1:1+n]
        rows = [[int(x) for x in row.tolist() if pd.notna(x)] for _, row in body.iterrows()]
        if len(rows) != n:
            raise ValueError(f"Sheet '{sheet}' declares {n} job rows but has {len(rows)}")
        out[sheet] = Instance(name=sheet, p_times=_matrix_from_rows(rows, n, m, where=f"sheet '{sheet}'"))
    return out


def load_quantities(csv_path: str) -> Dict[str, List[int]]:
    """Read order quantities in long form (``instance,job,quantity``, job 1-based)."""
    df = pd.read_csv(csv_path)
    if not {"instance", "job", "quantity"} <= set(df.columns):
        raise ValueError("quantities.csv must have columns: instance,job,quantity")
    df = df[["instance", "job", "quantity"]].dropna()
    out: Dict[str, List[int]] = {}
    for name, group in df.groupby("instance", sort=False):
        jobs = group["job"].astype(int)
        size = int(jobs.max())
        q = [0] * size
        for job, qty in zip(jobs, group["quantity"].astype(int)):
            if job < 1:
                raise ValueError(f"Job numbers are 1-based. Got {job} for instance '{name}'")
            q[job - 1] = int(qty)
        out[str(name)] = q
    return out


def attach_quantities(instances: Dict[str, Instance], quantities: Mapping[str, Sequence[int]]) -> None:
    for name, q in quantities.items():
        if name in instances:
            inst = instances[name]
            if len(q) > inst.n_jobs:
                raise ValueError(f"Instance '{name}' has {inst.n_jobs} job types but {len(q)} quantities were given")
            inst.quantities = [int(x) for x in q] + [0] * (inst.n_jobs - len(q))
