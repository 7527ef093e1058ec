"""Reporting helpers for CDS + GA optimization results."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from .algo_cds_ga import OptimizationResult


def format_sequence(sequence: Sequence[int], limit: int | None = None) -> str:
    """Render a job sequence as ``"3 1 2"``; ``limit`` truncates with ``...``."""

    shown = [str(int(j)) for j in sequence]
    if limit is not None and len(shown) > limit:
        return " ".join(shown[:limit] + ["..."])
    return " ".join(shown)


def cds_table(result: OptimizationResult) -> pd.DataFrame:
    """One row per CDS partition, best first.

    Rows with equal makespan keep ascending ``k``; the first row is flagged
    in the ``best`` column.
    """

    rows = [
        {
            "k": r.k,
            "makespan": r.makespan,
            "sequence": format_sequence(r.sequence),
            "virtual_time_1": format_sequence(r.virtual_time_1),
            "virtual_time_2": format_sequence(r.virtual_time_2),
        }
        for r in result.cds.values()
    ]
    df = pd.DataFrame(rows).sort_values("makespan", kind="mergesort").reset_index(drop=True)
    df["best"] = df.index == 0
    return df


def history_table(result: OptimizationResult) -> pd.DataFrame:
    rows = [
        {
            "generation": h.generation,
            "makespan": h.makespan,
            "sequence": format_sequence(h.sequence),
            "population_best": min(m.makespan for m in h.population),
        }
        for h in result.ga.history
    ]
    return pd.DataFrame(rows, columns=["generation", "makespan", "sequence", "population_best"])


def population_table(result: OptimizationResult, limit: int | None = None) -> pd.DataFrame:
    """Every population member of every generation (members numbered from 1)."""

    rows = [
        {
            "generation": h.generation,
            "member": idx,
            "makespan": m.makespan,
            "sequence": format_sequence(m.sequence, limit=limit),
        }
        for h in result.ga.history
        for idx, m in enumerate(h.population, start=1)
    ]
    return pd.DataFrame(rows, columns=["generation", "member", "makespan", "sequence"])


def add_improvement_column(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of *df* with an ``improvement`` column.

    ``improvement`` is the percentage by which the GA makespan undercuts the
    best CDS makespan (negative when the GA ends up worse).

    Parameters
    ----------
    df:
        DataFrame with at least ``cds_makespan`` and ``makespan`` columns.
    """

    for col in ("cds_makespan", "makespan"):
        if col not in df.columns:
            raise ValueError(f"Input DataFrame must contain a '{col}' column")

    result = df.copy()
    result["improvement"] = pd.NA
    mask = result["cds_makespan"].notna() & (result["cds_makespan"].astype(float) > 0)
    result.loc[mask, "improvement"] = (
        (result.loc[mask, "cds_makespan"].astype(float) - result.loc[mask, "makespan"])
        / result.loc[mask, "cds_makespan"].astype(float)
        * 100.0
    )
    return result


def summarise_by_instance(df: pd.DataFrame) -> pd.DataFrame:
    """Compute summary statistics grouped by operator pair and instance."""

    required = {"instance", "makespan", "elapsed", "operators"}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    group_cols = ["operators", "instance"]
    agg_dict: dict[str, object] = {
        "makespan": ["mean", "min", "std"],
        "elapsed": "mean",
    }
    if "cds_makespan" in df.columns:
        agg_dict["cds_makespan"] = "min"
    if "best_generation" in df.columns:
        agg_dict["best_generation"] = "mean"
    if "improvement" in df.columns:
        agg_dict["improvement"] = "mean"
    work = df.copy()
    if "improvement" in work.columns:
        work["improvement"] = pd.to_numeric(work["improvement"], errors="coerce")
    grouped = work.groupby(group_cols, as_index=False).agg(agg_dict)
    # Flatten MultiIndex columns produced by aggregation
    grouped.columns = [
        "_".join(filter(None, map(str, col))).rstrip("_") for col in grouped.columns.values
    ]
    return grouped
