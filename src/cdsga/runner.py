"""Experiment runner for the CDS + GA optimizer (with convergence logging)."""
from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .instance import Instance
from .algo_cds_ga import CDSGeneticAlgorithm, OptimizationResult
from .mechanisms import get_crossover, get_mutation
from .params import OptimizationParams, validate_params


def run_experiments(
    instances: Dict[str, Instance],
    params: Optional[OptimizationParams] = None,
    runs: int = 3,
    seed: Optional[int] = None,
    # progress logging
    log_progress: bool = False,
    log_dir: Optional[str] = None,
    # stream to terminal
    stream_progress: bool = False,
    quiet: bool = False,
) -> pd.DataFrame:
    """Execute several seeded runs of the optimizer on every instance.

    Instances carrying their own ``quantities`` override
    ``params.job_quantities``. One row is produced per (instance, run).
    """
    params = params or OptimizationParams()
    crossover = get_crossover(params.crossover_method).key
    mutation = get_mutation(params.mutation_method).key
    label = f"{crossover}+{mutation}"
    records: List[dict] = []

    conv_base: Optional[Path] = None
    if log_progress and log_dir:
        conv_base = Path(log_dir) / "convergence" / label
        conv_base.mkdir(parents=True, exist_ok=True)

    for inst_name, inst in instances.items():
        run_params = params.with_quantities(inst.quantities) if inst.quantities is not None else params
        validate_params(run_params, n_job_types=inst.n_jobs)

        for run_idx in range(runs):
            run_seed = seed + run_idx if seed is not None else None
            if not quiet:
                print(f"[{label}] {inst_name} – run {run_idx+1}/{runs}  (seed={run_seed})", flush=True)

            solver = CDSGeneticAlgorithm(
                inst.p_times,
                crossover=crossover,
                mutation=mutation,
                mutation_rate=run_params.mutation_rate,
                seed=run_seed,
            )

            start_time = time.time()
            convergence_rows: List[dict] = []

            def _progress_cb(generation: int, best_val: int) -> None:
                row = {
                    "instance": inst_name,
                    "operators": label,
                    "run": run_idx,
                    "generation": generation,
                    "elapsed": time.time() - start_time,
                    "best_makespan": int(best_val),
                    "seed": run_seed,
                }
                convergence_rows.append(row)
                if stream_progress:
                    print(f"[{label}] {inst_name} run{run_idx} gen{generation} "
                          f"best={best_val} elapsed={row['elapsed']:.3f}s", flush=True)

            result: OptimizationResult = solver.run(
                run_params.job_quantities,
                max_generations=run_params.max_generations,
                target_makespan=run_params.target_makespan,
                progress_cb=_progress_cb,
            )
            elapsed = time.time() - start_time
            best_cds = result.best_cds

            records.append(
                {
                    "instance": inst_name,
                    "crossover": crossover,
                    "mutation": mutation,
                    "operators": label,
                    "mutation_rate": float(run_params.mutation_rate),
                    "run": run_idx,
                    "seed": run_seed,
                    "n_occurrences": int(sum(int(q) for q in run_params.job_quantities)),
                    "cds_k": best_cds.k,
                    "cds_makespan": int(best_cds.makespan),
                    "makespan": int(result.ga.best_makespan),
                    "best_generation": int(result.ga.best_generation),
                    "generations": len(result.ga.history),
                    "target_makespan": int(run_params.target_makespan),
                    "target_reached": bool(result.ga.best_makespan <= run_params.target_makespan),
                    "elapsed": elapsed,
                }
            )

            if log_progress and conv_base is not None and convergence_rows:
                out_path = conv_base / f"{inst_name}_run{run_idx}.csv"
                pd.DataFrame(convergence_rows).to_csv(out_path, index=False)

    return pd.DataFrame.from_records(records)
