# scripts/run_experiments.py
from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import replace
from pathlib import Path

# make src importable
THIS_FILE = Path(__file__).resolve()
ROOT = THIS_FILE.parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pandas as pd
from cdsga.instance import (
    attach_quantities, default_instance, load_quantities, read_instances, read_raw_instance,
)
from cdsga.algo_cds_ga import optimize
from cdsga.design import describe_design
from cdsga.params import OptimizationParams, validate_params
from cdsga.reporting import add_improvement_column, cds_table, summarise_by_instance

def run_single(instance_name: str, p_times, params: OptimizationParams, seed: int,
               trace_dir: Path | None, result_dir: Path):
    # optional trace writer
    logger = None
    if trace_dir is not None:
        trace_dir.mkdir(parents=True, exist_ok=True)
        label = f"{params.crossover_method}-{params.mutation_method}"
        trace_path = trace_dir / f"trace_{instance_name}_{label}_seed{seed}.jsonl"
        f = trace_path.open("w", encoding="utf-8")
        def _logger(ev: dict):
            f.write(json.dumps(ev) + "\n"); f.flush()
        logger = _logger

    t0 = time.time()
    try:
        res = optimize(p_times, params, seed=seed, logger=logger)
    finally:
        if logger:
            f.close()
    elapsed = time.time() - t0

    result_dir.mkdir(parents=True, exist_ok=True)
    out = result_dir / f"{instance_name}_{params.crossover_method}-{params.mutation_method}_seed{seed}.json"
    with open(out, "w") as fh:
        json.dump({"params": params.to_dict(), "seed": seed, **res.to_dict()}, fh, indent=2)

    best_cds = res.best_cds
    return {
        "instance": instance_name,
        "crossover": params.crossover_method,
        "mutation": params.mutation_method,
        "operators": f"{params.crossover_method}+{params.mutation_method}",
        "seed": seed,
        "cds_k": best_cds.k,
        "cds_makespan": best_cds.makespan,
        "makespan": res.ga.best_makespan,
        "best_generation": res.ga.best_generation,
        "generations": len(res.ga.history),
        "elapsed": elapsed,
    }, res

def main():
    p = argparse.ArgumentParser()
    # data
    p.add_argument("--xlsx", type=str, default="", help="Workbook with one J x M matrix per sheet")
    p.add_argument("--raw", type=str, default="", help="Single raw text instance (overrides --xlsx)")
    p.add_argument("--quantities-csv", type=str, default="", help="CSV with columns instance,job,quantity")
    p.add_argument("--instances", type=str, default="", help="Comma-separated sheet names to run (subset)")
    p.add_argument("--list-instances", action="store_true")
    # operators + runtime
    p.add_argument("--crossovers", type=str, default="pmx,ox")
    p.add_argument("--mutations", type=str, default="inversion,swap")
    p.add_argument("--seeds", type=str, default="0,1,2,3,4")
    p.add_argument("--outdir", type=str, default="results")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--trace", action="store_true", help="write JSONL event traces into OUTDIR/traces/")
    p.add_argument("--describe", action="store_true", help="print the operator designs and exit")
    # algorithm parameters
    p.add_argument("--quantities", type=str, default="1,1,1,1,1", help="Order quantity per job type")
    p.add_argument("--mutation-rate", type=float, default=0.5)
    p.add_argument("--max-generations", type=int, default=5)
    p.add_argument("--target-makespan", type=int, default=20)

    args = p.parse_args()
    crossovers = [x.strip().lower() for x in args.crossovers.split(",") if x.strip()]
    mutations = [x.strip().lower() for x in args.mutations.split(",") if x.strip()]

    if args.describe:
        for key in crossovers + mutations:
            print(describe_design(key)); print()
        return

    if args.list_instances:
        if not args.xlsx:
            print("Sheets: default (built-in matrix)")
            return
        xl = pd.ExcelFile(args.xlsx, engine="openpyxl")
        print("Sheets:", ", ".join(xl.sheet_names))
        print(f"Total: {len(xl.sheet_names)}")
        return

    outdir = Path(args.outdir); outdir.mkdir(parents=True, exist_ok=True)
    trace_dir = (outdir / "traces") if args.trace else None
    result_dir = outdir / "results"

    if args.raw:
        inst = read_raw_instance(args.raw)
        insts = {inst.name: inst}
    elif args.xlsx:
        if args.verbose:
            print("[*] Loading instances (verbose)…")
        insts = read_instances(args.xlsx, verbose=args.verbose)
    else:
        inst = default_instance()
        insts = {inst.name: inst}

    if args.quantities_csv:
        attach_quantities(insts, load_quantities(args.quantities_csv))

    if args.instances.strip():
        wanted = {s.strip() for s in args.instances.split(",")}
        insts = {k: v for k, v in insts.items() if k in wanted}
        if args.verbose:
            print(f"[*] Subset selected: {', '.join(insts.keys())}")

    seeds = [int(x) for x in args.seeds.split(",") if x.strip()]
    base = OptimizationParams(
        job_quantities=tuple(int(x) for x in args.quantities.split(",") if x.strip()),
        mutation_rate=args.mutation_rate,
        max_generations=args.max_generations,
        target_makespan=args.target_makespan,
    )

    rows = []
    cds_tables = []
    for name, inst in insts.items():
        last = None
        inst_params = base.with_quantities(inst.quantities) if inst.quantities is not None else base
        for cx in crossovers:
            for mut in mutations:
                params = replace(inst_params, crossover_method=cx, mutation_method=mut)
                validate_params(params, n_job_types=inst.n_jobs)
                for sd in seeds:
                    if args.verbose:
                        print(f"-> {name} | {cx}+{mut} | seed={sd} "
                              f"(max_generations={params.max_generations}, target={params.target_makespan})")
                    r, res = run_single(name, inst.p_times, params, sd,
                                        trace_dir=trace_dir, result_dir=result_dir)
                    rows.append(r); last = res
                    print(f"{name} | {cx}+{mut} | seed={sd} -> {r['makespan']} "
                          f"(cds {r['cds_makespan']}, gen {r['best_generation']}) in {r['elapsed']:.3f}s")
        # CDS is deterministic per instance, so any run's table will do
        if last is not None:
            cds_df = cds_table(last)
            cds_df.insert(0, "instance", name)
            cds_tables.append(cds_df)

    df = pd.DataFrame(rows)
    df.to_csv(outdir / "raw.csv", index=False)
    if cds_tables:
        pd.concat(cds_tables, ignore_index=True).to_csv(outdir / "cds.csv", index=False)

    df = add_improvement_column(df)
    df.to_csv(outdir / "raw_with_improvement.csv", index=False)

    summ = summarise_by_instance(df)
    summ.to_csv(outdir / "summary_by_instance.csv", index=False)

    overall = df.groupby("operators").agg(
        makespan_mean=("makespan", "mean"),
        elapsed_mean=("elapsed", "mean"),
        best_generation_mean=("best_generation", "mean"),
    )
    overall.to_csv(outdir / "overall.csv")

    meta = {
        "args": vars(args),
        "n_instances": len(insts),
        "crossovers": crossovers,
        "mutations": mutations,
        "seeds": seeds,
        "params": base.to_dict(),
        "trace": bool(args.trace),
    }
    with open(outdir / "meta.json", "w") as f:
        json.dump(meta, f, indent=2)

if __name__ == "__main__":
    main()
