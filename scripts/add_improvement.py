#!/usr/bin/env python3
"""Augment a results CSV with the GA-over-CDS improvement percentage."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from cdsga.reporting import add_improvement_column


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Add GA vs. CDS improvement values to an experiment CSV"
    )
    parser.add_argument("--results", type=str, required=True, help="Input results CSV")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional output path (defaults to overwriting the input file)",
    )
    args = parser.parse_args()

    df = pd.read_csv(args.results)
    enriched = add_improvement_column(df)
    output_path = Path(args.output) if args.output else Path(args.results)
    enriched.to_csv(output_path, index=False)
    print(f"Wrote enriched results to {output_path}")


if __name__ == "__main__":
    main()
