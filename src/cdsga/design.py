# src/cdsga/design.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping, Sequence

@dataclass(frozen=True)
class OperatorDesign:
    key: str
    identifier: str
    kind: str  # "crossover" | "mutation"
    objective: str
    cut_points: str
    notes: Sequence[str] = field(default_factory=tuple)

DESIGNS: Mapping[str, OperatorDesign] = {
    "pmx": OperatorDesign(
        key="pmx",
        identifier="Partially Mapped Crossover (PMX)",
        kind="crossover",
        objective="Exchange a middle window between parents and remap clashing indices through the exchanged pairs.",
        cut_points="Window [1, 3) for N > 4; one-point splice at N // 2 for 2 <= N <= 4; copies for N <= 1.",
        notes=("Small-N splices are repaired so children stay permutations.",),
    ),
    "ox": OperatorDesign(
        key="ox",
        identifier="Order Crossover (OX)",
        kind="crossover",
        objective="Keep a window from one parent and fill the rest in the other parent's circular order.",
        cut_points="Window [1, max(1, N // 2)); copies for N <= 2.",
        notes=("Fill scan bounded by 2N reads; leftover slots take the first unused source values.",),
    ),
    "inversion": OperatorDesign(
        key="inversion",
        identifier="Inversion mutation",
        kind="mutation",
        objective="Reverse a fixed window with probability equal to the mutation rate.",
        cut_points="Window [1, 3); no-op when N < 3.",
    ),
    "swap": OperatorDesign(
        key="swap",
        identifier="Swap mutation",
        kind="mutation",
        objective="Exchange two fixed positions with probability equal to the mutation rate.",
        cut_points="Positions 1 and min(3, N - 1); no-op when N < 2.",
    ),
}

def get_design(key: str) -> OperatorDesign:
    k = key.lower()
    if k not in DESIGNS:
        raise KeyError(f"Unknown operator '{key}'. Available: {', '.join(sorted(DESIGNS))}")
    return DESIGNS[k]

def describe_design(key: str) -> str:
    d = get_design(key)
    lines = [f"{d.identifier} ({d.key}, {d.kind})", d.objective, f"Cut points: {d.cut_points}"]
    if d.notes:
        lines.append("Notes:")
        for t in d.notes:
            lines.append(f"  - {t}")
    return "\n".join(lines)
