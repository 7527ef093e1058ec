import numpy as np
import pytest

from cdsga.operators import (
    inversion_mutation,
    makespan,
    occurrence_makespan,
    ox_crossover,
    ox_fill,
    pmx_crossover,
    swap_mutation,
    to_display,
    UNSET,
)


def _is_perm(seq, n):
    return sorted(int(v) for v in seq) == list(range(n))


# ---------- makespan ----------
def test_makespan_two_machine_tie(two_by_two):
    assert makespan([0, 1], two_by_two) == 4
    assert makespan([1, 0], two_by_two) == 4


def test_makespan_hand_computed():
    p = np.array([[3, 2], [1, 4]])
    assert makespan([0, 1], p) == 9
    assert makespan([1, 0], p) == 7
    assert makespan([0], p) == 5


def test_makespan_empty_sequence_is_zero(two_by_two):
    assert makespan([], two_by_two) == 0


def test_makespan_pure_and_append_monotone(default_inst, rng):
    p = default_inst.p_times
    for _ in range(20):
        seq = rng.integers(0, p.shape[0], size=int(rng.integers(1, 12))).tolist()
        base = makespan(seq, p)
        assert makespan(seq, p) == base
        for job in range(p.shape[0]):
            assert makespan(seq + [job], p) >= base


def test_occurrence_makespan_and_display():
    expanded = np.array([0, 0, 1])
    p = np.array([[3, 2], [1, 4]])
    assert occurrence_makespan([2, 0, 1], expanded, p) == makespan([1, 0, 0], p)
    assert to_display([2, 0, 1], expanded) == [2, 1, 1]


# ---------- PMX ----------
def test_pmx_window_remaps_clashes():
    c1, c2 = pmx_crossover([0, 1, 2, 3, 4], [4, 3, 2, 1, 0])
    assert c1.tolist() == [0, 3, 2, 1, 4]
    assert c2.tolist() == [4, 1, 2, 3, 0]


def test_pmx_small_splice_kept_when_valid():
    c1, c2 = pmx_crossover([0, 1, 2, 3], [1, 0, 3, 2])
    assert c1.tolist() == [0, 1, 3, 2]
    assert c2.tolist() == [1, 0, 2, 3]


def test_pmx_small_splice_repaired():
    c1, c2 = pmx_crossover([0, 1, 2], [2, 1, 0])
    assert c1.tolist() == [0, 1, 2]
    assert c2.tolist() == [2, 1, 0]


def test_pmx_single_element_copies():
    parent = np.array([0])
    c1, c2 = pmx_crossover(parent, parent)
    assert c1.tolist() == [0] and c2.tolist() == [0]
    c1[0] = 7
    assert parent[0] == 0


@pytest.mark.parametrize("n", range(1, 13))
def test_pmx_children_are_permutations(n, rng):
    for _ in range(25):
        p1, p2 = rng.permutation(n), rng.permutation(n)
        c1, c2 = pmx_crossover(p1, p2)
        assert _is_perm(c1, n) and _is_perm(c2, n)


def test_pmx_identical_parents_reproduce_parent(rng):
    p = rng.permutation(8)
    c1, c2 = pmx_crossover(p, p)
    assert c1.tolist() == p.tolist() and c2.tolist() == p.tolist()


# ---------- OX ----------
def test_ox_wrap_fill():
    c1, c2 = ox_crossover([0, 1, 2, 3, 4, 5], [5, 4, 3, 2, 1, 0])
    assert c1.tolist() == [3, 1, 2, 0, 5, 4]
    assert c2.tolist() == [2, 4, 3, 5, 0, 1]


def test_ox_short_parents_copied():
    c1, c2 = ox_crossover([1, 0], [0, 1])
    assert c1.tolist() == [1, 0] and c2.tolist() == [0, 1]


@pytest.mark.parametrize("n", range(1, 13))
def test_ox_children_are_permutations(n, rng):
    for _ in range(25):
        p1, p2 = rng.permutation(n), rng.permutation(n)
        c1, c2 = ox_crossover(p1, p2)
        assert _is_perm(c1, n) and _is_perm(c2, n)


def test_ox_fill_backstop_completes_permutation():
    child = np.full(5, UNSET, dtype=np.int64)
    child[1] = 3
    ox_fill(child, np.array([0, 1, 2, 3, 4]), start=2, scan_limit=1)
    assert child.tolist() == [0, 3, 2, 1, 4]


# ---------- mutation ----------
def test_inversion_reverses_fixed_window(rng):
    assert inversion_mutation([0, 1, 2, 3, 4], 1.0, rng).tolist() == [0, 2, 1, 3, 4]


def test_inversion_window_must_fit(rng):
    assert inversion_mutation([1, 0], 1.0, rng).tolist() == [1, 0]


def test_swap_fixed_positions(rng):
    assert swap_mutation([0, 1, 2, 3, 4], 1.0, rng).tolist() == [0, 3, 2, 1, 4]
    assert swap_mutation([0, 1, 2], 1.0, rng).tolist() == [0, 2, 1]
    assert swap_mutation([0, 1], 1.0, rng).tolist() == [0, 1]


@pytest.mark.parametrize("mutate", [inversion_mutation, swap_mutation])
def test_failed_draw_returns_unchanged_copy(mutate, rng):
    seq = np.array([4, 2, 0, 1, 3])
    out = mutate(seq, 0.0, rng)
    assert out.tolist() == seq.tolist()
    assert out is not seq


@pytest.mark.parametrize("mutate", [inversion_mutation, swap_mutation])
def test_mutation_preserves_index_set(mutate, rng):
    for n in range(2, 13):
        seq = rng.permutation(n)
        for rate in (0.0, 0.5, 1.0):
            assert _is_perm(mutate(seq, rate, rng), n)
