import pandas as pd
import pytest

from cdsga.algo_cds_ga import optimize
from cdsga.params import OptimizationParams
from cdsga.reporting import (
    add_improvement_column,
    cds_table,
    format_sequence,
    history_table,
    population_table,
    summarise_by_instance,
)


@pytest.fixture
def result(default_inst):
    params = OptimizationParams(job_quantities=(1, 2, 1, 1, 1), max_generations=3, target_makespan=1)
    return optimize(default_inst.p_times, params, seed=5)


def test_format_sequence():
    assert format_sequence([3, 1, 2]) == "3 1 2"
    assert format_sequence([1, 2, 3, 4, 5, 6], limit=5) == "1 2 3 4 5 ..."


def test_cds_table_sorted_with_best_flag(result):
    df = cds_table(result)
    assert len(df) == 9
    assert df["makespan"].is_monotonic_increasing
    assert df["best"].tolist() == [True] + [False] * 8
    assert df.loc[0, "k"] == result.best_cds.k


def test_history_and_population_tables(result):
    hist = history_table(result)
    assert hist["generation"].tolist() == [1, 2, 3]
    assert hist["makespan"].iloc[-1] == result.ga.best_makespan
    pop = population_table(result, limit=5)
    assert len(pop) == 15
    assert pop["member"].tolist()[:5] == [1, 2, 3, 4, 5]


def test_add_improvement_column():
    df = pd.DataFrame({"cds_makespan": [20, 10], "makespan": [15, 10]})
    out = add_improvement_column(df)
    assert "improvement" not in df.columns
    assert out.loc[0, "improvement"] == pytest.approx(25.0)
    assert out.loc[1, "improvement"] == pytest.approx(0.0)


def test_add_improvement_column_requires_columns():
    with pytest.raises(ValueError):
        add_improvement_column(pd.DataFrame({"makespan": [1]}))


def test_summarise_by_instance():
    df = pd.DataFrame({
        "operators": ["pmx+swap"] * 2 + ["ox+swap"] * 2,
        "instance": ["a"] * 4,
        "makespan": [10, 12, 11, 11],
        "cds_makespan": [13, 13, 13, 13],
        "elapsed": [0.1, 0.2, 0.1, 0.1],
    })
    summ = summarise_by_instance(add_improvement_column(df))
    assert set(summ.columns) >= {"operators", "instance", "makespan_mean", "makespan_min", "improvement_mean"}
    row = summ[summ["operators"] == "pmx+swap"].iloc[0]
    assert row["makespan_mean"] == pytest.approx(11.0)
    assert row["makespan_min"] == 10


def test_summarise_requires_columns():
    with pytest.raises(ValueError):
        summarise_by_instance(pd.DataFrame({"instance": ["a"]}))
