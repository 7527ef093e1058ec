import pytest

from cdsga.instance import NoJobsSelected
from cdsga.params import DEFAULT_JOB_QUANTITIES, OptimizationParams, validate_params


def test_defaults_match_planning_form():
    params = OptimizationParams()
    assert tuple(params.job_quantities) == DEFAULT_JOB_QUANTITIES == (1, 1, 1, 1, 1)
    assert params.crossover_method == "pmx"
    assert params.mutation_method == "inversion"
    assert params.mutation_rate == 0.5
    assert params.max_generations == 5
    assert params.target_makespan == 20
    validate_params(params, n_job_types=5)


def test_with_quantities_returns_new_params():
    params = OptimizationParams()
    other = params.with_quantities([0, 2])
    assert other.job_quantities == (0, 2)
    assert params.job_quantities == DEFAULT_JOB_QUANTITIES


def test_to_dict_uses_contract_names():
    assert OptimizationParams(job_quantities=(1, 2)).to_dict() == {
        "jobQuantities": [1, 2],
        "crossoverMethod": "pmx",
        "mutationMethod": "inversion",
        "mutationRate": 0.5,
        "maxGenerations": 5,
        "targetMakespan": 20,
    }


@pytest.mark.parametrize(
    "kwargs, error",
    [
        (dict(job_quantities=(0, 0)), NoJobsSelected),
        (dict(job_quantities=(1, -1)), ValueError),
        (dict(job_quantities=(1, 1), target_makespan=0), ValueError),
        (dict(job_quantities=(1, 1), max_generations=0), ValueError),
        (dict(job_quantities=(1, 1), crossover_method="cycle"), KeyError),
        (dict(job_quantities=(1, 1), mutation_method="scramble"), KeyError),
    ],
)
def test_validate_params_rejects(kwargs, error):
    with pytest.raises(error):
        validate_params(OptimizationParams(**kwargs))


def test_validate_params_length_mismatch():
    with pytest.raises(ValueError):
        validate_params(OptimizationParams(job_quantities=(1, 1)), n_job_types=3)
