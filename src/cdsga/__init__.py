"""Permutation flow-shop scheduling with CDS and a small genetic algorithm.

This package contains modules for reading flow-shop instances, expanding
order quantities into job occurrences, building Campbell-Dudek-Smith
sequences, refining them with crossover/mutation operators and reporting
the results as pandas tables.
"""

from .design import DESIGNS, describe_design, get_design
from .instance import (
    DEFAULT_PROCESSING_TIMES,
    Instance,
    NoJobsSelected,
    attach_quantities,
    default_instance,
    expand_jobs,
    load_quantities,
    read_instances,
    read_raw_instance,
)
from .operators import makespan, ox_crossover, pmx_crossover, inversion_mutation, swap_mutation
from .cds import CDSResult, johnson_order, run_cds, virtual_times
from .mechanisms import CROSSOVERS, MUTATIONS, GeneticOperators, available_operators, build_operators
from .params import OptimizationParams, validate_params
from .algo_cds_ga import (
    CDSGeneticAlgorithm,
    GAResult,
    GenerationRecord,
    InsufficientJobsForGA,
    OptimizationResult,
    PopulationMember,
    optimize,
)
from .runner import run_experiments
from .reporting import add_improvement_column, cds_table, history_table, population_table, summarise_by_instance

__all__ = [
    "DESIGNS",
    "describe_design",
    "get_design",
    "DEFAULT_PROCESSING_TIMES",
    "Instance",
    "NoJobsSelected",
    "attach_quantities",
    "default_instance",
    "expand_jobs",
    "load_quantities",
    "read_instances",
    "read_raw_instance",
    "makespan",
    "pmx_crossover",
    "ox_crossover",
    "inversion_mutation",
    "swap_mutation",
    "CDSResult",
    "johnson_order",
    "run_cds",
    "virtual_times",
    "CROSSOVERS",
    "MUTATIONS",
    "GeneticOperators",
    "available_operators",
    "build_operators",
    "OptimizationParams",
    "validate_params",
    "CDSGeneticAlgorithm",
    "GAResult",
    "GenerationRecord",
    "InsufficientJobsForGA",
    "OptimizationResult",
    "PopulationMember",
    "optimize",
    "run_experiments",
    "add_improvement_column",
    "cds_table",
    "history_table",
    "population_table",
    "summarise_by_instance",
]
