"""
Test suite for the tunable minimizers in the geneticsolver package.
"""

from geneticsolver.genetic import MINIMIZERS, PROBLEMS
from geneticsolver.utils import check_optimizer_annotations, check_optimizer_function, tunable_parameters


def test_all_minimizers():
    """Every minimizer is tunable and returns an in-bounds, finite solution."""
    minimizer_errors = []

    for minimizer_name, minimizer in MINIMIZERS.items():
        objective_name = PROBLEMS[minimizer_name.removeprefix('minimize_')].objective
        try:
            check_optimizer_annotations(minimizer)
            check_optimizer_function(minimizer, objective_name)
        except Exception as e:
            minimizer_errors.append((minimizer_name, str(e)))

    assert not minimizer_errors, f"Errors in minimizers: {minimizer_errors}"


def test_minimizer_names_match_problems():
    assert set(MINIMIZERS) == {f"minimize_{name}" for name in PROBLEMS}


def test_tunable_parameters():
    tunable = tunable_parameters(MINIMIZERS['minimize_linear'])
    assert set(tunable) == {'population_size', 'elite_fraction', 'crossover_fraction', 'mutation_probability'}
    base_type, interval = tunable['population_size']
    assert base_type is int
    assert interval.low == 100 and interval.high == 1000
