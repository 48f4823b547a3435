from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from geneticsolver.config import GAConfig, MutationStrategy
from geneticsolver.genetic.evolution import Evolution, ProgressRecord, RunResult
from geneticsolver.genetic.individual import Individual, SingleVariableIndividual, TwoVariableIndividual


@dataclass(frozen=True)
class Problem:
    name: str
    description: str
    objective: str
    individual_type: type[Individual]
    population_size: int
    threshold: float
    crossover: bool = False
    mutation_strategy: MutationStrategy = MutationStrategy.PERTURB

    def make_config(self, **options) -> GAConfig:
        """Problem defaults overridden by any non-None ``options``."""
        defaults = GAConfig(
            population_size=self.population_size,
            convergence_threshold=self.threshold,
            mutation_strategy=self.mutation_strategy,
        )
        return defaults.replace(**options)

    def evolution(self, rng: Optional[np.random.Generator] = None, **options) -> Evolution:
        return Evolution(
            self.individual_type,
            self.make_config(**options),
            crossover=self.crossover,
            rng=rng
        )


PROBLEMS = {
    "linear": Problem(
        name="linear",
        description="f(x) = x",
        objective="f",
        individual_type=SingleVariableIndividual,
        population_size=100,
        threshold=1e-4,
    ),
    "sinusoidal": Problem(
        name="sinusoidal",
        description="g(x, y) = 1 + y^2 - x - 0.1 * sin(3 * pi * x)",
        objective="g",
        individual_type=TwoVariableIndividual,
        population_size=1000,
        threshold=1e-4,
        crossover=True,
    ),
    "linear_bitflip": Problem(
        name="linear_bitflip",
        description="f(x) = x, bit-flip mutation",
        objective="f",
        individual_type=SingleVariableIndividual,
        population_size=100,
        threshold=1e-6,
        mutation_strategy=MutationStrategy.BIT_FLIP,
    ),
}


def get_problem(name: str) -> Problem:
    try:
        return PROBLEMS[name]
    except KeyError:
        raise KeyError(f"Unknown problem {name!r}; available: {sorted(PROBLEMS)}") from None


def run_problem(
    name: str,
    callback: Optional[Callable[[ProgressRecord], None]] = None,
    rng: Optional[np.random.Generator] = None,
    **options
) -> RunResult:
    """
    Run a registered problem to convergence.

    ``options`` are GAConfig fields; ``None`` values keep the problem default.
    """
    return get_problem(name).evolution(rng=rng, **options).run(callback=callback)


def run_single_variable(
    population_size: int = 100,
    threshold: float = 1e-4,
    callback: Optional[Callable[[ProgressRecord], None]] = None,
    rng: Optional[np.random.Generator] = None,
    **options
) -> tuple[float, float, int]:
    """Minimise f(x) = x. Returns (best value, best x, generations)."""
    result = run_problem(
        "linear",
        callback=callback,
        rng=rng,
        population_size=population_size,
        convergence_threshold=threshold,
        **options
    )
    best_x, = result.best_genes
    return result.best_value, float(best_x), result.generations


def run_two_variable(
    population_size: int = 1000,
    threshold: float = 1e-4,
    callback: Optional[Callable[[ProgressRecord], None]] = None,
    rng: Optional[np.random.Generator] = None,
    **options
) -> tuple[float, float, float, int]:
    """Minimise g(x, y). Returns (best value, best x, best y, generations)."""
    result = run_problem(
        "sinusoidal",
        callback=callback,
        rng=rng,
        population_size=population_size,
        convergence_threshold=threshold,
        **options
    )
    best_x, best_y = result.best_genes
    return result.best_value, float(best_x), float(best_y), result.generations
