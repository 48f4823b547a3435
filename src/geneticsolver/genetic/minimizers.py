import numpy as np
from functools import partial
from typing import Annotated
from geneticsolver.utils import Interval
from geneticsolver.genetic.problems import run_problem


def minimize(
    problem: str,
    population_size: Annotated[int, Interval(low=100, high=1000, step=100, log=False)] = None,
    elite_fraction: Annotated[float, Interval(low=0.05, high=0.5, step=0.05, log=False)] = 0.1,
    crossover_fraction: Annotated[float, Interval(low=0.0, high=0.5, step=0.05, log=False)] = 0.1,
    mutation_probability: Annotated[float, Interval(low=0.1, high=1.0, step=0.1, log=False)] = 0.5,
    threshold: float = None,
    patience: int = 1,
    max_generations: int = 10_000,
    seed: int = None
) -> np.ndarray:
    """
    Genetic algorithm on a registered problem.

    Parameters
    ----------
    problem : str
        Key of ``PROBLEMS``.
    population_size : int, optional
        Individuals per generation; the problem default when None.
    elite_fraction : float
        Share of the ranked population that breeds most of the next one.
    crossover_fraction : float
        Crossover pairs per generation as a fraction of the population.
    mutation_probability : float
        Probability of mutating each gene.
    threshold : float, optional
        Convergence threshold; the problem default when None.
    patience : int
        Consecutive converged generations needed to stop.
    max_generations : int
        Generation cap.
    seed : int, optional
        RNG seed for reproducibility.

    Returns
    -------
    np.ndarray
        Best-found gene values.
    """
    result = run_problem(
        problem,
        population_size=population_size,
        elite_fraction=elite_fraction,
        crossover_fraction=crossover_fraction,
        mutation_probability=mutation_probability,
        convergence_threshold=threshold,
        patience=patience,
        max_generations=max_generations,
        seed=seed
    )
    return result.best_genes


minimize_linear = partial(minimize, "linear")
minimize_sinusoidal = partial(minimize, "sinusoidal")
minimize_linear_bitflip = partial(minimize, "linear_bitflip")

MINIMIZERS = {
    "minimize_linear": minimize_linear,
    "minimize_sinusoidal": minimize_sinusoidal,
    "minimize_linear_bitflip": minimize_linear_bitflip,
}
