"""
Generational loop of the genetic algorithm.

Each generation is evaluated, ranked (lower result is fitter), resampled with a
bias towards the elite, optionally recombined, mutated, and finally checked for
convergence against the previous generation's best result.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

import numpy as np

from geneticsolver.config import GAConfig
from geneticsolver.genetic.individual import Individual
from geneticsolver.genetic.population import Population

logger = logging.getLogger(__name__)


@dataclass
class ProgressRecord:
    generation: int
    best_value: float
    change: float
    mean_value: float


@dataclass
class RunResult:
    best_value: float
    best_genes: np.ndarray
    generations: int
    converged: bool
    history: list[ProgressRecord] = field(default_factory=list)


def select_survivors(population: Population, n_elite: int, rng: np.random.Generator) -> Population:
    """
    Resample a ranked population into the next generation.

    ``len(population) - n_elite`` slots are copies of uniformly drawn members of
    the elite (indices ``[0, n_elite)``), the other ``n_elite`` slots are copies
    of uniformly drawn members of the rest. Draws are with replacement.
    """
    size = len(population)
    from_elite = rng.integers(0, n_elite, size=size - n_elite)
    from_rest = rng.integers(n_elite, size, size=n_elite)
    return Population(population[int(i)].copy() for i in np.concatenate([from_elite, from_rest]))


def recombine(population: Population, n_pairs: int, rng: np.random.Generator) -> Population:
    """Cross over ``n_pairs`` disjoint, randomly chosen pairs, replacing them in place."""
    order = rng.permutation(len(population))
    for a, b in order[:2 * n_pairs].reshape(-1, 2):
        population[a], population[b] = population[a].crossover(population[b], rng)
    return population


class Evolution:
    """
    Driver for one run.

    Parameters
    ----------
    individual_factory : Callable[[np.random.Generator], Individual]
        Builds a fresh random individual.
    config : GAConfig
        Run parameters.
    crossover : bool
        Whether the recombination step runs; individuals must implement
        ``crossover``.
    rng : np.random.Generator, optional
        Random source for the whole run. Defaults to one seeded from
        ``config.seed``.
    """

    def __init__(
        self,
        individual_factory: Callable[[np.random.Generator], Individual],
        config: GAConfig,
        crossover: bool = False,
        rng: Optional[np.random.Generator] = None
    ):
        self.individual_factory = individual_factory
        self.config = config
        self.crossover = crossover
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        self.population: Optional[Population] = None
        self.generation = 0
        self.previous_best = np.inf
        self.change = np.inf
        self.best: Optional[Individual] = None
        self.converged = False

    def initialize(self):
        self.population = Population.random(self.individual_factory, self.config.population_size, self.rng)
        self.generation = 0
        self.previous_best = np.inf
        self.change = np.inf
        self.best = None
        self.converged = False

    def step(self) -> ProgressRecord:
        """Run one generation and return its record."""
        cfg = self.config
        self.generation += 1

        self.population.evaluate()
        self.population.rank()
        # Snapshot, so that mutating the next generation cannot alter it
        self.best = self.population.best.copy()
        mean_value = float(self.population.results().mean())

        self.population = select_survivors(self.population, cfg.n_elite, self.rng)
        if self.crossover and cfg.n_crossover_pairs:
            recombine(self.population, cfg.n_crossover_pairs, self.rng)
        self.population.mutate(
            self.rng,
            probability=cfg.mutation_probability,
            scale=cfg.mutation_scale,
            strategy=cfg.mutation_strategy
        )

        self.change = abs(self.previous_best - self.best.result)
        self.previous_best = self.best.result
        return ProgressRecord(
            generation=self.generation,
            best_value=self.best.result,
            change=self.change,
            mean_value=mean_value
        )

    def generations(self) -> Iterator[ProgressRecord]:
        """
        Run until convergence, yielding one record per evaluated generation.

        The run stops once the best result changed by at most
        ``convergence_threshold`` for ``patience`` consecutive generations, or
        after ``max_generations`` generations.
        """
        cfg = self.config
        self.initialize()
        calm_generations = 0

        while True:
            record = self.step()
            yield record

            if self.change <= cfg.convergence_threshold:
                calm_generations += 1
            else:
                calm_generations = 0

            if calm_generations >= cfg.patience:
                self.converged = True
                logger.info("Converged after %d generations, best result %.6g", self.generation, self.best.result)
                return
            if self.generation >= cfg.max_generations:
                logger.warning(
                    "Stopped at the generation cap (%d) without converging; last change %.3g",
                    cfg.max_generations, self.change)
                return

    def run(self, callback: Optional[Callable[[ProgressRecord], None]] = None) -> RunResult:
        history = []
        for record in self.generations():
            history.append(record)
            if callback is not None:
                callback(record)

        return RunResult(
            best_value=self.best.result,
            best_genes=np.array(self.best.values),
            generations=self.generation,
            converged=self.converged,
            history=history
        )
