from operator import attrgetter
from typing import Callable, Iterable

import numpy as np

from geneticsolver.config import MutationStrategy
from geneticsolver.genetic.individual import Individual


class Population:
    """Ordered individuals of one generation. Index 0 is the best only right after ``rank``."""

    def __init__(self, individuals: Iterable[Individual]):
        self.individuals = list(individuals)

    @classmethod
    def random(cls, factory: Callable[[np.random.Generator], Individual], size: int, rng: np.random.Generator):
        return cls(factory(rng) for _ in range(size))

    def __len__(self):
        return len(self.individuals)

    def __iter__(self):
        return iter(self.individuals)

    def __getitem__(self, index):
        return self.individuals[index]

    def __setitem__(self, index, individual):
        self.individuals[index] = individual

    @property
    def best(self) -> Individual:
        return self.individuals[0]

    def evaluate(self):
        for individual in self.individuals:
            individual.update_result()

    def rank(self):
        # list.sort is stable, so ties keep their relative order
        self.individuals.sort(key=attrgetter("result"))

    def is_ranked(self) -> bool:
        return bool(np.all(np.diff(self.results()) >= 0))

    def results(self) -> np.ndarray:
        return np.array([individual.result for individual in self.individuals], dtype=float)

    def mutate(
        self,
        rng: np.random.Generator,
        probability: float = 0.5,
        scale: float = 0.001,
        strategy: MutationStrategy = MutationStrategy.PERTURB
    ):
        for individual in self.individuals:
            individual.mutate(rng, probability=probability, scale=scale, strategy=strategy)
