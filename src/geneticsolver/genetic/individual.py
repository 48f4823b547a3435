"""
Candidate solutions: a fixed set of bounded genes and the objective they feed.
"""
from typing import Callable

import numpy as np

from geneticsolver.config import MutationStrategy
from geneticsolver.function_generators.objectives import f, g
from geneticsolver.genetic.gene import Gene


class Individual:
    """
    Base class for individuals.

    Subclasses set ``bounds`` (one ``(low, high)`` pair per gene) and
    ``objective`` (called with the gene values in order). ``result`` caches the
    objective value and is only meaningful right after ``update_result``.
    """
    bounds: tuple = ()
    objective: Callable = None

    def __init__(self, rng: np.random.Generator = None, values=None):
        if values is None:
            rng = rng if rng is not None else np.random.default_rng()
            self.genes = tuple(Gene(low, high, rng) for low, high in self.bounds)
        else:
            if len(values) != len(self.bounds):
                raise ValueError(f"{type(self).__name__} takes {len(self.bounds)} values, got {len(values)}")
            self.genes = tuple(Gene(low, high, value=v) for (low, high), v in zip(self.bounds, values))
        self.result = None

    def __repr__(self):
        values = ", ".join(f"{v:.6g}" for v in self.values)
        return f"{type(self).__name__}(values=({values}), result={self.result})"

    @property
    def values(self) -> tuple:
        return tuple(gene.value for gene in self.genes)

    def copy(self):
        clone = self.__class__.__new__(self.__class__)
        clone.genes = tuple(gene.copy() for gene in self.genes)
        clone.result = self.result
        return clone

    def mutate(
        self,
        rng: np.random.Generator,
        probability: float = 0.5,
        scale: float = 0.001,
        strategy: MutationStrategy = MutationStrategy.PERTURB
    ):
        for gene in self.genes:
            gene.mutate(rng, probability=probability, scale=scale, strategy=strategy)

    def update_result(self) -> float:
        """Recalculate result based on current genes."""
        self.result = float(type(self).objective(*self.values))
        return self.result


class SingleVariableIndividual(Individual):
    """Individual minimising f(x) = x."""
    bounds = ((0.0, 1.0),)
    objective = staticmethod(f)

    @property
    def x(self) -> Gene:
        return self.genes[0]


class TwoVariableIndividual(Individual):
    """Individual minimising g(x, y) = 1 + y^2 - x - 0.1 sin(3 pi x)."""
    bounds = ((0.0, 1.0), (-2.0, 2.0))
    objective = staticmethod(g)

    @property
    def x(self) -> Gene:
        return self.genes[0]

    @property
    def y(self) -> Gene:
        return self.genes[1]

    def crossover(
        self,
        other: "TwoVariableIndividual",
        rng: np.random.Generator,
        probability: float = 0.5
    ) -> tuple["TwoVariableIndividual", "TwoVariableIndividual"]:
        """
        Uniform crossover.

        Returns copies of ``self`` and ``other`` in which each gene's value has
        been swapped, independently, with probability ``probability``. Neither
        operand is modified.
        """
        first, second = self.copy(), other.copy()
        for gene_a, gene_b in zip(first.genes, second.genes):
            if rng.random() < probability:
                gene_a.swap_value(gene_b)
        return first, second
