import math
import numbers
from dataclasses import dataclass, fields, replace
from enum import Enum


class InvalidConfiguration(ValueError):
    """Raised at setup time when a run cannot be configured as requested."""


class MutationStrategy(str, Enum):
    # Bounded uniform perturbation of the value
    PERTURB = "perturb"
    # Flip one bit of the float64 pattern of the value
    BIT_FLIP = "bit_flip"


def _is_whole(value: float) -> bool:
    return math.isclose(value, round(value), rel_tol=0.0, abs_tol=1e-9)


@dataclass(frozen=True)
class GAConfig:
    """
    Parameters of one genetic algorithm run.

    Parameters
    ----------
    population_size : int
        Number of individuals per generation.
    elite_fraction : float
        Share of the ranked population treated as the elite. The next
        generation draws ``1 - elite_fraction`` of its slots from the elite
        and ``elite_fraction`` from the remainder.
    crossover_fraction : float
        Number of crossover pairs per generation, as a fraction of the
        population size.
    mutation_probability : float
        Probability that a gene mutates in a given generation.
    mutation_scale : float
        Largest perturbation, as a fraction of the gene's range.
    convergence_threshold : float
        Largest change of the best result still counted as converged.
    patience : int
        Consecutive converged generations required before stopping.
    max_generations : int
        Hard cap on evaluated generations.
    mutation_strategy : MutationStrategy
        How genes mutate.
    seed : int, optional
        RNG seed for reproducibility.
    """
    population_size: int = 100
    elite_fraction: float = 0.1
    crossover_fraction: float = 0.1
    mutation_probability: float = 0.5
    mutation_scale: float = 0.001
    convergence_threshold: float = 1e-4
    patience: int = 1
    max_generations: int = 10_000
    mutation_strategy: MutationStrategy = MutationStrategy.PERTURB
    seed: int | None = None

    def __post_init__(self):
        try:
            strategy = MutationStrategy(self.mutation_strategy)
        except ValueError:
            choices = ", ".join(s.value for s in MutationStrategy)
            raise InvalidConfiguration(
                f"Unknown mutation strategy {self.mutation_strategy!r}; expected one of {choices}") from None
        object.__setattr__(self, "mutation_strategy", strategy)
        self.validate()

    @property
    def n_elite(self) -> int:
        return round(self.population_size * self.elite_fraction)

    @property
    def n_crossover_pairs(self) -> int:
        return round(self.population_size * self.crossover_fraction)

    def validate(self):
        if not isinstance(self.population_size, numbers.Integral) or self.population_size < 2:
            raise InvalidConfiguration(f"population_size must be an integer >= 2, got {self.population_size!r}")

        if not 0.0 < self.elite_fraction < 1.0:
            raise InvalidConfiguration(f"elite_fraction must lie in (0, 1), got {self.elite_fraction}")
        if not _is_whole(self.population_size * self.elite_fraction) or not 0 < self.n_elite < self.population_size:
            raise InvalidConfiguration(
                f"population_size {self.population_size} cannot be split with elite_fraction "
                f"{self.elite_fraction}; the elite must be a whole number of individuals")

        if not 0.0 <= self.crossover_fraction <= 0.5:
            raise InvalidConfiguration(f"crossover_fraction must lie in [0, 0.5], got {self.crossover_fraction}")
        if not _is_whole(self.population_size * self.crossover_fraction):
            raise InvalidConfiguration(
                f"crossover_fraction {self.crossover_fraction} does not give a whole number of pairs "
                f"for population_size {self.population_size}")

        if not 0.0 <= self.mutation_probability <= 1.0:
            raise InvalidConfiguration(f"mutation_probability must lie in [0, 1], got {self.mutation_probability}")
        if not math.isfinite(self.mutation_scale) or self.mutation_scale <= 0:
            raise InvalidConfiguration(f"mutation_scale must be positive, got {self.mutation_scale}")

        if not math.isfinite(self.convergence_threshold) or self.convergence_threshold < 0:
            raise InvalidConfiguration(
                f"convergence_threshold must be a non-negative number, got {self.convergence_threshold}")
        if self.patience < 1:
            raise InvalidConfiguration(f"patience must be at least 1, got {self.patience}")
        if self.max_generations < 1:
            raise InvalidConfiguration(f"max_generations must be at least 1, got {self.max_generations}")

    def replace(self, **changes) -> "GAConfig":
        """Return a validated copy with ``changes`` applied; ``None`` values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration options: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
