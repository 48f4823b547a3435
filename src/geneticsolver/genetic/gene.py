import math

import numpy as np

from geneticsolver.config import InvalidConfiguration, MutationStrategy


def _flip_random_bit(value: float, rng: np.random.Generator) -> float:
    """Flip one uniformly chosen bit of the float64 pattern of ``value``."""
    bits = np.array([value], dtype=np.float64).view(np.uint64)
    mask = np.uint64(1 << int(rng.integers(64)))
    flipped = float((bits ^ mask).view(np.float64)[0])
    # An exponent of all ones encodes inf/NaN; such a flip is discarded
    if not math.isfinite(flipped):
        return value
    return flipped


class Gene:
    """
    A scalar value bounded to ``[low, high]``.

    The bounds invariant holds after construction and after every mutation.
    """
    __slots__ = ("value", "low", "high")

    def __init__(self, low: float, high: float, rng: np.random.Generator = None, value: float = None):
        if not (math.isfinite(low) and math.isfinite(high)):
            raise InvalidConfiguration(f"Gene bounds must be finite, got [{low}, {high}]")
        if low >= high:
            raise InvalidConfiguration(f"Gene bounds need low < high, got [{low}, {high}]")
        self.low = float(low)
        self.high = float(high)

        if value is None:
            rng = rng if rng is not None else np.random.default_rng()
            value = rng.uniform(self.low, self.high)
        self.value = min(max(float(value), self.low), self.high)

    def __repr__(self):
        return f"Gene(value={self.value!r}, low={self.low}, high={self.high})"

    def copy(self) -> "Gene":
        clone = Gene.__new__(Gene)
        clone.value, clone.low, clone.high = self.value, self.low, self.high
        return clone

    def mutate(
        self,
        rng: np.random.Generator,
        probability: float = 0.5,
        scale: float = 0.001,
        strategy: MutationStrategy = MutationStrategy.PERTURB
    ):
        """
        Mutate in place with probability ``probability``.

        PERTURB moves the value by a uniform amount of up to ``scale`` times
        the range, in a random direction. BIT_FLIP flips one bit of the value's
        float64 representation. Either way the result is clipped to the bounds.
        """
        if rng.random() < probability:
            if strategy == MutationStrategy.BIT_FLIP:
                self.value = _flip_random_bit(self.value, rng)
            else:
                magnitude = rng.uniform(0.0, abs(self.high - self.low) * scale)
                sign = 1.0 if rng.integers(2) else -1.0
                self.value += sign * magnitude

        # Clip to min/max
        if self.value > self.high:
            self.value = self.high
        if self.value < self.low:
            self.value = self.low

    def swap_value(self, other: "Gene"):
        # WARNING: does not check that the bounds match
        self.value, other.value = other.value, self.value
