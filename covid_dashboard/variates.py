from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class VariateSource(Protocol):
    """
    Bounded random values consumed by the generators.

    Every method accepts an optional numpy `size`; without it a scalar is
    returned, with it an ndarray of that shape.
    """

    def uniform(self, low, high, size=None): ...

    def integers(self, low, high, size=None): ...

    def bounded_noise(self, bound, size=None): ...

    def gaussian_noise(self, scale, bound, size=None): ...


class RandomVariate:
    """numpy-backed VariateSource. Pass a seed for reproducible snapshots."""

    def __init__(self, seed=None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low, high, size=None):
        """Floats in [low, high)."""
        return self._rng.uniform(low, high, size)

    def integers(self, low, high, size=None):
        """Integers in [low, high)."""
        return self._rng.integers(low, high, size=size)

    def bounded_noise(self, bound, size=None):
        """
        Integer jitter in [-bound, bound)
        noise = floor(uniform(-bound, bound))
        """
        return np.floor(self.uniform(-bound, bound, size)).astype(np.int64)

    def gaussian_noise(self, scale, bound, size=None):
        """Normal(0, scale) samples clipped to [-bound, bound]."""
        return np.clip(self._rng.normal(0.0, scale, size), -bound, bound)

    def __repr__(self):
        return f"RandomVariate(seed={self.seed!r})"
