from datetime import datetime, timezone

import numpy as np
import pytest

from covid_dashboard.builder import SnapshotBuilder
from covid_dashboard.config import DashboardConfig


class FixedVariate:
    """
    Deterministic VariateSource: every draw sits at `fraction` of its range.

    fraction=0.5 makes all noise terms zero.
    """

    def __init__(self, fraction=0.5):
        self.fraction = fraction

    def _fill(self, value, size):
        if size is None:
            return value
        return np.full(size, value)

    def uniform(self, low, high, size=None):
        return self._fill(low + self.fraction * (high - low), size)

    def integers(self, low, high, size=None):
        return self._fill(int(low + np.floor(self.fraction * (high - low))), size)

    def bounded_noise(self, bound, size=None):
        return np.floor(self.uniform(-bound, bound, size)).astype(np.int64)

    def gaussian_noise(self, scale, bound, size=None):
        return self._fill(0.0, size)


FIXED_NOW = datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_variate():
    return FixedVariate(0.5)


@pytest.fixture
def variate_factory():
    return FixedVariate


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def config():
    return DashboardConfig(refresh_interval=0.01)


@pytest.fixture
def builder(config, fixed_variate, fixed_clock):
    return SnapshotBuilder(config, variate=fixed_variate, clock=fixed_clock)


@pytest.fixture
def snapshot(builder):
    return builder.build()
