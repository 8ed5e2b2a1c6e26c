from covid_dashboard.builder import SnapshotBuilder
from covid_dashboard.config import ConfigError, DashboardConfig, load_config
from covid_dashboard.models import (
    NOT_READY,
    CountryRecord,
    ForecastPoint,
    GlobalSnapshot,
    Snapshot,
    TimeSeriesPoint,
)
from covid_dashboard.scheduler import RefreshHandle, SnapshotScheduler
from covid_dashboard.variates import RandomVariate, VariateSource

__all__ = [
    "NOT_READY",
    "ConfigError",
    "CountryRecord",
    "DashboardConfig",
    "ForecastPoint",
    "GlobalSnapshot",
    "RandomVariate",
    "RefreshHandle",
    "Snapshot",
    "SnapshotBuilder",
    "SnapshotScheduler",
    "TimeSeriesPoint",
    "VariateSource",
    "load_config",
]
