from datetime import datetime, timezone

from covid_dashboard.config import DashboardConfig
from covid_dashboard.generators import (
    CountryStatsGenerator,
    ForecastGenerator,
    GlobalSummaryGenerator,
    TimeSeriesGenerator,
)
from covid_dashboard.models import Snapshot
from covid_dashboard.variates import RandomVariate


def utc_now():
    return datetime.now(timezone.utc)


class SnapshotBuilder:
    """
    Runs one generation cycle.

    All four generators share a single variate source so a seeded source
    reproduces the whole snapshot.
    """

    def __init__(self, config=None, variate=None, clock=utc_now):
        self.config = config or DashboardConfig()
        self.variate = variate or RandomVariate(self.config.seed)
        self.clock = clock

        self.global_summary = GlobalSummaryGenerator()
        self.time_series = TimeSeriesGenerator(self.config.time_series, self.variate)
        self.country_stats = CountryStatsGenerator(self.config.country_stats, self.variate)
        self.forecast = ForecastGenerator(self.config.forecast, self.variate)

    def build(self):
        now = self.clock()
        return Snapshot(
            global_stats=self.global_summary.generate(),
            series=self.time_series.generate(self.config.epoch, now),
            countries=self.country_stats.generate(self.config.countries),
            forecast=self.forecast.generate(now),
            generated_at=now,
        )
