from datetime import datetime, timedelta

import numpy as np

from covid_dashboard.config import CountryConfig, ForecastConfig, TimeSeriesConfig
from covid_dashboard.models import CountryRecord, ForecastPoint, GlobalSnapshot, TimeSeriesPoint
from covid_dashboard.variates import RandomVariate


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


# ============================================================================
# GLOBAL SUMMARY
# ============================================================================

class GlobalSummaryGenerator:
    """Illustrative worldwide totals; no live source is queried."""

    TOTALS = GlobalSnapshot(
        total_cases=704_234_567,
        total_deaths=6_967_456,
        total_recovered=675_234_123,
        active_cases=22_032_988,
        critical_cases=45_678,
        today_cases=12_543,
        today_deaths=234,
    )

    def generate(self):
        return self.TOTALS


# ============================================================================
# WEEKLY HISTORY
# ============================================================================

class TimeSeriesGenerator:

    def __init__(self, config=None, variate=None):
        self.config = config or TimeSeriesConfig()
        self.variate = variate or RandomVariate()

    def trend(self, weeks):
        """
        Noise-free weekly case curve
        cases_w = floor(base * e^(growth_rate * w) * (1 + amplitude * sin(w * freq)))
        """
        cfg = self.config
        weeks = np.asarray(weeks, dtype=float)
        growth = cfg.base * np.exp(cfg.growth_rate * weeks)
        season = 1 + cfg.seasonal_amplitude * np.sin(weeks * cfg.seasonal_freq)
        return np.floor(growth * season)

    def generate(self, epoch, now):
        """
        One sample per 7-day step from `epoch` through `now`, keeping the
        most recent `window` samples. An inverted range or a
        non-positive window yields ().
        """
        epoch, now = _as_date(epoch), _as_date(now)
        cfg = self.config
        if now < epoch or cfg.window <= 0:
            return ()

        n_weeks = (now - epoch).days // 7 + 1
        weeks = np.arange(n_weeks)

        cases = self.trend(weeks)
        deaths = np.floor(cases * cfg.death_rate)
        recovered = np.floor(cases * cfg.recovery_rate)

        cases = np.maximum(0, cases + self.variate.bounded_noise(cfg.case_noise, n_weeks))
        deaths = np.maximum(0, deaths + self.variate.bounded_noise(cfg.death_noise, n_weeks))
        recovered = np.maximum(0, recovered + self.variate.bounded_noise(cfg.recovered_noise, n_weeks))

        points = [
            TimeSeriesPoint(
                date=epoch + timedelta(weeks=int(w)),
                cases=int(cases[w]),
                deaths=int(deaths[w]),
                recovered=int(recovered[w]),
            )
            for w in weeks
        ]
        return tuple(points[-cfg.window:])


# ============================================================================
# COUNTRY TABLE
# ============================================================================

class CountryStatsGenerator:
    """
    Independent draws per column; deaths and recovered are not derived from
    cases, so a row may report more recoveries than cases.
    """

    def __init__(self, config=None, variate=None):
        self.config = config or CountryConfig()
        self.variate = variate or RandomVariate()

    def generate(self, countries):
        countries = list(countries)
        n = len(countries)
        cfg = self.config
        draw = self.variate.integers

        cases = draw(*cfg.cases, size=n)
        deaths = draw(*cfg.deaths, size=n)
        recovered = draw(*cfg.recovered, size=n)
        vaccination = draw(*cfg.vaccination_rate, size=n)

        return tuple(
            CountryRecord(
                country=name,
                cases=int(cases[i]),
                deaths=int(deaths[i]),
                recovered=int(recovered[i]),
                vaccination_rate=int(vaccination[i]),
            )
            for i, name in enumerate(countries)
        )


# ============================================================================
# 30-DAY FORECAST
# ============================================================================

class ForecastGenerator:

    def __init__(self, config=None, variate=None):
        self.config = config or ForecastConfig()
        self.variate = variate or RandomVariate()

    def generate(self, today):
        """
        Daily points for today+1 .. today+horizon
        predicted_i = max(0, floor(baseline + amplitude * sin(i * freq) + noise))
        confidence_i in [80, 99]
        """
        today = _as_date(today)
        cfg = self.config
        offsets = np.arange(1, cfg.horizon + 1)

        noise = self.variate.uniform(-cfg.noise, cfg.noise, cfg.horizon)
        trend = cfg.baseline + cfg.amplitude * np.sin(offsets * cfg.freq) + noise
        predicted = np.maximum(0, np.floor(trend))
        confidence = self.variate.integers(*cfg.confidence, size=cfg.horizon)

        return tuple(
            ForecastPoint(
                date=today + timedelta(days=int(i)),
                predicted=int(predicted[k]),
                confidence=int(confidence[k]),
            )
            for k, i in enumerate(offsets)
        )
