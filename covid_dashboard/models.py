from dataclasses import asdict, dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class GlobalSnapshot:
    """
    Worldwide headline totals.

    totalRecovered + activeCases <= totalCases is expected but not enforced.
    """
    total_cases: int
    total_deaths: int
    total_recovered: int
    active_cases: int
    critical_cases: int
    today_cases: int
    today_deaths: int


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: date
    cases: int
    deaths: int
    recovered: int


@dataclass(frozen=True)
class CountryRecord:
    country: str
    cases: int
    deaths: int
    recovered: int
    vaccination_rate: int


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    predicted: int
    confidence: int


@dataclass(frozen=True)
class Snapshot:
    """
    Everything one generation cycle produced.

    Sequences are tuples so a published snapshot can be shared between
    readers without copying.
    """
    global_stats: GlobalSnapshot
    series: tuple
    countries: tuple
    forecast: tuple
    generated_at: datetime

    def to_dict(self):
        """Plain python structure with ISO formatted dates."""
        payload = asdict(self)
        payload["generated_at"] = self.generated_at.isoformat()
        for key in ("series", "forecast"):
            for row in payload[key]:
                row["date"] = row["date"].isoformat()
        return payload


class NotReady:
    """Returned by the scheduler before the first snapshot is published."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_READY"


NOT_READY = NotReady()
