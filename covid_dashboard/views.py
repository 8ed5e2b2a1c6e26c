from dataclasses import asdict
from enum import Enum

import pandas as pd

TABLE_LIMIT = 10
OVERVIEW_WINDOW = 30

# Display-only figures, not computed from the snapshot
MODEL_ACCURACY = {
    "ARIMA Model": 92.3,
    "Prophet Model": 89.7,
    "LSTM Neural Network": 94.1,
}
FORECAST_OUTLOOK = {
    "expected_daily_cases": 1247,
    "confidence_interval": 156,
}


class Tab(str, Enum):
    OVERVIEW = "overview"
    TRENDS = "trends"
    COUNTRIES = "countries"
    PREDICTIONS = "predictions"


# ============================================================================
# SLICING
# ============================================================================

def recent_series(snapshot, n):
    """Last `n` weekly points, oldest first."""
    if n < 0:
        raise ValueError(f"window must be non-negative, got {n}")
    if n == 0:
        return ()
    return tuple(snapshot.series[-n:])


def tab_series(snapshot, tab, overview_window=OVERVIEW_WINDOW):
    """
    Series window shown by each tab
    overview -> last `overview_window` points, trends -> everything retained
    """
    tab = Tab(tab)
    if tab is Tab.OVERVIEW:
        return recent_series(snapshot, overview_window)
    if tab is Tab.TRENDS:
        return tuple(snapshot.series)
    return ()


def filter_countries(snapshot, selected=None, limit=TABLE_LIMIT):
    """All countries when nothing is selected, else the exact-name match; capped at `limit`."""
    rows = snapshot.countries
    if selected:
        rows = [row for row in rows if row.country == selected]
    return tuple(rows[:limit])


def country_names(snapshot):
    return [row.country for row in snapshot.countries]


# ============================================================================
# FORMATTING
# ============================================================================

def format_count(n):
    """Thousands-grouped digits, e.g. 704234567 -> '704,234,567'."""
    if n < 0:
        raise ValueError(f"count must be non-negative, got {n}")
    return f"{int(n):,}"


def format_change(change):
    if change > 0:
        return f"+{int(change):,}"
    return f"{int(change):,}"


def change_direction(change):
    return "increase" if change > 0 else "decrease"


# ============================================================================
# FRAMES FOR CHARTS AND TABLES
# ============================================================================

def series_frame(points):
    frame = pd.DataFrame([asdict(p) for p in points], columns=["date", "cases", "deaths", "recovered"])
    frame["date"] = pd.to_datetime(frame["date"])
    return frame


def countries_frame(records):
    return pd.DataFrame(
        [asdict(r) for r in records],
        columns=["country", "cases", "deaths", "recovered", "vaccination_rate"],
    )


def forecast_frame(points):
    frame = pd.DataFrame([asdict(p) for p in points], columns=["date", "predicted", "confidence"])
    frame["date"] = pd.to_datetime(frame["date"])
    return frame
