import json
import os
import pathlib
from dataclasses import dataclass, field, fields, replace
from datetime import date

CONFIG_DIR = pathlib.Path(__file__).resolve().parents[1] / "configs"
CONFIG_ENV = "COVID_DASHBOARD_CONFIG"

DEFAULT_COUNTRIES = (
    'United States', 'India', 'Brazil', 'Russia', 'France',
    'Turkey', 'Iran', 'Germany', 'Italy', 'United Kingdom',
    'China', 'Ukraine', 'Poland', 'South Africa', 'Netherlands',
)


class ConfigError(ValueError):
    """Raised when a dashboard configuration file cannot be applied."""


# ============================================================================
# GENERATOR SETTINGS
# ============================================================================

@dataclass(frozen=True)
class TimeSeriesConfig:
    """
    Weekly history model
    cases = floor(base * e^(growth_rate * w) * (1 + seasonal_amplitude * sin(w * seasonal_freq)))
    """
    base: float = 1000.0
    growth_rate: float = 0.05
    seasonal_amplitude: float = 0.3
    seasonal_freq: float = 0.2
    death_rate: float = 0.02
    recovery_rate: float = 0.95
    case_noise: int = 500
    death_noise: int = 25
    recovered_noise: int = 500
    window: int = 52


@dataclass(frozen=True)
class CountryConfig:
    # [low, high) bounds per column
    cases: tuple = (1_000_000, 51_000_000)
    deaths: tuple = (10_000, 510_000)
    recovered: tuple = (900_000, 45_900_000)
    vaccination_rate: tuple = (20, 100)


@dataclass(frozen=True)
class ForecastConfig:
    """
    Daily projection
    predicted = max(0, floor(baseline + amplitude * sin(i * freq) + noise))
    """
    horizon: int = 30
    baseline: float = 1000.0
    amplitude: float = 50.0
    freq: float = 0.2
    noise: int = 100
    confidence: tuple = (80, 100)


# ============================================================================
# DASHBOARD SETTINGS
# ============================================================================

@dataclass(frozen=True)
class DashboardConfig:
    epoch: date = date(2020, 1, 1)
    refresh_interval: float = 300.0
    countries: tuple = DEFAULT_COUNTRIES
    table_limit: int = 10
    overview_window: int = 30
    seed: object = None
    time_series: TimeSeriesConfig = field(default_factory=TimeSeriesConfig)
    country_stats: CountryConfig = field(default_factory=CountryConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)


_SECTIONS = {
    "time_series": TimeSeriesConfig,
    "country_stats": CountryConfig,
    "forecast": ForecastConfig,
}


# Counts and windows that must be at least 1
_POSITIVE = {"refresh_interval", "table_limit", "overview_window", "window", "horizon"}
# Curve shape parameters that may legitimately go negative
_SIGNED = {"growth_rate", "seasonal_amplitude", "seasonal_freq", "amplitude", "freq"}


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_countries(value, name):
    if not isinstance(value, list) or not all(isinstance(c, str) and c for c in value):
        raise ConfigError(f"{name} must be a list of country names")
    if len(set(value)) != len(value):
        raise ConfigError("country names must be unique")
    return tuple(value)


def _is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _check_range(value, name):
    if not isinstance(value, list) or len(value) != 2 or not all(_is_integer(v) for v in value):
        raise ConfigError(f"{name} must be a [low, high] pair of integers")
    low, high = value
    if low >= high:
        raise ConfigError(f"{name} low must be below high, got {value}")
    return (low, high)


def _check_scalar(value, default, key, name):
    if key == "seed":
        if value is not None and (not _is_integer(value) or value < 0):
            raise ConfigError(f"{name} must be null or a non-negative integer")
        return value

    if isinstance(default, int) and not _is_integer(value):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if not _is_number(value):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if key in _POSITIVE and value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    if key not in _SIGNED and value < 0:
        raise ConfigError(f"{name} must be non-negative, got {value}")
    return value


def _apply(base, overrides, where):
    known = {f.name for f in fields(base)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"unknown {where} keys: {', '.join(unknown)}")

    values = {}
    for key, value in overrides.items():
        name = f"{where}.{key}"
        default = getattr(base, key)
        if key in _SECTIONS:
            if not isinstance(value, dict):
                raise ConfigError(f"{name} must be an object")
            value = _apply(default, value, name)
        elif key == "epoch":
            try:
                value = date.fromisoformat(value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"invalid epoch {value!r}") from exc
        elif key == "countries":
            value = _check_countries(value, name)
        elif isinstance(default, tuple):
            value = _check_range(value, name)
        else:
            value = _check_scalar(value, default, key, name)
        values[key] = value
    return replace(base, **values)


def load_config(path=None):
    """
    Build a DashboardConfig from JSON overrides.

    Lookup order: explicit path, $COVID_DASHBOARD_CONFIG, configs/dashboard.json.
    A missing default file yields the built-in defaults; a missing explicit
    file is an error.
    """
    explicit = path is not None or CONFIG_ENV in os.environ
    if path is None:
        path = os.environ.get(CONFIG_ENV) or CONFIG_DIR / "dashboard.json"
    config_path = pathlib.Path(path)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {config_path}")
        return DashboardConfig()

    try:
        with open(config_path, "r") as f:
            overrides = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"malformed config {config_path}: {exc}") from exc

    if not isinstance(overrides, dict):
        raise ConfigError(f"config root must be an object: {config_path}")
    return _apply(DashboardConfig(), overrides, "dashboard")
