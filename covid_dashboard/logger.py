import json
import logging
import pathlib
from datetime import datetime, timezone
from functools import lru_cache
from logging import Logger

DEFAULT_LOGGING = {
    "level": "INFO",
    "debug": {"enabled": False, "modules": []},
    "handlers": {"console": {"enabled": True}},
    "format": {"json": True, "timestamp_utc": True}
}


def _load_logging_config():
    config_path = pathlib.Path(__file__).resolve().parents[1] / "configs" / "logging.json"
    if config_path.exists():
        with open(config_path, "r") as f:
            return json.load(f)
    return DEFAULT_LOGGING


_LOG_CFG = _load_logging_config()
DEBUG_ENABLED = _LOG_CFG.get("debug", {}).get("enabled", False)
DEBUG_MODULES = set(_LOG_CFG.get("debug", {}).get("modules", []))
GLOBAL_LEVEL = getattr(logging, _LOG_CFG.get("level", "INFO").upper(), logging.INFO)
CONSOLE_ENABLED = _LOG_CFG.get("handlers", {}).get("console", {}).get("enabled", True)
FORMAT_CFG = _LOG_CFG.get("format", {})


class ContextFilter(logging.Filter):
    """Guarantees record.context always exists."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = None
        return True


def _timestamp(record, utc):
    tz = timezone.utc if utc else None
    return datetime.fromtimestamp(record.created, tz=tz).isoformat()


class JsonFormatter(logging.Formatter):
    """One JSON object per record; dates and other values go through str()."""

    def __init__(self, utc=True):
        super().__init__()
        self.utc = utc

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": _timestamp(record, self.utc),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        if getattr(record, "context", None):
            payload["context"] = record.context

        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Single line `ts LEVEL module msg key=value ...` for terminals."""

    def __init__(self, utc=True):
        super().__init__()
        self.utc = utc

    def format(self, record: logging.LogRecord) -> str:
        line = f"{_timestamp(record, self.utc)} {record.levelname} {record.name} {record.getMessage()}"
        context = getattr(record, "context", None)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def build_formatter(format_cfg=None):
    format_cfg = FORMAT_CFG if format_cfg is None else format_cfg
    utc = format_cfg.get("timestamp_utc", True)
    if format_cfg.get("json", True):
        return JsonFormatter(utc=utc)
    return TextFormatter(utc=utc)


@lru_cache(None)
def get_logger(name: str = "covid_dashboard") -> Logger:
    logger = logging.getLogger(name)
    logger.setLevel(GLOBAL_LEVEL)

    if logger.handlers or not CONSOLE_ENABLED:
        return logger

    handler = logging.StreamHandler()
    handler.addFilter(ContextFilter())
    handler.setFormatter(build_formatter())

    logger.addHandler(handler)
    return logger


def log_debug(logger: Logger, msg: str, **context):
    module_name = logger.name.split(".")[-1]
    if not DEBUG_ENABLED:
        return
    if DEBUG_MODULES and (module_name not in DEBUG_MODULES):
        return
    logger.debug(msg, extra={"context": context})


def log_info(logger: Logger, msg: str, **context):
    logger.info(msg, extra={"context": context})


def log_error(logger: Logger, msg: str, **context):
    logger.error(msg, extra={"context": context})
