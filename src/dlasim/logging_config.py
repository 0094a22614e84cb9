"""Logging setup for dlasim.

Engine modules log through ``logging.getLogger(__name__)`` and attach the
simulation counters they know about with ``extra=``, e.g.
``extra={"tick": world.tick, "walkers": world.num_walkers}``. Both formatters
surface those counters: JSON as top-level keys, text as a ``(tick=.. walkers=..)``
suffix.

Environment variables:
- LOG_LEVEL: any stdlib level name. Default: INFO
- LOG_FORMAT: 'text' or 'json'. Default: text
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any

# Simulation counters a record may carry, in display order
SIM_FIELDS = ("tick", "walkers", "particles", "lines")


def sim_context(record: logging.LogRecord) -> dict[str, Any]:
    """Simulation counters attached to ``record`` via ``extra=``."""
    return {name: getattr(record, name) for name in SIM_FIELDS if hasattr(record, name)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, simulation counters lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(sim_context(record))
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """``12:00:01 DEBUG    [engine.simulation] Progress (tick=100 walkers=1980)``."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-8s [%(component)s] %(message)s%(counters)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        record.component = record.name.removeprefix("dlasim.")
        context = sim_context(record)
        record.counters = (
            " (" + " ".join(f"{k}={v}" for k, v in context.items()) + ")" if context else ""
        )
        return super().format(record)


def get_log_level() -> int:
    """Read LOG_LEVEL from the environment, falling back to INFO."""
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def get_log_format() -> str:
    """Read LOG_FORMAT from the environment ('text' or 'json')."""
    name = os.environ.get("LOG_FORMAT", "text").lower()
    return name if name in ("text", "json") else "text"


def configure_logging(level: int | None = None, format_type: str | None = None) -> None:
    """Install a single stderr handler on the ``dlasim`` logger.

    Safe to call repeatedly; previous handlers are replaced. uvicorn's access
    log is routed through the same handler so a served run logs in one format.

    Args:
        level: Log level. If None, reads LOG_LEVEL.
        format_type: 'text' or 'json'. If None, reads LOG_FORMAT.
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if format_type == "json" else TextFormatter())

    for name in ("dlasim", "uvicorn.access"):
        target = logging.getLogger(name)
        target.handlers.clear()
        target.addHandler(handler)
        target.setLevel(level)
        target.propagate = False

    logging.getLogger("dlasim").debug(
        "Logging configured: level=%s, format=%s",
        logging.getLevelName(level),
        format_type,
    )
