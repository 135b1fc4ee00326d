"""Logging helpers: metric context on records and opt-in handler setup.

Library modules log through ``logging.getLogger(__name__)`` and attach the
histogram (and registry group) they act on via :func:`metric_context`. The
package logger only carries a ``NullHandler`` until an application calls
:func:`configure_logging`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

LOGGER_NAME = "histometrics"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s%(metric)s: %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S"

_CONTEXT_FIELDS = ("histogram", "group")


def metric_context(histogram: str | None, group: str | None = None) -> dict[str, Any]:
    """Build the ``extra`` mapping identifying the metric a record is about."""

    return {"histogram": histogram, "group": group}


class MetricContextFilter(logging.Filter):
    """Render ``histogram``/``group`` extras as a ``%(metric)s`` suffix."""

    def filter(self, record: logging.LogRecord) -> bool:
        histogram = getattr(record, "histogram", None)
        group = getattr(record, "group", None)
        if histogram and group:
            record.metric = f" [{group}/{histogram}]"
        elif histogram:
            record.metric = f" [{histogram}]"
        else:
            record.metric = ""
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with metric context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    level: int | str = logging.INFO,
    *,
    use_json: bool = False,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Route package records to ``handler`` (stderr by default).

    Calling it again replaces the handler installed by the previous call.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        if not isinstance(existing, logging.NullHandler):
            existing.close()

    target = handler if handler is not None else logging.StreamHandler()
    target.addFilter(MetricContextFilter())
    target.setFormatter(JsonFormatter() if use_json else logging.Formatter(TEXT_FORMAT, DATEFMT))
    logger.addHandler(target)
    logger.setLevel(level)
    logger.propagate = False
    return logger


logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = [
    "JsonFormatter",
    "LOGGER_NAME",
    "MetricContextFilter",
    "configure_logging",
    "metric_context",
]
