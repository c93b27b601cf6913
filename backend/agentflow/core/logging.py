# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Structured logging for AgentFlow.

Every module logs through `logging.getLogger(__name__)` and attaches context
with `extra=` (or `log_event`). Handlers live only on the package logger,
installed once by `configure_logging`.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, TextIO, Tuple

PACKAGE_LOGGER = "agentflow"

# Attributes present on every LogRecord; anything else arrived via `extra`
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Context fields attached to a record through `extra`"""
    return {
        key: value for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, context fields flattened in"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(record_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with context appended as key=value pairs"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if not fields:
            return line

        context = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        head, sep, tail = line.partition("\n")
        return f"{head} [{context}]{sep}{tail}"


class ExecutionLogger(logging.LoggerAdapter):
    """
    Adapter that stamps every record with the execution it belongs to.

    Per-call `extra` fields are merged over the bound ones instead of
    replacing them.
    """

    def __init__(self, logger: logging.Logger, execution_id: str, agent_id: Optional[str] = None):
        bound = {"execution_id": execution_id}
        if agent_id is not None:
            bound["agent_id"] = agent_id
        super().__init__(logger, bound)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def log_event(logger, event: str, level: str = "INFO", **fields: Any) -> None:
    """Log `event` with `fields` as structured context; accepts loggers and adapters"""
    getattr(logger, level.lower())(event, extra=fields)


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Install a single stream handler on the package logger.

    Calling it again replaces the handler, so app factories can run more
    than once (tests) without duplicating output.
    """
    formatter = JSONFormatter() if log_format == "json" else TextFormatter()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level.upper())
    logger.handlers = [handler]
    return logger
