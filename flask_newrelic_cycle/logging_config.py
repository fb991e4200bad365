"""
JSON logging with New Relic logs-in-context metadata.

Each record becomes one JSON object carrying the ``extra=`` fields passed by
the caller and the agent's linking metadata (``trace.id``, ``span.id``,
``entity.guid``...), so New Relic can attach the line to its transaction.
"""

import json
import logging
from typing import Any, Dict, Optional

from .agent import AgentClient, default_agent
from .config import get_log_level

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the ``extra=`` fields of a record, stringifying what JSON can't hold."""
    return {
        k: _jsonable(v)
        for k, v in record.__dict__.items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    Formats records as JSON lines linked to the current New Relic transaction.

    Args:
        agent: Agent client supplying linking metadata; defaults to the
            process-wide client
    """

    def __init__(self, agent: Optional[AgentClient] = None):
        super().__init__()
        self._agent = agent

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(extra_fields(record))
        # Linking metadata wins over user fields with the same key
        log_data.update((self._agent or default_agent()).linking_metadata())

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(
    level: Optional[str] = None, agent: Optional[AgentClient] = None
) -> logging.Handler:
    """
    Install a JSON handler on the root logger.

    Call this after the New Relic agent has been initialized so the agent can
    instrument the logging framework.

    Args:
        level: Root log level name. Defaults to LOG_LEVEL from the environment.
        agent: Agent client passed on to the formatter

    Returns:
        logging.Handler: The installed handler.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(agent))

    root_logger = logging.getLogger()
    root_logger.setLevel(level or get_log_level())

    # Remove any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Werkzeug's per-request access lines duplicate what the agent records
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    return handler
