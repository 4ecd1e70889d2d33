"""Logging setup for the DOI labeler: plain text for terminals, JSON lines for log shippers."""

import json
import logging
import sys
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

# HTTP libraries log every connection at DEBUG/INFO
_NOISY_LOGGERS = ("urllib3", "requests_cache")


class JsonFormatter(logging.Formatter):
    """One JSON object per record. A ``doi`` passed via ``extra`` is kept as its own key."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        doi = getattr(record, "doi", None)
        if doi:
            log["doi"] = doi
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log)


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(level: str | int = "INFO", json_format: bool = False) -> None:
    """Replace root handlers with a single stdout handler."""
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(root.level)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
