import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from . import config

_REDACT = re.compile(r'(password|token|secret)(["\']?\s*[:=]\s*["\']?)[^"\'\s,}]+', re.IGNORECASE)


class SensitiveDataFilter(logging.Filter):
    """Redact password/token values from log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _REDACT.sub(r"\1\2[REDACTED]", record.msg)
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data)


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    level = (level or config.LOG_LEVEL).upper()
    json_logs = config.JSON_LOGS if json_logs is None else json_logs

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    handler.addFilter(SensitiveDataFilter())

    root = logging.getLogger("jobboard")
    root.handlers = [handler]
    root.setLevel(level)
    root.propagate = False
