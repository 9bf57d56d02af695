"""
Logging configuration with secret redaction.

Recorded steps routinely carry credentials typed into login forms, so
nothing that reaches a handler may contain them in clear text.
"""

import re
import logging
import json
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from scenario_assist.utils.config import SECRET_PATTERNS

REDACTED = "[REDACTED]"

# Secrets recognizable by their shape alone
_SECRET_VALUES = [
    re.compile(r'Bearer\s+[A-Za-z0-9\-_\.]+', re.IGNORECASE),
    re.compile(r'sk-[A-Za-z0-9]+'),
    re.compile(r'eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+'),
]

# secret_key=value or secret_key: "value"
_SECRET_ASSIGNMENT = re.compile(
    rf'({"|".join(SECRET_PATTERNS)})\s*[=:]\s*["\']?[^"\'\s,}}]+["\']?',
    re.IGNORECASE,
)

# Attributes every LogRecord has; anything else was passed via `extra=`
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def redact_text(text: str) -> str:
    """Mask secret-looking values in free text."""
    for pattern in _SECRET_VALUES:
        text = pattern.sub(REDACTED, text)
    return _SECRET_ASSIGNMENT.sub(rf'\1={REDACTED}', text)


class RedactingFilter(logging.Filter):
    """Redacts the message and string arguments of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_text(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                redact_text(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line: time, level, logger, message and extras."""

    def __init__(self):
        super().__init__()
        self._redactor = RedactingFilter()

    def format(self, record: logging.LogRecord) -> str:
        self._redactor.filter(record)

        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: value for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None):
    """Install a single redacting stream handler on the root logger."""
    from scenario_assist.utils.config import settings

    level = (level or settings.LOG_LEVEL).upper()
    log_format = (log_format or settings.LOG_FORMAT).lower()

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    handler.addFilter(RedactingFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _is_secret_key(key: str, patterns: List[str]) -> bool:
    return any(re.search(pattern, key, re.IGNORECASE) for pattern in patterns)


def _redact_value(value: Any, patterns: List[str]) -> Any:
    if isinstance(value, dict):
        return redact_dict(value, patterns)
    if isinstance(value, list):
        return [_redact_value(item, patterns) for item in value]
    return value


def redact_dict(data: Dict[str, Any], keys_to_redact: Optional[List[str]] = None) -> Dict[str, Any]:
    """Copy of `data` with secret-looking keys masked at any depth."""
    patterns = SECRET_PATTERNS if keys_to_redact is None else keys_to_redact
    return {
        key: REDACTED if _is_secret_key(str(key), patterns) else _redact_value(value, patterns)
        for key, value in data.items()
    }


def summarize_action_types(actions: Iterable[Any]) -> Dict[str, int]:
    """Count actions per type for log lines; step values are left out."""
    counts = Counter(
        getattr(getattr(action, "type", None), "value", str(getattr(action, "type", "unknown")))
        for action in actions
    )
    return dict(counts)
