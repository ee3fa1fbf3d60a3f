import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_KEY_VALUE_RE = re.compile(
    r"(?i)\b(GRAPH_API_KEY|API_KEY|DATABASE_URL|DB_URL|SECRET|PASSWORD|PASS|ACCESS_TOKEN|REFRESH_TOKEN)\s*[:=]\s*([^\s]+)"
)
_AUTH_API_KEY_RE = re.compile(r"(?i)\bAuthorization:\s*api-key\s+([^\s]+)")
_API_KEY_RE = re.compile(r"(?i)\bapi-key\s+([A-Za-z0-9._-]+)")
_AUTH_BEARER_RE = re.compile(r"(?i)\bAuthorization:\s*Bearer\s+([A-Za-z0-9._-]+)")
_BEARER_RE = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9._-]+)")


def _redact(text: str) -> str:
    redacted = _KEY_VALUE_RE.sub(lambda match: f"{match.group(1)}=[REDACTED]", text)
    redacted = _AUTH_API_KEY_RE.sub("Authorization: api-key [REDACTED]", redacted)
    redacted = _API_KEY_RE.sub("api-key [REDACTED]", redacted)
    redacted = _AUTH_BEARER_RE.sub("Authorization: Bearer [REDACTED]", redacted)
    redacted = _BEARER_RE.sub("Bearer [REDACTED]", redacted)
    return redacted


class RedactingFormatter(logging.Formatter):
    def formatException(self, ei):
        return _redact(super().formatException(ei))

    def formatStack(self, stack_info):
        return _redact(super().formatStack(stack_info))


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        record.msg = _redact(message)
        record.args = ()
        return True

def setup_logging():
    """
    Configures logging for the application.
    output: stdout + file (studydesk.log)
    level: INFO
    """
    Path("data").mkdir(parents=True, exist_ok=True)
    formatter = RedactingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handlers = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler("data/studydesk.log", maxBytes=5 * 1024 * 1024, backupCount=2, encoding="utf-8"),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(RedactingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)
