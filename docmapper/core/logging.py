# ==============================================
# docmapper/core/logging.py
# ==============================================
import json
import logging
import logging.handlers
import socket
import sys
from pathlib import Path
from typing import Optional

from .config import Settings, get_settings


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.hostname = self._get_hostname()

    def _get_hostname(self) -> str:
        """Get the hostname of the current machine."""
        try:
            return socket.gethostname()
        except OSError:
            return "unknown"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
            "process_id": record.process,
            "thread_id": record.thread,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Structured fields passed as extra={"extra_fields": {...}}
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Setup application logging configuration."""
    settings = settings or get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.logging.level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if settings.logging.json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt=settings.logging.format,
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.logging.file_path:
        file_path = Path(settings.logging.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=file_path,
            maxBytes=settings.logging.max_bytes,
            backupCount=settings.logging.backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database.echo else logging.WARNING
    )

    # Suppress noisy loggers in production
    if settings.is_production:
        logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
