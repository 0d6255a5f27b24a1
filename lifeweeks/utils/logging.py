import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


class RequestContext:
    """Per-request logging context backed by structlog contextvars.

    Values bound here show up in every structlog event emitted while the
    request is being handled, and ``RequestIdFilter`` copies the request id
    onto stdlib log records.
    """

    @staticmethod
    def set(**values: Any) -> None:
        structlog.contextvars.bind_contextvars(**values)

    @staticmethod
    def get() -> Dict[str, Any]:
        return structlog.contextvars.get_contextvars()

    @staticmethod
    def get_request_id() -> Optional[str]:
        return structlog.contextvars.get_contextvars().get("request_id")

    @staticmethod
    def clear() -> None:
        structlog.contextvars.clear_contextvars()


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or "-") to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = RequestContext.get_request_id() or "-"
        return True


def setup_logging(log_level: str = "INFO", log_to_file: bool = False) -> None:
    """Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Configure structlog to route through stdlib logging
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    request_filter = RequestIdFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler.addFilter(request_filter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_to_file:
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        # General application log file
        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "app.log", maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        app_handler.setLevel(logging.INFO)
        app_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] "
                "%(funcName)s:%(lineno)d - %(message)s"
            )
        )
        app_handler.addFilter(request_filter)
        root_logger.addHandler(app_handler)

        # Error-only log file for critical issues
        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "errors.log", maxBytes=5 * 1024 * 1024, backupCount=10  # 5MB
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] "
                "%(funcName)s:%(lineno)d - %(message)s"
            )
        )
        error_handler.addFilter(request_filter)
        root_logger.addHandler(error_handler)

    # Snapshot payloads are large; keep access logs out of debug noise
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.INFO))
