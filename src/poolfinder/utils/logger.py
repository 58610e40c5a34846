"""Loguru-based logger configuration for the poolfinder service."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from loguru import logger


# Configuration from environment
DEBUG_MODE = os.getenv("DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG_MODE else "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() in ("true", "1", "yes")
LOGS_DIR = Path(os.getenv("LOG_DIR", "logs"))

SERVICE_START_TIME = datetime.now()
LOG_FILENAME = SERVICE_START_TIME.strftime("poolfinder_%Y%m%d_%H%M%S.log")

class InterceptHandler(logging.Handler):
    """Route standard-library log records into loguru."""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


class PoolfinderLoguru:
    """Loguru-based logger for the poolfinder service."""

    _instance = None
    _configured = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._configured:
            self._setup_logger()
            PoolfinderLoguru._configured = True

    def _setup_logger(self):
        """Configure Loguru logger with console and file handlers."""
        logger.remove()

        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
        logger.add(
            sys.stderr,
            format=console_format,
            level=LOG_LEVEL,
            colorize=DEBUG_MODE,
            backtrace=DEBUG_MODE,
            diagnose=DEBUG_MODE
        )

        if LOG_TO_FILE:
            LOGS_DIR.mkdir(parents=True, exist_ok=True)
            logger.add(
                LOGS_DIR / LOG_FILENAME,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
                level="DEBUG",
                rotation="50 MB",
                retention="10 days",
                compression="gz",
                serialize=not DEBUG_MODE,  # JSON lines outside debug mode
                backtrace=True,
                diagnose=False,
                enqueue=True
            )

        # Module loggers use the standard library; send them through loguru too
        logging.getLogger("poolfinder").handlers = [InterceptHandler()]
        logging.getLogger("poolfinder").setLevel(LOG_LEVEL)

    def log_request(
        self,
        request_id: str,
        method: str,
        endpoint: str,
        query_params: Optional[Dict[str, str]] = None
    ):
        """Log incoming request."""
        log_data = {
            "request_id": request_id,
            "request_type": "incoming",
            "method": method,
            "endpoint": endpoint,
            "query_params": query_params or {},
        }

        if DEBUG_MODE:
            message = f"Request {method} {endpoint} params={query_params or {}}"
        else:
            message = f"Request received: {method} {endpoint}"

        logger.bind(**log_data).info(message)

    def log_response(
        self,
        request_id: str,
        status_code: int,
        duration_ms: float
    ):
        """Log outgoing response."""
        log_data = {
            "request_id": request_id,
            "request_type": "outgoing",
            "status_code": status_code,
            "duration_ms": duration_ms,
        }

        # Determine log level based on status code
        if status_code >= 500:
            log_level = "error"
        elif status_code >= 400:
            log_level = "warning"
        else:
            log_level = "info"

        message = f"Response {status_code} ({duration_ms:.1f}ms)"
        getattr(logger.bind(**log_data), log_level)(message)

    def log_error(
        self,
        message: str,
        error: Optional[Exception] = None,
        **kwargs
    ):
        """Log an error."""
        if error:
            logger.bind(**kwargs).exception(message)
        else:
            logger.bind(**kwargs).error(message)

    def log_warning(self, message: str, **kwargs):
        """Log a warning."""
        logger.bind(**kwargs).warning(message)

    def log_info(self, message: str, **kwargs):
        """Log info message."""
        logger.bind(**kwargs).info(message)


# Singleton instance
poolfinder_logger = PoolfinderLoguru()


def get_logger() -> PoolfinderLoguru:
    """Get the poolfinder logger instance."""
    return poolfinder_logger
