"""
Logging utilities for bitget-uta

Centralized logging configuration with structured logging support.
The library itself only creates module loggers; applications opt in to
handlers through LoggingManager.setup_logging().
"""

import logging
import sys
import threading
from collections import Counter
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

REDACTED = "***"

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATEFMT = '%Y-%m-%d %H:%M:%S'


class SecretRedactingFilter(logging.Filter):
    """
    Masks registered secret values in rendered log messages.

    Secrets are reference counted so several clients can share one filter
    and each can withdraw its own values. filter() reads an immutable
    snapshot, so registration from other threads never disturbs it.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self._lock = threading.Lock()
        self._counts: Counter = Counter()
        self._secrets: FrozenSet[str] = frozenset()
        for secret in secrets:
            self.add_secret(secret)

    @property
    def secrets(self) -> FrozenSet[str]:
        return self._secrets

    def add_secret(self, secret: str) -> None:
        # Very short values would mask unrelated text
        if not secret or len(secret) < 4:
            return
        with self._lock:
            self._counts[secret] += 1
            self._secrets = frozenset(self._counts)

    def remove_secret(self, secret: str) -> None:
        """Withdraw one registration of secret; unknown values are ignored"""
        with self._lock:
            if self._counts.get(secret, 0) <= 0:
                return
            self._counts[secret] -= 1
            if self._counts[secret] == 0:
                del self._counts[secret]
            self._secrets = frozenset(self._counts)

    def filter(self, record: logging.LogRecord) -> bool:
        secrets = self._secrets
        if not secrets:
            return True

        try:
            message = record.getMessage()
        except Exception:
            return True

        redacted = message
        for secret in secrets:
            if secret in redacted:
                redacted = redacted.replace(secret, REDACTED)

        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class LoggingManager:
    """Logging manager with structured logging support"""

    def __init__(self):
        self._configured_loggers = set()

    def setup_logging(self, service_name: str, level: str = "INFO",
                      log_to_console: bool = True,
                      log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
        """
        Setup logging for a logger namespace.

        Args:
            service_name: Logger name, e.g. "bitget_uta"
            level: Logging level
            log_to_console: Whether to log to stdout
            log_file: Optional file to append log lines to

        Returns:
            Configured logger
        """
        logger = logging.getLogger(service_name)

        # Avoid duplicate configuration
        if service_name in self._configured_loggers:
            return logger

        logger.handlers.clear()
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        logger.propagate = False

        self._configured_loggers.add(service_name)
        return logger

    def get_logger(self, service_name: str) -> logging.Logger:
        return logging.getLogger(service_name)

    def reset(self) -> None:
        """Forget configured loggers (for testing)"""
        self._configured_loggers.clear()


class StructuredLogger:
    """
    Structured logger for consistent log formatting.

    Every method is best-effort: a failure while formatting or emitting
    a record never propagates to the caller.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def _log(self, level: int, message: str, kwargs: dict) -> None:
        try:
            if not self.logger.isEnabledFor(level):
                return
            if kwargs:
                message = f"{message} | {self._format_kwargs(kwargs)}"
            self.logger.log(level, message)
        except Exception:
            # Logging must never change the outcome of an API call
            pass

    def _format_kwargs(self, kwargs: dict) -> str:
        """Format keyword arguments for logging"""
        return " ".join(f"{k}={v}" for k, v in kwargs.items())


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Get structured logger for a module.

    Args:
        name: Logger name

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(logging.getLogger(name))


# Global logging manager instance
logging_manager = LoggingManager()
