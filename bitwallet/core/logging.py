"""
Loggers for bitwallet modules.

Every logger lives under the "bitwallet" namespace. The namespace logger owns the console handler and module
loggers propagate to it.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from bitwallet.core.formats import LOGGING

__all__ = ["get_logger", "resolve_level"]


def resolve_level(log_level: str | int | None = None) -> int:
    """
    Numeric level for a level name or number. With no level given, the BITWALLET_LOG_LEVEL environment variable
    is consulted before the INFO default.
    """
    if log_level is None:
        log_level = os.environ.get(LOGGING.LEVEL_ENV, LOGGING.LEVEL)
    if isinstance(log_level, int):
        return log_level

    numeric = logging.getLevelName(log_level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return numeric


def _namespace_logger(format_string: Optional[str]) -> logging.Logger:
    root = logging.getLogger(LOGGING.NAMESPACE)
    if not root.handlers:
        console_handler = logging.StreamHandler(stream=sys.stdout)
        console_handler.setFormatter(logging.Formatter(format_string or LOGGING.FORMAT))
        root.addHandler(console_handler)
    return root


def get_logger(name: str, log_level: str | int | None = None, log_file: Optional[Path] = None,
               format_string: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger under the bitwallet namespace.

    Args:
        name: Logger name, typically __name__. Names outside the namespace are prefixed with "bitwallet."
        log_level: Level name or number. An explicit level always applies; otherwise the environment or default
            level is set the first time the logger is configured.
        log_file: Optional path to a log file for this logger, created along with its parent directories
        format_string: Optional format for the console handler (first call only) and the file handler

    Returns:
        The configured logger
    """
    if name != LOGGING.NAMESPACE and not name.startswith(LOGGING.NAMESPACE + "."):
        name = f"{LOGGING.NAMESPACE}.{name}"

    root = _namespace_logger(format_string)
    logger = root if name == LOGGING.NAMESPACE else logging.getLogger(name)

    if log_level is not None or logger.level == logging.NOTSET:
        logger.setLevel(resolve_level(log_level))

    if log_file:
        log_file = Path(log_file)
        existing = {h.baseFilename for h in logger.handlers if isinstance(h, logging.FileHandler)}
        if os.path.abspath(log_file) not in existing:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(format_string or LOGGING.FORMAT))
            logger.addHandler(file_handler)

    return logger
