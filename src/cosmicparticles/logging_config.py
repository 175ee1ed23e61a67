"""
Logging Configuration
Sets up the ``cosmicparticles`` logger for the CLI and embedding applications.

The CLI prints its progress and summary to stdout, so log records go to
stderr and never interleave with the report.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "cosmicparticles"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"
LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: Union[int, str]) -> int:
    """
    Accept a numeric level or a level name ("debug", "INFO", ...).

    Raises:
        ValueError: for an unknown level name.
    """
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Unknown log level {level!r} (expected one of {', '.join(LEVEL_NAMES)})")
    return getattr(logging, name)


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'cosmicparticles' namespace.

    Args:
        level: Logging level, numeric or by name.
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Repeated CLI runs in one process would otherwise stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging at %s%s", logging.getLevelName(level),
                 f", also to {log_file}" if log_file else "")
    return logger
