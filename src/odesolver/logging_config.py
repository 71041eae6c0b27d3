"""
Logging Configuration
Sets up the package logger for applications and scripts embedding the solver.
The library itself only creates module loggers and never calls this.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "odesolver"

# Third-party loggers that flood the output at DEBUG level
NOISY_LOGGERS = ("matplotlib", "PIL")


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'odesolver' namespace.

    Args:
        level: Logging level, as a number (logging.DEBUG) or a name ("DEBUG").
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level}")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Repeated calls must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if level <= logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)

    logger.info(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
