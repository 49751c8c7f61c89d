"""
Logging configuration for Country Info.

Log records go to stderr so that stdout carries only the encoded request,
the raw reply and the decoded record.
"""

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at INFO/DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Union[str, int] = logging.WARNING) -> logging.Logger:
    """Configure root logging for the CLI.

    Args:
        level: Logging level name or number

    Returns:
        The package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("country_info")
