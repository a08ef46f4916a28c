"""Process-level logging configuration."""

import logging
import sys

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Chatty third-party loggers kept at WARNING unless debugging
_NOISY_LOGGERS = ("urllib3", "gitlab")


def init_logging(level: str) -> None:
    """Configure root logging on stderr so report output stays clean on stdout.

    Args:
        level: One of debug, info, warn, warning, error (unknown values
            fall back to warning)
    """
    numeric_level = LOG_LEVELS.get(level.lower(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
        )
