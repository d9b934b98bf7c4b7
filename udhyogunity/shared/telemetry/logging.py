"""Logging configuration for the ratings service."""

import logging
import sys

from udhyogunity.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Transport chatter: one line per Firestore call would bury probe warnings.
_NOISY_LOGGERS = ("httpx", "httpcore", "google.auth", "urllib3")


def setup_logging() -> None:
    """Configure root logging once at startup.

    DEBUG when settings.debug (per-probe match counts become visible),
    INFO otherwise. Output goes to stdout.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
