"""Process-wide logging setup.

Library modules only ever call ``logging.getLogger("cyclesense.<module>")``.
Applications embedding the engine call ``configure_logging()`` once at
startup to get the standard format on stdout.
"""

from __future__ import annotations

import logging
import sys

from cyclesense.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure root logging from settings and return the package logger."""
    s = settings or get_settings()
    level = logging.DEBUG if s.debug else getattr(logging, s.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
    )
    logger = logging.getLogger("cyclesense")
    logger.setLevel(level)
    logger.debug("Logging configured for %s v%s [%s]", s.app_name, s.app_version, s.environment)
    return logger
