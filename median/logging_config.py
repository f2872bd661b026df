"""Centralised logging configuration utilities."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL = logging.INFO


def configure_logging(level: int | str = DEFAULT_LEVEL) -> None:
    """Configure root logging if it has not been configured yet."""
    if logging.getLogger().handlers:
        return

    logging.basicConfig(level=level, format=LOG_FORMAT)
