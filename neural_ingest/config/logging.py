"""Module loggers. Handlers and levels belong to the host application."""

import logging

PACKAGE_LOGGER = "neural_ingest"

# Silent unless the host configures logging
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name."""
    return logging.getLogger(name)
