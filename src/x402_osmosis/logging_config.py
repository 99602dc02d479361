"""
Logging setup for the x402_osmosis package logger
"""

import logging
import sys
from typing import IO, Optional

PACKAGE_LOGGER = "x402_osmosis"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _PackageHandler(logging.StreamHandler):
    """Marker type so repeated setup replaces only our own handler"""


def setup_logging(level: int = logging.INFO, stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Send x402_osmosis log records to a stream.

    Only the package logger is touched; handlers on the root logger and on
    other libraries are left alone. Calling this again swaps the handler
    instead of adding a second one.

    Args:
        level: Level for the package logger and its handler
        stream: Output stream (default: stdout)

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers[:]:
        if isinstance(handler, _PackageHandler):
            logger.removeHandler(handler)

    handler = _PackageHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    logger.setLevel(level)
    # records are already written here, don't repeat them through root handlers
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the package namespace.

    Names outside the package (e.g. "__main__" in a script) are nested under
    x402_osmosis so they share the handler installed by setup_logging.
    """
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
