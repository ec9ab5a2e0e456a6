import logging
import sys

from mezmo_exporter.logger.handler import Handler
from mezmo_exporter.logger.json_formatter import JsonFormatter

__all__ = ["Handler", "JsonFormatter", "get_logger"]


def get_logger(handlers, log_level, name):
    """Get or create the exporter's diagnostic logger.

    Returns the existing logger if already configured, otherwise attaches
    the provided handlers (JSON to stdout by default) and sets the level.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    if not handlers:
        handlers = [
            Handler(
                handler=logging.StreamHandler(sys.stdout),
                formatter=JsonFormatter(),
            )
        ]
    for h in handlers:
        new_handler = h.handler
        new_handler.setFormatter(h.formatter or JsonFormatter())
        logger.addHandler(new_handler)

    logger.setLevel(log_level)
    logger.propagate = False

    return logger
