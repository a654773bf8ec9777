"""
Logging configuration
"""

import sys

from loguru import logger


def setup_logging(verbose: bool = False, sink=sys.stderr) -> int:
    """
    Configure logging

    Returns:
        Id of the added loguru handler
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    return logger.add(
        sink,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )
