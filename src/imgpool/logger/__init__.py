"""
Logging module
"""

from imgpool.logger.logger import get_logger, ColorFormatter

__all__ = [
    "get_logger",
    "ColorFormatter"
]
