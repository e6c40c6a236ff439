"""
Logging utilities for the API process and maintenance scripts.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; quiet the Google discovery cache warnings."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


__all__ = ["configure_logging", "LOG_FORMAT"]
