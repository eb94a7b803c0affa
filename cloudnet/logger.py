"""
Logger configuration for scripts using cloudnet.

The library itself only calls logging.getLogger(__name__); applications
decide where the records go.
"""

import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stdout with an ISO timestamp format."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Reduce noise from the AWS SDK
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
