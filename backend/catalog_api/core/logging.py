"""Process-wide logging setup."""

import logging
import time

LOG_FORMAT = "api: %(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the server and the batch client.

    Timestamps are UTC, matching what operators see in container logs.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.Formatter.converter = time.gmtime
