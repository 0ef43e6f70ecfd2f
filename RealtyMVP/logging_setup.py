"""Logging configuration for RealtyMVP."""

import logging
import os
import sys
from datetime import datetime

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level="INFO", log_folder=None):
    """Configure the ``RealtyMVP`` logger.

    A console handler is always installed. When ``log_folder`` is given a
    timestamped log file is opened there as well, one per process start.
    Returns the path of the log file, or ``None``.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger("RealtyMVP")
    logger.setLevel(log_level)

    # Remove handlers from a previous app factory call
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = None
    if log_folder:
        os.makedirs(log_folder, exist_ok=True)
        log_file = os.path.join(
            log_folder, f"RealtyMVP_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Reduce noise from external libraries
    logging.getLogger("engineio").setLevel(logging.WARNING)
    logging.getLogger("socketio").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)

    return log_file
