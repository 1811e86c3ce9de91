# logs.py
import logging
import os

from .errors import ConfigurationError

LOGGER_NAME = "lambdalogs"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def setup_logger(level=None, logfile=None, name=LOGGER_NAME):
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    logfile = logfile or os.environ.get("LOG_FILE")

    logger = logging.getLogger(name)
    try:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid log level: '{level}'") from None
    logger.handlers.clear()
    # The Lambda runtime installs its own root handler; don't log twice.
    logger.propagate = False

    fmt = logging.Formatter(LOG_FORMAT)

    # Console (ends up in CloudWatch)
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File, only where the filesystem allows it (/tmp on Lambda)
    if logfile:
        fh = logging.FileHandler(logfile, mode="a", encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)
        logger.info(f"Logging to file: {logfile}")

    return logger
