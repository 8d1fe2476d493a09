"""Logging setup for the API process."""
import logging
import sys

from shopapi.config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s | %(message)s")
    )
    root_logger.addHandler(handler)

    # Access lines are noisy on a mobile backend polled every few seconds
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
