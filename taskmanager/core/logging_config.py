import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    logger = logging.getLogger()
    if logger.handlers:
        return  # already configured (uvicorn, pytest)
    logger.setLevel(level)
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    ))
    logger.addHandler(h)
