import logging
import sys

LOGGER_NAME = "podmix"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(level=logging.DEBUG, stream=None):
    """
    Configure the shared podmix logger.
    Safe to call again: the existing console handler is reused and only its
    level is updated.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    console = next((h for h in logger.handlers if getattr(h, "podmix_console", False)), None)
    if console is None:
        console = logging.StreamHandler(stream or sys.stdout)
        console.podmix_console = True
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)
    console.setLevel(level)

    return logger

logger = setup_logger()
