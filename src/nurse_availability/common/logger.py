'''
universal logger
'''
import logging
import sys

from .config import settings

def setup_logger(level: str | None = None):
    """
    Configures and returns the application logger.
    The level comes from settings.LOG_LEVEL unless one is given.
    """
    logger = logging.getLogger('nurse-availability')
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stdout)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'
    )
    handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(handler)

    return logger

# Create a single logger instance to be imported by other modules
log = setup_logger()
