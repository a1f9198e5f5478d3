import logging

from steel_detailing.core.config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Logger con un único handler de consola, igual para todos los servicios."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL.upper())
    logger.propagate = False
    return logger
