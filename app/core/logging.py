import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the process.

    Module loggers (logging.getLogger(__name__)) propagate here. force=True
    lets a second create_app() in the same process apply a new level.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
