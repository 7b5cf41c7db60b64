import logging

LOGGER_NAME = "planar_kdtree"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def set_debug(enabled: bool) -> None:
    logger.setLevel(logging.DEBUG if enabled else logging.NOTSET)
