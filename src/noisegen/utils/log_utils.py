import logging
import sys
from typing import Union

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s'
PACKAGE_LOGGER = "noisegen"


def setup_logging(level: Union[int, str] = logging.INFO, stream=None) -> logging.Logger:
    """
    Attaches a single stream handler (stderr by default) to the package logger.

    Handlers installed by a previous call are removed first, so calling this
    again (e.g. from tests) does not duplicate messages.

    Args:
        level: Logging level name ("DEBUG", "INFO", ...) or number.
        stream: Stream for the handler. Defaults to sys.stderr.

    Returns:
        logging.Logger: The configured package logger.
    """
    if isinstance(level, str):
        level_name = level.upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: '{level_name}'")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.propagate = False # Prevent duplicate messages if root logger exists
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)
    return logger
