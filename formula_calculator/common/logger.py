"""Shared logger for the formula calculator."""
import logging

LOGGER_NAME = "formula_calculator"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def configure_logging(level: int = logging.INFO) -> None:
    """
    Attach a stream handler to the package logger.

    Only the command-line entry point calls this; library users configure logging themselves.

    :param int level: Logging level for the package logger
    """
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
