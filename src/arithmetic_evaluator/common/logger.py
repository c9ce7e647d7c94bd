"""Shared logger for the arithmetic evaluator."""
import logging
import sys
from typing import Union

LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger: logging.Logger = logging.getLogger("arithmetic_evaluator")

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.WARNING)
    logger.propagate = False


def set_level(level: Union[int, str]) -> None:
    """
    Change the verbosity of the shared logger.

    :param Union[int, str] level: Logging level, either numeric or a name such as "INFO"

    :raises ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    logger.setLevel(level)
