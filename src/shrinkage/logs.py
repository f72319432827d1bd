"""Loguru sink setup. Library modules only emit; the CLI calls configure_logging."""

import os
import sys
from typing import Optional

from loguru import logger

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    rotation: str = "1 day",
    retention: str = "30 days",
) -> None:
    """
    Replace loguru's sinks with a stderr sink and an optional dated file sink.

    Safe to call more than once; each call starts from a clean set of sinks.

    Args:
        level: Minimum level for every sink
        log_dir: Directory for rotating log files, or None for stderr only
        rotation: loguru rotation setting for the file sink
        retention: loguru retention setting for the file sink
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            os.path.join(log_dir, "{time:YYYY-MM-DD}.log"),
            level=level,
            format=_FORMAT,
            rotation=rotation,
            retention=retention,
        )

    logger.debug("logging configured at level {}", level)
