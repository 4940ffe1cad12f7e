"""Logger setup for the pipeline and the MCP server."""

import logging
import re
import sys
from typing import Iterable, Optional, Union

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class NoiseFilter(logging.Filter):
    """Drop records whose message matches one of the configured patterns."""

    def __init__(self, patterns: Iterable[str] = ()):
        super().__init__()
        self.patterns = [re.compile(p) for p in patterns]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.patterns:
            return True
        message = record.getMessage()
        return not any(p.search(message) for p in self.patterns)


def setup_logger(
    name: str = "figma_codegen",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    suppress: Iterable[str] = (),
) -> logging.Logger:
    """Configure ``name`` with a stderr handler and an optional file handler.

    Stdout is left alone because the MCP stdio transport owns it. Calling
    this again for the same logger replaces its handlers.

    Args:
        name: Logger name; child loggers (``pipeline`` -> ``pipeline.orchestrator``) propagate to it
        level: Level name or number
        log_file: Also write records to this file
        suppress: Regex patterns for messages that should never be emitted
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []

    formatter = logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    noise = NoiseFilter(suppress)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(noise)
        logger.addHandler(handler)

    return logger
