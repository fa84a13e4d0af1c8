"""Logging configuration."""

import logging
import os
import sys
from typing import Literal

from pydantic import BaseModel


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    stream: Literal["stdout", "stderr"] = "stdout"

    @classmethod
    def from_env(cls, default_level: str = "INFO", stream: Literal["stdout", "stderr"] = "stdout") -> "LogConfig":
        """Build a config whose level honours LOG_LEVEL."""
        return cls(level=os.getenv("LOG_LEVEL", default_level), stream=stream)


def setup_logging(config: LogConfig | None = None) -> None:
    """Set up logging configuration for the application."""
    if config is None:
        config = LogConfig.from_env()

    level = getattr(logging, config.level.upper())
    logging.basicConfig(
        level=level,
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stderr if config.stream == "stderr" else sys.stdout,
        force=True,
    )

    # Module loggers set their own level in get_logger, so filter at the handler too
    for handler in logging.getLogger().handlers:
        handler.setLevel(level)

    # Request lines from the transport are noise next to our own dispatch logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)
        level: Explicit level; falls back to LOG_LEVEL, then INFO

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = level if level else os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(log_level.upper())

    return logger
