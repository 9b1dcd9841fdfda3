"""Logging bootstrap for the command line driver: stdlib logging + structlog."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel, field_validator

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_dir: Optional[str] = None
    capture_warnings: bool = True
    app_name: str = "divconq"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return value


_is_configured = False


def setup_logging(config: LoggingConfig | dict | None = None) -> LoggingConfig:
    """Route stdlib and structlog loggers to stderr (and optionally a rotating file).

    Algorithm modules log through ``logging.getLogger(__name__)``; the
    benchmark harness emits structured events through ``structlog`` which is
    bridged onto the same stdlib handlers here. Calling it again replaces the
    previous handlers.
    """
    global _is_configured
    if config is None:
        resolved = LoggingConfig()
    elif isinstance(config, dict):
        resolved = LoggingConfig(**config)
    else:
        resolved = config

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if resolved.log_dir:
        log_dir = Path(resolved.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / f"{resolved.app_name}.log",
                maxBytes=2 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolved.level)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(resolved.level)
        root.addHandler(handler)
    logging.captureWarnings(resolved.capture_warnings)

    renderer = (
        structlog.processors.JSONRenderer()
        if resolved.json_format
        else structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _is_configured = True
    return resolved


def is_configured() -> bool:
    return _is_configured
