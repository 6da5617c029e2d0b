# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_idp

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger
from opentelemetry import trace

from coreason_idp.config import LoggingConfig

__all__ = ["logger", "configure_logging"]

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging messages to Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno  # type: ignore[assignment]

        # Walk past the logging module frames to find the real caller
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename in (logging.__file__, __file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def trace_id_injector(record: dict[str, Any]) -> None:
    """
    Loguru patcher that copies the active OpenTelemetry trace and span ids into `extra`.
    """
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        record["extra"]["trace_id"] = format(ctx.trace_id, "032x")
        record["extra"]["span_id"] = format(ctx.span_id, "016x")


def _resolve_level(level: str) -> str:
    try:
        logger.level(level)
    except ValueError:
        return "INFO"
    return level


def _add_file_sink(path: str, level: str) -> None:
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            rotation="500 MB",
            retention="10 days",
            serialize=True,
            enqueue=True,
            level=level,
        )
    except (PermissionError, OSError):
        # Read-only filesystems keep console logging only
        logger.warning(f"Unable to open log file {path}, continuing without file logging")


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Rebuilds the Loguru sinks from the logging configuration.

    Args:
        config: Explicit settings. Read from `COREASON_IDP_LOG_*` environment variables if omitted.
    """
    config = config or LoggingConfig()
    level = _resolve_level(config.level)

    logger.configure(handlers=[], patcher=trace_id_injector)

    if config.serialize:
        logger.add(sys.stdout, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=TEXT_FORMAT)

    if config.file:
        _add_file_sink(config.file, level)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger().setLevel(logging.getLevelNamesMapping().get(level, logging.INFO))


# Initialize on import
configure_logging()
