"""
Logging configuration for the MCS builder using structlog
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog
from structlog.processors import (
    TimeStamper,
    add_log_level,
    dict_tracebacks,
)
from structlog.stdlib import (
    BoundLogger,
    LoggerFactory,
    add_logger_name,
    filter_by_level,
)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    console_output: bool = True,
    json_format: bool = False,
) -> Path:
    """
    Configure structlog for both console and file output

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional specific log file name. If None, generates timestamp-based name
        log_dir: Directory for log files (default: "logs")
        console_output: Whether to output to console (default: True)
        json_format: Whether to use JSON format for console logs (default: False for readability)

    Returns:
        Path of the log file
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    if log_file is None:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file = f"claude-mod-{timestamp}.log"

    full_log_path = log_path / log_file
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    shared_processors = [
        add_log_level,
        add_logger_name,
        TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        dict_tracebacks,
    ]

    if console_output:
        if json_format:
            console_renderer = structlog.processors.JSONRenderer()
        else:
            console_renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=30)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=console_renderer, foreign_pre_chain=shared_processors)
        )
        root_logger.addHandler(console_handler)

    # File always gets JSON for easier parsing
    file_handler = logging.FileHandler(full_log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(), foreign_pre_chain=shared_processors
        )
    )
    root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Quiet chatty libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger: BoundLogger = structlog.get_logger(__name__)
    logger.debug(
        "Logging initialized",
        log_level=log_level,
        log_file=str(full_log_path),
        console_output=console_output,
        json_format=json_format,
    )
    return full_log_path


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured structlog logger

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog BoundLogger
    """
    return structlog.get_logger(name)


def mask_secret(secret: Optional[str], visible: int = 5) -> str:
    """Show only the first few characters of a credential"""
    if not secret:
        return "<unset>"
    return secret[:visible] + "..."
