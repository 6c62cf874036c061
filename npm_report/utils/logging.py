"""Logging utilities for npm-report-parser."""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Parent of every logger the package creates; setup_logging levels it once
PACKAGE_LOGGER = "npm_report"


class ReportLogger:
    """Logger wrapper with rich formatting for the report decoders."""

    def __init__(self, name: str, level: Optional[int] = None) -> None:
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)
        if not self.logger.handlers:
            self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Attach a rich stderr handler so report output on stdout stays clean."""
        console = Console(stderr=True, theme=Theme({
            "info": "cyan",
            "warning": "yellow",
            "error": "red",
            "debug": "dim",
        }))

        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

        self.logger.addHandler(handler)
        self.logger.propagate = False

    def at_path(self, level: int, path: Any, message: str) -> None:
        """Log a message about one location in a report.

        Args:
            level: Logging level
            path: JSON path of the value the message is about
            message: What was found there
        """
        self.logger.log(level, f"{path}: {message}", extra={"json_path": str(path)})

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for npm-report-parser.

    Args:
        level: Logging level
        log_file: Optional log file path
        verbose: Enable verbose logging
    """
    if verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            *([logging.FileHandler(log_file)] if log_file else [])
        ]
    )

    # Package loggers leave their own level unset and inherit this one
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: str, level: Optional[int] = None) -> ReportLogger:
    """Get a report logger instance.

    Args:
        name: Logger name, under ``npm_report``
        level: Logging level, left unset (inherited) when None

    Returns:
        Configured logger instance
    """
    return ReportLogger(name, level)
