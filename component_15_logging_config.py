"""
component_15_logging_config.py

Central logging system for the Shrdlite planner.
Provides structured logging with log levels, console colors and rotating log files.

Features:
- Console and file based logging
- Separate error-only log and performance log
- Structured formatting with timestamps and component names
- Performance tracking for long-running operations (search, planning)
- Contextual key=value information via `extra`

Usage:
    from component_15_logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Plan found", extra={"cost": 8, "expansions": 112})
    logger.warning("Search timed out", extra={"timeout": 10.0})
"""

import logging
import logging.handlers
import sys
import traceback
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Literal, MutableMapping, Optional, Tuple, Type

# Global logging configuration
LOG_DIR: Path = Path("logs")

DEFAULT_LOG_FILE: Path = LOG_DIR / "shrdlite.log"
ERROR_LOG_FILE: Path = LOG_DIR / "shrdlite_errors.log"
PERFORMANCE_LOG_FILE: Path = LOG_DIR / "shrdlite_performance.log"

PERFORMANCE_LOGGER_NAME: str = "shrdlite.performance"

CONSOLE_LOG_LEVEL: int = logging.WARNING
FILE_LOG_LEVEL: int = logging.DEBUG


class ShrdliteLogFormatter(logging.Formatter):
    """
    Formatter for structured log output.
    Appends extra information as key=value pairs and optionally colors console output.
    """

    COLORS: Dict[str, str] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = False, include_extra: bool = True) -> None:
        self.use_colors: bool = use_colors
        self.include_extra: bool = include_extra

        # Format: [TIMESTAMP] [LEVEL] [COMPONENT] MESSAGE
        fmt = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_message = super().format(record)

        if self.include_extra and hasattr(record, "extra_info"):
            extra_str = " | ".join(f"{k}={v}" for k, v in record.extra_info.items())
            if extra_str:
                log_message += f" | {extra_str}"

        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
            reset = self.COLORS["RESET"]
            log_message = f"{color}{log_message}{reset}"

        return log_message


class PerformanceLogger:
    """
    Context manager for timing long-running operations.

    Usage:
        with PerformanceLogger(logger.logger, "A* search", world="small"):
            engine.search(graph, start, goal, heuristic, timeout)
    """

    def __init__(
        self, logger: logging.Logger, operation_name: str, **context: Any
    ) -> None:
        self.logger: logging.Logger = logger
        self.operation_name: str = operation_name
        self.context: Dict[str, Any] = context
        self.start_time: Optional[datetime] = None
        self.duration_ms: float = 0.0

    def __enter__(self) -> "PerformanceLogger":
        self.start_time = datetime.now()
        self.logger.debug(
            f"START: {self.operation_name}", extra={"extra_info": self.context}
        )
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Literal[False]:
        assert (
            self.start_time is not None
        ), "PerformanceLogger was not entered correctly"
        self.duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000

        if exc_type is None:
            self.logger.debug(
                f"END: {self.operation_name} (duration: {self.duration_ms:.2f}ms)",
                extra={"extra_info": {**self.context, "duration_ms": self.duration_ms}},
            )

            perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
            perf_logger.info(
                f"{self.operation_name}: {self.duration_ms:.2f}ms",
                extra={"extra_info": {**self.context, "duration_ms": self.duration_ms}},
            )
        else:
            self.logger.error(
                f"FAILED: {self.operation_name} (duration: {self.duration_ms:.2f}ms)",
                extra={
                    "extra_info": {
                        **self.context,
                        "duration_ms": self.duration_ms,
                        "error": str(exc_val),
                    }
                },
            )

        # Propagate exceptions
        return False


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that stores the `extra` dict as `extra_info` on the record,
    so ShrdliteLogFormatter can render it.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> Tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra", {})
        if extra:
            kwargs["extra"] = {"extra_info": extra}
        return msg, kwargs

    def log_exception(self, exc: Exception, message: str = "", **context: Any) -> None:
        """Log an exception with full traceback and context."""
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        self.error(
            f"{message}: {type(exc).__name__}: {str(exc)}\n{tb_str}", extra=context
        )


def setup_logging(
    console_level: int = CONSOLE_LOG_LEVEL,
    file_level: int = FILE_LOG_LEVEL,
    log_file: Optional[Path] = None,
    enable_file_logging: bool = True,
    enable_performance_logging: bool = True,
) -> None:
    """
    Configure the global logging system.

    Args:
        console_level: Log level for console output
        file_level: Log level for file output
        log_file: Path of the main log file (default: logs/shrdlite.log)
        enable_file_logging: Write main and error log files
        enable_performance_logging: Write the separate performance log
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Filter on handler level

    # Remove existing handlers (prevents duplicates on repeated setup)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        ShrdliteLogFormatter(use_colors=sys.stderr.isatty(), include_extra=True)
    )
    root_logger.addHandler(console_handler)

    file_path = log_file or DEFAULT_LOG_FILE

    if enable_file_logging:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            file_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(ShrdliteLogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

        ERROR_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        error_handler = logging.handlers.RotatingFileHandler(
            ERROR_LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(ShrdliteLogFormatter(use_colors=False))
        root_logger.addHandler(error_handler)

    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    perf_logger.handlers.clear()
    perf_logger.propagate = False  # Keep timings out of the main log

    if enable_performance_logging and enable_file_logging:
        PERFORMANCE_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        perf_logger.setLevel(logging.INFO)
        perf_handler = logging.handlers.RotatingFileHandler(
            PERFORMANCE_LOG_FILE,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        perf_handler.setFormatter(ShrdliteLogFormatter(use_colors=False))
        perf_logger.addHandler(perf_handler)
    else:
        perf_logger.addHandler(logging.NullHandler())

    logger = logging.getLogger("shrdlite.logging_config")
    logger.info(
        "Logging initialized",
        extra={
            "extra_info": {
                "console_level": logging.getLevelName(console_level),
                "file_level": logging.getLevelName(file_level),
                "log_file": str(file_path) if enable_file_logging else None,
                "performance_logging": enable_performance_logging,
            }
        },
    )


def get_logger(name: str) -> StructuredLogger:
    """
    Create a structured logger for a component.

    Args:
        name: Component name (usually __name__)

    Returns:
        StructuredLogger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Search finished", extra={"expansions": 42})
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger, {})
