"""
Logging configuration for the absorbingLP library.

Every module obtains its logger through get_logger(__name__), which places it
under the "absorbingLP" logger hierarchy. Nothing is emitted until an
application calls setup_logging(), which attaches console and/or rotating file
handlers. Settings can also be supplied through ALP_* environment variables.

Stage timings from the propagation engine are reported through LoggingTimer
and log_performance_metric on the "absorbingLP.performance" logger.
"""

import json
import logging
import logging.handlers
import os
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any


ROOT_LOGGER_NAME = "absorbingLP"
PERFORMANCE_LOGGER_NAME = f"{ROOT_LOGGER_NAME}.performance"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s.%(funcName)s:%(lineno)d | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILENAME = "absorbingLP.log"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5

ENV_LOG_LEVEL = "ALP_LOG_LEVEL"
ENV_LOG_FILE = "ALP_LOG_FILE"
ENV_LOG_DIR = "ALP_LOG_DIR"
ENV_LOG_FORMAT = "ALP_LOG_FORMAT"
ENV_LOG_CONSOLE = "ALP_LOG_CONSOLE"
ENV_LOG_JSON = "ALP_LOG_JSON"
ENV_LOG_PERFORMANCE = "ALP_LOG_PERFORMANCE"

_STANDARD_RECORD_FIELDS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info", "exc_text",
    "stack_info", "message"
}


class PerformanceFilter(logging.Filter):
    """Pass only records that carry timing or resource information."""

    KEYWORDS = (
        "performance", "timing", "duration", "elapsed",
        "memory", "iterations", "nnz"
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage().lower()
        return any(keyword in message for keyword in self.KEYWORDS)


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Fields passed through ``extra=`` (such as the operation name and duration
    attached by log_performance_metric) are copied into the output object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_FIELDS:
                log_obj[key] = value

        return json.dumps(log_obj, default=str)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Parameters
    ----------
    name : str
        The name for the logger (typically __name__)

    Returns
    -------
    logging.Logger
        Logger that inherits handlers configured by setup_logging()
    """
    return logging.getLogger(name)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console: Optional[bool] = None,
    json_format: Optional[bool] = None,
    performance_logging: Optional[bool] = None,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    max_file_size: Optional[int] = None,
    backup_count: Optional[int] = None,
    force_setup: bool = False
) -> logging.Logger:
    """
    Configure the "absorbingLP" logger hierarchy.

    Explicit arguments take precedence over ALP_* environment variables,
    which take precedence over the module defaults.

    Parameters
    ----------
    level : str, optional
        Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : str, optional
        Path to a log file. Rotated when it exceeds ``max_file_size``.
    log_dir : str, optional
        Directory for log files; ``absorbingLP.log`` is used inside it when
        ``log_file`` is not given
    console : bool, optional
        Whether to log to stdout (default True)
    json_format : bool, optional
        Whether to format records as JSON (default False)
    performance_logging : bool, optional
        Whether to attach PerformanceFilter to the performance logger and,
        when file logging is on, write a separate ``performance.log``
    format_string : str, optional
        Custom format string for text output
    date_format : str, optional
        Date format for timestamps
    max_file_size : int, optional
        Maximum size for log files before rotation (bytes)
    backup_count : int, optional
        Number of rotated files to keep
    force_setup : bool, default False
        Reconfigure even if handlers are already attached

    Returns
    -------
    logging.Logger
        The configured "absorbingLP" logger

    Raises
    ------
    ValueError
        If an invalid logging level is specified

    Examples
    --------
    >>> logger = setup_logging(level="DEBUG")
    >>> logger = setup_logging(log_dir="/tmp/alp", json_format=True, console=False)
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    if not force_setup and root_logger.handlers:
        return root_logger

    config = _resolve_logging_config(
        level=level,
        log_file=log_file,
        log_dir=log_dir,
        console=console,
        json_format=json_format,
        performance_logging=performance_logging,
        format_string=format_string,
        date_format=date_format,
        max_file_size=max_file_size,
        backup_count=backup_count
    )

    log_level = getattr(logging, str(config["level"]).upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Invalid logging level: {config['level']}")

    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    for logger in (root_logger, perf_logger):
        _detach_handlers(logger)

    root_logger.setLevel(log_level)

    if config["json_format"]:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt=config["format_string"],
            datefmt=config["date_format"]
        )

    if config["console"]:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_path = None
    if config["log_file"]:
        log_path = Path(config["log_file"])
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=config["max_file_size"],
            backupCount=config["backup_count"],
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if config["performance_logging"]:
        perf_filter = PerformanceFilter()
        perf_logger.addFilter(perf_filter)

        if log_path is not None:
            perf_handler = logging.handlers.RotatingFileHandler(
                filename=str(log_path.parent / "performance.log"),
                maxBytes=config["max_file_size"],
                backupCount=config["backup_count"],
                encoding="utf-8"
            )
            perf_handler.setFormatter(formatter)
            perf_handler.addFilter(perf_filter)
            perf_logger.addHandler(perf_handler)

    # Keep library records out of the application's root logger
    root_logger.propagate = False

    root_logger.info(
        "Logging configured: level=%s, console=%s, file=%s, json=%s",
        config["level"], config["console"],
        config["log_file"] or "None", config["json_format"]
    )

    return root_logger


def _detach_handlers(logger: logging.Logger) -> None:
    """Close and remove every handler and filter attached to logger."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.filters.clear()


def _get_bool_env(env_var: str, default: bool) -> bool:
    """Parse a boolean from an environment variable."""
    value = os.getenv(env_var, "").lower()
    if value in ("true", "yes", "1", "on"):
        return True
    if value in ("false", "no", "0", "off"):
        return False
    return default


def _resolve_logging_config(**kwargs) -> Dict[str, Any]:
    """Merge explicit arguments, environment variables and defaults."""
    level = kwargs.get("level") or os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)

    log_dir = kwargs.get("log_dir") or os.getenv(ENV_LOG_DIR)
    log_file = kwargs.get("log_file") or os.getenv(ENV_LOG_FILE)

    if not log_file and log_dir:
        log_file = os.path.join(log_dir, DEFAULT_LOG_FILENAME)

    console = kwargs.get("console")
    if console is None:
        console = _get_bool_env(ENV_LOG_CONSOLE, True)

    json_format = kwargs.get("json_format")
    if json_format is None:
        json_format = _get_bool_env(ENV_LOG_JSON, False)

    performance_logging = kwargs.get("performance_logging")
    if performance_logging is None:
        performance_logging = _get_bool_env(ENV_LOG_PERFORMANCE, False)

    format_string = (
        kwargs.get("format_string") or
        os.getenv(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)
    )

    return {
        "level": level,
        "log_file": log_file,
        "console": console,
        "json_format": json_format,
        "performance_logging": performance_logging,
        "format_string": format_string,
        "date_format": kwargs.get("date_format") or DEFAULT_DATE_FORMAT,
        "max_file_size": kwargs.get("max_file_size") or DEFAULT_MAX_FILE_SIZE,
        "backup_count": kwargs.get("backup_count") or DEFAULT_BACKUP_COUNT,
    }


def configure_external_library_logging(
    libraries: Optional[Dict[str, str]] = None
) -> None:
    """
    Quiet the loggers of third-party libraries used alongside absorbingLP.

    Parameters
    ----------
    libraries : Dict[str, str], optional
        Mapping of logger names to level names. Defaults to WARNING for
        networkit, polars and scipy. Unknown level names are skipped.

    Examples
    --------
    >>> configure_external_library_logging({"networkit": "ERROR"})
    """
    config = libraries or {
        "networkit": "WARNING",
        "polars": "WARNING",
        "scipy": "WARNING",
    }

    for library_name, level in config.items():
        library_level = getattr(logging, level.upper(), None)
        if not isinstance(library_level, int):
            continue
        logging.getLogger(library_name).setLevel(library_level)


def log_function_entry(func_name: str, **kwargs) -> None:
    """Log function entry with its parameters at DEBUG level."""
    logger = get_logger(f"{ROOT_LOGGER_NAME}.debug")
    if logger.isEnabledFor(logging.DEBUG):
        param_str = ", ".join([f"{k}={v}" for k, v in kwargs.items()])
        logger.debug("Entering %s(%s)", func_name, param_str)


def log_performance_metric(
    operation: str,
    duration: float,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log the duration of an operation on the performance logger.

    Parameters
    ----------
    operation : str
        Name of the operation that was timed
    duration : float
        Duration in seconds
    details : Dict[str, Any], optional
        Sizes involved in the operation (nodes, nnz, classes)
    """
    logger = get_logger(PERFORMANCE_LOGGER_NAME)

    message = f"Performance: {operation} completed in {duration:.3f}s"

    if details:
        detail_str = ", ".join([f"{k}={v}" for k, v in details.items()])
        message += f" ({detail_str})"

    logger.info(message, extra={"operation": operation, "duration": duration, **(details or {})})


class LoggingTimer:
    """
    Context manager that times a block and reports it via log_performance_metric.

    Examples
    --------
    >>> with LoggingTimer("Building augmented graph", {"nodes": 1000}):
    ...     pass
    """

    def __init__(self, operation: str, details: Optional[Dict[str, Any]] = None):
        self.operation = operation
        self.details = details or {}
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = time.perf_counter() - self.start_time
            log_performance_metric(self.operation, self.duration, self.details)
        return False
