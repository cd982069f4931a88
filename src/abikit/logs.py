"""Logging setup for the abikit command line and for scripts built on abikit.

The library itself only emits records through the ``logging`` module; handlers are
attached here, on the root logger, by whoever runs the program.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

# Logging defaults
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMATTER = "%(asctime)s: %(levelname)s: %(module)s::%(funcName)s: %(message)s"
DEFAULT_LOG_DATETIME = "%y-%m-%d %H:%M:%S"
DEFAULT_LOG_MAXBYTES = int(2e6)  # 2MB


def setup_logging(
    log_filename: str | None = None,
    log_level: int | None = None,
    log_stdout: bool = True,
    log_format_string: str | None = None,
    max_bytes: int | None = None,
    keep_previous_handlers: bool = False,
) -> None:
    """Set up root logging to stdout and, optionally, to a rotating log file.

    Arguments
    ---------
    log_filename: str, optional
        Path and name of the log file. ".log" is appended if missing. No file is written if None.
    log_level: int, optional
        Log level to track. Defaults to abikit.logs.DEFAULT_LOG_LEVEL.
    log_stdout: bool, optional
        Whether to log to standard output. Defaults to True.
    log_format_string: str, optional
        Logging format. Defaults to abikit.logs.DEFAULT_LOG_FORMATTER.
    max_bytes: int, optional
        Maximum size of the log file in bytes. Defaults to abikit.logs.DEFAULT_LOG_MAXBYTES.
    keep_previous_handlers: bool, optional
        Whether to keep handlers that are already attached. Defaults to False.
    """
    # pylint: disable=too-many-arguments
    root_logger = logging.getLogger()
    if not keep_previous_handlers:
        remove_handlers(root_logger)
    if log_stdout:
        add_stdout_handler(log_format_string=log_format_string, log_level=log_level)
    if log_filename is not None:
        add_file_handler(
            log_filename=log_filename,
            log_format_string=log_format_string,
            log_level=log_level,
            max_bytes=max_bytes,
        )
    # The root logger filters records before its handlers do, so it tracks the most verbose handler
    if root_logger.handlers:
        root_logger.setLevel(min(handler.level for handler in root_logger.handlers))
    else:
        root_logger.setLevel(DEFAULT_LOG_LEVEL if log_level is None else log_level)


def add_stdout_handler(log_format_string: str | None = None, log_level: int | None = None) -> logging.Handler:
    """Attach a stdout handler to the root logger.

    Arguments
    ---------
    log_format_string: str, optional
        Logging format. Defaults to abikit.logs.DEFAULT_LOG_FORMATTER.
    log_level: int, optional
        Log level to track. Defaults to abikit.logs.DEFAULT_LOG_LEVEL.

    Returns
    -------
    logging.Handler
        The attached handler.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(DEFAULT_LOG_LEVEL if log_level is None else log_level)
    handler.setFormatter(create_formatter(log_format_string))
    logging.getLogger().addHandler(handler)
    return handler


def add_file_handler(
    log_filename: str,
    log_format_string: str | None = None,
    log_level: int | None = None,
    max_bytes: int | None = None,
) -> logging.Handler:
    """Attach a rotating file handler to the root logger.

    Arguments
    ---------
    log_filename: str
        Path and name of the log file. Missing directories are created.
    log_format_string: str, optional
        Logging format. Defaults to abikit.logs.DEFAULT_LOG_FORMATTER.
    log_level: int, optional
        Log level to track. Defaults to abikit.logs.DEFAULT_LOG_LEVEL.
    max_bytes: int, optional
        Maximum size of the log file in bytes. Defaults to abikit.logs.DEFAULT_LOG_MAXBYTES.

    Returns
    -------
    logging.Handler
        The attached handler.
    """
    log_path = prepare_log_path(log_filename)
    handler = RotatingFileHandler(
        log_path, mode="w", maxBytes=DEFAULT_LOG_MAXBYTES if max_bytes is None else max_bytes
    )
    handler.setLevel(DEFAULT_LOG_LEVEL if log_level is None else log_level)
    handler.setFormatter(create_formatter(log_format_string))
    logging.getLogger().addHandler(handler)
    return handler


def prepare_log_path(log_filename: str) -> str:
    """Append ".log" to the file name if necessary and create its directory.

    Arguments
    ---------
    log_filename: str
        Path and name of the log file.

    Returns
    -------
    str
        The full path of the log file.
    """
    log_dir, log_name = os.path.split(log_filename)
    if not log_name.endswith(".log"):
        log_name += ".log"
    if log_dir == "":
        log_dir = os.path.join(os.getcwd(), ".logging")
    os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, log_name)


def create_formatter(log_format_string: str | None = None) -> logging.Formatter:
    """Create a Formatter, defaulting to abikit.logs.DEFAULT_LOG_FORMATTER.

    Arguments
    ---------
    log_format_string: str, optional
        Logging format described in string format.

    Returns
    -------
    logging.Formatter
        The formatter.
    """
    return logging.Formatter(log_format_string or DEFAULT_LOG_FORMATTER, DEFAULT_LOG_DATETIME)


def remove_handlers(logger: logging.Logger) -> None:
    """Detach every handler of the logger.

    Arguments
    ---------
    logger: logging.Logger
        Logger from which to remove handlers.
    """
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])


def close_logging(delete_logs: bool = False) -> None:
    """Remove the root logger's handlers, optionally deleting the files they wrote.

    Arguments
    ---------
    delete_logs: bool, optional
        Whether to delete the log files. Defaults to False.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        log_path = getattr(handler, "baseFilename", None)
        root_logger.removeHandler(handler)
        handler.close()
        if delete_logs and log_path is not None and os.path.exists(log_path):
            os.remove(log_path)
