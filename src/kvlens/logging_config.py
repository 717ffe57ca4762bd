"""
Logging configuration for kvlens.

Log records go to a rich-formatted stderr handler for CLI commands. While the
explorer UI owns the terminal, the stderr handler is left out and records go
to the log file only.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "kvlens"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    terminal: bool = True,
) -> logging.Logger:
    """
    Configure logging for kvlens.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to write logs to
        terminal: Attach the rich stderr handler. Pass False while a
            full-screen UI is running so log lines do not corrupt the frame.

    Returns:
        Configured logger instance for kvlens
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = []

    if terminal:
        console = Console(stderr=True)
        handlers.append(
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
                markup=False,
                show_time=True,
                show_path=verbose,
            )
        )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'kvlens.completion')
              If None, returns the root kvlens logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)

    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
