"""Logging utilities for cdk-notices.

Notices are advisory output, so diagnostics go to stderr through rich and
stay quiet (WARNING) unless verbose logging is requested.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


NOTICES_THEME = Theme({
    "logging.level.info": "cyan",
    "logging.level.warning": "yellow",
    "logging.level.error": "red",
    "logging.level.debug": "dim",
})


class NoticesLogger:
    """Named logger writing through a rich handler on stderr."""

    def __init__(self, name: str, level: int = logging.WARNING) -> None:
        self.logger = logging.getLogger(f"cdk_notices.{name}")
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.addHandler(_rich_handler())
        self.logger.propagate = False

    def setLevel(self, level: int) -> None:
        self.logger.setLevel(level)

    def debug(self, msg: str, *args: Any) -> None:
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args: Any) -> None:
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self.logger.error(msg, *args)


_LOGGERS: Dict[str, NoticesLogger] = {}
_LEVEL = logging.WARNING
_LOG_FILE: Optional[Path] = None


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True, theme=NOTICES_THEME),
        show_time=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))
    return handler


def _attach_log_file(notices_logger: NoticesLogger) -> None:
    if _LOG_FILE is None:
        return
    for handler in notices_logger.logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == Path(_LOG_FILE).resolve():
            return
    file_handler = logging.FileHandler(_LOG_FILE)
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    notices_logger.logger.addHandler(file_handler)


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Configure logging for a cdk-notices run.

    Args:
        level: Logging level
        log_file: Optional file receiving a plain-text copy of the log
        verbose: Shortcut for DEBUG level
    """
    global _LEVEL, _LOG_FILE
    _LEVEL = logging.DEBUG if verbose else level
    _LOG_FILE = log_file

    for notices_logger in _LOGGERS.values():
        notices_logger.setLevel(_LEVEL)
        _attach_log_file(notices_logger)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def get_logger(name: str) -> NoticesLogger:
    """Get (or create) the cdk-notices logger for a component.

    Args:
        name: Component name

    Returns:
        Configured logger instance
    """
    if name not in _LOGGERS:
        _LOGGERS[name] = NoticesLogger(name, level=_LEVEL)
        _attach_log_file(_LOGGERS[name])
    return _LOGGERS[name]
