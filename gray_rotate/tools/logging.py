import logging
from logging import LogRecord
from pathlib import Path
from typing import Sequence

from rich.logging import RichHandler
from rich.text import Text

from gray_rotate import PROJECT_DIR

__all__: Sequence[str] = ("setup_logger", "set_log_level")


class PackagePathRichHandler(RichHandler):
    """RichHandler that prefixes every message with its module path inside `gray_rotate`."""

    def get_relative_path(self, path_name: str) -> str:
        """Strip everything above the package directory from `path_name`."""
        _path = Path(path_name)
        if PROJECT_DIR not in _path.parents:
            return str(_path)
        return str(_path.relative_to(PROJECT_DIR.parent))

    def render_message(self, record: LogRecord, message: str) -> Text:
        """Render the log message as `[module path] [function: line] message`.

        Args:
            record (LogRecord): The log record.
            message (str): The log message.

        Returns:
            The rendered log message as a Rich Text object.
        """
        text = Text()
        text.append(f"[{self.get_relative_path(record.pathname)}]", style="light_cyan1")
        text.append(f" [{record.funcName}: {record.lineno}]", style="thistle1")
        text.append(f" {message}")

        return text


class CustomLogger(logging.Logger):
    def assertion(self, condition: bool, message: str, stacklevel: int = 2) -> None:
        """Assert a condition and log the failure, with traceback, before re-raising it.

        Usage:
        >>> logger.assertion(geometry.quadrant in (1, 2, 3, 4), f"bad quadrant {geometry.quadrant}")

        Args:
            condition (bool): The condition to assert.
            message (str): The message to log if the condition fails.
            stacklevel (int): The stacklevel to log the exception at.

        Raises:
            AssertionError: If the condition fails.
        """
        try:
            assert condition, message
        except AssertionError as e:
            self.exception(message, stack_info=True, exc_info=True, stacklevel=stacklevel)
            raise e


def setup_logger(log_level: int = logging.INFO) -> CustomLogger:
    """Return the colored package logger, creating its handler on first use.

    The logger is shared by every module of the package, so calling this function repeatedly
    never adds a second handler. The level is only applied the first time; use `set_log_level`
    to change it afterwards.
    """
    logging.setLoggerClass(CustomLogger)
    try:
        logger = logging.getLogger(PROJECT_DIR.name)
    finally:
        logging.setLoggerClass(logging.Logger)

    if any(isinstance(handler, RichHandler) for handler in logger.handlers):
        # logger already initialized
        return logger  # type: ignore[return-value]

    logger.setLevel(log_level)
    handler = PackagePathRichHandler(
        rich_tracebacks=True,
        show_path=False,
        markup=True,
        omit_repeated_times=False,
        tracebacks_show_locals=True,
    )
    logger.addHandler(handler)

    return logger  # type: ignore[return-value]


def set_log_level(log_level: int) -> None:
    """Change the level of the package logger, e.g. `logging.DEBUG` for verbose runs."""
    setup_logger().setLevel(log_level)
