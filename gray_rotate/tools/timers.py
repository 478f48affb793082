import functools
import time
from datetime import timedelta
from logging import Logger
from typing import Any, Callable, Optional, Sequence, TypeVar, cast

__all__: Sequence[str] = ("timer",)

F = TypeVar("F", bound=Callable[..., Any])
"""TypeVar for a generic function.
"""


class timer:
    """Context manager and decorator measuring how long a rotation (or any block) takes.

    Timing a block and reading the duration afterwards:
    >>> with timer() as rotation_timer:
    >>>     rotate_image(buffer, 0.5)
    >>> print(f"{rotation_timer.duration:0.4f}s")

    Logging the duration of every call of a function:
    >>> @timer(logger=setup_logger())
    >>> def rotate_folder(...):
    >>>     ...

    NOTE: the duration is measured with `time.monotonic` and expressed in seconds.
    """

    __slots__ = ("logger", "name", "_duration", "start")

    def __init__(self, logger: Optional[Logger] = None, name: str = "Code Block") -> None:
        if logger is not None and not isinstance(logger, Logger):
            raise TypeError(f"logger must be of type logging.Logger, got {type(logger)}")

        self.logger = logger
        self.name = name
        self._duration: Optional[float] = None

        self.start: float = -1.0
        """-1 until the context block is entered.
        """

    def __enter__(self) -> "timer":
        self.start = time.monotonic()
        return self

    def __exit__(self, *args) -> None:
        if self.start == -1:
            raise ValueError("Cannot use context-block exit method if context-block enter method has not been called!")

        self._duration = time.monotonic() - self.start
        if self.logger is not None:
            self.logger.debug(f"{self.name} took {self._duration:5.3f}s")

    def __call__(self, func: F) -> F:
        """Wrap `func` so that each call is timed with a fresh timer named after it."""

        @functools.wraps(func)
        def decorate_context(*args, **kwargs):
            with self.__class__(logger=self.logger, name=f"`{func.__name__}`"):
                return func(*args, **kwargs)

        return cast(F, decorate_context)

    @property
    def duration(self) -> float:
        """Seconds between entering and leaving the context block.

        Raises:
            ValueError: If the context block was not entered or has not been exited yet.
        """
        if self._duration is None:
            raise ValueError("Cannot get duration if timer has not exited context block!")
        return self._duration

    @property
    def timedelta(self) -> timedelta:
        """The duration as a `datetime.timedelta`."""
        return timedelta(seconds=self.duration)

    def __format__(self, format_spec: str) -> str:
        return f"{self.duration:{format_spec}}"

    def __float__(self) -> float:
        return self.duration
