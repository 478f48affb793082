"""
Tests for the logging and timing helpers.
"""

import logging
import time
from pathlib import Path

import pytest

from gray_rotate import PROJECT_DIR
from gray_rotate.tools.logging import CustomLogger, PackagePathRichHandler, set_log_level, setup_logger
from gray_rotate.tools.timers import timer


class TestLogger:
    def test_single_shared_logger(self):
        first, second = setup_logger(), setup_logger()

        assert first is second
        assert isinstance(first, CustomLogger)
        assert len(first.handlers) == 1

    def test_relative_path_starts_at_package(self):
        handler = PackagePathRichHandler()
        module_path = PROJECT_DIR / "core" / "images" / "transforms.py"

        assert handler.get_relative_path(str(module_path)) == str(Path("gray_rotate", "core", "images", "transforms.py"))
        assert handler.get_relative_path("/elsewhere/module.py") == "/elsewhere/module.py"

    def test_assertion_passes(self):
        setup_logger().assertion(True, "never logged")

    def test_assertion_raises(self):
        with pytest.raises(AssertionError, match="expected quadrant"):
            setup_logger().assertion(False, "expected quadrant in 1..4")

    def test_set_log_level(self):
        logger = setup_logger()
        previous = logger.level
        try:
            set_log_level(logging.DEBUG)
            assert logger.isEnabledFor(logging.DEBUG)
        finally:
            logger.setLevel(previous)


class TestTimer:
    def test_duration(self):
        with timer() as block_timer:
            time.sleep(0.01)

        assert block_timer.duration >= 0.0
        assert float(block_timer) == block_timer.duration
        assert block_timer.timedelta.total_seconds() == pytest.approx(block_timer.duration, abs=1e-6)
        assert f"{block_timer:.1f}"

    def test_duration_before_exit(self):
        with pytest.raises(ValueError):
            timer().duration

    def test_exit_without_enter(self):
        with pytest.raises(ValueError):
            timer().__exit__(None, None, None)

    def test_decorator_logs(self, caplog):
        @timer(logger=setup_logger())
        def add(a, b):
            return a + b

        set_log_level(logging.DEBUG)
        try:
            with caplog.at_level(logging.DEBUG, logger="gray_rotate"):
                assert add(1, 2) == 3
        finally:
            set_log_level(logging.INFO)

        assert "`add` took" in caplog.text

    def test_rejects_non_logger(self):
        with pytest.raises(TypeError):
            timer(logger="not a logger")
