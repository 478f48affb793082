"""
Tests for the gray-rotate command line interface.
"""

import numpy as np
import pytest
from click.testing import CliRunner

from gray_rotate.core.images.buffer import PixelBuffer
from gray_rotate.core.images.io import load_image, save_image
from gray_rotate.scripts.rotate_image import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def image_path(tmp_path):
    rng = np.random.default_rng(3)
    return save_image(PixelBuffer.from_array(rng.integers(0, 256, size=(5, 8))), tmp_path / "input.png")


# =============================================================================
# Single Image Tests
# =============================================================================


class TestSingleImage:
    def test_rotate_degrees(self, runner, image_path, tmp_path):
        output = tmp_path / "out" / "rotated.png"
        result = runner.invoke(main, ["-i", str(image_path), "-a", "90", "-d", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert load_image(output).shape == (8, 5)

    def test_rotate_radians_with_loop_method(self, runner, image_path, tmp_path):
        output = tmp_path / "rotated.png"
        result = runner.invoke(main, ["-i", str(image_path), "-a", "0", "-m", "loop", "-o", str(output)])

        assert result.exit_code == 0, result.output
        np.testing.assert_array_equal(load_image(output), load_image(image_path))

    def test_show_displays_result(self, runner, image_path, monkeypatch):
        shown = []
        monkeypatch.setattr("gray_rotate.core.images.visualize.display_image", lambda image: shown.append(image))

        result = runner.invoke(main, ["-i", str(image_path), "-a", "0.5", "-s"])

        assert result.exit_code == 0, result.output
        assert len(shown) == 1
        assert isinstance(shown[0], PixelBuffer)

    def test_missing_input_fails(self, runner, tmp_path):
        result = runner.invoke(main, ["-i", str(tmp_path / "missing.png")])

        assert result.exit_code == 1
        assert "Failed to load image" in result.output

    def test_invalid_background(self, runner, image_path):
        result = runner.invoke(main, ["-i", str(image_path), "-b", "300"])
        assert result.exit_code == 2


# =============================================================================
# Folder Tests
# =============================================================================


class TestFolder:
    def test_rotates_every_image(self, runner, tmp_path):
        input_dir = tmp_path / "images"
        for name in ("a.png", "b.png"):
            save_image(np.full((4, 6), 90, dtype=np.uint8), input_dir / name)
        (input_dir / "readme.txt").write_text("ignored")
        output_dir = tmp_path / "rotated"

        result = runner.invoke(main, ["-i", str(input_dir), "-a", "180", "-d", "-o", str(output_dir), "-c", "1"])

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in output_dir.iterdir()) == ["a.png", "b.png"]
        assert load_image(output_dir / "a.png").shape == (4, 6)

    def test_requires_output_path(self, runner, tmp_path):
        result = runner.invoke(main, ["-i", str(tmp_path)])

        assert result.exit_code == 2
        assert "--output-path is required" in result.output

    def test_empty_folder(self, runner, tmp_path):
        result = runner.invoke(main, ["-i", str(tmp_path), "-o", str(tmp_path / "out"), "-c", "1"])
        assert result.exit_code == 0, result.output
