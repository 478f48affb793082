"""
Tests for the display helpers. `plt.show` is replaced so that no window is opened.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from gray_rotate.core.images.buffer import PixelBuffer  # noqa: E402
from gray_rotate.core.images.visualize import display_image, display_side_by_side  # noqa: E402


@pytest.fixture(autouse=True)
def no_window(monkeypatch):
    calls = []
    monkeypatch.setattr(plt, "show", lambda *args, **kwargs: calls.append(plt.gcf()))
    yield calls
    plt.close("all")


def test_display_image(no_window):
    display_image(PixelBuffer.create(30, 20, fill=128), title="Rotated")

    assert len(no_window) == 1
    image = no_window[0].axes[0].images[0]
    assert image.get_array().shape == (20, 30)


def test_display_side_by_side(no_window):
    display_side_by_side(np.zeros((4, 4), dtype=np.uint8), PixelBuffer.create(6, 6))

    assert len(no_window) == 1
    assert [ax.get_title() for ax in no_window[0].axes] == ["Source", "Rotated"]
