"""Shared fixtures: synthetic camera frames."""

import numpy as np
import pytest

# White page on a black background, inclusive pixel bounds
PAGE_LEFT, PAGE_TOP, PAGE_RIGHT, PAGE_BOTTOM = 80, 50, 239, 189
FRAME_WIDTH, FRAME_HEIGHT = 320, 240


def make_frame(width=FRAME_WIDTH, height=FRAME_HEIGHT, page=(PAGE_LEFT, PAGE_TOP, PAGE_RIGHT, PAGE_BOTTOM)):
    """RGBA frame with an opaque white rectangle."""
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    if page is not None:
        left, top, right, bottom = page
        frame[top:bottom + 1, left:right + 1, :3] = 255
    return frame


@pytest.fixture
def document_frame():
    return make_frame()


@pytest.fixture
def blank_frame():
    return make_frame(page=None)


@pytest.fixture
def gradient_image():
    """Smooth RGB test pattern with distinct values per pixel."""
    h, w = 40, 60
    ys, xs = np.mgrid[0:h, 0:w]
    img = np.empty((h, w, 3), dtype=np.uint8)
    img[:, :, 0] = (xs * 4) % 256
    img[:, :, 1] = (ys * 6) % 256
    img[:, :, 2] = (xs + ys) % 256
    return img


@pytest.fixture
def page_bounds():
    """(left, top, right, bottom) of the page in document_frame."""
    return PAGE_LEFT, PAGE_TOP, PAGE_RIGHT, PAGE_BOTTOM


@pytest.fixture
def frame_factory():
    return make_frame
