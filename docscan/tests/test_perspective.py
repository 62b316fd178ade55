"""Tests for perspective correction."""

import numpy as np
import pytest

from docscan.domain.services.perspective import apply_perspective_correction, output_size
from docscan.domain.value_objects.geometry import Point, Quadrilateral
from docscan.exceptions import PerspectiveCorrectionError


def full_frame(width, height):
    return Quadrilateral(
        Point(0, 0), Point(width - 1, 0), Point(width - 1, height - 1), Point(0, height - 1)
    )


class TestOutputSize:
    """Test derived output dimensions."""

    def test_rectangle(self):
        assert output_size(Quadrilateral.from_bbox(0, 0, 200, 100)) == (200, 100)

    def test_uses_longer_edges(self):
        quad = Quadrilateral(Point(0, 0), Point(100, 0), Point(110, 50), Point(-10, 50))
        # bottom edge 120, sides ~50.99
        assert output_size(quad) == (120, 51)

    def test_sheared_page_ratio(self):
        quad = Quadrilateral(Point(20, 10), Point(161, 30), Point(161, 230), Point(20, 210))
        width, height = output_size(quad)
        assert (width, height) == (142, 200)
        assert height / width == pytest.approx(1.408, abs=1e-3)


class TestApplyPerspectiveCorrection:
    """Test the warp itself."""

    def test_identity(self, gradient_image):
        h, w = gradient_image.shape[:2]
        result = apply_perspective_correction(gradient_image, full_frame(w, h), w, h)
        np.testing.assert_array_equal(result, gradient_image)

    def test_identity_with_derived_size(self, gradient_image):
        h, w = gradient_image.shape[:2]
        # Edges of a (w-1) x (h-1) quad round to one pixel less than the image
        result = apply_perspective_correction(gradient_image, full_frame(w, h))
        assert result.shape == (h - 1, w - 1, 3)

    def test_preserves_channels(self, document_frame):
        quad = Quadrilateral.from_bbox(80, 50, 159, 139)
        result = apply_perspective_correction(document_frame, quad)
        assert result.shape == (139, 159, 4)
        assert result.dtype == np.uint8

    def test_extracts_page_region(self, document_frame, page_bounds):
        left, top, right, bottom = page_bounds
        quad = Quadrilateral(
            Point(left, top), Point(right, top), Point(right, bottom), Point(left, bottom)
        )
        result = apply_perspective_correction(document_frame, quad)
        assert np.all(result[:, :, :3] == 255)

    def test_flips_when_corners_are_mirrored(self, gradient_image):
        h, w = gradient_image.shape[:2]
        mirrored = Quadrilateral(Point(w - 1, 0), Point(0, 0), Point(0, h - 1), Point(w - 1, h - 1))
        result = apply_perspective_correction(gradient_image, mirrored, w, h)
        np.testing.assert_array_equal(result, gradient_image[:, ::-1])

    def test_single_pixel_output(self, gradient_image):
        quad = Quadrilateral.from_bbox(5, 7, 20, 20)
        result = apply_perspective_correction(gradient_image, quad, 1, 1)
        np.testing.assert_array_equal(result[0, 0], gradient_image[7, 5])

    def test_corners_outside_source_are_clamped(self, gradient_image):
        h, w = gradient_image.shape[:2]
        quad = Quadrilateral.from_bbox(-50, -50, w + 100, h + 100)
        result = apply_perspective_correction(gradient_image, quad, 10, 10)
        np.testing.assert_array_equal(result[0, 0], gradient_image[0, 0])
        np.testing.assert_array_equal(result[-1, -1], gradient_image[-1, -1])

    def test_large_output_spans_blocks(self):
        source = np.zeros((600, 10, 3), dtype=np.uint8)
        source[:, :, 0] = (np.arange(600) % 256)[:, np.newaxis]
        result = apply_perspective_correction(source, full_frame(10, 600), 10, 600)
        np.testing.assert_array_equal(result, source)

    def test_sheared_page_is_squared_up(self):
        # White parallelogram page with a dark band through its middle, both
        # following the sheared top edge
        quad = Quadrilateral(Point(20, 10), Point(161, 30), Point(161, 230), Point(20, 210))
        ys = np.arange(260)[:, np.newaxis]
        xs = np.arange(200)[np.newaxis, :]
        top = 10 + (xs - 20) * 20 / 141
        columns = (xs >= 19) & (xs <= 163)
        page = columns & (ys >= np.floor(top) - 1) & (ys <= np.ceil(top + 200) + 1)
        band = columns & (np.abs(ys - np.round(top + 100)) <= 3)

        frame = np.zeros((260, 200, 3), dtype=np.uint8)
        frame[page] = 255
        frame[band] = 0

        result = apply_perspective_correction(frame, quad)

        assert result.shape == (200, 142, 3)
        assert result.shape[0] / result.shape[1] == pytest.approx(1.408, abs=1e-3)
        # Page fills the output up to every edge, no black frame around it
        assert result[:90].min() >= 250
        assert result[111:].min() >= 250
        # Band comes out as straight horizontal rows
        assert result[99:101].max() <= 5

    def test_empty_source(self):
        with pytest.raises(PerspectiveCorrectionError):
            apply_perspective_correction(np.zeros((0, 0, 4), dtype=np.uint8), full_frame(10, 10))

    def test_non_finite_corner(self, gradient_image):
        quad = Quadrilateral(Point(0, 0), Point(float('nan'), 0), Point(10, 10), Point(0, 10))
        with pytest.raises(PerspectiveCorrectionError):
            apply_perspective_correction(gradient_image, quad)

    def test_degenerate_quad(self, gradient_image):
        point = Point(5, 5)
        with pytest.raises(PerspectiveCorrectionError):
            apply_perspective_correction(gradient_image, Quadrilateral(point, point, point, point))

    def test_source_untouched(self, gradient_image):
        before = gradient_image.copy()
        apply_perspective_correction(gradient_image, Quadrilateral.from_bbox(3, 3, 30, 20))
        np.testing.assert_array_equal(gradient_image, before)
