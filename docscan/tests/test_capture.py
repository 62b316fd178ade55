"""Tests for the capture service."""

import numpy as np
import pytest

from docscan.application.services.capture import CaptureService
from docscan.domain.value_objects.config import EnhancementOptions, ScanConfig
from docscan.domain.value_objects.geometry import Point, Quadrilateral
from docscan.exceptions import PerspectiveCorrectionError, ValidationError


@pytest.fixture
def page_quad(page_bounds):
    left, top, right, bottom = page_bounds
    return Quadrilateral(Point(left, top), Point(right, top), Point(right, bottom), Point(left, bottom))


class TestCorrect:
    """Test direct correction."""

    def test_correct(self, document_frame, page_quad):
        result = CaptureService().correct(document_frame, page_quad)
        assert result.shape == (139, 159, 4)

    def test_explicit_size(self, document_frame, page_quad):
        result = CaptureService().correct(document_frame, page_quad, 100, 50)
        assert result.shape == (50, 100, 4)

    def test_raises_on_degenerate_quad(self, document_frame):
        point = Point(10, 10)
        with pytest.raises(PerspectiveCorrectionError):
            CaptureService().correct(document_frame, Quadrilateral(point, point, point, point))


class TestProcessCapture:
    """Test correction plus enhancement with fallback."""

    def test_corrected_capture(self, document_frame, page_quad):
        result = CaptureService().process_capture(document_frame, page_quad)

        assert result.success
        assert result.corrected
        assert not result.enhanced
        assert result.error_message is None
        assert result.image.shape == (139, 159, 4)
        assert np.all(result.image[:, :, :3] == 255)

    def test_without_quad_uses_full_frame(self, document_frame):
        result = CaptureService().process_capture(document_frame, None)

        assert result.success
        assert not result.corrected
        np.testing.assert_array_equal(result.image, document_frame)
        assert result.image is not document_frame

    def test_falls_back_when_correction_fails(self, document_frame):
        point = Point(10, 10)
        result = CaptureService().process_capture(document_frame, Quadrilateral(point, point, point, point))

        assert result.success
        assert not result.corrected
        assert "PERSPECTIVE_ERROR" in result.error_message
        assert result.image.shape == document_frame.shape

    def test_correction_disabled(self, document_frame, page_quad):
        service = CaptureService(ScanConfig(correct_perspective=False))
        result = service.process_capture(document_frame, page_quad)
        assert not result.corrected
        assert result.image.shape == document_frame.shape

    def test_enhancement_applied(self, document_frame, page_quad):
        result = CaptureService().process_capture(
            document_frame, page_quad, {
                "mode": "color",
                "brightness": 50,
                "contrast": 100,
                "sharpen": False,
                "remove_background": False,
            }
        )
        assert result.enhanced
        # 255 * 0.5 = 127.5 rounds half up
        assert np.all(result.image[:, :, :3] == 128)

    def test_configured_enhancement_is_default(self, document_frame):
        config = ScanConfig(enhancement=EnhancementOptions.neutral())
        result = CaptureService(config).process_capture(document_frame)
        assert result.enhanced

    def test_input_not_modified(self, document_frame):
        before = document_frame.copy()
        CaptureService().process_capture(
            document_frame, None, EnhancementOptions(
                mode="bw", brightness=150, contrast=150, sharpen=True, remove_background=True
            )
        )
        np.testing.assert_array_equal(document_frame, before)

    def test_invalid_options(self, document_frame):
        with pytest.raises(ValidationError):
            CaptureService().process_capture(document_frame, None, {"mode": "color"})

    def test_unreadable_capture(self):
        result = CaptureService().process_capture("frame.png")
        assert not result.success
        assert "IMAGE_ERROR" in result.error_message


class TestProcessCaptureAsync:
    """Test background processing."""

    def test_future_result(self, document_frame, page_quad):
        with CaptureService() as service:
            future = service.process_capture_async(document_frame, page_quad)
            result = future.result(timeout=30)
        assert result.success
        assert result.corrected

    def test_close_is_idempotent(self):
        service = CaptureService()
        service.close()
        service.close()
