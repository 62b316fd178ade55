"""Tests for image operations."""

import numpy as np

from docscan.application.ports.event_publisher import (
    EventPublisher,
    ScanEvent,
    ScanStage,
    SimpleEventPublisher,
)
from docscan.core.image_ops import (
    STABLE_COLOR,
    UNSTABLE_COLOR,
    analysis_size,
    draw_detection_overlay,
    resize_for_analysis,
)
from docscan.domain.entities.detection import DetectionResult
from docscan.domain.value_objects.geometry import Quadrilateral


class TestAnalysisSize:
    """Test analysis dimensions."""

    def test_downscale(self):
        assert analysis_size(1280, 720, 640) == (640, 360)

    def test_height_rounds_half_up(self):
        # 101 * 0.5 = 50.5
        assert analysis_size(200, 101, 100) == (100, 51)

    def test_upscale(self):
        assert analysis_size(320, 240, 640) == (640, 480)


class TestResizeForAnalysis:
    """Test frame resizing."""

    def test_same_width_returns_input(self, document_frame):
        resized, scale = resize_for_analysis(document_frame, 320)
        assert resized is document_frame
        assert scale == 1.0

    def test_downscale(self, document_frame):
        resized, scale = resize_for_analysis(document_frame, 160)
        assert resized.shape == (120, 160, 4)
        assert resized.dtype == np.uint8
        assert scale == 0.5

    def test_upscale(self, gradient_image):
        resized, scale = resize_for_analysis(gradient_image, 120)
        assert resized.shape == (80, 120, 3)
        assert scale == 2.0

    def test_area_downscale_averages_blocks(self):
        img = np.zeros((2, 4, 3), dtype=np.uint8)
        img[:, :2] = 200
        resized, _ = resize_for_analysis(img, 2)
        assert resized.shape == (1, 2, 3)
        assert resized[0, 0].tolist() == [200, 200, 200]
        assert resized[0, 1].tolist() == [0, 0, 0]


class TestDrawDetectionOverlay:
    """Test the detection overlay."""

    def test_not_detected_returns_copy(self, blank_frame):
        overlay = draw_detection_overlay(blank_frame, DetectionResult.not_detected())
        np.testing.assert_array_equal(overlay, blank_frame)
        assert overlay is not blank_frame

    def test_stable_outline_is_green(self, blank_frame):
        quad = Quadrilateral.from_bbox(50, 50, 200, 120)
        result = DetectionResult(detected=True, quad=quad, confidence=0.9, stable=True)
        overlay = draw_detection_overlay(blank_frame, result)

        assert overlay[50, 125].tolist() == list(STABLE_COLOR) + [255]
        assert not np.any(blank_frame[:, :, :3])  # input untouched

    def test_unstable_outline_is_amber(self, gradient_image):
        quad = Quadrilateral.from_bbox(10, 10, 30, 20)
        result = DetectionResult(detected=True, quad=quad, confidence=0.5, stable=False)
        overlay = draw_detection_overlay(gradient_image, result)

        assert overlay.shape == gradient_image.shape
        assert overlay[10, 20].tolist() == list(UNSTABLE_COLOR)


class TestEventPublisher:
    """Test the in-process publisher."""

    def test_subscribers_receive_events(self):
        publisher = SimpleEventPublisher()
        received = []
        publisher.subscribe(received.append)
        publisher.subscribe(received.append)

        event = ScanEvent(stage=ScanStage.PROCESSING, message="hello", progress=0.5)
        publisher.publish(event)

        assert received == [event, event]

    def test_satisfies_protocol(self):
        assert isinstance(SimpleEventPublisher(), EventPublisher)

    def test_stage_filter(self):
        publisher = SimpleEventPublisher()
        received = []
        publisher.subscribe(received.append, stages=[ScanStage.DETECTION])

        publisher.publish(ScanEvent(stage=ScanStage.BATCH_START, message="start"))
        publisher.publish(ScanEvent(stage=ScanStage.DETECTION, message="found"))

        assert [event.message for event in received] == ["found"]

    def test_unsubscribe(self):
        publisher = SimpleEventPublisher()
        received = []
        publisher.subscribe(received.append)
        publisher.unsubscribe(received.append)

        publisher.publish(ScanEvent(stage=ScanStage.PROCESSING, message="hello"))

        assert received == []

    def test_document_found(self):
        quad = Quadrilateral.from_bbox(10, 10, 30, 20)
        found = DetectionResult(detected=True, quad=quad, confidence=0.5, stable=False)

        assert ScanEvent(ScanStage.DETECTION, "found", detection=found).document_found
        assert not ScanEvent(ScanStage.DETECTION, "none", detection=DetectionResult.not_detected()).document_found
        assert not ScanEvent(ScanStage.PROCESSING, "busy").document_found
