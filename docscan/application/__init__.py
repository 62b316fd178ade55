"""Application layer - use cases orchestrating the domain."""

from .ports.event_publisher import EventPublisher, ScanEvent, ScanStage, SimpleEventPublisher
from .services.batch_processor import BatchProcessor, BatchResult, ScanRecord
from .services.capture import CaptureService
from .services.document_detection import DocumentDetector

__all__ = [
    'EventPublisher',
    'ScanEvent',
    'ScanStage',
    'SimpleEventPublisher',
    'BatchProcessor',
    'BatchResult',
    'ScanRecord',
    'CaptureService',
    'DocumentDetector',
]
