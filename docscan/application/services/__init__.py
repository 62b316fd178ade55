"""Application services."""

from .batch_processor import BatchProcessor, BatchResult, ScanRecord
from .capture import CaptureService
from .document_detection import DocumentDetector

__all__ = [
    'BatchProcessor',
    'BatchResult',
    'ScanRecord',
    'CaptureService',
    'DocumentDetector',
]
