"""docscan - document boundary detection and perspective correction."""

__version__ = "1.0.0"

from .application import BatchProcessor, CaptureService, DocumentDetector
from .domain import (
    CaptureResult,
    ColorMode,
    DetectionResult,
    EnhancementOptions,
    Point,
    Quadrilateral,
    ScanConfig,
)
from .domain.services import (
    apply_perspective_correction,
    enhance_document,
    order_points,
    select_best_quadrilateral,
)
from .exceptions import (
    DocScanError,
    ConfigurationError,
    ImageProcessingError,
    DetectionError,
    PerspectiveCorrectionError,
    ValidationError,
)
from .utils.log import setup_logging

__all__ = [
    '__version__',
    'BatchProcessor',
    'CaptureService',
    'DocumentDetector',
    'CaptureResult',
    'ColorMode',
    'DetectionResult',
    'EnhancementOptions',
    'Point',
    'Quadrilateral',
    'ScanConfig',
    'apply_perspective_correction',
    'enhance_document',
    'order_points',
    'select_best_quadrilateral',
    'setup_logging',
    # Exceptions
    'DocScanError',
    'ConfigurationError',
    'ImageProcessingError',
    'DetectionError',
    'PerspectiveCorrectionError',
    'ValidationError',
]
