"""Domain layer - pure pixel and geometry logic, no I/O."""

from .entities.image import Image
from .entities.detection import CaptureResult, DetectionOutcome, DetectionResult
from .value_objects.config import ColorMode, EnhancementOptions, ScanConfig
from .value_objects.geometry import Point, Quadrilateral

__all__ = [
    # Entities
    'Image',
    'CaptureResult',
    'DetectionOutcome',
    'DetectionResult',
    # Value Objects
    'ColorMode',
    'EnhancementOptions',
    'ScanConfig',
    'Point',
    'Quadrilateral',
]
