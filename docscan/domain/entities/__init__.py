"""Domain entities."""

from .image import Image, PixelArray, as_pixel_array
from .detection import CaptureResult, DetectionOutcome, DetectionResult

__all__ = [
    'Image',
    'PixelArray',
    'as_pixel_array',
    'CaptureResult',
    'DetectionOutcome',
    'DetectionResult',
]
