"""Value objects - immutable data with validation."""

from .geometry import Point, Quadrilateral
from .config import ColorMode, EnhancementOptions, ScanConfig

__all__ = [
    'Point',
    'Quadrilateral',
    'ColorMode',
    'EnhancementOptions',
    'ScanConfig',
]
