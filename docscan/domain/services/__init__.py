"""Domain services - the numerical core of the scanner."""

from .preprocessing import preprocess
from .contours import find_contours, iter_contours
from .simplification import simplify_polygon
from .quadrilateral import order_points, select_best_quadrilateral
from .stability import StabilityTracker
from .perspective import apply_perspective_correction
from .enhancement import enhance_document

__all__ = [
    'preprocess',
    'find_contours',
    'iter_contours',
    'simplify_polygon',
    'order_points',
    'select_best_quadrilateral',
    'StabilityTracker',
    'apply_perspective_correction',
    'enhance_document',
]
