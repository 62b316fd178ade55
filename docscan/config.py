"""Configuration and constants for the document scanning engine."""

from dataclasses import dataclass


# Stability tracking
STABILITY_THRESHOLD = 5  # Consecutive frames required before a quad is stable
STABILITY_TOLERANCE = 15.0  # Max corner drift in frame pixels


@dataclass(frozen=True)
class DetectionConfig:
    """Reference constants for the detection pipeline."""
    analysis_width: int = 640  # Frames are resized to this width before analysis

    # Edge map
    edge_threshold: int = 50  # Sobel magnitude cutoff (strictly greater is an edge)

    # Contour tracing
    max_trace_steps: int = 10_000
    min_contour_points: int = 50  # Contours must be longer than this

    # Polygon simplification
    simplify_epsilon_ratio: float = 0.02  # Epsilon as a fraction of contour length
    min_vertices: int = 4
    max_vertices: int = 8

    # Candidate filters (fractions of frame area, both bounds exclusive)
    min_area_ratio: float = 0.10
    max_area_ratio: float = 0.95

    # Scoring
    reference_aspect_ratio: float = 1.41  # ISO A-series
    area_weight: float = 0.6
    aspect_weight: float = 0.4

    # Stability
    stability_threshold: int = STABILITY_THRESHOLD
    stability_tolerance: float = STABILITY_TOLERANCE


DETECTION_CONFIG = DetectionConfig()


# File handling - formats Pillow can read and write
SUPPORTED_IMAGE_EXTENSIONS: tuple[str, ...] = (
    '.jpg', '.jpeg', '.png', '.bmp', '.webp', '.tiff', '.tif',
)


# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
