"""Core image operations."""

from .image_ops import (
    ImageArray,
    analysis_size,
    resize_for_analysis,
    draw_detection_overlay,
)

__all__ = [
    'ImageArray',
    'analysis_size',
    'resize_for_analysis',
    'draw_detection_overlay',
]
