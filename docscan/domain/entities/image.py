"""Image entity - abstraction over pixel data."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt

from ...exceptions import ImageProcessingError

# HxWx4 (RGBA) or HxWx3 (RGB), uint8
PixelArray = npt.NDArray[np.uint8]


@runtime_checkable
class ImageData(Protocol):
    """Protocol for image data - allows different backends."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def mode(self) -> str: ...

    def convert(self, mode: str) -> ImageData: ...

    def save(self, path: Path | str, **kwargs) -> None: ...


@dataclass(frozen=True, slots=True)
class Image:
    """Domain entity representing a still capture or frame.

    Wraps underlying image data without exposing implementation details.
    """
    _data: ImageData
    source_path: Path | None = None

    @property
    def width(self) -> int:
        return self._data.width

    @property
    def height(self) -> int:
        return self._data.height

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def mode(self) -> str:
        return self._data.mode

    def convert(self, mode: str) -> Image:
        """Convert to different color mode."""
        return Image(
            _data=self._data.convert(mode),
            source_path=self.source_path
        )

    def save(self, path: Path | str) -> None:
        """Save image to path."""
        data = self._data
        # JPEG has no alpha channel
        if Path(path).suffix.lower() in ('.jpg', '.jpeg') and data.mode == 'RGBA':
            data = data.convert('RGB')
        try:
            data.save(path)
        except (OSError, ValueError) as e:
            raise ImageProcessingError(f"Could not save image: {e}", image_path=str(path)) from e

    @classmethod
    def from_file(cls, path: Path | str) -> Image:
        """Load image from file."""
        path = Path(path)
        # Lazy import - domain doesn't depend on PIL at import time
        from PIL import Image as PILImage
        try:
            with PILImage.open(path) as opened:
                data = opened.convert('RGBA')
        except (OSError, ValueError) as e:
            raise ImageProcessingError(f"Could not read image: {e}", image_path=str(path)) from e
        return cls(_data=data, source_path=path)

    @classmethod
    def from_array(cls, data: PixelArray, source_path: Path | None = None) -> Image:
        """Create from an RGB or RGBA numpy array."""
        from PIL import Image as PILImage
        return cls(_data=PILImage.fromarray(np.ascontiguousarray(data)), source_path=source_path)

    def to_array(self) -> PixelArray:
        """Convert to a writable RGBA numpy array."""
        return np.array(self._data.convert('RGBA'))


def as_pixel_array(source: object) -> PixelArray:
    """Return pixel data for any supported frame source.

    Accepts a numpy array (HxW gray, HxWx3 RGB, HxWx4 RGBA), a PIL image
    or an Image entity. Numpy arrays are returned as-is when already 8-bit
    RGB/RGBA, so callers must copy before mutating.
    """
    if isinstance(source, Image):
        return source.to_array()

    if isinstance(source, np.ndarray):
        arr = source
    elif isinstance(source, ImageData):
        arr = np.array(source.convert('RGBA'))
    else:
        raise ImageProcessingError(f"Unsupported frame source: {type(source).__name__}")

    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ImageProcessingError(f"Expected HxWx3 or HxWx4 pixels, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    return arr
