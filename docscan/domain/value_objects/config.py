"""Configuration value objects with validation."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Mapping

import pydantic
from pydantic import BaseModel, Field, model_validator

from ...config import DETECTION_CONFIG, DetectionConfig
from ...exceptions import ValidationError


class ColorMode(str, Enum):
    """Output color modes for document enhancement."""
    COLOR = "color"
    GRAYSCALE = "grayscale"
    BW = "bw"


class EnhancementOptions(BaseModel):
    """Scan-style enhancement settings.

    Every field is required; the engine never fills in a default.
    Brightness and contrast are percentages where 100 is neutral.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    mode: ColorMode
    brightness: float = Field(ge=0, le=200)
    contrast: float = Field(ge=0, le=200)
    sharpen: bool
    remove_background: bool

    @classmethod
    def parse(cls, data: EnhancementOptions | Mapping[str, Any]) -> EnhancementOptions:
        """Validate a mapping into options, raising the engine's ValidationError."""
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            errors = e.errors()
            field = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else None
            raise ValidationError(f"Invalid enhancement options: {e}", field=field) from e

    @classmethod
    def neutral(cls, mode: ColorMode = ColorMode.COLOR) -> EnhancementOptions:
        """Options that leave a color image unchanged."""
        return cls(
            mode=mode,
            brightness=100,
            contrast=100,
            sharpen=False,
            remove_background=False,
        )


class ScanConfig(BaseModel):
    """Scanning session configuration with validation."""

    model_config = {"validate_assignment": False}

    # Detection
    analysis_width: int = Field(default=DETECTION_CONFIG.analysis_width, ge=16, le=4096)
    edge_threshold: int = Field(default=DETECTION_CONFIG.edge_threshold, ge=0, le=255)
    min_area_ratio: float = Field(default=DETECTION_CONFIG.min_area_ratio, ge=0.0, le=1.0)
    max_area_ratio: float = Field(default=DETECTION_CONFIG.max_area_ratio, ge=0.0, le=1.0)

    # Stability
    stability_threshold: int = Field(default=DETECTION_CONFIG.stability_threshold, ge=1, le=100)
    stability_tolerance: float = Field(default=DETECTION_CONFIG.stability_tolerance, gt=0)

    # Capture
    correct_perspective: bool = True
    enhancement: EnhancementOptions | None = None

    @model_validator(mode='after')
    def check_area_bounds(self) -> ScanConfig:
        """Reject an empty area window."""
        if self.min_area_ratio >= self.max_area_ratio:
            raise ValueError(
                f"min_area_ratio ({self.min_area_ratio}) must be below "
                f"max_area_ratio ({self.max_area_ratio})"
            )
        return self

    def to_detection_config(self) -> DetectionConfig:
        """Overlay the session tunables on the reference constants."""
        return dataclasses.replace(
            DETECTION_CONFIG,
            analysis_width=self.analysis_width,
            edge_threshold=self.edge_threshold,
            min_area_ratio=self.min_area_ratio,
            max_area_ratio=self.max_area_ratio,
            stability_threshold=self.stability_threshold,
            stability_tolerance=self.stability_tolerance,
        )


__all__ = [
    'ColorMode',
    'EnhancementOptions',
    'ScanConfig',
]
