"""Custom exceptions for the document scanning engine."""

from typing import Optional


class DocScanError(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(DocScanError):
    """Error in configuration or settings.

    Attributes:
        config_key: The configuration key that caused the error (if applicable)
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, error_code="CONFIG_ERROR")
        self.config_key = config_key


class ImageProcessingError(DocScanError):
    """Error loading, saving or converting an image.

    Attributes:
        image_path: Path to the image being processed when error occurred
    """

    def __init__(self, message: str, image_path: Optional[str] = None):
        super().__init__(message, error_code="IMAGE_ERROR")
        self.image_path = image_path

    def __str__(self) -> str:
        if self.image_path:
            return f"{super().__str__()} (image: {self.image_path})"
        return super().__str__()


class DetectionError(DocScanError):
    """Unexpected fault inside the detection pipeline.

    A frame without a document is not an error; this is raised only when
    the pipeline itself breaks.
    """

    def __init__(self, message: str):
        super().__init__(message, error_code="DETECTION_ERROR")


class PerspectiveCorrectionError(DocScanError):
    """Error warping a quadrilateral onto a rectangle."""

    def __init__(self, message: str):
        super().__init__(message, error_code="PERSPECTIVE_ERROR")


class ValidationError(DocScanError):
    """Error validating inputs or parameters.

    Attributes:
        field: The field that failed validation (if applicable)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, error_code="VALIDATION_ERROR")
        self.field = field
