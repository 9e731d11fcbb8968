"""Core domain entities, color tables and constants."""

from .entities import (
    PixelBuffer, NormalizedBox, Detection, BandCountMode, BandSequence,
    ResistanceReading, ScanSuccess, ScanFailure, ScanResult, FailureReason, RGB
)
from .colors import ColorLabel, ColorCode, COLOR_CODES, MODEL_CLASS_ORDER, parse_color
from .exceptions import ApplicationError, ConfigError, ModelError, ImageLoadError, ValidationError, DecodeError
from .constants import APP_NAME, VERSION, INPUT_SIZE, SUPPORTED_IMAGE_FORMATS

__all__ = [
    "PixelBuffer", "NormalizedBox", "Detection", "BandCountMode", "BandSequence",
    "ResistanceReading", "ScanSuccess", "ScanFailure", "ScanResult", "FailureReason", "RGB",
    "ColorLabel", "ColorCode", "COLOR_CODES", "MODEL_CLASS_ORDER", "parse_color",
    "ApplicationError", "ConfigError", "ModelError", "ImageLoadError", "ValidationError", "DecodeError",
    "APP_NAME", "VERSION", "INPUT_SIZE", "SUPPORTED_IMAGE_FORMATS"
]
