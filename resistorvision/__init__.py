"""
Resistor band recognition: color codes, band detection pipeline and decoding.
"""

__version__ = "1.0.0"
__author__ = "Resistor Vision Team"

from .config.settings import Config, load_config, save_config
from .core.colors import ColorLabel, COLOR_CODES
from .core.entities import (
    PixelBuffer, NormalizedBox, Detection, BandCountMode, ResistanceReading,
    ScanSuccess, ScanFailure, FailureReason
)
from .services.resistance_decoder import decode_resistance, format_resistance

__all__ = [
    "Config", "load_config", "save_config",
    "ColorLabel", "COLOR_CODES",
    "PixelBuffer", "NormalizedBox", "Detection", "BandCountMode", "ResistanceReading",
    "ScanSuccess", "ScanFailure", "FailureReason",
    "decode_resistance", "format_resistance"
]
