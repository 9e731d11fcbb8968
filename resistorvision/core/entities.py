"""Domain entities (data-only structures) used across services."""
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Optional, Tuple, Union

import numpy as np

from .colors import ColorLabel

RGB = Tuple[int, int, int]  # 0..255 per channel
BandSequence = Tuple[ColorLabel, ...]  # left to right


class PixelBuffer:
    """Square RGB image with float channels in [0, 1].

    The wrapped array is a private read-only copy; transforms build a new
    buffer instead of writing into this one.
    """

    __slots__ = ("_data",)

    def __init__(self, data: np.ndarray):
        arr = np.array(data, dtype=np.float32, copy=True)
        if arr.ndim != 3 or arr.shape[2] != 3 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"PixelBuffer needs a (S, S, 3) array, got {arr.shape}")
        arr.setflags(write=False)
        self._data = arr

    @classmethod
    def zeros(cls, side: int) -> "PixelBuffer":
        return cls(np.zeros((side, side, 3), dtype=np.float32))

    @classmethod
    def from_array(cls, data: np.ndarray) -> "PixelBuffer":
        return cls(data)

    @property
    def side(self) -> int:
        return int(self._data.shape[0])

    @property
    def data(self) -> np.ndarray:
        return self._data

    def to_blob(self) -> np.ndarray:
        """NCHW float32 batch of one, as fed to the models."""
        return np.ascontiguousarray(self._data.transpose(2, 0, 1)[np.newaxis, ...])

    def __repr__(self) -> str:
        return f"PixelBuffer(side={self.side})"


@dataclass(frozen=True, slots=True)
class NormalizedBox:
    center_x: float
    center_y: float
    width: float
    height: float

    def to_xyxy(self) -> Tuple[float, float, float, float]:
        half_w = self.width / 2.0
        half_h = self.height / 2.0
        return (self.center_x - half_w, self.center_y - half_h,
                self.center_x + half_w, self.center_y + half_h)

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)


@dataclass(frozen=True, slots=True)
class Detection:
    box: NormalizedBox
    confidence: float
    class_id: Optional[int] = None
    color: Optional[ColorLabel] = None

    def with_color(self, color: ColorLabel) -> "Detection":
        return replace(self, color=color)


class BandCountMode(IntEnum):
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6

    @property
    def significant_digits(self) -> int:
        return 2 if self <= BandCountMode.FOUR else 3

    @property
    def has_tolerance(self) -> bool:
        return self is not BandCountMode.THREE

    @property
    def has_temp_coeff(self) -> bool:
        return self is BandCountMode.SIX


@dataclass(frozen=True, slots=True)
class ResistanceReading:
    """Decoded value of a band sequence.

    The mode tags which optional fields can exist: a 3-band reading never
    carries a tolerance and only a 6-band reading carries a temperature
    coefficient.
    """
    ohms: float
    mode: BandCountMode
    tolerance_percent: Optional[float] = None
    temp_coeff_ppm: Optional[float] = None

    def __post_init__(self):
        if self.tolerance_percent is not None and not self.mode.has_tolerance:
            raise ValueError(f"{int(self.mode)}-band readings have no tolerance")
        if self.temp_coeff_ppm is not None and not self.mode.has_temp_coeff:
            raise ValueError(f"{int(self.mode)}-band readings have no temperature coefficient")

    def display(self) -> str:
        from ..services.resistance_decoder import format_resistance
        return format_resistance(self.ohms, self.tolerance_percent, self.temp_coeff_ppm)


class FailureReason(str, Enum):
    RESISTOR_NOT_DETECTED = "resistor_not_detected"
    NO_COLOR_RESULTS = "no_color_results"
    NO_BANDS_DETECTED = "no_bands_detected"
    NEED_MORE_BANDS = "need_more_bands"
    PROCESSING_ERROR = "processing_error"


@dataclass(frozen=True, slots=True)
class ScanSuccess:
    colors: BandSequence
    band_count_mode: BandCountMode
    detections: Tuple[Detection, ...] = ()
    resistor_detection: Optional[Detection] = None
    message_key: str = "detected_bands"

    success = True

    @property
    def detection_count(self) -> int:
        return len(self.detections)

    @property
    def mean_confidence(self) -> float:
        if not self.detections:
            return 0.0
        return sum(d.confidence for d in self.detections) / len(self.detections)


@dataclass(frozen=True, slots=True)
class ScanFailure:
    reason: FailureReason
    detection_count: int = 0
    detections: Tuple[Detection, ...] = ()
    resistor_detection: Optional[Detection] = None
    error: Optional[str] = None

    success = False

    @property
    def message_key(self) -> str:
        return self.reason.value


ScanResult = Union[ScanSuccess, ScanFailure]
