"""Classical (model-free) band reading from RGB swatches.

The resistor body is assumed to sit in a known rectangle of the buffer. It
is split into evenly spaced band slots, each slot is averaged to one RGB
sample and the sample is named by the centroid classifier.
"""
import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from ..core.colors import ColorLabel
from ..core.entities import RGB, BandCountMode, BandSequence, PixelBuffer
from ..core.exceptions import ValidationError
from ..utils.geometry import clamp, round_half_up
from .band_classifier import BandColorClassifier, CentroidColorClassifier

logger = logging.getLogger(__name__)

AUTO_CONTRAST = 1.2
AUTO_SATURATION = 1.1
RETRY_CONTRAST = 1.5


@dataclass(frozen=True, slots=True)
class Region:
    """Pixel rectangle, top-left origin."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class ColorCalibration:
    brightness: float = 0.0  # -1.0 to 1.0
    contrast: float = 1.0    # 0.0 to 2.0
    saturation: float = 1.0  # 0.0 to 2.0


@dataclass(frozen=True, slots=True)
class SwatchResult:
    colors: BandSequence
    samples: Tuple[RGB, ...]
    unrecognized: Optional[RGB] = None

    @property
    def success(self) -> bool:
        return self.unrecognized is None

    @property
    def message_key(self) -> str:
        return "detected_bands" if self.success else "unrecognized_color"


def average_color(buffer: PixelBuffer, x: int, y: int, width: int, height: int) -> Optional[RGB]:
    """Mean RGB (0-255) of a pixel rectangle, clipped to the buffer.

    Returns None when nothing of the rectangle lies inside the buffer.
    """
    side = buffer.side
    x1, y1 = clamp(x, 0, side), clamp(y, 0, side)
    x2, y2 = clamp(x + width, 0, side), clamp(y + height, 0, side)
    if x2 <= x1 or y2 <= y1:
        return None

    mean = buffer.data[y1:y2, x1:x2].reshape(-1, 3).mean(axis=0) * 255.0
    r, g, b = (int(clamp(round_half_up(float(c)), 0, 255)) for c in mean)
    return (r, g, b)


def segment_band_regions(bounds: Region, band_count: int) -> List[Region]:
    """Split the resistor body into ``band_count`` band slots.

    The body is divided into ``band_count + 2`` equal columns; the outer
    two are lead/end-cap margins. Each band takes the left half of its
    column.
    """
    slot = bounds.width / (band_count + 2)
    return [
        Region(x=bounds.x + slot * (i + 1), y=bounds.y, width=slot * 0.5, height=bounds.height)
        for i in range(band_count)
    ]


def calibrate_color(rgb: Sequence[float], calibration: ColorCalibration) -> RGB:
    """Apply contrast, then brightness, then saturation; clamp to 0-255."""
    channels = [((c / 255.0 - 0.5) * calibration.contrast + 0.5) * 255.0 for c in rgb]
    channels = [c + calibration.brightness * 255.0 for c in channels]
    gray = sum(channels) / 3.0
    channels = [gray + (c - gray) * calibration.saturation for c in channels]
    r, g, b = (int(clamp(round_half_up(c), 0, 255)) for c in channels)
    return (r, g, b)


def auto_calibrate(buffer: PixelBuffer, target_brightness: float = 128.0) -> ColorCalibration:
    """Pull the mean gray level to ``target_brightness`` and boost contrast and saturation slightly."""
    mean_brightness = float(buffer.data.mean()) * 255.0
    brightness = (target_brightness - mean_brightness) / 255.0
    return ColorCalibration(brightness=brightness, contrast=AUTO_CONTRAST, saturation=AUTO_SATURATION)


class SwatchAnalyzer:
    """Reads a resistor by sampling band slots and naming their colors."""

    def __init__(self, classifier: Optional[BandColorClassifier] = None,
                 calibration: Optional[ColorCalibration] = None):
        self.classifier = classifier or CentroidColorClassifier()
        self.calibration = calibration

    def classify_swatches(self, samples: Sequence[Sequence[float]]) -> SwatchResult:
        """Name each RGB sample; stops at the first unrecognized one."""
        return self._classify(samples, self.calibration)

    def _classify(self, samples: Sequence[Sequence[float]],
                  calibration: Optional[ColorCalibration]) -> SwatchResult:
        colors: List[ColorLabel] = []
        used: List[RGB] = []
        for sample in samples:
            rgb = tuple(int(c) for c in sample)
            if calibration is not None:
                rgb = calibrate_color(rgb, calibration)
            used.append(rgb)
            label = self.classifier.classify(rgb)
            if label is None:
                logger.info(f"Unrecognized band color RGB{rgb}")
                return SwatchResult(colors=tuple(colors), samples=tuple(used), unrecognized=rgb)
            colors.append(label)
        return SwatchResult(colors=tuple(colors), samples=tuple(used))

    def analyze(self, buffer: PixelBuffer, bounds: Region,
                band_count: Union[BandCountMode, int]) -> SwatchResult:
        """Sample ``band_count`` slots inside ``bounds`` and classify them.

        With a calibration set, a failed pass is retried once with the
        contrast raised to ``RETRY_CONTRAST``.

        Raises:
            ValidationError: If ``band_count`` is not 3-6 or a slot lies outside the buffer
        """
        try:
            band_count = BandCountMode(int(band_count))
        except ValueError:
            raise ValidationError(f"Band count must be 3, 4, 5 or 6, got {band_count}")

        samples: List[RGB] = []
        for region in segment_band_regions(bounds, int(band_count)):
            rgb = average_color(
                buffer,
                round_half_up(region.x), round_half_up(region.y),
                round_half_up(region.width), round_half_up(region.height),
            )
            if rgb is None:
                raise ValidationError(f"Band slot {region} lies outside the {buffer.side}px buffer")
            samples.append(rgb)

        result = self._classify(samples, self.calibration)
        if result.success or self.calibration is None or self.calibration.contrast >= RETRY_CONTRAST:
            return result

        logger.debug(f"Retrying swatch read with contrast {RETRY_CONTRAST}")
        return self._classify(samples, replace(self.calibration, contrast=RETRY_CONTRAST))


def default_body_region(side: int) -> Region:
    """Resistor body area used when no detector is available (centre strip)."""
    return Region(x=side * 0.2, y=side * 0.4, width=side * 0.6, height=side * 0.2)
