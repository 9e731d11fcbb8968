"""Order band detections left to right and check there are enough of them."""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..core.constants import MAX_BANDS, MIN_BANDS
from ..core.entities import BandCountMode, BandSequence, Detection


@dataclass(frozen=True, slots=True)
class BandSequencingResult:
    detections: Tuple[Detection, ...]
    mode: Optional[BandCountMode]

    @property
    def sufficient(self) -> bool:
        return self.mode is not None

    @property
    def count(self) -> int:
        return len(self.detections)

    @property
    def colors(self) -> BandSequence:
        return tuple(d.color for d in self.detections if d.color is not None)


def sequence_bands(detections: Iterable[Detection]) -> BandSequencingResult:
    """Sort surviving bands by x-center.

    More than six bands are cut down to the six most confident before the
    sort. Fewer than three give ``mode=None`` with the partial ordering.
    """
    bands = list(detections)
    if len(bands) > MAX_BANDS:
        bands = sorted(bands, key=lambda d: d.confidence, reverse=True)[:MAX_BANDS]

    ordered = tuple(sorted(bands, key=lambda d: d.box.center_x))
    mode = BandCountMode(len(ordered)) if len(ordered) >= MIN_BANDS else None
    return BandSequencingResult(detections=ordered, mode=mode)
