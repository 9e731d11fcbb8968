"""Band color classification strategies.

Two interchangeable ways of naming a band color:

* ``CentroidColorClassifier`` matches an averaged RGB sample against the
  reference centroids of the color table (swatch / manual path).
* ``ModelClassColorMapper`` maps the class index emitted by the band color
  model onto a label (photo path).
"""
import logging
import math
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from ..core.colors import COLOR_CODES, ColorLabel, MODEL_CLASS_ORDER
from ..core.entities import RGB, Detection
from ..core.exceptions import DecodeError

logger = logging.getLogger(__name__)


class BandColorClassifier(Protocol):
    def classify(self, sample) -> Optional[ColorLabel]:
        ...


def color_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two RGB triples."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


class CentroidColorClassifier:
    """Nearest-centroid classifier with a per-color acceptance radius."""

    def __init__(self, palette: Optional[Iterable[Tuple[ColorLabel, RGB, float]]] = None):
        if palette is None:
            palette = [(label, code.centroid, code.radius) for label, code in COLOR_CODES.items()]
        self.palette: List[Tuple[ColorLabel, RGB, float]] = list(palette)

    def classify(self, sample: Sequence[float]) -> Optional[ColorLabel]:
        """Return the closest color whose radius contains ``sample``, else None.

        Ties keep the color listed first.
        """
        best_label: Optional[ColorLabel] = None
        best_distance = math.inf

        for label, centroid, radius in self.palette:
            distance = color_distance(sample, centroid)
            if distance < radius and distance < best_distance:
                best_distance = distance
                best_label = label

        return best_label


class ModelClassColorMapper:
    """Maps band model class indices to labels."""

    def __init__(self, class_order: Sequence[ColorLabel] = MODEL_CLASS_ORDER,
                 fallback: ColorLabel = ColorLabel.BROWN, strict: bool = False):
        self.class_order = tuple(class_order)
        self.fallback = fallback
        self.strict = strict

    @property
    def num_classes(self) -> int:
        return len(self.class_order)

    def classify(self, class_id: Optional[int]) -> ColorLabel:
        """Label for ``class_id``; unknown ids give the fallback unless strict.

        Raises:
            DecodeError: In strict mode, for ids outside the class table
        """
        if class_id is not None and 0 <= class_id < len(self.class_order):
            return self.class_order[class_id]

        if self.strict:
            raise DecodeError(f"Class id {class_id} outside the {len(self.class_order)}-color table")
        logger.warning(f"Unknown band class id {class_id}, using {self.fallback.value}")
        return self.fallback

    def label_detections(self, detections: Iterable[Detection]) -> List[Detection]:
        return [d.with_color(self.classify(d.class_id)) for d in detections]
