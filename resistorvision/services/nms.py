"""Greedy non-max suppression over normalized detections."""
from typing import Iterable, List

from ..core.constants import IOU_THRESHOLD
from ..core.entities import Detection
from ..utils.geometry import iou


def non_max_suppression(detections: Iterable[Detection],
                        iou_threshold: float = IOU_THRESHOLD) -> List[Detection]:
    """Drop detections overlapping a more confident one by more than ``iou_threshold``.

    The result is ordered by confidence, highest first. Quadratic in the
    number of inputs, which the confidence filter keeps small.
    """
    remaining = sorted(detections, key=lambda d: d.confidence, reverse=True)
    kept: List[Detection] = []

    while remaining:
        best = remaining.pop(0)
        kept.append(best)
        remaining = [d for d in remaining if iou(best.box, d.box) <= iou_threshold]

    return kept
