"""Decode raw detection-head output into Detection objects.

Both models emit one flat, channel-major array: all x-centers first, then
all y-centers, widths, heights, and finally one row per class score (a
single confidence row for the localization model). Proposal ``i`` of
channel ``k`` lives at ``i + k * num_proposals``.
"""
import logging
from typing import List, Sequence, Union

import numpy as np

from ..core.constants import CONFIDENCE_THRESHOLD
from ..core.entities import Detection, NormalizedBox

logger = logging.getLogger(__name__)

ArrayLike = Union[np.ndarray, Sequence[float]]


def _as_channel_rows(output: ArrayLike, num_proposals: int, num_channels: int) -> np.ndarray:
    """Reshape ``output`` to (channels, proposals), zero-filling what is missing."""
    expected = num_proposals * num_channels
    flat = np.asarray(output, dtype=np.float64).reshape(-1)

    if flat.size < expected:
        logger.warning(f"Model output has {flat.size} values, expected {expected}; padding with zeros")
        padded = np.zeros(expected, dtype=np.float64)
        padded[:flat.size] = flat
        flat = padded
    elif flat.size > expected:
        flat = flat[:expected]

    # NaN and infinities read as 0, the same as missing values
    flat = np.where(np.isfinite(flat), flat, 0.0)
    return flat.reshape(num_channels, num_proposals)


def decode_proposals(
    output: ArrayLike,
    num_proposals: int,
    num_classes: int = 0,
    confidence_threshold: float = CONFIDENCE_THRESHOLD,
) -> List[Detection]:
    """Turn a flat proposal tensor into detections above the threshold.

    Args:
        output: Flat model output, ``num_proposals * (4 + max(num_classes, 1))`` values
        num_proposals: Number of proposals the head emits
        num_classes: 0 for a localization-only head (one confidence row),
            otherwise the number of class score rows
        confidence_threshold: Proposals must score strictly above this

    Returns:
        Detections in no particular order. ``class_id`` is None for a
        localization head, else the first class with the highest score.
        Never raises for short or malformed output.
    """
    if num_proposals <= 0 or num_classes < 0:
        return []

    score_rows = num_classes if num_classes > 0 else 1
    rows = _as_channel_rows(output, num_proposals, 4 + score_rows)
    boxes = rows[:4]
    scores = rows[4:]

    if num_classes == 0:
        confidences = scores[0]
        class_ids = None
    else:
        class_ids = np.argmax(scores, axis=0)
        confidences = scores[class_ids, np.arange(num_proposals)]

    keep = np.flatnonzero(confidences > confidence_threshold)

    detections = [
        Detection(
            box=NormalizedBox(
                center_x=float(boxes[0, i]),
                center_y=float(boxes[1, i]),
                width=float(boxes[2, i]),
                height=float(boxes[3, i]),
            ),
            confidence=float(confidences[i]),
            class_id=None if class_ids is None else int(class_ids[i]),
        )
        for i in keep
    ]
    logger.debug(f"Decoded {len(detections)}/{num_proposals} proposals above {confidence_threshold}")
    return detections
