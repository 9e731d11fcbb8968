"""Geometry and bounding box utilities."""

import math
from typing import Tuple

from ..core.entities import NormalizedBox


def clamp(value, low, high):
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (``round`` would go to even)."""
    return int(math.floor(value + 0.5))


def iou(box_a: NormalizedBox, box_b: NormalizedBox) -> float:
    """Calculate Intersection over Union (IoU) for two center-format boxes."""
    ax1, ay1, ax2, ay2 = box_a.to_xyxy()
    bx1, by1, bx2, by2 = box_b.to_xyxy()
    inter_w = max(0.0, min(ax2, bx2) - max(ax1, bx1))
    inter_h = max(0.0, min(ay2, by2) - max(ay1, by1))
    inter_area = inter_w * inter_h
    if inter_area <= 0.0:
        return 0.0
    denom = box_a.area + box_b.area - inter_area
    if denom <= 0.0:
        return 0.0
    return inter_area / denom


def to_pixel_rect(box: NormalizedBox, side: int) -> Tuple[int, int, int, int]:
    """Map a normalized box onto a square image of ``side`` pixels.

    Returns (x1, y1, x2, y2) with every coordinate clamped to [0, side] and
    x2 >= x1, y2 >= y1. A box with no pixel extent yields x1 == x2 or y1 == y2.
    """
    center_x = round_half_up(box.center_x * side)
    center_y = round_half_up(box.center_y * side)
    width = max(0, round_half_up(box.width * side))
    height = max(0, round_half_up(box.height * side))

    x1 = clamp(center_x - width // 2, 0, side)
    y1 = clamp(center_y - height // 2, 0, side)
    x2 = clamp(x1 + width, x1, side)
    y2 = clamp(y1 + height, y1, side)
    return x1, y1, x2, y2
