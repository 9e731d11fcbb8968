"""Utility functions package."""

from .geometry import iou, to_pixel_rect, clamp
from .image_utils import crop_and_resample, load_photo, normalize_frame

__all__ = [
    "iou", "to_pixel_rect", "clamp",
    "crop_and_resample", "load_photo", "normalize_frame"
]
