"""Image processing utilities."""

import logging
import os

import cv2
import numpy as np

from ..core.constants import CAPTURE_CROP_FRACTION, INPUT_SIZE, SUPPORTED_IMAGE_FORMATS
from ..core.entities import NormalizedBox, PixelBuffer
from ..core.exceptions import ImageLoadError
from .geometry import round_half_up, to_pixel_rect

logger = logging.getLogger(__name__)


def crop_and_resample(buffer: PixelBuffer, box: NormalizedBox) -> PixelBuffer:
    """Crop ``box`` out of ``buffer`` and stretch it back to the full side.

    Nearest-neighbour sampling: destination pixel (x, y) copies source pixel
    (x1 + floor(x / S * crop_w), y1 + floor(y / S * crop_h)). The aspect
    ratio is not preserved. A crop with no width or height gives an
    all-zero buffer.
    """
    side = buffer.side
    x1, y1, x2, y2 = to_pixel_rect(box, side)
    crop_w = x2 - x1
    crop_h = y2 - y1

    if crop_w <= 0 or crop_h <= 0:
        logger.debug(f"Degenerate crop {box} -> ({x1}, {y1}, {x2}, {y2}), returning empty buffer")
        return PixelBuffer.zeros(side)

    steps = np.arange(side, dtype=np.float64) / side
    src_x = x1 + np.floor(steps * crop_w).astype(np.intp)
    src_y = y1 + np.floor(steps * crop_h).astype(np.intp)
    resampled = buffer.data[src_y[:, np.newaxis], src_x[np.newaxis, :]]
    return PixelBuffer(resampled)


def normalize_frame(image: np.ndarray, crop_fraction: float = CAPTURE_CROP_FRACTION,
                    side: int = INPUT_SIZE, bgr: bool = True) -> PixelBuffer:
    """Turn a camera frame into the square model input.

    A centred square ``crop_fraction * width`` pixels wide is cut out of the
    frame (the on-screen guide area), resized to ``side`` and scaled to [0, 1].

    Args:
        image: HxWx3 (or HxWx4) uint8 frame
        crop_fraction: Share of the frame width kept, 0 < fraction <= 1
        side: Output side length
        bgr: True when the frame comes from OpenCV (BGR channel order)
    """
    if image is None or image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ImageLoadError(f"Expected an HxWx3 image, got {getattr(image, 'shape', None)}")
    if not 0.0 < crop_fraction <= 1.0:
        raise ValueError(f"crop_fraction must be in (0, 1], got {crop_fraction}")

    if image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR if bgr else cv2.COLOR_RGBA2RGB)

    height, width = image.shape[:2]
    crop_size = min(round_half_up(width * crop_fraction), width, height)
    if crop_size <= 0:
        raise ImageLoadError(f"Image of {width}x{height} is too small to crop")
    crop_x = round_half_up((width - crop_size) / 2)
    crop_y = round_half_up((height - crop_size) / 2)
    crop = image[crop_y:crop_y + crop_size, crop_x:crop_x + crop_size]

    resized = cv2.resize(crop, (side, side), interpolation=cv2.INTER_AREA)
    if bgr:
        resized = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
    return PixelBuffer(resized.astype(np.float32) / 255.0)


def load_photo(path: str, crop_fraction: float = CAPTURE_CROP_FRACTION,
               side: int = INPUT_SIZE) -> PixelBuffer:
    """Read a photo from disk and normalize it for the detection models."""
    _, ext = os.path.splitext(path.lower())
    if ext not in SUPPORTED_IMAGE_FORMATS:
        raise ImageLoadError(f"Unsupported image format '{ext}' for {path}")
    if not os.path.isfile(path):
        raise ImageLoadError(f"Image not found: {path}")

    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageLoadError(f"Could not decode image: {path}")

    logger.debug(f"Loaded {path} ({image.shape[1]}x{image.shape[0]})")
    return normalize_frame(image, crop_fraction=crop_fraction, side=side, bgr=True)
