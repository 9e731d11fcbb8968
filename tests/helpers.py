"""Builders for synthetic model outputs and a canned-output backend."""
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from resistorvision.backends.base_backend import BaseBackend
from resistorvision.core.colors import ColorLabel, MODEL_CLASS_ORDER
from resistorvision.core.entities import Detection, NormalizedBox, PixelBuffer
from resistorvision.core.exceptions import ModelError

# (center_x, center_y, width, height, class_id or None, confidence)
Proposal = Tuple[float, float, float, float, Optional[int], float]


def make_output(num_proposals: int, num_classes: int, proposals: Iterable[Proposal]) -> np.ndarray:
    """Build a flat channel-major head output with the given proposals first."""
    channels = 4 + (num_classes if num_classes > 0 else 1)
    rows = np.zeros((channels, num_proposals), dtype=np.float32)
    for i, (cx, cy, w, h, class_id, conf) in enumerate(proposals):
        rows[0:4, i] = (cx, cy, w, h)
        rows[4 + (class_id or 0), i] = conf
    return rows.reshape(-1)


def class_id_of(color: ColorLabel) -> int:
    return MODEL_CLASS_ORDER.index(color)


def make_detection(center_x: float, confidence: float = 0.9, color: Optional[ColorLabel] = None,
                   center_y: float = 0.5, width: float = 0.05, height: float = 0.5) -> Detection:
    return Detection(box=NormalizedBox(center_x, center_y, width, height),
                     confidence=confidence, color=color)


class FakeBackend(BaseBackend):
    """Backend returning canned outputs and recording the buffers it saw."""

    def __init__(self, outputs: Sequence[np.ndarray] = (), error: Optional[Exception] = None):
        super().__init__({})
        self.outputs = list(outputs)
        self.error = error
        self.calls = []
        self.is_loaded = True

    def load_model(self, model_path: str) -> bool:
        self.is_loaded = True
        return True

    def infer(self, buffer: PixelBuffer) -> np.ndarray:
        self.calls.append(buffer)
        if self.error is not None:
            raise self.error
        if not self.outputs:
            raise ModelError("FakeBackend has no output left")
        return self.outputs.pop(0)

    def get_model_info(self):
        return {'backend': 'fake'}

    def get_supported_formats(self):
        return ['.fake']

    def validate_model(self, model_path: str) -> bool:
        return True
