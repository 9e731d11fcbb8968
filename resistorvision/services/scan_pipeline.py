"""Two-stage photo pipeline: find the resistor, then read its bands.

Stage 1 runs the localization model on the whole buffer and keeps the best
resistor box. The buffer is cropped around that box and stretched back to
the model size. Stage 2 runs the band color model on the crop; its
detections are named, de-duplicated, ordered left to right and checked.

Every outcome is returned as a ``ScanSuccess`` or ``ScanFailure``; any error
raised while scanning is logged and reported as ``processing_error``.
"""
from __future__ import annotations
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..backends.base_backend import BaseBackend
from ..core import constants
from ..core.entities import (
    Detection, FailureReason, PixelBuffer, ScanFailure, ScanResult, ScanSuccess
)
from ..core.exceptions import ApplicationError
from ..core.logging_config import CorrelationContext
from ..utils.image_utils import crop_and_resample
from .band_classifier import ModelClassColorMapper
from .band_sequencer import sequence_bands
from .nms import non_max_suppression
from .tensor_decoder import decode_proposals

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineSettings:
    num_proposals: int = constants.NUM_PROPOSALS
    num_color_classes: int = constants.NUM_COLOR_CLASSES
    detection_confidence_threshold: float = constants.CONFIDENCE_THRESHOLD
    detection_iou_threshold: float = constants.IOU_THRESHOLD
    band_confidence_threshold: float = constants.CONFIDENCE_THRESHOLD
    band_iou_threshold: float = constants.IOU_THRESHOLD
    strict_class_mapping: bool = False

    @classmethod
    def from_config(cls, config) -> "PipelineSettings":
        return cls(
            num_proposals=config.num_proposals,
            num_color_classes=config.num_color_classes,
            detection_confidence_threshold=config.detection_confidence_threshold,
            detection_iou_threshold=config.detection_iou_threshold,
            band_confidence_threshold=config.band_confidence_threshold,
            band_iou_threshold=config.band_iou_threshold,
            strict_class_mapping=config.strict_class_mapping,
        )


class ResistorScanPipeline:
    """Runs the detector and band color models over one photo."""

    def __init__(self, detector: BaseBackend, classifier: BaseBackend,
                 settings: Optional[PipelineSettings] = None,
                 color_mapper: Optional[ModelClassColorMapper] = None):
        self.detector = detector
        self.classifier = classifier
        self.settings = settings or PipelineSettings()
        self.color_mapper = color_mapper or ModelClassColorMapper(strict=self.settings.strict_class_mapping)
        if self.color_mapper.num_classes != self.settings.num_color_classes:
            raise ValueError(
                f"Color mapper knows {self.color_mapper.num_classes} classes, "
                f"model emits {self.settings.num_color_classes}"
            )

    # -- stages -------------------------------------------------------------

    def locate_resistor(self, output: np.ndarray) -> Optional[Detection]:
        """Best resistor box from the localization output, or None."""
        candidates = decode_proposals(
            output, self.settings.num_proposals, num_classes=0,
            confidence_threshold=self.settings.detection_confidence_threshold,
        )
        survivors = non_max_suppression(candidates, self.settings.detection_iou_threshold)
        if not survivors:
            return None
        best = survivors[0]
        logger.debug(f"Resistor at {best.box} (confidence {best.confidence:.3f}, "
                     f"{len(candidates)} candidates)")
        return best

    def detect_bands(self, output: np.ndarray) -> list:
        """Named, de-duplicated band detections, most confident first."""
        candidates = decode_proposals(
            output, self.settings.num_proposals, num_classes=self.settings.num_color_classes,
            confidence_threshold=self.settings.band_confidence_threshold,
        )
        labelled = self.color_mapper.label_detections(candidates)
        return non_max_suppression(labelled, self.settings.band_iou_threshold)

    # -- full runs ----------------------------------------------------------

    def scan(self, buffer: PixelBuffer) -> ScanResult:
        """Process one photo synchronously."""
        with CorrelationContext():
            start = time.perf_counter()
            try:
                detector_output = self.detector.infer(buffer)
                resistor = self.locate_resistor(detector_output)
                if resistor is None:
                    return self._finish(ScanFailure(reason=FailureReason.RESISTOR_NOT_DETECTED), start)

                crop = crop_and_resample(buffer, resistor.box)
                classifier_output = self.classifier.infer(crop)
                return self._finish(self._read_bands(classifier_output, resistor), start)
            except ApplicationError as e:
                logger.exception("Scan failed")
                return self._finish(ScanFailure(reason=FailureReason.PROCESSING_ERROR, error=str(e)), start)
            except Exception as e:
                logger.exception(f"Unexpected error during scan: {type(e).__name__}")
                return self._finish(ScanFailure(reason=FailureReason.PROCESSING_ERROR, error=str(e)), start)

    async def scan_async(self, buffer: PixelBuffer) -> ScanResult:
        """Process one photo, running each model call in a worker thread.

        Cancelling the awaiting task abandons the request; a model call
        already running finishes in its thread and its result is dropped.
        """
        with CorrelationContext():
            start = time.perf_counter()
            try:
                detector_output = await asyncio.to_thread(self.detector.infer, buffer)
                resistor = self.locate_resistor(detector_output)
                if resistor is None:
                    return self._finish(ScanFailure(reason=FailureReason.RESISTOR_NOT_DETECTED), start)

                crop = crop_and_resample(buffer, resistor.box)
                classifier_output = await asyncio.to_thread(self.classifier.infer, crop)
                return self._finish(self._read_bands(classifier_output, resistor), start)
            except ApplicationError as e:
                logger.exception("Scan failed")
                return self._finish(ScanFailure(reason=FailureReason.PROCESSING_ERROR, error=str(e)), start)
            except Exception as e:
                logger.exception(f"Unexpected error during scan: {type(e).__name__}")
                return self._finish(ScanFailure(reason=FailureReason.PROCESSING_ERROR, error=str(e)), start)

    def _read_bands(self, classifier_output: Optional[np.ndarray], resistor: Detection) -> ScanResult:
        if classifier_output is None or np.size(classifier_output) == 0:
            return ScanFailure(reason=FailureReason.NO_COLOR_RESULTS, resistor_detection=resistor)

        bands = self.detect_bands(classifier_output)
        if not bands:
            return ScanFailure(reason=FailureReason.NO_BANDS_DETECTED, resistor_detection=resistor)

        sequenced = sequence_bands(bands)
        if not sequenced.sufficient:
            return ScanFailure(
                reason=FailureReason.NEED_MORE_BANDS,
                detection_count=sequenced.count,
                detections=sequenced.detections,
                resistor_detection=resistor,
            )

        return ScanSuccess(
            colors=sequenced.colors,
            band_count_mode=sequenced.mode,
            detections=sequenced.detections,
            resistor_detection=resistor,
        )

    @staticmethod
    def _finish(result: ScanResult, start: float) -> ScanResult:
        elapsed_ms = (time.perf_counter() - start) * 1000
        if result.success:
            colors = ", ".join(c.value for c in result.colors)
            logger.info(f"Scan succeeded in {elapsed_ms:.0f}ms: {int(result.band_count_mode)} bands ({colors})")
        else:
            logger.info(f"Scan failed in {elapsed_ms:.0f}ms: {result.reason.value} "
                        f"({result.detection_count} bands)")
        return result
