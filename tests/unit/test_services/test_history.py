"""Unit tests for the reading history."""
import pytest

from resistorvision.core.colors import ColorLabel
from resistorvision.core.entities import BandCountMode, ScanSuccess
from resistorvision.services.history import DetectionHistory
from resistorvision.services.resistance_decoder import decode_resistance
from tests.helpers import make_detection

COLORS = (ColorLabel.BROWN, ColorLabel.BLACK, ColorLabel.RED, ColorLabel.GOLD)


def _success():
    detections = tuple(
        make_detection(x, confidence=c, color=color)
        for x, c, color in zip((0.2, 0.4, 0.6, 0.8), (0.9, 0.7, 0.8, 0.8), COLORS)
    )
    return ScanSuccess(colors=COLORS, band_count_mode=BandCountMode.FOUR, detections=detections)


def test_add_records_reading():
    history = DetectionHistory()
    result = _success()

    entry = history.add(result, decode_resistance(result.colors, result.band_count_mode), timestamp=12.5)

    assert history.current is result
    assert entry.ohms == pytest.approx(1000)
    assert entry.tolerance_percent == 5
    assert entry.confidence == pytest.approx(0.8)
    assert entry.timestamp == 12.5
    assert history.entries == [entry]


def test_newest_first_and_bounded():
    history = DetectionHistory(max_entries=2)
    result = _success()
    reading = decode_resistance(result.colors, result.band_count_mode)

    for ts in (1.0, 2.0, 3.0):
        history.add(result, reading, timestamp=ts)

    assert len(history) == 2
    assert [e.timestamp for e in history.entries] == [3.0, 2.0]


def test_clear():
    history = DetectionHistory()
    result = _success()
    history.add(result, decode_resistance(result.colors, 4))

    history.clear_current()
    assert history.current is None
    assert len(history) == 1

    history.clear()
    assert len(history) == 0


def test_requires_positive_size():
    with pytest.raises(ValueError):
        DetectionHistory(0)
