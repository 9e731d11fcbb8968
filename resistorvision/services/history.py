"""Bounded history of finished readings, newest first."""
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from ..core.entities import BandCountMode, BandSequence, ResistanceReading, ScanSuccess


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    colors: BandSequence
    band_count_mode: BandCountMode
    confidence: float
    timestamp: float
    ohms: float
    tolerance_percent: Optional[float]


class DetectionHistory:
    """Keeps the current scan result and the last ``max_entries`` readings."""

    def __init__(self, max_entries: int = 10):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: Deque[HistoryEntry] = deque(maxlen=max_entries)
        self._current: Optional[ScanSuccess] = None

    @property
    def current(self) -> Optional[ScanSuccess]:
        return self._current

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def add(self, result: ScanSuccess, reading: ResistanceReading,
            timestamp: Optional[float] = None) -> HistoryEntry:
        self._current = result
        entry = HistoryEntry(
            colors=result.colors,
            band_count_mode=result.band_count_mode,
            confidence=result.mean_confidence,
            timestamp=time.time() if timestamp is None else timestamp,
            ohms=reading.ohms,
            tolerance_percent=reading.tolerance_percent,
        )
        self._entries.appendleft(entry)
        return entry

    def clear_current(self) -> None:
        self._current = None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
