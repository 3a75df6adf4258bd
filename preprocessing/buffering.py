"""Bounded per-stream history of timestamped sensor readings."""

import bisect
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

BUFFER_DURATION_SECONDS = 60.0
NANOS_PER_SECOND = 1_000_000_000.0


@dataclass(frozen=True)
class SensorSample:
    """One reading, timed relative to the start of the session."""

    timestamp_sec: float
    values: Mapping[str, float] = field(default_factory=dict)


class SampleBuffer:
    """
    Sliding retention buffer for every sensor stream of a session.

    The first sample recorded on any stream fixes the session's time origin.
    Each stream is kept in ascending time order and holds only the samples
    within ``retention_seconds`` of its own most recent sample. A late reading
    that is already outside that window is rejected.

    All access goes through ``lock``, a re-entrant lock that the streaming
    pipeline also holds for the duration of a processing cycle.
    """

    def __init__(self, stream_names: Iterable[str],
                 retention_seconds: float = BUFFER_DURATION_SECONDS):
        """
        Initialize sample buffer.

        Args:
            stream_names: Names of the streams to keep (sheet names)
            retention_seconds: Trailing window kept per stream
        """
        self.retention_seconds = retention_seconds
        self.lock = threading.RLock()
        self._streams: Dict[str, Deque[SensorSample]] = {
            name: deque() for name in stream_names
        }
        self._latest: Dict[str, float] = {}
        self._origin_ns: Optional[int] = None

    @property
    def stream_names(self) -> List[str]:
        return list(self._streams)

    @property
    def origin_ns(self) -> Optional[int]:
        with self.lock:
            return self._origin_ns

    def record(self, stream: str, timestamp_ns: int,
               values: Mapping[str, float]) -> bool:
        """
        Record one reading.

        Args:
            stream: Stream (sheet) name
            timestamp_ns: Event timestamp in nanoseconds
            values: Column name to value mapping

        Returns:
            True if the sample was stored
        """
        samples = self._streams.get(stream)
        if samples is None:
            return False

        with self.lock:
            if self._origin_ns is None:
                self._origin_ns = timestamp_ns
            seconds = (timestamp_ns - self._origin_ns) / NANOS_PER_SECOND
            if seconds < 0:
                # Clock anomaly: reading predates the session origin
                return False

            latest = max(self._latest.get(stream, seconds), seconds)
            if seconds < latest - self.retention_seconds:
                return False

            sample = SensorSample(seconds, dict(values))
            if samples and samples[-1].timestamp_sec > seconds:
                index = bisect.bisect_right([s.timestamp_sec for s in samples], seconds)
                samples.insert(index, sample)
            else:
                samples.append(sample)
            self._latest[stream] = latest
            self._prune(samples, latest)
            return True

    def snapshot(self, stream: str) -> List[SensorSample]:
        """Return a copy of the samples currently held for a stream."""
        with self.lock:
            return list(self._streams.get(stream, ()))

    def __len__(self) -> int:
        with self.lock:
            return sum(len(samples) for samples in self._streams.values())

    def clear(self):
        """Drop every stored sample and forget the session origin."""
        with self.lock:
            for samples in self._streams.values():
                samples.clear()
            self._latest.clear()
            self._origin_ns = None
        logger.debug("Cleared sample buffers")

    def _prune(self, samples: Deque[SensorSample], latest: float):
        cutoff = latest - self.retention_seconds
        while samples and samples[0].timestamp_sec < cutoff:
            samples.popleft()
