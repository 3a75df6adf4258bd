"""Start/stop lifecycle of a posture session."""

import logging
import threading
import time
from typing import Callable, Optional

from inference.prediction import PosturePrediction
from inference.streaming import StreamingPipeline

from .aggregator import SessionAggregator
from .results import SessionResult

logger = logging.getLogger(__name__)


class SessionTracker:
    """
    Run the streaming pipeline for one session and summarize it on stop.

    Elapsed time is read from ``clock`` (seconds, monotonic) and truncated
    to whole seconds.
    """

    def __init__(self, pipeline: StreamingPipeline,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize session tracker.

        Args:
            pipeline: Pipeline producing the predictions
            clock: Time source in seconds
        """
        self.pipeline = pipeline
        self.clock = clock
        self.aggregator = SessionAggregator()

        self._lock = threading.Lock()
        self._lifecycle_lock = threading.Lock()
        self._started_at: Optional[float] = None
        self._current: Optional[PosturePrediction] = None
        self._result: Optional[SessionResult] = None

        pipeline.add_listener(self._on_prediction)

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    @property
    def current_prediction(self) -> Optional[PosturePrediction]:
        """Last recorded prediction of the running session."""
        return self._current

    @property
    def last_result(self) -> Optional[SessionResult]:
        return self._result

    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return max(0, int(self.clock() - self._started_at))

    def start(self, schedule: bool = True):
        """Start a new session; ignored while one is running."""
        with self._lifecycle_lock:
            with self._lock:
                if self.is_running:
                    return
                self.aggregator.reset()
                self._current = None
                self._result = None
                self._started_at = self.clock()

            self.pipeline.start(schedule=schedule)
        logger.info("Posture session started")

    def stop(self) -> Optional[SessionResult]:
        """
        Stop the running session.

        Concurrent calls are serialized; the result is computed once and
        every caller receives it.

        Returns:
            The session result; the previous result when no session is running
        """
        with self._lifecycle_lock:
            with self._lock:
                if not self.is_running:
                    return self._result
                elapsed = self.elapsed_seconds()
                self._started_at = None
                self._current = None

            # Not under _lock: the pipeline joins its cycle thread, whose
            # listener call takes _lock
            self.pipeline.stop()

            with self._lock:
                self._result = self.aggregator.summarize(elapsed)
                result = self._result

        logger.info(f"Posture session stopped after {elapsed}s")
        return result

    def _on_prediction(self, prediction: PosturePrediction):
        with self._lock:
            if not self.is_running:
                return
            if self.aggregator.append(prediction):
                self._current = prediction
