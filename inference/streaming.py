"""Real-time posture inference over live sensor events."""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from data_ingest.events import SensorEvent, SensorKind
from data_ingest.params_loader import FeatureConfig
from preprocessing import OrientationResolver, SampleBuffer
from preprocessing.buffering import BUFFER_DURATION_SECONDS
from preprocessing.sheets import (ACCELERATION_COLUMNS, ACCELEROMETER, GRAVITY,
                                  GYROSCOPE, GYROSCOPE_COLUMNS, ORIENTATION)

from .classifier_output import ClassifierOutputError, to_probability_vector
from .classifiers import Classifier
from .decision import DecisionPolicy
from .feature_builder import FeatureVectorBuilder
from .periodic import PeriodicTask
from .prediction import PosturePrediction

logger = logging.getLogger(__name__)

PredictionListener = Callable[[PosturePrediction], None]

# Sheet and axis columns each motion sensor kind is recorded under
MOTION_STREAMS: Dict[SensorKind, Tuple[str, List[str]]] = {
    SensorKind.ACCELEROMETER: (ACCELEROMETER, ACCELERATION_COLUMNS),
    SensorKind.GYROSCOPE: (GYROSCOPE, GYROSCOPE_COLUMNS),
    SensorKind.GRAVITY: (GRAVITY, ACCELERATION_COLUMNS),
}


class StreamingPipeline:
    """
    Streaming posture inference for one session at a time.

    Sensor events are buffered as they arrive; once per ``cycle_period``
    seconds the buffered samples are turned into a feature vector, scored
    by the classifier and reduced to a ``PosturePrediction``. Ingestion and
    processing cycles are serialized on the sample buffer's lock.
    """

    def __init__(self, config: FeatureConfig, classifier: Classifier,
                 policy: Optional[DecisionPolicy] = None,
                 retention_seconds: float = BUFFER_DURATION_SECONDS,
                 cycle_period: float = 1.0):
        """
        Initialize streaming pipeline.

        Args:
            config: Feature bundle exported by training
            classifier: Callable scoring a (1, n_features) float32 array
            policy: Decision policy; defaults to argmax with the 0.3 floor
            retention_seconds: Trailing window kept per sensor stream
            cycle_period: Seconds between processing cycles
        """
        self.config = config
        self.classifier = classifier
        self.policy = policy or DecisionPolicy(config.class_labels)
        self.cycle_period = cycle_period

        self.builder = FeatureVectorBuilder(config)
        self.buffer = SampleBuffer(self.builder.sheet_names, retention_seconds)
        self.orientation = OrientationResolver()

        self._listeners: List[PredictionListener] = []
        self._latest = PosturePrediction.collecting()
        self._task: Optional[PeriodicTask] = None
        self._stopped = False

    @property
    def latest_prediction(self) -> PosturePrediction:
        with self.buffer.lock:
            return self._latest

    @property
    def is_running(self) -> bool:
        return self._task is not None and self._task.is_running

    def add_listener(self, listener: PredictionListener):
        """Register a callback invoked with every new prediction."""
        with self.buffer.lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: PredictionListener):
        with self.buffer.lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def on_sensor_event(self, event: SensorEvent) -> bool:
        return self.ingest(event.kind, event.timestamp_ns, event.values)

    def ingest(self, kind: SensorKind, timestamp_ns: int,
               values: Sequence[float]) -> bool:
        """
        Record one sensor reading.

        Rotation-vector readings are converted to orientation rows
        (quaternion plus yaw/pitch/roll) before buffering.

        Args:
            kind: Sensor the reading comes from
            timestamp_ns: Device timestamp in nanoseconds
            values: Axis values as delivered by the sensor

        Returns:
            True if the reading was buffered
        """
        if kind == SensorKind.ROTATION_VECTOR:
            sheet = ORIENTATION
            row = self.orientation.to_row(values)
        elif kind in MOTION_STREAMS:
            sheet, columns = MOTION_STREAMS[kind]
            row = {column: float(value) for column, value in zip(columns, values)}
        else:
            logger.debug(f"Ignoring reading from unsupported sensor {kind}")
            return False

        with self.buffer.lock:
            if self._stopped:
                return False
            return self.buffer.record(sheet, timestamp_ns, row)

    def run_cycle(self) -> Optional[PosturePrediction]:
        """
        Run one processing cycle.

        Returns:
            The new prediction, or None when there was not enough
            synchronized data, the classifier output could not be parsed,
            or the pipeline has been stopped
        """
        with self.buffer.lock:
            if self._stopped:
                return None

            samples = {name: self.buffer.snapshot(name) for name in self.buffer.stream_names}
            vector = self.builder.build(samples)
            if vector is None:
                return None

            raw_output = self.classifier(vector.reshape(1, -1))
            try:
                probabilities = to_probability_vector(raw_output, self.policy.class_labels)
            except ClassifierOutputError as e:
                # Keep showing the previous prediction
                logger.warning(f"Skipping cycle: {e}")
                return None

            prediction = self.policy.decide(probabilities)
            self._latest = prediction

            for listener in list(self._listeners):
                listener(prediction)

        return prediction

    def start(self, schedule: bool = True):
        """
        Begin a session with empty buffers.

        Args:
            schedule: Run cycles on a background timer; when False the
                caller drives ``run_cycle`` itself (e.g. recording replay)
        """
        with self.buffer.lock:
            self.buffer.clear()
            self._latest = PosturePrediction.collecting()
            self._stopped = False

        if schedule and not self.is_running:
            self._task = PeriodicTask(self.run_cycle, self.cycle_period, name="posture-cycle")
            self._task.start()

        logger.info(
            f"Streaming pipeline started (cycle every {self.cycle_period}s, "
            f"{len(self.config.feature_columns)} features)"
        )

    def stop(self):
        """Cancel the processing timer and drop all buffered samples."""
        with self.buffer.lock:
            # A cycle waiting on the lock sees the flag and delivers nothing
            self._stopped = True
            task, self._task = self._task, None
            self.buffer.clear()
            self._latest = PosturePrediction.collecting()

        # Joined outside the lock so an in-flight cycle can finish
        if task is not None:
            task.cancel()

        logger.info("Streaming pipeline stopped")
