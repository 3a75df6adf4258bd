"""Streaming preprocessing that mirrors the training feature pipeline."""

from .bucketing import BucketAggregator
from .buffering import SampleBuffer, SensorSample
from .orientation import OrientationResolver
from .pca import MotionPcaParams, MotionPcaProjector
from .scaling import FeatureRange, MinMaxScaler
from .synchronization import StreamSynchronizer
from .windowing import RollingStatsComputer

__all__ = ["SampleBuffer", "SensorSample", "BucketAggregator", "FeatureRange",
           "MinMaxScaler", "OrientationResolver", "MotionPcaParams",
           "MotionPcaProjector", "RollingStatsComputer", "StreamSynchronizer"]
