"""Sensor events as delivered by a sensor source."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class SensorKind(Enum):
    """Physical sensors the pipeline listens to."""

    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"
    GRAVITY = "gravity"
    ROTATION_VECTOR = "rotation_vector"


@dataclass(frozen=True)
class SensorEvent:
    """One reading: sensor kind, device timestamp in nanoseconds, axis values."""

    kind: SensorKind
    timestamp_ns: int
    values: Tuple[float, ...]
