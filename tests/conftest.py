"""Shared fixtures: a small feature bundle and synthetic sensor sessions."""

import numpy as np
import pytest

from data_ingest import FeatureConfig, SensorKind
from preprocessing import FeatureRange, MotionPcaParams, RollingStatsComputer
from preprocessing.sheets import (ACCELERATION_COLUMNS, ACCELEROMETER, GRAVITY, GYROSCOPE,
                                  GYROSCOPE_COLUMNS, MOTION_PCA_KEY, ORIENTATION,
                                  ORIENTATION_KEY, sanitize_column_name)

CLASS_LABELS = ["leaning_back", "slouching", "straight"]
ORIENTATION_FEATURES = ["Pitch (°)", "Roll (°)"]
START_NS = 5_000_000_000


def motion_pca_columns():
    columns = []
    for key, axes in [("df_accelerometer_bucketed", ACCELERATION_COLUMNS),
                      ("df_gyroscope_bucketed", GYROSCOPE_COLUMNS),
                      ("df_gravity_bucketed", ACCELERATION_COLUMNS)]:
        columns.extend(f"{key}_{sanitize_column_name(column)}" for column in axes)
    return columns


@pytest.fixture
def feature_config():
    """Bundle whose two components pick accelerometer x and gyroscope z."""
    columns = motion_pca_columns()
    components = np.zeros((2, len(columns)))
    components[0, 0] = 1.0
    components[1, 5] = 1.0

    motion_pca = MotionPcaParams(
        columns=columns,
        components=components,
        mean=np.zeros(len(columns)),
        prefix="motion",
        n_components=2,
    )
    feature_columns = (
        RollingStatsComputer.feature_names(MOTION_PCA_KEY, motion_pca.output_columns)
        + RollingStatsComputer.feature_names(ORIENTATION_KEY, ORIENTATION_FEATURES)
    )

    return FeatureConfig(
        per_feature_min_max={
            "df_accelerometer_bucketed.Acceleration x (m/s^2)": FeatureRange(0.0, 2.0),
        },
        window_size=3,
        interval=0.5,
        trim_seconds=0.0,
        sheets_to_load=[ACCELEROMETER, GYROSCOPE, ORIENTATION, GRAVITY],
        class_labels=list(CLASS_LABELS),
        feature_columns=feature_columns,
        orientation_features=list(ORIENTATION_FEATURES),
        motion_pca=motion_pca,
    )


def sensor_events(duration_seconds=3.0, rate_hz=10, start_ns=START_NS):
    """
    Constant readings from every sensor: accelerometer x = 1.0,
    gyroscope z = 0.5, identity rotation.
    """
    readings = {
        SensorKind.ACCELEROMETER: (1.0, 0.0, 9.81),
        SensorKind.GYROSCOPE: (0.0, 0.0, 0.5),
        SensorKind.GRAVITY: (0.0, 0.0, 9.81),
        SensorKind.ROTATION_VECTOR: (0.0, 0.0, 0.0),
    }
    step_ns = 1_000_000_000 // rate_hz
    events = []
    for tick in range(int(duration_seconds * rate_hz)):
        timestamp_ns = start_ns + tick * step_ns
        for kind, values in readings.items():
            events.append((kind, timestamp_ns, values))
    return events


@pytest.fixture
def expected_vector():
    return [
        0.5, 0.0,  # motion pc1 mean/std (accelerometer x scaled into [0, 2])
        0.5, 0.0,  # motion pc2 mean/std (gyroscope z, unscaled)
        0.0, 0.0,  # pitch mean/std
        0.0, 0.0,  # roll mean/std
    ]


@pytest.fixture
def make_events():
    return sensor_events
