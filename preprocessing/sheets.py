"""Sensor sheet specifications shared by training and on-device preprocessing."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

ACCELEROMETER = "Accelerometer"
GYROSCOPE = "Gyroscope"
GRAVITY = "Gravity"
ORIENTATION = "Orientation"

ACCELERATION_COLUMNS = [
    "Acceleration x (m/s^2)",
    "Acceleration y (m/s^2)",
    "Acceleration z (m/s^2)",
]
GYROSCOPE_COLUMNS = [
    "Gyroscope x (rad/s)",
    "Gyroscope y (rad/s)",
    "Gyroscope z (rad/s)",
]
ORIENTATION_COLUMNS = [
    "w", "x", "y", "z",
    "Direct (°)", "Yaw (°)", "Pitch (°)", "Roll (°)",
]

MOTION_PCA_KEY = "df_motion_pca"
ORIENTATION_KEY = "df_orientation_bucketed"

# Order matters: it is the order in which character replacements are applied
_SANITIZE_RULES = [
    (" ", "_"),
    ("(", ""),
    (")", ""),
    ("°", "deg"),
    ("/", "_per_"),
    ("^", "pow"),
    ("µ", "micro"),
]


@dataclass(frozen=True)
class MagnitudeSpec:
    """Euclidean norm derived from a set of axis columns."""

    output_column: str
    axis_columns: List[str]


@dataclass(frozen=True)
class SensorSheetSpec:
    """
    Description of one sensor sheet as it was bucketed during training.

    Attributes:
        sheet_name: Name of the raw sensor sheet (e.g. "Accelerometer")
        key: Name of the bucketed frame, used as the scaling/feature prefix
        base_columns: Columns averaged inside each bucket
        magnitude: Optional derived magnitude column
    """

    sheet_name: str
    key: str
    base_columns: List[str]
    magnitude: Optional[MagnitudeSpec] = None


def _with_magnitude(sheet_name: str, key: str, columns: List[str],
                    magnitude_column: str) -> SensorSheetSpec:
    return SensorSheetSpec(
        sheet_name=sheet_name,
        key=key,
        base_columns=list(columns),
        magnitude=MagnitudeSpec(magnitude_column, list(columns)),
    )


DEFAULT_SPECS: Dict[str, SensorSheetSpec] = {
    ACCELEROMETER: _with_magnitude(
        ACCELEROMETER, "df_accelerometer_bucketed",
        ACCELERATION_COLUMNS, "accelerometer_magnitude"
    ),
    GYROSCOPE: _with_magnitude(
        GYROSCOPE, "df_gyroscope_bucketed",
        GYROSCOPE_COLUMNS, "gyroscope_magnitude"
    ),
    ORIENTATION: SensorSheetSpec(
        sheet_name=ORIENTATION,
        key=ORIENTATION_KEY,
        base_columns=list(ORIENTATION_COLUMNS),
    ),
    GRAVITY: _with_magnitude(
        GRAVITY, "df_gravity_bucketed",
        ACCELERATION_COLUMNS, "gravity_magnitude"
    ),
}

# Streams that feed the motion PCA, in the order the projection was fitted
MOTION_SHEETS = [ACCELEROMETER, GYROSCOPE, GRAVITY]


def resolve_specs(sheet_names: Iterable[str]) -> List[SensorSheetSpec]:
    """
    Resolve configured sheet names to their specifications.

    Unknown names are skipped, mirroring how the training notebook only
    bucketed the sheets it knew about.

    Args:
        sheet_names: Sheet names from the feature bundle

    Returns:
        Specifications in configuration order
    """
    return [DEFAULT_SPECS[name] for name in sheet_names if name in DEFAULT_SPECS]


def sanitize_column_name(column: str) -> str:
    """Turn a sheet column header into the identifier used in feature names."""
    for source, target in _SANITIZE_RULES:
        column = column.replace(source, target)
    return column
