"""Replay of recorded sensor sessions as a sensor event source."""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from .events import SensorEvent, SensorKind

logger = logging.getLogger(__name__)

TIME_COLUMN = "Time (s)"


class RecordingReader:
    """
    Read a recorded session exported as one CSV file per sensor sheet.

    Expected files (phyphox export layout):
        Accelerometer.csv: Time (s), Acceleration x/y/z (m/s^2)
        Gyroscope.csv:     Time (s), Gyroscope x/y/z (rad/s)
        Gravity.csv:       Time (s), Acceleration x/y/z (m/s^2)
        Orientation.csv:   Time (s), x, y, z and optionally w
    """

    SHEETS: Dict[SensorKind, Tuple[str, List[str]]] = {
        SensorKind.ACCELEROMETER: (
            "Accelerometer.csv",
            ["Acceleration x (m/s^2)", "Acceleration y (m/s^2)", "Acceleration z (m/s^2)"],
        ),
        SensorKind.GYROSCOPE: (
            "Gyroscope.csv",
            ["Gyroscope x (rad/s)", "Gyroscope y (rad/s)", "Gyroscope z (rad/s)"],
        ),
        SensorKind.GRAVITY: (
            "Gravity.csv",
            ["Acceleration x (m/s^2)", "Acceleration y (m/s^2)", "Acceleration z (m/s^2)"],
        ),
        SensorKind.ROTATION_VECTOR: (
            "Orientation.csv",
            ["x", "y", "z"],
        ),
    }

    def __init__(self, recording_dir: Path, start_ns: int = 0):
        """
        Initialize recording reader.

        Args:
            recording_dir: Directory holding the exported CSV sheets
            start_ns: Device timestamp assigned to recording time zero
        """
        self.recording_dir = Path(recording_dir)
        self.start_ns = start_ns

        if not self.recording_dir.is_dir():
            raise FileNotFoundError(f"Recording directory not found: {self.recording_dir}")

    def read_sheet(self, kind: SensorKind) -> Optional[pd.DataFrame]:
        """
        Read one sensor sheet.

        Args:
            kind: Sensor kind to read

        Returns:
            Frame with the time column and axis columns, or None if the
            sheet was not recorded

        Raises:
            ValueError: If the sheet lacks a required column
        """
        filename, axis_columns = self.SHEETS[kind]
        path = self.recording_dir / filename
        if not path.exists():
            logger.warning(f"Sheet {filename} missing from {self.recording_dir}")
            return None

        df = pd.read_csv(path)
        df.columns = [str(column).strip() for column in df.columns]

        missing = [column for column in [TIME_COLUMN] + axis_columns if column not in df.columns]
        if missing:
            raise ValueError(f"{path.name} is missing columns: {missing}")

        columns = [TIME_COLUMN] + axis_columns
        if kind is SensorKind.ROTATION_VECTOR and "w" in df.columns:
            columns.append("w")

        return df[columns].dropna()

    def validate_recording(self) -> Tuple[bool, List[str]]:
        """
        Check that every sensor sheet exists and has its columns.

        Returns:
            Tuple of (is_valid, list of issues)
        """
        issues = []
        for kind, (filename, _) in self.SHEETS.items():
            try:
                if self.read_sheet(kind) is None:
                    issues.append(f"Missing sheet {filename}")
            except ValueError as e:
                issues.append(str(e))
        return len(issues) == 0, issues

    def iter_events(self) -> Iterator[SensorEvent]:
        """
        Yield every recorded reading in timestamp order.

        Readings sharing a timestamp keep the sheet order of ``SHEETS``.
        """
        frames = []
        for order, kind in enumerate(self.SHEETS):
            sheet = self.read_sheet(kind)
            if sheet is None or sheet.empty:
                continue
            values = sheet.drop(columns=[TIME_COLUMN]).to_numpy(dtype=float)
            frames.append(pd.DataFrame({
                'timestamp_ns': self.start_ns + np.round(
                    sheet[TIME_COLUMN].to_numpy(dtype=float) * 1e9
                ).astype(np.int64),
                'order': order,
                'kind': [kind] * len(values),
                'values': [tuple(row) for row in values],
            }))

        if not frames:
            return

        events = pd.concat(frames, ignore_index=True)
        events = events.sort_values(['timestamp_ns', 'order'])

        for row in events.itertuples(index=False):
            yield SensorEvent(row.kind, int(row.timestamp_ns), row.values)

    def count_events(self) -> int:
        total = 0
        for kind in self.SHEETS:
            sheet = self.read_sheet(kind)
            if sheet is not None:
                total += len(sheet)
        return total
