"""Time-bucketing of raw sensor samples."""

import logging
from typing import List, Sequence

import numpy as np
import pandas as pd

from .buffering import SensorSample
from .sheets import SensorSheetSpec

logger = logging.getLogger(__name__)

TIME_BUCKET = "time_bucket"


class BucketAggregator:
    """Average raw samples into fixed-width time buckets."""

    def __init__(self, interval: float, trim_seconds: float = 0.0):
        """
        Initialize bucket aggregator.

        Args:
            interval: Bucket width in seconds
            trim_seconds: Startup period discarded from every stream
        """
        if interval <= 0:
            raise ValueError(f"Bucket interval must be positive, got {interval}")

        self.interval = interval
        self.trim_seconds = trim_seconds

    def bucket_keys(self, timestamps: np.ndarray) -> np.ndarray:
        """
        Quantize timestamps onto the bucket grid.

        ``np.round`` rounds half to even, as pandas did when the training
        frames were bucketed.
        """
        return np.round(timestamps / self.interval) * self.interval

    def aggregate(self, samples: Sequence[SensorSample],
                  spec: SensorSheetSpec) -> pd.DataFrame:
        """
        Build the bucketed frame for one stream.

        Args:
            samples: Raw samples of the stream, in any order
            spec: Sheet specification of the stream

        Returns:
            Frame indexed by bucket time (ascending), one column per base
            column plus the optional magnitude column. Empty if no complete
            bucket exists yet.
        """
        columns = list(spec.base_columns)
        if spec.magnitude is not None:
            columns.append(spec.magnitude.output_column)

        if not samples:
            return self._empty(columns)

        timestamps = np.array([sample.timestamp_sec for sample in samples], dtype=float)
        start_threshold = timestamps.min() + self.trim_seconds
        kept = [sample for sample in samples if sample.timestamp_sec >= start_threshold]
        if not kept:
            return self._empty(columns)

        raw = pd.DataFrame(
            [dict(sample.values) for sample in kept],
            columns=spec.base_columns,
        ).astype(float)
        raw[TIME_BUCKET] = self.bucket_keys(
            np.array([sample.timestamp_sec for sample in kept], dtype=float)
        )

        # mean() skips missing values; a column with no values becomes NaN
        bucketed = raw.groupby(TIME_BUCKET, sort=True)[spec.base_columns].mean()
        bucketed = bucketed.dropna(subset=spec.base_columns, how='any')

        if spec.magnitude is not None and not bucketed.empty:
            axes = bucketed[spec.magnitude.axis_columns].to_numpy(dtype=float)
            bucketed = bucketed.assign(
                **{spec.magnitude.output_column: self._compute_magnitude(axes)}
            )

        return bucketed.sort_index()

    def _compute_magnitude(self, data: np.ndarray) -> np.ndarray:
        """
        Compute magnitude of 3D vectors.

        Args:
            data: Array of shape (n_buckets, n_axes)

        Returns:
            Magnitude array of shape (n_buckets,)
        """
        return np.sqrt(np.sum(data ** 2, axis=1))

    def _empty(self, columns: List[str]) -> pd.DataFrame:
        frame = pd.DataFrame(columns=columns, dtype=float)
        frame.index.name = TIME_BUCKET
        return frame
