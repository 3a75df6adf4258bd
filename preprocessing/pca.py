"""Projection of synchronized motion buckets onto the fitted PCA basis."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .bucketing import TIME_BUCKET
from .sheets import SensorSheetSpec, sanitize_column_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MotionPcaParams:
    """
    PCA bundle fitted during training.

    Attributes:
        columns: Sanitized input names, ``"<stream_key>_<column>"``, in fit order
        components: Matrix of shape (n_components, len(columns))
        mean: Per-input mean removed before projection
        prefix: Output name prefix
        n_components: Number of retained components
    """

    columns: List[str]
    components: np.ndarray
    mean: np.ndarray
    prefix: str
    n_components: int

    @property
    def output_columns(self) -> List[str]:
        return [f"{self.prefix}_pc{index}" for index in range(1, self.n_components + 1)]


class MotionPcaProjector:
    """Mean-center and project accelerometer, gyroscope and gravity buckets."""

    def __init__(self, params: MotionPcaParams, sources: List[SensorSheetSpec]):
        """
        Initialize projector.

        Args:
            params: Fitted PCA bundle
            sources: Sheet specifications of the motion streams
        """
        self.params = params
        self.source_keys = [spec.key for spec in sources]
        self.column_lookup: Dict[str, Tuple[str, str]] = {
            f"{spec.key}_{sanitize_column_name(column)}": (spec.key, column)
            for spec in sources
            for column in spec.base_columns
        }

        unresolved = [name for name in params.columns if name not in self.column_lookup]
        if unresolved:
            logger.warning(f"PCA inputs without a motion source: {unresolved}")

    @property
    def output_columns(self) -> List[str]:
        return self.params.output_columns

    def project(self, raw_vector: np.ndarray) -> np.ndarray:
        """
        Project one raw input vector.

        Args:
            raw_vector: Inputs in ``params.columns`` order

        Returns:
            Component scores of shape (n_components,)
        """
        centered = np.asarray(raw_vector, dtype=float) - self.params.mean
        return self.params.components @ centered

    def transform(self, scaled: Mapping[str, pd.DataFrame]) -> Optional[pd.DataFrame]:
        """
        Project every bucket shared by all motion streams.

        Args:
            scaled: Scaled bucketed frames keyed by stream key

        Returns:
            Frame of component scores indexed by bucket time, empty when the
            streams share no bucket yet, or None when a motion stream is
            missing altogether.
        """
        frames = []
        for key in self.source_keys:
            frame = scaled.get(key)
            if frame is None or frame.empty:
                return None
            frames.append(frame)

        common = frames[0].index
        for frame in frames[1:]:
            common = common.intersection(frame.index)

        if common.empty:
            logger.debug("No common buckets across motion sources; skipping PCA projection")
            return self._empty()

        rows = {}
        for bucket in common.sort_values():
            raw_vector = self._raw_vector(scaled, bucket)
            if raw_vector is None:
                continue
            rows[bucket] = self.project(raw_vector)

        if not rows:
            return self._empty()

        projected = pd.DataFrame.from_dict(rows, orient='index',
                                           columns=self.output_columns)
        projected.index.name = TIME_BUCKET
        return projected

    def _raw_vector(self, scaled: Mapping[str, pd.DataFrame],
                    bucket: float) -> Optional[np.ndarray]:
        raw_vector = np.empty(len(self.params.columns))

        for index, name in enumerate(self.params.columns):
            lookup = self.column_lookup.get(name)
            if lookup is None:
                return None
            source_key, column = lookup
            frame = scaled[source_key]
            if column not in frame.columns:
                return None
            value = frame.at[bucket, column]
            if pd.isna(value):
                return None
            raw_vector[index] = value

        return raw_vector

    def _empty(self) -> pd.DataFrame:
        frame = pd.DataFrame(columns=self.output_columns, dtype=float)
        frame.index.name = TIME_BUCKET
        return frame
