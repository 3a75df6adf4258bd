"""Min-max scaling against the ranges fitted during training."""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureRange:
    """Closed ``[min, max]`` interval for one column."""

    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min


class MinMaxScaler:
    """Per-column min-max normalization keyed by ``"<stream_key>.<column>"``."""

    def __init__(self, ranges: Mapping[str, FeatureRange]):
        """
        Initialize scaler.

        Args:
            ranges: Fitted ranges from the feature bundle
        """
        self.ranges: Dict[str, FeatureRange] = dict(ranges)

        degenerate = [key for key, value in self.ranges.items() if value.span == 0.0]
        if degenerate:
            logger.debug(f"Zero-span ranges scale to 0: {degenerate}")

    def range_for(self, stream_key: str, column: str) -> Optional[FeatureRange]:
        return self.ranges.get(f"{stream_key}.{column}")

    def transform(self, stream_key: str, frame: pd.DataFrame) -> pd.DataFrame:
        """
        Scale every column of a bucketed frame.

        Columns without a configured range pass through unchanged.

        Args:
            stream_key: Bucketed frame key (e.g. "df_gravity_bucketed")
            frame: Bucketed data indexed by bucket time

        Returns:
            New scaled frame with the same index and columns
        """
        scaled = frame.copy()

        for column in frame.columns:
            feature_range = self.range_for(stream_key, column)
            if feature_range is None:
                continue
            if feature_range.span == 0.0:
                scaled[column] = 0.0
                continue
            clipped = np.clip(frame[column].to_numpy(dtype=float),
                              feature_range.min, feature_range.max)
            scaled[column] = (clipped - feature_range.min) / feature_range.span

        return scaled
