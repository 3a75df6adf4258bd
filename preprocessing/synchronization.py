"""Alignment of rolling feature groups onto one output vector."""

import logging
from typing import Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class StreamSynchronizer:
    """Assemble the classifier input from the newest bucket all groups share."""

    def __init__(self, feature_columns: List[str]):
        """
        Initialize synchronizer.

        Args:
            feature_columns: Exact output vector order
        """
        self.feature_columns = list(feature_columns)

    def latest_common_bucket(self, groups: Mapping[str, pd.DataFrame]) -> Optional[float]:
        """Most recent bucket time present in every non-empty group."""
        indexes = [frame.index for frame in groups.values() if not frame.empty]
        if not indexes:
            return None

        common = indexes[0]
        for index in indexes[1:]:
            common = common.intersection(index)

        if common.empty:
            return None
        return common.max()

    def merge(self, groups: Mapping[str, pd.DataFrame], bucket: float) -> Dict[str, float]:
        """Combine every group's features at one bucket into a single lookup."""
        merged: Dict[str, float] = {}
        for frame in groups.values():
            if bucket in frame.index:
                merged.update(frame.loc[bucket].to_dict())
        return merged

    def assemble(self, groups: Mapping[str, pd.DataFrame]) -> Optional[np.ndarray]:
        """
        Build the ordered feature vector.

        Args:
            groups: Rolling feature frames keyed by group name

        Returns:
            float32 vector of ``len(feature_columns)`` values, or None when
            the groups are not yet synchronized or a feature is missing
        """
        if not self.feature_columns:
            logger.warning("No feature columns configured; cannot build vector")
            return None

        bucket = self.latest_common_bucket(groups)
        if bucket is None:
            logger.debug("No overlapping buckets across feature groups; waiting for synchronized samples")
            return None

        lookup = self.merge(groups, bucket)

        vector = np.empty(len(self.feature_columns), dtype=np.float32)
        for index, name in enumerate(self.feature_columns):
            value = lookup.get(name)
            if value is None:
                logger.debug(f"Missing feature {name} for bucket {bucket}")
                return None
            vector[index] = value

        return vector
