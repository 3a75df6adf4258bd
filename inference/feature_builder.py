"""Recreates the training feature pipeline over buffered samples."""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from data_ingest.params_loader import FeatureConfig
from preprocessing import (BucketAggregator, MinMaxScaler, MotionPcaProjector,
                           RollingStatsComputer, SensorSample, StreamSynchronizer)
from preprocessing.sheets import (MOTION_PCA_KEY, MOTION_SHEETS, ORIENTATION_KEY,
                                  DEFAULT_SPECS, SensorSheetSpec, resolve_specs)

logger = logging.getLogger(__name__)


class FeatureVectorBuilder:
    """
    Bucket, scale, project, summarize and align buffered samples into the
    classifier's input vector.
    """

    def __init__(self, config: FeatureConfig,
                 specs: Optional[List[SensorSheetSpec]] = None):
        """
        Initialize feature builder.

        Args:
            config: Feature bundle exported by training
            specs: Sheet specifications; resolved from ``config.sheets_to_load``
                when omitted
        """
        self.config = config
        self.specs = specs if specs is not None else resolve_specs(config.sheets_to_load)

        self.aggregator = BucketAggregator(config.interval, config.trim_seconds)
        self.scaler = MinMaxScaler(config.per_feature_min_max)
        self.rolling = RollingStatsComputer(config.window_size, config.interval)
        self.synchronizer = StreamSynchronizer(config.feature_columns)

        self.projector = None
        if config.motion_pca is not None:
            self.projector = MotionPcaProjector(
                config.motion_pca, [DEFAULT_SPECS[name] for name in MOTION_SHEETS]
            )

    @property
    def sheet_names(self) -> List[str]:
        return [spec.sheet_name for spec in self.specs]

    def bucketize(self, samples_by_sheet: Mapping[str, Sequence[SensorSample]]
                  ) -> Optional[Dict[str, pd.DataFrame]]:
        """Bucket and scale every stream; None while any stream has no bucket yet."""
        scaled = {}
        for spec in self.specs:
            bucketed = self.aggregator.aggregate(samples_by_sheet.get(spec.sheet_name, []), spec)
            if bucketed.empty:
                logger.debug(f"No bucket rows for {spec.key}; waiting for more samples")
                return None
            scaled[spec.key] = self.scaler.transform(spec.key, bucketed)
        return scaled

    def feature_groups(self, scaled: Mapping[str, pd.DataFrame]) -> Dict[str, pd.DataFrame]:
        """
        Derive the per-group series the rolling statistics are computed on.

        Args:
            scaled: Scaled bucketed frames keyed by stream key

        Returns:
            Group key to series; empty when the motion projection has no rows
        """
        groups = {}

        if self.projector is not None:
            motion = self.projector.transform(scaled)
            if motion is None or motion.empty:
                logger.debug("Motion PCA rows empty; check motion sensor overlap")
                return {}
            groups[MOTION_PCA_KEY] = motion

        orientation_features = self.config.orientation_features
        orientation = scaled.get(ORIENTATION_KEY)
        if orientation_features and orientation is not None:
            rows = orientation.reindex(columns=orientation_features).dropna(how='any')
            if rows.empty:
                logger.debug("Orientation rows empty; waiting for pitch/roll coverage")
            else:
                groups[ORIENTATION_KEY] = rows
                snapshot = {key: round(float(value), 3) for key, value in rows.iloc[-1].items()}
                logger.debug(f"Latest orientation snapshot: {snapshot}")

        return groups

    def rolling_features(self, groups: Mapping[str, pd.DataFrame]) -> Dict[str, pd.DataFrame]:
        features = {}
        for key, series in groups.items():
            if key == MOTION_PCA_KEY:
                columns = self.projector.output_columns
            else:
                columns = self.config.orientation_features
            features[key] = self.rolling.compute(key, series, columns)
        return features

    def build(self, samples_by_sheet: Mapping[str, Sequence[SensorSample]]
              ) -> Optional[np.ndarray]:
        """
        Build the feature vector for the latest synchronized bucket.

        Args:
            samples_by_sheet: Buffered samples keyed by sheet name

        Returns:
            float32 vector ordered like ``config.feature_columns``, or None
            when there is not enough synchronized data yet
        """
        scaled = self.bucketize(samples_by_sheet)
        if scaled is None:
            return None

        groups = self.feature_groups(scaled)
        if not groups:
            logger.debug("Transforms yielded no data (missing PCA/orientation overlap)")
            return None

        features = self.rolling_features(groups)
        if all(frame.empty for frame in features.values()):
            logger.debug(
                f"Rolling window produced no features; need at least "
                f"{self.config.window_size} buckets"
            )
            return None

        vector = self.synchronizer.assemble(features)
        if vector is not None:
            logger.debug(
                "Feature vector: [" + ", ".join(f"{value:.4f}" for value in vector) + "]"
            )
        return vector
