"""Rolling-window statistics over bucketed feature series."""

import logging
from typing import List, Optional

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from .bucketing import TIME_BUCKET
from .sheets import sanitize_column_name

logger = logging.getLogger(__name__)


class RollingStatsComputer:
    """Sliding mean/std over a fixed number of consecutive buckets."""

    def __init__(self, window_size: int, interval: Optional[float] = None):
        """
        Initialize rolling statistics computer.

        Args:
            window_size: Window length in buckets
            interval: Bucket width in seconds, only used for logging
        """
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")

        self.window_size = window_size

        if interval:
            logger.info(
                f"Rolling window initialized: size={window_size} buckets "
                f"({window_size * interval:.2f}s)"
            )

    @staticmethod
    def feature_names(group: str, columns: List[str]) -> List[str]:
        """Output names in emission order: mean then std for every column."""
        names = []
        for column in columns:
            sanitized = sanitize_column_name(column)
            names.append(f"{group}_{sanitized}_mean")
            names.append(f"{group}_{sanitized}_std")
        return names

    def compute(self, group: str, frame: pd.DataFrame,
                columns: List[str]) -> pd.DataFrame:
        """
        Compute rolling features for one feature group.

        A window is emitted only when every column has a finite value in all
        of its buckets.

        Args:
            group: Feature group key used as the name prefix
            frame: Bucketed series indexed by bucket time
            columns: Columns to summarize

        Returns:
            Frame indexed by the ending bucket time of each valid window
        """
        names = self.feature_names(group, columns)

        if not columns or len(frame) < self.window_size:
            return self._empty(names)

        ordered = frame.sort_index()
        values = ordered.reindex(columns=columns).to_numpy(dtype=float)

        # (n_windows, n_columns, window_size)
        windows = sliding_window_view(values, self.window_size, axis=0)
        valid = ~np.isnan(windows).any(axis=(1, 2))
        if not valid.any():
            return self._empty(names)

        windows = windows[valid]
        means = windows.mean(axis=2)
        # Population std, as the features were computed during training
        stds = windows.std(axis=2)
        stds[np.ptp(windows, axis=2) == 0] = 0.0

        stats = np.empty((windows.shape[0], 2 * len(columns)))
        stats[:, 0::2] = means
        stats[:, 1::2] = stds

        index = ordered.index[self.window_size - 1:][valid]
        result = pd.DataFrame(stats, index=index, columns=names)
        result.index.name = TIME_BUCKET
        return result

    def _empty(self, names: List[str]) -> pd.DataFrame:
        frame = pd.DataFrame(columns=names, dtype=float)
        frame.index.name = TIME_BUCKET
        return frame
