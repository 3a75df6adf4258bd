"""Tests for the motion PCA projection."""

import numpy as np
import pandas as pd

from preprocessing import MotionPcaParams, MotionPcaProjector
from preprocessing.sheets import DEFAULT_SPECS, MOTION_SHEETS, sanitize_column_name


def motion_frames(times, offset=0.0):
    frames = {}
    for position, name in enumerate(MOTION_SHEETS):
        spec = DEFAULT_SPECS[name]
        data = {
            column: [offset + position + 0.1 * index for _ in times]
            for index, column in enumerate(spec.base_columns)
        }
        frames[spec.key] = pd.DataFrame(data, index=pd.Index(times, name="time_bucket"))
    return frames


class TestMotionPcaProjector:
    """Test intersection, ordering and projection of motion buckets."""

    def setup_method(self):
        """Setup test fixtures."""
        specs = [DEFAULT_SPECS[name] for name in MOTION_SHEETS]
        columns = [
            f"{spec.key}_{sanitize_column_name(column)}"
            for spec in specs for column in spec.base_columns
        ]
        rng = np.random.default_rng(7)
        self.params = MotionPcaParams(
            columns=columns,
            components=rng.normal(size=(3, len(columns))),
            mean=rng.normal(size=len(columns)),
            prefix="motion",
            n_components=3,
        )
        self.projector = MotionPcaProjector(self.params, specs)

    def test_column_names(self):
        """Test sanitized input names and component output names."""
        assert self.params.columns[0] == "df_accelerometer_bucketed_Acceleration_x_m_per_spow2"
        assert "df_gyroscope_bucketed_Gyroscope_z_rad_per_s" in self.params.columns
        assert self.projector.output_columns == ["motion_pc1", "motion_pc2", "motion_pc3"]

    def test_projection_of_mean_is_zero(self):
        """Test that the mean vector projects onto the origin."""
        np.testing.assert_allclose(self.projector.project(self.params.mean), 0.0, atol=1e-12)

    def test_projection_matches_matrix_product(self):
        """Test projection of every common bucket."""
        frames = motion_frames([0.0, 0.5])
        projected = self.projector.transform(frames)

        raw = np.array([
            position + 0.1 * index
            for position in range(3) for index in range(3)
        ])
        expected = self.params.components @ (raw - self.params.mean)

        assert list(projected.index) == [0.0, 0.5]
        np.testing.assert_allclose(projected.loc[0.5].to_numpy(), expected)

    def test_only_common_buckets(self):
        """Test that buckets missing from one motion stream are skipped."""
        frames = motion_frames([0.0, 0.5, 1.0])
        gyroscope_key = DEFAULT_SPECS["Gyroscope"].key
        frames[gyroscope_key] = frames[gyroscope_key].drop(index=[0.0])

        projected = self.projector.transform(frames)

        assert list(projected.index) == [0.5, 1.0]

    def test_no_common_buckets(self):
        """Test that disjoint streams give an empty result, not an error."""
        frames = motion_frames([0.0])
        gravity_key = DEFAULT_SPECS["Gravity"].key
        frames[gravity_key] = motion_frames([1.0])[gravity_key]

        projected = self.projector.transform(frames)

        assert projected is not None
        assert projected.empty

    def test_missing_stream(self):
        """Test that an absent motion stream yields None."""
        frames = motion_frames([0.0])
        del frames[DEFAULT_SPECS["Accelerometer"].key]
        assert self.projector.transform(frames) is None

    def test_bucket_with_nan_skipped(self):
        """Test that a bucket with a missing input value is not projected."""
        frames = motion_frames([0.0, 0.5])
        key = DEFAULT_SPECS["Gravity"].key
        frames[key].iloc[0, 0] = np.nan

        projected = self.projector.transform(frames)

        assert list(projected.index) == [0.5]
