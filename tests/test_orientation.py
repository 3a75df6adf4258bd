"""Tests for rotation-vector to Euler angle conversion."""

import math

import numpy as np
import pytest

from preprocessing import OrientationResolver
from preprocessing.orientation import (complete_quaternion_scalar, normalize_yaw_degrees,
                                       quaternion_to_yaw_pitch_roll)


class TestQuaternionScalar:
    """Test reconstruction of the quaternion scalar part."""

    def test_zero_vector(self):
        """Test that a zero vector part gives w = 1."""
        assert complete_quaternion_scalar(0.0, 0.0, 0.0) == 1.0

    def test_unit_vector(self):
        """Test that w is 0 once the vector part reaches unit length."""
        assert complete_quaternion_scalar(1.0, 0.0, 0.0) == 0.0
        assert complete_quaternion_scalar(0.9, 0.9, 0.0) == 0.0

    def test_partial_vector(self):
        """Test the unit-norm completion."""
        assert complete_quaternion_scalar(0.6, 0.0, 0.0) == pytest.approx(0.8)


class TestYawNormalization:
    """Test wrapping of yaw into [0, 360)."""

    def test_known_values(self):
        """Test wrapping of representative angles."""
        assert normalize_yaw_degrees(0.0) == 0.0
        assert normalize_yaw_degrees(-90.0) == 270.0
        assert normalize_yaw_degrees(360.0) == 0.0
        assert normalize_yaw_degrees(725.0) == pytest.approx(5.0)

    def test_always_in_range(self):
        """Test output range for random finite inputs."""
        rng = np.random.default_rng(1)
        values = np.concatenate([
            rng.uniform(-1e6, 1e6, size=500),
            [-1e-15, -360.0, 359.9999999999999, -720.0000000001],
        ])
        for value in values:
            wrapped = normalize_yaw_degrees(float(value))
            assert 0.0 <= wrapped < 360.0


class TestOrientationResolver:
    """Test Z-Y-X Euler extraction."""

    def setup_method(self):
        """Setup test fixtures."""
        self.resolver = OrientationResolver()

    def test_identity_without_w(self):
        """Test that a zero rotation vector gives zero angles."""
        angles = self.resolver.resolve(0.0, 0.0, 0.0)
        assert (angles.yaw, angles.pitch, angles.roll) == (0.0, 0.0, 0.0)

    def test_zero_quaternion(self):
        """Test that a zero-magnitude quaternion gives zero angles."""
        assert quaternion_to_yaw_pitch_roll(0.0, 0.0, 0.0, 0.0) == (0.0, 0.0, 0.0)

    def test_single_axis_rotations(self):
        """Test sign and axis order for 90 degree rotations about each axis."""
        half = math.sqrt(0.5)

        roll = self.resolver.resolve(half, 0.0, 0.0, half)
        assert roll.roll == pytest.approx(90.0)
        assert roll.pitch == pytest.approx(0.0, abs=1e-9)

        pitch = self.resolver.resolve(0.0, math.sin(math.radians(15)), 0.0,
                                      math.cos(math.radians(15)))
        assert pitch.pitch == pytest.approx(30.0)

        yaw = self.resolver.resolve(0.0, 0.0, -half, half)
        assert yaw.yaw == pytest.approx(270.0)

    def test_gimbal_lock_is_clamped(self):
        """Test that pitch saturates at 90 degrees instead of becoming NaN."""
        half = math.sqrt(0.5)
        angles = self.resolver.resolve(0.0, half * 1.0000001, 0.0, half)
        assert angles.pitch == pytest.approx(90.0)
        assert not math.isnan(angles.yaw)

    def test_unnormalized_quaternion(self):
        """Test that quaternion magnitude does not change the angles."""
        unit = self.resolver.resolve(0.1, 0.2, 0.3, 0.927)
        scaled = self.resolver.resolve(0.2, 0.4, 0.6, 1.854)
        assert unit.yaw == pytest.approx(scaled.yaw)
        assert unit.pitch == pytest.approx(scaled.pitch)
        assert unit.roll == pytest.approx(scaled.roll)

    def test_to_row(self):
        """Test the orientation sheet row built from sensor values."""
        row = self.resolver.to_row((0.0, 0.0, 0.0))

        assert row["w"] == 1.0
        assert row["Direct (°)"] == row["Yaw (°)"] == 0.0
        assert row["Pitch (°)"] == 0.0
        assert row["Roll (°)"] == 0.0

    def test_to_row_uses_reported_w(self):
        """Test that a fourth sensor value is used as the scalar part."""
        row = self.resolver.to_row((0.0, 0.0, 0.0, -1.0))
        assert row["w"] == -1.0
