"""Rotation-vector to yaw/pitch/roll conversion."""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence


@dataclass(frozen=True)
class EulerAngles:
    """Orientation in degrees; yaw is wrapped into [0, 360)."""

    yaw: float
    pitch: float
    roll: float


def complete_quaternion_scalar(x: float, y: float, z: float) -> float:
    """
    Reconstruct the scalar part of a unit quaternion from its vector part.

    Returns 0 when the vector part already has unit length or more.
    """
    total = x * x + y * y + z * z
    if total >= 1.0:
        return 0.0
    return math.sqrt(1.0 - total)


def quaternion_to_yaw_pitch_roll(w: float, x: float, y: float,
                                 z: float) -> Sequence[float]:
    """
    Z-Y-X Euler extraction, in radians.

    Sign and axis order follow the phyphox export the classifier was
    trained on; changing either silently corrupts the orientation features.

    Args:
        w, x, y, z: Quaternion components (need not be normalized)

    Returns:
        Tuple of (yaw, pitch, roll)
    """
    magnitude = math.sqrt(w * w + x * x + y * y + z * z)
    if magnitude == 0.0:
        return 0.0, 0.0, 0.0

    qw, qx, qy, qz = w / magnitude, x / magnitude, y / magnitude, z / magnitude

    roll = math.atan2(2.0 * (qw * qx + qy * qz), 1.0 - 2.0 * (qx * qx + qy * qy))
    # Clamped to keep asin defined at gimbal lock
    sin_pitch = min(1.0, max(-1.0, 2.0 * (qw * qy - qz * qx)))
    pitch = math.asin(sin_pitch)
    yaw = math.atan2(2.0 * (qw * qz + qx * qy), 1.0 - 2.0 * (qy * qy + qz * qz))

    return yaw, pitch, roll


def normalize_yaw_degrees(degrees: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    normalized = math.fmod(degrees, 360.0)
    if normalized < 0:
        normalized += 360.0
    # Tiny negative inputs round up to exactly 360 after the shift
    if normalized >= 360.0:
        normalized = 0.0
    return normalized


class OrientationResolver:
    """Turn rotation-vector readings into orientation sheet rows."""

    def resolve(self, x: float, y: float, z: float,
                w: Optional[float] = None) -> EulerAngles:
        """
        Convert one rotation-vector reading to Euler angles in degrees.

        Args:
            x, y, z: Vector part of the rotation quaternion
            w: Scalar part, reconstructed when the sensor omits it

        Returns:
            Orientation with yaw in [0, 360)
        """
        if w is None:
            w = complete_quaternion_scalar(x, y, z)

        yaw, pitch, roll = quaternion_to_yaw_pitch_roll(w, x, y, z)

        return EulerAngles(
            yaw=normalize_yaw_degrees(math.degrees(yaw)),
            pitch=math.degrees(pitch),
            roll=math.degrees(roll),
        )

    def to_row(self, values: Sequence[float]) -> Dict[str, float]:
        """
        Build an orientation sheet row from raw rotation-vector axis values.

        Args:
            values: Sensor values ``(x, y, z[, w, ...])``; missing axes read as 0

        Returns:
            Row with quaternion components and Direct/Yaw/Pitch/Roll in degrees
        """
        x, y, z = (float(values[i]) if len(values) > i else 0.0 for i in range(3))
        w = float(values[3]) if len(values) > 3 else complete_quaternion_scalar(x, y, z)
        angles = self.resolve(x, y, z, w)

        return {
            "w": w,
            "x": x,
            "y": y,
            "z": z,
            "Direct (°)": angles.yaw,
            "Yaw (°)": angles.yaw,
            "Pitch (°)": angles.pitch,
            "Roll (°)": angles.roll,
        }
