"""Quaternions and rigid transforms used for workspace and base poses."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .workspace import Orientation, Point, Pose

Vector = tuple[float, float, float]


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion stored as (x, y, z, w)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def from_rpy(cls, roll: float, pitch: float, yaw: float) -> Quaternion:
        """Build a quaternion from fixed-axis roll, pitch and yaw angles."""
        half_roll, half_pitch, half_yaw = roll * 0.5, pitch * 0.5, yaw * 0.5
        cos_r, sin_r = math.cos(half_roll), math.sin(half_roll)
        cos_p, sin_p = math.cos(half_pitch), math.sin(half_pitch)
        cos_y, sin_y = math.cos(half_yaw), math.sin(half_yaw)
        return cls(
            sin_r * cos_p * cos_y - cos_r * sin_p * sin_y,
            cos_r * sin_p * cos_y + sin_r * cos_p * sin_y,
            cos_r * cos_p * sin_y - sin_r * sin_p * cos_y,
            cos_r * cos_p * cos_y + sin_r * sin_p * sin_y,
        )

    @property
    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w

    @property
    def length(self) -> float:
        return math.sqrt(self.length_squared)

    def conjugate(self) -> Quaternion:
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def normalized(self) -> Quaternion:
        """Return the quaternion scaled to unit length."""
        length = self.length
        if length == 0.0:
            raise ValueError("cannot normalise a zero-length quaternion")
        return Quaternion(self.x / length, self.y / length, self.z / length, self.w / length)

    def _matrix_rows(self) -> tuple[Vector, Vector, Vector]:
        d = self.length_squared
        if d == 0.0:
            raise ValueError("zero-length quaternion has no rotation matrix")
        s = 2.0 / d
        xs, ys, zs = self.x * s, self.y * s, self.z * s
        wx, wy, wz = self.w * xs, self.w * ys, self.w * zs
        xx, xy, xz = self.x * xs, self.x * ys, self.x * zs
        yy, yz, zz = self.y * ys, self.y * zs, self.z * zs
        return (
            (1.0 - (yy + zz), xy - wz, xz + wy),
            (xy + wz, 1.0 - (xx + zz), yz - wx),
            (xz - wy, yz + wx, 1.0 - (xx + yy)),
        )

    def to_rpy(self) -> Vector:
        """Return (roll, pitch, yaw) of the rotation."""
        row0, row1, row2 = self._matrix_rows()
        if abs(row2[0]) >= 1.0:
            delta = math.atan2(row2[1], row2[2])
            pitch = math.pi / 2 if row2[0] < 0 else -math.pi / 2
            return (delta, pitch, 0.0)
        pitch = -math.asin(row2[0])
        cos_pitch = math.cos(pitch)
        roll = math.atan2(row2[1] / cos_pitch, row2[2] / cos_pitch)
        yaw = math.atan2(row1[0] / cos_pitch, row0[0] / cos_pitch)
        return (roll, pitch, yaw)

    def rotate(self, vector: Vector) -> Vector:
        """Rotate a 3-vector by this quaternion."""
        d = self.length_squared
        if d == 0.0:
            raise ValueError("cannot rotate by a zero-length quaternion")
        vx, vy, vz = vector
        p = self * Quaternion(vx, vy, vz, 0.0) * self.conjugate()
        return (p.x / d, p.y / d, p.z / d)

    def __mul__(self, other: object) -> Quaternion:
        if not isinstance(other, Quaternion):
            return NotImplemented
        x1, y1, z1, w1 = self.x, self.y, self.z, self.w
        x2, y2, z2, w2 = other.x, other.y, other.z, other.w
        return Quaternion(
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 + y1 * w2 + z1 * x2 - x1 * z2,
            w1 * z2 + z1 * w2 + x1 * y2 - y1 * x2,
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        )


@dataclass(frozen=True)
class Transform:
    """A rigid transform: rotation followed by translation."""

    translation: Vector = (0.0, 0.0, 0.0)
    rotation: Quaternion = Quaternion()

    @classmethod
    def from_pose(cls, pose: Pose) -> Transform:
        p, o = pose.position, pose.orientation
        return cls((p.x, p.y, p.z), Quaternion(o.x, o.y, o.z, o.w))

    def apply(self, vector: Vector) -> Vector:
        """Map a point through this transform."""
        rx, ry, rz = self.rotation.rotate(vector)
        tx, ty, tz = self.translation
        return (rx + tx, ry + ty, rz + tz)

    def inverse(self) -> Transform:
        d = self.rotation.length_squared
        if d == 0.0:
            raise ValueError("cannot invert a transform with a zero-length rotation")
        conj = self.rotation.conjugate()
        inv = Quaternion(conj.x / d, conj.y / d, conj.z / d, conj.w / d)
        tx, ty, tz = inv.rotate(self.translation)
        return Transform((-tx, -ty, -tz), inv)

    def to_pose(self) -> Pose:
        x, y, z = self.translation
        q = self.rotation
        return Pose(Point(x, y, z), Orientation(q.x, q.y, q.z, q.w))

    def __mul__(self, other: object) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(self.apply(other.translation), self.rotation * other.rotation)