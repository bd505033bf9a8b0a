"""Immutable 4x4 affine transformation matrices."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from meshkit.triangles import Vec3

VecLike = Union[Vec3, Sequence[float]]

_IDENTITY_ROWS = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
)


@dataclass(frozen=True)
class Matrix4:
    """A row-major 4x4 matrix.

    translate, rotate and scale post-multiply, so the newest operation is
    applied to a point first.
    """

    rows: tuple[tuple[float, float, float, float], ...] = _IDENTITY_ROWS

    def __post_init__(self) -> None:
        rows = tuple(tuple(float(v) for v in row) for row in self.rows)
        if len(rows) != 4 or any(len(row) != 4 for row in rows):
            raise ValueError("a Matrix4 needs exactly four rows of four values")
        object.__setattr__(self, "rows", rows)

    @classmethod
    def identity(cls) -> Matrix4:
        return cls(_IDENTITY_ROWS)

    def __matmul__(self, other: Matrix4) -> Matrix4:
        if not isinstance(other, Matrix4):
            return NotImplemented
        columns = list(zip(*other.rows))
        return Matrix4(
            tuple(
                tuple(sum(a * b for a, b in zip(row, col)) for col in columns)
                for row in self.rows
            )
        )

    def translate(self, x: float, y: float, z: float) -> Matrix4:
        return self @ Matrix4(
            (
                (1.0, 0.0, 0.0, x),
                (0.0, 1.0, 0.0, y),
                (0.0, 0.0, 1.0, z),
                (0.0, 0.0, 0.0, 1.0),
            )
        )

    def rotate(self, angle: float, axis: VecLike) -> Matrix4:
        """Rotate by angle degrees, counter-clockwise about axis."""
        ax, ay, az = axis
        length = math.sqrt(ax * ax + ay * ay + az * az)
        if length == 0.0:
            raise ValueError("rotation axis must not be a zero vector")
        x, y, z = ax / length, ay / length, az / length

        if angle in (90.0, -270.0):
            s, c = 1.0, 0.0
        elif angle in (-90.0, 270.0):
            s, c = -1.0, 0.0
        elif angle in (180.0, -180.0):
            s, c = 0.0, -1.0
        else:
            radians = math.radians(angle)
            s, c = math.sin(radians), math.cos(radians)
        ic = 1.0 - c

        return self @ Matrix4(
            (
                (x * x * ic + c, x * y * ic - z * s, x * z * ic + y * s, 0.0),
                (y * x * ic + z * s, y * y * ic + c, y * z * ic - x * s, 0.0),
                (x * z * ic - y * s, y * z * ic + x * s, z * z * ic + c, 0.0),
                (0.0, 0.0, 0.0, 1.0),
            )
        )

    def scale(self, x: float, y: float, z: float) -> Matrix4:
        return self @ Matrix4(
            (
                (x, 0.0, 0.0, 0.0),
                (0.0, y, 0.0, 0.0),
                (0.0, 0.0, z, 0.0),
                (0.0, 0.0, 0.0, 1.0),
            )
        )

    def without_translation(self) -> Matrix4:
        """Return the matrix with its last column replaced by (0, 0, 0, 1)."""
        return Matrix4(
            tuple(
                row[:3] + ((1.0 if i == 3 else 0.0),)
                for i, row in enumerate(self.rows)
            )
        )

    def map_point(self, point: VecLike) -> Vec3:
        """Transform a point, dividing by w when it is neither 0 nor 1."""
        px, py, pz = point
        x, y, z, w = (r[0] * px + r[1] * py + r[2] * pz + r[3] for r in self.rows)
        if w not in (0.0, 1.0):
            return Vec3(x / w, y / w, z / w)
        return Vec3(x, y, z)

    def map_vector(self, vector: VecLike) -> Vec3:
        """Transform a direction by the upper-left 3x3 part only."""
        vx, vy, vz = vector
        x, y, z = (r[0] * vx + r[1] * vy + r[2] * vz for r in self.rows[:3])
        return Vec3(x, y, z)