"""Three-component vectors, triangles and ray-triangle intersection tests."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Sequence, Union

_log = logging.getLogger(__name__)

# Smallest positive normalised and largest finite single-precision values.
_FLT_MIN = 1.17549435e-38
_FLT_MAX = 3.4028234663852886e38

_MT_EPSILON = 1e-7


@dataclass(frozen=True)
class Vec3:
    """An immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalized(self) -> Vec3:
        """Return the unit vector in the same direction; a zero vector raises ValueError."""
        length = self.length()
        if length == 0.0:
            raise ValueError("cannot normalise a zero-length vector")
        return self / length


VecLike = Union[Vec3, Sequence[float]]


def _to_vec(value: VecLike) -> Vec3:
    if isinstance(value, Vec3):
        return value
    x, y, z = value
    return Vec3(float(x), float(y), float(z))


class Triangle(ABC):
    """A triangle that can be tested against rays."""

    def __init__(self, v0: VecLike, v1: VecLike, v2: VecLike) -> None:
        self.set_vertices(v0, v1, v2)

    def vertices(self) -> tuple[Vec3, Vec3, Vec3]:
        return (self._v0, self._v1, self._v2)

    def set_vertices(self, v0: VecLike, v1: VecLike, v2: VecLike) -> None:
        self._v0 = _to_vec(v0)
        self._v1 = _to_vec(v1)
        self._v2 = _to_vec(v2)

    def normal(self) -> Vec3:
        """The unnormalised face normal, (v1 - v0) x (v2 - v0)."""
        return (self._v1 - self._v0).cross(self._v2 - self._v0)

    @abstractmethod
    def intersects_with_ray(self, ray_pos: VecLike, ray_dir: VecLike) -> Vec3 | None:
        """Return the intersection point of the ray with the triangle, or None."""


class MollerTrumboreTriangle(Triangle):
    """Triangle tested with the Möller–Trumbore algorithm."""

    def intersects_with_ray(self, ray_pos: VecLike, ray_dir: VecLike) -> Vec3 | None:
        origin = _to_vec(ray_pos)
        direction = _to_vec(ray_dir)
        edge1 = self._v1 - self._v0
        edge2 = self._v2 - self._v0
        h = direction.cross(edge2)
        a = edge1.dot(h)
        if -_MT_EPSILON < a < _MT_EPSILON:
            return None  # ray parallel to the triangle
        f = 1.0 / a
        s = origin - self._v0
        u = f * s.dot(h)
        if u < 0.0 or u > 1.0:
            return None
        q = s.cross(edge1)
        v = f * direction.dot(q)
        if v < 0.0 or u + v > 1.0:
            return None
        t = f * edge2.dot(q)
        if t > _MT_EPSILON:
            return origin + direction * t
        return None  # the line meets the triangle, but behind the ray origin


class BaldwinWeberTriangle(Triangle):
    """Triangle tested with a precomputed global-to-barycentric transformation.

    Only the nine non-trivial coefficients of the transformation are kept,
    together with the number (1, 2 or 3) of the column that is fixed.
    A degenerate triangle gets column 0 and never reports a hit.
    """

    def __init__(self, v0: VecLike, v1: VecLike, v2: VecLike) -> None:
        super().__init__(v0, v1, v2)

    def set_vertices(self, v0: VecLike, v1: VecLike, v2: VecLike) -> None:
        super().set_vertices(v0, v1, v2)
        self._precompute()

    def _precompute(self) -> None:
        v0, v1, v2 = self._v0, self._v1, self._v2
        edge1 = v1 - v0
        edge2 = v2 - v0
        n = edge1.cross(edge2)
        num = v0.dot(n)

        if abs(n.x) > abs(n.y) and abs(n.x) > abs(n.z):
            x1 = v1.y * v0.z - v1.z * v0.y
            x2 = v2.y * v0.z - v2.z * v1.y
            self._fixed_column = 1
            self._transformation = (
                edge2.z / n.x, -edge2.y / n.x, x2 / n.x,
                -edge1.z / n.x, edge1.y / n.x, -x1 / n.x,
                n.y / n.x, n.z / n.x, -num / n.x,
            )
        elif abs(n.y) > abs(n.z):
            x1 = v1.z * v0.x - v1.x * v0.z
            x2 = v2.z * v0.x - v2.x * v0.z
            self._fixed_column = 2
            self._transformation = (
                -edge2.z / n.y, edge2.x / n.y, x2 / n.y,
                edge1.z / n.y, -edge1.x / n.y, -x1 / n.y,
                n.x / n.y, n.z / n.y, -num / n.y,
            )
        elif abs(n.z) > 0.0:
            x1 = v1.x * v0.y - v1.y * v0.x
            x2 = v2.x * v0.y - v2.y * v0.x
            self._fixed_column = 3
            self._transformation = (
                edge2.y / n.z, -edge2.x / n.z, x2 / n.z,
                -edge1.y / n.z, edge1.x / n.z, -x1 / n.z,
                n.x / n.z, n.y / n.z, -num / n.z,
            )
        else:
            _log.error("building precomputed-transformation triangle from degenerate source")
            self._fixed_column = 0
            self._transformation = (0.0,) * 9

    def _split(self, v: Vec3) -> tuple[float, float, float]:
        """Return the fixed coordinate and the other two, in order."""
        coords = (v.x, v.y, v.z)
        fixed = self._fixed_column - 1
        first, second = (c for i, c in enumerate(coords) if i != fixed)
        return coords[fixed], first, second

    def intersects_with_ray(self, ray_pos: VecLike, ray_dir: VecLike) -> Vec3 | None:
        if self._fixed_column not in (1, 2, 3):
            return None
        origin = _to_vec(ray_pos)
        direction = _to_vec(ray_dir)
        t = self._transformation

        s_fixed, s_a, s_b = self._split(origin)
        d_fixed, d_a, d_b = self._split(direction)
        trans_s = s_fixed + t[6] * s_a + t[7] * s_b + t[8]
        trans_d = d_fixed + t[6] * d_a + t[7] * d_b
        if trans_d == 0.0:
            return None
        ta = -trans_s / trans_d
        if ta <= _FLT_MIN or ta >= _FLT_MAX:
            return None

        hit = origin + direction * ta
        _, w_a, w_b = self._split(hit)
        xg = t[0] * w_a + t[1] * w_b + t[2]
        yg = t[3] * w_a + t[4] * w_b + t[5]
        if xg >= 0.0 and yg >= 0.0 and xg + yg < 1.0:
            return hit
        return None