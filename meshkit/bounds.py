"""Axis-aligned bounding boxes and bounding spheres of point sets."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from meshkit.triangles import Vec3

PointLike = Union[Vec3, Sequence[float]]


def _to_vec(value: PointLike) -> Vec3:
    if isinstance(value, Vec3):
        return value
    x, y, z = value
    return Vec3(float(x), float(y), float(z))


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned box given by its limits on each axis."""

    x_min: float = 0.0
    x_max: float = 0.0
    y_min: float = 0.0
    y_max: float = 0.0
    z_min: float = 0.0
    z_max: float = 0.0

    def center(self) -> Vec3:
        return Vec3(
            (self.x_min + self.x_max) * 0.5,
            (self.y_min + self.y_max) * 0.5,
            (self.z_min + self.z_max) * 0.5,
        )


@dataclass(frozen=True)
class BoundingSphere:
    """A sphere given by its centre and radius."""

    center: Vec3 = Vec3()
    radius: float = 0.0


def _points(points: Iterable[PointLike]) -> list[Vec3]:
    result = [_to_vec(p) for p in points]
    if not result:
        raise ValueError("cannot bound an empty set of points")
    return result


def compute_bounding_box(points: Iterable[PointLike]) -> BoundingBox:
    """Return the smallest axis-aligned box holding every point."""
    pts = _points(points)
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    zs = [p.z for p in pts]
    return BoundingBox(min(xs), max(xs), min(ys), max(ys), min(zs), max(zs))


def compute_bounding_sphere(points: Iterable[PointLike]) -> BoundingSphere:
    """Return a sphere holding every point, found with Ritter's algorithm."""
    pts = _points(points)

    x_lo = min(pts, key=lambda p: p.x)
    x_hi = max(pts, key=lambda p: p.x)
    y_lo = min(pts, key=lambda p: p.y)
    y_hi = max(pts, key=lambda p: p.y)
    z_lo = min(pts, key=lambda p: p.z)
    z_hi = max(pts, key=lambda p: p.z)

    candidates = [
        ((x_hi - x_lo).length_squared(), x_lo, x_hi),
        ((y_hi - y_lo).length_squared(), y_lo, y_hi),
        ((z_hi - z_lo).length_squared(), z_lo, z_hi),
    ]
    _, dia1, dia2 = candidates[0]
    max_span = candidates[0][0]
    for span, lo, hi in candidates[1:]:
        if span > max_span:
            max_span, dia1, dia2 = span, lo, hi

    center = (dia1 + dia2) * 0.5
    sq_rad = (dia2 - center).length_squared()
    radius = math.sqrt(sq_rad)
    for p in pts:
        d = (p - center).length_squared()
        if d > sq_rad:
            r = math.sqrt(d)
            radius = (radius + r) * 0.5
            sq_rad = radius * radius
            offset = r - radius
            center = (center * radius + p * offset) / r

    return BoundingSphere(center, radius)