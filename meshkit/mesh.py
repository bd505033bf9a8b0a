"""Indexed triangle meshes with transformations, bounds and ray picking."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Union

from meshkit.bounds import (
    BoundingBox,
    BoundingSphere,
    compute_bounding_box,
    compute_bounding_sphere,
)
from meshkit.transform import Matrix4
from meshkit.triangles import MollerTrumboreTriangle, Vec3

VecLike = Union[Vec3, Sequence[float]]

_X_AXIS = Vec3(1.0, 0.0, 0.0)
_Y_AXIS = Vec3(0.0, 1.0, 0.0)
_Z_AXIS = Vec3(0.0, 0.0, 1.0)


def _to_vec(value: VecLike) -> Vec3:
    if isinstance(value, Vec3):
        return value
    x, y, z = value
    return Vec3(float(x), float(y), float(z))


def _grouped(values: Iterable[float], size: int, what: str) -> list[tuple[float, ...]]:
    flat = [float(v) for v in values]
    if len(flat) % size:
        raise ValueError(f"{what} must hold a multiple of {size} values")
    return [tuple(flat[i:i + size]) for i in range(0, len(flat), size)]


def _vectors(values: Optional[Iterable[float]], what: str) -> tuple[Vec3, ...]:
    if values is None:
        return ()
    return tuple(Vec3(*g) for g in _grouped(values, 3, what))


class TriangleMesh:
    """A mesh of triangles given by flat vertex attribute arrays and an index list.

    Points, normals, tangents and bitangents are flat sequences of x, y, z
    values; texture coordinates are flat u, v pairs; every three indices
    make one triangle.
    """

    def __init__(
        self,
        name: str,
        indices: Iterable[int],
        points: Iterable[float],
        normals: Iterable[float],
        tex_coords: Optional[Iterable[float]] = None,
        tangents: Optional[Iterable[float]] = None,
        bitangents: Optional[Iterable[float]] = None,
    ) -> None:
        self.name = name
        self._indices = tuple(int(i) for i in indices)
        if len(self._indices) % 3:
            raise ValueError("the index list must hold a multiple of 3 entries")
        self._points = _vectors(points, "points")
        if not self._points:
            raise ValueError("a mesh needs at least one point")
        self._normals = _vectors(normals, "normals")
        for i in self._indices:
            if not 0 <= i < len(self._points):
                raise ValueError(f"index {i} does not refer to a point")
        self._tex_coords = (
            tuple(_grouped(tex_coords, 2, "tex_coords")) if tex_coords is not None else ()
        )
        self._tangents = _vectors(tangents, "tangents")
        self._bitangents = _vectors(bitangents, "bitangents")

        self._translation = Vec3(0.0, 0.0, 0.0)
        self._rotation = Vec3(0.0, 0.0, 0.0)
        self._scaling = Vec3(1.0, 1.0, 1.0)
        self._transformation = Matrix4.identity()

        self._trsf_points: list[Vec3] = list(self._points)
        self._trsf_normals: list[Vec3] = list(self._normals)
        self._build_triangles()
        self._compute_bounds()

    # Source data

    @property
    def indices(self) -> tuple[int, ...]:
        return self._indices

    @property
    def points(self) -> tuple[Vec3, ...]:
        return self._points

    @property
    def normals(self) -> tuple[Vec3, ...]:
        return self._normals

    @property
    def tex_coords(self) -> tuple[tuple[float, ...], ...]:
        return self._tex_coords

    @property
    def tangents(self) -> tuple[Vec3, ...]:
        return self._tangents

    @property
    def bitangents(self) -> tuple[Vec3, ...]:
        return self._bitangents

    # Derived data

    def triangles(self) -> list[MollerTrumboreTriangle]:
        return list(self._triangles)

    def transformed_points(self) -> list[Vec3]:
        return list(self._trsf_points)

    def transformed_normals(self) -> list[Vec3]:
        return list(self._trsf_normals)

    def bounding_box(self) -> BoundingBox:
        return self._bounding_box

    def bounding_sphere(self) -> BoundingSphere:
        return self._bounding_sphere

    # Transformations

    def translation(self) -> Vec3:
        return self._translation

    def set_translation(self, trans: VecLike) -> None:
        target = _to_vec(trans)
        delta = target - self._translation
        self._transformation = self._transformation.translate(delta.x, delta.y, delta.z)
        self._apply_transformation()
        self._translation = target

    def rotation(self) -> Vec3:
        return self._rotation

    def set_rotation(self, rota: VecLike) -> None:
        """Rotate to the given angles in degrees about the x, y and z axes."""
        target = _to_vec(rota)
        delta = target - self._rotation
        self._transformation = (
            self._transformation.rotate(delta.x, _X_AXIS)
            .rotate(delta.y, _Y_AXIS)
            .rotate(delta.z, _Z_AXIS)
        )
        self._apply_transformation()
        self._rotation = target

    def scaling(self) -> Vec3:
        return self._scaling

    def set_scaling(self, scale: VecLike) -> None:
        target = _to_vec(scale)
        current = self._scaling
        if 0.0 in (current.x, current.y, current.z):
            raise ValueError("cannot rescale a mesh whose current scale has a zero factor")
        self._transformation = self._transformation.scale(
            target.x / current.x, target.y / current.y, target.z / current.z
        )
        self._apply_transformation()
        self._scaling = target

    def transformation(self) -> Matrix4:
        return self._transformation

    def reset_transformations(self) -> None:
        self._translation = Vec3(0.0, 0.0, 0.0)
        self._rotation = Vec3(0.0, 0.0, 0.0)
        self._scaling = Vec3(1.0, 1.0, 1.0)
        self._transformation = Matrix4.identity()
        self._trsf_points = list(self._points)
        self._trsf_normals = list(self._normals)
        self._build_triangles()
        self._compute_bounds()

    def is_mirrored(self) -> bool:
        """True when the scaling flips orientation, so front faces wind clockwise."""
        sx, sy, sz = self._scaling
        return (
            (sx < 0 and sy > 0 and sz > 0)
            or (sx > 0 and sy < 0 and sz > 0)
            or (sx > 0 and sy > 0 and sz < 0)
            or (sx < 0 and sy < 0 and sz < 0)
        )

    # Picking

    def intersects_with_ray(self, ray_pos: VecLike, ray_dir: VecLike) -> Vec3 | None:
        """Return where the ray meets one of the triangles, or None."""
        origin = _to_vec(ray_pos)
        direction = _to_vec(ray_dir)
        for triangle in self._triangles:
            hit = triangle.intersects_with_ray(origin, direction)
            if hit is not None:
                return hit
        return None

    # Internals

    def _apply_transformation(self) -> None:
        matrix = self._transformation
        self._trsf_points = [matrix.map_point(p) for p in self._points]
        rotation_only = matrix.without_translation()
        self._trsf_normals = [rotation_only.map_point(n) for n in self._normals]
        self._build_triangles()
        self._compute_bounds()

    def _build_triangles(self) -> None:
        pts = self._trsf_points
        idx = self._indices
        self._triangles = [
            MollerTrumboreTriangle(pts[idx[i]], pts[idx[i + 1]], pts[idx[i + 2]])
            for i in range(0, len(idx), 3)
        ]

    def _compute_bounds(self) -> None:
        self._bounding_sphere = compute_bounding_sphere(self._trsf_points)
        self._bounding_box = compute_bounding_box(self._trsf_points)