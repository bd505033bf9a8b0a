"""Torus meshes with normals, tangents, bitangents and texture coordinates."""

from __future__ import annotations

import math
from typing import Any

from meshkit.mesh import TriangleMesh
from meshkit.triangles import Vec3

_TWO_PI = 2.0 * math.pi
_DU = 0.0001
_DV_SIN = 0.001


def _torus_arrays(
    outer_radius: float,
    inner_radius: float,
    nsides: int,
    nrings: int,
    s_max: float,
    t_max: float,
) -> dict[str, Any]:
    """Return the flat attribute arrays of a torus, keyed as TriangleMesh expects."""
    if nsides < 1 or nrings < 1:
        raise ValueError("a torus needs at least one side and one ring")

    points: list[float] = []
    normals: list[float] = []
    tangents: list[float] = []
    bitangents: list[float] = []
    tex_coords: list[float] = []

    ring_factor = _TWO_PI / nrings
    side_factor = _TWO_PI / nsides

    # One extra ring duplicates the first so the texture seam closes.
    for ring in range(nrings + 1):
        u = ring * ring_factor
        cu, su = math.cos(u), math.sin(u)
        for side in range(nsides):
            v = side * side_factor
            cv, sv = math.cos(v), math.sin(v)
            r = outer_radius + inner_radius * cv
            point = Vec3(r * cu, r * su, inner_radius * sv)

            raw_normal = Vec3(cv * cu * r, cv * su * r, sv * r)
            length = raw_normal.length()
            if length == 0.0:
                normal = Vec3(math.nan, math.nan, math.nan)
            else:
                normal = raw_normal / length

            dr = outer_radius + inner_radius * math.cos(v + _DU)
            shifted = Vec3(
                dr * math.cos(u + _DU),
                dr * math.sin(u + _DU),
                inner_radius * (math.sin(v) + _DV_SIN),
            )
            tangent = shifted - point
            bitangent = normal.cross(tangent)

            points.extend(point)
            normals.extend(normal)
            tangents.extend(tangent)
            bitangents.extend(bitangent)
            tex_coords.append(u / _TWO_PI * s_max)
            tex_coords.append(v / _TWO_PI * t_max)

    indices: list[int] = []
    for ring in range(nrings):
        ring_start = ring * nsides
        next_ring_start = (ring + 1) * nsides
        for side in range(nsides):
            next_side = (side + 1) % nsides
            indices.extend(
                (
                    ring_start + side,
                    next_ring_start + side,
                    next_ring_start + next_side,
                    ring_start + side,
                    next_ring_start + next_side,
                    ring_start + next_side,
                )
            )

    return {
        "indices": indices,
        "points": points,
        "normals": normals,
        "tex_coords": tex_coords,
        "tangents": tangents,
        "bitangents": bitangents,
    }


def build_torus(
    outer_radius: float,
    inner_radius: float,
    nsides: int,
    nrings: int,
    s_max: float = 1,
    t_max: float = 1,
) -> TriangleMesh:
    """Build a torus about the z axis as a plain TriangleMesh."""
    arrays = _torus_arrays(outer_radius, inner_radius, nsides, nrings, s_max, t_max)
    return TriangleMesh("Torus", **arrays)


class Torus(TriangleMesh):
    """A torus about the z axis, remembering the parameters it was built from."""

    def __init__(
        self,
        outer_radius: float,
        inner_radius: float,
        nsides: int,
        nrings: int,
        s_max: float = 1,
        t_max: float = 1,
    ) -> None:
        self.outer_radius = float(outer_radius)
        self.inner_radius = float(inner_radius)
        self.nsides = int(nsides)
        self.nrings = int(nrings)
        self.s_max = s_max
        self.t_max = t_max
        arrays = _torus_arrays(
            self.outer_radius, self.inner_radius, self.nsides, self.nrings, s_max, t_max
        )
        super().__init__("Torus", **arrays)

    def clone(self) -> Torus:
        """Return a new, untransformed torus built from the same parameters."""
        return Torus(
            self.outer_radius,
            self.inner_radius,
            self.nsides,
            self.nrings,
            self.s_max,
            self.t_max,
        )