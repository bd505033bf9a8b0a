"""Tangent-space generation: vertex groups, tangent spaces per face corner,
and the driver that runs the whole pipeline on a FaceMesh."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import MutableSequence, Sequence

from meshkit.tangent_tris import (
    degen_prologue,
    init_tri_info,
    mark_degenerate,
)
from meshkit.tangent_weld import (
    FaceMesh,
    TriFlag,
    TriInfo,
    build_triangle_list,
    index_to_data,
    weld_vertices,
)
from meshkit.triangles import Vec3

_FLT_MIN = 1.17549435e-38


@dataclass
class TangentSpace:
    """Tangent and bitangent at one face corner, with their true magnitudes.

    orient is True when the texture mapping preserves orientation; counter
    tells how many group results were averaged into this space.
    """

    tangent: Vec3 = Vec3(1.0, 0.0, 0.0)
    mag_s: float = 1.0
    bitangent: Vec3 = Vec3(0.0, 1.0, 0.0)
    mag_t: float = 1.0
    counter: int = 0
    orient: bool = False

    @property
    def sign(self) -> float:
        """1.0 for an orientation-preserving mapping, otherwise -1.0."""
        return 1.0 if self.orient else -1.0


@dataclass(eq=False)
class Group:
    """Triangles sharing one welded vertex and one texture orientation."""

    vertex_representative: int
    orient_preserving: bool
    face_indices: list[int] = field(default_factory=list)


def _has(info: TriInfo, bit: TriFlag) -> bool:
    return (int(info.flag) & int(bit)) != 0


def _not_zero(value: float) -> bool:
    return abs(value) > _FLT_MIN


def _vec_not_zero(v: Vec3) -> bool:
    return _not_zero(v.x) or _not_zero(v.y) or _not_zero(v.z)


def _normalize_if_nonzero(v: Vec3) -> Vec3:
    if _vec_not_zero(v):
        length = v.length()
        if length > 0.0:
            return v / length
    return v


def _project(n: Vec3, v: Vec3) -> Vec3:
    return _normalize_if_nonzero(v - n * n.dot(v))


def _normal(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.normal(*index_to_data(index))


def _position(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.position(*index_to_data(index))


def _corner_of(tri_list: Sequence[int], tri: int, vertex: int) -> int:
    for i in range(3):
        if tri_list[3 * tri + i] == vertex:
            return i
    return -1


def _assign_recursive(
    tri_infos: Sequence[TriInfo],
    tri_list: Sequence[int],
    group: Group,
    start: Sequence[int],
) -> None:
    """Grow group depth first from the given neighbour triangles, left before right."""
    stack = [t for t in reversed(start) if t >= 0]
    while stack:
        t = stack.pop()
        info = tri_infos[t]
        i = _corner_of(tri_list, t, group.vertex_representative)
        if i < 0:
            continue
        if info.assigned_group[i] is not None:
            continue
        if _has(info, TriFlag.GROUP_WITH_ANY) and all(g is None for g in info.assigned_group):
            # The first group to reach a group-with-anything triangle decides its orientation.
            info.flag = TriFlag(int(info.flag) & ~int(TriFlag.ORIENT_PRESERVING))
            if group.orient_preserving:
                info.flag |= TriFlag.ORIENT_PRESERVING
        if _has(info, TriFlag.ORIENT_PRESERVING) != group.orient_preserving:
            continue
        group.face_indices.append(t)
        info.assigned_group[i] = group
        left = info.face_neighbors[i]
        right = info.face_neighbors[i - 1 if i > 0 else 2]
        if right >= 0:
            stack.append(right)
        if left >= 0:
            stack.append(left)


def build_groups(
    tri_infos: Sequence[TriInfo], tri_list: Sequence[int], n_triangles: int
) -> list[Group]:
    """Gather the corners of the first n_triangles triangles into groups by
    shared vertex, connectivity and orientation."""
    groups: list[Group] = []
    for f in range(n_triangles):
        info = tri_infos[f]
        for i in range(3):
            if _has(info, TriFlag.GROUP_WITH_ANY) or info.assigned_group[i] is not None:
                continue
            group = Group(
                vertex_representative=tri_list[3 * f + i],
                orient_preserving=_has(info, TriFlag.ORIENT_PRESERVING),
            )
            groups.append(group)
            info.assigned_group[i] = group
            group.face_indices.append(f)
            left = info.face_neighbors[i]
            right = info.face_neighbors[i - 1 if i > 0 else 2]
            _assign_recursive(tri_infos, tri_list, group, (left, right))
    return groups


def _avg_tspace(a: TangentSpace, b: TangentSpace) -> TangentSpace:
    if (
        a.mag_s == b.mag_s
        and a.mag_t == b.mag_t
        and a.tangent == b.tangent
        and a.bitangent == b.bitangent
    ):
        return TangentSpace(a.tangent, a.mag_s, a.bitangent, a.mag_t)
    return TangentSpace(
        _normalize_if_nonzero(a.tangent + b.tangent),
        0.5 * (a.mag_s + b.mag_s),
        _normalize_if_nonzero(a.bitangent + b.bitangent),
        0.5 * (a.mag_t + b.mag_t),
    )


def _eval_tspace(
    members: Sequence[int],
    tri_list: Sequence[int],
    tri_infos: Sequence[TriInfo],
    mesh: FaceMesh,
    vertex_rep: int,
) -> TangentSpace:
    v_os = Vec3()
    v_ot = Vec3()
    mag_s = 0.0
    mag_t = 0.0
    angle_sum = 0.0
    for f in members:
        info = tri_infos[f]
        if _has(info, TriFlag.GROUP_WITH_ANY):
            continue
        i = _corner_of(tri_list, f, vertex_rep)
        if i < 0:
            continue
        n = _normal(mesh, tri_list[3 * f + i])
        os_ = _project(n, info.os)
        ot_ = _project(n, info.ot)

        i2 = tri_list[3 * f + (i + 1) % 3]
        i1 = tri_list[3 * f + i]
        i0 = tri_list[3 * f + (i + 2) % 3]
        p0, p1, p2 = _position(mesh, i0), _position(mesh, i1), _position(mesh, i2)
        v1 = _project(n, p0 - p1)
        v2 = _project(n, p2 - p1)

        cos_angle = max(-1.0, min(1.0, v1.dot(v2)))
        angle = math.acos(cos_angle)
        v_os = v_os + os_ * angle
        v_ot = v_ot + ot_ * angle
        mag_s += angle * info.mag_s
        mag_t += angle * info.mag_t
        angle_sum += angle

    v_os = _normalize_if_nonzero(v_os)
    v_ot = _normalize_if_nonzero(v_ot)
    if angle_sum > 0:
        mag_s /= angle_sum
        mag_t /= angle_sum
    return TangentSpace(v_os, mag_s, v_ot, mag_t)


def generate_tspaces(
    tspaces: MutableSequence[TangentSpace],
    tri_infos: Sequence[TriInfo],
    groups: Sequence[Group],
    tri_list: Sequence[int],
    thres_cos: float,
    mesh: FaceMesh,
) -> None:
    """Split every group into subgroups by the angular threshold and write a
    tangent space for each corner the group covers into tspaces."""
    for group in groups:
        subgroups: list[tuple[tuple[int, ...], TangentSpace]] = []
        for f in group.face_indices:
            info = tri_infos[f]
            index = next(
                (k for k in range(3) if info.assigned_group[k] is group), -1
            )
            if index < 0:
                continue
            vert_index = tri_list[3 * f + index]
            n = _normal(mesh, vert_index)
            os_ = _project(n, info.os)
            ot_ = _project(n, info.ot)

            members = []
            for t in group.face_indices:
                other = tri_infos[t]
                os2 = _project(n, other.os)
                ot2 = _project(n, other.ot)
                any_ = _has(info, TriFlag.GROUP_WITH_ANY) or _has(other, TriFlag.GROUP_WITH_ANY)
                same_face = info.org_face_number == other.org_face_number
                if any_ or same_face or (os_.dot(os2) > thres_cos and ot_.dot(ot2) > thres_cos):
                    members.append(t)
            key = tuple(sorted(members))

            sub = next((ts for k, ts in subgroups if k == key), None)
            if sub is None:
                sub = _eval_tspace(key, tri_list, tri_infos, mesh, group.vertex_representative)
                subgroups.append((key, sub))

            offs = info.tspaces_offs + info.vert_num[index]
            out = tspaces[offs]
            if out.counter == 1:
                tspaces[offs] = replace(
                    _avg_tspace(out, sub), counter=2, orient=group.orient_preserving
                )
            else:
                tspaces[offs] = replace(sub, counter=1, orient=group.orient_preserving)


def degen_epilogue(
    tspaces: MutableSequence[TangentSpace],
    tri_infos: Sequence[TriInfo],
    tri_list: Sequence[int],
    mesh: FaceMesh,
    n_good: int,
    n_total: int,
) -> None:
    """Give degenerate triangles the tangent spaces of good triangles that
    share their welded vertices, and fill the missing corner of quads that
    have only one good triangle."""
    good = tri_list[:3 * n_good]
    for t in range(n_good, n_total):
        info = tri_infos[t]
        if _has(info, TriFlag.QUAD_ONE_DEGEN_TRI):
            continue
        for i in range(3):
            index1 = tri_list[3 * t + i]
            try:
                j = good.index(index1)
            except ValueError:
                continue
            src_info = tri_infos[j // 3]
            src = src_info.tspaces_offs + src_info.vert_num[j % 3]
            dst = info.tspaces_offs + info.vert_num[i]
            tspaces[dst] = replace(tspaces[src])

    for t in range(n_good):
        info = tri_infos[t]
        if not _has(info, TriFlag.QUAD_ONE_DEGEN_TRI):
            continue
        present = 0
        for v in info.vert_num:
            present |= 1 << v
        if not present & 2:
            missing = 1
        elif not present & 4:
            missing = 2
        elif not present & 8:
            missing = 3
        else:
            missing = 0
        face = info.org_face_number
        dst_pos = mesh.position(face, missing)
        for v in info.vert_num:
            if mesh.position(face, v) == dst_pos:
                offs = info.tspaces_offs
                tspaces[offs + missing] = replace(tspaces[offs + v])
                break


def gen_tang_space(mesh: FaceMesh, angular_threshold: float = 180.0) -> list[list[TangentSpace]]:
    """Compute a tangent space for every corner of every triangle and quad.

    Returns one list per face, holding a TangentSpace per corner; faces that
    are neither triangles nor quads get an empty list. Raises ValueError when
    the mesh has no triangles or quads at all.
    """
    thres_cos = math.cos(math.radians(angular_threshold))
    face_sizes = [mesh.num_vertices_of_face(f) for f in range(mesh.num_faces())]
    if not any(n in (3, 4) for n in face_sizes):
        raise ValueError("the mesh has no triangles or quads")

    tri_infos, tri_list, n_tspaces = build_triangle_list(mesh)
    tri_list = weld_vertices(mesh, tri_list)

    n_total = len(tri_infos)
    n_good = n_total - mark_degenerate(mesh, tri_infos, tri_list)
    degen_prologue(tri_infos, tri_list, n_good, n_total)
    init_tri_info(tri_infos, tri_list, mesh, n_good)
    groups = build_groups(tri_infos, tri_list, n_good)

    tspaces = [TangentSpace() for _ in range(n_tspaces)]
    generate_tspaces(tspaces, tri_infos, groups, tri_list, thres_cos, mesh)
    degen_epilogue(tspaces, tri_infos, tri_list, mesh, n_good, n_total)

    result: list[list[TangentSpace]] = []
    offs = 0
    for size in face_sizes:
        if size in (3, 4):
            result.append(tspaces[offs:offs + size])
            offs += size
        else:
            result.append([])
    return result


def gen_tang_space_default(mesh: FaceMesh) -> list[list[TangentSpace]]:
    """gen_tang_space with the recommended threshold of 180 degrees (no splitting)."""
    return gen_tang_space(mesh, 180.0)