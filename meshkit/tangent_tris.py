"""Per-triangle analysis for tangent-space generation.

Covers degenerate triangles, first-order texture derivatives, quad
orientation and the edge adjacency between triangles.
"""

from __future__ import annotations

from typing import MutableSequence, Sequence

from meshkit.tangent_weld import FaceMesh, TriFlag, TriInfo, index_to_data
from meshkit.triangles import Vec3

_FLT_MIN = 1.17549435e-38


def _not_zero(value: float) -> bool:
    return abs(value) > _FLT_MIN


def _position(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.position(*index_to_data(index))


def _tex_coord(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.tex_coord(*index_to_data(index))


def _clear(info: TriInfo, bit: TriFlag) -> None:
    info.flag = TriFlag(int(info.flag) & ~int(bit))


def _has(info: TriInfo, bit: TriFlag) -> bool:
    return (int(info.flag) & int(bit)) != 0


def mark_degenerate(
    mesh: FaceMesh, tri_infos: Sequence[TriInfo], tri_list: Sequence[int]
) -> int:
    """Flag every triangle with two coinciding corner positions.

    Returns the number of degenerate triangles found.
    """
    count = 0
    for t, info in enumerate(tri_infos):
        p0, p1, p2 = (_position(mesh, i) for i in tri_list[3 * t:3 * t + 3])
        if p0 == p1 or p0 == p2 or p1 == p2:
            info.flag |= TriFlag.MARK_DEGENERATE
            count += 1
    return count


def degen_prologue(
    tri_infos: MutableSequence[TriInfo],
    tri_list: MutableSequence[int],
    n_good: int,
    n_total: int,
) -> None:
    """Mark quads that have exactly one good triangle, then move every
    degenerate triangle behind the good ones, keeping the good ones in order.

    tri_infos and tri_list are reordered in place.
    """
    t = 0
    while t < n_total - 1:
        if tri_infos[t].org_face_number == tri_infos[t + 1].org_face_number:
            deg_a = _has(tri_infos[t], TriFlag.MARK_DEGENERATE)
            deg_b = _has(tri_infos[t + 1], TriFlag.MARK_DEGENERATE)
            if deg_a != deg_b:
                tri_infos[t].flag |= TriFlag.QUAD_ONE_DEGEN_TRI
                tri_infos[t + 1].flag |= TriFlag.QUAD_ONE_DEGEN_TRI
            t += 2
        else:
            t += 1

    next_good = 1
    t = 0
    still_finding = True
    while t < n_good and still_finding:
        if not _has(tri_infos[t], TriFlag.MARK_DEGENERATE):
            next_good = max(next_good, t + 2)
        else:
            just_degenerate = True
            while just_degenerate and next_good < n_total:
                if not _has(tri_infos[next_good], TriFlag.MARK_DEGENERATE):
                    just_degenerate = False
                else:
                    next_good += 1
            t0, t1 = t, next_good
            next_good += 1
            if not just_degenerate:
                a, b = 3 * t0, 3 * t1
                tri_list[a:a + 3], tri_list[b:b + 3] = tri_list[b:b + 3], tri_list[a:a + 3]
                tri_infos[t0], tri_infos[t1] = tri_infos[t1], tri_infos[t0]
            else:
                still_finding = False
        if still_finding:
            t += 1


def calc_tex_area(mesh: FaceMesh, indices: Sequence[int]) -> float:
    """Return twice the unsigned texture-space area of a triangle."""
    t1, t2, t3 = (_tex_coord(mesh, i) for i in indices[:3])
    t21x, t21y = t2.x - t1.x, t2.y - t1.y
    t31x, t31y = t3.x - t1.x, t3.y - t1.y
    return abs(t21x * t31y - t21y * t31x)


def init_tri_info(
    tri_infos: Sequence[TriInfo],
    tri_list: Sequence[int],
    mesh: FaceMesh,
    n_triangles: int,
) -> None:
    """Compute derivatives, orientation and neighbours of the first
    n_triangles triangles."""
    for info in tri_infos[:n_triangles]:
        info.face_neighbors = [-1, -1, -1]
        info.assigned_group = [None, None, None]
        info.os = Vec3()
        info.ot = Vec3()
        info.mag_s = 0.0
        info.mag_t = 0.0
        info.flag |= TriFlag.GROUP_WITH_ANY

    for f in range(n_triangles):
        info = tri_infos[f]
        corners = tri_list[3 * f:3 * f + 3]
        v1, v2, v3 = (_position(mesh, i) for i in corners)
        t1, t2, t3 = (_tex_coord(mesh, i) for i in corners)

        t21x, t21y = t2.x - t1.x, t2.y - t1.y
        t31x, t31y = t3.x - t1.x, t3.y - t1.y
        d1 = v2 - v1
        d2 = v3 - v1

        signed_area = t21x * t31y - t21y * t31x
        v_os = d1 * t31y - d2 * t21y
        v_ot = d1 * (-t31x) + d2 * t21x

        if signed_area > 0:
            info.flag |= TriFlag.ORIENT_PRESERVING

        if _not_zero(signed_area):
            abs_area = abs(signed_area)
            len_os = v_os.length()
            len_ot = v_ot.length()
            sign = 1.0 if _has(info, TriFlag.ORIENT_PRESERVING) else -1.0
            if _not_zero(len_os):
                info.os = v_os * (sign / len_os)
            if _not_zero(len_ot):
                info.ot = v_ot * (sign / len_ot)
            info.mag_s = len_os / abs_area
            info.mag_t = len_ot / abs_area
            if _not_zero(info.mag_s) and _not_zero(info.mag_t):
                _clear(info, TriFlag.GROUP_WITH_ANY)

    # Force otherwise healthy quads to one orientation.
    t = 0
    while t < n_triangles - 1:
        a, b = tri_infos[t], tri_infos[t + 1]
        if a.org_face_number == b.org_face_number:
            degenerate = _has(a, TriFlag.MARK_DEGENERATE) or _has(b, TriFlag.MARK_DEGENERATE)
            if not degenerate:
                orient_a = _has(a, TriFlag.ORIENT_PRESERVING)
                orient_b = _has(b, TriFlag.ORIENT_PRESERVING)
                if orient_a != orient_b:
                    choose_first = _has(b, TriFlag.GROUP_WITH_ANY) or (
                        calc_tex_area(mesh, tri_list[3 * t:3 * t + 3])
                        >= calc_tex_area(mesh, tri_list[3 * (t + 1):3 * (t + 1) + 3])
                    )
                    src, dst = (a, b) if choose_first else (b, a)
                    _clear(dst, TriFlag.ORIENT_PRESERVING)
                    if _has(src, TriFlag.ORIENT_PRESERVING):
                        dst.flag |= TriFlag.ORIENT_PRESERVING
            t += 2
        else:
            t += 1

    build_neighbors(tri_infos, tri_list, n_triangles)


def _get_edge(indices: Sequence[int], i0_in: int, i1_in: int) -> tuple[int, int, int]:
    """Return (i0, i1, edge number) of the edge {i0_in, i1_in} in triangle order."""
    if indices[0] in (i0_in, i1_in):
        if indices[1] in (i0_in, i1_in):
            return indices[0], indices[1], 0
        return indices[2], indices[0], 2
    return indices[1], indices[2], 1


def build_neighbors(
    tri_infos: Sequence[TriInfo], tri_list: Sequence[int], n_triangles: int
) -> None:
    """Pair up triangles that share an edge traversed in opposite directions.

    Only edges whose face_neighbors entry is still -1 are assigned.
    """
    edges = []
    for f in range(n_triangles):
        for i in range(3):
            a = tri_list[3 * f + i]
            b = tri_list[3 * f + (i + 1) % 3]
            edges.append((min(a, b), max(a, b), f))
    edges.sort()

    count = len(edges)
    for i, (i0, i1, f) in enumerate(edges):
        tri_f = tri_list[3 * f:3 * f + 3]
        i0_a, i1_a, edge_a = _get_edge(tri_f, i0, i1)
        if tri_infos[f].face_neighbors[edge_a] != -1:
            continue
        j = i + 1
        while j < count and edges[j][0] == i0 and edges[j][1] == i1:
            t = edges[j][2]
            i1_b, i0_b, edge_b = _get_edge(tri_list[3 * t:3 * t + 3], i0, i1)
            if i0_a == i0_b and i1_a == i1_b and tri_infos[t].face_neighbors[edge_b] == -1:
                tri_infos[f].face_neighbors[edge_a] = t
                tri_infos[t].face_neighbors[edge_b] = f
                break
            j += 1