"""Face meshes for tangent-space generation: triangle lists and vertex welding."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Sequence

from meshkit.triangles import Vec3

GRID_CELLS = 2048


class TriFlag(enum.IntFlag):
    """State bits kept for every triangle while tangent spaces are built."""

    NONE = 0
    MARK_DEGENERATE = 1
    QUAD_ONE_DEGEN_TRI = 2
    GROUP_WITH_ANY = 4
    ORIENT_PRESERVING = 8


def _vec3(value: Sequence[float], what: str) -> Vec3:
    if len(value) != 3:
        raise ValueError(f"every {what} needs three components")
    x, y, z = value
    return Vec3(float(x), float(y), float(z))


class FaceMesh:
    """A mesh of triangles and quads whose vertices index shared attribute lists.

    positions and normals hold (x, y, z) triples, tex_coords (u, v) pairs, and
    each face is a sequence of vertex indices into all three lists.
    """

    def __init__(
        self,
        positions: Sequence[Sequence[float]],
        normals: Sequence[Sequence[float]],
        tex_coords: Sequence[Sequence[float]],
        faces: Sequence[Sequence[int]],
    ) -> None:
        self._positions = tuple(_vec3(p, "position") for p in positions)
        self._normals = tuple(_vec3(n, "normal") for n in normals)
        uvs = []
        for t in tex_coords:
            if len(t) != 2:
                raise ValueError("every texture coordinate needs two components")
            uvs.append(Vec3(float(t[0]), float(t[1]), 1.0))
        self._tex_coords = tuple(uvs)
        limit = min(len(self._positions), len(self._normals), len(self._tex_coords))
        built = []
        for face in faces:
            verts = tuple(int(i) for i in face)
            for i in verts:
                if not 0 <= i < limit:
                    raise ValueError(f"vertex index {i} has no position, normal and texture coordinate")
            built.append(verts)
        self._faces = tuple(built)

    def num_faces(self) -> int:
        return len(self._faces)

    def num_vertices_of_face(self, face: int) -> int:
        return len(self._faces[face])

    def position(self, face: int, vert: int) -> Vec3:
        return self._positions[self._faces[face][vert]]

    def normal(self, face: int, vert: int) -> Vec3:
        return self._normals[self._faces[face][vert]]

    def tex_coord(self, face: int, vert: int) -> Vec3:
        """The texture coordinate as (u, v, 1)."""
        return self._tex_coords[self._faces[face][vert]]


@dataclass
class TriInfo:
    """Per-triangle working data of the tangent-space generator."""

    org_face_number: int = 0
    tspaces_offs: int = 0
    vert_num: list[int] = field(default_factory=lambda: [0, 1, 2])
    flag: TriFlag = TriFlag.NONE
    face_neighbors: list[int] = field(default_factory=lambda: [-1, -1, -1])
    assigned_group: list[Optional[object]] = field(default_factory=lambda: [None, None, None])
    os: Vec3 = Vec3()
    ot: Vec3 = Vec3()
    mag_s: float = 0.0
    mag_t: float = 0.0


def make_index(face: int, vert: int) -> int:
    """Pack a face number and a corner number (0 to 3) into one index."""
    if not 0 <= vert < 4:
        raise ValueError("vert must lie between 0 and 3")
    if face < 0:
        raise ValueError("face must not be negative")
    return (face << 2) | (vert & 0x3)


def index_to_data(index: int) -> tuple[int, int]:
    """Unpack an index into (face, vert)."""
    return index >> 2, index & 0x3


def find_grid_cell(f_min: float, f_max: float, value: float) -> int:
    """Return the hash cell, 0 to GRID_CELLS - 1, of value within [f_min, f_max].

    An empty range puts every value in cell 0.
    """
    span = f_max - f_min
    if span == 0.0:
        return 0
    cell = int(GRID_CELLS * ((value - f_min) / span))
    if cell >= GRID_CELLS:
        return GRID_CELLS - 1
    return max(cell, 0)


def _position(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.position(*index_to_data(index))


def _normal(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.normal(*index_to_data(index))


def _tex_coord(mesh: FaceMesh, index: int) -> Vec3:
    return mesh.tex_coord(*index_to_data(index))


def build_triangle_list(mesh: FaceMesh) -> tuple[list[TriInfo], list[int], int]:
    """Split the faces into triangles.

    Returns the per-triangle infos, the flat list of three packed vertex
    indices per triangle, and the total number of tangent spaces (one per
    face corner). Faces that are neither triangles nor quads are skipped;
    quads are split along their shorter diagonal.
    """
    tri_infos: list[TriInfo] = []
    tri_list: list[int] = []
    offs = 0
    for f in range(mesh.num_faces()):
        verts = mesh.num_vertices_of_face(f)
        if verts not in (3, 4):
            continue
        if verts == 3:
            tri_infos.append(TriInfo(org_face_number=f, tspaces_offs=offs, vert_num=[0, 1, 2]))
            tri_list.extend(make_index(f, k) for k in range(3))
        else:
            i0, i1, i2, i3 = (make_index(f, k) for k in range(4))
            t0, t1, t2, t3 = (_tex_coord(mesh, i) for i in (i0, i1, i2, i3))
            dist_02 = (t2 - t0).length_squared()
            dist_13 = (t3 - t1).length_squared()
            if dist_02 < dist_13:
                diag_02 = True
            elif dist_13 < dist_02:
                diag_02 = False
            else:
                p0, p1, p2, p3 = (_position(mesh, i) for i in (i0, i1, i2, i3))
                diag_02 = not ((p3 - p1).length_squared() < (p2 - p0).length_squared())

            if diag_02:
                corners = ((0, 1, 2), (0, 2, 3))
            else:
                corners = ((0, 1, 3), (1, 2, 3))
            packed = (i0, i1, i2, i3)
            for tri in corners:
                tri_infos.append(TriInfo(org_face_number=f, tspaces_offs=offs, vert_num=list(tri)))
                tri_list.extend(packed[k] for k in tri)
        offs += verts
    return tri_infos, tri_list, offs


def weld_vertices(mesh: FaceMesh, tri_list: Sequence[int]) -> list[int]:
    """Return a copy of tri_list in which vertices with identical position,
    normal and texture coordinate share one representative index."""
    tri = list(tri_list)
    if not tri:
        return tri

    attrs = [(_position(mesh, i), _normal(mesh, i), _tex_coord(mesh, i)) for i in tri]
    positions = [a[0] for a in attrs]

    # The bounding box starts from the very first packed index, face 0 corner 0.
    try:
        first = _position(mesh, 0)
    except IndexError:
        first = positions[0]
    lo = [first.x, first.y, first.z]
    hi = list(lo)
    for p in positions[1:]:
        for c, value in enumerate((p.x, p.y, p.z)):
            if lo[c] > value:
                lo[c] = value
            elif hi[c] < value:
                hi[c] = value
    dim = [h - low for h, low in zip(hi, lo)]
    if dim[1] > dim[0] and dim[1] > dim[2]:
        channel = 1
    elif dim[2] > dim[0]:
        channel = 2
    else:
        channel = 0

    cells: dict[int, list[int]] = {}
    for i, p in enumerate(positions):
        value = (p.x, p.y, p.z)[channel]
        cells.setdefault(find_grid_cell(lo[channel], hi[channel], value), []).append(i)

    for k in sorted(cells):
        members = cells[k]
        if len(members) < 2:
            continue
        entries = [((positions[i].x, positions[i].y, positions[i].z), i) for i in members]
        _merge_fast(tri, entries, attrs)
    return tri


def _merge_fast(tri: list[int], entries: list, attrs: list) -> None:
    stack = [(0, len(entries) - 1)]
    while stack:
        left, right = stack.pop()
        v_min = list(entries[left][0])
        v_max = list(v_min)
        for coords, _ in entries[left + 1:right + 1]:
            for c in range(3):
                if v_min[c] > coords[c]:
                    v_min[c] = coords[c]
                elif v_max[c] < coords[c]:
                    v_max[c] = coords[c]
        dx, dy, dz = (v_max[c] - v_min[c] for c in range(3))
        if dy > dx and dy > dz:
            ch = 1
        elif dz > dx:
            ch = 2
        else:
            ch = 0
        sep = 0.5 * (v_max[ch] + v_min[ch])

        if sep >= v_max[ch] or sep <= v_min[ch]:
            for pos in range(left, right + 1):
                i = entries[pos][1]
                key = attrs[i]
                for earlier in range(left, pos):
                    i2 = entries[earlier][1]
                    if attrs[i2] == key:
                        tri[i] = tri[i2]
                        break
            continue

        il, ir = left, right
        while il < ir:
            ready_left = ready_right = False
            while not ready_left and il < ir:
                ready_left = not (entries[il][0][ch] < sep)
                if not ready_left:
                    il += 1
            while not ready_right and il < ir:
                ready_right = entries[ir][0][ch] < sep
                if not ready_right:
                    ir -= 1
            if ready_left and ready_right:
                entries[il], entries[ir] = entries[ir], entries[il]
                il += 1
                ir -= 1
        if il == ir:
            if entries[ir][0][ch] < sep:
                il += 1
            else:
                ir -= 1
        if left < ir:
            stack.append((left, ir))
        if il < right:
            stack.append((il, right))