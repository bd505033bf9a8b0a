import pytest

from meshkit.tangent_weld import (
    GRID_CELLS,
    FaceMesh,
    TriFlag,
    build_triangle_list,
    find_grid_cell,
    index_to_data,
    make_index,
    weld_vertices,
)


def _attrs(mesh, index):
    face, vert = index_to_data(index)
    return (mesh.position(face, vert), mesh.normal(face, vert), mesh.tex_coord(face, vert))


def _split_quad_mesh():
    # Two triangle faces, each with its own copies of the shared edge's vertices.
    positions = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 0, 0), (1, 1, 0), (0, 1, 0)]
    normals = [(0, 0, 1)] * 6
    uvs = [(0, 0), (1, 0), (1, 1), (0, 0), (1, 1), (0, 1)]
    return FaceMesh(positions, normals, uvs, [(0, 1, 2), (3, 4, 5)])


def _grid_mesh(n):
    positions, normals, uvs, faces = [], [], [], []
    for row in range(n):
        for col in range(n):
            corners = [(col, row), (col + 1, row), (col + 1, row + 1), (col, row + 1)]
            for tri in ((0, 1, 2), (0, 2, 3)):
                face = []
                for k in tri:
                    x, y = corners[k]
                    face.append(len(positions))
                    positions.append((x, y, 0.0))
                    normals.append((0.0, 0.0, 1.0))
                    uvs.append((x / n, y / n))
                faces.append(face)
    return FaceMesh(positions, normals, uvs, faces)


@pytest.mark.parametrize("face,vert", [(0, 0), (0, 3), (5, 2), (1000, 1)])
def test_index_round_trip(face, vert):
    assert index_to_data(make_index(face, vert)) == (face, vert)


def test_make_index_packs_face_above_two_bits():
    assert make_index(2, 3) == 11


@pytest.mark.parametrize("face,vert", [(0, 4), (0, -1), (-1, 0)])
def test_make_index_rejects_bad_arguments(face, vert):
    with pytest.raises(ValueError):
        make_index(face, vert)


def test_find_grid_cell_limits():
    assert find_grid_cell(0.0, 1.0, 0.0) == 0
    assert find_grid_cell(0.0, 1.0, 1.0) == GRID_CELLS - 1
    assert find_grid_cell(0.0, 1.0, -5.0) == 0
    assert find_grid_cell(0.0, 1.0, 5.0) == GRID_CELLS - 1


def test_find_grid_cell_is_monotonic():
    cells = [find_grid_cell(-2.0, 3.0, -2.0 + 0.05 * k) for k in range(101)]
    assert cells == sorted(cells)


def test_find_grid_cell_empty_range():
    assert find_grid_cell(1.0, 1.0, 1.0) == 0


def test_face_mesh_accessors():
    mesh = _split_quad_mesh()
    assert mesh.num_faces() == 2
    assert mesh.num_vertices_of_face(1) == 3
    assert tuple(mesh.position(1, 2)) == (0.0, 1.0, 0.0)
    assert tuple(mesh.normal(0, 0)) == (0.0, 0.0, 1.0)
    assert tuple(mesh.tex_coord(0, 1)) == (1.0, 0.0, 1.0)


def test_face_mesh_rejects_out_of_range_index():
    with pytest.raises(ValueError):
        FaceMesh([(0, 0, 0)], [(0, 0, 1)], [(0, 0)], [(0, 0, 1)])


def test_build_triangle_list_counts_and_offsets():
    positions = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0), (2, 2, 0)]
    normals = [(0, 0, 1)] * 5
    uvs = [(0, 0), (1, 0), (1, 1), (0, 1), (0.5, 0.5)]
    faces = [(0, 1, 2), (0, 1, 2, 3, 4), (0, 1, 2, 3), (0, 1)]
    mesh = FaceMesh(positions, normals, uvs, faces)
    infos, tri_list, n_tspaces = build_triangle_list(mesh)
    assert n_tspaces == 3 + 4
    assert len(infos) * 3 == len(tri_list) == 9
    assert [i.org_face_number for i in infos] == [0, 2, 2]
    assert [i.tspaces_offs for i in infos] == [0, 3, 3]
    assert all(i.flag == TriFlag.NONE for i in infos)
    for info, start in zip(infos, range(0, len(tri_list), 3)):
        for k in range(3):
            assert index_to_data(tri_list[start + k]) == (info.org_face_number, info.vert_num[k])


def test_quad_split_along_shorter_texture_diagonal():
    positions = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    normals = [(0, 0, 1)] * 4
    # Corners 1 and 3 lie closer together in texture space.
    uvs = [(0, 0), (0.6, 0.4), (1, 1), (0.4, 0.6)]
    mesh = FaceMesh(positions, normals, uvs, [(0, 1, 2, 3)])
    infos, _, _ = build_triangle_list(mesh)
    assert [i.vert_num for i in infos] == [[0, 1, 3], [1, 2, 3]]


def test_quad_split_falls_back_to_positions():
    positions = [(0, 0, 0), (3, 0, 0), (4, 1, 0), (0, 1, 0)]
    normals = [(0, 0, 1)] * 4
    uvs = [(0, 0), (1, 0), (1, 1), (0, 1)]
    mesh = FaceMesh(positions, normals, uvs, [(0, 1, 2, 3)])
    infos, _, _ = build_triangle_list(mesh)
    assert [i.vert_num for i in infos] == [[0, 1, 3], [1, 2, 3]]


def test_weld_merges_identical_vertices():
    mesh = _split_quad_mesh()
    _, tri_list, _ = build_triangle_list(mesh)
    welded = weld_vertices(mesh, tri_list)
    assert len(welded) == len(tri_list)
    assert len(set(welded)) == 4
    for original, rep in zip(tri_list, welded):
        assert _attrs(mesh, original) == _attrs(mesh, rep)


def test_weld_does_not_change_input():
    mesh = _split_quad_mesh()
    _, tri_list, _ = build_triangle_list(mesh)
    copy = list(tri_list)
    weld_vertices(mesh, tri_list)
    assert tri_list == copy


def test_weld_keeps_vertices_with_different_normals_apart():
    positions = [(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 0), (1, 0, 0), (0, 1, 0)]
    normals = [(0, 0, 1)] * 3 + [(0, 0, -1)] * 3
    uvs = [(0, 0), (1, 0), (0, 1)] * 2
    mesh = FaceMesh(positions, normals, uvs, [(0, 1, 2), (3, 4, 5)])
    _, tri_list, _ = build_triangle_list(mesh)
    assert weld_vertices(mesh, tri_list) == tri_list


def test_weld_grid_invariants():
    mesh = _grid_mesh(6)
    _, tri_list, _ = build_triangle_list(mesh)
    welded = weld_vertices(mesh, tri_list)
    distinct_keys = {_attrs(mesh, i) for i in tri_list}
    assert len(set(welded)) == len(distinct_keys)
    assert set(welded) <= set(tri_list)
    for original, rep in zip(tri_list, welded):
        assert _attrs(mesh, original) == _attrs(mesh, rep)
    # Welding an already welded list changes nothing.
    assert weld_vertices(mesh, welded) == welded


def test_weld_empty_list():
    mesh = _split_quad_mesh()
    assert weld_vertices(mesh, []) == []