import pytest

from meshkit.mesh import TriangleMesh
from meshkit.triangles import Vec3

QUAD_POINTS = [
    0.0, 0.0, 0.0,
    1.0, 0.0, 0.0,
    1.0, 1.0, 0.0,
    0.0, 1.0, 0.0,
]
QUAD_NORMALS = [0.0, 0.0, 1.0] * 4
QUAD_INDICES = [0, 1, 2, 0, 2, 3]


def make_quad():
    return TriangleMesh("Quad", QUAD_INDICES, QUAD_POINTS, QUAD_NORMALS)


def as_tuples(vectors):
    return [tuple(v) for v in vectors]


def test_triangles_follow_the_index_list():
    mesh = make_quad()
    tris = mesh.triangles()
    assert len(tris) == 2
    assert tris[1].vertices() == (Vec3(0, 0, 0), Vec3(1, 1, 0), Vec3(0, 1, 0))


def test_initial_state_is_untransformed():
    mesh = make_quad()
    assert mesh.transformed_points() == list(mesh.points)
    assert mesh.translation() == Vec3(0, 0, 0)
    assert mesh.scaling() == Vec3(1, 1, 1)
    assert not mesh.is_mirrored()


def test_bounding_box_of_quad():
    box = make_quad().bounding_box()
    assert (box.x_min, box.x_max, box.y_min, box.y_max, box.z_min, box.z_max) == (
        0.0, 1.0, 0.0, 1.0, 0.0, 0.0,
    )


def test_translation_is_absolute():
    mesh = make_quad()
    mesh.set_translation((1.0, 2.0, 3.0))
    mesh.set_translation((2.0, 2.0, 3.0))
    assert mesh.translation() == Vec3(2.0, 2.0, 3.0)
    expected = [tuple(p + Vec3(2.0, 2.0, 3.0)) for p in mesh.points]
    for got, want in zip(as_tuples(mesh.transformed_points()), expected):
        assert got == pytest.approx(want)
    assert mesh.bounding_box().x_min == pytest.approx(2.0)


def test_translation_leaves_normals_alone():
    mesh = make_quad()
    mesh.set_translation((5.0, -1.0, 2.0))
    assert mesh.transformed_normals() == list(mesh.normals)


def test_rotation_about_z_turns_points_and_normals():
    mesh = make_quad()
    mesh.set_rotation((0.0, 0.0, 90.0))
    assert mesh.rotation() == Vec3(0.0, 0.0, 90.0)
    assert tuple(mesh.transformed_points()[1]) == pytest.approx((0.0, 1.0, 0.0))
    assert tuple(mesh.transformed_normals()[0]) == pytest.approx((0.0, 0.0, 1.0))


def test_rotation_back_restores_points():
    mesh = make_quad()
    mesh.set_rotation((30.0, 0.0, 0.0))
    mesh.set_rotation((0.0, 0.0, 0.0))
    for got, want in zip(as_tuples(mesh.transformed_points()), as_tuples(mesh.points)):
        assert got == pytest.approx(want)


def test_scaling_is_absolute():
    mesh = make_quad()
    mesh.set_scaling((2.0, 3.0, 1.0))
    mesh.set_scaling((4.0, 3.0, 1.0))
    assert mesh.scaling() == Vec3(4.0, 3.0, 1.0)
    assert tuple(mesh.transformed_points()[2]) == pytest.approx((4.0, 3.0, 0.0))


@pytest.mark.parametrize(
    "scale, mirrored",
    [
        ((-1.0, 1.0, 1.0), True),
        ((1.0, -1.0, 1.0), True),
        ((1.0, 1.0, -1.0), True),
        ((-1.0, -1.0, -1.0), True),
        ((-1.0, -1.0, 1.0), False),
        ((2.0, 2.0, 2.0), False),
    ],
)
def test_is_mirrored(scale, mirrored):
    mesh = make_quad()
    mesh.set_scaling(scale)
    assert mesh.is_mirrored() is mirrored


def test_reset_restores_everything():
    mesh = make_quad()
    mesh.set_translation((1.0, 1.0, 1.0))
    mesh.set_scaling((2.0, 2.0, 2.0))
    mesh.reset_transformations()
    assert mesh.transformed_points() == list(mesh.points)
    assert mesh.transformation() == type(mesh.transformation()).identity()
    assert mesh.translation() == Vec3(0, 0, 0)
    assert mesh.intersects_with_ray((0.5, 0.5, 1.0), (0.0, 0.0, -1.0)) is not None


def test_ray_hits_quad():
    hit = make_quad().intersects_with_ray((0.25, 0.75, 5.0), (0.0, 0.0, -1.0))
    assert tuple(hit) == pytest.approx((0.25, 0.75, 0.0))


def test_ray_misses_quad():
    assert make_quad().intersects_with_ray((2.0, 2.0, 5.0), (0.0, 0.0, -1.0)) is None


def test_ray_follows_translated_mesh():
    mesh = make_quad()
    mesh.set_translation((10.0, 0.0, 0.0))
    assert mesh.intersects_with_ray((0.5, 0.5, 5.0), (0.0, 0.0, -1.0)) is None
    hit = mesh.intersects_with_ray((10.5, 0.5, 5.0), (0.0, 0.0, -1.0))
    assert tuple(hit) == pytest.approx((10.5, 0.5, 0.0))


def test_bounding_sphere_holds_transformed_points():
    mesh = make_quad()
    mesh.set_scaling((3.0, 1.0, 1.0))
    sphere = mesh.bounding_sphere()
    for p in mesh.transformed_points():
        assert (p - sphere.center).length() <= sphere.radius + 1e-9


def test_optional_attributes_are_grouped():
    mesh = TriangleMesh(
        "Quad", QUAD_INDICES, QUAD_POINTS, QUAD_NORMALS,
        tex_coords=[0, 0, 1, 0, 1, 1, 0, 1],
        tangents=[1.0, 0.0, 0.0] * 4,
    )
    assert mesh.tex_coords[2] == (1.0, 1.0)
    assert mesh.tangents[3] == Vec3(1.0, 0.0, 0.0)
    assert mesh.bitangents == ()


def test_index_out_of_range_raises():
    with pytest.raises(ValueError):
        TriangleMesh("Bad", [0, 1, 7], QUAD_POINTS, QUAD_NORMALS)


def test_partial_triangle_raises():
    with pytest.raises(ValueError):
        TriangleMesh("Bad", [0, 1], QUAD_POINTS, QUAD_NORMALS)


def test_points_not_in_triples_raise():
    with pytest.raises(ValueError):
        TriangleMesh("Bad", [], [0.0, 1.0], [])