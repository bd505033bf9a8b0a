import math

import pytest

from meshkit.surfaces import (
    ParametricShape,
    TopShell,
    TriaxialHexatorus,
    TriaxialTritorus,
    TurretShell,
    TwistedPseudoSphere,
    TwistedTriaxial,
    VerrillMinimal,
    WrinkledPeriwinkle,
)
from meshkit.triangles import Vec3


def test_base_is_abstract():
    with pytest.raises(TypeError):
        ParametricShape(1.0)


@pytest.mark.parametrize(
    "shape,u_range,v_range",
    [
        (TopShell((0, 0, 0), 1.0), (0.0, 2 * math.pi), (0.0, 2 * math.pi)),
        (TriaxialHexatorus(1.0), (-math.pi, math.pi), (-math.pi, math.pi)),
        (TriaxialTritorus(1.0), (-math.pi, math.pi), (-math.pi, math.pi)),
        (TurretShell(1.0), (0.0, 2 * math.pi), (0.0, 2 * math.pi)),
        (TwistedPseudoSphere(1.0), (0.0, 4 * math.pi), (0.1, 1.0)),
        (TwistedTriaxial(1.0), (-math.pi, math.pi), (-math.pi, math.pi)),
        (VerrillMinimal(1.0), (0.0, 2 * math.pi), (0.5, 1.0)),
        (WrinkledPeriwinkle(1.0), (0.0, 2 * math.pi), (0.0, 2 * math.pi)),
    ],
)
def test_parameter_ranges(shape, u_range, v_range):
    assert shape.u_range() == pytest.approx(u_range)
    assert shape.v_range() == pytest.approx(v_range)


def test_top_shell_apex_at_u_zero():
    shell = TopShell(Vec3(1.0, 2.0, 3.0), 2.0)
    p = shell.point_at_parameter(0.0, 0.7)
    assert p.x == pytest.approx(1.0)
    assert p.y == pytest.approx(2.0)
    assert p.z == pytest.approx(3.0 - 1.75 * 2.0)


def test_top_shell_center_offsets_point():
    a = TopShell((0.0, 0.0, 0.0), 1.5).point_at_parameter(2.0, 1.0)
    b = TopShell((1.0, -2.0, 4.0), 1.5).point_at_parameter(2.0, 1.0)
    diff = b - a
    assert diff.x == pytest.approx(1.0)
    assert diff.y == pytest.approx(-2.0)
    assert diff.z == pytest.approx(4.0)


def test_top_shell_negative_u_raises():
    with pytest.raises(ValueError):
        TopShell((0, 0, 0), 1.0).point_at_parameter(-1.0, 0.0)


def test_hexatorus_x_vanishes_at_u_zero():
    p = TriaxialHexatorus(2.0).point_at_parameter(0.0, 1.2)
    assert p.x == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("cls", [TriaxialHexatorus, TriaxialTritorus, VerrillMinimal])
def test_point_scales_with_radius(cls):
    p1 = cls(1.0).point_at_parameter(0.4, 0.8)
    p3 = cls(3.0).point_at_parameter(0.4, 0.8)
    assert p3.x == pytest.approx(3.0 * p1.x)
    assert p3.y == pytest.approx(3.0 * p1.y)
    assert p3.z == pytest.approx(3.0 * p1.z)


def test_tritorus_x_vanishes_at_v_pi():
    p = TriaxialTritorus(2.0).point_at_parameter(1.1, math.pi)
    assert p.x == pytest.approx(0.0, abs=1e-12)


def test_turret_shell_apex():
    p = TurretShell(2.0).point_at_parameter(0.0, 1.3)
    assert p.x == pytest.approx(0.0)
    assert p.y == pytest.approx(0.0)
    assert p.z == pytest.approx(-4.5 * 2.0)


def test_pseudo_sphere_radius_and_twist():
    shape = TwistedPseudoSphere(2.0)
    p = shape.point_at_parameter(1.0, 0.5)
    q = shape.point_at_parameter(2.0, 0.5)
    assert p.x ** 2 + p.y ** 2 == pytest.approx((2.0 * math.sin(0.5)) ** 2)
    assert q.z - p.z == pytest.approx(6.0)


def test_pseudo_sphere_v_zero_raises():
    with pytest.raises(ValueError):
        TwistedPseudoSphere(1.0).point_at_parameter(0.0, 0.0)


def test_twisted_triaxial_origin_x():
    p = TwistedTriaxial(3.0).point_at_parameter(0.0, 0.0)
    assert p.x == pytest.approx(3.0)


def test_twisted_triaxial_corner_ignores_radius_in_x():
    a = TwistedTriaxial(1.0).point_at_parameter(math.pi, math.pi)
    b = TwistedTriaxial(5.0).point_at_parameter(math.pi, math.pi)
    assert a.x == pytest.approx(b.x, abs=1e-12)


def test_verrill_height_at_v_one():
    p = VerrillMinimal(2.0).point_at_parameter(0.3, 1.0)
    assert p.z == pytest.approx(1.5 * 2.0)


def test_verrill_non_positive_v_raises():
    with pytest.raises((ValueError, ZeroDivisionError)):
        VerrillMinimal(1.0).point_at_parameter(0.3, 0.0)


def test_periwinkle_origin_at_u_zero():
    p = WrinkledPeriwinkle(3.0).point_at_parameter(0.0, 2.0)
    assert (p.x, p.y, p.z) == pytest.approx((0.0, 0.0, 0.0))


def test_periwinkle_height_independent_of_radius_at_v_zero():
    a = WrinkledPeriwinkle(1.0).point_at_parameter(math.pi, 0.0)
    b = WrinkledPeriwinkle(4.0).point_at_parameter(math.pi, 0.0)
    assert a.z == pytest.approx(b.z)


def test_names():
    assert TopShell((0, 0, 0), 1.0).name == "Top Sea Shell"
    assert VerrillMinimal(1.0).name == "Verrill Minimal Surface"
    assert TwistedPseudoSphere(1.0).name == "Twisted Pseudo Sphere"