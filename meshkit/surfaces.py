"""Parametric surfaces: sea shells, toroidal forms and minimal surfaces."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import ClassVar, Sequence, Union

from meshkit.triangles import Vec3

VecLike = Union[Vec3, Sequence[float]]

_PI = math.pi
_TWO_PI = 2.0 * math.pi


def _to_vec(value: VecLike) -> Vec3:
    if isinstance(value, Vec3):
        return value
    x, y, z = value
    return Vec3(float(x), float(y), float(z))


class ParametricShape(ABC):
    """A surface given by a point for every (u, v) in its parameter ranges."""

    name: ClassVar[str] = "Parametric Surface"
    _u_bounds: ClassVar[tuple[float, float]] = (0.0, _TWO_PI)
    _v_bounds: ClassVar[tuple[float, float]] = (0.0, _TWO_PI)

    def __init__(self, radius: float) -> None:
        self.radius = float(radius)

    def u_range(self) -> tuple[float, float]:
        """The first and last u parameter."""
        return self._u_bounds

    def v_range(self) -> tuple[float, float]:
        """The first and last v parameter."""
        return self._v_bounds

    @abstractmethod
    def point_at_parameter(self, u: float, v: float) -> Vec3:
        """Return the surface point at (u, v)."""


class TopShell(ParametricShape):
    """A top-shaped sea shell spiralling about a centre point."""

    name = "Top Sea Shell"
    _u_bounds = (0.0, _TWO_PI)
    _v_bounds = (0.0, _TWO_PI)

    _TUBE = 1.0
    _TURNS = 7.6
    _HEIGHT = 2.5
    _POWER = 1.3

    def __init__(self, center: VecLike, radius: float) -> None:
        super().__init__(radius)
        self.center = _to_vec(center)

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        w = u / _TWO_PI * self._TUBE
        r = self.radius
        spread = w * (1.0 + math.cos(v))
        x = self.center.x + r * spread * math.cos(self._TURNS * u)
        y = self.center.y + r * spread * math.sin(self._TURNS * u)
        z = (
            self.center.z
            + r * (w * math.sin(v) + self._HEIGHT * math.pow(u / _TWO_PI, self._POWER))
            - r * 1.75
        )
        return Vec3(x, y, z)


class TriaxialHexatorus(ParametricShape):
    """The triaxial hexatorus."""

    name = "Triaxial Hexatorus"
    _u_bounds = (-_PI, _PI)
    _v_bounds = (-_PI, _PI)

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        third = _TWO_PI / 3.0
        root2 = math.sqrt(2.0)
        x = r * math.sin(u) / (root2 + math.cos(v))
        y = r * math.sin(u + third) / (root2 + math.cos(v + third))
        z = r * math.cos(u - third) / (root2 + math.cos(v - third))
        return Vec3(x, y, z)


class TriaxialTritorus(ParametricShape):
    """The triaxial tritorus."""

    name = "Triaxial Tritorus"
    _u_bounds = (-_PI, _PI)
    _v_bounds = (-_PI, _PI)

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        third = _TWO_PI / 3.0
        two_thirds = 2.0 * _TWO_PI / 3.0
        x = r * math.sin(u) * (1.0 + math.cos(v))
        y = r * math.sin(u + third) * (1.0 + math.cos(v + third))
        z = r * math.sin(u + two_thirds) * (1.0 + math.cos(v + two_thirds))
        return Vec3(x, y, z)


class TurretShell(ParametricShape):
    """A tall turret sea shell with a tilted, triangular cross section."""

    name = "Turret Shell"
    _u_bounds = (0.0, _TWO_PI)
    _v_bounds = (0.0, _TWO_PI)

    _TUBE = 1.0
    _TURNS = 9.6
    _HEIGHT = 5.0
    _POWER = 1.5
    _WIDTH_POWER = 1.1
    _TRIANGLENESS = 0.8
    _TILT = 0.1
    _STRETCH = 1.5

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        w = math.pow(u / _TWO_PI * self._TUBE, self._WIDTH_POWER)
        a = self._TILT
        tri = self._TRIANGLENESS / 4.0
        spread = w * (1.0 + math.cos(v + a) + math.sin(2.0 * v + a) * tri)
        x = r * spread * math.cos(self._TURNS * u)
        y = r * spread * math.sin(self._TURNS * u)
        z = (
            r
            * (
                self._STRETCH * w * (math.sin(v + a) + math.cos(2.0 * v + a) * tri)
                + self._STRETCH * self._HEIGHT * math.pow(u / _TWO_PI, self._POWER)
            )
            - r * 4.5
        )
        return Vec3(x, y, z)


class TwistedPseudoSphere(ParametricShape):
    """Dini's surface, a twisted pseudo-sphere."""

    name = "Twisted Pseudo Sphere"
    _u_bounds = (0.0, 2.0 * _TWO_PI)
    _v_bounds = (0.1, 1.0)

    _TWIST = 6.0

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        x = r * math.cos(u) * math.sin(v)
        y = r * math.sin(u) * math.sin(v)
        z = r * (math.cos(v) + math.log(math.tan(v / 2.0))) + self._TWIST * u + r / 3.0
        return Vec3(x, y, z)


class TwistedTriaxial(ParametricShape):
    """The twisted triaxial surface."""

    name = "Twisted Triaxial"
    _u_bounds = (-_PI, _PI)
    _v_bounds = (-_PI, _PI)

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        pp = math.sqrt(u * u + v * v) / math.sqrt(2.0 * _PI * _PI)
        third = _TWO_PI / 3.0
        two_thirds = 4.0 * _PI / 3.0

        def axis(shift: float) -> float:
            return (
                r * (1.0 - pp) * math.cos(u + shift) * math.cos(v + shift)
                + pp * math.sin(u + shift) * math.sin(v + shift)
            )

        return Vec3(axis(0.0), axis(third), axis(two_thirds) - r / 5.0)


class VerrillMinimal(ParametricShape):
    """Verrill's minimal surface."""

    name = "Verrill Minimal Surface"
    _u_bounds = (0.0, _TWO_PI)
    _v_bounds = (0.5, 1.0)

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        v3 = v * v * v
        x = r * (-2.0 * v * math.cos(u) + (2.0 * math.cos(u)) / v - (2.0 * v3 * math.cos(3.0 * u)) / 3.0)
        y = r * (6.0 * v * math.sin(u) - (2.0 * math.sin(u)) / v - (2.0 * v3 * math.sin(3.0 * u)) / 3.0)
        z = r * (4.0 * math.log(v)) + r * 1.5
        return Vec3(x, y, z)


class WrinkledPeriwinkle(ParametricShape):
    """A periwinkle sea shell with a wrinkled, wavy surface."""

    name = "Wrinkled Periwinkle"
    _u_bounds = (0.0, _TWO_PI)
    _v_bounds = (0.0, _TWO_PI)

    _TUBE = 1.0
    _TURNS = 4.6
    _HEIGHT = 2.5
    _WAVE_FREQUENCY = 80.0
    _WAVE_AMPLITUDE = 0.2
    _POWER = 1.9

    def point_at_parameter(self, u: float, v: float) -> Vec3:
        r = self.radius
        w = u / _TWO_PI * self._TUBE
        spread = r * w * (
            1.0 + math.cos(v) + math.cos(self._WAVE_FREQUENCY * u) * self._WAVE_AMPLITUDE
        )
        x = spread * math.cos(self._TURNS * u)
        y = spread * math.sin(self._TURNS * u)
        z = r * w * math.sin(v) + self._HEIGHT * math.pow(u / _TWO_PI, self._POWER)
        return Vec3(x, y, z)