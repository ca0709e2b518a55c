"""Closed-form trajectories for every catalog orbit.

Each (family, orbit id) pair maps to one parametric curve evaluated at the
shared phase angle. There is no force model: the curves are chosen to look
like the named regime. Moon-relative shapes (and the Lagrange points tied to
the Moon) take the live Moon position as their origin.

Unknown orbit ids resolve to a per-family fallback point and unknown
families to a single fixed point, so a lookup never fails.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from orbits.catalog import OrbitFamily
from mechanics.transforms import moon_position_at_angle, phase_angle

Vec3 = tuple[float, float, float]
Evaluator = Callable[[float, Vec3], Vec3]

UNKNOWN_FAMILY_POSITION: Vec3 = (5.0, 0.0, 0.0)

_LAGRANGE = OrbitFamily.LAGRANGE.value
_EARTH = OrbitFamily.EARTH.value
_MOON = OrbitFamily.MOON.value

# (family, orbit id) -> evaluator(angle, moon)
TRAJECTORIES: dict[tuple[str, str], Evaluator] = {}

# family -> evaluator used for unknown orbit ids
FAMILY_FALLBACKS: dict[str, Evaluator] = {
    _LAGRANGE: lambda angle, moon: (5.0, 0.0, 0.0),
    _EARTH: lambda angle, moon: (4.0, 0.0, 0.0),
    _MOON: lambda angle, moon: (moon[0] + 1.5, 0.0, moon[2]),
}


def trajectory(family: str, orbit_id: str) -> Callable[[Evaluator], Evaluator]:
    """Register an evaluator for one catalog orbit."""
    def register(fn: Evaluator) -> Evaluator:
        TRAJECTORIES[(family, orbit_id)] = fn
        return fn
    return register


# --------------------------------------------------------------------------- #
#  Lagrange points
# --------------------------------------------------------------------------- #
def _l1_center(angle: float, moon: Vec3) -> Vec3:
    return (moon[0] * 0.5, 0.0, moon[2] * 0.5)


def _l2_center(angle: float, moon: Vec3) -> Vec3:
    return (moon[0] * 1.2, 0.0, moon[2] * 1.2)


def _l3_center(angle: float, moon: Vec3) -> Vec3:
    return (-10.0 * math.cos(angle), 0.0, -10.0 * math.sin(angle))


def _l4_center(angle: float, moon: Vec3) -> Vec3:
    # 60 degrees ahead of the Moon
    lead = angle + math.pi / 3
    return (10.0 * math.cos(lead), 0.0, 10.0 * math.sin(lead))


def _l5_center(angle: float, moon: Vec3) -> Vec3:
    # 60 degrees behind the Moon
    trail = angle - math.pi / 3
    return (10.0 * math.cos(trail), 0.0, 10.0 * math.sin(trail))


trajectory(_LAGRANGE, "l1")(_l1_center)
trajectory(_LAGRANGE, "l2")(_l2_center)
trajectory(_LAGRANGE, "l3")(_l3_center)
trajectory(_LAGRANGE, "l4")(_l4_center)
trajectory(_LAGRANGE, "l5")(_l5_center)


def _halo(center: Vec3, angle: float) -> Vec3:
    return (
        center[0] + math.sin(angle * 2) * 0.5,
        math.sin(angle * 3) * 0.8,
        center[2] + math.cos(angle * 2) * 0.5,
    )


@trajectory(_LAGRANGE, "l1_halo")
def _l1_halo(angle: float, moon: Vec3) -> Vec3:
    return _halo(_l1_center(angle, moon), angle)


@trajectory(_LAGRANGE, "l2_halo")
def _l2_halo(angle: float, moon: Vec3) -> Vec3:
    return _halo(_l2_center(angle, moon), angle)


@trajectory(_LAGRANGE, "l3_halo")
def _l3_halo(angle: float, moon: Vec3) -> Vec3:
    cx, _, cz = _l3_center(angle, moon)
    fast = angle * 3
    return (
        cx + math.sin(fast) * 1.5,
        math.sin(fast * 1.2) * 1.0,
        cz + math.cos(fast) * 1.5,
    )


@trajectory(_LAGRANGE, "l4_lissajous")
def _l4_lissajous(angle: float, moon: Vec3) -> Vec3:
    cx, _, cz = _l4_center(angle, moon)
    fast = angle * 2
    return (
        cx + math.sin(fast * 0.7) * 1.2,
        math.sin(fast * 1.1) * 0.8,
        cz + math.sin(fast * 0.9) * 1.2,
    )


@trajectory(_LAGRANGE, "l5_lissajous")
def _l5_lissajous(angle: float, moon: Vec3) -> Vec3:
    cx, _, cz = _l5_center(angle, moon)
    fast = angle * 2
    return (
        cx + math.sin(fast * 0.8) * 1.2,
        math.sin(fast * 1.2) * 0.8,
        cz + math.sin(fast * 1.0) * 1.2,
    )


# --------------------------------------------------------------------------- #
#  Earth-synchronous orbits (centred on the Earth, slow phase)
# --------------------------------------------------------------------------- #
EARTH_ORBIT_RADIUS = 4.0
EARTH_RATE = 0.1


def _inclined(radius: float, phi: float, inclination: float) -> Vec3:
    """Point on a circle of the given radius tilted about the x axis."""
    return (
        radius * math.cos(phi),
        radius * math.sin(phi) * math.sin(inclination),
        radius * math.sin(phi) * math.cos(inclination),
    )


@trajectory(_EARTH, "geo")
def _geo(angle: float, moon: Vec3) -> Vec3:
    theta = angle * EARTH_RATE
    return (
        EARTH_ORBIT_RADIUS * math.cos(theta),
        0.0,
        EARTH_ORBIT_RADIUS * math.sin(theta),
    )


@trajectory(_EARTH, "gso_equator")
def _gso_equator(angle: float, moon: Vec3) -> Vec3:
    theta = angle * EARTH_RATE
    return (
        EARTH_ORBIT_RADIUS * math.cos(theta),
        math.sin(angle * 0.05) * 0.2,
        EARTH_ORBIT_RADIUS * math.sin(theta),
    )


@trajectory(_EARTH, "gso_mid")
def _gso_mid(angle: float, moon: Vec3) -> Vec3:
    """Circle inclined 30 degrees. Illustrative constants chosen for display, not mission data."""
    return _inclined(EARTH_ORBIT_RADIUS, angle * EARTH_RATE, math.radians(30.0))


@trajectory(_EARTH, "qzo_8")
def _qzo_figure_eight(angle: float, moon: Vec3) -> Vec3:
    """Figure-eight radial wobble at 45 degrees. Illustrative constants chosen for display."""
    theta = angle * EARTH_RATE
    radius = EARTH_ORBIT_RADIUS + 0.3 * math.sin(2 * theta)
    return _inclined(radius, theta, math.radians(45.0))


@trajectory(_EARTH, "qzo_asym")
def _qzo_asymmetric(angle: float, moon: Vec3) -> Vec3:
    """Slightly eccentric orbit at 41 degrees. Illustrative constants chosen for display."""
    theta = angle * EARTH_RATE
    radius = EARTH_ORBIT_RADIUS * (1 - 0.075 * math.cos(theta))
    return _inclined(radius, theta, math.radians(41.0))


@trajectory(_EARTH, "molniya")
def _molniya(angle: float, moon: Vec3) -> Vec3:
    """Highly eccentric orbit at 63.4 degrees. Illustrative constants chosen for display."""
    theta = angle * EARTH_RATE
    radius = 4.5 * (1 - 0.5 * math.cos(theta))
    # Apogee (theta = pi) sits over the +y hemisphere
    return _inclined(radius, theta - math.pi / 2, math.radians(63.4))


# --------------------------------------------------------------------------- #
#  Moon-relative orbits (centred on the live Moon)
# --------------------------------------------------------------------------- #
LLO_RATE = 5.0
LLO_RADIUS = 1.5
LLO_ECCENTRICITY = 0.3
LLO_SEMI_MAJOR_AXIS = 1.8


@trajectory(_MOON, "llo_circular")
def _llo_circular(angle: float, moon: Vec3) -> Vec3:
    local = angle * LLO_RATE
    return (
        moon[0] + math.cos(local) * LLO_RADIUS,
        0.0,
        moon[2] + math.sin(local) * LLO_RADIUS,
    )


@trajectory(_MOON, "llo_elliptical")
def _llo_elliptical(angle: float, moon: Vec3) -> Vec3:
    local = angle * LLO_RATE
    radius = LLO_SEMI_MAJOR_AXIS * (1 - LLO_ECCENTRICITY * math.cos(local))
    return (
        moon[0] + radius * math.cos(local),
        0.0,
        moon[2] + radius * math.sin(local),
    )


@trajectory(_MOON, "llo_polar")
def _llo_polar(angle: float, moon: Vec3) -> Vec3:
    local = angle * LLO_RATE
    return (
        moon[0] + math.cos(local) * LLO_RADIUS,
        math.sin(local) * LLO_RADIUS,
        moon[2],
    )


@trajectory(_MOON, "frozen")
def _frozen(angle: float, moon: Vec3) -> Vec3:
    return (
        moon[0] + math.cos(angle) * 2,
        math.sin(angle * 0.5) * 0.5,
        moon[2] + math.sin(angle) * 2,
    )


@trajectory(_MOON, "transfer")
def _transfer(angle: float, moon: Vec3) -> Vec3:
    # 0 at the Earth, 1 at the Moon
    blend = (math.sin(angle * 0.05) + 1) / 2
    return (
        moon[0] * blend,
        math.sin(angle * 0.2) * (1 - blend) * 2,
        moon[2] * blend,
    )


@trajectory(_MOON, "distant")
def _distant(angle: float, moon: Vec3) -> Vec3:
    slow = angle * 0.3
    return (
        moon[0] + math.cos(slow) * 3,
        math.sin(slow) * 2,
        moon[2] + math.sin(slow) * 3,
    )


# --------------------------------------------------------------------------- #
#  Public API
# --------------------------------------------------------------------------- #
def resolve(family: str | OrbitFamily, specific_id: str) -> Evaluator | None:
    """Evaluator for the selector, or None for an unknown family."""
    key = family.value if isinstance(family, OrbitFamily) else str(family)
    evaluator = TRAJECTORIES.get((key, specific_id))
    if evaluator is None:
        evaluator = FAMILY_FALLBACKS.get(key)
    return evaluator


def position(
    family: str | OrbitFamily,
    specific_id: str,
    elapsed_ms: float,
    speed: float,
) -> Vec3:
    """Position of the orbiting body at elapsed_ms for the given speed."""
    evaluator = resolve(family, specific_id)
    if evaluator is None:
        return UNKNOWN_FAMILY_POSITION
    angle = phase_angle(elapsed_ms, speed)
    x, y, z = evaluator(angle, moon_position_at_angle(angle))
    return (float(x), float(y), float(z))


def sample_path(
    family: str | OrbitFamily,
    specific_id: str,
    speed: float,
    start_ms: float,
    duration_ms: float,
    samples: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Evaluate a trajectory on an even time grid.

    Returns
    -------
    (times_ms, points): (N,) and (N, 3) arrays
    """
    times = np.linspace(start_ms, start_ms + duration_ms, max(2, samples))
    points = np.array(
        [position(family, specific_id, float(t), speed) for t in times],
        dtype=np.float64,
    )
    return times, points
