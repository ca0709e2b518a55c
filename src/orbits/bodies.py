"""Reference bodies of the Earth-Moon scene.

Scene units: the Earth sits at the origin with radius 2, the Moon has
radius 1 and circles the Earth at radius 10 in the y = 0 plane.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReferenceBody:
    name: str
    radius: float  # scene units
    color: str  # hex hint for frontend
    orbit_radius: float = 0.0  # scene units, 0 = fixed at origin
    parent: str | None = None


EARTH = ReferenceBody(name="Earth", radius=2.0, color="#6B93D6")
MOON = ReferenceBody(
    name="Moon", radius=1.0, color="#B5B5B5",
    orbit_radius=10.0, parent="Earth",
)

# Colour of the Moon's reference orbit line
MOON_ORBIT_COLOR = "#FFD700"
MOON_ORBIT_SEGMENTS = 64

# Earth spin: radians per 16 ms animation frame at speed 1
EARTH_SPIN_PER_FRAME = 0.001
FRAME_MS = 16.0

ALL_BODIES: list[ReferenceBody] = [EARTH, MOON]
BODY_BY_NAME: dict[str, ReferenceBody] = {b.name.lower(): b for b in ALL_BODIES}
