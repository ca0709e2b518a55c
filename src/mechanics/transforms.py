"""Phase, reference-frame and colour conversions for the 3D scene.

Handles:
- Simulation time (ms) -> orbital phase angle
- Live Moon position and its reference orbit line
- Earth spin accumulation
- Hex colour strings -> linear RGB floats
"""

from __future__ import annotations

import math

import numpy as np

from orbits.bodies import EARTH_SPIN_PER_FRAME, FRAME_MS, MOON, MOON_ORBIT_SEGMENTS

# --------------------------------------------------------------------------- #
#  Phase
# --------------------------------------------------------------------------- #
TWO_PI = 2.0 * math.pi

# Radians per simulated millisecond at speed 1. One Moon revolution takes
# exactly 60 s, the catalog period of the Lagrange orbits.
BASE_ORBITAL_RATE = TWO_PI / 60_000.0


def phase_angle(elapsed_ms: float, speed: float) -> float:
    """Shared phase driving every trajectory formula."""
    return elapsed_ms * BASE_ORBITAL_RATE * speed


def revolution_ms(speed: float) -> float:
    """Simulated milliseconds for one full phase revolution."""
    return TWO_PI / (BASE_ORBITAL_RATE * speed)


# --------------------------------------------------------------------------- #
#  Moon
# --------------------------------------------------------------------------- #
def moon_position_at_angle(angle: float) -> tuple[float, float, float]:
    r = MOON.orbit_radius
    return (r * math.cos(angle), 0.0, r * math.sin(angle))


def moon_position(elapsed_ms: float, speed: float) -> tuple[float, float, float]:
    """Live Moon position. Never cached, so it stays in phase with the
    Moon-relative trajectories evaluated in the same tick."""
    return moon_position_at_angle(phase_angle(elapsed_ms, speed))


def moon_orbit_path(segments: int = MOON_ORBIT_SEGMENTS) -> np.ndarray:
    """Closed circle of the Moon's orbit as (segments + 1, 3) points."""
    angles = np.linspace(0.0, TWO_PI, segments + 1)
    r = MOON.orbit_radius
    return np.column_stack([r * np.cos(angles), np.zeros_like(angles), r * np.sin(angles)])


# --------------------------------------------------------------------------- #
#  Earth spin
# --------------------------------------------------------------------------- #
def earth_spin(delta_ms: float, speed: float) -> float:
    """Rotation (rad) the Earth accumulates over delta_ms."""
    return EARTH_SPIN_PER_FRAME * speed * (delta_ms / FRAME_MS)


# --------------------------------------------------------------------------- #
#  Colours
# --------------------------------------------------------------------------- #
def hex_to_rgb(color: str) -> tuple[float, float, float]:
    """Convert '#RRGGBB' to (r, g, b) floats in [0, 1]."""
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex colour: '{color}'")
    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))  # type: ignore[return-value]
