"""Ribbon mesh builder for fading trails.

Turns an ordered trail into a flat ribbon: two vertices per sample, offset
sideways in the horizontal plane by a half-width proportional to the
sample's opacity, joined by two triangles per segment.

The vertex loop is JIT-compiled with Numba; the geometry is rebuilt from
scratch on every call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
from numba import njit

from config import settings
from mechanics.transforms import hex_to_rgb
from trail.buffer import TrailSample

# Shorter vectors are treated as zero length
_EPS = 1e-12


@dataclass
class RibbonGeometry:
    positions: np.ndarray  # (2N, 3) float32
    colors: np.ndarray  # (2N, 3) float32
    indices: np.ndarray  # (6 * (N - 1),) uint32

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0] // 3)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def to_dict(self) -> dict:
        return {
            "positions": self.positions.reshape(-1).tolist(),
            "colors": self.colors.reshape(-1).tolist(),
            "indices": self.indices.tolist(),
            "vertex_count": self.vertex_count,
            "triangle_count": self.triangle_count,
        }


def empty_geometry() -> RibbonGeometry:
    return RibbonGeometry(
        positions=np.zeros((0, 3), dtype=np.float32),
        colors=np.zeros((0, 3), dtype=np.float32),
        indices=np.zeros(0, dtype=np.uint32),
    )


@njit(cache=True)
def _ribbon_vertices(points, opacities, base_color, width_scale):
    """Offset vertex pairs and per-vertex colours.

    Parameters
    ----------
    points : (N, 3) sample positions, N >= 2
    opacities : (N,) sample opacities
    base_color : (3,) linear RGB
    width_scale : half-width of a fully opaque sample

    Returns
    -------
    (positions, colors): (2N, 3) arrays
    """
    n = points.shape[0]
    positions = np.empty((2 * n, 3))
    colors = np.empty((2 * n, 3))

    for i in range(n):
        # Direction to the next sample; the last sample reuses the final segment
        if i < n - 1:
            a = i
            b = i + 1
        else:
            a = i - 1
            b = i
        dx = points[b, 0] - points[a, 0]
        dy = points[b, 1] - points[a, 1]
        dz = points[b, 2] - points[a, 2]
        length = math.sqrt(dx * dx + dy * dy + dz * dz)
        if length > _EPS:
            dx /= length
            dz /= length
        else:
            dx = 0.0
            dz = 0.0

        # Perpendicular in the horizontal plane
        px = -dz
        pz = dx
        plen = math.sqrt(px * px + pz * pz)
        if plen > _EPS:
            px /= plen
            pz /= plen
        else:
            px = 0.0
            pz = 0.0

        width = opacities[i] * width_scale
        x = points[i, 0]
        y = points[i, 1]
        z = points[i, 2]

        positions[2 * i, 0] = x + px * width
        positions[2 * i, 1] = y
        positions[2 * i, 2] = z + pz * width
        positions[2 * i + 1, 0] = x - px * width
        positions[2 * i + 1, 1] = y
        positions[2 * i + 1, 2] = z - pz * width

        for c in range(3):
            shade = base_color[c] * opacities[i]
            colors[2 * i, c] = shade
            colors[2 * i + 1, c] = shade

    return positions, colors


def ribbon_indices(n_samples: int) -> np.ndarray:
    """Triangle list joining consecutive vertex pairs (two per segment)."""
    if n_samples < 2:
        return np.zeros(0, dtype=np.uint32)
    base = np.arange(n_samples - 1, dtype=np.uint32) * 2
    tris = np.column_stack([
        base, base + 1, base + 2,
        base + 2, base + 1, base + 3,
    ])
    return np.ascontiguousarray(tris.reshape(-1), dtype=np.uint32)


def build_ribbon_arrays(
    points: np.ndarray,
    opacities: np.ndarray,
    base_color: Sequence[float],
    width_scale: float | None = None,
) -> RibbonGeometry:
    """Build a ribbon from (N, 3) positions and (N,) opacities."""
    points = np.ascontiguousarray(points, dtype=np.float64).reshape(-1, 3)
    opacities = np.ascontiguousarray(opacities, dtype=np.float64).reshape(-1)
    if points.shape[0] != opacities.shape[0]:
        raise ValueError(
            f"Got {points.shape[0]} positions but {opacities.shape[0]} opacities"
        )
    if points.shape[0] < 2:
        return empty_geometry()

    if width_scale is None:
        width_scale = settings.trail_width_scale
    color = np.ascontiguousarray(base_color, dtype=np.float64).reshape(3)
    opacities = np.clip(opacities, 0.0, 1.0)

    positions, colors = _ribbon_vertices(points, opacities, color, float(width_scale))
    return RibbonGeometry(
        positions=positions.astype(np.float32),
        colors=colors.astype(np.float32),
        indices=ribbon_indices(points.shape[0]),
    )


def build_ribbon(
    samples: Iterable[TrailSample],
    base_color: str | Sequence[float],
    width_scale: float | None = None,
) -> RibbonGeometry:
    """Build a ribbon from trail samples.

    base_color is either a '#RRGGBB' string or an (r, g, b) float triple.
    """
    samples = list(samples)
    if len(samples) < 2:
        return empty_geometry()
    rgb = hex_to_rgb(base_color) if isinstance(base_color, str) else base_color
    points = np.array([s.position for s in samples], dtype=np.float64)
    opacities = np.array([s.opacity for s in samples], dtype=np.float64)
    return build_ribbon_arrays(points, opacities, rgb, width_scale)
