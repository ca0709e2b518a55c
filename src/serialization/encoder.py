"""Compact binary encoding of frames and ribbons for streaming clients.

Format: [header][data], little-endian. Array payloads are contiguous
float32 / uint32 blocks that can be read directly into Float32Array and
Uint32Array on the frontend.
"""

from __future__ import annotations

import struct

import numpy as np

from simulation.clock import Frame
from trail.ribbon import RibbonGeometry, empty_geometry

# [n_vertices:u32][n_indices:u32]
RIBBON_HEADER = struct.Struct("<II")
# [elapsed_ms:f64][x y z:f64][moon x y z:f64][earth_rotation:f64][paused:u8]
FRAME_HEADER = struct.Struct("<d3d3ddB")
# [n_points:u32]
PATH_HEADER = struct.Struct("<I")


def encode_ribbon(geometry: RibbonGeometry | None) -> bytes:
    """Pack ribbon as: [n_vertices][n_indices][positions f32][colors f32][indices u32]

    None packs as an empty ribbon.
    """
    if geometry is None or geometry.is_empty:
        return RIBBON_HEADER.pack(0, 0)

    buf = RIBBON_HEADER.pack(geometry.vertex_count, int(geometry.indices.shape[0]))
    buf += np.ascontiguousarray(geometry.positions, dtype="<f4").tobytes()
    buf += np.ascontiguousarray(geometry.colors, dtype="<f4").tobytes()
    buf += np.ascontiguousarray(geometry.indices, dtype="<u4").tobytes()
    return buf


def encode_frame(frame: Frame) -> bytes:
    """Pack one simulation frame followed by its ribbon block."""
    buf = FRAME_HEADER.pack(
        frame.elapsed_ms,
        *frame.position,
        *frame.moon_position,
        frame.earth_rotation,
        1 if frame.paused else 0,
    )
    return buf + encode_ribbon(frame.ribbon)


def encode_path(points: np.ndarray) -> bytes:
    """Pack a polyline as: [n_points:u32][(x, y, z) f32 * n]"""
    points = np.ascontiguousarray(points, dtype="<f4").reshape(-1, 3)
    return PATH_HEADER.pack(points.shape[0]) + points.tobytes()


def decode_ribbon(data: bytes, offset: int = 0) -> tuple[RibbonGeometry, int]:
    """Inverse of encode_ribbon. Returns (geometry, next offset)."""
    n_vertices, n_indices = RIBBON_HEADER.unpack_from(data, offset)
    offset += RIBBON_HEADER.size
    if n_vertices == 0:
        return empty_geometry(), offset

    vec_bytes = n_vertices * 3 * 4
    positions = np.frombuffer(data, dtype="<f4", count=n_vertices * 3, offset=offset)
    offset += vec_bytes
    colors = np.frombuffer(data, dtype="<f4", count=n_vertices * 3, offset=offset)
    offset += vec_bytes
    indices = np.frombuffer(data, dtype="<u4", count=n_indices, offset=offset)
    offset += n_indices * 4

    geometry = RibbonGeometry(
        positions=positions.reshape(-1, 3).astype(np.float32),
        colors=colors.reshape(-1, 3).astype(np.float32),
        indices=indices.astype(np.uint32),
    )
    return geometry, offset
