"""Binary frame and ribbon encoding tests."""

import numpy as np
import pytest

from serialization.encoder import (
    FRAME_HEADER,
    PATH_HEADER,
    RIBBON_HEADER,
    decode_ribbon,
    encode_frame,
    encode_path,
    encode_ribbon,
)
from simulation.clock import SimulationClock
from trail.ribbon import build_ribbon_arrays


def test_empty_ribbon_is_header_only():
    assert encode_ribbon(None) == RIBBON_HEADER.pack(0, 0)
    geometry, offset = decode_ribbon(encode_ribbon(None))
    assert geometry.is_empty
    assert offset == RIBBON_HEADER.size


def test_ribbon_layout():
    points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 0.0, 1.0], [0.0, 0.5, 1.0]])
    geometry = build_ribbon_arrays(points, np.array([0.2, 0.5, 0.8, 1.0]), (0.3, 0.6, 0.9))
    data = encode_ribbon(geometry)

    n_vertices, n_indices = RIBBON_HEADER.unpack_from(data)
    assert (n_vertices, n_indices) == (8, 18)
    assert len(data) == RIBBON_HEADER.size + 8 * 3 * 4 * 2 + 18 * 4

    decoded, offset = decode_ribbon(data)
    assert offset == len(data)
    np.testing.assert_array_equal(decoded.positions, geometry.positions)
    np.testing.assert_array_equal(decoded.colors, geometry.colors)
    np.testing.assert_array_equal(decoded.indices, geometry.indices)


def test_frame_header():
    clock = SimulationClock(family="earth", specific_id="geo")
    clock.advance()
    clock.advance()
    clock.pause()
    frame = clock.frame()
    data = encode_frame(frame)

    elapsed, x, y, z, mx, my, mz, rotation, paused = FRAME_HEADER.unpack_from(data)
    assert elapsed == 32.0
    assert (x, y, z) == pytest.approx(frame.position)
    assert (mx, my, mz) == pytest.approx(frame.moon_position)
    assert rotation == pytest.approx(0.002)
    assert paused == 1

    ribbon, offset = decode_ribbon(data, FRAME_HEADER.size)
    assert ribbon.vertex_count == 4
    assert offset == len(data)


def test_path_layout():
    points = np.arange(12, dtype=np.float64).reshape(4, 3)
    data = encode_path(points)
    assert PATH_HEADER.unpack_from(data) == (4,)
    decoded = np.frombuffer(data, dtype="<f4", offset=PATH_HEADER.size).reshape(-1, 3)
    np.testing.assert_array_equal(decoded, points.astype(np.float32))
