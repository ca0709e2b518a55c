"""Time-ordered trail of sampled positions with age-based fade.

Samples stay fully opaque for one orbit period, fade linearly to zero over
the second period and are evicted once they are two periods old. Opacity is
recomputed for every retained sample on each tick against the period of the
orbit that is active *now*, so a speed or orbit change reshapes the fade of
older samples immediately.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from config import settings

logger = logging.getLogger("cislunar.trail")


@dataclass(slots=True)
class TrailSample:
    position: tuple[float, float, float]
    captured_at: float  # simulation ms
    opacity: float = 1.0


def fade_opacity(age_s: float, period_s: float) -> float:
    """Opacity of a sample of the given age (seconds)."""
    return min(1.0, max(0.0, 1.0 - (age_s - period_s) / period_s))


class TrailBuffer:
    """Bounded, append-only, front-evicted trail history."""

    def __init__(self, max_samples: int | None = None, enabled: bool = True) -> None:
        self._samples: deque[TrailSample] = deque()
        self._max_samples = max(2, max_samples or settings.trail_max_samples)
        self.enabled = enabled

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[TrailSample]:
        return iter(self._samples)

    def __getitem__(self, index: int) -> TrailSample:
        return self._samples[index]

    @property
    def max_samples(self) -> int:
        return self._max_samples

    def record(self, sample: TrailSample) -> bool:
        """Append a sample. No-op while recording is disabled or when the
        sample is not newer than the latest one."""
        if not self.enabled:
            return False
        if self._samples and sample.captured_at <= self._samples[-1].captured_at:
            logger.debug(
                "Dropping out-of-order trail sample at %.1f ms (tail at %.1f ms)",
                sample.captured_at, self._samples[-1].captured_at,
            )
            return False
        self._samples.append(sample)
        if len(self._samples) > self._max_samples:
            self._samples.popleft()
        return True

    def tick(self, now_ms: float, active_period_s: float) -> None:
        """Recompute opacities against the active period and evict stale samples."""
        if active_period_s <= 0:
            if self._samples:
                logger.warning("Non-positive trail period %.3f s, clearing trail", active_period_s)
            self._samples.clear()
            return

        for sample in self._samples:
            age_s = (now_ms - sample.captured_at) / 1000.0
            sample.opacity = fade_opacity(age_s, active_period_s)

        max_age_s = active_period_s * 2
        while self._samples and (now_ms - self._samples[0].captured_at) / 1000.0 >= max_age_s:
            self._samples.popleft()

    def clear(self) -> None:
        self._samples.clear()

    def reset_trail(self) -> None:
        """Synchronously drop the whole history (used by simulation reset)."""
        if self._samples:
            logger.debug("Trail reset, dropping %d samples", len(self._samples))
        self._samples.clear()

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if not enabled:
            self._samples.clear()

    # ------------------------------------------------------------------ #
    #  Array views for the mesh builder
    # ------------------------------------------------------------------ #
    def positions(self) -> np.ndarray:
        if not self._samples:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([s.position for s in self._samples], dtype=np.float64)

    def opacities(self) -> np.ndarray:
        return np.array([s.opacity for s in self._samples], dtype=np.float64)
