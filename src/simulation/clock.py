"""Fixed-cadence simulation clock.

Owns the simulation state (selector, speed, pause, trail toggle, body
scale) and sequences one tick: advance time -> evaluate the position ->
record and age the trail -> rebuild the ribbon. Everything runs in the
caller's thread or task; nothing here blocks.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncGenerator

from config import settings
from mechanics.trajectories import position
from mechanics.transforms import earth_spin, hex_to_rgb, moon_position
from orbits.catalog import OrbitSelector, default_orbit, family_colors, is_known, orbit_period
from trail.buffer import TrailBuffer, TrailSample
from trail.ribbon import RibbonGeometry, build_ribbon

logger = logging.getLogger("cislunar.clock")

# Body scale at which the rendered mesh has unit size
UNIT_BODY_SCALE = 20.0


@dataclass
class SimulationState:
    selector: OrbitSelector
    speed: float = 1.0
    paused: bool = False
    elapsed_ms: float = 0.0
    trail_enabled: bool = True
    body_scale: float = UNIT_BODY_SCALE
    earth_rotation: float = 0.0


@dataclass
class Frame:
    """Everything the renderer needs for one tick."""
    elapsed_ms: float
    selector: OrbitSelector
    position: tuple[float, float, float]
    moon_position: tuple[float, float, float]
    earth_rotation: float
    body_color: str
    emissive_color: str
    body_scale: float
    speed: float
    paused: bool
    trail_length: int
    ribbon: RibbonGeometry | None = None

    @property
    def mesh_scale(self) -> float:
        return self.body_scale / UNIT_BODY_SCALE

    def to_dict(self, include_ribbon: bool = True) -> dict:
        data = {
            "elapsed_ms": self.elapsed_ms,
            "family": self.selector.family,
            "orbit": self.selector.specific_id,
            "position": list(self.position),
            "moon_position": list(self.moon_position),
            "earth_rotation": self.earth_rotation,
            "body_color": self.body_color,
            "emissive_color": self.emissive_color,
            "body_scale": self.body_scale,
            "mesh_scale": self.mesh_scale,
            "speed": self.speed,
            "paused": self.paused,
            "trail_length": self.trail_length,
        }
        if include_ribbon:
            data["ribbon"] = self.ribbon.to_dict() if self.ribbon is not None else None
        return data


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class SimulationClock:
    """Drives one orbiting body and its trail."""

    def __init__(
        self,
        family: str | None = None,
        specific_id: str | None = None,
        speed: float | None = None,
        tick_interval_ms: float | None = None,
        trail: TrailBuffer | None = None,
    ) -> None:
        family = family or settings.default_family
        if specific_id is None:
            specific_id = default_orbit(family) or settings.default_orbit
        self.tick_interval_ms = tick_interval_ms or settings.tick_interval_ms
        self.state = SimulationState(
            selector=OrbitSelector(family, specific_id),
            speed=_clamp(
                settings.default_speed if speed is None else speed,
                settings.speed_min, settings.speed_max,
            ),
            body_scale=settings.default_body_scale,
        )
        self.trail = trail if trail is not None else TrailBuffer()
        self.trail.set_enabled(self.state.trail_enabled)
        self._position = self._evaluate()

    # ------------------------------------------------------------------ #
    #  Read-only views
    # ------------------------------------------------------------------ #
    @property
    def selector(self) -> OrbitSelector:
        return self.state.selector

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def elapsed_ms(self) -> float:
        return self.state.elapsed_ms

    @property
    def active_period_s(self) -> float:
        sel = self.state.selector
        return orbit_period(sel.family, sel.specific_id)

    # ------------------------------------------------------------------ #
    #  Controls
    # ------------------------------------------------------------------ #
    def select(self, family: str, specific_id: str) -> None:
        """Switch trajectory; the old trail is meaningless on the new one."""
        selector = OrbitSelector(family, specific_id)
        if selector == self.state.selector:
            return
        if not is_known(family, specific_id):
            logger.warning("Unknown orbit %s/%s, using fallback position", family, specific_id)
        self.state.selector = selector
        self.trail.clear()
        self._position = self._evaluate()
        logger.info("Selected orbit %s/%s", family, specific_id)

    def select_family(self, family: str) -> None:
        """Switch family and pick its first catalog orbit."""
        specific_id = default_orbit(family)
        if specific_id is None:
            logger.warning("Unknown orbit family '%s'", family)
            specific_id = self.state.selector.specific_id
        self.select(family, specific_id)

    def set_speed(self, speed: float) -> None:
        speed = _clamp(float(speed), settings.speed_min, settings.speed_max)
        if speed == self.state.speed:
            return
        self.state.speed = speed
        self.trail.clear()
        self._position = self._evaluate()
        logger.info("Simulation speed set to %.1fx", speed)

    def pause(self) -> None:
        self.state.paused = True

    def resume(self) -> None:
        self.state.paused = False

    def toggle_pause(self) -> bool:
        self.state.paused = not self.state.paused
        return self.state.paused

    def set_trail_enabled(self, enabled: bool) -> None:
        self.state.trail_enabled = bool(enabled)
        self.trail.set_enabled(self.state.trail_enabled)

    def set_body_scale(self, scale: float) -> None:
        self.state.body_scale = _clamp(
            float(scale), settings.body_scale_min, settings.body_scale_max,
        )

    def reset(self) -> None:
        """Restore default controls and drop the trail synchronously."""
        self.state.speed = _clamp(settings.default_speed, settings.speed_min, settings.speed_max)
        self.state.body_scale = settings.default_body_scale
        self.state.paused = False
        self.set_trail_enabled(True)
        self.trail.reset_trail()
        self._position = self._evaluate()
        logger.info("Simulation reset (orbit %s/%s)",
                    self.state.selector.family, self.state.selector.specific_id)

    # ------------------------------------------------------------------ #
    #  Ticking
    # ------------------------------------------------------------------ #
    def _evaluate(self) -> tuple[float, float, float]:
        sel = self.state.selector
        return position(sel.family, sel.specific_id, self.state.elapsed_ms, self.state.speed)

    def advance(self, delta_ms: float | None = None) -> Frame:
        """Run one tick and return the resulting frame.

        While paused, time does not advance and nothing is recorded; the
        current frame is returned unchanged.
        """
        if not self.state.paused:
            delta = self.tick_interval_ms if delta_ms is None else max(0.0, float(delta_ms))
            self.state.elapsed_ms += delta
            self.state.earth_rotation += earth_spin(delta, self.state.speed)
            self._position = self._evaluate()

            if self.state.trail_enabled:
                now = self.state.elapsed_ms
                self.trail.record(TrailSample(position=self._position, captured_at=now))
                self.trail.tick(now, self.active_period_s)

        return self.frame()

    def frame(self) -> Frame:
        sel = self.state.selector
        body_color, emissive_color = family_colors(sel.family)

        ribbon = None
        if self.state.trail_enabled and len(self.trail) >= 2:
            ribbon = build_ribbon(self.trail, hex_to_rgb(body_color))

        return Frame(
            elapsed_ms=self.state.elapsed_ms,
            selector=sel,
            position=self._position,
            moon_position=moon_position(self.state.elapsed_ms, self.state.speed),
            earth_rotation=self.state.earth_rotation,
            body_color=body_color,
            emissive_color=emissive_color,
            body_scale=self.state.body_scale,
            speed=self.state.speed,
            paused=self.state.paused,
            trail_length=len(self.trail),
            ribbon=ribbon,
        )

    async def run(self, stop: asyncio.Event | None = None) -> AsyncGenerator[Frame, None]:
        """Yield one frame per tick at the configured cadence until stopped."""
        interval_s = self.tick_interval_ms / 1000.0
        logger.debug("Clock running at %.1f ms cadence", self.tick_interval_ms)
        while stop is None or not stop.is_set():
            yield self.advance()
            await asyncio.sleep(interval_s)
