"""HTTP REST endpoints for the orbit engine.

- /health                              - Health check
- /orbits                              - Catalog of every family and orbit
- /orbits/{family}                     - Orbits of one family
- /orbits/{family}/{orbit_id}/position - Position at a simulation time
- /orbits/{family}/{orbit_id}/path     - One period of sampled positions
- /moon/orbit                          - Moon reference orbit line
- /trail/ribbon                        - Build ribbon geometry from samples
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_validator

from config import settings
from mechanics.trajectories import position, sample_path
from mechanics.transforms import hex_to_rgb, moon_orbit_path, moon_position
from orbits.bodies import MOON_ORBIT_COLOR, MOON_ORBIT_SEGMENTS
from orbits.catalog import ORBIT_OPTIONS, family_colors, is_known, lookup, orbit_options
from serialization.encoder import encode_path, encode_ribbon
from trail.buffer import TrailSample
from trail.ribbon import build_ribbon

logger = logging.getLogger("cislunar.api")
router = APIRouter()


# --------------------------------------------------------------------------- #
#  Shared validators
# --------------------------------------------------------------------------- #

def _validate_hex_color(v: str | None) -> str | None:
    if v is None:
        return v
    try:
        hex_to_rgb(v)
    except ValueError:
        raise ValueError(f"Invalid colour: '{v}'. Expected format: #RRGGBB")
    return v


def _require_family(family: str) -> None:
    if family not in ORBIT_OPTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown orbit family: '{family}'")


# --------------------------------------------------------------------------- #
#  Pydantic models for request/response
# --------------------------------------------------------------------------- #

class OrbitOut(BaseModel):
    id: str
    name: str
    period_s: float
    color: str
    emissive_color: str


class FamilyOut(BaseModel):
    family: str
    default_orbit: str
    orbits: list[OrbitOut]


class PositionOut(BaseModel):
    family: str
    orbit: str
    known: bool
    t_ms: float
    speed: float
    period_s: float
    position: list[float]
    moon_position: list[float]


class PathOut(BaseModel):
    family: str
    orbit: str
    speed: float
    period_s: float
    times_ms: list[float]
    points: list[list[float]]


class TrailSampleIn(BaseModel):
    position: list[float] = Field(min_length=3, max_length=3)
    captured_at: float = Field(default=0.0, description="Capture time in simulation ms")
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)


class RibbonRequest(BaseModel):
    samples: list[TrailSampleIn] = Field(default_factory=list)
    family: str | None = Field(default=None, description="Take the trail colour from this family")
    color: str | None = Field(default=None, description="Explicit '#RRGGBB' colour, overrides family")
    width_scale: float = Field(default=settings.trail_width_scale, gt=0.0, le=10.0)
    binary: bool = Field(default=False, description="Return packed binary instead of JSON")

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str | None) -> str | None:
        return _validate_hex_color(v)


def _family_out(family: str) -> FamilyOut:
    options = orbit_options(family)
    orbits = []
    for opt in options:
        entry = lookup(family, opt.id)
        orbits.append(OrbitOut(
            id=opt.id,
            name=opt.name,
            period_s=entry.period_s,
            color=entry.base_color,
            emissive_color=entry.emissive_color,
        ))
    return FamilyOut(family=family, default_orbit=options[0].id, orbits=orbits)


# --------------------------------------------------------------------------- #
#  Endpoints
# --------------------------------------------------------------------------- #

@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/orbits", response_model=list[FamilyOut])
async def list_orbits():
    """List every orbit family with its ordered orbits."""
    return [_family_out(family) for family in ORBIT_OPTIONS]


@router.get("/orbits/{family}", response_model=FamilyOut)
async def get_family(family: str):
    _require_family(family)
    return _family_out(family)


@router.get("/orbits/{family}/{orbit_id}/position", response_model=PositionOut)
async def get_position(
    family: str,
    orbit_id: str,
    t_ms: float = Query(default=0.0, ge=0.0, description="Elapsed simulation time in ms"),
    speed: float = Query(default=settings.default_speed, ge=settings.speed_min, le=settings.speed_max),
):
    """Position of the orbiting body. Unknown orbits answer with the fallback point."""
    return PositionOut(
        family=family,
        orbit=orbit_id,
        known=is_known(family, orbit_id),
        t_ms=t_ms,
        speed=speed,
        period_s=lookup(family, orbit_id).period_s,
        position=list(position(family, orbit_id, t_ms, speed)),
        moon_position=list(moon_position(t_ms, speed)),
    )


@router.get("/orbits/{family}/{orbit_id}/path")
async def get_path(
    family: str,
    orbit_id: str,
    speed: float = Query(default=settings.default_speed, ge=settings.speed_min, le=settings.speed_max),
    start_ms: float = Query(default=0.0, ge=0.0),
    samples: int = Query(default=settings.path_samples, ge=2, le=5000),
    binary: bool = Query(default=False),
):
    """Sample one catalog period of the trajectory, at the requested speed, for a path preview."""
    _require_family(family)
    if not is_known(family, orbit_id):
        raise HTTPException(status_code=404, detail=f"Unknown orbit: '{family}/{orbit_id}'")

    period_s = lookup(family, orbit_id).period_s
    duration_ms = period_s * 1000.0 / speed
    times, points = sample_path(family, orbit_id, speed, start_ms, duration_ms, samples)

    if binary:
        return Response(content=encode_path(points), media_type="application/octet-stream")

    return PathOut(
        family=family,
        orbit=orbit_id,
        speed=speed,
        period_s=period_s,
        times_ms=times.tolist(),
        points=points.tolist(),
    )


@router.get("/moon/orbit")
async def get_moon_orbit(segments: int = Query(default=MOON_ORBIT_SEGMENTS, ge=3, le=1024)):
    """Closed reference circle of the Moon's orbit."""
    points = moon_orbit_path(segments)
    return {"color": MOON_ORBIT_COLOR, "segments": segments, "points": points.tolist()}


@router.post("/trail/ribbon")
async def post_ribbon(req: RibbonRequest):
    """Build ribbon geometry for an ordered list of trail samples."""
    if req.color is not None:
        color = req.color
    else:
        color = family_colors(req.family or "")[0]

    samples = [
        TrailSample(position=tuple(s.position), captured_at=s.captured_at, opacity=s.opacity)
        for s in req.samples
    ]
    geometry = build_ribbon(samples, color, req.width_scale)
    logger.debug("Built ribbon: %d samples -> %d triangles", len(samples), geometry.triangle_count)

    if req.binary:
        return Response(content=encode_ribbon(geometry), media_type="application/octet-stream")

    return {"color": color, **geometry.to_dict()}
