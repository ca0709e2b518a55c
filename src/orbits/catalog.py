"""Catalog of selectable orbits: families, periods and display colours."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OrbitFamily(str, Enum):
    LAGRANGE = "lagrange"
    EARTH = "earth"  # Earth-synchronous
    MOON = "moon"  # Moon-relative


@dataclass(frozen=True, slots=True)
class OrbitSelector:
    family: str
    specific_id: str


@dataclass(frozen=True, slots=True)
class OrbitOption:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    period_s: float
    base_color: str
    emissive_color: str


# Ordered options per family. The first entry is the default selection
# when switching families.
ORBIT_OPTIONS: dict[str, list[OrbitOption]] = {
    OrbitFamily.LAGRANGE.value: [
        OrbitOption("l1", "L1 Point"),
        OrbitOption("l2", "L2 Point"),
        OrbitOption("l3", "L3 Point"),
        OrbitOption("l4", "L4 Point"),
        OrbitOption("l5", "L5 Point"),
        OrbitOption("l1_halo", "L1 Halo Orbit"),
        OrbitOption("l2_halo", "L2 Halo Orbit"),
        OrbitOption("l3_halo", "L3 Halo Orbit"),
        OrbitOption("l4_lissajous", "L4 Lissajous Orbit"),
        OrbitOption("l5_lissajous", "L5 Lissajous Orbit"),
    ],
    OrbitFamily.EARTH.value: [
        OrbitOption("geo", "Geostationary Orbit (GEO)"),
        OrbitOption("gso_equator", "Geosynchronous Orbit (GSO Equatorial)"),
        OrbitOption("gso_mid", "Geosynchronous Orbit (GSO Mid-latitude)"),
        OrbitOption("qzo_8", "Quasi-Zenith Orbit (QZO Figure-8)"),
        OrbitOption("qzo_asym", "Quasi-Zenith Orbit (QZO Asymmetric)"),
        OrbitOption("molniya", "Molniya Orbit"),
    ],
    OrbitFamily.MOON.value: [
        OrbitOption("llo_circular", "Low Lunar Orbit (Circular)"),
        OrbitOption("llo_elliptical", "Low Lunar Orbit (Elliptical)"),
        OrbitOption("llo_polar", "Low Lunar Orbit (Polar)"),
        OrbitOption("frozen", "Lunar Frozen Orbit"),
        OrbitOption("transfer", "Moon-Earth Transfer Orbit"),
        OrbitOption("distant", "Distant Lunar Orbit"),
    ],
}

# Trail decay periods (seconds). Lagrange orbits all share one period.
LAGRANGE_PERIOD_S = 60.0

ORBIT_PERIODS_S: dict[str, dict[str, float]] = {
    OrbitFamily.EARTH.value: {
        "geo": 40.0,
        "gso_equator": 40.0,
        "gso_mid": 40.0,
        "qzo_8": 30.0,
        "qzo_asym": 30.0,
        "molniya": 50.0,
    },
    OrbitFamily.MOON.value: {
        "llo_circular": 20.0,
        "llo_elliptical": 20.0,
        "llo_polar": 20.0,
        "frozen": 30.0,
        "transfer": 100.0,
        "distant": 40.0,
    },
}

DEFAULT_PERIODS_S: dict[str, float] = {
    OrbitFamily.LAGRANGE.value: LAGRANGE_PERIOD_S,
    OrbitFamily.EARTH.value: 40.0,
    OrbitFamily.MOON.value: 30.0,
}
UNKNOWN_FAMILY_PERIOD_S = 40.0

# (base, emissive) colour of the moving body and its trail, per family
FAMILY_COLORS: dict[str, tuple[str, str]] = {
    OrbitFamily.LAGRANGE.value: ("#9C27B0", "#6A1B9A"),
    OrbitFamily.EARTH.value: ("#2196F3", "#1565C0"),
    OrbitFamily.MOON.value: ("#4CAF50", "#2E7D32"),
}
UNKNOWN_FAMILY_COLORS = ("#FFFFFF", "#AAAAAA")


def _family_key(family: str | OrbitFamily) -> str:
    return family.value if isinstance(family, OrbitFamily) else str(family)


def orbit_options(family: str | OrbitFamily) -> list[OrbitOption]:
    """Ordered options for a family (empty for an unknown family)."""
    return list(ORBIT_OPTIONS.get(_family_key(family), []))


def orbit_ids(family: str | OrbitFamily) -> list[str]:
    return [opt.id for opt in orbit_options(family)]


def default_orbit(family: str | OrbitFamily) -> str | None:
    options = ORBIT_OPTIONS.get(_family_key(family))
    return options[0].id if options else None


def is_known(family: str | OrbitFamily, specific_id: str) -> bool:
    return specific_id in orbit_ids(family)


def orbit_period(family: str | OrbitFamily, specific_id: str) -> float:
    """Period in seconds used to fade and evict trail samples.

    Unknown ids fall back to the family default; unknown families to 40 s.
    """
    key = _family_key(family)
    if key == OrbitFamily.LAGRANGE.value:
        return LAGRANGE_PERIOD_S
    if key not in DEFAULT_PERIODS_S:
        return UNKNOWN_FAMILY_PERIOD_S
    return ORBIT_PERIODS_S[key].get(specific_id, DEFAULT_PERIODS_S[key])


def family_colors(family: str | OrbitFamily) -> tuple[str, str]:
    return FAMILY_COLORS.get(_family_key(family), UNKNOWN_FAMILY_COLORS)


def lookup(family: str | OrbitFamily, specific_id: str) -> CatalogEntry:
    base, emissive = family_colors(family)
    return CatalogEntry(
        period_s=orbit_period(family, specific_id),
        base_color=base,
        emissive_color=emissive,
    )
