#!/usr/bin/env python3
"""Sample one orbit trajectory and write it as CSV.

Handy for checking the shape of a trajectory outside the renderer.

Usage:
    python scripts/sample_trajectory.py --family moon --orbit llo_elliptical
    python scripts/sample_trajectory.py --family lagrange --orbit l4_lissajous --speed 2 --periods 3 --samples 600
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys

# Add src to path
sys.path.insert(0, "src")

from mechanics.trajectories import sample_path
from orbits.catalog import is_known, orbit_period


def main(family: str, orbit: str, speed: float, periods: float, samples: int) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    logger = logging.getLogger("sample_trajectory")

    if not is_known(family, orbit):
        logger.warning("%s/%s is not in the catalog, sampling the fallback position", family, orbit)

    period_s = orbit_period(family, orbit)
    duration_ms = period_s * 1000.0 * periods / speed
    logger.info("Sampling %s/%s over %.1f s at %.1fx (%d samples)",
                family, orbit, duration_ms / 1000.0, speed, samples)

    times, points = sample_path(family, orbit, speed, 0.0, duration_ms, samples)

    writer = csv.writer(sys.stdout)
    writer.writerow(["t_ms", "x", "y", "z"])
    for t, (x, y, z) in zip(times, points):
        writer.writerow([f"{t:.3f}", f"{x:.6f}", f"{y:.6f}", f"{z:.6f}"])


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sample an orbit trajectory to CSV")
    parser.add_argument("--family", default="lagrange", help="Orbit family (lagrange, earth, moon)")
    parser.add_argument("--orbit", default="l1", help="Orbit id within the family")
    parser.add_argument("--speed", type=float, default=1.0, help="Speed multiplier (0.1-10)")
    parser.add_argument("--periods", type=float, default=1.0, help="Number of periods to sample at the given speed")
    parser.add_argument("--samples", type=int, default=240, help="Number of samples")
    args = parser.parse_args()
    if args.speed <= 0:
        parser.error("--speed must be positive")

    main(args.family, args.orbit, args.speed, args.periods, args.samples)
