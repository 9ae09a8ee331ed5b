#!/usr/bin/env python3
"""
SEAM OVERSHOOT SWEEP
====================

How far do re-projected cell centres land outside their own face?

Every quad cell centre is forward-projected into the face it was built
from (up face if X + Y ≤ N, down face otherwise). Centres on a face
boundary come back a hair past z = g or z = q(Az); this sweep reports the
worst case per resolution next to SEAM_OVERSHOOT_TOL, the threshold above
which the grid builder logs a warning.

INPUTS
------

Internal (from model):
  - analysis.seam_sweep.seam_overshoot(N) for each N
  - SEAM_OVERSHOOT_TOL, ROUND_TRIP_TOL from spec/constants.py

External:
  - None

OUTPUTS
-------

  - Per N: max overshoot (all cells / seam cells), count above tolerance,
    max round-trip error |inverse(forward(P)) - P|
  - Overall verdict: tolerance holds for every N swept

Jan 2026
"""

import sys
import logging
from pathlib import Path


def _find_src():
    """Find src/ by looking for isea_grid/ subdirectory."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        candidate = current / 'src'
        if (candidate / 'isea_grid').is_dir():
            return candidate
        current = current.parent
    raise RuntimeError("Cannot find src/isea_grid directory")

sys.path.insert(0, str(_find_src()))

import numpy as np
from isea_grid import setup_logging
from isea_grid.analysis.seam_sweep import sweep_seam_overshoot, DEFAULT_RESOLUTIONS
from isea_grid.spec.constants import SEAM_OVERSHOOT_TOL


def main(resolutions=DEFAULT_RESOLUTIONS, tol=SEAM_OVERSHOOT_TOL):
    results = sweep_seam_overshoot(resolutions, tol)

    print("=" * 84)
    print(f"SEAM OVERSHOOT SWEEP  (tol = {tol:.1e} rad = {np.rad2deg(tol):.1e} deg)")
    print("=" * 84)
    print(f"{'N':>4} {'cells':>8} {'seam':>7} {'max all [rad]':>14} "
          f"{'max seam [rad]':>15} {'> tol':>6} {'round trip':>11}")
    print("-" * 84)
    for r in results:
        print(f"{r['n']:>4} {r['n_cells']:>8} {r['n_seam_cells']:>7} "
              f"{r['max_overshoot_rad']:>14.3e} {r['max_seam_overshoot_rad']:>15.3e} "
              f"{r['n_above_tol']:>6} {r['max_round_trip_error']:>11.3e}")

    worst = max(r['max_overshoot_rad'] for r in results)
    holds = all(r['n_above_tol'] == 0 for r in results)
    print("-" * 84)
    print(f"Worst overshoot: {worst:.3e} rad ({np.rad2deg(worst):.3e} deg)")
    print(f"Tolerance {'HOLDS' if holds else 'EXCEEDED'} for N in {list(resolutions)}")
    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seam overshoot sweep over resolutions")
    parser.add_argument("resolutions", nargs="*", type=int, help="Resolutions N")
    parser.add_argument("--tol", type=float, default=SEAM_OVERSHOOT_TOL, help="Tolerance in radians")
    args = parser.parse_args()

    setup_logging(logging.WARNING)
    main(tuple(args.resolutions) or DEFAULT_RESOLUTIONS, args.tol)
