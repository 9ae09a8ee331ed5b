#!/usr/bin/env python3
"""
GRID REPORT: SIZE, DEGREE, AREA AND DIAGNOSTICS PER RESOLUTION
==============================================================

Builds the ISEA grid for a list of resolutions and prints one summary row
per N, then validates each grid against its contract.

INPUTS
------

Internal (from model):
  - build_grid(N) for each requested N
  - validate_grid(grid, strict=False) for the contract checks

External:
  - None

OUTPUTS
-------

  - Cell count 10·N² + 2, pentagon count (12), min/max degree (5/6)
  - Σ area vs 4π (relative error), area ratio max/min
  - Projection diagnostics: overshoot events, significant events, Newton
    cap-outs, degenerate circumcentres
  - Contract violations, if any

VALIDATION (run with --test)
----------------------------

  - T1: N=1 grid is the icosahedron (12 pentagons, 30 adjacencies)
  - T2: N=2 grid has 42 cells and passes validate_grid
  - T3: nearest_cell finds every cell from its own centre (N=4)

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
from isea_grid import build_grid, validate_grid, setup_logging


DEFAULT_RESOLUTIONS = (1, 2, 4, 8, 16, 32)


# =============================================================================
# REPORT
# =============================================================================

def report(resolutions=DEFAULT_RESOLUTIONS, verbose=True):
    """Build each grid and print its summary. Returns list of describe() dicts."""
    rows = []
    if verbose:
        print("=" * 90)
        print(f"{'N':>4} {'cells':>8} {'pent':>5} {'deg':>5} {'Σ area - 4π (rel)':>18} "
              f"{'max/min':>8} {'overshoots':>11} {'signif':>7} {'valid':>6}")
        print("-" * 90)

    for n in resolutions:
        grid = build_grid(n)
        info = grid.describe()
        ok, errors = validate_grid(grid, strict=False)
        counts = grid.neighbour_counts
        info['valid'] = ok
        info['errors'] = errors
        rows.append(info)

        if verbose:
            diag = info['diagnostics']
            print(f"{n:>4} {info['size']:>8} {info['n_pentagons']:>5} "
                  f"{counts.min()}/{counts.max():<3} {info['area_rel_error']:>18.3e} "
                  f"{info['area_ratio']:>8.4f} {diag['n_overshoots']:>11} "
                  f"{diag['n_significant']:>7} {'yes' if ok else 'NO':>6}")
            for err in errors:
                print(f"       ! {err}")

    if verbose:
        print("=" * 90)
    return rows


# =============================================================================
# VALIDATION
# =============================================================================

def run_validation_tests(verbose=True):
    all_passed = True

    # T1: icosahedron
    grid = build_grid(1)
    n_links = int(grid.neighbour_counts.sum()) // 2
    t1_pass = len(grid) == 12 and all(c.is_pentagon for c in grid) and n_links == 30
    all_passed &= t1_pass
    if verbose:
        print(f"  T1 N=1: {len(grid)} cells, {n_links} links  {'PASS' if t1_pass else 'FAIL'}")

    # T2: N=2 contract
    grid = build_grid(2)
    ok, errors = validate_grid(grid, strict=False)
    t2_pass = len(grid) == 42 and ok
    all_passed &= t2_pass
    if verbose:
        print(f"  T2 N=2: {len(grid)} cells, valid={ok}  {'PASS' if t2_pass else 'FAIL'}")
        for err in errors:
            print(f"       ! {err}")

    # T3: picking
    grid = build_grid(4)
    lat, lon = grid.lat_lon[:, 0], grid.lat_lon[:, 1]
    found = grid.nearest_cell(lat, lon)
    t3_pass = bool(np.all(found == np.arange(len(grid))))
    all_passed &= t3_pass
    if verbose:
        print(f"  T3 N=4: nearest_cell(centre) == index  {'PASS' if t3_pass else 'FAIL'}")

    if verbose:
        print("\n" + "=" * 70)
        print(f"VALIDATION: {'ALL TESTS PASS' if all_passed else 'SOME TESTS FAILED'}")
        print("=" * 70)

    return all_passed


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Build and summarise ISEA grids")
    parser.add_argument("resolutions", nargs="*", type=int, help="Resolutions N (default 1 2 4 8 16 32)")
    parser.add_argument("--test", action="store_true", help="Run validation tests only")
    parser.add_argument("--debug", action="store_true", help="DEBUG logging")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.debug else logging.WARNING)

    if args.test:
        success = run_validation_tests(verbose=True)
        sys.exit(0 if success else 1)
    report(tuple(args.resolutions) or DEFAULT_RESOLUTIONS)
    print("\n(Run with --test for validation tests)")
