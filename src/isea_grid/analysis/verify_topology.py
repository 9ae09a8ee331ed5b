"""
Grid Verification Functions
===========================

Topological and metric invariants of a built Grid.

TOPOLOGY:
    size         = 10·N² + 2
    degree       = 5 for the 12 pentagons, 6 for every other cell
    adjacency    symmetric, no repeats, no self-neighbour

GEOMETRY:
    Σ area       = 4π  (relative error ≤ AREA_REL_TOL)
    winding      > 0 for every boundary loop (counter-clockwise from outside)
    lat ∈ [−90, 90], lon ∈ (−180, 180]
    |centre| = 1

These functions are in analysis/ because they read the assembled Grid.
"""

import numpy as np
from typing import Dict, List, Tuple

from ..geometry.vector import dot, cross
from ..spec.constants import (
    AREA_REL_TOL,
    EPS_CLOSE,
    MAX_NEIGHBOURS,
    N_PENTAGONS,
    SPHERE_AREA,
)
from ..spec.structures import cell_count


def verify_grid_topology(grid) -> Dict:
    """
    Check degree, pentagon count and adjacency symmetry.

    Returns:
        dict with verification results
    """
    table = np.asarray(grid.neighbour_table)
    counts = np.asarray(grid.neighbour_counts)
    M = len(table)
    pentagon = np.array([c.is_pentagon for c in grid.cells])

    expected_degree = np.where(pentagon, 5, 6)
    degree_ok = bool(np.all(counts == expected_degree))

    valid = np.arange(MAX_NEIGHBOURS)[None, :] < counts[:, None]
    rows = np.repeat(np.arange(M), MAX_NEIGHBOURS).reshape(M, MAX_NEIGHBOURS)[valid]
    cols = table[valid]

    in_range = bool(np.all((cols >= 0) & (cols < M)))
    padding_ok = bool(np.all(table[~valid] == -1))
    no_self = bool(np.all(rows != cols))

    forward_keys = rows * M + cols
    backward_keys = cols * M + rows
    no_duplicates = len(np.unique(forward_keys)) == len(forward_keys)
    asymmetric = int(np.count_nonzero(~np.isin(backward_keys, forward_keys)))

    return {
        'size': M,
        'expected_size': cell_count(grid.n),
        'size_ok': M == cell_count(grid.n),
        'n_pentagons': int(pentagon.sum()),
        'pentagon_count_ok': int(pentagon.sum()) == N_PENTAGONS,
        'min_degree': int(counts.min()),
        'max_degree': int(counts.max()),
        'degree_ok': degree_ok,
        'indices_in_range': in_range,
        'padding_ok': padding_ok,
        'no_self_neighbour': no_self,
        'no_duplicates': no_duplicates,
        'n_asymmetric': asymmetric,
        'symmetric': asymmetric == 0,
    }


def boundary_winding(grid) -> np.ndarray:
    """
    Signed turn  centre · Σ v_i × v_i+1  of every boundary loop.

    Returns:
        (M,) array, positive where the loop is counter-clockwise from outside
    """
    vertices = np.asarray(grid.boundary_vertices)
    counts = np.asarray(grid.neighbour_counts)
    slots = np.arange(MAX_NEIGHBOURS)
    valid = slots[None, :] < counts[:, None]
    nxt = (slots[None, :] + 1) % counts[:, None]

    following = np.take_along_axis(vertices, nxt[..., None], axis=1)
    turns = np.where(valid[..., None], cross(vertices, following), 0.0)
    return dot(np.asarray(grid.centers), turns.sum(axis=1))


def verify_grid_geometry(grid) -> Dict:
    """
    Check total area, loop orientation, lat/lon ranges and unit centres.

    Returns:
        dict with verification results
    """
    areas = np.asarray(grid.areas)
    lat_lon = np.asarray(grid.lat_lon)
    centers = np.asarray(grid.centers)

    area_sum = float(areas.sum())
    rel_error = abs(area_sum - SPHERE_AREA) / SPHERE_AREA
    winding = boundary_winding(grid)
    radii = np.linalg.norm(centers, axis=1)

    lat, lon = lat_lon[:, 0], lat_lon[:, 1]
    return {
        'area_sum': area_sum,
        'area_rel_error': float(rel_error),
        'area_ok': rel_error <= AREA_REL_TOL,
        'all_areas_positive': bool(np.all(areas > 0)),
        'min_winding': float(winding.min()),
        'orientation_ok': bool(np.all(winding > 0)),
        'lat_ok': bool(np.all((lat >= -90.0) & (lat <= 90.0))),
        'lon_ok': bool(np.all((lon > -180.0) & (lon <= 180.0))),
        'max_radius_error': float(np.max(np.abs(radii - 1.0))),
        'unit_centers': bool(np.max(np.abs(radii - 1.0)) < EPS_CLOSE),
    }


def validate_grid(grid, strict: bool = True) -> Tuple[bool, List[str]]:
    """
    Validate a Grid against its contract.

    Args:
        grid: the Grid to validate
        strict: If True, raise ValueError listing every violation

    Returns:
        (is_valid, list of error messages)
    """
    errors = []
    topo = verify_grid_topology(grid)
    geom = verify_grid_geometry(grid)

    if not topo['size_ok']:
        errors.append(f"Size {topo['size']} != 10·N²+2 = {topo['expected_size']}")
    if not topo['pentagon_count_ok']:
        errors.append(f"Expected {N_PENTAGONS} pentagons, got {topo['n_pentagons']}")
    if not topo['degree_ok']:
        errors.append(f"Degree out of contract: min {topo['min_degree']}, max {topo['max_degree']}")
    if not topo['indices_in_range']:
        errors.append("Neighbour index out of range")
    if not topo['padding_ok']:
        errors.append("Neighbour table padding is not -1")
    if not topo['no_self_neighbour']:
        errors.append("Cell lists itself as a neighbour")
    if not topo['no_duplicates']:
        errors.append("Repeated neighbour in a cell")
    if not topo['symmetric']:
        errors.append(f"Adjacency not symmetric: {topo['n_asymmetric']} one-way link(s)")

    if not geom['area_ok']:
        errors.append(f"Area sum {geom['area_sum']:.12f} off 4π by {geom['area_rel_error']:.3e} (relative)")
    if not geom['all_areas_positive']:
        errors.append("Non-positive cell area")
    if not geom['orientation_ok']:
        errors.append(f"Boundary loop not counter-clockwise: min winding {geom['min_winding']:.3e}")
    if not geom['lat_ok']:
        errors.append("Latitude outside [-90, 90]")
    if not geom['lon_ok']:
        errors.append("Longitude outside (-180, 180]")
    if not geom['unit_centers']:
        errors.append(f"Centre off the unit sphere by {geom['max_radius_error']:.3e}")

    if errors and strict:
        raise ValueError(f"Grid contract violation: {errors}")

    return len(errors) == 0, errors
