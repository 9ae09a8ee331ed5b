"""
Cell Geometry
=============

Boundary polygons, fan triangulation and spherical areas.

BOUNDARY:
    For a cell with centre P and neighbours N_0 .. N_k-1 (counter-clockwise),
    boundary vertex i is the circumcentre of triangle (P, N_i, N_i+1),
    pushed out to the unit sphere. Neighbour order carries over, so the
    boundary loop is counter-clockwise too.

    circumcentre(a, b, c):
        u = (b − a) × (c − a)
        a + (|b − a|²·((c − a) × u) + |c − a|²·(u × (b − a))) / (2|u|²)
        (centroid if |u|² = 0, counted as degenerate)

AREA:
    Van Oosterom & Strackee (1983), unit sphere:
        tan(E/2) = |a·(b × c)| / (1 + a·b + b·c + c·a)
    Cell area = sum over the fan triangles (v_0, v_j, v_j+1).
    Every boundary vertex is shared by exactly three cells, so the areas
    tile the sphere: Σ area = 4π up to floating point.
"""

import numpy as np
from typing import Dict, Tuple

from .vector import dot, cross, normalize
from ..spec.constants import MAX_NEIGHBOURS


def circumcenter(a, b, c, return_degenerate: bool = False):
    """
    Circumcentre of triangles (a, b, c), vectorised over leading axes.

    Returns:
        (..., 3) points, and a (...,) bool mask of degenerate triangles if
        return_degenerate is set
    """
    a, b, c = (np.asarray(p, dtype=float) for p in (a, b, c))
    ab = b - a
    ac = c - a
    u = cross(ab, ac)
    uu = dot(u, u)
    degenerate = uu == 0.0

    num = dot(ab, ab)[..., None] * cross(ac, u) + dot(ac, ac)[..., None] * cross(u, ab)
    with np.errstate(divide='ignore', invalid='ignore'):
        center = a + num / (2.0 * uu[..., None])
    center = np.where(degenerate[..., None], (a + b + c) / 3.0, center)

    if return_degenerate:
        return center, degenerate
    return center


def spherical_triangle_area(a, b, c):
    """Unsigned area of unit-sphere triangles (a, b, c), in steradians."""
    a, b, c = (np.asarray(p, dtype=float) for p in (a, b, c))
    triple = np.abs(dot(a, cross(b, c)))
    denom = 1.0 + dot(a, b) + dot(b, c) + dot(c, a)
    return 2.0 * np.arctan2(triple, denom)


def fan_triangulate(vertices) -> np.ndarray:
    """
    Fan triangulation of a convex loop from its first vertex.

    Args:
        vertices: (k, 3) boundary loop, k >= 3

    Returns:
        (k-2, 3, 3) triangles (v_0, v_j, v_j+1)
    """
    vertices = np.asarray(vertices, dtype=float)
    k = len(vertices)
    if k < 3:
        raise ValueError(f"Need at least 3 vertices to triangulate, got {k}")
    apex = np.broadcast_to(vertices[0], (k - 2, 3))
    return np.stack([apex, vertices[1:-1], vertices[2:]], axis=1)


def polygon_area(vertices) -> float:
    """Spherical area of a convex loop on the unit sphere."""
    tri = fan_triangulate(vertices)
    return float(np.sum(spherical_triangle_area(tri[:, 0], tri[:, 1], tri[:, 2])))


def winding(center, vertices) -> float:
    """
    Signed turn of a boundary loop about its cell centre.

        center · Σ v_i × v_i+1

    Positive for a counter-clockwise loop seen from outside.
    """
    vertices = np.asarray(vertices, dtype=float)
    turn = np.sum(cross(vertices, np.roll(vertices, -1, axis=0)), axis=0)
    return float(dot(center, turn))


def build_cell_geometry(centers: np.ndarray, table: np.ndarray, counts: np.ndarray,
                        diagnostics=None) -> Dict:
    """
    Boundary polygons and areas for every cell at once.

    Args:
        centers: (M, 3) unit cell centres in canonical order
        table: (M, 6) neighbour indices, -1 padded
        counts: (M,) neighbour counts (5 or 6)
        diagnostics: optional ProjectionDiagnostics (degenerate triangles)

    Returns:
        dict with
            'vertices' : (M, 6, 3) boundary loops, NaN past counts[i]
            'areas'    : (M,) spherical areas
    """
    centers = np.asarray(centers, dtype=float)
    M = len(centers)
    slots = np.arange(MAX_NEIGHBOURS)
    valid = slots[None, :] < counts[:, None]

    nxt = (slots[None, :] + 1) % counts[:, None]
    first = np.where(valid, table, 0)
    second = np.where(valid, np.take_along_axis(table, nxt, axis=1), 0)

    center, degenerate = circumcenter(
        np.broadcast_to(centers[:, None, :], (M, MAX_NEIGHBOURS, 3)),
        centers[first],
        centers[second],
        return_degenerate=True,
    )
    vertices = np.where(valid[..., None], normalize(center), np.nan)

    if diagnostics is not None:
        n_degenerate = int(np.count_nonzero(degenerate & valid))
        if n_degenerate:
            diagnostics.record_degenerate(n_degenerate)

    areas = np.zeros(M)
    v0 = vertices[:, 0]
    for j in range(1, MAX_NEIGHBOURS - 1):
        present = (j + 1) < counts
        if not present.any():
            continue
        tri = spherical_triangle_area(v0[present], vertices[present, j], vertices[present, j + 1])
        areas[present] += tri

    return {'vertices': vertices, 'areas': areas}


def cell_loop(vertices_row: np.ndarray, count: int) -> Tuple[np.ndarray, np.ndarray]:
    """Unpadded boundary loop of one cell and its fan triangles."""
    loop = vertices_row[:count]
    return loop, fan_triangulate(loop)
