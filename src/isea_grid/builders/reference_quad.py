"""
Reference Quad Lattice
======================

One planar lattice, built once, serves every quad of the grid.

The three corners of quad 0's up face are projected with the ISEA forward
map, then the lattice is filled by LINEAR interpolation in the projected
plane (barycentric subdivision of the planar triangle, not geodesic
subdivision on the sphere). Equal planar areas map to equal spherical
areas, which is what makes the grid equal-area by construction.

LATTICE (X, Y), 0 ≤ X, Y ≤ N:

        A ──────── C          A = (0, 0)    apex of the up face
         \\   up   / \\        C = (N, 0)
          \\      /   \\       B = (0, N)
           \\    / down\\      G = (N, N)    apex of the down face
            B ──────── G

    up   point (X, Y), X + Y ≤ N :  A + X·(C − A)/N + Y·(B − A)/N
    down point (N − X, N − Y)     :  the same planar point

The down face is the up face turned 180° about the rhombus centre, and its
frame is built the same way relative to its own vertices, so reflecting
the index is all it takes to reuse the subdivision.
"""

import numpy as np
from typing import Dict

from ..geometry.projection import forward
from ..spec.structures import validate_resolution


def build_reference_quad(n: int, ico: Dict, diagnostics=None) -> Dict:
    """
    Build the shared planar lattice.

    Args:
        n: grid resolution N
        ico: icosahedron dict from build_icosahedron()
        diagnostics: optional ProjectionDiagnostics for the corner projection

    Returns:
        dict with
            'n'       : N
            'corners' : (3, 2) projected A, B, C
            'up'      : (N+1, N+1, 2), NaN where X + Y > N
            'down'    : (N+1, N+1, 2), NaN where X + Y < N
    """
    n = validate_resolution(n)
    up_face = ico['quads'][0][0]
    frame = ico['frames'][up_face]
    corners = forward(ico['V'][list(ico['F'][up_face])], frame, diagnostics)
    A, B, C = corners

    X, Y = np.meshgrid(np.arange(n + 1), np.arange(n + 1), indexing='ij')
    points = A + X[..., None] * ((C - A) / n) + Y[..., None] * ((B - A) / n)

    up = np.where(((X + Y) <= n)[..., None], points, np.nan)
    down = up[::-1, ::-1].copy()

    return {'n': n, 'corners': corners, 'up': up, 'down': down}
