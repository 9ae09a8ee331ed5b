"""
Icosahedron Construction
========================

Regular icosahedron on the unit sphere, oriented so that

    vertex 0  = north pole (0, +1, 0)
    vertex 11 = south pole (0, -1, 0)

TOPOLOGY:
    V = 12 vertices
    E = 30 edges
    F = 20 triangles, all counter-clockwise seen from outside
    χ = V - E + F = 2

FACE LAYOUT (vertex indices):
    upper        (0, u_i, u_i+1)          faces 0-4
    upper-middle (l_i, u_i+1, u_i)        faces 5-9
    lower-middle (u_i+1, l_i, l_i+1)      faces 10-14
    lower        (11, l_i+1, l_i)         faces 15-19

    with upper ring u_i = 1..5 and lower ring l_i = 6..10.

QUADS:
    Quad i   (0-4): upper face i       + upper-middle face i
    Quad 5+i (5-9): lower-middle face i + lower face i

    In every quad (up = (a, b, c), down = (a', b', c')) the shared edge is
    listed as down.b == up.c and down.c == up.b, so one planar lattice
    serves both triangles (see builders/reference_quad.py).
"""

import numpy as np
from typing import Dict, List, Tuple

from .vector import normalize, cross, dot
from ..spec.constants import EPS_CLOSE, N_QUADS

# Face vertex triples (a, b, c)
ICOSAHEDRON_FACES = (
    (0, 1, 2), (0, 2, 3), (0, 3, 4), (0, 4, 5), (0, 5, 1),
    (6, 2, 1), (7, 3, 2), (8, 4, 3), (9, 5, 4), (10, 1, 5),
    (2, 6, 7), (3, 7, 8), (4, 8, 9), (5, 9, 10), (1, 10, 6),
    (11, 7, 6), (11, 8, 7), (11, 9, 8), (11, 10, 9), (11, 6, 10),
)

# (up_face, down_face) per quad
ICOSAHEDRON_QUADS = (
    (0, 5), (1, 6), (2, 7), (3, 8), (4, 9),
    (10, 15), (11, 16), (12, 17), (13, 18), (14, 19),
)


def _raw_vertices() -> Tuple[np.ndarray, float, float]:
    """Golden-ratio vertices (unit length, before orientation) and a, b."""
    a = 1.0 / np.sqrt((5.0 + np.sqrt(5.0)) / 2.0)
    b = a * (1.0 + np.sqrt(5.0)) / 2.0
    return np.array([
        (-a, 0, b), (a, 0, b), (0, b, a), (-b, a, 0),
        (-b, -a, 0), (0, -b, a), (b, a, 0), (0, b, -a),
        (-a, 0, -b), (0, -b, -a), (b, -a, 0), (a, 0, -b),
    ], dtype=float), a, b


def _orientation_matrix(a: float, b: float) -> np.ndarray:
    """
    Proper rotation taking (-a, 0, b) to (0, 1, 0).

    Rotation about y by atan(a/b), then +z -> +y about the x axis.
    """
    return np.array([
        [b, 0.0, a],
        [-a, 0.0, b],
        [0.0, -1.0, 0.0],
    ])


def face_frame(a, b, c) -> Dict[str, np.ndarray]:
    """
    Orthonormal tangent frame of face (a, b, c).

        n = normalised centroid (face centre direction)
        u = (c - b) with its n component removed, normalised
        v = n × u  (so u × v = n, right-handed about the outward normal)
    """
    a, b, c = (np.asarray(p, dtype=float) for p in (a, b, c))
    n = normalize(a + b + c)
    ref = c - b
    u = normalize(ref - n * dot(ref, n))
    v = normalize(cross(n, u))
    return {'n': n, 'u': u, 'v': v}


def build_icosahedron() -> Dict:
    """
    Build the oriented icosahedron with per-face frames.

    Returns:
        dict with
            'V'      : (12, 3) unit vertices
            'F'      : tuple of 20 (a, b, c) index triples
            'quads'  : tuple of 10 (up_face, down_face) pairs
            'frames' : list of 20 frame dicts {'n', 'u', 'v'}
            'north_pole', 'south_pole' : vertex indices
    """
    raw, a, b = _raw_vertices()
    V = raw @ _orientation_matrix(a, b).T
    # Snap the poles exactly; rotation leaves ~1e-17 residue
    V[0] = (0.0, 1.0, 0.0)
    V[11] = (0.0, -1.0, 0.0)

    frames = [face_frame(V[i], V[j], V[k]) for (i, j, k) in ICOSAHEDRON_FACES]

    return {
        'V': V,
        'F': ICOSAHEDRON_FACES,
        'quads': ICOSAHEDRON_QUADS,
        'frames': frames,
        'north_pole': 0,
        'south_pole': 11,
    }


def icosahedron_edges(faces) -> List[Tuple[int, int]]:
    """Undirected edges (i < j), sorted."""
    edges = set()
    for (i, j, k) in faces:
        for p, q in ((i, j), (j, k), (k, i)):
            edges.add((min(p, q), max(p, q)))
    return sorted(edges)


def validate_icosahedron(ico: Dict) -> None:
    """
    Check the construction. Raises ValueError on the first violation.

    Checks: unit vertices, V/E/F counts, equal edge lengths, every directed
    edge used exactly once (consistent orientation), outward facing faces,
    quad pairing down.b == up.c and down.c == up.b.
    """
    V, F = ico['V'], ico['F']

    radii = np.linalg.norm(V, axis=1)
    if np.max(np.abs(radii - 1.0)) > EPS_CLOSE:
        raise ValueError(f"Vertices not on unit sphere: max |r-1| = {np.max(np.abs(radii - 1.0))}")

    edges = icosahedron_edges(F)
    if len(V) != 12 or len(edges) != 30 or len(F) != 20:
        raise ValueError(f"Expected (V,E,F) = (12,30,20), got ({len(V)},{len(edges)},{len(F)})")

    lengths = np.array([np.linalg.norm(V[i] - V[j]) for i, j in edges])
    if np.ptp(lengths) > EPS_CLOSE:
        raise ValueError(f"Edge lengths not uniform: spread {np.ptp(lengths):.3e}")

    directed = set()
    for (i, j, k) in F:
        for p, q in ((i, j), (j, k), (k, i)):
            if (p, q) in directed:
                raise ValueError(f"Directed edge ({p},{q}) used twice: inconsistent face orientation")
            directed.add((p, q))

    for f_idx, (i, j, k) in enumerate(F):
        outward = dot(cross(V[j] - V[i], V[k] - V[i]), V[i] + V[j] + V[k])
        if outward <= 0:
            raise ValueError(f"Face {f_idx} {F[f_idx]} is not counter-clockwise from outside")

    if len(ico['quads']) != N_QUADS:
        raise ValueError(f"Expected {N_QUADS} quads, got {len(ico['quads'])}")
    for q_idx, (up, down) in enumerate(ico['quads']):
        _, ub, uc = F[up]
        _, db, dc = F[down]
        if db != uc or dc != ub:
            raise ValueError(f"Quad {q_idx}: faces {F[up]} / {F[down]} do not share edge as (b,c)/(c,b)")
