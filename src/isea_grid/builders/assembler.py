"""
Grid Assembler
==============

Pushes the shared reference lattice through each quad's own face frames.

For quad q and lattice point (X, Y), X ∈ 1..N, Y ∈ 0..N−1:

    X + Y ≤ N   inverse(up[X, Y],   up frame of q)
    X + Y > N   inverse(down[X, Y], down frame of q)

and the result is cell (q, N, X−1, Y). Row X = 0 (the A-B edge) and column
Y = N (the B-G edge) belong to neighbouring quads and are not materialised
twice.

Poles:
    north = up[0, 0]   through quad 0's up frame   (apex A of every upper quad)
    south = down[N, N] through quad 5's down frame (apex G of every lower quad)
"""

import logging

import numpy as np
from typing import Dict

from ..geometry.projection import inverse
from ..spec.constants import N_QUADS

logger = logging.getLogger(__name__)


def assemble_centers(n: int, ico: Dict, reference: Dict, diagnostics=None) -> np.ndarray:
    """
    Compute every cell centre in canonical order.

    Args:
        n: grid resolution N
        ico: icosahedron dict
        reference: lattice dict from build_reference_quad()
        diagnostics: optional ProjectionDiagnostics

    Returns:
        (10·N² + 2, 3) unit vectors: north pole, quad 0..9 row-major, south pole
    """
    frames = ico['frames']
    quads = ico['quads']
    centers = np.empty((N_QUADS * n * n + 2, 3))

    X, Y = np.meshgrid(np.arange(1, n + 1), np.arange(n), indexing='ij')
    use_up = (X + Y) <= n
    up_points = reference['up'][X[use_up], Y[use_up]]
    down_points = reference['down'][X[~use_up], Y[~use_up]]

    for q, (up_face, down_face) in enumerate(quads):
        block = np.empty((n, n, 3))
        block[use_up] = inverse(up_points, frames[up_face], diagnostics)
        block[~use_up] = inverse(down_points, frames[down_face], diagnostics)
        start = 1 + q * n * n
        centers[start:start + n * n] = block.reshape(n * n, 3)

    centers[0] = inverse(reference['up'][0, 0], frames[quads[0][0]], diagnostics)
    centers[-1] = inverse(reference['down'][n, n], frames[quads[5][1]], diagnostics)

    logger.debug("Assembled %d centres for N=%d (%d up / %d down per quad)",
                 len(centers), n, int(use_up.sum()), int((~use_up).sum()))
    return centers
