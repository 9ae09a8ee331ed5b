"""
Seam Overshoot Sweep
====================

Forward projection is only defined inside a face (z ≤ g, z ≤ q(Az)). Cell
centres on a face boundary are produced by the inverse projection and then
sit on the bound up to floating point, so re-projecting them can land a
hair outside. This sweep measures how far, per resolution, to back the
choice of SEAM_OVERSHOOT_TOL.

For every quad cell (q, x, y) with lattice point (X, Y) = (x + 1, y):

    face = up face of q    if X + Y ≤ N
           down face of q  otherwise

    overshoot  = max(z − g, z − q(Az), 0)      in that face's frame
    round trip = |inverse(forward(P)) − P|

Seam cells are those on any quad boundary (x = 0, y = 0, x = N−1,
x + y = N−1); the last one is the shared edge of the up and down face.
"""

import logging

import numpy as np
from typing import Dict, List, Sequence

from ..geometry.icosahedron import build_icosahedron
from ..geometry.projection import forward, inverse, face_overshoot
from ..builders.reference_quad import build_reference_quad
from ..builders.assembler import assemble_centers
from ..spec.constants import SEAM_OVERSHOOT_TOL, ROUND_TRIP_TOL
from ..spec.diagnostics import ProjectionDiagnostics
from ..spec.structures import validate_resolution

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTIONS = (1, 2, 4, 8, 16, 32, 64)


def seam_overshoot(n: int, tol: float = SEAM_OVERSHOOT_TOL) -> Dict:
    """
    Overshoot and round-trip error of every quad cell centre at resolution N.

    Returns:
        dict with
            'n', 'n_cells', 'n_seam_cells'
            'max_overshoot_rad'       : over all quad cells
            'max_seam_overshoot_rad'  : over seam cells only
            'max_round_trip_error'    : |inverse(forward(P)) - P|, all cells
            'n_above_tol'             : cells with overshoot > tol
            'tol'                     : tolerance used
            'round_trip_ok'           : max round trip < ROUND_TRIP_TOL
            'construction'            : ProjectionDiagnostics.summary() of the build
    """
    n = validate_resolution(n)
    ico = build_icosahedron()
    diagnostics = ProjectionDiagnostics()
    reference = build_reference_quad(n, ico, diagnostics)
    centers = assemble_centers(n, ico, reference, diagnostics)

    X, Y = np.meshgrid(np.arange(1, n + 1), np.arange(n), indexing='ij')
    use_up = (X + Y) <= n
    x, y = X - 1, Y
    seam = (x == 0) | (y == 0) | (x == n - 1) | (x + y == n - 1)

    overshoot = np.zeros((len(ico['quads']), n, n))
    round_trip = np.zeros_like(overshoot)
    for q, (up_face, down_face) in enumerate(ico['quads']):
        start = 1 + q * n * n
        block = centers[start:start + n * n].reshape(n, n, 3)
        for mask, face in ((use_up, up_face), (~use_up, down_face)):
            if not mask.any():
                continue
            frame = ico['frames'][face]
            points = block[mask]
            excess_g, excess_q = face_overshoot(points, frame)
            overshoot[q][mask] = np.maximum(np.maximum(excess_g, excess_q), 0.0)
            back = inverse(forward(points, frame, ProjectionDiagnostics()), frame)
            round_trip[q][mask] = np.linalg.norm(back - points, axis=-1)

    seam_all = np.broadcast_to(seam, overshoot.shape)
    result = {
        'n': n,
        'n_cells': int(overshoot.size),
        'n_seam_cells': int(seam_all.sum()),
        'max_overshoot_rad': float(overshoot.max()),
        'max_seam_overshoot_rad': float(overshoot[seam_all].max()),
        'max_round_trip_error': float(round_trip.max()),
        'n_above_tol': int(np.count_nonzero(overshoot > tol)),
        'tol': tol,
        'round_trip_ok': float(round_trip.max()) < ROUND_TRIP_TOL,
        'construction': diagnostics.summary(),
    }
    logger.info("N=%d: max seam overshoot %.3e rad, %d above %.1e, max round trip %.3e",
                n, result['max_seam_overshoot_rad'], result['n_above_tol'], tol,
                result['max_round_trip_error'])
    return result


def sweep_seam_overshoot(resolutions: Sequence[int] = DEFAULT_RESOLUTIONS,
                         tol: float = SEAM_OVERSHOOT_TOL) -> List[Dict]:
    """Run seam_overshoot for each resolution, in the order given."""
    return [seam_overshoot(n, tol) for n in resolutions]
