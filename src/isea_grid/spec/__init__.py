"""
Spec layer - constants, coordinate contract, diagnostics report.

No geometry here; everything else depends on this layer.
"""

from .constants import (
    EPS_ZERO,
    EPS_CLOSE,
    ROUND_TRIP_TOL,
    AREA_REL_TOL,
    HALF_APEX_ANGLE,
    FACE_ANGLE,
    SMALL_CIRCLE_ANGLE,
    RP_OVER_R,
    SECTOR,
    NEWTON_MAX_ITER,
    NEWTON_TOL,
    PROJECTION_EPS,
    SEAM_OVERSHOOT_TOL,
    N_QUADS,
    N_PENTAGONS,
    MAX_NEIGHBOURS,
    NORTH_POLE,
    SOUTH_POLE,
    SPHERE_AREA,
)
from .structures import (
    QuadCoord,
    PoleCoord,
    CellCoord,
    GridCell,
    validate_resolution,
    validate_coord,
    cell_count,
    cell_id,
    flat_index,
    coord_from_index,
    is_pentagon_coord,
    is_edge_coord,
)
from .diagnostics import ProjectionDiagnostics, OvershootEvent, OVERSHOOT_G, OVERSHOOT_Q
