"""
Analysis layer - invariant checks and empirical sweeps over built grids.

Depends on builders/ and geometry/.
"""

from .verify_topology import (
    verify_grid_topology,
    verify_grid_geometry,
    boundary_winding,
    validate_grid,
)
from .seam_sweep import seam_overshoot, sweep_seam_overshoot, DEFAULT_RESOLUTIONS
