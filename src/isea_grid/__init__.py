"""
isea_grid
=========

Icosahedral Snyder Equal-Area (ISEA) global grid on the unit sphere.

Subdividing each of the 10 icosahedron quads into N×N cells through the
ISEA projection gives 10·N² + 2 nearly equal-area cells: 12 pentagons
(2 poles + 10 icosahedron vertices) and hexagons everywhere else.

Layers:
    spec      - constants, coordinates, canonical index, diagnostics
    geometry  - vectors, icosahedron, projection, cell polygons
    topology  - neighbour adjacency from coordinates alone
    builders  - reference lattice, centre assembly, Grid
    analysis  - invariant checks, seam overshoot sweep

Usage:
    from isea_grid import build_grid
    grid = build_grid(8)
    for cell in grid:
        cell.lat_lon, cell.neighbour_indices, cell.area

Requirements:
    Python >= 3.9
    numpy >= 1.20
    scipy >= 1.11
"""

import sys

if sys.version_info < (3, 9):
    raise ImportError(f"isea_grid requires Python >= 3.9, got {sys.version}")

import scipy
_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"isea_grid requires scipy >= 1.11, got {scipy.__version__}")

import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"isea_grid requires numpy >= 1.20, got {np.__version__}")

__version__ = "0.1.0"

from .spec import (
    QuadCoord,
    PoleCoord,
    GridCell,
    ProjectionDiagnostics,
    cell_count,
    cell_id,
    flat_index,
    coord_from_index,
)
from .topology import neighbours, neighbour_table, classify
from .builders import Grid, build_grid
from .analysis import validate_grid, verify_grid_topology, verify_grid_geometry
from .logging_config import setup_logging
