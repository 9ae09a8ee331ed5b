"""
Grid builders - reference lattice, centre assembly, the Grid arena.

EXPORTS:
- build_grid / Grid: the complete grid (what consumers use)
- build_reference_quad, assemble_centers: pipeline stages, for tests and analysis
"""

from .reference_quad import build_reference_quad
from .assembler import assemble_centers
from .grid import Grid, build_grid, centers_to_lat_lon, lat_lon_to_vectors
