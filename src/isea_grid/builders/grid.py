"""
ISEA Global Grid
================

The grid is a flat arena: every per-cell quantity is one numpy array in
canonical order (north pole, quads 0..9 row-major, south pole), and cells
refer to each other by integer index only.

PIPELINE (build_grid):
    icosahedron → reference quad lattice → cell centres (10·N² + 2)
    → neighbour table → boundary polygons + areas → GridCell records

All arrays are read-only once built. Changing resolution means building a
new Grid.

LAT/LON:
    lat = asin(y),  lon = atan2(x, z),  degrees, lon in (−180, 180]
"""

import logging
from collections.abc import Sequence
from typing import Dict, Tuple

import numpy as np
from scipy.spatial import cKDTree

from ..geometry.vector import clamp, frozen
from ..geometry.icosahedron import build_icosahedron
from ..geometry.cell_geometry import build_cell_geometry, cell_loop
from ..topology.neighbours import neighbour_table
from .reference_quad import build_reference_quad
from .assembler import assemble_centers
from ..spec.constants import N_QUADS, SPHERE_AREA
from ..spec.diagnostics import ProjectionDiagnostics
from ..spec.structures import (
    GridCell,
    validate_resolution,
    cell_count,
    coord_from_index,
    cell_id,
    is_pentagon_coord,
    is_edge_coord,
)

logger = logging.getLogger(__name__)


def centers_to_lat_lon(centers) -> np.ndarray:
    """(M, 3) unit vectors → (M, 2) [lat, lon] in degrees."""
    centers = np.asarray(centers, dtype=float)
    lat = np.rad2deg(np.arcsin(clamp(centers[..., 1])))
    lon = np.rad2deg(np.arctan2(centers[..., 0], centers[..., 2]))
    lon = np.where(lon <= -180.0, lon + 360.0, lon)
    return np.stack([lat, lon], axis=-1)


def lat_lon_to_vectors(lat, lon) -> np.ndarray:
    """Inverse of centers_to_lat_lon, degrees in, (..., 3) unit vectors out."""
    lat = np.deg2rad(np.asarray(lat, dtype=float))
    lon = np.deg2rad(np.asarray(lon, dtype=float))
    return np.stack([
        np.cos(lat) * np.sin(lon),
        np.sin(lat),
        np.cos(lat) * np.cos(lon),
    ], axis=-1)


class Grid(Sequence):
    """
    Immutable icosahedral equal-area grid of resolution N.

    Sequence of GridCell in canonical order: len(grid), grid[i] and
    iteration all follow the flat index. grid[i] takes a canonical index
    0 <= i < size only (negative indices raise IndexError); slices behave
    as on a tuple. The arena arrays (centers, lat_lon, neighbour_table,
    neighbour_counts, boundary_vertices, areas) are exposed directly for
    vectorised consumers. The diagnostics report is frozen once built.

    Args:
        n: resolution N >= 1 (cells per quad edge)

    Raises:
        TypeError: n is not an integer
        ValueError: n < 1
    """

    def __init__(self, n):
        n = validate_resolution(n)
        diagnostics = ProjectionDiagnostics()

        ico = build_icosahedron()
        reference = build_reference_quad(n, ico, diagnostics)
        centers = assemble_centers(n, ico, reference, diagnostics)
        table, counts = neighbour_table(n)
        geometry = build_cell_geometry(centers, table, counts, diagnostics)

        self._n = n
        self._diagnostics = diagnostics
        self._centers = frozen(centers)
        self._lat_lon = frozen(centers_to_lat_lon(centers))
        self._table = frozen(table, dtype=np.int64)
        self._counts = frozen(counts, dtype=np.int64)
        self._vertices = frozen(geometry['vertices'])
        self._areas = frozen(geometry['areas'])
        self._cells = tuple(self._make_cell(i) for i in range(len(centers)))
        self._tree = cKDTree(self._centers)

        logger.info("Built ISEA grid N=%d: %d cells, area sum %.12f (4π = %.12f)",
                    n, len(self._cells), float(self._areas.sum()), SPHERE_AREA)
        significant = diagnostics.significant()
        if significant:
            logger.warning(
                "Grid N=%d: %d projection overshoot(s) above tolerance, max %.3e rad (%.3e deg)",
                n, len(significant), diagnostics.max_overshoot,
                np.rad2deg(diagnostics.max_overshoot),
            )
        diagnostics.freeze()

    def _make_cell(self, index: int) -> GridCell:
        coords = coord_from_index(index, self._n)
        count = int(self._counts[index])
        loop, triangles = cell_loop(self._vertices[index], count)
        return GridCell(
            index=index,
            coords=coords,
            id=cell_id(coords),
            center=self._centers[index],
            lat_lon=(float(self._lat_lon[index, 0]), float(self._lat_lon[index, 1])),
            is_pentagon=is_pentagon_coord(coords),
            is_along_icosahedron_edge=is_edge_coord(coords),
            neighbour_indices=tuple(int(j) for j in self._table[index, :count]),
            vertices=loop,
            face_triangles=frozen(triangles),
            area=float(self._areas[index]),
        )

    # =========================================================================
    # Sequence protocol
    # =========================================================================

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._cells[index]
        return self._cells[self._check_index(index)]

    def __iter__(self):
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"Grid(n={self._n}, size={len(self._cells)})"

    # =========================================================================
    # Arena
    # =========================================================================

    @property
    def n(self) -> int:
        return self._n

    @property
    def size(self) -> int:
        return len(self._cells)

    def cell_count(self) -> int:
        return len(self._cells)

    def for_each_cell(self) -> Tuple[GridCell, ...]:
        """All cells in canonical order. Restartable: the same tuple every call."""
        return self._cells

    @property
    def cells(self) -> Tuple[GridCell, ...]:
        return self._cells

    @property
    def diagnostics(self) -> ProjectionDiagnostics:
        return self._diagnostics

    @property
    def centers(self) -> np.ndarray:
        return self._centers

    @property
    def lat_lon(self) -> np.ndarray:
        return self._lat_lon

    @property
    def neighbour_table(self) -> np.ndarray:
        return self._table

    @property
    def neighbour_counts(self) -> np.ndarray:
        return self._counts

    @property
    def boundary_vertices(self) -> np.ndarray:
        return self._vertices

    @property
    def areas(self) -> np.ndarray:
        return self._areas

    @property
    def north_pole(self) -> GridCell:
        return self._cells[0]

    @property
    def south_pole(self) -> GridCell:
        return self._cells[-1]

    def quad_cells(self, quad: int) -> Tuple[GridCell, ...]:
        """The N·N cells of one quad, row-major by (x, y)."""
        if not 0 <= quad < N_QUADS:
            raise IndexError(f"Quad id must be in [0, {N_QUADS - 1}], got {quad}")
        start = 1 + quad * self._n * self._n
        return self._cells[start:start + self._n * self._n]

    # =========================================================================
    # Accessors
    # =========================================================================

    def _check_index(self, index) -> int:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise TypeError(f"Cell index must be an integer, got {type(index).__name__}")
        if not 0 <= index < len(self._cells):
            raise IndexError(f"Cell index {index} out of range for N={self._n} (size {len(self._cells)})")
        return int(index)

    def cell_lat_lon(self, index: int) -> Tuple[float, float]:
        return self._cells[self._check_index(index)].lat_lon

    def cell_area(self, index: int) -> float:
        """Area in steradians (multiply by R² for a sphere of radius R)."""
        return self._cells[self._check_index(index)].area

    def cell_outline(self, index: int, radius: float = 1.0) -> np.ndarray:
        """Closed boundary loop (first vertex repeated) scaled to `radius`."""
        loop = self._cells[self._check_index(index)].vertices
        return radius * np.vstack([loop, loop[:1]])

    def cell_information(self, radius: float = 1.0) -> np.ndarray:
        """(M, 3) [lat, lon, area] with area scaled by radius²."""
        return np.column_stack([self._lat_lon, self._areas * radius ** 2])

    def nearest_cell(self, lat, lon):
        """
        Index of the cell whose centre is nearest to (lat, lon) in degrees.

        Scalar input gives an int, array input an int array of the same shape.
        """
        points = lat_lon_to_vectors(lat, lon)
        _, index = self._tree.query(points)
        if np.ndim(index) == 0:
            return int(index)
        return np.asarray(index, dtype=np.int64)

    def describe(self) -> Dict:
        """Summary of size, pentagons, area statistics and diagnostics."""
        areas = self._areas
        return {
            'n': self._n,
            'size': len(self._cells),
            'n_pentagons': sum(1 for c in self._cells if c.is_pentagon),
            'area_sum': float(areas.sum()),
            'area_rel_error': float(abs(areas.sum() - SPHERE_AREA) / SPHERE_AREA),
            'area_min': float(areas.min()),
            'area_max': float(areas.max()),
            'area_mean': float(areas.mean()),
            'area_ratio': float(areas.max() / areas.min()),
            'diagnostics': self._diagnostics.summary(),
        }


def build_grid(n) -> Grid:
    """
    Build the grid of resolution N: 10·N² + 2 cells.

    Raises:
        TypeError: n is not an integer (bool and float included)
        ValueError: n < 1
    """
    n = validate_resolution(n)
    logger.debug("Building ISEA grid N=%d (%d cells)", n, cell_count(n))
    return Grid(n)
