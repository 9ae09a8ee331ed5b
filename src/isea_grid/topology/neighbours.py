"""
Neighbour Topology
==================

Pure function  coord → ordered neighbour coords,  counter-clockwise seen
from outside the sphere. No grid object, no geometry: adjacency follows
from integer lattice arithmetic alone.

QUAD LATTICE:
    Cell (q, N, x, y) sits at lattice point (X, Y) = (x + 1, y) of quad q's
    rhombus A(0,0) C(N,0) B(0,N) G(N,N). A quad OWNS X ∈ 1..N, Y ∈ 0..N−1:
    its A-C edge (Y = 0) and C-G edge (X = N), not A-B or B-G.

    Quad corners on the icosahedron:
        upper q = i      A = north pole   B = u_i     C = u_i+1   G = l_i
        lower q = 5+i    A = u_i+1        B = l_i     C = l_i+1   G = south pole

SEAMS (lattice point of quad q ≡ lattice point of its neighbour):
    upper i,   A-B edge (0, Y)  ≡ upper i−1   (Y, 0)
    upper i,   B-G edge (X, N)  ≡ lower 5+i−1 (X, 0)
    lower 5+i, A-B edge (0, Y)  ≡ upper i     (N, Y)
    lower 5+i, B-G edge (X, N)  ≡ lower 5+i−1 (N, X)

STITCHING (lattice offsets that step outside the rhombus):
    upper i,   Y < 0  → upper i+1    (−Y, X + Y)        60° turn about the pole
    lower 5+i, Y < 0  → upper i+1    (X, Y + N)         straight across
    upper i,   X > N  → lower 5+i    (X − N, Y)         straight across
    lower 5+i, X > N  → lower 5+i+1  (X + Y − N, 2N − X) 60° turn about the pole

CASES:
    interior   0 < x < N−1, 0 < y < N−1   6 same-quad offsets
    edge       on a quad boundary        6, some stitched into a neighbour quad
    corner     x, y ∈ {0, N−1}           6, spanning up to 3 quads (+ a pole)
    pentagon   x = N−1, y = 0            5, offset (+1, −1) collapses at the
                                            icosahedron vertex
    pole       north: (0,0) of quads 0..4; south: (N−1,N−1) of quads 9..5
"""

import numpy as np
from typing import List, Tuple

from ..spec.constants import (
    N_QUADS,
    N_RING,
    NORTH_POLE,
    SOUTH_POLE,
    MAX_NEIGHBOURS,
    HEX_OFFSETS,
    PENTAGON_COLLAPSED_OFFSET,
    KIND_POLE,
    KIND_PENTAGON,
    KIND_CORNER,
    KIND_EDGE,
    KIND_INTERIOR,
)
from ..spec.structures import (
    QuadCoord,
    PoleCoord,
    CellCoord,
    validate_coord,
    validate_resolution,
    cell_count,
    coord_from_index,
    flat_index,
    is_pentagon_coord,
)


def classify(coord: CellCoord) -> str:
    """Structural case of a cell: pole, pentagon, corner, edge or interior."""
    validate_coord(coord)
    if isinstance(coord, PoleCoord):
        return KIND_POLE
    if is_pentagon_coord(coord):
        return KIND_PENTAGON
    _, n, x, y = coord
    if 0 < x < n - 1 and 0 < y < n - 1:
        return KIND_INTERIOR
    if x in (0, n - 1) and y in (0, n - 1):
        return KIND_CORNER
    return KIND_EDGE


def _resolve(quad: int, X: int, Y: int, n: int) -> CellCoord:
    """Owner of lattice point (X, Y) of quad's closed rhombus, 0 ≤ X, Y ≤ N."""
    if quad < N_RING:
        if X == 0:
            if Y == 0:
                return PoleCoord(NORTH_POLE, n)
            return _resolve((quad + N_RING - 1) % N_RING, Y, 0, n)
        if Y == n:
            return _resolve(N_RING + (quad + N_RING - 1) % N_RING, X, 0, n)
        return QuadCoord(quad, n, X - 1, Y)

    i = quad - N_RING
    if X == 0:
        return _resolve(i, n, Y, n)
    if Y == n:
        if X == n:
            return PoleCoord(SOUTH_POLE, n)
        return _resolve(N_RING + (i + N_RING - 1) % N_RING, n, X, n)
    return QuadCoord(quad, n, X - 1, Y)


def _stitch(quad: int, X: int, Y: int, n: int) -> Tuple[int, int, int]:
    """Carry a lattice point one step outside quad's rhombus into the neighbour quad."""
    if Y < 0:
        if quad < N_RING:
            return (quad + 1) % N_RING, -Y, X + Y
        return (quad - N_RING + 1) % N_RING, X, Y + n
    if X > n:
        if quad < N_RING:
            return quad + N_RING, X - n, Y
        return N_RING + (quad - N_RING + 1) % N_RING, X + Y - n, 2 * n - X
    return quad, X, Y


def _pole_neighbours(coord: PoleCoord) -> List[CellCoord]:
    n = coord.n
    if coord.pole == NORTH_POLE:
        return [QuadCoord(q, n, 0, 0) for q in range(N_RING)]
    return [QuadCoord(q, n, n - 1, n - 1) for q in range(N_QUADS - 1, N_RING - 1, -1)]


def neighbours(coord: CellCoord) -> List[CellCoord]:
    """
    Ordered neighbours of a cell, counter-clockwise seen from outside.

    Returns 5 coords for the 12 pentagons (poles and x = N−1, y = 0 cells)
    and 6 for every other cell.

    Raises:
        ValueError: coord does not name a cell
    """
    validate_coord(coord)
    if isinstance(coord, PoleCoord):
        return _pole_neighbours(coord)

    quad, n, x, y = coord
    if 0 < x < n - 1 and 0 < y < n - 1:
        return [QuadCoord(quad, n, x + dx, y + dy) for dx, dy in HEX_OFFSETS]

    offsets = HEX_OFFSETS
    if is_pentagon_coord(coord):
        offsets = [o for o in HEX_OFFSETS if o != PENTAGON_COLLAPSED_OFFSET]

    X, Y = x + 1, y
    return [_resolve(*_stitch(quad, X + dx, Y + dy, n), n) for dx, dy in offsets]


def neighbour_indices(index: int, n: int) -> List[int]:
    """Canonical flat indices of the neighbours of cell `index`."""
    return [flat_index(c) for c in neighbours(coord_from_index(index, n))]


def neighbour_table(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Neighbour indices of every cell in canonical order.

    Returns:
        table  : (10·N² + 2, 6) int, padded with −1 for pentagons
        counts : (10·N² + 2,) int, 5 or 6
    """
    n = validate_resolution(n)
    size = cell_count(n)
    table = np.full((size, MAX_NEIGHBOURS), -1, dtype=np.int64)
    counts = np.zeros(size, dtype=np.int64)
    for index in range(size):
        row = neighbour_indices(index, n)
        table[index, :len(row)] = row
        counts[index] = len(row)
    return table, counts
