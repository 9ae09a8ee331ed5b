"""
Topology layer - neighbour adjacency as a pure function of coordinates.

Depends only on spec/. No geometry.
"""

from .neighbours import (
    classify,
    neighbours,
    neighbour_indices,
    neighbour_table,
)
