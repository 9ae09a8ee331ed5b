"""
Geometry layer - vectors, icosahedron, ISEA projection, cell polygons.

Depends only on spec/.
"""

from .vector import dot, cross, norm, normalize, clamp, frozen
from .icosahedron import (
    ICOSAHEDRON_FACES,
    ICOSAHEDRON_QUADS,
    build_icosahedron,
    face_frame,
    icosahedron_edges,
    validate_icosahedron,
)
from .projection import forward, inverse, face_overshoot, polar_coordinates
from .cell_geometry import (
    circumcenter,
    spherical_triangle_area,
    fan_triangulate,
    polygon_area,
    winding,
    build_cell_geometry,
)
