"""
ISEA Projection Tests
=====================

Forward/inverse Snyder projection:
- round trip < ROUND_TRIP_TOL for 10,000 random in-face points per face
- face centre ↔ origin, vertices → equilateral triangle
- planar face area = spherical face area (4π/20)
- overshoot bookkeeping for points outside the face

Run: python -m pytest tests/core/test_projection.py -v
"""

import logging

import pytest
import numpy as np

from isea_grid.geometry.projection import (
    forward,
    inverse,
    fold_azimuth,
    face_overshoot,
    solve_azimuth,
    q_of_az,
)
from isea_grid.spec.constants import (
    ROUND_TRIP_TOL,
    HALF_APEX_ANGLE,
    SECTOR,
    SEAM_OVERSHOOT_TOL,
)
from isea_grid.spec.diagnostics import ProjectionDiagnostics


def random_face_points(ico, face, count, rng):
    """Uniform barycentric samples of the flat face, pushed onto the sphere."""
    V = ico['V'][list(ico['F'][face])]
    w = rng.dirichlet(np.ones(3), size=count)
    P = w @ V
    return P / np.linalg.norm(P, axis=1, keepdims=True)


def planar_triangle_area(p):
    (ax, ay), (bx, by), (cx, cy) = p
    return 0.5 * abs((bx - ax) * (cy - ay) - (cx - ax) * (by - ay))


# =============================================================================
# Round trip
# =============================================================================

@pytest.mark.parametrize("face", range(20))
def test_round_trip_random_points(ico, face):
    rng = np.random.default_rng(1000 + face)
    P = random_face_points(ico, face, 10_000, rng)
    frame = ico['frames'][face]

    back = inverse(forward(P, frame), frame)
    err = np.linalg.norm(back - P, axis=1)
    assert err.max() < ROUND_TRIP_TOL, f"face {face}: max round trip error {err.max():.3e}"


def test_inverse_returns_unit_vectors(ico):
    rng = np.random.default_rng(7)
    frame = ico['frames'][3]
    P = random_face_points(ico, 3, 500, rng)
    back = inverse(forward(P, frame), frame)
    assert np.allclose(np.linalg.norm(back, axis=1), 1.0)


def test_in_face_points_record_no_overshoot(ico):
    rng = np.random.default_rng(11)
    diagnostics = ProjectionDiagnostics()
    for face in range(20):
        P = random_face_points(ico, face, 1000, rng)
        forward(P, ico['frames'][face], diagnostics)
    assert diagnostics.significant() == []


# =============================================================================
# Special points
# =============================================================================

def test_face_centre_maps_to_origin(ico):
    for frame in ico['frames']:
        xy = forward(frame['n'], frame)
        assert np.allclose(xy, 0.0, atol=1e-6)


def test_origin_maps_to_face_centre(ico):
    for frame in ico['frames']:
        assert np.allclose(inverse(np.zeros(2), frame), frame['n'], atol=1e-9)


def test_vertices_form_equilateral_triangle(ico):
    frame = ico['frames'][0]
    xy = forward(ico['V'][list(ico['F'][0])], frame)
    sides = [np.linalg.norm(xy[i] - xy[(i + 1) % 3]) for i in range(3)]
    assert np.allclose(sides, sides[0], rtol=1e-6)
    # vertex a sits at azimuth 0, straight up the +y axis
    assert abs(xy[0, 0]) < 1e-9
    assert xy[0, 1] > 0


def test_planar_face_area_equals_spherical_face_area(ico):
    for face, frame in enumerate(ico['frames']):
        xy = forward(ico['V'][list(ico['F'][face])], frame)
        assert np.isclose(planar_triangle_area(xy), 4.0 * np.pi / 20.0, rtol=1e-6)


def test_vertex_round_trip(ico):
    for face, frame in enumerate(ico['frames']):
        V = ico['V'][list(ico['F'][face])]
        back = inverse(forward(V, frame), frame)
        assert np.allclose(back, V, atol=ROUND_TRIP_TOL)


# =============================================================================
# Helpers
# =============================================================================

class TestAzimuthHelpers:

    def test_fold_stays_in_sector(self):
        az = np.linspace(0.0, 2.0 * np.pi, 721)
        k, folded = fold_azimuth(az)
        assert np.all(folded >= 0.0)
        assert np.all(folded <= SECTOR + 1e-12)
        assert np.allclose(folded + k * SECTOR, az)

    def test_fold_boundary_stays_in_lower_sector(self):
        k, folded = fold_azimuth(SECTOR)
        assert k == 0
        assert np.isclose(folded, SECTOR)

    def test_q_is_g_at_vertices(self):
        assert np.isclose(q_of_az(0.0), HALF_APEX_ANGLE)
        assert np.isclose(q_of_az(SECTOR), HALF_APEX_ANGLE)
        assert q_of_az(SECTOR / 2.0) < HALF_APEX_ANGLE

    def test_newton_fixed_point_at_zero(self):
        az, capped = solve_azimuth(np.array([0.0]), np.array([0.0]))
        assert np.allclose(az, 0.0, atol=1e-12)
        assert capped == 0


# =============================================================================
# Overshoot bookkeeping
# =============================================================================

def test_point_outside_face_is_recorded_not_rejected(ico):
    frame = ico['frames'][0]
    # the opposite face's centre is far outside face 0
    outside = -frame['n'] + 0.3 * frame['v']
    outside /= np.linalg.norm(outside)
    diagnostics = ProjectionDiagnostics()

    xy = forward(outside[None, :], frame, diagnostics)

    assert np.all(np.isfinite(xy))
    assert diagnostics.n_overshoots >= 1
    assert diagnostics.max_overshoot > SEAM_OVERSHOOT_TOL
    assert len(diagnostics.significant()) >= 1


def test_point_outside_face_without_report_logs_warning(ico, caplog):
    frame = ico['frames'][0]
    south_pole = np.array([[0.0, -1.0, 0.0]])

    with caplog.at_level(logging.DEBUG, logger="isea_grid.geometry.projection"):
        xy = forward(south_pole, frame)

    assert np.all(np.isfinite(xy))
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "1 point(s) outside the face" in warnings[0].getMessage()


def test_point_inside_face_without_report_is_silent(ico, caplog):
    frame = ico['frames'][0]
    with caplog.at_level(logging.DEBUG, logger="isea_grid.geometry.projection"):
        forward(frame['n'][None, :], frame)
    assert caplog.records == []


def test_face_overshoot_sign(ico):
    frame = ico['frames'][0]
    inside = frame['n']
    excess_g, excess_q = face_overshoot(inside[None, :], frame)
    assert excess_g[0] < 0 and excess_q[0] < 0

    vertex = ico['V'][ico['F'][0][1]]
    excess_g, _ = face_overshoot(vertex[None, :], frame)
    assert abs(excess_g[0]) < 1e-8
