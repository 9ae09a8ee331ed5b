"""
Spec Layer, Diagnostics, Logging and Seam Sweep Tests
=====================================================

Run: python -m pytest tests/core/test_spec.py -v
"""

import logging
from dataclasses import FrozenInstanceError

import pytest
import numpy as np

from isea_grid.spec.structures import (
    QuadCoord,
    PoleCoord,
    cell_id,
    is_edge_coord,
    is_pentagon_coord,
    coord_from_index,
)
from isea_grid.spec.diagnostics import ProjectionDiagnostics, OvershootEvent, OVERSHOOT_G, OVERSHOOT_Q
from isea_grid.spec.constants import PROJECTION_EPS, SEAM_OVERSHOOT_TOL, RP_OVER_R
from isea_grid.analysis.seam_sweep import seam_overshoot, sweep_seam_overshoot
from isea_grid.logging_config import setup_logging, PACKAGE_LOGGER


# =============================================================================
# Coordinates
# =============================================================================

class TestCoordinates:

    def test_cell_ids(self):
        assert cell_id(QuadCoord(3, 8, 0, 7)) == "3-8-0-7"
        assert cell_id(PoleCoord("NP", 8)) == "NP-8-0-0"
        assert cell_id(PoleCoord("SP", 8)) == "SP-8-0-0"

    def test_coords_hashable_and_immutable(self):
        a = QuadCoord(1, 4, 2, 3)
        assert {a: 1}[QuadCoord(1, 4, 2, 3)] == 1
        with pytest.raises(AttributeError):
            a.x = 0

    def test_index_layout(self):
        n = 2
        assert coord_from_index(0, n) == PoleCoord("NP", n)
        assert coord_from_index(1, n) == QuadCoord(0, n, 0, 0)
        assert coord_from_index(2, n) == QuadCoord(0, n, 0, 1)
        assert coord_from_index(3, n) == QuadCoord(0, n, 1, 0)
        assert coord_from_index(5, n) == QuadCoord(1, n, 0, 0)
        assert coord_from_index(41, n) == PoleCoord("SP", n)

    @pytest.mark.parametrize("coord, expected", [
        (QuadCoord(0, 5, 2, 1), False),
        (QuadCoord(0, 5, 0, 2), True),
        (QuadCoord(0, 5, 2, 0), True),
        (QuadCoord(0, 5, 4, 2), True),
        (QuadCoord(0, 5, 1, 3), True),
        (PoleCoord("SP", 5), True),
    ])
    def test_edge_flag(self, coord, expected):
        assert is_edge_coord(coord) == expected

    def test_pentagon_flag(self):
        assert is_pentagon_coord(QuadCoord(4, 5, 4, 0))
        assert not is_pentagon_coord(QuadCoord(4, 5, 0, 4))
        assert is_pentagon_coord(PoleCoord("NP", 5))


def test_snyder_radius_ratio():
    """R'/R for the icosahedron (Snyder 1992, Table 1)."""
    assert RP_OVER_R == pytest.approx(0.9103832815, abs=1e-7)


# =============================================================================
# Diagnostics
# =============================================================================

class TestDiagnostics:

    def test_noise_below_eps_not_recorded(self):
        d = ProjectionDiagnostics()
        count = d.record_overshoot(OVERSHOOT_G, np.array([-1.0, 0.0, PROJECTION_EPS / 2]))
        assert count == 0
        assert d.is_clean

    def test_significant_filters_by_tolerance(self):
        d = ProjectionDiagnostics()
        d.record_overshoot(OVERSHOOT_Q, np.array([1e-8, 2e-3]))
        assert d.n_overshoots == 2
        assert d.max_overshoot == pytest.approx(2e-3)
        assert [e.amount for e in d.significant()] == [pytest.approx(2e-3)]
        assert d.significant()[0].degrees == pytest.approx(np.rad2deg(2e-3))
        assert not d.is_clean

    def test_counters_and_summary(self):
        d = ProjectionDiagnostics()
        d.record_newton_capped(3)
        d.record_degenerate(2)
        summary = d.summary()
        assert summary['newton_capped'] == 3
        assert summary['degenerate_circumcenters'] == 2
        assert summary['n_overshoots'] == 0
        assert summary['max_overshoot_rad'] == 0.0

    def test_freeze_keeps_events(self):
        d = ProjectionDiagnostics()
        d.record_overshoot(OVERSHOOT_G, [3e-3])
        assert d.freeze() is d
        assert d.overshoots == (OvershootEvent(OVERSHOOT_G, 3e-3),)
        with pytest.raises(FrozenInstanceError):
            d.record_degenerate(1)
        assert d.summary()['n_significant'] == 1


# =============================================================================
# Seam sweep
# =============================================================================

@pytest.mark.parametrize("n", [1, 2, 5])
def test_seam_overshoot_within_tolerance(n):
    result = seam_overshoot(n)
    assert result['n_cells'] == 10 * n * n
    assert result['n_above_tol'] == 0
    assert result['max_seam_overshoot_rad'] <= SEAM_OVERSHOOT_TOL
    assert result['round_trip_ok']
    assert result['construction']['n_significant'] == 0


def test_seam_cells_counted():
    result = seam_overshoot(4)
    # per quad: 16 cells, off-seam cells are (1,1), (1,3), (2,2), (2,3)
    assert result['n_seam_cells'] == 10 * (16 - 4)


def test_sweep_preserves_order():
    results = sweep_seam_overshoot((3, 1, 2))
    assert [r['n'] for r in results] == [3, 1, 2]


# =============================================================================
# Logging
# =============================================================================

@pytest.fixture
def package_logger():
    yield logging.getLogger(PACKAGE_LOGGER)
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def test_setup_logging_does_not_duplicate_handlers(package_logger):
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG)
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG


def test_setup_logging_file(package_logger, tmp_path):
    log_file = tmp_path / "grid.log"
    logger = setup_logging(logging.INFO, str(log_file))
    logger.info("hello from the grid")
    for handler in logger.handlers:
        handler.flush()
    assert len(logger.handlers) == 2
    assert "hello from the grid" in log_file.read_text(encoding='utf-8')
