"""
Pytest Configuration for isea_grid
==================================

Makes the in-tree package importable from a plain checkout (no pip install)
and provides the fixtures shared by every test module:

    ico   - the icosahedron dict from build_icosahedron(), built once per
            session. Tests that need a tampered copy take dict(ico) first.

Usage:
    pytest                  (from the repository root, see pyproject.toml)
    cd src && pytest tests/core -v
"""

import sys
from pathlib import Path

import pytest

SRC_ROOT = Path(__file__).resolve().parent

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from isea_grid.geometry.icosahedron import build_icosahedron  # noqa: E402


@pytest.fixture(scope="session")
def ico():
    return build_icosahedron()
