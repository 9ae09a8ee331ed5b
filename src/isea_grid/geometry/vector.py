"""
Vector helpers
==============

Stateless operations on numpy arrays of 3D (or planar 2D) vectors. All
functions broadcast over leading axes and return NEW arrays; nothing is
modified in place.
"""

import numpy as np

from ..spec.constants import EPS_ZERO


def dot(a, b):
    """Row-wise dot product over the last axis."""
    return np.sum(np.asarray(a, dtype=float) * np.asarray(b, dtype=float), axis=-1)


def cross(a, b):
    return np.cross(np.asarray(a, dtype=float), np.asarray(b, dtype=float))


def norm(a):
    return np.linalg.norm(np.asarray(a, dtype=float), axis=-1)


def normalize(a):
    """
    Unit vectors along the last axis.

    Zero-length vectors (norm < EPS_ZERO) come back as zero rather than NaN,
    e.g. the tangent direction of a point sitting exactly on a face normal.
    """
    a = np.asarray(a, dtype=float)
    length = np.linalg.norm(a, axis=-1, keepdims=True)
    safe = np.where(length < EPS_ZERO, 1.0, length)
    return np.where(length < EPS_ZERO, 0.0, a / safe)


def clamp(x, lo=-1.0, hi=1.0):
    return np.clip(x, lo, hi)


def frozen(a, dtype=float):
    """Read-only copy, for arrays stored on immutable objects."""
    out = np.array(a, dtype=dtype)
    out.flags.writeable = False
    return out
