"""
Icosahedral Snyder Equal-Area (ISEA) Projection
===============================================

Maps a point on the unit sphere to the plane of one icosahedron face and
back, preserving area. Reference: J. P. Snyder, "An Equal-Area Map
Projection for Polyhedral Globes", Cartographica 29(1), 1992.

CONVENTIONS:
    frame = {'n', 'u', 'v'}  (see geometry/icosahedron.py::face_frame)
    Azimuth Az is measured in the tangent plane from +v towards +u, so the
    tangent direction is  t = u·sin(Az) + v·cos(Az).
    Planar output is  (x, y) = ρ·(sin Az', cos Az').

FORWARD  P → (x, y):
    z   = acos(n·P)                       polar angle from face centre
    Az  folded into one 120° sector, index k
    q   = atan2(tan g, cos Az + sin Az·cot θ)       distance to face edge
    H   = acos(sin Az·sin G·cos g − cos Az·cos G)
    AG  = Az + G + H − π                  area of the spherical sub-triangle
    Az' = atan2(2AG, R'²tan²g − 2AG·cot θ)
    d'  = R'·tan g / (cos Az' + sin Az'·cot θ)
    f   = d' / (2R'·sin(q/2))
    ρ   = 2R'·f·sin(z/2)

INVERSE  (x, y) → P:
    ρ, Az' (folded) from (x, y)
    AG  = R'²tan²g·sin Az' / (2(cos Az' + cot θ·sin Az'))
    Az  solves F(Az) = π + AG − G − H(Az) − Az = 0  (Newton-Raphson, no
        closed form), seeded at Az'
    z   = 2·asin(ρ / (2R'·f))

All functions are vectorised over leading axes of their inputs.
"""

import logging

import numpy as np

from .vector import normalize, clamp
from ..spec.constants import (
    HALF_APEX_ANGLE,
    FACE_ANGLE,
    SMALL_CIRCLE_ANGLE,
    RP_OVER_R,
    SECTOR,
    NEWTON_MAX_ITER,
    NEWTON_TOL,
    PROJECTION_EPS,
)
from ..spec.diagnostics import OVERSHOOT_G, OVERSHOOT_Q

logger = logging.getLogger(__name__)

_g = HALF_APEX_ANGLE
_G = FACE_ANGLE
_th = SMALL_CIRCLE_ANGLE

_TAN_g = np.tan(_g)
_TAN2_g = _TAN_g ** 2
_COS_g = np.cos(_g)
_SIN_G = np.sin(_G)
_COS_G = np.cos(_G)
_COT_th = 1.0 / np.tan(_th)
_RP = RP_OVER_R
_RP2 = RP_OVER_R ** 2


def _col(a):
    """Append a unit axis so per-point scalars broadcast against (..., 3)."""
    return np.expand_dims(np.asarray(a, dtype=float), -1)


def _azimuth_from_apex(x, y):
    """Azimuth in [0, 2π] of the direction x·u + y·v, measured from +v."""
    return np.pi - np.arctan2(x, -np.asarray(y, dtype=float))


def fold_azimuth(az):
    """
    Fold an azimuth into one 120° sector.

    Returns:
        (k, az_folded) with az = az_folded + k·SECTOR, az_folded in [0, SECTOR]
        (a value exactly on a sector boundary stays in the lower sector)
    """
    az = np.asarray(az, dtype=float)
    k = np.maximum(np.ceil(az / SECTOR) - 1.0, 0.0)
    return k, az - k * SECTOR


def q_of_az(az):
    """Spherical distance from face centre to the face edge along `az`."""
    return np.arctan2(_TAN_g, np.cos(az) + np.sin(az) * _COT_th)


def _h_of_az(cos_az, sin_az):
    return np.arccos(clamp(sin_az * _SIN_G * _COS_g - cos_az * _COS_G))


def _dp_of_azp(azp):
    return (_RP * _TAN_g) / (np.cos(azp) + np.sin(azp) * _COT_th)


def polar_coordinates(points, frame):
    """
    Face-centred polar coordinates of sphere points.

    Returns:
        (z, az): polar angle from the face normal and unfolded azimuth in
        [0, 2π]. A point on the normal gets az = 0.
    """
    P = np.asarray(points, dtype=float)
    n, u, v = frame['n'], frame['u'], frame['v']
    cos_z = clamp(P @ n)
    z = np.arccos(cos_z)
    t = normalize(P - _col(cos_z) * n)
    az = _azimuth_from_apex(t @ u, t @ v)
    return z, az


def face_overshoot(points, frame):
    """
    How far points lie outside the face, in radians.

    Returns:
        (excess_g, excess_q): z - g and z - q(Az); positive means outside.
    """
    z, az = polar_coordinates(points, frame)
    _, az = fold_azimuth(az)
    return z - _g, z - q_of_az(az)


def forward(points, frame, diagnostics=None):
    """
    Project unit vectors onto the plane of the face described by `frame`.

    Defined for points inside the face (z <= g and z <= q(Az)). Points
    outside are not rejected: the extrapolated value is returned and the
    excess is recorded on `diagnostics`. Without a diagnostics report the
    overshoot is logged as a warning instead.

    Args:
        points: (..., 3) unit vectors
        frame: face frame dict {'n', 'u', 'v'}
        diagnostics: optional ProjectionDiagnostics

    Returns:
        (..., 2) planar coordinates
    """
    z, az = polar_coordinates(points, frame)
    k, az = fold_azimuth(az)
    q = q_of_az(az)

    if diagnostics is not None:
        n_g = diagnostics.record_overshoot(OVERSHOOT_G, z - _g)
        n_q = diagnostics.record_overshoot(OVERSHOOT_Q, z - q)
        if n_g or n_q:
            logger.debug(
                "forward: %d point(s) past g, %d past q(Az); max z - g = %.3e rad",
                n_g, n_q, float(np.max(z - _g)),
            )
    else:
        excess = np.maximum(z - _g, z - q)
        n_out = int(np.count_nonzero(excess > PROJECTION_EPS))
        if n_out:
            logger.warning(
                "forward: %d point(s) outside the face, max excess %.3e rad (%.3e deg)",
                n_out, float(np.max(excess)), float(np.rad2deg(np.max(excess))),
            )

    h = _h_of_az(np.cos(az), np.sin(az))
    ag = az + _G + h - np.pi
    azp = np.arctan2(2.0 * ag, _RP2 * _TAN2_g - 2.0 * ag * _COT_th)
    f = _dp_of_azp(azp) / (2.0 * _RP * np.sin(q / 2.0))
    rho = 2.0 * _RP * f * np.sin(z / 2.0)

    azp = azp + k * SECTOR
    return np.stack([rho * np.sin(azp), rho * np.cos(azp)], axis=-1)


def solve_azimuth(azp, ag):
    """
    Newton-Raphson for Az given the transformed azimuth Az' and area AG.

        F(Az)  = π + AG − G − H(Az) − Az
        F'(Az) = (cos Az·sin G·cos g + sin Az·cos G) / sin H − 1

    Seeded at Az', at most NEWTON_MAX_ITER steps; an element stops once its
    step is below NEWTON_TOL. Elements still moving at the cap keep their
    last estimate.

    Returns:
        (az, n_capped)
    """
    az = np.array(azp, dtype=float)
    active = np.ones(az.shape, dtype=bool)
    for _ in range(NEWTON_MAX_ITER):
        cos_az, sin_az = np.cos(az), np.sin(az)
        h = _h_of_az(cos_az, sin_az)
        resid = np.pi + ag - _G - h - az
        with np.errstate(divide='ignore', invalid='ignore'):
            deriv = (cos_az * _SIN_G * _COS_g + sin_az * _COS_G) / np.sin(h) - 1.0
            step = np.where(active, -resid / deriv, 0.0)
        az = az + step
        active = active & (np.abs(step) >= NEWTON_TOL)
        if not active.any():
            break
    return az, int(np.count_nonzero(active))


def inverse(xy, frame, diagnostics=None):
    """
    Map planar face coordinates back to unit vectors.

    Args:
        xy: (..., 2) planar coordinates
        frame: face frame dict {'n', 'u', 'v'}
        diagnostics: optional ProjectionDiagnostics (Newton cap-outs counted)

    Returns:
        (..., 3) unit vectors
    """
    xy = np.asarray(xy, dtype=float)
    x, y = xy[..., 0], xy[..., 1]
    n, u, v = frame['n'], frame['u'], frame['v']

    rho = np.hypot(x, y)
    k, azp = fold_azimuth(_azimuth_from_apex(x, y))

    cos_azp, sin_azp = np.cos(azp), np.sin(azp)
    ag = (_RP2 * _TAN2_g * sin_azp) / (2.0 * (cos_azp + _COT_th * sin_azp))

    az, n_capped = solve_azimuth(azp, ag)
    if diagnostics is not None and n_capped:
        diagnostics.record_newton_capped(n_capped)

    f = _dp_of_azp(azp) / (2.0 * _RP * np.sin(q_of_az(az) / 2.0))
    z = 2.0 * np.arcsin(clamp(rho / (2.0 * _RP * f)))

    az = az + k * SECTOR
    t = normalize(_col(np.sin(az)) * u + _col(np.cos(az)) * v)
    return normalize(_col(np.cos(z)) * n + _col(np.sin(z)) * t)
