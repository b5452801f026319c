"""
R-OSSE guide curve solver.

Closed-form parametric profile x(t), y(t) for t in [0, 1] following
M. Batik, "R-OSSE Acoustic Waveguide" (2022). One curve is solved per axis;
later stages only read it through nearest-sample lookups.
"""

from __future__ import annotations

import logging
import math
from typing import Union

import numpy as np

from .contract import (
    INVALID_SAMPLE_COUNT,
    UNSOLVABLE_PROFILE,
    GeometryFailure,
    geometry_failure,
)
from .defaults import DEFAULT_PROFILE_SAMPLES
from .values import ProfileCurve, ProfileParams, frozen_array

logger = logging.getLogger(__name__)


def rosse_coefficients(params: ProfileParams):
    """Return (c1, c2, c3, discriminant) for a guide curve."""
    a0_rad = math.radians(params.a0_deg)
    a_rad = math.radians(params.a_deg)
    r0, k = params.r0, params.k

    c1 = (k * r0) ** 2
    c2 = 2.0 * k * r0 * math.tan(a0_rad)
    c3 = math.tan(a_rad) ** 2
    target = params.R + r0 * (k - 1.0)
    discriminant = c2 ** 2 - 4.0 * c3 * (c1 - target ** 2)
    return c1, c2, c3, discriminant


def compute_rosse(
    params: ProfileParams,
    num_points: int = DEFAULT_PROFILE_SAMPLES,
) -> Union[ProfileCurve, GeometryFailure]:
    """Sample an R-OSSE profile at ``num_points + 1`` evenly spaced t values.

    Returns a GeometryFailure (never NaN geometry) when the throat/coverage/
    expansion combination has no real solution.
    """
    if int(num_points) < 2:
        return geometry_failure(
            INVALID_SAMPLE_COUNT,
            "profile",
            f"Profile sample count must be at least 2, got {num_points}.",
        )
    num_points = int(num_points)

    c1, c2, c3, discriminant = rosse_coefficients(params)
    if discriminant < 0 or c3 <= 0:
        logger.warning(
            "[Profile] No real solution: R=%.2f a=%.2f r0=%.2f a0=%.2f k=%.3f (disc=%.4g)",
            params.R, params.a_deg, params.r0, params.a0_deg, params.k, discriminant,
        )
        return geometry_failure(
            UNSOLVABLE_PROFILE,
            "profile",
            "No real solution for these throat/coverage/expansion parameters: "
            f"R={params.R:g}, a={params.a_deg:g}, r0={params.r0:g}, "
            f"a0={params.a0_deg:g}, k={params.k:g}.",
        )
    L = (math.sqrt(discriminant) - c2) / (2.0 * c3)

    rho, m, b, q = params.rho, params.m, params.b, params.q
    r0, k, R = params.r0, params.k, params.R
    t = np.linspace(0.0, 1.0, num_points + 1)

    sqrt_rho_m = math.sqrt(rho ** 2 + m ** 2)
    bend = b * L * (math.sqrt(rho ** 2 + (1.0 - m) ** 2) - sqrt_rho_m)
    x = L * (sqrt_rho_m - np.sqrt(rho ** 2 + (t - m) ** 2)) + bend * t ** 2

    tq = t ** q
    y_throat = np.sqrt(c1 + c2 * L * t + c3 * L ** 2 * t ** 2) + r0 * (1.0 - k)
    y_mouth = R + L * (1.0 - np.sqrt(1.0 + c3 * (t - 1.0) ** 2))
    y = (1.0 - tq) * y_throat + tq * y_mouth

    logger.debug("[Profile] Solved R-OSSE curve: L=%.3f mm, %d samples", L, num_points + 1)
    return ProfileCurve(
        t=frozen_array(t),
        x=frozen_array(x),
        y=frozen_array(y),
        length=L,
        c1=c1,
        c2=c2,
        c3=c3,
    )


def _nearest_index(curve: ProfileCurve, t: float) -> int:
    last = len(curve.t) - 1
    return max(0, min(int(math.floor(t * last + 0.5)), last))


def lookup_x(curve: ProfileCurve, t: float) -> float:
    """Axial position at t, nearest sample (no interpolation)."""
    return float(curve.x[_nearest_index(curve, t)])


def lookup_y(curve: ProfileCurve, t: float) -> float:
    """Radial distance at t, nearest sample (no interpolation)."""
    return float(curve.y[_nearest_index(curve, t)])
