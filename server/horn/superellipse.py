"""
Superellipse (Lame curve) cross-sections.

    |x/hw|^n + |y/hh|^n = 1

n = 2 is an ellipse; larger n approaches a rectangle. Stations along the horn
blend from the circular throat to the guide-curve extents and from n = 2 to
the mouth exponent through the shared smoothstep window.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .blending import clamp, smooth_lerp
from .rosse import lookup_x, lookup_y
from .values import ProfileCurve, ShapeBlendParams


@dataclass(frozen=True)
class CrossSection:
    t: float
    x_h: float
    y_h: float
    y_v: float
    n: float


def slice_angles(slices: int) -> np.ndarray:
    """``slices + 1`` angles covering [0, 2*pi]; the last one is the seam copy."""
    return 2.0 * math.pi * np.arange(slices + 1) / slices


def superellipse_xy(hw: float, hh: float, n: float, theta) -> Tuple[np.ndarray, np.ndarray]:
    c = np.cos(theta)
    s = np.sin(theta)
    e = 2.0 / n
    x = hw * np.sign(c) * np.abs(c) ** e
    y = hh * np.sign(s) * np.abs(s) ** e
    return x, y


def superellipse_points(hw: float, hh: float, n: float, num_pts: int = 72) -> List[Tuple[float, float]]:
    """Closed outline of ``num_pts + 1`` points, first and last coincident."""
    x, y = superellipse_xy(hw, hh, n, slice_angles(num_pts))
    x[-1], y[-1] = x[0], y[0]
    return [(float(px), float(py)) for px, py in zip(x, y)]


def compute_superellipse_n(t: float, n_mouth: float, trans_start: float, shape_pow: float) -> float:
    """Linear-window exponent schedule (2 at the throat, n_mouth at t = 1).

    Kept for designs authored before the smoothstep window existed; it has a
    slope discontinuity at ``trans_start``.
    """
    if trans_start >= 1.0:
        return 2.0 if t < 1.0 else float(n_mouth)
    blend = clamp((t - trans_start) / (1.0 - trans_start), 0.0, 1.0)
    return 2.0 + (n_mouth - 2.0) * blend ** shape_pow


def cross_section_at(
    t: float,
    h_curve: ProfileCurve,
    v_curve: ProfileCurve,
    shape_blend: ShapeBlendParams,
) -> CrossSection:
    """Half extents, exponent and axial position of the station at t."""
    r0 = float(h_curve.y[0])
    start, end, power = shape_blend.shape_start, shape_blend.shape_end, shape_blend.shape_pow

    y_h = smooth_lerp(r0, lookup_y(h_curve, t), t, start, end, power)
    y_v = smooth_lerp(r0, lookup_y(v_curve, t), t, start, end, power)
    n = smooth_lerp(2.0, shape_blend.n_mouth, t, start, end, power)
    return CrossSection(t=t, x_h=lookup_x(h_curve, t), y_h=y_h, y_v=y_v, n=n)
