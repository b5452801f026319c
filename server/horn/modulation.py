"""
Dual angular modulation of the cross-section radius.

Diagonal pattern:  base + amp * |sin(freq * theta)|^exp   (peaks off-axis)
Cardinal pattern:  base + amp * |cos(freq * theta)|^exp   (peaks on the axes)

Each enabled pattern is divided by its own mean over one revolution so the
mean cross-sectional scale stays at 1.0 once modulation is fully engaged.
Both share one blend window running from throat to mouth.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

import numpy as np

from .blending import clamp, powered_smoothstep
from .defaults import DEFAULT_MOD_SAMPLES, MODULATION_FLOOR
from .values import ModulationBlendParams, ModulationParams, ModulationPrep, XModParams


def _scalar_or_array(value, theta):
    if np.ndim(theta) == 0:
        return float(value)
    return value


def mod_raw_diagonal(theta, params: ModulationParams):
    raw = params.base + params.amp * np.abs(np.sin(params.freq * np.asarray(theta))) ** params.exp
    return _scalar_or_array(raw, theta)


def mod_raw_cardinal(theta, params: ModulationParams):
    raw = params.base + params.amp * np.abs(np.cos(params.freq * np.asarray(theta))) ** params.exp
    return _scalar_or_array(raw, theta)


def _revolution_angles(num_samples: int) -> np.ndarray:
    return 2.0 * math.pi * np.arange(num_samples) / num_samples


def mean_over_revolution(pattern, params: ModulationParams, num_samples: int = DEFAULT_MOD_SAMPLES) -> float:
    """Numerical mean of a raw pattern; 1.0 for a disabled pattern."""
    if not params.enabled:
        return 1.0
    return float(np.mean(pattern(_revolution_angles(int(num_samples)), params)))


def prep_mod_params(
    diagonal: ModulationParams,
    cardinal: ModulationParams,
    num_samples: int = DEFAULT_MOD_SAMPLES,
) -> ModulationPrep:
    """Attach the per-pattern normalization averages. Recomputed on every call."""
    return ModulationPrep(
        diagonal=diagonal,
        cardinal=cardinal,
        avg_diagonal=mean_over_revolution(mod_raw_diagonal, diagonal, num_samples),
        avg_cardinal=mean_over_revolution(mod_raw_cardinal, cardinal, num_samples),
    )


def combined_modulation(
    theta,
    t: float,
    prep: ModulationPrep,
    mod_blend: ModulationBlendParams,
):
    """Radial multiplier at (theta, t), centred on 1.0 and floored at 0.1.

    ``theta`` may be a scalar or an array of angles.
    """
    mf = powered_smoothstep(t, mod_blend.mod_start, mod_blend.mod_end, mod_blend.mod_pow)
    multiplier = np.ones_like(np.asarray(theta, dtype=float))

    if prep.diagonal.enabled and prep.avg_diagonal > 0:
        multiplier = multiplier + mf * (mod_raw_diagonal(theta, prep.diagonal) / prep.avg_diagonal - 1.0)
    if prep.cardinal.enabled and prep.avg_cardinal > 0:
        multiplier = multiplier + mf * (mod_raw_cardinal(theta, prep.cardinal) / prep.avg_cardinal - 1.0)

    return _scalar_or_array(np.maximum(multiplier, MODULATION_FLOOR), theta)


def x_mod_raw(theta, params: XModParams):
    raw = params.base + params.amp * np.abs(np.sin(params.freq * np.asarray(theta))) ** params.exp
    return _scalar_or_array(raw, theta)


def x_modulation(theta, blend_t: float, params: XModParams):
    """Single-pattern diagonal modulation from the first designer release.

    Normalizes by ``base + 0.5 * amp``, an approximation of the true mean of
    |sin|^exp, so area is only roughly preserved for exp far from 1. No floor.
    """
    if not params.enabled:
        return _scalar_or_array(np.ones_like(np.asarray(theta, dtype=float)), theta)

    if params.blend_start >= 1.0:
        ramp = 1.0 if blend_t >= 1.0 else 0.0
    else:
        ramp = clamp((blend_t - params.blend_start) / (1.0 - params.blend_start), 0.0, 1.0)
    blend = ramp ** params.blend_pow

    avg_raw = params.base + params.amp * 0.5
    raw = params.base + params.amp * np.abs(np.sin(params.freq * np.asarray(theta))) ** params.exp
    return _scalar_or_array(1.0 + blend * (raw / avg_raw - 1.0), theta)


def modulation_preview(
    diagonal: ModulationParams,
    cardinal: ModulationParams,
    num_points: int = DEFAULT_MOD_SAMPLES,
) -> Dict[str, Any]:
    """Polar (r, theta) samples of each raw pattern and of the full-strength combination."""
    prep = prep_mod_params(diagonal, cardinal, num_points)
    theta = 2.0 * math.pi * np.arange(num_points + 1) / num_points
    full_blend = ModulationBlendParams(mod_start=0.0, mod_end=0.0, mod_pow=1.0)

    def polar(values) -> List[Tuple[float, float]]:
        return [(float(r), float(th)) for r, th in zip(values, theta)]

    return {
        "diagonal": polar(mod_raw_diagonal(theta, diagonal)) if diagonal.enabled else [],
        "cardinal": polar(mod_raw_cardinal(theta, cardinal)) if cardinal.enabled else [],
        "combined": polar(combined_modulation(theta, 1.0, prep, full_blend)),
        "avg_diagonal": prep.avg_diagonal,
        "avg_cardinal": prep.avg_cardinal,
    }
