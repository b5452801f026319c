"""
Engine-wide defaults.

Sample counts and mesh resolution mirror the values the horn designer ships
with; two of them can be overridden from the environment.
"""

import logging
import os

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = str(os.environ.get(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d.", name, raw, default)
        return default


DEFAULT_PROFILE_SAMPLES = _env_int("HORN_PROFILE_SAMPLES", 300)
DEFAULT_MOD_SAMPLES = 360
DEFAULT_RINGS = 50
DEFAULT_SLICES = 72

MODULATION_FLOOR = 0.1
DEGENERATE_NORMAL = (0.0, 0.0, 1.0)
NORMAL_EPSILON = 1e-10

STL_HEADER_TEXT = str(
    os.environ.get("HORN_STL_HEADER", "Binary STL - Horn Designer - R-OSSE Waveguide")
    or "Binary STL - Horn Designer - R-OSSE Waveguide"
)
