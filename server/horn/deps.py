"""
Runtime version report for the geometry engine and its numeric stack.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Dict, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

SUPPORTED_PYTHON_MIN = (3, 10, 0)
SUPPORTED_PYTHON_MAX_EXCLUSIVE = (3, 15, 0)
SUPPORTED_NUMPY_MIN = (1, 24, 0)
SUPPORTED_NUMPY_MAX_EXCLUSIVE = (3, 0, 0)

SUPPORTED_DEPENDENCY_MATRIX: Dict[str, Dict[str, str]] = {
    "python": {"range": ">=3.10,<3.15"},
    "numpy": {"range": ">=1.24,<3.0", "required_for": "/api/mesh/*"},
}


def _parse_version_tuple(raw: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Leading major.minor.patch of a version string, zero-filled."""
    numbers = [int(item) for item in re.findall(r"\d+", str(raw or ""))][:3]
    if not numbers:
        return None
    return tuple(numbers + [0] * (3 - len(numbers)))


def _in_supported_range(
    version: Optional[Tuple[int, int, int]],
    min_version: Tuple[int, int, int],
    max_exclusive: Tuple[int, int, int],
) -> bool:
    return version is not None and min_version <= version < max_exclusive


PYTHON_VERSION = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
PYTHON_SUPPORTED = _in_supported_range(
    (sys.version_info.major, sys.version_info.minor, sys.version_info.micro),
    SUPPORTED_PYTHON_MIN,
    SUPPORTED_PYTHON_MAX_EXCLUSIVE,
)

NUMPY_VERSION = np.__version__
NUMPY_SUPPORTED = _in_supported_range(
    _parse_version_tuple(NUMPY_VERSION),
    SUPPORTED_NUMPY_MIN,
    SUPPORTED_NUMPY_MAX_EXCLUSIVE,
)
ENGINE_RUNTIME_READY = PYTHON_SUPPORTED and NUMPY_SUPPORTED

if not PYTHON_SUPPORTED:
    logger.warning(
        "Unsupported Python runtime %s; supported range is >=3.10,<3.15.", PYTHON_VERSION
    )
if not NUMPY_SUPPORTED:
    logger.warning(
        "Unsupported numpy version %s; supported range is >=1.24,<3.0.", NUMPY_VERSION or "unknown"
    )


def get_dependency_status() -> Dict[str, Dict[str, object]]:
    return {
        "supportedMatrix": SUPPORTED_DEPENDENCY_MATRIX,
        "runtime": {
            "python": {
                "version": PYTHON_VERSION,
                "supported": PYTHON_SUPPORTED,
            },
            "numpy": {
                "version": NUMPY_VERSION,
                "supported": NUMPY_SUPPORTED,
                "ready": ENGINE_RUNTIME_READY,
            },
        },
    }
