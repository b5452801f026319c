from dataclasses import dataclass
from typing import Any, Optional

UNSOLVABLE_PROFILE = "unsolvable_profile"
INVALID_SAMPLE_COUNT = "invalid_sample_count"
MISSING_PROFILE = "missing_profile"
INVALID_RESOLUTION = "invalid_resolution"
SHELL_DISABLED = "shell_disabled"


@dataclass(frozen=True)
class GeometryFailure:
    """Explicit failure value returned by engine stages instead of a result."""

    code: str
    stage: str
    detail: str

    def as_dict(self):
        return {"code": self.code, "stage": self.stage, "detail": self.detail}


def geometry_failure(code: str, stage: str, detail: str) -> GeometryFailure:
    return GeometryFailure(code=str(code), stage=str(stage), detail=str(detail))


def is_failure(value: Any) -> bool:
    return value is None or isinstance(value, GeometryFailure)


def check_blend_window(start: float, end: float, name: str) -> Optional[str]:
    """Return an error message when a blend window would collapse to a step."""
    if float(start) >= float(end):
        return (
            f"{name} window start ({float(start):g}) must be below its end ({float(end):g}); "
            "an empty window removes the smooth transition."
        )
    return None
