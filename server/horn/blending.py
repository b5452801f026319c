"""
Continuity-preserving blend primitives.

Every shape and modulation transition in the engine is routed through these
so that no slope discontinuity appears at a blend-window boundary.
"""


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def smoothstep(t: float, start: float, end: float) -> float:
    """Cubic Hermite ease (C1): 0 at/below start, 1 at/above end.

    An empty window (start >= end) degrades to a step at ``end``.
    """
    if start >= end:
        return 1.0 if t >= end else 0.0
    s = clamp((t - start) / (end - start), 0.0, 1.0)
    return s * s * (3.0 - 2.0 * s)


def smoothstep5(t: float, start: float, end: float) -> float:
    """Quintic ease (C2): zero first and second derivative at both ends."""
    if start >= end:
        return 1.0 if t >= end else 0.0
    s = clamp((t - start) / (end - start), 0.0, 1.0)
    return s * s * s * (s * (s * 6.0 - 15.0) + 10.0)


def powered_smoothstep(t: float, start: float, end: float, power: float = 1.0) -> float:
    return smoothstep(t, start, end) ** power


def lerp(a: float, b: float, f: float) -> float:
    return a + f * (b - a)


def smooth_lerp(
    a: float,
    b: float,
    t: float,
    start: float,
    end: float,
    power: float = 1.0,
) -> float:
    """Interpolate a -> b with a powered smoothstep factor evaluated at t."""
    return lerp(a, b, powered_smoothstep(t, start, end, power))
