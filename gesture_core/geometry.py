"""
Joint geometry helpers used by the pose feature extractor.
"""
import math

import numpy as np


def euclidean(a, b):
    """Euclidean distance between points.

    - If `a` and `b` are 1-D points, returns a scalar.
    - If arrays of points, returns distances per-row.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return np.linalg.norm(a - b, axis=-1)


def vertex_angle(start, mid, end) -> float:
    """
    Interior angle (degrees) at `mid` of the triangle start-mid-end.

    Uses the law of cosines on the three pairwise distances:
    cos(C) = (mid_end^2 + start_mid^2 - start_end^2) / (2 * mid_end * start_mid)

    Args:
        start, mid, end: 2-D or 3-D points

    Returns:
        Angle in degrees in [0, 180]. Degenerate triangles (a zero-length
        side at the vertex) return 180, i.e. a straight joint.
    """
    start_mid = float(euclidean(start, mid))
    mid_end = float(euclidean(mid, end))
    start_end = float(euclidean(start, end))

    denom = 2.0 * mid_end * start_mid
    if denom <= 1e-12:
        return 180.0

    cos_in = (mid_end ** 2 + start_mid ** 2 - start_end ** 2) / denom
    cos_in = max(-1.0, min(1.0, cos_in))
    return math.degrees(math.acos(cos_in))


def slope_angle(start, end) -> float:
    """
    Angle (degrees) of the 2-D segment start->end, atan2(dy, dx).

    Only x and y are used; result is in (-180, 180].
    """
    dx = float(end[0]) - float(start[0])
    dy = float(end[1]) - float(start[1])
    return math.degrees(math.atan2(dy, dx))
