"""
pose_utils.py - Shared geometry helpers for the exercise analyzers.
"""
import numpy as np
from typing import Optional, Sequence

from ..pose_detection.landmarks import Landmark


# --- Math & Geometry Utilities ---
def calculate_angle(a: Landmark, b: Landmark, c: Landmark) -> float:
    """
    Calculate the angle at point b between rays b->a and b->c.

    Point ordering convention:
    - a: First point (e.g., hip for knee angle)
    - b: Vertex (e.g., knee for knee angle)
    - c: Last point (e.g., ankle for knee angle)

    Only x and y are used; z from a single camera is too noisy for angles.
    Reflex results are folded back, so the angle is always in [0, 180].

    Args:
        a: First point
        b: Vertex point
        c: Last point
    Returns:
        Angle in degrees
    """
    radians = np.arctan2(c.y - b.y, c.x - b.x) - np.arctan2(a.y - b.y, a.x - b.x)
    angle = np.abs(np.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return float(angle)


def angle_if_present(
    a: Optional[Landmark], b: Optional[Landmark], c: Optional[Landmark]
) -> Optional[float]:
    """Angle at b, or None when any of the three points is missing."""
    if a is None or b is None or c is None:
        return None
    return calculate_angle(a, b, c)


def midpoint_x(a: Optional[Landmark], b: Optional[Landmark]) -> Optional[float]:
    """Horizontal midpoint of two points, or None when either is missing."""
    if a is None or b is None:
        return None
    return (a.x + b.x) / 2


def mean_of_available(values: Sequence[Optional[float]]) -> Optional[float]:
    available = [v for v in values if v is not None]
    return float(np.mean(available)) if available else None
