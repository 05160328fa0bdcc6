"""
Vector helpers shared by the pattern extractor and the matcher.
Vectors are plain (dx, dy) tuples.
"""
import math
from typing import Sequence


def get_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def magnitude(vector: Sequence[float]) -> float:
    """Length of a (dx, dy) vector."""
    return math.hypot(vector[0], vector[1])


def vector_direction_difference(v1x: float, v1y: float, v2x: float, v2y: float) -> float:
    """
    Signed direction difference between two vectors.

    The raw angle difference is wrapped into (-pi, pi] and divided by pi,
    so the result lies in (-1, 1]: 0 means same direction, 0.5 a right
    angle and 1 opposite directions.
    """
    angle_difference = math.atan2(v1x, v1y) - math.atan2(v2x, v2y)

    if angle_difference > math.pi:
        angle_difference -= 2 * math.pi
    elif angle_difference <= -math.pi:
        angle_difference += 2 * math.pi

    return angle_difference / math.pi


def direction_difference(a: Sequence[float], b: Sequence[float]) -> float:
    """Tuple form of vector_direction_difference."""
    return vector_direction_difference(a[0], a[1], b[0], b[1])


def pattern_magnitude(pattern: Sequence[Sequence[float]]) -> float:
    """Total length of all vectors in a pattern."""
    return sum(magnitude(vector) for vector in pattern)
