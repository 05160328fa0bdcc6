"""
Pattern extraction from pointer coordinates.
Reduces a noisy point stream to the vectors between direction changes.
"""
import logging
from enum import IntEnum
from typing import Iterable, Optional, Sequence

from .config import GestureConfig
from .types import Pattern, Vector
from .vector_math import vector_direction_difference, get_distance

logger = logging.getLogger(__name__)


class PatternStatus(IntEnum):
    """Outcome of the last add_point() call."""
    PASSED_NO_THRESHOLD = 0
    PASSED_DISTANCE_THRESHOLD = 1
    PASSED_DIFFERENCE_THRESHOLD = 2


class PatternExtractor:
    """
    Incrementally converts (x, y) points into a gesture pattern.

    Points closer than the distance threshold to the previous accepted point
    are treated as jitter. A new vector is committed only when the direction
    of movement deviates from the current run by more than the deviation
    tolerance; the still open run is appended by get_pattern().
    """

    def __init__(self, distance_threshold: float = 10.0, deviation_tolerance: float = 0.15):
        """
        Args:
            distance_threshold: Minimum step (px) to count as movement
            deviation_tolerance: Direction change (0-1, pi units) that starts a new vector
        """
        self.distance_threshold = distance_threshold
        self.deviation_tolerance = deviation_tolerance
        self.status = PatternStatus.PASSED_NO_THRESHOLD

        self._last_extracted_point: Optional[Vector] = None
        self._previous_point: Optional[Vector] = None
        self._last_point: Optional[Vector] = None
        self._previous_vector: Optional[Vector] = None
        self._extracted_vectors: Pattern = []

    @classmethod
    def from_config(cls, config: GestureConfig) -> "PatternExtractor":
        return cls(config.distance_threshold, config.deviation_tolerance)

    def apply_config(self, config: GestureConfig) -> None:
        self.distance_threshold = config.distance_threshold
        self.deviation_tolerance = config.deviation_tolerance

    def clear(self) -> None:
        """Drop all points. Called once at the start of every gesture."""
        self._extracted_vectors = []
        self._last_extracted_point = None
        self._previous_point = None
        self._last_point = None
        self._previous_vector = None
        self.status = PatternStatus.PASSED_NO_THRESHOLD

    def add_point(self, x: float, y: float) -> Pattern:
        """
        Add one point and return the pattern so far.

        The outcome (jitter, movement, new direction) is kept in `status`.
        """
        self.status = self._add_point(x, y)
        return self.get_pattern()

    def _add_point(self, x: float, y: float) -> PatternStatus:
        point = (x, y)

        if self._previous_point is None:
            self._previous_point = point
            self._last_extracted_point = point
            self._last_point = point
            return PatternStatus.PASSED_NO_THRESHOLD

        prev_x, prev_y = self._previous_point
        new_vector = (x - prev_x, y - prev_y)

        if get_distance(prev_x, prev_y, x, y) <= self.distance_threshold:
            self._last_point = point
            return PatternStatus.PASSED_NO_THRESHOLD

        if self._previous_vector is None:
            self._previous_vector = new_vector
            status = PatternStatus.PASSED_DISTANCE_THRESHOLD
        else:
            diff = vector_direction_difference(
                self._previous_vector[0], self._previous_vector[1],
                new_vector[0], new_vector[1],
            )
            if abs(diff) > self.deviation_tolerance:
                anchor_x, anchor_y = self._last_extracted_point
                self._extracted_vectors.append((prev_x - anchor_x, prev_y - anchor_y))
                self._previous_vector = new_vector
                self._last_extracted_point = self._previous_point
                status = PatternStatus.PASSED_DIFFERENCE_THRESHOLD
            else:
                status = PatternStatus.PASSED_DISTANCE_THRESHOLD

        self._previous_point = point
        self._last_point = point
        return status

    def get_pattern(self) -> Pattern:
        """Committed vectors plus the open run up to the latest point."""
        if self._last_point is None or self._last_extracted_point is None:
            return []

        last_vector = (
            self._last_point[0] - self._last_extracted_point[0],
            self._last_point[1] - self._last_extracted_point[1],
        )
        return [*self._extracted_vectors, last_vector]


def extract_pattern(
    points: Iterable[Sequence[float]],
    distance_threshold: float = 10.0,
    deviation_tolerance: float = 0.15,
) -> Pattern:
    """Build a pattern from a complete list of points (gesture recording)."""
    extractor = PatternExtractor(distance_threshold, deviation_tolerance)
    for x, y in points:
        extractor.add_point(x, y)
    pattern = extractor.get_pattern()
    logger.debug("Extracted pattern with %d vector(s)", len(pattern))
    return pattern
