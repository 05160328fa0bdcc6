"""
Gesture matching.
Scores a pattern against registered gestures and picks the closest one.

All scores are "lower is more similar" and built on the same direction
difference used by the pattern extractor:

- Strict: patterns aligned by cumulative length proportion, so the relative
  length of every segment matters.
- ShapeIndependent: dynamic time warping over the direction sequence only.
- Combined: DTW as a filter, then DTW + Strict to rank the survivors.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import GestureConfig
from .types import GestureRecord, MatchingAlgorithm, Pattern
from .vector_math import direction_difference, magnitude, pattern_magnitude

logger = logging.getLogger(__name__)

Candidate = Union[GestureRecord, Tuple[Pattern, Any]]


@dataclass(frozen=True)
class MatchResult:
    """Winning gesture (or None) and its score."""
    record: Optional[GestureRecord] = None
    score: float = math.inf

    @property
    def identifier(self) -> Any:
        return self.record.identifier if self.record is not None else None

    def __bool__(self) -> bool:
        return self.record is not None


def _overlap_proportion(min_a: float, max_a: float, min_b: float, max_b: float) -> float:
    return max(0.0, min(max_a, max_b) - max(min_a, min_b))


def similarity_by_proportion(pattern_a: Sequence[Sequence[float]],
                             pattern_b: Sequence[Sequence[float]]) -> float:
    """
    Direction mismatch weighted by overlapping length proportion.

    Both patterns are laid out on a 0..1 axis by the share of total length
    each vector covers. Walking both axes together, every overlapping stretch
    contributes |direction difference| * overlap width.
    """
    if not pattern_a or not pattern_b:
        return math.inf

    # zero-length patterns still walk their vectors, with a unit total
    total_a = pattern_magnitude(pattern_a) or 1.0
    total_b = pattern_magnitude(pattern_b) or 1.0

    total_difference = 0.0
    a = b = 0
    start_a = start_b = 0.0

    while a < len(pattern_a) and b < len(pattern_b):
        vector_a = pattern_a[a]
        vector_b = pattern_b[b]

        end_a = start_a + magnitude(vector_a) / total_a
        end_b = start_b + magnitude(vector_b) / total_b

        overlap = _overlap_proportion(start_a, end_a, start_b, end_b)

        if end_a > end_b:
            b += 1
            start_b = end_b
        elif end_a < end_b:
            a += 1
            start_a = end_a
        else:
            a += 1
            b += 1
            start_a = end_a
            start_b = end_b

        total_difference += abs(direction_difference(vector_a, vector_b)) * overlap

    return total_difference


def similarity_by_dtw(pattern_a: Sequence[Sequence[float]],
                      pattern_b: Sequence[Sequence[float]]) -> float:
    """Length-normalized DTW distance over vector directions."""
    rows = len(pattern_a)
    columns = len(pattern_b)
    if rows == 0 or columns == 0:
        return math.inf

    dtw = np.full((rows, columns), np.inf, dtype=np.float64)

    for i in range(rows):
        for j in range(columns):
            cost = abs(direction_difference(pattern_a[i], pattern_b[j]))

            if i and j:
                dtw[i, j] = cost + min(dtw[i - 1, j], dtw[i, j - 1], dtw[i - 1, j - 1])
            elif i:
                dtw[i, j] = cost + dtw[i - 1, j]
            elif j:
                dtw[i, j] = cost + dtw[i, j - 1]
            else:
                dtw[i, j] = cost

    return float(dtw[rows - 1, columns - 1] / max(rows, columns))


def score_pattern(pattern_a: Sequence[Sequence[float]],
                  pattern_b: Sequence[Sequence[float]],
                  algorithm: MatchingAlgorithm = MatchingAlgorithm.COMBINED) -> float:
    """Score of one pair under the given algorithm (no tolerance filter)."""
    algorithm = MatchingAlgorithm(algorithm)
    if algorithm == MatchingAlgorithm.STRICT:
        return similarity_by_proportion(pattern_a, pattern_b)
    if algorithm == MatchingAlgorithm.SHAPE_INDEPENDENT:
        return similarity_by_dtw(pattern_a, pattern_b)
    return similarity_by_dtw(pattern_a, pattern_b) + similarity_by_proportion(pattern_a, pattern_b)


def _as_record(candidate: Candidate) -> GestureRecord:
    if isinstance(candidate, GestureRecord):
        return candidate
    pattern, identifier = candidate
    return GestureRecord(pattern=pattern, identifier=identifier)


def match_pattern(pattern: Sequence[Sequence[float]],
                  candidates: Iterable[Candidate],
                  algorithm: MatchingAlgorithm = MatchingAlgorithm.COMBINED,
                  tolerance: float = 0.15) -> MatchResult:
    """
    Pick the best matching candidate for a pattern.

    Args:
        pattern: Query pattern
        candidates: GestureRecords or (pattern, identifier) pairs
        algorithm: Strict, ShapeIndependent or Combined
        tolerance: Deviation tolerance; scores must be strictly below it

    Returns:
        MatchResult with the winning record, or an empty result.
    """
    algorithm = MatchingAlgorithm(algorithm)
    best: Optional[GestureRecord] = None

    if algorithm == MatchingAlgorithm.COMBINED:
        lowest = math.inf
        for record in map(_as_record, candidates):
            diff_dtw = similarity_by_dtw(pattern, record.pattern)
            if diff_dtw >= tolerance:
                continue
            diff = diff_dtw + similarity_by_proportion(pattern, record.pattern)
            logger.debug("Combined score %.4f for %s", diff, record)
            if diff < lowest:
                lowest = diff
                best = record
    else:
        lowest = tolerance
        for record in map(_as_record, candidates):
            diff = score_pattern(pattern, record.pattern, algorithm)
            logger.debug("%s score %.4f for %s", algorithm.value, diff, record)
            if diff < lowest:
                lowest = diff
                best = record

    if best is None:
        return MatchResult()
    return MatchResult(record=best, score=lowest)


class Matcher:
    """Holds the configured algorithm and tolerance for repeated matching."""

    def __init__(self, algorithm: MatchingAlgorithm = MatchingAlgorithm.COMBINED,
                 tolerance: float = 0.15):
        self.algorithm = MatchingAlgorithm(algorithm)
        self.tolerance = tolerance

    @classmethod
    def from_config(cls, config: GestureConfig) -> "Matcher":
        return cls(config.matching_algorithm, config.deviation_tolerance)

    def apply_config(self, config: GestureConfig) -> None:
        self.algorithm = MatchingAlgorithm(config.matching_algorithm)
        self.tolerance = config.deviation_tolerance

    def match(self, pattern: Sequence[Sequence[float]],
              candidates: Iterable[Candidate]) -> MatchResult:
        return match_pattern(pattern, candidates, self.algorithm, self.tolerance)

    def find_similar(self, pattern: Sequence[Sequence[float]],
                     records: Iterable[GestureRecord],
                     exclude: Optional[GestureRecord] = None) -> Optional[GestureRecord]:
        """
        Existing gesture a newly recorded pattern would be confused with.

        `exclude` skips the gesture being edited.
        """
        others: List[GestureRecord] = [r for r in records if r is not exclude]
        result = self.match(pattern, others)
        if result:
            logger.info("Recorded pattern collides with %s (score %.4f)", result.record, result.score)
        return result.record
