"""
Shared value types: buttons, settings enums and registered gestures.
"""
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any, Iterable, List, Optional, Sequence, Tuple

Vector = Tuple[float, float]
Pattern = List[Vector]


class MouseButton(IntFlag):
    """Button bits as reported in a pointer `buttons` mask."""
    NONE = 0
    LEFT = 1
    RIGHT = 2
    MIDDLE = 4


class SuppressionKey(str, Enum):
    """Modifier that disables gesture capture while held."""
    ALT = "altKey"
    CTRL = "ctrlKey"
    SHIFT = "shiftKey"
    NONE = "none"


class MatchingAlgorithm(str, Enum):
    STRICT = "Strict"
    SHAPE_INDEPENDENT = "ShapeIndependent"
    COMBINED = "Combined"


@dataclass(frozen=True)
class GestureRecord:
    """
    A registered gesture: a pattern and the identifier it resolves to.

    Attributes:
        pattern: Direction vectors of the gesture
        identifier: Opaque reference handed to the command collaborator
        label: Optional user-facing name
    """
    pattern: Pattern
    identifier: Any
    label: Optional[str] = None

    def __str__(self) -> str:
        return self.label if self.label is not None else str(self.identifier)


def normalize_pattern(pattern: Iterable[Sequence[float]]) -> Pattern:
    """Coerce a loaded pattern (nested lists from YAML) into float tuples."""
    return [(float(vector[0]), float(vector[1])) for vector in pattern]
