"""
Native event suppression around a gesture.

Once a gesture is active the host must swallow the clicks and the context
menu the trigger button would otherwise produce. When the context menu
arrives differs per OS, so the rules do too.
"""
import logging
from typing import Optional, Tuple

from .vector_math import get_distance

logger = logging.getLogger(__name__)

DOUBLE_CLICK_THRESHOLD = 0.3   # seconds
# Windows fires the context menu after the release, so keep suppressing a little longer
WINDOWS_RELEASE_DELAY = DOUBLE_CLICK_THRESHOLD - 0.1


class EventSuppressor:
    """
    Tracks whether clicks and context menus must be suppressed.

    On Windows the context menu is only suppressed while a gesture is (or was
    just) active. Elsewhere it is suppressed for the whole press cycle unless
    the user double clicks, which lets the native menu through.
    """

    def __init__(self, platform: str, distance_threshold: float = 10.0):
        self.platform = platform
        self.distance_threshold = distance_threshold
        self._prevent_default = False
        self._release_at: Optional[float] = None
        self._in_cycle = False
        self._last_click: Optional[Tuple[float, float, float]] = None   # (time, x, y)

    @property
    def is_windows(self) -> bool:
        return self.platform == "win"

    def begin(self) -> None:
        """A press cycle started."""
        self._in_cycle = True

    def enable(self) -> None:
        """The gesture became active: suppress native clicks from now on."""
        self._release_at = None
        self._prevent_default = True

    def release(self, now: float) -> None:
        """The press cycle ended."""
        self._in_cycle = False
        if self.is_windows and self._prevent_default:
            self._release_at = now + WINDOWS_RELEASE_DELAY
        else:
            self._prevent_default = False
            self._release_at = None

    def _expire(self, now: float) -> None:
        if self._release_at is not None and now >= self._release_at:
            self._prevent_default = False
            self._release_at = None

    def suppress_click(self, timestamp: float, trusted: bool = True) -> bool:
        """Whether a click/auxclick/mousedown/mouseup must be swallowed."""
        if not trusted:
            return False
        self._expire(timestamp)
        return self._prevent_default

    def is_double_click(self, x: float, y: float, timestamp: float) -> bool:
        """
        Second context menu request close in time and space to the last one.

        Only applies outside Windows while a cycle is in progress. A hit
        forgets the previous click.
        """
        if self.is_windows or not self._in_cycle or self._last_click is None:
            return False

        last_time, last_x, last_y = self._last_click
        within_time = timestamp - last_time < DOUBLE_CLICK_THRESHOLD
        within_dist = get_distance(last_x, last_y, x, y) < self.distance_threshold
        if within_time and within_dist:
            self._last_click = None
            logger.debug("Double click, letting the context menu through")
            return True
        return False

    def suppress_context_menu(self, x: float, y: float, timestamp: float,
                              trusted: bool = True) -> bool:
        """Whether a context menu request must be swallowed."""
        if self.is_windows:
            self._expire(timestamp)
            return trusted and self._prevent_default

        if not self._in_cycle:
            return False
        self._last_click = (timestamp, x, y)
        return trusted
