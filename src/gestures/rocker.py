"""
Rocker gestures: press one of left/right while holding the other.
"""
import logging
from typing import Optional

from .pointer import PointerSample
from .types import MouseButton

logger = logging.getLogger(__name__)


class RockerListener:
    def on_rocker_left(self, sample: PointerSample) -> None:
        pass

    def on_rocker_right(self, sample: PointerSample) -> None:
        pass


class RockerController:
    """
    Detects rocker presses and tells the host which native events to swallow.

    After a rocker the context menu of the right button and the click of the
    left button are suppressed until the next ordinary press.
    """

    def __init__(self, listener: Optional[RockerListener] = None):
        self.listener = listener or RockerListener()
        self._prevent_default = True
        self._last_release: Optional[float] = None

    def handle_press(self, sample: PointerSample) -> bool:
        """Returns True if the press must be suppressed."""
        if not sample.trusted:
            return False

        self._prevent_default = False   # always disable prevention on press

        if sample.buttons == MouseButton.LEFT | MouseButton.RIGHT:
            if sample.button == MouseButton.LEFT:
                logger.debug("Rocker left")
                self.listener.on_rocker_left(sample)
            else:
                logger.debug("Rocker right")
                self.listener.on_rocker_right(sample)
            self._prevent_default = True
            return True
        return False

    def handle_release(self, sample: PointerSample) -> None:
        self._last_release = sample.timestamp

    def visibility_changed(self) -> None:
        self._prevent_default = True

    def handle_context_menu(self, sample: PointerSample) -> bool:
        if not sample.trusted:
            return False
        return sample.button == MouseButton.RIGHT and self._prevent_default

    def handle_click(self, sample: PointerSample) -> bool:
        # Only clicks produced by a real release (not keyboard activation)
        if not sample.trusted:
            return False
        return (sample.button == MouseButton.LEFT
                and sample.timestamp == self._last_release
                and self._prevent_default)
