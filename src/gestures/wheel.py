"""
Wheel gestures: scroll while holding a mouse button.
"""
import logging
from typing import Optional

from .config import WheelConfig
from .pointer import PointerSample
from .types import MouseButton

logger = logging.getLogger(__name__)


class WheelListener:
    def on_wheel_up(self, sample: PointerSample) -> None:
        pass

    def on_wheel_down(self, sample: PointerSample) -> None:
        pass


class WheelController:
    """
    Accumulates wheel deltas while the configured button is held.

    The accumulator resets whenever the scroll direction flips; once its
    magnitude reaches the sensitivity one wheel event is emitted.
    """

    def __init__(self, config: Optional[WheelConfig] = None,
                 listener: Optional[WheelListener] = None):
        self.listener = listener or WheelListener()
        self._config = config or WheelConfig()
        self._prevent_default = True
        self._last_release: Optional[float] = None
        self._accumulated_delta_y = 0.0

    def apply_config(self, config: WheelConfig) -> None:
        self._config = config

    @property
    def accumulated_delta(self) -> float:
        return self._accumulated_delta_y

    def handle_press(self, sample: PointerSample) -> bool:
        """Returns True if the press must be suppressed (middle click autoscroll)."""
        if not sample.trusted:
            return False
        self._prevent_default = False
        self._accumulated_delta_y = 0.0

        button = int(self._config.mouse_button)
        return button == MouseButton.MIDDLE and sample.buttons == MouseButton.MIDDLE

    def handle_release(self, sample: PointerSample) -> None:
        self._last_release = sample.timestamp

    def handle_wheel(self, sample: PointerSample) -> bool:
        """Feed one wheel event. Returns True if the native scroll must be suppressed."""
        if not sample.trusted:
            return False
        if sample.buttons != int(self._config.mouse_button) or sample.delta_y == 0:
            return False

        # reset if direction changed
        if (self._accumulated_delta_y < 0) != (sample.delta_y < 0):
            self._accumulated_delta_y = 0.0

        self._accumulated_delta_y += sample.delta_y

        if abs(self._accumulated_delta_y) >= self._config.wheel_sensitivity:
            if self._accumulated_delta_y < 0:
                logger.debug("Wheel up")
                self.listener.on_wheel_up(sample)
            else:
                logger.debug("Wheel down")
                self.listener.on_wheel_down(sample)
            self._accumulated_delta_y = 0.0

        self._prevent_default = True
        return True

    def visibility_changed(self) -> None:
        self._prevent_default = True
        self._accumulated_delta_y = 0.0

    def disable(self) -> None:
        self._prevent_default = True
        self._accumulated_delta_y = 0.0

    def handle_context_menu(self, sample: PointerSample) -> bool:
        if not sample.trusted:
            return False
        button = int(self._config.mouse_button)
        return (self._prevent_default
                and sample.button == button
                and button == MouseButton.RIGHT)

    def handle_click(self, sample: PointerSample) -> bool:
        button = int(self._config.mouse_button)
        if (not sample.trusted
                or not self._prevent_default
                or sample.button != button
                or button not in (MouseButton.LEFT, MouseButton.MIDDLE)):
            return False
        # only a click produced by the release, not enter/label activation
        return sample.timestamp == self._last_release
