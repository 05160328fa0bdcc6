"""
Pointer state machine for mouse gestures.
Turns the raw samples of one button press into register/start/update/end/abort events.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple

from .config import GestureConfig, current_platform
from .suppression import EventSuppressor
from .types import SuppressionKey
from .vector_math import get_distance

logger = logging.getLogger(__name__)


class SampleKind(Enum):
    """Which pointer event produced a sample."""
    PRESS = auto()
    MOVE = auto()
    RELEASE = auto()
    WHEEL = auto()


class MachineState(Enum):
    PASSIVE = auto()
    PENDING = auto()    # Button down, distance threshold not crossed yet
    ACTIVE = auto()     # Recognized as a gesture
    ABORTED = auto()


@dataclass(frozen=True)
class PointerSample:
    """
    One pointer event.

    Attributes:
        x, y: Pointer position (px)
        buttons: Bitmask of held buttons (1=left, 2=right, 4=middle)
        timestamp: Event time in seconds
        trusted: False for synthetic (script generated) events
        kind: Press, move, release or wheel
        button: Bit of the button that changed with this event, 0 if none
        delta_y: Vertical wheel delta (wheel samples only)
        coalesced: Sub-samples batched by the OS into this event
    """
    x: float
    y: float
    buttons: int = 0
    timestamp: float = 0.0
    trusted: bool = True
    kind: SampleKind = SampleKind.MOVE
    button: int = 0
    alt_key: bool = False
    ctrl_key: bool = False
    shift_key: bool = False
    delta_y: float = 0.0
    coalesced: Tuple["PointerSample", ...] = ()

    def modifier_held(self, key: SuppressionKey) -> bool:
        if key == SuppressionKey.ALT:
            return self.alt_key
        if key == SuppressionKey.CTRL:
            return self.ctrl_key
        if key == SuppressionKey.SHIFT:
            return self.shift_key
        return False

    def expand(self) -> Tuple["PointerSample", ...]:
        """Coalesced sub-samples in order, or the sample itself."""
        return self.coalesced if self.coalesced else (self,)


def expand_samples(samples: Sequence[PointerSample]) -> List[PointerSample]:
    return [sub for sample in samples for sub in sample.expand()]


class PointerListener:
    """
    Receives lifecycle events from a PointerStateMachine.

    Events arrive synchronously in the order register, start, update*,
    then end or abort. Buffers are snapshots of the samples so far.
    """

    def on_register(self, buffer: Tuple[PointerSample, ...], sample: PointerSample) -> None:
        pass

    def on_start(self, buffer: Tuple[PointerSample, ...], sample: PointerSample) -> None:
        pass

    def on_update(self, buffer: Tuple[PointerSample, ...], sample: PointerSample) -> None:
        pass

    def on_end(self, buffer: Tuple[PointerSample, ...], sample: PointerSample) -> None:
        pass

    def on_abort(self, buffer: Tuple[PointerSample, ...]) -> None:
        pass


class PointerStateMachine:
    """
    Lifecycle of one gesture attempt.

    PASSIVE -> PENDING on a trusted trigger-button press, PENDING -> ACTIVE
    once the pointer moved further than the distance threshold from the
    press, back to PASSIVE on release. Releasing while PENDING is a plain
    click and emits nothing after `register`. Another button, a visibility
    change or the optional timeout abort the attempt.

    The timeout is a single deadline, re-armed on every update and checked
    by poll(); feed() polls with the sample's timestamp first.
    """

    def __init__(self, config: Optional[GestureConfig] = None,
                 listener: Optional[PointerListener] = None,
                 platform: Optional[str] = None):
        """
        Args:
            config: Gesture settings
            listener: Receiver of lifecycle events
            platform: "win", "linux" or "mac"; detected if None
        """
        self._config = config or GestureConfig()
        self._pending_config: Optional[GestureConfig] = None
        self.listener = listener or PointerListener()

        self._state = MachineState.PASSIVE
        self._buffer: List[PointerSample] = []
        self._deadline: Optional[float] = None
        self._suppressor = EventSuppressor(platform or current_platform(),
                                           self._config.distance_threshold)

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def buffer(self) -> Tuple[PointerSample, ...]:
        return tuple(self._buffer)

    @property
    def config(self) -> GestureConfig:
        return self._config

    @property
    def timeout_pending(self) -> bool:
        return self._deadline is not None

    def apply_config(self, config: GestureConfig) -> None:
        """Use new settings. Deferred to the end of a running attempt."""
        if self._state == MachineState.PASSIVE:
            self._set_config(config)
        else:
            self._pending_config = config

    def set_platform(self, platform: str) -> None:
        self._suppressor.platform = platform

    def _set_config(self, config: GestureConfig) -> None:
        self._config = config
        self._pending_config = None
        self._suppressor.distance_threshold = config.distance_threshold

    # --- Input ---

    def feed(self, sample: PointerSample) -> None:
        """Advance the state machine by one sample."""
        if not sample.trusted:
            return

        self.poll(sample.timestamp)

        if self._state == MachineState.PASSIVE:
            if sample.kind == SampleKind.PRESS:
                self._handle_press(sample)
            return

        if sample.kind == SampleKind.WHEEL:
            return

        trigger = int(self._config.mouse_button)
        if sample.kind == SampleKind.RELEASE:
            self._terminate(sample)
        elif sample.buttons == trigger:
            self._update(sample)
        elif sample.buttons == 0 or sample.button == trigger:
            self._terminate(sample)
        else:
            logger.debug("Button mask %d during gesture, aborting", sample.buttons)
            self._abort(sample.timestamp)

    def poll(self, now: float) -> bool:
        """Fire the timeout if its deadline passed. Returns True if it fired."""
        if self._deadline is None or now < self._deadline:
            return False
        logger.debug("Gesture timed out")
        self._abort(now)
        return True

    def visibility_changed(self, timestamp: Optional[float] = None) -> None:
        """The page/window was hidden or shown: abort a running attempt."""
        if self._state == MachineState.PASSIVE:
            return
        if timestamp is None:
            timestamp = self._buffer[-1].timestamp if self._buffer else 0.0
        self._abort(timestamp)

    def cancel(self) -> None:
        """Drop the current attempt without any event."""
        if self._state != MachineState.PASSIVE:
            self._reset(self._buffer[-1].timestamp if self._buffer else 0.0)

    def handle_context_menu(self, sample: PointerSample) -> bool:
        """Whether the host must suppress the context menu for this event."""
        if self._suppressor.is_double_click(sample.x, sample.y, sample.timestamp):
            self.cancel()
            return False
        return self._suppressor.suppress_context_menu(
            sample.x, sample.y, sample.timestamp, sample.trusted)

    def handle_click(self, sample: PointerSample) -> bool:
        """Whether the host must suppress a click, auxclick or mouseup/down."""
        return self._suppressor.suppress_click(sample.timestamp, sample.trusted)

    # --- Transitions ---

    def _handle_press(self, sample: PointerSample) -> None:
        if sample.modifier_held(self._config.suppression_key):
            return
        if sample.buttons == int(self._config.mouse_button):
            self._initialize(sample)

    def _initialize(self, sample: PointerSample) -> None:
        self._buffer = [sample]
        self._state = MachineState.PENDING
        self._suppressor.begin()
        logger.debug("Gesture registered at (%.1f, %.1f)", sample.x, sample.y)
        self.listener.on_register(self.buffer, sample)

    def _update(self, sample: PointerSample) -> None:
        self._buffer.append(sample)

        if self._state == MachineState.PENDING:
            initial = self._buffer[0]
            distance = get_distance(initial.x, initial.y, sample.x, sample.y)
            if distance > self._config.distance_threshold:
                self._state = MachineState.ACTIVE
                self._suppressor.enable()
                logger.debug("Gesture started after %.1fpx", distance)
                self.listener.on_start(self.buffer, initial)

        elif self._state == MachineState.ACTIVE:
            self.listener.on_update(self.buffer, sample)
            if self._config.timeout.active:
                self._clear_timeout()
                self._start_timeout(sample.timestamp)

    def _terminate(self, sample: PointerSample) -> None:
        self._buffer.append(sample)
        try:
            if self._state == MachineState.ACTIVE:
                logger.debug("Gesture ended with %d samples", len(self._buffer))
                self.listener.on_end(self.buffer, sample)
        finally:
            self._reset(sample.timestamp)

    def _abort(self, now: float) -> None:
        self._state = MachineState.ABORTED
        self._clear_timeout()
        try:
            self.listener.on_abort(self.buffer)
        finally:
            self._reset(now)

    def _reset(self, now: float) -> None:
        self._clear_timeout()
        self._suppressor.release(now)
        self._buffer = []
        self._state = MachineState.PASSIVE
        if self._pending_config is not None:
            self._set_config(self._pending_config)

    def _start_timeout(self, now: float) -> None:
        self._deadline = now + self._config.timeout.duration

    def _clear_timeout(self) -> None:
        self._deadline = None
