"""
Gesture pipeline: pointer state machine -> pattern extractor -> matcher.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import Config, current_platform
from .matcher import Matcher, MatchResult
from .pattern import PatternExtractor, PatternStatus, extract_pattern
from .pointer import (
    MachineState, PointerListener, PointerSample, PointerStateMachine, SampleKind,
    expand_samples,
)
from .rocker import RockerController, RockerListener
from .types import GestureRecord, Pattern
from .wheel import WheelController, WheelListener

logger = logging.getLogger(__name__)


class PipelineListener:
    """Receives recognition results from a GesturePipeline."""

    def on_gesture_start(self) -> None:
        pass

    def on_gesture_change(self, pattern: Pattern, result: MatchResult) -> None:
        """Live feedback: the pattern changed and this is its current match."""
        pass

    def on_gesture_end(self, pattern: Pattern, result: MatchResult) -> None:
        pass

    def on_gesture_abort(self) -> None:
        pass

    def on_rocker(self, command: str) -> None:
        pass

    def on_wheel(self, command: str) -> None:
        pass


class GesturePipeline(PointerListener, RockerListener, WheelListener):
    """
    Owns one state machine, extractor and matcher and wires them together.

    Samples go in through feed(); results come out through the
    PipelineListener. Coalesced sub-samples are replayed in order.
    """

    def __init__(self, config: Optional[Config] = None,
                 listener: Optional[PipelineListener] = None):
        config = config or Config()
        self._config = config
        self._pending_config: Optional[Config] = None
        self.listener = listener or PipelineListener()

        self.machine = PointerStateMachine(config.gesture, self,
                                           platform=current_platform(config.system))
        self.extractor = PatternExtractor.from_config(config.gesture)
        self.matcher = Matcher.from_config(config.gesture)
        self.rocker = RockerController(self)
        self.wheel = WheelController(config.wheel, self)
        self._gestures: List[GestureRecord] = list(config.gestures)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def gestures(self) -> Tuple[GestureRecord, ...]:
        return tuple(self._gestures)

    def set_gestures(self, records: Iterable[GestureRecord]) -> None:
        self._gestures = list(records)

    def apply_config(self, config: Config) -> None:
        """Use new settings; a running gesture finishes with the old ones."""
        self.machine.apply_config(config.gesture)
        if self.machine.state == MachineState.PASSIVE:
            self._set_config(config)
        else:
            self._pending_config = config

    def _set_config(self, config: Config) -> None:
        self._config = config
        self._pending_config = None
        self.extractor.apply_config(config.gesture)
        self.matcher.apply_config(config.gesture)
        self.wheel.apply_config(config.wheel)
        if not config.wheel.active:
            self.wheel.disable()
        self.set_gestures(config.gestures)
        self.machine.set_platform(current_platform(config.system))

    def _finish_cycle(self) -> None:
        self.extractor.clear()
        if self._pending_config is not None:
            self._set_config(self._pending_config)

    # --- Input ---

    def feed(self, sample: PointerSample) -> bool:
        """
        Process one pointer event.

        Returns:
            True if the host should suppress the event's native behaviour.
        """
        suppress = False
        if sample.kind == SampleKind.PRESS:
            if self._config.rocker.active:
                suppress = self.rocker.handle_press(sample) or suppress
            if self._config.wheel.active:
                suppress = self.wheel.handle_press(sample) or suppress
        elif sample.kind == SampleKind.WHEEL:
            if self._config.wheel.active:
                suppress = self.wheel.handle_wheel(sample)
        elif sample.kind == SampleKind.RELEASE or (sample.button and not sample.buttons & sample.button):
            # any button going up, also while another one stays held
            self.rocker.handle_release(sample)
            self.wheel.handle_release(sample)

        self.machine.feed(sample)
        return suppress

    def poll(self, now: float) -> bool:
        return self.machine.poll(now)

    def visibility_changed(self, timestamp: Optional[float] = None) -> None:
        self.machine.visibility_changed(timestamp)
        self.rocker.visibility_changed()
        self.wheel.visibility_changed()

    def cancel(self) -> None:
        self.machine.cancel()
        self._finish_cycle()

    def handle_context_menu(self, sample: PointerSample) -> bool:
        running = self.machine.state != MachineState.PASSIVE
        suppress = self.machine.handle_context_menu(sample)
        if running and self.machine.state == MachineState.PASSIVE:
            # double click cancelled the cycle
            self._finish_cycle()
        if self._config.rocker.active:
            suppress = self.rocker.handle_context_menu(sample) or suppress
        if self._config.wheel.active:
            suppress = self.wheel.handle_context_menu(sample) or suppress
        return suppress

    def handle_click(self, sample: PointerSample) -> bool:
        suppress = self.machine.handle_click(sample)
        if self._config.rocker.active:
            suppress = self.rocker.handle_click(sample) or suppress
        if self._config.wheel.active:
            suppress = self.wheel.handle_click(sample) or suppress
        return suppress

    def match(self, pattern: Sequence[Sequence[float]]) -> MatchResult:
        return self.matcher.match(pattern, self._gestures)

    def record(self, samples: Sequence[PointerSample]) -> Tuple[Pattern, Optional[GestureRecord]]:
        """
        Build a pattern for a new gesture from recorded samples.

        Returns the pattern and the existing gesture it collides with, if any.
        """
        gesture = self._config.gesture
        points = [(s.x, s.y) for s in expand_samples(samples)]
        pattern = extract_pattern(points, gesture.distance_threshold, gesture.deviation_tolerance)
        return pattern, self.matcher.find_similar(pattern, self._gestures)

    # --- PointerListener ---

    def on_register(self, buffer, sample) -> None:
        self.extractor.clear()

    def on_start(self, buffer, sample) -> None:
        self.listener.on_gesture_start()
        self._add_samples(expand_samples(buffer))

    def on_update(self, buffer, sample) -> None:
        self._add_samples(sample.expand())

    def on_end(self, buffer, sample) -> None:
        pattern = self.extractor.get_pattern()
        result = self.match(pattern)
        if result:
            logger.info("Gesture matched %s (score %.4f)", result.record, result.score)
        else:
            logger.info("No gesture matched pattern of %d vector(s)", len(pattern))
        try:
            self.listener.on_gesture_end(pattern, result)
        finally:
            self._finish_cycle()

    def on_abort(self, buffer) -> None:
        logger.info("Gesture aborted")
        try:
            self.listener.on_gesture_abort()
        finally:
            self._finish_cycle()

    def _add_samples(self, samples: Iterable[PointerSample]) -> None:
        for sample in samples:
            pattern = self.extractor.add_point(sample.x, sample.y)
            if self.extractor.status != PatternStatus.PASSED_NO_THRESHOLD:
                self.listener.on_gesture_change(pattern, self.match(pattern))

    # --- Rocker / wheel ---

    def on_rocker_left(self, sample) -> None:
        self.listener.on_rocker(self._config.rocker.left_mouse_click)

    def on_rocker_right(self, sample) -> None:
        self.listener.on_rocker(self._config.rocker.right_mouse_click)

    def on_wheel_up(self, sample) -> None:
        self.listener.on_wheel(self._config.wheel.wheel_up)

    def on_wheel_down(self, sample) -> None:
        self.listener.on_wheel(self._config.wheel.wheel_down)
