"""
Qt worker wrapping the gesture pipeline.
Receives pointer samples through slots and emits recognition results as signals.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional
from PyQt5.QtCore import QObject, pyqtSignal, QTimer

from .config import Config
from .matcher import MatchResult
from .pipeline import GesturePipeline, PipelineListener
from .pointer import PointerSample
from .types import Pattern

logger = logging.getLogger(__name__)


@dataclass
class GestureEvent:
    """Payload of gesture_changed / gesture_matched."""
    pattern: Pattern = field(default_factory=list)
    result: MatchResult = field(default_factory=MatchResult)

    @property
    def label(self) -> Optional[str]:
        return str(self.result.record) if self.result else None


class _SignalListener(PipelineListener):
    """Forwards pipeline callbacks to the worker's signals."""

    def __init__(self, worker: "GestureWorker"):
        self._worker = worker

    def on_gesture_start(self) -> None:
        self._worker.gesture_started.emit()

    def on_gesture_change(self, pattern, result) -> None:
        self._worker.gesture_changed.emit(GestureEvent(pattern, result))

    def on_gesture_end(self, pattern, result) -> None:
        self._worker.gesture_matched.emit(GestureEvent(pattern, result))

    def on_gesture_abort(self) -> None:
        self._worker.gesture_aborted.emit()

    def on_rocker(self, command) -> None:
        self._worker.rocker_event.emit(command)

    def on_wheel(self, command) -> None:
        self._worker.wheel_event.emit(command)


class GestureWorker(QObject):
    """
    Worker class that owns the recognition pipeline.

    Lives on the thread that delivers pointer samples; a QTimer on the same
    thread polls the gesture timeout. Emits signals for UI / command dispatch.
    """
    # Signals
    gesture_started = pyqtSignal()
    gesture_changed = pyqtSignal(object)  # Emits GestureEvent (live feedback)
    gesture_matched = pyqtSignal(object)  # Emits GestureEvent (final result)
    gesture_aborted = pyqtSignal()
    rocker_event = pyqtSignal(str)        # Configured command name
    wheel_event = pyqtSignal(str)
    error = pyqtSignal(str)

    POLL_INTERVAL_MS = 50

    def __init__(self, config: Config, parent=None,
                 clock: Callable[[], float] = time.perf_counter):
        super().__init__(parent)
        self._config = config
        self._clock = clock
        self._pipeline = GesturePipeline(config, _SignalListener(self))
        self._timer: Optional[QTimer] = None

    @property
    def pipeline(self) -> GesturePipeline:
        return self._pipeline

    def now(self) -> float:
        """Timestamp on the same clock the timeout is polled with."""
        return self._clock()

    def start_process(self):
        """Start polling the timeout. Call from the worker's thread."""
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.timeout.connect(self.poll)
        self._timer.start(self.POLL_INTERVAL_MS)

    def stop_process(self):
        """Stop polling and drop any running gesture."""
        if self._timer is not None:
            self._timer.stop()
        self._pipeline.cancel()

    def poll(self):
        try:
            self._pipeline.poll(self._clock())
        except Exception as e:
            logger.exception("Timeout handling failed")
            self.error.emit(f"Worker Exception: {str(e)}")

    def feed(self, sample: PointerSample) -> bool:
        """Process one sample. Returns True if its native action must be suppressed."""
        try:
            return self._pipeline.feed(sample)
        except Exception as e:
            logger.exception("Sample processing failed")
            self._pipeline.cancel()
            self.error.emit(f"Worker Exception: {str(e)}")
            return False

    def context_menu(self, sample: PointerSample) -> bool:
        return self._pipeline.handle_context_menu(sample)

    def click(self, sample: PointerSample) -> bool:
        return self._pipeline.handle_click(sample)

    def visibility_changed(self):
        self._pipeline.visibility_changed(self._clock())

    def apply_config(self, config: Config):
        self._config = config
        self._pipeline.apply_config(config)
