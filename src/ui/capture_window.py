"""
Capture window - turns Qt mouse events into pointer samples.
"""
from PyQt5.QtWidgets import QMainWindow, QLabel
from PyQt5.QtCore import Qt, QEvent
from PyQt5.QtGui import QMouseEvent, QWheelEvent

from gestures.pointer import PointerSample, SampleKind
from gestures.worker import GestureEvent, GestureWorker

# Qt reports LeftButton=1, RightButton=2, MiddleButton=4, matching the sample masks
BUTTON_MASK = 0x7
# Qt angle delta is 120 per notch; a sensitivity of 30 then fires once per notch
WHEEL_DELTA_SCALE = 0.25


class CaptureWindow(QMainWindow):
    """
    Window that forwards its mouse input to a GestureWorker.

    Native behaviour (context menu, clicks) is swallowed whenever the
    worker says so. The recognized gesture is shown as status text.
    """

    def __init__(self, worker: GestureWorker, parent=None):
        super().__init__(parent)
        self._worker = worker

        self.setWindowTitle("MouseGest")
        self.resize(800, 600)

        self._status = QLabel("Hold the gesture button and draw", self)
        self._status.setAlignment(Qt.AlignCenter)
        self._status.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.setCentralWidget(self._status)

        worker.gesture_started.connect(lambda: self._set_status("..."))
        worker.gesture_changed.connect(self._show_live)
        worker.gesture_matched.connect(self._show_result)
        worker.gesture_aborted.connect(lambda: self._set_status("Aborted"))
        worker.rocker_event.connect(lambda command: self._set_status(f"Rocker: {command}"))
        worker.wheel_event.connect(lambda command: self._set_status(f"Wheel: {command}"))

    def _set_status(self, text: str):
        self._status.setText(text)

    def _show_live(self, event: GestureEvent):
        self._set_status(event.label or "...")

    def _show_result(self, event: GestureEvent):
        self._set_status(event.label or "No matching gesture")

    def _sample(self, event, kind: SampleKind, button: int = 0,
                delta_y: float = 0.0) -> PointerSample:
        modifiers = event.modifiers()
        pos = event.pos()
        return PointerSample(
            x=float(pos.x()),
            y=float(pos.y()),
            buttons=int(event.buttons()) & BUTTON_MASK,
            timestamp=self._worker.now(),
            trusted=event.spontaneous(),
            kind=kind,
            button=button,
            alt_key=bool(modifiers & Qt.AltModifier),
            ctrl_key=bool(modifiers & Qt.ControlModifier),
            shift_key=bool(modifiers & Qt.ShiftModifier),
            delta_y=delta_y,
        )

    def mousePressEvent(self, event: QMouseEvent):
        sample = self._sample(event, SampleKind.PRESS, int(event.button()) & BUTTON_MASK)
        if self._worker.feed(sample) or self._worker.click(sample):
            event.accept()
            return
        super().mousePressEvent(event)

    # Qt delivers the second press of a double click here instead
    mouseDoubleClickEvent = mousePressEvent

    def mouseMoveEvent(self, event: QMouseEvent):
        self._worker.feed(self._sample(event, SampleKind.MOVE))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        button = int(event.button()) & BUTTON_MASK
        remaining = int(event.buttons()) & BUTTON_MASK
        kind = SampleKind.RELEASE if remaining == 0 else SampleKind.MOVE
        sample = self._sample(event, kind, button)
        self._worker.feed(sample)
        if self._worker.click(sample):
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        delta_y = -event.angleDelta().y() * WHEEL_DELTA_SCALE
        sample = self._sample(event, SampleKind.WHEEL, delta_y=delta_y)
        if self._worker.feed(sample):
            event.accept()
            return
        super().wheelEvent(event)

    def contextMenuEvent(self, event):
        pos = event.pos()
        sample = PointerSample(
            x=float(pos.x()),
            y=float(pos.y()),
            timestamp=self._worker.now(),
            trusted=event.spontaneous(),
            button=int(Qt.RightButton),
        )
        if self._worker.context_menu(sample):
            event.accept()
            return
        super().contextMenuEvent(event)

    def changeEvent(self, event):
        if event.type() == QEvent.ActivationChange and not self.isActiveWindow():
            self._worker.visibility_changed()
        super().changeEvent(event)

    def hideEvent(self, event):
        self._worker.visibility_changed()
        super().hideEvent(event)
