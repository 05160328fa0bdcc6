import pytest
from src.gestures.pointer import MachineState, PointerSample, PointerStateMachine, SampleKind
from src.gestures.suppression import EventSuppressor
from src.gestures.config import GestureConfig

RIGHT = 2


def press(x, y, t):
    return PointerSample(x, y, buttons=RIGHT, timestamp=t, kind=SampleKind.PRESS, button=RIGHT)


def move(x, y, t):
    return PointerSample(x, y, buttons=RIGHT, timestamp=t)


def release(x, y, t):
    return PointerSample(x, y, buttons=0, timestamp=t, kind=SampleKind.RELEASE, button=RIGHT)


def native(x, y, t, trusted=True):
    """A contextmenu / click notification from the host."""
    return PointerSample(x, y, timestamp=t, trusted=trusted, button=RIGHT)


@pytest.fixture
def linux():
    return PointerStateMachine(GestureConfig(), platform="linux")


@pytest.fixture
def windows():
    return PointerStateMachine(GestureConfig(), platform="win")


def test_linux_context_menu_suppressed_during_cycle(linux):
    assert linux.handle_context_menu(native(0, 0, 0.0)) is False

    linux.feed(press(0, 0, 0.0))
    assert linux.handle_context_menu(native(0, 0, 0.0)) is True
    assert linux.handle_context_menu(native(0, 0, 0.0, trusted=False)) is False


def test_linux_double_click_lets_menu_through(linux):
    linux.feed(press(0, 0, 0.0))
    assert linux.handle_context_menu(native(0, 0, 0.0)) is True
    linux.feed(release(0, 0, 0.05))

    linux.feed(press(1, 1, 0.1))
    assert linux.handle_context_menu(native(1, 1, 0.1)) is False
    assert linux.state == MachineState.PASSIVE


def test_linux_slow_or_distant_second_click_is_suppressed(linux):
    linux.feed(press(0, 0, 0.0))
    linux.handle_context_menu(native(0, 0, 0.0))
    linux.feed(release(0, 0, 0.05))

    linux.feed(press(50, 50, 0.1))
    assert linux.handle_context_menu(native(50, 50, 0.1)) is True
    linux.feed(release(50, 50, 0.15))

    linux.feed(press(50, 50, 0.5))
    assert linux.handle_context_menu(native(50, 50, 0.5)) is True


def test_linux_clicks_suppressed_only_while_active(linux):
    linux.feed(press(0, 0, 0.0))
    assert linux.handle_click(native(0, 0, 0.0)) is False

    linux.feed(move(30, 0, 0.1))
    assert linux.handle_click(native(30, 0, 0.1)) is True

    linux.feed(release(30, 0, 0.2))
    assert linux.handle_click(native(30, 0, 0.2)) is False


def test_windows_keeps_suppressing_after_release(windows):
    windows.feed(press(0, 0, 0.0))
    windows.feed(move(30, 0, 0.1))
    assert windows.handle_click(native(30, 0, 0.2)) is True

    windows.feed(release(30, 0, 1.0))
    assert windows.handle_context_menu(native(30, 0, 1.1)) is True
    assert windows.handle_context_menu(native(30, 0, 1.25)) is False
    assert windows.handle_click(native(30, 0, 1.3)) is False


def test_windows_plain_click_keeps_menu(windows):
    windows.feed(press(0, 0, 0.0))
    windows.feed(release(0, 0, 0.1))
    assert windows.handle_context_menu(native(0, 0, 0.1)) is False


def test_new_gesture_cancels_windows_release_delay():
    suppressor = EventSuppressor("win")
    suppressor.begin()
    suppressor.enable()
    suppressor.release(1.0)
    assert suppressor.suppress_click(1.1) is True

    suppressor.begin()
    suppressor.enable()
    # the earlier release deadline no longer applies
    assert suppressor.suppress_click(5.0) is True
