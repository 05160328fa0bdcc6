import pytest
from src.gestures.rocker import RockerController, RockerListener
from src.gestures.wheel import WheelController, WheelListener
from src.gestures.pointer import PointerSample, SampleKind
from src.gestures.config import WheelConfig
from src.gestures.types import MouseButton

LEFT, RIGHT, MIDDLE = 1, 2, 4


class Recorder(RockerListener, WheelListener):
    def __init__(self):
        self.events = []

    def on_rocker_left(self, sample):
        self.events.append("rocker_left")

    def on_rocker_right(self, sample):
        self.events.append("rocker_right")

    def on_wheel_up(self, sample):
        self.events.append("wheel_up")

    def on_wheel_down(self, sample):
        self.events.append("wheel_down")


def press(buttons, button, t=0.0, trusted=True):
    return PointerSample(0, 0, buttons=buttons, timestamp=t, kind=SampleKind.PRESS,
                         button=button, trusted=trusted)


def release(button, t, buttons=0):
    return PointerSample(0, 0, buttons=buttons, timestamp=t, kind=SampleKind.RELEASE,
                         button=button)


def wheel(delta_y, buttons=LEFT, trusted=True):
    return PointerSample(0, 0, buttons=buttons, kind=SampleKind.WHEEL, delta_y=delta_y,
                         trusted=trusted)


def native(button, t=0.0, trusted=True):
    return PointerSample(0, 0, timestamp=t, button=button, trusted=trusted)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def rocker(recorder):
    return RockerController(recorder)


def test_rocker_left_and_right(rocker, recorder):
    # holding right, press left
    assert rocker.handle_press(press(LEFT | RIGHT, LEFT)) is True
    # holding left, press right
    assert rocker.handle_press(press(LEFT | RIGHT, RIGHT)) is True
    assert recorder.events == ["rocker_left", "rocker_right"]


def test_single_button_is_not_a_rocker(rocker, recorder):
    assert rocker.handle_press(press(RIGHT, RIGHT)) is False
    assert rocker.handle_press(press(LEFT | RIGHT, LEFT, trusted=False)) is False
    assert recorder.events == []


def test_rocker_suppresses_context_menu_until_next_press(rocker):
    rocker.handle_press(press(LEFT | RIGHT, LEFT))
    assert rocker.handle_context_menu(native(RIGHT)) is True
    assert rocker.handle_context_menu(native(LEFT)) is False

    rocker.handle_press(press(RIGHT, RIGHT))
    assert rocker.handle_context_menu(native(RIGHT)) is False


def test_rocker_suppresses_click_of_the_release(rocker):
    rocker.handle_press(press(LEFT | RIGHT, RIGHT))
    rocker.handle_release(release(LEFT, 1.0, buttons=RIGHT))

    assert rocker.handle_click(native(LEFT, 1.0)) is True
    # a click not produced by that release (keyboard activation)
    assert rocker.handle_click(native(LEFT, 2.0)) is False


def test_rocker_visibility_change_enables_suppression(rocker):
    rocker.handle_press(press(RIGHT, RIGHT))
    rocker.visibility_changed()
    assert rocker.handle_context_menu(native(RIGHT)) is True


@pytest.fixture
def wheel_controller(recorder):
    return WheelController(WheelConfig(active=True, mouse_button=MouseButton.LEFT,
                                       wheel_sensitivity=30), recorder)


def test_wheel_accumulates_to_sensitivity(wheel_controller, recorder):
    wheel_controller.handle_press(press(LEFT, LEFT))

    assert wheel_controller.handle_wheel(wheel(10)) is True
    assert wheel_controller.handle_wheel(wheel(10)) is True
    assert recorder.events == []

    wheel_controller.handle_wheel(wheel(10))
    assert recorder.events == ["wheel_down"]
    assert wheel_controller.accumulated_delta == 0

    wheel_controller.handle_wheel(wheel(-40))
    assert recorder.events == ["wheel_down", "wheel_up"]


def test_wheel_direction_flip_resets(wheel_controller, recorder):
    wheel_controller.handle_wheel(wheel(20))
    wheel_controller.handle_wheel(wheel(-20))

    assert recorder.events == []
    assert wheel_controller.accumulated_delta == -20


def test_wheel_needs_configured_button(wheel_controller, recorder):
    assert wheel_controller.handle_wheel(wheel(100, buttons=RIGHT)) is False
    assert wheel_controller.handle_wheel(wheel(100, trusted=False)) is False
    assert wheel_controller.handle_wheel(wheel(0)) is False
    assert recorder.events == []


def test_wheel_press_resets_accumulator(wheel_controller):
    wheel_controller.handle_wheel(wheel(20))
    wheel_controller.handle_press(press(LEFT, LEFT))
    assert wheel_controller.accumulated_delta == 0


def test_wheel_suppresses_click_after_scrolling(wheel_controller):
    wheel_controller.handle_press(press(LEFT, LEFT))
    wheel_controller.handle_wheel(wheel(40))
    wheel_controller.handle_release(release(LEFT, 1.0))

    assert wheel_controller.handle_click(native(LEFT, 1.0)) is True
    assert wheel_controller.handle_click(native(LEFT, 1.5)) is False

    # an ordinary click afterwards goes through
    wheel_controller.handle_press(press(LEFT, LEFT, 2.0))
    wheel_controller.handle_release(release(LEFT, 2.1))
    assert wheel_controller.handle_click(native(LEFT, 2.1)) is False


def test_middle_button_press_is_suppressed(recorder):
    controller = WheelController(WheelConfig(mouse_button=MouseButton.MIDDLE), recorder)
    assert controller.handle_press(press(MIDDLE, MIDDLE)) is True
    assert controller.handle_press(press(LEFT, LEFT)) is False


def test_right_button_wheel_suppresses_context_menu(recorder):
    controller = WheelController(WheelConfig(mouse_button=MouseButton.RIGHT), recorder)
    controller.handle_press(press(RIGHT, RIGHT))
    assert controller.handle_context_menu(native(RIGHT)) is False

    controller.handle_wheel(wheel(10, buttons=RIGHT))
    assert controller.handle_context_menu(native(RIGHT)) is True
