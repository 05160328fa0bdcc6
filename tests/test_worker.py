import pytest
from PyQt5.QtCore import QCoreApplication
from src.gestures.worker import GestureWorker
from src.gestures.replay import samples_from_points
from src.gestures.config import Config


@pytest.fixture(scope="module")
def app():
    return QCoreApplication.instance() or QCoreApplication([])


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def worker(app, clock):
    config = Config()
    config.system.platform = "linux"
    config.gesture.timeout.active = True
    return GestureWorker(config, clock=clock)


def test_worker_emits_match(worker):
    started, changed, matched = [], [], []
    worker.gesture_started.connect(lambda: started.append(True))
    worker.gesture_changed.connect(changed.append)
    worker.gesture_matched.connect(matched.append)

    for sample in samples_from_points([(-x, 0) for x in range(0, 201, 20)]):
        worker.feed(sample)

    assert started == [True]
    assert changed
    assert len(matched) == 1
    assert matched[0].pattern == [(-200, 0)]
    assert matched[0].label == "NewTab"


def test_worker_poll_fires_timeout(worker, clock):
    aborted = []
    worker.gesture_aborted.connect(lambda: aborted.append(True))

    samples = samples_from_points([(x, 0) for x in range(0, 101, 20)])
    for sample in samples[:-1]:
        worker.feed(sample)

    clock.now = samples[-2].timestamp + 0.5
    worker.poll()
    assert aborted == []

    clock.now = samples[-2].timestamp + 2.0
    worker.poll()
    assert aborted == [True]


def test_worker_reports_processing_errors(worker, monkeypatch):
    errors = []
    worker.error.connect(errors.append)

    def fail(sample):
        raise RuntimeError("bad sample")

    monkeypatch.setattr(worker.pipeline.machine, "feed", fail)
    sample = samples_from_points([(0, 0)])[0]

    assert worker.feed(sample) is False
    assert len(errors) == 1
    assert "bad sample" in errors[0]
