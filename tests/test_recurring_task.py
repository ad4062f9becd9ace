import threading
import time

from energy_sim.controllers import EnergyController
from energy_sim.simulators import RecurringTask


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_fires_until_cancelled():
    calls = []
    task = RecurringTask(0.01, lambda: calls.append(1))
    task.start()
    assert _wait_for(lambda: len(calls) >= 3)

    task.cancel()
    count = len(calls)
    time.sleep(0.05)
    assert len(calls) == count
    assert not task.is_alive()


def test_cancel_waits_for_in_flight_tick():
    entered = threading.Event()
    finished = []

    def slow():
        entered.set()
        time.sleep(0.05)
        finished.append(True)

    task = RecurringTask(0.01, slow)
    task.start()
    assert entered.wait(2.0)
    task.cancel()
    assert finished
    count = len(finished)
    time.sleep(0.05)
    assert len(finished) == count


def test_cancelled_task_stays_stopped():
    calls = []
    task = RecurringTask(0.01, lambda: calls.append(1))
    task.cancel()
    task.start()
    time.sleep(0.05)
    assert task.cancelled
    assert not task.is_alive()
    assert calls == []


def test_cancel_from_inside_callback():
    calls = []

    def once():
        calls.append(1)
        task.cancel()

    task = RecurringTask(0.01, once)
    task.start()
    assert _wait_for(lambda: not task.is_alive())
    assert calls == [1]


def test_controller_with_real_timer(settings):
    settings['simulation']['tick_interval'] = 0.01
    ctrl = EnergyController(settings)
    ctrl.start()
    assert _wait_for(lambda: len(ctrl.history) >= 5)

    ctrl.pause()
    count = len(ctrl.history)
    time.sleep(0.05)
    assert len(ctrl.history) == count

    ctrl.start()
    assert _wait_for(lambda: len(ctrl.history) > count)
    ctrl.reset()
    time.sleep(0.05)
    assert len(ctrl.history) == 0
    assert ctrl.context.elapsed == 0
    ctrl.cleanup()


def test_pause_while_task_starting_wins(settings):
    ctrl = None

    class PausedOnStart(RecurringTask):
        def start(self):
            ctrl.pause()
            super().start()

    settings['simulation']['tick_interval'] = 0.01
    ctrl = EnergyController(settings, task_factory=PausedOnStart)
    ctrl.start()
    time.sleep(0.05)

    assert not ctrl.is_running()
    assert len(ctrl.history) == 0

    ctrl.start()
    assert ctrl.is_running() is False
    ctrl.cleanup()


def test_concurrent_start_and_pause_never_raise(settings):
    settings['simulation']['tick_interval'] = 0.005
    ctrl = EnergyController(settings)
    errors = []

    def hammer(action):
        try:
            for _ in range(200):
                action()
        except Exception as e:
            errors.append(e)

    threads = [
        threading.Thread(target=hammer, args=(ctrl.start,)),
        threading.Thread(target=hammer, args=(ctrl.pause,)),
        threading.Thread(target=hammer, args=(ctrl.reset,)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    ctrl.reset()
    time.sleep(0.03)
    assert errors == []
    assert not ctrl.is_running()
    assert len(ctrl.history) == 0
    ctrl.cleanup()
