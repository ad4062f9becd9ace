import copy
import random

import pytest

from energy_sim.controllers import EnergyController
from energy_sim.settings import load_settings


class ManualTask:
    """Stand-in for RecurringTask; ticks only when fire() is called."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self, timeout=1.0):
        self.cancelled = True

    def fire(self, times=1):
        for _ in range(times):
            if self.started and not self.cancelled:
                self.callback()


class ScriptedRandom:
    """Random source returning scripted draws and a fixed pin choice."""

    def __init__(self, values=(0.5,), pin=13):
        self.values = list(values)
        self.pin = pin
        self._i = 0

    def random(self):
        value = self.values[self._i % len(self.values)]
        self._i += 1
        return value

    def choice(self, seq):
        return self.pin if self.pin in seq else seq[0]


class RecordingPublisher:
    def __init__(self):
        self.device_info = {'id': 'TEST'}
        self.items = []

    def enqueue(self, item):
        self.items.append(item)

    def start(self):
        pass

    def stop(self):
        pass


@pytest.fixture
def settings():
    return copy.deepcopy(load_settings())


@pytest.fixture
def tasks():
    return []


@pytest.fixture
def make_controller(settings, tasks):
    def factory(rng=None, **overrides):
        def task_factory(interval, callback):
            task = ManualTask(interval, callback)
            tasks.append(task)
            return task

        if rng is None:
            rng = random.Random(1234)
        return EnergyController(settings, rng=rng, task_factory=task_factory, **overrides)

    return factory


@pytest.fixture
def controller(make_controller):
    return make_controller()
