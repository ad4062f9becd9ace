"""Power meter history - PWR"""

import threading
from collections import deque
from dataclasses import asdict, dataclass

from energy_sim.components.base import BaseComponent


@dataclass(frozen=True)
class Sample:
    time: float
    voltage: float
    current_ma: float
    power_mw: float

    def to_dict(self):
        return asdict(self)


class HistoryBuffer(BaseComponent):
    """
    Sliding window of the most recent samples, oldest first.
    Appending past capacity evicts from the front.
    """

    def __init__(self, settings, publisher=None):
        super().__init__('PWR', settings, publisher)
        self.capacity = int(settings.get('history_capacity', 100))
        self._samples = deque(maxlen=self.capacity)
        self._lock = threading.Lock()

    def append(self, sample):
        with self._lock:
            self._samples.append(sample)
        self._publish_sensor(sample.to_dict())

    def samples(self):
        """Copy of the buffer in chronological order"""
        with self._lock:
            return list(self._samples)

    def latest(self):
        with self._lock:
            return self._samples[-1] if self._samples else None

    def clear(self):
        with self._lock:
            self._samples.clear()

    def __len__(self):
        with self._lock:
            return len(self._samples)
