"""Simulated GPIO header - GPIO"""

import threading

from energy_sim.components.base import BaseComponent

DEFAULT_PINS = list(range(2, 28))


class GpioBank(BaseComponent):
    """
    Simulated GPIO pins (BCM 2..27), each a plain boolean.

    Entries are created on first write; a pin that was never written reads
    False. Manual writes win over the simulator's random write in the next tick.
    """

    def __init__(self, settings, publisher=None):
        super().__init__('GPIO', settings, publisher)
        self.pins = list(settings.get('pins', DEFAULT_PINS))
        self._states = {}
        self._manual = set()
        self._lock = threading.Lock()

    def _check_pin(self, pin):
        if pin not in self.pins:
            raise ValueError(f"Unknown GPIO pin: {pin}")

    # ========== READ ==========

    def read(self, pin):
        self._check_pin(pin)
        with self._lock:
            return self._states.get(pin, False)

    def snapshot(self):
        """All pins with their current state"""
        with self._lock:
            return {pin: self._states.get(pin, False) for pin in self.pins}

    def active_pins(self):
        with self._lock:
            return [pin for pin in self.pins if self._states.get(pin, False)]

    def __len__(self):
        with self._lock:
            return len(self._states)

    # ========== USER WRITES ==========

    def write(self, pin, value):
        """Manual write; last write wins."""
        self._check_pin(pin)
        value = bool(value)
        with self._lock:
            self._states[pin] = value
            self._manual.add(pin)
        self._publish_actuator(value, sensor=f"GPIO{pin}", extra={'origin': 'user'})

    def toggle(self, pin):
        """Flip a pin and return its new state"""
        self._check_pin(pin)
        with self._lock:
            value = not self._states.get(pin, False)
            self._states[pin] = value
            self._manual.add(pin)
        self._publish_actuator(value, sensor=f"GPIO{pin}", extra={'origin': 'user'})
        return value

    # ========== SIMULATOR WRITES ==========

    def end_tick(self):
        """Forget manual writes once a tick has applied."""
        with self._lock:
            self._manual.clear()

    def write_random(self, pin, value):
        """
        Simulator write. Skipped when the user touched the pin since the
        last end_tick(). Returns True if the write was applied.
        """
        self._check_pin(pin)
        value = bool(value)
        with self._lock:
            if pin in self._manual:
                return False
            self._states[pin] = value
        self._publish_actuator(value, sensor=f"GPIO{pin}", extra={'origin': 'simulator'})
        return True

    def clear(self):
        with self._lock:
            self._states.clear()
            self._manual.clear()
