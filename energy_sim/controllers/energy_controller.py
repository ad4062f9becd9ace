"""Energy bench controller - run state, parameters, GPIO and export"""

import functools
import threading
from pathlib import Path

from energy_sim.components import GpioBank, HistoryBuffer
from energy_sim.export import CSV_FILENAME, ExportError, export_csv, samples_to_csv
from energy_sim.mqtt_publisher import MQTTBatchPublisher
from energy_sim.simulators import (
    EnergySimulator,
    NoiseGenerator,
    RecurringTask,
    RunState,
    SimulationContext,
)
from energy_sim.simulators.ohm_model import ideal_readout
from energy_sim.views import render_gpio_grid, render_samples


class EnergyController:
    """
    Owns the simulation context and the tick task.

    State machine:
      STOPPED + start()  -> RUNNING  (tick task started)
      RUNNING + pause()  -> STOPPED  (tick task cancelled, state kept)
      any     + reset()  -> STOPPED  (clock, history and GPIO cleared)

    Parameters:
        settings      (dict)      - full settings (see settings.json)
        rng           (Random)    - random source for noise and GPIO flips
        task_factory  (callable)  - task_factory(interval, callback) -> task
        publisher                 - telemetry publisher, built from settings if None
    """

    def __init__(self, settings, rng=None, task_factory=RecurringTask, publisher=None):
        self.settings = settings
        self.sim_settings = settings.get('simulation', {})
        self.export_settings = settings.get('export', {})

        if publisher is None:
            publisher = MQTTBatchPublisher(settings.get('mqtt', {}), settings.get('device', {}))
        self.publisher = publisher

        self.history = HistoryBuffer(self.sim_settings, self.publisher)
        self.gpio = GpioBank(settings.get('gpio', {}), self.publisher)

        self.context = SimulationContext(
            voltage=float(self.sim_settings.get('voltage', 3.3)),
            resistance=float(self.sim_settings.get('resistance', 1000)),
            history=self.history,
            gpio=self.gpio,
            time_increment=float(self.sim_settings.get('time_increment', 0.1)),
        )
        noise = NoiseGenerator(rng=rng, seed=self.sim_settings.get('seed'))
        self.simulator = EnergySimulator(self.context, self.sim_settings, noise)

        self.tick_interval = float(self.sim_settings.get('tick_interval', 0.1))
        self._task_factory = task_factory
        self._task = None
        self._generation = 0
        self._lock = threading.RLock()
        self._views = []

        self.publisher.start()

    # ========== RUN STATE ==========

    @property
    def run_state(self):
        return self.context.run_state

    def is_running(self):
        return self.context.run_state == RunState.RUNNING

    def start(self):
        with self._lock:
            if self.is_running():
                return
            self.context.run_state = RunState.RUNNING
            self._generation += 1
            callback = functools.partial(self._on_tick, self._generation)
            self._task = self._task_factory(self.tick_interval, callback)
            self._task.start()
            started = self.is_running()
        if started:
            print("[SIM] Simulation RUNNING")

    def pause(self):
        if self._stop_task():
            print("[SIM] Simulation PAUSED")

    def toggle_running(self):
        """Start when stopped, pause when running. Returns the new state."""
        if self.is_running():
            self.pause()
        else:
            self.start()
        return self.run_state

    def reset(self):
        self._stop_task(clear=True)
        print("[SIM] Simulation RESET")

    def _stop_task(self, clear=False):
        """
        Stop ticking, optionally clearing clock, history and GPIO in the same
        locked section. Returns True if the simulation was running.
        """
        with self._lock:
            was_running = self.is_running()
            self.context.run_state = RunState.STOPPED
            if clear:
                self.context.clear()
            self._generation += 1
            task, self._task = self._task, None
        # Cancelled outside the lock: an in-flight tick may be waiting on it.
        if task is not None:
            task.cancel()
        return was_running

    # ========== TICKS ==========

    def _on_tick(self, generation):
        return self.tick(generation)

    def tick(self, generation=None):
        """
        Apply one tick if the simulation is running.
        Returns the recorded Sample, or None when nothing was applied.
        """
        with self._lock:
            if not self.is_running():
                return None
            if generation is not None and generation != self._generation:
                return None
            sample = self.simulator.step()
            views = list(self._views)
        self._notify(views)
        return sample

    def attach_view(self, view):
        """Register a callable view(controller) notified after each tick."""
        with self._lock:
            if view not in self._views:
                self._views.append(view)

    def detach_view(self, view):
        with self._lock:
            if view in self._views:
                self._views.remove(view)

    def _notify(self, views):
        for view in views:
            try:
                view(self)
            except Exception as e:
                print(f"[VIEW] {getattr(view, '__name__', type(view).__name__)} failed, detached: {e}")
                self.detach_view(view)

    # ========== PARAMETERS ==========

    @property
    def voltage(self):
        return self.context.voltage

    @property
    def resistance(self):
        return self.context.resistance

    def set_voltage(self, value):
        value = self._check_range(
            'voltage', value,
            self.sim_settings.get('voltage_min', 1.8),
            self.sim_settings.get('voltage_max', 5.0),
        )
        with self._lock:
            self.context.voltage = value

    def set_resistance(self, value):
        value = self._check_range(
            'resistance', value,
            self.sim_settings.get('resistance_min', 100),
            self.sim_settings.get('resistance_max', 10000),
        )
        with self._lock:
            self.context.resistance = value

    @staticmethod
    def _check_range(name, value, low, high):
        value = float(value)
        if not low <= value <= high:
            raise ValueError(f"{name} must be between {low} and {high}, got {value}")
        return value

    # ========== GPIO ==========

    def toggle_pin(self, pin):
        return self.gpio.toggle(int(pin))

    def set_pin(self, pin, value):
        self.gpio.write(int(pin), value)

    # ========== EXPORT ==========

    def csv_text(self):
        return samples_to_csv(self.history.samples())

    def default_export_path(self):
        directory = self.export_settings.get('directory', '.')
        return Path(directory) / self.export_settings.get('filename', CSV_FILENAME)

    def export(self, path=None):
        """
        Write the history as CSV. Returns the written path, or None if the
        export failed; simulation state is never affected.
        """
        target = path if path is not None else self.default_export_path()
        try:
            written = export_csv(self.history.samples(), target)
        except ExportError as e:
            print(f"[EXPORT] {e}")
            return None
        print(f"[EXPORT] {len(self.history)} samples -> {written}")
        return written

    # ========== STATUS ==========

    def get_status(self):
        with self._lock:
            latest = self.history.latest()
            current_ma, power_mw = ideal_readout(self.context.voltage, self.context.resistance)
            return {
                "state": self.context.run_state,
                "time": self.context.elapsed,
                "voltage": self.context.voltage,
                "resistance": self.context.resistance,
                "ideal_current_ma": current_ma,
                "ideal_power_mw": power_mw,
                "samples": len(self.history),
                "latest": latest.to_dict() if latest else None,
                "gpio_active": self.gpio.active_pins(),
            }

    def show_status(self):
        """Print status to console"""
        status = self.get_status()
        print("\n" + "=" * 44)
        print("ENERGY BENCH STATUS")
        print("=" * 44)
        print(f"  State:       {status['state']}")
        print(f"  Time:        {status['time']:.1f} s")
        print(f"  Voltage:     {status['voltage']:.1f} V")
        print(f"  Resistance:  {status['resistance']:.0f} Ohm")
        print(f"  Current:     {status['ideal_current_ma']:.1f} mA")
        print(f"  Power:       {status['ideal_power_mw']:.1f} mW")
        print(f"  Samples:     {status['samples']}")
        active = status['gpio_active']
        print(f"  GPIO high:   {', '.join(str(p) for p in active) if active else '-'}")
        print("=" * 44)

    # ========== COMMANDS ==========

    def handle_command(self, cmd):
        """Handle a CLI command. Returns None for unknown commands."""

        if cmd == 's':
            self.show_status()
        elif cmd == '1':
            self.toggle_running()
        elif cmd == '2':
            self.reset()
        elif cmd == '3':
            self.export()
        elif cmd == 'v':
            self.set_voltage(input("Voltage (1.8-5.0 V): ").strip())
            print(f"[SIM] Voltage: {self.voltage:.1f} V")
        elif cmd == 'r':
            self.set_resistance(input("Resistance (100-10000 Ohm): ").strip())
            print(f"[SIM] Resistance: {self.resistance:.0f} Ohm")
        elif cmd == 'p':
            pin = int(input("Pin (2-27): ").strip())
            state = self.toggle_pin(pin)
            print(f"[GPIO] Pin {pin}: {'HIGH' if state else 'LOW'}")
        elif cmd == 'g':
            print(render_gpio_grid(self.gpio.snapshot()))
        elif cmd == 'c':
            print(render_samples(self.history.samples()))
        else:
            return None

        return True

    def cleanup(self):
        """Stop ticking and release the publisher"""
        self._stop_task()
        self.history.cleanup()
        self.gpio.cleanup()
        self.publisher.stop()
