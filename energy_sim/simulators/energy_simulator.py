"""
Energy simulator - one tick of the bench.

Each step, in order:
  1. take the sample time from the clock, then advance the clock
  2. compute ideal current and power (Ohm's law)
  3. jitter voltage, current and power independently
  4. round to 3 decimals, current/power in mA / mW
  5. append the sample to the history (oldest evicted past capacity)
  6. pick one random pin; assert it when the draw exceeds the threshold
"""

from energy_sim.components.history_buffer import Sample
from energy_sim.simulators.noise import NoiseGenerator
from energy_sim.simulators.ohm_model import ohms_law


class RunState:
    STOPPED = 'STOPPED'
    RUNNING = 'RUNNING'


class SimulationContext:
    """
    Mutable simulation state owned by the controller.

    The clock is kept as a tick count so elapsed time reads 0.1, 0.2, ...
    without float drift.
    """

    def __init__(self, voltage, resistance, history, gpio, time_increment=0.1):
        self.voltage = voltage
        self.resistance = resistance
        self.history = history
        self.gpio = gpio
        self.time_increment = time_increment
        self.ticks = 0
        self.run_state = RunState.STOPPED

    @property
    def elapsed(self):
        return round(self.ticks * self.time_increment, 6)

    def clear(self):
        """Zero the clock and empty history and GPIO map"""
        self.ticks = 0
        self.history.clear()
        self.gpio.clear()


class EnergySimulator:
    """Applies ticks to a SimulationContext"""

    def __init__(self, context, settings, noise=None):
        self.context = context
        self.noise = noise if noise is not None else NoiseGenerator(seed=settings.get('seed'))
        self.voltage_noise = float(settings.get('voltage_noise', 0.1))
        self.current_noise = float(settings.get('current_noise', 0.05))
        self.power_noise = float(settings.get('power_noise', 0.05))
        self.gpio_threshold = float(settings.get('gpio_assert_threshold', 0.7))

    def step(self):
        ctx = self.context

        t = ctx.elapsed
        ctx.ticks += 1

        voltage = ctx.voltage
        current_a, power_w = ohms_law(voltage, ctx.resistance)

        noisy_voltage = self.noise.absolute(voltage, self.voltage_noise)
        noisy_current = self.noise.relative(current_a, self.current_noise)
        noisy_power = self.noise.relative(power_w, self.power_noise)

        sample = Sample(
            time=t,
            voltage=round(noisy_voltage, 3),
            current_ma=round(noisy_current * 1000, 3),
            power_mw=round(noisy_power * 1000, 3),
        )
        ctx.history.append(sample)

        self._flip_random_pin()
        return sample

    def _flip_random_pin(self):
        gpio = self.context.gpio
        rng = self.noise.rng
        pin = rng.choice(gpio.pins)
        gpio.write_random(pin, rng.random() > self.gpio_threshold)
        gpio.end_tick()
