from energy_sim.simulators.energy_simulator import EnergySimulator, RunState, SimulationContext
from energy_sim.simulators.noise import NoiseGenerator
from energy_sim.simulators.recurring_task import RecurringTask

__all__ = [
    'EnergySimulator',
    'NoiseGenerator',
    'RecurringTask',
    'RunState',
    'SimulationContext',
]
