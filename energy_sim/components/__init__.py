from energy_sim.components.base import BaseComponent
from energy_sim.components.gpio_bank import GpioBank
from energy_sim.components.history_buffer import HistoryBuffer, Sample

__all__ = [
    'BaseComponent',
    'GpioBank',
    'HistoryBuffer',
    'Sample',
]
