from energy_sim.controllers.energy_controller import EnergyController

__all__ = ['EnergyController']
