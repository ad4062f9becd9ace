"""
Ohm's law model for the energy bench.

    I = V / R      (amperes)
    P = V * I      (watts)

The model does not guard resistance; callers keep R > 0 through the input
range of the controller.
"""


def current(voltage: float, resistance: float) -> float:
    """Current in amperes through a resistance at the given voltage."""
    return voltage / resistance


def power(voltage: float, current_a: float) -> float:
    """Power in watts: P = V * I."""
    return voltage * current_a


def ohms_law(voltage: float, resistance: float):
    """Return (current_a, power_w) for voltage V across resistance R."""
    i = current(voltage, resistance)
    return i, power(voltage, i)


def ideal_readout(voltage: float, resistance: float):
    """
    Noiseless readout shown next to the sliders.

    Returns (current_ma, power_mw), rounded to one decimal like the panel.
    """
    current_a, power_w = ohms_law(voltage, resistance)
    return round(current_a * 1000, 1), round(power_w * 1000, 1)
