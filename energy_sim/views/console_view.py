"""Console renderers for the bench state (chart and GPIO grid counterparts)"""


def render_gpio_grid(states, columns=6):
    """
    Grid of pins, asserted pins marked with '*':

      [ 2 ] [ 3*] [ 4 ] ...
    """
    cells = [f"[{pin:>2}{'*' if on else ' '}]" for pin, on in states.items()]
    rows = [" ".join(cells[i:i + columns]) for i in range(0, len(cells), columns)]
    return "\n".join(rows)


def render_samples(samples, limit=10):
    """Table of the most recent samples"""
    lines = [f"  {'t (s)':>7}  {'V':>7}  {'I (mA)':>9}  {'P (mW)':>9}"]
    for s in samples[-limit:]:
        lines.append(f"  {s.time:>7.1f}  {s.voltage:>7.3f}  {s.current_ma:>9.3f}  {s.power_mw:>9.3f}")
    if len(lines) == 1:
        lines.append("  (no samples)")
    return "\n".join(lines)


class LatestSampleView:
    """Prints the newest sample every `every` ticks."""

    def __init__(self, every=10):
        self.every = max(1, int(every))
        self._count = 0

    def __call__(self, controller):
        self._count += 1
        if self._count % self.every:
            return
        sample = controller.history.latest()
        if sample is None:
            return
        print(f"[PWR] t={sample.time:.1f}s  V={sample.voltage:.3f}  "
              f"I={sample.current_ma:.3f} mA  P={sample.power_mw:.3f} mW")
