from energy_sim.views.console_view import LatestSampleView, render_gpio_grid, render_samples

__all__ = [
    'LatestSampleView',
    'render_gpio_grid',
    'render_samples',
]
