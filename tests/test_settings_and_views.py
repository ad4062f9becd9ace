import json

from energy_sim.components import Sample
from energy_sim.mqtt_publisher import MQTTBatchPublisher
from energy_sim.settings import load_settings
from energy_sim.views import LatestSampleView, render_gpio_grid, render_samples


def test_default_settings():
    settings = load_settings()
    sim = settings["simulation"]
    assert sim["voltage"] == 3.3
    assert sim["resistance"] == 1000
    assert sim["history_capacity"] == 100
    assert settings["gpio"]["pins"] == list(range(2, 28))
    assert settings["export"]["filename"] == "energy_simulation_data.csv"
    assert settings["mqtt"]["enabled"] is False


def test_load_settings_from_absolute_path(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"simulation": {"voltage": 5.0}}))
    assert load_settings(str(path)) == {"simulation": {"voltage": 5.0}}


def test_disabled_publisher_drops_items():
    publisher = MQTTBatchPublisher({"enabled": False}, {"id": "PI"})
    publisher.start()
    publisher.enqueue({"value": 1})
    publisher.stop()
    assert not publisher.enabled


def test_gpio_grid_marks_asserted_pins():
    states = {pin: pin == 13 for pin in range(2, 28)}
    grid = render_gpio_grid(states)
    rows = grid.split("\n")
    assert len(rows) == 5
    assert "[13*]" in grid
    assert "[ 2 ]" in rows[0]


def test_render_samples():
    assert "(no samples)" in render_samples([])
    table = render_samples([Sample(0.1 * i, 3.3, 3.3, 10.89) for i in range(20)], limit=5)
    assert len(table.split("\n")) == 6


def test_latest_sample_view_prints_every_n(controller, tasks, capsys):
    controller.attach_view(LatestSampleView(every=2))
    controller.start()
    capsys.readouterr()
    tasks[0].fire(4)
    out = capsys.readouterr().out
    assert out.count("[PWR]") == 2
