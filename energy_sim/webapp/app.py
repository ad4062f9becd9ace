"""Web control panel API for the energy bench."""

from flask import Flask, Response, jsonify, request

from energy_sim.controllers import EnergyController
from energy_sim.export import CSV_FILENAME, CSV_MIMETYPE
from energy_sim.settings import load_settings


def create_app(controller=None):
    if controller is None:
        controller = EnergyController(load_settings())

    app = Flask(__name__)
    app.config["CONTROLLER"] = controller

    def _error(message, status):
        return jsonify({"ok": False, "error": message}), status

    @app.route("/api/status")
    def api_status():
        return jsonify(controller.get_status())

    @app.route("/api/history")
    def api_history():
        return jsonify([s.to_dict() for s in controller.history.samples()])

    @app.route("/api/gpio")
    def api_gpio():
        return jsonify({str(pin): on for pin, on in controller.gpio.snapshot().items()})

    @app.route("/api/start", methods=["POST"])
    def api_start():
        controller.start()
        return jsonify({"ok": True, "state": controller.run_state})

    @app.route("/api/pause", methods=["POST"])
    def api_pause():
        controller.pause()
        return jsonify({"ok": True, "state": controller.run_state})

    @app.route("/api/toggle", methods=["POST"])
    def api_toggle():
        return jsonify({"ok": True, "state": controller.toggle_running()})

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        controller.reset()
        return jsonify({"ok": True, "state": controller.run_state})

    @app.route("/api/params", methods=["POST"])
    def api_params():
        payload = request.get_json(silent=True) or {}
        try:
            if "voltage" in payload:
                controller.set_voltage(payload["voltage"])
            if "resistance" in payload:
                controller.set_resistance(payload["resistance"])
        except (TypeError, ValueError) as e:
            return _error(str(e), 400)
        return jsonify({
            "ok": True,
            "voltage": controller.voltage,
            "resistance": controller.resistance,
        })

    @app.route("/api/gpio/<int:pin>/toggle", methods=["POST"])
    def api_gpio_toggle(pin):
        try:
            state = controller.toggle_pin(pin)
        except ValueError as e:
            return _error(str(e), 404)
        return jsonify({"ok": True, "pin": pin, "state": state})

    @app.route("/api/export")
    def api_export():
        return Response(
            controller.csv_text(),
            mimetype=CSV_MIMETYPE,
            headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
        )

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
