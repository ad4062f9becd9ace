"""
Telemetry publisher for the energy bench.

Components enqueue PWR samples and GPIO changes; a background process
groups them into one JSON message per batch:

  {"device": "PI-ENERGY", "batch": true,
   "samples": [{"time": 0, "voltage": 3.3, ...}, ...],
   "gpio": {"13": true, "4": false}}

A batch is flushed once it holds `samples_per_batch` ticks, after
`batch_interval` seconds, or on stop. GPIO changes keep only the last state
per pin within a batch.
"""

import json
import time
import queue
import multiprocessing

import paho.mqtt.client as mqtt

STOP = "__STOP__"


def _default_client():
    return mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)


class TelemetryBatch:
    """Accumulates queued items until the next flush"""

    def __init__(self, device_id):
        self.device_id = device_id
        self.samples = []
        self.gpio = {}

    def add(self, item):
        sensor = item.get("sensor", "")
        if sensor == "PWR":
            self.samples.append(item["value"])
        elif sensor.startswith("GPIO"):
            self.gpio[sensor[len("GPIO"):]] = item["value"]

    def __len__(self):
        return len(self.samples)

    def is_empty(self):
        return not self.samples and not self.gpio

    def payload(self):
        return {
            "device": self.device_id,
            "batch": True,
            "samples": self.samples,
            "gpio": self.gpio,
        }


def _publisher_process(config, device_info, q, client_factory=_default_client):
    host = config.get("host", "localhost")
    port = int(config.get("port", 1883))
    username = config.get("username")
    password = config.get("password")
    topic = config.get("topic", "energy/telemetry")
    qos = int(config.get("qos", 1))
    batch_interval = float(config.get("batch_interval", 2.0))
    samples_per_batch = int(config.get("samples_per_batch", 10))

    client = client_factory()
    if username:
        client.username_pw_set(username, password)

    try:
        client.connect(host, port, 60)
    except OSError as exc:
        print(f"[MQTT] Connection failed: {exc}")
        return

    client.loop_start()

    device_id = device_info.get("id")
    batch = TelemetryBatch(device_id)
    last_flush = time.monotonic()

    def flush():
        nonlocal batch, last_flush
        if not batch.is_empty():
            client.publish(topic, json.dumps(batch.payload()), qos=qos)
        batch = TelemetryBatch(device_id)
        last_flush = time.monotonic()

    try:
        while True:
            try:
                item = q.get(timeout=0.2)
            except queue.Empty:
                item = None

            if item == STOP:
                flush()
                break

            if item is not None:
                batch.add(item)

            if len(batch) >= samples_per_batch:
                flush()
            elif time.monotonic() - last_flush >= batch_interval:
                flush()
    finally:
        client.loop_stop()
        client.disconnect()


class MQTTBatchPublisher:
    """
    Queues telemetry and publishes it from a separate process.
    Disabled publishers accept and drop everything; a full queue drops the
    newest item.
    """

    def __init__(self, config, device_info):
        self.config = config or {}
        self.device_info = device_info or {}
        self.enabled = bool(self.config.get("enabled", False))
        size = int(self.config.get("queue_size", 1000))
        self._queue = multiprocessing.Queue(maxsize=size) if self.enabled else None
        self._process = None

    def start(self):
        if not self.enabled or self._process is not None:
            return
        self._process = multiprocessing.Process(
            target=_publisher_process,
            args=(self.config, self.device_info, self._queue),
            daemon=True
        )
        self._process.start()
        print(f"[MQTT] Publishing to {self.config.get('host', 'localhost')} "
              f"topic {self.config.get('topic', 'energy/telemetry')}")

    def enqueue(self, item):
        if not self.enabled:
            return
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            pass

    def stop(self):
        if self._process and self._process.is_alive():
            try:
                self._queue.put_nowait(STOP)
            except queue.Full:
                pass
            self._process.join(timeout=2)
        self._process = None
