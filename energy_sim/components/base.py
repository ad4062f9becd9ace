"""Base component class for the simulated bench components"""

import time


class BaseComponent:
    """
    Base class for bench components.
    Handles publish logic so each component owns its own telemetry.
    """

    def __init__(self, code, settings, publisher=None):
        self.code = code
        self.settings = settings
        self.publish_enabled = settings.get('publish', True)
        self._publisher = publisher

    def _publish(self, value, source='sensor', sensor=None, extra=None):
        """Internal publish - builds payload and enqueues it"""
        if not self.publish_enabled or self._publisher is None:
            return
        device_id = self._publisher.device_info.get('id', 'UNKNOWN')
        payload = {
            'device': device_id,
            'source': source,
            'sensor': sensor or self.code,
            'value': value,
            'simulated': True,
            'ts': time.time()
        }
        if extra:
            payload.update(extra)
        self._publisher.enqueue(payload)

    def _publish_sensor(self, value, sensor=None, extra=None):
        """Publish a sensor reading"""
        self._publish(value, 'sensor', sensor, extra)

    def _publish_actuator(self, value, sensor=None, extra=None):
        """Publish an actuator state change"""
        self._publish(value, 'actuator', sensor, extra)

    def cleanup(self):
        """Stop publishing; the component keeps its state"""
        self._publisher = None
