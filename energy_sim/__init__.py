"""Raspberry Pi energy bench simulation"""

__version__ = "0.1.0"
