"""Step counting and dead reckoning from wrist-worn motion sensor data."""

__version__ = "0.1.0"