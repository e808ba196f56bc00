"""Streaming peak-based step counter on accelerometer magnitude."""

from __future__ import annotations

import math
from dataclasses import dataclass

SAMPLE_RATE_HZ = 52
MIN_STEP_GAP = 10  # ~200 ms at 52 Hz
DEFAULT_THRESHOLD = 1.0
_INITIAL_LAST_STEP = -999


@dataclass
class OxfordStepCounter:
    """Detects a step when the previous magnitude is a local peak above threshold."""

    threshold: float = DEFAULT_THRESHOLD
    prev_mag: float = 0.0
    prev_mag2: float = 0.0
    last_step_index: int = _INITIAL_LAST_STEP
    sample_index: int = 0
    step_count: int = 0

    def reset(self) -> None:
        """Return to the initial state."""
        self.threshold = DEFAULT_THRESHOLD
        self.prev_mag = 0.0
        self.prev_mag2 = 0.0
        self.last_step_index = _INITIAL_LAST_STEP
        self.sample_index = 0
        self.step_count = 0

    def process(self, acc_x: float, acc_y: float, acc_z: float) -> bool:
        """Feed one sample in g; return True if a step was detected."""
        mag = math.sqrt(acc_x * acc_x + acc_y * acc_y + acc_z * acc_z)
        is_peak = (
            self.prev_mag2 < self.prev_mag
            and self.prev_mag > mag
            and self.prev_mag > self.threshold
        )
        step = is_peak and self.sample_index - self.last_step_index > MIN_STEP_GAP
        if step:
            self.step_count += 1
            self.last_step_index = self.sample_index
        self.prev_mag2 = self.prev_mag
        self.prev_mag = mag
        self.sample_index += 1
        return step

    def process_raw(self, ax: int, ay: int, az: int) -> bool:
        """Feed one sample in mg; return True if a step was detected."""
        return self.process(ax / 1000.0, ay / 1000.0, az / 1000.0)