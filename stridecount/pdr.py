"""Pedestrian dead reckoning: orientation filtering, step detection and position tracking."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

_log = logging.getLogger(__name__)

SAMPLE_FREQ = 52
BETA_DEF = 0.1
DEFAULT_STEP_LENGTH = 0.7  # metres per step
STEP_DIFF_THRESHOLD = 0.7
STEP_DEBOUNCE_SAMPLES = int(0.4 * SAMPLE_FREQ)  # ~400 ms

_DEG2RAD = 0.01745329251
_PI = 3.14159265


@dataclass
class MadgwickFilter:
    """Quaternion orientation estimate corrected by gradient descent on gravity."""

    q0: float = 1.0
    q1: float = 0.0
    q2: float = 0.0
    q3: float = 0.0
    beta: float = BETA_DEF
    sample_freq: float = SAMPLE_FREQ

    @property
    def quaternion(self) -> tuple[float, float, float, float]:
        return self.q0, self.q1, self.q2, self.q3

    def update(
        self,
        gx: float, gy: float, gz: float,
        ax: float, ay: float, az: float,
        mx: float, my: float, mz: float,
    ) -> None:
        """Advance the estimate by one sample.

        The magnetometer reading is accepted but only gravity drives the correction.
        """
        accel_norm = math.sqrt(ax * ax + ay * ay + az * az)
        if accel_norm == 0.0:
            raise ValueError("accelerometer reading must not be zero")
        ax, ay, az = ax / accel_norm, ay / accel_norm, az / accel_norm

        q0, q1, q2, q3 = self.quaternion

        f1 = 2 * (q1 * q3 - q0 * q2) - ax
        f2 = 2 * (q0 * q1 + q2 * q3) - ay
        s = [
            f1 * (-2 * q2) + f2 * (2 * q1),
            f1 * (2 * q3) + f2 * (2 * q0),
            f1 * (2 * q0) + f2 * (2 * q3),
            f1 * (-2 * q1) + f2 * (-2 * q2),
        ]
        s_norm = math.sqrt(sum(v * v for v in s))
        if s_norm > 0.0:
            s = [v / s_norm for v in s]

        q_dot = (
            0.5 * (-q1 * gx - q2 * gy - q3 * gz) - self.beta * s[0],
            0.5 * (q0 * gx + q2 * gz - q3 * gy) - self.beta * s[1],
            0.5 * (q0 * gy - q1 * gz + q3 * gx) - self.beta * s[2],
            0.5 * (q0 * gz + q1 * gy - q2 * gx) - self.beta * s[3],
        )
        q = [qi + dq / self.sample_freq for qi, dq in zip((q0, q1, q2, q3), q_dot)]
        q_norm = math.sqrt(sum(v * v for v in q))
        self.q0, self.q1, self.q2, self.q3 = (v / q_norm for v in q)

    def heading_deg(self) -> float:
        """Heading in degrees, in the range [0, 360)."""
        heading = math.atan2(
            2.0 * (self.q0 * self.q3 + self.q1 * self.q2),
            1.0 - 2.0 * (self.q2 * self.q2 + self.q3 * self.q3),
        )
        heading *= 180.0 / _PI
        if heading < 0:
            heading += 360.0
        _log.debug("heading = %f", heading)
        return heading


@dataclass
class PedestrianTracker:
    """Counts steps from accelerometer jumps and advances a 2-D position along the heading."""

    orientation: MadgwickFilter = field(default_factory=MadgwickFilter)
    step_length: float = DEFAULT_STEP_LENGTH
    step_count: int = 0
    last_mag: float = 0.0
    step_timer: int = 0
    x: float = 0.0
    y: float = 0.0

    def detect_step(self, ax: float, ay: float, az: float) -> bool:
        """Return True when the magnitude rises sharply outside the debounce period."""
        mag = math.sqrt(ax * ax + ay * ay + az * az)
        diff = mag - self.last_mag
        self.last_mag = mag
        if diff > STEP_DIFF_THRESHOLD and self.step_timer <= 0:
            self.step_timer = STEP_DEBOUNCE_SAMPLES
            self.step_count += 1
            _log.debug("step count = %d", self.step_count)
            return True
        if self.step_timer > 0:
            self.step_timer -= 1
        return False

    def update_position(self, step_length: float) -> None:
        """Move the position by one step along the current heading."""
        heading = self.orientation.heading_deg() * _DEG2RAD
        self.x += step_length * math.cos(heading)
        self.y += step_length * math.sin(heading)
        _log.debug("position = (%f, %f)", self.x, self.y)

    def process(
        self,
        ax: float, ay: float, az: float,
        gx: float, gy: float, gz: float,
        mx: float, my: float, mz: float,
    ) -> bool:
        """Feed one sample; return True if a step was taken."""
        self.orientation.update(gx, gy, gz, ax, ay, az, mx, my, mz)
        if self.detect_step(ax, ay, az):
            self.update_position(self.step_length)
            return True
        return False