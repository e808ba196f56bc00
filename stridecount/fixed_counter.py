"""Streaming integer step counter with adaptive thresholds and idle suppression."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

FIR_LEN = 33
Q_SCALE = 1024
DIP_WINDOW = 8
MAX_RECENT_STEPS = 5
MAG_BUF_LEN = 64

IDLE_WINDOW_SIZE = 32
IDLE_ACCEL_THRESH = 70
IDLE_GYRO_THRESH = 3000

FUSED_CLAMP = 2000
RECENT_INTERVAL_MIN = 14
RECENT_INTERVAL_MAX = 40

# Smoothing taps; the remaining taps of the FIR_LEN window are zero.
_FIR_TAPS = (83, 135, 178, 198, 178, 135, 83)


def _int16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def compute_magnitude(x: int, y: int, z: int) -> int:
    """Integer square root of x²+y²+z² on 16-bit signed inputs, as a 16-bit value."""
    x, y, z = _int16(x), _int16(y), _int16(z)
    return _int16(math.isqrt(x * x + y * y + z * z))


@dataclass
class FixedPointStepCounter:
    """Detects steps from fused accelerometer and gyroscope magnitudes, one sample at a time."""

    peak_min_dist: int = 24
    peak_threshold: int = 225
    dip_drop: int = 50
    fir_index: int = 0
    accel_fir: list[int] = field(default_factory=lambda: [0] * FIR_LEN)
    gyro_fir: list[int] = field(default_factory=lambda: [0] * FIR_LEN)
    fused_mag_buf: list[int] = field(default_factory=lambda: [0] * MAG_BUF_LEN)
    mag_buf_index: int = 0
    sample_counter: int = 0
    last_step_sample: int = -30
    recent_step_deltas: list[int] = field(default_factory=lambda: [14] * MAX_RECENT_STEPS)
    step_delta_index: int = 0
    a_avg: int = 0
    g_avg: int = 0
    idle_accel_sum: int = 0
    idle_gyro_sum: int = 0
    idle_counter: int = 0
    total_steps: int = 0

    def _apply_fir(self, buffer: list[int], sample: int) -> int:
        # Both filters share one write index, as the two buffers advance together.
        buffer[self.fir_index] = sample
        acc = sum(
            tap * buffer[(self.fir_index + i) % FIR_LEN] for i, tap in enumerate(_FIR_TAPS)
        )
        self.fir_index = (self.fir_index + 1) % FIR_LEN
        return _int16(_div(acc, Q_SCALE))

    def _update_adaptive_thresholds(self) -> None:
        valid = [d for d in self.recent_step_deltas if d > 0]
        if len(valid) < MAX_RECENT_STEPS:
            return
        avg_interval = _div(sum(valid), len(valid))
        avg_interval = min(max(avg_interval, RECENT_INTERVAL_MIN), RECENT_INTERVAL_MAX)
        if avg_interval < 16:
            self.peak_min_dist, self.peak_threshold, self.dip_drop = 20, 475, 100
        elif avg_interval < 26:
            self.peak_min_dist, self.peak_threshold, self.dip_drop = 24, 440, 90
        else:
            self.peak_min_dist, self.peak_threshold, self.dip_drop = 16, 400, 60
        self.peak_threshold = max(self.peak_threshold, 400)

    def _is_idle_window(self, a_mag: int, g_mag: int) -> bool:
        self.idle_accel_sum += a_mag
        self.idle_gyro_sum += g_mag
        self.idle_counter += 1
        if self.idle_counter < IDLE_WINDOW_SIZE:
            return False
        a_mean = _div(self.idle_accel_sum, IDLE_WINDOW_SIZE)
        g_mean = _div(self.idle_gyro_sum, IDLE_WINDOW_SIZE)
        self.idle_accel_sum = self.idle_gyro_sum = self.idle_counter = 0
        return a_mean < IDLE_ACCEL_THRESH and g_mean < IDLE_GYRO_THRESH

    def _dip_follows(self, peak_value: int) -> bool:
        return any(
            self.fused_mag_buf[(self.mag_buf_index + j) % MAG_BUF_LEN] < peak_value - self.dip_drop
            for j in range(1, DIP_WINDOW + 1)
        )

    def process_sample(self, ax: int, ay: int, az: int, gx: int, gy: int, gz: int) -> int:
        """Feed one raw sample; return the number of steps detected (0 or 1)."""
        a_mag = compute_magnitude(ax, ay, az)
        g_mag = compute_magnitude(gx, gy, gz)

        if self._is_idle_window(a_mag, g_mag):
            return 0

        self.a_avg = _div(self.a_avg * 15 + a_mag, 16)
        self.g_avg = _div(self.g_avg * 15 + g_mag, 16)
        a_hp = _int16(a_mag - self.a_avg)
        g_hp = _int16(g_mag - self.g_avg)

        a_filtered = self._apply_fir(self.accel_fir, a_hp)
        g_filtered = self._apply_fir(self.gyro_fir, g_hp)

        fused = _int16(_div(3 * a_filtered + g_filtered, 4))
        abs_fused = min(_int16(abs(fused)), FUSED_CLAMP)
        self.fused_mag_buf[self.mag_buf_index % MAG_BUF_LEN] = abs_fused

        self._update_adaptive_thresholds()

        steps = 0
        if self.sample_counter > FIR_LEN + DIP_WINDOW:
            buf = self.fused_mag_buf
            current = buf[self.mag_buf_index % MAG_BUF_LEN]
            previous = buf[(self.mag_buf_index - 1) % MAG_BUF_LEN]
            following = buf[(self.mag_buf_index + 1) % MAG_BUF_LEN]
            delta = self.sample_counter - self.last_step_sample
            if (
                current > self.peak_threshold
                and previous < current
                and current > following
                and delta >= self.peak_min_dist
            ):
                dip_found = self._dip_follows(current)
                self.recent_step_deltas[self.step_delta_index % MAX_RECENT_STEPS] = delta
                self.step_delta_index += 1
                if dip_found:
                    steps = 1
                    self.last_step_sample = self.sample_counter

        self.mag_buf_index += 1
        self.sample_counter += 1
        self.total_steps += steps
        return steps