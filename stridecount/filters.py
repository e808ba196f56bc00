"""Forward-backward IIR filters and peak-based step detection on 48-sample blocks."""

from __future__ import annotations

import math
from collections import deque
from enum import IntEnum
from typing import Iterable, Sequence

SAMPLE_RATE = 52
BLOCK_SIZE = 48

HP_ORDER = 4
BP_ORDER = 8

# High-pass filter (0.3 Hz @ 52 Hz)
HP_B = (0.953739, -3.814958, 5.722436, -3.814958, 0.953739)
HP_A = (1.0, -3.905279, 5.720297, -3.724635, 0.909619)

# Band-pass filter (0.5-4.5 Hz @ 52 Hz)
BP_B = (
    0.00194832, 0.0, -0.00779327, 0.0, 0.01168990,
    0.0, -0.00779327, 0.0, 0.00194832,
)
BP_A = (
    1.0, -6.62984475, 19.36053485, -32.55730178,
    34.50841663, -23.61716055, 10.19337717, -2.53669815, 0.27867724,
)

MIN_NORM_THRESHOLD = 0.05
ORIENTATION_HOLD_COUNT = 4

GYRO_WINDOW = 2
GYRO_IDLE_THRESHOLD = 2000.0
MAX_ACTIVE_GYRO_SAMPLES = 3
ORIENTATION_IDLE_MIN_SAMPLES = 40
ORIENTATION_DELTA_THRESHOLD = 2.0
REF_SAMPLE_COUNT = 5

_PI = 3.14159265
_BLOCK_THRESHOLD_STD_FACTOR = 0.15
_BLOCK_MIN_PEAK_DISTANCE = 3
_BLOCK_MIN_PEAK_VALUE = 0.2


class Orientation(IntEnum):
    """Dominant gravity axis of an accelerometer reading."""

    UNKNOWN = 0
    X_POS = 1
    X_NEG = 2
    Y_POS = 3
    Y_NEG = 4
    Z_POS = 5
    Z_NEG = 6


def _iir(b: Sequence[float], a: Sequence[float], samples: Iterable[float]) -> list[float]:
    """Run a direct-form I IIR filter over samples with zero initial state."""
    order = len(b) - 1
    past_in: deque[float] = deque([0.0] * order, maxlen=order)
    past_out: deque[float] = deque([0.0] * order, maxlen=order)
    result = []
    for sample in samples:
        value = b[0] * sample
        value += sum(bi * xi for bi, xi in zip(b[1:], past_in))
        value -= sum(ai * yi for ai, yi in zip(a[1:], past_out))
        past_in.appendleft(sample)
        past_out.appendleft(value)
        result.append(value)
    return result


def _filtfilt(b: Sequence[float], a: Sequence[float], samples: Iterable[float]) -> list[float]:
    forward = _iir(b, a, samples)
    backward = _iir(b, a, reversed(forward))
    backward.reverse()
    return backward


def highpass_filtfilt(samples: Iterable[float]) -> list[float]:
    """Zero-phase 0.3 Hz high-pass filter of a block of samples."""
    return _filtfilt(HP_B, HP_A, samples)


def bandpass_filtfilt(samples: Iterable[float]) -> list[float]:
    """Zero-phase 0.5-4.5 Hz band-pass filter of a block of samples."""
    return _filtfilt(BP_B, BP_A, samples)


def _descending_base(peak: float, values: Iterable[float]) -> float:
    base = peak
    for value in values:
        if value >= base:
            break
        base = value
    return base


def detect_steps(
    data: Sequence[float], threshold: float, min_distance: int, min_prominence: float
) -> int:
    """Count peaks above threshold, with enough prominence and spacing."""
    steps = 0
    last_peak = -min_distance
    for i in range(1, len(data) - 1):
        current = data[i]
        if not (current > data[i - 1] and current > data[i + 1] and current >= threshold):
            continue
        left_base = _descending_base(current, reversed(data[:i]))
        right_base = _descending_base(current, data[i + 1:])
        if current - max(left_base, right_base) < min_prominence:
            continue
        if i - last_peak >= min_distance:
            steps += 1
            last_peak = i
    return steps


def compute_pitch(ax: float, ay: float, az: float) -> float:
    """Pitch angle in degrees from an accelerometer reading."""
    return math.atan2(-ax, math.sqrt(ay * ay + az * az)) * (180.0 / _PI)


def get_6d_orientation(ax: float, ay: float, az: float) -> Orientation:
    """Classify which axis carries most of the acceleration, and its sign."""
    norm = math.sqrt(ax * ax + ay * ay + az * az)
    if norm < MIN_NORM_THRESHOLD:
        norm = 1.0
    nx, ny, nz = ax / norm, ay / norm, az / norm
    abs_x, abs_y, abs_z = abs(nx), abs(ny), abs(nz)

    if abs_x > abs_y and abs_x > abs_z:
        return Orientation.X_POS if nx > 0 else Orientation.X_NEG
    if abs_y > abs_x and abs_y > abs_z:
        return Orientation.Y_POS if ny > 0 else Orientation.Y_NEG
    if abs_z > abs_x and abs_z > abs_y:
        return Orientation.Z_POS if nz > 0 else Orientation.Z_NEG
    return Orientation.UNKNOWN


def _mean_std(values: Sequence[float]) -> tuple[float, float]:
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def process_step_block(
    ax_raw: Sequence[int],
    ay_raw: Sequence[int],
    az_raw: Sequence[int],
    gx_raw: Sequence[int],
    gy_raw: Sequence[int],
    gz_raw: Sequence[int],
) -> int:
    """Count steps in one block of raw accelerometer samples given in mg.

    Gyroscope samples are accepted for interface symmetry and checked for
    length, but do not influence the count.
    """
    lengths = {len(ax_raw), len(ay_raw), len(az_raw), len(gx_raw), len(gy_raw), len(gz_raw)}
    if len(lengths) != 1:
        raise ValueError("all sensor axes must have the same number of samples")
    if lengths == {0}:
        raise ValueError("a block must contain at least one sample")

    ax = highpass_filtfilt(v / 1000.0 for v in ax_raw)
    ay = highpass_filtfilt(v / 1000.0 for v in ay_raw)
    az = highpass_filtfilt(v / 1000.0 for v in az_raw)

    magnitude = [math.sqrt(x * x + y * y + z * z) for x, y, z in zip(ax, ay, az)]
    filtered = bandpass_filtfilt(magnitude)

    mean, std = _mean_std(filtered)
    threshold = mean + _BLOCK_THRESHOLD_STD_FACTOR * std

    peak_count = 0
    last_peak_index = -1000
    triples = zip(filtered, filtered[1:], filtered[2:])
    for i, (prev, current, nxt) in enumerate(triples, start=1):
        if current > threshold and current > prev and current > nxt:
            if i - last_peak_index >= _BLOCK_MIN_PEAK_DISTANCE and current > _BLOCK_MIN_PEAK_VALUE:
                peak_count += 1
                last_peak_index = i
    return peak_count