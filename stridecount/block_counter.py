"""Block step counter with idle suppression and adaptive peak spacing."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .filters import (
    GYRO_IDLE_THRESHOLD,
    GYRO_WINDOW,
    MAX_ACTIVE_GYRO_SAMPLES,
    ORIENTATION_DELTA_THRESHOLD,
    ORIENTATION_IDLE_MIN_SAMPLES,
    bandpass_filtfilt,
    highpass_filtfilt,
)

_log = logging.getLogger(__name__)

ACCEL_IDLE_SLACK = 8
TILT_Z_TOLERANCE_MG = 100
TILT_XY_LIMIT_MG = 200

BASE_THRESHOLD_STD_FACTOR = 1.2
SLOW_THRESHOLD_STD_FACTOR = 0.9
FAST_THRESHOLD_STD_FACTOR = 1.5
THRESHOLD_FLOOR_STD_FACTOR = 0.3
STRONG_PEAK_FACTOR = 1.2

MIN_INTERVAL = 3
MAX_INTERVAL = 40
MIN_PEAK_DISTANCE_FLOOR = 12


def _to_mg(value_g: float) -> int:
    return int(value_g * 1000.0 + 0.5)


def _is_tilt_only(x_g: float, y_g: float, z_g: float) -> bool:
    return (
        abs(_to_mg(z_g) - 1000) <= TILT_Z_TOLERANCE_MG
        and abs(_to_mg(x_g)) < TILT_XY_LIMIT_MG
        and abs(_to_mg(y_g)) < TILT_XY_LIMIT_MG
    )


def _mean_std(values: Sequence[float]) -> tuple[float, float]:
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def _min_peak_distance(avg_interval: float) -> int:
    if avg_interval > 35.0:
        distance = 30  # slow walking
    elif avg_interval > 25.0:
        distance = 24  # normal walking
    elif avg_interval > 18.0:
        distance = 18  # brisk walking
    elif avg_interval > 12.0:
        distance = 14  # jogging
    else:
        distance = 10  # fast running
    return max(distance, MIN_PEAK_DISTANCE_FLOOR)


def _local_peaks(values: Sequence[float], threshold: float):
    """Yield (index, value) of strict local maxima above threshold."""
    triples = zip(values, values[1:], values[2:])
    for i, (prev, current, nxt) in enumerate(triples, start=1):
        if current > threshold and current > prev and current > nxt:
            yield i, current


def count_block_steps(
    ax_raw: Sequence[int],
    ay_raw: Sequence[int],
    az_raw: Sequence[int],
    gx_raw: Sequence[int],
    gy_raw: Sequence[int],
    gz_raw: Sequence[int],
) -> int:
    """Count steps in one block of raw samples (accelerometer in mg, gyroscope raw).

    Returns 0 when the block looks idle: accelerometer or orientation steady
    while the smoothed gyroscope energy stays low.
    """
    axes = (ax_raw, ay_raw, az_raw, gx_raw, gy_raw, gz_raw)
    n = len(ax_raw)
    if any(len(axis) != n for axis in axes):
        raise ValueError("all sensor axes must have the same number of samples")
    if n == 0:
        raise ValueError("a block must contain at least one sample")

    ax = [v / 1000.0 for v in ax_raw]
    ay = [v / 1000.0 for v in ay_raw]
    az = [v / 1000.0 for v in az_raw]
    gyro_sq = [
        (x / 1000.0) ** 2 + (y / 1000.0) ** 2 + (z / 1000.0) ** 2
        for x, y, z in zip(gx_raw, gy_raw, gz_raw)
    ]

    idle_samples = sum(1 for x, y, z in zip(ax, ay, az) if _is_tilt_only(x, y, z))
    mean_z = sum(az) / n

    hx = highpass_filtfilt(ax)
    hy = highpass_filtfilt(ay)
    hz = highpass_filtfilt(az)

    magnitude = [math.sqrt(x * x + y * y + z * z) for x, y, z in zip(hx, hy, hz)]
    pitch = [math.degrees(math.atan2(x, math.hypot(y, z))) for x, y, z in zip(hx, hy, hz)]
    roll = [math.degrees(math.atan2(y, math.hypot(x, z))) for x, y, z in zip(hx, hy, hz)]

    # Each sample is compared with its predecessor; the first wraps to the last.
    previous_pitch = pitch[-1:] + pitch[:-1]
    previous_roll = roll[-1:] + roll[:-1]
    orientation_stable = sum(
        1
        for p, pp, r, pr in zip(pitch, previous_pitch, roll, previous_roll)
        if abs(p - pp) < ORIENTATION_DELTA_THRESHOLD and abs(r - pr) < ORIENTATION_DELTA_THRESHOLD
    )

    width = 2 * GYRO_WINDOW + 1
    smoothed_gyro = [
        sum(gyro_sq[i - GYRO_WINDOW:i + GYRO_WINDOW + 1]) / width
        for i in range(GYRO_WINDOW, n - GYRO_WINDOW)
    ]
    active_gyro = sum(1 for value in smoothed_gyro if value > GYRO_IDLE_THRESHOLD)

    accel_idle = idle_samples >= n - ACCEL_IDLE_SLACK
    gyro_idle = active_gyro <= MAX_ACTIVE_GYRO_SAMPLES
    orientation_idle = orientation_stable >= ORIENTATION_IDLE_MIN_SAMPLES
    _log.debug(
        "accel_idle=%s gyro_idle=%s orientation_idle=%s idle_samples=%d",
        accel_idle, gyro_idle, orientation_idle, idle_samples,
    )
    if (orientation_idle or accel_idle) and gyro_idle:
        _log.debug("block is idle")
        return 0

    filtered = bandpass_filtfilt(magnitude)
    mean, std = _mean_std(filtered)
    energy = sum(v * v for v in filtered) / n

    base_threshold = mean + BASE_THRESHOLD_STD_FACTOR * std
    peak_indices = [i for i, _ in _local_peaks(filtered, base_threshold)]
    _log.debug("peak indices: %s", peak_indices)

    intervals = [
        b - a
        for a, b in zip(peak_indices, peak_indices[1:])
        if MIN_INTERVAL <= b - a <= MAX_INTERVAL
    ]
    avg_interval = sum(intervals) / len(intervals) if intervals else 0.0

    k = SLOW_THRESHOLD_STD_FACTOR if avg_interval > 18.0 else FAST_THRESHOLD_STD_FACTOR
    threshold = mean + k * std
    threshold_floor = THRESHOLD_FLOOR_STD_FACTOR * std
    min_distance = _min_peak_distance(avg_interval)
    _log.debug("avg_interval=%f min_peak_distance=%d", avg_interval, min_distance)

    weak_motion = std < 0.015 or energy < 0.02 or (950.0 < mean_z < 1050.0 and std < 0.02)
    if avg_interval > 14.0 and weak_motion:
        return 0

    # The count continues on from the candidate peaks found above.
    peak_count = len(peak_indices)
    last_peak = -min_distance
    for i, current in _local_peaks(filtered, threshold):
        if current <= threshold_floor:
            continue
        gap = i - last_peak
        if gap >= min_distance or (
            gap == min_distance - 1 and current > STRONG_PEAK_FACTOR * threshold
        ):
            peak_count += 1
            last_peak = i
    return peak_count