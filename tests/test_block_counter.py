import copy
import math

import pytest

from stridecount.block_counter import ACCEL_IDLE_SLACK, count_block_steps

N = 48


def _stationary(n=N):
    return [0] * n, [0] * n, [1000] * n, [0] * n, [0] * n, [0] * n


def _walking(n=N, period=14.0):
    ax = [int(600 * math.sin(2 * math.pi * i / period)) for i in range(n)]
    ay = [int(300 * math.cos(2 * math.pi * i / period)) for i in range(n)]
    az = [1000 + int(800 * math.sin(2 * math.pi * i / period + 0.5)) for i in range(n)]
    gx = [int(30000 * math.sin(2 * math.pi * i / period)) for i in range(n)]
    gy = [int(20000 * math.cos(2 * math.pi * i / period)) for i in range(n)]
    gz = [int(10000 * math.sin(2 * math.pi * i / (2 * period))) for i in range(n)]
    return ax, ay, az, gx, gy, gz


def test_stationary_block_is_idle():
    assert count_block_steps(*_stationary()) == 0


def test_few_non_tilt_samples_still_idle():
    ax, ay, az, gx, gy, gz = _stationary()
    for i in range(ACCEL_IDLE_SLACK):
        ax[i * 5] = 500
    assert count_block_steps(ax, ay, az, gx, gy, gz) == 0


def test_mismatched_lengths_rejected():
    ax, ay, az, gx, gy, gz = _stationary()
    with pytest.raises(ValueError):
        count_block_steps(ax[:-1], ay, az, gx, gy, gz)


def test_empty_block_rejected():
    with pytest.raises(ValueError):
        count_block_steps([], [], [], [], [], [])


@pytest.mark.parametrize("period", [10.0, 14.0, 20.0, 30.0])
def test_walking_count_is_bounded(period):
    steps = count_block_steps(*_walking(period=period))
    assert 0 <= steps <= 2 * ((N - 1) // 2)


def test_sequence_type_does_not_matter():
    data = _walking()
    as_tuples = [tuple(axis) for axis in data]
    assert count_block_steps(*data) == count_block_steps(*as_tuples)


def test_inputs_are_not_modified():
    data = _walking(period=18.0)
    original = copy.deepcopy(data)
    steps = count_block_steps(*data)
    assert list(data) == list(original)
    assert 0 <= steps <= 2 * ((N - 1) // 2)


def test_idle_block_between_calls_leaves_no_state():
    data = _walking(period=18.0)
    first = count_block_steps(*data)
    assert count_block_steps(*_stationary()) == 0
    assert count_block_steps(*data) == first