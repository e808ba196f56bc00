import math

import pytest

from stridecount.fixed_counter import (
    IDLE_WINDOW_SIZE,
    FixedPointStepCounter,
    compute_magnitude,
)


def test_magnitude_pythagorean():
    assert compute_magnitude(3, 4, 0) == 5


@pytest.mark.parametrize(
    "xyz",
    [(0, 0, 0), (1, 1, 1), (100, -200, 300), (-1000, 50, 999), (12000, 13000, -9000)],
)
def test_magnitude_is_integer_sqrt(xyz):
    x, y, z = xyz
    r = compute_magnitude(x, y, z)
    total = x * x + y * y + z * z
    assert r * r <= total < (r + 1) * (r + 1)


def test_magnitude_inputs_wrap_to_16_bits():
    assert compute_magnitude(65536 + 3, 4, -65536) == compute_magnitude(3, 4, 0)


def test_thresholds_adapt_after_first_sample():
    counter = FixedPointStepCounter()
    counter.process_sample(0, 0, 1000, 0, 0, 0)
    assert (counter.peak_min_dist, counter.peak_threshold, counter.dip_drop) == (20, 475, 100)


def test_idle_window_skips_sample_counter():
    counter = FixedPointStepCounter()
    results = [counter.process_sample(0, 0, 0, 0, 0, 0) for _ in range(2 * IDLE_WINDOW_SIZE)]
    assert sum(results) == 0
    assert counter.sample_counter == 2 * (IDLE_WINDOW_SIZE - 1)


def test_constant_gravity_gives_no_steps():
    counter = FixedPointStepCounter()
    results = [counter.process_sample(0, 0, 1000, 0, 0, 0) for _ in range(500)]
    assert sum(results) == 0
    assert counter.sample_counter == 500


def _walking(n, period):
    for i in range(n):
        phase = 2 * math.pi * i / period
        yield (
            int(500 * math.sin(phase)),
            int(200 * math.cos(phase)),
            1000 + int(1500 * math.sin(phase + 0.3)),
            int(8000 * math.sin(phase)),
            int(4000 * math.cos(phase)),
            int(2000 * math.sin(phase / 2)),
        )


@pytest.mark.parametrize("period", [12.0, 20.0, 30.0])
def test_walking_results_are_consistent(period):
    counter = FixedPointStepCounter()
    n = 1000
    results = [counter.process_sample(*sample) for sample in _walking(n, period)]
    assert set(results) <= {0, 1}
    assert counter.total_steps == sum(results)
    assert counter.total_steps <= n // 16 + 1


def test_processing_is_deterministic():
    first, second = FixedPointStepCounter(), FixedPointStepCounter()
    samples = list(_walking(600, 18.0))
    assert [first.process_sample(*s) for s in samples] == [second.process_sample(*s) for s in samples]
    assert first == second