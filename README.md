# stridecount

Step counting for wrist-worn motion sensors. `stridecount` reads data-logger
CSV files of accelerometer, gyroscope and magnetometer samples taken at 52 Hz
and counts the steps in them. It also has a few other step detectors and a
simple pedestrian dead-reckoning tracker that work on the same kind of data.
It has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Counting steps in a log file

```
stridecount path/to/recording.csv
```

The file must have one header line. Each row after it holds at least 16
comma-separated integers:

```
unique_id,record_count,ax,ay,az,gx,gy,gz,mx,my,mz,direction,alt_x,alt_y,hx,spo2
```

Any fields after the sixteenth are ignored. Accelerometer values are in
milli-g. The command prints `Rows=<n>` and then `Total step count= <n>`, and
exits with status 0. It prints `No data found to read in file` and exits with
status 1 when the file has no data rows. It also exits with status 1, after an
error message on standard error, when the file cannot be opened or a row has too
few fields or a field that is not an integer.

The rows are split into consecutive blocks of 48 and each block goes to
`count_block_steps`. A trailing partial block is ignored. Sensor values are
wrapped to signed 16-bit integers before counting.

## Using the library

### Block detector

`stridecount.block_counter.count_block_steps(ax, ay, az, gx, gy, gz)` counts
steps in one block of raw samples. The six sequences must all have the same
length, which must not be zero; otherwise it raises `ValueError`.

For each block it:

- returns 0 when the block looks idle: the accelerometer is close to a still,
  face-up reading, or the pitch and roll barely change from sample to sample,
  while the smoothed gyroscope energy stays low;
- high-pass filters each accelerometer axis and band-pass filters (0.5–4.5 Hz)
  the resulting magnitude;
- finds peaks and picks a threshold and a minimum peak spacing from the
  spacing between them;
- returns 0 for weak motion at a slow cadence, and otherwise the peak count.

Idle decisions and thresholds are logged at debug level on the
`stridecount.block_counter` logger.

```python
from stridecount.block_counter import count_block_steps

steps = count_block_steps(ax, ay, az, gx, gy, gz)  # six sequences of 48 ints
```

`stridecount.cli` exposes the same pipeline over whole files:

```python
from stridecount.cli import count_rows, read_records, count_steps

rows = count_rows("recording.csv")        # data rows, header excluded
records = read_records("recording.csv")   # list of SensorRecord
total = count_steps(records)
```

`SensorRecord` is a frozen dataclass with one integer field per CSV column.
`stridecount.cli.sqrt_approx(value)` is a bitwise integer square root that
returns 0 for non-positive input.

### Filters and the simple block detector

`stridecount.filters` provides:

- `highpass_filtfilt(samples)` and `bandpass_filtfilt(samples)`: zero-phase
  (forward then backward) 0.3 Hz high-pass and 0.5–4.5 Hz band-pass IIR
  filters for 52 Hz data, returning lists;
- `detect_steps(data, threshold, min_distance, min_prominence)`: counts local
  peaks at or above a threshold with enough prominence and spacing;
- `compute_pitch(ax, ay, az)`: pitch in degrees;
- `get_6d_orientation(ax, ay, az)`: the dominant axis and its sign, as an
  `Orientation` (`UNKNOWN` when no axis dominates);
- `process_step_block(ax, ay, az, gx, gy, gz)`: a simpler block detector on the
  same filter chain, with a fixed threshold rule and no idle check. The
  gyroscope sequences are only checked for length.

### Sample-by-sample detectors

- `stridecount.fixed_counter.FixedPointStepCounter` works in integer
  arithmetic. Call `process_sample(ax, ay, az, gx, gy, gz)` for each raw sample;
  it returns 0 or 1, and `total_steps` holds the running total. It suppresses
  steps over idle windows of 32 samples, smooths the fused accelerometer and
  gyroscope magnitudes, and adapts its peak threshold and spacing to the recent
  step intervals. `compute_magnitude(x, y, z)` is the 16-bit integer magnitude
  it uses.
- `stridecount.oxford.OxfordStepCounter` is a minimal peak detector on the
  acceleration magnitude. Feed it samples in g with `process`, or in milli-g
  with `process_raw`; both return `True` on a step. `step_count` holds the
  total and `reset()` returns it to its initial state.

```python
from stridecount.oxford import OxfordStepCounter

counter = OxfordStepCounter()
steps = sum(counter.process_raw(x, y, z) for x, y, z in samples)
```

### Dead reckoning

`stridecount.pdr.MadgwickFilter` keeps a quaternion orientation estimate.
`update(gx, gy, gz, ax, ay, az, mx, my, mz)` advances it by one sample; the
correction uses gravity only, so the magnetometer reading is accepted but does
not affect the result. A zero accelerometer reading raises `ValueError`.
`heading_deg()` returns the heading in `[0, 360)`.

`stridecount.pdr.PedestrianTracker` detects a step when the acceleration
magnitude jumps by more than 0.7 between samples, with a debounce of about
400 ms, and on each step moves its `x`, `y` position by `step_length`
(0.7 by default) along the current heading.

```python
from stridecount.pdr import PedestrianTracker

tracker = PedestrianTracker()
for sample in samples:
    tracker.process(*sample)  # ax, ay, az, gx, gy, gz, mx, my, mz
print(tracker.step_count, tracker.x, tracker.y)
```

## What it does not do

The `stridecount` command only runs the block detector. The other detectors and
the dead-reckoning tracker are available only from Python. Nothing is written
to disk: there is no output of per-block counts, positions or trajectories, and
no plotting.