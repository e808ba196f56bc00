"""Read a sensor data-logger CSV and count steps block by block."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Sequence

from .block_counter import count_block_steps
from .filters import BLOCK_SIZE


@dataclass(frozen=True)
class SensorRecord:
    """One logged row of sensor readings."""

    unique_id: int
    record_count: int
    ax: int
    ay: int
    az: int
    gx: int
    gy: int
    gz: int
    mx: int
    my: int
    mz: int
    direction: int
    alt_x: int
    alt_y: int
    hx: int
    spo2: int


_FIELD_COUNT = len(fields(SensorRecord))


def _int16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def count_rows(path: str | Path) -> int:
    """Number of data rows in a CSV file, not counting the header line."""
    with open(path, encoding="utf-8") as handle:
        next(handle, None)
        return sum(1 for _ in handle)


def sqrt_approx(value: int) -> int:
    """Bitwise approximate square root; zero for non-positive input."""
    if value <= 0:
        return 0
    res = value
    bit = 1 << 30
    while bit > value:
        bit >>= 2
    while bit:
        if value >= res + bit:
            value -= res + bit
            res = (res >> 1) + bit
        else:
            res >>= 1
        bit >>= 2
    return res


def _parse_line(line: str, line_no: int) -> SensorRecord:
    parts = line.strip().split(",")
    if len(parts) < _FIELD_COUNT:
        raise ValueError(f"line {line_no}: expected {_FIELD_COUNT} fields, got {len(parts)}")
    try:
        values = [int(part.strip()) for part in parts[:_FIELD_COUNT]]
    except ValueError as exc:
        raise ValueError(f"line {line_no}: {exc}") from exc
    return SensorRecord(*values)


def read_records(path: str | Path) -> list[SensorRecord]:
    """Parse every data row of a logger CSV file, skipping the header."""
    with open(path, encoding="utf-8") as handle:
        next(handle, None)
        return [_parse_line(line, n) for n, line in enumerate(handle, start=2)]


def count_steps(records: Sequence[SensorRecord]) -> int:
    """Total steps over full blocks of records; a trailing partial block is ignored."""
    total = 0
    for start in range(0, len(records) - BLOCK_SIZE + 1, BLOCK_SIZE):
        block = records[start:start + BLOCK_SIZE]
        total += count_block_steps(
            [_int16(r.ax) for r in block],
            [_int16(r.ay) for r in block],
            [_int16(r.az) for r in block],
            [_int16(r.gx) for r in block],
            [_int16(r.gy) for r in block],
            [_int16(r.gz) for r in block],
        )
    return total


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="stridecount", description="Count steps in a sensor data-logger CSV file."
    )
    parser.add_argument("path", help="CSV file with a header line and one sample per row")
    args = parser.parse_args(argv)

    try:
        rows = count_rows(args.path)
        if rows <= 0:
            print("No data found to read in file")
            return 1
        records = read_records(args.path)
    except OSError as exc:
        print(f"error opening a file: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error reading a file: {exc}", file=sys.stderr)
        return 1

    print(f"Rows={rows}")
    print(f"Total step count= {count_steps(records)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())