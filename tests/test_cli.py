import math

import pytest

from stridecount.cli import (
    SensorRecord,
    count_rows,
    count_steps,
    main,
    read_records,
    sqrt_approx,
)

HEADER = "id,count,ax,ay,az,gx,gy,gz,mx,my,mz,dir,alt_x,alt_y,hx,spo2\n"


def _record(i, ax=0, ay=0, az=1000, gx=0, gy=0, gz=0):
    return SensorRecord(1000 + i, i, ax, ay, az, gx, gy, gz, 5, 6, 7, 8, 9, 10, 11, 98)


def _write(path, records):
    lines = [HEADER]
    for r in records:
        values = [
            r.unique_id, r.record_count, r.ax, r.ay, r.az, r.gx, r.gy, r.gz,
            r.mx, r.my, r.mz, r.direction, r.alt_x, r.alt_y, r.hx, r.spo2,
        ]
        lines.append(",".join(str(v) for v in values) + "\n")
    path.write_text("".join(lines), encoding="utf-8")
    return path


def _walking(n):
    return [
        _record(
            i,
            ax=int(400 * math.sin(2 * math.pi * i / 26)),
            ay=int(300 * math.cos(2 * math.pi * i / 13)),
            az=1000 + int(600 * math.sin(2 * math.pi * i / 13)),
            gx=int(30000 * math.sin(2 * math.pi * i / 26)),
            gy=int(20000 * math.cos(2 * math.pi * i / 26)),
            gz=15000,
        )
        for i in range(n)
    ]


def test_sqrt_approx_non_positive_is_zero():
    assert sqrt_approx(0) == 0
    assert sqrt_approx(-25) == 0


def test_sqrt_approx_sixteen():
    assert sqrt_approx(16) == 4


def test_count_rows_skips_header(tmp_path):
    path = _write(tmp_path / "data.csv", [_record(i) for i in range(5)])
    assert count_rows(path) == 5


def test_count_rows_missing_file(tmp_path):
    with pytest.raises(OSError):
        count_rows(tmp_path / "missing.csv")


def test_read_records_round_trip(tmp_path):
    records = [_record(i, ax=-i, gz=i * 3) for i in range(4)]
    path = _write(tmp_path / "data.csv", records)
    assert read_records(path) == records


def test_read_records_rejects_short_line(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(HEADER + "1,2,3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_records(path)


def test_read_records_rejects_non_integer(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(HEADER + ",".join(["x"] * 16) + "\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_records(path)


def test_count_steps_partial_block_is_zero():
    assert count_steps(_walking(47)) == 0


def test_count_steps_idle_data_is_zero():
    assert count_steps([_record(i) for i in range(96)]) == 0


def test_count_steps_ignores_trailing_partial_block():
    records = _walking(110)
    assert count_steps(records) == count_steps(records[:96])


def test_count_steps_is_additive_over_blocks():
    records = _walking(96)
    assert count_steps(records) == count_steps(records[:48]) + count_steps(records[48:])


def test_main_reports_rows_and_steps(tmp_path, capsys):
    path = _write(tmp_path / "data.csv", [_record(i) for i in range(96)])
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Rows=96" in out
    assert "Total step count= 0" in out


def test_main_empty_file(tmp_path, capsys):
    path = tmp_path / "empty.csv"
    path.write_text(HEADER, encoding="utf-8")
    assert main([str(path)]) == 1
    assert "No data found to read in file" in capsys.readouterr().out


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.csv")]) == 1