from pathlib import Path

import pytest

from schedsim.workload_io import load_workload
from schedsim.models import Process


def test_load_text(tmp_path: Path):
    p = tmp_path / "procs.txt"
    p.write_text("1 0 7\n2 2 3\n\n# late arrival\n3 4 6  # trailing comment\n")
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert [(x.pid, x.arrival_time, x.burst_time) for x in procs] == [(1, 0, 7), (2, 2, 3), (3, 4, 6)]
    assert all(x.remaining_time == x.burst_time for x in procs)


def test_missing_text_creates_sample(tmp_path: Path):
    p = tmp_path / "processes.txt"
    assert load_workload(p) == []
    assert p.read_text() == "4 0 7\n2 2 3\n3 4 6\n"
    # The next load picks up the sample.
    assert [x.pid for x in load_workload(p)] == [4, 2, 3]


def test_uncreatable_text_source(tmp_path: Path):
    with pytest.raises(OSError):
        load_workload(tmp_path / "no-such-dir" / "processes.txt")


def test_malformed_text_line(tmp_path: Path):
    p = tmp_path / "bad.txt"
    p.write_text("1 0 7\n2 two 3\n")
    with pytest.raises(ValueError, match=":2:"):
        load_workload(p)


def test_wrong_field_count(tmp_path: Path):
    p = tmp_path / "bad.txt"
    p.write_text("1 0\n")
    with pytest.raises(ValueError):
        load_workload(p)


def test_zero_burst_rejected(tmp_path: Path):
    p = tmp_path / "bad.txt"
    p.write_text("1 0 0\n")
    with pytest.raises(ValueError):
        load_workload(p)


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert procs[1].pid == 2
    assert procs[1].arrival_time == 1


def test_load_json_not_a_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid":1,"arrival_time":0,"burst_time":3}')
    with pytest.raises(ValueError):
        load_workload(p)


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,3\n2,1,2\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[1].burst_time == 2


def test_missing_csv(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_workload(tmp_path / "w.csv")
