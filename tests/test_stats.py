"""Tests for the practice history store."""

import json

import pytest

from stats import SessionRecord, StatsStore


def _record(throughput, cps=4.0, correct=0.9):
    return SessionRecord(
        id="s1",
        started_at="2026-10-18T09:00:00+00:00",
        ended_at="2026-10-18T09:01:00+00:00",
        duration_s=60.0,
        source="wikipedia",
        source_meta={"title": "Wind"},
        text_len=200,
        typed_len=198,
        cps=cps,
        insertion_probability=0.0,
        omission_probability=0.05,
        substitution_probability=0.05,
        correct_probability=correct,
        mutual_information=None if throughput is None else throughput / cps,
        throughput=throughput,
    )


def test_missing_file_loads_empty(tmp_path):
    store = StatsStore(tmp_path / "stats.json")

    assert store.load() == {"sessions": []}


def test_append_session(tmp_path):
    path = tmp_path / "nested" / "stats.json"
    store = StatsStore(path)

    store.append_session(_record(12.0))
    store.append_session(_record(None))

    sessions = json.loads(path.read_text())["sessions"]
    assert [s["throughput"] for s in sessions] == [12.0, None]
    assert store.sessions()[0]["source_meta"] == {"title": "Wind"}


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text("{not json")

    assert StatsStore(path).sessions() == []


def test_summary_skips_undefined_throughput(tmp_path):
    store = StatsStore(tmp_path / "stats.json")
    store.append_session(_record(10.0, cps=4.0, correct=0.8))
    store.append_session(_record(None, cps=2.0, correct=1.0))
    store.append_session(_record(14.0, cps=6.0, correct=0.9))

    summary = store.summary()

    assert summary["total"] == 3
    assert summary["defined"] == 2
    assert summary["avg_throughput"] == pytest.approx(12.0)
    assert summary["avg_cps"] == pytest.approx(4.0)
    assert summary["avg_correct"] == pytest.approx(0.9)


def test_summary_of_empty_history(tmp_path):
    summary = StatsStore(tmp_path / "stats.json").summary()

    assert summary["total"] == 0
    assert summary["avg_throughput"] is None
