"""Tests for CLI entrypoints."""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from breathe_track import cli
from breathe_track.model import DistanceUnit, Phase, PhaseReading, WalkTestResult
from breathe_track.summary import VitalsSummary
from breathe_track.walk_test import evaluate_walk_test


def _args(base_dir: Path, export_file: str | None = None) -> argparse.Namespace:
    return argparse.Namespace(
        base_dir=str(base_dir),
        export_file=export_file,
        range="week",
        now="2026-10-21T12:00:00+00:00",
        verbose=False,
    )


def _export() -> dict[str, object]:
    return {
        "logEntries": [
            {"timestamp": "2026-10-21T08:00:00Z", "spo2": 85, "pulse": 120, "oxygenOn": False},
            {"timestamp": "2026-10-21T09:00:00Z", "spo2": 86, "pulse": 115, "oxygenOn": False},
            {"timestamp": "2026-10-21T10:00:00Z", "spo2": 87, "pulse": 130, "oxygenOn": False},
            {"timestamp": "2026-09-01T10:00:00Z", "spo2": 70, "oxygenOn": False},
        ],
        "walkTestResults": [
            {
                "testTimestamp": "2026-10-20T10:00:00Z",
                "hasCOPD": False,
                "oxygenOn": False,
                "preTestSpo2": 97,
                "preTestPulse": 72,
                "postTestSpo2": 93,
                "distance": 410,
                "distanceUnit": "meters",
            }
        ],
    }


def test_parse_args_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv", ["prog", "--base-dir", "/tmp/base", "--range", "month", "--verbose"]
    )
    ns = cli.parse_args()
    assert ns.base_dir == "/tmp/base"
    assert ns.range == "month"
    assert ns.verbose is True
    assert ns.export_file is None


def test_main_happy_path(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "breathetrack_2026.json").write_text(
        json.dumps(_export()), encoding="utf-8"
    )
    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path))

    code = cli.main()
    out = capsys.readouterr().out

    assert code == 0
    assert "Alerts / Warnings (last 24h): 2" in out
    assert "(3 times)" in out
    assert "consistently high" in out
    assert "Daily Log Summary (week): 3 entries" in out
    assert "Lowest SpO₂: 85%" in out
    assert "6-Minute Walk Test History (week): 1 tests" in out
    assert "start=97%/72[normal] ▼" in out
    assert "end=93%/N/A[low]" in out
    assert "distance=410 meters" in out


def test_main_with_explicit_export_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    p = tmp_path / "custom.json"
    p.write_text(json.dumps({"logEntries": []}), encoding="utf-8")
    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path / "nope", str(p)))

    assert cli.main() == 0
    out = capsys.readouterr().out
    assert "Alerts / Warnings (last 24h): 0" in out
    assert "Avg SpO₂: N/A" in out


def test_main_propagates_missing_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(cli, "parse_args", lambda: _args(tmp_path / "missing"))
    with pytest.raises(FileNotFoundError):
        cli.main()


def test_format_summary() -> None:
    lines = cli.format_summary(VitalsSummary(91.5, 88.0, 76.0, None, 0, 0.0))
    assert lines[0] == "Avg SpO₂: 91.5%"
    assert lines[3] == "Avg Borg: N/A"
    assert lines[4] == "SpO₂ Below 88%: 0 (0%)"


def test_format_walk_test_on_oxygen() -> None:
    test = WalkTestResult(
        timestamp=datetime(2026, 10, 19, 10, 30, tzinfo=timezone.utc),
        has_copd=True,
        oxygen_on=True,
        oxygen_flow=2,
        start=PhaseReading(92, 80),
    ).with_distance(1000, DistanceUnit.FEET)
    line = cli.format_walk_test(evaluate_walk_test(test))
    assert line.startswith("2026-10-19 10:30 O2: Yes (2 L/min)")
    assert f"{Phase.START.value}=92%/80[normal]" in line
    assert "mid=N/A/N/A" in line
    assert line.endswith("distance=1000 feet")


def test_format_walk_test_on_oxygen_without_flow() -> None:
    test = WalkTestResult(
        timestamp=datetime(2026, 10, 19, 10, 30, tzinfo=timezone.utc),
        has_copd=True,
        oxygen_on=True,
        start=PhaseReading(89, None),
    )
    line = cli.format_walk_test(evaluate_walk_test(test))
    assert line.startswith("2026-10-19 10:30 O2: Yes (? L/min)")
    assert f"{Phase.START.value}=89%/N/A[caution]" in line
