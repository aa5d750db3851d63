"""CLI: alertas, resumen del período e historial de pruebas de marcha."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dateutil import parser as date_parser
from dateutil import tz

from breathe_track.alerts import AlertConfig, evaluate_alerts
from breathe_track.model import Phase, WalkTestResult
from breathe_track.periods import (
    PERIOD_KINDS,
    period_bounds,
    select_between,
    trailing_window,
)
from breathe_track.sources.base import DataSource
from breathe_track.sources.export import ExportPaths, ExportSource
from breathe_track.summary import VitalsSummary, readings_to_frame, vitals_summary
from breathe_track.walk_test import WalkTestEvaluation, evaluate_walk_test

_LOCAL_TZ = tz.tzlocal()


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="BreatheTrack: alerts, summary and 6MWT history from an export."
    )
    parser.add_argument(
        "--base-dir",
        default=str(Path.home() / "breathetrack"),
        help="Folder with breathetrack_*.json exports (default: ~/breathetrack).",
    )
    parser.add_argument(
        "--export-file",
        default=None,
        help="Specific export file (default: newest in --base-dir).",
    )
    parser.add_argument(
        "--range",
        choices=PERIOD_KINDS,
        default="week",
        help="Summary period (default: week).",
    )
    parser.add_argument(
        "--now",
        default=None,
        help="Reference time, ISO-8601 (default: current time).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log progress.")
    return parser.parse_args()


def _format_value(value: float | None, suffix: str = "") -> str:
    if value is None:
        return "N/A"
    return f"{value:g}{suffix}"


def format_summary(summary: VitalsSummary) -> list[str]:
    return [
        f"Avg SpO₂: {_format_value(summary.avg_spo2, '%')}",
        f"Lowest SpO₂: {_format_value(summary.lowest_spo2, '%')}",
        f"Avg Pulse: {_format_value(summary.avg_pulse, ' bpm')}",
        f"Avg Borg: {_format_value(summary.avg_borg)}",
        f"SpO₂ Below 88%: {summary.below_88_count} ({summary.below_88_pct:g}%)",
    ]


def _oxygen_status(test: WalkTestResult) -> str:
    if test.oxygen_on is None:
        return "N/A"
    if test.oxygen_on:
        flow = "?" if test.oxygen_flow is None else f"{test.oxygen_flow:g}"
        return f"Yes ({flow} L/min)"
    return "No"


def format_walk_test(ev: WalkTestEvaluation) -> str:
    """One history line: band per phase, trend glyph and distance."""
    test = ev.test
    cells = []
    for phase in Phase:
        reading = test.reading_for(phase)
        band = ev.bands[phase]
        cell = (
            f"{phase.value}={_format_value(reading.spo2, '%')}"
            f"/{_format_value(reading.pulse)}"
        )
        if band is not None:
            cell += f"[{band.value}]"
        if phase is Phase.START and ev.trend is not None:
            cell += f" {ev.trend.glyph}"
        cells.append(cell)
    distance = "N/A"
    if test.distance is not None:
        unit = test.distance_unit.value if test.distance_unit else ""
        distance = f"{test.distance:g} {unit}".strip()
    return (
        f"{test.timestamp:%Y-%m-%d %H:%M} O2: {_oxygen_status(test)} "
        f"{' '.join(cells)} distance={distance}"
    )


def main() -> int:
    """Run the report CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(level=logging.INFO if ns.verbose else logging.WARNING)

    now = datetime.now(tz=_LOCAL_TZ)
    if ns.now:
        now = date_parser.isoparse(ns.now)
        if now.tzinfo is None:
            now = now.replace(tzinfo=_LOCAL_TZ)

    base = Path(ns.base_dir).expanduser().resolve()
    source: DataSource = ExportSource(ExportPaths(root=base))
    if ns.export_file:
        export_file = Path(ns.export_file).expanduser().resolve()
    else:
        source.validate()
        export_file = source.newest_export()

    readings, walk_tests = source.load_all(export_file)
    logging.getLogger(__name__).info(
        "Loaded %d log entries and %d walk tests from %s",
        len(readings),
        len(walk_tests),
        export_file,
    )

    config = AlertConfig()
    alerts = evaluate_alerts(trailing_window(readings, now, config.window_hours), config)

    start, end = period_bounds(ns.range, now)
    period_readings = select_between(readings, start, end)
    period_tests = select_between(walk_tests, start, end)
    summary = vitals_summary(readings_to_frame(period_readings))

    print(f"OK: Export file: {export_file}")
    print(f"Alerts / Warnings (last {config.window_hours}h): {len(alerts)}")
    for alert in alerts:
        print(f"  ! {alert.message}")
    print(f"Daily Log Summary ({ns.range}): {len(period_readings)} entries")
    for line in format_summary(summary):
        print(f"  {line}")
    print(f"6-Minute Walk Test History ({ns.range}): {len(period_tests)} tests")
    for test in period_tests:
        print(f"  {format_walk_test(evaluate_walk_test(test))}")
    return 0
