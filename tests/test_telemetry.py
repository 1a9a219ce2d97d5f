from __future__ import annotations

import io
import json
from typing import Any

from lidarplot.events import FrameFailed, FrameRendered, RecordingUnavailable
from lidarplot.render import FrameStats
from telemetry.logger import ConsoleReporter, TelemetryLogger


def make_stats(**overrides: Any) -> FrameStats:
    values = dict(
        frame_id="laser",
        declared_count=5,
        processed=5,
        plotted=3,
        invalid=1,
        out_of_range=1,
        out_of_frame=0,
        clamped=False,
        angle_min=0.0,
        angle_max=180.0,
    )
    values.update(overrides)
    return FrameStats(**values)


def test_logger_appends_one_json_object_per_event(tmp_path: Any) -> None:
    path = tmp_path / "runs" / "events.jsonl"
    logger = TelemetryLogger(str(path))
    logger(RecordingUnavailable(path="scan.avi", codec="MJPG"))
    logger(FrameRendered(stats=make_stats(), recorded=False))
    logger.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["event"] == "recording_unavailable"
    assert second["event"] == "frame_rendered"
    assert second["plotted"] == 3
    assert second["rejected"] == 2
    assert "t" in second


def test_logger_writes_null_for_non_finite_angles(tmp_path: Any) -> None:
    path = tmp_path / "events.jsonl"
    logger = TelemetryLogger(str(path))
    logger(FrameRendered(stats=make_stats(angle_min=float("nan"), angle_max=float("inf")), recorded=True))
    logger.close()

    record = json.loads(path.read_text(encoding="utf-8"))
    assert record["angle_min"] is None
    assert record["angle_max"] is None


def test_logger_ignores_events_after_close(tmp_path: Any) -> None:
    path = tmp_path / "events.jsonl"
    logger = TelemetryLogger(str(path))
    logger.close()
    logger(FrameFailed(frame_id="laser", error="boom"))
    assert path.read_text(encoding="utf-8") == ""


def test_console_reporter_lines() -> None:
    out = io.StringIO()
    reporter = ConsoleReporter(stream=out, verbose=True)
    reporter(FrameRendered(stats=make_stats(), recorded=True))
    reporter(RecordingUnavailable(path="scan.avi", codec="MJPG"))
    reporter(FrameFailed(frame_id="laser", error="boom"))

    text = out.getvalue()
    assert "I heard a laser scan laser [5]" in text
    assert "angle_range [0.0, 180.0] deg" in text
    assert "invalid=1" in text
    assert "video will not be saved" in text
    assert "boom" in text
