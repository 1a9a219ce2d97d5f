from __future__ import annotations

import json
import math
import os
import sys
import threading
import time
from typing import Any, Dict, Optional, TextIO


class TelemetryLogger:
    """Structured JSONL log of pipeline events.

    Thread-safe, append-only; one JSON object per event, stamped with wall
    time. Usable directly as a pipeline listener.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        self._lock = threading.Lock()
        self._fp: Optional[TextIO] = open(self.path, "a", encoding="utf-8")

    def __call__(self, event: Any) -> None:
        self.log_event(event)

    def log_event(self, event: Any) -> None:
        record: Dict[str, Any] = {"t": time.time()}
        record.update(event.to_record())
        self.log_record(record)

    def log_record(self, record: Dict[str, Any]) -> None:
        """Append a single record to the JSONL file."""
        if self._fp is None:
            return
        # NaN or inf angles from broken drivers are not valid JSON; store them as null.
        line = json.dumps(_finite(record), separators=(",", ":"))
        with self._lock:
            self._fp.write(line + "\n")
            self._fp.flush()

    def close(self) -> None:
        if self._fp is not None:
            self._fp.close()
            self._fp = None


class ConsoleReporter:
    """Prints one line per event for the operator watching the terminal."""

    def __init__(self, stream: Optional[TextIO] = None, verbose: bool = False) -> None:
        self.stream = stream
        self.verbose = verbose

    def __call__(self, event: Any) -> None:
        record = event.to_record()
        kind = record["event"]
        out = self.stream or sys.stdout
        if kind == "frame_rendered":
            print(
                f"I heard a laser scan {record['frame_id']} [{record['declared_count']}]: "
                f"angle_range [{record['angle_min']:.1f}, {record['angle_max']:.1f}] deg, "
                f"plotted {record['plotted']}, rejected {record['rejected']}",
                file=out,
            )
            if self.verbose:
                print(
                    f"  invalid={record['invalid']} out_of_range={record['out_of_range']} "
                    f"out_of_frame={record['out_of_frame']} clamped={record['clamped']} "
                    f"recorded={record['recorded']}",
                    file=out,
                )
        elif kind == "recording_unavailable":
            print(
                f"[WARN] Failed to open video writer ({record['path']}, {record['codec']}), "
                "video will not be saved.",
                file=self.stream or sys.stderr,
            )
        elif kind == "frame_failed":
            print(f"[ERROR] Frame {record['frame_id']!r} dropped: {record['error']}", file=self.stream or sys.stderr)


def _finite(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (None if isinstance(v, float) and not math.isfinite(v) else v) for k, v in record.items()}
