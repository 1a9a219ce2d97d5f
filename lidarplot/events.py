from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict

from .render import FrameStats


@dataclass(frozen=True)
class FrameRendered:
    """A frame was rendered and handed to the sink."""

    stats: FrameStats
    recorded: bool

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"event": "frame_rendered"}
        record.update(asdict(self.stats))
        record["rejected"] = self.stats.rejected
        record["recorded"] = self.recorded
        return record


@dataclass(frozen=True)
class FrameFailed:
    """Handling one message raised; the pipeline carried on."""

    frame_id: str
    error: str

    def to_record(self) -> Dict[str, Any]:
        return {"event": "frame_failed", "frame_id": self.frame_id, "error": self.error}


@dataclass(frozen=True)
class RecordingUnavailable:
    """The video writer could not be opened; recording is off for this run."""

    path: str
    codec: str

    def to_record(self) -> Dict[str, Any]:
        return {"event": "recording_unavailable", "path": self.path, "codec": self.codec}


Event = Any
EventListener = Callable[[Event], None]
