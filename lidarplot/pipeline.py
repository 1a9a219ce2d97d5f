from __future__ import annotations

import sys
from typing import Iterable, List, Optional

from .events import Event, EventListener, FrameFailed, FrameRendered, RecordingUnavailable
from .messages import ScanMessage
from .render import FrameRenderer, RenderedFrame
from .sink import FrameSink


class ScanPipeline:
    """Render-then-sink handler, called once per incoming scan message.

    Holds no per-message state, so ingestion adapters can call it directly
    from their callbacks. Errors raised while handling one message are
    reported as ``FrameFailed`` events and never escape the call; a
    listener that raises is reported on stderr and skipped for that event.
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        sink: FrameSink,
        listeners: Iterable[EventListener] = (),
    ) -> None:
        self.renderer = renderer
        self.sink = sink
        self.listeners: List[EventListener] = list(listeners)

        recorder = sink.recorder
        if recorder is not None and not recorder.is_open:
            self._emit(RecordingUnavailable(path=recorder.path, codec=recorder.codec))

    def __call__(self, message: ScanMessage) -> Optional[RenderedFrame]:
        try:
            frame = self.renderer.render(message)
            recorded = self.sink.deliver(frame.image)
        except Exception as exc:  # noqa: BLE001
            self._emit(FrameFailed(frame_id=message.frame_id, error=f"{type(exc).__name__}: {exc}"))
            return None
        self._emit(FrameRendered(stats=frame.stats, recorded=recorded))
        return frame

    @property
    def quit_requested(self) -> bool:
        return bool(getattr(self.sink.display, "quit_requested", False))

    def close(self) -> None:
        self.sink.close()

    def _emit(self, event: Event) -> None:
        for listener in self.listeners:
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                print(f"Exception in event listener {listener!r}: {exc}", file=sys.stderr)
