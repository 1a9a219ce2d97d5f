from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

import cv2
import numpy as np
import pygame

from .render import image_to_surface


class DisplayUnavailableError(RuntimeError):
    """The windowing backend could not create the plot window."""


class PygameDisplay:
    """Interactive window showing the latest frame.

    ``show`` never waits for input: it drains the pygame event queue once so
    the window stays responsive, and remembers whether the user asked to quit
    (window close button or ESC).
    """

    def __init__(self, window_name: str, frame_size: Tuple[int, int]) -> None:
        try:
            pygame.init()
            pygame.display.set_caption(window_name)
            self.screen = pygame.display.set_mode(frame_size)
        except pygame.error as exc:
            raise DisplayUnavailableError(f"Cannot open window '{window_name}': {exc}") from exc
        self.window_name = window_name
        self.frame_size = frame_size
        self.quit_requested = False

    def show(self, image: np.ndarray) -> None:
        self.screen.blit(image_to_surface(image), (0, 0))
        pygame.display.flip()
        self.poll()

    def poll(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.quit_requested = True

    def close(self) -> None:
        pygame.quit()


WriterFactory = Callable[[str, int, float, Tuple[int, int]], Any]


class VideoRecorder:
    """Append-only video stream backed by ``cv2.VideoWriter``.

    Opened once at startup. If the writer fails to open, the recorder stays
    closed and ``write`` does nothing for the rest of the run.
    """

    def __init__(
        self,
        path: str,
        codec: str,
        fps: float,
        frame_size: Tuple[int, int],
        writer: Optional[Any] = None,
    ) -> None:
        self.path = path
        self.codec = codec
        self.fps = fps
        self.frame_size = frame_size
        self._writer = writer
        self.frames_written = 0

    @classmethod
    def open(
        cls,
        path: str,
        codec: str = "MJPG",
        fps: float = 10.0,
        frame_size: Tuple[int, int] = (500, 500),
        writer_factory: WriterFactory = cv2.VideoWriter,
    ) -> "VideoRecorder":
        writer = None
        if len(codec) == 4:
            fourcc = cv2.VideoWriter_fourcc(*codec)
            candidate = writer_factory(path, fourcc, float(fps), tuple(frame_size))
            if candidate.isOpened():
                writer = candidate
        return cls(path, codec, fps, frame_size, writer=writer)

    @property
    def is_open(self) -> bool:
        return self._writer is not None

    def write(self, image: np.ndarray) -> bool:
        """Append one RGB frame; return False when recording is off."""
        if self._writer is None:
            return False
        # OpenCV expects BGR channel order.
        self._writer.write(cv2.cvtColor(image, cv2.COLOR_RGB2BGR))
        self.frames_written += 1
        return True

    def close(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None


class FrameSink:
    """Delivers finished frames to the display and, if open, the recorder."""

    def __init__(self, display: Any, recorder: Optional[VideoRecorder] = None) -> None:
        self.display = display
        self.recorder = recorder

    @property
    def recording(self) -> bool:
        return self.recorder is not None and self.recorder.is_open

    def deliver(self, image: np.ndarray) -> bool:
        """Show ``image`` and append it to the recording; return True if recorded."""
        self.display.show(image)
        if self.recorder is None:
            return False
        return self.recorder.write(image)

    def close(self) -> None:
        if self.recorder is not None:
            self.recorder.close()
        self.display.close()
