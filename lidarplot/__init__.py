"""
Top-down raster plotting of planar range scans.

Components:
- messages: scan message and sample types
- geometry: sample validation and polar -> pixel projection
- render: pygame-based frame rasterization
- sink: display window and video recording
- pipeline: per-message render-then-sink handler with event emission
- config: YAML configuration
"""

from .geometry import ViewConfig, Rejection, Projection, project_sample
from .messages import ScanMessage, ScanSample
from .render import FrameRenderer, RenderedFrame, FrameStats
from .sink import FrameSink, PygameDisplay, VideoRecorder
from .pipeline import ScanPipeline

__all__ = [
    "ViewConfig",
    "Rejection",
    "Projection",
    "project_sample",
    "ScanMessage",
    "ScanSample",
    "FrameRenderer",
    "RenderedFrame",
    "FrameStats",
    "FrameSink",
    "PygameDisplay",
    "VideoRecorder",
    "ScanPipeline",
]
