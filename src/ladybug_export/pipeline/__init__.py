"""Export pipeline package: session negotiation, frame loop and export stages."""

from .buffers import BufferSet, allocate_buffers
from .builder import StreamSession, open_session
from .context import ExportContext
from .geometry import FrameGeometry, compute_frame_geometry, is_high_bit_depth
from .runner import (
    ExportPipeline,
    ExportSummary,
    process_frame,
    resolve_frame_span,
    run_export,
    run_frames,
)

__all__ = [
    "BufferSet",
    "ExportContext",
    "ExportPipeline",
    "ExportSummary",
    "FrameGeometry",
    "StreamSession",
    "allocate_buffers",
    "compute_frame_geometry",
    "is_high_bit_depth",
    "open_session",
    "process_frame",
    "resolve_frame_span",
    "run_export",
    "run_frames",
]
