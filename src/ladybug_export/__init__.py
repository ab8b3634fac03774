"""Export per-camera images and stitched panoramas from recorded Ladybug streams."""

from .config import (
    ColorProcessing,
    ExportConfig,
    FrameRange,
    ImageFormat,
    PanoramaMode,
    RenderType,
    Rotation,
    SixCameraMode,
)
from .errors import ArgumentError, InitializationError, ResourceExhaustion
from .pipeline import (
    ExportContext,
    ExportPipeline,
    ExportSummary,
    FrameGeometry,
    StreamSession,
    open_session,
    run_export,
)

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "ColorProcessing",
    "ExportConfig",
    "ExportContext",
    "ExportPipeline",
    "ExportSummary",
    "FrameGeometry",
    "FrameRange",
    "ImageFormat",
    "InitializationError",
    "PanoramaMode",
    "RenderType",
    "ResourceExhaustion",
    "Rotation",
    "SixCameraMode",
    "StreamSession",
    "open_session",
    "run_export",
]
