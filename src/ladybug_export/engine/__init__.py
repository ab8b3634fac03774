"""Boundary to the external imaging engine."""

from .loader import ENGINE_ENV_VAR, load_engine
from .protocol import EngineContext, ImagingEngine, StreamContext
from .types import (
    HIGH_BIT_DEPTH_FORMATS,
    NUM_CAMERAS,
    DataFormat,
    DebayerMethod,
    EngineStatus,
    FileFormat,
    OutputImageType,
    PixelFormat,
    ProcessedImage,
    RawImage,
    StreamHeader,
)

__all__ = [
    "ENGINE_ENV_VAR",
    "HIGH_BIT_DEPTH_FORMATS",
    "NUM_CAMERAS",
    "DataFormat",
    "DebayerMethod",
    "EngineContext",
    "EngineStatus",
    "FileFormat",
    "ImagingEngine",
    "OutputImageType",
    "PixelFormat",
    "ProcessedImage",
    "RawImage",
    "StreamContext",
    "StreamHeader",
    "load_engine",
]
