"""Export context dataclass for state owned by one stream session."""

from dataclasses import dataclass

from ..config import ExportConfig
from ..engine.protocol import EngineContext, StreamContext
from ..engine.types import StreamHeader
from .buffers import BufferSet
from .geometry import FrameGeometry


@dataclass
class ExportContext:
    """Session state that is constant across all frames.

    Created once by open_session() and passed to every per-frame operation.
    The open_session() context manager owns the handles and buffers and
    releases them on exit.
    """

    config: ExportConfig
    engine_context: EngineContext
    stream: StreamContext
    header: StreamHeader
    geometry: FrameGeometry
    buffers: BufferSet
