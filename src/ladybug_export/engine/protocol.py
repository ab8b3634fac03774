"""Protocol definitions for the external imaging engine.

The engine owns stream decoding, debayering, stitching, off-screen rendering
and image encoding. This package only drives it. Every operation returns an
``EngineStatus``; operations that produce a value return ``(status, value)``
where ``value`` is None unless the status is OK.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from .types import (
    DebayerMethod,
    EngineStatus,
    FileFormat,
    OutputImageType,
    PixelFormat,
    ProcessedImage,
    RawImage,
    StreamHeader,
)


@runtime_checkable
class StreamContext(Protocol):
    """Reader over a recorded multi-camera stream file."""

    def open_for_reading(self, path: str) -> EngineStatus:
        """Open a stream file. Reading starts at the first frame."""
        ...

    def extract_config_file(self, destination: str) -> EngineStatus:
        """Write the calibration embedded in the stream to ``destination``."""
        ...

    def read_header(self) -> tuple[EngineStatus, StreamHeader | None]:
        ...

    def frame_count(self) -> tuple[EngineStatus, int]:
        ...

    def read_image(self) -> tuple[EngineStatus, RawImage | None]:
        """Read the frame at the cursor and advance the cursor by one."""
        ...

    def go_to_image(self, index: int) -> EngineStatus:
        """Move the cursor to the zero-based frame ``index``."""
        ...

    def destroy(self) -> EngineStatus:
        ...


@runtime_checkable
class EngineContext(Protocol):
    """Processing context: debayering, stitching, rendering and saving."""

    def load_config(self, path: str) -> EngineStatus:
        ...

    def set_color_processing_method(self, method: DebayerMethod) -> EngineStatus:
        ...

    def set_blending_params(self, width: int) -> EngineStatus:
        ...

    def initialize_alpha_masks(self, cols: int, rows: int) -> EngineStatus:
        ...

    def set_alpha_masking(self, enabled: bool) -> EngineStatus:
        ...

    def set_falloff_correction(self, enabled: bool, attenuation: float) -> EngineStatus:
        ...

    def set_anti_aliasing(self, enabled: bool) -> EngineStatus:
        ...

    def enable_software_rendering(self, enabled: bool) -> EngineStatus:
        ...

    def enable_image_stabilization(self, enabled: bool) -> EngineStatus:
        ...

    def configure_output_images(self, output_type: OutputImageType) -> EngineStatus:
        ...

    def set_offscreen_image_size(
        self, output_type: OutputImageType, cols: int, rows: int
    ) -> EngineStatus:
        ...

    def set_3d_map_rotation(self, rx: float, ry: float, rz: float) -> EngineStatus:
        """Rotate the stitching mesh. Angles are in radians."""
        ...

    def convert_image(
        self,
        image: RawImage,
        buffers: Sequence[np.ndarray],
        pixel_format: PixelFormat,
    ) -> EngineStatus:
        """Debayer ``image`` into one buffer per camera, in place."""
        ...

    def update_textures(
        self, buffers: Sequence[np.ndarray], pixel_format: PixelFormat
    ) -> EngineStatus:
        ...

    def render_offscreen_image(
        self, output_type: OutputImageType, pixel_format: PixelFormat
    ) -> tuple[EngineStatus, ProcessedImage | None]:
        ...

    def save_image(
        self, image: ProcessedImage, path: str, file_format: FileFormat
    ) -> EngineStatus:
        ...

    def destroy(self) -> EngineStatus:
        ...


@runtime_checkable
class ImagingEngine(Protocol):
    """Factory for engine and stream contexts."""

    def create_context(self) -> tuple[EngineStatus, EngineContext | None]:
        ...

    def create_stream_context(self) -> tuple[EngineStatus, StreamContext | None]:
        ...
