"""Per-camera texture buffers, allocated once per run."""

import logging

import numpy as np

from ..engine.types import NUM_CAMERAS, EngineStatus, PixelFormat
from ..errors import ResourceExhaustion
from .geometry import FrameGeometry

logger = logging.getLogger(__name__)


class BufferSet:
    """One (H, W, 4) BGRU buffer per camera.

    Buffers are uint8 for standard bit depth and uint16 for high bit depth, so
    each pixel occupies 4 or 8 bytes respectively.
    """

    def __init__(self, buffers: list[np.ndarray], pixel_format: PixelFormat):
        self._buffers = buffers
        self.pixel_format = pixel_format

    def __len__(self) -> int:
        return len(self._buffers)

    def __getitem__(self, camera: int) -> np.ndarray:
        return self._buffers[camera]

    def __iter__(self):
        return iter(self._buffers)

    @property
    def buffers(self) -> list[np.ndarray]:
        return self._buffers

    @property
    def released(self) -> bool:
        return not self._buffers

    def release(self) -> None:
        """Drop all buffers. Safe to call more than once."""
        self._buffers = []


def allocate_buffers(geometry: FrameGeometry, num_cameras: int = NUM_CAMERAS) -> BufferSet:
    """Allocate one texture buffer per camera.

    Args:
        geometry: Negotiated frame geometry.
        num_cameras: Number of physical cameras.

    Returns:
        BufferSet sized texture_width x texture_height x bytes_per_pixel per camera.

    Raises:
        ResourceExhaustion: If any buffer cannot be allocated.
    """
    dtype = np.uint16 if geometry.high_bit_depth else np.uint8
    shape = (geometry.texture_height, geometry.texture_width, 4)

    buffers = []
    for camera in range(num_cameras):
        try:
            buffers.append(np.zeros(shape, dtype=dtype))
        except (MemoryError, ValueError) as e:
            raise ResourceExhaustion(
                "allocate texture buffers",
                EngineStatus.MEMORY_ALLOC_ERROR,
                detail=f"camera {camera}: {e}",
            ) from e

    logger.debug(
        "Allocated %d texture buffers of %d bytes", num_cameras, geometry.buffer_size
    )
    return BufferSet(buffers, geometry.pixel_format)
