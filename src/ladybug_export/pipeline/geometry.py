"""Frame geometry derived once from the seed frame of a stream."""

import logging
from dataclasses import dataclass

from ..config import ColorProcessing
from ..engine.types import HIGH_BIT_DEPTH_FORMATS, DataFormat, PixelFormat, RawImage

logger = logging.getLogger(__name__)


def is_high_bit_depth(data_format: DataFormat) -> bool:
    """True for the 12-bit and 16-bit data format family."""
    return data_format in HIGH_BIT_DEPTH_FORMATS


@dataclass(frozen=True)
class FrameGeometry:
    """Texture geometry fixed for the whole run.

    Attributes:
        native_width: Per-camera image width reported by the seed frame.
        native_height: Per-camera image height reported by the seed frame.
        high_bit_depth: Whether the stream's data format is 12/16-bit.
        downsample_factor: Per-axis reduction implied by the debayering method.
    """

    native_width: int
    native_height: int
    high_bit_depth: bool
    downsample_factor: int = 1

    @property
    def texture_width(self) -> int:
        return self.native_width // self.downsample_factor

    @property
    def texture_height(self) -> int:
        return self.native_height // self.downsample_factor

    @property
    def pixel_format(self) -> PixelFormat:
        return PixelFormat.BGRU16 if self.high_bit_depth else PixelFormat.BGRU

    @property
    def bytes_per_pixel(self) -> int:
        return self.pixel_format.bytes_per_pixel

    @property
    def buffer_size(self) -> int:
        """Bytes in one camera buffer."""
        return self.texture_width * self.texture_height * self.bytes_per_pixel


def compute_frame_geometry(
    seed: RawImage,
    high_bit_depth: bool,
    color_processing: ColorProcessing,
) -> FrameGeometry:
    """Derive texture geometry from the first frame read from the stream.

    Args:
        seed: First raw frame of the stream.
        high_bit_depth: Result of classifying the stream header's data format.
        color_processing: Debayering method the context was configured with.

    Returns:
        FrameGeometry for the run.
    """
    geometry = FrameGeometry(
        native_width=seed.cols,
        native_height=seed.rows,
        high_bit_depth=high_bit_depth,
        downsample_factor=color_processing.downsample_factor,
    )
    logger.info(
        "Image info: %dx%d, format=%s; texture %dx%d (%d bytes/pixel)",
        seed.cols,
        seed.rows,
        seed.data_format.value,
        geometry.texture_width,
        geometry.texture_height,
        geometry.bytes_per_pixel,
    )
    return geometry
