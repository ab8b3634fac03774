"""Value types and enumerations shared with the imaging engine."""

from dataclasses import dataclass
from enum import Enum, IntEnum

import numpy as np

# Physical cameras in a Ladybug head
NUM_CAMERAS = 6


class EngineStatus(IntEnum):
    """Result code returned by every engine operation."""

    OK = 0
    FAILED = 1
    INVALID_ARGUMENT = 2
    INVALID_VALUE = 3
    NOT_INITIALIZED = 4
    MEMORY_ALLOC_ERROR = 5
    COULD_NOT_OPEN_FILE = 6
    COULD_NOT_READ_FILE = 7
    END_OF_STREAM = 8
    CORRUPTED_IMAGE_DATA = 9
    NOT_SUPPORTED = 10
    OFFSCREEN_BUFFER_INIT_ERROR = 11
    NOT_IMPLEMENTED = 12

    @property
    def ok(self) -> bool:
        return self is EngineStatus.OK

    def describe(self) -> str:
        """Human-readable description of the status."""
        return self.name.replace("_", " ").lower()


class DataFormat(str, Enum):
    """Raw data format recorded in a stream header."""

    RAW8 = "raw8"
    JPEG8 = "jpeg8"
    COLOR_SEP_RAW8 = "color_sep_raw8"
    COLOR_SEP_JPEG8 = "color_sep_jpeg8"
    HALF_HEIGHT_RAW8 = "half_height_raw8"
    COLOR_SEP_HALF_HEIGHT_JPEG8 = "color_sep_half_height_jpeg8"
    RAW12 = "raw12"
    HALF_HEIGHT_RAW12 = "half_height_raw12"
    COLOR_SEP_JPEG12 = "color_sep_jpeg12"
    COLOR_SEP_HALF_HEIGHT_JPEG12 = "color_sep_half_height_jpeg12"
    COLOR_SEP_JPEG12_PROCESSED = "color_sep_jpeg12_processed"
    COLOR_SEP_HALF_HEIGHT_JPEG12_PROCESSED = "color_sep_half_height_jpeg12_processed"
    RAW16 = "raw16"
    HALF_HEIGHT_RAW16 = "half_height_raw16"


HIGH_BIT_DEPTH_FORMATS = frozenset(
    {
        DataFormat.RAW12,
        DataFormat.HALF_HEIGHT_RAW12,
        DataFormat.COLOR_SEP_JPEG12,
        DataFormat.COLOR_SEP_HALF_HEIGHT_JPEG12,
        DataFormat.COLOR_SEP_JPEG12_PROCESSED,
        DataFormat.COLOR_SEP_HALF_HEIGHT_JPEG12_PROCESSED,
        DataFormat.RAW16,
        DataFormat.HALF_HEIGHT_RAW16,
    }
)


class DebayerMethod(str, Enum):
    """Color processing methods understood by the engine."""

    HQLINEAR = "hqlinear"
    HQLINEAR_GPU = "hqlinear_gpu"
    EDGE_SENSING = "edge_sensing"
    NEAREST_NEIGHBOR_FAST = "nearest_neighbor_fast"
    DOWNSAMPLE4 = "downsample4"
    DOWNSAMPLE16 = "downsample16"
    MONO = "mono"


class PixelFormat(str, Enum):
    """Pixel layouts for converted and rendered images."""

    BGR = "bgr"
    BGRU = "bgru"
    BGRU16 = "bgru16"

    @property
    def bytes_per_pixel(self) -> int:
        return {PixelFormat.BGR: 3, PixelFormat.BGRU: 4, PixelFormat.BGRU16: 8}[self]


class OutputImageType(str, Enum):
    """Off-screen image types the engine can render."""

    PANORAMIC = "panoramic"
    DOME = "dome"
    SPHERICAL = "spherical"
    RECTIFIED_CAM0 = "rectified_cam0"
    RECTIFIED_CAM1 = "rectified_cam1"
    RECTIFIED_CAM2 = "rectified_cam2"
    RECTIFIED_CAM3 = "rectified_cam3"
    RECTIFIED_CAM4 = "rectified_cam4"
    RECTIFIED_CAM5 = "rectified_cam5"


class FileFormat(str, Enum):
    """Image file formats the engine can write."""

    BMP = "bmp"
    JPG = "jpg"
    TIFF = "tiff"
    PNG = "png"

    @property
    def extension(self) -> str:
        return self.value


@dataclass(frozen=True)
class StreamHeader:
    """Metadata read from a stream header.

    Attributes:
        serial_base: Serial number of the camera base unit.
        serial_head: Serial number of the camera head.
        legacy_frame_rate: Integer frame rate field used by stream versions < 7.
        frame_rate: Floating point frame rate used by stream versions >= 7.
        data_format: Raw data format of the recorded images.
        resolution: Engine resolution tag.
        stream_version: Container format version.
    """

    serial_base: int
    serial_head: int
    legacy_frame_rate: int
    frame_rate: float
    data_format: DataFormat
    resolution: str
    stream_version: int

    @property
    def effective_frame_rate(self) -> float:
        if self.stream_version < 7:
            return float(self.legacy_frame_rate)
        return self.frame_rate


@dataclass
class RawImage:
    """One raw multi-camera frame as read from a stream."""

    cols: int
    rows: int
    data_format: DataFormat
    data: bytes | None = None


@dataclass
class ProcessedImage:
    """A processed image handed to the engine for saving.

    ``pixels`` is an (H, W, C) array whose dtype matches ``pixel_format``.
    """

    pixels: np.ndarray
    cols: int
    rows: int
    pixel_format: PixelFormat
