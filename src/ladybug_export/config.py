"""Configuration models for a stream export run."""

import logging
import math
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .engine.types import DebayerMethod, FileFormat, OutputImageType

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "ladybugImageOutput"
DEFAULT_PANO_WIDTH = 2048
DEFAULT_PANO_HEIGHT = 1024
DEFAULT_BLENDING_WIDTH = 100
DEFAULT_FALLOFF_VALUE = 1.0


class RenderType(str, Enum):
    """Render type tags accepted by ``-t``."""

    PANO = "pano"
    DOME = "dome"
    SPHERICAL = "spherical"
    RECTIFY_0 = "rectify-0"
    RECTIFY_1 = "rectify-1"
    RECTIFY_2 = "rectify-2"
    RECTIFY_3 = "rectify-3"
    RECTIFY_4 = "rectify-4"
    RECTIFY_5 = "rectify-5"

    @property
    def output_image_type(self) -> OutputImageType:
        return _RENDER_OUTPUT_TYPES[self]


_RENDER_OUTPUT_TYPES = {
    RenderType.PANO: OutputImageType.PANORAMIC,
    RenderType.DOME: OutputImageType.DOME,
    RenderType.SPHERICAL: OutputImageType.SPHERICAL,
    RenderType.RECTIFY_0: OutputImageType.RECTIFIED_CAM0,
    RenderType.RECTIFY_1: OutputImageType.RECTIFIED_CAM1,
    RenderType.RECTIFY_2: OutputImageType.RECTIFIED_CAM2,
    RenderType.RECTIFY_3: OutputImageType.RECTIFIED_CAM3,
    RenderType.RECTIFY_4: OutputImageType.RECTIFIED_CAM4,
    RenderType.RECTIFY_5: OutputImageType.RECTIFIED_CAM5,
}


class ImageFormat(str, Enum):
    """Output image format tags accepted by ``-f``."""

    BMP = "bmp"
    JPG = "jpg"
    JPEG = "jpeg"
    TIFF = "tiff"
    PNG = "png"

    @property
    def file_format(self) -> FileFormat:
        if self is ImageFormat.JPEG:
            return FileFormat.JPG
        return FileFormat(self.value)

    @property
    def extension(self) -> str:
        return self.file_format.extension


class ColorProcessing(str, Enum):
    """Debayering method tags accepted by ``-c``.

    - HQ / HQ_GPU: high quality linear interpolation (CPU / GPU)
    - EDGE: edge sensing
    - NEAR / NEAR_F: nearest neighbour
    - DOWN4 / DOWN16: downsampling methods that shrink each axis by 2 / 4
    - MONO: monochrome
    """

    HQ = "hq"
    HQ_GPU = "hq-gpu"
    EDGE = "edge"
    NEAR = "near"
    NEAR_F = "near-f"
    DOWN4 = "down4"
    DOWN16 = "down16"
    MONO = "mono"

    @property
    def debayer_method(self) -> DebayerMethod:
        return _DEBAYER_METHODS[self]

    @property
    def downsample_factor(self) -> int:
        """Per-axis reduction of the converted image relative to the sensor."""
        if self is ColorProcessing.DOWN4:
            return 2
        if self is ColorProcessing.DOWN16:
            return 4
        return 1


_DEBAYER_METHODS = {
    ColorProcessing.HQ: DebayerMethod.HQLINEAR,
    ColorProcessing.HQ_GPU: DebayerMethod.HQLINEAR_GPU,
    ColorProcessing.EDGE: DebayerMethod.EDGE_SENSING,
    ColorProcessing.NEAR: DebayerMethod.NEAREST_NEIGHBOR_FAST,
    ColorProcessing.NEAR_F: DebayerMethod.NEAREST_NEIGHBOR_FAST,
    ColorProcessing.DOWN4: DebayerMethod.DOWNSAMPLE4,
    ColorProcessing.DOWN16: DebayerMethod.DOWNSAMPLE16,
    ColorProcessing.MONO: DebayerMethod.MONO,
}


class Rotation(BaseModel):
    """Panorama orientation in degrees.

    Attributes:
        front: Pitch rotation (positive looks up).
        down: Yaw rotation (positive rotates right).
    """

    model_config = ConfigDict(frozen=True)

    front: float = 0.0
    down: float = 0.0

    @property
    def is_zero(self) -> bool:
        return self.front == 0.0 and self.down == 0.0

    def as_radians(self) -> tuple[float, float, float]:
        """Return (pitch, yaw, roll) in radians; roll is always zero."""
        return math.radians(self.front), math.radians(self.down), 0.0


class FrameRange(BaseModel):
    """Explicit inclusive frame range. Start may exceed stop (empty range)."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    stop: int = Field(ge=0)


class PanoramaMode(BaseModel):
    """Render one stitched off-screen image per frame."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["panorama"] = "panorama"
    width: int = DEFAULT_PANO_WIDTH
    height: int = DEFAULT_PANO_HEIGHT
    render_type: RenderType = RenderType.PANO
    rotation: Rotation = Field(default_factory=Rotation)

    @field_validator("width", "height")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate that the output size is positive."""
        if v <= 0:
            raise ValueError(f"output size must be positive, got {v}")
        return v


class SixCameraMode(BaseModel):
    """Save each camera's processed image separately."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["six_camera"] = "six_camera"


OutputMode = Annotated[Union[PanoramaMode, SixCameraMode], Field(discriminator="kind")]


class ExportConfig(BaseModel):
    """Fully resolved settings for one export run.

    Attributes:
        input_path: Stream file to read.
        output_dir: Directory the image files are written into.
        frame_range: Explicit frame range, or None for all frames.
        mode: Panorama or six-camera export, with the panorama-only settings.
        image_format: Output image format tag.
        color_processing: Debayering method tag.
        blending_width: Seam blending width in pixels.
        falloff_enabled: Enable falloff correction.
        falloff_value: Falloff correction attenuation.
        software_rendering: Render with the software rasteriser.
        anti_aliasing: Enable anti-aliasing.
        stabilization: Enable image stabilization.
    """

    model_config = ConfigDict(frozen=True)

    input_path: str
    output_dir: str = DEFAULT_OUTPUT_DIR
    frame_range: FrameRange | None = None
    mode: OutputMode = Field(default_factory=PanoramaMode)

    image_format: ImageFormat = ImageFormat.JPG
    color_processing: ColorProcessing = ColorProcessing.HQ
    blending_width: int = DEFAULT_BLENDING_WIDTH

    falloff_enabled: bool = False
    falloff_value: float = DEFAULT_FALLOFF_VALUE
    software_rendering: bool = False
    anti_aliasing: bool = False
    stabilization: bool = False

    @field_validator("input_path")
    @classmethod
    def validate_input_path(cls, v: str) -> str:
        """Validate that an input stream was given."""
        if not v.strip():
            raise ValueError("input path is required")
        return v

    @field_validator("output_dir")
    @classmethod
    def default_output_dir(cls, v: str) -> str:
        """Fall back to the default directory when no output path is given."""
        return v if v.strip() else DEFAULT_OUTPUT_DIR

    @field_validator("blending_width")
    @classmethod
    def validate_blending_width(cls, v: int) -> int:
        """Validate that blending width is not negative."""
        if v < 0:
            raise ValueError(f"blending_width must be non-negative, got {v}")
        return v

    @model_validator(mode="after")
    def warn_unused_falloff(self) -> "ExportConfig":
        """Warn when a falloff value is given without enabling falloff correction."""
        if not self.falloff_enabled and self.falloff_value != DEFAULT_FALLOFF_VALUE:
            logger.warning(
                "Falloff value %.2f is ignored because falloff correction is disabled (-a)",
                self.falloff_value,
            )
        return self

    @property
    def six_camera(self) -> bool:
        return isinstance(self.mode, SixCameraMode)


def format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors with dotted field paths.

    Args:
        error: Pydantic ValidationError.

    Returns:
        Formatted error string, one ``path: message`` line per error.
    """
    lines = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"])
        lines.append(f"  {path}: {err['msg']}")
    return "\n".join(lines)
