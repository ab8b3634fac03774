"""Six-camera export stage: save each camera's converted buffer."""

import logging
from pathlib import Path

from ...engine.types import ProcessedImage
from ..context import ExportContext

logger = logging.getLogger(__name__)


def camera_image_path(output_dir: str | Path, frame_idx: int, camera: int, ext: str) -> Path:
    """Return ``<output_dir>/<frame:06d>_cam<camera>.<ext>``."""
    return Path(output_dir) / f"{frame_idx:06d}_cam{camera}.{ext}"


def export_camera_images(frame_idx: int, ctx: ExportContext) -> int:
    """Save the processed image of every camera for one frame.

    A failed save is logged and does not stop the remaining cameras.

    Args:
        frame_idx: Stream frame index (used for file naming).
        ctx: Export context whose buffers hold the converted frame.

    Returns:
        Number of camera images saved.
    """
    config = ctx.config
    geometry = ctx.geometry
    file_format = config.image_format.file_format

    saved = 0
    for camera, pixels in enumerate(ctx.buffers):
        image = ProcessedImage(
            pixels=pixels,
            cols=geometry.texture_width,
            rows=geometry.texture_height,
            pixel_format=geometry.pixel_format,
        )
        path = camera_image_path(config.output_dir, frame_idx, camera, file_format.extension)
        status = ctx.engine_context.save_image(image, str(path), file_format)
        if not status.ok:
            logger.warning(
                "Frame %d: could not save camera %d image: %s",
                frame_idx,
                camera,
                status.describe(),
            )
            continue
        saved += 1

    logger.debug("Frame %d: saved %d camera images", frame_idx, saved)
    return saved
