"""Panorama export stage: render the off-screen image and save it."""

import logging
from pathlib import Path

from ...config import PanoramaMode
from ...engine.types import PixelFormat
from ..context import ExportContext

logger = logging.getLogger(__name__)


def panorama_path(output_dir: str | Path, frame_idx: int, ext: str) -> Path:
    """Return ``<output_dir>/<frame:06d>.<ext>``."""
    return Path(output_dir) / f"{frame_idx:06d}.{ext}"


def export_panorama(frame_idx: int, ctx: ExportContext) -> bool:
    """Render the configured off-screen image for one frame and save it.

    Textures must already hold this frame. Render or save failures are
    logged and only affect this frame.

    Args:
        frame_idx: Stream frame index (used for file naming).
        ctx: Export context configured for panorama output.

    Returns:
        True if the image was written.
    """
    config = ctx.config
    mode = config.mode
    if not isinstance(mode, PanoramaMode):
        raise TypeError("export_panorama requires a panorama-mode configuration")

    output_type = mode.render_type.output_image_type
    status, image = ctx.engine_context.render_offscreen_image(output_type, PixelFormat.BGR)
    if not status.ok:
        logger.warning(
            "Frame %d: could not render %s image: %s",
            frame_idx,
            output_type.value,
            status.describe(),
        )
        return False

    file_format = config.image_format.file_format
    path = panorama_path(config.output_dir, frame_idx, file_format.extension)
    status = ctx.engine_context.save_image(image, str(path), file_format)
    if not status.ok:
        logger.warning(
            "Frame %d: could not save panorama to %s: %s",
            frame_idx,
            path,
            status.describe(),
        )
        return False

    logger.info("Frame %d: wrote %s", frame_idx, path)
    return True
