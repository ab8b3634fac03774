"""Export runner: iterates the frame range and provides the public API."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from ..config import ExportConfig, FrameRange
from ..engine.protocol import ImagingEngine
from ..errors import InitializationError
from .builder import open_session
from .context import ExportContext
from .stages.panorama import export_panorama
from .stages.six_camera import export_camera_images

logger = logging.getLogger(__name__)


@dataclass
class ExportSummary:
    """Outcome of one export run.

    Attributes:
        output_dir: Directory the images were written into.
        span: Frame indices that were iterated.
        frames_exported: Frames that produced at least one file.
        frames_skipped: Frames dropped on read, conversion or texture failure.
        files_written: Image files written.
    """

    output_dir: Path
    span: range
    frames_exported: int = 0
    frames_skipped: int = 0
    files_written: int = 0


def resolve_frame_span(frame_range: FrameRange | None, total_frames: int) -> range:
    """Resolve the requested range against the stream length.

    All frames when ``frame_range`` is None. An end past the last frame is
    clamped to it. A start past the end gives an empty span.

    Args:
        frame_range: Requested inclusive range, or None for all frames.
        total_frames: Number of frames in the stream.

    Returns:
        Range of frame indices to process.
    """
    if total_frames <= 0:
        return range(0)

    last = total_frames - 1
    if frame_range is None:
        return range(0, last + 1)

    end = min(frame_range.stop, last)
    return range(frame_range.start, end + 1)


def process_frame(frame_idx: int, ctx: ExportContext) -> int | None:
    """Read, convert and export the frame at the stream cursor.

    Args:
        frame_idx: Index of the frame at the cursor (for naming and logging).
        ctx: Export context from open_session().

    Returns:
        Number of files written, or None if the frame was skipped.
    """
    engine_ctx = ctx.engine_context
    pixel_format = ctx.geometry.pixel_format

    status, image = ctx.stream.read_image()
    if not status.ok:
        logger.warning("Could not read frame %d: %s", frame_idx, status.describe())
        return None

    status = engine_ctx.convert_image(image, ctx.buffers.buffers, pixel_format)
    if not status.ok:
        logger.warning("Could not convert frame %d: %s", frame_idx, status.describe())
        return None

    if ctx.config.six_camera:
        return export_camera_images(frame_idx, ctx)

    status = engine_ctx.update_textures(ctx.buffers.buffers, pixel_format)
    if not status.ok:
        logger.warning(
            "Could not update textures for frame %d: %s", frame_idx, status.describe()
        )
        return None

    return 1 if export_panorama(frame_idx, ctx) else 0


def run_frames(ctx: ExportContext) -> ExportSummary:
    """Export every frame in the configured range of an open session.

    Per-frame failures are logged and skipped; the loop never revisits a
    frame.

    Args:
        ctx: Export context from open_session().

    Returns:
        ExportSummary for the run.

    Raises:
        InitializationError: If the frame count cannot be read or the seek
            to the start frame fails.
    """
    config = ctx.config

    status, total_frames = ctx.stream.frame_count()
    if not status.ok:
        raise InitializationError("get frame count", status)
    span = resolve_frame_span(config.frame_range, total_frames)

    output_dir = Path(config.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Could not create output directory %s: %s", output_dir, e)

    summary = ExportSummary(output_dir=output_dir, span=span)
    if not span:
        logger.warning(
            "No frames to process (requested %s, stream has %d frames)",
            config.frame_range or "all frames",
            total_frames,
        )
        return summary

    if span.start > 0:
        status = ctx.stream.go_to_image(span.start)
        if not status.ok:
            raise InitializationError(f"seek to frame {span.start}", status)

    logger.info(
        "Processing frames %d to %d of %d", span.start, span.stop - 1, total_frames
    )
    for frame_idx in tqdm(
        span,
        desc="Exporting frames",
        disable=not sys.stderr.isatty(),
        unit="frame",
    ):
        logger.debug("Processing frame %d of %d", frame_idx, span.stop - 1)
        written = process_frame(frame_idx, ctx)
        if written is None:
            summary.frames_skipped += 1
            continue
        if written:
            summary.frames_exported += 1
        summary.files_written += written

    logger.info(
        "Exported %d of %d frames (%d skipped), %d files written to %s",
        summary.frames_exported,
        len(span),
        summary.frames_skipped,
        summary.files_written,
        output_dir,
    )
    return summary


def run_export(config: ExportConfig, engine: ImagingEngine) -> ExportSummary:
    """Negotiate a stream session and export the configured frames.

    The session is torn down on every exit path.

    Args:
        config: Resolved export configuration.
        engine: Imaging engine to drive.

    Returns:
        ExportSummary for the run.
    """
    with open_session(config, engine) as ctx:
        return run_frames(ctx)


class ExportPipeline:
    """Stream export pipeline.

    Primary programmatic entry point.

    Example:
        pipeline = ExportPipeline(config, engine)
        summary = pipeline.run()
    """

    def __init__(self, config: ExportConfig, engine: ImagingEngine):
        self.config = config
        self.engine = engine

    def run(self) -> ExportSummary:
        """Equivalent to calling run_export(config, engine)."""
        return run_export(self.config, self.engine)
