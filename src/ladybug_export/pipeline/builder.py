"""Stream session setup: engine negotiation and one-time output configuration."""

import logging
import os
import tempfile
from pathlib import Path

from ..config import ExportConfig, PanoramaMode
from ..engine.protocol import EngineContext, ImagingEngine, StreamContext
from ..engine.types import EngineStatus, StreamHeader
from ..errors import InitializationError
from .buffers import BufferSet, allocate_buffers
from .context import ExportContext
from .geometry import compute_frame_geometry, is_high_bit_depth

logger = logging.getLogger(__name__)

TEMP_CONFIG_PREFIX = "lb_cfg_"


def _require(status: EngineStatus, operation: str) -> None:
    """Raise InitializationError unless ``status`` is OK."""
    if not status.ok:
        raise InitializationError(operation, status)


def _warn_unless_ok(status: EngineStatus, operation: str) -> bool:
    """Log a warning unless ``status`` is OK. Returns whether it was OK."""
    if not status.ok:
        logger.warning("Could not %s: %s", operation, status.describe())
        return False
    return True


class StreamSession:
    """Owns the engine context, stream context, buffers and temp config file.

    Entering the session runs the full negotiation sequence and returns the
    ExportContext. Everything acquired is released on exit, whether the
    negotiation or the export failed or succeeded.

    Example:
        with StreamSession(config, engine) as ctx:
            run_frames(ctx)
    """

    def __init__(self, config: ExportConfig, engine: ImagingEngine):
        self.config = config
        self.engine = engine
        self.engine_context: EngineContext | None = None
        self.stream: StreamContext | None = None
        self.buffers: BufferSet | None = None
        self.temp_config_path: Path | None = None
        self.context: ExportContext | None = None

    def __enter__(self) -> ExportContext:
        try:
            self.context = self._negotiate()
        except BaseException:
            self.close()
            raise
        return self.context

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Release buffers, destroy contexts and remove the temp config file."""
        if self.buffers is not None:
            self.buffers.release()
            self.buffers = None

        if self.stream is not None:
            _warn_unless_ok(self.stream.destroy(), "destroy stream context")
            self.stream = None

        if self.engine_context is not None:
            _warn_unless_ok(self.engine_context.destroy(), "destroy context")
            self.engine_context = None

        self._remove_temp_config()
        self.context = None

    def _negotiate(self) -> ExportContext:
        config = self.config

        # 1. Contexts
        logger.info("Initializing imaging engine")
        status, self.engine_context = self.engine.create_context()
        _require(status, "create context")
        status, self.stream = self.engine.create_stream_context()
        _require(status, "create stream context")
        ctx = self.engine_context
        stream = self.stream

        # 2. Open stream
        logger.info("Opening stream file: %s", config.input_path)
        _require(stream.open_for_reading(config.input_path), "open stream for reading")

        # 3. Embedded calibration
        self._load_stream_config(ctx, stream)

        # 4. Header
        status, header = stream.read_header()
        _require(status, "read stream header")
        _log_stream_info(header)

        # 5. Bit depth
        high_bit_depth = is_high_bit_depth(header.data_format)
        if high_bit_depth:
            logger.info("Detected high bit depth format (12/16-bit)")

        # 6. Debayering
        logger.info("Setting debayering method: %s", config.color_processing.value)
        _require(
            ctx.set_color_processing_method(config.color_processing.debayer_method),
            "set color processing method",
        )

        # 7-8. Seed frame and geometry
        status, seed = stream.read_image()
        _require(status, "read initial image from stream")
        geometry = compute_frame_geometry(seed, high_bit_depth, config.color_processing)

        # 9. Buffers
        self.buffers = allocate_buffers(geometry)

        # 10. Blending and rendering options
        _warn_unless_ok(
            ctx.set_blending_params(config.blending_width), "set blending params"
        )
        _apply_render_options(ctx, config)

        # 11. Alpha masks
        logger.info("Initializing alpha masks (this may take some time)")
        _warn_unless_ok(
            ctx.initialize_alpha_masks(geometry.texture_width, geometry.texture_height),
            "initialize alpha masks",
        )
        _warn_unless_ok(ctx.set_alpha_masking(True), "enable alpha masking")

        # 12. Off-screen output (panorama mode only)
        if isinstance(config.mode, PanoramaMode):
            _configure_offscreen_output(ctx, config.mode)

        # 13. Rewind past the seed frame
        _require(stream.go_to_image(0), "rewind stream")

        return ExportContext(
            config=config,
            engine_context=ctx,
            stream=stream,
            header=header,
            geometry=geometry,
            buffers=self.buffers,
        )

    def _load_stream_config(self, ctx: EngineContext, stream: StreamContext) -> None:
        """Extract the stream's calibration to a temp file and load it.

        Extraction failure is tolerated (the config is simply not loaded);
        a failed load is fatal.
        """
        try:
            fd, name = tempfile.mkstemp(prefix=TEMP_CONFIG_PREFIX)
        except OSError as e:
            logger.warning("Could not create temporary config file: %s", e)
            return
        os.close(fd)
        self.temp_config_path = Path(name)

        if not _warn_unless_ok(
            stream.extract_config_file(str(self.temp_config_path)),
            "extract config file",
        ):
            self._remove_temp_config()
            return

        status = ctx.load_config(str(self.temp_config_path))
        self._remove_temp_config()
        _require(status, "load config")

    def _remove_temp_config(self) -> None:
        if self.temp_config_path is not None:
            self.temp_config_path.unlink(missing_ok=True)
            self.temp_config_path = None


def open_session(config: ExportConfig, engine: ImagingEngine) -> StreamSession:
    """Create a StreamSession; use it as a context manager to negotiate."""
    return StreamSession(config, engine)


def _log_stream_info(header: StreamHeader) -> None:
    logger.info("--- Stream Information ---")
    logger.info("Base S/N: %d", header.serial_base)
    logger.info("Head S/N: %d", header.serial_head)
    logger.info("Frame rate: %.2f", header.effective_frame_rate)
    logger.info("Data format: %s", header.data_format.value)
    logger.info("Resolution: %s", header.resolution)
    logger.info("Stream version: %d", header.stream_version)


def _apply_render_options(ctx: EngineContext, config: ExportConfig) -> None:
    """Send the optional rendering toggles that are switched on."""
    if config.falloff_enabled:
        _warn_unless_ok(
            ctx.set_falloff_correction(True, config.falloff_value),
            "set falloff correction",
        )
    if config.anti_aliasing:
        _warn_unless_ok(ctx.set_anti_aliasing(True), "enable anti-aliasing")
    if config.software_rendering:
        _warn_unless_ok(
            ctx.enable_software_rendering(True), "enable software rendering"
        )
    if config.stabilization:
        _warn_unless_ok(
            ctx.enable_image_stabilization(True), "enable image stabilization"
        )


def _configure_offscreen_output(ctx: EngineContext, mode: PanoramaMode) -> None:
    output_type = mode.render_type.output_image_type

    logger.info("Configuring output images: %s", output_type.value)
    _require(ctx.configure_output_images(output_type), "configure output images")

    logger.info("Setting off-screen image size: %dx%d", mode.width, mode.height)
    _require(
        ctx.set_offscreen_image_size(output_type, mode.width, mode.height),
        "set off-screen image size",
    )

    if mode.rotation.is_zero:
        return
    rx, ry, rz = mode.rotation.as_radians()
    if _warn_unless_ok(ctx.set_3d_map_rotation(rx, ry, rz), "set 3D map rotation"):
        logger.info(
            "Applied rotation: Front=%.1f, Down=%.1f degrees",
            mode.rotation.front,
            mode.rotation.down,
        )
