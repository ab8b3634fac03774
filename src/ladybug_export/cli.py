"""Command-line interface for exporting images from recorded Ladybug streams."""

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from pydantic import ValidationError

from ladybug_export.config import (
    DEFAULT_BLENDING_WIDTH,
    DEFAULT_FALLOFF_VALUE,
    DEFAULT_PANO_HEIGHT,
    DEFAULT_PANO_WIDTH,
    ColorProcessing,
    ExportConfig,
    FrameRange,
    ImageFormat,
    PanoramaMode,
    RenderType,
    Rotation,
    SixCameraMode,
    format_validation_errors,
)
from ladybug_export.errors import ArgumentError, InitializationError, MissingInputError
from ladybug_export.grammars import (
    parse_bool,
    parse_export_type,
    parse_float,
    parse_frame_range,
    parse_int,
    parse_resolution,
    parse_rotation,
)

logger = logging.getLogger(__name__)

PROG = "ladybug-export"
HELP_FLAGS = {"-h", "-?", "--help"}

USAGE = """
Usage:

{prog} [OPTIONS]

OPTIONS

  -i STREAM_PATH     The stream file to process (.pgr).
  -r NNN-NNN         The frame range to process. The first frame is 0.
                     Default setting is to process all the images.
  -o OUTPUT_DIR      Output directory. Images are written inside it as
                     NNNNNN.EXT (panorama) or NNNNNN_camN.EXT (cameras).
                     Default is ladybugImageOutput
  -w NNNNxNNNN       Output image size (widthxheight) in pixel.
                     Default is 2048x1024.
  -t RENDER_TYPE     Output image rendering type:
              pano      - panoramic view (default)
              dome      - dome view
              spherical - spherical view
              rectify-0 .. rectify-5 - rectified image of camera 0..5
  -f FORMAT          Output image format:
              bmp      - Windows BMP image
              jpg      - JPEG image (default)
              tiff     - TIFF image
              png      - PNG image
  -c COLOR_PROCESS   Debayering method:
              hq       - High quality linear method (default)
              hq-gpu   - High quality linear method (GPU)
              edge     - Edge sensing method
              near     - Nearest neighbor method
              near-f   - Nearest neighbor(fast) method
              down4    - Downsample4 method
              down16   - Downsample16 method
              mono     - Monochrome method
  -b NNN             Blending width in pixel. Default is 100.
  -s true/false      Enable software rendering. Default is false.
  -k true/false      Enable anti-aliasing. Default is false.
  -a true/false      Enable falloff correction. Default is false.
  -v N.N             Falloff correction value. Default is 1.0.
  -z true/false      Enable image stabilization. Default is false.
  -x EXPORT_TYPE     Export type for individual cameras:
              6processed - Export all 6 processed camera images
  -q ROTATION        Rotation angle for panorama orientation.
                     Format: "Front X -Down Y" where X and Y are degrees.
                     Front = pitch rotation (positive = look up)
                     Down = yaw rotation (positive = rotate right)
  -h, -?, --help     Print this message.

The imaging engine is loaded from LADYBUG_EXPORT_ENGINE=module:attribute.

EXAMPLES

  {prog} -i stream.pgr -o output -t pano -f jpg -c hq
        Process stream and export panoramic JPG images.

  {prog} -i stream.pgr -o output -x 6processed -f jpg -c hq
        Export all 6 processed camera images as JPG.

  {prog} -i stream.pgr -o output -t pano -q "Front 5 -Down 0" -f jpg
        Export panorama with Front=5 degrees pitch rotation.
"""


class HelpRequested(Exception):
    """Raised by the resolver when a help flag is seen."""


@dataclass
class _Settings:
    """Mutable accumulator filled while scanning tokens."""

    input_path: str = ""
    output_dir: str = ""
    frame_range: FrameRange | None = None
    width: int = DEFAULT_PANO_WIDTH
    height: int = DEFAULT_PANO_HEIGHT
    resolution_given: bool = False
    render_type: RenderType = RenderType.PANO
    image_format: ImageFormat = ImageFormat.JPG
    color_processing: ColorProcessing = ColorProcessing.HQ
    blending_width: int = DEFAULT_BLENDING_WIDTH
    software_rendering: bool = False
    anti_aliasing: bool = False
    falloff_enabled: bool = False
    falloff_value: float = DEFAULT_FALLOFF_VALUE
    stabilization: bool = False
    six_camera: bool = False
    rotation: tuple[float, float] = (0.0, 0.0)

    def build(self) -> ExportConfig:
        if not self.input_path.strip():
            raise MissingInputError("Input file not specified. Use -i <file.pgr>")

        if self.six_camera and (self.resolution_given or self.rotation != (0.0, 0.0)):
            logger.info("Output size and rotation are ignored for six-camera export")

        try:
            if self.six_camera:
                mode = SixCameraMode()
            else:
                front, down = self.rotation
                mode = PanoramaMode(
                    width=self.width,
                    height=self.height,
                    render_type=self.render_type,
                    rotation=Rotation(front=front, down=down),
                )
            return ExportConfig(
                input_path=self.input_path,
                output_dir=self.output_dir,
                frame_range=self.frame_range,
                mode=mode,
                image_format=self.image_format,
                color_processing=self.color_processing,
                blending_width=self.blending_width,
                falloff_enabled=self.falloff_enabled,
                falloff_value=self.falloff_value,
                software_rendering=self.software_rendering,
                anti_aliasing=self.anti_aliasing,
                stabilization=self.stabilization,
            )
        except ValidationError as e:
            raise ArgumentError(
                f"Invalid arguments:\n{format_validation_errors(e)}"
            ) from None


def _parse_tag(enum_cls: type[Enum], flag: str, value: str, current: Enum) -> Enum:
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        logger.warning(
            "Unknown value '%s' for %s. Using '%s'.", value, flag, current.value
        )
        return current


def _set_frame_range(s: _Settings, value: str) -> None:
    parsed = parse_frame_range(value)
    if parsed is None:
        logger.warning("Invalid frame range '%s'. Processing all frames.", value)
        return
    s.frame_range = FrameRange(start=parsed[0], stop=parsed[1])


def _set_resolution(s: _Settings, value: str) -> None:
    parsed = parse_resolution(value)
    if parsed is None:
        logger.warning(
            "Invalid resolution '%s'. Using %dx%d.", value, s.width, s.height
        )
        return
    s.width, s.height = parsed
    s.resolution_given = True


def _set_export_type(s: _Settings, value: str) -> None:
    if parse_export_type(value):
        s.six_camera = True
    else:
        logger.warning("Unknown export type '%s'. Use '6processed'.", value)


def _setter(name: str) -> Callable[[_Settings, str], None]:
    def apply(s: _Settings, value: str) -> None:
        setattr(s, name, value)

    return apply


def _bool_setter(name: str) -> Callable[[_Settings, str], None]:
    def apply(s: _Settings, value: str) -> None:
        setattr(s, name, parse_bool(value))

    return apply


def _tag_setter(name: str, enum_cls: type[Enum], flag: str):
    def apply(s: _Settings, value: str) -> None:
        setattr(s, name, _parse_tag(enum_cls, flag, value, getattr(s, name)))

    return apply


FLAG_HANDLERS: dict[str, Callable[[_Settings, str], None]] = {
    "-i": _setter("input_path"),
    "-o": _setter("output_dir"),
    "-r": _set_frame_range,
    "-w": _set_resolution,
    "-t": _tag_setter("render_type", RenderType, "-t"),
    "-f": _tag_setter("image_format", ImageFormat, "-f"),
    "-c": _tag_setter("color_processing", ColorProcessing, "-c"),
    "-b": lambda s, v: setattr(s, "blending_width", parse_int("-b", v)),
    "-s": _bool_setter("software_rendering"),
    "-k": _bool_setter("anti_aliasing"),
    "-a": _bool_setter("falloff_enabled"),
    "-z": _bool_setter("stabilization"),
    "-v": lambda s, v: setattr(s, "falloff_value", parse_float("-v", v)),
    "-x": _set_export_type,
    "-q": lambda s, v: setattr(s, "rotation", parse_rotation(v)),
}


def resolve_config(tokens: Sequence[str]) -> ExportConfig:
    """Resolve raw command-line tokens into an ExportConfig.

    Tokens are scanned left to right and each token is examined once:

    - a known flag consumes exactly the next token as its value;
    - a known flag with no following token is warned about and skipped;
    - an unknown flag consumes only itself, so the token after it is
      examined on its own;
    - any other stray token is warned about and skipped.

    Args:
        tokens: Arguments without the program name.

    Returns:
        The resolved, immutable configuration.

    Raises:
        HelpRequested: If a help flag appears in flag position.
        MissingInputError: If no input stream was given.
        ArgumentError: If a value is malformed in a way that cannot fall
            back to a default.
    """
    settings = _Settings()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in HELP_FLAGS:
            raise HelpRequested()

        handler = FLAG_HANDLERS.get(token)
        if handler is not None:
            if i + 1 >= len(tokens):
                logger.warning("Option '%s' requires a value; ignored.", token)
                i += 1
                continue
            handler(settings, tokens[i + 1])
            i += 2
            continue

        if len(token) >= 2 and token.startswith("-"):
            logger.warning("Unknown option '%s' ignored.", token)
        else:
            logger.warning("Unknown argument '%s' ignored.", token)
        i += 1

    return settings.build()


def print_usage() -> None:
    print(USAGE.format(prog=PROG))


def _describe_config(config: ExportConfig) -> None:
    mode = config.mode
    if isinstance(mode, PanoramaMode):
        print(
            f"Export type: {mode.render_type.value} ({mode.width}x{mode.height})"
        )
        if not mode.rotation.is_zero:
            print(
                f"Rotation: Front {mode.rotation.front:.1f}, "
                f"Down {mode.rotation.down:.1f} degrees"
            )
    else:
        print("Export type: 6 Processed Camera Images")
    print(f"Output directory: {config.output_dir}")
    print(f"Output format: {config.image_format.value}")
    print(f"Color processing: {config.color_processing.value}")
    print()


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def run_command(config: ExportConfig, engine=None):
    """Run an export and exit non-zero if setup fails.

    Args:
        config: Resolved export configuration.
        engine: Imaging engine to drive. Loaded from the
            ``LADYBUG_EXPORT_ENGINE`` environment variable when omitted.

    Returns:
        ExportSummary of the finished run.
    """
    # Lazy import keeps numpy/tqdm out of help and argument errors
    from ladybug_export.engine.loader import load_engine
    from ladybug_export.pipeline import run_export

    _describe_config(config)

    try:
        if engine is None:
            engine = load_engine()
        summary = run_export(config, engine)
    except InitializationError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Failed to initialize imaging engine.", file=sys.stderr)
        sys.exit(1)

    print("\nExport complete.")
    return summary


def main(argv: Sequence[str] | None = None, engine=None) -> None:
    """Main entry point for the ladybug-export CLI.

    Args:
        argv: Arguments without the program name. Defaults to ``sys.argv[1:]``.
        engine: Optional imaging engine instance (skips engine loading).
    """
    _configure_logging()
    tokens = list(sys.argv[1:] if argv is None else argv)

    if not tokens:
        print("Error: No arguments provided.", file=sys.stderr)
        print_usage()
        sys.exit(1)

    try:
        config = resolve_config(tokens)
    except HelpRequested:
        print_usage()
        sys.exit(1)
    except MissingInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        print_usage()
        sys.exit(1)
    except ArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    run_command(config, engine=engine)
