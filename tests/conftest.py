"""Shared pytest fixtures: a scripted in-memory imaging engine."""

from pathlib import Path

import numpy as np
import pytest

from ladybug_export.engine.types import (
    DataFormat,
    EngineStatus,
    ProcessedImage,
    RawImage,
    StreamHeader,
)


class FakeStreamContext:
    """Stream of ``total_frames`` frames with injectable failures.

    Args:
        total_frames: Frames in the stream.
        data_format: Data format reported by the header and frames.
        cols, rows: Native per-camera image size.
        failures: Operation name -> status to return instead of OK.
        bad_frames: Frame indices whose reads fail once the stream has been
            rewound after negotiation.
    """

    def __init__(
        self,
        total_frames=5,
        data_format=DataFormat.COLOR_SEP_JPEG8,
        cols=1616,
        rows=1232,
        failures=None,
        bad_frames=(),
        calls=None,
    ):
        self.total_frames = total_frames
        self.data_format = data_format
        self.cols = cols
        self.rows = rows
        self.failures = dict(failures or {})
        self.bad_frames = set(bad_frames)
        self.calls = calls if calls is not None else []
        self.cursor = 0
        self.rewound = False
        self.opened_path = None
        self.config_path = None
        self.destroyed = False
        self.frames_read = []

    def _status(self, name, *args):
        self.calls.append((name, args))
        return self.failures.get(name, EngineStatus.OK)

    def open_for_reading(self, path):
        self.opened_path = path
        return self._status("open_for_reading", path)

    def extract_config_file(self, destination):
        status = self._status("extract_config_file", destination)
        if status.ok:
            self.config_path = destination
            Path(destination).write_text("calibration")
        return status

    def read_header(self):
        status = self._status("read_header")
        if not status.ok:
            return status, None
        return status, StreamHeader(
            serial_base=1234,
            serial_head=5678,
            legacy_frame_rate=15,
            frame_rate=15.0,
            data_format=self.data_format,
            resolution="2448x2048",
            stream_version=7,
        )

    def frame_count(self):
        status = self._status("frame_count")
        return status, (self.total_frames if status.ok else 0)

    def read_image(self):
        status = self._status("read_image")
        if not status.ok:
            return status, None
        if self.cursor >= self.total_frames:
            return EngineStatus.END_OF_STREAM, None
        index = self.cursor
        self.cursor += 1
        if self.rewound and index in self.bad_frames:
            return EngineStatus.CORRUPTED_IMAGE_DATA, None
        self.frames_read.append(index)
        return EngineStatus.OK, RawImage(
            cols=self.cols,
            rows=self.rows,
            data_format=self.data_format,
            data=str(index).encode(),
        )

    def go_to_image(self, index):
        status = self._status("go_to_image", index)
        if not status.ok:
            return status
        if index >= self.total_frames:
            return EngineStatus.INVALID_ARGUMENT
        self.cursor = index
        self.rewound = True
        return EngineStatus.OK

    def destroy(self):
        self.destroyed = True
        return self._status("destroy_stream")


class FakeEngineContext:
    """Processing context that records calls and writes small files on save.

    Args:
        failures: Operation name -> status to return instead of OK.
        bad_convert_frames / bad_texture_frames / bad_render_frames: Frame
            indices for which that step fails.
        bad_save_names: File names whose save fails.
    """

    def __init__(
        self,
        failures=None,
        bad_convert_frames=(),
        bad_texture_frames=(),
        bad_render_frames=(),
        bad_save_names=(),
        calls=None,
    ):
        self.failures = dict(failures or {})
        self.bad_convert_frames = set(bad_convert_frames)
        self.bad_texture_frames = set(bad_texture_frames)
        self.bad_render_frames = set(bad_render_frames)
        self.bad_save_names = set(bad_save_names)
        self.calls = calls if calls is not None else []
        self.current_frame = None
        self.offscreen_size = None
        self.loaded_config = None
        self.saved = []
        self.destroyed = False

    def _status(self, name, *args):
        self.calls.append((name, args))
        return self.failures.get(name, EngineStatus.OK)

    def load_config(self, path):
        status = self._status("load_config", path)
        if status.ok:
            self.loaded_config = Path(path).read_text()
        return status

    def set_color_processing_method(self, method):
        return self._status("set_color_processing_method", method)

    def set_blending_params(self, width):
        return self._status("set_blending_params", width)

    def initialize_alpha_masks(self, cols, rows):
        return self._status("initialize_alpha_masks", cols, rows)

    def set_alpha_masking(self, enabled):
        return self._status("set_alpha_masking", enabled)

    def set_falloff_correction(self, enabled, attenuation):
        return self._status("set_falloff_correction", enabled, attenuation)

    def set_anti_aliasing(self, enabled):
        return self._status("set_anti_aliasing", enabled)

    def enable_software_rendering(self, enabled):
        return self._status("enable_software_rendering", enabled)

    def enable_image_stabilization(self, enabled):
        return self._status("enable_image_stabilization", enabled)

    def configure_output_images(self, output_type):
        return self._status("configure_output_images", output_type)

    def set_offscreen_image_size(self, output_type, cols, rows):
        status = self._status("set_offscreen_image_size", output_type, cols, rows)
        if status.ok:
            self.offscreen_size = (cols, rows)
        return status

    def set_3d_map_rotation(self, rx, ry, rz):
        return self._status("set_3d_map_rotation", rx, ry, rz)

    def convert_image(self, image, buffers, pixel_format):
        status = self._status("convert_image", pixel_format)
        if not status.ok:
            return status
        frame = int(image.data)
        if frame in self.bad_convert_frames:
            return EngineStatus.FAILED
        self.current_frame = frame
        return EngineStatus.OK

    def update_textures(self, buffers, pixel_format):
        status = self._status("update_textures", len(buffers), pixel_format)
        if not status.ok:
            return status
        if self.current_frame in self.bad_texture_frames:
            return EngineStatus.FAILED
        return EngineStatus.OK

    def render_offscreen_image(self, output_type, pixel_format):
        status = self._status("render_offscreen_image", output_type, pixel_format)
        if not status.ok:
            return status, None
        if self.current_frame in self.bad_render_frames:
            return EngineStatus.OFFSCREEN_BUFFER_INIT_ERROR, None
        cols, rows = self.offscreen_size
        return EngineStatus.OK, ProcessedImage(
            pixels=np.zeros((rows, cols, 3), dtype=np.uint8),
            cols=cols,
            rows=rows,
            pixel_format=pixel_format,
        )

    def save_image(self, image, path, file_format):
        status = self._status("save_image", path, file_format)
        if not status.ok:
            return status
        target = Path(path)
        if target.name in self.bad_save_names or not target.parent.is_dir():
            return EngineStatus.COULD_NOT_OPEN_FILE
        target.write_bytes(b"image")
        self.saved.append(target)
        return EngineStatus.OK

    def destroy(self):
        self.destroyed = True
        return self._status("destroy_context")


class FakeEngine:
    """Engine handing out one FakeEngineContext and one FakeStreamContext."""

    def __init__(self, stream=None, context=None, failures=None):
        self.calls = []
        self.stream = stream or FakeStreamContext()
        self.context = context or FakeEngineContext()
        self.stream.calls = self.calls
        self.context.calls = self.calls
        self.failures = dict(failures or {})

    def create_context(self):
        status = self.failures.get("create_context", EngineStatus.OK)
        self.calls.append(("create_context", ()))
        return status, (self.context if status.ok else None)

    def create_stream_context(self):
        status = self.failures.get("create_stream_context", EngineStatus.OK)
        self.calls.append(("create_stream_context", ()))
        return status, (self.stream if status.ok else None)

    def call_names(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def make_engine():
    """Factory fixture building a FakeEngine from stream/context keyword args.

    Keyword arguments prefixed ``stream_`` go to FakeStreamContext, those
    prefixed ``context_`` go to FakeEngineContext, and ``failures`` applies
    to context creation.
    """

    def factory(failures=None, **kwargs):
        stream_kwargs = {
            k.removeprefix("stream_"): v for k, v in kwargs.items() if k.startswith("stream_")
        }
        context_kwargs = {
            k.removeprefix("context_"): v for k, v in kwargs.items() if k.startswith("context_")
        }
        return FakeEngine(
            stream=FakeStreamContext(**stream_kwargs),
            context=FakeEngineContext(**context_kwargs),
            failures=failures,
        )

    return factory
