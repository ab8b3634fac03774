"""Tests for the per-frame export stages."""

import logging
from pathlib import Path

import pytest

from ladybug_export.config import ExportConfig, PanoramaMode, RenderType, SixCameraMode
from ladybug_export.engine.types import (
    EngineStatus,
    FileFormat,
    OutputImageType,
    PixelFormat,
)
from ladybug_export.pipeline import open_session
from ladybug_export.pipeline.stages import (
    camera_image_path,
    export_camera_images,
    export_panorama,
    panorama_path,
)


def test_camera_image_path():
    assert camera_image_path("out", 42, 3, "jpg") == Path("out/000042_cam3.jpg")


def test_panorama_path():
    assert panorama_path(Path("out"), 7, "png") == Path("out/000007.png")
    assert panorama_path("out", 1234567, "bmp") == Path("out/1234567.bmp")


@pytest.fixture
def six_session(tmp_path, make_engine):
    def factory(**kwargs):
        config = ExportConfig(
            input_path="stream.pgr",
            output_dir=str(tmp_path),
            mode=SixCameraMode(),
            image_format="tiff",
        )
        engine = make_engine(stream_cols=32, stream_rows=16, **kwargs)
        return engine, open_session(config, engine)

    return factory


class TestExportCameraImages:
    def test_all_cameras_saved(self, tmp_path, six_session):
        engine, session = six_session()
        with session as ctx:
            assert export_camera_images(5, ctx) == 6

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            f"000005_cam{camera}.tiff" for camera in range(6)
        ]
        saves = [args for name, args in engine.calls if name == "save_image"]
        assert all(args[1] is FileFormat.TIFF for args in saves)

    def test_failed_camera_does_not_stop_others(self, tmp_path, six_session, caplog):
        engine, session = six_session(context_bad_save_names={"000000_cam2.tiff"})
        with caplog.at_level(logging.WARNING):
            with session as ctx:
                assert export_camera_images(0, ctx) == 5

        assert not (tmp_path / "000000_cam2.tiff").exists()
        assert (tmp_path / "000000_cam5.tiff").exists()
        assert "could not save camera 2 image" in caplog.text

    def test_images_carry_texture_geometry(self, six_session):
        engine, session = six_session()
        with session as ctx:
            captured = []
            real_save = ctx.engine_context.save_image

            def capture(image, path, file_format):
                captured.append(image)
                return real_save(image, path, file_format)

            ctx.engine_context.save_image = capture
            export_camera_images(0, ctx)

        assert len(captured) == 6
        assert (captured[0].cols, captured[0].rows) == (32, 16)
        assert captured[0].pixel_format is PixelFormat.BGRU


class TestExportPanorama:
    def make_session(self, tmp_path, make_engine, render_type=RenderType.PANO, **kwargs):
        config = ExportConfig(
            input_path="stream.pgr",
            output_dir=str(tmp_path),
            mode=PanoramaMode(width=64, height=32, render_type=render_type),
        )
        engine = make_engine(stream_cols=32, stream_rows=16, **kwargs)
        return engine, open_session(config, engine)

    def test_render_and_save(self, tmp_path, make_engine):
        engine, session = self.make_session(tmp_path, make_engine)
        with session as ctx:
            assert export_panorama(3, ctx) is True

        assert (tmp_path / "000003.jpg").exists()
        (render_args,) = [a for n, a in engine.calls if n == "render_offscreen_image"]
        assert render_args == (OutputImageType.PANORAMIC, PixelFormat.BGR)

    def test_render_type_honoured(self, tmp_path, make_engine):
        engine, session = self.make_session(
            tmp_path, make_engine, render_type=RenderType.RECTIFY_2
        )
        with session as ctx:
            export_panorama(0, ctx)

        (render_args,) = [a for n, a in engine.calls if n == "render_offscreen_image"]
        assert render_args[0] is OutputImageType.RECTIFIED_CAM2

    def test_render_failure(self, tmp_path, make_engine, caplog):
        engine, session = self.make_session(
            tmp_path,
            make_engine,
            context_failures={"render_offscreen_image": EngineStatus.OFFSCREEN_BUFFER_INIT_ERROR},
        )
        with caplog.at_level(logging.WARNING):
            with session as ctx:
                assert export_panorama(0, ctx) is False

        assert "save_image" not in engine.call_names()
        assert "offscreen buffer init error" in caplog.text

    def test_save_failure(self, tmp_path, make_engine):
        engine, session = self.make_session(
            tmp_path, make_engine, context_bad_save_names={"000000.jpg"}
        )
        with session as ctx:
            assert export_panorama(0, ctx) is False

    def test_requires_panorama_mode(self, tmp_path, make_engine):
        config = ExportConfig(
            input_path="stream.pgr", output_dir=str(tmp_path), mode=SixCameraMode()
        )
        engine = make_engine(stream_cols=32, stream_rows=16)
        with open_session(config, engine) as ctx:
            with pytest.raises(TypeError):
                export_panorama(0, ctx)
