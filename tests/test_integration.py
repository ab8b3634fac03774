"""End-to-end CLI runs against the in-memory engine."""

import pytest

from ladybug_export.cli import main
from ladybug_export.config import DEFAULT_OUTPUT_DIR


def small_engine(make_engine, **kwargs):
    return make_engine(stream_cols=32, stream_rows=16, **kwargs)


def file_names(directory):
    return sorted(p.name for p in directory.iterdir())


def test_six_camera_two_frames(tmp_path, make_engine):
    """Two frames in six-camera mode give twelve camera files."""
    out = tmp_path / "cams"
    main(
        ["-i", "stream.pgr", "-o", str(out), "-r", "0-1", "-x", "6processed", "-f", "jpg"],
        engine=small_engine(make_engine),
    )
    expected = [f"{frame:06d}_cam{camera}.jpg" for frame in range(2) for camera in range(6)]
    assert file_names(out) == sorted(expected)


def test_panorama_two_frames_png(tmp_path, make_engine):
    out = tmp_path / "pano"
    engine = small_engine(make_engine)
    main(["-i", "stream.pgr", "-o", str(out), "-r", "0-1", "-f", "png"], engine=engine)
    assert file_names(out) == ["000000.png", "000001.png"]
    assert engine.context.offscreen_size == (2048, 1024)


def test_start_after_end_writes_nothing(tmp_path, make_engine):
    out = tmp_path / "none"
    main(["-i", "stream.pgr", "-o", str(out), "-r", "4-2"], engine=small_engine(make_engine))
    assert list(out.iterdir()) == []


def test_end_clamped_to_stream(tmp_path, make_engine):
    out = tmp_path / "clamped"
    main(["-i", "stream.pgr", "-o", str(out), "-r", "3-99"], engine=small_engine(make_engine))
    assert file_names(out) == ["000003.jpg", "000004.jpg"]


def test_default_output_directory(tmp_path, monkeypatch, make_engine):
    monkeypatch.chdir(tmp_path)
    main(["-i", "stream.pgr", "-r", "0-0"], engine=small_engine(make_engine))
    assert file_names(tmp_path / DEFAULT_OUTPUT_DIR) == ["000000.jpg"]


def test_bad_resolution_still_runs(tmp_path, make_engine, caplog):
    out = tmp_path / "out"
    engine = small_engine(make_engine)
    main(["-i", "stream.pgr", "-o", str(out), "-w", "big", "-r", "0-0"], engine=engine)
    assert engine.context.offscreen_size == (2048, 1024)
    assert "Invalid resolution 'big'" in caplog.text
    assert file_names(out) == ["000000.jpg"]


@pytest.mark.parametrize(
    "extra, expected",
    [
        ([], ["000000.jpg", "000001.jpg", "000002.jpg", "000004.jpg"]),
        (
            ["-x", "6processed"],
            sorted(
                f"{frame:06d}_cam{camera}.jpg" for frame in (0, 1, 2, 4) for camera in range(6)
            ),
        ),
    ],
)
def test_unreadable_frame_skipped(tmp_path, make_engine, extra, expected):
    """A failed read at frame 3 of 5 skips only that frame in either mode."""
    out = tmp_path / "out"
    engine = small_engine(make_engine, stream_bad_frames={3})
    main(["-i", "stream.pgr", "-o", str(out), "-r", "0-4", *extra], engine=engine)
    assert file_names(out) == expected
