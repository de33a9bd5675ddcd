"""Tests for image I/O and the width reduction workflow."""

import logging

import numpy as np
import pytest
from PIL import Image

from width_carve.errors import (
    DecodeError,
    EncodeError,
    ErrorKind,
    InvalidTargetError,
)
from width_carve.raster import Raster
from width_carve.resizer import (
    ResizeResult,
    WidthResizer,
    load_raster,
    parse_target_width,
    save_raster,
)


@pytest.fixture
def sample_png(tmp_path):
    rng = np.random.default_rng(11)
    path = tmp_path / "sample.png"
    Image.fromarray(rng.integers(0, 256, size=(10, 16, 3), dtype=np.uint8)).save(path)
    return path


class TestLoadRaster:
    """Tests for decoding."""

    def test_loads_png(self, sample_png):
        raster = load_raster(sample_png)

        assert (raster.width, raster.height) == (16, 10)
        assert raster.channels == 3

    def test_keeps_alpha(self, tmp_path):
        path = tmp_path / "alpha.png"
        Image.new("RGBA", (3, 2), (1, 2, 3, 4)).save(path)

        raster = load_raster(path)

        assert raster.pixel(0, 0) == (1, 2, 3, 4)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DecodeError) as excinfo:
            load_raster(tmp_path / "nope.jpg")
        assert excinfo.value.kind is ErrorKind.DECODE

    def test_decompression_bomb(self, sample_png, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

        with pytest.raises(DecodeError):
            load_raster(sample_png)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "garbage.jpg"
        path.write_bytes(b"definitely not a jpeg")

        with pytest.raises(DecodeError):
            load_raster(path)


class TestSaveRaster:
    """Tests for encoding."""

    def test_saves_rgb_without_alpha(self, tmp_path):
        raster = Raster(np.full((2, 3, 4), 50, dtype=np.uint8))
        path = tmp_path / "nested" / "out.png"

        save_raster(raster, path)

        with Image.open(path) as img:
            assert img.mode == "RGB"
            assert img.size == (3, 2)

    def test_unknown_extension(self, tmp_path):
        raster = Raster(np.zeros((2, 2, 3), dtype=np.uint8))

        with pytest.raises(EncodeError) as excinfo:
            save_raster(raster, tmp_path / "out.notaformat")
        assert excinfo.value.kind is ErrorKind.ENCODE

    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")
        raster = Raster(np.zeros((2, 2, 3), dtype=np.uint8))

        with pytest.raises(EncodeError):
            save_raster(raster, blocker / "out.png")


class TestParseTargetWidth:
    """Tests for interactive width input."""

    def test_accepts_valid_width(self):
        assert parse_target_width(" 42\n", 100) == 42

    def test_accepts_leading_plus(self):
        assert parse_target_width("+7", 100) == 7

    @pytest.mark.parametrize(
        "text", ["", "abc", "4.5", "0", "-3", "100", "250", "1_0", "\u0665\u0660", "5 0"]
    )
    def test_rejects_invalid_width(self, text):
        with pytest.raises(InvalidTargetError) as excinfo:
            parse_target_width(text, 100)
        assert excinfo.value.kind is ErrorKind.INVALID_TARGET


class TestWidthResizer:
    """Tests for the load-carve-save workflow."""

    def test_run_from_path(self, sample_png, tmp_path):
        output = tmp_path / "out.jpg"
        resizer = WidthResizer(workers=2, show_progress=False)

        result = resizer.run(sample_png, 12, output_path=output)

        assert isinstance(result, ResizeResult)
        assert result.original_size == (16, 10)
        assert result.final_size == (12, 10)
        assert result.seams_removed == 4
        assert result.saved
        with Image.open(output) as img:
            assert img.size == (12, 10)

    def test_run_without_output(self, sample_png):
        result = WidthResizer(show_progress=False).run(sample_png, 15)

        assert result.final_size == (15, 10)
        assert not result.saved
        assert result.output_path is None
        assert result.to_pil().size == (15, 10)

    def test_encode_failure_keeps_result(self, sample_png, tmp_path, caplog):
        blocker = tmp_path / "file.txt"
        blocker.write_text("x")

        with caplog.at_level(logging.WARNING, logger="width_carve"):
            result = WidthResizer(show_progress=False).run(
                sample_png, 14, output_path=blocker / "out.png"
            )

        assert not result.saved
        assert result.final_size == (14, 10)
        assert "Failed to save image" in caplog.text

    def test_decode_failure_propagates(self, tmp_path):
        with pytest.raises(DecodeError):
            WidthResizer(show_progress=False).run(tmp_path / "missing.png", 3)

    def test_invalid_target_propagates(self, sample_png):
        with pytest.raises(InvalidTargetError):
            WidthResizer(show_progress=False).run(sample_png, 16)

    def test_progress_callback(self, sample_png):
        calls = []
        resizer = WidthResizer(
            show_progress=False,
            progress_callback=lambda done, total: calls.append((done, total)),
        )

        resizer.run(sample_png, 13)

        assert calls == [(1, 3), (2, 3), (3, 3)]
