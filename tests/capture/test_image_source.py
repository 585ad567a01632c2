from __future__ import annotations

import io

import pytest
from PIL import Image

from conftest import image_to_png
from src.qr_checkin.qr_checkin.capture.image_source import StaticImageSource
from src.qr_checkin.qr_checkin.core.enums import CaptureErrorKind
from src.qr_checkin.qr_checkin.core.exceptions import CaptureError


def test_png_bytes_become_rgba_buffer():
    png = image_to_png(Image.new("RGB", (30, 20), (10, 20, 30)))

    buffer = StaticImageSource(png).load()

    assert (buffer.width, buffer.height) == (30, 20)
    assert len(buffer.data) == 30 * 20 * 4
    assert buffer.data[:4] == bytes((10, 20, 30, 255))


def test_path_and_file_object_are_accepted(tmp_path):
    path = tmp_path / "qr.png"
    Image.new("L", (12, 8), 200).save(path)

    from_path = StaticImageSource(str(path)).load()
    with open(path, "rb") as fh:
        from_file = StaticImageSource(fh).load()

    assert from_path == from_file
    assert (from_path.width, from_path.height) == (12, 8)


def test_garbage_is_unreadable_image():
    with pytest.raises(CaptureError) as exc:
        StaticImageSource(b"definitely not an image").load()

    assert exc.value.kind == CaptureErrorKind.UNREADABLE_IMAGE


def test_missing_file_is_unreadable_image(tmp_path):
    with pytest.raises(CaptureError) as exc:
        StaticImageSource(tmp_path / "missing.png").load()

    assert exc.value.kind == CaptureErrorKind.UNREADABLE_IMAGE


def test_exif_orientation_is_applied():
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 clockwise
    out = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(out, format="JPEG", exif=exif)

    buffer = StaticImageSource(out.getvalue()).load()

    assert (buffer.width, buffer.height) == (20, 40)


def test_start_delivers_exactly_one_buffer():
    frames = []
    source = StaticImageSource(image_to_png(Image.new("RGB", (4, 4))))

    source.start(frames.append)
    source.stop()
    source.stop()

    assert len(frames) == 1
    assert not source.is_running


def test_start_raises_without_delivering_on_bad_input():
    frames = []

    with pytest.raises(CaptureError):
        StaticImageSource(b"nope").start(frames.append)

    assert frames == []


def test_decompression_bomb_is_unreadable_image(monkeypatch):
    png = image_to_png(Image.new("RGB", (30, 20)))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    with pytest.raises(CaptureError) as exc:
        StaticImageSource(png).load()

    assert exc.value.kind == CaptureErrorKind.UNREADABLE_IMAGE
