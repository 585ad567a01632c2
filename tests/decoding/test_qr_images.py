from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from conftest import image_to_buffer, image_to_png, solid_buffer
from src.qr_checkin.qr_checkin.decoding.service import ImageDecoder
from src.qr_checkin.qr_checkin.decoding.strategies.opencv_strategy import OpenCVBlobDecoder

pytest.importorskip("pyzbar.pyzbar")

from src.qr_checkin.qr_checkin.decoding.strategies.zbar_strategy import ZBarDecoder  # noqa: E402


@pytest.fixture
def decoder() -> ImageDecoder:
    return ImageDecoder(ZBarDecoder(), OpenCVBlobDecoder())


def test_plain_qr_decodes_on_first_attempt(decoder, make_qr):
    report = decoder.decode_with_report(image_to_buffer(make_qr("tok1234567890")))

    assert report.text == "tok1234567890"
    assert report.attempt.index == 1


def test_json_payload_survives_decoding(decoder, make_qr):
    payload = '{"session_token":"abc1234567","employee_id":"E1","employee_name":"Jane"}'

    assert decoder.decode(image_to_buffer(make_qr(payload))) == payload


def test_light_on_dark_qr_is_decoded(decoder, make_qr):
    assert decoder.decode(image_to_buffer(make_qr("tok1234567890", inverted=True))) == "tok1234567890"


def test_qr_on_transparent_background_is_decoded(decoder, make_qr):
    img = make_qr("tok1234567890")
    pixels = np.array(img)
    light = pixels[:, :, 0] > 127
    # White modules become fully transparent black pixels.
    pixels[light] = (0, 0, 0, 0)

    assert decoder.decode(image_to_buffer(Image.fromarray(pixels, "RGBA"))) == "tok1234567890"


def test_large_image_is_decoded(decoder, make_qr):
    img = make_qr("tok1234567890", box_size=40)
    assert max(img.size) > 1000

    assert decoder.decode(image_to_buffer(img)) == "tok1234567890"


def test_blank_image_returns_none(decoder):
    assert decoder.decode(solid_buffer(200, 150)) is None


def test_opencv_fallback_reads_png_blob(make_qr):
    result = OpenCVBlobDecoder().decode_blob(image_to_png(make_qr("tok1234567890")))

    assert result.ok
    assert result.text == "tok1234567890"


def test_opencv_fallback_rejects_garbage():
    result = OpenCVBlobDecoder().decode_blob(b"not an image")

    assert not result.ok
