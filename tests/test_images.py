import base64
import io

import pytest
from PIL import Image

from trendhaven.core.errors import AnalysisFailed
from trendhaven.services.images import to_analysis_data_url

from fixtures import jpeg_bytes


def _decode(url: str) -> Image.Image:
    prefix = "data:image/jpeg;base64,"
    assert url.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(url[len(prefix):])))


def test_large_photo_is_downscaled():
    img = _decode(to_analysis_data_url(jpeg_bytes(size=(2000, 1000)), 512))
    assert img.format == "JPEG"
    assert img.size == (512, 256)


def test_small_photo_keeps_size_and_png_is_reencoded():
    buf = io.BytesIO()
    Image.new("RGBA", (40, 30), (0, 0, 255, 128)).save(buf, format="PNG")
    img = _decode(to_analysis_data_url(buf.getvalue(), 1024))
    assert img.size == (40, 30)
    assert img.mode == "RGB"


def test_garbage_bytes_are_rejected():
    with pytest.raises(AnalysisFailed) as exc:
        to_analysis_data_url(b"definitely not an image", 512)
    assert exc.value.detail == "unreadable_image"
