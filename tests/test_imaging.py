# tests/test_imaging.py
import base64
from io import BytesIO

import pytest
from PIL import Image

from postgen.errors import ErrorKind, ProviderError
from postgen.lib import genai_client
from postgen.lib.imaging import decode_image_b64, image_mime_type


def _jpeg_bytes():
    buf = BytesIO()
    Image.new("RGB", (4, 4), (1, 2, 3)).save(buf, format="JPEG")
    return buf.getvalue()


def test_decode_data_url_and_raw_base64(png_bytes):
    b64 = base64.b64encode(png_bytes).decode("ascii")
    assert decode_image_b64(f"data:image/png;base64,{b64}") == png_bytes
    # whitespace and stripped padding are tolerated
    assert decode_image_b64("\n".join([b64[:10], b64[10:].rstrip("=")])) == png_bytes


def test_jpeg_is_accepted_and_sniffed():
    data = _jpeg_bytes()
    assert decode_image_b64(base64.b64encode(data).decode("ascii")) == data
    assert image_mime_type(data) == "image/jpeg"


@pytest.mark.parametrize("value", ["", "   ", "%%%not-base64%%%", base64.b64encode(b"hello").decode("ascii")])
def test_decode_rejects_non_images(value):
    with pytest.raises(ValueError):
        decode_image_b64(value)


def test_gif_is_rejected():
    buf = BytesIO()
    Image.new("P", (2, 2)).save(buf, format="GIF")
    with pytest.raises(ValueError):
        decode_image_b64(base64.b64encode(buf.getvalue()).decode("ascii"))


def test_make_client_requires_a_key():
    with pytest.raises(ProviderError) as ei:
        genai_client.make_client("")
    assert ei.value.kind is ErrorKind.AUTH_MISSING


def test_make_client_passes_base_url(monkeypatch):
    captured = {}

    def _fake_client(**kwargs):
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(genai_client.genai, "Client", _fake_client)
    genai_client.make_client("k", base_url="https://proxy.example.com", timeout_ms=5000)
    assert captured["api_key"] == "k"
    assert captured["http_options"].base_url == "https://proxy.example.com"
    assert captured["http_options"].timeout == 5000
